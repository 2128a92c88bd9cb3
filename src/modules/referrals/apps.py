from django.apps import AppConfig


class ReferralsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.referrals"
    label = "referrals"

    def ready(self) -> None:
        from modules.orders.events import OrderFinished
        from modules.referrals import dtos, handlers
        from shared.infrastructure.bus import command_bus, event_bus

        command_bus.register(
            dtos.CompleteReferralDTO, handlers.complete_referral_handler
        )
        command_bus.register(dtos.ToggleCouponDTO, handlers.toggle_coupon_handler)
        command_bus.register(dtos.DeleteCouponDTO, handlers.delete_coupon_handler)
        event_bus.subscribe(OrderFinished, handlers.referral_eligibility_handler)
