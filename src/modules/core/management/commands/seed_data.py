from __future__ import annotations

import random

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.affiliates.constants import WEEKDAYS, AffiliateStatus
from modules.affiliates.dtos import (
    ApplyAffiliateDTO,
    SetAffiliateStatusDTO,
    UpdateScheduleDTO,
)
from modules.affiliates.models import Affiliate
from modules.inventory.dtos import AdminAdjustInventoryDTO, ConfirmInventoryChangeDTO
from modules.orders.constants import OrderStatus, PaymentMethod
from modules.orders.dtos import (
    ConfirmTransferPaymentDTO,
    CreateOrderDTO,
    SetOrderStatusDTO,
)
from shared.infrastructure.bus import command_bus

SEED_AFFILIATES = [
    ("Tortillería La Esperanza", "5512340001", True, "25.00"),
    ("Doña Lupe", "5512340002", False, "0.00"),
    ("El Comal de Oro", "5512340003", True, "15.00"),
]

SEED_CUSTOMERS = [
    ("Ana Martínez", "5598760001"),
    ("Bruno López", "5598760002"),
    ("Carla Méndez", "5598760003"),
    ("Daniel Cruz", "5598760004"),
    ("Elena Ruiz", "5598760005"),
    ("Fernando Soto", "5598760006"),
]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        affiliates = self._seed_affiliates()
        orders_created = self._seed_orders(affiliates)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"affiliates={len(affiliates)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="operator").exists():
            User.objects.create_user("operator", password="operator123", is_staff=True)
            created += 1
        return created

    def _seed_affiliates(self) -> list[Affiliate]:
        self.stdout.write("Creating affiliates...")
        affiliates: list[Affiliate] = []
        weekly = {
            day: {
                "is_open": day != "sunday",
                "open_time": "07:00",
                "close_time": "20:00",
            }
            for day in WEEKDAYS
        }
        for name, phone, delivers, cost in SEED_AFFILIATES:
            affiliate = Affiliate.objects.filter(pk=phone).first()
            if affiliate is None:
                command_bus.dispatch(
                    ApplyAffiliateDTO(
                        name=name,
                        phone=phone,
                        address="Centro, CDMX",
                        has_delivery_service=delivers,
                        delivery_cost=cost,
                    )
                )
                command_bus.dispatch(
                    SetAffiliateStatusDTO(
                        affiliate_id=phone, status=AffiliateStatus.APPROVED
                    )
                )
                command_bus.dispatch(
                    UpdateScheduleDTO(affiliate_id=phone, schedule=weekly)
                )
                change = command_bus.dispatch(
                    AdminAdjustInventoryDTO(affiliate_id=phone, amount=200)
                )
                command_bus.dispatch(ConfirmInventoryChangeDTO(change_id=change.id))
                affiliate = Affiliate.objects.get(pk=phone)
            affiliates.append(affiliate)
        return affiliates

    def _seed_orders(self, affiliates: list[Affiliate]) -> int:
        self.stdout.write("Creating orders...")
        created = 0
        for name, phone in SEED_CUSTOMERS:
            affiliate = random.choice(affiliates)
            method = random.choice([PaymentMethod.CASH, PaymentMethod.TRANSFER])
            order = command_bus.dispatch(
                CreateOrderDTO(
                    customer_name=name,
                    customer_phone=phone,
                    customer_address="Col. Roma, CDMX",
                    affiliate_id=affiliate.id,
                    quantity=random.randint(5, 40),
                    payment_method=method,
                    wants_delivery=affiliate.has_delivery_service,
                )
            )
            created += 1
            if method == PaymentMethod.TRANSFER:
                command_bus.dispatch(ConfirmTransferPaymentDTO(order_id=order.id))
            if random.random() < 0.6:
                command_bus.dispatch(
                    SetOrderStatusDTO(
                        order_id=order.id,
                        new_status=OrderStatus.FINISHED,
                        notes="Delivered (seed)",
                    )
                )
        return created
