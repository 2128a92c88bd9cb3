"""Shared fixtures.

Domain imports happen inside fixtures so this module can be loaded
before Django is configured.
"""

from decimal import Decimal

import pytest

AFFILIATE_PHONE = "5512340001"
CUSTOMER_PHONE = "5598760001"


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test clean."""
    from django.core.cache import cache

    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated staff user."""
    from django.contrib.auth import get_user_model
    from rest_framework.test import APIClient

    client = APIClient()
    user = get_user_model().objects.create_user(
        username="operator", password="testpass123", is_staff=True
    )
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def platform_settings():
    """Commission 1.00 per tortilla, price 12.00, reward of 10 tortillas."""
    from modules.core.models import PlatformSettings

    settings_row = PlatformSettings.load()
    settings_row.commission_rate_cents = 100
    settings_row.tortilla_price = Decimal("12.00")
    settings_row.reward_tortillas = 10
    settings_row.save()
    return settings_row


@pytest.fixture()
def make_affiliate():
    from modules.affiliates.models import Affiliate

    def _make(
        phone=AFFILIATE_PHONE,
        name="Tortillería Central",
        status="APPROVED",
        inventory=100,
        has_delivery_service=True,
        delivery_cost=Decimal("20.00"),
    ):
        return Affiliate.objects.create(
            id=phone,
            name=name,
            phone=phone,
            address="Av. Juárez 10",
            status=status,
            inventory=inventory,
            has_delivery_service=has_delivery_service,
            delivery_cost=delivery_cost,
        )

    return _make


@pytest.fixture()
def affiliate(make_affiliate, platform_settings):
    return make_affiliate()


@pytest.fixture()
def order_service():
    from modules.orders.handlers import build_order_service

    return build_order_service()


@pytest.fixture()
def place_order(order_service, platform_settings):
    """Create an order through ``OrderService`` (ACTIVE unless TRANSFER)."""
    from modules.orders.dtos import CreateOrderDTO

    def _place(
        affiliate,
        quantity=10,
        payment_method="CASH",
        phone=CUSTOMER_PHONE,
        name="Ana Martínez",
        wants_delivery=False,
        coupon_code=None,
        referral_code=None,
    ):
        return order_service.create_order(
            CreateOrderDTO(
                customer_name=name,
                customer_phone=phone,
                customer_address="Col. Roma",
                affiliate_id=affiliate.id,
                quantity=quantity,
                payment_method=payment_method,
                wants_delivery=wants_delivery,
                coupon_code=coupon_code,
                referral_code=referral_code,
            )
        )

    return _place


@pytest.fixture()
def finish_order(order_service):
    """Drive an order to FINISHED, confirming the transfer first if needed."""
    from modules.orders.constants import OrderStatus
    from modules.orders.dtos import ConfirmTransferPaymentDTO, SetOrderStatusDTO

    def _finish(order):
        if order.status == OrderStatus.PENDING_CONFIRMATION:
            order_service.confirm_transfer_payment(
                ConfirmTransferPaymentDTO(order_id=order.id)
            )
        return order_service.set_status(
            SetOrderStatusDTO(order_id=order.id, new_status=OrderStatus.FINISHED)
        )

    return _finish
