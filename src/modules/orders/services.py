"""Order service layer (Use Cases).

Orchestrates the order lifecycle.  All write operations are atomic: the
service defines the unit-of-work boundary, and every transition re-reads
the order under a row lock before checking the state machine.

Side effects by transition:
- create: upsert the customer, consume the coupon, register a referral.
- PENDING_CONFIRMATION -> ACTIVE: none.
- ACTIVE -> FINISHED: debit the affiliate's inventory by ``quantity``.
- ACTIVE | PENDING_CONFIRMATION -> CANCELLED: cancel the linked referral.
- CANCELLED -> ACTIVE (reopen): restore the referral, no inventory debit.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Optional

import structlog
from django.db import transaction

from modules.affiliates.exceptions import AffiliateNotApproved, AffiliateNotFound
from modules.core.models import PlatformSettings
from modules.orders import money
from modules.orders.constants import OrderStatus, PaymentMethod
from modules.orders.dtos import OrderBillDTO
from modules.orders.events import (
    OrderCancelled,
    OrderCreated,
    OrderFinished,
    OrderReopened,
    OrderStatusChanged,
)
from modules.orders.exceptions import InvalidOrderStatus, OrderNotFound
from modules.orders.models import Order

if TYPE_CHECKING:
    from modules.affiliates.models import Affiliate
    from modules.affiliates.repositories.interfaces import IAffiliateRepository
    from modules.customers.services import CustomerService
    from modules.orders.dtos import (
        ConfirmTransferPaymentDTO,
        CreateOrderDTO,
        ReopenOrderDTO,
        SetOrderStatusDTO,
    )
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.referrals.services import ReferralService

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories and collaborating services via constructor
    injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        affiliate_repository: IAffiliateRepository,
        customer_service: CustomerService,
        referral_service: ReferralService,
    ) -> None:
        self._order_repo = order_repository
        self._affiliate_repo = affiliate_repository
        self._customers = customer_service
        self._referrals = referral_service

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Place a new order.

        Steps:
        1. Validate the affiliate exists and is approved.
        2. Upsert the customer by phone.
        3. Freeze unit price, subtotal and delivery fee.
        4. Redeem the coupon (if any) and freeze the discount.
        5. Flag the order when it exceeds the affiliate's current stock
           and persist it.
        6. Register a referral for a first order quoting a code.

        Raises:
            AffiliateNotFound: the affiliate does not exist.
            AffiliateNotApproved: the affiliate cannot take orders.
            InvalidCoupon: the coupon cannot be applied.
        """
        log = logger.bind(affiliate_id=dto.affiliate_id, quantity=dto.quantity)
        log.info("order.creation_started")

        # 1. Affiliate
        affiliate = self._affiliate_repo.get_by_id(dto.affiliate_id)
        if not affiliate:
            raise AffiliateNotFound(f"Affiliate {dto.affiliate_id} not found.")
        if not affiliate.is_approved:
            raise AffiliateNotApproved(
                f"Affiliate {dto.affiliate_id} is {affiliate.status}."
            )

        # 2. Customer (first-order check must run before the insert)
        is_first_order = not self._order_repo.exists_for_phone(dto.customer_phone)
        customer = self._customers.register_or_update(
            dto.customer_name, dto.customer_phone, dto.customer_address
        )

        # 3. Frozen amounts
        unit_price = PlatformSettings.load().tortilla_price
        subtotal = unit_price * dto.quantity
        delivery_fee = Decimal("0.00")
        if dto.wants_delivery and affiliate.has_delivery_service:
            delivery_fee = affiliate.delivery_cost

        # 4. Coupon
        discount = Decimal("0.00")
        if dto.coupon_code:
            redemption = self._referrals.redeem_coupon(
                dto.coupon_code, customer.phone, subtotal
            )
            discount = redemption.discount

        # 5. Initial status and stock flag
        status = (
            OrderStatus.PENDING_CONFIRMATION
            if dto.payment_method == PaymentMethod.TRANSFER
            else OrderStatus.ACTIVE
        )

        order = Order(
            customer=customer,
            customer_name=customer.name,
            customer_phone=customer.phone,
            customer_address=dto.customer_address,
            affiliate=affiliate,
            affiliate_name=affiliate.name,
            quantity=dto.quantity,
            unit_price=unit_price,
            total_cost=subtotal,
            payment_method=dto.payment_method,
            wants_delivery=dto.wants_delivery,
            delivery_fee_applied=delivery_fee,
            discount_applied=discount,
            status=status,
            coupon_used=dto.coupon_code or "",
            referral_code_used=dto.referral_code or "",
            is_low_inventory_order=dto.quantity > affiliate.inventory,
        )
        order.add_domain_event(
            OrderCreated(
                aggregate_id=order.id,
                affiliate_id=affiliate.id,
                quantity=order.quantity,
                payment_method=order.payment_method,
                coupon_used=order.coupon_used,
            )
        )
        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id, status=status, notes="Order created"
        )

        # 6. Referral
        if is_first_order and dto.referral_code:
            referrer = self._customers.find_referrer(dto.referral_code)
            if referrer is not None and referrer.phone != customer.phone:
                self._referrals.register_referral(order, referrer)
            else:
                log.info("order.referral_ignored", referral_code=dto.referral_code)

        log.info(
            "order.created",
            order_id=str(order.id),
            status=status,
            low_inventory=order.is_low_inventory_order,
        )
        return order

    @transaction.atomic
    def confirm_transfer_payment(self, dto: ConfirmTransferPaymentDTO) -> Order:
        """PENDING_CONFIRMATION -> ACTIVE once the admin sees the transfer.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: the order is not awaiting confirmation.
        """
        order = self._locked(dto.order_id)
        if order.status != OrderStatus.PENDING_CONFIRMATION:
            raise InvalidOrderStatus(
                f"Order {order.id} is {order.status}, not PENDING_CONFIRMATION."
            )
        return self._transition(
            order, OrderStatus.ACTIVE, "Transfer payment confirmed"
        )

    @transaction.atomic
    def set_status(self, dto: SetOrderStatusDTO) -> Order:
        """Run a lifecycle transition and its side effects.

        Locks the affiliate first and then the order, the same order used by
        inventory confirmation and cash-outs.  The transition is validated
        against the locked row, so a second ``FINISHED`` never debits stock
        twice.

        Raises:
            OrderNotFound: order does not exist.
            AffiliateNotFound: the order's affiliate is gone.
            InvalidOrderStatus: transition is not allowed (e.g. terminal).
        """
        current = self._order_repo.get_by_id(str(dto.order_id))
        if not current:
            raise OrderNotFound(f"Order {dto.order_id} not found.")
        affiliate = self._affiliate_repo.get_for_update(current.affiliate_id)
        if not affiliate:
            raise AffiliateNotFound(f"Affiliate {current.affiliate_id} not found.")
        order = self._locked(dto.order_id)
        return self._transition(order, dto.new_status, dto.notes, affiliate)

    @transaction.atomic
    def reopen_order(self, dto: ReopenOrderDTO) -> Order:
        """CANCELLED -> ACTIVE correction.

        The linked referral goes back to ``ACTIVE_ORDER``.  Inventory is not
        touched: stock is only ever debited by the FINISHED transition.
        """
        order = self._locked(dto.order_id)
        log = logger.bind(order_id=str(order.id), current_status=order.status)
        old_status = order.reopen()
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id, old_status=old_status, new_status=order.status
            )
        )
        order.add_domain_event(
            OrderReopened(aggregate_id=order.id, affiliate_id=order.affiliate_id)
        )
        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id,
            status=order.status,
            notes=dto.notes or "Order reopened",
            old_status=old_status,
        )
        self._referrals.restore_for_order(order)
        log.info("order.reopened")
        return order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def get_bill(self, order_id: str) -> OrderBillDTO:
        """Customer bill and settlement figures for one order.

        Amounts come from the order's frozen fields; only the commission
        uses the current platform rate.
        """
        order = self.get_order(order_id)
        rate = PlatformSettings.load().commission_rate_cents
        return OrderBillDTO(
            order_id=order.id,
            quantity=order.quantity,
            unit_price=order.unit_price,
            subtotal=order.total_cost,
            delivery_fee=order.delivery_fee_applied,
            discount=order.discount_applied,
            customer_total=money.customer_total(order),
            payment_method=order.payment_method,
            commission_rate_cents=rate,
            commission=money.commission(order, rate),
            amount_affiliate_owes_admin=money.amount_affiliate_owes_admin(order, rate),
            amount_admin_owes_affiliate=money.amount_admin_owes_affiliate(order, rate),
            balance_contribution=money.balance_contribution(order, rate),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _locked(self, order_id) -> Order:
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def _transition(
        self,
        order: Order,
        new_status: str,
        notes: str = "",
        affiliate: Optional[Affiliate] = None,
    ) -> Order:
        log = logger.bind(
            order_id=str(order.id),
            current_status=order.status,
            new_status=new_status,
        )
        try:
            old_status = order.transition_to(new_status)
        except InvalidOrderStatus:
            log.warning("order.invalid_transition")
            raise

        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id, old_status=old_status, new_status=new_status
            )
        )
        if new_status == OrderStatus.FINISHED:
            self._debit_inventory(order, affiliate)
            order.add_domain_event(
                OrderFinished(
                    aggregate_id=order.id,
                    affiliate_id=order.affiliate_id,
                    quantity=order.quantity,
                    referral_code_used=order.referral_code_used,
                )
            )
        elif new_status == OrderStatus.CANCELLED:
            order.add_domain_event(
                OrderCancelled(aggregate_id=order.id, affiliate_id=order.affiliate_id)
            )

        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id,
            status=new_status,
            notes=notes,
            old_status=old_status,
        )
        if new_status == OrderStatus.CANCELLED:
            self._referrals.cancel_for_order(order)

        log.info("order.status_updated")
        return order

    def _debit_inventory(self, order: Order, affiliate: Affiliate) -> None:
        """Debit the already locked affiliate; the result may be negative."""
        affiliate.inventory -= order.quantity
        affiliate.save(update_fields=["inventory"])
        logger.info(
            "affiliate.inventory_debited",
            affiliate_id=affiliate.id,
            order_id=str(order.id),
            quantity=order.quantity,
            remaining=affiliate.inventory,
        )
