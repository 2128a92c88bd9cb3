"""Legacy snapshot import.

Backups exported by the legacy browser storefront are JSON documents with
camelCase keys, Spanish enum labels and millisecond timestamps.  Older
backups lack fields that later versions rely on, so loading happens in
two separate phases:

1. ``upgrade_snapshot``: a pure chain of ``v(n) -> v(n+1)`` functions,
   run once, that back-fills missing fields.  It never touches the
   database.
2. ``SnapshotImporter``: maps the upgraded document onto the models.
   Legacy ids that are not UUIDs are mapped with ``uuid5`` so references
   between collections survive.
"""

from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

import structlog
from django.db import transaction

from modules.affiliates.constants import WEEKDAYS
from modules.affiliates.models import Affiliate
from modules.core.models import PlatformSettings
from modules.customers.models import Customer
from modules.inventory.models import InventoryChange
from modules.orders.models import Order
from modules.referrals.models import Coupon, Referral
from modules.settlements.models import CashOut
from shared.domain.exceptions import PreconditionFailed

logger = structlog.get_logger(__name__)

CURRENT_SCHEMA_VERSION = 3

COLLECTIONS = (
    "users",
    "affiliates",
    "orders",
    "referrals",
    "coupons",
    "inventoryChanges",
    "cashOuts",
)

LEGACY_ID_NAMESPACE = uuid.UUID("6f1c1a52-5d1e-4c4e-9f7b-2a7d2b9e0c11")

ORDER_STATUS = {
    "Pendiente de Confirmación": "PENDING_CONFIRMATION",
    "Activo": "ACTIVE",
    "Finalizado": "FINISHED",
    "Cancelado": "CANCELLED",
}
PAYMENT_METHOD = {"Efectivo": "CASH", "Transferencia": "TRANSFER"}
AFFILIATE_STATUS = {
    "Pendiente": "PENDING",
    "Aprobado": "APPROVED",
    "Rechazado": "REJECTED",
    "Suspendido": "SUSPENDED",
}
INVENTORY_STATUS = {
    "Pendiente": "PENDING",
    "Aprobado": "APPROVED",
    "Rechazado": "REJECTED",
    "Completado": "COMPLETED",
}
REFERRAL_STATUS = {
    "Pedido Activo": "ACTIVE_ORDER",
    "Completado": "COMPLETED",
    "Cancelado": "CANCELLED",
}
CASH_OUT_STATUS = {
    "Pendiente Confirmación Vendedor": "PENDING_AFFILIATE_CONFIRMATION",
    "Completado": "COMPLETED",
}


class UnsupportedSnapshotVersion(PreconditionFailed):
    """The snapshot declares a schema version this code cannot read."""


# ---------------------------------------------------------------------------
# Schema upgrades (pure)
# ---------------------------------------------------------------------------


def _v1_to_v2(data: Dict[str, Any]) -> Dict[str, Any]:
    """Orders gain settlement and low-stock fields; amounts default to 0."""
    for name in COLLECTIONS:
        if not isinstance(data.get(name), list):
            data[name] = []
    for order in data["orders"]:
        order.setdefault("settledInCashOutId", None)
        order.setdefault("isLowInventoryOrder", False)
        if order.get("discountApplied") is None:
            order["discountApplied"] = 0
        if order.get("deliveryFeeApplied") is None:
            order["deliveryFeeApplied"] = 0
    return data


def _v2_to_v3(data: Dict[str, Any]) -> Dict[str, Any]:
    """Coupons can be deactivated, cash-outs carry a status, affiliates
    gain delivery and closure settings."""
    for coupon in data["coupons"]:
        coupon.setdefault("isActive", True)
    for cash_out in data["cashOuts"]:
        if not cash_out.get("status"):
            cash_out["status"] = "Completado"
    for affiliate in data["affiliates"]:
        affiliate.setdefault("isTemporarilyClosed", False)
        affiliate.setdefault("hasDeliveryService", False)
        affiliate.setdefault("deliveryCost", 0)
        affiliate.setdefault("schedule", {})
    return data


UPGRADES: Dict[int, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    1: _v1_to_v2,
    2: _v2_to_v3,
}


def snapshot_version(data: Dict[str, Any]) -> int:
    """Declared schema version; documents without one are version 1."""
    return int(data.get("schemaVersion") or 1)


def upgrade_snapshot(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of *data* upgraded to ``CURRENT_SCHEMA_VERSION``.

    The input is never modified.

    Raises:
        UnsupportedSnapshotVersion: the version is unknown or newer than
            this code.
    """
    version = snapshot_version(data)
    if version < 1 or version > CURRENT_SCHEMA_VERSION:
        raise UnsupportedSnapshotVersion(
            f"Snapshot schema version {version} is not supported "
            f"(current is {CURRENT_SCHEMA_VERSION})."
        )
    upgraded = copy.deepcopy(data)
    while version < CURRENT_SCHEMA_VERSION:
        upgraded = UPGRADES[version](upgraded)
        version += 1
        upgraded["schemaVersion"] = version
    return upgraded


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


def legacy_uuid(kind: str, legacy_id: Any) -> uuid.UUID:
    """Stable UUID for a legacy id (kept as-is when it already is one)."""
    try:
        return uuid.UUID(str(legacy_id))
    except ValueError:
        return uuid.uuid5(LEGACY_ID_NAMESPACE, f"{kind}:{legacy_id}")


def _money(value: Any) -> Decimal:
    return Decimal(str(value or 0)).quantize(Decimal("0.01"))


def _timestamp(value: Any) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)


def _schedule(raw: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    return {
        day.lower(): {
            "is_open": bool(entry.get("isOpen")),
            "open_time": entry.get("openTime") or "09:00",
            "close_time": entry.get("closeTime") or "18:00",
        }
        for day, entry in (raw or {}).items()
        if day.lower() in WEEKDAYS
    }


def _affiliate_for(
    row: Dict[str, Any], affiliates: Dict[str, Affiliate]
) -> Optional[Affiliate]:
    """Affiliates are keyed by phone digits, so the reference is sanitized too."""
    return affiliates.get(Customer.sanitize_phone(str(row.get("affiliateId") or "")))


@dataclass
class ImportReport:
    created: Dict[str, int] = field(default_factory=dict)
    skipped: Dict[str, int] = field(default_factory=dict)

    def add(self, collection: str, created: bool = True) -> None:
        bucket = self.created if created else self.skipped
        bucket[collection] = bucket.get(collection, 0) + 1


class SnapshotImporter:
    """Loads an upgraded snapshot into the database in one transaction.

    Records referencing an unknown affiliate or order are skipped and
    counted in the report.  Existing rows with the same id are updated.
    """

    def __init__(self) -> None:
        self.report = ImportReport()
        self._customers: Dict[str, Customer] = {}

    @transaction.atomic
    def load(self, raw: Dict[str, Any]) -> ImportReport:
        data = upgrade_snapshot(raw)
        log = logger.bind(schema_version=snapshot_version(raw))
        log.info("snapshot.import_started")

        self._load_settings(data)
        for user in data["users"]:
            self._customer(user.get("customerName", ""), user.get("phone", ""))
            self.report.add("users")
        affiliates = {a.id: a for a in self._load_affiliates(data["affiliates"])}
        cash_outs = self._load_cash_outs(data["cashOuts"], affiliates)
        orders = self._load_orders(data["orders"], affiliates, cash_outs)
        self._load_inventory_changes(data["inventoryChanges"], affiliates)
        self._load_referrals(data["referrals"], orders)
        self._load_coupons(data["coupons"])

        log.info(
            "snapshot.import_completed",
            created=self.report.created,
            skipped=self.report.skipped,
        )
        return self.report

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def _load_settings(self, data: Dict[str, Any]) -> None:
        settings_row = PlatformSettings.load()
        if data.get("affiliateCommissionPerTortilla") is not None:
            settings_row.commission_rate_cents = int(
                data["affiliateCommissionPerTortilla"]
            )
        if data.get("tortillaPrice") is not None:
            settings_row.tortilla_price = _money(data["tortillaPrice"])
        if data.get("adminPhoneNumber"):
            settings_row.admin_phone = data["adminPhoneNumber"]
        if data.get("bankDetails"):
            settings_row.bank_details = data["bankDetails"]
        settings_row.save()

    def _load_affiliates(self, rows: List[Dict[str, Any]]) -> List[Affiliate]:
        loaded = []
        for row in rows:
            legacy_id = row.get("id") or row.get("phone")
            affiliate_id = Customer.sanitize_phone(str(legacy_id))
            if not affiliate_id:
                self.report.add("affiliates", created=False)
                continue
            affiliate, _ = Affiliate.objects.update_or_create(
                id=affiliate_id,
                defaults={
                    "name": row.get("customerName", ""),
                    "phone": Customer.sanitize_phone(row.get("phone"))
                    or affiliate_id,
                    "address": row.get("address", ""),
                    "status": AFFILIATE_STATUS.get(row.get("status"), "PENDING"),
                    "inventory": int(row.get("inventory") or 0),
                    "has_delivery_service": bool(row["hasDeliveryService"]),
                    "delivery_cost": _money(row["deliveryCost"]),
                    "schedule": _schedule(row["schedule"]),
                    "is_temporarily_closed": bool(row["isTemporarilyClosed"]),
                    "bank_details": row.get("bankDetails") or "",
                },
            )
            loaded.append(affiliate)
            self.report.add("affiliates")
        return loaded

    def _load_cash_outs(
        self, rows: List[Dict[str, Any]], affiliates: Dict[str, Affiliate]
    ) -> Dict[str, Any]:
        rate = PlatformSettings.load().commission_rate_cents
        loaded = {}
        for row in rows:
            affiliate = _affiliate_for(row, affiliates)
            if affiliate is None:
                self.report.add("cashOuts", created=False)
                continue
            cash_out, _ = CashOut.objects.update_or_create(
                id=legacy_uuid("cashout", row["id"]),
                defaults={
                    "affiliate": affiliate,
                    "affiliate_name": affiliate.name,
                    "orders_covered_ids": [
                        str(legacy_uuid("order", order_id))
                        for order_id in row.get("ordersCoveredIds") or []
                    ],
                    "total_sales": _money(row.get("totalSales")),
                    "total_commission": _money(row.get("totalCommission")),
                    "total_delivery_fees": _money(row.get("totalDeliveryFees")),
                    "balance": _money(row.get("balance")),
                    "commission_rate_cents": rate,
                    "status": CASH_OUT_STATUS.get(row["status"], "COMPLETED"),
                    "proof_of_payment": row.get("adminPaymentReceiptImage") or "",
                    "start_date": _timestamp(row.get("startDate")),
                    "end_date": _timestamp(row.get("endDate")),
                    "created_at": _timestamp(row.get("timestamp")),
                },
            )
            loaded[str(row["id"])] = cash_out
            self.report.add("cashOuts")
        return loaded

    def _load_orders(
        self,
        rows: List[Dict[str, Any]],
        affiliates: Dict[str, Any],
        cash_outs: Dict[str, Any],
    ) -> Dict[str, Any]:
        loaded = {}
        for row in rows:
            affiliate = _affiliate_for(row, affiliates)
            quantity = int(row.get("quantity") or 0)
            if affiliate is None or quantity < 1:
                self.report.add("orders", created=False)
                continue
            customer = self._customer(
                row.get("customerName", ""), row.get("phone", "")
            )
            total_cost = _money(row.get("totalCost"))
            settled_id = row.get("settledInCashOutId")
            order, _ = Order.objects.update_or_create(
                id=legacy_uuid("order", row["id"]),
                defaults={
                    "customer": customer,
                    "customer_name": customer.name,
                    "customer_phone": customer.phone,
                    "customer_address": row.get("address", ""),
                    "affiliate": affiliate,
                    "affiliate_name": row.get("affiliateName") or affiliate.name,
                    "quantity": quantity,
                    "unit_price": (total_cost / quantity).quantize(Decimal("0.01")),
                    "total_cost": total_cost,
                    "payment_method": PAYMENT_METHOD.get(
                        row.get("paymentMethod"), "CASH"
                    ),
                    "wants_delivery": row.get("deliveryChoice") == "delivery",
                    "delivery_fee_applied": _money(row["deliveryFeeApplied"]),
                    "discount_applied": _money(row["discountApplied"]),
                    "status": ORDER_STATUS.get(row.get("status"), "ACTIVE"),
                    "coupon_used": row.get("couponUsed") or "",
                    "referral_code_used": row.get("referralCodeUsed") or "",
                    "settled_in_cash_out": cash_outs.get(str(settled_id))
                    if settled_id
                    else None,
                    "is_low_inventory_order": bool(row["isLowInventoryOrder"]),
                    "created_at": _timestamp(row.get("timestamp")),
                },
            )
            loaded[str(row["id"])] = order
            self.report.add("orders")
        return loaded

    def _load_inventory_changes(
        self, rows: List[Dict[str, Any]], affiliates: Dict[str, Affiliate]
    ) -> None:
        for row in rows:
            affiliate = _affiliate_for(row, affiliates)
            amount = int(row.get("amount") or 0)
            if affiliate is None or amount == 0:
                self.report.add("inventoryChanges", created=False)
                continue
            InventoryChange.objects.update_or_create(
                id=legacy_uuid("inventory", row["id"]),
                defaults={
                    "affiliate": affiliate,
                    "affiliate_name": affiliate.name,
                    "amount": amount,
                    "status": INVENTORY_STATUS.get(row.get("status"), "PENDING"),
                    "created_at": _timestamp(row.get("timestamp")),
                },
            )
            self.report.add("inventoryChanges")

    def _load_referrals(
        self, rows: List[Dict[str, Any]], orders: Dict[str, Any]
    ) -> None:
        for row in rows:
            order = orders.get(str(row.get("refereeOrderId")))
            if order is None:
                self.report.add("referrals", created=False)
                continue
            referrer = self._customer(
                row.get("referrerName", ""), row.get("referrerPhone", "")
            )
            Referral.objects.update_or_create(
                id=legacy_uuid("referral", row["id"]),
                defaults={
                    "referrer": referrer,
                    "referrer_code": row.get("referrerCode") or referrer.referral_code,
                    "referrer_name": referrer.name,
                    "referrer_phone": referrer.phone,
                    "order": order,
                    "referee_name": row.get("refereeName") or order.customer_name,
                    "referee_phone": row.get("refereePhone") or order.customer_phone,
                    "quantity": int(row.get("refereeOrderQuantity") or order.quantity),
                    "status": REFERRAL_STATUS.get(row.get("status"), "ACTIVE_ORDER"),
                    "created_at": _timestamp(row.get("timestamp")),
                },
            )
            self.report.add("referrals")

    def _load_coupons(self, rows: List[Dict[str, Any]]) -> None:
        for row in rows:
            code = str(row.get("code") or "").strip().upper()
            if not code:
                self.report.add("coupons", created=False)
                continue
            Coupon.objects.update_or_create(
                id=code,
                defaults={
                    "generated_for_phone": row.get("generatedForPhone") or "",
                    "reward_amount": _money(row.get("rewardAmount")),
                    "is_used": bool(row.get("isUsed")),
                    "is_active": bool(row["isActive"]),
                },
            )
            self.report.add("coupons")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _customer(self, name: str, phone: str) -> Customer:
        digits = Customer.sanitize_phone(phone)
        if digits in self._customers:
            return self._customers[digits]
        customer, _ = Customer.objects.get_or_create(
            phone=digits, defaults={"name": name or digits}
        )
        self._customers[digits] = customer
        return customer
