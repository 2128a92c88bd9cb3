"""Unit tests for the pure snapshot schema upgrade chain."""

from __future__ import annotations

import copy

import pytest

from modules.core.snapshot import (
    CURRENT_SCHEMA_VERSION,
    UnsupportedSnapshotVersion,
    legacy_uuid,
    snapshot_version,
    upgrade_snapshot,
)

pytestmark = pytest.mark.unit


@pytest.fixture()
def v1_snapshot():
    return {
        "affiliates": [
            {"id": "5512340001", "customerName": "Doña Lupe", "status": "Aprobado"}
        ],
        "orders": [
            {
                "id": "o-1",
                "quantity": 10,
                "totalCost": 120,
                "paymentMethod": "Efectivo",
                "status": "Finalizado",
                "affiliateId": "5512340001",
            }
        ],
        "coupons": [{"code": "REGALO-ABC123", "rewardAmount": 120}],
        "cashOuts": [{"id": "c-1", "affiliateId": "5512340001"}],
    }


def test_missing_version_means_version_one(v1_snapshot):
    assert snapshot_version(v1_snapshot) == 1


def test_upgrade_reaches_current_version(v1_snapshot):
    upgraded = upgrade_snapshot(v1_snapshot)
    assert upgraded["schemaVersion"] == CURRENT_SCHEMA_VERSION


def test_v1_orders_gain_settlement_fields(v1_snapshot):
    order = upgrade_snapshot(v1_snapshot)["orders"][0]
    assert order["settledInCashOutId"] is None
    assert order["isLowInventoryOrder"] is False
    assert order["discountApplied"] == 0
    assert order["deliveryFeeApplied"] == 0


def test_v2_fields_back_filled(v1_snapshot):
    upgraded = upgrade_snapshot(v1_snapshot)
    assert upgraded["coupons"][0]["isActive"] is True
    assert upgraded["cashOuts"][0]["status"] == "Completado"
    affiliate = upgraded["affiliates"][0]
    assert affiliate["isTemporarilyClosed"] is False
    assert affiliate["hasDeliveryService"] is False
    assert affiliate["deliveryCost"] == 0


def test_missing_collections_become_empty_lists(v1_snapshot):
    upgraded = upgrade_snapshot(v1_snapshot)
    assert upgraded["referrals"] == []
    assert upgraded["inventoryChanges"] == []
    assert upgraded["users"] == []


def test_existing_values_are_preserved(v1_snapshot):
    v1_snapshot["orders"][0]["discountApplied"] = 15
    v1_snapshot["coupons"][0]["isActive"] = False
    upgraded = upgrade_snapshot(v1_snapshot)
    assert upgraded["orders"][0]["discountApplied"] == 15
    assert upgraded["coupons"][0]["isActive"] is False


def test_input_is_not_mutated(v1_snapshot):
    original = copy.deepcopy(v1_snapshot)
    upgrade_snapshot(v1_snapshot)
    assert v1_snapshot == original


def test_current_version_passes_through_unchanged(v1_snapshot):
    upgraded = upgrade_snapshot(v1_snapshot)
    assert upgrade_snapshot(upgraded) == upgraded


def test_v2_snapshot_only_runs_later_steps():
    snapshot = {
        "schemaVersion": 2,
        "orders": [],
        "coupons": [{"code": "X"}],
        "cashOuts": [],
        "affiliates": [],
    }
    assert upgrade_snapshot(snapshot)["coupons"][0]["isActive"] is True


@pytest.mark.parametrize("version", [-1, CURRENT_SCHEMA_VERSION + 1])
def test_unsupported_versions_rejected(version):
    snapshot = {"schemaVersion": version}
    with pytest.raises(UnsupportedSnapshotVersion):
        upgrade_snapshot(snapshot)


def test_legacy_uuid_is_stable_and_keeps_real_uuids():
    assert legacy_uuid("order", "o-1") == legacy_uuid("order", "o-1")
    assert legacy_uuid("order", "o-1") != legacy_uuid("cashout", "o-1")
    real = "0b4c5a3e-1d2f-4a6b-8c9d-0e1f2a3b4c5d"
    assert str(legacy_uuid("order", real)) == real
