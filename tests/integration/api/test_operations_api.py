"""HTTP API for inventory requests, cash-outs, referrals and coupons."""

from __future__ import annotations

import pytest

from modules.referrals.models import Coupon, Referral

pytestmark = pytest.mark.integration

INVENTORY_URL = "/api/v1/inventory-changes/"
CASH_OUT_URL = "/api/v1/cash-outs/"


class TestInventoryApi:
    def test_request_resolve_confirm(self, auth_client, affiliate):
        response = auth_client.post(
            INVENTORY_URL,
            {"affiliate_id": affiliate.id, "amount": 50},
            format="json",
        )
        assert response.status_code == 201
        change_id = response.json()["id"]
        assert response.json()["status"] == "PENDING"

        resolved = auth_client.post(
            f"{INVENTORY_URL}{change_id}/resolve/",
            {"decision": "APPROVED"},
            format="json",
        )
        assert resolved.json()["status"] == "APPROVED"
        affiliate.refresh_from_db()
        assert affiliate.inventory == 100

        confirmed = auth_client.post(f"{INVENTORY_URL}{change_id}/confirm/")
        assert confirmed.json()["status"] == "COMPLETED"
        affiliate.refresh_from_db()
        assert affiliate.inventory == 150

        again = auth_client.post(f"{INVENTORY_URL}{change_id}/confirm/")
        assert again.status_code == 409

    def test_negative_request_is_400(self, auth_client, affiliate):
        response = auth_client.post(
            INVENTORY_URL,
            {"affiliate_id": affiliate.id, "amount": -5},
            format="json",
        )
        assert response.status_code == 400

    def test_withdraw_pending_request(self, auth_client, affiliate):
        change_id = auth_client.post(
            INVENTORY_URL,
            {"affiliate_id": affiliate.id, "amount": 20},
            format="json",
        ).json()["id"]

        response = auth_client.delete(f"{INVENTORY_URL}{change_id}/")

        assert response.status_code == 204
        assert auth_client.get(INVENTORY_URL).json() == []

    def test_indicators(self, auth_client, affiliate, place_order):
        place_order(affiliate, quantity=150)

        rows = auth_client.get(f"{INVENTORY_URL}indicators/").json()
        single = auth_client.get(
            f"{INVENTORY_URL}indicators/", {"affiliate": affiliate.id}
        ).json()

        assert [row["affiliate_id"] for row in rows] == [affiliate.id]
        assert single["affiliate_id"] == affiliate.id


class TestCashOutApi:
    def test_preview_create_and_list(
        self, auth_client, affiliate, place_order, finish_order
    ):
        finish_order(place_order(affiliate))

        preview = auth_client.get(f"{CASH_OUT_URL}preview/{affiliate.id}/").json()
        assert preview["order_count"] == 1
        assert preview["balance"] == "110.00"

        response = auth_client.post(
            CASH_OUT_URL, {"affiliate_id": affiliate.id}, format="json"
        )
        assert response.status_code == 201
        assert response.json()["status"] == "COMPLETED"

        listing = auth_client.get(CASH_OUT_URL, {"affiliate": affiliate.id}).json()
        assert len(listing) == 1

        empty = auth_client.post(
            CASH_OUT_URL, {"affiliate_id": affiliate.id}, format="json"
        )
        assert empty.status_code == 400

    def test_negative_balance_needs_proof_then_confirmation(
        self, auth_client, affiliate, place_order, finish_order
    ):
        finish_order(place_order(affiliate, payment_method="TRANSFER"))

        missing = auth_client.post(
            CASH_OUT_URL, {"affiliate_id": affiliate.id}, format="json"
        )
        assert missing.status_code == 400
        assert missing.json()["code"] == "ProofOfPaymentRequired"

        created = auth_client.post(
            CASH_OUT_URL,
            {"affiliate_id": affiliate.id, "proof_of_payment": "SPEI-123"},
            format="json",
        ).json()
        assert created["status"] == "PENDING_AFFILIATE_CONFIRMATION"

        confirmed = auth_client.post(f"{CASH_OUT_URL}{created['id']}/confirm/")
        assert confirmed.status_code == 200
        assert confirmed.json()["status"] == "COMPLETED"

        again = auth_client.post(f"{CASH_OUT_URL}{created['id']}/confirm/")
        assert again.status_code == 409

    def test_unknown_affiliate_preview_is_404(self, auth_client):
        response = auth_client.get(f"{CASH_OUT_URL}preview/5500000000/")
        assert response.status_code == 404


class TestReferralApi:
    @pytest.fixture()
    def referral(self, affiliate, place_order, finish_order):
        place_order(affiliate, phone="5598760002", name="Bruno López")
        order = place_order(
            affiliate, phone="5598760009", name="Carla", referral_code="BRUN0002"
        )
        finish_order(order)
        return Referral.objects.get(order=order)

    def test_eligible_then_complete(self, auth_client, referral):
        eligible = auth_client.get("/api/v1/referrals/", {"eligible": "true"}).json()
        assert [row["id"] for row in eligible] == [str(referral.id)]

        response = auth_client.post(f"/api/v1/referrals/{referral.id}/complete/")
        assert response.status_code == 201
        coupon = response.json()
        assert coupon["generated_for_phone"] == "5598760002"
        assert coupon["reward_amount"] == "120.00"

        again = auth_client.post(f"/api/v1/referrals/{referral.id}/complete/")
        assert again.status_code == 409

    def test_toggle_and_delete_coupon(self, auth_client, referral):
        code = auth_client.post(
            f"/api/v1/referrals/{referral.id}/complete/"
        ).json()["code"]

        toggled = auth_client.post(f"/api/v1/coupons/{code}/toggle/")
        assert toggled.json()["is_active"] is False

        deleted = auth_client.delete(f"/api/v1/coupons/{code}/")
        assert deleted.status_code == 204
        assert not Coupon.objects.filter(pk=code).exists()
