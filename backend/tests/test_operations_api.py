from datetime import date, timedelta
from decimal import Decimal

from salonsuite.services import sms_service


def money(value):
    return Decimal(str(value))


class TestLoyalty:
    def test_manual_earn_and_redeem(self, client, headers, customer):
        url = f"/api/v1/loyalty/customers/{customer['id']}"
        earned = client.post(f"{url}/earn", json={"points": 40, "description": "Referral"}, headers=headers)
        assert earned.status_code == 201
        assert earned.json()["expires_at"] is not None
        redeemed = client.post(f"{url}/redeem", json={"points": 120}, headers=headers)
        assert redeemed.status_code == 201
        summary = client.get(url, headers=headers).json()
        assert summary["points"] == 20
        assert summary["total_earned"] == 140
        assert summary["total_redeemed"] == 120

    def test_redeem_more_than_balance(self, client, headers, customer):
        response = client.post(
            f"/api/v1/loyalty/customers/{customer['id']}/redeem",
            json={"points": 101},
            headers=headers,
        )
        assert response.status_code == 400
        assert "Insufficient loyalty points" in response.json()["detail"]

    def test_non_positive_points_rejected(self, client, headers, customer):
        response = client.post(
            f"/api/v1/loyalty/customers/{customer['id']}/earn",
            json={"points": 0},
            headers=headers,
        )
        assert response.status_code == 422

    def test_unenrolled_customer_cannot_earn(self, client, headers, customer):
        url = f"/api/v1/loyalty/customers/{customer['id']}"
        assert client.post(f"{url}/unenroll", headers=headers).json()["enrolled"] is False
        assert client.post(f"{url}/earn", json={"points": 10}, headers=headers).status_code == 400
        # re-enrolling does not pay the welcome bonus twice
        assert client.post(f"{url}/enroll", headers=headers).json()["points"] == 100

    def test_settings_partial_update(self, client, headers):
        response = client.put("/api/v1/loyalty/settings", json={"max_redemption_percent": 30}, headers=headers)
        assert response.status_code == 200
        assert response.json()["max_redemption_percent"] == 30
        assert response.json()["welcome_bonus"] == 100
        bad = client.put("/api/v1/loyalty/settings", json={"max_redemption_percent": 130}, headers=headers)
        assert bad.status_code == 422

    def test_tiers_and_stats(self, client, headers, customer):
        tiers = client.get("/api/v1/loyalty/tiers").json()
        assert [t["name"] for t in tiers] == ["bronze", "silver", "gold", "platinum"]
        stats = client.get("/api/v1/loyalty/stats", headers=headers).json()
        assert stats["total_members"] == 1
        assert stats["total_points_issued"] == 100
        assert stats["tier_distribution"]["bronze"] == 1

    def test_transactions_limit_is_clamped(self, client, headers, customer):
        response = client.get("/api/v1/loyalty/transactions", params={"limit": 1000, "offset": -5}, headers=headers)
        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_expiring_window(self, client, headers, customer):
        assert client.get("/api/v1/loyalty/expiring", params={"days": 7}, headers=headers).json() == []
        soon = client.get("/api/v1/loyalty/expiring", params={"days": 60}, headers=headers).json()
        assert len(soon) == 1

    def test_invoice_data(self, client, headers, customer):
        body = client.get(f"/api/v1/loyalty/customers/{customer['id']}/invoice-data", headers=headers).json()
        assert body["customer_name"] == "Asha Rao"
        assert body["points"] == 100
        assert money(body["points_value"]) == Decimal("100.00")
        assert body["memberships"] == []


class TestCoupons:
    def coupon_payload(self, **overrides):
        today = date.today()
        payload = {
            "code": "FLAT200",
            "name": "Flat 200",
            "discount_type": "fixed",
            "discount_value": "200",
            "min_order_amount": "1000",
            "valid_from": today.isoformat(),
            "valid_until": (today + timedelta(days=10)).isoformat(),
        }
        payload.update(overrides)
        return payload

    def test_duplicate_code(self, client, headers):
        assert client.post("/api/v1/coupons/", json=self.coupon_payload(), headers=headers).status_code == 201
        again = client.post("/api/v1/coupons/", json=self.coupon_payload(code="flat200"), headers=headers)
        assert again.status_code == 409

    def test_percentage_over_100(self, client, headers):
        payload = self.coupon_payload(code="BIG", discount_type="percentage", discount_value="150")
        assert client.post("/api/v1/coupons/", json=payload, headers=headers).status_code == 422

    def test_validate(self, client, headers):
        client.post("/api/v1/coupons/", json=self.coupon_payload(), headers=headers)
        ok = client.post("/api/v1/coupons/validate", json={"code": "flat200", "order_amount": "1500"}, headers=headers).json()
        assert ok["valid"] is True
        assert money(ok["discount_amount"]) == Decimal("200.00")
        low = client.post("/api/v1/coupons/validate", json={"code": "FLAT200", "order_amount": "500"}, headers=headers).json()
        assert low["valid"] is False

    def test_expired_coupon_not_available(self, client, headers):
        past = date.today() - timedelta(days=5)
        payload = self.coupon_payload(code="OLD", valid_from=(past - timedelta(days=5)).isoformat(), valid_until=past.isoformat())
        client.post("/api/v1/coupons/", json=payload, headers=headers)
        client.post("/api/v1/coupons/", json=self.coupon_payload(), headers=headers)
        available = client.get("/api/v1/coupons/available", headers=headers).json()
        assert [c["code"] for c in available] == ["FLAT200"]


class TestGiftCards:
    def test_issue_and_lookup(self, client, headers, customer):
        card = client.post("/api/v1/gift-cards/", json={"amount": "1000", "issued_to": customer["id"]}, headers=headers)
        assert card.status_code == 201
        body = card.json()
        assert body["code"].startswith("GC")
        assert body["customer_name"] == "Asha Rao"
        assert money(body["balance"]) == Decimal("1000.00")
        assert client.get(f"/api/v1/gift-cards/lookup/{body['code'].lower()}", headers=headers).status_code == 200

    def test_lookup_unknown(self, client, headers):
        response = client.get("/api/v1/gift-cards/lookup/GC000", headers=headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Gift card not found, expired or fully used"

    def test_stats(self, client, headers):
        client.post("/api/v1/gift-cards/", json={"amount": "500"}, headers=headers)
        client.post("/api/v1/gift-cards/", json={"amount": "250"}, headers=headers)
        stats = client.get("/api/v1/gift-cards/stats", headers=headers).json()
        assert stats["total_cards"] == 2
        assert money(stats["total_value"]) == Decimal("750.00")
        assert stats["active_cards"] == 2


class TestMemberships:
    def create_plan(self, client, headers, **overrides):
        payload = {"name": "Silver Club", "price": "1500", "duration_months": 1, "benefits": ["Free wash"]}
        payload.update(overrides)
        response = client.post("/api/v1/memberships/plans", json=payload, headers=headers)
        assert response.status_code == 201
        return response.json()

    def test_join_plan(self, client, headers, customer):
        plan = self.create_plan(client, headers)
        start = date(2026, 1, 31)
        response = client.post("/api/v1/memberships/customer-memberships", json={
            "customer_id": customer["id"],
            "plan_id": plan["id"],
            "start_date": start.isoformat(),
        }, headers=headers)
        assert response.status_code == 201
        assert response.json()["end_date"] == "2026-02-28"
        assert money(response.json()["amount_paid"]) == Decimal("1500.00")

    def test_expire_sweep(self, client, headers, customer):
        plan = self.create_plan(client, headers)
        old_start = date.today() - timedelta(days=120)
        client.post("/api/v1/memberships/customer-memberships", json={
            "customer_id": customer["id"],
            "plan_id": plan["id"],
            "start_date": old_start.isoformat(),
        }, headers=headers)
        client.post("/api/v1/memberships/customer-memberships", json={
            "customer_id": customer["id"],
            "plan_id": plan["id"],
        }, headers=headers)
        result = client.post("/api/v1/memberships/customer-memberships/expire", headers=headers)
        assert result.json() == {"expired": 1}
        assert client.post("/api/v1/memberships/customer-memberships/expire", headers=headers).json() == {"expired": 0}
        expired = client.get(
            "/api/v1/memberships/customer-memberships",
            params={"status": "expired"},
            headers=headers,
        ).json()
        assert len(expired) == 1
        assert expired[0]["display_status"] == "expired"

    def test_inactive_plan_cannot_be_joined(self, client, headers, customer):
        plan = self.create_plan(client, headers)
        toggled = client.post(f"/api/v1/memberships/plans/{plan['id']}/toggle", headers=headers).json()
        assert toggled["status"] == "inactive"
        response = client.post("/api/v1/memberships/customer-memberships", json={
            "customer_id": customer["id"],
            "plan_id": plan["id"],
        }, headers=headers)
        assert response.status_code == 400


class TestCashRegisters:
    def test_balance_follows_transactions(self, client, headers):
        register = client.post("/api/v1/cash-registers/", json={"name": "Front Desk", "opening_balance": "1000"}, headers=headers).json()
        url = f"/api/v1/cash-registers/{register['id']}"
        assert client.post(f"{url}/transactions", json={"type": "cash_in", "amount": "500"}, headers=headers).status_code == 201
        assert client.post(f"{url}/transactions", json={"type": "cash_out", "amount": "200", "category": "Supplies"}, headers=headers).status_code == 201
        body = client.get(url, headers=headers).json()
        assert money(body["current_balance"]) == Decimal("1300.00")
        assert money(body["opening_balance"]) == Decimal("1000.00")
        assert len(body["transactions"]) == 2

    def test_amount_must_be_positive(self, client, headers):
        register = client.post("/api/v1/cash-registers/", json={"name": "Back Office"}, headers=headers).json()
        response = client.post(
            f"/api/v1/cash-registers/{register['id']}/transactions",
            json={"type": "cash_in", "amount": "0"},
            headers=headers,
        )
        assert response.status_code == 422

    def test_register_of_other_tenant(self, client, headers, other_headers):
        register = client.post("/api/v1/cash-registers/", json={"name": "Front Desk"}, headers=headers).json()
        assert client.get(f"/api/v1/cash-registers/{register['id']}", headers=other_headers).status_code == 404


class TestExpenses:
    def create_expense(self, client, headers, **overrides):
        payload = {
            "category": "Rent",
            "description": "October rent",
            "amount": "20000",
            "expense_date": date.today().isoformat(),
        }
        payload.update(overrides)
        response = client.post("/api/v1/expenses/", json=payload, headers=headers)
        assert response.status_code == 201
        return response.json()

    def test_review_flow(self, client, headers):
        expense = self.create_expense(client, headers)
        assert expense["status"] == "pending"
        approved = client.post(f"/api/v1/expenses/{expense['id']}/approve", headers=headers)
        assert approved.json()["status"] == "approved"
        assert client.post(f"/api/v1/expenses/{expense['id']}/reject", headers=headers).status_code == 400

    def test_summary(self, client, headers):
        first = self.create_expense(client, headers)
        self.create_expense(client, headers, category="Supplies", amount="1500")
        client.post(f"/api/v1/expenses/{first['id']}/approve", headers=headers)
        summary = client.get("/api/v1/expenses/summary", headers=headers).json()
        assert money(summary["total"]) == Decimal("21500.00")
        assert money(summary["approved_total"]) == Decimal("20000.00")
        assert money(summary["pending_total"]) == Decimal("1500.00")
        assert money(summary["by_category"]["Supplies"]) == Decimal("1500.00")

    def test_amount_typed_in_rupees(self, client, headers):
        expense = self.create_expense(client, headers, amount="₹1,250.50")
        assert money(expense["amount"]) == Decimal("1250.50")
        response = client.post("/api/v1/expenses/", json={
            "category": "Rent",
            "description": "Bad amount",
            "amount": "₹,",
            "expense_date": date.today().isoformat(),
        }, headers=headers)
        assert response.status_code == 422


class TestCampaigns:
    def create_campaign(self, client, headers, **overrides):
        payload = {"name": "Diwali", "type": "sms", "message": "Hi {name}, 20% off this week!"}
        payload.update(overrides)
        response = client.post("/api/v1/campaigns/", json=payload, headers=headers)
        assert response.status_code == 201
        return response.json()

    def test_segments(self, client, headers, customer):
        segments = {s["id"]: s["count"] for s in client.get("/api/v1/campaigns/segments", headers=headers).json()}
        assert segments == {"all": 1, "vip": 0, "new": 1, "inactive": 0}

    def test_send_requires_sms_enabled(self, client, headers, customer):
        campaign = self.create_campaign(client, headers)
        response = client.post(f"/api/v1/campaigns/{campaign['id']}/send", headers=headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "SMS is not enabled for this salon"

    def test_send(self, client, headers, customer, monkeypatch):
        sent = []

        def fake_send(to, message, sender_id=None):
            sent.append((to, message, sender_id))
            return True

        monkeypatch.setattr(sms_service, "send_sms_via_messagebot", fake_send)
        client.patch("/api/v1/tenants/current", json={"sms_enabled": True, "sender_id": "GLOWST"}, headers=headers)
        campaign = self.create_campaign(client, headers)
        response = client.post(f"/api/v1/campaigns/{campaign['id']}/send", headers=headers)
        assert response.status_code == 200, response.text
        assert response.json()["status"] == "sent"
        assert response.json()["sent_count"] == 1
        assert sent == [("9876543210", "Hi Asha Rao, 20% off this week!", "GLOWST")]
        again = client.post(f"/api/v1/campaigns/{campaign['id']}/send", headers=headers)
        assert again.status_code == 400

    def test_only_sms_can_be_sent(self, client, headers):
        campaign = self.create_campaign(client, headers, type="email", subject="News")
        assert client.post(f"/api/v1/campaigns/{campaign['id']}/send", headers=headers).status_code == 400

    def test_scheduled_status(self, client, headers):
        campaign = self.create_campaign(client, headers, scheduled_date="2030-01-01T10:00:00")
        assert campaign["status"] == "scheduled"


class TestBookingsAndStaff:
    def test_booking_lifecycle(self, client, headers, customer, service):
        staff = client.post("/api/v1/staff/", json={"name": "Ravi", "phone": "9000000002"}, headers=headers).json()
        booking = client.post("/api/v1/bookings/", json={
            "customer_id": customer["id"],
            "staff_id": staff["id"],
            "booking_date": date.today().isoformat(),
            "booking_time": "11:30",
            "services": [{"service_id": service["id"], "quantity": 2}],
        }, headers=headers)
        assert booking.status_code == 201, booking.text
        body = booking.json()
        assert body["booking_number"].startswith("BK-")
        assert money(body["total_amount"]) == Decimal("2000.00")

        url = f"/api/v1/bookings/{body['id']}/status"
        assert client.patch(url, json={"status": "confirmed"}, headers=headers).status_code == 200
        backwards = client.patch(url, json={"status": "pending"}, headers=headers)
        assert backwards.status_code == 400
        assert backwards.json()["detail"] == "Cannot move a booking from confirmed to pending"
        assert client.patch(url, json={"status": "cancelled"}, headers=headers).status_code == 200
        assert client.patch(url, json={"status": "confirmed"}, headers=headers).status_code == 400

        # staff with bookings is only deactivated
        removed = client.delete(f"/api/v1/staff/{staff['id']}", headers=headers).json()
        assert removed["deactivated"] is True

    def test_bad_booking_time(self, client, headers, customer, service):
        response = client.post("/api/v1/bookings/", json={
            "customer_id": customer["id"],
            "booking_date": date.today().isoformat(),
            "booking_time": "25:00",
            "services": [{"service_id": service["id"]}],
        }, headers=headers)
        assert response.status_code == 422

    def test_gst_rates(self, client):
        rates = client.get("/api/v1/services/gst-rates").json()
        assert {r["id"]: money(r["total_rate"]) for r in rates}[4] == Decimal("18")


class TestReports:
    def test_summary_and_cache_invalidation(self, client, headers, customer, service):
        today = date.today().isoformat()
        params = {"start_date": today, "end_date": today}
        empty = client.get("/api/v1/reports/summary", params=params, headers=headers).json()
        assert money(empty["revenue"]) == Decimal("0.00")

        sale = client.post("/api/v1/checkout/finalize", json={
            "customer_id": customer["id"],
            "lines": [{"item_type": "service", "item_id": service["id"]}],
        }, headers=headers)
        assert sale.status_code == 201

        report = client.get("/api/v1/reports/summary", params=params, headers=headers).json()
        assert money(report["revenue"]) == Decimal("1180.00")
        assert money(report["gst_collected"]) == Decimal("180.00")
        assert report["invoice_count"] == 1
        assert report["bookings_completed"] == 1
        assert money(report["net"]) == Decimal("1000.00")

    def test_inverted_range(self, client, headers):
        response = client.get(
            "/api/v1/reports/summary",
            params={"start_date": "2026-02-01", "end_date": "2026-01-01"},
            headers=headers,
        )
        assert response.status_code == 400
