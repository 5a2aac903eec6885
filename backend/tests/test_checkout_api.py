from datetime import date, timedelta
from decimal import Decimal

import pytest


def money(value):
    return Decimal(str(value))


def checkout(client, headers, customer, service, **extra):
    payload = {
        "customer_id": customer["id"],
        "lines": [{"item_type": "service", "item_id": service["id"]}],
        "payment_method": "cash",
    }
    payload.update(extra)
    return client.post("/api/v1/checkout/finalize", json=payload, headers=headers)


def points_of(client, headers, customer):
    return client.get(f"/api/v1/loyalty/customers/{customer['id']}", headers=headers).json()["points"]


class TestFinalize:
    def test_redeem_and_earn_points(self, client, headers, customer, service):
        # 1000 + 18% GST = 1180; cap = min(590, balance 100)
        response = checkout(client, headers, customer, service, redeem_points=50)
        assert response.status_code == 201, response.text
        body = response.json()
        totals = body["totals"]
        assert money(totals["gst_amount"]) == Decimal("180.00")
        assert totals["max_redeemable_points"] == 100
        assert money(totals["loyalty_discount"]) == Decimal("50.00")
        assert money(totals["total"]) == Decimal("1130.00")
        assert totals["points_earned"] == 1130
        assert body["points_balance"] == 100 - 50 + 1130
        assert body["booking_id"] is not None
        assert body["invoice_number"] == f"INV-{date.today().strftime('%Y%m%d')}-001"
        assert body["replayed"] is False

        updated = client.get(f"/api/v1/customers/{customer['id']}", headers=headers).json()
        assert updated["total_visits"] == 1
        assert money(updated["total_spent"]) == Decimal("1130.00")
        assert updated["last_visit"] is not None

        txns = client.get(
            "/api/v1/loyalty/transactions",
            params={"customer_id": customer["id"], "type": "redeemed"},
            headers=headers,
        ).json()
        assert len(txns) == 1
        assert txns[0]["points"] == 50
        assert txns[0]["invoice_id"] == body["invoice_id"]

    def test_invoice_numbers_increase(self, client, headers, customer, service):
        first = checkout(client, headers, customer, service).json()
        second = checkout(client, headers, customer, service).json()
        assert first["invoice_number"].endswith("-001")
        assert second["invoice_number"].endswith("-002")

    def test_idempotent_replay(self, client, headers, customer, service):
        first = checkout(client, headers, customer, service, idempotency_key="sale-1")
        second = checkout(client, headers, customer, service, idempotency_key="sale-1")
        assert first.status_code == 201
        assert second.status_code == 201
        assert second.json()["invoice_id"] == first.json()["invoice_id"]
        assert second.json()["replayed"] is True
        assert second.json()["points_balance"] == first.json()["points_balance"]
        invoices = client.get("/api/v1/invoices/", headers=headers).json()
        assert len(invoices) == 1
        visits = client.get(f"/api/v1/customers/{customer['id']}", headers=headers).json()["total_visits"]
        assert visits == 1

    def test_redeem_over_cap_writes_nothing(self, client, headers, customer, service):
        response = checkout(client, headers, customer, service, redeem_points=101)
        assert response.status_code == 400
        assert client.get("/api/v1/invoices/", headers=headers).json() == []
        assert points_of(client, headers, customer) == 100

    def test_coupon_is_applied_and_counted(self, client, headers, customer, service):
        today = date.today()
        coupon = client.post("/api/v1/coupons/", json={
            "code": "save10",
            "name": "Ten off",
            "discount_type": "percentage",
            "discount_value": "10",
            "valid_from": (today - timedelta(days=1)).isoformat(),
            "valid_until": (today + timedelta(days=30)).isoformat(),
        }, headers=headers)
        assert coupon.status_code == 201
        assert coupon.json()["code"] == "SAVE10"

        response = checkout(client, headers, customer, service, coupon_code="Save10")
        assert response.status_code == 201, response.text
        totals = response.json()["totals"]
        assert money(totals["coupon_discount"]) == Decimal("100.00")
        assert money(totals["total"]) == Decimal("1062.00")

        stored = client.get(f"/api/v1/coupons/{coupon.json()['id']}", headers=headers).json()
        assert stored["used_count"] == 1

    def test_unknown_coupon(self, client, headers, customer, service):
        response = checkout(client, headers, customer, service, coupon_code="NOPE")
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid coupon code or not applicable for this order amount"

    def test_gift_card_is_debited(self, client, headers, customer, service):
        card = client.post("/api/v1/gift-cards/", json={"amount": "500"}, headers=headers).json()
        response = checkout(
            client, headers, customer, service,
            gift_cards=[{"code": card["code"].lower(), "amount": "200"}],
        )
        assert response.status_code == 201, response.text
        assert money(response.json()["totals"]["gift_card_total"]) == Decimal("200.00")
        assert money(response.json()["totals"]["total"]) == Decimal("980.00")
        looked_up = client.get(f"/api/v1/gift-cards/lookup/{card['code']}", headers=headers).json()
        assert money(looked_up["balance"]) == Decimal("300.00")

    def test_gift_card_over_balance(self, client, headers, customer, service):
        card = client.post("/api/v1/gift-cards/", json={"amount": "100"}, headers=headers).json()
        response = checkout(
            client, headers, customer, service,
            gift_cards=[{"code": card["code"], "amount": "150"}],
        )
        assert response.status_code == 400

    def test_product_stock_is_checked_and_decremented(self, client, headers, customer):
        product = client.post(
            "/api/v1/services/products",
            json={"name": "Hair Serum", "price": "450", "stock_quantity": 2},
            headers=headers,
        ).json()
        lines = [{"item_type": "product", "item_id": product["id"], "quantity": 3}]
        response = client.post(
            "/api/v1/checkout/finalize",
            json={"customer_id": customer["id"], "lines": lines},
            headers=headers,
        )
        assert response.status_code == 400
        assert "Insufficient stock" in response.json()["detail"]

        lines[0]["quantity"] = 2
        response = client.post(
            "/api/v1/checkout/finalize",
            json={"customer_id": customer["id"], "lines": lines},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        assert response.json()["booking_id"] is None
        products = client.get("/api/v1/services/products", headers=headers).json()
        assert products[0]["stock_quantity"] == 0

    def test_stock_is_checked_across_lines_of_same_product(self, client, headers, customer):
        product = client.post(
            "/api/v1/services/products",
            json={"name": "Hair Serum", "price": "450", "stock_quantity": 2},
            headers=headers,
        ).json()
        line = {"item_type": "product", "item_id": product["id"], "quantity": 2}
        response = client.post(
            "/api/v1/checkout/finalize",
            json={"customer_id": customer["id"], "lines": [line, dict(line)]},
            headers=headers,
        )
        assert response.status_code == 400
        assert "Insufficient stock" in response.json()["detail"]
        products = client.get("/api/v1/services/products", headers=headers).json()
        assert products[0]["stock_quantity"] == 2
        assert client.get("/api/v1/invoices/", headers=headers).json() == []

    def test_membership_line_creates_membership(self, client, headers, customer):
        plan = client.post(
            "/api/v1/memberships/plans",
            json={"name": "Gold Club", "price": "3000", "duration_months": 6},
            headers=headers,
        ).json()
        response = client.post(
            "/api/v1/checkout/finalize",
            json={"customer_id": customer["id"], "lines": [{"item_type": "membership", "item_id": plan["id"]}]},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        memberships = client.get(
            "/api/v1/memberships/customer-memberships",
            params={"customer_id": customer["id"]},
            headers=headers,
        ).json()
        assert len(memberships) == 1
        assert memberships[0]["invoice_id"] == response.json()["invoice_id"]
        assert memberships[0]["plan_name"] == "Gold Club"

    def test_unenrolled_customer_earns_nothing(self, client, headers, customer, service):
        client.post(f"/api/v1/loyalty/customers/{customer['id']}/unenroll", headers=headers)
        response = checkout(client, headers, customer, service)
        assert response.status_code == 201
        assert response.json()["totals"]["points_earned"] == 0
        assert response.json()["points_balance"] == 100

    def test_invalid_service_id(self, client, headers, customer):
        response = client.post(
            "/api/v1/checkout/finalize",
            json={"customer_id": customer["id"], "lines": [{"item_type": "service", "item_id": 999}]},
            headers=headers,
        )
        assert response.status_code == 400
        assert "999" in response.json()["detail"]

    def test_custom_line_needs_price(self, client, headers, customer):
        response = client.post(
            "/api/v1/checkout/finalize",
            json={"customer_id": customer["id"], "lines": [{"item_type": "custom", "description": "Tip"}]},
            headers=headers,
        )
        assert response.status_code == 422

    def test_other_tenant_customer_is_rejected(self, client, headers, other_headers, customer, service):
        response = checkout(client, other_headers, customer, service)
        assert response.status_code == 400


class TestQuote:
    def test_quote_writes_nothing(self, client, headers, customer, service):
        response = client.post("/api/v1/checkout/quote", json={
            "customer_id": customer["id"],
            "lines": [{"item_type": "service", "item_id": service["id"], "quantity": 2}],
            "manual_discount_percent": "5",
        }, headers=headers)
        assert response.status_code == 200, response.text
        body = response.json()
        assert money(body["totals"]["subtotal"]) == Decimal("2000.00")
        assert money(body["totals"]["manual_discount"]) == Decimal("100.00")
        assert body["points_balance"] == 100
        assert client.get("/api/v1/invoices/", headers=headers).json() == []


@pytest.fixture()
def sold_invoice(client, headers, customer, service):
    response = checkout(client, headers, customer, service)
    assert response.status_code == 201
    return response.json()


class TestInvoices:
    def test_get_invoice_with_breakdown(self, client, headers, sold_invoice):
        invoice = client.get(f"/api/v1/invoices/{sold_invoice['invoice_id']}", headers=headers).json()
        assert invoice["invoice_number"] == sold_invoice["invoice_number"]
        assert invoice["customer_name"] == "Asha Rao"
        assert len(invoice["items"]) == 1
        assert invoice["breakdown"]["cgst"] == "90.00"
        assert invoice["breakdown"]["sgst"] == "90.00"

    def test_share_token_gives_public_read(self, client, headers, sold_invoice):
        token = client.post(f"/api/v1/invoices/{sold_invoice['invoice_id']}/share-token", headers=headers).json()["share_token"]
        again = client.post(f"/api/v1/invoices/{sold_invoice['invoice_id']}/share-token", headers=headers).json()["share_token"]
        assert token == again
        shared = client.get(f"/api/v1/invoices/shared/{token}")
        assert shared.status_code == 200
        assert shared.json()["id"] == sold_invoice["invoice_id"]
        assert client.get("/api/v1/invoices/shared/not-a-token").status_code == 404

    def test_void_twice(self, client, headers, sold_invoice):
        url = f"/api/v1/invoices/{sold_invoice['invoice_id']}/void"
        assert client.post(url, headers=headers).status_code == 200
        assert client.post(url, headers=headers).status_code == 400

    def test_manual_invoice(self, client, headers, customer):
        today = date.today().isoformat()
        response = client.post("/api/v1/invoices/", json={
            "customer_id": customer["id"],
            "amount": "750",
            "invoice_date": today,
            "due_date": today,
        }, headers=headers)
        assert response.status_code == 201, response.text
        assert money(response.json()["total_amount"]) == Decimal("750.00")

    def test_checkout_invoice_with_points_cannot_be_deleted(self, client, headers, sold_invoice):
        url = f"/api/v1/invoices/{sold_invoice['invoice_id']}"
        response = client.delete(url, headers=headers)
        assert response.status_code == 400
        assert "loyalty transactions" in response.json()["detail"]
        assert client.get(url, headers=headers).status_code == 200

    def test_manual_invoice_can_be_deleted(self, client, headers, customer):
        today = date.today().isoformat()
        invoice = client.post("/api/v1/invoices/", json={
            "customer_id": customer["id"],
            "amount": "750",
            "invoice_date": today,
            "due_date": today,
        }, headers=headers).json()
        url = f"/api/v1/invoices/{invoice['id']}"
        assert client.delete(url, headers=headers).status_code == 200
        assert client.get(url, headers=headers).status_code == 404

    def test_customer_with_invoice_cannot_be_deleted(self, client, headers, customer, sold_invoice):
        response = client.delete(f"/api/v1/customers/{customer['id']}", headers=headers)
        assert response.status_code == 400
