import pytest


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_missing_tenant_header_is_unauthorized(client, tenant):
    response = client.get("/api/v1/customers/")
    assert response.status_code == 401


def test_unknown_tenant_is_forbidden(client, tenant):
    response = client.get("/api/v1/customers/", headers={"X-Tenant-ID": "nobody"})
    assert response.status_code == 403
    assert response.json()["detail"] == "Tenant not found or inactive"


def test_duplicate_tenant_id(client, tenant):
    response = client.post("/api/v1/tenants/", json={"id": tenant["id"], "name": "Again"})
    assert response.status_code == 409


def test_tenant_gets_default_loyalty_settings(client, headers):
    response = client.get("/api/v1/loyalty/settings", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["is_active"] is True
    assert body["max_redemption_percent"] == 50
    assert body["welcome_bonus"] == 100
    assert body["points_validity_days"] == 45


def test_update_current_tenant(client, headers):
    response = client.patch("/api/v1/tenants/current", json={"sms_enabled": True, "sender_id": "GLOWST"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["sms_enabled"] is True


class TestCustomers:
    def test_create_enrolls_and_awards_welcome_bonus(self, client, headers, customer):
        assert customer["loyalty_enrolled"] is True
        response = client.get(f"/api/v1/loyalty/customers/{customer['id']}", headers=headers)
        assert response.status_code == 200
        assert response.json()["points"] == 100
        assert response.json()["tier"] == "bronze"

    def test_duplicate_phone_in_same_tenant(self, client, headers, customer):
        response = client.post(
            "/api/v1/customers/",
            json={"name": "Someone Else", "phone": customer["phone"]},
            headers=headers,
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "Customer with this phone number already exists"

    @pytest.mark.parametrize("spelling", ["98765 43210", "+91 9876543210", "098765-43210"])
    def test_duplicate_phone_in_other_spelling(self, client, headers, customer, spelling):
        response = client.post(
            "/api/v1/customers/",
            json={"name": "Someone Else", "phone": spelling},
            headers=headers,
        )
        assert response.status_code == 409

    def test_phone_is_stored_as_digits(self, client, headers):
        response = client.post("/api/v1/customers/", json={"name": "Meera", "phone": "+91 90000-00001"}, headers=headers)
        assert response.status_code == 201
        assert response.json()["phone"] == "9000000001"

    def test_same_phone_allowed_in_other_tenant(self, client, other_headers, customer):
        response = client.post(
            "/api/v1/customers/",
            json={"name": "Asha R", "phone": customer["phone"]},
            headers=other_headers,
        )
        assert response.status_code == 201

    def test_short_phone_is_rejected(self, client, headers):
        response = client.post("/api/v1/customers/", json={"name": "Bad", "phone": "12345"}, headers=headers)
        assert response.status_code == 422

    def test_customers_are_isolated_per_tenant(self, client, other_headers, customer):
        response = client.get(f"/api/v1/customers/{customer['id']}", headers=other_headers)
        assert response.status_code == 404
        assert client.get("/api/v1/customers/", headers=other_headers).json() == []

    def test_search(self, client, headers, customer):
        client.post("/api/v1/customers/", json={"name": "Vikram", "phone": "9123456780"}, headers=headers)
        response = client.get("/api/v1/customers/", params={"search": "asha"}, headers=headers)
        assert [c["name"] for c in response.json()] == ["Asha Rao"]

    def test_find_or_create(self, client, headers, customer):
        found = client.post(
            "/api/v1/customers/find-or-create",
            json={"name": "Ignored", "phone": customer["phone"]},
            headers=headers,
        )
        assert found.status_code == 200
        assert found.json()["id"] == customer["id"]
        created = client.post(
            "/api/v1/customers/find-or-create",
            json={"name": "Meera", "phone": "9000000001"},
            headers=headers,
        )
        assert created.status_code == 200
        assert created.json()["id"] != customer["id"]

    def test_update_and_delete(self, client, headers, customer):
        response = client.put(f"/api/v1/customers/{customer['id']}", json={"notes": "Prefers mornings"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["notes"] == "Prefers mornings"
        response = client.delete(f"/api/v1/customers/{customer['id']}", headers=headers)
        assert response.status_code == 204
        assert client.get(f"/api/v1/customers/{customer['id']}", headers=headers).status_code == 404

    def test_stats(self, client, headers, customer):
        response = client.get("/api/v1/customers/stats", headers=headers)
        assert response.status_code == 200
        assert response.json()["total_customers"] == 1
