# Overview: Pytest coverage for dashboard aggregation and organization settings.

import pytest


def _create(client, tenant, **fields):
    resp = client.post("/api/products", headers=tenant["headers"], json=fields)
    assert resp.status_code == 201, resp.json
    return resp.json


class TestDashboard:

    def test_empty_org(self, client, tenant_a):
        resp = client.get("/api/dashboard", headers=tenant_a["headers"])
        assert resp.status_code == 200
        assert resp.json == {
            "totalProducts": 0,
            "totalQuantity": 0,
            "lowStockItems": [],
            "defaultLowStockThreshold": 5,
        }

    def test_totals(self, client, tenant_a):
        _create(client, tenant_a, name="A", sku="A", quantityOnHand=10)
        _create(client, tenant_a, name="B", sku="B", quantityOnHand=25)
        _create(client, tenant_a, name="C", sku="C")

        body = client.get("/api/dashboard", headers=tenant_a["headers"]).json
        assert body["totalProducts"] == 3
        assert body["totalQuantity"] == 35

    def test_default_threshold_applies_without_override(self, client, tenant_a):
        _create(client, tenant_a, name="At default", sku="D5", quantityOnHand=5)
        _create(client, tenant_a, name="Above default", sku="D6", quantityOnHand=6)

        low = client.get("/api/dashboard", headers=tenant_a["headers"]).json["lowStockItems"]
        assert [p["sku"] for p in low] == ["D5"]

    def test_product_threshold_takes_precedence(self, client, tenant_a):
        _create(client, tenant_a, name="Own higher", sku="H", quantityOnHand=8, lowStockThreshold=10)
        _create(client, tenant_a, name="Own lower", sku="L", quantityOnHand=3, lowStockThreshold=2)

        low = client.get("/api/dashboard", headers=tenant_a["headers"]).json["lowStockItems"]
        assert [p["sku"] for p in low] == ["H"]

    def test_zero_threshold_is_an_override(self, client, tenant_a):
        _create(client, tenant_a, name="Zero", sku="Z", quantityOnHand=1, lowStockThreshold=0)

        low = client.get("/api/dashboard", headers=tenant_a["headers"]).json["lowStockItems"]
        assert low == []

    def test_changing_default_changes_low_stock(self, client, tenant_a):
        _create(client, tenant_a, name="Nine", sku="N9", quantityOnHand=9)
        assert client.get("/api/dashboard", headers=tenant_a["headers"]).json["lowStockItems"] == []

        client.put("/api/settings", headers=tenant_a["headers"], json={"defaultLowStockThreshold": 10})

        body = client.get("/api/dashboard", headers=tenant_a["headers"]).json
        assert body["defaultLowStockThreshold"] == 10
        assert [p["sku"] for p in body["lowStockItems"]] == ["N9"]


class TestSettings:

    def test_get_settings(self, client, tenant_a):
        resp = client.get("/api/settings", headers=tenant_a["headers"])
        assert resp.status_code == 200
        assert resp.json["id"] == tenant_a["organization_id"]
        assert resp.json["name"] == "Org A - Acme Corp"
        assert resp.json["defaultLowStockThreshold"] == 5

    def test_update_threshold(self, client, tenant_a):
        resp = client.put("/api/settings", headers=tenant_a["headers"], json={"defaultLowStockThreshold": 12})
        assert resp.status_code == 200
        assert resp.json["defaultLowStockThreshold"] == 12
        assert resp.json["name"] == "Org A - Acme Corp"

    @pytest.mark.parametrize("payload", [
        {},
        {"defaultLowStockThreshold": None},
        {"defaultLowStockThreshold": -1},
        {"defaultLowStockThreshold": "ten"},
        {"defaultLowStockThreshold": 2.5},
        {"defaultLowStockThreshold": 3, "name": "Renamed"},
    ])
    def test_invalid_update_rejected(self, client, tenant_a, payload):
        resp = client.put("/api/settings", headers=tenant_a["headers"], json=payload)
        assert resp.status_code == 400

        current = client.get("/api/settings", headers=tenant_a["headers"]).json
        assert current["defaultLowStockThreshold"] == 5
        assert current["name"] == "Org A - Acme Corp"

    def test_token_for_missing_org(self, client, db_session):
        from stockroom.services.session_service import issue_token
        from conftest import auth_headers

        headers = auth_headers(issue_token("ghost-user", "ghost-org"))
        assert client.get("/api/settings", headers=headers).status_code == 404
        assert client.get("/api/dashboard", headers=headers).status_code == 404
