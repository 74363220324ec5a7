# Overview: Pytest coverage for signup/login routes and the end-to-end tenant flow.

import pytest

from stockroom.models import Organization, User

from conftest import auth_headers


class TestSignupRoute:

    def test_signup(self, client, db_session):
        resp = client.post("/api/signup", json={
            "email": "a@x.com",
            "password": "pw123",
            "organizationName": "Acme",
        })
        assert resp.status_code == 201
        assert resp.json["userId"]
        assert resp.json["organizationId"]
        assert "password" not in resp.json

    def test_missing_field(self, client, db_session):
        resp = client.post("/api/signup", json={"email": "a@x.com", "password": "pw123"})
        assert resp.status_code == 400
        assert "organizationName" in resp.json["error"]

    def test_duplicate(self, client, db_session):
        body = {"email": "a@x.com", "password": "pw123", "organizationName": "Acme"}
        assert client.post("/api/signup", json=body).status_code == 201

        resp = client.post("/api/signup", json=body)

        assert resp.status_code == 409
        assert resp.json == {"error": "User already exists"}
        assert db_session.query(Organization).count() == 1
        assert db_session.query(User).count() == 1

    def test_non_json_body(self, client, db_session):
        resp = client.post("/api/signup", data="email=a@x.com", content_type="text/plain")
        assert resp.status_code == 400

    def test_overlong_password_rejected(self, client, db_session):
        resp = client.post("/api/signup", json={
            "email": "a@x.com", "password": "p" * 100, "organizationName": "Acme",
        })
        assert resp.status_code == 400
        assert "password" in resp.json["error"]

    def test_storage_failure_is_not_echoed(self, client, db_session, monkeypatch):
        from stockroom.services import auth_service

        def _explode(email):
            raise RuntimeError("disk I/O error at /var/lib/secret.db")

        monkeypatch.setattr(auth_service, "_email_registered", _explode)

        resp = client.post("/api/signup", json={
            "email": "a@x.com", "password": "pw123", "organizationName": "Acme",
        })
        assert resp.status_code == 500
        assert resp.json == {"error": "Internal server error"}


class TestLoginRoute:

    def test_login(self, client, db_session):
        signup = client.post("/api/signup", json={
            "email": "a@x.com", "password": "pw123", "organizationName": "Acme",
        }).json

        resp = client.post("/api/login", json={"email": "a@x.com", "password": "pw123"})

        assert resp.status_code == 200
        assert resp.json["token"]
        assert resp.json["userId"] == signup["userId"]
        assert resp.json["organizationId"] == signup["organizationId"]

    def test_unknown_email_and_wrong_password_look_the_same(self, client, db_session):
        client.post("/api/signup", json={"email": "a@x.com", "password": "pw123", "organizationName": "Acme"})

        unknown = client.post("/api/login", json={"email": "nobody@x.com", "password": "pw123"})
        wrong = client.post("/api/login", json={"email": "a@x.com", "password": "nope"})

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json == wrong.json == {"error": "Invalid credentials"}

    def test_overlong_password_is_invalid_credentials(self, client, db_session):
        client.post("/api/signup", json={"email": "a@x.com", "password": "pw123", "organizationName": "Acme"})

        resp = client.post("/api/login", json={"email": "a@x.com", "password": "p" * 100})

        assert resp.status_code == 401
        assert resp.json == {"error": "Invalid credentials"}

    @pytest.mark.parametrize("body", [{}, {"email": "a@x.com"}, {"password": "pw123"}])
    def test_missing_fields(self, client, db_session, body):
        assert client.post("/api/login", json=body).status_code == 400


class TestEndToEnd:

    def test_signup_login_product_dashboard(self, client, db_session):
        signup = client.post("/api/signup", json={
            "email": "a@x.com", "password": "pw123", "organizationName": "Acme",
        })
        assert signup.status_code == 201
        user_id = signup.json["userId"]
        org_id = signup.json["organizationId"]

        login = client.post("/api/login", json={"email": "a@x.com", "password": "pw123"})
        assert login.status_code == 200
        assert login.json["userId"] == user_id
        assert login.json["organizationId"] == org_id
        headers = auth_headers(login.json["token"])

        created = client.post("/api/products", headers=headers, json={
            "name": "Widget",
            "sku": "W1",
            "quantityOnHand": 3,
            "lowStockThreshold": 5,
        })
        assert created.status_code == 201
        product = created.json
        assert product["organizationId"] == org_id
        assert product["quantityOnHand"] <= product["lowStockThreshold"]

        dashboard = client.get("/api/dashboard", headers=headers)
        assert dashboard.status_code == 200
        assert dashboard.json["totalProducts"] == 1
        assert dashboard.json["totalQuantity"] == 3
        assert [p["id"] for p in dashboard.json["lowStockItems"]] == [product["id"]]
