"""Integration tests for the identity endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from identity.account.profile import UserProfile
from identity.api import admin_router, auth_router, profile_router
from identity.auth import get_auth_provider
from protean import current_domain
from protean.integrations.fastapi import register_exception_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(auth_router)
    app.include_router(profile_router)
    app.include_router(admin_router)
    register_exception_handlers(app)
    return TestClient(app)


class TestSignUpEndpoint:
    def test_sign_up(self, client):
        response = client.post(
            "/auth/sign-up",
            json={"email": "amina@example.com", "password": "karibu123", "full_name": "Amina Otieno"},
        )
        assert response.status_code == 201

        profile = current_domain.repository_for(UserProfile).get(response.json()["user_id"])
        assert profile.full_name == "Amina Otieno"

    def test_short_password(self, client):
        response = client.post(
            "/auth/sign-up",
            json={"email": "amina@example.com", "password": "123", "full_name": "Amina"},
        )
        assert response.status_code == 400

    def test_duplicate_email(self, client):
        payload = {"email": "amina@example.com", "password": "karibu123", "full_name": "Amina"}
        client.post("/auth/sign-up", json=payload)

        response = client.post("/auth/sign-up", json=payload)
        assert response.status_code == 400


class TestSignInEndpoint:
    def test_customer_lands_on_home(self, client, customer):
        response = client.post("/auth/sign-in", json={"email": "amina@example.com", "password": "karibu123"})

        assert response.status_code == 200
        data = response.json()
        assert data["access_token"]
        assert data["is_admin"] is False
        assert data["redirect"] == "/"

    def test_admin_lands_on_dashboard(self, client, admin):
        response = client.post("/auth/sign-in", json={"email": "owner@kwetustore.com", "password": "admin-pass"})

        data = response.json()
        assert data["is_admin"] is True
        assert data["redirect"] == "/admin/dashboard"

    def test_wrong_password(self, client, customer):
        response = client.post("/auth/sign-in", json={"email": "amina@example.com", "password": "nope-nope"})

        assert response.status_code == 401
        assert response.json()["detail"]["redirect"] == "/auth"


class TestSessionEndpoints:
    def test_current_session(self, client, customer, headers_for):
        response = client.get("/auth/session", headers=headers_for(customer))

        assert response.status_code == 200
        assert response.json()["email"] == "amina@example.com"

    def test_session_without_token(self, client):
        response = client.get("/auth/session")

        assert response.status_code == 401
        assert response.json()["detail"]["redirect"] == "/auth"

    def test_sign_out_revokes_token(self, client, customer, headers_for):
        response = client.post("/auth/sign-out", headers=headers_for(customer))
        assert response.status_code == 200

        assert client.get("/auth/session", headers=headers_for(customer)).status_code == 401

    def test_password_reset_redirects_to_auth_page(self, client, customer):
        response = client.post("/auth/password-reset", json={"email": "amina@example.com"})

        assert response.status_code == 200
        request = get_auth_provider().reset_requests[-1]
        assert request["email"] == "amina@example.com"
        assert request["redirect_to"].endswith("/auth")

    def test_my_profile(self, client, customer, headers_for):
        response = client.get("/profiles/me", headers=headers_for(customer))

        assert response.status_code == 200
        assert response.json()["full_name"] == "Amina Otieno"


class TestAdminRoleEndpoints:
    def test_list_admins(self, client, admin, headers_for):
        response = client.get("/admin/admins", headers=headers_for(admin))

        assert response.status_code == 200
        admins = response.json()["admins"]
        assert [a["email"] for a in admins] == ["owner@kwetustore.com"]

    def test_grant_admin(self, client, admin, customer, headers_for):
        response = client.post("/admin/admins", json={"email": "amina@example.com"}, headers=headers_for(admin))
        assert response.status_code == 201

        assert client.get("/auth/session", headers=headers_for(customer)).json()["is_admin"] is True

    def test_grant_admin_to_unknown_user(self, client, admin, headers_for):
        response = client.post("/admin/admins", json={"email": "ghost@example.com"}, headers=headers_for(admin))
        assert response.status_code == 400

    def test_customer_is_denied_and_sent_home(self, client, customer, headers_for):
        response = client.get("/admin/admins", headers=headers_for(customer))

        assert response.status_code == 403
        assert response.json()["detail"]["redirect"] == "/"
