"""Tests for login and the protected endpoint."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from catalog.main import create_app
from catalog.services.login import CoinFlipVerifier, CredentialVerifier, StaticVerifier
from catalog.services.tokens import TokenSigningError
from tests.conftest import TEST_SUBJECT


class TestProtected:
    def test_without_header(self, client):
        """A missing token gives 401."""
        response = client.get("/protected")
        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized"}

    def test_with_valid_access_token(self, client, auth_headers):
        """A valid access token returns its subject."""
        response = client.get("/protected", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == TEST_SUBJECT

    def test_with_refresh_token(self, client, token_service):
        """Refresh tokens open the route too, with a lowercase scheme."""
        token = token_service.issue_refresh_token(77)
        response = client.get("/protected", headers={"Authorization": f"bearer {token}"})
        assert response.status_code == 200
        assert response.json() == 77

    def test_with_expired_token(self, client, auth_headers, clock):
        """An expired token gives the generic 401."""
        clock.advance(timedelta(minutes=15))
        response = client.get("/protected", headers=auth_headers)
        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized"}

    def test_post_protected_is_not_routed(self, client):
        """Only GET /protected is guarded; other methods hit routing."""
        response = client.post("/protected")
        assert response.status_code == 405

    @pytest.mark.asyncio
    async def test_async_auth_gate(self, async_client, auth_headers):
        """The gate behaves the same over the async client."""
        response = await async_client.get("/protected")
        assert response.status_code == 401

        response = await async_client.get("/protected", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == TEST_SUBJECT


class TestLogin:
    def test_login_success(self, client, token_service):
        """Login returns a verifiable token pair."""
        response = client.post("/login")
        assert response.status_code == 200

        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == 15 * 60
        assert token_service.verify_token(data["access"]) == TEST_SUBJECT
        assert token_service.verify_token(data["refresh"]) == TEST_SUBJECT

    def test_login_token_opens_protected(self, client):
        """The issued access token opens /protected."""
        access = client.post("/login").json()["access"]
        response = client.get("/protected", headers={"Authorization": f"Bearer {access}"})
        assert response.status_code == 200
        assert response.json() == TEST_SUBJECT

    def test_login_rejected(self, test_settings, token_service):
        """A failed credential check gives 401."""
        app = create_app(
            test_settings,
            token_service=token_service,
            credential_verifier=StaticVerifier(False),
        )
        response = TestClient(app).post("/login")
        assert response.status_code == 401
        assert response.json() == {"message": "Invalid credentials"}

    def test_login_subject_from_settings(self, test_settings, token_service):
        """Tokens are issued for the configured subject."""
        settings = test_settings.model_copy(update={"login_subject_id": 5})
        app = create_app(
            settings, token_service=token_service, credential_verifier=StaticVerifier(True)
        )
        access = TestClient(app).post("/login").json()["access"]
        assert token_service.verify_token(access) == 5

    def test_signing_failure_is_internal_error(self, client, token_service, monkeypatch):
        """A signing failure gives a generic 500."""
        def broken(subject):
            raise TokenSigningError("boom")

        monkeypatch.setattr(token_service, "issue_token_pair", broken)
        response = client.post("/login")
        assert response.status_code == 500
        assert response.json() == {"message": "Something went wrong"}
        assert "boom" not in response.text


class TestCredentialVerifiers:
    def test_static_verifier(self):
        """StaticVerifier always returns its fixed answer."""
        assert StaticVerifier(True).verify() is True
        assert StaticVerifier(False).verify() is False

    def test_coin_flip_gives_both_outcomes(self):
        """The coin flip yields both outcomes."""
        import random

        verifier = CoinFlipVerifier(random.Random(1234))
        outcomes = {verifier.verify() for _ in range(64)}
        assert outcomes == {True, False}

    def test_verifiers_satisfy_protocol(self):
        """Both verifiers satisfy CredentialVerifier."""
        assert isinstance(StaticVerifier(True), CredentialVerifier)
        assert isinstance(CoinFlipVerifier(), CredentialVerifier)
