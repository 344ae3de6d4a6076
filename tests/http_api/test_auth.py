# tests/http_api/test_auth.py
from datetime import timedelta

from fastapi import status

from storefront_http_api.db import models


class TestRegister:
    def test_register_returns_token_and_user(self, client):
        payload = {"name": "Ada", "email": "Ada@Example.com", "password": "correct-horse"}

        response = client.post("/auth/register", json=payload)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["user"]["email"] == "ada@example.com"
        assert data["user"]["role"] == "customer"

    def test_duplicate_email_conflicts(self, client, customer):
        payload = {"name": "Again", "email": customer.email, "password": "correct-horse"}

        response = client.post("/auth/register", json=payload)

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_short_password_is_rejected(self, client):
        response = client.post(
            "/auth/register", json={"name": "Ada", "email": "ada@example.com", "password": "short"}
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


    def test_register_mails_verification_link(self, client, db_session, mailer):
        response = client.post(
            "/auth/register", json={"name": "Ada", "email": "ada@example.com", "password": "correct-horse"}
        )

        assert response.json()["user"]["email_verified_at"] is None
        verification = db_session.query(models.EmailVerification).one()
        assert len(mailer.sent) == 1
        assert mailer.sent[0]["to"] == "ada@example.com"
        assert f"token={verification.token}" in mailer.sent[0]["body"]


class TestLogin:
    def test_login_and_me(self, client, customer):
        response = client.post(
            "/auth/login", json={"email": customer.email, "password": "secret-pass"}
        )
        assert response.status_code == status.HTTP_200_OK
        token = response.json()["access_token"]

        me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert me.status_code == status.HTTP_200_OK
        assert me.json()["id"] == customer.id

    def test_wrong_password(self, client, customer):
        response = client.post("/auth/login", json={"email": customer.email, "password": "nope"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "These credentials do not match our records."

    def test_disabled_account(self, client, make_user):
        user = make_user(email="gone@example.com", is_active=False)

        response = client.post("/auth/login", json={"email": user.email, "password": "secret-pass"})

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestAuthGuards:
    def test_missing_token(self, client):
        response = client.get("/auth/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Not authenticated"

    def test_garbage_token(self, client):
        response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Invalid or expired token"

    def test_customer_cannot_reach_admin(self, client, customer_headers):
        response = client.get("/admin/dashboard", headers=customer_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_role_is_read_from_database(self, client, db_session, customer, customer_headers):
        customer.role = models.UserRole.ADMIN
        db_session.commit()

        response = client.get("/admin/dashboard", headers=customer_headers)

        assert response.status_code == status.HTTP_200_OK


def register(client, email="ada@example.com"):
    return client.post(
        "/auth/register", json={"name": "Ada", "email": email, "password": "correct-horse"}
    )


class TestEmailVerification:
    def test_verify_marks_account_and_consumes_link(self, client, db_session):
        # Arrange
        register(client)
        token = db_session.query(models.EmailVerification).one().token

        # Act
        response = client.post("/auth/email/verify", json={"token": token})
        reused = client.post("/auth/email/verify", json={"token": token})

        # Assert
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"]["email_verified_at"] is not None
        assert db_session.query(models.EmailVerification).count() == 0
        assert reused.status_code == status.HTTP_400_BAD_REQUEST
        assert reused.json()["detail"] == "Invalid verification link."

    def test_expired_link_is_rejected(self, client, db_session):
        register(client)
        verification = db_session.query(models.EmailVerification).one()
        verification.expires_at = models.utcnow() - timedelta(minutes=1)
        db_session.commit()

        response = client.post("/auth/email/verify", json={"token": verification.token})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Verification link has expired. Please request a new one."
        assert verification.user.email_verified_at is None

    def test_resend_regenerates_expired_link(self, client, db_session, mailer):
        register(client)
        verification = db_session.query(models.EmailVerification).one()
        old_token = verification.token
        verification.expires_at = models.utcnow() - timedelta(minutes=1)
        db_session.commit()

        response = client.post("/auth/email/resend", json={"email": "ada@example.com"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "verification-link-sent"
        assert verification.token != old_token
        assert not verification.is_expired()
        assert len(mailer.sent) == 2
        assert f"token={verification.token}" in mailer.sent[-1]["body"]

    def test_resend_without_pending_verification(self, client, customer):
        response = client.post("/auth/email/resend", json={"email": customer.email})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "No pending verification found for this email."

    def test_resend_reports_mail_failure(self, client, mailer):
        register(client)
        mailer.fail = True

        response = client.post("/auth/email/resend", json={"email": "ada@example.com"})

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    def test_status_follows_the_flow(self, client, db_session):
        unknown = client.get("/auth/email/status", params={"email": "nobody@example.com"}).json()
        register(client)
        pending = client.get("/auth/email/status", params={"email": "ada@example.com"}).json()
        token = db_session.query(models.EmailVerification).one().token
        client.post("/auth/email/verify", json={"token": token})
        verified = client.get("/auth/email/status", params={"email": "ada@example.com"}).json()

        assert unknown == {"verified": False, "pending": False, "expired": False, "expires_at": None}
        assert pending["pending"] is True
        assert pending["expires_at"] is not None
        assert verified["verified"] is True
