"""Tests for sign-in, sessions and invitations."""

import datetime

from release_builder.models.invitation import Invitation
from release_builder.services.database import SessionLocal
from sqlalchemy.future import select
from tests.conftest import PASSWORD, auth_headers


class TestSignIn:
    async def test_sign_in(self, client, artist):
        response = await client.post("/api/auth/sign-in", json={"email": artist.email, "password": PASSWORD})
        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["email"] == artist.email

        session = await client.get(
            "/api/auth/session", headers={"Authorization": f"Bearer {body['access_token']}"}
        )
        assert session.status_code == 200
        assert session.json()["roles"] == ["regular_user"]

    async def test_wrong_password(self, client, artist):
        response = await client.post("/api/auth/sign-in", json={"email": artist.email, "password": "nope"})
        assert response.status_code == 401

    async def test_garbage_token(self, client):
        response = await client.get("/api/auth/session", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    async def test_sign_out(self, client, artist):
        response = await client.post("/api/auth/sign-out", headers=auth_headers(artist))
        assert response.status_code == 204


async def invite(client, inviter, email="new@example.com", role="regular_user"):
    return await client.post(
        "/api/auth/invitations",
        json={"email": email, "role": role, "first_name": "New", "last_name": "Person"},
        headers=auth_headers(inviter),
    )


class TestInvitations:
    async def test_regular_user_cannot_invite(self, client, artist):
        response = await invite(client, artist)
        assert response.status_code == 403

    async def test_label_admin_cannot_invite_moderators(self, client, label_admin):
        response = await invite(client, label_admin, role="moderator")
        assert response.status_code == 403

    async def test_duplicate_email(self, client, label_admin, artist):
        response = await invite(client, label_admin, email=artist.email)
        assert response.status_code == 400

    async def test_full_flow(self, client, label_admin):
        response = await invite(client, label_admin)
        assert response.status_code == 201
        token = response.json()["token"]

        verified = await client.get(f"/api/auth/invitations/{token}")
        assert verified.status_code == 200
        assert verified.json()["email"] == "new@example.com"

        # The invited user has no password yet
        response = await client.post("/api/auth/sign-in", json={"email": "new@example.com", "password": "anything"})
        assert response.status_code == 401

        response = await client.post(
            "/api/auth/confirm-invitation",
            json={"token": token, "password": "abc", "password_confirmation": "abd"},
        )
        assert response.status_code == 422
        assert response.json()["detail"] == ["Password must be at least 6 characters", "Passwords do not match"]

        response = await client.post(
            "/api/auth/confirm-invitation",
            json={"token": token, "password": "abcdef", "password_confirmation": "abcdef"},
        )
        assert response.status_code == 200
        access_token = response.json()["access_token"]

        profile = await client.get("/api/users/me/profile", headers={"Authorization": f"Bearer {access_token}"})
        assert profile.json()["full_name"] == "New Person"

        response = await client.post("/api/auth/sign-in", json={"email": "new@example.com", "password": "abcdef"})
        assert response.status_code == 200

        # Tokens are single use
        assert (await client.get(f"/api/auth/invitations/{token}")).status_code == 400

    async def test_expired_invitation(self, client, label_admin):
        token = (await invite(client, label_admin)).json()["token"]
        async with SessionLocal() as db:
            invitation = (await db.execute(select(Invitation).where(Invitation.token == token))).scalar_one()
            invitation.expires_at = datetime.datetime.now(datetime.timezone.utc) - datetime.timedelta(hours=1)
            await db.commit()

        response = await client.get(f"/api/auth/invitations/{token}")
        assert response.status_code == 400

    async def test_unknown_invitation(self, client):
        assert (await client.get("/api/auth/invitations/does-not-exist")).status_code == 404
