"""Invitation issue, validation, expiry and single-use redemption."""
import json
from datetime import timedelta

import httpx
import pytest

from noodlenook.application.invitations.redeem_invitation import redeem_invitation
from noodlenook.application.invitations.validate_invitation import validate_invitation
from noodlenook.domain.exceptions import NotFoundError
from noodlenook.extensions import db
from noodlenook.models.base import utc_now
from noodlenook.models.invitation import Invitation
from noodlenook.models.system_setting import SystemSetting
from noodlenook.services.settings import settings_service


def _invite(client, admin, headers, **body):
    payload = {"email": "new@example.com", "role": "editor", **body}
    return client.post("/api/v1/invitations", json=payload, headers=headers(admin))


class TestCreate:
    def test_link_invitation(self, client, admin, headers):
        response = _invite(client, admin, headers)

        assert response.status_code == 201
        body = response.get_json()
        assert len(body["token"]) == 64
        assert body["invitation_link"] == f"http://wiki.test/register?token={body['token']}"
        assert body["notification_sent"] is False
        assert body["notification_error"] is None

    def test_expires_after_seven_days(self, client, admin, headers):
        token = _invite(client, admin, headers).get_json()["token"]
        invitation = Invitation.query.filter_by(token=token).one()

        assert invitation.expires_at - invitation.created_at == timedelta(days=7)

    def test_active_duplicate_conflicts(self, client, admin, headers):
        _invite(client, admin, headers)

        assert _invite(client, admin, headers).status_code == 409

    def test_expired_invitation_is_replaced(self, client, admin, headers):
        token = _invite(client, admin, headers).get_json()["token"]
        stale = Invitation.query.filter_by(token=token).one()
        stale.expires_at = utc_now() - timedelta(days=1)
        db.session.commit()

        response = _invite(client, admin, headers)

        assert response.status_code == 201
        assert Invitation.query.filter_by(email="new@example.com").count() == 1

    def test_existing_user_email_conflicts(self, client, admin, viewer, headers):
        assert _invite(client, admin, headers, email=viewer.email).status_code == 409

    def test_invalid_role_rejected(self, client, admin, headers):
        assert _invite(client, admin, headers, role="owner").status_code == 400

    def test_non_admin_cannot_invite(self, client, editor, headers):
        assert _invite(client, editor, headers).status_code == 403


class TestNotificationFailures:
    def test_unconfigured_smtp_is_reported_not_raised(self, client, admin, headers):
        response = _invite(client, admin, headers, method="smtp")

        assert response.status_code == 201
        body = response.get_json()
        assert body["notification_sent"] is False
        assert "SMTP host" in body["notification_error"]
        assert Invitation.query.filter_by(email="new@example.com").count() == 1

    def test_failing_webhook_keeps_invitation(self, client, admin, headers, webhook_transport):
        settings_service.upsert("webhook_url", "https://hooks.example.com/invite", actor_id=admin.id)
        webhook_transport.reply = httpx.ConnectError("connection refused")

        response = _invite(client, admin, headers, method="webhook")

        assert response.status_code == 201
        body = response.get_json()
        assert body["notification_sent"] is False
        assert "Webhook request failed" in body["notification_error"]
        assert Invitation.query.count() == 1

    def test_successful_webhook(self, client, admin, headers, webhook_transport):
        settings_service.upsert("webhook_url", "https://hooks.example.com/invite", actor_id=admin.id)
        webhook_transport.reply = httpx.Response(204)

        body = _invite(client, admin, headers, method="webhook").get_json()

        assert body["notification_sent"] is True
        assert json.loads(webhook_transport[0].content)["email"] == "new@example.com"

    def test_stored_non_string_headers_are_reported(self, client, admin, headers, webhook_transport):
        settings_service.upsert("webhook_url", "https://hooks.example.com/invite", actor_id=admin.id)
        # Written straight to the table, as an older release could have
        stored = SystemSetting()
        stored.key = "webhook_headers"
        stored.value = '{"X-Token": 123}'
        db.session.add(stored)
        db.session.commit()

        response = _invite(client, admin, headers, method="webhook")

        assert response.status_code == 201
        body = response.get_json()
        assert body["notification_sent"] is False
        assert "string values" in body["notification_error"]
        assert webhook_transport == []
        assert Invitation.query.count() == 1


class TestValidateAndRedeem:
    def test_validate_returns_email_and_role(self, client, admin, headers):
        token = _invite(client, admin, headers).get_json()["token"]

        response = client.get(f"/api/v1/invitations/validate/{token}")

        assert response.get_json() == {"email": "new@example.com", "role": "editor"}

    def test_validate_fails_on_day_eight(self, client, admin, headers):
        token = _invite(client, admin, headers).get_json()["token"]

        with pytest.raises(NotFoundError):
            validate_invitation(token=token, now=utc_now() + timedelta(days=8))

    def test_unknown_token_is_not_found(self, client):
        assert client.get("/api/v1/invitations/validate/nope").status_code == 404

    def test_register_consumes_invitation_once(self, client, admin, headers):
        token = _invite(client, admin, headers).get_json()["token"]
        account = {"email": "new@example.com", "password": "secret123", "token": token}

        first = client.post("/api/v1/auth/register", json={**account, "username": "newbie"})
        second = client.post("/api/v1/auth/register", json={**account, "username": "newbie2"})

        assert first.status_code == 201
        assert first.get_json()["user"]["role"] == "editor"
        assert second.status_code == 404
        assert client.get(f"/api/v1/invitations/validate/{token}").status_code == 404

    def test_redeem_is_single_use(self, client, admin, headers):
        token = _invite(client, admin, headers).get_json()["token"]

        redeem_invitation(token=token)
        db.session.commit()

        with pytest.raises(NotFoundError):
            redeem_invitation(token=token)

    def test_register_with_mismatched_email(self, client, admin, headers):
        token = _invite(client, admin, headers).get_json()["token"]

        response = client.post(
            "/api/v1/auth/register",
            json={"username": "sneaky", "email": "other@example.com", "password": "secret123", "token": token},
        )

        assert response.status_code == 400
        # Failed registration leaves the invitation usable
        assert client.get(f"/api/v1/invitations/validate/{token}").status_code == 200


class TestListAndRevoke:
    def test_list_shows_inviter(self, client, admin, headers):
        _invite(client, admin, headers)

        response = client.get("/api/v1/invitations", headers=headers(admin))

        assert response.get_json()[0]["invited_by_name"] == "alice"
        assert "token" not in response.get_json()[0]

    def test_revoke(self, client, admin, headers):
        invitation_id = _invite(client, admin, headers).get_json()["id"]

        response = client.delete(f"/api/v1/invitations/{invitation_id}", headers=headers(admin))

        assert response.status_code == 200
        assert Invitation.query.count() == 0

    def test_revoke_unknown(self, client, admin, headers):
        assert client.delete("/api/v1/invitations/missing", headers=headers(admin)).status_code == 404
