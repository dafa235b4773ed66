"""Approval workflow for edits to existing pages."""
import pytest

from noodlenook.extensions import db
from noodlenook.models.page import Page
from noodlenook.models.page_revision import PageRevision
from noodlenook.models.pending_page_edit import PendingPageEdit


@pytest.fixture()
def submitted(client, admin, editor, headers, make_page, approval_on):
    make_page("guide", author=admin, title="Original", content="original body")

    response = client.put(
        "/api/v1/pages/guide",
        json={"title": "Proposed", "content": "proposed body", "category": "howto"},
        headers=headers(editor),
    )
    return response.get_json()["pending_edit"]


class TestListing:
    def test_admin_sees_all_pending(self, client, admin, headers, submitted):
        response = client.get("/api/v1/pending-edits", headers=headers(admin))

        assert [e["id"] for e in response.get_json()] == [submitted["id"]]

    def test_other_editor_sees_none(self, client, make_user, headers, submitted):
        other = make_user("editor", username="olga")

        response = client.get("/api/v1/pending-edits", headers=headers(other))

        assert response.get_json() == []

    def test_detail_includes_current_fields(self, client, editor, headers, submitted):
        response = client.get(f"/api/v1/pending-edits/{submitted['id']}", headers=headers(editor))

        body = response.get_json()
        assert body["title"] == "Proposed"
        assert body["current_title"] == "Original"
        assert body["editor_name"] == "eddie"

    def test_detail_forbidden_for_other_editor(self, client, make_user, headers, submitted):
        other = make_user("editor", username="olga")

        response = client.get(f"/api/v1/pending-edits/{submitted['id']}", headers=headers(other))

        assert response.status_code == 403


class TestReview:
    def test_approve_applies_and_snapshots(self, client, admin, editor, headers, submitted):
        response = client.post(
            f"/api/v1/pending-edits/{submitted['id']}/approve",
            headers=headers(admin),
        )

        assert response.status_code == 200
        assert response.get_json()["pending_edit"]["status"] == "approved"

        db.session.expire_all()
        page = Page.query.filter_by(slug="guide").one()
        assert (page.title, page.content, page.category) == ("Proposed", "proposed body", "howto")

        revision = PageRevision.query.filter_by(page_id=page.id).one()
        assert (revision.title, revision.content) == ("Original", "original body")
        assert revision.author_id == editor.id

        edit = db.session.get(PendingPageEdit, submitted["id"])
        assert edit.reviewed_by == admin.id
        assert edit.reviewed_at is not None

    def test_reject_keeps_page(self, client, admin, headers, submitted):
        response = client.post(
            f"/api/v1/pending-edits/{submitted['id']}/reject",
            json={"reason": "Needs sources"},
            headers=headers(admin),
        )

        assert response.status_code == 200
        body = response.get_json()["pending_edit"]
        assert body["status"] == "rejected"
        assert body["rejection_reason"] == "Needs sources"

        db.session.expire_all()
        assert Page.query.filter_by(slug="guide").one().title == "Original"
        assert PageRevision.query.count() == 0

    def test_second_review_is_not_found(self, client, admin, headers, submitted):
        client.post(f"/api/v1/pending-edits/{submitted['id']}/approve", headers=headers(admin))

        response = client.post(
            f"/api/v1/pending-edits/{submitted['id']}/reject",
            headers=headers(admin),
        )

        assert response.status_code == 404

    def test_editor_cannot_approve(self, client, editor, headers, submitted):
        response = client.post(
            f"/api/v1/pending-edits/{submitted['id']}/approve",
            headers=headers(editor),
        )

        assert response.status_code == 403

    def test_resubmit_after_rejection_opens_new_edit(self, client, admin, editor, headers, submitted):
        client.post(f"/api/v1/pending-edits/{submitted['id']}/reject", headers=headers(admin))

        response = client.put(
            "/api/v1/pages/guide",
            json={"title": "Again", "content": "again"},
            headers=headers(editor),
        )

        assert response.get_json()["pending_edit"]["id"] != submitted["id"]
        assert PendingPageEdit.query.count() == 2


class TestWithdraw:
    def test_owner_deletes_pending_edit(self, client, editor, headers, submitted):
        response = client.delete(f"/api/v1/pending-edits/{submitted['id']}", headers=headers(editor))

        assert response.status_code == 200
        assert PendingPageEdit.query.count() == 0

    def test_reviewed_edit_cannot_be_deleted(self, client, admin, headers, submitted):
        client.post(f"/api/v1/pending-edits/{submitted['id']}/approve", headers=headers(admin))

        response = client.delete(f"/api/v1/pending-edits/{submitted['id']}", headers=headers(admin))

        assert response.status_code == 409
