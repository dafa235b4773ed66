"""Page lifecycle: create, publish, reject, update with revisions, delete."""
from noodlenook.extensions import db
from noodlenook.models.audit_log import AuditLog
from noodlenook.models.page import Page
from noodlenook.models.page_revision import PageRevision
from noodlenook.models.pending_page_edit import PendingPageEdit


PAGE = {"title": "Getting Started", "slug": "getting-started", "content": "# Hello"}


class TestCreatePage:
    def test_editor_publishes_directly_when_workflow_off(self, client, editor, headers):
        response = client.post("/api/v1/pages", json=PAGE, headers=headers(editor))

        assert response.status_code == 201
        body = response.get_json()
        assert body["is_published"] is True
        assert body["requires_approval"] is False

    def test_editor_page_waits_when_workflow_on(self, client, editor, headers, approval_on):
        response = client.post("/api/v1/pages", json=PAGE, headers=headers(editor))

        assert response.status_code == 201
        body = response.get_json()
        assert body["is_published"] is False
        assert body["requires_approval"] is True

    def test_admin_bypasses_workflow(self, client, admin, headers, approval_on):
        response = client.post("/api/v1/pages", json=PAGE, headers=headers(admin))

        assert response.get_json()["is_published"] is True

    def test_duplicate_slug_conflicts(self, client, admin, headers):
        client.post("/api/v1/pages", json=PAGE, headers=headers(admin))
        response = client.post("/api/v1/pages", json=PAGE, headers=headers(admin))

        assert response.status_code == 409

    def test_invalid_slug_rejected(self, client, admin, headers):
        response = client.post(
            "/api/v1/pages",
            json={**PAGE, "slug": "Not A Slug"},
            headers=headers(admin),
        )

        assert response.status_code == 400

    def test_viewer_cannot_create(self, client, viewer, headers):
        response = client.post("/api/v1/pages", json=PAGE, headers=headers(viewer))

        assert response.status_code == 403

    def test_anonymous_write_is_unauthorized(self, client):
        assert client.post("/api/v1/pages", json=PAGE).status_code == 401

    def test_wysiwyg_is_stored_as_html(self, client, admin, headers):
        response = client.post(
            "/api/v1/pages",
            json={**PAGE, "content_type": "wysiwyg"},
            headers=headers(admin),
        )

        assert response.get_json()["content_type"] == "html"


class TestPublishReject:
    def test_publish_unpublished_page(self, client, admin, editor, headers, make_page):
        make_page("draft", author=editor, is_published=False)

        response = client.post("/api/v1/pages/draft/publish", headers=headers(admin))

        assert response.status_code == 200
        assert Page.query.filter_by(slug="draft").one().is_published is True

    def test_publish_published_page_conflicts(self, client, admin, headers, make_page):
        make_page("live", author=admin)

        response = client.post("/api/v1/pages/live/publish", headers=headers(admin))

        assert response.status_code == 409

    def test_reject_deletes_and_records_reason(self, client, admin, editor, headers, make_page):
        page = make_page("draft", author=editor, is_published=False)
        page_id = page.id

        response = client.post(
            "/api/v1/pages/draft/reject",
            json={"reason": "Off topic"},
            headers=headers(admin),
        )

        assert response.status_code == 200
        assert Page.query.filter_by(slug="draft").first() is None

        entry = AuditLog.query.filter_by(action="page.reject", entity_id=page_id).one()
        assert entry.payload["reason"] == "Off topic"

    def test_reject_published_page_conflicts(self, client, admin, headers, make_page):
        make_page("live", author=admin)

        response = client.post("/api/v1/pages/live/reject", headers=headers(admin))

        assert response.status_code == 409

    def test_editor_lists_only_own_unpublished(self, client, editor, make_user, headers, make_page):
        other = make_user("editor", username="olga")
        make_page("mine", author=editor, is_published=False)
        make_page("theirs", author=other, is_published=False)

        response = client.get("/api/v1/pages/unpublished/list", headers=headers(editor))

        assert [p["slug"] for p in response.get_json()] == ["mine"]


class TestUpdatePage:
    def test_direct_update_snapshots_previous_content(self, client, admin, headers, make_page):
        make_page("guide", author=admin, title="Old", content="old body")

        response = client.put(
            "/api/v1/pages/guide",
            json={"title": "New", "content": "new body"},
            headers=headers(admin),
        )

        assert response.status_code == 200
        assert response.get_json()["requires_approval"] is False

        page = Page.query.filter_by(slug="guide").one()
        assert (page.title, page.content) == ("New", "new body")

        revisions = PageRevision.query.filter_by(page_id=page.id).all()
        assert [(r.title, r.content, r.author_id) for r in revisions] == [("Old", "old body", admin.id)]

    def test_gated_update_leaves_page_untouched(self, client, admin, editor, headers, make_page, approval_on):
        page = make_page("guide", author=admin, title="Old", content="old body")

        for body in ("first try", "second try"):
            response = client.put(
                "/api/v1/pages/guide",
                json={"title": "Proposed", "content": body},
                headers=headers(editor),
            )
            assert response.status_code == 200
            assert response.get_json()["requires_approval"] is True

        db.session.expire_all()
        page = db.session.get(Page, page.id)
        assert (page.title, page.content) == ("Old", "old body")
        assert PageRevision.query.count() == 0

        edits = PendingPageEdit.query.filter_by(page_id=page.id, editor_id=editor.id).all()
        assert len(edits) == 1
        assert edits[0].content == "second try"

    def test_slug_cannot_change(self, client, admin, headers, make_page):
        make_page("guide", author=admin)

        response = client.put(
            "/api/v1/pages/guide",
            json={"slug": "renamed", "title": "T", "content": "c"},
            headers=headers(admin),
        )

        assert response.status_code == 400

    def test_stale_if_unmodified_since_conflicts(self, client, admin, headers, make_page):
        make_page("guide", author=admin)

        response = client.put(
            "/api/v1/pages/guide",
            json={"title": "T", "content": "c"},
            headers={**headers(admin), "If-Unmodified-Since": "Mon, 01 Jan 2001 00:00:00 GMT"},
        )

        assert response.status_code == 409

    def test_revisions_listed_newest_first(self, client, admin, headers, make_page):
        make_page("guide", author=admin, title="v1", content="one")
        for n in (2, 3):
            client.put(
                "/api/v1/pages/guide",
                json={"title": f"v{n}", "content": "body"},
                headers=headers(admin),
            )

        response = client.get("/api/v1/pages/guide/revisions", headers=headers(admin))

        assert [r["title"] for r in response.get_json()] == ["v2", "v1"]


class TestDeleteAndReorder:
    def test_delete_cascades_history(self, client, admin, editor, headers, make_page, approval_on):
        make_page("guide", author=admin)
        client.put("/api/v1/pages/guide", json={"title": "A", "content": "a"}, headers=headers(admin))
        client.put("/api/v1/pages/guide", json={"title": "B", "content": "b"}, headers=headers(editor))

        response = client.delete("/api/v1/pages/guide", headers=headers(admin))

        assert response.status_code == 200
        assert Page.query.count() == 0
        assert PageRevision.query.count() == 0
        assert PendingPageEdit.query.count() == 0

    def test_reorder_sets_display_order_without_revision(self, client, admin, headers, make_page):
        make_page("guide", author=admin)

        response = client.put(
            "/api/v1/pages/order/guide",
            json={"display_order": 5},
            headers=headers(admin),
        )

        assert response.status_code == 200
        assert response.get_json()["display_order"] == 5
        assert PageRevision.query.count() == 0

    def test_reorder_rejects_negative(self, client, admin, headers, make_page):
        make_page("guide", author=admin)

        response = client.put(
            "/api/v1/pages/order/guide",
            json={"display_order": -1},
            headers=headers(admin),
        )

        assert response.status_code == 400
