"""
Shared pytest fixtures: an app bound to in-memory SQLite, a test client
and helpers for creating users and bearer headers.
"""
import socket

import httpx
import pytest
from flask_jwt_extended import create_access_token

from noodlenook import create_app
from noodlenook.extensions import db
from noodlenook.models.page import Page
from noodlenook.models.user import User
from noodlenook.services import notifications
from noodlenook.services.settings import settings_service


@pytest.fixture()
def app():
    app = create_app("testing")

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_user(app):
    counter = {"n": 0}

    def _make(role="viewer", username=None, password="secret123"):
        counter["n"] += 1
        username = username or f"{role}{counter['n']}"

        user = User()
        user.username = username
        user.email = f"{username}@example.com"
        user.role = role
        user.set_password(password)

        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture()
def admin(make_user):
    return make_user("admin", username="alice")


@pytest.fixture()
def editor(make_user):
    return make_user("editor", username="eddie")


@pytest.fixture()
def viewer(make_user):
    return make_user("viewer", username="vera")


@pytest.fixture()
def headers():
    def _headers(user):
        token = create_access_token(identity=user.id)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def make_page(app):
    def _make(slug, *, author, title=None, content="Body text", is_published=True,
              is_public=False, category=None, display_order=0):
        page = Page()
        page.slug = slug
        page.title = title or slug.replace("-", " ").title()
        page.content = content
        page.content_type = "markdown"
        page.category = category
        page.display_order = display_order
        page.author_id = author.id if author else None
        page.is_published = is_published
        page.is_public = is_public

        db.session.add(page)
        db.session.commit()
        return page

    return _make


@pytest.fixture()
def approval_on(app, admin):
    settings_service.upsert("approval_workflow_enabled", True, actor_id=admin.id)


@pytest.fixture()
def public_dns(monkeypatch):
    """Every hostname resolves to one public address."""
    def fake_getaddrinfo(host, port, *args, **kwargs):
        return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", ("93.184.216.34", port))]

    monkeypatch.setattr(socket, "getaddrinfo", fake_getaddrinfo)


@pytest.fixture()
def webhook_transport(monkeypatch, public_dns):
    """
    Route outbound webhooks through httpx.MockTransport.

    Returns the list of requests seen; set `reply` on it to change the
    response (an httpx.Response or an exception to raise).
    """
    class Recorder(list):
        reply = httpx.Response(200)

    seen = Recorder()

    def handle(request):
        seen.append(request)
        if isinstance(seen.reply, Exception):
            raise seen.reply
        return seen.reply

    monkeypatch.setattr(
        notifications,
        "_client",
        lambda: httpx.Client(transport=httpx.MockTransport(handle), follow_redirects=False),
    )
    return seen
