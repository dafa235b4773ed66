"""Pure domain rules: approval gate, lifecycle guards, field invariants."""
from types import SimpleNamespace

import pytest

from noodlenook.domain.approval import requires_approval
from noodlenook.domain.exceptions import ConflictError, InvariantViolation, NotFoundError
from noodlenook.domain.invariants.page import assert_display_order, assert_slug, normalize_content_type
from noodlenook.domain.lifecycle.page import (
    PUBLISHED,
    REJECTED_PAGE,
    UNPUBLISHED,
    assert_edit_transition,
    assert_page_transition,
)
from noodlenook.domain.visibility import can_view


def _user(role, user_id="u1"):
    return SimpleNamespace(id=user_id, role=role)


def _page(is_published=True, is_public=False, author_id="someone"):
    return SimpleNamespace(is_published=is_published, is_public=is_public, author_id=author_id)


@pytest.mark.parametrize("role, gating, expected", [
    ("admin", True, False),
    ("admin", False, False),
    ("editor", True, True),
    ("editor", False, False),
])
def test_requires_approval(role, gating, expected):
    assert requires_approval(_user(role), gating_active=gating) is expected


def test_unpublished_page_can_be_published_or_rejected():
    assert_page_transition(from_state=UNPUBLISHED, to_state=PUBLISHED)
    assert_page_transition(from_state=UNPUBLISHED, to_state=REJECTED_PAGE)


def test_published_page_has_no_transitions():
    with pytest.raises(ConflictError, match="already published"):
        assert_page_transition(from_state=PUBLISHED, to_state=REJECTED_PAGE)


def test_reviewed_edit_is_final():
    with pytest.raises(NotFoundError, match="already reviewed"):
        assert_edit_transition(from_status="approved", to_status="rejected")


def test_can_view_matches_role_rules():
    draft = _page(is_published=False, author_id="u1")

    assert can_view(draft, _user("editor", "u1")) is True
    assert can_view(draft, _user("editor", "u2")) is False
    assert can_view(draft, _user("viewer", "u1")) is False
    assert can_view(draft, _user("admin", "u9")) is True
    assert can_view(_page(is_public=True), None) is True
    assert can_view(_page(is_public=False), None) is False


@pytest.mark.parametrize("slug", ["hello", "hello-world", "v2-notes"])
def test_valid_slugs(slug):
    assert_slug(slug)


@pytest.mark.parametrize("slug", ["Hello", "hello world", "-lead", "trail-", "double--dash", ""])
def test_invalid_slugs(slug):
    with pytest.raises(InvariantViolation):
        assert_slug(slug)


def test_content_type_alias_and_default():
    assert normalize_content_type(None) == "markdown"
    assert normalize_content_type("wysiwyg") == "html"
    with pytest.raises(InvariantViolation):
        normalize_content_type("rtf")


@pytest.mark.parametrize("value", [-1, True, "3", 1.5])
def test_display_order_rejects_non_natural(value):
    with pytest.raises(InvariantViolation):
        assert_display_order(value)
