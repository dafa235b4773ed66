from typing import Set

from noodlenook.domain.exceptions import ConflictError, NotFoundError
from noodlenook.models.pending_page_edit import PENDING, APPROVED, REJECTED

UNPUBLISHED = "unpublished"
PUBLISHED = "published"
REJECTED_PAGE = "rejected"

# Explicit allowed state transitions
ALLOWED_PAGE_TRANSITIONS: dict[str, Set[str]] = {
    UNPUBLISHED: {PUBLISHED, REJECTED_PAGE},
    PUBLISHED: set(),  # content changes go through revisions, not state changes
}

ALLOWED_EDIT_TRANSITIONS: dict[str, Set[str]] = {
    PENDING: {APPROVED, REJECTED},
    APPROVED: set(),
    REJECTED: set(),
}


def page_state(page) -> str:
    return PUBLISHED if page.is_published else UNPUBLISHED


def assert_page_transition(*, from_state: str, to_state: str) -> None:
    """
    Guards page lifecycle transitions.
    Single source of truth for publication changes.
    """
    allowed = ALLOWED_PAGE_TRANSITIONS.get(from_state, set())

    if to_state not in allowed:
        if from_state == PUBLISHED:
            raise ConflictError("Page is already published")
        raise ConflictError(f"Illegal page transition: {from_state} -> {to_state}")


def assert_edit_transition(*, from_status: str, to_status: str) -> None:
    """Pending edits move exactly once, out of `pending`."""
    allowed = ALLOWED_EDIT_TRANSITIONS.get(from_status, set())

    if to_status not in allowed:
        raise NotFoundError("Pending edit not found or already reviewed")
