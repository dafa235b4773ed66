from typing import Any, Dict

from noodlenook.domain.exceptions import ValidationError
from noodlenook.domain.invariants.page import assert_page_fields, normalize_content_type


def _category(value):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("Category must be a string")
    return value.strip() or None


def _flag(name, value):
    if not isinstance(value, bool):
        raise ValidationError(f"{name} must be a boolean")
    return value


def page_fields(data: Dict[str, Any], *, current=None) -> Dict[str, Any]:
    """
    Validate the editable page fields of a request body.

    Title and content are always required. When `current` (the live page)
    is given, absent optional fields keep the page's present values;
    otherwise they take the creation defaults.
    """
    fields = {
        "title": data.get("title"),
        "content": data.get("content"),
        "content_type": normalize_content_type(
            data.get("content_type", current.content_type if current else None)
        ),
        "category": _category(
            data["category"] if "category" in data else (current.category if current else None)
        ),
        "is_public": _flag(
            "is_public",
            data["is_public"] if "is_public" in data else (current.is_public if current else False),
        ),
    }

    if isinstance(fields["title"], str):
        fields["title"] = fields["title"].strip()

    assert_page_fields(
        title=fields["title"],
        content=fields["content"],
        category=fields["category"],
    )
    return fields
