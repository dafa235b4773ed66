# noodlenook/normalizers/pagination.py
from typing import Callable, Any, List, Dict

from noodlenook.utils.pagination import CursorMeta


def normalize_pagination(
    items: List[Any],
    normalize_fn: Callable[[Any], Dict[str, Any]],
    *,
    cursor: CursorMeta,
) -> Dict[str, Any]:
    """Wrap a cursor-paginated result as {"items": [...], "pagination": {...}}."""
    return {
        "items": [normalize_fn(item) for item in items],
        "pagination": {
            "has_more": cursor["has_more"],
            "next_cursor": cursor["next_cursor"],
        },
    }
