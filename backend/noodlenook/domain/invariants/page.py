import re

from noodlenook.domain.exceptions import InvariantViolation

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

CONTENT_TYPES = {"markdown", "html"}
# The rich-text editor labels its output "wysiwyg"; it is stored as html
CONTENT_TYPE_ALIASES = {"wysiwyg": "html"}

MAX_TITLE_LENGTH = 255
MAX_CATEGORY_LENGTH = 100

# Fields an update or pending edit may change; slug and display_order are excluded
EDITABLE_FIELDS = ("title", "content", "content_type", "category", "is_public")


def normalize_content_type(content_type):
    if content_type is None:
        return "markdown"
    value = CONTENT_TYPE_ALIASES.get(content_type, content_type)
    if value not in CONTENT_TYPES:
        raise InvariantViolation(f"Unsupported content type: {content_type}")
    return value


def assert_slug(slug):
    if not isinstance(slug, str) or not SLUG_PATTERN.match(slug):
        raise InvariantViolation(
            "Slug must be lowercase letters, digits and single hyphens"
        )
    if len(slug) > MAX_TITLE_LENGTH:
        raise InvariantViolation("Slug is too long")


def assert_page_fields(*, title, content, category=None):
    if not isinstance(title, str) or not title.strip():
        raise InvariantViolation("Title is required")
    if len(title) > MAX_TITLE_LENGTH:
        raise InvariantViolation("Title is too long")

    if not isinstance(content, str) or not content.strip():
        raise InvariantViolation("Content is required")

    if category is not None:
        if not isinstance(category, str):
            raise InvariantViolation("Category must be a string")
        if len(category) > MAX_CATEGORY_LENGTH:
            raise InvariantViolation("Category is too long")


def assert_display_order(display_order):
    # bool is an int subclass; reject it explicitly
    if isinstance(display_order, bool) or not isinstance(display_order, int) or display_order < 0:
        raise InvariantViolation("display_order must be a non-negative number")


def assert_page(page):
    """Whole-row check, run before every commit that touches a page."""
    assert_slug(page.slug)
    assert_page_fields(title=page.title, content=page.content, category=page.category)
    normalize_content_type(page.content_type)
    assert_display_order(page.display_order)
