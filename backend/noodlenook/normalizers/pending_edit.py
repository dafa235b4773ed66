from .page import _iso


def normalize_pending_edit(edit, include_current=False):
    data = {
        "id": edit.id,
        "page_id": edit.page_id,
        "page_slug": edit.page.slug if edit.page else None,
        "title": edit.title,
        "content": edit.content,
        "content_type": edit.content_type,
        "category": edit.category,
        "is_public": edit.is_public,
        "editor_id": edit.editor_id,
        "editor_name": edit.editor_name,
        "status": edit.status,
        "reviewed_by": edit.reviewed_by,
        "reviewed_at": _iso(edit.reviewed_at),
        "rejection_reason": edit.rejection_reason,
        "created_at": _iso(edit.created_at),
    }

    # Detail view: live page fields so reviewers can diff
    if include_current and edit.page:
        page = edit.page
        data.update({
            "current_title": page.title,
            "current_content": page.content,
            "current_content_type": page.content_type,
            "current_category": page.category,
            "current_is_public": page.is_public,
        })

    return data
