def _iso(ts):
    return ts.isoformat() if ts else None


def normalize_page(page, include_content=True):
    data = {
        "id": page.id,
        "title": page.title,
        "slug": page.slug,
        "content_type": page.content_type,
        "category": page.category,
        "display_order": page.display_order,
        "author_id": page.author_id,
        "author_name": page.author_name,
        "is_published": page.is_published,
        "is_public": page.is_public,
        "created_at": _iso(page.created_at),
        "updated_at": _iso(page.updated_at),
    }

    if include_content:
        data["content"] = page.content

    return data


def normalize_revision(revision):
    return {
        "id": revision.id,
        "page_id": revision.page_id,
        "title": revision.title,
        "content": revision.content,
        "author_id": revision.author_id,
        "author_name": revision.author.username if revision.author else None,
        "created_at": _iso(revision.created_at),
    }
