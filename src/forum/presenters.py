def _iso(value):
    return value.isoformat() if value else None


def _author(user) -> dict | None:
    if user is None:
        return None
    return {"id": str(user.id), "username": user.username}


def category_to_dto(c) -> dict:
    return {
        "id": str(c.id),
        "name": c.name,
        "description": c.description,
        "language": c.language,
        "is_public": c.is_public,
        "topic_count": getattr(c, "topic_count", None),
        "created_at": _iso(c.created_at),
    }


def topic_to_dto(t) -> dict:
    return {
        "id": str(t.id),
        "category_id": str(t.category_id),
        "title": t.title,
        "content": t.content,
        "language": t.language,
        "is_public": t.is_public,
        "is_pinned": t.is_pinned,
        "is_locked": t.is_locked,
        "post_count": getattr(t, "post_count", None),
        "author": _author(t.created_by),
        "last_activity_at": _iso(t.last_activity_at),
        "created_at": _iso(t.created_at),
    }


def post_to_dto(p) -> dict:
    return {
        "id": str(p.id),
        "topic_id": str(p.topic_id),
        "parent_post_id": str(p.parent_post_id) if p.parent_post_id else None,
        "content": p.content,
        "language": p.language,
        "is_flagged": p.is_flagged,
        "is_active": p.is_active,
        "author": _author(p.created_by),
        "created_at": _iso(p.created_at),
        "updated_at": _iso(p.updated_at),
    }
