def notification_to_dto(n) -> dict:
    return {
        "id": str(n.id),
        "type": n.type,
        "content": n.content,
        "related_url": n.related_url or None,
        "is_read": n.is_read,
        "read_at": n.read_at.isoformat() if n.read_at else None,
        "created_at": n.created_at.isoformat() if n.created_at else None,
    }
