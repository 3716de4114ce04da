def document_to_dto(d) -> dict:
    return {
        "id": str(d.id),
        "title": d.title,
        "description": d.description,
        "author": d.author,
        "document_type": d.document_type,
        "tags": list(d.tags or []),
        "language": d.language,
        "heritage_site_id": str(d.heritage_site_id) if d.heritage_site_id else None,
        "is_public": d.is_public,
        "created_at": d.created_at.isoformat() if d.created_at else None,
        "updated_at": d.updated_at.isoformat() if d.updated_at else None,
    }
