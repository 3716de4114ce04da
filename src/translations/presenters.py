def translation_to_dto(t) -> dict:
    return {
        "id": str(t.id),
        "content_type": t.content_type,
        "content_id": t.content_id,
        "language_code": t.language_code,
        "field_name": t.field_name,
        "translated_text": t.translated_text,
        "status": t.status,
        "updated_at": t.updated_at.isoformat() if t.updated_at else None,
    }
