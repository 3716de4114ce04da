from src.common.languages import localized_text


def artifact_to_dto(a, language: str | None = None) -> dict:
    site = a.heritage_site
    return {
        "id": str(a.id),
        "name": a.name,
        "display_name": localized_text(a.name, language),
        "description": a.description,
        "category": a.category,
        "is_public": a.is_public,
        "heritage_site": {"id": str(site.id), "name": localized_text(site.name, language)},
        "created_at": a.created_at.isoformat() if a.created_at else None,
        "updated_at": a.updated_at.isoformat() if a.updated_at else None,
    }
