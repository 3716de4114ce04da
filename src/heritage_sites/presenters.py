from src.common.languages import localized_text


def _iso(value):
    return value.isoformat() if value else None


def _decimal(value):
    return float(value) if value is not None else None


def site_to_list_dto(s, language: str | None = None) -> dict:
    return {
        "id": str(s.id),
        "name": localized_text(s.name, language),
        "region": s.region,
        "category": s.category or None,
        "status": s.status,
        "gps_latitude": _decimal(s.gps_latitude),
        "gps_longitude": _decimal(s.gps_longitude),
        "created_at": _iso(s.created_at),
    }


def site_to_detail_dto(s) -> dict:
    return {
        "id": str(s.id),
        "name": s.name,
        "description": s.description,
        "significance": s.significance,
        "address": s.address,
        "region": s.region,
        "gps_latitude": _decimal(s.gps_latitude),
        "gps_longitude": _decimal(s.gps_longitude),
        "status": s.status,
        "category": s.category or None,
        "ownership_type": s.ownership_type,
        "established_year": s.established_year,
        "contact_info": s.contact_info,
        "is_active": s.is_active,
        "archive_reason": s.archive_reason or None,
        "archive_date": _iso(s.archive_date),
        "created_by": str(s.created_by_id) if s.created_by_id else None,
        "updated_by": str(s.updated_by_id) if s.updated_by_id else None,
        "created_at": _iso(s.created_at),
        "updated_at": _iso(s.updated_at),
    }


def status_history_to_dto(h) -> dict:
    return {
        "id": str(h.id),
        "previous_status": h.previous_status or None,
        "new_status": h.new_status,
        "reason": h.reason,
        "notes": h.notes,
        "changed_by": h.changed_by.username if h.changed_by else None,
        "changed_at": _iso(h.changed_at),
    }


def assignment_to_dto(a) -> dict:
    return {
        "id": str(a.id),
        "site_id": str(a.site_id),
        "user_id": str(a.user_id),
        "username": a.user.username,
        "full_name": a.user.full_name,
        "status": a.status,
        "notes": a.notes,
        "assigned_by": a.assigned_by.username if a.assigned_by else None,
        "assigned_at": _iso(a.assigned_at),
    }
