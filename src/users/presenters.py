def user_to_list_dto(u) -> dict:
    return {
        "id": str(u.id),
        "username": u.username,
        "email": u.email,
        "full_name": u.full_name,
        "role": u.role,
        "status": u.status,
        "created_at": u.created_at.isoformat() if getattr(u, "created_at", None) else None,
    }


def user_to_detail_dto(u) -> dict:
    changed_by = getattr(u, "status_changed_by", None)
    return {
        "id": str(u.id),
        "username": u.username,
        "email": u.email,
        "first_name": u.first_name,
        "last_name": u.last_name,
        "full_name": u.full_name,
        "role": u.role,
        "status": u.status,
        "status_reason": u.status_reason or None,
        "status_changed_by": changed_by.username if changed_by else None,
        "status_changed_at": u.status_changed_at.isoformat() if u.status_changed_at else None,
        "preferred_language": u.preferred_language,
        "additional_languages": list(u.additional_languages or []),
        "email_notifications": u.email_notifications,
        "push_notifications": u.push_notifications,
        "is_locked": u.is_locked,
        "last_login": u.last_login.isoformat() if u.last_login else None,
        "created_at": u.created_at.isoformat() if getattr(u, "created_at", None) else None,
    }


def user_to_profile_dto(u) -> dict:
    return {
        "id": str(u.id),
        "username": u.username,
        "email": u.email,
        "first_name": u.first_name,
        "last_name": u.last_name,
        "full_name": u.full_name,
        "role": u.role,
        "preferred_language": u.preferred_language,
        "additional_languages": list(u.additional_languages or []),
        "email_notifications": u.email_notifications,
        "push_notifications": u.push_notifications,
        "last_profile_update": u.last_profile_update.isoformat() if u.last_profile_update else None,
    }
