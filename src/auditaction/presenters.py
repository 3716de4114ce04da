def audit_to_list_dto(obj) -> dict:
    return {
        "id": str(obj.id),
        "timestamp": obj.created_at.isoformat(),
        "category": obj.category,
        "action": obj.action,
        "severity": obj.severity,
        "user": obj.user.email if obj.user else None,
        "target_type": obj.target_type,
        "target_id": obj.target_id,
        "ip": obj.ip_address,
    }


def audit_to_detail_dto(obj) -> dict:
    dto = audit_to_list_dto(obj)
    dto.update(
        {
            "details": obj.details,
            "user_agent": obj.user_agent,
            "request_id": obj.request_id,
        }
    )
    return dto
