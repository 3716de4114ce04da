def _iso(value):
    return value.isoformat() if value else None


def history_to_dto(h) -> dict:
    return {
        "id": str(h.id),
        "moderator": h.moderator.username if h.moderator else None,
        "content_type": h.content_type,
        "content_id": str(h.content_id) if h.content_id else None,
        "action_type": h.action_type,
        "reason": h.reason,
        "previous_status": h.previous_status or None,
        "new_status": h.new_status or None,
        "automated": h.automated,
        "confidence_score": h.confidence_score,
        "bulk_action_id": str(h.bulk_action_id) if h.bulk_action_id else None,
        "affected_count": h.affected_count,
        "created_at": _iso(h.created_at),
    }


def report_to_dto(r) -> dict:
    return {
        "id": str(r.id),
        "content_type": r.content_type,
        "content_id": str(r.content_id),
        "reporter": r.reporter.username,
        "reason": r.reason,
        "description": r.description,
        "is_resolved": r.is_resolved,
        "resolved_by": r.resolved_by.username if r.resolved_by else None,
        "resolution_action": r.resolution_action or None,
        "resolution_notes": r.resolution_notes or None,
        "reported_at": _iso(r.reported_at),
        "resolved_at": _iso(r.resolved_at),
    }


def flagged_post_to_dto(p) -> dict:
    return {
        "id": str(p.id),
        "topic_id": str(p.topic_id),
        "topic_title": p.topic.title,
        "content": p.content,
        "author": p.created_by.username if p.created_by else None,
        "flagged_by": p.flagged_by.username if p.flagged_by else None,
        "flag_reason": p.flag_reason,
        "created_at": _iso(p.created_at),
    }
