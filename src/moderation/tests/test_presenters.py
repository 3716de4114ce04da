from types import SimpleNamespace as NS

from src.moderation.presenters import history_to_dto, report_to_dto


def test_bulk_summary_row_has_no_content_id():
    row = NS(id="h1", moderator=NS(username="cmanager"), content_type="POST", content_id=None,
             action_type="BULK_ACTION", reason="Bulk delete", previous_status="", new_status="DELETE",
             automated=False, confidence_score=None, bulk_action_id="b1", affected_count=3, created_at=None)
    dto = history_to_dto(row)
    assert dto["content_id"] is None
    assert dto["previous_status"] is None
    assert dto["affected_count"] == 3


def test_open_report():
    report = NS(id="r1", content_type="TOPIC", content_id="t1", reporter=NS(username="member"), reason="SPAM",
                description="", is_resolved=False, resolved_by=None, resolution_action="", resolution_notes="",
                reported_at=NS(isoformat=lambda: "2026-01-08T10:00:00Z"), resolved_at=None)
    dto = report_to_dto(report)
    assert dto["resolved_by"] is None
    assert dto["resolution_action"] is None
    assert dto["reported_at"] == "2026-01-08T10:00:00Z"
