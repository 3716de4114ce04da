from datetime import datetime, timezone
from types import SimpleNamespace

from src.quizzes.presenters import attempt_to_dto, quiz_to_detail_dto


class _Rel(list):
    def all(self):
        return self


def _quiz():
    return SimpleNamespace(
        id="quiz-1",
        title={"en": "Kings of Rwanda"},
        description={},
        difficulty="BEGINNER",
        category="",
        tags=["history"],
        passing_score_percentage=70,
        time_limit_minutes=None,
        max_attempts=0,
        is_public=True,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def _questions():
    options = _Rel([
        SimpleNamespace(id="o1", text={"en": "Nyanza"}, order=0, is_correct=True),
        SimpleNamespace(id="o2", text={"en": "Musanze"}, order=1, is_correct=False),
    ])
    return [SimpleNamespace(id="q1", text={"en": "Royal capital?"}, explanation={"en": "Nyanza"},
                            question_type="MULTIPLE_CHOICE", points=1, order=0, options=options)]


def test_detail_hides_answers_for_learners():
    dto = quiz_to_detail_dto(_quiz(), _questions())

    assert dto["question_count"] == 1
    question = dto["questions"][0]
    assert "explanation" not in question
    assert all("is_correct" not in o for o in question["options"])
    assert dto["category"] is None


def test_detail_shows_answers_for_managers():
    dto = quiz_to_detail_dto(_quiz(), _questions(), show_answers=True)
    question = dto["questions"][0]
    assert question["explanation"] == {"en": "Nyanza"}
    assert [o["is_correct"] for o in question["options"]] == [True, False]


def test_attempt_without_results():
    attempt = SimpleNamespace(id="a1", quiz_id="quiz-1", user_id="u1", attempt_number=2,
                              started_at=datetime(2024, 1, 1, tzinfo=timezone.utc), completed_at=None,
                              is_completed=False, total_score=0, max_score=0, percentage=0.0, passed=False,
                              time_taken_seconds=None)
    dto = attempt_to_dto(attempt)
    assert dto["completed_at"] is None
    assert "results" not in dto
