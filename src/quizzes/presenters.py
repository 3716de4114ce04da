def _iso(value):
    return value.isoformat() if value else None


def quiz_to_list_dto(q) -> dict:
    return {
        "id": str(q.id),
        "title": q.title,
        "description": q.description,
        "difficulty": q.difficulty,
        "category": q.category or None,
        "tags": list(q.tags or []),
        "passing_score_percentage": q.passing_score_percentage,
        "time_limit_minutes": q.time_limit_minutes,
        "max_attempts": q.max_attempts,
        "is_public": q.is_public,
        "question_count": getattr(q, "question_count", None),
        "created_at": _iso(q.created_at),
    }


def quiz_to_detail_dto(q, questions, *, show_answers: bool = False) -> dict:
    """Correct-answer flags and explanations are only included for quiz managers."""
    data = quiz_to_list_dto(q)
    data["questions"] = []
    for question in questions:
        item = {
            "id": str(question.id),
            "text": question.text,
            "question_type": question.question_type,
            "points": question.points,
            "order": question.order,
            "options": [],
        }
        if show_answers:
            item["explanation"] = question.explanation
        for option in question.options.all():
            opt = {"id": str(option.id), "text": option.text, "order": option.order}
            if show_answers:
                opt["is_correct"] = option.is_correct
            item["options"].append(opt)
        data["questions"].append(item)
    data["question_count"] = len(data["questions"])
    return data


def attempt_to_dto(a, *, with_results: bool = False) -> dict:
    data = {
        "id": str(a.id),
        "quiz_id": str(a.quiz_id),
        "user_id": str(a.user_id),
        "attempt_number": a.attempt_number,
        "started_at": _iso(a.started_at),
        "completed_at": _iso(a.completed_at),
        "is_completed": a.is_completed,
        "total_score": a.total_score,
        "max_score": a.max_score,
        "percentage": a.percentage,
        "passed": a.passed,
        "time_taken_seconds": a.time_taken_seconds,
    }
    if with_results:
        data["results"] = [
            {
                "question_id": str(r.question_id),
                "selected_option_id": str(r.selected_option_id) if r.selected_option_id else None,
                "is_correct": r.is_correct,
                "points_earned": r.points_earned,
            }
            for r in a.results.all()
        ]
    return data
