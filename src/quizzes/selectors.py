import uuid

from django.db.models import Avg, Count, Max, Min, Prefetch, Q, QuerySet

from src.common.search import filter_by_tag, localized_search_q
from src.core.exceptions import NotFoundError
from src.core.policies import has_permission
from src.quizzes.models import Quiz, QuizAttempt, QuizOption, QuizQuestion


def active_questions(quiz: Quiz) -> QuerySet[QuizQuestion]:
    return (
        quiz.questions.filter(is_active=True)
        .prefetch_related(Prefetch("options", queryset=QuizOption.objects.order_by("order", "created_at")))
        .order_by("order", "created_at")
    )


def quiz_visible_queryset(*, user) -> QuerySet[Quiz]:
    qs = Quiz.objects.filter(is_active=True)
    if not has_permission(user, "quizzes.manage"):
        qs = qs.filter(is_public=True)
    return qs


def quiz_list(
    *,
    user,
    tag: str | None = None,
    difficulty: str | None = None,
    category: str | None = None,
    search: str | None = None,
) -> QuerySet[Quiz]:
    qs = quiz_visible_queryset(user=user).annotate(
        question_count=Count("questions", filter=Q(questions__is_active=True))
    )
    if difficulty:
        qs = qs.filter(difficulty=difficulty.upper())
    if category:
        qs = qs.filter(category__iexact=category.strip())
    if search and search.strip():
        qs = qs.filter(localized_search_q(search, "title", "description"))
    if tag and tag.strip():
        qs = filter_by_tag(qs, tag)
    return qs.order_by("-created_at")


def quiz_get(*, quiz_id: uuid.UUID, user) -> Quiz:
    try:
        return quiz_visible_queryset(user=user).get(id=quiz_id)
    except Quiz.DoesNotExist:
        raise NotFoundError(message="Quiz not found", code="QUIZ_NOT_FOUND")


def quiz_get_any(*, quiz_id: uuid.UUID) -> Quiz:
    try:
        return Quiz.objects.get(id=quiz_id, is_active=True)
    except Quiz.DoesNotExist:
        raise NotFoundError(message="Quiz not found", code="QUIZ_NOT_FOUND")


def attempt_get(*, attempt_id: uuid.UUID) -> QuizAttempt:
    try:
        return QuizAttempt.objects.select_related("quiz", "user").get(id=attempt_id)
    except QuizAttempt.DoesNotExist:
        raise NotFoundError(message="Quiz attempt not found", code="ATTEMPT_NOT_FOUND")


def attempts_for_user(*, user, quiz_id: uuid.UUID | None = None) -> QuerySet[QuizAttempt]:
    qs = QuizAttempt.objects.filter(user=user).select_related("quiz")
    if quiz_id:
        qs = qs.filter(quiz_id=quiz_id)
    return qs.order_by("-started_at")


def _completed_summary(qs: QuerySet[QuizAttempt]) -> dict:
    agg = qs.filter(is_completed=True).aggregate(
        total=Count("id"),
        passed=Count("id", filter=Q(passed=True)),
        average=Avg("percentage"),
        highest=Max("percentage"),
        lowest=Min("percentage"),
    )
    total, passed = agg["total"], agg["passed"]
    return {
        "completed_attempts": total,
        "passed_attempts": passed,
        "failed_attempts": total - passed,
        "pass_rate": round(passed / total * 100, 2) if total else 0.0,
        "average_score": round(agg["average"] or 0.0, 2),
        "highest_score": agg["highest"] or 0.0,
        "lowest_score": agg["lowest"] or 0.0,
    }


def user_quiz_statistics(*, user, quiz_id: uuid.UUID | None = None) -> dict:
    """Scores only count completed attempts; abandoned ones show up in `total_attempts`."""
    qs = QuizAttempt.objects.filter(user=user)
    if quiz_id:
        qs = qs.filter(quiz_id=quiz_id)
    return {
        "total_attempts": qs.count(),
        "quizzes_attempted": qs.values("quiz_id").distinct().count(),
        **_completed_summary(qs),
    }


def quiz_statistics(*, quiz: Quiz) -> dict:
    qs = QuizAttempt.objects.filter(quiz=quiz)
    average_time = qs.filter(is_completed=True).aggregate(value=Avg("time_taken_seconds"))["value"]
    return {
        "quiz_id": str(quiz.id),
        "total_attempts": qs.count(),
        "unique_users": qs.values("user_id").distinct().count(),
        **_completed_summary(qs),
        "average_time_seconds": round(average_time, 1) if average_time is not None else None,
    }
