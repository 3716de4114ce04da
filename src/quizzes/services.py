import logging
import uuid

from django.db import transaction
from django.db.models import Max
from django.utils import timezone

from src.auditaction.models import AuditAction, AuditCategory
from src.auditaction.services import audit_action_create
from src.common.languages import validate_localized
from src.common.sanitize import sanitize_localized, sanitize_text
from src.core.exceptions import BusinessRuleError, NotFoundError, PermissionDeniedError
from src.core.policies import has_permission
from src.quizzes import selectors
from src.quizzes.models import Quiz, QuizAttempt, QuizOption, QuizQuestion, QuizResult
from src.quizzes.schemas import QuestionPayload, QuizCreatePayload, QuizUpdatePayload
from src.quizzes.scoring import score_answers
from src.users.models import User

log = logging.getLogger(__name__)


def _localized(value, field: str, required: bool = True) -> dict:
    return validate_localized(sanitize_localized(value), field=field, required=required)


def _clean_tags(tags: list[str]) -> list[str]:
    return sorted({t.strip().lower() for t in tags if t and t.strip()})


def _create_questions(quiz: Quiz, questions: list[QuestionPayload]) -> None:
    for index, q in enumerate(questions):
        question = QuizQuestion.objects.create(
            quiz=quiz,
            text=_localized(q.text, "text"),
            explanation=_localized(q.explanation, "explanation", required=False),
            question_type=q.question_type,
            points=q.points,
            order=q.order or index,
        )
        QuizOption.objects.bulk_create(
            QuizOption(
                question=question,
                text=_localized(o.text, "option"),
                is_correct=o.is_correct,
                order=o.order or position,
            )
            for position, o in enumerate(q.options)
        )


@transaction.atomic
def quiz_create(*, created_by: User, payload: QuizCreatePayload, request=None) -> Quiz:
    quiz = Quiz.objects.create(
        title=_localized(payload.title, "title"),
        description=_localized(payload.description, "description", required=False),
        passing_score_percentage=payload.passing_score_percentage,
        time_limit_minutes=payload.time_limit_minutes,
        max_attempts=payload.max_attempts,
        is_public=payload.is_public,
        tags=_clean_tags(payload.tags),
        difficulty=payload.difficulty,
        category=sanitize_text(payload.category) or "",
        created_by=created_by,
        updated_by=created_by,
    )
    _create_questions(quiz, payload.questions)

    audit_action_create(
        user=created_by,
        category=AuditCategory.QUIZ,
        action=AuditAction.QUIZ_CREATED,
        target_type="quiz",
        target_id=str(quiz.id),
        details={"questions": len(payload.questions)},
        request=request,
    )
    return quiz


@transaction.atomic
def quiz_update(*, quiz_id: uuid.UUID, updated_by: User, payload: QuizUpdatePayload, request=None) -> Quiz:
    quiz = Quiz.objects.select_for_update().filter(id=quiz_id, is_active=True).first()
    if quiz is None:
        raise NotFoundError(message="Quiz not found", code="QUIZ_NOT_FOUND")

    data = payload.dict(exclude_unset=True, exclude_none=True)
    questions = data.pop("questions", None)

    if "title" in data:
        data["title"] = _localized(data["title"], "title")
    if "description" in data:
        data["description"] = _localized(data["description"], "description", required=False)
    if "tags" in data:
        data["tags"] = _clean_tags(data["tags"])
    if "category" in data:
        data["category"] = sanitize_text(data["category"])
    for field, value in data.items():
        setattr(quiz, field, value)
    quiz.updated_by = updated_by
    quiz.save()

    if questions is not None:
        # past attempts keep pointing at the retired questions
        quiz.questions.filter(is_active=True).update(is_active=False, updated_at=timezone.now())
        _create_questions(quiz, payload.questions)

    audit_action_create(
        user=updated_by,
        category=AuditCategory.QUIZ,
        action=AuditAction.QUIZ_UPDATED,
        target_type="quiz",
        target_id=str(quiz.id),
        details={"updated_fields": list(data.keys()), "questions_replaced": questions is not None},
        request=request,
    )
    return quiz


@transaction.atomic
def quiz_delete(*, quiz_id: uuid.UUID, deleted_by: User, request=None) -> None:
    updated = Quiz.objects.filter(id=quiz_id, is_active=True).update(
        is_active=False, updated_by=deleted_by, updated_at=timezone.now()
    )
    if not updated:
        raise NotFoundError(message="Quiz not found", code="QUIZ_NOT_FOUND")
    audit_action_create(
        user=deleted_by,
        category=AuditCategory.QUIZ,
        action=AuditAction.QUIZ_DELETED,
        target_type="quiz",
        target_id=str(quiz_id),
        request=request,
    )


@transaction.atomic
def attempt_start(*, quiz_id: uuid.UUID, user: User) -> QuizAttempt:
    quiz = Quiz.objects.select_for_update().filter(id=quiz_id).first()
    if quiz is None:
        raise NotFoundError(message="Quiz not found", code="QUIZ_NOT_FOUND")
    if not (quiz.is_active and quiz.is_public):
        raise PermissionDeniedError(message="Quiz is not available", code="QUIZ_NOT_AVAILABLE")

    previous = QuizAttempt.objects.filter(quiz=quiz, user=user)
    if quiz.max_attempts and previous.count() >= quiz.max_attempts:
        raise PermissionDeniedError(message="Maximum number of attempts reached", code="MAX_ATTEMPTS_REACHED")

    last_number = previous.aggregate(last=Max("attempt_number"))["last"] or 0
    return QuizAttempt.objects.create(quiz=quiz, user=user, attempt_number=last_number + 1)


@transaction.atomic
def attempt_submit(*, attempt_id: uuid.UUID, user: User, answers: dict[str, str]) -> QuizAttempt:
    """
    Score an attempt. Only its owner may submit, and only once.
    """
    attempt = QuizAttempt.objects.select_for_update().select_related("quiz").filter(id=attempt_id).first()
    if attempt is None:
        raise NotFoundError(message="Quiz attempt not found", code="ATTEMPT_NOT_FOUND")
    if attempt.user_id != user.id:
        raise PermissionDeniedError(message="This attempt belongs to another user")
    if attempt.is_completed:
        raise BusinessRuleError(message="Attempt already submitted", code="ATTEMPT_ALREADY_COMPLETED")

    score = score_answers(selectors.active_questions(attempt.quiz), answers)

    QuizResult.objects.bulk_create(
        QuizResult(
            attempt=attempt,
            question=a.question,
            selected_option=a.option,
            is_correct=a.is_correct,
            points_earned=a.points_earned,
        )
        for a in score.answers
    )

    now = timezone.now()
    attempt.completed_at = now
    attempt.total_score = score.total_score
    attempt.max_score = score.max_score
    attempt.percentage = score.percentage
    attempt.passed = score.passed(attempt.quiz.passing_score_percentage)
    attempt.time_taken_seconds = max(0, int((now - attempt.started_at).total_seconds()))
    attempt.is_completed = True
    attempt.save()

    log.info("Quiz attempt %s scored %s/%s", attempt.id, attempt.total_score, attempt.max_score)
    return attempt


def attempt_get_for(*, attempt_id: uuid.UUID, user: User) -> QuizAttempt:
    attempt = selectors.attempt_get(attempt_id=attempt_id)
    if attempt.user_id != user.id and not has_permission(user, "quizzes.manage"):
        raise PermissionDeniedError(message="This attempt belongs to another user")
    return attempt
