import uuid

from ninja import Body, Query
from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from src.api.pagination import Paginator
from src.core.apis import BaseAPIController
from src.core.auth import OptionalJWTAuth
from src.core.policies import ensure_permission, has_permission
from src.quizzes import selectors, services
from src.quizzes.presenters import attempt_to_dto, quiz_to_detail_dto, quiz_to_list_dto
from src.quizzes.schemas import QuizCreatePayload, QuizFilterParams, QuizUpdatePayload, SubmitAttemptPayload


@api_controller("/education/quizzes", tags=["Quizzes"], auth=JWTAuth())
class QuizController(BaseAPIController):
    def _detail(self, quiz):
        return quiz_to_detail_dto(
            quiz,
            selectors.active_questions(quiz),
            show_answers=has_permission(self.current_user, "quizzes.manage"),
        )

    @route.get("/", auth=OptionalJWTAuth())
    def list_quizzes(self, filters: Query[QuizFilterParams]):
        qs = selectors.quiz_list(user=self.current_user, **filters.dict())
        paginator = Paginator(default_page_size=20, max_page_size=100)
        items, meta = paginator.paginate_queryset(qs, self.context.request)
        return self.create_response(
            message="Quizzes fetched",
            data={"items": [quiz_to_list_dto(q) for q in items], "pagination": meta},
        )

    @route.get("/attempts/me")
    def my_attempts(self, quiz_id: uuid.UUID | None = None):
        items = selectors.attempts_for_user(user=self.current_user, quiz_id=quiz_id)
        return self.create_response(message="My quiz attempts", data=[attempt_to_dto(a) for a in items])

    @route.get("/statistics/me")
    def my_statistics(self, quiz_id: uuid.UUID | None = None):
        stats = selectors.user_quiz_statistics(user=self.current_user, quiz_id=quiz_id)
        return self.create_response(message="My quiz statistics", data=stats)

    @route.get("/attempts/{attempt_id}")
    def get_attempt(self, attempt_id: uuid.UUID):
        attempt = services.attempt_get_for(attempt_id=attempt_id, user=self.current_user)
        return self.create_response(message="Quiz attempt", data=attempt_to_dto(attempt, with_results=True))

    @route.post("/attempts/{attempt_id}/submit")
    def submit_attempt(self, attempt_id: uuid.UUID, body: SubmitAttemptPayload = Body(...)):
        answers = {str(a.question_id): str(a.option_id) for a in body.answers}
        attempt = services.attempt_submit(attempt_id=attempt_id, user=self.current_user, answers=answers)
        return self.create_response(message="Quiz submitted", data=attempt_to_dto(attempt, with_results=True))

    @route.post("/")
    def create_quiz(self, body: QuizCreatePayload = Body(...)):
        ensure_permission(self.current_user, "quizzes.manage")
        quiz = services.quiz_create(created_by=self.current_user, payload=body, request=self.context.request)
        return self.create_response(message="Quiz created", data=self._detail(quiz), status_code=201)

    @route.get("/{quiz_id}", auth=OptionalJWTAuth())
    def get_quiz(self, quiz_id: uuid.UUID):
        quiz = selectors.quiz_get(quiz_id=quiz_id, user=self.current_user)
        return self.create_response(message="Quiz", data=self._detail(quiz))

    @route.get("/{quiz_id}/statistics")
    def quiz_statistics(self, quiz_id: uuid.UUID):
        ensure_permission(self.current_user, "quizzes.view_statistics")
        quiz = selectors.quiz_get_any(quiz_id=quiz_id)
        return self.create_response(message="Quiz statistics", data=selectors.quiz_statistics(quiz=quiz))

    @route.patch("/{quiz_id}")
    def update_quiz(self, quiz_id: uuid.UUID, payload: QuizUpdatePayload):
        ensure_permission(self.current_user, "quizzes.manage")
        quiz = services.quiz_update(
            quiz_id=quiz_id,
            updated_by=self.current_user,
            payload=payload,
            request=self.context.request,
        )
        return self.create_response(message="Quiz updated", data=self._detail(quiz))

    @route.delete("/{quiz_id}")
    def delete_quiz(self, quiz_id: uuid.UUID):
        ensure_permission(self.current_user, "quizzes.manage")
        services.quiz_delete(quiz_id=quiz_id, deleted_by=self.current_user, request=self.context.request)
        return self.create_response(message="Quiz deleted")

    @route.post("/{quiz_id}/attempts")
    def start_attempt(self, quiz_id: uuid.UUID):
        attempt = services.attempt_start(quiz_id=quiz_id, user=self.current_user)
        return self.create_response(message="Quiz attempt started", data=attempt_to_dto(attempt), status_code=201)
