from ninja_extra import NinjaExtraAPI

from src.api.exception_handler import attach_exception_handlers
from src.artifacts.apis import ArtifactController
from src.auditaction.apis import AuditActionController
from src.auth.controllers.auth_controller import AuthController
from src.documents.apis import DocumentController
from src.forum.apis import ForumCategoryController, ForumPostController, ForumTopicController
from src.heritage_sites.apis import HeritageSiteController
from src.moderation.apis import CommunityReportController, ModerationController
from src.notifications.apis import NotificationController
from src.quizzes.apis import QuizController
from src.translations.apis import LanguageController, TranslationController
from src.users.apis import ProfileController, UserController


api = NinjaExtraAPI(title="Heritage Guard API", version="1.0.0", csrf=False)

# Register exception handlers in one place
attach_exception_handlers(api)

api.register_controllers(
    AuthController,
    ProfileController,
    UserController,
    HeritageSiteController,
    ArtifactController,
    DocumentController,
    ForumCategoryController,
    ForumTopicController,
    ForumPostController,
    ModerationController,
    CommunityReportController,
    QuizController,
    TranslationController,
    LanguageController,
    NotificationController,
    AuditActionController,
)
