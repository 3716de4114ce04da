import uuid

from ninja import Body
from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from src.common.languages import language_list, normalize_language
from src.core.apis import BaseAPIController
from src.core.auth import OptionalJWTAuth
from src.core.exceptions import NotFoundError
from src.core.policies import ensure_permission
from src.translations import selectors, services
from src.translations.presenters import translation_to_dto
from src.translations.schemas import (
    BatchTranslationPayload,
    TranslationPayload,
    TranslationStatusPayload,
    content_type_param,
)


@api_controller("/translations", tags=["Translations"], auth=JWTAuth())
class TranslationController(BaseAPIController):
    @route.get("/text", auth=OptionalJWTAuth())
    def get_text(self, content_type: str, content_id: str, field_name: str, language: str = "",
                 fallback: bool = True):
        translation = selectors.translation_text(
            user=self.current_user,
            content_type=content_type_param(content_type),
            content_id=content_id,
            field_name=field_name,
            language=normalize_language(language),
            fallback=fallback,
        )
        if translation is None:
            raise NotFoundError(message="Translation not found", code="TRANSLATION_NOT_FOUND")
        return self.create_response(message="Translation", data=translation_to_dto(translation))

    @route.get("/exists", auth=OptionalJWTAuth())
    def exists(self, content_type: str, content_id: str, field_name: str, language: str):
        found = selectors.translation_exists(
            user=self.current_user,
            content_type=content_type_param(content_type),
            content_id=content_id,
            field_name=field_name,
            language=normalize_language(language),
        )
        return self.create_response(message="Translation lookup", data={"exists": found})

    @route.get("/content/{content_type}/{content_id}", auth=OptionalJWTAuth())
    def for_content(self, content_type: str, content_id: str, language: str | None = None):
        items = selectors.translations_for_content(
            user=self.current_user,
            content_type=content_type_param(content_type),
            content_id=content_id,
            language=normalize_language(language) if language else None,
        )
        return self.create_response(message="Content translations", data=[translation_to_dto(t) for t in items])

    @route.get("/type/{content_type}/{language}", auth=OptionalJWTAuth())
    def by_type(self, content_type: str, language: str):
        items = selectors.translations_by_type(
            user=self.current_user,
            content_type=content_type_param(content_type),
            language=normalize_language(language),
        )
        return self.create_response(message="Translations", data=[translation_to_dto(t) for t in items])

    @route.post("/")
    def save(self, body: TranslationPayload = Body(...)):
        ensure_permission(self.current_user, "translations.manage")
        translation = services.translation_save(payload=body, user=self.current_user, request=self.context.request)
        return self.create_response(message="Translation saved", data=translation_to_dto(translation))

    @route.post("/batch")
    def save_batch(self, body: BatchTranslationPayload = Body(...)):
        ensure_permission(self.current_user, "translations.manage")
        items = services.translation_save_batch(
            payloads=body.translations,
            user=self.current_user,
            request=self.context.request,
        )
        return self.create_response(message="Translations saved", data=[translation_to_dto(t) for t in items])

    @route.patch("/{translation_id}/status")
    def set_status(self, translation_id: uuid.UUID, body: TranslationStatusPayload = Body(...)):
        ensure_permission(self.current_user, "translations.manage")
        translation = services.translation_set_status(
            translation_id=translation_id,
            status=body.status,
            user=self.current_user,
        )
        return self.create_response(message="Translation status updated", data=translation_to_dto(translation))

    @route.delete("/{translation_id}")
    def delete(self, translation_id: uuid.UUID):
        ensure_permission(self.current_user, "translations.manage")
        services.translation_delete(translation_id=translation_id, user=self.current_user,
                                    request=self.context.request)
        return self.create_response(message="Translation deleted")


@api_controller("/languages", tags=["Translations"], auth=None)
class LanguageController(BaseAPIController):
    @route.get("/")
    def supported(self):
        return self.create_response(message="Supported languages", data=language_list())
