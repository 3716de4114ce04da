import uuid

from ninja import Body, Query
from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from src.api.pagination import Paginator
from src.core.apis import BaseAPIController
from src.core.auth import OptionalJWTAuth
from src.core.policies import ensure_permission
from src.documents import selectors, services
from src.documents.presenters import document_to_dto
from src.documents.schemas import DocumentCreatePayload, DocumentFilterParams, DocumentUpdatePayload


@api_controller("/documents", tags=["Documents"], auth=JWTAuth())
class DocumentController(BaseAPIController):
    def _paginated(self, qs, message: str):
        paginator = Paginator(default_page_size=20, max_page_size=100)
        items, meta = paginator.paginate_queryset(qs, self.context.request)
        return self.create_response(
            message=message,
            data={"items": [document_to_dto(d) for d in items], "pagination": meta},
        )

    @route.get("/")
    def list_documents(self, filters: Query[DocumentFilterParams]):
        qs = selectors.document_list(user=self.current_user, **filters.dict())
        return self._paginated(qs, "Documents fetched")

    @route.get("/public", auth=None)
    def list_public_documents(self, filters: Query[DocumentFilterParams]):
        return self._paginated(selectors.document_public_list(**filters.dict()), "Public documents fetched")

    @route.get("/types", auth=None)
    def document_types(self):
        return self.create_response(message="Document types", data=selectors.document_types())

    @route.get("/languages", auth=None)
    def document_languages(self):
        return self.create_response(message="Document languages", data=selectors.document_languages())

    @route.get("/statistics")
    def statistics(self):
        ensure_permission(self.current_user, "documents.manage")
        return self.create_response(message="Document statistics", data=selectors.documents_stats())

    @route.post("/")
    def create_document(self, body: DocumentCreatePayload = Body(...)):
        ensure_permission(self.current_user, "documents.manage")
        document = services.document_create(created_by=self.current_user, payload=body, request=self.context.request)
        return self.create_response(message="Document created", data=document_to_dto(document), status_code=201)

    @route.get("/{document_id}", auth=OptionalJWTAuth())
    def get_document(self, document_id: uuid.UUID):
        document = selectors.document_get(document_id=document_id, user=self.current_user)
        return self.create_response(message="Document", data=document_to_dto(document))

    @route.patch("/{document_id}")
    def update_document(self, document_id: uuid.UUID, payload: DocumentUpdatePayload):
        ensure_permission(self.current_user, "documents.manage")
        document = services.document_update(
            document_id=document_id,
            updated_by=self.current_user,
            payload=payload,
            request=self.context.request,
        )
        return self.create_response(message="Document updated", data=document_to_dto(document))

    @route.delete("/{document_id}")
    def delete_document(self, document_id: uuid.UUID):
        ensure_permission(self.current_user, "documents.manage")
        services.document_delete(document_id=document_id, deleted_by=self.current_user, request=self.context.request)
        return self.create_response(message="Document deleted")
