import uuid

from ninja import Body, Query
from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from src.api.pagination import Paginator
from src.artifacts import selectors, services
from src.artifacts.presenters import artifact_to_dto
from src.artifacts.schemas import ArtifactCreatePayload, ArtifactFilterParams, ArtifactUpdatePayload
from src.core.apis import BaseAPIController
from src.core.auth import OptionalJWTAuth
from src.core.policies import ensure_permission


@api_controller("/artifacts", tags=["Artifacts"], auth=JWTAuth())
class ArtifactController(BaseAPIController):
    @route.get("/", auth=OptionalJWTAuth())
    def list_artifacts(self, filters: Query[ArtifactFilterParams], lang: str | None = None):
        qs = selectors.artifact_list(
            user=self.current_user,
            search=filters.search,
            category=filters.category,
            site_id=filters.site_id,
            is_public=filters.is_public,
        )
        paginator = Paginator(default_page_size=20, max_page_size=100)
        items, meta = paginator.paginate_queryset(qs, self.context.request)
        return self.create_response(
            message="Artifacts fetched",
            data={"items": [artifact_to_dto(a, lang) for a in items], "pagination": meta},
        )

    @route.get("/statistics")
    def statistics(self):
        ensure_permission(self.current_user, "artifacts.view_private")
        return self.create_response(message="Artifact statistics", data=selectors.artifacts_stats())

    @route.get("/site/{site_id}", auth=OptionalJWTAuth())
    def by_site(self, site_id: uuid.UUID):
        items = selectors.artifact_list(user=self.current_user, site_id=site_id)
        return self.create_response(message="Site artifacts", data=[artifact_to_dto(a) for a in items])

    @route.post("/")
    def create_artifact(self, body: ArtifactCreatePayload = Body(...)):
        ensure_permission(self.current_user, "artifacts.manage")
        artifact = services.artifact_create(created_by=self.current_user, payload=body, request=self.context.request)
        return self.create_response(message="Artifact created", data=artifact_to_dto(artifact), status_code=201)

    @route.get("/{artifact_id}", auth=OptionalJWTAuth())
    def get_artifact(self, artifact_id: uuid.UUID):
        artifact = selectors.artifact_get(artifact_id=artifact_id, user=self.current_user)
        return self.create_response(message="Artifact", data=artifact_to_dto(artifact))

    @route.patch("/{artifact_id}")
    def update_artifact(self, artifact_id: uuid.UUID, payload: ArtifactUpdatePayload):
        ensure_permission(self.current_user, "artifacts.manage")
        artifact = services.artifact_update(
            artifact_id=artifact_id,
            updated_by=self.current_user,
            payload=payload,
            request=self.context.request,
        )
        return self.create_response(message="Artifact updated", data=artifact_to_dto(artifact))

    @route.delete("/{artifact_id}")
    def delete_artifact(self, artifact_id: uuid.UUID):
        ensure_permission(self.current_user, "artifacts.manage")
        services.artifact_delete(artifact_id=artifact_id, deleted_by=self.current_user, request=self.context.request)
        return self.create_response(message="Artifact deleted")
