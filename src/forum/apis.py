import uuid

from ninja import Body, Query
from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from src.api.pagination import Paginator
from src.core.apis import BaseAPIController
from src.core.auth import OptionalJWTAuth
from src.core.policies import ensure_permission
from src.forum import selectors, services
from src.forum.presenters import category_to_dto, post_to_dto, topic_to_dto
from src.forum.schemas import (
    CategoryCreatePayload,
    CategoryUpdatePayload,
    FlagPayload,
    PostCreatePayload,
    PostUpdatePayload,
    TopicCreatePayload,
    TopicFilterParams,
    TopicUpdatePayload,
)


@api_controller("/forum/categories", tags=["Forum"], auth=JWTAuth())
class ForumCategoryController(BaseAPIController):
    @route.get("/", auth=OptionalJWTAuth())
    def list_categories(self, language: str | None = None):
        items = selectors.category_list(user=self.current_user, language=language)
        return self.create_response(message="Forum categories", data=[category_to_dto(c) for c in items])

    @route.get("/{category_id}", auth=OptionalJWTAuth())
    def get_category(self, category_id: uuid.UUID):
        category = selectors.category_get(category_id=category_id, user=self.current_user)
        return self.create_response(message="Forum category", data=category_to_dto(category))

    @route.post("/")
    def create_category(self, body: CategoryCreatePayload = Body(...)):
        ensure_permission(self.current_user, "forum.manage_categories")
        category = services.category_create(created_by=self.current_user, payload=body)
        return self.create_response(message="Forum category created", data=category_to_dto(category),
                                    status_code=201)

    @route.patch("/{category_id}")
    def update_category(self, category_id: uuid.UUID, payload: CategoryUpdatePayload):
        ensure_permission(self.current_user, "forum.manage_categories")
        category = services.category_update(category_id=category_id, payload=payload)
        return self.create_response(message="Forum category updated", data=category_to_dto(category))

    @route.delete("/{category_id}")
    def delete_category(self, category_id: uuid.UUID):
        ensure_permission(self.current_user, "forum.manage_categories")
        services.category_delete(category_id=category_id)
        return self.create_response(message="Forum category deleted")


@api_controller("/forum/topics", tags=["Forum"], auth=JWTAuth())
class ForumTopicController(BaseAPIController):
    @route.get("/", auth=OptionalJWTAuth())
    def list_topics(self, filters: Query[TopicFilterParams]):
        qs = selectors.topic_list(user=self.current_user, **filters.dict())
        paginator = Paginator(default_page_size=20, max_page_size=100)
        items, meta = paginator.paginate_queryset(qs, self.context.request)
        return self.create_response(
            message="Forum topics",
            data={"items": [topic_to_dto(t) for t in items], "pagination": meta},
        )

    @route.post("/")
    def create_topic(self, body: TopicCreatePayload = Body(...)):
        topic = services.topic_create(created_by=self.current_user, payload=body)
        return self.create_response(message="Topic created", data=topic_to_dto(topic), status_code=201)

    @route.get("/{topic_id}", auth=OptionalJWTAuth())
    def get_topic(self, topic_id: uuid.UUID):
        topic = selectors.topic_get(topic_id=topic_id, user=self.current_user)
        return self.create_response(message="Topic", data=topic_to_dto(topic))

    @route.patch("/{topic_id}")
    def update_topic(self, topic_id: uuid.UUID, payload: TopicUpdatePayload):
        topic = services.topic_update(topic_id=topic_id, user=self.current_user, payload=payload)
        return self.create_response(message="Topic updated", data=topic_to_dto(topic))

    @route.delete("/{topic_id}")
    def delete_topic(self, topic_id: uuid.UUID):
        services.topic_delete(topic_id=topic_id, user=self.current_user, request=self.context.request)
        return self.create_response(message="Topic deleted")

    @route.get("/{topic_id}/posts", auth=OptionalJWTAuth())
    def list_posts(self, topic_id: uuid.UUID):
        topic = selectors.topic_get(topic_id=topic_id, user=self.current_user)
        qs = selectors.post_list(topic=topic)
        paginator = Paginator(default_page_size=50, max_page_size=200)
        items, meta = paginator.paginate_queryset(qs, self.context.request)
        return self.create_response(
            message="Topic posts",
            data={"items": [post_to_dto(p) for p in items], "pagination": meta},
        )

    def _set_flags(self, topic_id: uuid.UUID, message: str, **flags):
        topic = services.topic_set_flags(topic_id=topic_id, user=self.current_user, **flags)
        return self.create_response(message=message, data=topic_to_dto(topic))

    @route.post("/{topic_id}/pin")
    def pin_topic(self, topic_id: uuid.UUID):
        return self._set_flags(topic_id, "Topic pinned", is_pinned=True)

    @route.post("/{topic_id}/unpin")
    def unpin_topic(self, topic_id: uuid.UUID):
        return self._set_flags(topic_id, "Topic unpinned", is_pinned=False)

    @route.post("/{topic_id}/lock")
    def lock_topic(self, topic_id: uuid.UUID):
        return self._set_flags(topic_id, "Topic locked", is_locked=True)

    @route.post("/{topic_id}/unlock")
    def unlock_topic(self, topic_id: uuid.UUID):
        return self._set_flags(topic_id, "Topic unlocked", is_locked=False)


@api_controller("/forum/posts", tags=["Forum"], auth=JWTAuth())
class ForumPostController(BaseAPIController):
    @route.post("/")
    def create_post(self, body: PostCreatePayload = Body(...)):
        post = services.post_create(created_by=self.current_user, payload=body)
        message = "Post created" if post.is_active else "Post removed by automated moderation"
        return self.create_response(message=message, data=post_to_dto(post), status_code=201)

    @route.patch("/{post_id}")
    def update_post(self, post_id: uuid.UUID, payload: PostUpdatePayload):
        post = services.post_update(post_id=post_id, user=self.current_user, content=payload.content)
        return self.create_response(message="Post updated", data=post_to_dto(post))

    @route.delete("/{post_id}")
    def delete_post(self, post_id: uuid.UUID):
        services.post_delete(post_id=post_id, user=self.current_user, request=self.context.request)
        return self.create_response(message="Post deleted")

    @route.post("/{post_id}/flag")
    def flag_post(self, post_id: uuid.UUID, body: FlagPayload = Body(...)):
        post = services.post_flag(post_id=post_id, user=self.current_user, reason=body.reason)
        return self.create_response(message="Post flagged", data=post_to_dto(post))
