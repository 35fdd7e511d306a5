"""Routes for submittable content.

One router per SubmittableKind, all built by the same factory so every kind
exposes the identical surface:

    GET    /{kind}                 list (approved only for the public)
    GET    /{kind}/pending         review queue
    GET    /{kind}/mine            caller's own submissions
    GET    /{kind}/{id}            single item
    POST   /{kind}                 submit (always PENDING)
    PUT    /{kind}/{id}            update (owner or admin)
    DELETE /{kind}/{id}            delete (admin)
    PATCH  /{kind}/{id}/approve    PENDING -> APPROVED
    PATCH  /{kind}/{id}/reject     PENDING -> REJECTED
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from portal.api.dependencies import (
    content_service_dependency,
    get_current_context,
    get_optional_context,
)
from portal.core.database import get_db
from portal.db.enums import ReviewStatus
from portal.lifecycle.authorization import SessionContext
from portal.lifecycle.content import ContentService
from portal.lifecycle.kinds import SubmittableKind
from portal.schemas.common import MessageResponse
from portal.schemas.content import CONTENT_SCHEMAS


def build_content_router(kind: SubmittableKind) -> APIRouter:
    """Create the router for one submittable kind"""
    fields_model, response_model = CONTENT_SCHEMAS[kind]
    get_service = content_service_dependency(kind)
    label = kind.profile.label

    router = APIRouter(prefix=f"/{kind.value}", tags=[kind.value])

    @router.get("", response_model=List[response_model])
    async def list_items(
        request: Request,
        review_status: Optional[ReviewStatus] = Query(None, alias="status"),
        db: AsyncSession = Depends(get_db),
        context: Optional[SessionContext] = Depends(get_optional_context),
        service: ContentService = Depends(get_service),
    ):
        """
        List items.

        Query parameters named in the kind's filter table (e.g. ``upazilaId``)
        narrow the list. Reviewers may also pass ``status``.
        """
        params = request.query_params
        return await service.list(
            db,
            context,
            filters={name: params.get(name) for name in kind.profile.filters},
            status=review_status,
        )

    @router.get("/pending", response_model=List[response_model])
    async def list_pending(
        db: AsyncSession = Depends(get_db),
        context: SessionContext = Depends(get_current_context),
        service: ContentService = Depends(get_service),
    ):
        return await service.list_pending(db, context)

    @router.get("/mine", response_model=List[response_model])
    async def list_mine(
        db: AsyncSession = Depends(get_db),
        context: SessionContext = Depends(get_current_context),
        service: ContentService = Depends(get_service),
    ):
        return await service.list_owned(db, context)

    if kind is SubmittableKind.BLOGS:

        @router.get("/slug/{slug}", response_model=response_model)
        async def get_by_slug(
            slug: str,
            db: AsyncSession = Depends(get_db),
            context: Optional[SessionContext] = Depends(get_optional_context),
            service: ContentService = Depends(get_service),
        ):
            return await service.get_by_slug(db, context, slug)

    @router.get("/{item_id}", response_model=response_model)
    async def get_item(
        item_id: int,
        db: AsyncSession = Depends(get_db),
        context: Optional[SessionContext] = Depends(get_optional_context),
        service: ContentService = Depends(get_service),
    ):
        return await service.get(db, context, item_id)

    @router.post("", response_model=response_model, status_code=status.HTTP_201_CREATED)
    async def submit_item(
        payload: fields_model,
        db: AsyncSession = Depends(get_db),
        context: SessionContext = Depends(get_current_context),
        service: ContentService = Depends(get_service),
    ):
        return await service.submit(db, context, payload.model_dump(exclude_unset=True))

    @router.put("/{item_id}", response_model=response_model)
    async def update_item(
        item_id: int,
        payload: fields_model,
        db: AsyncSession = Depends(get_db),
        context: SessionContext = Depends(get_current_context),
        service: ContentService = Depends(get_service),
    ):
        return await service.update(db, context, item_id, payload.model_dump(exclude_unset=True))

    @router.delete("/{item_id}", response_model=MessageResponse)
    async def delete_item(
        item_id: int,
        db: AsyncSession = Depends(get_db),
        context: SessionContext = Depends(get_current_context),
        service: ContentService = Depends(get_service),
    ):
        await service.delete(db, context, item_id)
        return MessageResponse(message=f"{label} deleted", id=item_id)

    @router.patch("/{item_id}/approve", response_model=response_model)
    async def approve_item(
        item_id: int,
        db: AsyncSession = Depends(get_db),
        context: SessionContext = Depends(get_current_context),
        service: ContentService = Depends(get_service),
    ):
        return await service.approve(db, context, item_id)

    @router.patch("/{item_id}/reject", response_model=response_model)
    async def reject_item(
        item_id: int,
        db: AsyncSession = Depends(get_db),
        context: SessionContext = Depends(get_current_context),
        service: ContentService = Depends(get_service),
    ):
        return await service.reject(db, context, item_id)

    return router


content_routers = [build_content_router(kind) for kind in SubmittableKind]
