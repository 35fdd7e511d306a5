"""Upazila (sub-district) reference data routes"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from portal.api.dependencies import get_current_context, get_optional_context
from portal.core.database import get_db
from portal.db.models import Upazila
from portal.db.seed import seed_upazilas
from portal.exceptions import Conflict, NotFound, ValidationError
from portal.lifecycle.authorization import SessionContext, is_allowed, require
from portal.lifecycle.kinds import KIND_REGISTRY
from portal.schemas.common import MessageResponse
from portal.schemas.reference import UpazilaCreate, UpazilaResponse, UpazilaUpdate
from portal.utils.database import get_or_404
from portal.utils.slugs import slugify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upazilas", tags=["upazilas"])


async def _ensure_slug_free(db: AsyncSession, slug: str) -> None:
    result = await db.execute(select(Upazila.id).where(Upazila.slug == slug))
    if result.first() is not None:
        raise Conflict(message="Upazila slug already exists", context={"slug": slug})


@router.get("", response_model=List[UpazilaResponse])
async def list_upazilas(
    db: AsyncSession = Depends(get_db),
    context: Optional[SessionContext] = Depends(get_optional_context),
):
    """Active upazilas in display order; administrators also see inactive ones"""
    query = select(Upazila)
    if not is_allowed(context, "upazilas.manage"):
        query = query.where(Upazila.is_active.is_(True))
    result = await db.execute(query.order_by(Upazila.display_order, Upazila.name))
    return result.scalars().all()


@router.post("/seed", response_model=List[UpazilaResponse], status_code=status.HTTP_201_CREATED)
async def seed(
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
):
    require(context, "upazilas.manage")
    return await seed_upazilas(db)


@router.get("/{slug}", response_model=UpazilaResponse)
async def get_upazila(slug: str, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Upazila).where(Upazila.slug == slug))
    upazila = result.scalar_one_or_none()
    if upazila is None:
        raise NotFound(message="Upazila not found", context={"slug": slug})
    return upazila


@router.post("", response_model=UpazilaResponse, status_code=status.HTTP_201_CREATED)
async def create_upazila(
    request: UpazilaCreate,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
):
    require(context, "upazilas.manage")
    slug = request.slug or slugify(request.name)
    if not slug:
        raise ValidationError(message="Upazila slug cannot be empty", context={"missing_fields": ["slug"]})
    await _ensure_slug_free(db, slug)

    upazila = Upazila(**request.model_dump(exclude={"slug"}), slug=slug)
    db.add(upazila)
    await db.commit()
    await db.refresh(upazila)
    logger.info("Upazila %s created by user %s", upazila.slug, context.user_id)
    return upazila


@router.put("/{upazila_id}", response_model=UpazilaResponse)
async def update_upazila(
    upazila_id: int,
    request: UpazilaUpdate,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
):
    require(context, "upazilas.manage")
    upazila = await get_or_404(db, Upazila, upazila_id, "Upazila")
    for key, value in request.model_dump(exclude_unset=True).items():
        setattr(upazila, key, value)
    await db.commit()
    await db.refresh(upazila)
    return upazila


@router.delete("/{upazila_id}", response_model=MessageResponse)
async def delete_upazila(
    upazila_id: int,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
):
    """Delete an upazila; content referencing it keeps existing without one"""
    require(context, "upazilas.manage")
    upazila = await get_or_404(db, Upazila, upazila_id, "Upazila")
    for profile in KIND_REGISTRY.values():
        await db.execute(
            update(profile.model)
            .where(profile.model.upazila_id == upazila_id)
            .values(upazila_id=None)
        )
    await db.delete(upazila)
    await db.commit()
    logger.info("Upazila %s deleted by user %s", upazila_id, context.user_id)
    return MessageResponse(message="Upazila deleted", id=upazila_id)
