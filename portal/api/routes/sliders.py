"""Homepage slider routes (admin-owned, no review workflow)"""
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.api.dependencies import get_current_context, get_optional_context
from portal.core.database import get_db
from portal.db.models import Slider
from portal.exceptions import NotFound
from portal.lifecycle.authorization import SessionContext, is_allowed, require
from portal.schemas.common import MessageResponse
from portal.schemas.reference import SliderCreate, SliderResponse, SliderUpdate
from portal.utils.database import get_or_404

router = APIRouter(prefix="/sliders", tags=["sliders"])


@router.get("", response_model=List[SliderResponse])
async def list_sliders(
    db: AsyncSession = Depends(get_db),
    context: Optional[SessionContext] = Depends(get_optional_context),
):
    """Active slides by display order; administrators see every slide"""
    query = select(Slider)
    if not is_allowed(context, "sliders.manage"):
        query = query.where(Slider.is_active.is_(True))
    result = await db.execute(query.order_by(Slider.display_order, Slider.id))
    return result.scalars().all()


@router.get("/{slider_id}", response_model=SliderResponse)
async def get_slider(
    slider_id: int,
    db: AsyncSession = Depends(get_db),
    context: Optional[SessionContext] = Depends(get_optional_context),
):
    slider = await get_or_404(db, Slider, slider_id, "Slider")
    if not slider.is_active and not is_allowed(context, "sliders.manage"):
        raise NotFound(message="Slider not found", entity_id=slider_id)
    return slider


@router.post("", response_model=SliderResponse, status_code=status.HTTP_201_CREATED)
async def create_slider(
    request: SliderCreate,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
):
    require(context, "sliders.manage")
    slider = Slider(**request.model_dump())
    db.add(slider)
    await db.commit()
    await db.refresh(slider)
    return slider


@router.put("/{slider_id}", response_model=SliderResponse)
async def update_slider(
    slider_id: int,
    request: SliderUpdate,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
):
    require(context, "sliders.manage")
    slider = await get_or_404(db, Slider, slider_id, "Slider")
    for key, value in request.model_dump(exclude_unset=True).items():
        setattr(slider, key, value)
    await db.commit()
    await db.refresh(slider)
    return slider


@router.delete("/{slider_id}", response_model=MessageResponse)
async def delete_slider(
    slider_id: int,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
):
    require(context, "sliders.manage")
    slider = await get_or_404(db, Slider, slider_id, "Slider")
    await db.delete(slider)
    await db.commit()
    return MessageResponse(message="Slider deleted", id=slider_id)
