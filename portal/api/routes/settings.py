"""Site settings routes: globally readable key-value configuration"""
import logging
from typing import Dict, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.api.dependencies import get_current_context
from portal.core.database import get_db
from portal.db.models import SiteSetting
from portal.exceptions import NotFound
from portal.lifecycle.authorization import SessionContext, require
from portal.schemas.reference import SettingResponse, SettingUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


async def _upsert(
    db: AsyncSession,
    key: str,
    value: Optional[str],
    description: Optional[str] = None,
) -> SiteSetting:
    result = await db.execute(select(SiteSetting).where(SiteSetting.key == key))
    setting = result.scalar_one_or_none()
    if setting is None:
        setting = SiteSetting(key=key, value=value, description=description)
        db.add(setting)
    else:
        setting.value = value
        if description is not None:
            setting.description = description
    return setting


@router.get("", response_model=Dict[str, Optional[str]])
async def get_all_settings(db: AsyncSession = Depends(get_db)):
    """Every setting as a key -> value map"""
    result = await db.execute(select(SiteSetting).order_by(SiteSetting.key))
    return {setting.key: setting.value for setting in result.scalars().all()}


@router.put("", response_model=Dict[str, Optional[str]])
async def bulk_update_settings(
    updates: Dict[str, Optional[str]] = Body(...),
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
):
    """Upsert several settings in one transaction from a {key: value} body"""
    require(context, "settings.manage")
    for key, value in updates.items():
        await _upsert(db, key, value)
    await db.commit()
    logger.info("User %s updated settings: %s", context.user_id, ", ".join(sorted(updates)))

    result = await db.execute(select(SiteSetting).order_by(SiteSetting.key))
    return {setting.key: setting.value for setting in result.scalars().all()}


@router.get("/{key}", response_model=SettingResponse)
async def get_setting(key: str, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(SiteSetting).where(SiteSetting.key == key))
    setting = result.scalar_one_or_none()
    if setting is None:
        raise NotFound(message="Setting not found", context={"key": key})
    return setting


@router.put("/{key}", response_model=SettingResponse)
async def update_setting(
    key: str,
    request: SettingUpdate,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_current_context),
):
    """Create or replace one setting"""
    require(context, "settings.manage")
    setting = await _upsert(db, key, request.value, request.description)
    await db.commit()
    await db.refresh(setting)
    return setting
