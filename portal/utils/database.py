"""Database utility functions"""
from typing import Type, TypeVar, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from portal.exceptions import NotFound

T = TypeVar('T')


async def get_or_404(
    db: AsyncSession,
    model: Type[T],
    entity_id: int,
    entity_name: Optional[str] = None
) -> T:
    """
    Generic helper to fetch entity or raise NotFound

    Args:
        db: Database session
        model: SQLAlchemy model class
        entity_id: Primary key of the entity to fetch
        entity_name: Optional custom name for error message

    Returns:
        The entity instance

    Raises:
        NotFound: if entity not found

    Example:
        upazila = await get_or_404(db, Upazila, upazila_id, "Upazila")
    """
    entity = await db.get(model, entity_id)
    if not entity:
        name = entity_name or model.__name__
        raise NotFound(
            message=f"{name} not found",
            entity_id=entity_id,
        )
    return entity

