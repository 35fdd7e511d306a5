"""Reference data seeding"""
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.db.models import Upazila

logger = logging.getLogger(__name__)

# Satkhira district
DEFAULT_UPAZILAS = [
    {"name": "Satkhira Sadar", "name_bn": "সাতক্ষীরা সদর", "slug": "satkhira-sadar"},
    {"name": "Assasuni", "name_bn": "আশাশুনি", "slug": "assasuni"},
    {"name": "Debhata", "name_bn": "দেবহাটা", "slug": "debhata"},
    {"name": "Kalaroa", "name_bn": "কলারোয়া", "slug": "kalaroa"},
    {"name": "Kaliganj", "name_bn": "কালিগঞ্জ", "slug": "kaliganj"},
    {"name": "Shyamnagar", "name_bn": "শ্যামনগর", "slug": "shyamnagar"},
    {"name": "Tala", "name_bn": "তালা", "slug": "tala"},
]


async def seed_upazilas(db: AsyncSession) -> List[Upazila]:
    """
    Insert the district's upazilas that are not present yet.

    Idempotent: existing slugs are left untouched.

    Returns:
        The newly created upazilas
    """
    result = await db.execute(select(Upazila.slug))
    existing = set(result.scalars().all())
    created = []
    for order, data in enumerate(DEFAULT_UPAZILAS, start=1):
        if data["slug"] in existing:
            continue
        upazila = Upazila(**data, is_active=True, display_order=order)
        db.add(upazila)
        created.append(upazila)
    await db.commit()
    for upazila in created:
        await db.refresh(upazila)
    logger.info("Seeded %d upazilas", len(created))
    return created
