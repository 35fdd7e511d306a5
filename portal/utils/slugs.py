"""URL slug helpers"""
import re
import secrets

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


def slugify(text: str, max_length: int = 120) -> str:
    """
    Convert text to URL-friendly slug.

    Non-ASCII letters are kept rather than transliterated.
    """
    if not text:
        return ""
    slug = text.lower().strip()
    slug = re.sub(r'[^\w\s-]', '', slug)
    slug = re.sub(r'[-\s_]+', '-', slug)
    slug = slug.strip('-')
    if len(slug) > max_length:
        slug = slug[:max_length].rstrip('-')
    return slug


async def unique_slug(db: AsyncSession, model, text: str, max_length: int = 120) -> str:
    """
    Slugify ``text`` and suffix it until no row of ``model`` uses it.

    Falls back to a random token when the text has no slug-able characters.
    """
    base = slugify(text, max_length=max_length - 7) or secrets.token_hex(4)
    candidate = base
    suffix = 2
    while True:
        result = await db.execute(select(model.id).where(model.slug == candidate))
        if result.first() is None:
            return candidate
        candidate = f"{base}-{suffix}"
        suffix += 1
