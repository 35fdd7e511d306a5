"""Unit tests for slug helpers"""
import pytest

from portal.db.enums import ReviewStatus
from portal.db.models import Blog
from portal.utils.slugs import slugify, unique_slug


class TestSlugify:

    def test_basic(self):
        assert slugify("Sundarbans Mangrove Forest") == "sundarbans-mangrove-forest"

    def test_punctuation_and_spacing(self):
        assert slugify("  Hello,   World!  -- again_ ") == "hello-world-again"

    def test_empty(self):
        assert slugify("") == ""
        assert slugify("!!!") == ""

    def test_max_length_does_not_end_in_dash(self):
        slug = slugify("a" * 9 + " " + "b" * 20, max_length=10)
        assert slug == "aaaaaaaaa"


class TestUniqueSlug:

    @pytest.mark.asyncio
    async def test_suffixes_on_collision(self, test_db_session):
        test_db_session.add(
            Blog(title="Day Trip", slug="day-trip", content="x", status=ReviewStatus.PENDING)
        )
        await test_db_session.commit()

        assert await unique_slug(test_db_session, Blog, "Day Trip") == "day-trip-2"

    @pytest.mark.asyncio
    async def test_free_slug_is_returned_as_is(self, test_db_session):
        assert await unique_slug(test_db_session, Blog, "Fresh Post") == "fresh-post"

    @pytest.mark.asyncio
    async def test_unsluggable_text_gets_token(self, test_db_session):
        slug = await unique_slug(test_db_session, Blog, "???")
        assert len(slug) == 8
