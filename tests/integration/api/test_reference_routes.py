"""Integration tests for upazilas, sliders, site settings and admin stats"""
import pytest

from portal.db.enums import UserType
from portal.exceptions import AuthenticationRequired, AuthorizationDenied, Conflict, NotFound


class TestUpazilas:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, admin_client, client):
        created = await admin_client.upazilas.seed()
        assert len(created) == 7

        assert await admin_client.upazilas.seed() == []

        public = await client.upazilas.list()
        assert public[0]["slug"] == "satkhira-sadar"
        assert {u["slug"] for u in public} >= {"tala", "shyamnagar"}

        tala = await client.upazilas.get("tala")
        assert tala["nameBn"] == "তালা"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_inactive_hidden_from_public(self, admin_client, client):
        upazila = await admin_client.upazilas.create({"name": "Debhata", "isActive": False})

        assert await client.upazilas.list() == []
        assert [u["id"] for u in await admin_client.upazilas.list()] == [upazila["id"]]

        await admin_client.upazilas.update(upazila["id"], {"isActive": True})
        assert len(await client.upazilas.list()) == 1

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_slug_conflict(self, admin_client):
        await admin_client.upazilas.create({"name": "Kalaroa"})

        with pytest.raises(Conflict):
            await admin_client.upazilas.create({"name": "Kalaroa Town", "slug": "kalaroa"})

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_delete_keeps_content(self, admin_client, client):
        upazila = await admin_client.upazilas.create({"name": "Assasuni"})
        hospital = await admin_client.hospitals.create(
            {"name": "Clinic", "address": "Bazar", "phone": "1", "upazilaId": upazila["id"]}
        )

        await admin_client.upazilas.delete(upazila["id"])

        with pytest.raises(NotFound):
            await client.upazilas.get("assasuni")
        kept = await admin_client.hospitals.get(hospital["id"])
        assert kept["upazilaId"] is None

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_moderator_cannot_manage(self, moderator_client):
        with pytest.raises(AuthorizationDenied):
            await moderator_client.upazilas.create({"name": "Kaliganj"})


class TestSliders:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_crud(self, admin_client, client):
        slide = await admin_client.sliders.create(
            {"title": "Welcome", "imageUrl": "https://example.com/a.jpg", "displayOrder": 2}
        )
        hidden = await admin_client.sliders.create(
            {"title": "Draft", "imageUrl": "https://example.com/b.jpg", "isActive": False}
        )

        assert [s["id"] for s in await client.sliders.list()] == [slide["id"]]
        with pytest.raises(NotFound):
            await client.sliders.get(hidden["id"])

        updated = await admin_client.sliders.update(slide["id"], {"buttonText": "Explore"})
        assert updated["buttonText"] == "Explore"

        await admin_client.sliders.delete(slide["id"])
        assert await client.sliders.list() == []

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_anonymous_cannot_create(self, client):
        with pytest.raises(AuthenticationRequired):
            await client.sliders.create({"title": "X", "imageUrl": "https://example.com/x.jpg"})


class TestSettings:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_bulk_update_and_read(self, admin_client, client):
        values = await admin_client.settings.bulk_update(
            {"siteName": "Satkhira Portal", "contactPhone": "0471-00000"}
        )
        assert values == {"contactPhone": "0471-00000", "siteName": "Satkhira Portal"}

        await admin_client.settings.set("siteName", "Satkhira Community", description="Header title")

        assert (await client.settings.all())["siteName"] == "Satkhira Community"
        single = await client.settings.get("siteName")
        assert single["description"] == "Header title"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_setting_named_data_keeps_whole_map(self, admin_client, client):
        values = await admin_client.settings.bulk_update({"data": "x", "siteName": "Portal"})
        assert values == {"data": "x", "siteName": "Portal"}

        assert await client.settings.all() == {"data": "x", "siteName": "Portal"}

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_missing_setting(self, client):
        with pytest.raises(NotFound):
            await client.settings.get("nothing-here")

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_only_admins_write(self, make_account, make_client):
        await make_account("volunteer@example.com", user_types=[UserType.CONTENT_VOLUNTEER])
        volunteer = make_client()
        await volunteer.auth.login("volunteer@example.com", "correct-horse")

        with pytest.raises(AuthorizationDenied):
            await volunteer.settings.set("siteName", "Mine")


class TestAdminStats:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_counts(self, admin_client, moderator_client):
        first = await admin_client.hospitals.create({"name": "A", "address": "B", "phone": "1"})
        await admin_client.hospitals.create({"name": "C", "address": "D", "phone": "2"})
        await admin_client.hospitals.approve(first["id"])

        stats = await moderator_client.admin.stats()

        assert stats["content"]["hospitals"] == {"PENDING": 1, "APPROVED": 1, "REJECTED": 0}
        assert stats["content"]["blogs"]["PENDING"] == 0
        assert stats["users"]["APPROVED"] == 2
        assert stats["pendingTotal"] == 1

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_stats_need_reviewer(self, make_account, make_client):
        await make_account("tutor@example.com", user_types=[UserType.HOME_TUTOR])
        tutor = make_client()
        await tutor.auth.login("tutor@example.com", "correct-horse")

        with pytest.raises(AuthorizationDenied):
            await tutor.admin.stats()
