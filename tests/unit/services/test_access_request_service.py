"""Unit tests for the access request service"""
import pytest
from sqlalchemy import select

from portal.db.enums import AccountStatus, ReviewStatus, UserType
from portal.db.models import User
from portal.exceptions import (
    AccountSuspended,
    AlreadyGranted,
    AuthorizationDenied,
    DuplicateRequest,
    EmptyRequest,
    InvalidTransition,
    NotFound,
    ValidationError,
)
from portal.lifecycle.access_requests import access_request_service, normalize_user_types
from portal.lifecycle.authorization import SessionContext
from portal.lifecycle.event_logger import EventLogger


async def user_types_of(db, user_id):
    result = await db.execute(select(User.user_types).where(User.id == user_id))
    return result.scalar_one()


@pytest.fixture
async def tutor(make_account):
    return await make_account("tutor@example.com", user_types=[UserType.HOME_TUTOR])


@pytest.fixture
def tutor_context(tutor):
    return SessionContext.from_user(tutor)


class TestNormalizeUserTypes:

    def test_deduplicates_and_sorts(self):
        assert normalize_user_types(["to_let_owner", UserType.HOME_TUTOR, "HOME_TUTOR"]) == [
            "HOME_TUTOR",
            "TO_LET_OWNER",
        ]

    def test_unknown_type(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_user_types(["HOME_TUTOR", "ASTRONAUT"])
        assert exc_info.value.context["unknown_user_types"] == ["ASTRONAUT"]

    def test_none_is_empty(self):
        assert normalize_user_types(None) == []


class TestRequestAccess:

    @pytest.mark.asyncio
    async def test_creates_pending_request(self, test_db_session, tutor_context):
        request = await access_request_service.request_access(
            test_db_session, tutor_context, ["BUSINESS_OWNER"], note="I run a bakery"
        )

        assert request.status == ReviewStatus.PENDING
        assert request.user_id == tutor_context.user_id
        assert request.requested_user_types == ["BUSINESS_OWNER"]
        assert request.note == "I run a bakery"

    @pytest.mark.asyncio
    async def test_empty_request(self, test_db_session, tutor_context):
        with pytest.raises(EmptyRequest):
            await access_request_service.request_access(test_db_session, tutor_context, [])

    @pytest.mark.asyncio
    async def test_already_granted(self, test_db_session, tutor_context):
        with pytest.raises(AlreadyGranted):
            await access_request_service.request_access(test_db_session, tutor_context, ["HOME_TUTOR"])

    @pytest.mark.asyncio
    async def test_duplicate_pending_request(self, test_db_session, tutor_context):
        await access_request_service.request_access(test_db_session, tutor_context, ["BUSINESS_OWNER"])

        with pytest.raises(DuplicateRequest):
            await access_request_service.request_access(
                test_db_session, tutor_context, ["BUSINESS_OWNER", "HOME_TUTOR"]
            )

    @pytest.mark.asyncio
    async def test_new_type_beside_pending_request(self, test_db_session, tutor_context):
        await access_request_service.request_access(test_db_session, tutor_context, ["BUSINESS_OWNER"])

        second = await access_request_service.request_access(
            test_db_session, tutor_context, ["BUSINESS_OWNER", "TO_LET_OWNER"]
        )
        assert second.requested_user_types == ["BUSINESS_OWNER", "TO_LET_OWNER"]

    @pytest.mark.asyncio
    async def test_suspended_user_cannot_request(self, test_db_session, make_account):
        user = await make_account("blocked@example.com", approval_status=AccountStatus.SUSPENDED)

        with pytest.raises(AccountSuspended):
            await access_request_service.request_access(
                test_db_session, SessionContext.from_user(user), ["HOME_TUTOR"]
            )

    @pytest.mark.asyncio
    async def test_user_without_types_may_request(self, test_db_session, make_account):
        user = await make_account("fresh@example.com", approval_status=AccountStatus.PENDING)

        request = await access_request_service.request_access(
            test_db_session, SessionContext.from_user(user), ["HOME_TUTOR"]
        )
        assert request.status == ReviewStatus.PENDING


class TestReview:

    @pytest.mark.asyncio
    async def test_approval_unions_types(self, test_db_session, tutor_context, admin_context):
        request = await access_request_service.request_access(
            test_db_session, tutor_context, ["HOME_TUTOR", "BUSINESS_OWNER"]
        )

        approved = await access_request_service.approve(
            test_db_session, admin_context, request.id, admin_note="Verified"
        )

        assert approved.status == ReviewStatus.APPROVED
        assert approved.admin_note == "Verified"
        assert approved.reviewed_by_id == admin_context.user_id
        assert await user_types_of(test_db_session, tutor_context.user_id) == [
            "BUSINESS_OWNER",
            "HOME_TUTOR",
        ]

    @pytest.mark.asyncio
    async def test_approval_is_audited(self, test_db_session, tutor_context, moderator_context):
        request = await access_request_service.request_access(test_db_session, tutor_context, ["TO_LET_OWNER"])

        await access_request_service.approve(test_db_session, moderator_context, request.id)

        history = await EventLogger.get_history(test_db_session, "access_requests", request.id)
        assert history[-1].event_type == "access_requests.approved"
        assert history[-1].payload["granted_user_types"] == ["HOME_TUTOR", "TO_LET_OWNER"]

    @pytest.mark.asyncio
    async def test_rejection_leaves_types(self, test_db_session, tutor_context, admin_context):
        request = await access_request_service.request_access(test_db_session, tutor_context, ["BUSINESS_OWNER"])

        rejected = await access_request_service.reject(
            test_db_session, admin_context, request.id, admin_note="No trade licence"
        )

        assert rejected.status == ReviewStatus.REJECTED
        assert rejected.admin_note == "No trade licence"
        assert await user_types_of(test_db_session, tutor_context.user_id) == ["HOME_TUTOR"]

    @pytest.mark.asyncio
    async def test_second_review_fails(self, test_db_session, tutor_context, admin_context):
        request = await access_request_service.request_access(test_db_session, tutor_context, ["BUSINESS_OWNER"])
        await access_request_service.approve(test_db_session, admin_context, request.id)

        with pytest.raises(InvalidTransition):
            await access_request_service.approve(test_db_session, admin_context, request.id)
        with pytest.raises(InvalidTransition):
            await access_request_service.reject(test_db_session, admin_context, request.id)

    @pytest.mark.asyncio
    async def test_requester_cannot_approve_own_request(self, test_db_session, tutor_context):
        request = await access_request_service.request_access(test_db_session, tutor_context, ["BUSINESS_OWNER"])

        with pytest.raises(AuthorizationDenied):
            await access_request_service.approve(test_db_session, tutor_context, request.id)

    @pytest.mark.asyncio
    async def test_missing_request(self, test_db_session, admin_context):
        with pytest.raises(NotFound):
            await access_request_service.reject(test_db_session, admin_context, 777)


class TestListing:

    @pytest.mark.asyncio
    async def test_lists(self, test_db_session, tutor_context, admin_context, make_account):
        other = SessionContext.from_user(await make_account("other@example.com"))
        first = await access_request_service.request_access(test_db_session, tutor_context, ["BUSINESS_OWNER"])
        second = await access_request_service.request_access(test_db_session, other, ["TO_LET_OWNER"])
        await access_request_service.reject(test_db_session, admin_context, first.id)

        mine = await access_request_service.list_mine(test_db_session, tutor_context)
        assert [r.id for r in mine] == [first.id]

        pending = await access_request_service.list_pending(test_db_session, admin_context)
        assert [r.id for r in pending] == [second.id]

        rejected = await access_request_service.list_all(
            test_db_session, admin_context, status=ReviewStatus.REJECTED
        )
        assert [r.id for r in rejected] == [first.id]
        assert len(await access_request_service.list_all(test_db_session, admin_context)) == 2

    @pytest.mark.asyncio
    async def test_listing_all_requires_reviewer(self, test_db_session, tutor_context):
        with pytest.raises(AuthorizationDenied):
            await access_request_service.list_all(test_db_session, tutor_context)
