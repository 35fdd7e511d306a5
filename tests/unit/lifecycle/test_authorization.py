"""Unit tests for the capability-to-action authorization map"""
import pytest

from portal.db.enums import AccountStatus, Role, UserType
from portal.exceptions import (
    AccountSuspended,
    AuthenticationRequired,
    AuthorizationDenied,
    NoCapability,
)
from portal.lifecycle.authorization import (
    Decision,
    SessionContext,
    decide,
    decide_update,
    enforce,
    get_allowed_actions,
    has_permission,
    is_allowed,
    require,
)
from portal.lifecycle.kinds import SubmittableKind


def make_context(user_types=(), roles=(), status=AccountStatus.APPROVED, user_id=1):
    return SessionContext(
        user_id=user_id,
        user_types=frozenset(t.value for t in user_types),
        roles=frozenset(r.value for r in roles),
        approval_status=status,
    )


class TestCreatePermissions:
    """Who may create which kind"""

    @pytest.mark.parametrize(
        "user_type,kind",
        [
            (UserType.HOME_TUTOR, SubmittableKind.HOME_TUTORS),
            (UserType.TO_LET_OWNER, SubmittableKind.TO_LETS),
            (UserType.BUSINESS_OWNER, SubmittableKind.BUSINESSES),
        ],
    )
    def test_matching_user_type_may_create(self, user_type, kind):
        context = make_context(user_types=[user_type])
        assert decide(context, f"{kind.value}.create") is Decision.ALLOW

    def test_user_type_does_not_leak_to_other_kinds(self):
        context = make_context(user_types=[UserType.HOME_TUTOR])
        assert decide(context, "businesses.create") is Decision.DENIED
        assert decide(context, "hospitals.create") is Decision.DENIED

    def test_content_volunteer_creates_blogs_and_tourist_places_only(self):
        context = make_context(user_types=[UserType.CONTENT_VOLUNTEER])
        assert is_allowed(context, "blogs.create") is True
        assert is_allowed(context, "tourist-places.create") is True
        assert is_allowed(context, "hospitals.create") is False
        assert is_allowed(context, "to-lets.create") is False

    def test_content_volunteer_role_matches_user_type(self):
        context = make_context(roles=[Role.CONTENT_VOLUNTEER])
        assert is_allowed(context, "blogs.create") is True

    @pytest.mark.parametrize("role", [Role.ADMIN, Role.SUPER_ADMIN])
    def test_admins_create_every_kind(self, role):
        context = make_context(roles=[role])
        for kind in SubmittableKind:
            assert decide(context, f"{kind.value}.create") is Decision.ALLOW

    def test_hospitals_are_admin_only(self):
        for user_type in UserType:
            context = make_context(user_types=[user_type])
            assert is_allowed(context, "hospitals.create") is False


class TestNoCapability:
    """Users without any content capability get a distinguishable decision"""

    def test_no_types_no_roles(self):
        context = make_context()
        assert decide(context, "home-tutors.create") is Decision.NO_CAPABILITY

    def test_general_user_has_no_capability(self):
        context = make_context(user_types=[UserType.GENERAL_USER])
        assert decide(context, "blogs.create") is Decision.NO_CAPABILITY

    def test_moderator_without_types_has_no_capability(self):
        context = make_context(roles=[Role.AREA_MODERATOR])
        assert decide(context, "blogs.create") is Decision.NO_CAPABILITY

    def test_no_capability_still_views_profile(self):
        context = make_context()
        assert decide(context, "profile.view") is Decision.ALLOW
        assert decide(context, "access_requests.create") is Decision.ALLOW

    def test_no_capability_raises_authorization_subclass(self):
        with pytest.raises(AuthorizationDenied) as exc_info:
            require(make_context(), "hospitals.create")
        assert isinstance(exc_info.value, NoCapability)
        assert exc_info.value.error_code.code == "AUTHZ_002"


class TestReviewPermissions:

    @pytest.mark.parametrize("role", [Role.ADMIN, Role.SUPER_ADMIN, Role.AREA_MODERATOR])
    def test_reviewers_approve_and_reject(self, role):
        context = make_context(roles=[role])
        for kind in SubmittableKind:
            assert is_allowed(context, f"{kind.value}.approve")
            assert is_allowed(context, f"{kind.value}.reject")
            assert is_allowed(context, f"{kind.value}.view_pending")
        assert is_allowed(context, "access_requests.review")

    def test_capability_holders_cannot_review(self):
        context = make_context(user_types=[UserType.HOME_TUTOR, UserType.CONTENT_VOLUNTEER])
        assert decide(context, "home-tutors.approve") is Decision.DENIED
        assert decide(context, "blogs.reject") is Decision.DENIED
        assert decide(context, "access_requests.review") is Decision.DENIED

    def test_moderator_cannot_manage(self):
        context = make_context(roles=[Role.AREA_MODERATOR])
        for target in ("users", "upazilas", "sliders", "settings"):
            assert decide(context, f"{target}.manage") is Decision.DENIED
        assert decide(context, "blogs.delete") is Decision.DENIED

    def test_admin_manages_reference_data(self):
        context = make_context(roles=[Role.ADMIN])
        for target in ("users", "upazilas", "sliders", "settings"):
            assert decide(context, f"{target}.manage") is Decision.ALLOW


class TestAnonymousAndSuspended:

    def test_public_view_needs_no_session(self):
        assert decide(None, "public.view") is Decision.ALLOW

    def test_anonymous_is_unauthenticated(self):
        assert decide(None, "blogs.create") is Decision.UNAUTHENTICATED
        assert decide(None, "profile.view") is Decision.UNAUTHENTICATED

    def test_suspension_overrides_capability(self):
        context = make_context(user_types=[UserType.HOME_TUTOR], status=AccountStatus.SUSPENDED)
        assert decide(context, "home-tutors.create") is Decision.SUSPENDED

    def test_suspended_admin_cannot_mutate(self):
        context = make_context(roles=[Role.SUPER_ADMIN], status=AccountStatus.SUSPENDED)
        assert decide(context, "hospitals.approve") is Decision.SUSPENDED
        assert decide(context, "users.manage") is Decision.SUSPENDED

    def test_suspended_user_still_reads(self):
        context = make_context(roles=[Role.ADMIN], status=AccountStatus.SUSPENDED)
        assert decide(context, "profile.view") is Decision.ALLOW
        assert decide(context, "hospitals.view_pending") is Decision.ALLOW

    def test_rejected_account_is_blocked(self):
        context = make_context(user_types=[UserType.BUSINESS_OWNER], status=AccountStatus.REJECTED)
        assert decide(context, "businesses.create") is Decision.SUSPENDED

    def test_pending_account_may_submit(self):
        context = make_context(user_types=[UserType.BUSINESS_OWNER], status=AccountStatus.PENDING)
        assert decide(context, "businesses.create") is Decision.ALLOW


class TestDecideUpdate:

    def test_owner_may_update(self):
        context = make_context(user_id=7)
        assert decide_update(context, SubmittableKind.BLOGS, owner_id=7) is Decision.ALLOW

    def test_other_user_may_not_update(self):
        context = make_context(user_types=[UserType.CONTENT_VOLUNTEER], user_id=7)
        assert decide_update(context, SubmittableKind.BLOGS, owner_id=8) is Decision.DENIED

    def test_admin_updates_anything(self):
        context = make_context(roles=[Role.ADMIN], user_id=1)
        assert decide_update(context, SubmittableKind.HOSPITALS, owner_id=None) is Decision.ALLOW

    def test_moderator_may_not_update_others(self):
        context = make_context(roles=[Role.AREA_MODERATOR], user_id=1)
        assert decide_update(context, SubmittableKind.HOSPITALS, owner_id=2) is Decision.DENIED

    def test_suspended_owner_may_not_update(self):
        context = make_context(user_id=7, status=AccountStatus.SUSPENDED)
        assert decide_update(context, SubmittableKind.BLOGS, owner_id=7) is Decision.SUSPENDED


class TestEnforce:

    def test_allow_is_silent(self):
        enforce(Decision.ALLOW, "blogs.create")

    @pytest.mark.parametrize(
        "decision,exc_class",
        [
            (Decision.UNAUTHENTICATED, AuthenticationRequired),
            (Decision.SUSPENDED, AccountSuspended),
            (Decision.NO_CAPABILITY, NoCapability),
            (Decision.DENIED, AuthorizationDenied),
        ],
    )
    def test_decision_maps_to_exception(self, decision, exc_class):
        with pytest.raises(exc_class) as exc_info:
            enforce(decision, "blogs.create")
        assert exc_info.value.context == {"action": "blogs.create", "decision": decision.value}

    def test_require_returns_context(self):
        context = make_context(roles=[Role.ADMIN])
        assert require(context, "users.manage") is context


class TestAllowedActions:

    def test_general_user_gets_baseline(self):
        actions = get_allowed_actions(make_context(user_types=[UserType.GENERAL_USER]))
        assert actions == sorted(
            ["access_requests.create", "access_requests.view_own", "profile.view", "public.view"]
        )

    def test_tutor_sees_own_create(self):
        actions = get_allowed_actions(make_context(user_types=[UserType.HOME_TUTOR]))
        assert "home-tutors.create" in actions

    def test_blocked_identity_loses_mutations(self):
        context = make_context(roles=[Role.ADMIN], status=AccountStatus.SUSPENDED)
        actions = get_allowed_actions(context)
        assert "*.view_all" in actions
        assert "*.approve" not in actions
        assert "access_requests.create" not in actions

    def test_has_permission_wildcards(self):
        assert has_permission({Role.ADMIN.value}, "anything.create") is True
        assert has_permission({Role.AREA_MODERATOR.value}, "anything.create") is False
        assert has_permission(set(), "public.view") is False


class TestSessionContext:

    def test_from_user_like_object(self):
        class FakeUser:
            id = 5
            user_types = ["HOME_TUTOR", "HOME_TUTOR"]
            roles = ["AREA_MODERATOR"]
            approval_status = "APPROVED"
            email = "tutor@example.com"

        context = SessionContext.from_user(FakeUser())
        assert context.user_id == 5
        assert context.user_types == frozenset({"HOME_TUTOR"})
        assert context.approval_status is AccountStatus.APPROVED
        assert context.is_reviewer is True
        assert context.is_admin is False

    def test_context_is_immutable(self):
        context = make_context()
        with pytest.raises(Exception):
            context.user_id = 2
