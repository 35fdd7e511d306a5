"""Unit tests for the client-side session"""
import pytest

from portal.client import Session, context_from_payload
from portal.db.enums import AccountStatus
from portal.lifecycle.authorization import Decision

ADMIN_PAYLOAD = {
    "id": 1,
    "email": "admin@example.com",
    "userTypes": [],
    "roles": ["ADMIN"],
    "approvalStatus": "APPROVED",
}

TUTOR_PAYLOAD = {
    "id": 2,
    "email": "tutor@example.com",
    "userTypes": ["HOME_TUTOR"],
    "roles": [],
    "approvalStatus": "PENDING",
}


class TestContextFromPayload:

    def test_camel_case_payload(self):
        context = context_from_payload(TUTOR_PAYLOAD)

        assert context.user_id == 2
        assert context.user_types == frozenset({"HOME_TUTOR"})
        assert context.approval_status is AccountStatus.PENDING

    def test_missing_lists_default_empty(self):
        context = context_from_payload({"id": "3"})

        assert context.user_id == 3
        assert context.capabilities == frozenset()


class TestSessionLifecycle:

    def test_new_session_is_anonymous(self):
        session = Session()

        assert session.is_authenticated is False
        assert session.auth_headers() == {}
        assert session.decision("blogs.create") is Decision.UNAUTHENTICATED

    def test_start_sets_identity(self):
        session = Session()
        session.start("token-1", ADMIN_PAYLOAD)

        assert session.is_authenticated is True
        assert session.is_admin is True
        assert session.auth_headers() == {"Authorization": "Bearer token-1"}
        assert session.can("hospitals.approve") is True

    def test_refresh_keeps_token(self):
        session = Session()
        session.start("token-1", TUTOR_PAYLOAD)
        session.refresh(dict(TUTOR_PAYLOAD, userTypes=["HOME_TUTOR", "BUSINESS_OWNER"]))

        assert session.token == "token-1"
        assert session.can("businesses.create") is True

    def test_clear_notifies_listeners_once(self):
        reasons = []
        session = Session()
        session.on_teardown(reasons.append)
        session.start("token-1", TUTOR_PAYLOAD)

        session.clear("unauthorized")
        session.clear("logout")

        assert reasons == ["unauthorized"]
        assert session.context is None
        assert session.user is None

    def test_suspended_identity_preview(self):
        session = Session()
        session.start("token-1", dict(TUTOR_PAYLOAD, approvalStatus="SUSPENDED"))

        assert session.decision("home-tutors.create") is Decision.SUSPENDED
