"""Unit tests for the HTTP client against a mocked transport"""
import json

import httpx
import pytest

from portal.client import PortalClient, error_from_response, unwrap
from portal.exceptions import (
    AuthenticationRequired,
    Conflict,
    DuplicateRequest,
    InvalidTransition,
    NoCapability,
    NotFound,
    PortalError,
    ValidationError,
)

USER = {
    "id": 5,
    "email": "tutor@example.com",
    "userTypes": ["HOME_TUTOR"],
    "roles": [],
    "approvalStatus": "APPROVED",
}


def error_body(code, message="failed", **extra):
    return {"error": {"code": code, "message": message, "remediation_steps": [], **extra}, "path": "/x"}


class Recorder:
    """MockTransport handler routing on (method, path)"""

    def __init__(self, routes):
        self.routes = routes
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status_code, body = self.routes[(request.method, request.url.path)]
        return httpx.Response(status_code, json=body)


def make_client(routes):
    recorder = Recorder(routes)
    client = PortalClient("http://portal.test/api", transport=httpx.MockTransport(recorder))
    return client, recorder


class TestUnwrap:

    def test_envelope(self):
        assert unwrap({"data": [1, 2]}) == [1, 2]

    def test_plain_payload(self):
        assert unwrap([1, 2]) == [1, 2]
        assert unwrap({"id": 1}) == {"id": 1}

    def test_map_with_data_key_is_not_an_envelope(self):
        assert unwrap({"data": "x", "siteName": "Portal"}) == {"data": "x", "siteName": "Portal"}
        assert unwrap({"data": None}) is None


class TestErrorFromResponse:

    def test_known_code_picks_specific_class(self):
        response = httpx.Response(403, json=error_body("AUTHZ_002", entity_id=None))

        exc = error_from_response(response)

        assert isinstance(exc, NoCapability)
        assert exc.error_code.code == "AUTHZ_002"

    def test_context_and_entity_survive(self):
        body = error_body("STATE_001", "Cannot move", entity_id=4, context={"current_status": "APPROVED"})

        exc = error_from_response(httpx.Response(409, json=body))

        assert isinstance(exc, InvalidTransition)
        assert exc.entity_id == 4
        assert exc.context == {"current_status": "APPROVED"}
        assert exc.message == "Cannot move"

    def test_unknown_code_falls_back_to_status(self):
        exc = error_from_response(httpx.Response(404, json=error_body("WHAT_001")))
        assert isinstance(exc, NotFound)

    def test_non_json_body(self):
        exc = error_from_response(httpx.Response(500, text="boom"))
        assert type(exc) is PortalError
        assert exc.message == "HTTP 500"


class TestSessionHandling:

    @pytest.mark.asyncio
    async def test_login_starts_session_and_sends_token(self):
        client, recorder = make_client(
            {
                ("POST", "/api/auth/login"): (200, {"accessToken": "tok", "tokenType": "bearer", "user": USER}),
                ("GET", "/api/home-tutors/mine"): (200, []),
            }
        )

        await client.auth.login("tutor@example.com", "secret1")
        await client.home_tutors.mine()

        assert client.session.is_authenticated
        assert recorder.requests[-1].headers["Authorization"] == "Bearer tok"
        await client.close()

    @pytest.mark.asyncio
    async def test_401_tears_down_session(self):
        client, _ = make_client(
            {
                ("POST", "/api/auth/login"): (200, {"accessToken": "tok", "user": USER}),
                ("GET", "/api/auth/me"): (401, error_body("AUTH_001")),
            }
        )
        reasons = []
        client.session.on_teardown(reasons.append)
        await client.auth.login("tutor@example.com", "secret1")

        with pytest.raises(AuthenticationRequired):
            await client.auth.me()

        assert client.session.is_authenticated is False
        assert reasons == ["unauthorized"]
        await client.close()

    @pytest.mark.asyncio
    async def test_403_keeps_session(self):
        client, _ = make_client(
            {
                ("POST", "/api/auth/login"): (200, {"accessToken": "tok", "user": USER}),
                ("POST", "/api/hospitals"): (403, error_body("AUTHZ_001")),
            }
        )
        await client.auth.login("tutor@example.com", "secret1")

        with pytest.raises(PortalError):
            await client.hospitals.create({"name": "H", "address": "A", "phone": "1"})

        assert client.session.is_authenticated is True
        await client.close()

    @pytest.mark.asyncio
    async def test_logout(self):
        client, _ = make_client({("POST", "/api/auth/login"): (200, {"accessToken": "tok", "user": USER})})
        await client.auth.login("tutor@example.com", "secret1")

        client.auth.logout()

        assert client.session.token is None
        await client.close()


class TestResourceClient:

    @pytest.mark.asyncio
    async def test_validation_happens_before_sending(self):
        client, recorder = make_client({})

        with pytest.raises(ValidationError) as exc_info:
            await client.home_tutors.create({"tutorName": "Rahim", "phone": "017"})

        assert exc_info.value.context["missing_fields"] == ["subjects", "classes"]
        assert recorder.requests == []
        await client.close()

    @pytest.mark.asyncio
    async def test_list_drops_empty_params(self):
        client, recorder = make_client({("GET", "/api/tourist-places"): (200, {"data": [{"id": 1}]})})

        items = await client.tourist_places.list(upazilaId=3, placeType=None)

        assert items == [{"id": 1}]
        assert dict(recorder.requests[0].url.params) == {"upazilaId": "3"}
        await client.close()

    @pytest.mark.asyncio
    async def test_transition_error_is_raised(self):
        client, _ = make_client(
            {("PATCH", "/api/blogs/7/approve"): (409, error_body("STATE_001", entity_id=7))}
        )

        with pytest.raises(InvalidTransition):
            await client.blogs.approve(7)
        await client.close()

    @pytest.mark.asyncio
    async def test_slug_lookup_is_blog_only(self):
        client, recorder = make_client({})

        with pytest.raises(NotFound):
            await client.hospitals.get_by_slug("anything")
        assert recorder.requests == []
        await client.close()


class TestAccessRequestsClient:

    @pytest.mark.asyncio
    async def test_request_body_is_camel_case(self):
        client, recorder = make_client(
            {("POST", "/api/access-requests"): (201, {"id": 1, "status": "PENDING"})}
        )

        await client.access_requests.create(["BUSINESS_OWNER"], note="shop")

        assert json.loads(recorder.requests[0].content) == {
            "requestedUserTypes": ["BUSINESS_OWNER"],
            "note": "shop",
        }
        await client.close()

    @pytest.mark.asyncio
    async def test_duplicate_maps_to_conflict_subclass(self):
        client, _ = make_client(
            {("POST", "/api/access-requests"): (409, error_body("CONFLICT_002"))}
        )

        with pytest.raises(Conflict) as exc_info:
            await client.access_requests.create(["BUSINESS_OWNER"])
        assert isinstance(exc_info.value, DuplicateRequest)
        await client.close()
