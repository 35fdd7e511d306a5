"""Async HTTP client for the portal REST API.

Every mutation goes straight to the server and returns the server's fresh
representation; nothing is cached locally, so callers re-fetch lists after a
mutation instead of merging. Failures are raised as the same exception
classes the server uses and are never retried.
"""
import logging
import re
from typing import Any, Dict, Iterable, List, Optional

import httpx

from portal.exceptions import (
    EXCEPTIONS_BY_CODE,
    AuthenticationRequired,
    AuthorizationDenied,
    Conflict,
    NotFound,
    PortalError,
    ValidationError,
)
from portal.lifecycle.error_codes import ErrorCodeDictionary
from portal.lifecycle.kinds import SubmittableKind, missing_required_fields
from portal.client.session import Session

logger = logging.getLogger(__name__)

# Fallback when the body carries no known error code
EXCEPTIONS_BY_STATUS = {
    401: AuthenticationRequired,
    403: AuthorizationDenied,
    404: NotFound,
    409: Conflict,
    422: ValidationError,
}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def unwrap(payload: Any) -> Any:
    """Unwrap a ``{"data": ...}`` envelope if the server sent one

    Only a dict whose sole key is ``data`` counts as an envelope, so key-value
    maps such as site settings pass through unchanged.
    """
    if isinstance(payload, dict) and set(payload) == {"data"}:
        return payload["data"]
    return payload


def error_from_response(response: httpx.Response) -> PortalError:
    """Rebuild the server-side exception from an error response"""
    try:
        body = response.json()
    except ValueError:
        body = {}
    error = body.get("error") if isinstance(body, dict) else None
    error = error if isinstance(error, dict) else {}

    code = error.get("code")
    exc_class = EXCEPTIONS_BY_CODE.get(code) or EXCEPTIONS_BY_STATUS.get(response.status_code, PortalError)
    try:
        error_code = ErrorCodeDictionary.get(code) if code else None
    except KeyError:
        error_code = None

    return exc_class(
        message=error.get("message") or f"HTTP {response.status_code}",
        error_code=error_code,
        entity_id=error.get("entity_id"),
        context=error.get("context") or {},
    )


class PortalClient:
    """
    Entry point: owns the HTTP connection and the Session.

    Example:
        async with PortalClient("http://localhost:8000/api") as client:
            await client.auth.login("admin@example.com", "secret")
            pending = await client.hospitals.pending()
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[Session] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.session = session or Session()
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            transport=transport,
            timeout=timeout,
        )

        self.auth = AuthClient(self)
        self.users = UsersClient(self)
        self.access_requests = AccessRequestsClient(self)
        self.upazilas = ReferenceClient(self, "upazilas")
        self.sliders = ReferenceClient(self, "sliders")
        self.settings = SettingsClient(self)
        self.admin = AdminClient(self)

        self.resources: Dict[SubmittableKind, ResourceClient] = {
            kind: ResourceClient(self, kind) for kind in SubmittableKind
        }
        self.hospitals = self.resources[SubmittableKind.HOSPITALS]
        self.home_tutors = self.resources[SubmittableKind.HOME_TUTORS]
        self.to_lets = self.resources[SubmittableKind.TO_LETS]
        self.businesses = self.resources[SubmittableKind.BUSINESSES]
        self.tourist_places = self.resources[SubmittableKind.TOURIST_PLACES]
        self.blogs = self.resources[SubmittableKind.BLOGS]

    async def __aenter__(self) -> "PortalClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    def resource(self, kind: SubmittableKind) -> "ResourceClient":
        return self.resources[SubmittableKind(kind)]

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send one request with the session's bearer token.

        Raises:
            AuthenticationRequired: On 401, after tearing the session down
            PortalError subclass: For any other error response
            httpx.HTTPError: Transport failures, unchanged
        """
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        response = await self._http.request(
            method,
            path,
            json=json,
            params=params or None,
            headers=self.session.auth_headers(),
        )

        if response.status_code == 401:
            self.session.clear(reason="unauthorized")
            raise error_from_response(response)
        if response.status_code >= 400:
            exc = error_from_response(response)
            logger.debug("%s %s failed: %s", method, path, exc.error_code.code)
            raise exc

        if response.status_code == 204 or not response.content:
            return None
        return unwrap(response.json())


class _SubClient:
    def __init__(self, client: PortalClient):
        self._client = client

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        return await self._client.request(method, path, **kwargs)


class AuthClient(_SubClient):
    """Login, registration and logout; each one starts or ends the Session"""

    async def register(
        self,
        email: str,
        password: str,
        full_name: str,
        phone: Optional[str] = None,
        user_types: Iterable[str] = (),
    ) -> Dict[str, Any]:
        data = await self._request(
            "POST",
            "/auth/register",
            json={
                "email": email,
                "password": password,
                "fullName": full_name,
                "phone": phone,
                "userTypes": list(user_types),
            },
        )
        self._client.session.start(data["accessToken"], data["user"])
        return data

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        self._client.session.start(data["accessToken"], data["user"])
        return data

    async def me(self) -> Dict[str, Any]:
        """Re-read the profile and refresh the session identity"""
        profile = await self._request("GET", "/auth/me")
        self._client.session.refresh(profile)
        return profile

    def logout(self) -> None:
        self._client.session.clear(reason="logout")


class ResourceClient(_SubClient):
    """Client for one submittable kind"""

    def __init__(self, client: PortalClient, kind: SubmittableKind):
        super().__init__(client)
        self.kind = kind
        self.path = f"/{kind.value}"

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Check required fields before sending anything.

        Raises:
            ValidationError: Listing every missing field
        """
        normalized = {to_snake(key): value for key, value in data.items()}
        missing = missing_required_fields(self.kind, normalized)
        if missing:
            raise ValidationError(
                message=f"Missing required fields: {', '.join(missing)}",
                context={"missing_fields": missing},
            )

    async def list(self, status: Optional[str] = None, **filters) -> List[Dict[str, Any]]:
        """List items; filters use the wire names, e.g. upazilaId=3"""
        params = dict(filters)
        params["status"] = status
        return await self._request("GET", self.path, params=params)

    async def get(self, item_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"{self.path}/{item_id}")

    async def pending(self) -> List[Dict[str, Any]]:
        return await self._request("GET", f"{self.path}/pending")

    async def mine(self) -> List[Dict[str, Any]]:
        return await self._request("GET", f"{self.path}/mine")

    async def get_by_slug(self, slug: str) -> Dict[str, Any]:
        if self.kind is not SubmittableKind.BLOGS:
            raise NotFound(message=f"{self.kind.profile.label} has no slug lookup")
        return await self._request("GET", f"{self.path}/slug/{slug}")

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self.validate(data)
        return await self._request("POST", self.path, json=data)

    async def update(self, item_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"{self.path}/{item_id}", json=data)

    async def delete(self, item_id: int) -> Dict[str, Any]:
        return await self._request("DELETE", f"{self.path}/{item_id}")

    async def approve(self, item_id: int) -> Dict[str, Any]:
        return await self._request("PATCH", f"{self.path}/{item_id}/approve")

    async def reject(self, item_id: int) -> Dict[str, Any]:
        return await self._request("PATCH", f"{self.path}/{item_id}/reject")


class UsersClient(_SubClient):

    async def me(self) -> Dict[str, Any]:
        return await self._request("GET", "/users/me")

    async def list(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        return await self._request("GET", "/users", params={"status": status})

    async def pending(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/users/pending")

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/users", json=data)

    async def approve(self, user_id: int) -> Dict[str, Any]:
        return await self._request("PATCH", f"/users/{user_id}/approve")

    async def reject(self, user_id: int) -> Dict[str, Any]:
        return await self._request("PATCH", f"/users/{user_id}/reject")

    async def suspend(self, user_id: int) -> Dict[str, Any]:
        return await self._request("PATCH", f"/users/{user_id}/suspend")

    async def request_access(self, user_types: Iterable[str], note: Optional[str] = None) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/users/request-access",
            json={"requestedUserTypes": list(user_types), "note": note},
        )


class AccessRequestsClient(_SubClient):

    async def create(self, user_types: Iterable[str], note: Optional[str] = None) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/access-requests",
            json={"requestedUserTypes": list(user_types), "note": note},
        )

    async def list(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        return await self._request("GET", "/access-requests", params={"status": status})

    async def pending(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/access-requests/pending")

    async def mine(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/access-requests/my-requests")

    async def approve(self, request_id: int, admin_note: Optional[str] = None) -> Dict[str, Any]:
        return await self._request(
            "PATCH", f"/access-requests/{request_id}/approve", json={"adminNote": admin_note}
        )

    async def reject(self, request_id: int, admin_note: Optional[str] = None) -> Dict[str, Any]:
        return await self._request(
            "PATCH", f"/access-requests/{request_id}/reject", json={"adminNote": admin_note}
        )


class ReferenceClient(_SubClient):
    """Plain CRUD for admin-owned reference data (upazilas, sliders)"""

    def __init__(self, client: PortalClient, resource: str):
        super().__init__(client)
        self.path = f"/{resource}"

    async def list(self) -> List[Dict[str, Any]]:
        return await self._request("GET", self.path)

    async def get(self, key: Any) -> Dict[str, Any]:
        """Upazilas are fetched by slug, sliders by id"""
        return await self._request("GET", f"{self.path}/{key}")

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", self.path, json=data)

    async def update(self, item_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"{self.path}/{item_id}", json=data)

    async def delete(self, item_id: int) -> Dict[str, Any]:
        return await self._request("DELETE", f"{self.path}/{item_id}")

    async def seed(self) -> List[Dict[str, Any]]:
        return await self._request("POST", f"{self.path}/seed")


class SettingsClient(_SubClient):

    async def all(self) -> Dict[str, Optional[str]]:
        return await self._request("GET", "/settings")

    async def get(self, key: str) -> Dict[str, Any]:
        return await self._request("GET", f"/settings/{key}")

    async def set(self, key: str, value: Optional[str], description: Optional[str] = None) -> Dict[str, Any]:
        body = {"value": value}
        if description is not None:
            body["description"] = description
        return await self._request("PUT", f"/settings/{key}", json=body)

    async def bulk_update(self, values: Dict[str, Optional[str]]) -> Dict[str, Optional[str]]:
        return await self._request("PUT", "/settings", json=values)


class AdminClient(_SubClient):

    async def stats(self) -> Dict[str, Any]:
        return await self._request("GET", "/admin/stats")
