"""Async HTTP client for the portal API"""
from portal.client.api import (
    AccessRequestsClient,
    AuthClient,
    PortalClient,
    ResourceClient,
    error_from_response,
    unwrap,
)
from portal.client.session import Session, context_from_payload

__all__ = [
    "PortalClient",
    "Session",
    "AuthClient",
    "ResourceClient",
    "AccessRequestsClient",
    "context_from_payload",
    "error_from_response",
    "unwrap",
]
