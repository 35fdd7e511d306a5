"""FastAPI dependency injection for portal services"""
from portal.core.auth import get_current_context, get_optional_context
from portal.lifecycle.access_requests import AccessRequestService, access_request_service
from portal.lifecycle.content import ContentService, get_content_service
from portal.lifecycle.kinds import SubmittableKind
from portal.lifecycle.users import UserService, user_service

__all__ = [
    "get_current_context",
    "get_optional_context",
    "get_user_service",
    "get_access_request_service",
    "content_service_dependency",
]


def get_user_service() -> UserService:
    """Get user service instance"""
    return user_service


def get_access_request_service() -> AccessRequestService:
    """Get access request service instance"""
    return access_request_service


def content_service_dependency(kind: SubmittableKind):
    """Build a dependency returning the content service for one kind"""

    def get_service() -> ContentService:
        return get_content_service(kind)

    return get_service
