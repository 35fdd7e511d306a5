"""Pydantic schemas for API requests and responses"""
from portal.schemas.common import CamelModel, MessageResponse, to_camel
from portal.schemas.content import (
    CONTENT_SCHEMAS,
    BlogFields,
    BlogResponse,
    BusinessFields,
    BusinessResponse,
    HomeTutorFields,
    HomeTutorResponse,
    HospitalFields,
    HospitalResponse,
    SubmittableState,
    ToLetFields,
    ToLetResponse,
    TouristPlaceFields,
    TouristPlaceResponse,
)
from portal.schemas.reference import (
    SettingResponse,
    SettingUpdate,
    SliderCreate,
    SliderResponse,
    SliderUpdate,
    UpazilaCreate,
    UpazilaResponse,
    UpazilaUpdate,
)
from portal.schemas.users import (
    AccessRequestCreate,
    AccessRequestResponse,
    AccessRequestReview,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserCreate,
    UserResponse,
)

__all__ = [
    # Common
    "CamelModel",
    "MessageResponse",
    "to_camel",
    # Content
    "CONTENT_SCHEMAS",
    "SubmittableState",
    "HospitalFields",
    "HospitalResponse",
    "HomeTutorFields",
    "HomeTutorResponse",
    "ToLetFields",
    "ToLetResponse",
    "BusinessFields",
    "BusinessResponse",
    "TouristPlaceFields",
    "TouristPlaceResponse",
    "BlogFields",
    "BlogResponse",
    # Reference data
    "UpazilaCreate",
    "UpazilaUpdate",
    "UpazilaResponse",
    "SliderCreate",
    "SliderUpdate",
    "SliderResponse",
    "SettingUpdate",
    "SettingResponse",
    # Users
    "RegisterRequest",
    "RegisterResponse",
    "LoginRequest",
    "TokenResponse",
    "UserResponse",
    "ProfileResponse",
    "UserCreate",
    "AccessRequestCreate",
    "AccessRequestReview",
    "AccessRequestResponse",
]
