"""Database models and enumerations"""
from portal.db.enums import (
    ReviewStatus, AccountStatus, UserType, Role,
    HospitalType, PropertyType, BusinessType, PlaceType,
)
from portal.db.models import (
    User, Upazila, Hospital, HomeTutor, ToLet, Business, TouristPlace, Blog,
    AccessRequest, Slider, SiteSetting, AuditEvent,
)

__all__ = [
    # Enums
    "ReviewStatus", "AccountStatus", "UserType", "Role",
    "HospitalType", "PropertyType", "BusinessType", "PlaceType",
    # Models
    "User", "Upazila", "Hospital", "HomeTutor", "ToLet", "Business", "TouristPlace", "Blog",
    "AccessRequest", "Slider", "SiteSetting", "AuditEvent",
]
