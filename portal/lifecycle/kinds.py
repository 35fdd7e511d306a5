"""Registry of submittable content kinds.

Every entity that passes through review is addressed by a SubmittableKind.
The registry binds a kind to its model, its REST resource name, the fields a
submission must carry, and the list filters the public listing accepts.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple, Type

from portal.db.models import Blog, Business, HomeTutor, Hospital, TouristPlace, ToLet


class SubmittableKind(str, Enum):
    """Tag for every entity type with a PENDING/APPROVED/REJECTED lifecycle."""

    HOSPITALS = "hospitals"
    HOME_TUTORS = "home-tutors"
    TO_LETS = "to-lets"
    BUSINESSES = "businesses"
    TOURIST_PLACES = "tourist-places"
    BLOGS = "blogs"

    @property
    def profile(self) -> "KindProfile":
        return KIND_REGISTRY[self]


@dataclass(frozen=True)
class KindProfile:
    """
    Static description of a submittable kind.

    Attributes:
        kind: Kind tag
        model: SQLAlchemy model class
        label: Human-readable singular label
        required_fields: Attributes that must be present and non-blank on submit
        filters: Public query parameter -> model attribute
    """

    kind: SubmittableKind
    model: Type
    label: str
    required_fields: Tuple[str, ...]
    filters: Dict[str, str] = field(default_factory=dict)

    @property
    def entity_type(self) -> str:
        return self.model.__tablename__


KIND_REGISTRY: Dict[SubmittableKind, KindProfile] = {
    SubmittableKind.HOSPITALS: KindProfile(
        kind=SubmittableKind.HOSPITALS,
        model=Hospital,
        label="Hospital",
        required_fields=("name", "address", "phone"),
        filters={"upazilaId": "upazila_id", "type": "type"},
    ),
    SubmittableKind.HOME_TUTORS: KindProfile(
        kind=SubmittableKind.HOME_TUTORS,
        model=HomeTutor,
        label="Home tutor",
        required_fields=("tutor_name", "phone", "subjects", "classes"),
        filters={"upazilaId": "upazila_id"},
    ),
    SubmittableKind.TO_LETS: KindProfile(
        kind=SubmittableKind.TO_LETS,
        model=ToLet,
        label="To-let",
        required_fields=("title", "rent", "address", "contact_phone"),
        filters={"upazilaId": "upazila_id", "propertyType": "property_type"},
    ),
    SubmittableKind.BUSINESSES: KindProfile(
        kind=SubmittableKind.BUSINESSES,
        model=Business,
        label="Business",
        required_fields=("name", "business_type", "phone"),
        filters={"upazilaId": "upazila_id", "businessType": "business_type"},
    ),
    SubmittableKind.TOURIST_PLACES: KindProfile(
        kind=SubmittableKind.TOURIST_PLACES,
        model=TouristPlace,
        label="Tourist place",
        required_fields=("name", "description"),
        filters={"upazilaId": "upazila_id", "placeType": "place_type"},
    ),
    SubmittableKind.BLOGS: KindProfile(
        kind=SubmittableKind.BLOGS,
        model=Blog,
        label="Blog post",
        required_fields=("title", "content"),
        filters={"upazilaId": "upazila_id"},
    ),
}


def missing_required_fields(kind: SubmittableKind, data: dict) -> list:
    """Return the required fields of ``kind`` that are absent or blank in ``data``."""
    missing = []
    for name in kind.profile.required_fields:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing
