"""Pydantic schemas for submittable content.

Each kind has one ``*Fields`` model used for both create and update payloads.
Every field is optional at the schema level; required fields are enforced by
the lifecycle engine so missing ones surface as a ValidationError listing
them all.
"""
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Type

from portal.db.enums import BusinessType, HospitalType, PlaceType, PropertyType, ReviewStatus
from portal.lifecycle.kinds import SubmittableKind
from portal.schemas.common import CamelModel


class SubmittableState(CamelModel):
    """Lifecycle columns shared by every submittable response"""
    id: int
    status: ReviewStatus
    owner_id: Optional[int] = None
    upazila_id: Optional[int] = None
    reviewed_by_id: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class HospitalFields(CamelModel):
    name: Optional[str] = None
    name_bn: Optional[str] = None
    type: Optional[HospitalType] = None
    address: Optional[str] = None
    address_bn: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    services: Optional[str] = None
    services_bn: Optional[str] = None
    website: Optional[str] = None
    upazila_id: Optional[int] = None


class HospitalResponse(HospitalFields, SubmittableState):
    pass


class HomeTutorFields(CamelModel):
    tutor_name: Optional[str] = None
    tutor_name_bn: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    subjects: Optional[str] = None
    subjects_bn: Optional[str] = None
    classes: Optional[str] = None
    experience_years: Optional[int] = None
    qualification: Optional[str] = None
    qualification_bn: Optional[str] = None
    preferred_area: Optional[str] = None
    expected_fee: Optional[str] = None
    additional_info: Optional[str] = None
    upazila_id: Optional[int] = None


class HomeTutorResponse(HomeTutorFields, SubmittableState):
    pass


class ToLetFields(CamelModel):
    title: Optional[str] = None
    title_bn: Optional[str] = None
    property_type: Optional[PropertyType] = None
    rent: Optional[float] = None
    address: Optional[str] = None
    address_bn: Optional[str] = None
    area: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    facilities: Optional[str] = None
    facilities_bn: Optional[str] = None
    description: Optional[str] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    upazila_id: Optional[int] = None


class ToLetResponse(ToLetFields, SubmittableState):
    pass


class BusinessFields(CamelModel):
    name: Optional[str] = None
    name_bn: Optional[str] = None
    business_type: Optional[BusinessType] = None
    address: Optional[str] = None
    address_bn: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    description_bn: Optional[str] = None
    opening_hours: Optional[str] = None
    specialties: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    upazila_id: Optional[int] = None


class BusinessResponse(BusinessFields, SubmittableState):
    pass


class TouristPlaceFields(CamelModel):
    name: Optional[str] = None
    name_bn: Optional[str] = None
    place_type: Optional[PlaceType] = None
    description: Optional[str] = None
    description_bn: Optional[str] = None
    address: Optional[str] = None
    address_bn: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    features: Optional[str] = None
    features_bn: Optional[str] = None
    entry_fee: Optional[str] = None
    opening_hours: Optional[str] = None
    best_time_to_visit: Optional[str] = None
    image_url: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    upazila_id: Optional[int] = None


class TouristPlaceResponse(TouristPlaceFields, SubmittableState):
    pass


class BlogFields(CamelModel):
    title: Optional[str] = None
    title_bn: Optional[str] = None
    content: Optional[str] = None
    content_bn: Optional[str] = None
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    tags: Optional[List[str]] = None
    upazila_id: Optional[int] = None


class BlogResponse(BlogFields, SubmittableState):
    slug: str
    published_at: Optional[datetime] = None


# Kind -> (payload model, response model)
CONTENT_SCHEMAS: Dict[SubmittableKind, Tuple[Type[CamelModel], Type[CamelModel]]] = {
    SubmittableKind.HOSPITALS: (HospitalFields, HospitalResponse),
    SubmittableKind.HOME_TUTORS: (HomeTutorFields, HomeTutorResponse),
    SubmittableKind.TO_LETS: (ToLetFields, ToLetResponse),
    SubmittableKind.BUSINESSES: (BusinessFields, BusinessResponse),
    SubmittableKind.TOURIST_PLACES: (TouristPlaceFields, TouristPlaceResponse),
    SubmittableKind.BLOGS: (BlogFields, BlogResponse),
}
