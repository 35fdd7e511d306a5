"""Database models for the district portal"""
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Boolean, Float,
    ForeignKey, JSON, Enum, CheckConstraint, Index
)
from sqlalchemy.orm import declared_attr, relationship
from sqlalchemy.sql import func

from portal.core.database import Base
from portal.db.enums import (
    AccountStatus,
    BusinessType,
    HospitalType,
    PlaceType,
    PropertyType,
    ReviewStatus,
)


def _enum_column(enum_cls, name: str, **kwargs) -> Column:
    """Enum column stored by value, portable across PostgreSQL and SQLite."""
    return Column(
        Enum(
            enum_cls,
            name=name,
            native_enum=False,
            length=32,
            values_callable=lambda x: [e.value for e in x],
        ),
        **kwargs,
    )


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class User(TimestampMixin, Base):
    """Portal account with capability types and system roles"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=True)

    # Stored as JSON lists, always written de-duplicated and sorted
    user_types = Column(JSON, nullable=False, default=lambda: [])
    roles = Column(JSON, nullable=False, default=lambda: [])

    approval_status = _enum_column(
        AccountStatus, "account_status", nullable=False, default=AccountStatus.PENDING
    )
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    access_requests = relationship(
        "AccessRequest",
        foreign_keys="AccessRequest.user_id",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("length(trim(email)) > 0", name="chk_user_email_not_empty"),
        Index("idx_users_approval_status", "approval_status"),
    )


class Upazila(TimestampMixin, Base):
    """Administrative sub-district used to scope content"""
    __tablename__ = "upazilas"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    name_bn = Column(String(120), nullable=True)
    slug = Column(String(120), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    description_bn = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    display_order = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("length(trim(slug)) > 0", name="chk_upazila_slug_not_empty"),
    )


class SubmittableMixin(TimestampMixin):
    """Columns shared by every entity that passes through review"""

    id = Column(Integer, primary_key=True, autoincrement=True)

    @declared_attr
    def status(cls):
        return _enum_column(
            ReviewStatus, "review_status", nullable=False, default=ReviewStatus.PENDING
        )

    @declared_attr
    def owner_id(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    @declared_attr
    def upazila_id(cls):
        return Column(Integer, ForeignKey("upazilas.id", ondelete="SET NULL"), nullable=True)

    @declared_attr
    def reviewed_by_id(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    @declared_attr
    def upazila(cls):
        return relationship("Upazila", lazy="selectin")

    @declared_attr
    def __table_args__(cls):
        return (
            Index(f"idx_{cls.__tablename__}_status", "status"),
            Index(f"idx_{cls.__tablename__}_upazila_id", "upazila_id"),
        )


class Hospital(SubmittableMixin, Base):
    __tablename__ = "hospitals"

    name = Column(String(255), nullable=False)
    name_bn = Column(String(255))
    type = _enum_column(HospitalType, "hospital_type", nullable=True)
    address = Column(Text, nullable=False)
    address_bn = Column(Text)
    phone = Column(String(64), nullable=False)
    email = Column(String(255))
    services = Column(Text)
    services_bn = Column(Text)
    website = Column(String(500))


class HomeTutor(SubmittableMixin, Base):
    __tablename__ = "home_tutors"

    tutor_name = Column(String(255), nullable=False)
    tutor_name_bn = Column(String(255))
    phone = Column(String(64), nullable=False)
    email = Column(String(255))
    subjects = Column(Text, nullable=False)
    subjects_bn = Column(Text)
    classes = Column(String(255), nullable=False)
    experience_years = Column(Integer, nullable=False, default=0)
    qualification = Column(String(255))
    qualification_bn = Column(String(255))
    preferred_area = Column(String(255))
    expected_fee = Column(String(120))
    additional_info = Column(Text)


class ToLet(SubmittableMixin, Base):
    __tablename__ = "to_lets"

    title = Column(String(255), nullable=False)
    title_bn = Column(String(255))
    property_type = _enum_column(PropertyType, "property_type", nullable=False, default=PropertyType.APARTMENT)
    rent = Column(Float, nullable=False)
    address = Column(Text, nullable=False)
    address_bn = Column(Text)
    area = Column(Float)
    bedrooms = Column(Integer)
    bathrooms = Column(Integer)
    facilities = Column(Text)
    facilities_bn = Column(Text)
    description = Column(Text)
    contact_name = Column(String(255))
    contact_phone = Column(String(64), nullable=False)
    contact_email = Column(String(255))
    latitude = Column(Float)
    longitude = Column(Float)


class Business(SubmittableMixin, Base):
    __tablename__ = "businesses"

    name = Column(String(255), nullable=False)
    name_bn = Column(String(255))
    business_type = _enum_column(BusinessType, "business_type", nullable=False)
    address = Column(Text)
    address_bn = Column(Text)
    phone = Column(String(64), nullable=False)
    email = Column(String(255))
    website = Column(String(500))
    description = Column(Text)
    description_bn = Column(Text)
    opening_hours = Column(String(255))
    specialties = Column(Text)
    latitude = Column(Float)
    longitude = Column(Float)


class TouristPlace(SubmittableMixin, Base):
    __tablename__ = "tourist_places"

    name = Column(String(255), nullable=False)
    name_bn = Column(String(255))
    place_type = _enum_column(PlaceType, "place_type", nullable=False, default=PlaceType.HISTORICAL)
    description = Column(Text, nullable=False)
    description_bn = Column(Text)
    address = Column(Text)
    address_bn = Column(Text)
    phone = Column(String(64))
    email = Column(String(255))
    website = Column(String(500))
    features = Column(Text)
    features_bn = Column(Text)
    entry_fee = Column(String(120))
    opening_hours = Column(String(255))
    best_time_to_visit = Column(String(255))
    image_url = Column(String(1000))
    latitude = Column(Float)
    longitude = Column(Float)


class Blog(SubmittableMixin, Base):
    __tablename__ = "blogs"

    title = Column(String(255), nullable=False)
    title_bn = Column(String(255))
    slug = Column(String(160), unique=True, nullable=False)
    content = Column(Text, nullable=False)
    content_bn = Column(Text)
    excerpt = Column(Text)
    featured_image = Column(String(1000))
    tags = Column(JSON, nullable=False, default=lambda: [])
    published_at = Column(DateTime(timezone=True), nullable=True)


class AccessRequest(TimestampMixin, Base):
    """User petition for additional capability types"""
    __tablename__ = "access_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    requested_user_types = Column(JSON, nullable=False, default=lambda: [])
    note = Column(Text)
    status = _enum_column(ReviewStatus, "review_status", nullable=False, default=ReviewStatus.PENDING)
    admin_note = Column(Text)
    reviewed_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", foreign_keys=[user_id], back_populates="access_requests", lazy="selectin")

    __table_args__ = (
        Index("idx_access_requests_user_id", "user_id"),
        Index("idx_access_requests_status", "status"),
    )


class Slider(TimestampMixin, Base):
    """Homepage promotional entry"""
    __tablename__ = "sliders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    title_bn = Column(String(255))
    description = Column(Text)
    description_bn = Column(Text)
    image_url = Column(String(1000), nullable=False)
    link_url = Column(String(1000))
    button_text = Column(String(120))
    is_active = Column(Boolean, nullable=False, default=True)
    display_order = Column(Integer, nullable=False, default=0)


class SiteSetting(TimestampMixin, Base):
    """Global key-value configuration readable by everyone"""
    __tablename__ = "site_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(120), unique=True, nullable=False)
    value = Column(Text, nullable=True)
    description = Column(Text, nullable=True)


class AuditEvent(Base):
    """Append-only record of lifecycle transitions"""
    __tablename__ = "audit_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_type = Column(String(64), nullable=False)
    entity_type = Column(String(64), nullable=False)
    entity_id = Column(Integer, nullable=False)
    actor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    from_status = Column(String(32), nullable=True)
    to_status = Column(String(32), nullable=True)
    payload = Column(JSON, nullable=False, default=lambda: {})
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_audit_events_entity", "entity_type", "entity_id"),
    )
