"""Database model enumerations"""
import enum


class ReviewStatus(str, enum.Enum):
    """Review status shared by submittable content and access requests"""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class AccountStatus(str, enum.Enum):
    """User account approval status"""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    SUSPENDED = "SUSPENDED"


class UserType(str, enum.Enum):
    """Content-creation capabilities a user can hold"""
    GENERAL_USER = "GENERAL_USER"
    HOME_TUTOR = "HOME_TUTOR"
    TO_LET_OWNER = "TO_LET_OWNER"
    BUSINESS_OWNER = "BUSINESS_OWNER"
    CONTENT_VOLUNTEER = "CONTENT_VOLUNTEER"


class Role(str, enum.Enum):
    """System authority grants"""
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    AREA_MODERATOR = "AREA_MODERATOR"
    CONTENT_VOLUNTEER = "CONTENT_VOLUNTEER"


class HospitalType(str, enum.Enum):
    GOVERNMENT = "GOVERNMENT"
    PRIVATE = "PRIVATE"


class PropertyType(str, enum.Enum):
    APARTMENT = "APARTMENT"
    HOUSE = "HOUSE"
    ROOM = "ROOM"
    SHOP = "SHOP"
    OFFICE = "OFFICE"


class BusinessType(str, enum.Enum):
    RESTAURANT = "RESTAURANT"
    SHOP = "SHOP"
    HOTEL = "HOTEL"
    PHARMACY = "PHARMACY"
    ELECTRONICS = "ELECTRONICS"
    CLOTHING = "CLOTHING"
    GROCERY = "GROCERY"
    BAKERY = "BAKERY"
    SERVICE = "SERVICE"
    OTHER = "OTHER"


class PlaceType(str, enum.Enum):
    HISTORICAL = "HISTORICAL"
    NATURAL = "NATURAL"
    RELIGIOUS = "RELIGIOUS"
    CULTURAL = "CULTURAL"
    ENTERTAINMENT = "ENTERTAINMENT"
    PARK = "PARK"
    MUSEUM = "MUSEUM"
    OTHER = "OTHER"
