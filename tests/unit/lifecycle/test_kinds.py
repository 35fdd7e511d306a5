"""Unit tests for the submittable kind registry"""
import pytest

from portal.db.models import Blog, Business, HomeTutor, Hospital, TouristPlace, ToLet
from portal.lifecycle.kinds import KIND_REGISTRY, SubmittableKind, missing_required_fields


class TestRegistry:

    def test_every_kind_is_registered(self):
        assert set(KIND_REGISTRY) == set(SubmittableKind)

    @pytest.mark.parametrize(
        "kind,model",
        [
            (SubmittableKind.HOSPITALS, Hospital),
            (SubmittableKind.HOME_TUTORS, HomeTutor),
            (SubmittableKind.TO_LETS, ToLet),
            (SubmittableKind.BUSINESSES, Business),
            (SubmittableKind.TOURIST_PLACES, TouristPlace),
            (SubmittableKind.BLOGS, Blog),
        ],
    )
    def test_kind_binds_model(self, kind, model):
        assert kind.profile.model is model
        assert kind.profile.entity_type == model.__tablename__

    def test_filters_point_at_columns(self):
        for profile in KIND_REGISTRY.values():
            columns = set(profile.model.__table__.columns.keys())
            for attribute in profile.filters.values():
                assert attribute in columns
            for name in profile.required_fields:
                assert name in columns

    def test_resource_names_are_url_segments(self):
        assert SubmittableKind("home-tutors") is SubmittableKind.HOME_TUTORS
        assert SubmittableKind.TOURIST_PLACES.value == "tourist-places"


class TestMissingRequiredFields:

    def test_reports_every_missing_field(self):
        missing = missing_required_fields(SubmittableKind.HOME_TUTORS, {"phone": "017"})
        assert missing == ["tutor_name", "subjects", "classes"]

    def test_blank_strings_count_as_missing(self):
        missing = missing_required_fields(SubmittableKind.BLOGS, {"title": "   ", "content": "Body"})
        assert missing == ["title"]

    def test_zero_is_a_value(self):
        data = {"title": "Flat", "rent": 0, "address": "Road 1", "contact_phone": "017"}
        assert missing_required_fields(SubmittableKind.TO_LETS, data) == []
