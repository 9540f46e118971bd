"""
Tests for the request binding pipeline: decoding, validation, mode
selection, create-path mapping and update-path merging.
"""

import json

import pytest
from sqlalchemy import inspect

from binding import Binding, BindingResolver
from constants import Authority, DayOfWeek
from dtos.request import CategorySaveDTO, GroupSaveDTO, SpecialEventSaveDTO, UserSaveDTO
from exceptions import CollisionError, EmptyBodyError, NotFoundError, StructuralConfigError, ValidationError
from models import Category, Group, SpecialEvent, User


@pytest.fixture
def resolver(db_session):
    return BindingResolver(db_session)


def body(payload) -> bytes:
    return json.dumps(payload).encode()


class TestCreatePath:
    def test_new_username_builds_new_entity(self, resolver):
        user = resolver.resolve(Binding(UserSaveDTO, User), body({"username": "new@x.com"}))

        assert isinstance(user, User)
        assert user.username == "new@x.com"
        assert user.id_user is None
        assert inspect(user).transient

    def test_scalars_copied_and_identity_unset(self, resolver, make_group):
        existing = make_group("Existing")

        group = resolver.resolve(
            Binding(GroupSaveDTO, Group),
            body({"name": "Youth", "phone": "555-0101", "day_of_week": "friday", "hour": "19:30"})
        )

        assert group is not existing
        assert group.id_group is None
        assert group.name == "Youth"
        assert group.phone == "555-0101"
        assert group.day_of_week is DayOfWeek.FRIDAY
        assert group.hour.hour == 19

    def test_role_goes_through_property_setter(self, resolver):
        user = resolver.resolve(
            Binding(UserSaveDTO, User),
            body({"username": "leader@x.com", "role": "instructor"})
        )

        assert user.authorities == [Authority.INSTRUCTOR]

    def test_references_populated_when_requested(self, resolver, make_category):
        category = make_category("Alpha")
        payload = body({"name": "Youth", "category": {"id_category": category.id_category}})

        populated = resolver.resolve(Binding(GroupSaveDTO, Group, populate=True), payload)
        plain = resolver.resolve(Binding(GroupSaveDTO, Group), payload)

        assert populated.category is category
        assert plain.category is None

    def test_missing_reference_rejects_request(self, resolver, instructor):
        payload = body({"name": "Youth", "instructor_ids": [instructor.id_user, 999]})

        with pytest.raises(NotFoundError) as exc_info:
            resolver.resolve(Binding(GroupSaveDTO, Group, populate=True), payload)

        assert exc_info.value.entity_type == "User"
        assert exc_info.value.entity_id == 999

    def test_nested_members_built(self, resolver, member):
        payload = body({
            "name": "Retreat",
            "day_of_week": "SATURDAY",
            "number_of_slots": 10,
            "members": [{"user": {"id_user": member.id_user}}],
        })

        event = resolver.resolve(Binding(SpecialEventSaveDTO, SpecialEvent, populate=True), payload)

        assert event.members[0].user is member

    def test_dict_body_accepted(self, resolver):
        category = resolver.resolve(Binding(CategorySaveDTO, Category), {"name_category": " Youth "})

        assert category.name_category == "Youth"


class TestUpdatePath:
    def test_present_identity_loads_live_entity(self, resolver, db_session):
        db_session.add(Group(id_group=7, name="Original", phone="555-0100", day_of_week=DayOfWeek.MONDAY))
        db_session.commit()

        group = resolver.resolve(Binding(GroupSaveDTO, Group), body({"id_group": 7, "name": "Updated"}))

        assert group is db_session.get(Group, 7)
        assert group.id_group == 7
        assert group.name == "Updated"
        assert group.phone == "555-0100"
        assert group.day_of_week is DayOfWeek.MONDAY

    def test_explicit_null_overwrites(self, resolver, make_group):
        group = make_group("Youth", phone="555-0100")

        updated = resolver.resolve(
            Binding(GroupSaveDTO, Group),
            body({"id_group": group.id_group, "phone": None})
        )

        assert updated.phone is None
        assert updated.name == "Youth"

    def test_null_identity_takes_create_path(self, resolver, make_group):
        make_group("Youth")

        group = resolver.resolve(Binding(GroupSaveDTO, Group), body({"id_group": None, "name": "Other"}))

        assert group.id_group is None
        assert inspect(group).transient

    def test_unknown_identity_not_found(self, resolver):
        with pytest.raises(NotFoundError) as exc_info:
            resolver.resolve(Binding(GroupSaveDTO, Group), body({"id_group": 12345, "name": "Ghost"}))

        assert exc_info.value.entity_type == "Group"

    def test_update_does_not_populate_references(self, resolver, make_group, make_category):
        group = make_group("Youth")
        category = make_category("Alpha")

        updated = resolver.resolve(
            Binding(GroupSaveDTO, Group, populate=True),
            body({"id_group": group.id_group, "category": {"id_category": category.id_category}})
        )

        assert updated.category is None

    def test_uniqueness_checked_before_merge(self, resolver, make_user):
        make_user("first@x.com")
        second = make_user("second@x.com")

        with pytest.raises(CollisionError):
            resolver.resolve(
                Binding(UserSaveDTO, User),
                body({"id_user": second.id_user, "username": "first@x.com"})
            )

        assert second.username == "second@x.com"


class TestDecoding:
    @pytest.mark.parametrize("raw", [b"", b"   ", b"null", None])
    def test_empty_body(self, resolver, raw):
        with pytest.raises(EmptyBodyError):
            resolver.resolve(Binding(UserSaveDTO, User), raw)

    def test_malformed_json(self, resolver):
        with pytest.raises(ValidationError) as exc_info:
            resolver.resolve(Binding(UserSaveDTO, User), b"{not json")

        assert exc_info.value.violations
        assert exc_info.value.violations[0]["field"] == "body"
        assert exc_info.value.violations[0]["rejected_value"] is None

    def test_all_rule_violations_reported(self, resolver):
        with pytest.raises(ValidationError) as exc_info:
            resolver.resolve(
                Binding(UserSaveDTO, User),
                body({"username": "not-an-email", "role": "PASTOR", "age": -1})
            )

        fields = {v["field"] for v in exc_info.value.violations}
        assert fields == {"username", "role", "age"}
        rejected = {v["field"]: v["rejected_value"] for v in exc_info.value.violations}
        assert rejected["age"] == -1

    def test_rules_skipped_without_validation(self, resolver):
        user = resolver.resolve(
            Binding(UserSaveDTO, User, validate=False),
            body({"username": "not-an-email", "age": -1})
        )

        assert user.username == "not-an-email"
        assert user.age == -1

    def test_type_errors_reported_without_validation(self, resolver):
        with pytest.raises(ValidationError) as exc_info:
            resolver.resolve(Binding(UserSaveDTO, User, validate=False), body({"age": "many"}))

        assert exc_info.value.violations[0]["field"] == "age"

    def test_mismatched_entity_is_structural_error(self, resolver):
        with pytest.raises(StructuralConfigError):
            resolver.resolve(Binding(UserSaveDTO, Group), body({"username": "a@x.com"}))
