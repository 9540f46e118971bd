"""
Tests for GraphPopulator: flat and nested references, order preservation
and all-or-nothing assignment.
"""

import pytest

from binding import GraphPopulator
from constants import Authority
from dtos.request import GroupAssignInstructorsDTO, GroupSaveDTO, SpecialEventSaveDTO
from exceptions import NotFoundError
from models import Group, SpecialEvent, SpecialEventMember
from repositories.entity_store import EntityStore


@pytest.fixture
def populator(db_session):
    return GraphPopulator(EntityStore(db_session))


@pytest.fixture
def instructors(make_user):
    return [make_user(f"leader{i}@x.com", Authority.INSTRUCTOR) for i in range(3)]


def test_flat_list_resolved_in_order(populator, instructors):
    ids = [instructors[2].id_user, instructors[0].id_user, instructors[1].id_user]
    group = Group(name="Youth")

    result = populator.populate(GroupSaveDTO(name="Youth", instructor_ids=ids), group)

    assert result is group
    assert [u.id_user for u in group.instructors] == ids
    assert group.instructors[0] is instructors[2]


def test_missing_id_raises_and_leaves_destination_untouched(populator, instructors, make_category):
    category = make_category("Alpha")
    ids = [instructors[0].id_user, instructors[1].id_user, 999]
    dto = GroupSaveDTO(
        name="Youth",
        category={"id_category": category.id_category},
        instructor_ids=ids
    )
    group = Group(name="Youth")

    with pytest.raises(NotFoundError) as exc_info:
        populator.populate(dto, group)

    assert exc_info.value.entity_type == "User"
    assert exc_info.value.entity_id == 999
    assert group.category is None
    assert group.instructors == []


def test_scalar_reference_resolved(populator, make_category, admin):
    category = make_category("Alpha")
    dto = GroupSaveDTO(
        name="Youth",
        category={"id_category": category.id_category},
        user_responsible={"id_user": admin.id_user}
    )

    group = populator.populate(dto, Group(name="Youth"))

    assert group.category is category
    assert group.user_responsible is admin


def test_missing_scalar_reference_raises(populator):
    with pytest.raises(NotFoundError) as exc_info:
        populator.populate(GroupSaveDTO(name="Youth", category={"id_category": 42}), Group())

    assert exc_info.value.entity_type == "Category"
    assert exc_info.value.message == "'Category' not found."


def test_none_fields_leave_destination_as_is(populator, make_category):
    category = make_category("Alpha")
    group = Group(name="Youth", category=category)

    populator.populate(GroupSaveDTO(name="Youth"), group)

    assert group.category is category


def test_empty_list_assigns_empty_collection(populator):
    group = populator.populate(GroupSaveDTO(name="Youth", instructor_ids=[]), Group())

    assert group.instructors == []


def test_nested_models_become_new_elements(populator, member, instructor):
    dto = SpecialEventSaveDTO(
        name="Retreat",
        members=[
            {"user": {"id_user": member.id_user}},
            {"user": {"id_user": instructor.id_user}},
        ]
    )

    event = populator.populate(dto, SpecialEvent(name="Retreat"))

    assert len(event.members) == 2
    assert all(isinstance(m, SpecialEventMember) for m in event.members)
    assert [m.user for m in event.members] == [member, instructor]
    assert all(m.id is None for m in event.members)


def test_nested_missing_reference_raises(populator, member):
    dto = SpecialEventSaveDTO(
        name="Retreat",
        members=[{"user": {"id_user": member.id_user}}, {"user": {"id_user": 404}}]
    )
    event = SpecialEvent(name="Retreat")

    with pytest.raises(NotFoundError) as exc_info:
        populator.populate(dto, event)

    assert exc_info.value.entity_id == 404
    assert event.members == []


def test_resolve_references_does_not_touch_entities(populator, instructors):
    dto = GroupAssignInstructorsDTO(instructor_ids=[instructors[0].id_user])

    resolved = populator.resolve_references(dto, Group)

    assert resolved == {"instructors": [instructors[0]]}
