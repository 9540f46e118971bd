"""
Tests for UniquenessValidator: fail-fast collisions, update self-exclusion
and recursion into nested DTOs.
"""

from typing import Annotated, List, Optional

import pytest
from pydantic import BaseModel

from binding import Identity, Model, Unique, UniquenessValidator
from dtos.request import UserSaveDTO
from exceptions import CollisionError
from models import Group, User, Worship
from repositories.entity_store import EntityStore


class TwoUniqueFieldsDTO(BaseModel):
    names: Annotated[Optional[str], Unique(" names already used")] = None
    username: Annotated[Optional[str], Unique()] = None


class CategoryByNameDTO(BaseModel):
    name_category: Annotated[str, Unique(" category already exists")]


class GroupWithNewCategoryDTO(BaseModel):
    id_group: Annotated[Optional[int], Identity()] = None
    name: Annotated[Optional[str], Unique()] = None
    category: Annotated[Optional[CategoryByNameDTO], Model(has_nested_model=True)] = None


class NewUserDTO(BaseModel):
    username: Annotated[str, Unique(" is already registered")]


class WorshipMemberWithUserDTO(BaseModel):
    user: Annotated[NewUserDTO, Model(has_nested_model=True)]


class WorshipWithMembersDTO(BaseModel):
    name: Annotated[Optional[str], Unique()] = None
    members: Annotated[
        Optional[List[WorshipMemberWithUserDTO]],
        Model(is_list=True, has_nested_model=True)
    ] = None


@pytest.fixture
def validator(db_session):
    return UniquenessValidator(EntityStore(db_session))


def test_new_username_passes(validator):
    validator.check_unique(UserSaveDTO(username="new@x.com"), User)


def test_duplicate_username_collides(validator, make_user):
    make_user("dup@x.com")

    with pytest.raises(CollisionError) as exc_info:
        validator.check_unique(UserSaveDTO(username="dup@x.com"), User)

    assert exc_info.value.field == "username"
    assert exc_info.value.value == "dup@x.com"
    assert exc_info.value.message == "username is already registered"


def test_first_declared_collision_reported(validator, make_user):
    make_user("taken@x.com", names="Ana")

    with pytest.raises(CollisionError) as exc_info:
        validator.check_unique(TwoUniqueFieldsDTO(names="Ana", username="taken@x.com"), User)

    assert exc_info.value.field == "names"
    assert exc_info.value.message == "names names already used"


def test_null_values_not_checked(validator, make_user):
    make_user("someone@x.com")

    validator.check_unique(UserSaveDTO(names="Ana"), User)


def test_update_may_resubmit_own_value(validator, make_user):
    user = make_user("self@x.com")

    validator.check_unique(UserSaveDTO(id_user=user.id_user, username="self@x.com"), User)


def test_update_to_another_users_value_collides(validator, make_user):
    make_user("first@x.com")
    second = make_user("second@x.com")

    with pytest.raises(CollisionError):
        validator.check_unique(UserSaveDTO(id_user=second.id_user, username="first@x.com"), User)


def test_recurses_into_nested_scalar(validator, make_category):
    make_category("Alpha")
    dto = GroupWithNewCategoryDTO(name="Youth", category={"name_category": "Alpha"})

    with pytest.raises(CollisionError) as exc_info:
        validator.check_unique(dto, Group)

    assert exc_info.value.field == "name_category"


def test_recurses_into_each_list_element(validator, make_user):
    make_user("existing@x.com")
    dto = WorshipWithMembersDTO(
        name="Sunday service",
        members=[
            {"user": {"username": "fresh@x.com"}},
            {"user": {"username": "existing@x.com"}},
        ]
    )

    with pytest.raises(CollisionError) as exc_info:
        validator.check_unique(dto, Worship)

    assert exc_info.value.value == "existing@x.com"


def test_outer_field_checked_before_nested(validator, make_user, make_group, make_category):
    make_group("Youth")
    make_category("Alpha")
    dto = GroupWithNewCategoryDTO(name="Youth", category={"name_category": "Alpha"})

    with pytest.raises(CollisionError) as exc_info:
        validator.check_unique(dto, Group)

    assert exc_info.value.field == "name"
