"""
Group endpoints.
"""

from fastapi import APIRouter, Depends

from binding import Binding, Principal
from constants import Authority
from dependencies import get_group_service
from dtos.request import GroupAssignInstructorsDTO, GroupSaveDTO, JoinRequestDTO
from dtos.response import GroupResponse, MemberResponse, Message
from models import Group, User
from services.group_service import GroupService
from utils.security import get_authenticated_claims, require_authorities

router = APIRouter(prefix="/group", tags=["groups"])

admin_only = Depends(require_authorities(Authority.ADMIN))


@router.get("", response_model=Message, dependencies=[Depends(get_authenticated_claims)])
def list_groups(service: GroupService = Depends(get_group_service)):
    return Message.ok([GroupResponse.model_validate(g) for g in service.list_all()])


@router.post("/save", response_model=Message, dependencies=[admin_only])
def save_group(
    group: Group = Depends(Binding(GroupSaveDTO, Group, populate=True)),
    principal: User = Depends(Principal(User)),
    service: GroupService = Depends(get_group_service)
):
    """Create a group with its references resolved, or update one by ``id_group``."""
    created = group.id_group is None
    stored = service.save(group, principal)
    return Message.ok(
        GroupResponse.model_validate(stored),
        "Group registered" if created else "Group updated"
    )


@router.put("/{group_id}/instructors", response_model=Message, dependencies=[admin_only])
def assign_instructors(
    group_id: int,
    dto: GroupAssignInstructorsDTO,
    service: GroupService = Depends(get_group_service)
):
    group = service.assign_instructors(group_id, dto)
    return Message.ok(GroupResponse.model_validate(group), "Instructors assigned")


@router.get(
    "/findInstructorGroups",
    response_model=Message,
    dependencies=[Depends(require_authorities(Authority.INSTRUCTOR, Authority.ADMIN))]
)
def find_instructor_groups(
    instructor: User = Depends(Principal(User)),
    service: GroupService = Depends(get_group_service)
):
    """Groups the caller teaches."""
    groups = service.find_instructor_groups(instructor)
    return Message.ok([GroupResponse.model_validate(g) for g in groups])


@router.get(
    "/findGroupByCategory/{category}",
    response_model=Message,
    dependencies=[Depends(get_authenticated_claims)]
)
def find_by_category(category: str, service: GroupService = Depends(get_group_service)):
    groups = service.find_by_category(category)
    return Message.ok([GroupResponse.model_validate(g) for g in groups])


@router.post("/join", response_model=Message)
def join_group(
    body: JoinRequestDTO,
    user: User = Depends(Principal(User)),
    service: GroupService = Depends(get_group_service)
):
    membership = service.join(body.id, user)
    return Message.ok(MemberResponse.model_validate(membership), "Joined group")


@router.get("/{group_id}/members", response_model=Message, dependencies=[Depends(get_authenticated_claims)])
def group_members(group_id: int, service: GroupService = Depends(get_group_service)):
    return Message.ok([MemberResponse.model_validate(m) for m in service.members(group_id)])


@router.delete("/{group_id}", response_model=Message, dependencies=[admin_only])
def delete_group(group_id: int, service: GroupService = Depends(get_group_service)):
    service.delete(group_id)
    return Message.ok(message="Group deleted")
