"""
Special event endpoints.
"""

from fastapi import APIRouter, Depends

from binding import Binding, Principal
from constants import Authority
from dependencies import get_special_event_service
from dtos.request import JoinRequestDTO, SpecialEventSaveDTO
from dtos.response import MemberResponse, Message, SpecialEventResponse
from models import SpecialEvent, User
from services.special_event_service import SpecialEventService
from utils.security import get_authenticated_claims, require_authorities

router = APIRouter(prefix="/specialEvent", tags=["special events"])


@router.get("", response_model=Message, dependencies=[Depends(get_authenticated_claims)])
def list_special_events(service: SpecialEventService = Depends(get_special_event_service)):
    return Message.ok([SpecialEventResponse.model_validate(e) for e in service.list_all()])


@router.post("/save", response_model=Message, dependencies=[Depends(require_authorities(Authority.ADMIN))])
def save_special_event(
    event: SpecialEvent = Depends(Binding(SpecialEventSaveDTO, SpecialEvent, populate=True)),
    principal: User = Depends(Principal(User)),
    service: SpecialEventService = Depends(get_special_event_service)
):
    """Create an event with its pre-registered members, or update one by id."""
    created = event.id_special_event is None
    stored = service.save(event, principal)
    return Message.ok(
        SpecialEventResponse.model_validate(stored),
        "Special event registered" if created else "Special event updated"
    )


@router.post("/join", response_model=Message)
def join_special_event(
    body: JoinRequestDTO,
    user: User = Depends(Principal(User)),
    service: SpecialEventService = Depends(get_special_event_service)
):
    membership = service.join(body.id, user)
    return Message.ok(MemberResponse.model_validate(membership), "Registered for special event")


@router.get("/{event_id}/members", response_model=Message, dependencies=[Depends(get_authenticated_claims)])
def special_event_members(event_id: int, service: SpecialEventService = Depends(get_special_event_service)):
    return Message.ok([MemberResponse.model_validate(m) for m in service.members(event_id)])
