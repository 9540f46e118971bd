"""
Worship service endpoints.
"""

from fastapi import APIRouter, Depends

from binding import Binding, Principal
from constants import Authority
from dependencies import get_worship_service
from dtos.request import JoinRequestDTO, WorshipSaveDTO
from dtos.response import MemberResponse, Message, WorshipResponse
from models import User, Worship
from services.worship_service import WorshipService
from utils.security import get_authenticated_claims, require_authorities

router = APIRouter(prefix="/worship", tags=["worships"])


@router.get("", response_model=Message, dependencies=[Depends(get_authenticated_claims)])
def list_worships(service: WorshipService = Depends(get_worship_service)):
    return Message.ok([WorshipResponse.model_validate(w) for w in service.list_all()])


@router.post("/save", response_model=Message, dependencies=[Depends(require_authorities(Authority.ADMIN))])
def save_worship(
    worship: Worship = Depends(Binding(WorshipSaveDTO, Worship, populate=True)),
    principal: User = Depends(Principal(User)),
    service: WorshipService = Depends(get_worship_service)
):
    created = worship.id_worship is None
    stored = service.save(worship, principal)
    return Message.ok(
        WorshipResponse.model_validate(stored),
        "Worship registered" if created else "Worship updated"
    )


@router.post("/join", response_model=Message)
def join_worship(
    body: JoinRequestDTO,
    user: User = Depends(Principal(User)),
    service: WorshipService = Depends(get_worship_service)
):
    membership = service.join(body.id, user)
    return Message.ok(MemberResponse.model_validate(membership), "Joined worship")


@router.get("/{worship_id}/members", response_model=Message, dependencies=[Depends(get_authenticated_claims)])
def worship_members(worship_id: int, service: WorshipService = Depends(get_worship_service)):
    return Message.ok([MemberResponse.model_validate(m) for m in service.members(worship_id)])
