"""
Category endpoints.
"""

from fastapi import APIRouter, Depends

from binding import Binding
from constants import Authority
from dependencies import get_category_service
from dtos.request import CategorySaveDTO
from dtos.response import CategoryResponse, Message
from models import Category
from services.category_service import CategoryService
from utils.security import get_authenticated_claims, require_authorities

router = APIRouter(prefix="/category", tags=["categories"])


@router.get("", response_model=Message, dependencies=[Depends(get_authenticated_claims)])
def list_categories(service: CategoryService = Depends(get_category_service)):
    return Message.ok([CategoryResponse.model_validate(c) for c in service.list_all()])


@router.post("", response_model=Message, dependencies=[Depends(require_authorities(Authority.ADMIN))])
def save_category(
    category: Category = Depends(Binding(CategorySaveDTO, Category)),
    service: CategoryService = Depends(get_category_service)
):
    stored = service.save(category)
    return Message.ok(CategoryResponse.model_validate(stored), "Category saved")
