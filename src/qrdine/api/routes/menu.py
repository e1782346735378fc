from __future__ import annotations

from fastapi import APIRouter

from qrdine.application.dto.responses import MenuItemResponse
from qrdine.application.use_cases.get_menu import GetMenu
from qrdine.domain.common.ids import RestaurantId
from qrdine.infrastructure.db.repositories.menu_repo import SqlAlchemyMenuRepository

router = APIRouter(tags=["menu"])


def _get_menu_use_case() -> GetMenu:
    return GetMenu(repository=SqlAlchemyMenuRepository())


@router.get("/v1/restaurants/{restaurant_id}/menu", response_model=list[MenuItemResponse])
def get_menu(restaurant_id: str) -> list[MenuItemResponse]:
    return _get_menu_use_case().execute(RestaurantId(restaurant_id))
