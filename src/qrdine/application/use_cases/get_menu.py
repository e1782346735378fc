from __future__ import annotations

from qrdine.application.dto.responses import MenuItemResponse
from qrdine.application.mappers.menu_mapper import to_menu_response
from qrdine.application.ports.repositories import MenuRepository
from qrdine.domain.common.ids import RestaurantId


class GetMenu:
    def __init__(self, repository: MenuRepository) -> None:
        self._repository = repository

    def execute(self, restaurant_id: RestaurantId) -> list[MenuItemResponse]:
        items = self._repository.list_available_items(restaurant_id)
        return to_menu_response([item for item in items if item.is_available])
