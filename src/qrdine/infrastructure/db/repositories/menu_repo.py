from __future__ import annotations

from sqlalchemy import Engine, select
from sqlalchemy.orm import Session

from qrdine.application.ports.repositories import MenuRepository
from qrdine.domain.common.ids import MenuItemId, RestaurantId
from qrdine.domain.common.money import Money
from qrdine.domain.menu.entities import MenuCategory, MenuItem
from qrdine.infrastructure.db.models.menu import MenuItemModel
from qrdine.infrastructure.db.session import get_engine


class SqlAlchemyMenuRepository(MenuRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def list_available_items(self, restaurant_id: RestaurantId) -> list[MenuItem]:
        statement = (
            select(MenuItemModel)
            .where(
                MenuItemModel.restaurant_id == str(restaurant_id),
                MenuItemModel.is_available.is_(True),
            )
            .order_by(MenuItemModel.category, MenuItemModel.name)
        )
        with Session(self._engine) as session:
            models = list(session.execute(statement).scalars().all())
        return [self._to_domain(model) for model in models]

    def get_items(
        self,
        restaurant_id: RestaurantId,
        item_ids: list[MenuItemId],
    ) -> list[MenuItem]:
        if not item_ids:
            return []

        statement = select(MenuItemModel).where(
            MenuItemModel.restaurant_id == str(restaurant_id),
            MenuItemModel.id.in_({str(item_id) for item_id in item_ids}),
        )
        with Session(self._engine) as session:
            models = list(session.execute(statement).scalars().all())
        return [self._to_domain(model) for model in models]

    def _to_domain(self, model: MenuItemModel) -> MenuItem:
        return MenuItem(
            item_id=MenuItemId(model.id),
            restaurant_id=RestaurantId(model.restaurant_id),
            name=model.name,
            description=model.description,
            price_money=Money(amount_cents=model.price_cents, currency=model.currency),
            category=MenuCategory(model.category),
            image=model.image,
            is_available=model.is_available,
        )
