from __future__ import annotations

from datetime import timezone

from sqlalchemy import Engine, select, update
from sqlalchemy.orm import Session, joinedload

from qrdine.application.ports.repositories import (
    OptimisticConcurrencyError,
    OrderHistoryData,
    OrderRepository,
)
from qrdine.domain.common.ids import MenuItemId, OrderId, OrderItemId, RestaurantId, UserId
from qrdine.domain.common.money import Money
from qrdine.domain.order.entities import Order, OrderItem, OrderStatus
from qrdine.infrastructure.db.models.order import OrderItemModel, OrderModel
from qrdine.infrastructure.db.session import get_engine


class SqlAlchemyOrderRepository(OrderRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def add(self, order: Order) -> None:
        order_model = self._to_model(order)
        with Session(self._engine) as session:
            session.add(order_model)
            session.commit()

    def get(self, order_id: OrderId) -> Order | None:
        statement = (
            select(OrderModel)
            .options(joinedload(OrderModel.items).joinedload(OrderItemModel.menu_item))
            .where(OrderModel.id == str(order_id))
            .limit(1)
        )
        with Session(self._engine) as session:
            model = session.execute(statement).unique().scalar_one_or_none()
            if model is None:
                return None
            return self._to_domain(model)

    def list_for_user(self, user_id: UserId) -> list[OrderHistoryData]:
        statement = (
            select(OrderModel)
            .options(
                joinedload(OrderModel.items).joinedload(OrderItemModel.menu_item),
                joinedload(OrderModel.restaurant),
            )
            .where(OrderModel.user_id == str(user_id))
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        with Session(self._engine) as session:
            models = list(session.execute(statement).unique().scalars().all())
            return [
                OrderHistoryData(
                    order=self._to_domain(model),
                    restaurant_name=model.restaurant.name,
                )
                for model in models
            ]

    def update_payment(self, order: Order, expected_reference: str | None) -> Order:
        if expected_reference is None:
            reference_matches = OrderModel.payment_reference.is_(None)
        else:
            reference_matches = OrderModel.payment_reference == expected_reference

        statement = (
            update(OrderModel)
            .where(
                OrderModel.id == str(order.order_id),
                OrderModel.status == OrderStatus.PENDING.value,
                reference_matches,
            )
            .values(
                status=order.status.value,
                payment_reference=order.payment_reference,
            )
        )
        with Session(self._engine) as session:
            result = session.execute(statement)
            if result.rowcount != 1:
                session.rollback()
                raise OptimisticConcurrencyError(
                    f"order {order.order_id} payment state changed concurrently"
                )
            session.commit()

        updated = self.get(order.order_id)
        if updated is None:
            raise RuntimeError(f"order {order.order_id} not found after payment update")
        return updated

    def _to_model(self, order: Order) -> OrderModel:
        order_model = OrderModel(
            id=str(order.order_id),
            restaurant_id=str(order.restaurant_id),
            table_number=order.table_number,
            user_id=str(order.user_id) if order.user_id is not None else None,
            status=order.status.value,
            total_cents=order.total.amount_cents,
            currency=order.total.currency,
            payment_reference=order.payment_reference,
            created_at=order.created_at,
        )
        order_model.items = [
            OrderItemModel(
                id=str(item.item_id),
                order_id=str(order.order_id),
                menu_item_id=str(item.menu_item_id),
                quantity=item.quantity,
                unit_price_cents=item.unit_price.amount_cents,
                currency=item.unit_price.currency,
            )
            for item in order.items
        ]
        return order_model

    def _to_domain(self, model: OrderModel) -> Order:
        created_at = model.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        items = []
        for item in model.items:
            unit_price = Money(amount_cents=item.unit_price_cents, currency=item.currency)
            items.append(
                OrderItem(
                    item_id=OrderItemId(item.id),
                    menu_item_id=MenuItemId(item.menu_item_id),
                    name=item.menu_item.name,
                    quantity=item.quantity,
                    unit_price=unit_price,
                    line_total=unit_price.times(item.quantity),
                )
            )
        return Order(
            order_id=OrderId(model.id),
            restaurant_id=RestaurantId(model.restaurant_id),
            table_number=model.table_number,
            user_id=UserId(model.user_id) if model.user_id is not None else None,
            status=OrderStatus(model.status),
            items=items,
            total=Money(amount_cents=model.total_cents, currency=model.currency),
            created_at=created_at,
            payment_reference=model.payment_reference,
        )
