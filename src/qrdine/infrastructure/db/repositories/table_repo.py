from __future__ import annotations

from sqlalchemy import Engine, select
from sqlalchemy.orm import Session, joinedload

from qrdine.application.ports.repositories import TableLookupData, TableRepository
from qrdine.domain.common.ids import RestaurantId, TableId
from qrdine.domain.table.entities import Restaurant, Table
from qrdine.infrastructure.db.models.restaurant import RestaurantModel, RestaurantTableModel
from qrdine.infrastructure.db.session import get_engine


class SqlAlchemyTableRepository(TableRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get_by_qr_code(self, qr_code: str) -> TableLookupData | None:
        statement = (
            select(RestaurantTableModel)
            .options(joinedload(RestaurantTableModel.restaurant))
            .where(RestaurantTableModel.qr_code == qr_code)
            .limit(1)
        )
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
            if model is None:
                return None
            return TableLookupData(
                table=self._to_domain(model),
                restaurant=_restaurant_to_domain(model.restaurant),
            )

    def exists(self, restaurant_id: RestaurantId, table_number: int) -> bool:
        statement = (
            select(RestaurantTableModel.id)
            .where(
                RestaurantTableModel.restaurant_id == str(restaurant_id),
                RestaurantTableModel.table_number == table_number,
            )
            .limit(1)
        )
        with Session(self._engine) as session:
            value = session.execute(statement).scalar_one_or_none()
        return value is not None

    def _to_domain(self, model: RestaurantTableModel) -> Table:
        return Table(
            table_id=TableId(model.id),
            restaurant_id=RestaurantId(model.restaurant_id),
            table_number=model.table_number,
            qr_code=model.qr_code,
        )


def _restaurant_to_domain(model: RestaurantModel) -> Restaurant:
    return Restaurant(
        restaurant_id=RestaurantId(model.id),
        name=model.name,
        description=model.description,
        address=model.address,
        phone=model.phone,
        email=model.email,
    )
