from __future__ import annotations

from typing import Iterator

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from qrdine.infrastructure.db.models.base import Base
from qrdine.infrastructure.db.models.menu import MenuItemModel
from qrdine.infrastructure.db.models.order import OrderModel  # noqa: F401
from qrdine.infrastructure.db.models.restaurant import RestaurantModel, RestaurantTableModel


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        session.add_all(
            [
                RestaurantModel(
                    id="rst_001",
                    name="The Gourmet Table",
                    description="A fine dining experience with international cuisine",
                    address="123 Main Street, London, UK",
                ),
                RestaurantModel(id="rst_002", name="Harbour Grill"),
            ]
        )
        session.flush()
        session.add_all(
            [
                RestaurantTableModel(
                    id=f"tbl_{number:03d}",
                    restaurant_id="rst_001",
                    table_number=number,
                    qr_code=f"RESTAURANT_rst_001_TABLE_{number}",
                )
                for number in range(1, 4)
            ]
        )
        session.add_all(
            [
                MenuItemModel(
                    id="itm_001",
                    restaurant_id="rst_001",
                    name="Prawn Tempura",
                    description="Crispy battered prawns served with sweet chili sauce",
                    price_cents=899,
                    currency="GBP",
                    category="STARTERS",
                    is_available=True,
                ),
                MenuItemModel(
                    id="itm_003",
                    restaurant_id="rst_001",
                    name="Grilled Salmon",
                    description="Fresh Atlantic salmon with lemon butter sauce",
                    price_cents=2499,
                    currency="GBP",
                    category="MAIN",
                    is_available=True,
                ),
                MenuItemModel(
                    id="itm_099",
                    restaurant_id="rst_001",
                    name="Seasonal Special",
                    description=None,
                    price_cents=1999,
                    currency="GBP",
                    category="MAIN",
                    is_available=False,
                ),
                MenuItemModel(
                    id="itm_500",
                    restaurant_id="rst_002",
                    name="Harbour Burger",
                    description=None,
                    price_cents=1200,
                    currency="GBP",
                    category="MAIN",
                    is_available=True,
                ),
            ]
        )
        session.commit()

    yield engine
    engine.dispose()
