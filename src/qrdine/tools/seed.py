from __future__ import annotations

import os

from sqlalchemy import inspect
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from qrdine.domain.common.ids import RestaurantId
from qrdine.domain.common.money import DEFAULT_CURRENCY
from qrdine.domain.menu.entities import MenuCategory
from qrdine.domain.table.entities import table_qr_code
from qrdine.infrastructure.db.models.menu import MenuItemModel
from qrdine.infrastructure.db.models.restaurant import RestaurantModel, RestaurantTableModel
from qrdine.infrastructure.db.session import get_engine

RESTAURANT_ID = "rst_001"
TABLE_COUNT = 10

RESTAURANT = {
    "id": RESTAURANT_ID,
    "name": "The Gourmet Table",
    "description": "A fine dining experience with international cuisine",
    "address": "123 Main Street, London, UK",
    "phone": "+44 20 7946 0958",
    "email": "info@gourmet-table.com",
}

# (id, name, description, price in pence, category)
MENU = [
    ("itm_001", "Prawn Tempura", "Crispy battered prawns served with sweet chili sauce", 899, MenuCategory.STARTERS),
    ("itm_002", "Caesar Salad", "Fresh romaine lettuce with parmesan cheese and croutons", 799, MenuCategory.STARTERS),
    ("itm_003", "Grilled Salmon", "Fresh Atlantic salmon with lemon butter sauce", 2499, MenuCategory.MAIN),
    ("itm_004", "Beef Ribeye Steak", "12oz premium beef steak with truffle mashed potatoes", 2899, MenuCategory.MAIN),
    ("itm_005", "Pasta Carbonara", "Classic Italian pasta with pancetta and parmesan", 1499, MenuCategory.MAIN),
    ("itm_006", "Chocolate Lava Cake", "Warm chocolate cake with molten center and vanilla ice cream", 899, MenuCategory.DESSERT),
    ("itm_007", "Crème Brûlée", "Classic custard with caramelized sugar top", 799, MenuCategory.DESSERT),
    ("itm_008", "Fresh Orange Juice", "Freshly squeezed orange juice", 499, MenuCategory.DRINKS),
    ("itm_009", "Iced Tea", "Refreshing iced tea with lemon", 399, MenuCategory.DRINKS),
    ("itm_010", "House Wine (Red)", "Selection of fine red wines by the glass", 699, MenuCategory.ALCOHOLIC_DRINKS),
    ("itm_011", "Craft Beer", "Selection of premium craft beers", 599, MenuCategory.ALCOHOLIC_DRINKS),
    ("itm_012", "Garlic Bread", "Crispy bread with garlic butter and parsley", 399, MenuCategory.SNACKS),
    ("itm_013", "Mozzarella Sticks", "Golden fried mozzarella with marinara sauce", 499, MenuCategory.SNACKS),
]


def main() -> None:
    currency = os.getenv("DEFAULT_CURRENCY", DEFAULT_CURRENCY).upper()
    engine = get_engine(timeout_seconds=2.0)
    inspector = inspect(engine)
    required_tables = {"restaurants", "restaurant_tables", "menu_items"}
    if not required_tables.issubset(set(inspector.get_table_names(schema="public"))):
        print("no schema yet")
        return

    with Session(engine) as session:
        session.execute(
            insert(RestaurantModel)
            .values(**RESTAURANT)
            .on_conflict_do_update(
                index_elements=[RestaurantModel.id],
                set_={key: value for key, value in RESTAURANT.items() if key != "id"},
            )
        )

        for table_number in range(1, TABLE_COUNT + 1):
            session.execute(
                insert(RestaurantTableModel)
                .values(
                    id=f"tbl_{table_number:03d}",
                    restaurant_id=RESTAURANT_ID,
                    table_number=table_number,
                    qr_code=table_qr_code(RestaurantId(RESTAURANT_ID), table_number),
                )
                .on_conflict_do_nothing(index_elements=[RestaurantTableModel.id])
            )

        for item_id, name, description, price_cents, category in MENU:
            values = {
                "restaurant_id": RESTAURANT_ID,
                "name": name,
                "description": description,
                "price_cents": price_cents,
                "currency": currency,
                "category": category.value,
                "is_available": True,
            }
            session.execute(
                insert(MenuItemModel)
                .values(id=item_id, **values)
                .on_conflict_do_update(index_elements=[MenuItemModel.id], set_=values)
            )

        session.commit()
        print(f"seeded {RESTAURANT['name']}: {TABLE_COUNT} tables, {len(MENU)} menu items")


if __name__ == "__main__":
    main()
