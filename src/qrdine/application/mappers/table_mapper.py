from __future__ import annotations

from qrdine.application.dto.responses import RestaurantSummaryResponse, TableLookupResponse
from qrdine.application.ports.repositories import TableLookupData


def to_table_lookup_response(data: TableLookupData) -> TableLookupResponse:
    restaurant = data.restaurant
    return TableLookupResponse(
        restaurantId=str(restaurant.restaurant_id),
        restaurantName=restaurant.name,
        tableNumber=data.table.table_number,
        restaurant=RestaurantSummaryResponse(
            id=str(restaurant.restaurant_id),
            name=restaurant.name,
            description=restaurant.description,
            address=restaurant.address,
        ),
    )
