from __future__ import annotations

from fastapi import APIRouter, Query

from qrdine.application.dto.responses import TableLookupResponse
from qrdine.application.use_cases.resolve_table import ResolveTable
from qrdine.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository

router = APIRouter(tags=["tables"])


def _resolve_table_use_case() -> ResolveTable:
    return ResolveTable(table_repository=SqlAlchemyTableRepository())


@router.get("/v1/restaurants/table", response_model=TableLookupResponse)
def resolve_table(qr_code: str | None = Query(default=None, alias="qrCode")) -> TableLookupResponse:
    return _resolve_table_use_case().execute(qr_code)
