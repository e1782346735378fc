from __future__ import annotations

from qrdine.application.dto.responses import TableLookupResponse
from qrdine.application.mappers.table_mapper import to_table_lookup_response
from qrdine.application.ports.repositories import TableRepository


class MissingQrCodeError(Exception):
    pass


class TableNotFoundError(Exception):
    pass


class ResolveTable:
    def __init__(self, table_repository: TableRepository) -> None:
        self._table_repository = table_repository

    def execute(self, qr_code: str | None) -> TableLookupResponse:
        code = (qr_code or "").strip()
        if not code:
            raise MissingQrCodeError("QR code is required")

        lookup = self._table_repository.get_by_qr_code(code)
        if lookup is None:
            raise TableNotFoundError(f"table not found for qr_code={code}")
        return to_table_lookup_response(lookup)
