from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from ..common.uploads import Upload
from .model import Invoice


class InvoiceRepository(Protocol):
    def list(self, *, vehicle_id: Optional[str] = None) -> Sequence[Invoice]:
        raise NotImplementedError

    def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        raise NotImplementedError

    def create(self, payload: dict[str, Any]) -> Invoice:
        raise NotImplementedError

    def update_status(self, invoice_id: str, status: str) -> None:
        raise NotImplementedError

    def delete(self, invoice_id: str) -> None:
        raise NotImplementedError

    def upload_pdf(self, invoice_id: str, pdf: Upload) -> None:
        raise NotImplementedError

    def create_estimate_for_vehicle(self, vehicle_id: str, payload: dict[str, Any]) -> Invoice:
        raise NotImplementedError

    def create_invoice_for_vehicle(self, vehicle_id: str, payload: dict[str, Any]) -> Invoice:
        raise NotImplementedError
