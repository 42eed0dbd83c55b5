from collections.abc import Generator
from typing import Any

from models import Invoice


class InvoiceRepository:
    def get(self, invoice_id: str) -> Invoice | None:
        raise NotImplementedError  # pragma: no cover

    def get_all(self) -> Generator[Invoice, None, None]:
        raise NotImplementedError  # pragma: no cover

    def create(self, invoice: Invoice) -> None:
        raise NotImplementedError  # pragma: no cover

    def update(self, invoice_id: str, changes: dict[str, Any]) -> Invoice | None:
        raise NotImplementedError  # pragma: no cover

    def delete(self, invoice_id: str) -> bool:
        raise NotImplementedError  # pragma: no cover

    def delete_all(self) -> None:
        raise NotImplementedError  # pragma: no cover
