from dataclasses import dataclass
from datetime import datetime

from .invoice_status import InvoiceStatus


@dataclass
class Invoice:
    id: str
    invoice_number: str
    client: str
    client_id: str | None
    amount: float
    status: InvoiceStatus
    created_at: datetime
    updated_at: datetime
