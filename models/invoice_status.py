from enum import StrEnum


class InvoiceStatus(StrEnum):
    PAID = 'Paid'
    PENDING = 'Pending'
