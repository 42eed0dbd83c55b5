from .client import FirestoreClientRepository
from .counter import FirestoreCounterRepository
from .invoice import FirestoreInvoiceRepository
from .project import FirestoreProjectRepository

__all__ = [
    'FirestoreClientRepository',
    'FirestoreCounterRepository',
    'FirestoreInvoiceRepository',
    'FirestoreProjectRepository',
]
