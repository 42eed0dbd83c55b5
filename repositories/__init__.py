from .client import ClientRepository
from .counter import CounterRepository
from .errors import DuplicateInvoiceNumberError
from .invoice import InvoiceRepository
from .project import ProjectRepository

__all__ = [
    'ClientRepository',
    'CounterRepository',
    'DuplicateInvoiceNumberError',
    'InvoiceRepository',
    'ProjectRepository',
]
