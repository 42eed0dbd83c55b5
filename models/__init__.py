from .client import Client
from .invoice import Invoice
from .invoice_status import InvoiceStatus
from .project import Project
from .project_status import ProjectStatus
from .totals_adjustment import TotalsAdjustment

__all__ = ['Client', 'Project', 'ProjectStatus', 'Invoice', 'InvoiceStatus', 'TotalsAdjustment']
