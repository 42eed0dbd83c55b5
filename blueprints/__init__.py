# ruff: noqa: N812

from .client import blp as BlueprintClient
from .health import blp as BlueprintHealth
from .invoice import blp as BlueprintInvoice
from .project import blp as BlueprintProject
from .reconcile import blp as BlueprintReconcile
from .reset import blp as BlueprintReset
from .stats import blp as BlueprintStats

__all__ = [
    'BlueprintClient',
    'BlueprintHealth',
    'BlueprintInvoice',
    'BlueprintProject',
    'BlueprintReconcile',
    'BlueprintReset',
    'BlueprintStats',
]
