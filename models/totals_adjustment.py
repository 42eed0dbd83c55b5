from dataclasses import dataclass


@dataclass(frozen=True)
class TotalsAdjustment:
    """Change to apply to the derived totals of a client."""

    client_id: str
    projects: int
    amount: float
