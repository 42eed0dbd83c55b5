from dataclasses import dataclass
from datetime import datetime


@dataclass
class Client:
    id: str
    name: str
    email: str
    company: str
    total_projects: int
    total_amount: float
    created_at: datetime
    updated_at: datetime
