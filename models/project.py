from dataclasses import dataclass
from datetime import datetime

from .project_status import ProjectStatus


@dataclass
class Project:
    id: str
    name: str
    client_id: str
    status: ProjectStatus
    amount: float
    deadline: datetime
    created_at: datetime
    updated_at: datetime
