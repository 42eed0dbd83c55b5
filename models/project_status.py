from enum import StrEnum


class ProjectStatus(StrEnum):
    PENDING = 'Pending'
    IN_PROGRESS = 'In Progress'
    COMPLETED = 'Completed'
