from collections.abc import Generator
from typing import Any

from models import Project


class ProjectRepository:
    def get(self, project_id: str) -> Project | None:
        raise NotImplementedError  # pragma: no cover

    def get_by_client(self, client_id: str) -> Generator[Project, None, None]:
        raise NotImplementedError  # pragma: no cover

    def get_all(self) -> Generator[Project, None, None]:
        raise NotImplementedError  # pragma: no cover

    def create(self, project: Project) -> None:
        raise NotImplementedError  # pragma: no cover

    def update(self, project_id: str, changes: dict[str, Any]) -> tuple[Project, Project] | None:
        """Apply changes atomically and return the replaced and the resulting project."""
        raise NotImplementedError  # pragma: no cover

    def delete(self, project_id: str) -> Project | None:
        """Delete atomically and return the deleted project."""
        raise NotImplementedError  # pragma: no cover

    def delete_all(self) -> None:
        raise NotImplementedError  # pragma: no cover
