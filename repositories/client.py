from collections.abc import Generator

from models import Client


class ClientRepository:
    def get(self, client_id: str) -> Client | None:
        raise NotImplementedError  # pragma: no cover

    def get_by_email(self, email: str) -> Client | None:
        raise NotImplementedError  # pragma: no cover

    def get_by_name_and_company(self, name: str, company: str) -> Client | None:
        raise NotImplementedError  # pragma: no cover

    def get_all(self) -> Generator[Client, None, None]:
        raise NotImplementedError  # pragma: no cover

    def create(self, client: Client) -> None:
        raise NotImplementedError  # pragma: no cover

    def update(self, client: Client) -> None:
        raise NotImplementedError  # pragma: no cover

    def increment_totals(self, client_id: str, projects: int, amount: float) -> None:
        raise NotImplementedError  # pragma: no cover

    def set_totals(self, client_id: str, projects: int, amount: float) -> None:
        raise NotImplementedError  # pragma: no cover

    def delete(self, client_id: str) -> None:
        raise NotImplementedError  # pragma: no cover

    def delete_all(self) -> None:
        raise NotImplementedError  # pragma: no cover
