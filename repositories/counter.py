class CounterRepository:
    def increment(self, key: str) -> int:
        raise NotImplementedError  # pragma: no cover

    def delete_all(self) -> None:
        raise NotImplementedError  # pragma: no cover
