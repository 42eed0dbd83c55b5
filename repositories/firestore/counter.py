import logging
from collections.abc import Generator
from typing import cast

from google.cloud.firestore import Client as FirestoreClient  # type: ignore[import-untyped]
from google.cloud.firestore import Transaction, transactional
from google.cloud.firestore_v1 import DocumentSnapshot

from repositories import CounterRepository

from .transaction import run_transaction


class FirestoreCounterRepository(CounterRepository):
    def __init__(self, database: str, max_attempts: int = 10) -> None:
        self.db = FirestoreClient(database=database)
        self.max_attempts = max_attempts
        self.logger = logging.getLogger(self.__class__.__name__)

    def increment(self, key: str) -> int:
        counter_ref = self.db.collection('counters').document(key)

        # Firestore retries the whole function when another transaction touched the counter
        @transactional
        def increment_in_transaction(transaction: Transaction) -> int:
            snapshot = counter_ref.get(transaction=transaction)
            seq = (cast(int, snapshot.get('seq')) if snapshot.exists else 0) + 1
            transaction.set(counter_ref, {'seq': seq})
            return seq

        seq = cast(int, run_transaction(increment_in_transaction, self.db.transaction(max_attempts=self.max_attempts)))
        self.logger.debug('Counter %s advanced to %d', key, seq)
        return seq

    def delete_all(self) -> None:
        stream: Generator[DocumentSnapshot, None, None] = self.db.collection('counters').stream()
        for counter in stream:
            cast(DocumentSnapshot, counter.reference).delete()
