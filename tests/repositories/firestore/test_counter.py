import os
from concurrent.futures import ThreadPoolExecutor
from unittest import TestCase, skipUnless
from unittest.mock import patch

import requests
from google.api_core.exceptions import Aborted
from google.cloud.firestore import Client as FirestoreClient  # type: ignore[import-untyped]
from unittest_parametrize import ParametrizedTestCase

from blueprints.errors import InternalError
from blueprints.invoice import next_invoice_sequence
from repositories.firestore import FirestoreCounterRepository

from .test_transaction import exhausted

FIRESTORE_DATABASE = '(default)'


@skipUnless('FIRESTORE_EMULATOR_HOST' in os.environ, 'Firestore emulator not available')
class TestCounterRepository(ParametrizedTestCase):
    def setUp(self) -> None:
        requests.delete(
            f'http://{os.environ["FIRESTORE_EMULATOR_HOST"]}/emulator/v1/projects/google-cloud-firestore-emulator/databases/{FIRESTORE_DATABASE}/documents',
            timeout=5,
        )

        self.repo = FirestoreCounterRepository(FIRESTORE_DATABASE)
        self.client = FirestoreClient(database=FIRESTORE_DATABASE)

    def test_increment_starts_at_one(self) -> None:
        self.assertEqual(self.repo.increment('invoices:2025'), 1)

        doc = self.client.collection('counters').document('invoices:2025').get()
        self.assertTrue(doc.exists)
        self.assertEqual(doc.to_dict(), {'seq': 1})

    def test_increment_is_sequential(self) -> None:
        values = [self.repo.increment('invoices:2025') for _ in range(5)]

        self.assertEqual(values, [1, 2, 3, 4, 5])

    def test_increment_scopes_are_independent(self) -> None:
        self.repo.increment('invoices:2025')
        self.repo.increment('invoices:2025')

        self.assertEqual(self.repo.increment('invoices:2026'), 1)
        self.assertEqual(self.repo.increment('invoices:2025'), 3)

    def test_increment_continues_existing_counter(self) -> None:
        self.client.collection('counters').document('invoices:2024').set({'seq': 41})

        self.assertEqual(self.repo.increment('invoices:2024'), 42)

    def test_concurrent_increments_never_repeat(self) -> None:
        with ThreadPoolExecutor(max_workers=8) as executor:
            values = list(executor.map(lambda _: self.repo.increment('invoices:2025'), range(20)))

        self.assertEqual(sorted(values), list(range(1, 21)))

    def test_delete_all(self) -> None:
        self.repo.increment('invoices:2025')
        self.repo.increment('invoices:2026')

        self.repo.delete_all()

        self.assertEqual(self.repo.increment('invoices:2025'), 1)


class TestCounterRepositoryContention(TestCase):
    def setUp(self) -> None:
        patcher = patch('repositories.firestore.counter.FirestoreClient')
        patcher.start()
        self.addCleanup(patcher.stop)

        self.repo = FirestoreCounterRepository(FIRESTORE_DATABASE)

    def test_increment_exhausted_transaction(self) -> None:
        with patch('repositories.firestore.counter.transactional', new=lambda func: exhausted):
            with self.assertRaises(Aborted):
                self.repo.increment('invoices:2025')

    def test_next_invoice_sequence_exhausted_transaction(self) -> None:
        with patch('repositories.firestore.counter.transactional', new=lambda func: exhausted):
            with self.assertRaises(InternalError) as ctx:
                next_invoice_sequence(2025, self.repo)

        self.assertEqual(ctx.exception.message, 'Failed to increment counter invoices:2025')
