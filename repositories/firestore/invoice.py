import logging
from collections.abc import Generator
from dataclasses import asdict
from enum import Enum
from typing import Any, cast

import dacite
from google.api_core.exceptions import AlreadyExists, NotFound
from google.cloud.firestore import Client as FirestoreClient  # type: ignore[import-untyped]
from google.cloud.firestore_v1 import DocumentSnapshot

from models import Invoice
from repositories import DuplicateInvoiceNumberError, InvoiceRepository


class FirestoreInvoiceRepository(InvoiceRepository):
    def __init__(self, database: str) -> None:
        self.db = FirestoreClient(database=database)
        self.logger = logging.getLogger(self.__class__.__name__)

    def doc_to_invoice(self, doc: DocumentSnapshot) -> Invoice:
        return dacite.from_dict(
            data_class=Invoice,
            data={
                **cast(dict[str, Any], doc.to_dict()),
                'id': doc.id,
            },
            config=dacite.Config(cast=[Enum, float]),
        )

    def get(self, invoice_id: str) -> Invoice | None:
        doc = self.db.collection('invoices').document(invoice_id).get()

        if not doc.exists:
            return None

        return self.doc_to_invoice(doc)

    def get_all(self) -> Generator[Invoice, None, None]:
        stream: Generator[DocumentSnapshot, None, None] = self.db.collection('invoices').stream()
        for doc in stream:
            yield self.doc_to_invoice(doc)

    def create(self, invoice: Invoice) -> None:
        invoice_dict = asdict(invoice)
        del invoice_dict['id']

        # The invoice_numbers document acts as the unique index on invoice_number
        batch = self.db.batch()
        batch.create(
            self.db.collection('invoice_numbers').document(invoice.invoice_number),
            {'invoice_id': invoice.id},
        )
        batch.create(self.db.collection('invoices').document(invoice.id), invoice_dict)

        try:
            batch.commit()
        except AlreadyExists as err:
            raise DuplicateInvoiceNumberError(invoice.invoice_number) from err

    def update(self, invoice_id: str, changes: dict[str, Any]) -> Invoice | None:
        try:
            self.db.collection('invoices').document(invoice_id).update(changes)
        except NotFound:
            return None

        return self.get(invoice_id)

    def delete(self, invoice_id: str) -> bool:
        invoice = self.get(invoice_id)
        if invoice is None:
            return False

        batch = self.db.batch()
        batch.delete(self.db.collection('invoices').document(invoice.id))
        batch.delete(self.db.collection('invoice_numbers').document(invoice.invoice_number))
        batch.commit()

        return True

    def delete_all(self) -> None:
        for collection in ('invoices', 'invoice_numbers'):
            stream: Generator[DocumentSnapshot, None, None] = self.db.collection(collection).stream()
            for doc in stream:
                cast(DocumentSnapshot, doc.reference).delete()
