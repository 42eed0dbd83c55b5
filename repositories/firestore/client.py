import logging
from collections.abc import Generator
from dataclasses import asdict
from datetime import UTC, datetime
from enum import Enum
from typing import Any, cast

import dacite
from google.cloud.firestore import Client as FirestoreClient  # type: ignore[import-untyped]
from google.cloud.firestore import Increment
from google.cloud.firestore_v1 import DocumentSnapshot, Query
from google.cloud.firestore_v1.base_query import FieldFilter

from models import Client
from repositories import ClientRepository


class FirestoreClientRepository(ClientRepository):
    def __init__(self, database: str) -> None:
        self.db = FirestoreClient(database=database)
        self.logger = logging.getLogger(self.__class__.__name__)

    def doc_to_client(self, doc: DocumentSnapshot) -> Client:
        return dacite.from_dict(
            data_class=Client,
            data={
                **cast(dict[str, Any], doc.to_dict()),
                'id': doc.id,
            },
            config=dacite.Config(cast=[Enum, float]),
        )

    def get(self, client_id: str) -> Client | None:
        doc = self.db.collection('clients').document(client_id).get()

        if not doc.exists:
            return None

        return self.doc_to_client(doc)

    def _get_one(self, query: Query, description: str) -> Client | None:
        docs = query.get()

        if len(docs) == 0:
            return None

        if len(docs) > 1:
            self.logger.error('Multiple clients found with %s', description)

        return self.doc_to_client(cast(DocumentSnapshot, docs[0]))

    def get_by_email(self, email: str) -> Client | None:
        query: Query = self.db.collection('clients').where(
            filter=FieldFilter('email', '==', email)  # type: ignore[no-untyped-call]
        )
        return self._get_one(query, f'email {email}')

    def get_by_name_and_company(self, name: str, company: str) -> Client | None:
        query: Query = (
            self.db.collection('clients')
            .where(filter=FieldFilter('name', '==', name))  # type: ignore[no-untyped-call]
            .where(filter=FieldFilter('company', '==', company))  # type: ignore[no-untyped-call]
        )
        return self._get_one(query, f'name {name} and company {company}')

    def get_all(self) -> Generator[Client, None, None]:
        stream: Generator[DocumentSnapshot, None, None] = self.db.collection('clients').stream()
        for doc in stream:
            yield self.doc_to_client(doc)

    def create(self, client: Client) -> None:
        client_dict = asdict(client)
        del client_dict['id']

        self.db.collection('clients').document(client.id).create(client_dict)

    def update(self, client: Client) -> None:
        client_dict = asdict(client)
        del client_dict['id']
        # Totals are only ever written through increment_totals and set_totals
        del client_dict['total_projects']
        del client_dict['total_amount']

        self.db.collection('clients').document(client.id).update(client_dict)

    def increment_totals(self, client_id: str, projects: int, amount: float) -> None:
        self.db.collection('clients').document(client_id).update(
            {
                'total_projects': Increment(projects),
                'total_amount': Increment(amount),
                'updated_at': datetime.now(UTC),
            }
        )

    def set_totals(self, client_id: str, projects: int, amount: float) -> None:
        self.db.collection('clients').document(client_id).update(
            {
                'total_projects': projects,
                'total_amount': amount,
                'updated_at': datetime.now(UTC),
            }
        )

    def delete(self, client_id: str) -> None:
        self.db.collection('clients').document(client_id).delete()

    def delete_all(self) -> None:
        stream: Generator[DocumentSnapshot, None, None] = self.db.collection('clients').stream()
        for client in stream:
            cast(DocumentSnapshot, client.reference).delete()
