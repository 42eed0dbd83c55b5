import logging
from collections.abc import Generator
from dataclasses import asdict, replace
from enum import Enum
from typing import Any, cast

import dacite
from google.cloud.firestore import Client as FirestoreClient  # type: ignore[import-untyped]
from google.cloud.firestore import Transaction, transactional
from google.cloud.firestore_v1 import DocumentSnapshot, Query
from google.cloud.firestore_v1.base_query import FieldFilter

from models import Project
from repositories import ProjectRepository

from .transaction import run_transaction


class FirestoreProjectRepository(ProjectRepository):
    def __init__(self, database: str) -> None:
        self.db = FirestoreClient(database=database)
        self.logger = logging.getLogger(self.__class__.__name__)

    def doc_to_project(self, doc: DocumentSnapshot) -> Project:
        return dacite.from_dict(
            data_class=Project,
            data={
                **cast(dict[str, Any], doc.to_dict()),
                'id': doc.id,
            },
            config=dacite.Config(cast=[Enum, float]),
        )

    def get(self, project_id: str) -> Project | None:
        doc = self.db.collection('projects').document(project_id).get()

        if not doc.exists:
            return None

        return self.doc_to_project(doc)

    def get_by_client(self, client_id: str) -> Generator[Project, None, None]:
        query: Query = self.db.collection('projects').where(
            filter=FieldFilter('client_id', '==', client_id)  # type: ignore[no-untyped-call]
        )

        stream: Generator[DocumentSnapshot, None, None] = query.stream()
        for doc in stream:
            yield self.doc_to_project(doc)

    def get_all(self) -> Generator[Project, None, None]:
        stream: Generator[DocumentSnapshot, None, None] = self.db.collection('projects').stream()
        for doc in stream:
            yield self.doc_to_project(doc)

    def create(self, project: Project) -> None:
        project_dict = asdict(project)
        del project_dict['id']

        self.db.collection('projects').document(project.id).create(project_dict)

    def update(self, project_id: str, changes: dict[str, Any]) -> tuple[Project, Project] | None:
        project_ref = self.db.collection('projects').document(project_id)

        @transactional
        def update_in_transaction(transaction: Transaction) -> tuple[Project, Project] | None:
            snapshot = project_ref.get(transaction=transaction)
            if not snapshot.exists:
                return None

            transaction.update(project_ref, changes)

            before = self.doc_to_project(snapshot)
            return before, replace(before, **changes)

        return cast(tuple[Project, Project] | None, run_transaction(update_in_transaction, self.db.transaction()))

    def delete(self, project_id: str) -> Project | None:
        project_ref = self.db.collection('projects').document(project_id)

        @transactional
        def delete_in_transaction(transaction: Transaction) -> Project | None:
            snapshot = project_ref.get(transaction=transaction)
            if not snapshot.exists:
                return None

            transaction.delete(project_ref)
            return self.doc_to_project(snapshot)

        return cast(Project | None, run_transaction(delete_in_transaction, self.db.transaction()))

    def delete_all(self) -> None:
        stream: Generator[DocumentSnapshot, None, None] = self.db.collection('projects').stream()
        for project in stream:
            cast(DocumentSnapshot, project.reference).delete()
