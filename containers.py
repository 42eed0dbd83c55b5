from dependency_injector import providers
from dependency_injector.containers import DeclarativeContainer, WiringConfiguration

from repositories.firestore import (
    FirestoreClientRepository,
    FirestoreCounterRepository,
    FirestoreInvoiceRepository,
    FirestoreProjectRepository,
)


class Container(DeclarativeContainer):
    wiring_config = WiringConfiguration(packages=['blueprints'])
    config = providers.Configuration()

    client_repo = providers.ThreadSafeSingleton(FirestoreClientRepository, database=config.firestore.database)
    project_repo = providers.ThreadSafeSingleton(FirestoreProjectRepository, database=config.firestore.database)
    invoice_repo = providers.ThreadSafeSingleton(FirestoreInvoiceRepository, database=config.firestore.database)
    counter_repo = providers.ThreadSafeSingleton(FirestoreCounterRepository, database=config.firestore.database)
