from dataclasses import replace
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, Response
from flask.views import MethodView

from containers import Container
from models import Client
from repositories import ClientRepository, ProjectRepository

from .errors import ConflictError, NotFoundError, store_operation
from .schemas import ClientCreateSchema, ClientUpdateSchema
from .util import class_route, json_response, load_body, validate_id

blp = Blueprint('Clients', __name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def check_duplicates(
    name: str, email: str, company: str, client_repo: ClientRepository, client_id: str | None = None
) -> None:
    """Raise ConflictError if another client already uses the email or the name and company pair."""
    with store_operation('client', 'search'):
        same_email = client_repo.get_by_email(email)
        same_name = client_repo.get_by_name_and_company(name, company)

    if same_email is not None and same_email.id != client_id:
        raise ConflictError('Client already exists', entity='client', conflict_on='email')

    if same_name is not None and same_name.id != client_id:
        raise ConflictError('Client already exists', entity='client', conflict_on='name_company')


def create_client(*, name: str, email: str, company: str, client_repo: ClientRepository) -> Client:
    name = name.strip()
    email = normalize_email(email)
    company = company.strip()

    check_duplicates(name, email, company, client_repo)

    now = datetime.now(UTC)
    client = Client(
        id=str(uuid4()),
        name=name,
        email=email,
        company=company,
        total_projects=0,
        total_amount=0.0,
        created_at=now,
        updated_at=now,
    )

    with store_operation('client', 'create', client.id):
        client_repo.create(client)

    return client


def update_client(client_id: str, changes: dict[str, Any], client_repo: ClientRepository) -> Client:
    with store_operation('client', 'load', client_id):
        client = client_repo.get(client_id)

    if client is None:
        raise NotFoundError('Client not found', entity='client', operation='update')

    updated = replace(
        client,
        name=changes['name'].strip() if 'name' in changes else client.name,
        email=normalize_email(changes['email']) if 'email' in changes else client.email,
        company=changes['company'].strip() if 'company' in changes else client.company,
        updated_at=datetime.now(UTC),
    )

    if (updated.name, updated.email, updated.company) != (client.name, client.email, client.company):
        check_duplicates(updated.name, updated.email, updated.company, client_repo, client_id=client_id)

    with store_operation('client', 'update', client_id):
        client_repo.update(updated)

    return updated


def delete_client(client_id: str, client_repo: ClientRepository, project_repo: ProjectRepository) -> bool:
    with store_operation('client', 'load', client_id):
        client = client_repo.get(client_id)

    if client is None:
        raise NotFoundError('Client not found', entity='client', operation='delete')

    with store_operation('project', 'search'):
        has_projects = next(project_repo.get_by_client(client_id), None) is not None

    if has_projects:
        raise ConflictError('Client still has projects', entity='client', operation='delete', conflict_on='projects')

    with store_operation('client', 'delete', client_id):
        client_repo.delete(client_id)

    return True


def client_to_dict(client: Client) -> dict[str, Any]:
    return {
        'id': client.id,
        'name': client.name,
        'email': client.email,
        'company': client.company,
        'total_projects': client.total_projects,
        'total_amount': client.total_amount,
        'created_at': client.created_at.isoformat(),
        'updated_at': client.updated_at.isoformat(),
    }


@class_route(blp, '/api/v1/clients')
class ClientList(MethodView):
    init_every_request = False

    @inject
    def get(self, client_repo: ClientRepository = Provide[Container.client_repo]) -> Response:
        with store_operation('client', 'list'):
            clients = sorted(client_repo.get_all(), key=lambda client: client.created_at, reverse=True)

        return json_response([client_to_dict(client) for client in clients], 200)

    @inject
    def post(self, client_repo: ClientRepository = Provide[Container.client_repo]) -> Response:
        data = load_body(ClientCreateSchema())

        client = create_client(**data, client_repo=client_repo)

        return json_response(client_to_dict(client), 201)


@class_route(blp, '/api/v1/clients/<client_id>')
class ClientDetail(MethodView):
    init_every_request = False

    @inject
    def get(self, client_id: str, client_repo: ClientRepository = Provide[Container.client_repo]) -> Response:
        validate_id(client_id, 'client')

        with store_operation('client', 'load', client_id):
            client = client_repo.get(client_id)

        if client is None:
            raise NotFoundError('Client not found', entity='client', operation='load')

        return json_response(client_to_dict(client), 200)

    @inject
    def put(self, client_id: str, client_repo: ClientRepository = Provide[Container.client_repo]) -> Response:
        validate_id(client_id, 'client')
        changes = load_body(ClientUpdateSchema())

        client = update_client(client_id, changes, client_repo)

        return json_response(client_to_dict(client), 200)

    @inject
    def delete(
        self,
        client_id: str,
        client_repo: ClientRepository = Provide[Container.client_repo],
        project_repo: ProjectRepository = Provide[Container.project_repo],
    ) -> Response:
        validate_id(client_id, 'client')

        deleted = delete_client(client_id, client_repo, project_repo)

        return json_response({'deleted': deleted}, 200)
