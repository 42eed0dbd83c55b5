import logging
import math
from datetime import UTC, date, datetime
from typing import Any
from uuid import uuid4

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, Response
from flask.views import MethodView

from containers import Container
from models import Client, Project, ProjectStatus, TotalsAdjustment
from repositories import ClientRepository, ProjectRepository

from .errors import InternalError, NotFoundError, ValidationError, store_operation
from .schemas import ProjectCreateSchema, ProjectUpdateSchema
from .util import class_route, json_response, load_body, validate_id

blp = Blueprint('Projects', __name__)

logger = logging.getLogger(__name__)

MISSING_CLIENT_NAME = '—'


def client_adjustments(before: Project | None, after: Project | None) -> list[TotalsAdjustment]:
    """
    Compute the changes to client totals caused by replacing ``before`` with ``after``.

    ``before`` is None for a created project and ``after`` is None for a deleted one.
    When the project stays with its client only the amount difference is applied.
    When it moves, the old client loses the old amount in full and the new client
    gains the new amount in full, whether or not the amount changed as well.
    """
    if before is not None and after is not None and before.client_id == after.client_id:
        delta = after.amount - before.amount
        return [TotalsAdjustment(client_id=after.client_id, projects=0, amount=delta)] if delta else []

    adjustments = []
    if before is not None:
        adjustments.append(TotalsAdjustment(client_id=before.client_id, projects=-1, amount=-before.amount))
    if after is not None:
        adjustments.append(TotalsAdjustment(client_id=after.client_id, projects=1, amount=after.amount))
    return adjustments


def apply_adjustments(project_id: str, adjustments: list[TotalsAdjustment], client_repo: ClientRepository) -> None:
    for adjustment in adjustments:
        try:
            with store_operation('client', 'update totals of', adjustment.client_id):
                client_repo.increment_totals(adjustment.client_id, adjustment.projects, adjustment.amount)
        except InternalError:
            logger.error(
                'Project %s was written but totals of client %s were not adjusted by (%+d, %+.2f)',
                project_id,
                adjustment.client_id,
                adjustment.projects,
                adjustment.amount,
            )
            raise


def validate_amount(amount: float) -> None:
    if not math.isfinite(amount) or amount < 0:
        raise ValidationError('Amount must be a non-negative number', entity='project')


def validate_deadline(deadline: date) -> None:
    if deadline < datetime.now(UTC).date():
        raise ValidationError('Deadline cannot be in the past', entity='project')


def deadline_to_datetime(deadline: date) -> datetime:
    return datetime(deadline.year, deadline.month, deadline.day, tzinfo=UTC)


def get_client(client_id: str, client_repo: ClientRepository, operation: str) -> Client:
    with store_operation('client', 'load', client_id):
        client = client_repo.get(client_id)

    if client is None:
        raise NotFoundError('Client not found', entity='client', operation=operation)

    return client


def create_project(
    *,
    name: str,
    client_id: str,
    status: ProjectStatus,
    amount: float,
    deadline: date,
    project_repo: ProjectRepository,
    client_repo: ClientRepository,
) -> Project:
    validate_amount(amount)
    validate_deadline(deadline)
    get_client(client_id, client_repo, 'create project')

    now = datetime.now(UTC)
    project = Project(
        id=str(uuid4()),
        name=name.strip(),
        client_id=client_id,
        status=status,
        amount=amount,
        deadline=deadline_to_datetime(deadline),
        created_at=now,
        updated_at=now,
    )

    with store_operation('project', 'create', project.id):
        project_repo.create(project)

    apply_adjustments(project.id, client_adjustments(None, project), client_repo)

    return project


def update_project(
    project_id: str,
    changes: dict[str, Any],
    project_repo: ProjectRepository,
    client_repo: ClientRepository,
) -> Project:
    with store_operation('project', 'load', project_id):
        project = project_repo.get(project_id)

    if project is None:
        raise NotFoundError('Project not found', entity='project', operation='update')

    updates: dict[str, Any] = {}

    if 'name' in changes:
        updates['name'] = changes['name'].strip()

    if 'status' in changes:
        updates['status'] = changes['status']

    if 'amount' in changes:
        validate_amount(changes['amount'])
        updates['amount'] = changes['amount']

    if 'deadline' in changes:
        validate_deadline(changes['deadline'])
        updates['deadline'] = deadline_to_datetime(changes['deadline'])

    if 'client_id' in changes and changes['client_id'] != project.client_id:
        get_client(changes['client_id'], client_repo, 'reassign project')
        updates['client_id'] = changes['client_id']

    updates['updated_at'] = datetime.now(UTC)

    # Totals follow the snapshot the repository replaced, not the one loaded above.
    with store_operation('project', 'update', project_id):
        result = project_repo.update(project_id, updates)

    if result is None:
        raise NotFoundError('Project not found', entity='project', operation='update')

    before, after = result

    if before.client_id != after.client_id:
        logger.info('Project %s moved from client %s to client %s', project_id, before.client_id, after.client_id)

    apply_adjustments(project_id, client_adjustments(before, after), client_repo)

    return after


def delete_project(project_id: str, project_repo: ProjectRepository, client_repo: ClientRepository) -> bool:
    with store_operation('project', 'delete', project_id):
        project = project_repo.delete(project_id)

    if project is None:
        raise NotFoundError('Project not found', entity='project', operation='delete')

    apply_adjustments(project_id, client_adjustments(project, None), client_repo)

    return True


def project_to_dict(project: Project, client_name: str) -> dict[str, Any]:
    return {
        'id': project.id,
        'name': project.name,
        'client_id': project.client_id,
        'client': client_name,
        'status': project.status,
        'amount': project.amount,
        'deadline': project.deadline.isoformat(),
        'created_at': project.created_at.isoformat(),
        'updated_at': project.updated_at.isoformat(),
    }


def client_name_of(project: Project, client_repo: ClientRepository) -> str:
    with store_operation('client', 'load', project.client_id):
        client = client_repo.get(project.client_id)

    return MISSING_CLIENT_NAME if client is None else client.name


@class_route(blp, '/api/v1/projects')
class ProjectList(MethodView):
    init_every_request = False

    @inject
    def get(
        self,
        project_repo: ProjectRepository = Provide[Container.project_repo],
        client_repo: ClientRepository = Provide[Container.client_repo],
    ) -> Response:
        with store_operation('client', 'list'):
            client_names = {client.id: client.name for client in client_repo.get_all()}

        with store_operation('project', 'list'):
            projects = sorted(project_repo.get_all(), key=lambda project: project.created_at, reverse=True)

        return json_response(
            [
                project_to_dict(project, client_names.get(project.client_id, MISSING_CLIENT_NAME))
                for project in projects
            ],
            200,
        )

    @inject
    def post(
        self,
        project_repo: ProjectRepository = Provide[Container.project_repo],
        client_repo: ClientRepository = Provide[Container.client_repo],
    ) -> Response:
        data = load_body(ProjectCreateSchema())
        validate_id(data['client_id'], 'client')

        project = create_project(**data, project_repo=project_repo, client_repo=client_repo)

        return json_response(project_to_dict(project, client_name_of(project, client_repo)), 201)


@class_route(blp, '/api/v1/projects/<project_id>')
class ProjectDetail(MethodView):
    init_every_request = False

    @inject
    def get(
        self,
        project_id: str,
        project_repo: ProjectRepository = Provide[Container.project_repo],
        client_repo: ClientRepository = Provide[Container.client_repo],
    ) -> Response:
        validate_id(project_id, 'project')

        with store_operation('project', 'load', project_id):
            project = project_repo.get(project_id)

        if project is None:
            raise NotFoundError('Project not found', entity='project', operation='load')

        return json_response(project_to_dict(project, client_name_of(project, client_repo)), 200)

    @inject
    def put(
        self,
        project_id: str,
        project_repo: ProjectRepository = Provide[Container.project_repo],
        client_repo: ClientRepository = Provide[Container.client_repo],
    ) -> Response:
        validate_id(project_id, 'project')
        changes = load_body(ProjectUpdateSchema())
        if 'client_id' in changes:
            validate_id(changes['client_id'], 'client')

        project = update_project(project_id, changes, project_repo, client_repo)

        return json_response(project_to_dict(project, client_name_of(project, client_repo)), 200)

    @inject
    def delete(
        self,
        project_id: str,
        project_repo: ProjectRepository = Provide[Container.project_repo],
        client_repo: ClientRepository = Provide[Container.client_repo],
    ) -> Response:
        validate_id(project_id, 'project')

        deleted = delete_project(project_id, project_repo, client_repo)

        return json_response({'deleted': deleted}, 200)
