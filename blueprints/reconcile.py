import logging
import math
from collections import defaultdict

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, Response
from flask.views import MethodView

from containers import Container
from repositories import ClientRepository, ProjectRepository

from .errors import store_operation
from .util import class_route, json_response

blp = Blueprint('Reconcile', __name__)

logger = logging.getLogger(__name__)


def recompute_client_totals(client_repo: ClientRepository, project_repo: ProjectRepository) -> list[str]:
    """
    Rebuild every client's totals from a full scan of the projects.

    Totals drift when a project write succeeded but the following client update did not.
    Returns the ids of the clients whose stored totals were corrected.
    """
    counts: dict[str, int] = defaultdict(int)
    amounts: dict[str, float] = defaultdict(float)

    with store_operation('project', 'scan'):
        for project in project_repo.get_all():
            counts[project.client_id] += 1
            amounts[project.client_id] += project.amount

    corrected = []

    with store_operation('client', 'scan'):
        clients = list(client_repo.get_all())

    for client in clients:
        projects, amount = counts[client.id], amounts[client.id]
        if client.total_projects == projects and math.isclose(client.total_amount, amount, abs_tol=1e-6):
            continue

        logger.warning(
            'Client %s totals drifted: stored (%d, %.2f), actual (%d, %.2f)',
            client.id,
            client.total_projects,
            client.total_amount,
            projects,
            amount,
        )

        with store_operation('client', 'reset totals of', client.id):
            client_repo.set_totals(client.id, projects, amount)

        corrected.append(client.id)

    return corrected


@class_route(blp, '/api/v1/reconcile/clients')
class ReconcileClients(MethodView):
    init_every_request = False

    @inject
    def post(
        self,
        client_repo: ClientRepository = Provide[Container.client_repo],
        project_repo: ProjectRepository = Provide[Container.project_repo],
    ) -> Response:
        corrected = recompute_client_totals(client_repo, project_repo)

        return json_response({'corrected': corrected}, 200)
