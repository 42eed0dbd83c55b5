from datetime import UTC, datetime
from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, Response
from flask.views import MethodView

from containers import Container
from models import InvoiceStatus
from repositories import ClientRepository, InvoiceRepository, ProjectRepository

from .errors import store_operation
from .util import class_route, json_response

blp = Blueprint('Stats', __name__)


def dashboard_stats(
    client_repo: ClientRepository,
    project_repo: ProjectRepository,
    invoice_repo: InvoiceRepository,
    now: datetime,
) -> dict[str, Any]:
    pending_invoices = 0
    earnings_this_month = 0.0

    with store_operation('invoice', 'scan'):
        for invoice in invoice_repo.get_all():
            if invoice.status == InvoiceStatus.PENDING:
                pending_invoices += 1
            elif invoice.created_at.year == now.year and invoice.created_at.month == now.month:
                earnings_this_month += invoice.amount

    with store_operation('project', 'scan'):
        total_projects = sum(1 for _ in project_repo.get_all())

    with store_operation('client', 'scan'):
        active_clients = sum(1 for client in client_repo.get_all() if client.total_projects > 0)

    return {
        'total_projects': total_projects,
        'active_clients': active_clients,
        'pending_invoices': pending_invoices,
        'earnings_this_month': earnings_this_month,
    }


@class_route(blp, '/api/v1/stats')
class Stats(MethodView):
    init_every_request = False

    @inject
    def get(
        self,
        client_repo: ClientRepository = Provide[Container.client_repo],
        project_repo: ProjectRepository = Provide[Container.project_repo],
        invoice_repo: InvoiceRepository = Provide[Container.invoice_repo],
    ) -> Response:
        return json_response(dashboard_stats(client_repo, project_repo, invoice_repo, datetime.now(UTC)), 200)
