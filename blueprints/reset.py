from dependency_injector.wiring import Provide, inject
from flask import Blueprint, Response
from flask.views import MethodView

from containers import Container
from repositories import ClientRepository, CounterRepository, InvoiceRepository, ProjectRepository

from .errors import store_operation
from .util import class_route, json_response

blp = Blueprint('Reset database', __name__)


@class_route(blp, '/api/v1/reset')
class ResetDB(MethodView):
    init_every_request = False

    @inject
    def post(
        self,
        client_repo: ClientRepository = Provide[Container.client_repo],
        project_repo: ProjectRepository = Provide[Container.project_repo],
        invoice_repo: InvoiceRepository = Provide[Container.invoice_repo],
        counter_repo: CounterRepository = Provide[Container.counter_repo],
    ) -> Response:
        with store_operation('project', 'reset'):
            project_repo.delete_all()

        with store_operation('client', 'reset'):
            client_repo.delete_all()

        with store_operation('invoice', 'reset'):
            invoice_repo.delete_all()

        with store_operation('counter', 'reset'):
            counter_repo.delete_all()

        return json_response({'status': 'Ok'}, 200)
