import logging
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, Response
from flask.views import MethodView

from containers import Container
from models import Invoice, InvoiceStatus
from repositories import ClientRepository, CounterRepository, DuplicateInvoiceNumberError, InvoiceRepository

from .errors import ConflictError, NotFoundError, ValidationError, store_operation
from .schemas import InvoiceCreateSchema, InvoiceUpdateSchema
from .util import class_route, json_response, load_body, validate_id

blp = Blueprint('Invoices', __name__)

logger = logging.getLogger(__name__)

INVOICE_SEQUENCE_SCOPE = 'invoices'
DEFAULT_MAX_ATTEMPTS = 5


def format_invoice_number(year: int, seq: int) -> str:
    """Return the human-readable invoice number, e.g. ``INV-2025-00001``."""
    if seq < 1:
        raise ValueError('Invoice sequence numbers start at 1')

    return f'INV-{year}-{seq:05d}'


def next_invoice_sequence(year: int, counter_repo: CounterRepository) -> int:
    key = f'{INVOICE_SEQUENCE_SCOPE}:{year}'

    with store_operation('counter', 'increment', key):
        return counter_repo.increment(key)


def resolve_client_name(client: str | None, client_id: str | None, client_repo: ClientRepository) -> str:
    if client_id is not None:
        with store_operation('client', 'load', client_id):
            referenced = client_repo.get(client_id)

        if referenced is None:
            raise NotFoundError('Client not found', entity='client', operation='bill client')

        client = client or referenced.name

    if not client:
        raise ValidationError('Client name or client id required', entity='invoice')

    return client


def create_invoice(
    *,
    amount: float,
    status: InvoiceStatus,
    invoice_repo: InvoiceRepository,
    counter_repo: CounterRepository,
    client_repo: ClientRepository,
    client: str | None = None,
    client_id: str | None = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> Invoice:
    if amount < 0:
        raise ValidationError('Amount must be a non-negative number', entity='invoice')

    client = resolve_client_name(client, client_id, client_repo)

    now = datetime.now(UTC)

    for attempt in range(1, max_attempts + 1):
        invoice = Invoice(
            id=str(uuid4()),
            invoice_number=format_invoice_number(now.year, next_invoice_sequence(now.year, counter_repo)),
            client=client,
            client_id=client_id,
            amount=amount,
            status=status,
            created_at=now,
            updated_at=now,
        )

        try:
            with store_operation('invoice', 'create', invoice.id):
                invoice_repo.create(invoice)
        except DuplicateInvoiceNumberError:
            logger.warning(
                'Duplicate invoice number %s on attempt %d of %d, retrying',
                invoice.invoice_number,
                attempt,
                max_attempts,
            )
            continue

        return invoice

    raise ConflictError(
        f'Could not allocate a unique invoice number after {max_attempts} attempts',
        entity='invoice',
        operation='create',
        conflict_on='invoice_number',
    )


def update_invoice(
    invoice_id: str,
    changes: dict[str, Any],
    invoice_repo: InvoiceRepository,
    client_repo: ClientRepository,
) -> Invoice:
    if changes['amount'] < 0:
        raise ValidationError('Amount must be a non-negative number', entity='invoice')

    updates = {
        'client': resolve_client_name(changes['client'], changes.get('client_id'), client_repo),
        'client_id': changes.get('client_id'),
        'amount': changes['amount'],
        'status': changes['status'],
        'updated_at': datetime.now(UTC),
    }

    with store_operation('invoice', 'update', invoice_id):
        invoice = invoice_repo.update(invoice_id, updates)

    if invoice is None:
        raise NotFoundError('Invoice not found', entity='invoice', operation='update')

    return invoice


def delete_invoice(invoice_id: str, invoice_repo: InvoiceRepository) -> bool:
    with store_operation('invoice', 'delete', invoice_id):
        deleted = invoice_repo.delete(invoice_id)

    if not deleted:
        raise NotFoundError('Invoice not found', entity='invoice', operation='delete')

    return True


def invoice_to_dict(invoice: Invoice) -> dict[str, Any]:
    return {
        'id': invoice.id,
        'invoice_number': invoice.invoice_number,
        'client': invoice.client,
        'client_id': invoice.client_id,
        'amount': invoice.amount,
        'status': invoice.status,
        'created_at': invoice.created_at.isoformat(),
        'updated_at': invoice.updated_at.isoformat(),
    }


@class_route(blp, '/api/v1/invoices')
class InvoiceList(MethodView):
    init_every_request = False

    @inject
    def get(self, invoice_repo: InvoiceRepository = Provide[Container.invoice_repo]) -> Response:
        with store_operation('invoice', 'list'):
            invoices = sorted(invoice_repo.get_all(), key=lambda invoice: invoice.created_at, reverse=True)

        return json_response([invoice_to_dict(invoice) for invoice in invoices], 200)

    @inject
    def post(
        self,
        invoice_repo: InvoiceRepository = Provide[Container.invoice_repo],
        counter_repo: CounterRepository = Provide[Container.counter_repo],
        client_repo: ClientRepository = Provide[Container.client_repo],
        max_attempts: int = Provide[Container.config.invoice.max_attempts],
    ) -> Response:
        data = load_body(InvoiceCreateSchema())
        if 'client_id' in data:
            validate_id(data['client_id'], 'client')

        invoice = create_invoice(
            **data,
            invoice_repo=invoice_repo,
            counter_repo=counter_repo,
            client_repo=client_repo,
            max_attempts=max_attempts,
        )

        return json_response(invoice_to_dict(invoice), 201)


@class_route(blp, '/api/v1/invoices/<invoice_id>')
class InvoiceDetail(MethodView):
    init_every_request = False

    @inject
    def get(self, invoice_id: str, invoice_repo: InvoiceRepository = Provide[Container.invoice_repo]) -> Response:
        validate_id(invoice_id, 'invoice')

        with store_operation('invoice', 'load', invoice_id):
            invoice = invoice_repo.get(invoice_id)

        if invoice is None:
            raise NotFoundError('Invoice not found', entity='invoice', operation='load')

        return json_response(invoice_to_dict(invoice), 200)

    @inject
    def put(
        self,
        invoice_id: str,
        invoice_repo: InvoiceRepository = Provide[Container.invoice_repo],
        client_repo: ClientRepository = Provide[Container.client_repo],
    ) -> Response:
        validate_id(invoice_id, 'invoice')
        changes = load_body(InvoiceUpdateSchema())
        if changes['client_id'] is not None:
            validate_id(changes['client_id'], 'client')

        invoice = update_invoice(invoice_id, changes, invoice_repo, client_repo)

        return json_response(invoice_to_dict(invoice), 200)

    @inject
    def delete(self, invoice_id: str, invoice_repo: InvoiceRepository = Provide[Container.invoice_repo]) -> Response:
        validate_id(invoice_id, 'invoice')

        deleted = delete_invoice(invoice_id, invoice_repo)

        return json_response({'deleted': deleted}, 200)
