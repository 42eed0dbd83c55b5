from datetime import UTC
from typing import cast
from unittest.mock import MagicMock

from faker import Faker
from google.api_core.exceptions import ServiceUnavailable
from unittest_parametrize import ParametrizedTestCase, parametrize

from app import create_app
from blueprints.client import create_client, delete_client, update_client
from blueprints.errors import ConflictError, NotFoundError
from models import Client, Project, ProjectStatus
from repositories import ClientRepository, ProjectRepository


class TestClient(ParametrizedTestCase):
    def setUp(self) -> None:
        self.faker = Faker()
        self.app = create_app()
        self.test_client = self.app.test_client()

        self.client_repo = MagicMock(spec=ClientRepository)
        self.project_repo = MagicMock(spec=ProjectRepository)

        self.client_repo.get_by_email.return_value = None
        self.client_repo.get_by_name_and_company.return_value = None

    def tearDown(self) -> None:
        self.app.container.unwire()

    def gen_client(self) -> Client:
        return Client(
            id=cast(str, self.faker.uuid4()),
            name=self.faker.name(),
            email=self.faker.email(),
            company=self.faker.company(),
            total_projects=self.faker.random_int(min=0, max=10),
            total_amount=float(self.faker.random_int(min=0, max=10000)),
            created_at=self.faker.past_datetime(start_date='-30d', tzinfo=UTC),
            updated_at=self.faker.past_datetime(start_date='-30d', tzinfo=UTC),
        )

    def test_create_client(self) -> None:
        client = create_client(
            name=' Jane Doe ',
            email='  Jane.Doe@Example.COM ',
            company='Acme ',
            client_repo=self.client_repo,
        )

        self.assertEqual(client.name, 'Jane Doe')
        self.assertEqual(client.email, 'jane.doe@example.com')
        self.assertEqual(client.company, 'Acme')
        self.assertEqual((client.total_projects, client.total_amount), (0, 0.0))
        self.client_repo.get_by_email.assert_called_once_with('jane.doe@example.com')
        self.client_repo.create.assert_called_once_with(client)

    @parametrize(
        ('same_email', 'same_name', 'conflict_on'),
        [
            (True, False, 'email'),
            (False, True, 'name_company'),
            (True, True, 'email'),
        ],
    )
    def test_create_client_duplicate(self, same_email: bool, same_name: bool, conflict_on: str) -> None:
        existing = self.gen_client()
        self.client_repo.get_by_email.return_value = existing if same_email else None
        self.client_repo.get_by_name_and_company.return_value = existing if same_name else None

        with self.assertRaises(ConflictError) as ctx:
            create_client(
                name=existing.name, email=existing.email, company=existing.company, client_repo=self.client_repo
            )

        self.assertEqual(ctx.exception.conflict_on, conflict_on)
        self.client_repo.create.assert_not_called()

    def test_update_client(self) -> None:
        client = self.gen_client()
        self.client_repo.get.return_value = client

        updated = update_client(client.id, {'email': 'NEW@example.com'}, self.client_repo)

        self.assertEqual(updated.email, 'new@example.com')
        self.assertEqual(updated.total_projects, client.total_projects)
        self.client_repo.update.assert_called_once_with(updated)

    def test_update_client_keeps_own_email(self) -> None:
        client = self.gen_client()
        self.client_repo.get.return_value = client
        self.client_repo.get_by_email.return_value = client

        update_client(client.id, {'name': 'Renamed'}, self.client_repo)

        self.client_repo.update.assert_called_once()

    def test_update_client_email_taken(self) -> None:
        client, other = self.gen_client(), self.gen_client()
        self.client_repo.get.return_value = client
        self.client_repo.get_by_email.return_value = other

        with self.assertRaises(ConflictError):
            update_client(client.id, {'email': other.email}, self.client_repo)

        self.client_repo.update.assert_not_called()

    def test_update_client_not_found(self) -> None:
        self.client_repo.get.return_value = None

        with self.assertRaises(NotFoundError):
            update_client(cast(str, self.faker.uuid4()), {'name': 'x'}, self.client_repo)

    def test_delete_client(self) -> None:
        client = self.gen_client()
        self.client_repo.get.return_value = client
        self.project_repo.get_by_client.return_value = iter([])

        self.assertTrue(delete_client(client.id, self.client_repo, self.project_repo))

        self.client_repo.delete.assert_called_once_with(client.id)

    def test_delete_client_with_projects(self) -> None:
        client = self.gen_client()
        self.client_repo.get.return_value = client
        project = Project(
            id=cast(str, self.faker.uuid4()),
            name=self.faker.catch_phrase(),
            client_id=client.id,
            status=ProjectStatus.PENDING,
            amount=10.0,
            deadline=self.faker.future_datetime(tzinfo=UTC),
            created_at=self.faker.past_datetime(tzinfo=UTC),
            updated_at=self.faker.past_datetime(tzinfo=UTC),
        )
        self.project_repo.get_by_client.return_value = iter([project])

        with self.assertRaises(ConflictError) as ctx:
            delete_client(client.id, self.client_repo, self.project_repo)

        self.assertEqual(ctx.exception.conflict_on, 'projects')
        self.client_repo.delete.assert_not_called()

    def test_delete_client_not_found(self) -> None:
        self.client_repo.get.return_value = None

        with self.assertRaises(NotFoundError):
            delete_client(cast(str, self.faker.uuid4()), self.client_repo, self.project_repo)

    def test_post_client(self) -> None:
        body = {'name': 'Jane Doe', 'email': 'Jane@Example.com', 'company': 'Acme'}

        with self.app.container.client_repo.override(self.client_repo):
            resp = self.test_client.post('/api/v1/clients', json=body)

        self.assertEqual(resp.status_code, 201)
        data = resp.get_json()
        self.assertEqual(data['email'], 'jane@example.com')
        self.assertEqual(data['total_projects'], 0)
        self.assertEqual(data['total_amount'], 0.0)

    def test_post_client_duplicate(self) -> None:
        self.client_repo.get_by_email.return_value = self.gen_client()
        body = {'name': 'Jane Doe', 'email': 'jane@example.com', 'company': 'Acme'}

        with self.app.container.client_repo.override(self.client_repo):
            resp = self.test_client.post('/api/v1/clients', json=body)

        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.get_json()['conflict_on'], 'email')

    @parametrize(
        ('body',),
        [
            ({'name': 'Jane', 'email': 'not-an-email', 'company': 'Acme'},),
            ({'name': '', 'email': 'jane@example.com', 'company': 'Acme'},),
            ({'name': 'Jane', 'email': 'jane@example.com', 'company': 'Acme', 'total_projects': 3},),
        ],
    )
    def test_post_client_invalid(self, body: dict[str, object]) -> None:
        with self.app.container.client_repo.override(self.client_repo):
            resp = self.test_client.post('/api/v1/clients', json=body)

        self.assertEqual(resp.status_code, 422)
        self.client_repo.create.assert_not_called()

    def test_post_client_not_json(self) -> None:
        with self.app.container.client_repo.override(self.client_repo):
            resp = self.test_client.post('/api/v1/clients', data='name=Jane')

        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.get_json()['message'], 'Invalid JSON body')

    def test_get_client(self) -> None:
        client = self.gen_client()
        self.client_repo.get.return_value = client

        with self.app.container.client_repo.override(self.client_repo):
            resp = self.test_client.get(f'/api/v1/clients/{client.id}')

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()['total_amount'], client.total_amount)

    def test_get_client_malformed_id(self) -> None:
        with self.app.container.client_repo.override(self.client_repo):
            resp = self.test_client.get('/api/v1/clients/123')

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()['message'], 'Invalid client id')

    def test_put_client(self) -> None:
        client = self.gen_client()
        self.client_repo.get.return_value = client

        with self.app.container.client_repo.override(self.client_repo):
            resp = self.test_client.put(f'/api/v1/clients/{client.id}', json={'company': 'Initech'})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()['company'], 'Initech')

    def test_delete_client_endpoint(self) -> None:
        client = self.gen_client()
        self.client_repo.get.return_value = client
        self.project_repo.get_by_client.return_value = iter([])

        with (
            self.app.container.client_repo.override(self.client_repo),
            self.app.container.project_repo.override(self.project_repo),
        ):
            resp = self.test_client.delete(f'/api/v1/clients/{client.id}')

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json(), {'deleted': True})

    def test_get_clients_store_unavailable(self) -> None:
        self.client_repo.get_all.side_effect = ServiceUnavailable('Firestore unavailable')

        with self.app.container.client_repo.override(self.client_repo):
            resp = self.test_client.get('/api/v1/clients')

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.get_json(), {'code': 500, 'message': 'Failed to list client', 'kind': 'Internal'})

    def test_get_client_store_unavailable(self) -> None:
        client_id = cast(str, self.faker.uuid4())
        self.client_repo.get.side_effect = ServiceUnavailable('Firestore unavailable')

        with self.app.container.client_repo.override(self.client_repo):
            resp = self.test_client.get(f'/api/v1/clients/{client_id}')

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.get_json()['message'], f'Failed to load client {client_id}')
