"""
Shared pytest fixtures for the CrowdChain backend tests.

- In-memory repositories implementing the storage interfaces
- A deterministic clock so timestamp ordering is predictable
- Services wired to the in-memory repositories
- A Flask app on in-memory SQLite, with its test client
"""

from datetime import datetime, timedelta

import pytest

from crowdchain import create_app, db
from crowdchain.config import TestConfig
from crowdchain.errors import DuplicateKeyError
from crowdchain.repositories import AccountRepository, ApplicationRepository
from crowdchain.services.applications import ApplicationService
from crowdchain.services.auth import CredentialService

JWT_SECRET = 'unit-test-jwt-secret-with-enough-length'
STRONG_PASSWORD = 'StrongPass123!'


class FakeClock:
    """Returns a strictly increasing naive UTC datetime on every call."""

    def __init__(self, start=datetime(2025, 1, 1, 12, 0, 0), step=timedelta(seconds=1)):
        self.current = start
        self.step = step

    def __call__(self):
        self.current = self.current + self.step
        return self.current


class InMemoryAccountRepository(AccountRepository):

    def __init__(self):
        self.accounts = {}

    def create(self, account):
        if account.email in self.accounts:
            raise DuplicateKeyError(account.email)
        self.accounts[account.email] = account
        return account

    def find_by_email(self, email):
        return self.accounts.get(email)


class InMemoryApplicationRepository(ApplicationRepository):

    def __init__(self):
        self.applications = {}
        self.update_calls = 0

    def create(self, application):
        if application.wallet_address in self.applications:
            raise DuplicateKeyError(application.wallet_address)
        self.applications[application.wallet_address] = application
        return application

    def find_by_key(self, wallet_address):
        return self.applications.get(wallet_address)

    def find_all(self, status=None):
        found = [
            a for a in self.applications.values()
            if status is None or a.status == status
        ]
        return sorted(found, key=lambda a: (a.submitted_at, a.id), reverse=True)

    def update(self, application):
        self.update_calls += 1
        return application

    def delete(self, application):
        del self.applications[application.wallet_address]

    def count(self, status=None):
        return len(self.find_all(status))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def account_repo():
    return InMemoryAccountRepository()


@pytest.fixture
def application_repo():
    return InMemoryApplicationRepository()


@pytest.fixture
def credential_service(account_repo, clock):
    return CredentialService(account_repo, secret=JWT_SECRET, expires_in=60, clock=clock)


@pytest.fixture
def application_service(application_repo, clock):
    return ApplicationService(
        application_repo,
        max_documents=5,
        max_document_bytes=1024,
        clock=clock,
    )


@pytest.fixture
def application_data():
    return {
        'walletAddress': '0xABC',
        'fullName': 'Jane',
        'email': 'jane@x.com',
        'professionalTitle': 'Engineer',
    }


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_header(client):
    """Registers an account and returns a valid Authorization header for it."""
    client.post('/auth/signup', json={'email': 'admin@crowdchain.io', 'password': STRONG_PASSWORD})
    response = client.post('/auth/login', json={'email': 'admin@crowdchain.io', 'password': STRONG_PASSWORD})
    token = response.get_json()['access_token']
    return {'Authorization': f'Bearer {token}'}
