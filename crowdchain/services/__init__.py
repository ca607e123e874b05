# crowdchain/services/__init__.py
"""
Service factories bound to the current Flask application.

Blueprints call these to get services wired to db.session and the app
config. Tests construct the services directly with in-memory repositories.
"""

from flask import current_app

from crowdchain import db
from crowdchain.repositories import SQLAlchemyAccountRepository, SQLAlchemyApplicationRepository
from .auth import CredentialService
from .applications import ApplicationService


def get_credential_service():
    config = current_app.config
    return CredentialService(
        SQLAlchemyAccountRepository(db.session),
        secret=config['JWT_SECRET_KEY'],
        expires_in=config['JWT_EXPIRES_IN_SECONDS'],
        algorithm=config.get('JWT_ALGORITHM', 'HS256'),
    )


def get_application_service():
    config = current_app.config
    return ApplicationService(
        SQLAlchemyApplicationRepository(db.session),
        max_documents=config['MAX_VERIFICATION_DOCS'],
        max_document_bytes=config['MAX_DOCUMENT_BYTES'],
    )


__all__ = [
    'CredentialService',
    'ApplicationService',
    'get_credential_service',
    'get_application_service',
]
