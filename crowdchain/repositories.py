# crowdchain/repositories.py
"""
Storage interfaces injected into the services.

The services only talk to these abstract repositories, so tests can hand in
in-memory implementations while the application binds the SQLAlchemy ones to
db.session. Uniqueness is enforced by the store: a rejected write surfaces as
DuplicateKeyError, never as a driver-specific exception.
"""

from abc import ABC, abstractmethod

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from crowdchain.errors import DuplicateKeyError
from crowdchain.models import Account, CreatorApplication


class AccountRepository(ABC):

    @abstractmethod
    def create(self, account):
        """Persists a new account. Raises DuplicateKeyError on a taken email."""

    @abstractmethod
    def find_by_email(self, email):
        """Returns the account for email, or None."""


class ApplicationRepository(ABC):

    @abstractmethod
    def create(self, application):
        """Persists a new application. Raises DuplicateKeyError on a taken wallet."""

    @abstractmethod
    def find_by_key(self, wallet_address):
        """Returns the application for the (normalized) wallet, or None."""

    @abstractmethod
    def find_all(self, status=None):
        """Returns applications, newest submission first, optionally filtered by status."""

    @abstractmethod
    def update(self, application):
        """Persists changes made to an already stored application."""

    @abstractmethod
    def delete(self, application):
        """Removes a stored application."""

    @abstractmethod
    def count(self, status=None):
        """Counts applications, optionally restricted to one status."""


# --- SQLAlchemy implementations ---

class SQLAlchemyAccountRepository(AccountRepository):

    def __init__(self, session):
        self.session = session

    def create(self, account):
        self.session.add(account)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateKeyError(account.email, original_error=e)
        except Exception:
            self.session.rollback()
            raise
        return account

    def find_by_email(self, email):
        return self.session.query(Account).filter_by(email=email).first()


class SQLAlchemyApplicationRepository(ApplicationRepository):

    def __init__(self, session):
        self.session = session

    def create(self, application):
        self.session.add(application)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateKeyError(application.wallet_address, original_error=e)
        except Exception:
            self.session.rollback()
            raise
        return application

    def find_by_key(self, wallet_address):
        return self.session.query(CreatorApplication).filter_by(
            wallet_address=wallet_address
        ).first()

    def find_all(self, status=None):
        query = self.session.query(CreatorApplication)
        if status is not None:
            query = query.filter(CreatorApplication.status == status)
        return query.order_by(
            CreatorApplication.submitted_at.desc(),
            CreatorApplication.id.desc(),
        ).all()

    def update(self, application):
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return application

    def delete(self, application):
        self.session.delete(application)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def count(self, status=None):
        query = self.session.query(func.count(CreatorApplication.id))
        if status is not None:
            query = query.filter(CreatorApplication.status == status)
        return query.scalar() or 0
