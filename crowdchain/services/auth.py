# crowdchain/services/auth.py
"""
Credential Service: account signup and login.

Domain failures (validation, conflict, unknown account, wrong password)
surface as specific ServiceErrors. Anything else is logged and collapsed
into a single InternalError so storage or hashing details never reach the
caller.
"""

import logging
import re

from email_validator import validate_email, EmailNotValidError
from werkzeug.security import generate_password_hash, check_password_hash

from crowdchain.errors import (
    ServiceError,
    ValidationError,
    BadRequestError,
    UnauthorizedError,
    ConflictError,
    InternalError,
    DuplicateKeyError,
)
from crowdchain.jwt_auth import issue_token, decode_token
from crowdchain.models import Account, new_id, utcnow

logger = logging.getLogger(__name__)

PASSWORD_SYMBOLS = '@$!%*?&'
PASSWORD_POLICY = re.compile(
    r'^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$'
)
PASSWORD_POLICY_MESSAGE = (
    "Password too weak. Must include uppercase, lowercase, number, special "
    f"character ({PASSWORD_SYMBOLS}), and be at least 8 characters."
)


def normalize_email(email):
    """
    Validates the syntax of an email address and returns it lowercased.

    Raises:
        ValidationError: If the address is empty or malformed
    """
    if not email or not isinstance(email, str) or not email.strip():
        raise ValidationError("Email is required.")
    try:
        result = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError(f"Invalid email: {str(e)}")
    return result.normalized.lower()


def _login_email(email):
    """Signup normalization, or None for an address signup would have rejected."""
    try:
        return normalize_email(email)
    except ValidationError:
        return None


def check_password_policy(password):
    if not isinstance(password, str) or not PASSWORD_POLICY.match(password):
        raise ValidationError(PASSWORD_POLICY_MESSAGE)


class CredentialService:
    """
    Registers accounts and authenticates logins.

    Args:
        accounts (AccountRepository): Storage for accounts
        secret (str): Token signing secret
        expires_in (int): Token validity window in seconds
        algorithm (str): JWT signing algorithm
        clock (callable): Returns the current naive UTC datetime
    """

    def __init__(self, accounts, secret, expires_in=60, algorithm='HS256', clock=utcnow):
        self.accounts = accounts
        self.secret = secret
        self.expires_in = expires_in
        self.algorithm = algorithm
        self.clock = clock

    def signup(self, email, password):
        """
        Creates an account and returns it without any password material.

        Raises:
            ValidationError: Malformed email or weak password
            ConflictError: The email is already registered
            InternalError: Any other failure
        """
        email = normalize_email(email)
        check_password_policy(password)

        try:
            if self.accounts.find_by_email(email) is not None:
                raise ConflictError("user already exist")

            account = Account(
                id=new_id(),
                email=email,
                # Werkzeug generates a fresh random salt on every call.
                password_hash=generate_password_hash(password),
                created_at=self.clock(),
            )
            self.accounts.create(account)
        except ConflictError:
            logger.warning(f"Signup rejected: {email} is already registered")
            raise
        except DuplicateKeyError:
            # Lost a race against a concurrent signup for the same email.
            logger.warning(f"Signup rejected by unique constraint: {email}")
            raise ConflictError("user already exist")
        except Exception as e:
            logger.error(f"Failed to create account for {email}: {str(e)}", exc_info=True)
            raise InternalError("Failed to create user", original_error=e)

        logger.info(f"Account created: {email} (ID: {account.id})")
        return account.to_dict()

    def login(self, email, password):
        """
        Checks credentials and issues an access token.

        Returns:
            dict: {"message": "success", "access_token": <token>}

        Raises:
            ValidationError: Email or password missing
            BadRequestError: No account for this email
            UnauthorizedError: Wrong password
            InternalError: Any other failure
        """
        if not email or not isinstance(email, str) or not password or not isinstance(password, str):
            raise ValidationError("Email and password are required.")

        try:
            lookup_key = _login_email(email)
            account = self.accounts.find_by_email(lookup_key) if lookup_key else None
            if account is None:
                raise BadRequestError("Invalid credentials")

            if not check_password_hash(account.password_hash, password):
                raise UnauthorizedError("Invalid credentials")

            token = issue_token(
                account.id,
                account.email,
                self.secret,
                self.expires_in,
                algorithm=self.algorithm,
            )
        except (BadRequestError, UnauthorizedError):
            logger.info("Login rejected: invalid credentials")
            raise
        except Exception as e:
            logger.error(f"Unexpected error during login: {str(e)}", exc_info=True)
            raise InternalError("An unexpected error occurred during login.", original_error=e)

        logger.info(f"Login successful for account {account.id}")
        return {"message": "success", "access_token": token}

    def verify_token(self, token):
        """Returns the claims of a valid token; raises UnauthorizedError otherwise."""
        try:
            return decode_token(token, self.secret, self.algorithm)
        except ServiceError:
            raise
        except Exception as e:
            raise InternalError("Token verification failed", original_error=e)
