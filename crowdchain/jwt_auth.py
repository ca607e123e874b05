"""
JWT issuance and verification.

Access tokens are signed locally with the server-held secret (HS256) after a
successful login. The require_jwt decorator verifies them on protected
routes and exposes the claims as a lightweight TokenContext on flask.g.
"""

import time
import jwt
from functools import wraps
from dataclasses import dataclass
from flask import request, jsonify, g, current_app

from crowdchain.errors import UnauthorizedError


class JWTAuthError(UnauthorizedError):
    """Raised when a bearer token is missing, malformed, expired or forged"""


@dataclass
class TokenContext:
    """
    Identity extracted from a verified access token.

    All fields come straight from the token claims; no database lookup is
    made on authenticated requests.
    """
    id: str       # From the 'sub' claim (account id)
    email: str    # From the 'email' claim
    expires_at: int

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "expiresAt": self.expires_at,
        }


def issue_token(account_id, email, secret, expires_in, algorithm='HS256', now=None):
    """
    Signs an access token for an account.

    Args:
        account_id (str): Account identifier, stored as the 'sub' claim
        email (str): Account email
        secret (str): Signing secret
        expires_in (int): Validity window in seconds
        now (int, optional): Issue time as a UNIX timestamp

    Returns:
        str: The encoded token
    """
    issued_at = int(now if now is not None else time.time())
    payload = {
        "sub": str(account_id),
        "email": email,
        "iat": issued_at,
        "exp": issued_at + int(expires_in),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_token(token, secret, algorithm='HS256'):
    """
    Verifies signature and expiry and returns the claims.

    Raises:
        JWTAuthError: If the token is expired or otherwise invalid
    """
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={'require': ['sub', 'exp']},
        )
    except jwt.ExpiredSignatureError:
        raise JWTAuthError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise JWTAuthError(f"Invalid token: {str(e)}")


def extract_token_from_header():
    """
    Extracts the JWT token from the Authorization header.

    Expected format: "Authorization: Bearer <token>"

    Raises:
        JWTAuthError: If Authorization header is missing or malformed
    """
    auth_header = request.headers.get('Authorization')

    if not auth_header:
        raise JWTAuthError("Missing Authorization header")

    parts = auth_header.split()

    if len(parts) != 2 or parts[0].lower() != 'bearer':
        raise JWTAuthError("Invalid Authorization header format. Expected 'Bearer <token>'")

    return parts[1]


def create_token_context(payload):
    email = payload.get('email')
    if not email:
        raise JWTAuthError("Token missing 'email' claim")

    return TokenContext(
        id=payload['sub'],
        email=email,
        expires_at=payload['exp'],
    )


def require_jwt(f):
    """
    Decorator to protect routes with JWT authentication.

    On success the verified identity is available as g.current_account.

    Error Responses:
        401: Missing, invalid, or expired token
        500: Server error during authentication
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            # Imported here: the services import this module.
            from crowdchain.services import get_credential_service

            token = extract_token_from_header()
            payload = get_credential_service().verify_token(token)
            g.current_account = create_token_context(payload)
            g.is_authenticated = True
        except UnauthorizedError as e:
            return jsonify(e.to_dict()), e.status_code
        except Exception as e:
            current_app.logger.error(f"Unexpected error in require_jwt: {str(e)}", exc_info=True)
            return jsonify({"success": False, "error": "Authentication failed", "error_code": 500}), 500

        return f(*args, **kwargs)

    return decorated_function


def get_current_account():
    """Returns the TokenContext of the authenticated caller, or None."""
    return getattr(g, 'current_account', None)
