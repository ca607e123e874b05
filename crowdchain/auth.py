# auth.py

from flask import Blueprint, request, jsonify, g

from crowdchain.jwt_auth import require_jwt
from crowdchain.services import get_credential_service
from crowdchain.utils import call_service, json_object_body

# Define the Blueprint
bp = Blueprint('auth', __name__)


def _credentials():
    """Email and password from a JSON object body, or from form fields."""
    data = json_object_body()
    if data is None:
        data = request.form
    return data.get('email'), data.get('password')


@bp.route('/signup', methods=['POST'])
def signup():
    """
    Registers a new account.

    Response:
        201: The account (id, email, createdAt). Never includes the password.
        400: Invalid email, weak password or a body that is not a JSON object
        409: Email already registered
    """
    service = get_credential_service()

    def _signup():
        email, password = _credentials()
        return service.signup(email, password)

    return call_service(_signup, success_status=201)


@bp.route('/login', methods=['POST'])
def login():
    """
    Exchanges credentials for a short-lived access token.

    Response:
        200: {"message": "success", "access_token": ...}
        400: Missing fields or unknown account
        401: Wrong password
    """
    service = get_credential_service()

    def _login():
        email, password = _credentials()
        return service.login(email, password)

    return call_service(_login)


@bp.route('/me', methods=['GET'])
@require_jwt
def get_current_account():
    """
    Returns the identity carried by the caller's access token.

    Response:
        200: Account id and email from the token claims
        401: Invalid or missing token
    """
    account = g.current_account

    return jsonify({
        "is_authenticated": True,
        "account_id": account.id,
        "email": account.email,
        "expires_at": account.expires_at,
    }), 200
