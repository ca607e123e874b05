# crowdchain/api/status.py
# API status and health routes.

from datetime import datetime, timezone

from flask import Blueprint, jsonify, current_app
from sqlalchemy import text

from crowdchain import db
from crowdchain.errors import ServiceError
from crowdchain.services import get_application_service

bp = Blueprint('status', __name__)

ENDPOINTS = {
    'GET /': 'API status and information',
    'GET /api/health': 'Database connectivity check',
    'POST /auth/signup': 'Register an account',
    'POST /auth/login': 'Log in and get an access token',
    'GET /auth/me': 'Identity of the current access token',
    'POST /api/creator-application': 'Submit creator application',
    'GET /api/creator-applications': 'List all creator applications',
    'GET /api/creator-applications/stats': 'Creator application statistics',
    'GET /api/creator-application/<walletAddress>': 'Get creator application by wallet address',
    'PATCH /api/creator-application/<walletAddress>': 'Update creator application details',
    'PATCH /api/creator-application/<walletAddress>/status': 'Update creator application status',
    'DELETE /api/creator-application/<walletAddress>': 'Delete creator application (token required)',
}


@bp.route('/', methods=['GET'])
def index():
    """API status, endpoint index and application statistics."""
    body = {
        "message": "CrowdChain Backend API",
        "status": "running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "endpoints": ENDPOINTS,
    }
    try:
        body["applicationStats"] = get_application_service().stats()
        body["database"] = "connected"
    except ServiceError:
        body["database"] = "connection error"
    return jsonify(body), 200


@bp.route('/api/health', methods=['GET'])
def health():
    try:
        db.session.execute(text('SELECT 1'))
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Health check failed: {str(e)}")
        return jsonify({"status": "error", "database": {"status": "disconnected"}}), 503
    return jsonify({"status": "ok", "database": {"status": "connected"}}), 200
