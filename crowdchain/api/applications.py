# crowdchain/api/applications.py
# (This file is for all creator application routes.)

from flask import Blueprint, request, jsonify, current_app

from crowdchain.errors import ServiceError, NotFoundError
from crowdchain.jwt_auth import require_jwt
from crowdchain.services import get_application_service
from crowdchain.services.documents import from_file_storage
from crowdchain.utils import service_error_response, json_object_body

bp = Blueprint('applications', __name__)

DOCUMENT_FIELD = 'verificationDocs'


def _not_found():
    return service_error_response(NotFoundError("Application not found"))


def _request_data():
    """Multipart form fields, or the JSON body for clients without uploads."""
    if request.form:
        return request.form
    return json_object_body() or {}


@bp.route('/creator-application', methods=['POST'])
def submit_application_route():
    """
    Submits a creator application. Accepts multipart form data with up to
    MAX_VERIFICATION_DOCS files under 'verificationDocs'.
    """
    try:
        data = _request_data()
    except ServiceError as e:
        return service_error_response(e)

    documents = [
        from_file_storage(f)
        for f in request.files.getlist(DOCUMENT_FIELD)
        if f and f.filename
    ]
    current_app.logger.info(
        f"Received creator application for wallet {data.get('walletAddress')} "
        f"with {len(documents)} files"
    )

    try:
        result = get_application_service().submit(data, documents)
    except ServiceError as e:
        return service_error_response(e)

    return jsonify({
        "success": True,
        "message": "Creator application submitted successfully",
        "applicationId": result["id"],
    }), 201


@bp.route('/creator-applications', methods=['GET'])
def list_applications_route():
    """Lists all applications, newest first. Optional ?status= filter."""
    status = request.args.get('status')
    try:
        applications = get_application_service().list_all(status.upper() if status else None)
    except ServiceError as e:
        return service_error_response(e)

    return jsonify([application.to_dict() for application in applications]), 200


@bp.route('/creator-applications/stats', methods=['GET'])
def application_stats_route():
    try:
        stats = get_application_service().stats()
    except ServiceError as e:
        return service_error_response(e)

    return jsonify({"success": True, "stats": stats}), 200


@bp.route('/creator-application/<string:wallet_address>', methods=['GET'])
def get_application_route(wallet_address):
    try:
        application = get_application_service().get_by_wallet(wallet_address)
    except ServiceError as e:
        return service_error_response(e)

    if application is None:
        return _not_found()
    return jsonify(application.to_dict()), 200


@bp.route('/creator-application/<string:wallet_address>/status', methods=['PATCH'])
def update_status_route(wallet_address):
    try:
        status = (json_object_body() or {}).get('status')
        application = get_application_service().update_status(wallet_address, status)
    except ServiceError as e:
        return service_error_response(e)

    if application is None:
        return _not_found()
    return jsonify({
        "success": True,
        "message": "Application status updated successfully",
        "application": application.to_dict(),
    }), 200


@bp.route('/creator-application/<string:wallet_address>', methods=['PATCH'])
def update_application_route(wallet_address):
    """Updates professionalTitle, linkedinUrl and/or websiteUrl."""
    try:
        data = json_object_body() or {}
        application = get_application_service().update_details(wallet_address, data)
    except ServiceError as e:
        return service_error_response(e)

    if application is None:
        return _not_found()
    return jsonify({
        "success": True,
        "message": "Application updated successfully",
        "application": application.to_dict(),
    }), 200


@bp.route('/creator-application/<string:wallet_address>', methods=['DELETE'])
@require_jwt
def delete_application_route(wallet_address):
    """Administrative delete. Requires a valid access token."""
    try:
        deleted = get_application_service().delete(wallet_address)
    except ServiceError as e:
        return service_error_response(e)

    if not deleted:
        return _not_found()
    return jsonify({"success": True, "message": "Application deleted successfully"}), 200
