# crowdchain/utils/general.py
"""
Request and response helpers shared by the blueprints.

Service errors are rendered into one JSON shape so the frontend can rely on
'success', 'error' and 'error_code'.
"""

from flask import jsonify, request, current_app

from crowdchain.errors import ServiceError, ValidationError


def json_object_body():
    """
    Returns the JSON request body as a dict, or None when there is none.

    Raises:
        ValidationError: The body is valid JSON but not an object
    """
    data = request.get_json(silent=True)
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def service_error_response(error):
    """Renders a ServiceError as (json, status)."""
    return jsonify(error.to_dict()), error.status_code


def call_service(operation, success_status=200):
    """
    Runs a route's service call and renders the outcome.

    ServiceErrors keep their specific status. Anything else is logged with
    its traceback and reported as an opaque 500.
    """
    try:
        result = operation()
    except ServiceError as e:
        return service_error_response(e)
    except Exception as e:
        current_app.logger.error(f"Unhandled error in service call: {str(e)}", exc_info=True)
        return jsonify({"success": False, "error": "Internal server error", "error_code": 500}), 500
    return jsonify(result), success_status
