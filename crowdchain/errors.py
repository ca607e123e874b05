# crowdchain/errors.py
"""
Service-level exceptions.

Every domain-expected failure carries a stable HTTP status code so the
blueprints can translate it without inspecting the message. Anything that
is not a ServiceError is treated as an internal failure at the boundary.
"""


class ServiceError(Exception):
    """Base class for failures that surface to the caller with a specific signal"""
    status_code = 500

    def __init__(self, message, status_code=None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self):
        return {
            "success": False,
            "error": self.message,
            "error_code": self.status_code,
        }


class ValidationError(ServiceError):
    """Malformed input, rejected before any persistence attempt"""
    status_code = 400


class BadRequestError(ServiceError):
    status_code = 400


class UnauthorizedError(ServiceError):
    status_code = 401


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    """Duplicate email or wallet address"""
    status_code = 409


class InternalError(ServiceError):
    """Opaque failure; the original error is kept for logging only"""
    status_code = 500

    def __init__(self, message, original_error=None):
        self.original_error = original_error
        super().__init__(message)


class DuplicateKeyError(Exception):
    """Raised by repositories when a uniqueness constraint rejects a write"""
    def __init__(self, key, original_error=None):
        self.key = key
        self.original_error = original_error
        super().__init__(f"Duplicate key: {key}")
