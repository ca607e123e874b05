# crowdchain/utils/__init__.py
"""
Utility functions package.

- general.py: request body parsing and service result rendering for the blueprints
"""

from .general import json_object_body, service_error_response, call_service

__all__ = [
    'json_object_body',
    'service_error_response',
    'call_service',
]
