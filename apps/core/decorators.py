"""
JSON API decorators.

api_login_required: 401 JSON instead of a login redirect.
json_api: converts DomainError subclasses into {"error", "code"} responses
with the error's status code. Other exceptions propagate (Django returns 500).
"""
import json
import logging
from functools import wraps

from django.http import JsonResponse

from .exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)


def api_login_required(view_func):
    """Require an authenticated user. Respond 401 otherwise."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({'error': 'Unauthorized', 'code': 'unauthorized'}, status=401)
        return view_func(request, *args, **kwargs)
    return wrapper


def json_api(view_func):
    """Map domain errors raised by the view to JSON error responses."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except DomainError as exc:
            logger.info('%s %s rejected: %s (%s)', request.method, request.path, exc, exc.code)
            return JsonResponse(exc.as_dict(), status=exc.status_code)
        except Exception:
            logger.exception('%s %s failed unexpectedly', request.method, request.path)
            raise
    return wrapper


def read_json_body(request) -> dict:
    """Parse a JSON object request body, raising ValidationError when malformed."""
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (ValueError, UnicodeDecodeError) as exc:
        raise ValidationError('Request body must be valid JSON.') from exc
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object.')
    return payload
