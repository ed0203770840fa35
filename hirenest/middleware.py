import logging

from django.db import DatabaseError
from django.http import JsonResponse

from accounts.identity import resolve_identity

from .errors import ApiError, Upstream

logger = logging.getLogger(__name__)


class IdentityMiddleware:
    """
    Attach ``request.identity`` (an ``accounts.identity.Identity`` or None).

    Must sit after AuthenticationMiddleware. Operator-token requests carry no
    session cookie, so they are exempted from CSRF enforcement.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.identity = resolve_identity(request)
        if request.identity is not None and request.identity.via == 'operator':
            request._dont_enforce_csrf_checks = True
        return self.get_response(request)


class ApiErrorMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, ApiError):
            if isinstance(exception, Upstream):
                logger.error("Upstream failure on %s %s: %s", request.method, request.path, exception)
            return JsonResponse(exception.as_dict(), status=exception.status)
        if not request.path.startswith('/api/'):
            return None
        if isinstance(exception, DatabaseError):
            logger.exception("Database failure on %s %s", request.method, request.path)
        else:
            logger.exception("Unhandled error on %s %s", request.method, request.path)
        error = Upstream()
        return JsonResponse(error.as_dict(), status=error.status)
