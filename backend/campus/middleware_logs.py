import json
import logging
import traceback
from django.utils.deprecation import MiddlewareMixin

from .domain_logs import UserActivityLog, ErrorLog

logger = logging.getLogger(__name__)

MUTATING_METHODS = ('POST', 'PUT', 'PATCH', 'DELETE')
ACTION_BY_METHOD = {'POST': 'create', 'PUT': 'update', 'PATCH': 'update', 'DELETE': 'delete'}
SECRET_KEYS = ('password', 'refresh', 'access', 'token')


def _redact(payload):
    if isinstance(payload, dict):
        return {
            k: ('***' if any(s in str(k).lower() for s in SECRET_KEYS) else v)
            for k, v in payload.items()
        }
    return payload


def _json_payload(request):
    # multipart uploads and already-consumed streams yield no payload
    try:
        if request.content_type == 'application/json' and request.body:
            return _redact(json.loads(request.body.decode('utf-8')))
    except Exception:
        return None
    return None


def _acting_user(request):
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        return user
    return None


def _remote_addr(request):
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


class RequestActivityMiddleware(MiddlewareMixin):
    """Records every mutating request under /api/ in UserActivityLog."""

    def process_request(self, request):
        # read the body before DRF consumes the stream
        if request.method in MUTATING_METHODS:
            request._activity_payload = _json_payload(request)

    def process_response(self, request, response):
        if request.method not in MUTATING_METHODS or not request.path.startswith('/api/'):
            return response
        try:
            resolver_match = getattr(request, 'resolver_match', None)
            UserActivityLog.objects.create(
                user=_acting_user(request),
                module=getattr(resolver_match, 'url_name', None),
                action=ACTION_BY_METHOD[request.method],
                path=request.path,
                method=request.method,
                remote_addr=_remote_addr(request),
                payload=getattr(request, '_activity_payload', None),
                status_code=getattr(response, 'status_code', None),
            )
        except Exception:
            logger.warning("Failed to record activity for %s %s", request.method, request.path, exc_info=True)
        return response


class ExceptionLoggingMiddleware(MiddlewareMixin):
    def process_exception(self, request, exception):
        try:
            ErrorLog.objects.create(
                user=_acting_user(request),
                path=request.path,
                method=request.method,
                remote_addr=_remote_addr(request),
                exception_type=type(exception).__name__,
                message=str(exception),
                stack=traceback.format_exc(),
                payload=getattr(request, '_activity_payload', None),
            )
        except Exception:
            logger.warning("Failed to record error log for %s", request.path, exc_info=True)
        # fall through to Django's own exception handling
        return None
