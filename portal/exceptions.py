import logging

from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response

from .upstream.base import ApiError, InvalidRequest, describe_error

logger = logging.getLogger(__name__)


def _upstream_status(exc: ApiError) -> int:
    if exc.status == 404:
        return 404
    if exc.status == 0:
        return 503
    return 502


def api_exception_handler(exc, context):
    if isinstance(exc, ApiError):
        status = _upstream_status(exc)
        code = 'not_found' if status == 404 else 'upstream_error'
        return Response({'ok': False, 'error': {'code': code, 'message': describe_error(exc, 'Upstream request failed')}},
                        status=status)
    if isinstance(exc, InvalidRequest):
        return Response({'ok': False, 'error': {'code': 'invalid_request', 'message': str(exc)}}, status=400)

    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('Unhandled error in %s', context.get('view'))
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = str(resp.data)
    return Response({'ok': False, 'error': {'code': 'api_error', 'message': detail}}, status=resp.status_code)
