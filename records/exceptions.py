from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response

from .access import INSUFFICIENT_ROLE


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = str(resp.data)
    codes = exc.get_codes() if hasattr(exc, 'get_codes') else None
    code = codes if isinstance(codes, str) else 'api_error'
    error = {'code': code, 'message': detail}
    if code == 'insufficient_role':
        error['reason'] = INSUFFICIENT_ROLE
    return Response({'ok': False, 'error': error}, status=resp.status_code, headers=_auth_headers(resp))


def _auth_headers(resp):
    # keep WWW-Authenticate / Retry-After from the DRF response
    return {k: v for k, v in resp.items() if k in ('WWW-Authenticate', 'Retry-After')}
