"""
Role guard for server-rendered pages.

``role_required`` runs the access guard before a page view.  Denied
requests get either a JSON 403 (XHR or JSON-first ``Accept`` header) or
the rendered ``access_denied`` page showing the caller's current role.
Unauthenticated requests are passed through untouched; stack
``login_required`` above this decorator to handle them.
"""
from __future__ import annotations

from functools import wraps

from django.http import JsonResponse
from django.shortcuts import render

from .access import Deny, authorize


def wants_json(request) -> bool:
    if request.headers.get('x-requested-with') == 'XMLHttpRequest':
        return True
    accept = request.headers.get('accept', '')
    first = accept.split(',')[0].split(';')[0].strip().lower()
    return first.endswith('/json') or first.endswith('+json')


def access_denied_response(request, decision: Deny):
    if wants_json(request):
        return JsonResponse(
            {'ok': False, 'error': {
                'code': 'insufficient_role',
                'message': 'Access denied. You do not have permission to access this resource.',
                'reason': decision.reason,
            }},
            status=403,
        )
    return render(
        request,
        'records/access_denied.html',
        {'message': 'You do not have permission to access this page.', 'user_role': decision.role_label},
        status=403,
    )


def role_required(*allowed_roles):
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            user = getattr(request, 'user', None)
            if not (user and user.is_authenticated):
                return view_func(request, *args, **kwargs)
            decision = authorize(getattr(user, 'role', None), allowed_roles)
            if decision.allowed:
                return view_func(request, *args, **kwargs)
            return access_denied_response(request, decision)
        return _wrapped
    return decorator
