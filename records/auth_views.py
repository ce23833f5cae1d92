"""
Authentication views.

Sign-in goes through Google: the front-end obtains an access token and
posts it here together with the profile it already holds (``userData``)
as a fallback.  The account is looked up or created by email, its role
is resolved, and the response carries both a Django session and API
tokens (legacy DRF token plus a JWT pair).
"""
from __future__ import annotations

import logging

from django.contrib.auth import login, logout
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from records.roles import RoleName
from records.serializers.auth import GoogleLoginSerializer, LogoutSerializer
from records.services import identity as identity_svc
from records.services.audit import log_action
from records.services.roles import resolve_role

logger = logging.getLogger(__name__)

STAFF_HOME = '/dashboard'
STUDENT_HOME = '/student/profile-dashboard'


def landing_url(user) -> str:
    """Page a user lands on after sign-in; accounts shown as Student go to their profile."""
    return STUDENT_HOME if user.get_role_display_name() == RoleName.STUDENT.label else STAFF_HOME


def _auth_failed():
    return Response({'status': 'fail', 'message': 'Authentication failed.'}, status=401)


# ---------------------------------------------------------------------
# Google sign-in
# ---------------------------------------------------------------------
# no authenticators: an existing session cookie must not trigger the CSRF check
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def google_login_view(request):
    """
    Sign in with a Google access token.
    Accepts fields:
      - token: Google OAuth access token
      - userData: {email, name}, used when Google rejects the token
    """
    s = GoogleLoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    ip = request.META.get('REMOTE_ADDR')

    try:
        identity, verified = identity_svc.resolve_identity(vd['token'], vd.get('userData'))
    except identity_svc.IdentityError as e:
        logger.error("Authentication failed: %s", e)
        log_action(user=None, action='google_login', object_type='user', object_id=None,
                   detail={'result': 'fail', 'ip': ip})
        return _auth_failed()

    user, is_new = identity_svc.bind_or_create_user(identity)
    if not user.is_active:
        log_action(user=user, action='google_login', object_type='user', object_id=user.id,
                   detail={'result': 'inactive', 'ip': ip})
        return _auth_failed()

    assignment = resolve_role(user, identity.email)

    login(request, user)
    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)

    log_action(user=user, action='google_login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': ip, 'isNew': is_new, 'verified': verified,
                       'roleOutcome': assignment.outcome})

    role_display = user.get_role_display_name()

    return Response({
        'status': 'success',
        'isNew': is_new,
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'user': {
            'id': user.id,
            'name': user.display_name,
            'email': user.email,
            'role': role_display,
        },
        'redirectUrl': landing_url(user),
    }, status=200)

# ScopedRateThrottle reads throttle_scope from the wrapped view class
google_login_view.cls.throttle_scope = 'login'


# ---------------------------------------------------------------------
# JWT refresh & logout
# ---------------------------------------------------------------------
class JWTRefreshView(TokenRefreshView):
    """Return a new access token from a refresh token as ``jwt_access``."""
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        resp = super().post(request, *args, **kwargs)
        data = dict(resp.data)
        if 'access' in data and 'jwt_access' not in data:
            data['jwt_access'] = data.pop('access')
        return Response(data, status=resp.status_code)


jwt_refresh_view = JWTRefreshView.as_view()


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    """End the session and revoke the caller's API tokens.

    With a ``refresh`` token only that token is blacklisted; otherwise
    every outstanding refresh token of the user is.
    """
    s = LogoutSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    refresh = s.validated_data.get('refresh')
    user = request.user
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
        except TokenError as e:
            raise ValidationError({'refresh': [str(e)]})
        count = 1
    else:
        for token in OutstandingToken.objects.filter(user=user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    Token.objects.filter(user=user).delete()
    logout(request)
    return Response({'ok': True, 'blacklisted': count})
