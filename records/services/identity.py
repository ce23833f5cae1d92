"""
Google identity lookup and account binding.

A sign-in carries a Google OAuth access token, checked against the
userinfo endpoint, and optionally the profile the browser already holds.
The resulting identity is bound to an account by email address.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

import requests
from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import make_password

logger = logging.getLogger(__name__)

User = get_user_model()


class IdentityError(Exception):
    """The caller's identity could not be established."""


@dataclass
class GoogleIdentity:
    email: str
    name: str
    google_id: Optional[str] = None


def fetch_google_identity(access_token: str) -> GoogleIdentity:
    """Exchange a Google access token for the account's profile."""
    if not settings.GOOGLE_AUTH_ENABLE:
        raise IdentityError('Google sign-in not enabled on server')
    if not access_token:
        raise IdentityError('empty access token')
    try:
        r = requests.get(
            settings.GOOGLE_USERINFO_URL,
            headers={'Authorization': f'Bearer {access_token}'},
            timeout=settings.GOOGLE_TIMEOUT,
        )
        r.raise_for_status()
        data = r.json()
    except (requests.RequestException, ValueError) as e:
        raise IdentityError(f'Google userinfo request failed: {e}') from e
    email = (data.get('email') or '').strip().lower()
    sub = data.get('sub')
    if not email or not sub:
        raise IdentityError('Invalid response from Google: missing email/sub')
    if data.get('email_verified') is False:
        raise IdentityError('Google email address is not verified')
    return GoogleIdentity(email=email, name=data.get('name') or email, google_id=str(sub))


def identity_from_payload(user_data) -> GoogleIdentity:
    """Build an identity from the client-supplied ``userData`` fallback."""
    if not isinstance(user_data, Mapping):
        raise IdentityError('No valid email source available')
    email = (user_data.get('email') or '').strip().lower()
    if not email:
        raise IdentityError('No valid email source available')
    return GoogleIdentity(email=email, name=user_data.get('name') or 'Unknown User', google_id=None)


def resolve_identity(token: str, user_data=None) -> tuple[GoogleIdentity, bool]:
    """Return ``(identity, verified)``.

    A token Google accepts wins; otherwise the ``userData`` payload is
    used and ``verified`` is False.  Raises :class:`IdentityError` when
    neither source yields an email address.
    """
    try:
        return fetch_google_identity(token), True
    except IdentityError as e:
        logger.warning("Google token validation failed, trying userData fallback: %s", e)
    identity = identity_from_payload(user_data)
    logger.info("Using fallback email: %s", identity.email)
    return identity, False


def bind_or_create_user(identity: GoogleIdentity):
    """Find the account for ``identity`` by email, creating it when missing.

    Returns ``(user, is_new)``.  An existing account only gets its
    ``google_id`` filled in when it had none.
    """
    user = User.objects.select_related('role').filter(email__iexact=identity.email).first()
    if user:
        if identity.google_id and not user.google_id:
            user.google_id = identity.google_id
            user.save(update_fields=['google_id'])
            logger.info("Linked Google account to existing user %s", user.email)
        return user, False

    logger.info("Creating new user for %s", identity.email)
    user, is_new = User.objects.get_or_create(
        email=identity.email,
        defaults={
            'username': identity.email,
            'first_name': identity.name[:150],
            'google_id': identity.google_id,
            'password': make_password(None),
        },
    )
    return user, is_new
