"""
Role resolution for accounts signing in through Google.

``resolve_role`` decides which role an account should hold after a
successful sign-in and writes it to the user row when it differs.
Nurse accounts are never touched: a nurse promotion is done by hand
(``set_user_role``) and automated sign-in must not undo it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from django.conf import settings

from records.models import Role, User
from records.roles import RoleName
from records.services.audit import log_action

logger = logging.getLogger(__name__)

OUTCOME_IMMUNE = 'immune'
OUTCOME_ASSIGNED = 'assigned'
OUTCOME_UNCHANGED = 'unchanged'
OUTCOME_ROLE_MISSING = 'role_missing'


@dataclass(frozen=True)
class RoleAssignmentResult:
    outcome: str
    target: Optional[str]
    role: Optional[Role]
    changed: bool = False


def email_role_mapping() -> dict[str, str]:
    """Configured email -> role name table (``EMAIL_ROLE_MAPPING``)."""
    return dict(getattr(settings, 'EMAIL_ROLE_MAPPING', None) or {})


def target_role_name(email: str, mapping: Optional[Mapping[str, str]] = None) -> str:
    """Role name an email should receive: its mapped role or the default one."""
    if mapping is None:
        mapping = email_role_mapping()
    key = (email or '').strip().lower()
    for mapped_email, role_name in mapping.items():
        if mapped_email.strip().lower() == key:
            return str(role_name).strip().lower()
    return settings.DEFAULT_USER_ROLE


def find_role(name) -> Optional[Role]:
    kind = RoleName.parse(name)
    if kind is None:
        return None
    return Role.objects.filter(name__iexact=kind.value).first()


def resolve_role(user: User, email: str, *, mapping: Optional[Mapping[str, str]] = None,
                 source: str = 'sign_in') -> RoleAssignmentResult:
    """Assign the role ``email`` maps to, unless ``user`` is already a nurse.

    The user row is written at most once and only when the role actually
    changes, so calling this again with the same inputs is a no-op.  A
    target role missing from the role table is logged and leaves the
    user as it was.
    """
    current = user.role
    if current is not None and current.kind == RoleName.NURSE:
        logger.info("Nurse role kept for %s; automated assignment skipped", email)
        return RoleAssignmentResult(outcome=OUTCOME_IMMUNE, target=None, role=current)

    target = target_role_name(email, mapping)
    logger.info("Processing role assignment for %s, target role: %s", email, target)

    role = find_role(target)
    if role is None:
        logger.error("Role '%s' not found; role of %s left unchanged", target, email)
        return RoleAssignmentResult(outcome=OUTCOME_ROLE_MISSING, target=target, role=current)

    if user.role_id == role.id:
        return RoleAssignmentResult(outcome=OUTCOME_UNCHANGED, target=target, role=role)

    previous = current.name if current else None
    user.role = role
    if user.pk:
        user.save(update_fields=['role'])
    else:
        user.save()
    logger.info("Updated role of %s: %s -> %s", email, previous, role.name)
    log_action(user=user, action='role_change', object_type='user', object_id=user.pk,
               detail={'from': previous, 'to': role.name, 'source': source})
    return RoleAssignmentResult(outcome=OUTCOME_ASSIGNED, target=target, role=role, changed=True)
