"""
Role-based access decisions.

:func:`authorize` is the single place that decides whether a role may
reach a resource guarded by a set of allowed role names.  It holds no
state and performs no I/O; the DRF permission classes and the
``role_required`` page decorator translate its answer into a 403 JSON
body or a rendered "access denied" page.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from django.conf import settings

from .roles import RoleName, parse_role_set

INSUFFICIENT_ROLE = 'insufficient role'


@dataclass(frozen=True)
class Allow:
    role: RoleName

    allowed = True


@dataclass(frozen=True)
class Deny:
    role: Optional[RoleName]
    role_label: str
    reason: str = INSUFFICIENT_ROLE

    allowed = False


def _role_value(current_role) -> Optional[str]:
    # accepts a Role row, a RoleName or a plain string
    if current_role is None or isinstance(current_role, str):
        return current_role
    return getattr(current_role, 'name', None)


def effective_role(current_role, unassigned_role: Optional[str] = None) -> Optional[RoleName]:
    """Role the guard checks for ``current_role``.

    Users without a role are treated as ``ACCESS_UNASSIGNED_ROLE``.  A
    role name outside the known set yields ``None`` and never matches.
    """
    raw = _role_value(current_role)
    if raw is None:
        return RoleName.parse(unassigned_role or settings.ACCESS_UNASSIGNED_ROLE)
    return RoleName.parse(raw)


def authorize(current_role, allowed_roles: Iterable[str], *, unassigned_role: Optional[str] = None) -> Allow | Deny:
    role = effective_role(current_role, unassigned_role)
    if role is not None and role in parse_role_set(allowed_roles):
        return Allow(role=role)
    label = role.value if role is not None else (_role_value(current_role) or '')
    return Deny(role=role, role_label=label)
