"""
Custom permission classes for role based access control.
"""
from rest_framework.permissions import BasePermission

from .access import authorize
from .roles import RoleName


class HasRole(BasePermission):
    """Allow access only to users whose role is in ``allowed_roles``.

    Unauthenticated requests are refused here as well; DRF then answers
    401 rather than 403 because no authenticator succeeded.  With
    ``allow_unassigned`` off, users without a role are refused instead of
    being checked as the unassigned default.
    """
    allowed_roles: frozenset = frozenset()
    allow_unassigned = True
    message = 'Access denied. You do not have permission to access this resource.'
    code = 'insufficient_role'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        role = getattr(user, "role", None)
        if role is None and not self.allow_unassigned:
            return False
        return authorize(role, self.allowed_roles).allowed


def allow_roles(*names, allow_unassigned=True):
    """Build a :class:`HasRole` subclass for the given role names."""
    label = '_'.join(str(n) for n in names) or 'none'
    return type(f'HasRole_{label}', (HasRole,), {
        'allowed_roles': frozenset(names),
        'allow_unassigned': allow_unassigned,
    })


IsClinicStaff = allow_roles(RoleName.NURSE, RoleName.DOCTOR)
IsDoctor = allow_roles(RoleName.DOCTOR)
IsStudent = allow_roles(RoleName.STUDENT, allow_unassigned=False)
