"""
Role names and the capabilities attached to them.

Role names are a closed set.  Anything coming from the database, the
environment or a request is parsed through :meth:`RoleName.parse` so that
``'Nurse'``, ``' nurse '`` and ``'nurse'`` all mean the same role while
unknown names never match anything.
"""
from __future__ import annotations

from django.db import models


class RoleName(models.TextChoices):
    NURSE = 'nurse', 'Nurse'
    DOCTOR = 'doctor', 'Doctor'
    STUDENT = 'student', 'Student'
    EMPLOYEE = 'employee', 'Employee'

    @classmethod
    def parse(cls, value) -> RoleName | None:
        """Return the matching role name (case-insensitive) or ``None``."""
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


# name -> (description, level); lower level means broader access
ROLE_DEFINITIONS: dict[RoleName, tuple[str, int]] = {
    RoleName.NURSE: ('Nurse users with full access to all features', 1),
    RoleName.DOCTOR: ('Medical doctors with restricted access (no inventory/reports)', 2),
    RoleName.STUDENT: ('Student users with restricted access (level 3 restrictions)', 3),
    RoleName.EMPLOYEE: ('Employee users with restricted access (level 3 restrictions)', 3),
}

INVENTORY_ROLES = frozenset({RoleName.NURSE, RoleName.EMPLOYEE})
REPORTS_ROLES = frozenset({RoleName.NURSE, RoleName.EMPLOYEE})


def parse_role_set(names) -> frozenset[RoleName]:
    """Parse an iterable of role names, dropping the ones that are unknown."""
    parsed = (RoleName.parse(n) for n in names)
    return frozenset(r for r in parsed if r is not None)


__all__ = [
    'RoleName',
    'ROLE_DEFINITIONS',
    'INVENTORY_ROLES',
    'REPORTS_ROLES',
    'parse_role_set',
]
