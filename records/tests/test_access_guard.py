import pytest
from django.test import override_settings

from records.access import INSUFFICIENT_ROLE, Allow, Deny, authorize, effective_role
from records.models import Role
from records.roles import RoleName


def test_no_role_is_treated_as_nurse():
    decision = authorize(None, {'nurse'})
    assert isinstance(decision, Allow)
    assert decision.role == RoleName.NURSE


def test_student_denied_staff_resource():
    decision = authorize('student', {'nurse', 'doctor'})
    assert isinstance(decision, Deny)
    assert not decision.allowed
    assert decision.reason == INSUFFICIENT_ROLE == 'insufficient role'
    assert decision.role_label == 'student'


@pytest.mark.parametrize('name', ['nurse', 'Nurse', ' NURSE '])
def test_role_names_match_case_insensitively(name):
    assert authorize(name, ['Nurse']).allowed


def test_accepts_role_rows_and_enum_members():
    row = Role(name='doctor', level=2)
    assert authorize(row, {RoleName.DOCTOR}).allowed
    assert not authorize(RoleName.EMPLOYEE, {RoleName.DOCTOR}).allowed


def test_unknown_role_never_matches():
    decision = authorize('janitor', {'nurse', 'doctor', 'student', 'employee'})
    assert not decision.allowed
    assert decision.role is None
    assert decision.role_label == 'janitor'


def test_empty_allowed_set_denies_everyone():
    assert not authorize('nurse', set()).allowed


@override_settings(ACCESS_UNASSIGNED_ROLE='student')
def test_unassigned_default_is_configurable():
    assert effective_role(None) == RoleName.STUDENT
    assert not authorize(None, {'nurse'}).allowed


def test_unassigned_default_can_be_passed_explicitly():
    assert not authorize(None, {'nurse'}, unassigned_role='student').allowed
    assert authorize(None, {'student'}, unassigned_role='student').allowed
