from io import StringIO

import pytest
from django.core.management import CommandError, call_command
from django.test import override_settings

from records.models import AuditEvent, Role
from records.roles import ROLE_DEFINITIONS

pytestmark = pytest.mark.django_db


def run(*args, **kwargs):
    out = StringIO()
    call_command(*args, stdout=out, **kwargs)
    return out.getvalue()


def test_roles_are_seeded_by_migration():
    assert set(Role.objects.values_list('name', flat=True)) == {'nurse', 'doctor', 'student', 'employee'}
    assert Role.objects.get(name='nurse').level == 1


def test_seed_roles_restores_definitions():
    Role.objects.filter(name='doctor').delete()
    Role.objects.filter(name='nurse').update(level=9, description='')
    run('seed_roles')
    run('seed_roles')
    assert Role.objects.count() == len(ROLE_DEFINITIONS)
    nurse = Role.objects.get(name='nurse')
    assert nurse.level == 1
    assert nurse.description


@override_settings(EMAIL_ROLE_MAPPING={'doc@clinic.test': 'doctor', 'head@clinic.test': 'doctor'})
def test_seed_roles_assigns_users(make_user):
    nobody = make_user('nobody@clinic.test')
    doc = make_user('doc@clinic.test', 'student')
    head = make_user('head@clinic.test', 'nurse')
    emp = make_user('emp@clinic.test', 'employee')
    out = run('seed_roles')
    for u in (nobody, doc, head, emp):
        u.refresh_from_db()
    assert nobody.role.name == 'student'
    assert doc.role.name == 'doctor'
    assert head.role.name == 'nurse'
    assert emp.role.name == 'employee'
    assert '2 user(s) updated' in out
    sources = set(AuditEvent.objects.filter(action='role_change').values_list('detail__source', flat=True))
    assert sources == {'seed_roles'}


def test_check_user_roles_lists_users(make_user):
    make_user('a@clinic.test', 'doctor')
    make_user('b@clinic.test')
    out = run('check_user_roles')
    assert 'a@clinic.test' in out and 'doctor' in out
    assert '(none)' in out
    assert '1 user(s) without a role' in out


def test_set_user_role_promotes_to_nurse(make_user):
    u = make_user('Promote@clinic.test', 'student')
    out = run('set_user_role', 'promote@clinic.test')
    u.refresh_from_db()
    assert u.role.name == 'nurse'
    assert 'student -> nurse' in out
    ev = AuditEvent.objects.get(action='role_change')
    assert ev.detail == {'from': 'student', 'to': 'nurse', 'source': 'command'}


def test_set_user_role_with_explicit_role(make_user):
    u = make_user('x@clinic.test')
    run('set_user_role', 'x@clinic.test', '--role', 'employee')
    u.refresh_from_db()
    assert u.role.name == 'employee'


def test_set_user_role_unknown_user():
    with pytest.raises(CommandError):
        run('set_user_role', 'ghost@clinic.test')
