import pytest
import requests
from django.test import override_settings
from django.urls import reverse
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient

from records.models import AuditEvent, Role, User
from records.services import identity
from records.services.identity import GoogleIdentity, IdentityError

pytestmark = pytest.mark.django_db


def google_ok(email, name='Test User', sub='g-123'):
    def _fetch(token):
        return GoogleIdentity(email=email, name=name, google_id=sub)
    return _fetch


def google_rejects(token):
    raise IdentityError('Google userinfo request failed: 401')


def sign_in(client, token='tok', user_data=None):
    payload = {'token': token}
    if user_data is not None:
        payload['userData'] = user_data
    return client.post(reverse('google_login_view'), payload, format='json')


def test_first_sign_in_creates_student(monkeypatch):
    monkeypatch.setattr(identity, 'fetch_google_identity', google_ok('new@clinic.test', 'New Person'))
    r = sign_in(APIClient())
    assert r.status_code == 200
    assert r.data['status'] == 'success'
    assert r.data['isNew'] is True
    assert r.data['user']['role'] == 'Student'
    assert r.data['redirectUrl'] == '/student/profile-dashboard'
    assert r.data['token'] and r.data['jwt_access'] and r.data['jwt_refresh']
    u = User.objects.get(email='new@clinic.test')
    assert u.google_id == 'g-123'
    assert u.role.name == 'student'
    assert not u.has_usable_password()


@override_settings(EMAIL_ROLE_MAPPING={'doc@clinic.test': 'doctor'})
def test_mapped_account_signs_in_as_doctor(monkeypatch):
    monkeypatch.setattr(identity, 'fetch_google_identity', google_ok('Doc@Clinic.test'))
    r = sign_in(APIClient())
    assert r.status_code == 200
    assert r.data['user']['role'] == 'Doctor'
    assert r.data['redirectUrl'] == '/dashboard'


@override_settings(EMAIL_ROLE_MAPPING={'nurse@clinic.test': 'doctor'})
def test_nurse_keeps_role_on_sign_in(monkeypatch, make_user):
    nurse = make_user('nurse@clinic.test', 'nurse')
    monkeypatch.setattr(identity, 'fetch_google_identity', google_ok('nurse@clinic.test'))
    r = sign_in(APIClient())
    assert r.status_code == 200
    assert r.data['isNew'] is False
    assert r.data['user']['role'] == 'Nurse'
    nurse.refresh_from_db()
    assert nurse.role.name == 'nurse'


def test_existing_account_gets_google_id_linked(monkeypatch, make_user):
    u = make_user('linked@clinic.test', 'employee')
    monkeypatch.setattr(identity, 'fetch_google_identity', google_ok('linked@clinic.test', sub='g-999'))
    r = sign_in(APIClient())
    assert r.status_code == 200
    u.refresh_from_db()
    assert u.google_id == 'g-999'
    # unmapped non-nurse accounts are brought back to the default role
    assert u.role.name == 'student'


def test_repeat_sign_in_with_session_cookie_skips_csrf(monkeypatch):
    monkeypatch.setattr(identity, 'fetch_google_identity', google_ok('again@clinic.test'))
    client = APIClient(enforce_csrf_checks=True)
    first = sign_in(client)
    assert first.status_code == 200
    assert client.cookies.get('sessionid')
    second = sign_in(client)
    assert second.status_code == 200
    assert second.data['isNew'] is False


def test_account_left_without_role_lands_on_student_page(monkeypatch):
    Role.objects.filter(name='student').delete()
    monkeypatch.setattr(identity, 'fetch_google_identity', google_ok('orphan@clinic.test'))
    r = sign_in(APIClient())
    assert r.status_code == 200
    assert User.objects.get(email='orphan@clinic.test').role is None
    assert r.data['user']['role'] == 'Student'
    assert r.data['redirectUrl'] == '/student/profile-dashboard'


def test_rejected_token_falls_back_to_user_data(monkeypatch):
    monkeypatch.setattr(identity, 'fetch_google_identity', google_rejects)
    r = sign_in(APIClient(), user_data={'email': 'fallback@clinic.test', 'name': 'Fallback'})
    assert r.status_code == 200
    u = User.objects.get(email='fallback@clinic.test')
    assert u.google_id is None
    assert u.first_name == 'Fallback'
    ev = AuditEvent.objects.filter(action='google_login').latest('id')
    assert ev.detail['result'] == 'ok'
    assert ev.detail['verified'] is False


def test_rejected_token_without_fallback_is_401(monkeypatch):
    monkeypatch.setattr(identity, 'fetch_google_identity', google_rejects)
    r = sign_in(APIClient())
    assert r.status_code == 401
    assert r.data == {'status': 'fail', 'message': 'Authentication failed.'}
    assert User.objects.count() == 0
    assert AuditEvent.objects.get(action='google_login').detail['result'] == 'fail'


def test_fallback_without_email_is_401(monkeypatch):
    monkeypatch.setattr(identity, 'fetch_google_identity', google_rejects)
    r = sign_in(APIClient(), user_data={'name': 'No Email'})
    assert r.status_code == 401
    assert User.objects.count() == 0


def test_missing_token_is_validation_error():
    r = APIClient().post(reverse('google_login_view'), {}, format='json')
    assert r.status_code == 400
    assert r.data['ok'] is False


def test_inactive_account_is_refused(monkeypatch, make_user):
    make_user('gone@clinic.test', 'student', is_active=False)
    monkeypatch.setattr(identity, 'fetch_google_identity', google_ok('gone@clinic.test'))
    r = sign_in(APIClient())
    assert r.status_code == 401


def test_sign_in_then_me_and_logout(monkeypatch):
    monkeypatch.setattr(identity, 'fetch_google_identity', google_ok('me@clinic.test', 'Me Myself'))
    client = APIClient()
    r = sign_in(client)
    token = r.data['token']

    api = APIClient()
    api.credentials(HTTP_AUTHORIZATION=f'Token {token}')
    me = api.get('/api/user/me')
    assert me.status_code == 200
    assert me.data['data']['email'] == 'me@clinic.test'
    assert me.data['data']['role'] == 'Student'
    assert me.data['data']['canAccessInventory'] is False
    assert me.data['data']['canAccessReports'] is False

    out = api.post('/api/auth/logout', {'refresh': r.data['jwt_refresh']}, format='json')
    assert out.status_code == 200
    assert out.data == {'ok': True, 'blacklisted': 1}
    assert not Token.objects.filter(key=token).exists()

    refresh = APIClient().post('/api/auth/refresh', {'refresh': r.data['jwt_refresh']}, format='json')
    assert refresh.status_code == 401


def test_jwt_refresh_returns_jwt_access(monkeypatch):
    monkeypatch.setattr(identity, 'fetch_google_identity', google_ok('jwt@clinic.test'))
    r = sign_in(APIClient())
    resp = APIClient().post('/api/auth/refresh', {'refresh': r.data['jwt_refresh']}, format='json')
    assert resp.status_code == 200
    assert resp.data['jwt_access']
    assert 'access' not in resp.data


def test_logout_requires_authentication():
    r = APIClient().post('/api/auth/logout', {}, format='json')
    assert r.status_code == 401


def test_me_for_account_without_role_keeps_full_access(client_as):
    client, _ = client_as(None)
    r = client.get('/api/user/me')
    assert r.status_code == 200
    assert r.data['data']['role'] == 'Student'
    assert r.data['data']['roleLevel'] is None
    assert r.data['data']['canAccessInventory'] is True


class FakeResponse:
    def __init__(self, status_code=200, data=None):
        self.status_code = status_code
        self._data = data or {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f'{self.status_code} error')

    def json(self):
        return self._data


def test_fetch_google_identity_reads_userinfo(monkeypatch):
    seen = {}

    def fake_get(url, headers=None, timeout=None):
        seen.update(url=url, headers=headers, timeout=timeout)
        return FakeResponse(data={'sub': '42', 'email': 'Person@Clinic.test', 'name': 'Person', 'email_verified': True})

    monkeypatch.setattr(identity.requests, 'get', fake_get)
    ident = identity.fetch_google_identity('abc')
    assert ident == GoogleIdentity(email='person@clinic.test', name='Person', google_id='42')
    assert seen['headers'] == {'Authorization': 'Bearer abc'}


def test_fetch_google_identity_http_error(monkeypatch):
    monkeypatch.setattr(identity.requests, 'get', lambda *a, **kw: FakeResponse(status_code=401))
    with pytest.raises(IdentityError):
        identity.fetch_google_identity('abc')


def test_fetch_google_identity_unverified_email(monkeypatch):
    monkeypatch.setattr(identity.requests, 'get', lambda *a, **kw: FakeResponse(
        data={'sub': '1', 'email': 'a@b.test', 'email_verified': False}))
    with pytest.raises(IdentityError):
        identity.fetch_google_identity('abc')


@override_settings(GOOGLE_AUTH_ENABLE=False)
def test_fetch_google_identity_disabled():
    with pytest.raises(IdentityError):
        identity.fetch_google_identity('abc')
