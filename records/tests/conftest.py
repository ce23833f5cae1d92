import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from records.models import Role, User


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def role(db):
    """Look up one of the seeded roles by name."""
    def _get(name):
        return Role.objects.get(name=name)
    return _get


@pytest.fixture
def make_user(db, role):
    def _make(email, role_name=None, **extra):
        return User.objects.create_user(
            username=email, email=email, password=None,
            role=role(role_name) if role_name else None, **extra,
        )
    return _make


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_as(make_user):
    """APIClient authenticated as a fresh user holding ``role_name``."""
    def _client(role_name, email=None):
        user = make_user(email or f'{role_name or "norole"}@clinic.test', role_name)
        c = APIClient()
        c.force_authenticate(user=user)
        return c, user
    return _client
