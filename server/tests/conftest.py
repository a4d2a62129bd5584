# Test configuration and fixtures
# The hosted backend is replaced by a recording fake patched into every module that builds a client

import importlib
import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

os.environ['CONFIG_ENV'] = 'development'

from api.main import app
from db.backend import BackendError
from db.core_operations import CoreOperations
from db.query_operations import QueryOperations
from db.supporting_operations import SupportingOperations

BACKEND_ENV_NAMES = [
    "SUPABASE_URL", "API_ORIGIN", "SUPABASE_ANON_KEY", "SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_JWT_SECRET"
]

# Modules that construct BackendClient by name
BACKEND_CLIENT_MODULES = [
    "api.auth.principal",
    "api.orders.routes",
    "api.menu.routes",
    "api.health.routes",
    "api.account.routes",
    "api.zones.routes",
    "api.admin.routes",
    "api.catering.routes",
]

TEST_ORIGIN = "https://backend.test"
TEST_ANON_KEY = "anon-key"
TEST_SERVICE_ROLE_KEY = "service-role-key"


def _resolve(result, *args):
    if callable(result):
        result = result(*args)
    if isinstance(result, BaseException):
        raise result
    return result


class FakeBackendClient:
    """Client instance handed out by FakeBackend"""

    def __init__(self, backend: "FakeBackend", origin, api_key, access_token):
        self.backend = backend
        self.origin = origin
        self.api_key = api_key
        self.access_token = access_token

    async def select(self, table, columns, filters=None, order=None, limit=None, offset=None, single=False):
        self.backend.calls.append(("select", table, {
            "columns": list(columns), "filters": filters, "order": order, "limit": limit, "offset": offset,
            "single": single, "access_token": self.access_token,
        }))
        rows = _resolve(self.backend.select_results.get(table, []), table, columns, filters)
        if single:
            return rows[0] if rows else None
        return rows

    async def count(self, table, filters=None, since=None):
        self.backend.calls.append(("count", table, {"filters": filters, "since": since}))
        return _resolve(self.backend.count_results.get(table, 0), table, filters)

    async def insert(self, table, row):
        self.backend.calls.append(("insert", table, row))
        _resolve(self.backend.insert_errors.get(table))
        self.backend.inserted.append((table, row))

    async def rpc(self, name, params):
        self.backend.calls.append(("rpc", name, params))
        return _resolve(self.backend.rpc_results.get(name), params)

    async def get_user(self, token):
        self.backend.calls.append(("get_user", token, {}))
        user = _resolve(self.backend.users.get(token))
        if user is None:
            raise BackendError("invalid JWT", code="bad_jwt", status=401)
        return user


class FakeBackend:
    """
    Callable stand-in for the BackendClient class.

    Records every construction in ``instances`` and every call in ``calls``.
    Results are configured per table / procedure / token; a configured value
    may be an exception (raised) or a callable (called with the arguments).
    """

    def __init__(self):
        self.instances = []
        self.calls = []
        self.select_results = {}
        self.count_results = {}
        self.rpc_results = {}
        self.insert_errors = {}
        self.inserted = []
        self.users = {}

    def __call__(self, origin, api_key, access_token=None, timeout=10.0, transport=None):
        self.instances.append({"origin": origin, "api_key": api_key, "access_token": access_token,
                               "timeout": timeout})
        return FakeBackendClient(self, origin, api_key, access_token)

    def calls_of(self, kind):
        return [call for call in self.calls if call[0] == kind]


@pytest.fixture
def client():
    """FastAPI test client"""
    return TestClient(app)


@pytest.fixture
def fake_backend(monkeypatch):
    """Recording backend patched into every module that builds a client"""
    backend = FakeBackend()
    for module_name in BACKEND_CLIENT_MODULES:
        monkeypatch.setattr(importlib.import_module(module_name), "BackendClient", backend)
    return backend


@pytest.fixture
def no_backend_env(monkeypatch):
    """Process environment without any backend variable"""
    for name in BACKEND_ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def backend_env(monkeypatch, no_backend_env):
    """Backend origin and anon key configured, remote token verification"""
    monkeypatch.setenv("SUPABASE_URL", TEST_ORIGIN)
    monkeypatch.setenv("SUPABASE_ANON_KEY", TEST_ANON_KEY)


@pytest.fixture
def service_role_env(monkeypatch, backend_env):
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", TEST_SERVICE_ROLE_KEY)


@pytest.fixture
def backend():
    """Unpatched recording backend for the db operation classes"""
    return FakeBackend()


@pytest.fixture
def query_ops(backend):
    return QueryOperations(backend(TEST_ORIGIN, TEST_ANON_KEY))


@pytest.fixture
def core_ops(backend):
    return CoreOperations(backend(TEST_ORIGIN, TEST_ANON_KEY, access_token="user-token"))


@pytest.fixture
def supporting_ops(backend):
    return SupportingOperations(backend(TEST_ORIGIN, TEST_ANON_KEY))
