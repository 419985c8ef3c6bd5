import json

import pytest
import requests
from django.core.cache import cache
from rest_framework.test import APIClient

from portal.models import User
from portal.upstream import base, stubs

BASE_URL = 'http://hms.test/api'


class FakeResponse:
    def __init__(self, status_code=200, body=None, url=''):
        self.status_code = status_code
        self.url = url
        if body is None:
            self.text = ''
            self.headers = {}
        else:
            self.text = json.dumps(body)
            self.headers = {'content-type': 'application/json; charset=utf-8'}

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Answers upstream calls from a ``(METHOD, path) -> reply`` table.

    A reply is a body (served with 200), a ``(status, body)`` tuple or an
    exception instance to raise.  Unknown routes fail like a dead server.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, path, reply):
        self.routes[(method.upper(), path)] = reply

    def request(self, method, url, params=None, json=None, timeout=None):
        path = url[len(BASE_URL):]
        self.calls.append({'method': method, 'path': path, 'params': params, 'json': json})
        reply = self.routes.get((method.upper(), path))
        if reply is None:
            raise requests.ConnectionError(f'no route for {method} {path}')
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, tuple):
            status_code, body = reply
            return FakeResponse(status_code, body, url)
        return FakeResponse(200, reply, url)

    def last(self, method, path):
        for call in reversed(self.calls):
            if call['method'] == method and call['path'] == path:
                return call
        raise AssertionError(f'{method} {path} was never called')


@pytest.fixture(autouse=True)
def _isolated(settings):
    settings.HMS_API_BASE_URL = BASE_URL
    settings.HMS_ENABLE_STUB_DATA = False
    cache.clear()
    stubs.reset()
    yield
    stubs.reset()


@pytest.fixture
def upstream(monkeypatch):
    session = FakeSession()
    monkeypatch.setattr(base, 'get_session', lambda: session)
    return session


@pytest.fixture
def make_user(db):
    def _make(role, username=None, password='P@ssw0rd1', **extra):
        return User.objects.create_user(username=username or f'{role}_user', password=password, role=role, **extra)
    return _make


@pytest.fixture
def client_for(make_user):
    """An ``APIClient`` logged in (force-authenticated) with the given role."""
    def _client(role, **extra):
        client = APIClient()
        client.force_authenticate(user=make_user(role, **extra))
        return client
    return _client
