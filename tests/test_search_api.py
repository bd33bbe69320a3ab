from contextlib import contextmanager
import pytest
from fastapi.testclient import TestClient

from jobtracker.ingest import search as search_mod
from jobtracker.ingest.errors import BlockedError, ListingsNotFoundError, NavigationError
from jobtracker.ingest.models import JobListing
from jobtracker.ingest.search import JobSearchService
from jobtracker.ingest.settings import Settings
from jobtracker.web import server


class ScriptedSession:
    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = 0
    @contextmanager
    def __call__(self, url, settings):
        self.calls += 1
        if isinstance(self.outcome, Exception):
            raise self.outcome
        yield self.outcome


def install(outcome):
    session = ScriptedSession(outcome)
    svc = JobSearchService(settings=Settings(), session_factory=session, extractor=lambda page, n: list(page)[:n])
    search_mod.set_service(svc)
    return session


@pytest.fixture
def client(monkeypatch):
    server.LAST_SEARCH.clear()
    monkeypatch.setattr(server, 'RATE_LIMIT_WINDOW', 0.0)
    yield TestClient(server.app)
    search_mod.set_service(None)
    server.LAST_SEARCH.clear()


def test_search_returns_jobs(client):
    install([JobListing(title='Dev', company='Acme', location='NYC', url='https://www.linkedin.com/jobs/view/7', posted_date='2025-04-01')])
    r = client.get('/api/linkedin/search', params={'q': 'C++ developer', 'location': 'New York'})
    assert r.status_code == 200
    body = r.json()
    assert body['success'] is True
    assert body['totalResults'] == 1
    assert body['jobs'][0] == {
        'title': 'Dev', 'company': 'Acme', 'location': 'NYC',
        'url': 'https://www.linkedin.com/jobs/view/7', 'postedDate': '2025-04-01',
    }


def test_missing_query_is_400(client):
    session = install([])
    assert client.get('/api/linkedin/search').status_code == 400
    r = client.get('/api/linkedin/search', params={'q': '  '})
    assert r.status_code == 400
    assert r.json()['error'] == 'Invalid request'
    assert session.calls == 0


@pytest.mark.parametrize("exc,status", [
    (BlockedError('wall'), 503),
    (ListingsNotFoundError('gone'), 502),
    (NavigationError('dns'), 502),
])
def test_search_errors_mapped(client, exc, status):
    install(exc)
    r = client.get('/api/linkedin/search', params={'q': 'python'})
    assert r.status_code == status
    body = r.json()
    assert body['error'] == 'Search failed'
    assert body['reason'] == exc.code


def test_empty_search_is_success(client):
    install([])
    r = client.get('/api/linkedin/search', params={'q': 'python'})
    assert r.status_code == 200
    assert r.json() == {'success': True, 'jobs': [], 'totalResults': 0}


def test_rate_limit_per_client(client, monkeypatch):
    monkeypatch.setattr(server, 'RATE_LIMIT_WINDOW', 60.0)
    install([JobListing(title='Dev', company='Acme')])
    assert client.get('/api/linkedin/search', params={'q': 'python'}).status_code == 200
    r = client.get('/api/linkedin/search', params={'q': 'python'})
    assert r.status_code == 429
    assert r.json()['retryAfter'] >= 1


def test_rejected_query_does_not_use_rate_window(client, monkeypatch):
    monkeypatch.setattr(server, 'RATE_LIMIT_WINDOW', 60.0)
    session = install([JobListing(title='Dev', company='Acme')])
    assert client.get('/api/linkedin/search', params={'q': ''}).status_code == 400
    assert server.LAST_SEARCH == {}
    assert client.get('/api/linkedin/search', params={'q': 'python'}).status_code == 200
    assert session.calls == 1


def test_clear_cache_endpoint(client):
    session = install([JobListing(title='Dev', company='Acme')])
    client.get('/api/linkedin/search', params={'q': 'python'})
    client.get('/api/linkedin/search', params={'q': 'python'})
    assert session.calls == 1
    for _ in range(2):
        r = client.post('/api/linkedin/cache/clear')
        assert r.status_code == 200
        assert r.json() == {'success': True, 'message': 'Cache cleared'}
    client.get('/api/linkedin/search', params={'q': 'python'})
    assert session.calls == 2


def test_health(client):
    install([])
    r = client.get('/health')
    assert r.status_code == 200
    assert r.json()['status'] == 'ok'
