"""
Pytest configuration and shared fixtures.
"""

import pytest
import os
import sys

# Add the app directory to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')


@pytest.fixture
def app():
    """Create application for testing."""
    from config import TestingConfig
    from app import create_app

    return create_app(TestingConfig)


@pytest.fixture
def app_context(app):
    """Application context for testing."""
    with app.app_context():
        yield


@pytest.fixture
def db(app, app_context):
    """Database for testing."""
    from app import db as _db

    _db.create_all()
    yield _db
    _db.session.remove()
    _db.drop_all()


@pytest.fixture
def store(db):
    from app.store import Store
    return Store()


@pytest.fixture
def settings(app):
    from app import get_settings
    return get_settings(app)


class FakeSearch:
    """Search provider returning canned snippets and recording queries."""

    def __init__(self, results=None):
        from app.providers import SearchResult
        if results is None:
            results = [
                SearchResult(title='Profile', content='Supports clean energy and public schools.',
                             url='https://ballotpedia.org/profile'),
                SearchResult(title='Record', content='Voted for the infrastructure bill.',
                             url='https://votesmart.org/record'),
            ]
        self.results = results
        self.calls = []

    def search(self, query, include_domains, max_results):
        self.calls.append((query, list(include_domains), max_results))
        return list(self.results)


class FakeText:
    """
    Deterministic completion provider.

    mapping is what extract_structured() returns (clamped like the real
    client); summary and topics drive complete() / complete_json().
    """

    def __init__(self, mapping=None, summary='A short positive summary.', topics=None):
        self.mapping = {'environment': 0.9, 'economy': 0.3} if mapping is None else mapping
        self.summary = summary
        self.topics = ['elections', 'voting', 'democracy'] if topics is None else topics
        self.contexts = []

    def complete(self, system, prompt, max_tokens=150):
        return self.summary

    def complete_json(self, system, prompt, max_tokens=None, *, on_failure=None, default=None):
        return {'topics': self.topics}

    def extract_structured(self, context_text, schema_hint, *, value_range=(-1.0, 1.0),
                           on_failure=None, default=None):
        from app.errors import ProviderResponseError
        from app.providers.llm import decode_issue_mapping
        self.contexts.append(context_text)
        try:
            return decode_issue_mapping(self.mapping, value_range)
        except ProviderResponseError:
            return None


class FailingText:
    """Completion provider whose every call fails."""

    def __init__(self):
        self.calls = 0
        self.json_failure_modes = []

    def complete(self, system, prompt, max_tokens=150):
        self.calls += 1
        return None

    def complete_json(self, system, prompt, max_tokens=None, *, on_failure=None, default=None):
        from app.providers import FailureMode
        self.calls += 1
        self.json_failure_modes.append(on_failure)
        if on_failure is FailureMode.RETURN_DEFAULT and default is not None:
            return dict(default)
        return None

    def extract_structured(self, context_text, schema_hint, *, value_range=(-1.0, 1.0),
                           on_failure=None, default=None):
        self.calls += 1
        return None


class FakeEmbeddings:

    def __init__(self, dimensions=4, fail=False):
        self.dimensions = dimensions
        self.fail = fail
        self.texts = []

    def embed(self, text):
        self.texts.append(text)
        if self.fail:
            return None
        return [0.1] * self.dimensions


class FakeNews:

    def __init__(self, articles):
        self.articles = articles

    def fetch_articles(self, query, page_size):
        return list(self.articles)


@pytest.fixture
def fake_search():
    return FakeSearch()


@pytest.fixture
def fake_text():
    return FakeText()
