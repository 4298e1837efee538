"""
Tests for database priming.
"""
from unittest.mock import patch

import requests

from app.enrichment.prime import DatabasePrimer, PrimeResult, default_issue_positions, notify_webhook, prime_database
from app.models import Bill, Candidate, InspirationPost
from app.providers import Providers

from conftest import FailingText, FakeSearch, FakeText


def test_prime_seeds_every_table(db, store):
    result = prime_database(store)

    assert (result.candidates_inserted, result.bills_inserted, result.posts_inserted) == (3, 3, 3)
    assert result.errors == 0
    assert len(store.select(Candidate)) == 3
    assert len(store.select(Bill)) == 3
    assert len(store.select(InspirationPost)) == 3


def test_party_defaults(db, store):
    prime_database(store)

    john = store.select(Candidate, equals={'name': 'John Doe'})[0]
    maria = store.select(Candidate, equals={'name': 'Maria Garcia'})[0]
    assert john.issue_positions['economy'] == 0.8
    assert john.issue_positions['healthcare'] == -0.5
    assert maria.issue_positions == {
        'environment': 0.4, 'healthcare': 0.3, 'economy': 0.6, 'education': 0.8, 'immigration': 0.1,
    }


def test_default_issue_positions_returns_a_copy():
    positions = default_issue_positions('Democratic')
    positions['economy'] = 0
    assert default_issue_positions('Democratic')['economy'] == 0.4


def test_prime_is_idempotent(db, store):
    prime_database(store)

    second = prime_database(store)

    assert (second.candidates_inserted, second.bills_inserted, second.posts_inserted) == (0, 0, 0)
    assert (second.candidates_skipped, second.bills_skipped, second.posts_skipped) == (3, 3, 3)
    assert len(store.select(Candidate)) == 3


def test_inline_enrichment(db, store):
    providers = Providers(search=FakeSearch(), text=FakeText(mapping={'environment': 0.95}))

    result = DatabasePrimer(store, providers, enrich=True).run()

    assert result.candidates_enriched == 3
    jane = store.select(Candidate, equals={'name': 'Jane Smith'})[0]
    assert jane.issue_positions == {'environment': 0.95}


def test_inline_enrichment_failure_uses_party_default(db, store):
    providers = Providers(search=FakeSearch(), text=FailingText())

    result = DatabasePrimer(store, providers, enrich=True).run()

    assert result.candidates_enriched == 0
    jane = store.select(Candidate, equals={'name': 'Jane Smith'})[0]
    assert jane.issue_positions == default_issue_positions('Democratic')


def test_enrich_without_providers_uses_party_default(db, store):
    result = DatabasePrimer(store, Providers(), enrich=True).run()

    assert result.candidates_inserted == 3
    assert result.candidates_enriched == 0


def test_webhook_receives_summary(db, store):
    with patch('app.enrichment.prime.requests.post') as mock_post:
        result = prime_database(store, webhook_url='https://hooks.example.com/primed', timeout=5)

    mock_post.assert_called_once()
    args, kwargs = mock_post.call_args
    assert args[0] == 'https://hooks.example.com/primed'
    assert kwargs['json']['event'] == 'database_primed'
    assert kwargs['json']['result'] == result.as_dict()
    assert kwargs['timeout'] == 5


def test_webhook_failure_is_reported():
    with patch('app.enrichment.prime.requests.post', side_effect=requests.ConnectionError('down')):
        assert notify_webhook('https://hooks.example.com/primed', PrimeResult()) is False
