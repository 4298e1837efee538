"""
Tests for the embedding generator.
"""
from datetime import datetime

from app.enrichment.embeddings import EmbeddingGenerator, issue_mapping_text, post_text
from app.models import Bill, Candidate, InspirationPost
from app.providers import Providers

from conftest import FakeEmbeddings


def test_issue_mapping_text():
    assert issue_mapping_text({'environment': 0.9, 'economy': 0.5}) == 'environment: 0.9, economy: 0.5'


def test_post_text():
    post = InspirationPost(title='Park reopens', summary='Volunteers rebuilt it.', topics=['community', 'local'])
    assert post_text(post) == 'Park reopens. Volunteers rebuilt it.. Topics: community, local'


def test_generates_embeddings_for_every_table(db, store):
    stamp = datetime(2024, 1, 1)
    store.insert(Candidate, [
        {'name': 'Jane Smith', 'issue_positions': {'environment': 0.8}, 'updated_at': stamp},
        {'name': 'Not Enriched'},
    ])
    store.insert(Bill, [{'bill_number': 'S.1', 'title': 'Water', 'issue_tags': {'environment': 0.9}}])
    store.insert(InspirationPost, [{'title': 'Park', 'summary': 'Rebuilt.', 'source_url': 'https://x/p',
                                    'topics': ['local']}])
    embeddings = FakeEmbeddings(dimensions=4)

    results = EmbeddingGenerator(store, Providers(embeddings=embeddings)).run()

    assert [r.job for r in results] == ['embeddings_candidates', 'embeddings_bills', 'embeddings_inspiration_posts']
    assert [r.succeeded for r in results] == [1, 1, 1]
    assert 'environment: 0.8' in embeddings.texts

    db.session.expire_all()
    jane, pending = store.select(Candidate)
    assert jane.embedding == [0.1, 0.1, 0.1, 0.1]
    assert jane.updated_at == stamp
    assert pending.embedding is None


def test_failed_embedding_leaves_record_pending(db, store):
    store.insert(Bill, [{'bill_number': 'S.1', 'title': 'Water', 'issue_tags': {'environment': 0.9}}])
    generator = EmbeddingGenerator(store, Providers(embeddings=FakeEmbeddings(fail=True)))

    results = generator.run()

    assert results[1].failed == 1
    assert store.select(Bill, is_null=('embedding',))


def test_missing_provider_skips_all_targets(db, store):
    results = EmbeddingGenerator(store, Providers()).run()

    assert len(results) == 3
    assert all(r.skipped_reason == 'embedding provider not configured' for r in results)
