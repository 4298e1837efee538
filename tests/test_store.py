"""
Tests for the store client.
"""
from datetime import datetime

import pytest

from app.errors import StoreError
from app.models import Bill, Candidate


def test_select_filters(db, store):
    store.insert(Candidate, [
        {'name': 'A', 'bio': 'bio'},
        {'name': 'B', 'issue_positions': {'economy': 0.2}},
        {'name': 'C'},
    ])

    assert [c.name for c in store.select(Candidate, is_null=('issue_positions',))] == ['A', 'C']
    assert [c.name for c in store.select(Candidate, is_null=('issue_positions',), not_null=('bio',))] == ['A']
    assert [c.name for c in store.select(Candidate, equals={'name': 'B'})] == ['B']
    assert len(store.select(Candidate, limit=2)) == 2


def test_exists(db, store):
    store.insert(Bill, [{'bill_number': 'S.1', 'title': 'Water'}])

    assert store.exists(Bill, bill_number='S.1')
    assert not store.exists(Bill, bill_number='S.2')


def test_duplicate_insert_raises_store_error(db, store):
    store.insert(Bill, [{'bill_number': 'S.1', 'title': 'Water'}])

    with pytest.raises(StoreError):
        store.insert(Bill, [{'bill_number': 'S.1', 'title': 'Water again'}])

    # Session is usable after the failed write
    assert len(store.select(Bill)) == 1


def test_update_touches_updated_at(db, store):
    stamp = datetime(2024, 1, 1)
    bill = store.insert(Bill, [{'bill_number': 'S.1', 'title': 'Water', 'updated_at': stamp}])[0]

    store.update(Bill, bill.id, {'issue_tags': {'environment': 0.9}})

    db.session.expire_all()
    updated = db.session.get(Bill, bill.id)
    assert updated.issue_tags == {'environment': 0.9}
    assert updated.updated_at > stamp


def test_update_without_touch(db, store):
    stamp = datetime(2024, 1, 1)
    bill = store.insert(Bill, [{'bill_number': 'S.1', 'title': 'Water', 'updated_at': stamp}])[0]

    store.update(Bill, bill.id, {'embedding': [0.5, 0.5]}, touch=False)

    db.session.expire_all()
    assert db.session.get(Bill, bill.id).updated_at == stamp


def test_update_missing_row(db, store):
    with pytest.raises(StoreError):
        store.update(Bill, 999, {'issue_tags': {'economy': 0.1}})


def test_unknown_column(db, store):
    with pytest.raises(StoreError):
        store.select(Bill, is_null=('no_such_field',))
    with pytest.raises(StoreError):
        store.update(Bill, 1, {'no_such_field': 1})
