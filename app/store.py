"""
Store client used by every enrichment job.

A thin select / insert / update layer over the Flask-SQLAlchemy session.
Writes are single-row keyed updates committed one at a time; there are no
multi-row transactions, so a failure part-way through a job leaves earlier
rows committed and later rows untouched.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Type

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app import db
from app.db_retry import with_db_retry
from app.errors import StoreError
from app.lib.time import utcnow_naive

logger = logging.getLogger(__name__)


class Store:
    """Generic query/update client over the mapped entity models."""

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    def select(
        self,
        model: Type,
        *,
        is_null: Iterable[str] = (),
        not_null: Iterable[str] = (),
        equals: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> List[Any]:
        """
        Return rows matching every filter, ordered by id.

        is_null / not_null name columns that must be NULL / NOT NULL;
        equals maps column names to required values.
        """
        query = self.session.query(model)
        for field in is_null:
            query = query.filter(_column(model, field).is_(None))
        for field in not_null:
            query = query.filter(_column(model, field).isnot(None))
        for field, value in (equals or {}).items():
            query = query.filter(_column(model, field) == value)
        query = query.order_by(model.id)
        if limit:
            query = query.limit(limit)

        try:
            return query.all()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(f"select from {model.__tablename__} failed: {e}") from e

    def exists(self, model: Type, **equals) -> bool:
        return bool(self.select(model, equals=equals, limit=1))

    def insert(self, model: Type, rows: List[Dict[str, Any]]) -> List[Any]:
        """Insert rows in one commit and return the created objects."""
        try:
            return self._insert(model, rows)
        except IntegrityError as e:
            raise StoreError(f"insert into {model.__tablename__} violates a constraint: {e.orig}") from e
        except SQLAlchemyError as e:
            raise StoreError(f"insert into {model.__tablename__} failed: {e}") from e

    def update(self, model: Type, record_id: int, patch: Dict[str, Any], touch: bool = True) -> None:
        """
        Apply patch to the row with the given id and commit.

        updated_at is refreshed unless touch is False.
        """
        values = dict(patch)
        if touch and hasattr(model, 'updated_at'):
            values.setdefault('updated_at', utcnow_naive())
        for field in values:
            _column(model, field)

        try:
            matched = self._update(model, record_id, values)
        except SQLAlchemyError as e:
            raise StoreError(f"update of {model.__tablename__} id={record_id} failed: {e}") from e
        if matched == 0:
            raise StoreError(f"{model.__tablename__} id={record_id} not found")

    @with_db_retry()
    def _insert(self, model, rows):
        objects = [model(**row) for row in rows]
        self.session.add_all(objects)
        self.session.commit()
        return objects

    @with_db_retry()
    def _update(self, model, record_id, values):
        matched = self.session.query(model).filter(model.id == record_id).update(
            values, synchronize_session='fetch'
        )
        self.session.commit()
        return matched


def _column(model, field):
    column = getattr(model, field, None)
    if column is None or not hasattr(column, 'property'):
        raise StoreError(f"{model.__tablename__} has no column {field!r}")
    return column
