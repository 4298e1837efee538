"""
Database retry utilities for store writes.

Store writes run inside scheduled jobs that can sit idle for hours, so the
first write after a pause regularly hits a connection the server already
closed. with_db_retry() retries those transient errors; anything else is
rolled back and re-raised for the caller to handle.
"""

import logging
import time
import functools
from typing import TypeVar, Callable

from flask import current_app
from sqlalchemy.exc import OperationalError, DBAPIError

logger = logging.getLogger(__name__)

T = TypeVar('T')


def is_connection_error(exc: Exception) -> bool:
    """Check if exception is a transient connection error worth retrying."""
    error_msg = str(exc).lower()
    connection_indicators = [
        'ssl connection has been closed',
        'connection reset',
        'connection refused',
        'connection timed out',
        'server closed the connection',
        'lost connection',
        'could not connect',
        'network error',
        'broken pipe',
    ]
    return any(indicator in error_msg for indicator in connection_indicators)


def _rollback_quietly():
    from app import db
    try:
        db.session.rollback()
    except Exception as e:
        logger.debug(f"Rollback after failed write raised: {e}")


def with_db_retry(max_attempts: int = None, delay: float = None):
    """
    Decorator for retrying store operations on transient connection errors.

    On a transient error the session is rolled back, the engine pool is
    disposed so the next attempt gets a fresh connection, and the call is
    retried with linear backoff. Non-transient errors are rolled back and
    re-raised immediately.

    Args:
        max_attempts: Maximum attempts (default DB_RETRY_ATTEMPTS)
        delay: Base delay between attempts in seconds (default DB_RETRY_DELAY)
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            from app import db

            attempts = max_attempts or current_app.config.get('DB_RETRY_ATTEMPTS', 3)
            base_delay = delay if delay is not None else current_app.config.get('DB_RETRY_DELAY', 1)

            for attempt in range(1, attempts + 1):
                try:
                    return func(*args, **kwargs)

                except (OperationalError, DBAPIError) as e:
                    _rollback_quietly()
                    if not is_connection_error(e) or attempt == attempts:
                        logger.error(
                            f"Database error in {func.__name__} (attempt {attempt}/{attempts}): {e}"
                        )
                        raise

                    logger.warning(
                        f"Transient DB error in {func.__name__} (attempt {attempt}/{attempts}): {e}. "
                        f"Retrying in {base_delay * attempt}s..."
                    )
                    try:
                        db.engine.dispose()
                    except Exception as dispose_error:
                        logger.debug(f"Engine dispose failed: {dispose_error}")
                    time.sleep(base_delay * attempt)

                except Exception:
                    _rollback_quietly()
                    raise

        return wrapper
    return decorator


def cleanup_db_session():
    """
    Remove the scoped session after a scheduled job completes.

    Call this in a finally block for all scheduler jobs so connections are
    returned to the pool between runs.
    """
    from app import db
    try:
        db.session.remove()
    except Exception as e:
        logger.debug(f"Session cleanup error (safe to ignore): {e}")
