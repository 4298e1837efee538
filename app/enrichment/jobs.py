"""
Named ETL jobs.

Each job builds its providers from the settings snapshot, runs one
enrichment pass and returns its JobResults. run_job() is the job boundary:
no exception escapes it, so the scheduler always reaches its next tick.
"""

import logging
from typing import Callable, Dict, List

from app.enrichment import JobResult
from app.enrichment.embeddings import EmbeddingGenerator
from app.enrichment.enricher import enricher_for
from app.enrichment.news import NewsEnricher
from app.providers import Providers, build_providers
from app.store import Store

logger = logging.getLogger(__name__)


def candidate_issues_job(store, providers: Providers, settings) -> List[JobResult]:
    return [enricher_for('candidate', store, providers, settings).run()]


def bill_issues_job(store, providers: Providers, settings) -> List[JobResult]:
    return [enricher_for('bill', store, providers, settings).run()]


def embeddings_job(store, providers: Providers, settings) -> List[JobResult]:
    return EmbeddingGenerator(store, providers).run()


def news_job(store, providers: Providers, settings) -> List[JobResult]:
    enricher = NewsEnricher(store, providers, query=settings.news_query, page_size=settings.news_page_size)
    return [enricher.run()]


JOBS: Dict[str, Callable] = {
    'candidate-issues': candidate_issues_job,
    'bill-issues': bill_issues_job,
    'embeddings': embeddings_job,
    'news': news_job,
}


def job_schedule(settings) -> Dict[str, str]:
    """Cron expression for every registered job."""
    return {
        'candidate-issues': settings.candidate_issues_cron,
        'bill-issues': settings.bill_issues_cron,
        'embeddings': settings.embeddings_cron,
        'news': settings.news_cron,
    }


def run_job(name: str, settings, providers: Providers = None, store=None) -> List[JobResult]:
    """
    Run one named job and return its results.

    Must be called inside an application context. Unknown names raise
    KeyError; every other error is logged and reported as a failed
    JobResult.
    """
    job = JOBS[name]
    logger.info(f"Running {name} job...")

    try:
        if providers is None:
            providers = build_providers(settings)
        results = job(store or Store(), providers, settings)
    except Exception as e:
        logger.error(f"{name} job aborted: {e}", exc_info=True)
        return [JobResult(job=name, skipped_reason=f"aborted: {e}")]

    for result in results:
        logger.info(f"Job result - {result}")
    return results
