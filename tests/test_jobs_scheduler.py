"""
Tests for the job registry, the run_job boundary and the scheduler wiring.
"""
from unittest.mock import patch

import pytest
from apscheduler.triggers.cron import CronTrigger

from app.enrichment.jobs import JOBS, job_schedule, run_job
from app.models import Candidate
from app.providers import Providers
from app.scheduler import _make_job, init_scheduler, shutdown_scheduler

from conftest import FakeSearch, FakeText


def test_registered_jobs():
    assert set(JOBS) == {'candidate-issues', 'bill-issues', 'embeddings', 'news'}


def test_default_schedule(settings):
    assert job_schedule(settings) == {
        'candidate-issues': '0 2 * * *',
        'bill-issues': '0 3 * * *',
        'embeddings': '0 5 * * *',
        'news': '0 */6 * * *',
    }


def test_run_job_with_providers(db, store, settings):
    store.insert(Candidate, [{'name': 'Jane Smith', 'office': 'Senate', 'state': 'CA'}])
    providers = Providers(search=FakeSearch(), text=FakeText())

    results = run_job('candidate-issues', settings, providers=providers, store=store)

    assert len(results) == 1
    assert results[0].succeeded == 1


def test_run_job_without_keys_skips(db, settings):
    results = run_job('embeddings', settings)

    assert all(r.skipped_reason == 'embedding provider not configured' for r in results)


def test_run_job_contains_errors(db, settings):
    def broken_job(store, providers, settings):
        raise RuntimeError('boom')

    with patch.dict(JOBS, {'news': broken_job}):
        results = run_job('news', settings, providers=Providers())

    assert results[0].job == 'news'
    assert results[0].skipped_reason == 'aborted: boom'
    assert not results[0].ok


def test_run_job_unknown_name(settings):
    with pytest.raises(KeyError):
        run_job('nope', settings)


def test_init_scheduler_registers_cron_jobs(app):
    try:
        scheduler = init_scheduler(app)
        jobs = {job.id: job for job in scheduler.get_jobs()}

        assert set(jobs) == set(JOBS)
        for job in jobs.values():
            assert isinstance(job.trigger, CronTrigger)
            assert job.max_instances == 1
            assert job.coalesce is True
    finally:
        shutdown_scheduler()


def test_scheduler_runs_jobs_on_a_single_worker(app):
    try:
        scheduler = init_scheduler(app)

        assert scheduler._executors['default']._pool._max_workers == 1
    finally:
        shutdown_scheduler()


def test_scheduled_job_runs_in_app_context(app, settings):
    scheduled = _make_job(app, 'news')

    with patch('app.enrichment.jobs.run_job') as mock_run:
        scheduled()

    mock_run.assert_called_once_with('news', settings)
