# app/scheduler.py
"""
ETL Job Scheduler

Uses APScheduler to run the enrichment jobs on cron triggers:
- Candidate issue positions (daily, 2 AM)
- Bill issue tags (daily, 3 AM)
- Embeddings (daily, 5 AM, after the issue jobs)
- News feed (every 6 hours)

Each job runs in the Flask app context on a single worker thread, so jobs
run one at a time. A job never overlaps itself (max_instances=1) and
missed runs collapse into one (coalesce=True).
"""
from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger
import logging

logger = logging.getLogger(__name__)
scheduler = None


def _make_job(app, name):
    def run_scheduled_job():
        from app import get_settings
        from app.db_retry import cleanup_db_session
        from app.enrichment.jobs import run_job

        with app.app_context():
            try:
                run_job(name, get_settings(app))
            finally:
                cleanup_db_session()

    run_scheduled_job.__name__ = f"run_{name.replace('-', '_')}"
    return run_scheduled_job


def init_scheduler(app, blocking=False):
    """
    Initialize the APScheduler with one cron job per ETL job.

    blocking=True builds a BlockingScheduler for the standalone ETL process;
    otherwise a BackgroundScheduler is used.
    """
    global scheduler

    if scheduler is not None:
        logger.warning("Scheduler already initialized")
        return scheduler

    from app import get_settings
    from app.enrichment.jobs import job_schedule

    # Single worker so different jobs never run concurrently
    executors = {'default': ThreadPoolExecutor(1)}
    scheduler = BlockingScheduler(executors=executors) if blocking else BackgroundScheduler(executors=executors)

    for name, cron in job_schedule(get_settings(app)).items():
        scheduler.add_job(
            _make_job(app, name),
            CronTrigger.from_crontab(cron),
            id=name,
            name=name,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )

    logger.info("Scheduler initialized with jobs:")
    for job in scheduler.get_jobs():
        logger.info(f"  - {job.id}: {job.trigger}")

    return scheduler


def start_scheduler():
    """
    Start the scheduler
    Blocks when the scheduler was initialized with blocking=True
    """
    global scheduler

    if scheduler is None:
        logger.error("Scheduler not initialized. Call init_scheduler() first.")
        return

    if not scheduler.running:
        logger.info("ETL service started. Waiting for scheduled jobs...")
        scheduler.start()
    else:
        logger.warning("Scheduler already running")


def shutdown_scheduler():
    """
    Shutdown the scheduler gracefully
    """
    global scheduler

    if scheduler and scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler shut down")
    scheduler = None
