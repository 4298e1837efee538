import click
from flask import current_app
from flask.cli import with_appcontext

from app import db, get_settings
from app.enrichment.jobs import JOBS, run_job
from app.errors import StoreError


@click.command('init-db')
@with_appcontext
def init_db():
    """Create the candidates, bills and inspiration_posts tables."""
    db.create_all()
    click.echo('Database tables created.')


@click.command('prime-db')
@click.option('--enrich', is_flag=True, help='Enrich seeded candidates through the search and completion providers.')
@with_appcontext
def prime_db(enrich):
    """Seed baseline candidates, bills and inspiration posts (idempotent)."""
    from app.enrichment.prime import prime_database
    from app.providers import Providers, build_providers
    from app.store import Store

    settings = get_settings(current_app)
    providers = build_providers(settings) if enrich else Providers()
    try:
        result = prime_database(
            Store(),
            providers,
            enrich=enrich,
            webhook_url=settings.prime_webhook_url,
            timeout=settings.provider_timeout,
        )
    except StoreError as e:
        click.echo(f'Error during database priming: {e}', err=True)
        raise SystemExit(1)

    for key, value in result.as_dict().items():
        click.echo(f'{key}: {value}')
    if result.errors:
        raise SystemExit(1)


@click.command('run-job')
@click.argument('name', type=click.Choice(list(JOBS)))
@with_appcontext
def run_job_command(name):
    """Run one ETL job immediately and print its counts."""
    results = run_job(name, get_settings(current_app))
    for result in results:
        click.echo(str(result))
    if any(result.failed or (result.skipped_reason or '').startswith('aborted') for result in results):
        raise SystemExit(1)


def init_commands(app):
    app.cli.add_command(init_db)
    app.cli.add_command(prime_db)
    app.cli.add_command(run_job_command)
