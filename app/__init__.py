from flask import Flask
from flask_sqlalchemy import SQLAlchemy
import os
import time
import logging
from logging.config import dictConfig
import sentry_sdk
from sentry_sdk.integrations.flask import FlaskIntegration


db = SQLAlchemy()

logger = logging.getLogger(__name__)


def try_connect_db(app, retries=3):
    for attempt in range(retries):
        try:
            with app.app_context():
                with db.engine.connect():
                    return True
        except Exception as e:
            app.logger.error(f"Database connection attempt {attempt + 1} failed: {e}")
            time.sleep(1)
    return False


def create_app(config_class=None):
    """
    Build the ETL application.

    The Flask app is only a host for configuration, the database session and
    the CLI commands; there are no HTTP routes. The explicit EtlSettings
    snapshot is stored in app.extensions['etl_settings'] for the jobs.

    Raises ConfigurationError when mandatory settings are missing.
    """
    from config import Config, EtlSettings, config_dict, validate_config

    env = os.getenv('FLASK_ENV', 'development')
    if config_class is None:
        config_class = config_dict.get(env, Config)

    dictConfig(Config.LOGGING_CONFIG)

    app = Flask(__name__)
    app.config.from_object(config_class)

    validate_config(app.config)
    settings = EtlSettings.from_config(app.config)
    app.extensions['etl_settings'] = settings

    # Sentry in production only
    if env == 'production' and app.config.get('SENTRY_DSN'):
        sentry_sdk.init(
            dsn=app.config['SENTRY_DSN'],
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
        )

    db.init_app(app)

    if not app.config.get('TESTING') and not try_connect_db(app):
        raise RuntimeError("Could not establish database connection")

    from app.commands import init_commands
    init_commands(app)

    if not settings.openai_api_key:
        app.logger.warning("OPENAI_API_KEY not set, completion and embedding jobs will be skipped")
    if not settings.tavily_api_key:
        app.logger.warning("TAVILY_API_KEY not set, search-augmented enrichment will be skipped")
    if not settings.news_api_key:
        app.logger.warning("NEWS_API_KEY not set, news job will be skipped")

    return app


def get_settings(app):
    """Return the EtlSettings snapshot built by create_app()."""
    return app.extensions['etl_settings']
