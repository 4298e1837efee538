from dotenv import load_dotenv
from dataclasses import dataclass
from typing import Optional
import os

from app.errors import ConfigurationError

load_dotenv()


def _env_int(name, default):
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


class Config:
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL')

    # Heroku/Supabase style URLs
    if SQLALCHEMY_DATABASE_URI and SQLALCHEMY_DATABASE_URI.startswith('postgres://'):
        SQLALCHEMY_DATABASE_URI = SQLALCHEMY_DATABASE_URI.replace('postgres://', 'postgresql://', 1)

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
        'pool_size': 5,
        'max_overflow': 10,
        'pool_timeout': 30,
    }

    LOGGING_CONFIG = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'default': {
                'format': '%(asctime)s %(levelname)s [%(name)s] %(message)s',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'level': 'INFO',
                'formatter': 'default',
            },
        },
        'root': {
            'handlers': ['console'],
            'level': 'INFO',
        }
    }

    DB_RETRY_ATTEMPTS = 3
    DB_RETRY_DELAY = 1  # seconds

    # Completion + embedding provider (OpenAI-compatible)
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_BASE_URL = os.getenv('OPENAI_BASE_URL', 'https://api.openai.com/v1')
    COMPLETION_MODEL = os.getenv('COMPLETION_MODEL', 'gpt-4-turbo')
    SUMMARY_MODEL = os.getenv('SUMMARY_MODEL', 'gpt-3.5-turbo')
    EMBEDDING_MODEL = os.getenv('EMBEDDING_MODEL', 'text-embedding-ada-002')
    EMBEDDING_DIMENSIONS = _env_int('EMBEDDING_DIMENSIONS', 1536)

    # Search provider
    TAVILY_API_KEY = os.getenv('TAVILY_API_KEY')
    TAVILY_BASE_URL = os.getenv('TAVILY_BASE_URL', 'https://api.tavily.com')

    # News provider
    NEWS_API_KEY = os.getenv('NEWS_API_KEY')
    NEWS_API_BASE_URL = os.getenv('NEWS_API_BASE_URL', 'https://newsapi.org/v2')
    NEWS_QUERY = os.getenv(
        'NEWS_QUERY',
        'politics OR democracy OR voting OR election positive OR success OR win OR progress'
    )
    NEWS_PAGE_SIZE = _env_int('NEWS_PAGE_SIZE', 20)

    PROVIDER_TIMEOUT = _env_int('PROVIDER_TIMEOUT', 30)  # seconds

    # 'search_augmented' or 'self_context'
    CANDIDATE_ENRICHMENT_STRATEGY = os.getenv('CANDIDATE_ENRICHMENT_STRATEGY', 'search_augmented')
    BILL_ENRICHMENT_STRATEGY = os.getenv('BILL_ENRICHMENT_STRATEGY', 'search_augmented')

    # Staggered so the daily jobs never overlap
    CANDIDATE_ISSUES_CRON = os.getenv('CANDIDATE_ISSUES_CRON', '0 2 * * *')
    BILL_ISSUES_CRON = os.getenv('BILL_ISSUES_CRON', '0 3 * * *')
    EMBEDDINGS_CRON = os.getenv('EMBEDDINGS_CRON', '0 5 * * *')
    NEWS_CRON = os.getenv('NEWS_CRON', '0 */6 * * *')

    PRIME_WEBHOOK_URL = os.getenv('PRIME_WEBHOOK_URL')
    SENTRY_DSN = os.getenv('SENTRY_DSN')


class DevelopmentConfig(Config):
    FLASK_ENV = 'development'
    DEBUG = True


class ProductionConfig(Config):
    FLASK_ENV = 'production'
    DEBUG = False


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    # SQLite does not support pool_size etc.
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True}
    DB_RETRY_DELAY = 0
    OPENAI_API_KEY = None
    TAVILY_API_KEY = None
    NEWS_API_KEY = None
    PRIME_WEBHOOK_URL = None


config_dict = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
}


def validate_config(config):
    """Fail fast when the mandatory store settings are missing."""
    if not config.get('SQLALCHEMY_DATABASE_URI'):
        raise ConfigurationError("DATABASE_URL environment variable not set")


STRATEGY_NAMES = ('search_augmented', 'self_context')


@dataclass(frozen=True)
class EtlSettings:
    """
    Settings snapshot handed to every ETL component.

    Built once from the Flask config at process start. Provider clients and
    enrichers take their keys, URLs and models from here and never read the
    environment themselves.
    """
    openai_api_key: Optional[str]
    openai_base_url: str
    completion_model: str
    summary_model: str
    embedding_model: str
    embedding_dimensions: int
    tavily_api_key: Optional[str]
    tavily_base_url: str
    news_api_key: Optional[str]
    news_api_base_url: str
    news_query: str
    news_page_size: int
    provider_timeout: int
    candidate_strategy: str
    bill_strategy: str
    candidate_issues_cron: str
    bill_issues_cron: str
    embeddings_cron: str
    news_cron: str
    prime_webhook_url: Optional[str] = None

    @classmethod
    def from_config(cls, config) -> 'EtlSettings':
        candidate_strategy = (config.get('CANDIDATE_ENRICHMENT_STRATEGY') or 'search_augmented').lower()
        bill_strategy = (config.get('BILL_ENRICHMENT_STRATEGY') or 'search_augmented').lower()
        for name, value in (('CANDIDATE_ENRICHMENT_STRATEGY', candidate_strategy),
                            ('BILL_ENRICHMENT_STRATEGY', bill_strategy)):
            if value not in STRATEGY_NAMES:
                raise ConfigurationError(
                    f"{name} must be one of {', '.join(STRATEGY_NAMES)}, got {value!r}"
                )

        return cls(
            openai_api_key=config.get('OPENAI_API_KEY') or None,
            openai_base_url=config.get('OPENAI_BASE_URL', Config.OPENAI_BASE_URL),
            completion_model=config.get('COMPLETION_MODEL', Config.COMPLETION_MODEL),
            summary_model=config.get('SUMMARY_MODEL', Config.SUMMARY_MODEL),
            embedding_model=config.get('EMBEDDING_MODEL', Config.EMBEDDING_MODEL),
            embedding_dimensions=int(config.get('EMBEDDING_DIMENSIONS', Config.EMBEDDING_DIMENSIONS)),
            tavily_api_key=config.get('TAVILY_API_KEY') or None,
            tavily_base_url=config.get('TAVILY_BASE_URL', Config.TAVILY_BASE_URL),
            news_api_key=config.get('NEWS_API_KEY') or None,
            news_api_base_url=config.get('NEWS_API_BASE_URL', Config.NEWS_API_BASE_URL),
            news_query=config.get('NEWS_QUERY', Config.NEWS_QUERY),
            news_page_size=int(config.get('NEWS_PAGE_SIZE', Config.NEWS_PAGE_SIZE)),
            provider_timeout=int(config.get('PROVIDER_TIMEOUT', Config.PROVIDER_TIMEOUT)),
            candidate_strategy=candidate_strategy,
            bill_strategy=bill_strategy,
            candidate_issues_cron=config.get('CANDIDATE_ISSUES_CRON', Config.CANDIDATE_ISSUES_CRON),
            bill_issues_cron=config.get('BILL_ISSUES_CRON', Config.BILL_ISSUES_CRON),
            embeddings_cron=config.get('EMBEDDINGS_CRON', Config.EMBEDDINGS_CRON),
            news_cron=config.get('NEWS_CRON', Config.NEWS_CRON),
            prime_webhook_url=config.get('PRIME_WEBHOOK_URL') or None,
        )
