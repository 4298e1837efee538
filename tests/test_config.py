"""
Tests for configuration loading and the process entry points.
"""
from dataclasses import replace
from unittest.mock import MagicMock, patch

import pytest

from app.errors import ConfigurationError


def test_missing_database_url_is_fatal():
    from config import TestingConfig
    from app import create_app

    class NoDatabaseConfig(TestingConfig):
        SQLALCHEMY_DATABASE_URI = None

    with pytest.raises(ConfigurationError):
        create_app(NoDatabaseConfig)


def test_settings_snapshot(settings):
    assert settings.openai_api_key is None
    assert settings.completion_model == 'gpt-4-turbo'
    assert settings.embedding_dimensions == 1536
    assert settings.provider_timeout == 30


def test_invalid_strategy_is_rejected():
    from config import EtlSettings

    with pytest.raises(ConfigurationError):
        EtlSettings.from_config({'CANDIDATE_ENRICHMENT_STRATEGY': 'guess'})


def test_strategy_names_are_case_insensitive():
    from config import EtlSettings

    settings = EtlSettings.from_config({'BILL_ENRICHMENT_STRATEGY': 'SELF_CONTEXT'})
    assert settings.bill_strategy == 'self_context'
    assert replace(settings, bill_strategy='search_augmented').bill_strategy == 'search_augmented'


def test_non_integer_env_value(monkeypatch):
    from config import _env_int

    monkeypatch.setenv('NEWS_PAGE_SIZE', 'twenty')
    with pytest.raises(ConfigurationError):
        _env_int('NEWS_PAGE_SIZE', 20)


def test_etl_main_exits_on_missing_configuration():
    import etl

    with patch('etl.create_app', side_effect=ConfigurationError('DATABASE_URL environment variable not set')):
        assert etl.main() == 1


def test_etl_main_runs_scheduler():
    import etl

    with patch('etl.create_app', return_value=MagicMock()), \
            patch('etl.init_scheduler') as mock_init, \
            patch('etl.start_scheduler') as mock_start, \
            patch('etl.signal'):
        assert etl.main() == 0

    mock_init.assert_called_once()
    assert mock_init.call_args.kwargs['blocking'] is True
    mock_start.assert_called_once()


class TestCommands:

    def test_prime_db_command(self, app):
        runner = app.test_cli_runner()

        assert runner.invoke(args=['init-db']).exit_code == 0
        result = runner.invoke(args=['prime-db'])

        assert result.exit_code == 0
        assert 'candidates_inserted: 3' in result.output

        again = runner.invoke(args=['prime-db'])
        assert 'candidates_skipped: 3' in again.output

    def test_run_job_command(self, app):
        runner = app.test_cli_runner()

        result = runner.invoke(args=['run-job', 'news'])

        assert result.exit_code == 0
        assert 'news: processed=0' in result.output
