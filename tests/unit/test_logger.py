"""
Unit Tests for logging setup
"""

import logging

import pytest
from flask import Flask

from mpesa_service.utils.logger import (
    CONSOLE_HANDLER,
    ERROR_LOG_HANDLER,
    LOG_FILE,
    PACKAGE_LOGGER,
    SERVICE_LOG_HANDLER,
    configure_app_logging,
    get_logger,
)


@pytest.fixture
def package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved_handlers, saved_level = logger.handlers[:], logger.level
    logger.handlers = []
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)
    logging.getLogger('logging_app').handlers = []


def _app(tmp_path, testing=False):
    app = Flask('logging_app')
    app.config.update(TESTING=testing, LOG_DIR=str(tmp_path), LOG_LEVEL='DEBUG')
    return app


def _handler_names(logger):
    return sorted(h.get_name() for h in logger.handlers)


class TestConfigureAppLogging:

    def test_handlers_attached_once(self, tmp_path, package_logger):
        configure_app_logging(_app(tmp_path))
        configure_app_logging(_app(tmp_path))

        assert _handler_names(package_logger) == sorted(
            [CONSOLE_HANDLER, ERROR_LOG_HANDLER, SERVICE_LOG_HANDLER]
        )
        assert package_logger.level == logging.DEBUG

    def test_module_records_reach_service_log(self, tmp_path, package_logger):
        configure_app_logging(_app(tmp_path))
        module_logger = get_logger('mpesa_service.daraja.gateway')

        module_logger.warning("M-Pesa API returned HTTP 500")
        for handler in package_logger.handlers:
            handler.flush()

        assert module_logger.handlers == []
        assert "M-Pesa API returned HTTP 500" in (tmp_path / LOG_FILE).read_text()

    def test_testing_config_skips_files(self, tmp_path, package_logger):
        configure_app_logging(_app(tmp_path, testing=True))

        assert _handler_names(package_logger) == [CONSOLE_HANDLER]
        assert not (tmp_path / LOG_FILE).exists()

    def test_unknown_level_falls_back_to_info(self, tmp_path, package_logger):
        app = _app(tmp_path, testing=True)
        app.config['LOG_LEVEL'] = 'chatty'

        configure_app_logging(app)

        assert package_logger.level == logging.INFO
