"""
Logging setup for the Daraja integration service

Module loggers come from get_logger(__name__) and carry no handlers of their
own; records propagate to the mpesa_service package logger, which
configure_app_logging equips once per process with the console handler and
the rotating service log.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

PACKAGE_LOGGER = 'mpesa_service'
LOG_FILE = 'mpesa-service.log'
ERROR_LOG_FILE = 'error.log'
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 10

CONSOLE_HANDLER = 'mpesa_service.console'
SERVICE_LOG_HANDLER = 'mpesa_service.service_log'
ERROR_LOG_HANDLER = 'mpesa_service.error_log'

_FILE_FORMAT = logging.Formatter(
    '%(asctime)s %(levelname)-8s [%(name)s] %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)


def get_logger(name: str) -> logging.Logger:
    """Logger for a module of this package; handlers live on the package logger."""
    return logging.getLogger(name)


def _log_dir_ready(log_dir: str) -> bool:
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        return False
    return True


def _rotating_handler(log_dir: str, filename: str, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        os.path.join(log_dir, filename),
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS
    )
    handler.setLevel(level)
    handler.setFormatter(_FILE_FORMAT)
    return handler


def _attach_once(logger: logging.Logger, name: str, factory) -> None:
    if any(h.get_name() == name for h in logger.handlers):
        return
    handler = factory()
    handler.set_name(name)
    logger.addHandler(handler)


def _console_handler() -> logging.Handler:
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter('%(levelname)s [%(name)s] %(message)s'))
    return console


def configure_app_logging(app):
    """
    Apply LOG_LEVEL to the app and package loggers and attach the package
    handlers. Repeated calls, e.g. one per create_app, add nothing new.

    Outside testing the package logger also writes LOG_DIR/mpesa-service.log
    and ERROR records to LOG_DIR/error.log.
    """
    level = logging.getLevelName(str(app.config.get('LOG_LEVEL', 'INFO')).upper())
    if not isinstance(level, int):
        level = logging.INFO

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    app.logger.setLevel(level)
    package_logger.setLevel(level)

    _attach_once(package_logger, CONSOLE_HANDLER, _console_handler)

    if app.config.get('TESTING'):
        return

    log_dir = app.config.get('LOG_DIR', 'logs')
    if not _log_dir_ready(log_dir):
        app.logger.warning(f'Log directory {log_dir} is not writable; file logging disabled')
        return

    _attach_once(
        package_logger, SERVICE_LOG_HANDLER,
        lambda: _rotating_handler(log_dir, LOG_FILE, logging.NOTSET)
    )
    _attach_once(
        package_logger, ERROR_LOG_HANDLER,
        lambda: _rotating_handler(log_dir, ERROR_LOG_FILE, logging.ERROR)
    )
    if not any(h.get_name() == ERROR_LOG_HANDLER for h in app.logger.handlers):
        error_handler = next(h for h in package_logger.handlers if h.get_name() == ERROR_LOG_HANDLER)
        app.logger.addHandler(error_handler)
