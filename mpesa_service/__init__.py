from flask import Flask, current_app, jsonify

from mpesa_service.config import config
from mpesa_service.errors import AppError
from mpesa_service.extensions import daraja as daraja_ext, db, redis_client
from mpesa_service.utils.logger import configure_app_logging


def create_app(config_name='development', credential_store=None):
    """Application factory pattern"""
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])
    configure_app_logging(app)

    # Initialize extensions
    db.init_app(app)
    redis_client.init_app(app)
    daraja_ext.init_app(app, credential_store=credential_store)

    # Error handlers
    register_error_handlers(app)

    return app


def get_daraja_service():
    """DarajaService of the current application"""
    return current_app.extensions['daraja']


def register_error_handlers(app):
    """Render AppError subclasses raised by views as the standard error body"""

    @app.errorhandler(AppError)
    def app_error(error):
        return jsonify({
            'success': False,
            'error': {'code': error.code.value, 'message': error.message}
        }), error.status_code
