from datetime import timedelta

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class RedisClient:
    def __init__(self):
        self.client = None

    def init_app(self, app):
        import redis
        self.client = redis.from_url(app.config['REDIS_URL'], decode_responses=True)


redis_client = RedisClient()


class Daraja:
    """
    Wires the Daraja components for an application.

    One token cache is created per app and shared by every request served
    by it; the assembled DarajaService is stored in app.extensions['daraja'].
    """

    def __init__(self, app=None, credential_store=None):
        self._credential_store = credential_store
        if app is not None:
            self.init_app(app)

    def init_app(self, app, credential_store=None):
        from mpesa_service.daraja import (
            DarajaGateway,
            RedisTokenCache,
            RequestBuilder,
            SecurityCredentialGenerator,
            TokenCache,
            TokenManager,
        )
        from mpesa_service.models.enums import Environment
        from mpesa_service.services import DarajaService, ShortCodeCredentialStore

        backend = app.config.get('DARAJA_TOKEN_CACHE_BACKEND', 'memory')
        if backend == 'redis':
            if redis_client.client is None:
                redis_client.init_app(app)
            cache = RedisTokenCache(redis_client.client)
        elif backend == 'memory':
            cache = TokenCache()
        else:
            raise ValueError(f"Unknown DARAJA_TOKEN_CACHE_BACKEND: {backend}")

        gateway = DarajaGateway(
            base_urls={
                Environment.SANDBOX: app.config.get('DARAJA_SANDBOX_BASE_URL'),
                Environment.PRODUCTION: app.config.get('DARAJA_PRODUCTION_BASE_URL'),
            },
            connect_timeout=app.config.get('DARAJA_CONNECT_TIMEOUT', 30),
            read_timeout=app.config.get('DARAJA_READ_TIMEOUT', 60),
        )
        token_manager = TokenManager(
            gateway,
            cache,
            cache_duration=timedelta(minutes=app.config.get('DARAJA_TOKEN_CACHE_MINUTES', 55)),
        )
        builder = RequestBuilder(
            security=SecurityCredentialGenerator(certificate_path=app.config.get('DARAJA_CERTIFICATE_PATH'))
        )

        store = credential_store or self._credential_store or ShortCodeCredentialStore()
        service = DarajaService(store, token_manager, gateway, builder=builder)

        app.extensions['daraja'] = service
        app.logger.info(f'Daraja configured with {backend} token cache')
        return service


daraja = Daraja()
