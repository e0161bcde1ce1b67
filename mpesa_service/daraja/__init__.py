from mpesa_service.daraja.builders import RequestBuilder, generate_password
from mpesa_service.daraja.callbacks import ack_response, callback_ack
from mpesa_service.daraja.gateway import DarajaGateway, resolve_base_url
from mpesa_service.daraja.security import SANDBOX_SECURITY_CREDENTIAL, SecurityCredentialGenerator
from mpesa_service.daraja.token_cache import CachedToken, RedisTokenCache, TokenCache
from mpesa_service.daraja.token_manager import TokenManager

__all__ = [
    'CachedToken',
    'DarajaGateway',
    'RedisTokenCache',
    'RequestBuilder',
    'SANDBOX_SECURITY_CREDENTIAL',
    'SecurityCredentialGenerator',
    'TokenCache',
    'TokenManager',
    'ack_response',
    'callback_ack',
    'generate_password',
    'resolve_base_url',
]
