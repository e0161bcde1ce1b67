from mpesa_service.services.credential_store import (
    CredentialStore,
    InMemoryCredentialStore,
    ShortCodeCredentialStore,
)
from mpesa_service.services.daraja_service import DarajaService

__all__ = [
    'CredentialStore',
    'DarajaService',
    'InMemoryCredentialStore',
    'ShortCodeCredentialStore',
]
