"""
Credential stores

A store resolves a credential-set identifier to an immutable CredentialSet
snapshot. Lookups return None for unknown identifiers; the service facade
turns that into NOT_FOUND.
"""

import threading
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Mapping, Optional

from mpesa_service.errors import CredentialSetNotFound
from mpesa_service.extensions import db
from mpesa_service.models.credential_set import CredentialSet
from mpesa_service.models.shortcode import ShortCode
from mpesa_service.schemas.credential_schema import CredentialSetSchema
from mpesa_service.utils.logger import get_logger

logger = get_logger(__name__)


class CredentialStore(ABC):

    @abstractmethod
    def find(self, identifier: str) -> Optional[CredentialSet]:
        pass

    def get(self, identifier: str) -> CredentialSet:
        """
        Raises:
            CredentialSetNotFound: if no credential set has this identifier
        """
        credential = self.find(identifier)
        if credential is None:
            raise CredentialSetNotFound(f"Shortcode not found: {identifier}")
        return credential


class InMemoryCredentialStore(CredentialStore):
    """Holds credential sets loaded from configuration mappings."""

    def __init__(self, credentials: Optional[Iterable[CredentialSet]] = None):
        self._credentials: Dict[str, CredentialSet] = {}
        self._lock = threading.Lock()
        for credential in credentials or ():
            self.add(credential)

    def add(self, credential: CredentialSet) -> CredentialSet:
        with self._lock:
            self._credentials[str(credential.id)] = credential
        return credential

    def load(self, data: Mapping) -> CredentialSet:
        """
        Validate a raw mapping and store the resulting credential set

        Raises:
            marshmallow.ValidationError: if the mapping is not a usable configuration
        """
        credential = CredentialSetSchema().load(data)
        logger.info(f'Loaded credential set {credential.id} for shortcode {credential.shortcode}')
        return self.add(credential)

    def remove(self, identifier: str) -> None:
        with self._lock:
            self._credentials.pop(str(identifier), None)

    def find(self, identifier: str) -> Optional[CredentialSet]:
        with self._lock:
            return self._credentials.get(str(identifier))


class ShortCodeCredentialStore(CredentialStore):
    """Reads credential sets from the mpesa_shortcodes table; needs an app context."""

    def find(self, identifier: str) -> Optional[CredentialSet]:
        row = db.session.get(ShortCode, str(identifier))
        if row is None:
            return None
        return row.to_credential_set()
