"""
Initiator security credentials

B2C, B2B, transaction status, account balance and reversal requests carry a
SecurityCredential. In the sandbox Safaricom documents a fixed test value;
in production it is the initiator password encrypted with Safaricom's public
certificate (RSA, PKCS#1 v1.5) and base64 encoded.
"""

import base64
from typing import Optional

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import padding

from mpesa_service.errors import InvalidConfigurationError, SecurityCredentialNotImplemented
from mpesa_service.models.credential_set import CredentialSet
from mpesa_service.utils.logger import get_logger

logger = get_logger(__name__)

SANDBOX_SECURITY_CREDENTIAL = "Safaricom999!*!"


class SecurityCredentialGenerator:
    """
    Args:
        certificate_pem: PEM bytes of the Daraja production certificate
        certificate_path: path to the same certificate; read once at init
    """

    def __init__(self, certificate_pem: Optional[bytes] = None, certificate_path: Optional[str] = None):
        if certificate_pem is None and certificate_path:
            with open(certificate_path, 'rb') as fh:
                certificate_pem = fh.read()

        self._public_key = None
        if certificate_pem:
            certificate = x509.load_pem_x509_certificate(certificate_pem)
            self._public_key = certificate.public_key()

    @property
    def configured(self) -> bool:
        return self._public_key is not None

    def generate(self, credential: CredentialSet) -> str:
        """
        Raises:
            SecurityCredentialNotImplemented: production without a certificate
            InvalidConfigurationError: production without an initiator password
        """
        if credential.is_sandbox:
            return SANDBOX_SECURITY_CREDENTIAL

        if not self.configured:
            raise SecurityCredentialNotImplemented(
                "Production security credential generation is not implemented: "
                "no Daraja public certificate is configured"
            )

        if not credential.initiator_password:
            raise InvalidConfigurationError(
                "initiator_password is required for production initiator operations"
            )

        encrypted = self._public_key.encrypt(
            credential.initiator_password.encode("utf-8"),
            padding.PKCS1v15(),
        )
        logger.debug("Generated production security credential for shortcode %s", credential.id)
        return base64.b64encode(encrypted).decode("utf-8")
