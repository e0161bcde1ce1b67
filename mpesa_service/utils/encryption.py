import base64
import hashlib
import os
from typing import Optional

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

_NONCE_SIZE = 12


def get_encryption_key(secret: Optional[str] = None) -> bytes:
    """
    Derive the 32-byte AES-256 key used for secrets at rest.

    Falls back to the Flask app's ENCRYPTION_KEY, then the environment.
    """
    if secret is None:
        try:
            from flask import current_app
            secret = current_app.config.get('ENCRYPTION_KEY')
        except RuntimeError:
            secret = None
    if not secret:
        secret = os.getenv('ENCRYPTION_KEY', 'dev-encryption-key')

    return hashlib.sha256(str(secret).encode()).digest()


def encrypt_value(value: str, secret: Optional[str] = None) -> str:
    """
    Encrypt a credential using AES-256-GCM.

    Returns base64(nonce + ciphertext).
    """
    aesgcm = AESGCM(get_encryption_key(secret))
    nonce = os.urandom(_NONCE_SIZE)
    ciphertext = aesgcm.encrypt(nonce, value.encode(), None)
    return base64.b64encode(nonce + ciphertext).decode()


def decrypt_value(token: str, secret: Optional[str] = None) -> str:
    raw = base64.b64decode(token)
    aesgcm = AESGCM(get_encryption_key(secret))
    return aesgcm.decrypt(raw[:_NONCE_SIZE], raw[_NONCE_SIZE:], None).decode()
