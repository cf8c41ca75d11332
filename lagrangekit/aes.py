"""AES-GCM with a random nonce carried in front of the ciphertext."""

from __future__ import annotations

import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

_NONCE_SIZE = 12


def aes_gcm_encrypt(data: bytes, key: bytes) -> bytes:
    """Encrypt ``data`` and return the nonce followed by ciphertext and tag."""
    aead = AESGCM(key)
    nonce = secrets.token_bytes(_NONCE_SIZE)
    return nonce + aead.encrypt(nonce, data, None)


def aes_gcm_decrypt(data: bytes, key: bytes) -> bytes:
    """Decrypt what :func:`aes_gcm_encrypt` produced.

    Raises ValueError for a bad key, short input or failed authentication.
    """
    if len(data) < _NONCE_SIZE:
        raise ValueError("ciphertext is shorter than the nonce")
    aead = AESGCM(key)
    nonce, ciphertext = data[:_NONCE_SIZE], data[_NONCE_SIZE:]
    try:
        return aead.decrypt(nonce, ciphertext, None)
    except InvalidTag as exc:
        raise ValueError("message authentication failed") from exc