"""The 16-round TEA cipher in the chained, randomly padded QQ layout."""

from __future__ import annotations

import secrets
import struct

_DELTA = 0x9E3779B9
_ROUNDS = 16
_MASK32 = 0xFFFFFFFF
_BLOCK = 8
_TRAILER = 7


class TeaCipher:
    """TEA with a 16-byte key, 16 rounds and CBC-like chaining.

    Encrypted output starts with a header byte holding the padding length,
    followed by random padding, the plaintext and seven zero bytes.
    """

    __slots__ = ("_key",)

    def __init__(self, key: bytes) -> None:
        key = bytes(key)
        if len(key) != 16:
            raise ValueError(f"TEA key must be 16 bytes, got {len(key)}")
        self._key = struct.unpack(">4I", key)

    def to_bytes(self) -> bytes:
        """Return the 16-byte key."""
        return struct.pack(">4I", *self._key)

    def _encode_block(self, block: int) -> int:
        k0, k1, k2, k3 = self._key
        v0, v1 = block >> 32, block & _MASK32
        total = 0
        for _ in range(_ROUNDS):
            total = (total + _DELTA) & _MASK32
            v0 = (v0 + (((v1 << 4) + k0) ^ (v1 + total) ^ ((v1 >> 5) + k1))) & _MASK32
            v1 = (v1 + (((v0 << 4) + k2) ^ (v0 + total) ^ ((v0 >> 5) + k3))) & _MASK32
        return (v0 << 32) | v1

    def _decode_block(self, block: int) -> int:
        k0, k1, k2, k3 = self._key
        v0, v1 = block >> 32, block & _MASK32
        total = (_DELTA * _ROUNDS) & _MASK32
        for _ in range(_ROUNDS):
            v1 = (v1 - ((((v0 << 4) + k2) ^ (v0 + total) ^ ((v0 >> 5) + k3)) & _MASK32)) & _MASK32
            v0 = (v0 - ((((v1 << 4) + k0) ^ (v1 + total) ^ ((v1 >> 5) + k1)) & _MASK32)) & _MASK32
            total = (total - _DELTA) & _MASK32
        return (v0 << 32) | v1

    def encrypt(self, data: bytes) -> bytes:
        """Pad and encrypt ``data``; the result length is a multiple of 8."""
        data = bytes(data)
        fill = 10 - (len(data) + 1) % 8
        plain = bytearray(secrets.token_bytes(fill))
        plain[0] = (fill - 3) | 0xF8
        plain += data
        plain += bytes(_TRAILER)

        out = bytearray()
        prev_cipher = prev_mixed = 0
        for offset in range(0, len(plain), _BLOCK):
            block = int.from_bytes(plain[offset:offset + _BLOCK], "big")
            mixed = block ^ prev_cipher
            cipher = self._encode_block(mixed) ^ prev_mixed
            prev_mixed, prev_cipher = mixed, cipher
            out += cipher.to_bytes(_BLOCK, "big")
        return bytes(out)

    def decrypt(self, data: bytes) -> bytes:
        """Decrypt what :meth:`encrypt` produced and strip the padding.

        Raises ValueError if ``data`` cannot be a ciphertext.
        """
        data = bytes(data)
        if len(data) < 2 * _BLOCK or len(data) % _BLOCK:
            raise ValueError("ciphertext length must be a multiple of 8 and at least 16")
        out = bytearray()
        prev_cipher = prev_mixed = 0
        for offset in range(0, len(data), _BLOCK):
            cipher = int.from_bytes(data[offset:offset + _BLOCK], "big")
            mixed = self._decode_block(cipher ^ prev_mixed)
            out += (mixed ^ prev_cipher).to_bytes(_BLOCK, "big")
            prev_mixed, prev_cipher = mixed, cipher
        start = (out[0] & 7) + 3
        end = len(out) - _TRAILER
        if start > end:
            raise ValueError("invalid padding in decrypted data")
        return bytes(out[start:end])