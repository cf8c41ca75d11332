"""P-256 key exchange against the login server's fixed public key."""

from __future__ import annotations

import functools

from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

_P256_SERVER_PUBLIC = bytes.fromhex(
    "049D1423332735980EDABE7E9EA451B3395B6F35250DB8FC56F25889F628CBAE3E"
    "8E73077914071EEEBC108F4E0170057792BB17AA303AF652313D17C1AC815E79"
)
_POINT_LENGTH = 65


def _load_public(data: bytes) -> ec.EllipticCurvePublicKey:
    data = bytes(data)
    if len(data) != _POINT_LENGTH or data[0] != 0x04:
        raise ValueError("invalid P-256 public key encoding")
    return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256R1(), data)


class Exchanger:
    """A fresh P-256 key pair and its shared secret with a peer's public key."""

    def __init__(self, peer_public: bytes = _P256_SERVER_PUBLIC) -> None:
        self._private = ec.generate_private_key(ec.SECP256R1())
        self._shared = self.exchange(peer_public)

    def public_key(self) -> bytes:
        """Return the public key as an uncompressed 65-byte point."""
        return self._private.public_key().public_bytes(
            Encoding.X962, PublicFormat.UncompressedPoint
        )

    def shared_key(self) -> bytes:
        """Return the secret shared with the peer given at construction."""
        return self._shared

    def exchange(self, remote: bytes) -> bytes:
        """Return the secret shared with ``remote``, an uncompressed point.

        Raises ValueError if ``remote`` is not a valid P-256 public key.
        """
        return self._private.exchange(ec.ECDH(), _load_public(remote))


@functools.lru_cache(maxsize=None)
def p256() -> Exchanger:
    """Return the process-wide exchanger for the login server."""
    return Exchanger()