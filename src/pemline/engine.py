from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Protocol, Tuple

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .config import ALGORITHM_KIND, HASH_NAME, KEY_USAGES, PUBLIC_EXPONENT

logger = logging.getLogger(__name__)


FORMAT_SPKI = "spki"
FORMAT_PKCS8 = "pkcs8"


@dataclass(frozen=True)
class AlgorithmDescriptor:
    """
    Parameters handed to the crypto engine for a key-pair request.

    Attributes:
        modulus_length: RSA modulus size in bits.
        kind: Asymmetric scheme name. Always "RSA-OAEP".
        public_exponent: Big-endian public exponent bytes (65537 = 01 00 01).
        hash: Hash algorithm name used with OAEP.
        extractable: Whether the keys may be exported.
        usages: Operations the keys are intended for.
    """

    modulus_length: int
    kind: str = ALGORITHM_KIND
    public_exponent: bytes = PUBLIC_EXPONENT
    hash: str = HASH_NAME
    extractable: bool = True
    usages: Tuple[str, ...] = KEY_USAGES

    @property
    def public_exponent_int(self) -> int:
        return int.from_bytes(self.public_exponent, "big")


@dataclass(frozen=True)
class GeneratedKeyPair:
    """Opaque engine key handles. Only ever passed back to `export_key`."""

    public_key: Any
    private_key: Any


class CryptoEngine(Protocol):
    """Contract for the engine that produces and exports RSA key pairs."""

    def is_available(self) -> bool: ...

    async def generate_key_pair(
        self, descriptor: AlgorithmDescriptor
    ) -> GeneratedKeyPair: ...

    async def export_key(self, fmt: str, key: Any) -> bytes: ...


class CryptographyEngine:
    """
    CryptoEngine backed by the `cryptography` package.

    Generation is CPU-bound and runs in a worker thread so the event loop
    stays responsive. Keys are exported as DER: SubjectPublicKeyInfo for
    the public key, unencrypted PKCS8 for the private key.
    """

    def is_available(self) -> bool:
        try:
            return bool(default_backend().hash_supported(hashes.SHA256()))
        except Exception:
            logger.debug("OpenSSL backend check failed", exc_info=True)
            return False

    async def generate_key_pair(self, descriptor: AlgorithmDescriptor) -> GeneratedKeyPair:
        if descriptor.hash != HASH_NAME:
            raise ValueError(f"Unsupported hash: {descriptor.hash!r}")
        if not descriptor.extractable:
            raise ValueError("Non-extractable keys cannot be exported")

        private_key = await asyncio.to_thread(
            rsa.generate_private_key,
            public_exponent=descriptor.public_exponent_int,
            key_size=descriptor.modulus_length,
        )
        return GeneratedKeyPair(
            public_key=private_key.public_key(), private_key=private_key
        )

    async def export_key(self, fmt: str, key: Any) -> bytes:
        if fmt == FORMAT_SPKI:
            return key.public_bytes(
                encoding=serialization.Encoding.DER,
                format=serialization.PublicFormat.SubjectPublicKeyInfo,
            )
        if fmt == FORMAT_PKCS8:
            return key.private_bytes(
                encoding=serialization.Encoding.DER,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            )
        raise ValueError(f"Unsupported export format: {fmt!r}")
