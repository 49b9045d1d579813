from __future__ import annotations

import logging
from typing import Optional

from .codec import der_to_pem, to_one_line
from .config import MSG_GENERATED, PRIVATE_LABEL, PUBLIC_LABEL, validate_modulus_size
from .engine import (
    FORMAT_PKCS8,
    FORMAT_SPKI,
    AlgorithmDescriptor,
    CryptoEngine,
    CryptographyEngine,
)
from .errors import AlreadyInProgress, EngineUnavailable, GenerationFailed, PemlineError
from .state import KeyPairResult, Notifier, SessionState

logger = logging.getLogger(__name__)


class KeyPairGenerator:
    """
    Runs one RSA key-pair generation against a session.

    The engine produces and exports the keys; this class turns the exported
    DER bytes into one-line PEM strings and installs them into the session
    state. Failures never leave a half-written key pair behind.
    """

    def __init__(self, engine: Optional[CryptoEngine] = None) -> None:
        self.engine = engine if engine is not None else CryptographyEngine()

    async def generate(
        self,
        state: SessionState,
        notifier: Notifier,
        modulus_size: Optional[int] = None,
    ) -> Optional[KeyPairResult]:
        """
        Generate a key pair and install it into `state`.

        Args:
            state: Session state to update.
            notifier: Receives the success notification.
            modulus_size: Key size in bits. Defaults to `state.modulus_size`.

        Returns:
            The new KeyPairResult, or None if generation failed. On failure
            `state.error_text` holds a user-facing message and the previous
            keys are left untouched.

        Raises:
            AlreadyInProgress: If `state` already has a generation running.
            ValueError: If the modulus size is not supported.
        """
        if state.is_generating:
            raise AlreadyInProgress("A key generation is already running")

        size = validate_modulus_size(
            state.modulus_size if modulus_size is None else modulus_size
        )

        state.is_generating = True
        state.error_text = ""
        try:
            result = await self._build(size)
        except PemlineError as e:
            logger.error("RSA-%d key generation failed", size, exc_info=True)
            state.error_text = e.user_message
            return None
        finally:
            state.is_generating = False

        state.key_pair = result
        state.error_text = ""
        notifier.notify(MSG_GENERATED)
        logger.debug("Generated RSA-%d key pair", size)
        return result

    async def _build(self, size: int) -> KeyPairResult:
        try:
            available = self.engine.is_available()
        except Exception as e:
            raise EngineUnavailable("Crypto engine availability check failed") from e
        if not available:
            raise EngineUnavailable("Crypto engine reported itself unavailable")

        descriptor = AlgorithmDescriptor(modulus_length=size)
        try:
            pair = await self.engine.generate_key_pair(descriptor)
            public_der = await self.engine.export_key(FORMAT_SPKI, pair.public_key)
            private_der = await self.engine.export_key(FORMAT_PKCS8, pair.private_key)
            return KeyPairResult(
                public_one_line=to_one_line(der_to_pem(public_der, PUBLIC_LABEL)),
                private_one_line=to_one_line(der_to_pem(private_der, PRIVATE_LABEL)),
            )
        except Exception as e:
            raise GenerationFailed(f"Engine failed for {descriptor!r}") from e
