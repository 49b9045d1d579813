from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .config import DEFAULT_MODULUS_SIZE, NOTIFICATION_TTL, validate_modulus_size
from .errors import AlreadyInProgress


# (delay_seconds, callback) -> handle with .cancel()
Scheduler = Callable[[float, Callable[[], None]], Any]


@dataclass(frozen=True)
class KeyPairResult:
    """
    Both keys of one generation, as one-line PEM strings.

    Attributes:
        public_one_line: SPKI public key, PEM with escaped newlines.
        private_one_line: PKCS8 private key, PEM with escaped newlines.
    """

    public_one_line: str
    private_one_line: str


@dataclass
class SessionState:
    """
    Mutable state of one key-generation session.

    Nothing here is persisted. `key_pair` is only ever replaced as a whole,
    so the two keys are either both present or both absent.
    """

    modulus_size: int = DEFAULT_MODULUS_SIZE
    is_generating: bool = False
    key_pair: Optional[KeyPairResult] = None
    error_text: str = ""
    notification_text: str = ""

    @property
    def public_one_line(self) -> str:
        return self.key_pair.public_one_line if self.key_pair else ""

    @property
    def private_one_line(self) -> str:
        return self.key_pair.private_one_line if self.key_pair else ""

    @property
    def has_keys(self) -> bool:
        """True when a regeneration would discard existing keys."""
        return bool(self.public_one_line and self.private_one_line)

    @property
    def combined_export(self) -> str:
        """
        Both keys as two .env-style assignments separated by a blank line.

        Returns "" unless both keys are present.
        """
        if not self.has_keys:
            return ""
        return f"PUBLIC_KEY={self.public_one_line}\n\nPRIVATE_KEY={self.private_one_line}"

    def select_modulus_size(self, size: int) -> None:
        """
        Choose the modulus size for the next generation.

        Raises:
            ValueError: If the size is not supported.
            AlreadyInProgress: If a generation is running.
        """
        if self.is_generating:
            raise AlreadyInProgress("Cannot change modulus size while generating")
        self.modulus_size = validate_modulus_size(size)


class Notifier:
    """
    Transient notification with automatic expiry.

    `notify` replaces the current message and restarts the expiry timer.
    There is at most one pending expiry at any time.
    """

    def __init__(
        self,
        state: SessionState,
        *,
        ttl: float = NOTIFICATION_TTL,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.state = state
        self.ttl = ttl
        self._scheduler = scheduler
        self._handle: Optional[Any] = None

    def _schedule(self, delay: float, callback: Callable[[], None]) -> Any:
        if self._scheduler is not None:
            return self._scheduler(delay, callback)
        return asyncio.get_running_loop().call_later(delay, callback)

    def _expire(self) -> None:
        self._handle = None
        self.state.notification_text = ""

    def notify(self, text: str) -> None:
        self.cancel()
        self.state.notification_text = text
        self._handle = self._schedule(self.ttl, self._expire)

    def cancel(self) -> None:
        """Drop the pending expiry, if any, leaving the text in place."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
