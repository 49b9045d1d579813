from __future__ import annotations

import logging
from typing import Optional

from .clipboard import Clipboard, SystemClipboard
from .config import MSG_BOTH_COPIED, MSG_PRIVATE_COPIED, MSG_PUBLIC_COPIED
from .engine import CryptoEngine
from .errors import ClipboardWriteFailed
from .generator import KeyPairGenerator
from .state import KeyPairResult, Notifier, Scheduler, SessionState

logger = logging.getLogger(__name__)


class Session:
    """
    One interactive key-generation session.

    Owns the SessionState and the collaborators that act on it:

    **Generation:**
      - generate(): run the KeyPairGenerator with the selected modulus size

    **Copy actions:**
      - copy_to_clipboard(text, success_message): generic copy with notification
      - copy_public(), copy_private(), copy_both(): copy the current keys;
        these do nothing while a generation is running

    Use as an async context manager so the notification timer is released
    when the session ends.
    """

    def __init__(
        self,
        *,
        engine: Optional[CryptoEngine] = None,
        clipboard: Optional[Clipboard] = None,
        scheduler: Optional[Scheduler] = None,
        state: Optional[SessionState] = None,
    ) -> None:
        self.state = state if state is not None else SessionState()
        self.notifier = Notifier(self.state, scheduler=scheduler)
        self.generator = KeyPairGenerator(engine)
        self.clipboard = clipboard if clipboard is not None else SystemClipboard()

    async def __aenter__(self) -> "Session":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.notifier.cancel()

    async def generate(self, modulus_size: Optional[int] = None) -> Optional[KeyPairResult]:
        """Generate a key pair. See KeyPairGenerator.generate."""
        return await self.generator.generate(self.state, self.notifier, modulus_size)

    async def copy_to_clipboard(self, text: str, success_message: str) -> bool:
        """
        Put `text` on the clipboard and notify on success.

        Empty text is ignored: no clipboard call, no notification. On failure
        `state.error_text` is set and the notification is left alone.

        Returns:
            True if the text was copied.
        """
        if not text:
            return False

        try:
            await self.clipboard.write_text(text)
        except Exception:
            logger.exception("Clipboard write failed")
            self.state.error_text = ClipboardWriteFailed.user_message
            return False

        self.notifier.notify(success_message)
        return True

    async def copy_public(self) -> bool:
        if self.state.is_generating:
            return False
        return await self.copy_to_clipboard(self.state.public_one_line, MSG_PUBLIC_COPIED)

    async def copy_private(self) -> bool:
        if self.state.is_generating:
            return False
        return await self.copy_to_clipboard(self.state.private_one_line, MSG_PRIVATE_COPIED)

    async def copy_both(self) -> bool:
        if self.state.is_generating:
            return False
        return await self.copy_to_clipboard(self.state.combined_export, MSG_BOTH_COPIED)
