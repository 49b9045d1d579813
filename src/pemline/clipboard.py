from __future__ import annotations

import asyncio
import os
import shutil
import subprocess
import sys
from typing import List, Optional, Protocol, Sequence


class Clipboard(Protocol):
    """Contract for the system clipboard. `write_text` raises on failure."""

    async def write_text(self, text: str) -> None: ...


def _candidate_commands() -> List[List[str]]:
    """
    Clipboard commands to try for the current platform, in order.

    Returns:
        List of argv lists. The first one whose executable is on PATH is used.
    """
    if sys.platform == "darwin":
        return [["pbcopy"]]
    if sys.platform == "win32":
        return [["clip"]]

    candidates: List[List[str]] = []
    if os.environ.get("WAYLAND_DISPLAY"):
        candidates.append(["wl-copy"])
    candidates += [
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ]
    return candidates


class SystemClipboard:
    """
    Clipboard backed by the platform's clipboard command.

    Uses pbcopy on macOS, clip on Windows and wl-copy, xclip or xsel on
    Linux. These tools keep owning the selection after this process exits,
    so the copied text survives the end of the session. The command runs in
    a worker thread.

    Attributes:
        command: Explicit argv to use instead of searching PATH.
    """

    def __init__(self, command: Optional[Sequence[str]] = None) -> None:
        self.command = list(command) if command else None

    def resolve_command(self) -> List[str]:
        """
        Pick the clipboard command to run.

        Raises:
            RuntimeError: If no supported clipboard command is on PATH.
        """
        if self.command:
            return self.command
        for cmd in _candidate_commands():
            if shutil.which(cmd[0]):
                return cmd
        tried = ", ".join(c[0] for c in _candidate_commands())
        raise RuntimeError(f"No clipboard command found on PATH (tried: {tried})")

    def _write(self, text: str) -> None:
        # xclip/xsel fork a child that holds the selection; it must not
        # inherit our pipes or run() would wait for it.
        subprocess.run(
            self.resolve_command(),
            input=text.encode("utf-8"),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=True,
        )

    async def write_text(self, text: str) -> None:
        await asyncio.to_thread(self._write, text)
