"""
Testing utilities for pemline - for use in packages that drive a pemline Session.

Provides:
1. In-memory fakes for the external collaborators (crypto engine, clipboard,
   timer scheduler) so sessions can be exercised without OpenSSL work,
   a display, or real waiting.
2. Pytest fixtures wiring those fakes into a Session.

Typical conftest.py:

    from pemline.testing_utils import fake_engine, fake_clipboard, manual_scheduler, session
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

import pytest

from .engine import FORMAT_PKCS8, FORMAT_SPKI, AlgorithmDescriptor, GeneratedKeyPair
from .session import Session


DEFAULT_PUBLIC_DER = bytes(range(256)) + bytes(38)
DEFAULT_PRIVATE_DER = bytes(reversed(range(256))) * 4 + bytes(194)


class FakeEngine:
    """
    CryptoEngine returning fixed DER bytes.

    Attributes:
        available: Value reported by is_available().
        fail_on: "generate" or "export" to raise RuntimeError at that step.
        gate: If set, generate_key_pair waits on this event before returning,
              which keeps a generation in flight for as long as a test needs.
        requests: Every descriptor passed to generate_key_pair.
    """

    def __init__(
        self,
        *,
        public_der: bytes = DEFAULT_PUBLIC_DER,
        private_der: bytes = DEFAULT_PRIVATE_DER,
        available: bool = True,
        fail_on: Optional[str] = None,
        gate: Optional[asyncio.Event] = None,
    ) -> None:
        self.public_der = public_der
        self.private_der = private_der
        self.available = available
        self.fail_on = fail_on
        self.gate = gate
        self.requests: List[AlgorithmDescriptor] = []
        self.exports: List[str] = []

    def is_available(self) -> bool:
        return self.available

    async def generate_key_pair(self, descriptor: AlgorithmDescriptor) -> GeneratedKeyPair:
        self.requests.append(descriptor)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_on == "generate":
            raise RuntimeError("fake engine: generation refused")
        return GeneratedKeyPair(public_key="public-handle", private_key="private-handle")

    async def export_key(self, fmt: str, key: Any) -> bytes:
        self.exports.append(fmt)
        if self.fail_on == "export":
            raise RuntimeError("fake engine: export refused")
        if fmt == FORMAT_SPKI:
            return self.public_der
        if fmt == FORMAT_PKCS8:
            return self.private_der
        raise ValueError(f"Unsupported export format: {fmt!r}")


class FakeClipboard:
    """Clipboard recording writes. Set `fail=True` to make writes raise."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.writes: List[str] = []

    async def write_text(self, text: str) -> None:
        if self.fail:
            raise PermissionError("fake clipboard: write denied")
        self.writes.append(text)

    @property
    def text(self) -> str:
        return self.writes[-1] if self.writes else ""


@dataclass
class _Timer:
    when: float
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualScheduler:
    """
    Scheduler with a hand-driven clock, compatible with Notifier.

    Call `advance(seconds)` to move time forward and fire due callbacks.
    """

    now: float = 0.0
    timers: List[_Timer] = field(default_factory=list)

    def __call__(self, delay: float, callback: Callable[[], None]) -> _Timer:
        timer = _Timer(when=self.now + delay, callback=callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> List[_Timer]:
        return [t for t in self.timers if not t.cancelled]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [t for t in self.pending if t.when <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.when)
            self.timers.remove(timer)
            self.now = timer.when
            timer.callback()
        self.now = target


# ============================================================================
# Pytest fixtures
# ============================================================================


@pytest.fixture
def fake_engine():
    """FakeEngine with default DER payloads."""
    return FakeEngine()


@pytest.fixture
def fake_clipboard():
    """FakeClipboard that accepts every write."""
    return FakeClipboard()


@pytest.fixture
def manual_scheduler():
    """ManualScheduler starting at t=0."""
    return ManualScheduler()


@pytest.fixture
def session(fake_engine, fake_clipboard, manual_scheduler):
    """
    Session wired to the fake engine, fake clipboard and manual scheduler.

    The notification timer is released when the test finishes.
    """
    s = Session(engine=fake_engine, clipboard=fake_clipboard, scheduler=manual_scheduler)
    yield s
    s.close()
