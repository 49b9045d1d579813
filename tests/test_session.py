import asyncio
import logging

import pytest

from pemline.errors import ClipboardWriteFailed
from pemline.session import Session
from pemline.state import KeyPairResult, Notifier, SessionState
from pemline.testing_utils import FakeClipboard, FakeEngine, ManualScheduler


def test_session_state_defaults():
    state = SessionState()

    assert state.modulus_size == 2048
    assert state.is_generating is False
    assert state.key_pair is None
    assert state.public_one_line == ""
    assert state.private_one_line == ""
    assert state.error_text == ""
    assert state.notification_text == ""
    assert state.combined_export == ""
    assert not state.has_keys


def test_combined_export_format():
    state = SessionState(key_pair=KeyPairResult("PUB", "PRIV"))
    assert state.combined_export == "PUBLIC_KEY=PUB\n\nPRIVATE_KEY=PRIV"


def test_combined_export_requires_both_keys():
    assert SessionState(key_pair=KeyPairResult("PUB", "")).combined_export == ""
    assert SessionState(key_pair=KeyPairResult("", "PRIV")).combined_export == ""


@pytest.mark.parametrize("size", [2048, 3072, 4096, "4096"])
def test_select_modulus_size_accepts_supported_sizes(size):
    state = SessionState()
    state.select_modulus_size(size)
    assert state.modulus_size == int(size)


@pytest.mark.parametrize(
    "size", [1024, 8192, 0, "big", None, 2048.9, 4095.5, True, float("inf"), float("nan")]
)
def test_select_modulus_size_rejects_others(size):
    state = SessionState()
    with pytest.raises(ValueError):
        state.select_modulus_size(size)
    assert state.modulus_size == 2048


def test_notification_expires_after_two_seconds():
    state = SessionState()
    clock = ManualScheduler()
    notifier = Notifier(state, scheduler=clock)

    notifier.notify("X")
    assert state.notification_text == "X"

    clock.advance(1.5)
    assert state.notification_text == "X"

    clock.advance(0.5)
    assert state.notification_text == ""


def test_new_notification_restarts_timer():
    state = SessionState()
    clock = ManualScheduler()
    notifier = Notifier(state, scheduler=clock)

    notifier.notify("X")
    clock.advance(1.0)
    notifier.notify("Y")
    assert len(clock.pending) == 1

    clock.advance(1.5)
    assert state.notification_text == "Y"

    clock.advance(0.5)
    assert state.notification_text == ""
    assert clock.pending == []


def test_notifier_uses_running_loop_by_default():
    async def scenario():
        state = SessionState()
        notifier = Notifier(state, ttl=0.01)
        notifier.notify("hello")
        seen = state.notification_text
        await asyncio.sleep(0.05)
        return seen, state.notification_text

    assert asyncio.run(scenario()) == ("hello", "")


def test_copy_empty_text_is_a_no_op(session, fake_clipboard, manual_scheduler):
    copied = asyncio.run(session.copy_to_clipboard("", "msg"))

    assert copied is False
    assert fake_clipboard.writes == []
    assert session.state.notification_text == ""
    assert manual_scheduler.pending == []


def test_copy_success_notifies(session, fake_clipboard, manual_scheduler):
    copied = asyncio.run(session.copy_to_clipboard("secret", "Copied!"))

    assert copied is True
    assert fake_clipboard.text == "secret"
    assert session.state.notification_text == "Copied!"

    manual_scheduler.advance(2.0)
    assert session.state.notification_text == ""


def test_copy_failure_sets_error_and_keeps_notification(caplog):
    clipboard = FakeClipboard(fail=True)
    session = Session(engine=FakeEngine(), clipboard=clipboard, scheduler=ManualScheduler())
    session.state.notification_text = "Keys generated successfully"

    with caplog.at_level(logging.ERROR, logger="pemline.session"):
        copied = asyncio.run(session.copy_to_clipboard("secret", "Copied!"))

    assert copied is False
    assert session.state.error_text == ClipboardWriteFailed.user_message
    assert "denied" not in session.state.error_text
    assert session.state.notification_text == "Keys generated successfully"
    assert any("denied" in str(r.exc_info[1]) for r in caplog.records if r.exc_info)


def test_copy_shortcuts_after_generation(session, fake_clipboard):
    async def scenario():
        await session.generate()
        await session.copy_public()
        public_msg = session.state.notification_text
        await session.copy_private()
        private_msg = session.state.notification_text
        await session.copy_both()
        return public_msg, private_msg

    public_msg, private_msg = asyncio.run(scenario())
    state = session.state

    assert fake_clipboard.writes == [
        state.public_one_line,
        state.private_one_line,
        state.combined_export,
    ]
    assert public_msg == "Public key copied"
    assert private_msg == "Private key copied"
    assert state.notification_text == "Both keys copied"


def test_copy_shortcuts_without_keys_do_nothing(session, fake_clipboard):
    async def scenario():
        return [
            await session.copy_public(),
            await session.copy_private(),
            await session.copy_both(),
        ]

    assert asyncio.run(scenario()) == [False, False, False]
    assert fake_clipboard.writes == []


def test_copy_shortcuts_disabled_while_generating(session, fake_clipboard):
    session.state.key_pair = KeyPairResult("PUB", "PRIV")
    session.state.is_generating = True

    assert asyncio.run(session.copy_both()) is False
    assert fake_clipboard.writes == []


def test_session_context_releases_notification_timer():
    clock = ManualScheduler()

    async def scenario():
        async with Session(engine=FakeEngine(), clipboard=FakeClipboard(), scheduler=clock) as s:
            await s.generate()
            assert len(clock.pending) == 1
        return s

    session = asyncio.run(scenario())

    assert clock.pending == []
    assert session.state.notification_text == "Keys generated successfully"


def test_select_modulus_size_accepts_whole_float():
    state = SessionState()
    state.select_modulus_size(4096.0)
    assert state.modulus_size == 4096
    assert isinstance(state.modulus_size, int)
