from pemline.testing_utils import (  # noqa: F401
    fake_clipboard,
    fake_engine,
    manual_scheduler,
    session,
)
