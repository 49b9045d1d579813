from .codec import (
    encode_base64,
    wrap_pem,
    der_to_pem,
    to_one_line,
    from_one_line,
    parse_pem_blocks,
    PemBlock,
)
from .config import KEY_SIZES, DEFAULT_MODULUS_SIZE, validate_modulus_size
from .engine import AlgorithmDescriptor, CryptoEngine, CryptographyEngine, GeneratedKeyPair
from .clipboard import Clipboard, SystemClipboard
from .errors import (
    PemlineError,
    EngineUnavailable,
    GenerationFailed,
    AlreadyInProgress,
    ClipboardWriteFailed,
    PemFormatError,
)
from .state import KeyPairResult, Notifier, SessionState
from .generator import KeyPairGenerator
from .session import Session

__version__ = "0.1.0"

__all__ = [
    "encode_base64",
    "wrap_pem",
    "der_to_pem",
    "to_one_line",
    "from_one_line",
    "parse_pem_blocks",
    "PemBlock",
    "KEY_SIZES",
    "DEFAULT_MODULUS_SIZE",
    "validate_modulus_size",
    "AlgorithmDescriptor",
    "CryptoEngine",
    "CryptographyEngine",
    "GeneratedKeyPair",
    "Clipboard",
    "SystemClipboard",
    "PemlineError",
    "EngineUnavailable",
    "GenerationFailed",
    "AlreadyInProgress",
    "ClipboardWriteFailed",
    "PemFormatError",
    "KeyPairResult",
    "Notifier",
    "SessionState",
    "KeyPairGenerator",
    "Session",
]

# Testing utilities - conditionally imported to avoid pytest dependency in production
try:
    from .testing_utils import FakeEngine, FakeClipboard, ManualScheduler

    __all__ += ["FakeEngine", "FakeClipboard", "ManualScheduler"]
except ImportError:
    # pytest not available, testing utilities not exported
    pass
