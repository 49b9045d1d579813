from __future__ import annotations

from typing import Tuple


KEY_SIZES: Tuple[int, ...] = (2048, 3072, 4096)
DEFAULT_MODULUS_SIZE = 2048

# 65537 as a 3-byte big-endian value
PUBLIC_EXPONENT = b"\x01\x00\x01"
HASH_NAME = "SHA-256"
ALGORITHM_KIND = "RSA-OAEP"
KEY_USAGES: Tuple[str, ...] = ("encrypt", "decrypt")

PEM_LINE_WIDTH = 64
PUBLIC_LABEL = "PUBLIC KEY"
PRIVATE_LABEL = "PRIVATE KEY"

NOTIFICATION_TTL = 2.0

MSG_GENERATED = "Keys generated successfully"
MSG_PUBLIC_COPIED = "Public key copied"
MSG_PRIVATE_COPIED = "Private key copied"
MSG_BOTH_COPIED = "Both keys copied"

SECURITY_NOTE = (
    "Security note: demo/testing only. Do not use generated keys in production."
)


def validate_modulus_size(size: int) -> int:
    """
    Check that a modulus size is one of the supported RSA key sizes.

    Args:
        size: Requested modulus length in bits.

    Returns:
        The size as an int.

    Raises:
        ValueError: If the size is not listed in KEY_SIZES.
    """
    if isinstance(size, bool):
        raise ValueError(f"Invalid modulus size: {size!r}")
    try:
        value = int(size)
    except (TypeError, ValueError, OverflowError) as e:
        raise ValueError(f"Invalid modulus size: {size!r}") from e
    if isinstance(size, float) and value != size:
        raise ValueError(f"Modulus size must be a whole number of bits: {size!r}")
    if value not in KEY_SIZES:
        raise ValueError(
            f"Unsupported modulus size {value}. Expected one of {list(KEY_SIZES)}."
        )
    return value
