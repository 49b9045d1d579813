from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from typing import List, Optional

from .config import PEM_LINE_WIDTH
from .errors import PemFormatError


ONE_LINE_SEPARATOR = "\\n"

_LINE_BREAK = re.compile(r"\r?\n")
_BEGIN = re.compile(r"^-----BEGIN (?P<label>[^-]+)-----$")
_END = re.compile(r"^-----END (?P<label>[^-]+)-----$")


@dataclass(frozen=True)
class PemBlock:
    """
    One BEGIN/END block read back from PEM text.

    Attributes:
        label: The label between the BEGIN/END markers (e.g. "PUBLIC KEY").
        data: The decoded DER bytes of the block body.
    """

    label: str
    data: bytes


def encode_base64(data: bytes) -> str:
    """
    Encode bytes with the standard Base64 alphabet, padded, without line breaks.

    Args:
        data: Bytes to encode. May be empty.

    Returns:
        ASCII Base64 string.
    """
    return base64.b64encode(bytes(data)).decode("ascii")


def wrap_pem(b64: str, label: str) -> str:
    """
    Frame a Base64 payload as a PEM block.

    The payload is split into lines of PEM_LINE_WIDTH characters (the last
    line may be shorter) and surrounded by BEGIN/END markers using `label`
    verbatim. Lines are joined with "\\n" and there is no trailing newline.
    An empty payload produces a block with no body lines.

    Args:
        b64: Base64 text with no line breaks.
        label: PEM label, e.g. "PUBLIC KEY".

    Returns:
        PEM text.
    """
    body = [b64[i : i + PEM_LINE_WIDTH] for i in range(0, len(b64), PEM_LINE_WIDTH)]
    lines = [f"-----BEGIN {label}-----", *body, f"-----END {label}-----"]
    return "\n".join(lines)


def der_to_pem(data: bytes, label: str) -> str:
    """Base64-encode DER bytes and wrap them as a PEM block."""
    return wrap_pem(encode_base64(data), label)


def to_one_line(pem: str) -> str:
    """
    Collapse PEM text into a single line.

    Every "\\n" or "\\r\\n" terminator becomes the two characters backslash
    and "n", so the value fits in a .env entry or a JSON string.
    """
    return _LINE_BREAK.sub(lambda _m: ONE_LINE_SEPARATOR, pem)


def from_one_line(text: str) -> str:
    """Expand every literal backslash-n sequence back into a line break."""
    return text.replace(ONE_LINE_SEPARATOR, "\n")


def parse_pem_blocks(pem: str) -> List[PemBlock]:
    """
    Read every BEGIN/END block out of PEM text.

    Text outside of blocks is ignored. Both "\\n" and "\\r\\n" line endings
    are accepted.

    Args:
        pem: Multi-line PEM text.

    Returns:
        Blocks in the order they appear.

    Raises:
        PemFormatError: If a block is left open, the END label does not match
                        its BEGIN label, or a body is not valid Base64.
    """
    blocks: List[PemBlock] = []
    label: Optional[str] = None
    body: List[str] = []

    for raw in _LINE_BREAK.split(pem):
        line = raw.strip()
        if label is None:
            m = _BEGIN.match(line)
            if m:
                label = m.group("label")
                body = []
            continue

        m = _END.match(line)
        if m:
            if m.group("label") != label:
                raise PemFormatError(
                    f"END label {m.group('label')!r} does not match BEGIN label {label!r}"
                )
            try:
                data = base64.b64decode("".join(body), validate=True)
            except (binascii.Error, ValueError) as e:
                raise PemFormatError(f"Invalid Base64 body in {label!r} block") from e
            blocks.append(PemBlock(label=label, data=data))
            label = None
            continue

        if _BEGIN.match(line):
            raise PemFormatError(f"Nested BEGIN inside {label!r} block")
        body.append(line)

    if label is not None:
        raise PemFormatError(f"Unterminated {label!r} block")

    return blocks
