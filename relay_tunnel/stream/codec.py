"""Web-safe base64 transcoding for relay payloads.

The relay carries data in URL query strings and response bodies using the
URL-safe alphabet (`-` and `_` instead of `+` and `/`) with padding removed.
"""

from __future__ import annotations

import base64
import binascii

from relay_tunnel.errors import MalformedEncodingError

_TO_URL_SAFE = str.maketrans({"+": "-", "/": "_", "=": None})
_FROM_URL_SAFE = str.maketrans({"-": "+", "_": "/"})

_PADDING_BY_REMAINDER = {0: "", 2: "==", 3: "="}


def to_url_safe(standard: str) -> str:
    return standard.translate(_TO_URL_SAFE)


def from_url_safe(encoded: str) -> str:
    """Restore standard, padded base64 from its web-safe form.

    A length remainder of 1 (mod 4) cannot come from any byte sequence, so it
    is reported as corrupt input rather than guessed at.
    """
    standard = encoded.translate(_FROM_URL_SAFE)
    padding = _PADDING_BY_REMAINDER.get(len(standard) % 4)
    if padding is None:
        raise MalformedEncodingError(
            length=len(standard),
            detail=f"invalid web safe base64 string length: {len(standard)}",
        )
    return standard + padding


def encode_bytes(data: bytes) -> str:
    return to_url_safe(base64.b64encode(data).decode("ascii"))


def decode_bytes(encoded: str) -> bytes:
    standard = from_url_safe(encoded)
    try:
        return base64.b64decode(standard, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedEncodingError(length=len(encoded), detail=str(exc)) from exc


def approx_decoded_length(encoded_length: int) -> int:
    # Counted on the transmitted (unpadded) text; the relay counts the same way.
    return encoded_length * 3 // 4


__all__ = [
    "approx_decoded_length",
    "decode_bytes",
    "encode_bytes",
    "from_url_safe",
    "to_url_safe",
]
