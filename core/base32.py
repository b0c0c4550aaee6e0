"""
Lenient RFC 4648 Base32 codec for shared secrets.

Authenticator apps display secrets in groups, in lower case, sometimes with
padding or dashes.  Decoding keeps only characters of the Base32 alphabet and
never raises; deciding whether the resulting key is usable is the engine's job.
"""

import base64
from typing import Optional

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

_VALUES: dict[str, int] = {ch: i for i, ch in enumerate(ALPHABET)}


def normalize_secret(secret: Optional[str]) -> str:
    """
    Reduce a user-supplied secret to its Base32 alphabet characters.

    Args:
        secret: Raw secret string (may be None).

    Returns:
        Uppercase string containing only ``A-Z`` and ``2-7``.
    """
    if not secret:
        return ""
    return "".join(ch for ch in secret.upper() if ch in _VALUES)


def decode_secret(secret: Optional[str]) -> bytes:
    """
    Decode a Base32 secret into raw key bytes.

    Bits are accumulated MSB-first; each time eight or more are buffered the
    top eight are emitted.  Trailing bits that do not fill a byte are dropped,
    so the result is ``len(normalized) * 5 // 8`` bytes long.

    Args:
        secret: Base32 secret; whitespace, padding and other characters
                outside the alphabet are skipped.

    Returns:
        Raw bytes (empty for empty or fully invalid input).
    """
    out = bytearray()
    buffer = 0
    bits = 0
    for ch in normalize_secret(secret):
        buffer = (buffer << 5) | _VALUES[ch]
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1
    return bytes(out)


def encode_secret(raw: bytes) -> str:
    """Encode raw bytes as a base32 string (no padding)."""
    return base64.b32encode(raw).decode("ascii").rstrip("=")
