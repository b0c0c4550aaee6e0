"""
HOTP (HMAC-based One-Time Password) implementation following RFC 4226.

Secrets are taken in their Base32 form; see :mod:`core.base32` for how they
are decoded.
"""

import hmac
import struct
from enum import Enum
from typing import Optional, Union

from core.base32 import decode_secret
from core.errors import ConfigurationError, InvalidSecretError
from core.utils import validate_digits


class Algorithm(str, Enum):
    """Supported HMAC algorithms."""

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"


MAX_COUNTER = 2**64 - 1

_ALG_MAP: dict[str, str] = {
    Algorithm.SHA1: "sha1",
    Algorithm.SHA256: "sha256",
    Algorithm.SHA512: "sha512",
}


def resolve_algorithm(algorithm: Union[Algorithm, str]) -> str:
    """
    Map an :class:`Algorithm` (or its name, e.g. ``"sha-256"``) to the
    hashlib digest name.

    Raises:
        ConfigurationError: If the algorithm is not supported.
    """
    if isinstance(algorithm, Algorithm):
        return _ALG_MAP[algorithm]
    name = str(algorithm).strip().upper().replace("-", "")
    try:
        return _ALG_MAP[Algorithm(name)]
    except ValueError:
        raise ConfigurationError(
            f"Unsupported algorithm '{algorithm}'. Supported: SHA1, SHA256, SHA512."
        ) from None


def check_counter(counter: int) -> None:
    """Raise ConfigurationError unless ``counter`` fits an unsigned 64-bit field."""
    if not 0 <= counter <= MAX_COUNTER:
        raise ConfigurationError(f"Counter must be between 0 and 2**64 - 1, got {counter!r}.")


def load_key(secret: Optional[str]) -> bytes:
    """
    Decode ``secret`` and refuse to continue with an empty key.

    Raises:
        InvalidSecretError: If the secret is empty or has no Base32 characters.
    """
    if not secret:
        raise InvalidSecretError("OTP secret is empty.")
    key = decode_secret(secret)
    if not key:
        raise InvalidSecretError("OTP secret does not decode to any key bytes.")
    return key


def _hotp_value(key: bytes, counter: int, digits: int, algorithm: str) -> str:
    """
    Core HOTP computation (RFC 4226 §5).

    Args:
        key:       Raw decoded secret.
        counter:   8-byte counter value.
        digits:    Number of OTP digits.
        algorithm: Hash algorithm name (sha1 / sha256 / sha512).

    Returns:
        Zero-padded OTP string.
    """
    msg = struct.pack(">Q", counter)
    digest = hmac.new(key, msg, algorithm).digest()

    # Dynamic truncation
    offset = digest[-1] & 0x0F
    code = struct.unpack(">I", digest[offset : offset + 4])[0] & 0x7FFFFFFF
    otp = code % (10**digits)
    return str(otp).zfill(digits)


def generate_hotp(
    secret: str,
    counter: int,
    digits: int = 6,
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
) -> str:
    """
    Generate an HOTP code.

    Args:
        secret:    Base32 secret.
        counter:   Synchronisation counter value (non-negative).
        digits:    Number of OTP digits (1-9).
        algorithm: HMAC algorithm.

    Returns:
        Zero-padded OTP string.

    Raises:
        ConfigurationError: On unsupported parameters.
        InvalidSecretError: If the secret yields an empty key.
    """
    validate_digits(digits)
    alg_name = resolve_algorithm(algorithm)
    check_counter(counter)
    key = load_key(secret)
    return _hotp_value(key, counter, digits, alg_name)


def validate_hotp(
    secret: str,
    token: Optional[str],
    counter: int,
    digits: int = 6,
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
    look_ahead: int = 10,
) -> Optional[int]:
    """
    Validate an HOTP token and return the synchronised counter value.

    Args:
        secret:      Base32 secret.
        token:       Token to validate.
        counter:     Current counter.
        digits:      Expected OTP length.
        algorithm:   HMAC algorithm.
        look_ahead:  Max steps to search ahead for resync.

    Returns:
        The new counter value if valid, or None if invalid.
    """
    validate_digits(digits)
    alg_name = resolve_algorithm(algorithm)
    check_counter(counter)
    key = load_key(secret)
    if token is None:
        return None

    for i in range(min(look_ahead, MAX_COUNTER - counter) + 1):
        expected = _hotp_value(key, counter + i, digits, alg_name)
        if hmac.compare_digest(token.strip().encode(), expected.encode()):
            return counter + i + 1
    return None
