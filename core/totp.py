"""
TOTP (Time-based One-Time Password) implementation following RFC 6238.

Produces codes identical to Google Authenticator with the default
parameters (SHA1, 6 digits, 30 second step).
"""

import hmac
import time
from typing import Optional, Union

from core.errors import ConfigurationError
from core.hotp import Algorithm, MAX_COUNTER, _hotp_value, check_counter, load_key, resolve_algorithm
from core.utils import validate_digits, validate_period

TIME_STEP = 30
DIGITS = 6


def get_time_step() -> int:
    """Return the standard time step in seconds."""
    return TIME_STEP


def time_counter(timestamp: Optional[float] = None, period: int = TIME_STEP) -> int:
    """
    Return the RFC 6238 counter ``floor(timestamp / period)``.

    Raises:
        ConfigurationError: If ``period`` is invalid or the time is negative
                            or past the 64-bit counter range.
    """
    validate_period(period)
    t = timestamp if timestamp is not None else time.time()
    if t < 0:
        raise ConfigurationError(f"Timestamp must not be negative, got {t!r}.")
    counter = int(t) // period
    check_counter(counter)
    return counter


def generate_totp(
    secret: str,
    timestamp: Optional[float] = None,
    period: int = TIME_STEP,
    digits: int = DIGITS,
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
) -> str:
    """
    Generate a TOTP code.

    Args:
        secret:    Base32 secret (case, spaces and padding are ignored).
        timestamp: Override Unix timestamp (uses time.time() if None).
        period:    Time step in seconds (default 30).
        digits:    Number of digits in the OTP (default 6, at most 9).
        algorithm: HMAC algorithm (default SHA1 for GA compatibility).

    Returns:
        OTP string, zero-padded to ``digits`` characters.

    Raises:
        ConfigurationError: On unsupported digits, period or algorithm.
        InvalidSecretError: If the secret decodes to an empty key.
    """
    validate_digits(digits)
    alg_name = resolve_algorithm(algorithm)
    counter = time_counter(timestamp, period)
    key = load_key(secret)
    return _hotp_value(key, counter, digits, alg_name)


def remaining_seconds(period: int = TIME_STEP, timestamp: Optional[float] = None) -> int:
    """Return seconds until the current TOTP window expires, in ``[1, period]``."""
    validate_period(period)
    t = timestamp if timestamp is not None else time.time()
    return period - (int(t) % period)


def validate_totp(
    secret: str,
    token: Optional[str],
    timestamp: Optional[float] = None,
    period: int = TIME_STEP,
    digits: int = DIGITS,
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
    window: int = 0,
) -> bool:
    """
    Validate a TOTP token.

    With the default ``window=0`` only the current time step is accepted.
    A positive ``window`` also accepts that many steps on either side to
    absorb authenticator clock drift.

    Args:
        secret:    Base32 secret.
        token:     Token to validate.
        timestamp: Override Unix timestamp.
        period:    Time step in seconds.
        digits:    Expected number of digits.
        algorithm: HMAC algorithm.
        window:    Allowed skew in steps (default 0).

    Returns:
        True if the token matches.
    """
    validate_digits(digits)
    alg_name = resolve_algorithm(algorithm)
    if window < 0:
        raise ConfigurationError("Window must be non-negative.")
    counter = time_counter(timestamp, period)
    key = load_key(secret)
    if token is None:
        return False

    candidate = token.strip().encode()
    for step in range(-window, window + 1):
        if not 0 <= counter + step <= MAX_COUNTER:
            continue
        expected = _hotp_value(key, counter + step, digits, alg_name)
        if hmac.compare_digest(candidate, expected.encode()):
            return True
    return False
