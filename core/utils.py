"""
Utility helpers for freshotp.
"""

from core.errors import ConfigurationError

MAX_DIGITS = 9


# ── Validation ────────────────────────────────────────────────────────────────

def validate_digits(digits: int) -> None:
    # 10**9 is the largest modulus that still fits the 31-bit truncated value
    if isinstance(digits, bool) or not isinstance(digits, int) or not 1 <= digits <= MAX_DIGITS:
        raise ConfigurationError(f"Digits must be between 1 and {MAX_DIGITS}, got {digits!r}.")


def validate_period(period: int) -> None:
    if isinstance(period, bool) or not isinstance(period, int) or period < 1:
        raise ConfigurationError(f"Period must be a positive number of seconds, got {period!r}.")


# ── Display ───────────────────────────────────────────────────────────────────

def format_otp(code: str, group: int = 3) -> str:
    """
    Format an OTP code with spaces for readability.

    Example::

        >>> format_otp("123456")
        "123 456"

    Args:
        code:  Digit string.
        group: Digit grouping size.

    Returns:
        Spaced OTP string.
    """
    return " ".join(code[i : i + group] for i in range(0, len(code), group))
