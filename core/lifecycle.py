"""
Freshness-aware OTP acquisition.

A code read a second before its window closes is usually rejected by the
time it reaches the server.  :func:`acquire_fresh_code` checks how long the
current code has left and, if that is below a threshold, waits once for the
next window before generating.

The wait goes through a :class:`Clock` so it can be cancelled (``threading.Event``
for threads, task cancellation for asyncio) and replaced in tests.
"""

import asyncio
import logging
import threading
import time
from typing import Optional, Protocol, Union

from core.errors import CancelledError
from core.hotp import Algorithm, load_key, resolve_algorithm
from core.totp import DIGITS, TIME_STEP, generate_totp, remaining_seconds
from core.utils import validate_digits, validate_period

logger = logging.getLogger(__name__)


# ── Clock ─────────────────────────────────────────────────────────────────────

class Clock(Protocol):
    """Wall-clock source and cancellable delay."""

    def now(self) -> float:
        """Return the current Unix time in seconds."""

    def wait(self, seconds: float, cancel: Optional[threading.Event] = None) -> bool:
        """Block for ``seconds``; return False if ``cancel`` fired first."""

    async def wait_async(self, seconds: float) -> None:
        """Suspend the current task for ``seconds``."""


class SystemClock:
    """The real clock: ``time.time`` and interruptible sleeps."""

    def now(self) -> float:
        return time.time()

    def wait(self, seconds: float, cancel: Optional[threading.Event] = None) -> bool:
        if cancel is None:
            time.sleep(seconds)
            return True
        return not cancel.wait(seconds)

    async def wait_async(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


SYSTEM_CLOCK = SystemClock()


# ── Policy ────────────────────────────────────────────────────────────────────

def check_parameters(secret: str, period: int, digits: int, algorithm: Union[Algorithm, str]) -> None:
    """Raise any configuration or secret error without generating a code."""
    validate_digits(digits)
    validate_period(period)
    resolve_algorithm(algorithm)
    load_key(secret)


def wait_needed(remaining: int, min_remaining_seconds: int) -> int:
    """Return how many seconds to wait for a fresh code (0 for none)."""
    if remaining < min_remaining_seconds:
        return remaining + 1
    return 0


def acquire_fresh_code(
    secret: str,
    min_remaining_seconds: int = 5,
    clock: Optional[Clock] = None,
    period: int = TIME_STEP,
    digits: int = DIGITS,
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
    cancel: Optional[threading.Event] = None,
) -> str:
    """
    Return a code with at least ``min_remaining_seconds`` of validity left.

    If the current window is about to close, block for ``remaining + 1``
    seconds so the clock is in the next window, then generate.  The wait
    happens at most once.

    Args:
        secret:                Base32 secret.
        min_remaining_seconds: Threshold below which the current code is
                               considered stale.
        clock:                 Time source (defaults to the system clock).
        period:                Time step in seconds.
        digits:                Number of digits.
        algorithm:             HMAC algorithm.
        cancel:                Event that aborts the wait when set.

    Returns:
        The OTP string.

    Raises:
        CancelledError:     If ``cancel`` was set before or during the wait,
                            or the wait was interrupted (Ctrl+C).
        ConfigurationError: On unsupported parameters.
        InvalidSecretError: If the secret decodes to an empty key.
    """
    clock = clock or SYSTEM_CLOCK
    check_parameters(secret, period, digits, algorithm)

    delay = wait_needed(remaining_seconds(period, clock.now()), min_remaining_seconds)
    if delay:
        if cancel is not None and cancel.is_set():
            raise CancelledError("Wait for a fresh OTP was cancelled.")
        logger.info("Current OTP about to expire. Waiting %d seconds for fresh code", delay)
        try:
            completed = clock.wait(delay, cancel)
        except KeyboardInterrupt as exc:
            logger.warning("Wait for fresh OTP interrupted")
            raise CancelledError("Wait for a fresh OTP was interrupted.") from exc
        if not completed:
            logger.warning("Wait for fresh OTP interrupted")
            raise CancelledError("Wait for a fresh OTP was cancelled.")

    return generate_totp(secret, clock.now(), period, digits, algorithm)


async def acquire_fresh_code_async(
    secret: str,
    min_remaining_seconds: int = 5,
    clock: Optional[Clock] = None,
    period: int = TIME_STEP,
    digits: int = DIGITS,
    algorithm: Union[Algorithm, str] = Algorithm.SHA1,
) -> str:
    """
    Coroutine version of :func:`acquire_fresh_code`.

    Cancelling the task during the wait raises ``asyncio.CancelledError``
    in the caller, unchanged.
    """
    clock = clock or SYSTEM_CLOCK
    check_parameters(secret, period, digits, algorithm)

    delay = wait_needed(remaining_seconds(period, clock.now()), min_remaining_seconds)
    if delay:
        logger.info("Current OTP about to expire. Waiting %d seconds for fresh code", delay)
        try:
            await clock.wait_async(delay)
        except asyncio.CancelledError:
            logger.warning("Wait for fresh OTP interrupted")
            raise

    return generate_totp(secret, clock.now(), period, digits, algorithm)
