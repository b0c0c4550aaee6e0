"""
OTP source bound to one configured secret.

Wraps the engine for callers that submit codes somewhere (a login form, an
API) and only care about "give me a code that will still be valid".
"""

import logging
import threading
from typing import Any, Optional, Union

from core.errors import ConfigurationError, InvalidSecretError
from core.hotp import Algorithm, resolve_algorithm
from core.lifecycle import (
    SYSTEM_CLOCK,
    Clock,
    check_parameters,
    acquire_fresh_code,
    acquire_fresh_code_async,
)
from core.totp import DIGITS, TIME_STEP, generate_totp, remaining_seconds, validate_totp

logger = logging.getLogger(__name__)

PLACEHOLDER_SECRET = "YOUR_OTP_SECRET_HERE"
DEFAULT_MIN_REMAINING = 5


class OTPProvider:
    """Generate, check and time codes for a single secret."""

    def __init__(
        self,
        secret: str,
        period: int = TIME_STEP,
        digits: int = DIGITS,
        algorithm: Union[Algorithm, str] = Algorithm.SHA1,
        clock: Optional[Clock] = None,
        min_remaining_seconds: int = DEFAULT_MIN_REMAINING,
    ) -> None:
        """
        Args:
            secret:                Base32 secret.
            period:                Time step in seconds.
            digits:                Code length.
            algorithm:             HMAC algorithm.
            clock:                 Time source; the system clock if None.
            min_remaining_seconds: Default threshold for :meth:`fresh_code`.

        Raises:
            ConfigurationError: On unsupported parameters.
            InvalidSecretError: If the secret decodes to an empty key.
        """
        check_parameters(secret, period, digits, algorithm)
        self._secret = secret
        self.period = period
        self.digits = digits
        self.algorithm = Algorithm(resolve_algorithm(algorithm).upper())
        self.clock = clock or SYSTEM_CLOCK
        self.min_remaining_seconds = min_remaining_seconds

    @classmethod
    def from_settings(cls, settings: Any, clock: Optional[Clock] = None) -> "OTPProvider":
        """
        Build a provider from :class:`config.settings.Settings`.

        Raises:
            ConfigurationError: If OTP generation is disabled.
            InvalidSecretError: If no usable secret is configured.
        """
        if not settings.ENABLED:
            logger.warning("OTP auto-generation is disabled. Enable with OTP_ENABLED=true")
            raise ConfigurationError("OTP generation is disabled in configuration.")

        secret = (settings.SECRET or "").strip()
        if not secret or secret == PLACEHOLDER_SECRET:
            logger.error("OTP secret is not configured")
            raise InvalidSecretError("OTP secret is not configured. Set OTP_SECRET.")

        return cls(
            secret,
            period=settings.TIME_STEP,
            digits=settings.DIGITS,
            algorithm=settings.ALGORITHM,
            clock=clock,
            min_remaining_seconds=settings.MIN_REMAINING_SECONDS,
        )

    def replace(self, **changes: Any) -> "OTPProvider":
        """Return a provider for the same secret; None values keep the current setting."""
        params = {
            "period": self.period,
            "digits": self.digits,
            "algorithm": self.algorithm,
            "clock": self.clock,
            "min_remaining_seconds": self.min_remaining_seconds,
        }
        params.update({k: v for k, v in changes.items() if v is not None})
        return OTPProvider(self._secret, **params)

    def __repr__(self) -> str:
        return (
            f"OTPProvider(secret=***, period={self.period}, "
            f"digits={self.digits}, algorithm={self.algorithm.value})"
        )

    # ── Codes ────────────────────────────────────────────────────────────

    def code_at(self, timestamp: float) -> str:
        return generate_totp(self._secret, timestamp, self.period, self.digits, self.algorithm)

    def current_code(self) -> str:
        code = self.code_at(self.clock.now())
        logger.info("Generated OTP code (expires in %d seconds)", self.remaining_seconds())
        return code

    def remaining_seconds(self) -> int:
        return remaining_seconds(self.period, self.clock.now())

    def validate(self, code: Optional[str], window: int = 0) -> bool:
        """Check ``code`` against the current window (± ``window`` steps)."""
        return validate_totp(
            self._secret,
            code,
            timestamp=self.clock.now(),
            period=self.period,
            digits=self.digits,
            algorithm=self.algorithm,
            window=window,
        )

    # ── Fresh codes ──────────────────────────────────────────────────────

    def fresh_code(
        self,
        min_remaining_seconds: Optional[int] = None,
        cancel: Optional[threading.Event] = None,
    ) -> str:
        """Return a code with enough validity left, waiting once if needed."""
        threshold = self.min_remaining_seconds if min_remaining_seconds is None else min_remaining_seconds
        return acquire_fresh_code(
            self._secret,
            threshold,
            clock=self.clock,
            period=self.period,
            digits=self.digits,
            algorithm=self.algorithm,
            cancel=cancel,
        )

    async def fresh_code_async(self, min_remaining_seconds: Optional[int] = None) -> str:
        threshold = self.min_remaining_seconds if min_remaining_seconds is None else min_remaining_seconds
        return await acquire_fresh_code_async(
            self._secret,
            threshold,
            clock=self.clock,
            period=self.period,
            digits=self.digits,
            algorithm=self.algorithm,
        )
