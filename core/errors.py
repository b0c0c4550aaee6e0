"""
Exception taxonomy for the OTP engine.

The Base32 codec never raises; everything below originates in the engine,
the lifecycle policy or the configured provider.
"""


class OTPError(Exception):
    """Base class for all freshotp errors."""


class InvalidSecretError(OTPError):
    """The secret is missing or decodes to an empty key."""


class ConfigurationError(OTPError):
    """Unsupported digits, period, algorithm or disabled OTP settings."""


class CancelledError(OTPError):
    """The wait for a fresh code was cancelled before it completed."""
