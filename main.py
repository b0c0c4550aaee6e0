"""
freshotp – command-line entry point.

Usage
-----
    python main.py code --secret JBSWY3DPEHPK3PXP
    python main.py fresh --min-remaining 10

Or, if installed as a package:
    freshotp remaining

Without ``--secret`` the secret and policy come from ``OTP_*`` settings.
"""

import argparse
import logging
import sys
import time
from typing import Optional

from config.settings import settings
from core.errors import CancelledError, OTPError
from core.provider import OTPProvider
from core.utils import format_otp

logger = logging.getLogger("freshotp")


# ── Logging setup ─────────────────────────────────────────────────────────────

def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


# ── Arguments ─────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="freshotp",
        description="RFC 6238 TOTP codes with fresh-code waiting.",
    )
    parser.add_argument("--secret", help="Base32 secret (default: OTP_SECRET setting).")
    parser.add_argument("--period", type=int, help="Time step in seconds.")
    parser.add_argument("--digits", type=int, help="Length of the code.")
    parser.add_argument("--algorithm", help="SHA1, SHA256 or SHA512.")
    parser.add_argument("--group", action="store_true", help="Print the code in groups of three.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")

    sub = parser.add_subparsers(dest="command", required=True)

    code = sub.add_parser("code", help="Print the current code.")
    code.add_argument("--at", type=int, dest="at", help="Unix time to generate the code for.")

    sub.add_parser("remaining", help="Seconds left in the current window.")

    fresh = sub.add_parser("fresh", help="Print a code that is not about to expire.")
    fresh.add_argument("--min-remaining", type=int, dest="min_remaining",
                       help="Wait for the next window below this many seconds.")

    validate = sub.add_parser("validate", help="Exit 0 if CODE is valid now.")
    validate.add_argument("code")
    validate.add_argument("--window", type=int, default=0,
                          help="Also accept this many neighbouring time steps.")

    watch = sub.add_parser("watch", help="Print the code every second.")
    watch.add_argument("--count", type=int, default=0, help="Number of lines (0 = forever).")

    return parser


def _provider(args: argparse.Namespace) -> OTPProvider:
    """Use the command-line secret if given, otherwise the configured one."""
    if args.secret is None:
        provider = OTPProvider.from_settings(settings)
    else:
        provider = OTPProvider(
            args.secret,
            period=settings.TIME_STEP,
            digits=settings.DIGITS,
            algorithm=settings.ALGORITHM,
            min_remaining_seconds=settings.MIN_REMAINING_SECONDS,
        )
    return provider.replace(period=args.period, digits=args.digits, algorithm=args.algorithm)


# ── Commands ──────────────────────────────────────────────────────────────────

def _show(code: str, group: bool) -> str:
    return format_otp(code) if group else code


def run(args: argparse.Namespace) -> int:
    provider = _provider(args)

    if args.command == "code":
        code = provider.code_at(args.at) if args.at is not None else provider.current_code()
        print(_show(code, args.group))
    elif args.command == "remaining":
        print(provider.remaining_seconds())
    elif args.command == "fresh":
        print(_show(provider.fresh_code(args.min_remaining), args.group))
    elif args.command == "validate":
        if not provider.validate(args.code, window=args.window):
            print("invalid")
            return 1
        print("valid")
    elif args.command == "watch":
        printed = 0
        while not args.count or printed < args.count:
            stamp = time.strftime("%H:%M:%S")
            code = provider.code_at(provider.clock.now())
            print(f"[{stamp}] {_show(code, args.group)} ({provider.remaining_seconds()}s)", flush=True)
            printed += 1
            if not args.count or printed < args.count:
                provider.clock.wait(1)
    return 0


# ── Main ──────────────────────────────────────────────────────────────────────

def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)
    try:
        return run(args)
    except CancelledError:
        logger.info("Interrupted")
        return 130
    except OTPError as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
