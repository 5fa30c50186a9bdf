#!/usr/bin/env python3
"""
MB Licence Key Tool - Main Entry Point.

Usage:
    python main.py generate [PREMIUM|TRIAL] [days]
    python main.py validate <licence-key>
    python main.py status <licence-key>
    python main.py batch [count]
    python main.py heartbeat [path] [--max-age SECONDS]

Examples:
    python main.py generate PREMIUM
    python main.py generate TRIAL 30
    python main.py validate MB-PREMIUM-...
    python main.py batch 10
"""

import argparse
import json
import logging
import sys

from config.settings import (
    DEFAULT_BATCH_COUNT,
    DEFAULT_TRIAL_DAYS,
    HEARTBEAT_MAX_AGE_SECONDS,
    HEARTBEAT_PATH,
    LICENCE_SECRET,
    LOG_FORMAT,
    LOG_LEVEL,
)
from licence.errors import LicenceError
from licence.generator import normalize_type
from licence.payload import TRIAL_DAYS
from licence.service import LicenceKeyService
from licence.templates.defaults import GENERATABLE_TYPES, LicenceType
from monitor.heartbeat import HeartbeatState, check_heartbeat

logger = logging.getLogger(__name__)


def _service(args) -> LicenceKeyService:
    return LicenceKeyService(args.secret)


# ============================================================
# Licence Commands
# ============================================================

def cmd_generate(args):
    """Generate a single licence key."""
    try:
        licence_type = normalize_type(args.licence_type)
    except LicenceError:
        allowed = ", ".join(t.value for t in GENERATABLE_TYPES)
        print(f"Invalid license type. Use: {allowed}", file=sys.stderr)
        return 1

    trial_days = args.trial_days or DEFAULT_TRIAL_DAYS
    options = {}
    if licence_type is LicenceType.TRIAL:
        options[TRIAL_DAYS] = trial_days

    key = _service(args).generate(licence_type, options)

    print("Generated License Key:")
    print("=====================")
    print(key)
    print()
    print(f"Type: {licence_type.value}")
    if licence_type is LicenceType.TRIAL:
        print(f"Trial Days: {trial_days}")
    return 0


def cmd_validate(args):
    """Validate a licence key and show its payload."""
    result = _service(args).validate(args.key)

    print("License Key Validation:")
    print("======================")
    print(f"Key: {args.key}")
    print(f"Valid: {str(result.is_valid).lower()}")
    if result.is_valid:
        print(f"Type: {result.licence_type}")
        print("Data:")
        print(json.dumps(result.data, indent=2))
        return 0
    print(f"Reason: {result.reason}")
    return 1


def cmd_status(args):
    """Show features and expiry for a licence key."""
    status = _service(args).status(args.key)
    if not status.is_valid:
        print(f"INVALID - {status.reason}")
        if status.expiry_date:
            print(f"Expired: {status.expiry_date.isoformat()}")
        return 1

    print(f"VALID - type: {status.licence_type}")
    print(f"Features: {', '.join(status.features) or 'none'}")
    expires = status.expiry_date.isoformat() if status.expiry_date else "never"
    print(f"Expires:  {expires}")
    if status.licence_type == LicenceType.TRIAL.value.lower():
        print(f"Trial days remaining: {status.trial_days_remaining}")
    return 0


def cmd_batch(args):
    """Generate a batch of premium and trial keys."""
    count = args.count or DEFAULT_BATCH_COUNT
    if count < 0:
        print("Count must not be negative", file=sys.stderr)
        return 1

    batch = _service(args).batch(count)

    print(f"Generating {count} test license keys:")
    print("=====================================")
    print()
    print("Premium Keys:")
    for i, key in enumerate(batch.premium, 1):
        print(f"{i}. {key}")
    print()
    print(f"Trial Keys ({batch.trial_days} days):")
    for i, key in enumerate(batch.trial, 1):
        print(f"{i}. {key}")
    return 0


# ============================================================
# Monitor Commands
# ============================================================

def cmd_heartbeat(args):
    """Check whether the monitored process is alive."""
    status = check_heartbeat(args.path, max_age_seconds=args.max_age)

    if status.state is HeartbeatState.ALIVE:
        print("RUNNING")
    elif status.state is HeartbeatState.MISSING:
        print("NOT RUNNING (no heartbeat file)")
    elif status.state is HeartbeatState.CRASHED:
        print("CRASHED")
        print(status.detail)
    elif status.age_seconds is not None:
        print(f"DEAD (no heartbeat for {round(status.age_seconds)}s)")
    else:
        print(f"DEAD ({status.detail})")
    return 0 if status.is_alive else 1


# ============================================================
# Argument Parser
# ============================================================

def build_parser():
    parser = argparse.ArgumentParser(
        description="MB licence key generator and validator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  %(prog)s generate PREMIUM\n"
            "  %(prog)s generate TRIAL 30\n"
            "  %(prog)s validate MB-PREMIUM-...\n"
            "  %(prog)s batch 10"
        ),
    )
    parser.add_argument(
        "--secret", default=LICENCE_SECRET, help="Checksum secret (default from LICENCE_SECRET)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    gen = subparsers.add_parser("generate", aliases=["gen"], help="Generate a licence key")
    gen.add_argument(
        "licence_type", nargs="?", default=LicenceType.PREMIUM.value,
        help="Licence type: PREMIUM or TRIAL",
    )
    gen.add_argument(
        "trial_days", nargs="?", type=int, default=DEFAULT_TRIAL_DAYS,
        help="Trial length in days (TRIAL only)",
    )
    gen.set_defaults(func=cmd_generate)

    val = subparsers.add_parser("validate", aliases=["val"], help="Validate a licence key")
    val.add_argument("key", help="Licence key")
    val.set_defaults(func=cmd_validate)

    st = subparsers.add_parser("status", help="Show licence features and expiry")
    st.add_argument("key", help="Licence key")
    st.set_defaults(func=cmd_status)

    bat = subparsers.add_parser("batch", help="Generate test licence keys")
    bat.add_argument("count", nargs="?", type=int, default=DEFAULT_BATCH_COUNT, help="Number of keys")
    bat.set_defaults(func=cmd_batch)

    hb = subparsers.add_parser("heartbeat", help="Check a liveness heartbeat file")
    hb.add_argument("path", nargs="?", default=str(HEARTBEAT_PATH), help="Heartbeat file")
    hb.add_argument(
        "--max-age", type=float, default=HEARTBEAT_MAX_AGE_SECONDS,
        help="Seconds before a heartbeat is considered stale",
    )
    hb.set_defaults(func=cmd_heartbeat)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format=LOG_FORMAT,
    )

    if not args.command:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except LicenceError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
