#!/usr/bin/env python3
"""
Manage the settings encryption master key.

Generates candidate keys for SETTINGS_ENCRYPTION_KEY and checks whether the
current environment has a usable key. Never prints the configured key.

Usage:
    python scripts/manage_master_key.py generate
    python scripts/manage_master_key.py generate --count 3
    python scripts/manage_master_key.py validate
    python scripts/manage_master_key.py validate --verify  # also run a round trip
"""
import argparse
import asyncio
import sys
from typing import Optional, Sequence

from settings_vault.services.encryption import create_encryption_service
from settings_vault.services.key_material import MASTER_KEY_ENV_VAR, generate_master_key


def cmd_generate(args: argparse.Namespace) -> int:
    """Print freshly generated master keys, one per line."""
    for _ in range(args.count):
        print(generate_master_key())
    print(
        f"\nInstall one of these as {MASTER_KEY_ENV_VAR}. "
        "Existing envelopes can only be decrypted with the key they were created under.",
        file=sys.stderr,
    )
    return 0


async def _validate(verify: bool) -> int:
    service = create_encryption_service()
    report = await service.validate_environment()

    print(f"Environment: {service.key_provider.environment}")
    print(f"Cipher:      {service.cipher_backend.get_backend_version()}")
    print(f"Valid:       {report.valid}")
    for warning in report.warnings:
        print(f"  - {warning}")

    if not report.valid:
        return 1

    if verify:
        if not service.key_provider.has_master_key():
            print("Round trip:  skipped (no key configured)")
            return 1
        ok = await service.verify_encryption()
        print(f"Round trip:  {'ok' if ok else 'FAILED'}")
        if not ok:
            return 1

    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Print the validation report; exit non-zero if the environment is not usable."""
    return asyncio.run(_validate(args.verify))


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse arguments and run the selected command."""
    parser = argparse.ArgumentParser(
        description="Generate and validate the settings encryption master key"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate new master key candidates")
    generate.add_argument(
        "--count", "-n",
        type=int,
        default=1,
        help="Number of keys to generate (default: 1)"
    )
    generate.set_defaults(func=cmd_generate)

    validate = subparsers.add_parser("validate", help="Validate the configured master key")
    validate.add_argument(
        "--verify",
        action="store_true",
        help="Also encrypt and decrypt a test value"
    )
    validate.set_defaults(func=cmd_validate)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
