#!/usr/bin/env python3
"""Quick check that the admin account exists and the configured password verifies."""
import argparse
import logging
import sys

from pymongo import MongoClient

from backend.core.admin_provisioner import AdminProvisioner
from backend.core.config import configure_logging, load_settings
from backend.core.errors import ConfigError, PersistenceError, StoreConnectionError
from backend.core.passwords import PasswordHasher
from backend.database.users_db import UserStore

logger = logging.getLogger(__name__)


def main(argv=None, client_factory=MongoClient) -> int:
    parser = argparse.ArgumentParser(description="Report the admin account's role and password status.")
    parser.add_argument("--email", help="Account email (default: ADMIN_EMAIL or config.yaml)")
    parser.add_argument("--config", help="Path to an alternative config.yaml")
    args = parser.parse_args(argv)
    configure_logging()

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    email = args.email or settings.admin_email
    provisioner = AdminProvisioner(
        lambda: UserStore.from_settings(settings, client_factory=client_factory),
        PasswordHasher(rounds=settings.bcrypt_rounds),
    )

    try:
        status = provisioner.check_admin(email, settings.admin_password)
    except StoreConnectionError as e:
        logger.error(f"Database connection error: {e}")
        return 1
    except PersistenceError as e:
        logger.error(f"Error checking admin: {e}")
        return 0
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        return 1

    print(f"Looking for user: {email}")
    if not status.exists:
        print("✗ User NOT FOUND")
        print("  Run: python -m backend.cli.seed_admin")
        return 0

    print("✓ User FOUND")
    print(f"  Role: {status.role}{'' if status.is_admin else ' (not admin)'}")
    print(f"  Password verification: {'✓ VALID' if status.password_valid else '✗ INVALID'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
