#!/usr/bin/env python3
"""
Create the demo admin account, or promote an existing user to admin.

Run with: python -m backend.cli.seed_admin
Credentials come from ADMIN_EMAIL / ADMIN_NAME / ADMIN_PASSWORD (see config.yaml
for the demo defaults). Exit code 1 means the database could not be reached or
the configuration is invalid; everything else exits 0.
"""
import argparse
import logging
import sys

from pydantic import ValidationError
from pymongo import MongoClient

from backend.core.admin_provisioner import AdminProvisioner
from backend.core.config import configure_logging, load_settings
from backend.core.errors import ConfigError, PersistenceError, StoreConnectionError
from backend.core.models import AdminCredentials, ProvisionOutcome
from backend.core.passwords import PasswordHasher
from backend.database.users_db import UserStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ensure the admin account exists and holds the admin role.")
    parser.add_argument("--email", help="Admin email (default: ADMIN_EMAIL or config.yaml)")
    parser.add_argument("--name", help="Display name used when the account is created")
    parser.add_argument("--config", help="Path to an alternative config.yaml")
    return parser


def main(argv=None, client_factory=MongoClient) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    email = args.email or settings.admin_email
    name = args.name or settings.admin_name
    try:
        AdminCredentials(email=email, password=settings.admin_password, name=name)
    except ValidationError as e:
        logger.error(f"Invalid admin credentials: {e}")
        return 1

    provisioner = AdminProvisioner(
        lambda: UserStore.from_settings(settings, client_factory=client_factory),
        PasswordHasher(rounds=settings.bcrypt_rounds),
    )

    try:
        result = provisioner.ensure_admin(email, settings.admin_password, name)
    except StoreConnectionError as e:
        logger.error(f"Database connection error: {e}")
        return 1
    except PersistenceError as e:
        logger.error(f"Error creating admin: {e}")
        return 0
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        return 1

    if result.outcome is ProvisionOutcome.UPDATED:
        print("✅ Existing user updated to admin:")
    else:
        print("✅ Admin user created successfully:")
    print(f"   Email: {result.email}")
    if settings.uses_demo_password:
        print(f"   Password: {settings.admin_password}")
    else:
        print("   Password: (from ADMIN_PASSWORD)")
    print("   Role: admin")
    print("\n📌 Use these credentials to log in at /admin-login")
    return 0


if __name__ == "__main__":
    sys.exit(main())
