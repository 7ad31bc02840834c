"""Idempotent admin-account provisioning.

``ensure_admin`` guarantees one account with the given email holds the admin
role and a freshly hashed copy of the given password:

  - account exists  -> role forced to admin, password re-hashed, saved in place
  - account missing -> new admin account inserted

Each call opens its own scoped store connection and closes it on every exit
path. There is no transaction or retry: two concurrent creates for the same
email surface as PersistenceError from the losing insert.
"""
import logging
from typing import Callable

from backend.core.models import (
    ADMIN_ROLE,
    Account,
    AdminCredentials,
    AdminStatus,
    ProvisionOutcome,
    ProvisionResult,
)
from backend.core.passwords import PasswordHasher
from backend.database.users_db import UserStore

logger = logging.getLogger(__name__)


class AdminProvisioner:
    def __init__(self, store_factory: Callable[[], UserStore], hasher: PasswordHasher):
        self.store_factory = store_factory
        self.hasher = hasher

    def ensure_admin(self, email: str, plaintext_password: str, display_name: str) -> ProvisionResult:
        # Validation only; the lookup key stays exactly as given
        AdminCredentials(email=email, password=plaintext_password, name=display_name)

        with self.store_factory() as store:
            existing = store.find_by_email(email)

            if existing:
                existing.role = ADMIN_ROLE
                existing.password = self.hasher.hash(plaintext_password)
                store.save(existing)
                logger.info(f"Existing user updated to admin: {email}")
                return ProvisionResult(outcome=ProvisionOutcome.UPDATED,
                                       account_id=str(existing.id), email=email)

            account = Account(
                name=display_name,
                email=email,
                password=self.hasher.hash(plaintext_password),
                role=ADMIN_ROLE,
            )
            account_id = store.create(account)
            logger.info(f"Admin user created: {email}")
            return ProvisionResult(outcome=ProvisionOutcome.CREATED,
                                   account_id=str(account_id), email=email)

    def check_admin(self, email: str, plaintext_password: str) -> AdminStatus:
        """Read-only: does the account exist, is it admin, does the password verify."""
        with self.store_factory() as store:
            account = store.find_by_email(email)

        if account is None:
            logger.warning(f"No account found for {email}")
            return AdminStatus(email=email, exists=False)

        return AdminStatus(
            email=email,
            exists=True,
            role=account.role,
            password_valid=self.hasher.verify(plaintext_password, account.password),
        )


__all__ = ["AdminProvisioner"]
