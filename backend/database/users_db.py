"""Users collection access (thin wrapper around pymongo).

``UserStore`` is a scoped connection: ``with UserStore(...) as store:`` pings
the server on entry and always closes the client on exit. Driver errors are
translated into ``backend.core.errors`` so callers never handle pymongo types.
"""
import logging
from datetime import datetime, UTC
from typing import Any, Callable, List, Optional

from pydantic import ValidationError
from pymongo import MongoClient
from pymongo.errors import (
    ConfigurationError,
    ConnectionFailure,
    DuplicateKeyError,
    InvalidURI,
    OperationFailure,
    PyMongoError,
)

from backend.core.errors import IndexNotFoundError, PersistenceError, StoreConnectionError
from backend.core.models import Account

logger = logging.getLogger(__name__)

# Server error codes
INDEX_NOT_FOUND = 27
NAMESPACE_NOT_FOUND = 26


class UserStore:
    def __init__(self, connection_string: Optional[str], db_name: str = "certifyflow",
                 collection: str = "users", server_selection_timeout_ms: int = 5000,
                 client_factory: Callable[..., Any] = MongoClient):
        self.connection_string = connection_string
        self.db_name = db_name
        self.collection_name = collection
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.client_factory = client_factory
        self.client = None
        self.db = None
        self.coll = None

    @classmethod
    def from_settings(cls, settings, client_factory: Callable[..., Any] = MongoClient) -> "UserStore":
        return cls(
            settings.mongo_uri,
            db_name=settings.db_name,
            collection=settings.users_collection,
            server_selection_timeout_ms=settings.server_selection_timeout_ms,
            client_factory=client_factory,
        )

    # ---------- Connection lifecycle ----------

    def connect(self) -> "UserStore":
        """Open the client and ping the server; raises StoreConnectionError."""
        if not self.connection_string:
            raise StoreConnectionError("MONGODB_URI is not set")
        try:
            logger.info("Connecting to MongoDB...")
            self.client = self.client_factory(
                self.connection_string,
                serverSelectionTimeoutMS=self.server_selection_timeout_ms,
                connectTimeoutMS=10000,
            )
            self.client.admin.command('ping')
            # Database named in the URI wins, like the web app's ODM
            self.db = self.client.get_default_database(default=self.db_name)
            self.coll = self.db[self.collection_name]
            logger.info("MongoDB connected.")
            return self
        except (ConnectionFailure, ConfigurationError, InvalidURI) as e:
            self.close()
            raise StoreConnectionError(f"MongoDB connection failed: {e}") from e
        except PyMongoError as e:
            # e.g. OperationFailure code 18 on ping: bad credentials in the URI
            self.close()
            raise StoreConnectionError(f"MongoDB connection rejected: {e}") from e

    def close(self):
        if self.client is not None:
            try:
                self.client.close()
                logger.info("Database connection closed.")
            finally:
                self.client = None
                self.db = None
                self.coll = None

    def __enter__(self) -> "UserStore":
        return self.connect()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _require_connection(self):
        if self.coll is None:
            raise StoreConnectionError("UserStore is not connected")

    # ---------- Accounts ----------

    def find_by_email(self, email: str) -> Optional[Account]:
        self._require_connection()
        try:
            doc = self.coll.find_one({"email": email})
        except ConnectionFailure as e:
            raise StoreConnectionError(f"Lookup failed, server unreachable: {e}") from e
        except PyMongoError as e:
            raise PersistenceError(f"Lookup failed: {e}") from e
        if not doc:
            return None
        try:
            return Account.from_document(doc)
        except ValidationError as e:
            raise PersistenceError(f"Stored account for {email} is malformed: {e}") from e

    def create(self, account: Account) -> Any:
        """Insert a new account; returns the store-assigned id."""
        self._require_connection()
        now = datetime.now(UTC)
        account.created_at = account.created_at or now
        account.updated_at = now
        doc = account.to_document()
        try:
            result = self.coll.insert_one(doc)
        except DuplicateKeyError as e:
            raise PersistenceError(f"Account already exists for {account.email}: {e}") from e
        except ConnectionFailure as e:
            raise StoreConnectionError(f"Insert failed, server unreachable: {e}") from e
        except PyMongoError as e:
            raise PersistenceError(f"Insert failed: {e}") from e
        account.id = result.inserted_id
        return result.inserted_id

    def save(self, account: Account) -> None:
        """Persist the fields loaded or assigned on an existing account, matched by _id.

        Fields the stored document never had are not written back with defaults.
        """
        self._require_connection()
        if account.id is None:
            raise PersistenceError("Cannot save an account that has no _id")
        account.updated_at = datetime.now(UTC)
        fields = account.to_document()
        fields.pop("_id", None)
        try:
            result = self.coll.update_one({"_id": account.id}, {"$set": fields})
        except DuplicateKeyError as e:
            raise PersistenceError(f"Update rejected for {account.email}: {e}") from e
        except ConnectionFailure as e:
            raise StoreConnectionError(f"Update failed, server unreachable: {e}") from e
        except PyMongoError as e:
            raise PersistenceError(f"Update failed: {e}") from e
        if result.matched_count == 0:
            raise PersistenceError(f"Account {account.id} disappeared before it could be saved")

    # ---------- Indexes ----------

    def list_index_names(self, collection: Optional[str] = None) -> List[str]:
        self._require_connection()
        coll_name = collection or self.collection_name
        try:
            return sorted(self.db[coll_name].index_information().keys())
        except ConnectionFailure as e:
            raise StoreConnectionError(f"Listing indexes failed, server unreachable: {e}") from e
        except OperationFailure as e:
            if e.code == NAMESPACE_NOT_FOUND:
                return []
            raise PersistenceError(f"Listing indexes failed: {e}") from e

    def drop_index(self, index_name: str, collection: Optional[str] = None) -> None:
        self._require_connection()
        coll_name = collection or self.collection_name
        try:
            self.db[coll_name].drop_index(index_name)
        except ConnectionFailure as e:
            raise StoreConnectionError(f"Dropping index failed, server unreachable: {e}") from e
        except OperationFailure as e:
            if e.code in (INDEX_NOT_FOUND, NAMESPACE_NOT_FOUND) or "not found" in str(e).lower():
                raise IndexNotFoundError(index_name, coll_name, str(e)) from e
            raise PersistenceError(f"Dropping index {index_name} failed: {e}") from e
        logger.debug(f"Index {index_name} dropped from '{coll_name}'")


__all__ = ["UserStore"]
