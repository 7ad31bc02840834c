"""Error taxonomy for the user-database maintenance tools.

Library code raises these; the CLI entry points catch them at the top,
log a single line and pick the exit code.
"""


class MaintenanceError(Exception):
    """Base class for every error raised by the maintenance tools."""


class ConfigError(MaintenanceError):
    """Settings are missing or invalid."""


class StoreConnectionError(MaintenanceError, ConnectionError):
    """MongoDB could not be reached (or the connection string is unusable)."""


class PersistenceError(MaintenanceError):
    """A write against the users collection was rejected."""


class IndexNotFoundError(MaintenanceError):
    """The named index does not exist on the target collection."""

    def __init__(self, index_name: str, collection_name: str, detail: str = ""):
        self.index_name = index_name
        self.collection_name = collection_name
        msg = f"index '{index_name}' not found on collection '{collection_name}'"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


__all__ = [
    "MaintenanceError",
    "ConfigError",
    "StoreConnectionError",
    "PersistenceError",
    "IndexNotFoundError",
]
