"""Drop a named secondary index from a collection.

Indexes are dropped by *name*, not by field: the driver names an index on
``username`` ascending ``username_1``. Dropping an index that is already gone
raises IndexNotFoundError; callers treat that as "nothing to do".
"""
import logging
import re
from typing import Callable

from backend.database.users_db import UserStore

logger = logging.getLogger(__name__)

# <field>_<direction> pairs joined by "_", e.g. username_1, email_1_createdAt_-1
_GENERATED_NAME_RE = re.compile(r"^.+_(-?1|text|2d|2dsphere|hashed)$")


def looks_like_index_name(index_name: str) -> bool:
    return index_name == "_id_" or bool(_GENERATED_NAME_RE.match(index_name))


def retire_index(store_factory: Callable[[], UserStore], collection_name: str, index_name: str) -> None:
    if not collection_name or not collection_name.strip():
        raise ValueError("collection_name is required")
    if not index_name or not index_name.strip():
        raise ValueError("index_name is required")
    if not looks_like_index_name(index_name):
        logger.warning(
            f"'{index_name}' does not look like a generated index name "
            f"(expected something like '{index_name}_1'); trying it anyway"
        )

    with store_factory() as store:
        store.drop_index(index_name, collection=collection_name)
    logger.info(f"Index {index_name} dropped successfully")


__all__ = ["retire_index", "looks_like_index_name"]
