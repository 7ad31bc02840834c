#!/usr/bin/env python3
"""
Drop the stale username index from the users collection.

Run with: python -m backend.cli.drop_index [--collection users] [--index username_1]
          python -m backend.cli.drop_index --list
A missing index is logged and ignored (it was most likely dropped already).
"""
import argparse
import logging
import sys

from pymongo import MongoClient

from backend.core.config import configure_logging, load_settings
from backend.core.errors import ConfigError, IndexNotFoundError, PersistenceError, StoreConnectionError
from backend.core.index_retirement import retire_index
from backend.database.users_db import UserStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Drop a named index from a MongoDB collection.")
    parser.add_argument("--collection", help="Collection name (default: USER_COLLECTION or config.yaml)")
    parser.add_argument("--index", help="Index name, e.g. username_1 (default: STALE_INDEX_NAME or config.yaml)")
    parser.add_argument("--list", action="store_true", help="Only list the collection's indexes")
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

    collection = args.collection or settings.users_collection
    index_name = args.index or settings.stale_index

    def store_factory():
        return UserStore.from_settings(settings, client_factory=client_factory)

    try:
        if args.list:
            with store_factory() as store:
                names = store.list_index_names(collection)
            print(f"Indexes on '{collection}':")
            for name in names:
                print(f"  - {name}")
            return 0

        retire_index(store_factory, collection, index_name)
    except StoreConnectionError as e:
        logger.error(f"Database connection error: {e}")
        return 1
    except IndexNotFoundError as e:
        logger.error(f"Error dropping index: {e}")
        print("Nothing to do: the index was probably dropped already.")
        return 0
    except (PersistenceError, ValueError) as e:
        logger.error(f"Error dropping index: {e}")
        return 0
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        return 1

    print(f"Index {index_name} dropped successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
