# Pytest configuration & path setup
# Ensures the repository root (with 'backend' package) and the tests directory
# (for fake_mongo) are importable when running pytest from subdirectories.

import os
import sys

TESTS_DIR = os.path.abspath(os.path.dirname(__file__))
ROOT_DIR = os.path.abspath(os.path.join(TESTS_DIR, '..'))
for path in (ROOT_DIR, TESTS_DIR):
    if path not in sys.path:
        sys.path.insert(0, path)
