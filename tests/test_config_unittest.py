import os
import sys
import tempfile
import unittest

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from backend.core.config import load_settings
from backend.core.errors import ConfigError

class TestLoadSettings(unittest.TestCase):
    def test_defaults_from_config_yaml(self):
        s = load_settings(environ={})
        self.assertIsNone(s.mongo_uri)
        self.assertEqual(s.db_name, "certifyflow")
        self.assertEqual(s.users_collection, "users")
        self.assertEqual(s.stale_index, "username_1")
        self.assertEqual(s.admin_email, "admin@certifyflow.com")
        self.assertEqual(s.admin_name, "System Administrator")
        self.assertEqual(s.admin_password, "Admin123!")
        self.assertEqual(s.bcrypt_rounds, 10)
        self.assertTrue(s.uses_demo_password)
        self.assertFalse(s.is_production)

    def test_env_overrides(self):
        s = load_settings(environ={
            "MONGODB_URI": "mongodb://db:27017/app",
            "USER_COLLECTION": "accounts",
            "STALE_INDEX_NAME": "login_1",
            "ADMIN_EMAIL": "ops@example.com",
            "ADMIN_PASSWORD": "s3cret-pass",
            "BCRYPT_ROUNDS": "4",
        })
        self.assertEqual(s.mongo_uri, "mongodb://db:27017/app")
        self.assertEqual(s.users_collection, "accounts")
        self.assertEqual(s.stale_index, "login_1")
        self.assertEqual(s.admin_email, "ops@example.com")
        self.assertEqual(s.admin_password, "s3cret-pass")
        self.assertEqual(s.bcrypt_rounds, 4)
        self.assertFalse(s.uses_demo_password)

    def test_mongo_uri_fallback(self):
        s = load_settings(environ={"MONGO_URI": "mongodb://legacy:27017/"})
        self.assertEqual(s.mongo_uri, "mongodb://legacy:27017/")
        s = load_settings(environ={"MONGO_URI": "mongodb://legacy/", "MONGODB_URI": "mongodb://new/"})
        self.assertEqual(s.mongo_uri, "mongodb://new/")

    def test_production_requires_password(self):
        with self.assertRaises(ConfigError):
            load_settings(environ={"APP_ENV": "production"})
        s = load_settings(environ={"APP_ENV": "production", "ADMIN_PASSWORD": "real-one"})
        self.assertTrue(s.is_production)
        self.assertEqual(s.admin_password, "real-one")

    def test_invalid_rounds(self):
        with self.assertRaises(ConfigError):
            load_settings(environ={"BCRYPT_ROUNDS": "abc"})
        with self.assertRaises(ConfigError):
            load_settings(environ={"BCRYPT_ROUNDS": "2"})

    def test_custom_config_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "config.yaml")
            with open(path, "w", encoding="utf-8") as f:
                f.write("mongodb:\n  database: staging\nmaintenance:\n  stale_index: name_1\n")
            s = load_settings(path, environ={})
        self.assertEqual(s.db_name, "staging")
        self.assertEqual(s.stale_index, "name_1")
        self.assertEqual(s.users_collection, "users")  # untouched default

    def test_missing_config_file(self):
        with self.assertRaises(ConfigError):
            load_settings("/nonexistent/config.yaml", environ={})

    def test_malformed_config_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "config.yaml")
            with open(path, "w", encoding="utf-8") as f:
                f.write("mongodb: [unclosed\n")
            with self.assertRaises(ConfigError):
                load_settings(path, environ={})

if __name__ == '__main__':
    unittest.main()
