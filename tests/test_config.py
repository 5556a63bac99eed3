"""Unit tests for photogallery.core.config: defaults and field validators."""

import unittest

from pydantic import SecretStr, ValidationError

from photogallery.core.config import Settings


def _settings(**kwargs: object) -> Settings:
    """Build Settings without reading a .env file."""
    return Settings(_env_file=None, **kwargs)


class TestDefaults(unittest.TestCase):
    """Defaults match the documented configuration."""

    def test_defaults(self) -> None:
        s = _settings()
        self.assertEqual(s.AZURE_STORAGE_CONTAINER_NAME, "photos")
        self.assertEqual(s.SESSION_COOKIE_NAME, "session")
        self.assertEqual(s.SEED_ADMIN_USERNAME, "admin")
        self.assertEqual(s.SEED_ADMIN_PASSWORD.get_secret_value(), "password")
        self.assertFalse(s.PASSWORD_HASHING)
        self.assertEqual(s.LOG_LEVEL, "INFO")


class TestValidators(unittest.TestCase):
    """Invalid values are rejected; valid ones are normalized."""

    def test_log_level_normalized_to_upper(self) -> None:
        self.assertEqual(_settings(LOG_LEVEL="debug").LOG_LEVEL, "DEBUG")

    def test_log_level_unknown_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(LOG_LEVEL="verbose")

    def test_port_out_of_range_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(PORT=0)
        with self.assertRaises(ValidationError):
            _settings(PORT=70000)

    def test_container_name_rules(self) -> None:
        self.assertEqual(_settings(AZURE_STORAGE_CONTAINER_NAME=" my-photos ").AZURE_STORAGE_CONTAINER_NAME, "my-photos")
        for bad in ("ab", "Photos", "-photos", "photos-", "my--photos", "a" * 64):
            with self.subTest(name=bad), self.assertRaises(ValidationError):
                _settings(AZURE_STORAGE_CONTAINER_NAME=bad)

    def test_blank_connection_string_becomes_none(self) -> None:
        self.assertIsNone(_settings(AZURE_STORAGE_CONNECTION_STRING="  ").AZURE_STORAGE_CONNECTION_STRING)

    def test_memory_base_url_requires_http(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(MEMORY_BLOB_BASE_URL="ftp://example.com")
        s = _settings(MEMORY_BLOB_BASE_URL="https://cdn.example.com/blobs/")
        self.assertEqual(s.MEMORY_BLOB_BASE_URL, "https://cdn.example.com/blobs")

    def test_empty_session_secret_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(SESSION_SECRET=SecretStr("   "))

    def test_session_expire_minutes_range(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(SESSION_EXPIRE_MINUTES=0)
        self.assertEqual(_settings(SESSION_EXPIRE_MINUTES=60).SESSION_EXPIRE_MINUTES, 60)

    def test_max_upload_mb_range(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(MAX_UPLOAD_MB=0)
        with self.assertRaises(ValidationError):
            _settings(MAX_UPLOAD_MB=201)

    def test_seed_password_required_when_seeding(self) -> None:
        for password in ("", "   "):
            with self.subTest(password=password), self.assertRaises(ValidationError):
                _settings(SEED_ADMIN_PASSWORD=password)

    def test_seed_password_may_be_empty_without_seed_user(self) -> None:
        s = _settings(SEED_ADMIN_USERNAME="", SEED_ADMIN_PASSWORD="")
        self.assertEqual(s.SEED_ADMIN_USERNAME, "")

    def test_backend_literal(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(BLOB_BACKEND="s3")


if __name__ == "__main__":
    unittest.main()
