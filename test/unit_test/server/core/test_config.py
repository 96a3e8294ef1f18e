"""Unit tests for server configuration settings model.

Tests verify that the Settings model binds environment variables named in
the .env.example file and that the grouped configuration views agree with
the flat fields.
"""

from pathlib import Path

import pytest

from lockerroom.server.core.config import (
    AuthConfig,
    CORSConfig,
    DatabaseConfig,
    PaymentsConfig,
    Settings,
)


@pytest.fixture
def env_example_path() -> Path:
    """Get path to .env.example file."""
    return Path(__file__).resolve().parents[4] / ".env.example"


@pytest.fixture
def env_example_vars(env_example_path: Path) -> dict[str, str]:
    """Parse .env.example file and return environment variables."""
    env_vars = {}
    with open(env_example_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, value = line.split("=", 1)
                env_vars[key.strip()] = value.strip()
    return env_vars


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    def test_server_binding(self, env_example_vars: dict[str, str], monkeypatch):
        monkeypatch.setenv("LOCKERROOM_SERVER_HOST", env_example_vars["LOCKERROOM_SERVER_HOST"])
        monkeypatch.setenv("LOCKERROOM_SERVER_PORT", env_example_vars["LOCKERROOM_SERVER_PORT"])
        monkeypatch.setenv("LOCKERROOM_LOG_LEVEL", "debug")

        settings = Settings()
        assert settings.server_host == env_example_vars["LOCKERROOM_SERVER_HOST"]
        assert settings.server_port == int(env_example_vars["LOCKERROOM_SERVER_PORT"])
        assert settings.log_level == "debug"

    def test_database_url_binding(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db:5432/lockerroom_test")

        settings = Settings()
        assert settings.database_url.endswith("/lockerroom_test")
        assert settings.database.url == settings.database_url

    def test_auth_binding(self, env_example_vars: dict[str, str], monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "s3cret")
        monkeypatch.setenv("JWT_EXPIRES_MINUTES", "15")
        monkeypatch.setenv("PASSWORD_HASH_ROUNDS", env_example_vars["PASSWORD_HASH_ROUNDS"])

        auth = Settings().auth
        assert isinstance(auth, AuthConfig)
        assert auth.jwt_secret == "s3cret"
        assert auth.jwt_algorithm == "HS256"
        assert auth.jwt_expires_minutes == 15
        assert auth.password_hash_rounds == int(env_example_vars["PASSWORD_HASH_ROUNDS"])

    def test_cors_origins_parse_json_list(self, env_example_vars: dict[str, str], monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", env_example_vars["CORS_ORIGINS"])

        cors = Settings().cors
        assert isinstance(cors, CORSConfig)
        assert cors.origins == ["http://localhost:3000"]
        assert cors.allow_methods == ["*"]

    def test_payments_binding(self, monkeypatch):
        monkeypatch.setenv("XEN_WATCH_PRICE_CENTS", "2500")
        monkeypatch.setenv("PAYMENT_CURRENCY", "EUR")
        monkeypatch.setenv("SUBSCRIPTION_EXPIRY_WARNING_DAYS", "14")
        monkeypatch.setenv("DEFAULT_MAX_STUDENTS", "50")

        payments = Settings().payments
        assert isinstance(payments, PaymentsConfig)
        assert payments.xen_watch_price_cents == 2500
        assert payments.currency == "EUR"
        assert payments.expiry_warning_days == 14
        assert payments.default_max_students == 50

    def test_invalid_integer_rejected(self, monkeypatch):
        monkeypatch.setenv("LOCKERROOM_SERVER_PORT", "not-a-port")

        with pytest.raises(ValueError):
            Settings()


class TestDefaults:
    def test_payment_defaults(self, monkeypatch):
        for name in ("XEN_WATCH_PRICE_CENTS", "PAYMENT_CURRENCY", "SUBSCRIPTION_EXPIRY_WARNING_DAYS", "DEFAULT_MAX_STUDENTS"):
            monkeypatch.delenv(name, raising=False)

        payments = Settings(_env_file=None).payments
        assert payments.xen_watch_price_cents == 1000
        assert payments.currency == "USD"
        assert payments.expiry_warning_days == 30
        assert payments.default_max_students == 100

    def test_grouped_models_accept_field_names(self):
        assert DatabaseConfig(url="sqlite+aiosqlite:///:memory:").url.startswith("sqlite")
        assert PaymentsConfig(currency="GBP").currency == "GBP"
