"""
Forge API - Configuration Tests
=================================

What:  Tests for environment parsing, layered settings and secret handling.
How:   Builds throwaway config directories under tmp_path; APP_* variables
       set by conftest are removed with monkeypatch where they would mask
       the layer under test.
"""

import pytest

from forge_api.config import (
    AuthConfig,
    Environment,
    Settings,
    dotenv_path,
    get_environment,
    load_config,
    parse_environment,
)
from forge_api.exceptions import MissingSecretError
from forge_api.main import create_app


class TestEnvironment:

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("dev", Environment.DEVELOPMENT),
            ("development", Environment.DEVELOPMENT),
            ("test", Environment.TEST),
            ("prod", Environment.PRODUCTION),
            ("Production", Environment.PRODUCTION),
        ],
    )
    def test_parse_environment(self, value, expected):
        assert parse_environment(value) is expected

    def test_parse_unknown_environment(self):
        with pytest.raises(ValueError, match="staging"):
            parse_environment("staging")

    def test_default_environment(self, monkeypatch):
        monkeypatch.delenv("APP_ENVIRONMENT", raising=False)
        assert get_environment() is Environment.DEVELOPMENT

    def test_environment_from_variable(self, monkeypatch):
        monkeypatch.setenv("APP_ENVIRONMENT", "prod")
        assert get_environment() is Environment.PRODUCTION

    def test_dotenv_path(self, monkeypatch, tmp_path):
        monkeypatch.setenv("APP_DOTENV_CONFIG_DIR", str(tmp_path))
        assert dotenv_path(Environment.TEST) == tmp_path / ".env.test"
        assert dotenv_path(Environment.DEVELOPMENT) == tmp_path / ".env"
        assert dotenv_path(Environment.PRODUCTION) is None


class TestLayeredSettings:

    @pytest.fixture
    def config_dir(self, tmp_path, monkeypatch):
        for name in ("APP_DATABASE__URL", "APP_AUTH__JWT_SECRET", "APP_AUTH__BCRYPT_ROUNDS", "APP_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("APP_DOTENV_CONFIG_DIR", str(tmp_path))

        (tmp_path / "environments").mkdir()
        (tmp_path / "app.toml").write_text(
            'log_level = "INFO"\n'
            "[server]\nport = 3000\n"
            '[database]\nurl = "postgresql+asyncpg://base/db"\npool_size = 7\n'
        )
        (tmp_path / "environments" / "test.toml").write_text(
            '[database]\nurl = "postgresql+asyncpg://test/db"\n'
        )
        return tmp_path

    def test_environment_file_overrides_base(self, config_dir):
        settings = load_config(Environment.TEST, config_dir=config_dir)

        assert settings.environment is Environment.TEST
        assert settings.database.url == "postgresql+asyncpg://test/db"
        # nested tables are merged, not replaced
        assert settings.database.pool_size == 7
        assert settings.server.port == 3000

    def test_dotenv_overrides_toml(self, config_dir):
        (config_dir / ".env.test").write_text("APP_LOG_LEVEL=ERROR\n")

        settings = load_config(Environment.TEST, config_dir=config_dir)

        assert settings.log_level == "ERROR"

    def test_environment_variable_overrides_files(self, config_dir, monkeypatch):
        (config_dir / ".env.test").write_text("APP_SERVER__PORT=4000\n")
        monkeypatch.setenv("APP_SERVER__PORT", "5000")
        monkeypatch.setenv("APP_DATABASE__URL", "sqlite+aiosqlite:///from-env.db")

        settings = load_config(Environment.TEST, config_dir=config_dir)

        assert settings.server.port == 5000
        assert settings.database.url == "sqlite+aiosqlite:///from-env.db"

    def test_missing_environment_file_is_allowed(self, config_dir):
        settings = load_config(Environment.PRODUCTION, config_dir=config_dir)

        assert settings.database.url == "postgresql+asyncpg://base/db"

    def test_invalid_log_level(self, config_dir):
        with pytest.raises(ValueError):
            load_config(Environment.TEST, config_dir=config_dir, log_level="LOUD")

    @pytest.mark.parametrize("algorithm", ["none", "RS256", "ES256"])
    def test_jwt_algorithm_restricted_to_hmac(self, config_dir, algorithm):
        with pytest.raises(ValueError):
            load_config(
                Environment.TEST,
                config_dir=config_dir,
                auth=AuthConfig(jwt_secret="x" * 32, jwt_algorithm=algorithm),
            )

    def test_jwt_algorithm_from_environment(self, config_dir, monkeypatch):
        monkeypatch.setenv("APP_AUTH__JWT_ALGORITHM", "HS512")
        settings = load_config(Environment.TEST, config_dir=config_dir)
        assert settings.auth.jwt_algorithm == "HS512"

    def test_server_addr(self, config_dir):
        settings = load_config(Environment.TEST, config_dir=config_dir)
        assert settings.server.addr == "127.0.0.1:3000"


class TestJwtSecret:

    def test_configured_secret_is_used(self):
        settings = Settings(auth=AuthConfig(jwt_secret="configured-secret"))
        assert settings.resolve_jwt_secret() == "configured-secret"

    def test_production_without_secret_fails(self):
        settings = Settings(environment=Environment.PRODUCTION, auth=AuthConfig(jwt_secret=""))
        with pytest.raises(MissingSecretError):
            settings.resolve_jwt_secret()

    def test_create_app_refuses_production_without_secret(self):
        settings = Settings(environment=Environment.PRODUCTION, auth=AuthConfig(jwt_secret=""))
        with pytest.raises(MissingSecretError):
            create_app(settings)

    def test_development_generates_random_secret(self):
        settings = Settings(environment=Environment.DEVELOPMENT, auth=AuthConfig(jwt_secret=""))
        first = settings.resolve_jwt_secret()
        second = settings.resolve_jwt_secret()
        assert first and second and first != second

    def test_secret_not_in_repr(self):
        settings = Settings(auth=AuthConfig(jwt_secret="do-not-print-me"))
        assert "do-not-print-me" not in repr(settings)
