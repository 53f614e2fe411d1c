"""Tests for configuration classes."""

import os
import pytest
from unittest.mock import patch


class TestCORSConfig:
    """Tests for CORSConfig class."""

    def test_cors_default_origins(self):
        """Test that default CORS origins are set correctly."""
        with patch.dict(os.environ, {}, clear=True):
            from config import CORSConfig

            config = CORSConfig()

            assert config.allowed_origins == ["http://localhost:8000"]

    def test_cors_parses_origins_with_whitespace(self):
        """Test that CORS origins handles whitespace correctly."""
        env_origins = "  http://example.com  ,  http://localhost:3000  ,"
        with patch.dict(os.environ, {"CORS_ORIGINS": env_origins}):
            from config import _parse_cors_origins

            origins = _parse_cors_origins()

            assert origins == ["http://example.com", "http://localhost:3000"]

    def test_cors_default_methods_and_headers(self):
        from config import CORSConfig

        config = CORSConfig()

        assert config.allow_credentials is True
        assert "*" in config.allow_methods
        assert "*" in config.allow_headers


class TestRateLimitConfig:
    """Tests for RateLimitConfig class."""

    def test_rate_limit_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            from config import RateLimitConfig

            config = RateLimitConfig()

            assert config.enabled is True
            assert config.requests_per_minute == 60

    def test_rate_limit_from_env(self):
        with patch.dict(
            os.environ,
            {"RATE_LIMIT_ENABLED": "false", "RATE_LIMIT_RPM": "120"},
        ):
            from config import RateLimitConfig

            config = RateLimitConfig()

            assert config.enabled is False
            assert config.requests_per_minute == 120


class TestSecurityConfig:
    def test_secret_key_auto_generates(self):
        """Test that secret key is auto-generated when not in env."""
        with patch.dict(os.environ, {}, clear=True):
            from config import SecurityConfig

            assert len(SecurityConfig().secret_key) > 0

    def test_secret_key_from_env(self):
        with patch.dict(os.environ, {"SECRET_KEY": "my-super-secret-key-12345"}):
            from config import SecurityConfig

            assert SecurityConfig().secret_key == "my-super-secret-key-12345"


class TestRedisConfig:
    """Tests for RedisConfig class."""

    def test_redis_url_without_password(self):
        with patch.dict(os.environ, {}, clear=True):
            from config import RedisConfig

            assert RedisConfig().url == "redis://localhost:6379/0"

    def test_redis_url_with_password(self):
        with patch.dict(os.environ, {"REDIS_PASSWORD": "mypass", "REDIS_DB": "2"}, clear=True):
            from config import RedisConfig

            assert RedisConfig().url == "redis://:mypass@localhost:6379/2"


class TestStorageConfig:
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            from config import StorageConfig

            config = StorageConfig()

            assert config.backend == "memory"
            assert config.directory == ".trainer-data"
            assert config.redis_prefix == "bjt:"

    def test_backend_from_env(self):
        with patch.dict(os.environ, {"STORAGE_BACKEND": "FILE", "STORAGE_DIR": "/tmp/bjt"}):
            from config import StorageConfig

            config = StorageConfig()

            assert config.backend == "file"
            assert config.directory == "/tmp/bjt"

    def test_unknown_backend(self):
        with patch.dict(os.environ, {"STORAGE_BACKEND": "floppy"}):
            from config import StorageConfig

            with pytest.raises(ValueError):
                StorageConfig()


class TestTrainingConfig:
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            from config import TrainingConfig

            config = TrainingConfig()

            assert config.num_decks == 6
            assert config.penetration == 0.75
            assert config.prompt_thresholds == (4, 5)
            assert config.complete_on_shoe_end is False

    def test_from_env(self):
        env = {
            "DEFAULT_DECKS": "2",
            "DEFAULT_PENETRATION": "0.6",
            "PROMPT_THRESHOLDS": "3",
            "COMPLETE_ON_SHOE_END": "true",
        }
        with patch.dict(os.environ, env):
            from config import TrainingConfig

            config = TrainingConfig()

            assert config.num_decks == 2
            assert config.penetration == 0.6
            assert config.prompt_thresholds == (3,)
            assert config.complete_on_shoe_end is True

    @pytest.mark.parametrize("raw", ["0", "4,-1", "", "four"])
    def test_invalid_thresholds(self, raw):
        with patch.dict(os.environ, {"PROMPT_THRESHOLDS": raw}):
            from config import _parse_prompt_thresholds

            with pytest.raises(ValueError):
                _parse_prompt_thresholds()

    def test_frozen(self):
        from config import TrainingConfig

        config = TrainingConfig()

        with pytest.raises(Exception):  # dataclasses.FrozenInstanceError
            config.num_decks = 8


class TestAppConfig:
    """Tests for AppConfig class."""

    def test_app_config_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            from config import AppConfig

            config = AppConfig()

            assert config.debug is False
            assert config.host == "0.0.0.0"
            assert config.port == 8000
            assert config.log_level == "INFO"
            assert config.session_ttl == 3600

    def test_log_level_upper_cased(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            from config import AppConfig

            assert AppConfig().log_level == "DEBUG"

    def test_app_config_has_nested_configs(self):
        from config import AppConfig

        config = AppConfig()

        assert hasattr(config, "redis")
        assert hasattr(config, "storage")
        assert hasattr(config, "training")
        assert hasattr(config, "cors")
        assert hasattr(config, "rate_limit")
        assert hasattr(config, "security")
