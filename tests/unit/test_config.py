"""Test configuration settings and logging setup."""
import json
import logging
from pathlib import Path

import pytest

from tldr.config import JSONFormatter, Settings, configure_logging, get_settings, load_settings
from tldr.errors import ConfigurationError


class TestSettings:
    """Test Settings loading from the environment."""

    def test_default_values(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-test")

        settings = load_settings()

        assert settings.openai_api_key.get_secret_value() == "sk-test"
        assert settings.openai_api_base == "https://api.openai.com/v1"
        assert settings.model == "gpt-3.5-turbo"
        assert settings.tokenizer_model == "gpt-3.5-turbo"
        assert settings.max_tokens == 2048
        assert settings.word_group_size == 50
        assert settings.max_concurrency is None
        assert settings.data_dir == Path("data")
        assert settings.log_format == "text"

    def test_default_sampling_params(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-test")

        params = load_settings().sampling_params()

        assert params.temperature == 0.7
        assert params.top_p == 0.9
        assert params.frequency_penalty == 0.5
        assert params.presence_penalty == 0.0

    def test_env_overrides(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-test")
        clean_env.setenv("OPENAI_API_BASE", "http://localhost:8000/v1")
        clean_env.setenv("TLDR_MODEL", "gpt-4o-mini")
        clean_env.setenv("TLDR_MAX_TOKENS", "1000")
        clean_env.setenv("TLDR_WORD_GROUP_SIZE", "25")
        clean_env.setenv("TLDR_TEMPERATURE", "0.2")
        clean_env.setenv("DATA_DIR", "/tmp/tldr-data")

        settings = load_settings()

        assert settings.openai_api_base == "http://localhost:8000/v1"
        assert settings.model == "gpt-4o-mini"
        assert settings.max_tokens == 1000
        assert settings.word_group_size == 25
        assert settings.sampling_params().temperature == 0.2
        assert settings.data_dir == Path("/tmp/tldr-data")

    def test_alternate_key_alias(self, clean_env):
        clean_env.setenv("TLDR_OPENAI_API_KEY", "sk-alt")

        assert load_settings().openai_api_key.get_secret_value() == "sk-alt"

    def test_api_key_is_not_printed(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-secret")

        assert "sk-secret" not in repr(load_settings())

    def test_dotenv_file_is_read(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("OPENAI_API_KEY=sk-from-file\n")

        assert load_settings().openai_api_key.get_secret_value() == "sk-from-file"

    @pytest.mark.parametrize("value", ["0", ""])
    def test_zero_or_empty_concurrency_means_unbounded(self, clean_env, value):
        clean_env.setenv("OPENAI_API_KEY", "sk-test")
        clean_env.setenv("TLDR_MAX_CONCURRENCY", value)

        assert load_settings().max_concurrency is None


class TestMissingCredential:
    """A missing credential is a configuration error."""

    def test_missing_key(self):
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            load_settings()

    def test_blank_key(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "   ")

        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            load_settings()

    def test_get_settings_raises_and_does_not_cache_failure(self, clean_env):
        with pytest.raises(ConfigurationError):
            get_settings()

        clean_env.setenv("OPENAI_API_KEY", "sk-test")
        assert isinstance(get_settings(), Settings)

    def test_invalid_value(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-test")
        clean_env.setenv("TLDR_MAX_TOKENS", "0")

        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_settings()

    def test_negative_concurrency_is_invalid(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-test")
        clean_env.setenv("TLDR_MAX_CONCURRENCY", "-1")

        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_settings()


class TestLogging:
    def test_json_formatter_includes_extra_fields(self):
        record = logging.LogRecord(
            "tldr.test", logging.INFO, __file__, 1, "Wrote %s", ("transcript",), None
        )
        record.video_id = "abc123"

        payload = json.loads(JSONFormatter().format(record))

        assert payload["message"] == "Wrote transcript"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "tldr.test"
        assert payload["video_id"] == "abc123"
        assert "args" not in payload

    def test_configure_logging_sets_level_and_format(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-test")
        clean_env.setenv("LOG_LEVEL", "debug")
        clean_env.setenv("LOG_FORMAT", "json")
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level

        try:
            configure_logging(load_settings())

            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
