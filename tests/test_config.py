"""
Tests for configuration loading and credential checks.
"""

import pytest
from pathlib import Path
from pydantic import ValidationError

from tubeai.config import Configuration
from tubeai.error_handling import ConfigurationError


ENV_VARS = [
    'YOUTUBE_API_KEY', 'OPENAI_API_KEY', 'NEWS_API_KEY', 'OPENAI_MODEL', 'MAX_VIDEOS',
    'REQUEST_TIMEOUT', 'REDDIT_USER_AGENT', 'LOG_LEVEL', 'LOG_FILE', 'DEBUG',
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the caller's environment and any local .env file."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


class TestConfiguration:
    """Test cases for Configuration."""

    def test_defaults(self):
        """Test default values without any environment."""
        config = Configuration()

        assert config.youtube_api_key is None
        assert config.openai_api_key is None
        assert config.openai_model == "gpt-4o-mini"
        assert config.max_videos == 10
        assert config.request_timeout == 60.0
        assert config.reddit_user_agent == "TubeAI/1.0"
        assert config.log_level == "INFO"

    def test_environment_loading(self, monkeypatch):
        """Test values are read from environment variables."""
        monkeypatch.setenv('YOUTUBE_API_KEY', 'AIzaEnvKey1234567890')
        monkeypatch.setenv('OPENAI_API_KEY', 'sk-env')
        monkeypatch.setenv('MAX_VIDEOS', '5')
        monkeypatch.setenv('REQUEST_TIMEOUT', '12.5')
        monkeypatch.setenv('DEBUG', 'yes')
        monkeypatch.setenv('LOG_FILE', 'logs/tubeai.log')

        config = Configuration()

        assert config.youtube_api_key == 'AIzaEnvKey1234567890'
        assert config.openai_api_key == 'sk-env'
        assert config.max_videos == 5
        assert config.request_timeout == 12.5
        assert config.debug is True
        assert config.log_file == Path('logs/tubeai.log')

    def test_explicit_values_override_environment(self, monkeypatch):
        """Test explicit keyword arguments win over the environment."""
        monkeypatch.setenv('YOUTUBE_API_KEY', 'AIzaEnvKey1234567890')

        config = Configuration(youtube_api_key=None)

        assert config.youtube_api_key is None

    def test_invalid_integer_environment(self, monkeypatch):
        """Test non-integer MAX_VIDEOS is rejected."""
        monkeypatch.setenv('MAX_VIDEOS', 'ten')

        with pytest.raises(ValueError, match="MAX_VIDEOS must be an integer"):
            Configuration()

    def test_placeholder_keys_treated_as_missing(self):
        """Test placeholder and blank keys count as not configured."""
        config = Configuration(youtube_api_key="your_youtube_api_key_here", openai_api_key="   ")

        assert config.youtube_api_key is None
        assert config.openai_api_key is None

    def test_invalid_log_level(self):
        """Test log level validation."""
        with pytest.raises(ValidationError):
            Configuration(log_level="LOUD")

    def test_max_videos_bounds(self):
        """Test max_videos range validation."""
        with pytest.raises(ValidationError):
            Configuration(max_videos=0)

    def test_load_config_missing_file(self, tmp_path):
        """Test load_config rejects a missing config file."""
        with pytest.raises(FileNotFoundError):
            Configuration.load_config(tmp_path / "missing.env")

    def test_load_config_from_file(self, tmp_path, monkeypatch):
        """Test load_config reads a .env file."""
        # Register OPENAI_MODEL with monkeypatch so the loaded value is undone on teardown
        monkeypatch.setenv('OPENAI_MODEL', 'unset')
        monkeypatch.delenv('OPENAI_MODEL')
        env_file = tmp_path / "custom.env"
        env_file.write_text("OPENAI_MODEL=gpt-4o\n")

        config = Configuration.load_config(env_file)

        assert config.openai_model == "gpt-4o"

    def test_to_dict_masks_keys(self):
        """Test API keys are masked in the dictionary view."""
        config = Configuration(youtube_api_key="AIzaSecret1234567890", openai_api_key="sk-secret")

        data = config.to_dict()

        assert data['youtube_api_key'] == '***masked***'
        assert data['openai_api_key'] == '***masked***'
        assert data['news_api_key'] is None
        assert 'sk-secret' not in str(data)


class TestCredentialChecks:
    """Test the two required credentials are checked independently."""

    def test_missing_youtube_key(self):
        config = Configuration(youtube_api_key=None, openai_api_key="sk-test")

        with pytest.raises(ConfigurationError, match="YouTube API key is not configured"):
            config.require_api_keys()

    def test_missing_openai_key(self):
        config = Configuration(youtube_api_key="AIzaTest1234567890", openai_api_key=None)

        with pytest.raises(ConfigurationError, match="OpenAI API key is not configured"):
            config.require_api_keys()

    def test_errors_are_distinct(self):
        """Test each missing key produces its own error."""
        config = Configuration(youtube_api_key=None, openai_api_key=None)

        with pytest.raises(ConfigurationError) as youtube_error:
            config.require_youtube_api_key()
        with pytest.raises(ConfigurationError) as openai_error:
            config.require_openai_api_key()

        assert youtube_error.value is not openai_error.value
        assert youtube_error.value.message != openai_error.value.message
        assert youtube_error.value.status_code == 500

    def test_validate_api_keys(self):
        assert Configuration(youtube_api_key="AIzaTest1234567890", openai_api_key="sk-test").validate_api_keys()
        assert not Configuration(youtube_api_key="AIzaTest1234567890", openai_api_key=None).validate_api_keys()
