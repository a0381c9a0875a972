"""
Configuration management for tubeai.

This module provides configuration loading with environment variable handling,
validation, and default values. A Configuration instance is passed explicitly to
the pipeline; there is no module-level configuration state.
"""

import os
from typing import Optional
from pathlib import Path
from pydantic import BaseModel, Field, field_validator, ValidationError
from dotenv import load_dotenv

from .error_handling import ConfigurationError


PLACEHOLDER_VALUES = {
    "your_youtube_api_key_here",
    "your_openai_api_key_here",
    "your_news_api_key_here",
}


class Configuration(BaseModel):
    """
    Configuration class for tubeai.

    Holds API keys, model and fetch settings, and logging options. API keys are
    optional at construction time; the pipeline checks for them per request so
    that a missing key surfaces as a ConfigurationError rather than a crash.
    """

    # API Configuration
    youtube_api_key: Optional[str] = Field(default=None, description="YouTube Data API v3 key")
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key for topic and idea generation")
    news_api_key: Optional[str] = Field(default=None, description="NewsAPI key (news enrichment is skipped without it)")
    openai_model: str = Field(default="gpt-4o-mini", description="OpenAI model for topic and idea generation")

    # Pipeline Settings
    max_videos: int = Field(default=10, ge=1, le=50, description="Number of recent uploads to analyze")
    request_timeout: float = Field(default=60.0, gt=0, le=600, description="Upper bound for a single analysis run in seconds")
    reddit_user_agent: str = Field(default="TubeAI/1.0", description="User-Agent header for Reddit requests")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Optional log file path")

    # Development Settings
    debug: bool = Field(default=False, description="Enable debug mode")

    @field_validator('youtube_api_key', 'openai_api_key', 'news_api_key')
    @classmethod
    def normalize_api_key(cls, v):
        """Treat blank and placeholder keys as missing."""
        if v is None:
            return None
        v = v.strip()
        if not v or v in PLACEHOLDER_VALUES:
            return None
        return v

    @field_validator('openai_model')
    @classmethod
    def validate_openai_model(cls, v):
        """Validate OpenAI model name is present."""
        if not v or not v.strip():
            raise ValueError("OpenAI model must be provided")
        return v.strip()

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level is one of the standard levels."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    def __init__(self, **data):
        """Initialize configuration; explicit values win over the environment."""
        load_dotenv()

        env_data = self._load_from_environment()
        env_data.update(data)

        super().__init__(**env_data)

    @staticmethod
    def _load_from_environment() -> dict:
        """Load configuration values from environment variables."""
        env_mapping = {
            'youtube_api_key': 'YOUTUBE_API_KEY',
            'openai_api_key': 'OPENAI_API_KEY',
            'news_api_key': 'NEWS_API_KEY',
            'openai_model': 'OPENAI_MODEL',
            'max_videos': 'MAX_VIDEOS',
            'request_timeout': 'REQUEST_TIMEOUT',
            'reddit_user_agent': 'REDDIT_USER_AGENT',
            'log_level': 'LOG_LEVEL',
            'log_file': 'LOG_FILE',
            'debug': 'DEBUG',
        }

        env_data = {}
        for field_name, env_var in env_mapping.items():
            env_value = os.getenv(env_var)
            if env_value is None:
                continue
            if field_name == 'max_videos':
                try:
                    env_data[field_name] = int(env_value)
                except ValueError:
                    raise ValueError(f"Environment variable {env_var} must be an integer")
            elif field_name == 'request_timeout':
                try:
                    env_data[field_name] = float(env_value)
                except ValueError:
                    raise ValueError(f"Environment variable {env_var} must be a number")
            elif field_name == 'debug':
                env_data[field_name] = env_value.lower() in ('true', '1', 'yes', 'on')
            elif field_name == 'log_file':
                env_data[field_name] = Path(env_value)
            else:
                env_data[field_name] = env_value

        return env_data

    @classmethod
    def load_config(cls, config_file: Optional[Path] = None) -> 'Configuration':
        """
        Load configuration from environment variables and optional config file.

        Args:
            config_file: Optional path to .env file to load

        Returns:
            Configuration instance

        Raises:
            ValidationError: If configuration validation fails
            FileNotFoundError: If specified config file doesn't exist
        """
        if config_file and not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")

        if config_file:
            load_dotenv(config_file)

        try:
            return cls()
        except ValidationError as e:
            raise e

    def require_youtube_api_key(self) -> str:
        """Return the YouTube API key or raise ConfigurationError."""
        if not self.youtube_api_key:
            raise ConfigurationError("YouTube API key is not configured")
        return self.youtube_api_key

    def require_openai_api_key(self) -> str:
        """Return the OpenAI API key or raise ConfigurationError."""
        if not self.openai_api_key:
            raise ConfigurationError("OpenAI API key is not configured")
        return self.openai_api_key

    def require_api_keys(self) -> None:
        """Check both required credentials, YouTube first."""
        self.require_youtube_api_key()
        self.require_openai_api_key()

    def validate_api_keys(self) -> bool:
        """
        Validate that the required API keys are configured.

        Returns:
            True if both required keys are present, False otherwise
        """
        try:
            self.require_api_keys()
            return True
        except ConfigurationError:
            return False

    def to_dict(self) -> dict:
        """
        Convert configuration to dictionary, excluding sensitive data.

        Returns:
            Dictionary representation of configuration (API keys masked)
        """
        config_dict = self.model_dump()
        for key in ('youtube_api_key', 'openai_api_key', 'news_api_key'):
            config_dict[key] = '***masked***' if config_dict[key] else None
        config_dict['log_file'] = str(self.log_file) if self.log_file else None
        return config_dict
