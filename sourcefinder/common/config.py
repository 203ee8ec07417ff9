"""
Configuration management using Pydantic Settings
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings

from sourcefinder.common.input_validation import InputValidator, ValidationError


class ResolverSettings(BaseSettings):
    """
    Configuration settings for manifest-based source URL resolution

    Every field can be overridden through a SOURCEFINDER_-prefixed
    environment variable or a .env file
    """

    DEFAULT_REGISTRY_URL: str = "https://repo.maven.apache.org/maven2"
    MANIFEST_EXTENSION: str = "pom"
    GITHUB_API_URL: str = "https://api.github.com"

    REQUEST_TIMEOUT: float = 10.0  # seconds
    USER_AGENT: str = "sourcefinder/0.1"

    MAX_REDIRECTS: int = 5
    MAX_PARENT_DEPTH: int = 10  # Legitimate parent chains are a handful deep

    # Concurrency for batch resolution
    MAX_WORKERS: int = 4

    model_config = {"env_prefix": "SOURCEFINDER_", "env_file": ".env", "extra": "ignore"}

    @field_validator("DEFAULT_REGISTRY_URL", "GITHUB_API_URL")
    @classmethod
    def validate_base_url(cls, v):
        """
        Ensure base URLs are http(s) and carry no trailing slash

        Args:
            v (str): The URL value to validate

        Returns:
            The normalized URL

        Raises:
            ValueError: If the URL is not a usable http(s) URL
        """
        try:
            InputValidator.validate_url(v)
        except ValidationError as e:
            raise ValueError(str(e))
        return v.rstrip("/")

    @field_validator("MANIFEST_EXTENSION")
    @classmethod
    def validate_extension(cls, v):
        v = v.lstrip(".")
        if not v or "/" in v:
            raise ValueError("MANIFEST_EXTENSION must be a bare file extension")
        return v

    @field_validator("MAX_REDIRECTS", "MAX_PARENT_DEPTH", "MAX_WORKERS")
    @classmethod
    def validate_positive(cls, v):
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @field_validator("REQUEST_TIMEOUT")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("REQUEST_TIMEOUT must be positive")
        return v


def load_settings(overrides=None):
    """
    Build settings from the environment plus optional overrides

    Args:
        overrides (dict): Mapping of setting names to values, e.g. parsed from the CLI

    Returns:
        ResolverSettings instance

    Raises:
        pydantic.ValidationError: If an override has an invalid value
    """
    return ResolverSettings(**(overrides or {}))
