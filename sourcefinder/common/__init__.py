"""
Common module exports
"""

from sourcefinder.common.config import ResolverSettings, load_settings
from sourcefinder.common.errors import FetchError, FetchErrorType
from sourcefinder.common.input_validation import InputValidator, ValidationError
from sourcefinder.common.models import (
    Coordinate,
    Dependency,
    GitSourceCredential,
    RegistryCredential,
    Requirement,
    RequirementSource,
    parse_credentials,
)
from sourcefinder.common.utils import Logger

__all__ = [
    "Logger",
    "ResolverSettings",
    "load_settings",
    "FetchError",
    "FetchErrorType",
    "InputValidator",
    "ValidationError",
    "Coordinate",
    "Dependency",
    "Requirement",
    "RequirementSource",
    "RegistryCredential",
    "GitSourceCredential",
    "parse_credentials",
]
