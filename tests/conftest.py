"""
Pytest configuration and shared fixtures
"""

import os
import random

import pytest

# Expose additional fixtures from support library
pytest_plugins = ["tests.support.fixtures"]

from sourcefinder.common.config import ResolverSettings
from sourcefinder.common.utils import Logger


@pytest.fixture
def logger():
    """Provide a verbose logger for tests"""
    return Logger(verbose=True)


@pytest.fixture
def settings(monkeypatch):
    """Default resolver settings, isolated from SOURCEFINDER_* variables in the environment"""
    for key in list(os.environ):
        if key.startswith("SOURCEFINDER_"):
            monkeypatch.delenv(key)
    return ResolverSettings(_env_file=None)


def pytest_configure(config):
    os.environ.setdefault("TZ", "UTC")
    random.seed(1337)
