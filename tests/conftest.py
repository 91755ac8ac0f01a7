"""Pytest configuration and shared fixtures for all tests."""

# Add project root to path
import sys
from pathlib import Path

import pytest
from loguru import logger

sys.path.insert(0, str(Path(__file__).parent.parent))

from infrastructure.adapters.secondary.storage import InMemoryCarStore
from infrastructure.bootstrap import ApplicationBootstrap
from infrastructure.config import ApplicationSettings, ConfigurationManager


@pytest.fixture(autouse=True)
def reset_logger():
    """Restore a single stderr sink after tests that reconfigure loguru."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")


@pytest.fixture
def settings():
    """Host settings independent of the process environment."""
    return ApplicationSettings(environment="Testing", config_files=[], _env_file=None)


@pytest.fixture
def configuration():
    """In-memory configuration with a Car cache profile."""
    return ConfigurationManager.from_dict({
        "CacheProfileSettings": {
            "CacheProfiles": {
                "Car": {"Duration": 60, "Location": "Any"},
            },
        },
    })


@pytest.fixture
def bootstrap(settings, configuration):
    """Application bootstrap over the test settings and configuration."""
    bootstrap = ApplicationBootstrap(settings, configuration)
    yield bootstrap
    bootstrap.shutdown()


@pytest.fixture
def container(bootstrap):
    """Fully built application container."""
    return bootstrap.initialize()


@pytest.fixture
def sample_store():
    """Car store seeded with the sample cars."""
    return InMemoryCarStore.with_sample_data()
