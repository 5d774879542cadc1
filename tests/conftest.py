import os
import sys

import pytest

# Add the project root to sys.path to resolve module imports correctly
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import Settings, get_settings
from models import KeyMode
from registry import Registry

TEST_SALT = "test-salt-do-not-use-in-production"


@pytest.fixture(autouse=True)
def clean_settings_cache():
    """Every test starts without a cached process-wide configuration."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(hashid_salt=TEST_SALT)


@pytest.fixture
def registry(settings: Settings) -> Registry:
    """
    A registry with an integer-keyed User, a UUID-keyed Org and a
    compositional PhoneNumber.
    """
    registry = Registry(settings)
    registry.register("User", prefix="usr")
    registry.register("Org", key_mode=KeyMode.UUID, prefix="org")
    registry.register("PhoneNumber", segments=["int", "tool", "phn"])
    return registry
