"""
Pytest configuration and shared fixtures for fast-translatable tests.
"""

import pytest
from faker import Faker

from fast_translatable.config import configure, reset_config
from fast_translatable.core.localization import reset_locale
from translatable_models import LOCALES, reset_stores

fake = Faker()


@pytest.fixture(autouse=True)
def translatable_config():
    """Install a catalogue with plain and region-qualified locales for every test."""
    config = configure({"locales": LOCALES, "fallback_locale": "en"})
    reset_locale()
    yield config
    reset_config()
    reset_locale()


@pytest.fixture
def sample_data():
    """Provide sample data for tests."""
    return {
        "slug": fake.slug(),
        "title": fake.sentence(nb_words=3),
        "description": fake.paragraph(),
    }


@pytest.fixture(autouse=True)
def clean_stores():
    reset_stores()
    yield
    reset_stores()


# Configure pytest-asyncio
pytest_plugins = ['pytest_asyncio']
