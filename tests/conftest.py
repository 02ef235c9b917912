"""
Shared fixtures.

Run:
    python -m pytest tests -v
"""

from pathlib import Path

import pytest

from podcast_ns import PodcastNamespace

FIXTURES = Path(__file__).parent / 'fixtures'


@pytest.fixture(scope='session')
def namespace():
    """Strict namespace shared by every test; it is immutable once built."""
    return PodcastNamespace(strict=True)


@pytest.fixture(scope='session')
def permissive_namespace():
    return PodcastNamespace(strict=False)


@pytest.fixture
def feed_path():
    return FIXTURES / 'podcast_feed.xml'


@pytest.fixture
def feed_xml(feed_path):
    return feed_path.read_text(encoding='utf-8')
