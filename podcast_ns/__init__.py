"""
podcast_ns - Podcasting 2.0 namespace support for RSS feeds.

A declarative schema of <podcast:*> elements is compiled into accessors on
channel and item containers and into the tag dispatch table the feed parser
uses.
"""

from .errors import (
    ConfigurationError,
    FeedParseError,
    FormatError,
    PodcastNamespaceError,
    ValidationError,
)
from .feed import Channel, Item, Rss
from .namespace import PodcastNamespace, get_default_namespace
from .parser import FeedParser, parse
from .podcast import ELEMENT_TYPES
from .schema import BASE, CHANNEL, ITEM, Arity, SchemaEntry, SchemaRegistry, default_schema
from .settings import PODCAST_PREFIX, PODCAST_URI
from .writer import FeedWriter, write

__version__ = '0.1.0'

__all__ = [
    'Arity',
    'BASE',
    'CHANNEL',
    'Channel',
    'ConfigurationError',
    'ELEMENT_TYPES',
    'FeedParseError',
    'FeedParser',
    'FeedWriter',
    'FormatError',
    'ITEM',
    'Item',
    'PODCAST_PREFIX',
    'PODCAST_URI',
    'PodcastNamespace',
    'PodcastNamespaceError',
    'Rss',
    'SchemaEntry',
    'SchemaRegistry',
    'ValidationError',
    'default_schema',
    'get_default_namespace',
    'parse',
    'write',
]
