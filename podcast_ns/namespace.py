"""
PodcastNamespace: a schema compiled into container classes and a tag
dispatch table.

Build one at startup and hand it to every FeedParser / FeedWriter. Nothing
in it changes after construction.
"""

import logging
import xml.etree.ElementTree as ET
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional, Type

from . import settings
from .accessors import build_container_class
from .dispatch import Producer, TagDispatchTable, install_schema
from .elements import Element
from .feed import Channel, Container, Item, Rss
from .podcast import ELEMENT_TYPES
from .schema import CHANNEL, ITEM, SchemaRegistry, default_schema

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def register_prefix(prefix: str, uri: str) -> None:
    """Map uri to prefix in ElementTree output, once per pair."""
    ET.register_namespace(prefix, uri)


class PodcastNamespace:
    """
    Compiled podcast namespace.

    Args:
        schema: Registry to compile, defaults to the full podcast schema
        element_types: Extra or replacement element types by tag
        strict: Validation mode for documents built from this namespace,
            defaults to settings.STRICT_VALIDATION
    """

    prefix = settings.PODCAST_PREFIX
    uri = settings.PODCAST_URI

    def __init__(self, schema: Optional[SchemaRegistry] = None,
                 element_types: Optional[Mapping[str, Type[Element]]] = None,
                 strict: Optional[bool] = None):
        self.schema = schema if schema is not None else default_schema()
        self.element_types: Dict[str, Type[Element]] = dict(ELEMENT_TYPES)
        if element_types:
            self.element_types.update(element_types)
        self.strict = settings.STRICT_VALIDATION if strict is None else strict

        self.item_class: Type[Item] = build_container_class(
            Item, self.schema.entries_for(ITEM), self.element_types,
        )
        self.channel_class: Type[Channel] = build_container_class(
            Channel, self.schema.entries_for(CHANNEL), self.element_types,
            item_class=self.item_class,
        )

        self.dispatch = install_schema(
            TagDispatchTable(), self.schema, self.element_types, self.uri,
        )
        self.dispatch.freeze()
        register_prefix(self.prefix, self.uri)

        logger.debug(
            f"Podcast namespace ready: {len(self.schema)} schema entries, "
            f"{len(self.dispatch)} tags, strict={self.strict}"
        )

    def lookup(self, uri: str, local_name: str) -> Optional[Producer]:
        return self.dispatch.lookup(uri, local_name)

    def new_channel(self, strict: Optional[bool] = None, **fields) -> Channel:
        return self.channel_class(strict=self.strict if strict is None else strict, **fields)

    def new_item(self, strict: Optional[bool] = None, **fields) -> Item:
        return self.item_class(strict=self.strict if strict is None else strict, **fields)

    def new_feed(self, strict: Optional[bool] = None, **channel_fields) -> Rss:
        """An empty <rss> document with a channel of this namespace."""
        return Rss(self.new_channel(strict=strict, **channel_fields))

    def owns(self, container: Container) -> bool:
        return isinstance(container, (self.channel_class, self.item_class))

    def to_dict(self, container: Container) -> Dict[str, Any]:
        return container.podcast_to_dict()


@lru_cache(maxsize=None)
def get_default_namespace() -> PodcastNamespace:
    """The full podcast namespace, built on first use."""
    return PodcastNamespace()
