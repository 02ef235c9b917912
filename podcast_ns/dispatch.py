"""
Tag dispatch: (namespace URI, local name) -> producer.

The parser looks each namespaced child tag up here and hands the matching
producer the container it is currently filling. A lookup miss is not an
error; the parser skips the tag.
"""

import logging
from typing import Dict, Iterator, Mapping, Optional, Tuple, Type

from . import settings
from .elements import Element
from .errors import ConfigurationError
from .feed import Container
from .schema import Arity, SchemaEntry, SchemaRegistry

logger = logging.getLogger(__name__)

TagKey = Tuple[str, str]


class Producer:
    """Materializes one parsed tag into a container slot."""

    def __init__(self, name: str):
        self.name = name

    def produce(self, container: Container, attrib: Mapping[str, str],
                text: Optional[str], strict: Optional[bool] = None) -> bool:
        raise NotImplementedError


class ElementProducer(Producer):
    """Builds an element from attributes and text, then attaches it."""

    def __init__(self, name: str, element_type: Type[Element]):
        super().__init__(name)
        self.element_type = element_type

    def produce(self, container, attrib, text, strict=None):
        if strict is None:
            strict = container.strict
        element = self.element_type.from_xml(dict(attrib), text, strict=strict)
        return container.attach(self.name, element)

    def __repr__(self):
        return f'ElementProducer({self.name!r}, {self.element_type.__name__})'


class TextProducer(Producer):
    """Assigns the tag's text to a scalar slot."""

    def produce(self, container, attrib, text, strict=None):
        text = text.strip() if text else ''
        if not text:
            return False
        return container.attach(self.name, text)

    def __repr__(self):
        return f'TextProducer({self.name!r})'


class TagDispatchTable:
    """
    Producers keyed by (namespace URI, local name).

    A later install for the same key replaces the earlier producer. Once
    frozen, the table only answers lookups.
    """

    def __init__(self):
        self._producers: Dict[TagKey, Producer] = {}
        self._frozen = False

    def install(self, uri: str, local_name: str, producer: Producer) -> None:
        if self._frozen:
            raise ConfigurationError("tag dispatch table is frozen")
        key = (uri, local_name)
        previous = self._producers.get(key)
        if previous is not None:
            logger.debug(f"Replacing producer for {{{uri}}}{local_name}: {previous!r} -> {producer!r}")
        self._producers[key] = producer

    def install_element(self, uri: str, local_name: str, element_type: Type[Element]) -> None:
        self.install(uri, local_name, ElementProducer(local_name, element_type))

    def install_text(self, uri: str, local_name: str) -> None:
        self.install(uri, local_name, TextProducer(local_name))

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, uri: str, local_name: str) -> Optional[Producer]:
        return self._producers.get((uri, local_name))

    def __contains__(self, key: TagKey) -> bool:
        return key in self._producers

    def __iter__(self) -> Iterator[TagKey]:
        return iter(self._producers)

    def __len__(self) -> int:
        return len(self._producers)


def install_entry(table: TagDispatchTable, entry: SchemaEntry,
                  element_types: Mapping[str, Type[Element]],
                  uri: str = settings.PODCAST_URI) -> None:
    if entry.arity is Arity.SCALAR_TEXT:
        table.install_text(uri, entry.name)
        return
    if not isinstance(entry.arity, Arity):
        raise ConfigurationError(f"unknown arity {entry.arity!r} for {entry.name!r}")
    element_type = entry.element_type or element_types.get(entry.name)
    if element_type is None:
        raise ConfigurationError(f"no element type registered for {entry.name!r}")
    table.install_element(element_type.uri, entry.name, element_type)


def install_schema(table: TagDispatchTable, schema: SchemaRegistry,
                   element_types: Mapping[str, Type[Element]],
                   uri: str = settings.PODCAST_URI) -> TagDispatchTable:
    """
    Install one producer per schema entry.

    Base entries go first so channel and item entries for the same tag
    replace them.
    """
    for entry in schema.install_order():
        install_entry(table, entry, element_types, uri)
    logger.debug(f"Installed {len(table)} podcast tag producers")
    return table
