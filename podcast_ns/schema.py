"""
Schema registry: which podcast elements a container carries, and how.

Registration is pure data. Nothing is generated until a PodcastNamespace
is built from the registry.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Type, Union

from .elements import Element
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class Arity(Enum):
    """How a schema entry attaches to its container."""
    SINGLE = 'single'
    REPEATED = 'repeated'
    SCALAR_ATTRIBUTE = 'scalar_attribute'
    SCALAR_TEXT = 'scalar_text'

    @property
    def is_element(self) -> bool:
        return self is not Arity.SCALAR_TEXT


ELEMENT_SUB_ARITIES = (Arity.SINGLE, Arity.SCALAR_ATTRIBUTE)

BASE = 'base'
CHANNEL = 'channel'
ITEM = 'item'
SCOPES = (BASE, CHANNEL, ITEM)


def to_snake_case(name: str) -> str:
    """updateFrequency -> update_frequency, funding-info -> funding_info"""
    name = name.replace('-', '_')
    return re.sub(r'(?<=[a-z0-9])([A-Z])', r'_\1', name).lower()


@dataclass(frozen=True)
class SchemaEntry:
    """
    One element of the namespace, as seen by a container.

    `name` is the XML local name. Repeated entries need a plural name and a
    sub-arity; scalar-attribute entries name the element attribute that
    carries the value.
    """
    name: str
    arity: Union[Arity, str]
    plural_name: Optional[str] = None
    sub_arity: Optional[Arity] = None
    element_type: Optional[Type[Element]] = None
    attribute: Optional[str] = None

    def __post_init__(self):
        if self.arity is Arity.REPEATED:
            if not self.plural_name:
                raise ConfigurationError(f"repeated entry {self.name!r} needs a plural name")
            if self.sub_arity not in ELEMENT_SUB_ARITIES:
                raise ConfigurationError(
                    f"repeated entry {self.name!r} needs a sub-arity of "
                    f"SINGLE or SCALAR_ATTRIBUTE, got {self.sub_arity!r}"
                )

    @property
    def accessor(self) -> str:
        return f'podcast_{to_snake_case(self.name)}'

    @property
    def plural_accessor(self) -> Optional[str]:
        if not self.plural_name:
            return None
        return f'podcast_{to_snake_case(self.plural_name)}'


# Short names accepted by register() besides the enum values
ARITY_NAMES = {
    'element': Arity.SINGLE,
    'elements': Arity.REPEATED,
    'attribute': Arity.SCALAR_ATTRIBUTE,
    'text': Arity.SCALAR_TEXT,
}


def _coerce_arity(arity: Union[Arity, str]) -> Union[Arity, str]:
    # Unknown names are kept as given and rejected by the accessor generator
    if isinstance(arity, Arity):
        return arity
    key = str(arity).lower()
    if key in ARITY_NAMES:
        return ARITY_NAMES[key]
    try:
        return Arity(key)
    except ValueError:
        return arity


class SchemaRegistry:
    """
    Ordered schema entries per scope.

    The base scope is shared by channel and item; a container scope entry
    with the same name as a base entry replaces it for that container.
    """

    def __init__(self):
        self._entries: Dict[str, List[SchemaEntry]] = {scope: [] for scope in SCOPES}

    def register(self, scope: str, name: str, arity: Union[Arity, str],
                 plural_name: Optional[str] = None,
                 sub_arity: Optional[Union[Arity, str]] = None,
                 element_type: Optional[Type[Element]] = None,
                 attribute: Optional[str] = None) -> SchemaEntry:
        if scope not in self._entries:
            raise ConfigurationError(f"unknown scope {scope!r}, expected one of {SCOPES}")
        if any(entry.name == name for entry in self._entries[scope]):
            raise ConfigurationError(f"{name!r} is already registered in scope {scope!r}")

        entry = SchemaEntry(
            name=name,
            arity=_coerce_arity(arity),
            plural_name=plural_name,
            sub_arity=_coerce_arity(sub_arity) if sub_arity is not None else None,
            element_type=element_type,
            attribute=attribute,
        )
        self._entries[scope].append(entry)
        return entry

    def entries(self, scope: str) -> List[SchemaEntry]:
        """Entries registered directly in one scope, in registration order."""
        if scope not in self._entries:
            raise ConfigurationError(f"unknown scope {scope!r}, expected one of {SCOPES}")
        return list(self._entries[scope])

    def entries_for(self, scope: str) -> List[SchemaEntry]:
        """Base entries followed by the container's own, overrides applied."""
        if scope == BASE:
            return self.entries(BASE)
        own = self.entries(scope)
        overridden = {entry.name for entry in own}
        return [e for e in self._entries[BASE] if e.name not in overridden] + own

    def install_order(self) -> List[SchemaEntry]:
        """Every entry in dispatch installation order: base, channel, item."""
        return [entry for scope in SCOPES for entry in self._entries[scope]]

    def __len__(self):
        return sum(len(entries) for entries in self._entries.values())


def default_schema() -> SchemaRegistry:
    """The podcastindex.org namespace elements this package supports."""
    registry = SchemaRegistry()

    registry.register(BASE, 'person', Arity.REPEATED, 'people', Arity.SINGLE)
    registry.register(BASE, 'location', Arity.SINGLE)
    registry.register(BASE, 'license', Arity.SINGLE)
    registry.register(BASE, 'images', Arity.SCALAR_ATTRIBUTE, attribute='srcset')
    registry.register(BASE, 'txt', Arity.REPEATED, 'txts', Arity.SINGLE)

    registry.register(CHANNEL, 'locked', Arity.SINGLE)
    registry.register(CHANNEL, 'funding', Arity.SINGLE)
    registry.register(CHANNEL, 'trailer', Arity.REPEATED, 'trailers', Arity.SINGLE)
    registry.register(CHANNEL, 'guid', Arity.SCALAR_TEXT)
    registry.register(CHANNEL, 'medium', Arity.SCALAR_TEXT)
    registry.register(CHANNEL, 'block', Arity.REPEATED, 'blocks', Arity.SINGLE)
    registry.register(CHANNEL, 'updateFrequency', Arity.SINGLE)
    registry.register(CHANNEL, 'podping', Arity.SCALAR_ATTRIBUTE, attribute='usesPodping')

    registry.register(ITEM, 'transcript', Arity.REPEATED, 'transcripts', Arity.SINGLE)
    registry.register(ITEM, 'chapters', Arity.SINGLE)
    registry.register(ITEM, 'season', Arity.SINGLE)
    registry.register(ITEM, 'episode', Arity.SINGLE)
    registry.register(ITEM, 'socialInteract', Arity.REPEATED, 'socialInteracts', Arity.SINGLE)

    logger.debug(f"Default podcast schema has {len(registry)} entries")
    return registry
