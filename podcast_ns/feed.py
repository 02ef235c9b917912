"""
RSS 2.0 document containers.

Channel and Item only know their core RSS fields. The podcast slots are
added by the accessor generator, which builds a subclass per namespace;
these base classes are never modified.
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from . import settings

logger = logging.getLogger(__name__)


class Container:
    """A document-level element that owns podcast child slots."""

    scope = ''

    # Set on the generated subclass, keyed by schema entry name
    bindings: Mapping[str, Any] = MappingProxyType({})
    validators: Tuple[Callable[['Container'], None], ...] = ()

    def __init__(self, strict: Optional[bool] = None, **fields):
        self.strict = settings.STRICT_VALIDATION if strict is None else strict
        self._podcast: Dict[str, Any] = {}
        self.title: Optional[str] = fields.pop('title', None)
        self.link: Optional[str] = fields.pop('link', None)
        self.description: Optional[str] = fields.pop('description', None)
        if fields:
            raise TypeError(f"{type(self).__name__} has no field(s) {', '.join(sorted(fields))}")

    def attach(self, name: str, value: Any) -> bool:
        """
        Attach a parsed value through the binding registered for `name`.

        Returns False when this container has no such binding, or the
        binding does not take this kind of value.
        """
        binding = self.bindings.get(name)
        if binding is None:
            logger.debug(f"<{self.scope}> has no podcast slot {name!r}, skipping")
            return False
        if not binding.accepts(value):
            logger.warning(f"<{self.scope}> slot {name!r} does not take {value!r}, skipping")
            return False
        binding.attach(self, value)
        return True

    def validate(self) -> None:
        """Run every registered element validator; the first failure raises."""
        for check in self.validators:
            check(self)

    def podcast_to_dict(self) -> Dict[str, Any]:
        """Every set podcast slot, keyed by accessor name (plural for lists)."""
        data = {}
        for binding in self.bindings.values():
            value = binding.to_dict(self)
            if value is not None:
                data[binding.dict_key] = value
        return data

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'title': self.title,
            'link': self.link,
            'description': self.description,
        }
        data['podcast'] = self.podcast_to_dict()
        return data


class Item(Container):
    scope = 'item'

    def __init__(self, strict: Optional[bool] = None, guid: Optional[str] = None, **fields):
        super().__init__(strict=strict, **fields)
        self.guid = guid

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['guid'] = self.guid
        return data


class Channel(Container):
    scope = 'channel'

    # Set on the generated subclass
    item_class = Item

    def __init__(self, strict: Optional[bool] = None, **fields):
        super().__init__(strict=strict, **fields)
        self.items: List[Item] = []

    def new_item(self, **fields) -> Item:
        item = self.item_class(strict=self.strict, **fields)
        self.items.append(item)
        return item

    def validate(self) -> None:
        super().validate()
        for item in self.items:
            item.validate()

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['items'] = [item.to_dict() for item in self.items]
        return data


class Rss:
    """The <rss> document root."""

    def __init__(self, channel: Channel, version: str = settings.RSS_VERSION):
        self.channel = channel
        self.version = version

    def validate(self) -> None:
        self.channel.validate()

    def to_dict(self) -> Dict[str, Any]:
        return {'version': self.version, 'channel': self.channel.to_dict()}
