"""
Base element abstraction for namespaced child elements.

An Element subclass declares its XML attributes as class-level descriptors.
Typed descriptors coerce on write (integer, float, boolean, date) or
interpret on read (URI). What happens on a bad value depends on the
element's strict flag: strict raises FormatError / ValidationError,
permissive stores the raw value unchanged.

    class PodcastLicense(Element):
        tag = 'license'

        url = Attribute('url')
        content = Attribute()

An attribute declared without an XML name is the element's text content.
"""

import logging
import re
import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import SplitResult, urlsplit

from . import dates, settings
from .errors import FormatError, ValidationError

logger = logging.getLogger(__name__)


class Attribute:
    """A plain string attribute (or the text content when xml_name is None)."""

    expected = 'a string'

    def __init__(self, xml_name: Optional[str] = None, required: bool = False):
        self.xml_name = xml_name
        self.required = required
        self.name: Optional[str] = None

    def __set_name__(self, owner, name):
        self.name = name

    @property
    def is_content(self) -> bool:
        return self.xml_name is None

    @property
    def label(self) -> str:
        return self.xml_name or self.name

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        return self.read(obj, obj._values.get(self.name))

    def __set__(self, obj, value):
        obj._values[self.name] = self.write(obj, value)

    def raw(self, obj) -> Any:
        """The stored value, before any read-side interpretation."""
        return obj._values.get(self.name)

    def read(self, element: 'Element', stored: Any) -> Any:
        return stored

    def write(self, element: 'Element', value: Any) -> Any:
        return value

    def serialize(self, stored: Any) -> Optional[str]:
        if stored is None:
            return None
        return str(stored)


class _CoercingAttribute(Attribute):
    """Coerces eagerly on write; subclasses implement coerce()."""

    def coerce(self, value: Any) -> Any:
        raise NotImplementedError

    def write(self, element, value):
        if value is None:
            return None
        try:
            return self.coerce(value)
        except (TypeError, ValueError):
            if element.strict:
                raise FormatError(self.label, value, self.expected)
            logger.debug(f"Keeping raw {self.label}={value!r} on <{element.tag}>")
            return value


class IntegerAttribute(_CoercingAttribute):
    expected = 'an integer'

    def coerce(self, value):
        if isinstance(value, bool):
            raise TypeError(value)
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(value)
        return int(value)


class FloatAttribute(_CoercingAttribute):
    expected = 'a number'

    def coerce(self, value):
        if isinstance(value, bool):
            raise TypeError(value)
        return float(value)


class BooleanAttribute(_CoercingAttribute):
    expected = 'true or false'

    def coerce(self, value):
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            text = value.strip().lower()
            if text == 'true':
                return True
            if text == 'false':
                return False
        raise ValueError(value)

    def serialize(self, stored):
        if isinstance(stored, bool):
            return 'true' if stored else 'false'
        return super().serialize(stored)


class DateAttribute(_CoercingAttribute):
    """Date parsed to an aware datetime, in RFC 2822 or ISO 8601."""

    def __init__(self, xml_name=None, required=False, fmt=dates.RFC2822):
        super().__init__(xml_name, required)
        self.fmt = fmt

    @property
    def expected(self):
        return f'an {self.fmt.upper()} date'

    def coerce(self, value):
        if isinstance(value, datetime):
            return dates.coerce_datetime(value)
        if not isinstance(value, str):
            raise TypeError(value)
        parsed = dates.parse_date(value, self.fmt)
        if parsed is None:
            raise ValueError(value)
        return parsed

    def serialize(self, stored):
        if isinstance(stored, datetime):
            return dates.format_date(stored, self.fmt)
        return super().serialize(stored)


# RFC 3986 reserved + unreserved characters, plus percent escapes
URI_CHARACTERS = re.compile(r"^[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]*$")
BAD_PERCENT = re.compile(r'%(?![0-9A-Fa-f]{2})')


def parse_uri(value: Any) -> SplitResult:
    """Split value as a URI reference, raising ValueError when malformed."""
    if not isinstance(value, str):
        raise TypeError(value)
    if not URI_CHARACTERS.match(value) or BAD_PERCENT.search(value):
        raise ValueError(value)
    parts = urlsplit(value)
    # Accessing .port validates it
    parts.port
    return parts


class URIAttribute(Attribute):
    """Stored raw, interpreted as a URI when read."""

    expected = 'a URI'

    def read(self, element, stored):
        if stored is None or isinstance(stored, SplitResult):
            return stored
        try:
            return parse_uri(stored)
        except (TypeError, ValueError):
            if element.strict:
                raise FormatError(self.label, stored, self.expected)
            return stored

    def write(self, element, value):
        if isinstance(value, SplitResult):
            return value.geturl()
        return value


class BoundedAttribute(Attribute):
    """String attribute with a maximum length."""

    def __init__(self, xml_name=None, required=False, max_length=128):
        super().__init__(xml_name, required)
        self.max_length = max_length

    def write(self, element, value):
        if value is None:
            return None
        if not isinstance(value, str):
            value = str(value)
        if element.strict and len(value) > self.max_length:
            raise ValidationError.too_long(self.label, self.max_length, len(value))
        return value


class Alias:
    """
    Another name for a canonical attribute.

    Read-only unless writable=True; never holds a value of its own.
    """

    def __init__(self, canonical: str, writable: bool = False):
        self.canonical = canonical
        self.writable = writable
        self.name: Optional[str] = None

    def __set_name__(self, owner, name):
        self.name = name

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        return getattr(obj, self.canonical)

    def __set__(self, obj, value):
        if not self.writable:
            raise AttributeError(f"{self.name} is a read-only view of {self.canonical}")
        setattr(obj, self.canonical, value)


class YesNoAlias(Alias):
    """Read-only boolean view: True only when the canonical value is "yes"."""

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        value = getattr(obj, self.canonical)
        if value is True:
            return True
        return isinstance(value, str) and value.strip().lower() == 'yes'


class Element:
    """
    Base class for every namespaced child element.

    Subclasses set `tag` and declare Attribute descriptors. `defaults` maps
    python attribute names to constants applied once, at construction, when
    the supplied value is None or empty.
    """

    tag: str = ''
    prefix = settings.PODCAST_PREFIX
    uri = settings.PODCAST_URI

    defaults: Dict[str, Any] = {}

    # Filled in by __init_subclass__
    _attributes: Tuple[Attribute, ...] = ()
    _content: Optional[Attribute] = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        declared: Dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            declared.update(vars(klass))
        attributes: List[Attribute] = []
        content = None
        for key, value in declared.items():
            if key.startswith('_') or not isinstance(value, Attribute):
                continue
            if value.is_content:
                content = value
            else:
                attributes.append(value)
        cls._attributes = tuple(attributes)
        cls._content = content

    def __init__(self, content: Any = None, strict: Optional[bool] = None, **attrs):
        self._values: Dict[str, Any] = {}
        self.strict = settings.STRICT_VALIDATION if strict is None else strict

        known = {attr.name for attr in self._attributes}
        unknown = set(attrs) - known
        if unknown:
            raise TypeError(f"<{self.tag}> has no attribute(s) {', '.join(sorted(unknown))}")

        for attr in self._attributes:
            value = attrs.get(attr.name)
            if (value is None or value == '') and attr.name in self.defaults:
                value = self.defaults[attr.name]
            setattr(self, attr.name, value)

        content_attr = self.content_attribute()
        if content_attr is not None:
            setattr(self, content_attr.name, content)
        elif content is not None:
            raise TypeError(f"<{self.tag}> has no text content")

    @classmethod
    def content_attribute(cls) -> Optional[Attribute]:
        """The descriptor holding the text content, or None."""
        # Read from the class: on an instance the descriptor returns its value
        return cls._content

    @classmethod
    def qualified_name(cls) -> str:
        return f'{cls.prefix}:{cls.tag}'

    @classmethod
    def attribute(cls, xml_name: str) -> Optional[Attribute]:
        """Find the descriptor declared for an XML attribute name."""
        for attr in cls._attributes:
            if attr.xml_name == xml_name:
                return attr
        return None

    @classmethod
    def from_xml(cls, attrib: Dict[str, str], text: Optional[str],
                 strict: Optional[bool] = None) -> 'Element':
        """Build an element from parsed XML attributes and text."""
        kwargs = {}
        for xml_name, value in attrib.items():
            attr = cls.attribute(xml_name)
            if attr is None:
                logger.debug(f"Ignoring unknown attribute {xml_name!r} on <{cls.tag}>")
                continue
            kwargs[attr.name] = value
        content = text.strip() if text is not None and cls.content_attribute() is not None else None
        return cls(content=content or None, strict=strict, **kwargs)

    def validate(self) -> None:
        """Raise ValidationError for the first missing required attribute."""
        for attr in self._attributes:
            if not attr.required:
                continue
            value = attr.raw(self)
            if value is None or value == '':
                raise ValidationError.missing(self.qualified_name(), attr.xml_name)

    def is_valid(self) -> bool:
        try:
            self.validate()
        except ValidationError:
            return False
        return True

    def attribute_items(self) -> List[Tuple[str, str]]:
        """Serialized (xml name, value) pairs for every set attribute."""
        items = []
        for attr in self._attributes:
            text = attr.serialize(attr.raw(self))
            if text is not None:
                items.append((attr.xml_name, text))
        return items

    def text(self) -> Optional[str]:
        content_attr = self.content_attribute()
        if content_attr is None:
            return None
        return content_attr.serialize(content_attr.raw(self))

    def to_etree(self) -> ET.Element:
        node = ET.Element(f'{{{self.uri}}}{self.tag}')
        for name, value in self.attribute_items():
            node.set(name, value)
        text = self.text()
        if text is not None:
            node.text = text
        return node

    def to_dict(self) -> Dict[str, Any]:
        """Plain values keyed by python attribute name, for JSON output."""
        data = {}
        content_attr = self.content_attribute()
        for attr in self._attributes + ((content_attr,) if content_attr else ()):
            value = attr.raw(self)
            if value is None:
                continue
            if isinstance(value, datetime):
                value = value.isoformat()
            data[attr.name] = value
        return data

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._values == other._values

    __hash__ = None

    def __repr__(self):
        fields = ', '.join(f'{k}={v!r}' for k, v in self._values.items() if v is not None)
        return f'{type(self).__name__}({fields})'
