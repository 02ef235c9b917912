"""
Accessor generator: turns schema entries into container bindings.

Each binding knows how to store, read, attach, validate and serialize one
schema entry on a container. build_container_class() gathers the members of
every binding into the class dict of a new Channel / Item subclass, once,
when a namespace is built.
"""

import logging
import xml.etree.ElementTree as ET
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type

from . import settings
from .elements import Attribute, Element
from .errors import ConfigurationError
from .feed import Container
from .schema import Arity, SchemaEntry

logger = logging.getLogger(__name__)


class Binding:
    """Generated accessors for one schema entry on one container class."""

    has_validator = False

    def __init__(self, entry: SchemaEntry):
        self.entry = entry
        self.name = entry.name
        self.key = entry.accessor

    @property
    def dict_key(self) -> str:
        """Key of this slot in Container.podcast_to_dict()."""
        return self.key

    def members(self) -> Dict[str, Any]:
        """Descriptors and functions to place on the container class."""
        raise NotImplementedError

    def accepts(self, value: Any) -> bool:
        raise NotImplementedError

    def attach(self, container: Container, value: Any) -> None:
        raise NotImplementedError

    def elements(self, container: Container) -> List[Element]:
        return []

    def validate(self, container: Container) -> None:
        for element in self.elements(container):
            element.validate()

    def serialize(self, container: Container) -> List[ET.Element]:
        return [element.to_etree() for element in self.elements(container)]

    def to_dict(self, container: Container) -> Any:
        raise NotImplementedError


class _ElementBinding(Binding):
    has_validator = True

    def __init__(self, entry: SchemaEntry, element_type: Type[Element]):
        super().__init__(entry)
        self.element_type = element_type

    def accepts(self, value):
        return isinstance(value, self.element_type)

    def _check(self, value):
        if not isinstance(value, self.element_type):
            raise TypeError(
                f"{self.key} takes a {self.element_type.__name__}, "
                f"got {type(value).__name__}"
            )


class SingleBinding(_ElementBinding):
    """0 or 1 element: property get / set."""

    def get(self, container):
        return container._podcast.get(self.name)

    def set(self, container, value):
        if value is None:
            container._podcast.pop(self.name, None)
            return
        self._check(value)
        container._podcast[self.name] = value

    def members(self):
        binding = self

        def fget(container):
            return binding.get(container)

        def fset(container, value):
            binding.set(container, value)

        doc = f"The <{self.element_type.qualified_name()}> element, or None."
        return {self.key: property(fget, fset, doc=doc)}

    def attach(self, container, value):
        self.set(container, value)

    def elements(self, container):
        value = self.get(container)
        return [] if value is None else [value]

    def to_dict(self, container):
        value = self.get(container)
        return None if value is None else value.to_dict()


class ScalarAttributeBinding(_ElementBinding):
    """
    A single element exposed through one of its attributes.

    `podcast_images` reads and writes the srcset of the <podcast:images>
    element, which stays reachable as `podcast_images_element`.
    """

    def __init__(self, entry, element_type, attribute: Attribute):
        super().__init__(entry, element_type)
        self.attribute = attribute

    @property
    def element_key(self) -> str:
        return f'{self.key}_element'

    def get_element(self, container):
        return container._podcast.get(self.name)

    def set_element(self, container, value):
        if value is None:
            container._podcast.pop(self.name, None)
            return
        self._check(value)
        container._podcast[self.name] = value

    def get(self, container):
        element = self.get_element(container)
        if element is None:
            return None
        return getattr(element, self.attribute.name)

    def set(self, container, value):
        if value is None:
            self.set_element(container, None)
            return
        element = self.get_element(container)
        if element is None:
            element = self.element_type(strict=container.strict, **{self.attribute.name: value})
            self.set_element(container, element)
        else:
            setattr(element, self.attribute.name, value)

    def members(self):
        binding = self

        def fget(container):
            return binding.get(container)

        def fset(container, value):
            binding.set(container, value)

        def fget_element(container):
            return binding.get_element(container)

        def fset_element(container, value):
            binding.set_element(container, value)

        qualified = self.element_type.qualified_name()
        return {
            self.key: property(fget, fset, doc=f"The {self.attribute.xml_name} of <{qualified}>, or None."),
            self.element_key: property(fget_element, fset_element, doc=f"The <{qualified}> element, or None."),
        }

    def attach(self, container, value):
        self.set_element(container, value)

    def elements(self, container):
        element = self.get_element(container)
        return [] if element is None else [element]

    def to_dict(self, container):
        element = self.get_element(container)
        return None if element is None else element.to_dict()


class RepeatedBinding(_ElementBinding):
    """
    An ordered, append-only list of elements.

    `podcast_person` is the first element or None, `podcast_people` the whole
    list, `append_podcast_person`, `new_podcast_person` and
    `remove_podcast_person` change it.
    """

    def __init__(self, entry, element_type, attribute: Optional[Attribute] = None):
        super().__init__(entry, element_type)
        # Set when the sub-arity is SCALAR_ATTRIBUTE
        self.attribute = attribute

    @property
    def dict_key(self):
        return self.entry.plural_accessor

    def _list(self, container) -> List[Element]:
        return container._podcast.setdefault(self.name, [])

    def get_all(self, container) -> List[Element]:
        return list(container._podcast.get(self.name, ()))

    def get_first(self, container):
        values = container._podcast.get(self.name)
        return values[0] if values else None

    def append(self, container, value):
        if self.attribute is not None and not isinstance(value, Element):
            value = self.element_type(strict=container.strict, **{self.attribute.name: value})
        self._check(value)
        self._list(container).append(value)
        return value

    def new(self, container, **attrs):
        return self.append(container, self.element_type(strict=container.strict, **attrs))

    def remove(self, container, value):
        values = self._list(container)
        for index, existing in enumerate(values):
            if existing is value:
                del values[index]
                return
        raise ValueError(f"{value!r} is not in {self.entry.plural_accessor}")

    def members(self):
        binding = self

        def fget_first(container):
            return binding.get_first(container)

        def fget_all(container):
            return binding.get_all(container)

        def append(container, value):
            return binding.append(container, value)

        def new(container, **attrs):
            return binding.new(container, **attrs)

        def remove(container, value):
            binding.remove(container, value)

        qualified = self.element_type.qualified_name()
        append.__name__ = f'append_{self.key}'
        append.__doc__ = f"Append a <{qualified}> element and return it."
        new.__name__ = f'new_{self.key}'
        new.__doc__ = f"Build a <{qualified}> element from keyword attributes and append it."
        remove.__name__ = f'remove_{self.key}'
        remove.__doc__ = f"Remove a <{qualified}> element by identity."
        return {
            self.key: property(fget_first, doc=f"The first <{qualified}> element, or None."),
            self.entry.plural_accessor: property(fget_all, doc=f"Every <{qualified}> element, in order."),
            append.__name__: append,
            new.__name__: new,
            remove.__name__: remove,
        }

    def attach(self, container, value):
        self.append(container, value)

    def elements(self, container):
        return self.get_all(container)

    def to_dict(self, container):
        values = self.get_all(container)
        return [value.to_dict() for value in values] if values else None


class ScalarTextBinding(Binding):
    """A text-only element mapped to a string; None when absent."""

    def __init__(self, entry: SchemaEntry, uri: str = settings.PODCAST_URI):
        super().__init__(entry)
        self.uri = uri

    def get(self, container):
        return container._podcast.get(self.name)

    def set(self, container, value):
        text = None if value is None else str(value).strip()
        # Blank text is absence, as the parser reads an empty tag
        if not text:
            container._podcast.pop(self.name, None)
        else:
            container._podcast[self.name] = text

    def members(self):
        binding = self

        def fget(container):
            return binding.get(container)

        def fset(container, value):
            binding.set(container, value)

        doc = f"Text of <{settings.PODCAST_PREFIX}:{self.name}>, or None."
        return {self.key: property(fget, fset, doc=doc)}

    def accepts(self, value):
        return isinstance(value, str)

    def attach(self, container, value):
        self.set(container, value)

    def serialize(self, container):
        value = self.get(container)
        if value is None:
            return []
        node = ET.Element(f'{{{self.uri}}}{self.name}')
        node.text = value
        return [node]

    def to_dict(self, container):
        return self.get(container)


def resolve_element_type(entry: SchemaEntry,
                         element_types: Mapping[str, Type[Element]]) -> Type[Element]:
    element_type = entry.element_type or element_types.get(entry.name)
    if element_type is None:
        raise ConfigurationError(f"no element type registered for {entry.name!r}")
    return element_type


def resolve_attribute(entry: SchemaEntry, element_type: Type[Element]) -> Attribute:
    if not entry.attribute:
        raise ConfigurationError(f"scalar attribute entry {entry.name!r} names no attribute")
    attribute = element_type.attribute(entry.attribute)
    if attribute is None:
        raise ConfigurationError(
            f"{element_type.__name__} has no attribute {entry.attribute!r} for {entry.name!r}"
        )
    return attribute


def make_binding(entry: SchemaEntry, element_types: Mapping[str, Type[Element]]) -> Binding:
    """Pick the binding shape for an entry's arity."""
    if entry.arity is Arity.SCALAR_TEXT:
        return ScalarTextBinding(entry)

    if entry.arity is Arity.SINGLE:
        return SingleBinding(entry, resolve_element_type(entry, element_types))

    if entry.arity is Arity.SCALAR_ATTRIBUTE:
        element_type = resolve_element_type(entry, element_types)
        return ScalarAttributeBinding(entry, element_type, resolve_attribute(entry, element_type))

    if entry.arity is Arity.REPEATED:
        element_type = resolve_element_type(entry, element_types)
        attribute = None
        if entry.sub_arity is Arity.SCALAR_ATTRIBUTE:
            attribute = resolve_attribute(entry, element_type)
        return RepeatedBinding(entry, element_type, attribute)

    raise ConfigurationError(f"unknown arity {entry.arity!r} for {entry.name!r}")


def generate_bindings(entries: Iterable[SchemaEntry],
                      element_types: Mapping[str, Type[Element]]) -> Dict[str, Binding]:
    """Bindings keyed by entry name, in schema order."""
    bindings: Dict[str, Binding] = {}
    for entry in entries:
        bindings[entry.name] = make_binding(entry, element_types)
    return bindings


def build_container_class(base: Type[Container], entries: Iterable[SchemaEntry],
                          element_types: Mapping[str, Type[Element]],
                          **class_attrs) -> Type[Container]:
    """
    Build a subclass of `base` carrying the accessors for `entries`.

    The returned class is fixed: its bindings, validators and accessors are
    read only after this call.
    """
    bindings = generate_bindings(entries, element_types)

    validators: List[Callable[[Container], None]] = [
        binding.validate for binding in bindings.values() if binding.has_validator
    ]
    namespace: Dict[str, Any] = {
        'bindings': MappingProxyType(bindings),
        'validators': tuple(validators),
        '__module__': base.__module__,
        '__doc__': base.__doc__,
    }
    namespace.update(class_attrs)

    for binding in bindings.values():
        for member_name, member in binding.members().items():
            if member_name in namespace or hasattr(base, member_name):
                raise ConfigurationError(
                    f"accessor {member_name!r} for {binding.name!r} clashes with "
                    f"an existing member of {base.__name__}"
                )
            namespace[member_name] = member

    klass = type(f'Podcast{base.__name__}', (base,), namespace)
    logger.debug(f"Built {klass.__name__} with {len(bindings)} podcast bindings")
    return klass
