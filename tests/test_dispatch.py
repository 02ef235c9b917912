"""
Tests for the tag dispatch table and its installer.

Run:
    python -m pytest tests/test_dispatch.py -v
"""

import xml.etree.ElementTree as ET

import pytest

from podcast_ns import FeedParser, FeedWriter, PodcastNamespace, PODCAST_URI
from podcast_ns.dispatch import ElementProducer, TagDispatchTable, TextProducer
from podcast_ns.elements import Attribute, Element, FloatAttribute
from podcast_ns.errors import ConfigurationError
from podcast_ns.podcast import ELEMENT_TYPES, PodcastLocked, PodcastPerson, PodcastSeason
from podcast_ns.schema import BASE, CHANNEL, ITEM, Arity, SchemaRegistry, default_schema


def test_default_namespace_installs_every_tag(namespace):
    tags = {local for uri, local in namespace.dispatch}
    assert tags == set(ELEMENT_TYPES) | {'guid', 'medium'}
    assert all(uri == PODCAST_URI for uri, _ in namespace.dispatch)


def test_element_and_text_producers(namespace):
    locked = namespace.lookup(PODCAST_URI, 'locked')
    assert isinstance(locked, ElementProducer)
    assert locked.element_type is PodcastLocked

    guid = namespace.lookup(PODCAST_URI, 'guid')
    assert isinstance(guid, TextProducer)


def test_lookup_miss_returns_none(namespace):
    assert namespace.lookup(PODCAST_URI, 'liveItem') is None
    assert namespace.lookup('http://www.itunes.com/dtds/podcast-1.0.dtd', 'author') is None


def test_later_install_replaces_earlier():
    table = TagDispatchTable()
    table.install_text(PODCAST_URI, 'season')
    table.install_element(PODCAST_URI, 'season', PodcastSeason)
    producer = table.lookup(PODCAST_URI, 'season')
    assert isinstance(producer, ElementProducer)
    assert len(table) == 1


def test_frozen_table_rejects_installs(namespace):
    assert namespace.dispatch.frozen
    with pytest.raises(ConfigurationError):
        namespace.dispatch.install_text(PODCAST_URI, 'guid')


def test_element_producer_attaches_through_binding(namespace):
    channel = namespace.new_channel()
    producer = namespace.lookup(PODCAST_URI, 'person')
    assert producer.produce(channel, {'role': 'guest'}, ' Alice Brown ')
    assert channel.podcast_person.name == 'Alice Brown'
    assert channel.podcast_person.role == 'guest'


def test_text_producer_skips_blank_text(namespace):
    channel = namespace.new_channel()
    producer = namespace.lookup(PODCAST_URI, 'medium')
    assert not producer.produce(channel, {}, '   ')
    assert channel.podcast_medium is None
    assert producer.produce(channel, {}, 'music')
    assert channel.podcast_medium == 'music'


def test_producer_for_other_scope_is_skipped(namespace):
    """A channel has no season slot; attaching is refused, not an error."""
    channel = namespace.new_channel()
    producer = namespace.lookup(PODCAST_URI, 'season')
    assert not producer.produce(channel, {}, '3')


class PodcastMedium(Element):
    """<podcast:medium> as an element, with an optional owner."""

    tag = 'medium'

    owner = Attribute('owner')
    content = Attribute()


def _medium_override_schema():
    registry = SchemaRegistry()
    registry.register(BASE, 'person', Arity.REPEATED, 'people', Arity.SINGLE)
    registry.register(BASE, 'medium', Arity.SCALAR_TEXT)
    registry.register(CHANNEL, 'medium', Arity.SINGLE, element_type=PodcastMedium)
    return registry


def test_container_scope_overrides_base_scope():
    namespace = PodcastNamespace(schema=_medium_override_schema())
    producer = namespace.lookup(PODCAST_URI, 'medium')
    assert isinstance(producer, ElementProducer)
    assert producer.element_type is PodcastMedium


def test_last_registration_wins_on_reparse():
    """A document written with the text schema parses through the element producer."""
    earlier = PodcastNamespace()
    rss = earlier.new_feed(title='Music Show')
    rss.channel.podcast_medium = 'music'
    rss.channel.append_podcast_person(PodcastPerson(content='DJ'))
    xml = FeedWriter(earlier).write(rss)
    assert '<podcast:medium>music</podcast:medium>' in xml

    later = PodcastNamespace(schema=_medium_override_schema())
    reparsed = FeedParser(later).parse(xml)

    medium = reparsed.channel.podcast_medium
    assert isinstance(medium, PodcastMedium)
    assert medium.content == 'music'
    assert reparsed.channel.podcast_person.name == 'DJ'

    # And back again through the element binding
    again = FeedParser(later).parse(FeedWriter(later).write(reparsed))
    assert again.channel.podcast_medium == medium


# === Extending the schema ===

class PodcastSoundbite(Element):
    tag = 'soundbite'

    start_time = FloatAttribute('startTime', required=True)
    duration = FloatAttribute('duration', required=True)
    content = Attribute()


def test_registered_item_element_parses_and_writes():
    schema = default_schema()
    schema.register(ITEM, 'soundbite', Arity.REPEATED, 'soundbites', Arity.SINGLE,
                    element_type=PodcastSoundbite)
    extended = PodcastNamespace(schema=schema)
    assert isinstance(extended.lookup(PODCAST_URI, 'soundbite'), ElementProducer)

    rss = extended.new_feed(title='Bites')
    item = rss.channel.new_item(title='One')
    item.new_podcast_soundbite(start_time='73.0', duration=60, content='Why the Podcast Namespace Matters')

    reparsed = FeedParser(extended).parse(FeedWriter(extended).write(rss))
    bite = reparsed.channel.items[0].podcast_soundbite
    assert (bite.start_time, bite.duration) == (73.0, 60.0)
    assert bite.content == 'Why the Podcast Namespace Matters'
    assert reparsed.channel.items[0].podcast_to_dict()['podcast_soundbites'][0]['duration'] == 60.0


# === Output prefix ===

def test_writers_leave_element_tree_prefix_map_alone(namespace, monkeypatch):
    calls = []
    monkeypatch.setattr(ET, 'register_namespace', lambda *args: calls.append(args))

    rss = namespace.new_feed(title='Prefix')
    rss.channel.podcast_guid = 'abc'
    first = FeedWriter(namespace).write(rss)
    second = FeedWriter(namespace).write(rss)
    PodcastNamespace()

    assert calls == [], "Prefix is registered once, when the first namespace is built"
    assert first == second
    assert '<podcast:guid>abc</podcast:guid>' in first
