"""
Podcasting 2.0 element types.

Each class maps one <podcast:*> tag; ELEMENT_TYPES indexes them by tag so the
schema can refer to elements by name.
"""

from typing import Dict, Type

from . import dates
from .elements import (
    Alias,
    Attribute,
    BooleanAttribute,
    BoundedAttribute,
    DateAttribute,
    Element,
    FloatAttribute,
    IntegerAttribute,
    URIAttribute,
    YesNoAlias,
)


# === Shared by channel and item ===

class PodcastPerson(Element):
    """
    A person of interest to the podcast or episode.

    <podcast:person role="guest" href="https://..." img="...">Jane Doe</podcast:person>
    """

    tag = 'person'

    DEFAULT_ROLE = 'host'
    DEFAULT_GROUP = 'cast'
    defaults = {'role': DEFAULT_ROLE, 'group': DEFAULT_GROUP}

    role = Attribute('role')
    group = Attribute('group')
    img = Attribute('img')
    href = Attribute('href')
    content = Attribute()

    name = Alias('content', writable=True)


class PodcastLocation(Element):
    tag = 'location'

    geo = Attribute('geo')
    osm = Attribute('osm')
    content = Attribute()


class PodcastLicense(Element):
    tag = 'license'

    url = Attribute('url')
    content = Attribute()


class PodcastImages(Element):
    """Artwork in several sizes, as an HTML style srcset."""

    tag = 'images'

    srcset = Attribute('srcset', required=True)


class PodcastTxt(Element):
    tag = 'txt'

    MAX_PURPOSE_LENGTH = 128

    purpose = BoundedAttribute('purpose', max_length=MAX_PURPOSE_LENGTH)
    content = Attribute()


# === Channel only ===

class PodcastLocked(Element):
    """Whether the feed may be imported to another platform ("yes" / "no")."""

    tag = 'locked'

    owner = Attribute('owner')
    content = Attribute()

    value = YesNoAlias('content')
    locked = YesNoAlias('content')


class PodcastPodping(Element):
    tag = 'podping'

    uses_podping = BooleanAttribute('usesPodping', required=True)


class PodcastFunding(Element):
    tag = 'funding'

    url = URIAttribute('url', required=True)
    content = Attribute()


class PodcastTrailer(Element):
    tag = 'trailer'

    url = URIAttribute('url', required=True)
    pubdate = DateAttribute('pubdate', required=True, fmt=dates.RFC2822)
    type = Attribute('type')
    length = IntegerAttribute('length')
    season = Attribute('season')
    content = Attribute()

    name = Alias('content', writable=True)


class PodcastBlock(Element):
    """Asks a platform ("id") not to list the podcast."""

    tag = 'block'

    id = Attribute('id')
    content = Attribute()

    value = YesNoAlias('content')


class PodcastUpdateFrequency(Element):
    tag = 'updateFrequency'

    complete = BooleanAttribute('complete')
    dtstart = DateAttribute('dtstart', fmt=dates.ISO8601)
    rrule = Attribute('rrule')
    content = Attribute()


# === Item only ===

class PodcastTranscript(Element):
    tag = 'transcript'

    url = URIAttribute('url', required=True)
    type = Attribute('type', required=True)
    language = Attribute('language')
    rel = Attribute('rel')


class PodcastChapters(Element):
    tag = 'chapters'

    url = URIAttribute('url', required=True)
    type = Attribute('type', required=True)


class PodcastSeason(Element):
    tag = 'season'

    name = Attribute('name')
    content = IntegerAttribute()

    number = Alias('content', writable=True)


class PodcastEpisode(Element):
    tag = 'episode'

    display = Attribute('display')
    content = FloatAttribute()

    number = Alias('content', writable=True)


class PodcastSocialInteract(Element):
    """Where the comment thread for an episode lives."""

    tag = 'socialInteract'

    url = URIAttribute('url', required=True)
    protocol = Attribute('protocol', required=True)
    account_id = Attribute('accountId')
    account_url = URIAttribute('accountUrl')
    priority = IntegerAttribute('priority')


# Element type registry by tag
ELEMENT_TYPES: Dict[str, Type[Element]] = {
    klass.tag: klass
    for klass in (
        PodcastPerson,
        PodcastLocation,
        PodcastLicense,
        PodcastImages,
        PodcastTxt,
        PodcastLocked,
        PodcastPodping,
        PodcastFunding,
        PodcastTrailer,
        PodcastBlock,
        PodcastUpdateFrequency,
        PodcastTranscript,
        PodcastChapters,
        PodcastSeason,
        PodcastEpisode,
        PodcastSocialInteract,
    )
}
