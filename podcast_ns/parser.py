"""
RSS feed parser with podcast namespace support.

Walks an RSS 2.0 document and hands every namespaced child of <channel> and
<item> to the producer installed for its tag.
"""

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional, Tuple, Union

from .errors import FeedParseError
from .feed import Container, Rss
from .namespace import PodcastNamespace, get_default_namespace

logger = logging.getLogger(__name__)

CORE_FIELDS = ('title', 'link', 'description')


def split_tag(tag: str) -> Tuple[Optional[str], str]:
    """'{uri}local' -> ('uri', 'local'); 'local' -> (None, 'local')"""
    if tag.startswith('{'):
        uri, _, local = tag[1:].partition('}')
        return uri, local
    return None, tag


class FeedParser:
    """
    Parser for RSS 2.0 feeds carrying podcast namespace elements.

    RSS structure:
    <rss xmlns:podcast="https://podcastindex.org/namespace/1.0">
      <channel>
        <title>...</title>
        <podcast:locked>yes</podcast:locked>
        <item>
          <title>...</title>
          <podcast:transcript url="..." type="..."/>
        </item>
      </channel>
    </rss>

    In strict mode bad typed values raise while parsing and the whole
    document is validated once the walk is done.
    """

    def __init__(self, namespace: Optional[PodcastNamespace] = None,
                 strict: Optional[bool] = None):
        self.namespace = namespace or get_default_namespace()
        self.strict = self.namespace.strict if strict is None else strict

    def parse(self, content: Union[str, bytes]) -> Rss:
        """Parse feed content into an Rss document."""
        root = self._parse_xml(content)

        channel_el = root.find('channel')
        if channel_el is None:
            if root.tag == 'channel':
                channel_el = root
            else:
                raise FeedParseError(f"no <channel> in <{root.tag}> document")

        channel = self.namespace.new_channel(strict=self.strict)
        self._fill(channel, channel_el)

        for item_el in channel_el.findall('item'):
            item = channel.new_item()
            self._fill(item, item_el)
            item.guid = self._get_text(item_el, 'guid')

        rss = Rss(channel, version=root.get('version', '2.0'))

        if self.strict:
            rss.validate()

        logger.debug(f"Parsed channel {channel.title!r} with {len(channel.items)} items")
        return rss

    def parse_file(self, path: Union[str, Path]) -> Rss:
        return self.parse(Path(path).read_bytes())

    def _parse_xml(self, content: Union[str, bytes]) -> ET.Element:
        try:
            return ET.fromstring(content)
        except ET.ParseError as e:
            logger.debug(f"XML parse failed ({e}), retrying after cleanup")

        if isinstance(content, bytes):
            content = content.decode('utf-8', errors='replace')
        content = self._clean_xml(content)
        try:
            return ET.fromstring(content)
        except ET.ParseError as e:
            raise FeedParseError(f"not a readable XML feed: {e}") from e

    def _fill(self, container: Container, element: ET.Element) -> None:
        for field in CORE_FIELDS:
            setattr(container, field, self._get_text(element, field))

        for child in element:
            uri, local = split_tag(child.tag)
            if uri is None:
                continue
            producer = self.namespace.lookup(uri, local)
            if producer is None:
                logger.debug(f"No producer for {{{uri}}}{local}, skipping")
                continue
            producer.produce(container, child.attrib, child.text, strict=self.strict)

    def _get_text(self, element: ET.Element, tag: str) -> Optional[str]:
        """Get stripped text content of a direct child element."""
        child = element.find(tag)
        if child is not None and child.text and child.text.strip():
            return child.text.strip()
        return None

    def _clean_xml(self, content: str) -> str:
        """Attempt to clean malformed XML."""
        # Remove BOM
        content = content.lstrip('\ufeff')

        # Remove XML declaration if malformed
        content = re.sub(r'^\s*<\?xml[^>]*\?>\s*', '', content)

        return content


def parse(content: Union[str, bytes], namespace: Optional[PodcastNamespace] = None,
          strict: Optional[bool] = None) -> Rss:
    """Parse with a throwaway FeedParser."""
    return FeedParser(namespace, strict=strict).parse(content)
