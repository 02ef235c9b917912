"""
RSS feed writer.

Serializes an Rss document through the container bindings, so every podcast
slot that is set comes out under the podcast: prefix and nothing that is
unset is emitted.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional, Union

from .feed import Container, Item, Rss
from .namespace import PodcastNamespace, get_default_namespace

logger = logging.getLogger(__name__)


class FeedWriter:
    """Turns Rss documents back into XML text."""

    def __init__(self, namespace: Optional[PodcastNamespace] = None, pretty: bool = True):
        self.namespace = namespace or get_default_namespace()
        self.pretty = pretty

    def build(self, rss: Rss) -> ET.Element:
        root = ET.Element('rss', {'version': rss.version})
        channel_el = ET.SubElement(root, 'channel')
        self._fill(channel_el, rss.channel)
        for item in rss.channel.items:
            self._fill(ET.SubElement(channel_el, 'item'), item)
        return root

    def write(self, rss: Rss) -> str:
        root = self.build(rss)
        if self.pretty:
            ET.indent(root)
        body = ET.tostring(root, encoding='unicode')
        return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + '\n'

    def write_file(self, rss: Rss, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.write(rss), encoding='utf-8')
        logger.info(f"Wrote feed to {path}")
        return path

    def _fill(self, parent: ET.Element, container: Container) -> None:
        for field in ('title', 'link', 'description'):
            self._add_text(parent, field, getattr(container, field))
        if isinstance(container, Item):
            self._add_text(parent, 'guid', container.guid)

        for binding in container.bindings.values():
            for node in binding.serialize(container):
                parent.append(node)

    def _add_text(self, parent: ET.Element, tag: str, value: Optional[str]) -> None:
        if value is None:
            return
        ET.SubElement(parent, tag).text = value


def write(rss: Rss, namespace: Optional[PodcastNamespace] = None) -> str:
    """Serialize with a throwaway FeedWriter."""
    return FeedWriter(namespace).write(rss)
