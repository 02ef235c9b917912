#!/usr/bin/env python3
"""
Read a podcast feed and print its podcast namespace data.

Usage:
    podcast-ns feed.xml                  # Text summary
    podcast-ns https://example.com/rss   # Fetch over HTTP
    podcast-ns feed.xml --json -o out.json
    podcast-ns feed.xml --permissive -v  # Keep bad values, debug logging
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import requests

from . import settings
from .errors import FeedParseError, FormatError, ValidationError
from .feed import Rss
from .namespace import PodcastNamespace
from .parser import FeedParser

logger = logging.getLogger(__name__)


def is_url(source: str) -> bool:
    return source.startswith(('http://', 'https://'))


def fetch_feed(url: str, timeout: float = settings.FETCH_TIMEOUT_SECONDS,
               user_agent: str = settings.USER_AGENT) -> bytes:
    """Fetch feed bytes over HTTP."""
    headers = {
        'User-Agent': user_agent,
        'Accept': 'application/rss+xml, application/xml;q=0.9, */*;q=0.8',
    }
    response = requests.get(url, headers=headers, timeout=timeout)
    response.raise_for_status()
    logger.debug(f"Fetched {len(response.content)} bytes from {url}")
    return response.content


def read_source(source: str, timeout: float, user_agent: str) -> bytes:
    if is_url(source):
        return fetch_feed(source, timeout=timeout, user_agent=user_agent)
    return Path(source).read_bytes()


def summarize(rss: Rss) -> List[str]:
    """One line per set podcast slot, channel first, then each item."""
    channel = rss.channel
    lines = [f"Channel: {channel.title or '(untitled)'}"]
    for key, value in channel.podcast_to_dict().items():
        lines.append(f"  {key}: {json.dumps(value, ensure_ascii=False)}")
    for item in channel.items:
        lines.append(f"Item: {item.title or item.guid or '(untitled)'}")
        for key, value in item.podcast_to_dict().items():
            lines.append(f"  {key}: {json.dumps(value, ensure_ascii=False)}")
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Read podcast namespace data from an RSS feed')
    parser.add_argument('source', help='Feed file path or http(s) URL')
    parser.add_argument('--permissive', action='store_true',
                        help='Keep malformed values instead of failing')
    parser.add_argument('--validate', action='store_true',
                        help='Exit with status 1 if the feed is not valid')
    parser.add_argument('--json', action='store_true', help='Output as JSON')
    parser.add_argument('-o', '--output', help='Output file')
    parser.add_argument('-c', '--config', help='JSON settings file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S',
        stream=sys.stderr,
    )

    config = settings.load_settings(args.config)
    strict = False if args.permissive else config['strict']
    namespace = PodcastNamespace(strict=strict)

    try:
        content = read_source(args.source, config['timeout'], config['user_agent'])
    except (OSError, requests.RequestException) as e:
        logger.error(f"Error reading {args.source}: {e}")
        return 1

    try:
        rss = FeedParser(namespace).parse(content)
    except (FeedParseError, FormatError, ValidationError) as e:
        logger.error(f"Invalid feed {args.source}: {e}")
        return 1

    if args.validate and not strict:
        # Permissive parse skipped validation
        try:
            rss.validate()
        except ValidationError as e:
            logger.error(f"Invalid feed {args.source}: {e}")
            return 1

    if args.json or (args.output and args.output.endswith('.json')):
        output = json.dumps(rss.to_dict(), indent=2, ensure_ascii=False)
    else:
        output = '\n'.join(summarize(rss))

    if args.output:
        Path(args.output).write_text(output + '\n', encoding='utf-8')
        logger.info(f"Saved podcast data for {len(rss.channel.items)} items to {args.output}")
    else:
        print(output)
    return 0


if __name__ == '__main__':
    sys.exit(main())
