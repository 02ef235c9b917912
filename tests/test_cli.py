"""
Tests for the podcast-ns command line and settings loading.

Run:
    python -m pytest tests/test_cli.py -v
"""

import json

import pytest
import requests
import responses

from podcast_ns import cli, settings

FEED_URL = 'https://feeds.example.com/podcast.xml'


def test_text_summary(feed_path, capsys):
    assert cli.main([str(feed_path)]) == 0
    out = capsys.readouterr().out
    assert out.startswith('Channel: Podcasting 2.0 Namespace Example')
    assert 'podcast_guid: "917393e3-1b1e-5cef-ace4-edaa54e1f810"' in out
    assert 'Item: Episode 3 - The Future' in out


def test_json_output_file(feed_path, tmp_path):
    output = tmp_path / 'podcast.json'
    assert cli.main([str(feed_path), '-o', str(output)]) == 0

    data = json.loads(output.read_text())
    channel = data['channel']
    assert channel['podcast']['podcast_medium'] == 'podcast'
    assert channel['podcast']['podcast_people'][1]['role'] == 'guest'
    assert channel['items'][0]['podcast']['podcast_season']['content'] == 3
    assert channel['podcast']['podcast_update_frequency']['dtstart'] == '2023-04-10T12:00:00+00:00'


def test_invalid_feed_exits_nonzero(tmp_path):
    bad = tmp_path / 'bad.xml'
    bad.write_text(
        '<rss xmlns:podcast="https://podcastindex.org/namespace/1.0"><channel>'
        '<podcast:funding>no url</podcast:funding></channel></rss>'
    )
    assert cli.main([str(bad)]) == 1
    assert cli.main([str(bad), '--permissive']) == 0
    assert cli.main([str(bad), '--permissive', '--validate']) == 1


def test_missing_file_exits_nonzero(tmp_path):
    assert cli.main([str(tmp_path / 'nope.xml')]) == 1


@responses.activate
def test_fetch_from_url(feed_xml, capsys):
    responses.add(
        responses.GET,
        FEED_URL,
        body=feed_xml.encode('utf-8'),
        status=200,
        content_type='application/rss+xml',
    )

    assert cli.main([FEED_URL, '--json']) == 0

    data = json.loads(capsys.readouterr().out)
    assert data['channel']['podcast']['podcast_podping']['uses_podping'] is True
    assert responses.calls[0].request.headers['User-Agent'] == settings.USER_AGENT


@responses.activate
def test_fetch_http_error_exits_nonzero():
    responses.add(responses.GET, FEED_URL, status=500)
    assert cli.main([FEED_URL]) == 1


@responses.activate
def test_fetch_feed_raises_for_status():
    responses.add(responses.GET, FEED_URL, status=404)
    with pytest.raises(requests.HTTPError):
        cli.fetch_feed(FEED_URL)


def test_is_url():
    assert cli.is_url('https://example.com/feed')
    assert cli.is_url('http://example.com/feed')
    assert not cli.is_url('feed.xml')


# === Settings ===

def test_load_settings_defaults():
    loaded = settings.load_settings()
    assert loaded == settings.DEFAULTS
    assert loaded is not settings.DEFAULTS


def test_load_settings_override(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps({'strict': False, 'timeout': 5, 'unknown': 1}))
    loaded = settings.load_settings(path)
    assert loaded['strict'] is False
    assert loaded['timeout'] == 5
    assert 'unknown' not in loaded


@pytest.mark.parametrize('raw, expected', [
    ('false', False), ('off', False), ('0', False), (0, False),
    ('true', True), ('yes', True), (1, True), (True, True),
])
def test_load_settings_reads_strict_flag(tmp_path, raw, expected):
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps({'strict': raw}))
    assert settings.load_settings(path)['strict'] is expected


def test_as_flag_blank_uses_default():
    assert settings.as_flag(None, True) is True
    assert settings.as_flag('  ', False) is False


def test_config_file_string_false_switches_to_permissive(tmp_path):
    feed = tmp_path / 'feed.xml'
    feed.write_text(
        '<rss xmlns:podcast="https://podcastindex.org/namespace/1.0"><channel>'
        '<item><podcast:season>three</podcast:season></item></channel></rss>'
    )
    config = tmp_path / 'settings.json'
    config.write_text(json.dumps({'strict': 'false'}))
    assert cli.main([str(feed), '-c', str(config)]) == 0


def test_load_settings_rejects_non_object(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text('[1, 2]')
    with pytest.raises(ValueError):
        settings.load_settings(path)


def test_config_file_switches_to_permissive(tmp_path):
    feed = tmp_path / 'feed.xml'
    feed.write_text(
        '<rss xmlns:podcast="https://podcastindex.org/namespace/1.0"><channel>'
        '<item><podcast:season>three</podcast:season></item></channel></rss>'
    )
    config = tmp_path / 'settings.json'
    config.write_text(json.dumps({'strict': False}))

    assert cli.main([str(feed)]) == 1
    assert cli.main([str(feed), '-c', str(config)]) == 0
