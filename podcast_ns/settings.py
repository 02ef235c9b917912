"""
Configuration settings for the podcast namespace engine.

Values can be overridden through environment variables or a JSON file
passed to load_settings().
"""
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

# Namespace
PODCAST_PREFIX = "podcast"
PODCAST_URI = "https://podcastindex.org/namespace/1.0"
RSS_VERSION = "2.0"


def as_flag(value: Any, default: bool) -> bool:
    """Read a boolean from a bool, number or string such as "false" / "off"."""
    if value is None:
        return default
    if isinstance(value, str):
        if value.strip() == "":
            return default
        return value.strip().lower() not in ("0", "false", "no", "off")
    return bool(value)


def _env_flag(name: str, default: bool) -> bool:
    return as_flag(os.environ.get(name), default)


# Validation
STRICT_VALIDATION = _env_flag("PODCAST_NS_STRICT", True)

# Fetching (CLI only)
FETCH_TIMEOUT_SECONDS = float(os.environ.get("PODCAST_NS_TIMEOUT", "30"))
USER_AGENT = "podcast-ns/0.1 (+https://podcastindex.org/namespace/1.0)"

DEFAULTS: Dict[str, Any] = {
    "strict": STRICT_VALIDATION,
    "timeout": FETCH_TIMEOUT_SECONDS,
    "user_agent": USER_AGENT,
}


def load_settings(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load settings, merging a JSON override file over the defaults.

    Unknown keys in the file are ignored.
    """
    settings = dict(DEFAULTS)
    if path is None:
        return settings

    data = json.loads(Path(path).read_text())
    if not isinstance(data, dict):
        raise ValueError(f"settings file {path} must contain a JSON object")

    for key in DEFAULTS:
        if key in data:
            settings[key] = data[key]
    settings["strict"] = as_flag(settings["strict"], STRICT_VALIDATION)
    return settings
