"""Settings file I/O for cc-clean.

Reads an optional JSON settings file at XDG_CONFIG_HOME/cc-clean/settings.json.
Recognized keys: "style", "verbose", "line_numbers". Command-line flags and
the CC_CLEAN_STYLE environment variable take precedence over the file.

Import as: import cc_clean.settings
"""

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULTS: dict = {
    "style": "default",
    "verbose": False,
    "line_numbers": False,
}


def get_config_path() -> Path:
    """Return path to settings file.

    Uses XDG_CONFIG_HOME (default ~/.config) / cc-clean / settings.json.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(config_home) / "cc-clean" / "settings.json"


def load_settings() -> dict:
    """Load settings from JSON file. Returns empty dict on missing/corrupt file."""
    path = get_config_path()
    # [LAW:dataflow-not-control-flow] Always attempt read; empty dict is the "no data" value.
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (ValueError, RecursionError, OSError) as e:
        logger.warning("ignoring unreadable settings file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring settings file %s: top level is not an object", path)
        return {}
    return data


def resolve_defaults() -> dict:
    """Effective defaults: built-ins, overlaid by the file, then the environment."""
    resolved = dict(DEFAULTS)
    file_settings = load_settings()
    for key in DEFAULTS:
        if key in file_settings:
            resolved[key] = file_settings[key]
    env_style = os.environ.get("CC_CLEAN_STYLE")
    if env_style:
        resolved["style"] = env_style
    resolved["verbose"] = resolved["verbose"] is True
    resolved["line_numbers"] = resolved["line_numbers"] is True
    resolved["style"] = str(resolved["style"])
    return resolved
