"""xcheck Configuration — pass-wide options from .xcheckrc.yml.

Loads configuration from .xcheckrc.yml (or .xcheckrc.yaml, .xcheckrc.json)
in the project root. Allows a build to configure:
  - Whether argument values are cross-checked as well as function entry
  - Whether unannotated files are instrumented as if carrying @!cross_check
  - The hasher pair used for structural argument hashes
  - Whether cross_check_raw() calls are expanded

Example .xcheckrc.yml:
    check_args: true
    enabled_by_default: false
    hasher: JodyHasher
    aggregator: SimpleHasher
    expand_raw: true
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Optional, Dict, Any

import yaml

from xcheck.errors import CompileError, XCheckError, ErrorKind

logger = logging.getLogger(__name__)


@dataclass
class PassOptions:
    """Options shared by every declaration of one pass."""
    # Emit a FUNCTION_ARGUMENT check per parameter after the entry check
    check_args: bool = False
    # Treat files without @!cross_check as if they had the bare annotation
    enabled_by_default: bool = False
    # hash<hasher, aggregator>(arg) in argument checks
    hasher: str = "JodyHasher"
    aggregator: str = "SimpleHasher"
    # Rewrite cross_check_raw(...) into verify(...) after instrumenting
    expand_raw: bool = True


# ---------------------------------------------------------------------------
# Config file names (in priority order)
# ---------------------------------------------------------------------------

_CONFIG_FILES = [
    ".xcheckrc.yml",
    ".xcheckrc.yaml",
    ".xcheckrc.json",
]

_BOOL_KEYS = ("check_args", "enabled_by_default", "expand_raw")
_STR_KEYS = ("hasher", "aggregator")


def _config_error(message: str, path: str) -> CompileError:
    return CompileError(XCheckError(
        kind=ErrorKind.CONFIG_FILE_ERROR,
        message=message,
        details={"path": path},
    ))


def find_config(start_dir: str = ".") -> Optional[str]:
    """Find the nearest config file by walking up from start_dir."""
    current = os.path.abspath(start_dir)
    while True:
        for name in _CONFIG_FILES:
            path = os.path.join(current, name)
            if os.path.isfile(path):
                return path
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent
    return None


def load_config(path: Optional[str] = None, start_dir: str = ".") -> PassOptions:
    """Load pass options from a file.

    If no path is given, searches for a config file starting from start_dir.
    If no config file is found, returns defaults.  A config file that exists
    but cannot be read or parsed is an error.
    """
    if path is None:
        path = find_config(start_dir)

    if path is None:
        logger.debug("no xcheck config file found from %s, using defaults", start_dir)
        return PassOptions()

    try:
        with open(path, "r") as f:
            content = f.read()
    except (IOError, OSError) as e:
        raise _config_error(f"Cannot read config file: {e}", path)

    try:
        if path.endswith(".json"):
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise _config_error(f"Cannot parse config file: {e}", path)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise _config_error("Config file must contain a mapping", path)

    logger.debug("loaded xcheck config from %s", path)
    return _dict_to_options(data, path)


def _dict_to_options(data: Dict[str, Any], path: str = "<dict>") -> PassOptions:
    """Convert a parsed dict to PassOptions."""
    options = PassOptions()

    for key in data:
        if key not in _BOOL_KEYS and key not in _STR_KEYS:
            raise _config_error(f"Unknown config key '{key}'", path)

    for key in _BOOL_KEYS:
        if key in data:
            if not isinstance(data[key], bool):
                raise _config_error(f"'{key}' must be true or false", path)
            setattr(options, key, data[key])
    for key in _STR_KEYS:
        if key in data:
            value = data[key]
            if not isinstance(value, str) or not value.isidentifier():
                raise _config_error(f"'{key}' must be a type name", path)
            setattr(options, key, value)

    return options
