"""Centralized configuration loading for termpose.

This module provides utilities for loading and accessing configuration from
termpose.json with support for environment variable fallbacks and default values.
The library functions take explicit arguments; configuration is read by the CLI.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from termpose.core.parser import DEFAULT_MAX_DEPTH
from termpose.core.printer import DEFAULT_INDENT

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "termpose.json"


@dataclass
class FormatConfig:
    """Settings for parsing and printing documents.

    Attributes:
        max_depth: Maximum nesting accepted by the parser
        indent: Text for one indentation level in printed output
    """
    max_depth: int = DEFAULT_MAX_DEPTH
    indent: str = DEFAULT_INDENT


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Load configuration from JSON file.

    Returns empty dict if file doesn't exist or is invalid.

    Args:
        config_path: Path to the config file (default: "termpose.json")

    Returns:
        Configuration dictionary, or empty dict if file not found/invalid
    """
    path = Path(config_path)

    if not path.exists():
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"Ignoring unreadable config file {config_path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring config file {config_path}: top level is not an object")
        return {}
    return data


def get_config_value(
    keys: List[str], default: Any = None, config: Optional[Dict[str, Any]] = None
) -> Any:
    """Get nested configuration value with fallback to environment variable.

    Supports key paths like ["parser", "max_depth"]. Also checks environment
    variables as fallback (e.g., PARSER_MAX_DEPTH for parser.max_depth).

    Args:
        keys: List of keys to traverse (e.g., ["printer", "indent"])
        default: Default value if key not found
        config: Optional config dict (uses load_config() if not provided)

    Returns:
        Configuration value, or default if not found
    """
    if config is None:
        config = load_config()

    value = config
    for key in keys:
        if isinstance(value, dict):
            value = value.get(key)
            if value is None:
                break
        else:
            value = None
            break

    if value is not None:
        return value

    env_key = "_".join(k.upper() for k in keys)
    env_value = os.environ.get(env_key)
    if env_value is not None:
        return env_value

    return default


def resolve_indent(value: Union[str, int]) -> str:
    """Turn an indent setting into indentation text.

    Accepts "tab", a literal run of tabs or spaces, or a number of spaces.

    Raises:
        ValueError: If the setting is none of those
    """
    if isinstance(value, int) and not isinstance(value, bool):
        count = value
    elif isinstance(value, str) and value.strip().isdigit():
        count = int(value)
    elif value == "tab":
        return "\t"
    elif isinstance(value, str) and value and (set(value) == {" "} or set(value) == {"\t"}):
        return value
    else:
        raise ValueError(f"Invalid indent setting: {value!r}. Use 'tab' or a number of spaces")
    if count < 1:
        raise ValueError(f"Indent width must be at least 1, got {count}")
    return " " * count


def load_format_config(config_path: str = DEFAULT_CONFIG_PATH) -> FormatConfig:
    """Build a FormatConfig from the config file and environment.

    Raises:
        ValueError: If a configured value is malformed
    """
    config = load_config(config_path)
    max_depth = get_config_value(["parser", "max_depth"], default=DEFAULT_MAX_DEPTH, config=config)
    indent = get_config_value(["printer", "indent"], default="tab", config=config)
    try:
        max_depth = int(max_depth)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid parser.max_depth setting: {max_depth!r}")
    return FormatConfig(max_depth=max_depth, indent=resolve_indent(indent))
