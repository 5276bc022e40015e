"""Configuration management for kuhnmunkres.

This module provides YAML-based configuration with dot notation access
and inheritance support.

Example:
    >>> from kuhnmunkres.configs import get_default_config
    >>> config = get_default_config()
    >>> config.export.cell_size
    60
"""

from .config import (
    Config,
    ConfigDict,
    apply_overrides,
    get_default_config,
    load_config,
    merge_config,
    parse_opts,
)

__all__ = [
    "Config",
    "ConfigDict",
    "load_config",
    "merge_config",
    "get_default_config",
    "parse_opts",
    "apply_overrides",
]
