"""YAML-based configuration for kuhnmunkres.

This module provides the settings layer shared by the solver and tools:
    - Loading from YAML files, with ``_base_`` inheritance
    - Dot notation access to nested values
    - Merging of configurations
    - ``key=value`` overrides from the command line

Example:
    >>> config = load_config("solver.yaml")
    >>> config.get("solver.max_iterations")
    >>> config.export.enabled = True
"""

import copy
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml


_MISSING = object()


def _wrap(value: Any) -> Any:
    """Convert plain dicts to ConfigDict, leave everything else alone."""
    if isinstance(value, dict) and not isinstance(value, ConfigDict):
        return ConfigDict(value)
    return value


class ConfigDict(dict):
    """A dict whose keys can also be read and written as attributes.

    Example:
        >>> cfg = ConfigDict({"export": {"cell_size": 60}})
        >>> cfg.export.cell_size
        60
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for key in list(self):
            self[key] = _wrap(self[key])

    def __getattr__(self, name: str) -> Any:
        if name not in self:
            raise AttributeError(f"Config has no attribute '{name}'")
        return self[name]

    def __setattr__(self, name: str, value: Any) -> None:
        self[name] = _wrap(value)

    def get_nested(self, key: str, default: Any = None) -> Any:
        """Look up a dot-separated path such as ``"export.cell_size"``.

        Returns ``default`` as soon as one segment is missing.
        """
        node = self
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set_nested(self, key: str, value: Any) -> None:
        """Assign to a dot-separated path, creating intermediate sections."""
        *parents, leaf = key.split(".")
        node = self
        for part in parents:
            if not isinstance(node.get(part), dict):
                node[part] = ConfigDict()
            node = node[part]
        node[leaf] = _wrap(value)

    def to_dict(self) -> Dict:
        """Convert to a plain nested dictionary."""
        return {
            key: value.to_dict() if isinstance(value, ConfigDict) else value
            for key, value in self.items()
        }


def _read_yaml(filepath: Path) -> Dict:
    if not filepath.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")
    with open(filepath, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


class Config:
    """Settings shared by the solver, its hooks and the tools.

    Top-level sections are available as attributes, nested values through
    dot paths with :meth:`get` and :meth:`set`.

    Example:
        >>> config = Config.from_file("solver.yaml")
        >>> config.logging.level
        'INFO'
        >>> config.save("resolved.yaml")
    """

    def __init__(self, cfg_dict: Optional[Dict] = None):
        self._cfg = ConfigDict(copy.deepcopy(cfg_dict or {}))

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "Config":
        """Load configuration from a YAML file.

        A top-level ``_base_`` entry (path or list of paths, relative to
        the file) names configurations this one is merged on top of. Later
        bases override earlier ones.

        Raises:
            FileNotFoundError: If the file or one of its bases is missing.
            yaml.YAMLError: If YAML parsing fails.
        """
        filepath = Path(filepath)
        cfg_dict = _read_yaml(filepath)

        bases = cfg_dict.pop("_base_", [])
        if isinstance(bases, str):
            bases = [bases]

        merged: Dict = {}
        for base in bases:
            merged = _deep_merge(merged, cls.from_file(filepath.parent / base).to_dict())
        return cls(_deep_merge(merged, cfg_dict))

    @classmethod
    def from_dict(cls, cfg_dict: Dict) -> "Config":
        return cls(cfg_dict)

    def merge(self, other: "Config") -> "Config":
        """Return a new Config with ``other`` layered over this one."""
        return Config(_deep_merge(self.to_dict(), other.to_dict()))

    def get(self, key: str, default: Any = None) -> Any:
        return self._cfg.get_nested(key, default)

    def set(self, key: str, value: Any) -> None:
        self._cfg.set_nested(key, value)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._cfg, name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
        else:
            setattr(self._cfg, name, value)

    def __getitem__(self, name: str) -> Any:
        return self._cfg[name]

    def __contains__(self, key: str) -> bool:
        return self._cfg.get_nested(key, _MISSING) is not _MISSING

    def to_dict(self) -> Dict:
        return self._cfg.to_dict()

    def save(self, filepath: Union[str, Path]) -> None:
        """Write the configuration as YAML, creating parent directories."""
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        filepath.write_text(
            yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False),
            encoding="utf-8",
        )

    def __repr__(self) -> str:
        return f"Config({self._cfg})"


def _deep_merge(base: Dict, update: Dict) -> Dict:
    """Merge ``update`` into a copy of ``base``, recursing into sections."""
    result = copy.deepcopy(base)
    for key, value in update.items():
        both_sections = isinstance(result.get(key), dict) and isinstance(value, dict)
        result[key] = _deep_merge(result[key], value) if both_sections else copy.deepcopy(value)
    return result


def load_config(filepath: Union[str, Path]) -> Config:
    """Load a YAML configuration merged over the defaults.

    Example:
        >>> config = load_config("configs/solver.yaml")
    """
    return get_default_config().merge(Config.from_file(filepath))


def merge_config(base: Config, overrides: Union[Config, Dict]) -> Config:
    """Merge a Config or plain dict of nested overrides on top of ``base``."""
    if not isinstance(overrides, Config):
        overrides = Config(overrides)
    return base.merge(overrides)


def parse_opts(opts: List[str]) -> Dict[str, Any]:
    """Parse ``key=value`` overrides from the command line.

    Values are parsed as YAML scalars, so ``true``, ``null``, ``12`` and
    ``0.5`` become bool, None, int and float.

    Raises:
        ValueError: If an option has no ``=``.
    """
    overrides = {}
    for opt in opts:
        if "=" not in opt:
            raise ValueError(f"Invalid option format: {opt}. Use key=value format.")
        key, value = opt.split("=", 1)
        overrides[key] = yaml.safe_load(value) if value else None
    return overrides


def apply_overrides(config: Config, overrides: Dict[str, Any]) -> None:
    """Apply dot-notation overrides in place."""
    for key, value in overrides.items():
        config.set(key, value)


def get_default_config() -> Config:
    """Get the default solver configuration.

    Returns:
        Config with solver, logging, export and cost-construction settings.
    """
    default_cfg = {
        "solver": {
            # None selects the 2 * n * (n + 1) bound
            "max_iterations": None,
            "check_finite": True,
        },
        "logging": {
            "enabled": False,
            "level": "INFO",
            "log_interval": 1,
        },
        "export": {
            "enabled": False,
            "output_dir": "/tmp/hungarian_steps",
            "cell_size": 60,
        },
        "costs": {
            "num_workers": 4,
            "pattern": "*.png",
        },
    }
    return Config(default_cfg)
