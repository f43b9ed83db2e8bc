"""Load HissConfig from hiss.yaml / hiss.toml if present.

Merges file config with keyword overrides. Overrides take precedence.
"""

from __future__ import annotations

import tomllib
from dataclasses import fields
from pathlib import Path

import yaml

from hiss._errors import ConfigError
from hiss.config import HissConfig

_KNOWN_KEYS = frozenset(f.name for f in fields(HissConfig))


def load_config(root: Path | str = ".", **overrides: object) -> HissConfig:
    """Load HissConfig from root, optionally merging hiss.yaml.

    Looks for hiss.yaml, hiss.yml, or hiss.toml in root. If found, loads
    and merges with overrides. Overrides take precedence.

    Raises:
        ConfigError: If a config file exists but cannot be parsed, or
            names an option HissConfig does not have.

    """
    file_config = _read_hiss_config(Path(root))
    merged = {**file_config, **overrides}
    unknown = sorted(set(merged) - _KNOWN_KEYS)
    if unknown:
        msg = f"Unknown hiss config option(s): {', '.join(unknown)}"
        raise ConfigError(msg)
    return HissConfig(**merged)  # type: ignore[arg-type]


def _read_hiss_config(root: Path) -> dict[str, object]:
    """Read hiss config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("hiss.yaml", "hiss.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "hiss.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_hiss_section(data, path)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_hiss_section(data, path)


def _flatten_hiss_section(data: object, path: Path) -> dict[str, object]:
    """Extract hiss.* keys into top-level config.

    Top-level keys that are not HissConfig options are ignored so that
    hiss settings can live in a shared application config file.
    """
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)
    result: dict[str, object] = {
        k: v for k, v in data.items() if k != "hiss" and k in _KNOWN_KEYS
    }
    section = data.get("hiss")
    if section is not None:
        if not isinstance(section, dict):
            msg = f"{path}: 'hiss' section must be a mapping"
            raise ConfigError(msg)
        result.update(section)
    return result
