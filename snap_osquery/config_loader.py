from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from json import JSONDecodeError

from snap_osquery.util import expand_path, xdg_config_home

CONFIG_SUFFIXES = (".toml", ".json", ".yaml", ".yml")


@dataclass(frozen=True)
class LoadedConfig:
    path: Path | None
    values: dict[str, Any] = field(default_factory=dict)

    @property
    def socket(self) -> str | None:
        return self.values.get("socket")

    @property
    def timeout(self) -> int | None:
        return self.values.get("timeout")

    @property
    def interval(self) -> int | None:
        return self.values.get("interval")

    @property
    def verbose(self) -> bool | None:
        return self.values.get("verbose")

    @property
    def snap_path(self) -> str | None:
        return self.values.get("snap_path")


def _require_int(value: Any, *, what: str) -> int:
    # bool is an int subclass; `timeout = true` is a mistake, not 1.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'{what}' must be an integer if present")
    if value < 0:
        raise ValueError(f"'{what}' must not be negative")
    return value


def _require_positive_int(value: Any, *, what: str) -> int:
    value = _require_int(value, what=what)
    if value < 1:
        raise ValueError(f"'{what}' must be at least 1")
    return value


def _require_str(value: Any, *, what: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError(f"'{what}' must be a non-empty string")
    return value


def _require_bool(value: Any, *, what: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"'{what}' must be a boolean if present")
    return value


_VALIDATORS = {
    "socket": _require_str,
    "timeout": _require_int,
    # The SDK's liveness watcher sleeps this long between pings.
    "interval": _require_positive_int,
    "verbose": _require_bool,
    "snap_path": _require_str,
}


def _normalize_top_level(obj: Any) -> dict[str, Any]:
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ValueError("Config must be a table/object of settings.")

    unknown = set(obj.keys()) - set(_VALIDATORS)
    if unknown:
        extra = ", ".join(sorted(str(k) for k in unknown))
        known = ", ".join(sorted(_VALIDATORS))
        raise ValueError(f"Unknown config keys: {extra} (known: {known})")

    values: dict[str, Any] = {}
    for key, value in obj.items():
        values[key] = _VALIDATORS[key](value, what=key)
    if "snap_path" in values:
        values["snap_path"] = str(expand_path(values["snap_path"]))
    return values


def _load_json(text: str, path: Path) -> Any:
    try:
        return json.loads(text)
    except JSONDecodeError as e:
        raise ValueError(
            f"Invalid JSON in {path} at line {e.lineno}, column {e.colno}: {e.msg}"
        ) from e


def _load_toml(text: str, path: Path) -> Any:
    import tomllib

    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {path}: {e}") from e


def _load_yaml(text: str, path: Path) -> Any:
    try:
        import yaml  # type: ignore
    except ImportError as e:
        raise ValueError(
            "YAML config support requires PyYAML. Install it (e.g. 'python -m pip install pyyaml') "
            f"and retry loading {path}."
        ) from e
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        if mark is not None and hasattr(mark, "line") and hasattr(mark, "column"):
            line = int(mark.line) + 1
            col = int(mark.column) + 1
            raise ValueError(f"Invalid YAML in {path} at line {line}, column {col}: {e}") from e
        raise ValueError(f"Invalid YAML in {path}: {e}") from e


def load_config_file(path: Path) -> LoadedConfig:
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()

    if suffix == ".json":
        raw = _load_json(text, path)
    elif suffix == ".toml":
        raw = _load_toml(text, path)
    elif suffix in (".yaml", ".yml"):
        raw = _load_yaml(text, path)
    else:
        raise ValueError(
            f"Unsupported config format for {path} (expected .json, .toml, .yaml, .yml)."
        )
    try:
        values = _normalize_top_level(raw)
    except ValueError as e:
        raise ValueError(f"{path}: {e}") from e
    return LoadedConfig(path=path, values=values)


def default_config_path() -> Path | None:
    """First existing config.{toml,json,yaml,yml} under the user config dir."""
    base = xdg_config_home() / "snap-osquery"
    for suffix in CONFIG_SUFFIXES:
        candidate = base / f"config{suffix}"
        if candidate.is_file():
            return candidate
    return None
