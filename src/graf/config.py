"""Configuration for the graf backend.

Read once at startup and passed explicitly to the store, dispatcher and
handlers.

Example ``graf.yaml``::

    db_path: data/graph.db
    node_id:
      min: 100
      max: 200
    x: {min: -5000, max: 5000}
    y: {min: -5000, max: 5000}
    year: {min: 1000, max: 2100}
    contention_retries: 3
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

DEFAULT_CONFIG_PATH = Path("graf.yaml")
DEFAULT_DB_PATH = Path(".graf/graph.db")


class ConfigError(ValueError):
    """Raised when the configuration file holds an unusable value."""


@dataclass(frozen=True)
class GrafConfig:
    """Settings shared by the store, the dispatcher and the handlers.

    Attributes:
        db_path: Location of the KuzuDB database
        min_node_id: First id of the node id band (inclusive)
        max_node_id: End of the node id band (exclusive)
        min_x, max_x: Inclusive bounds for the x coordinate
        min_y, max_y: Inclusive bounds for the y coordinate
        min_year, max_year: Inclusive bounds for the year
        contention_retries: Extra attempts for a request that lost a write race
    """

    db_path: Path = DEFAULT_DB_PATH
    min_node_id: int = 1
    max_node_id: int = 1_000_000
    min_x: int = -10_000
    max_x: int = 10_000
    min_y: int = -10_000
    max_y: int = 10_000
    min_year: int = 0
    max_year: int = 3000
    contention_retries: int = 3

    def __post_init__(self) -> None:
        if self.min_node_id < 0:
            raise ConfigError("node_id.min must not be negative")
        if self.min_node_id >= self.max_node_id:
            raise ConfigError("node_id.min must be lower than node_id.max")
        for name in ("x", "y", "year"):
            low = getattr(self, f"min_{name}")
            high = getattr(self, f"max_{name}")
            if low > high:
                raise ConfigError(f"{name}.min must not exceed {name}.max")
        if self.contention_retries < 0:
            raise ConfigError("contention_retries must not be negative")


def load(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Return the raw YAML mapping, or an empty one if the file is absent."""
    target = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not target.exists():
        if path is not None:
            raise ConfigError(f"configuration file not found: {target}")
        return {}
    with target.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    if not isinstance(payload, dict):
        raise ConfigError(f"configuration root must be a mapping: {target}")
    return payload


def _env_override(key: str, default: Any) -> Any:
    value = os.getenv(key)
    if value is None or value == "":
        return default
    return value


def _bounds(payload: Mapping[str, Any], name: str, low: int, high: int) -> Tuple[int, int]:
    section = payload.get(name) or {}
    if not isinstance(section, Mapping):
        raise ConfigError(f"'{name}' must be a mapping with 'min' and 'max'")
    try:
        return int(section.get("min", low)), int(section.get("max", high))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{name}' bounds must be integers") from exc


def load_config(path: Optional[Union[str, Path]] = None) -> GrafConfig:
    """Build the configuration from a YAML file and the environment.

    GRAF_DB_PATH, GRAF_MIN_NODE_ID and GRAF_MAX_NODE_ID take precedence over
    the file.

    Args:
        path: YAML file to read. Defaults to graf.yaml in the working
              directory, which may be absent.

    Returns:
        Validated GrafConfig

    Raises:
        ConfigError: If the file is missing or holds an unusable value
    """
    payload = load(path)
    defaults = GrafConfig()

    min_node_id, max_node_id = _bounds(
        payload, "node_id", defaults.min_node_id, defaults.max_node_id
    )
    min_x, max_x = _bounds(payload, "x", defaults.min_x, defaults.max_x)
    min_y, max_y = _bounds(payload, "y", defaults.min_y, defaults.max_y)
    min_year, max_year = _bounds(payload, "year", defaults.min_year, defaults.max_year)

    try:
        return GrafConfig(
            db_path=Path(_env_override("GRAF_DB_PATH", payload.get("db_path", defaults.db_path))),
            min_node_id=int(_env_override("GRAF_MIN_NODE_ID", min_node_id)),
            max_node_id=int(_env_override("GRAF_MAX_NODE_ID", max_node_id)),
            min_x=min_x,
            max_x=max_x,
            min_y=min_y,
            max_y=max_y,
            min_year=min_year,
            max_year=max_year,
            contention_retries=int(
                payload.get("contention_retries", defaults.contention_retries)
            ),
        )
    except (TypeError, ValueError) as exc:
        if isinstance(exc, ConfigError):
            raise
        raise ConfigError(f"invalid configuration value: {exc}") from exc
