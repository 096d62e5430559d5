"""Performance profile configurations.

Handles:
- The :class:`ProfileConfig` value type (instance keys, combo keys,
  criterion, inclusion predicate, aggregator).
- Building configurations from declarative profile definitions.
- Loading extra profile definitions from YAML files.
- The built-in default profile definitions.
"""

from __future__ import annotations

import statistics
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

import yaml

from perfprofile.criterion import DIRECTIONS, Criterion, field_criterion
from perfprofile.records import MISSING, Record, is_success
from perfprofile.logging import get_logger

log = get_logger("config")

Aggregator = Callable[[Sequence[float]], float]


class ConfigError(ValueError):
    """A profile configuration or profile file is structurally invalid."""


AGGREGATORS: dict[str, Aggregator] = {
    "mean": statistics.mean,
    "median": statistics.median,
    "min": min,
    "max": max,
}


def _include_all(record: Record) -> bool:
    return True


# ---------------------------------------------------------------------------
# ProfileConfig
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProfileConfig:
    """How to turn raw records into a performance profile.

    Attributes:
        group_keys: Fields identifying an instance, e.g. ``("problem", "grid_size")``.
        combo_keys: Fields identifying a compared configuration, e.g.
            ``("model", "solver")``.
        criterion: Metric extraction and ordering rule.
        include: ``record -> bool``; records returning False take no part.
        aggregate: Combines the values of repeated runs of one
            instance/combo pair.  Never sees MISSING values.
        description: Free text shown by ``perfprofile list``.
    """

    group_keys: tuple[str, ...]
    combo_keys: tuple[str, ...]
    criterion: Criterion
    include: Callable[[Record], bool] = _include_all
    aggregate: Aggregator = statistics.mean
    description: str = ""

    def __post_init__(self) -> None:
        # Accept lists from callers but store tuples.
        object.__setattr__(self, "group_keys", tuple(self.group_keys))
        object.__setattr__(self, "combo_keys", tuple(self.combo_keys))

        if not self.group_keys:
            raise ConfigError("group_keys must not be empty.")
        if not self.combo_keys:
            raise ConfigError("combo_keys must not be empty.")
        for label, keys in (("group_keys", self.group_keys), ("combo_keys", self.combo_keys)):
            if len(set(keys)) != len(keys):
                raise ConfigError(f"{label} contains duplicates: {list(keys)}")
        overlap = set(self.group_keys) & set(self.combo_keys)
        if overlap:
            raise ConfigError(
                f"group_keys and combo_keys must be disjoint; both contain: "
                f"{', '.join(sorted(overlap))}"
            )


# ---------------------------------------------------------------------------
# Declarative profiles
# ---------------------------------------------------------------------------


DEFAULT_PROFILES: dict[str, dict[str, Any]] = {
    "default_cpu": {
        "description": "CPU time per (problem, grid_size), lower is better",
        "group_keys": ["problem", "grid_size"],
        "combo_keys": ["model", "solver"],
        "criterion": {"name": "CPU time", "field": "benchmark.time", "direction": "lower"},
        "aggregate": "mean",
        "require_success": True,
    },
    "default_iter": {
        "description": "Solver iterations per (problem, grid_size), lower is better",
        "group_keys": ["problem", "grid_size"],
        "combo_keys": ["model", "solver"],
        "criterion": {"name": "Iterations", "field": "iterations", "direction": "lower"},
        "aggregate": "mean",
        "require_success": True,
    },
}


def make_include(criterion: Criterion, *, require_success: bool = True) -> Callable[[Record], bool]:
    """Build the standard inclusion predicate.

    A record is included when it has a comparable criterion value and, if
    *require_success* is set, its ``success`` field is ``True``.
    """

    def include(record: Record) -> bool:
        if require_success and not is_success(record):
            return False
        return criterion.value(record) is not MISSING

    return include


def _str_list(data: Mapping[str, Any], key: str, name: str) -> list[str]:
    value = data.get(key)
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"Profile '{name}': '{key}' must be a list of field names.")
    return value


def config_from_profile(data: Mapping[str, Any], *, name: str = "") -> ProfileConfig:
    """Build a :class:`ProfileConfig` from a declarative profile definition.

    Definition format::

        description: "optional description"
        group_keys: [problem, grid_size]
        combo_keys: [model, solver]
        criterion:
          name: "CPU time"
          field: benchmark.time
          direction: lower      # or: higher
        aggregate: mean         # mean | median | min | max
        require_success: true

    Args:
        data: The parsed definition.
        name: Profile name, used in error messages.

    Raises:
        ConfigError: If the definition is incomplete or names an unknown
            aggregator or direction.
    """
    if not isinstance(data, Mapping):
        raise ConfigError(f"Profile '{name}' must be a mapping, got {type(data).__name__}")

    crit_data = data.get("criterion")
    if not isinstance(crit_data, Mapping) or not crit_data.get("field"):
        raise ConfigError(f"Profile '{name}': 'criterion' must be a mapping with a 'field'.")

    direction = crit_data.get("direction", "lower")
    if direction not in DIRECTIONS:
        raise ConfigError(
            f"Profile '{name}': unknown direction '{direction}'. "
            f"Valid directions: {', '.join(sorted(DIRECTIONS))}"
        )
    field_path = str(crit_data["field"])
    criterion = field_criterion(str(crit_data.get("name", field_path)), field_path, direction)

    agg_name = data.get("aggregate", "mean")
    if agg_name not in AGGREGATORS:
        raise ConfigError(
            f"Profile '{name}': unknown aggregate '{agg_name}'. "
            f"Valid aggregates: {', '.join(sorted(AGGREGATORS))}"
        )

    return ProfileConfig(
        group_keys=tuple(_str_list(data, "group_keys", name)),
        combo_keys=tuple(_str_list(data, "combo_keys", name)),
        criterion=criterion,
        include=make_include(criterion, require_success=bool(data.get("require_success", True))),
        aggregate=AGGREGATORS[agg_name],
        description=str(data.get("description", "")),
    )


def load_profiles(path: Path) -> dict[str, ProfileConfig]:
    """Load named profile definitions from a YAML file.

    The file maps profile names to definitions in the format accepted by
    :func:`config_from_profile`::

        wall_median:
          group_keys: [problem, grid_size]
          combo_keys: [model, solver]
          criterion: {name: "Wall time", field: benchmark.time}
          aggregate: median

    Raises:
        FileNotFoundError: If *path* does not exist.
        ConfigError: If the file is not a mapping or a definition is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Profiles file not found: {path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ConfigError(f"Profiles file must be a YAML mapping, got {type(data).__name__}")

    configs = {str(n): config_from_profile(d, name=str(n)) for n, d in data.items()}
    log.debug("Loaded %d profile definitions from %s", len(configs), path)
    return configs
