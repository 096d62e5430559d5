"""Build Dolan–Moré performance profiles from measurement records.

:func:`build_profile` is a pure function: the same records and configuration
always give an equal :class:`~perfprofile.profile.Profile`, and nothing is
retained between calls.

Steps:

1. Drop malformed records (not a mapping, or a group or combo key is absent).
2. Drop records outside ``allowed_combos`` and records rejected by the
   configuration's inclusion predicate.
3. Group the rest by (instance, combo), drop MISSING values and aggregate
   repeated runs into one value.
4. Per instance, find the best value with the criterion's comparator.
   Instances where nothing is comparable are censored (dropped).
5. Ratio of each value to the instance best, oriented so that it is >= 1.0.
6. Sort each combo's ratios.

Returns ``None`` when there is nothing to profile.  That is an expected
outcome (a benchmark without any successful run), not an error.
"""

from __future__ import annotations

import math
from typing import Any, Collection, Iterable

from perfprofile.config import ProfileConfig
from perfprofile.logging import get_logger
from perfprofile.profile import Combo, Instance, Profile
from perfprofile.records import MISSING, Record, key_of

log = get_logger("builder")


def parse_combo_spec(spec: str, *, arity: int = 2) -> Combo:
    """Parse a ``"model:solver"`` style combo specification.

    Args:
        spec: Colon-separated combo key values.
        arity: Expected number of parts (the number of combo keys).

    Raises:
        ValueError: If *spec* does not have exactly *arity* non-empty parts.
    """
    parts = tuple(p.strip() for p in spec.split(":"))
    if len(parts) != arity or not all(parts):
        expected = ":".join(f"value{i + 1}" for i in range(arity))
        raise ValueError(f"Invalid combo specification '{spec}'. Expected '{expected}'.")
    return parts


def performance_ratio(value: float, best: float) -> float:
    """Ratio of *value* to the instance *best*, always >= 1.0.

    For lower-is-better metrics the best is the smallest value and this is
    ``value / best``; for higher-is-better metrics it is ``best / value``.
    Equal values give exactly 1.0.  A non-positive denominator gives ``inf``.
    """
    if value == best:
        return 1.0
    low, high = (value, best) if value < best else (best, value)
    if low <= 0:
        return math.inf
    return high / low


def _normalize_allowed(allowed_combos: Iterable[Iterable[Any]] | None) -> set[Combo] | None:
    if allowed_combos is None:
        return None
    return {tuple(c) for c in allowed_combos}


def build_profile(
    records: Iterable[Record],
    config: ProfileConfig,
    allowed_combos: Collection[Iterable[Any]] | None = None,
    *,
    bench_id: str = "",
) -> Profile | None:
    """Build a performance profile.

    Args:
        records: Measurement records (mappings).  Not modified.
        config: Instance/combo keys, criterion, inclusion and aggregation.
        allowed_combos: Optional combo identities to keep, each a tuple of
            combo key values such as ``("exa", "ipopt")``.  ``None`` keeps
            every combo.
        bench_id: Benchmark identifier carried into the profile.

    Returns:
        The profile, or ``None`` if no instance has a comparable value.
    """
    allowed = _normalize_allowed(allowed_combos)
    criterion = config.criterion

    attempted: dict[Instance, None] = {}
    combos_seen: dict[Combo, None] = {}
    groups: dict[tuple[Instance, Combo], list[float]] = {}
    n_malformed = 0
    n_included = 0
    n_runs = 0

    for record in records:
        instance = key_of(record, config.group_keys)
        combo = key_of(record, config.combo_keys)
        if instance is None or combo is None:
            n_malformed += 1
            continue
        if allowed is not None and combo not in allowed:
            continue

        attempted.setdefault(instance, None)
        combos_seen.setdefault(combo, None)

        if not config.include(record):
            continue
        n_included += 1

        values = groups.setdefault((instance, combo), [])
        value = criterion.value(record)
        if value is not MISSING:
            values.append(value)
            n_runs += 1

    if n_malformed:
        log.debug("Dropped %d malformed records", n_malformed)

    if n_included == 0:
        log.info("No records passed the inclusion filter%s.", _for(bench_id))
        return None

    # Aggregate repeated runs; pairs without any value are censored.
    aggregated: dict[Instance, dict[Combo, float]] = {}
    for (instance, combo), values in groups.items():
        if not values:
            continue
        aggregated.setdefault(instance, {})[combo] = float(config.aggregate(values))

    ratios: dict[Combo, list[float]] = {c: [] for c in combos_seen}
    winners: dict[Instance, tuple[Combo, ...]] = {}
    instance_values: dict[tuple[Instance, Combo], float] = {}
    instances: list[Instance] = []

    for instance in attempted:
        per_combo = aggregated.get(instance)
        if not per_combo:
            continue
        instances.append(instance)
        best = criterion.best(list(per_combo.values()))
        best_combos = []
        for combo, value in per_combo.items():
            ratio = performance_ratio(value, best)
            ratios[combo].append(ratio)
            instance_values[(instance, combo)] = value
            if ratio == 1.0:
                best_combos.append(combo)
        winners[instance] = tuple(best_combos)

    if not instances:
        log.info("No comparable criterion values%s.", _for(bench_id))
        return None

    log.debug(
        "Built profile%s: %d instances (%d attempted), %d combos, %d runs",
        _for(bench_id),
        len(instances),
        len(attempted),
        len(combos_seen),
        n_runs,
    )

    return Profile(
        combos=tuple(combos_seen),
        ratios={c: tuple(sorted(r)) for c, r in ratios.items()},
        instances=tuple(instances),
        winners=winners,
        values=instance_values,
        attempted_instances=tuple(attempted),
        group_keys=config.group_keys,
        combo_keys=config.combo_keys,
        criterion_name=criterion.name,
        bench_id=bench_id,
        n_runs=n_runs,
    )


def _for(bench_id: str) -> str:
    return f" for {bench_id}" if bench_id else ""
