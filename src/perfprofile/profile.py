"""The computed performance profile.

A :class:`Profile` is produced by :func:`perfprofile.builder.build_profile`
and never modified afterwards.  It stores, per combo, the ascending ratios
over the instances where that combo had a comparable value, and answers the
queries that curve rendering and text analysis need.

The profile fraction for a combo ``c`` and threshold ``tau`` is::

    rho_c(tau) = |{ratios[c] <= tau}| / total_instances

where ``total_instances`` counts every instance on which at least one combo
produced a comparable value, including instances on which ``c`` itself was
censored.  A combo that failed somewhere therefore plateaus below 1.0.
"""

from __future__ import annotations

import bisect
import math
from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

Combo = tuple[Any, ...]
Instance = tuple[Any, ...]


def combo_label(combo: Combo) -> str:
    """Format a combo identity as ``"(exa, ipopt)"``."""
    return "(" + ", ".join(str(part) for part in combo) + ")"


def instance_label(instance: Instance) -> str:
    """Format an instance identity as ``"beam, 200"``."""
    return ", ".join(str(part) for part in instance)


@dataclass(frozen=True)
class Profile:
    """Per-combo performance ratios for one benchmark and criterion.

    Raises:
        ValueError: If a non-empty *winners* does not list each combo once
            per ratio of exactly 1.0.
    """

    combos: tuple[Combo, ...]
    ratios: Mapping[Combo, tuple[float, ...]]
    instances: tuple[Instance, ...]
    winners: Mapping[Instance, tuple[Combo, ...]]
    values: Mapping[tuple[Instance, Combo], float] = field(default_factory=dict)
    attempted_instances: tuple[Instance, ...] = ()
    group_keys: tuple[str, ...] = ()
    combo_keys: tuple[str, ...] = ()
    criterion_name: str = ""
    bench_id: str = ""
    n_runs: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "ratios", MappingProxyType(dict(self.ratios)))
        object.__setattr__(self, "winners", MappingProxyType(dict(self.winners)))
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

        if self.winners:
            listed = Counter(c for combos in self.winners.values() for c in combos)
            for combo in self.combos:
                if listed[combo] != self.wins(combo):
                    raise ValueError(
                        f"winners list {combo_label(combo)} {listed[combo]} time(s) "
                        f"but it has {self.wins(combo)} ratio(s) of 1.0"
                    )

    # -- Sizes --------------------------------------------------------------

    @property
    def total_instances(self) -> int:
        """Number of instances considered (the profile denominator)."""
        return len(self.instances)

    @property
    def unsolved_instances(self) -> tuple[Instance, ...]:
        """Attempted instances on which no combo produced a comparable value."""
        considered = set(self.instances)
        return tuple(i for i in self.attempted_instances if i not in considered)

    # -- Per-combo queries ---------------------------------------------------

    def ratios_for(self, combo: Combo) -> tuple[float, ...]:
        """Ascending ratios of *combo*; empty for unknown combos."""
        return self.ratios.get(combo, ())

    def solved(self, combo: Combo) -> int:
        """Number of instances on which *combo* had a comparable value."""
        return len(self.ratios_for(combo))

    def wins(self, combo: Combo) -> int:
        """Number of instances on which *combo* was best (ties included)."""
        return sum(1 for r in self.ratios_for(combo) if r == 1.0)

    def fraction_within(self, combo: Combo, tau: float) -> float:
        """Fraction of all considered instances where *combo* has ratio <= *tau*."""
        if not self.instances:
            return 0.0
        count = bisect.bisect_right(self.ratios_for(combo), tau)
        return count / self.total_instances

    def curve_points(self, combo: Combo) -> tuple[list[float], list[float]]:
        """Step-function points ``(tau_k, rho(tau_k))`` for *combo*.

        One point per stored ratio, in ascending order.
        """
        xs = list(self.ratios_for(combo))
        ys = [self.fraction_within(combo, x) for x in xs]
        return xs, ys

    # -- Bounds ---------------------------------------------------------------

    @property
    def min_ratio(self) -> float:
        """Smallest stored ratio (1.0 for any non-empty profile)."""
        firsts = [r[0] for r in self.ratios.values() if r]
        return min(firsts) if firsts else 1.0

    @property
    def max_ratio(self) -> float:
        """Largest stored ratio, at least 1.0."""
        lasts = [r[-1] for r in self.ratios.values() if r]
        return max([1.0, *lasts])

    # -- Serialization ---------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict.

        Infinite ratios are written as ``null``.
        """

        def _num(x: float) -> float | None:
            return None if math.isinf(x) else round(x, 6)

        return {
            "bench_id": self.bench_id,
            "criterion": self.criterion_name,
            "group_keys": list(self.group_keys),
            "combo_keys": list(self.combo_keys),
            "total_instances": self.total_instances,
            "n_runs": self.n_runs,
            "instances": [list(i) for i in self.instances],
            "unsolved_instances": [list(i) for i in self.unsolved_instances],
            "combos": [
                {
                    "combo": dict(zip(self.combo_keys, c)),
                    "label": combo_label(c),
                    "ratios": [_num(r) for r in self.ratios_for(c)],
                    "wins": self.wins(c),
                    "solved": self.solved(c),
                }
                for c in self.combos
            ],
            "winners": [
                {"instance": list(i), "combos": [combo_label(c) for c in self.winners[i]]}
                for i in self.instances
            ],
        }
