"""Textual analysis of a performance profile.

:func:`compute_profile_stats` derives structured metrics and
:func:`format_analysis_markdown` renders them for the documentation
pipeline.  Both read only the :class:`~perfprofile.profile.Profile`, through
the same queries the curve uses, so the narrative can never contradict the
plotted curve.

Metrics per combo:

- **Efficiency**: share of instances where the combo was best (ratio 1.0).
- **Solved**: share of instances with a comparable value.
- **Robustness**: share of instances with ratio <= :data:`ROBUSTNESS_BOUND`,
  i.e. the profile value ``rho(ROBUSTNESS_BOUND)``.
- **Geometric-mean ratio** over the solved instances, the typical slowdown
  relative to the best combo.
"""

from __future__ import annotations

import math
import statistics
from dataclasses import dataclass, field

from perfprofile.profile import Combo, Instance, Profile, combo_label, instance_label

ROBUSTNESS_BOUND = 10.0


@dataclass
class ProfileStats:
    """Dataset overview of a profile."""

    n_problems: int  # distinct values of the first group key
    n_instances: int  # considered instances (denominator)
    n_attempted_instances: int
    n_combos: int
    n_successful_runs: int  # instance/combo pairs with a value
    unsuccessful_instances: list[Instance] = field(default_factory=list)
    group_keys: tuple[str, ...] = ()
    combo_keys: tuple[str, ...] = ()
    criterion_name: str = ""

    @property
    def total_runs(self) -> int:
        """Instance/combo pairs that could have produced a value."""
        return self.n_attempted_instances * self.n_combos


@dataclass
class ComboPerformance:
    """Metrics of one combo.  Percentages are 0-100."""

    combo: Combo
    wins: int
    efficiency: float
    solved: int
    solved_pct: float
    robustness: float
    geomean_ratio: float  # NaN if the combo solved nothing

    @property
    def label(self) -> str:
        return combo_label(self.combo)


@dataclass
class ProfileAnalysis:
    """Full analysis of a profile."""

    bench_id: str
    stats: ProfileStats
    performances: list[ComboPerformance] = field(default_factory=list)
    most_robust: list[Combo] = field(default_factory=list)
    most_efficient: list[Combo] = field(default_factory=list)

    def performance(self, combo: Combo) -> ComboPerformance:
        """Return the metrics of *combo*.

        Raises:
            KeyError: If *combo* is not part of the analysis.
        """
        for perf in self.performances:
            if perf.combo == combo:
                return perf
        raise KeyError(combo)


# ---------------------------------------------------------------------------
# Computation
# ---------------------------------------------------------------------------


def _pct(count: float, total: int) -> float:
    return round(100 * count / total, 1) if total else 0.0


def _geomean(ratios: tuple[float, ...]) -> float:
    if not ratios:
        return float("nan")
    if any(math.isinf(r) for r in ratios):
        return math.inf
    return statistics.geometric_mean(ratios)


def _leaders(performances: list[ComboPerformance], attr: str) -> list[Combo]:
    if not performances:
        return []
    top = max(getattr(p, attr) for p in performances)
    return [p.combo for p in performances if getattr(p, attr) == top]


def compute_profile_stats(profile: Profile) -> ProfileAnalysis:
    """Compute the structured analysis of *profile*."""
    n = profile.total_instances
    attempted = profile.attempted_instances or profile.instances

    stats = ProfileStats(
        n_problems=len({i[0] for i in attempted}),
        n_instances=n,
        n_attempted_instances=len(attempted),
        n_combos=len(profile.combos),
        n_successful_runs=sum(profile.solved(c) for c in profile.combos),
        unsuccessful_instances=sorted(profile.unsolved_instances, key=lambda i: tuple(map(str, i))),
        group_keys=profile.group_keys,
        combo_keys=profile.combo_keys,
        criterion_name=profile.criterion_name,
    )

    performances = []
    for combo in profile.combos:
        wins = profile.wins(combo)
        solved = profile.solved(combo)
        performances.append(
            ComboPerformance(
                combo=combo,
                wins=wins,
                efficiency=_pct(wins, n),
                solved=solved,
                solved_pct=_pct(solved, n),
                robustness=round(100 * profile.fraction_within(combo, ROBUSTNESS_BOUND), 1),
                geomean_ratio=_geomean(profile.ratios_for(combo)),
            )
        )

    return ProfileAnalysis(
        bench_id=profile.bench_id,
        stats=stats,
        performances=performances,
        most_robust=_leaders(performances, "solved_pct"),
        most_efficient=_leaders(performances, "efficiency"),
    )


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------


def _format_ratio(value: float) -> str:
    if math.isnan(value):
        return "n/a"
    if math.isinf(value):
        return "inf"
    return f"{value:.2f}"


def _verdict(analysis: ProfileAnalysis, leaders: list[Combo], attr: str, text: str) -> str:
    rate = getattr(analysis.performance(leaders[0]), attr)
    if len(leaders) == 1:
        return f"    **{text[0]}**: `{combo_label(leaders[0])}` {text[1]} {rate}% of instances."
    return f"    **{text[0]}**: {len(leaders)} combinations tied at {rate}%."


def format_analysis_markdown(analysis: ProfileAnalysis) -> str:
    """Render *analysis* as a Markdown admonition block."""
    stats = analysis.stats
    lines: list[str] = []

    lines.append('!!! info "Performance Profile Analysis"')
    title = f" for `{analysis.bench_id}`" if analysis.bench_id else ""
    lines.append(f"    **Dataset overview{title}:**")
    lines.append(f"    - **Problems**: {stats.n_problems}")
    lines.append(f"    - **Instances**: {stats.n_attempted_instances}")
    lines.append(f"    - **Solver combos**: {stats.n_combos}")
    lines.append("")

    lines.append("    **Profile configuration:**")
    lines.append(f"    - **Instance definition**: ({', '.join(stats.group_keys)})")
    lines.append(f"    - **Solver combos definition**: ({', '.join(stats.combo_keys)})")
    lines.append(f"    - **Criterion**: {stats.criterion_name}")
    lines.append(
        f"    - **Successful runs**: {stats.n_successful_runs}/{stats.total_runs} "
        f"({_pct(stats.n_successful_runs, stats.total_runs)}%)"
    )
    lines.append(
        f"    - **Successful instances**: {stats.n_instances}/{stats.n_attempted_instances} "
        f"({_pct(stats.n_instances, stats.n_attempted_instances)}%)"
    )
    if not stats.unsuccessful_instances:
        lines.append(
            "    - **Unsuccessful instances**: none "
            "(every instance had at least one successful run)"
        )
    else:
        lines.append("    - **Unsuccessful instances** (no solver converged):")
        for inst in stats.unsuccessful_instances:
            lines.append(f"      - `{instance_label(inst)}`")
    lines.append("")

    lines.append("    **Robustness (% of instances solved):**")
    for perf in analysis.performances:
        lines.append(f"    - `{perf.label}`: {perf.solved_pct}%")
    lines.append("")

    lines.append("    **Efficiency (% of instances where best):**")
    for perf in analysis.performances:
        lines.append(f"    - `{perf.label}`: {perf.efficiency}% ({perf.wins} wins)")
    lines.append("")

    bound = f"{ROBUSTNESS_BOUND:g}"
    lines.append(f"    **Within {bound}x of the best / geometric-mean ratio:**")
    for perf in analysis.performances:
        lines.append(
            f"    - `{perf.label}`: {perf.robustness}% / {_format_ratio(perf.geomean_ratio)}"
        )
    lines.append("")

    if analysis.most_robust:
        lines.append(
            _verdict(analysis, analysis.most_robust, "solved_pct", ("Most robust", "solved"))
        )
        lines.append("")
    if analysis.most_efficient:
        lines.append(
            _verdict(
                analysis, analysis.most_efficient, "efficiency", ("Most efficient", "was best on")
            )
        )
        lines.append("")

    return "\n".join(lines) + "\n"


def analyze_profile(profile: Profile) -> str:
    """Markdown analysis of *profile*."""
    return format_analysis_markdown(compute_profile_stats(profile))


def no_data_message(bench_id: str = "") -> str:
    """Placeholder shown when a build produced no profile."""
    target = f" for `{bench_id}`" if bench_id else ""
    return f"!!! warning\n    No successful runs found to analyze{target}.\n"
