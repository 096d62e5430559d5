"""Terminal display of performance profiles.

Renders a per-combo summary table and the profile values at a few fixed
thresholds.  All numbers come from :func:`compute_profile_stats` and the
profile's own queries.
"""

from __future__ import annotations

from perfprofile.analysis import ROBUSTNESS_BOUND, compute_profile_stats
from perfprofile.formatting import (
    format_fraction,
    format_percentage,
    format_ratio,
    format_section_header,
    format_table,
)
from perfprofile.profile import Profile, combo_label, instance_label

DEFAULT_TAUS: tuple[float, ...] = (1.0, 1.5, 2.0, 4.0, 10.0)


def format_profile_summary(profile: Profile) -> str:
    """Format the per-combo metrics of *profile* for the terminal."""
    analysis = compute_profile_stats(profile)
    stats = analysis.stats
    lines: list[str] = []

    title = f"Performance profile — {stats.criterion_name}"
    if profile.bench_id:
        title += f" ({profile.bench_id})"
    lines.append(format_section_header(title))
    lines.append(
        f"  Instances: {stats.n_instances} considered, "
        f"{stats.n_attempted_instances} attempted"
    )
    lines.append(
        f"  Successful runs: {stats.n_successful_runs}/{stats.total_runs} "
        f"({format_percentage(stats.n_successful_runs, stats.total_runs)})"
    )
    lines.append(f"  Ratio range: {format_ratio(profile.min_ratio)} to {format_ratio(profile.max_ratio)}")
    lines.append("")

    bound = f"{ROBUSTNESS_BOUND:g}"
    rows = [
        [
            perf.label,
            str(perf.solved),
            f"{perf.solved_pct:.1f}%",
            str(perf.wins),
            f"{perf.efficiency:.1f}%",
            f"{perf.robustness:.1f}%",
            format_ratio(perf.geomean_ratio),
        ]
        for perf in sorted(analysis.performances, key=lambda p: (-p.wins, -p.solved, p.label))
    ]
    lines.append(
        format_table(
            ["Combo", "Solved", "Solved %", "Wins", "Wins %", f"≤{bound}x", "Geo. mean"],
            rows,
            alignments=["l", "r", "r", "r", "r", "r", "r"],
        )
    )

    if stats.unsuccessful_instances:
        lines.append("")
        lines.append("  Unsolved instances:")
        for inst in stats.unsuccessful_instances:
            lines.append(f"    {instance_label(inst)}")

    return "\n".join(lines)


def format_profile_curve(profile: Profile, taus: tuple[float, ...] = DEFAULT_TAUS) -> str:
    """Tabulate ``rho(tau)`` for every combo at the given thresholds."""
    headers = ["Combo"] + [f"τ={tau:g}" for tau in taus]
    rows = [
        [combo_label(c)] + [format_fraction(profile.fraction_within(c, tau)) for tau in taus]
        for c in profile.combos
    ]
    return format_table(headers, rows, alignments=["l"] + ["r"] * len(taus))
