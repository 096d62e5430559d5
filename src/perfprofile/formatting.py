"""Shared text formatting helpers for perfprofile.

Aligned tables, percentages and ratios for the terminal output of the CLI.
"""

from __future__ import annotations

import math


def format_table(
    headers: list[str],
    rows: list[list[str]],
    *,
    alignments: list[str] | None = None,
    indent: int = 2,
) -> str:
    """Format rows as an aligned text table with a rule under the header.

    Column widths come from the widest cell.  Columns marked ``'r'`` in
    *alignments* are right-aligned, all others left-aligned.

    Args:
        headers: Column header strings.
        rows: List of rows, each a list of cell strings.  Short rows are
            padded with empty cells.
        alignments: Per-column alignment, ``'l'`` or ``'r'``.
        indent: Number of leading spaces per line.

    Returns:
        The formatted table, or ``""`` without headers.
    """
    if not headers:
        return ""

    ncols = len(headers)
    aligns = list(alignments or [])
    aligns += ["l"] * (ncols - len(aligns))

    cells = [(list(row) + [""] * ncols)[:ncols] for row in rows]
    widths = [len(h) for h in headers]
    for row in cells:
        for ci, cell in enumerate(row):
            widths[ci] = max(widths[ci], len(cell))

    def _line(values: list[str]) -> str:
        parts = [
            v.rjust(widths[i]) if aligns[i] == "r" else v.ljust(widths[i])
            for i, v in enumerate(values)
        ]
        return (" " * indent + "  ".join(parts)).rstrip()

    lines = [_line(headers), " " * indent + "─" * (sum(widths) + 2 * (ncols - 1))]
    lines.extend(_line(row) for row in cells)
    return "\n".join(lines)


def format_section_header(title: str, width: int = 72) -> str:
    """Format a section header: ``'─── Title ──...'``."""
    prefix = "─── "
    suffix_len = width - len(prefix) - len(title) - 1
    return prefix + title + " " + "─" * max(0, suffix_len)


def format_percentage(count: int, total: int) -> str:
    """Format as percentage: ``'44.2%'``. Returns ``'-'`` if *total* is 0."""
    if total == 0:
        return "-"
    return f"{count / total * 100:.1f}%"


def format_fraction(value: float) -> str:
    """Format a 0-1 fraction as a percentage: ``0.5`` -> ``'50.0%'``."""
    if math.isnan(value):
        return "N/A"
    return f"{value * 100:.1f}%"


def format_ratio(value: float) -> str:
    """Format a performance ratio: ``'1.00'``, ``'12.5'``, ``'inf'``."""
    if math.isnan(value):
        return "N/A"
    if math.isinf(value):
        return "inf"
    if value >= 10:
        return f"{value:.1f}"
    return f"{value:.2f}"
