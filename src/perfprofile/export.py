"""Export performance profiles to CSV and JSON.

CSV format: one row per combo per curve point (long format), ready to be
plotted by an external renderer.  JSON format: the full profile as returned
by :meth:`Profile.to_dict`.
"""

from __future__ import annotations

import csv
import io
import json

from perfprofile.profile import Profile, combo_label


def export_curves_csv(profile: Profile) -> str:
    """Export the step-function points of every combo as CSV.

    Columns:
        combo, <combo keys...>, tau, fraction

    Combos without any point are omitted.
    """
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["combo", *profile.combo_keys, "tau", "fraction"])

    for combo in profile.combos:
        xs, ys = profile.curve_points(combo)
        for tau, frac in zip(xs, ys):
            writer.writerow([combo_label(combo), *combo, f"{tau:.6f}", f"{frac:.6f}"])

    return output.getvalue()


def export_profile_json(profile: Profile) -> str:
    """Export the whole profile as indented JSON."""
    return json.dumps(profile.to_dict(), indent=2) + "\n"
