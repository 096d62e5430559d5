"""Tests for perfprofile.display — terminal summaries."""

from __future__ import annotations

import unittest

from profile_test_helpers import make_config, make_record, two_combo_records

from perfprofile.builder import build_profile
from perfprofile.display import DEFAULT_TAUS, format_profile_curve, format_profile_summary
from perfprofile.profile import Profile


def _profile(bench_id: str = "core") -> Profile:
    profile = build_profile(two_combo_records(), make_config(), bench_id=bench_id)
    assert profile is not None
    return profile


class TestFormatProfileSummary(unittest.TestCase):
    def test_header(self) -> None:
        text = format_profile_summary(_profile())
        first = text.splitlines()[0]
        self.assertIn("CPU time", first)
        self.assertIn("(core)", first)

    def test_header_without_bench_id(self) -> None:
        first = format_profile_summary(_profile(bench_id="")).splitlines()[0]
        self.assertNotIn("(", first)

    def test_counts(self) -> None:
        text = format_profile_summary(_profile())
        self.assertIn("Instances: 2 considered, 2 attempted", text)
        self.assertIn("Successful runs: 4/4 (100.0%)", text)
        self.assertIn("Ratio range: 1.00 to 2.00", text)

    def test_table(self) -> None:
        text = format_profile_summary(_profile())
        self.assertIn("Combo", text)
        self.assertIn("Geo. mean", text)
        self.assertIn("(A, x)", text)
        self.assertIn("(B, x)", text)
        # Sorted by wins: A first.
        self.assertLess(text.index("(A, x)"), text.index("(B, x)"))

    def test_unsolved_listed(self) -> None:
        records = two_combo_records() + [
            make_record("r", 7, "A", "x", time=1.0, success=False),
        ]
        profile = build_profile(records, make_config())
        assert profile is not None
        text = format_profile_summary(profile)
        self.assertIn("Unsolved instances:", text)
        self.assertIn("r, 7", text)

    def test_no_unsolved_section(self) -> None:
        self.assertNotIn("Unsolved", format_profile_summary(_profile()))


class TestFormatProfileCurve(unittest.TestCase):
    def test_default_taus(self) -> None:
        text = format_profile_curve(_profile())
        header = text.splitlines()[0]
        for tau in DEFAULT_TAUS:
            self.assertIn(f"τ={tau:g}", header)

    def test_values(self) -> None:
        text = format_profile_curve(_profile(), taus=(1.0, 2.0))
        lines = text.splitlines()
        a_line = next(line for line in lines if "(A, x)" in line)
        b_line = next(line for line in lines if "(B, x)" in line)
        self.assertEqual(a_line.split()[-2:], ["100.0%", "100.0%"])
        self.assertEqual(b_line.split()[-2:], ["0.0%", "100.0%"])


if __name__ == "__main__":
    unittest.main()
