"""Tests for perfprofile.cli — Click CLI."""

from __future__ import annotations

import json
import logging
import tempfile
import unittest
from pathlib import Path

from click.testing import CliRunner

from profile_test_helpers import make_record, two_combo_records, write_results

from perfprofile.cli import main


class _CLITestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.tmpdir = Path(self._tmpdir.name)
        self.results = write_results(self.tmpdir / "core.json", two_combo_records())

    def tearDown(self) -> None:
        # Commands install handlers bound to the runner streams.
        logger = logging.getLogger("perfprofile")
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        self._tmpdir.cleanup()

    def invoke(self, *args: str):  # type: ignore[no-untyped-def]
        return CliRunner().invoke(main, list(args))


class TestHelp(_CLITestCase):
    def test_group_help(self) -> None:
        result = self.invoke("--help")
        self.assertEqual(result.exit_code, 0)
        for command in ("list", "analyze", "show", "export"):
            self.assertIn(command, result.output)

    def test_analyze_help(self) -> None:
        result = self.invoke("analyze", "--help")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("--profile", result.output)
        self.assertIn("--combo", result.output)
        self.assertIn("RESULTS", result.output)

    def test_export_help(self) -> None:
        result = self.invoke("export", "--help")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("--format", result.output)

    def test_version(self) -> None:
        result = self.invoke("--version")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("0.1.0", result.output)


class TestList(_CLITestCase):
    def test_defaults(self) -> None:
        result = self.invoke("list")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("default_cpu", result.output)
        self.assertIn("default_iter", result.output)
        self.assertIn("CPU time", result.output)
        self.assertIn("Iterations", result.output)

    def test_profiles_file(self) -> None:
        path = self.tmpdir / "profiles.yaml"
        path.write_text(
            "wall_median:\n"
            "  description: median wall time\n"
            "  group_keys: [problem, grid_size]\n"
            "  combo_keys: [model, solver]\n"
            "  criterion: {name: Wall time, field: benchmark.time}\n"
            "  aggregate: median\n",
            encoding="utf-8",
        )
        result = self.invoke("list", "--profiles-file", str(path))
        self.assertEqual(result.exit_code, 0)
        self.assertIn("wall_median", result.output)
        self.assertIn("median wall time", result.output)
        self.assertIn("default_cpu", result.output)

    def test_profiles_file_duplicate_name(self) -> None:
        path = self.tmpdir / "profiles.yaml"
        path.write_text(
            "default_cpu:\n"
            "  group_keys: [problem]\n"
            "  combo_keys: [solver]\n"
            "  criterion: {field: benchmark.time}\n",
            encoding="utf-8",
        )
        result = self.invoke("list", "--profiles-file", str(path))
        self.assertEqual(result.exit_code, 1)
        self.assertIn("already registered", result.output)

    def test_profiles_file_invalid(self) -> None:
        path = self.tmpdir / "profiles.yaml"
        path.write_text("- not a mapping\n", encoding="utf-8")
        result = self.invoke("list", "--profiles-file", str(path))
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error:", result.output)


class TestAnalyze(_CLITestCase):
    def test_analysis(self) -> None:
        result = self.invoke("analyze", str(self.results))
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn('!!! info "Performance Profile Analysis"', result.output)
        # Benchmark id defaults to the file stem.
        self.assertIn("Dataset overview for `core`", result.output)
        self.assertIn("(A, x)", result.output)

    def test_bench_id(self) -> None:
        result = self.invoke("analyze", str(self.results), "--bench-id", "ubuntu")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("for `ubuntu`", result.output)

    def test_iterations_profile(self) -> None:
        records = [
            make_record("p", 1, "A", "x", time=1.0, iterations=10),
            make_record("p", 1, "B", "x", time=2.0, iterations=5),
        ]
        path = write_results(self.tmpdir / "iter.json", records)
        result = self.invoke("analyze", str(path), "--profile", "default_iter")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("- **Criterion**: Iterations", result.output)
        self.assertIn("`(B, x)` was best on 100.0%", result.output)

    def test_combo_filter(self) -> None:
        result = self.invoke("analyze", str(self.results), "--combo", "B:x")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("(B, x)", result.output)
        self.assertNotIn("(A, x)", result.output)

    def test_no_data(self) -> None:
        path = write_results(
            self.tmpdir / "failed.json",
            [make_record("p", 1, "A", "x", time=1.0, success=False)],
        )
        result = self.invoke("analyze", str(path))
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("!!! warning", result.output)
        self.assertIn("No successful runs found to analyze for `failed`.", result.output)

    def test_combo_not_in_data(self) -> None:
        result = self.invoke("analyze", str(self.results), "--combo", "C:y")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("!!! warning", result.output)

    def test_unknown_profile(self) -> None:
        result = self.invoke("analyze", str(self.results), "--profile", "unknown_profile")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("unknown_profile", result.output)
        self.assertIn("not found", result.output)

    def test_bad_combo_spec(self) -> None:
        result = self.invoke("analyze", str(self.results), "--combo", "exa")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Invalid combo specification", result.output)

    def test_missing_results_file(self) -> None:
        result = self.invoke("analyze", str(self.tmpdir / "nope.json"))
        self.assertNotEqual(result.exit_code, 0)

    def test_malformed_results_file(self) -> None:
        path = self.tmpdir / "bad.json"
        path.write_text('{"results": {"problem": "beam"}}', encoding="utf-8")
        result = self.invoke("analyze", str(path))
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error:", result.output)

    def test_non_object_entries_skipped(self) -> None:
        path = self.tmpdir / "mixed.json"
        path.write_text(
            json.dumps({"results": [*two_combo_records(), "oops", None, 3]}), encoding="utf-8"
        )
        result = self.invoke("analyze", str(path))
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("- **Successful runs**: 4/4 (100.0%)", result.output)

    def test_log_file(self) -> None:
        log_file = self.tmpdir / "debug.log"
        result = self.invoke("analyze", str(self.results), "--log-file", str(log_file))
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertTrue(log_file.exists())
        self.assertIn("Built profile", log_file.read_text(encoding="utf-8"))


class TestShow(_CLITestCase):
    def test_summary(self) -> None:
        result = self.invoke("show", str(self.results))
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Performance profile", result.output)
        self.assertIn("τ=1", result.output)
        self.assertIn("(B, x)", result.output)

    def test_no_data(self) -> None:
        path = write_results(self.tmpdir / "empty.json", [])
        result = self.invoke("show", str(path))
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("No successful runs found to analyze for empty.", result.output)


class TestExport(_CLITestCase):
    def test_csv_stdout(self) -> None:
        result = self.invoke("export", str(self.results))
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertTrue(result.output.startswith("combo,model,solver,tau,fraction"))

    def test_json_to_file(self) -> None:
        out = self.tmpdir / "profile.json"
        result = self.invoke("export", str(self.results), "--format", "json", "-o", str(out))
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Exported to", result.output)
        data = json.loads(out.read_text(encoding="utf-8"))
        self.assertEqual(data["bench_id"], "core")
        self.assertEqual(data["criterion"], "CPU time")

    def test_no_data(self) -> None:
        path = write_results(self.tmpdir / "empty.json", [])
        result = self.invoke("export", str(path))
        self.assertEqual(result.exit_code, 1)
        self.assertIn("no successful runs", result.output)


if __name__ == "__main__":
    unittest.main()
