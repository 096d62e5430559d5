"""perfprofile — Dolan–Moré performance profiles for solver benchmarks."""

__version__ = "0.1.0"
