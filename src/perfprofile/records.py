"""Measurement records and field access.

A measurement record is any mapping describing one benchmark run, typically
one decoded object of a results file::

    {
        "problem": "beam",
        "grid_size": 200,
        "model": "exa",
        "solver": "ipopt",
        "success": true,
        "iterations": 17,
        "benchmark": {"time": 0.042, "allocs": 1234}
    }

The engine never mutates records.  Field paths are dotted (``benchmark.time``)
and walk nested mappings.  Absent data is reported with the :data:`MISSING`
sentinel rather than ``None`` so that a stored ``null`` and an absent key are
handled identically by callers that only care about presence.
"""

from __future__ import annotations

import enum
import json
import math
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence, Union

from perfprofile.logging import get_logger

log = get_logger("records")

Record = Mapping[str, Any]


class _Missing(enum.Enum):
    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing.MISSING
"""Sentinel for an absent or non-comparable value."""

MaybeFloat = Union[float, _Missing]


class RecordsError(ValueError):
    """A results file does not hold a list of record objects."""


# ---------------------------------------------------------------------------
# Field access
# ---------------------------------------------------------------------------


def lookup(record: Record, path: str) -> Any:
    """Return the value at dotted *path* in *record*, or :data:`MISSING`.

    ``None`` values count as absent.
    """
    current: Any = record
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return MISSING
        current = current[part]
        if current is None:
            return MISSING
    return current


def as_number(raw: Any) -> MaybeFloat:
    """Coerce a raw field value to ``float``.

    Booleans, strings, containers, NaN and integers too large for a float
    are not comparable numbers and yield :data:`MISSING`.
    """
    if raw is MISSING or isinstance(raw, bool):
        return MISSING
    if not isinstance(raw, (int, float)):
        return MISSING
    try:
        value = float(raw)
    except OverflowError:
        return MISSING
    if math.isnan(value):
        return MISSING
    return value


def key_of(record: Record, keys: Sequence[str]) -> tuple[Any, ...] | None:
    """Return the identity tuple of *record* for *keys*.

    Returns ``None`` when the record is malformed for these keys: it is not
    a mapping, a key is absent or null, or a value cannot be hashed.
    """
    if not isinstance(record, Mapping):
        return None
    values = []
    for key in keys:
        value = record.get(key)
        if value is None:
            return None
        values.append(value)
    ident = tuple(values)
    try:
        hash(ident)
    except TypeError:
        return None
    return ident


def is_success(record: Record) -> bool:
    """True only when the record's ``success`` field is literally ``True``."""
    return record.get("success") is True


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def records_from_document(data: Any) -> list[dict[str, Any]]:
    """Extract the record list from a decoded results document.

    Accepts either ``{"results": [...]}`` or a bare list.  A document
    without a ``results`` key yields an empty list.  Entries that are not
    objects are skipped.

    Raises:
        RecordsError: If the results are not a list.
    """
    if isinstance(data, Mapping):
        data = data.get("results", [])
    if not isinstance(data, list):
        raise RecordsError(f"Results must be a list of objects, got {type(data).__name__}")

    records = [dict(item) for item in data if isinstance(item, Mapping)]
    skipped = len(data) - len(records)
    if skipped:
        log.debug("Skipped %d results entries that are not objects", skipped)
    return records


def load_records(path: Path) -> list[dict[str, Any]]:
    """Load measurement records from a JSON or JSONL results file.

    ``.jsonl`` files hold one record per line; anything else is parsed as a
    single JSON document (see :func:`records_from_document`).

    Raises:
        FileNotFoundError: If *path* does not exist.
        RecordsError: If the results are not a list.
    """
    if not path.exists():
        raise FileNotFoundError(f"Results file not found: {path}")

    text = path.read_text(encoding="utf-8")
    if path.suffix == ".jsonl":
        lines: Iterable[str] = (line.strip() for line in text.splitlines())
        records = records_from_document([json.loads(line) for line in lines if line])
    else:
        records = records_from_document(json.loads(text))

    log.debug("Loaded %d records from %s", len(records), path)
    return records
