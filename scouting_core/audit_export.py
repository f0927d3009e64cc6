"""Helpers to export per-item scoring traces in JSON/CSV formats."""
from __future__ import annotations

from typing import Iterable, List, Dict, Any
import csv
import io
import json

_FIELDS: tuple[str, ...] = (
    "category",
    "item_name",
    "data_type",
    "raw_value",
    "extracted",
    "normalized",
    "used",
    "reason",
)


def _raw_text(val: Any) -> str:
    if val is None:
        return ""
    if isinstance(val, str):
        return val
    try:
        return json.dumps(val, ensure_ascii=False, sort_keys=True)
    except (TypeError, ValueError):
        return str(val)


def _normalize_row(row: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key in _FIELDS:
        val = row.get(key)
        if key in {"extracted", "normalized"}:
            try:
                out[key] = None if val is None else float(val)
            except (TypeError, ValueError):
                out[key] = None
        elif key == "used":
            out[key] = bool(val)
        elif key == "raw_value":
            out[key] = _raw_text(val)
        else:
            out[key] = "" if val is None else str(val)
    return out


def to_json(rows: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """Return a JSON-safe payload for audit export."""

    normalized: List[Dict[str, Any]] = [_normalize_row(r or {}) for r in rows]
    return {"items": normalized}


def to_csv(rows: Iterable[Dict[str, Any]]) -> str:
    """Render item traces as CSV with a fixed header."""

    normalized = [_normalize_row(r or {}) for r in rows]
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=_FIELDS)
    writer.writeheader()
    for row in normalized:
        writer.writerow({k: ("" if v is None else v) for k, v in row.items()})
    return buf.getvalue()


__all__ = ["to_json", "to_csv"]
