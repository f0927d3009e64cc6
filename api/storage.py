"""Utility helpers for persisting computed reports and their share links.

Reports are written as JSON files on disk so that shared links survive API
restarts. A single index file maps each share token to its metadata (report
id, expiry, view limit, view count).
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from scouting_core.config import DATA_DIR


log = logging.getLogger(__name__)

DATA_ROOT = Path(DATA_DIR).resolve()
REPORTS_DIR = DATA_ROOT / "reports"
SHARE_INDEX_PATH = DATA_ROOT / "shared_index.json"

_LOCK = threading.Lock()

SHARE_OK = "ok"
SHARE_MISSING = "missing"
SHARE_EXPIRED = "expired"
SHARE_EXHAUSTED = "exhausted"


def _ensure_dirs() -> None:
    REPORTS_DIR.mkdir(parents=True, exist_ok=True)
    DATA_ROOT.mkdir(parents=True, exist_ok=True)


def _read_json(path: Path, default: Any) -> Any:
    if not path.exists():
        return default
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        log.warning("unreadable json at %s: %s", path, exc)
        return default


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False), encoding="utf-8")
    tmp.replace(path)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def save_report(report_id: str, report: Dict[str, Any]) -> None:
    """Persist the computed report JSON."""

    _ensure_dirs()
    _write_json(REPORTS_DIR / f"{report_id}.json", report)


def load_report(report_id: str) -> Optional[Dict[str, Any]]:
    path = REPORTS_DIR / f"{report_id}.json"
    report = _read_json(path, None)
    return report if isinstance(report, dict) else None


def delete_report(report_id: str) -> bool:
    report_path = REPORTS_DIR / f"{report_id}.json"
    if not report_path.exists():
        return False
    try:
        report_path.unlink()
    except OSError as exc:
        log.warning("could not delete report %s: %s", report_id, exc)
        return False
    return True


def _load_shares() -> Dict[str, Dict[str, Any]]:
    return _read_json(SHARE_INDEX_PATH, {})


def record_share(token: str, metadata: Dict[str, Any]) -> None:
    with _LOCK:
        shares = _load_shares()
        shares[token] = metadata
        _write_json(SHARE_INDEX_PATH, shares)


def _share_status(meta: Dict[str, Any], now: datetime) -> str:
    expires = meta.get("expiresAt")
    if expires:
        try:
            if datetime.fromisoformat(expires) <= now:
                return SHARE_EXPIRED
        except ValueError:
            return SHARE_EXPIRED
    max_views = int(meta.get("maxViews") or 0)
    if max_views and int(meta.get("views") or 0) >= max_views:
        return SHARE_EXHAUSTED
    return SHARE_OK


def consume_share_view(token: str, now: Optional[datetime] = None) -> Tuple[str, Optional[Dict[str, Any]]]:
    """Check a share link and, when still valid, count one view against it."""

    now = now or utcnow()
    with _LOCK:
        shares = _load_shares()
        meta = shares.get(token)
        if meta is None:
            return SHARE_MISSING, None
        status = _share_status(meta, now)
        if status != SHARE_OK:
            return status, meta
        meta["views"] = int(meta.get("views") or 0) + 1
        meta["lastViewedAt"] = now.isoformat()
        _write_json(SHARE_INDEX_PATH, shares)
        return SHARE_OK, dict(meta)


def delete_share(token: str) -> bool:
    with _LOCK:
        shares = _load_shares()
        meta = shares.pop(token, None)
        if meta is None:
            return False
        _write_json(SHARE_INDEX_PATH, shares)
    report_id = meta.get("reportId")
    if report_id and not any(m.get("reportId") == report_id for m in shares.values()):
        delete_report(str(report_id))
    return True
