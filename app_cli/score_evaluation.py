from __future__ import annotations
import argparse, json, logging, sys
from pathlib import Path
from typing import Any, List, Optional

from scouting_core.audit_export import to_csv as audit_to_csv
from scouting_core.categories import CATEGORIES, category_label
from scouting_core.config import LOG_LEVEL
from scouting_core.ingest import EvaluationPayloadError, evaluation_from_payload
from scouting_core.report_html import export_report_html
from scouting_core.reporting import build_evaluation_report
from scouting_core.types import Evaluation

log = logging.getLogger("scouting_cli")


def _load(path: str) -> Evaluation:
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    # API responses arrive as {"success": true, "data": {...}}
    if isinstance(raw, dict) and isinstance(raw.get("data"), dict) and "items" not in raw:
        raw = raw["data"]
    return evaluation_from_payload(raw)


def _fmt(val: Any) -> str:
    return "  -  " if val is None else f"{float(val):.1f}"


def format_summary(report: dict) -> str:
    lines: List[str] = []
    trends = {t["category"]: t for t in report.get("trends") or []}
    lines.append(f"{'Category':<14} {'Avg':>5}  Change")
    for c in CATEGORIES:
        avg = report["averages"].get(c)
        trend = trends.get(c)
        change = ""
        if trend and trend.get("direction") is not None:
            change = f"{trend['difference']:+.1f}"
        lines.append(f"{category_label(c):<14} {_fmt(avg):>5}  {change}")
    for title, key in (("Strengths", "strengths"), ("Weaknesses", "weaknesses")):
        entries = report.get(key) or []
        txt = ", ".join(f"{category_label(e['category'])} ({e['average']:.1f})" for e in entries) or "none"
        lines.append(f"{title}: {txt}")
    used = sum(1 for it in report.get("items") or [] if it.get("used"))
    lines.append(f"Items used: {used}/{len(report.get('items') or [])}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Score a scouting evaluation JSON file.")
    ap.add_argument("evaluation", help="evaluation JSON (as returned by the evaluations API)")
    ap.add_argument("--previous", help="earlier evaluation JSON to compare against")
    ap.add_argument("--html", help="write an HTML report here")
    ap.add_argument("--json", dest="json_out", help="write the full report JSON here")
    ap.add_argument("--audit-csv", help="write the per-item trace as CSV here")
    ap.add_argument("--log-level", default=LOG_LEVEL)
    a = ap.parse_args(argv)

    logging.basicConfig(level=getattr(logging, str(a.log_level).upper(), logging.INFO),
                        format="[%(levelname)s] %(message)s")

    try:
        evaluation = _load(a.evaluation)
        previous = _load(a.previous) if a.previous else None
    except (OSError, ValueError) as exc:
        # EvaluationPayloadError and JSONDecodeError are both ValueErrors
        kind = "invalid evaluation" if isinstance(exc, EvaluationPayloadError) else "cannot read evaluation"
        log.error("%s: %s", kind, exc)
        return 2

    report = build_evaluation_report(evaluation, previous)
    print(format_summary(report))

    if a.json_out:
        Path(a.json_out).parent.mkdir(parents=True, exist_ok=True)
        Path(a.json_out).write_text(json.dumps(report, ensure_ascii=False, indent=2), encoding="utf-8")
        log.info("Report JSON written to %s", a.json_out)
    if a.html:
        Path(a.html).parent.mkdir(parents=True, exist_ok=True)
        export_report_html(report, a.html)
        log.info("HTML report written to %s", a.html)
    if a.audit_csv:
        Path(a.audit_csv).parent.mkdir(parents=True, exist_ok=True)
        Path(a.audit_csv).write_text(audit_to_csv(report.get("items") or []), encoding="utf-8")
        log.info("Item trace written to %s", a.audit_csv)
    return 0


if __name__ == "__main__":
    sys.exit(main())
