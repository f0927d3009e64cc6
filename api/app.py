from __future__ import annotations
from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field
from datetime import timedelta
import logging, secrets, uuid, typing as t

# ---- Engine imports ----
from scouting_core.config import (
    ALLOWED_ORIGINS,
    AUDIT_EXPORT_ENABLED,
    SHARE_BASE_URL,
    SHARE_EXPIRES_DAYS_DEFAULT,
    SHARE_MAX_VIEWS_DEFAULT,
)
from scouting_core.ingest import EvaluationPayloadError, evaluation_from_payload
from scouting_core.reporting import (
    build_evaluation_report,
    calculate_strengths_and_weaknesses,
    prepare_radar_chart_data,
)
from scouting_core.scoring import get_category_averages
from scouting_core.report_html import render_report_html
from scouting_core.audit_export import to_json as audit_to_json, to_csv as audit_to_csv
from scouting_core.types import Evaluation
from .storage import (
    SHARE_EXHAUSTED,
    SHARE_MISSING,
    SHARE_OK,
    consume_share_view,
    delete_share,
    load_report,
    record_share,
    save_report,
    utcnow,
)

log = logging.getLogger(__name__)

app = FastAPI(title="Scouting Evaluation Scoring API")

@app.get("/")
def root():
    return {"status": "ok", "service": "scouting-scoring-api"}

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(ALLOWED_ORIGINS),
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

# ---- Schemas ----
class EvaluationReq(BaseModel):
    evaluation: dict[str, t.Any]
    previous: dict[str, t.Any] | None = None

class ShareReq(EvaluationReq):
    model_config = ConfigDict(populate_by_name=True)

    expires_in_days: int | None = Field(None, ge=0, alias="expiresInDays")
    max_views: int | None = Field(None, ge=0, alias="maxViews")

# ---- Helpers ----
def _parse(payload: dict[str, t.Any] | None) -> Evaluation | None:
    if payload is None:
        return None
    try:
        return evaluation_from_payload(payload)
    except EvaluationPayloadError as exc:
        raise HTTPException(422, str(exc))


def _parse_pair(req: EvaluationReq) -> tuple[Evaluation, Evaluation | None]:
    evaluation = _parse(req.evaluation)
    previous = _parse(req.previous)
    # an evaluation is never compared with itself
    if previous is not None and previous.id is not None and previous.id == evaluation.id:
        previous = None
    return evaluation, previous


def _decorate_report(
    base: dict[str, t.Any],
    *,
    report_id: str | None = None,
    created_at: str | None = None,
) -> dict[str, t.Any]:
    rid = report_id or str(uuid.uuid4())
    created = created_at or utcnow().isoformat()
    report = dict(base)
    meta = dict(report.get("meta") or {})
    meta.setdefault("createdAt", created)
    meta["reportId"] = rid
    report["meta"] = meta
    report["id"] = rid
    report["reportId"] = rid
    report["created_at"] = created
    return report


def _points(points) -> list[dict[str, t.Any]] | None:
    if points is None:
        return None
    return [{"label": p.label, "value": p.value} for p in points]


def _ranked(entries) -> list[dict[str, t.Any]]:
    return [{"category": e.category, "average": e.average} for e in entries]


def _open_share(token: str) -> dict[str, t.Any]:
    status, meta = consume_share_view(token)
    if status == SHARE_MISSING:
        raise HTTPException(404, "shared report not found")
    if status == SHARE_EXHAUSTED:
        raise HTTPException(410, "shared report view limit reached")
    if status != SHARE_OK:
        raise HTTPException(410, "shared report expired")
    report = load_report(str(meta.get("reportId")))
    if not report:
        raise HTTPException(404, "report not found")
    report = dict(report)
    report["share"] = {k: meta.get(k) for k in ("token", "expiresAt", "maxViews", "views")}
    return report

# ---- Health ----
@app.get("/health")
def health():
    return {"status": "ok", "audit_export_enabled": AUDIT_EXPORT_ENABLED}

# ---- Scoring endpoints ----
@app.post("/evaluations/averages")
def averages(req: EvaluationReq):
    evaluation, _ = _parse_pair(req)
    return {"averages": get_category_averages(evaluation)}

@app.post("/evaluations/radar")
def radar(req: EvaluationReq):
    evaluation, previous = _parse_pair(req)
    series = prepare_radar_chart_data(evaluation, previous)
    return {
        "data": _points(series.data),
        "comparisonData": _points(series.comparison),
        "hasData": series.has_data,
    }

@app.post("/evaluations/strengths")
def strengths(req: EvaluationReq):
    evaluation, _ = _parse_pair(req)
    ranking = calculate_strengths_and_weaknesses(evaluation)
    return {"strengths": _ranked(ranking.strengths), "weaknesses": _ranked(ranking.weaknesses)}

@app.post("/evaluations/report")
def report(req: EvaluationReq):
    evaluation, previous = _parse_pair(req)
    return build_evaluation_report(evaluation, previous)

@app.post("/evaluations/report/html")
def report_html(req: EvaluationReq):
    evaluation, previous = _parse_pair(req)
    return {"html": render_report_html(build_evaluation_report(evaluation, previous))}

# ---- Shared reports ----
@app.post("/shared-reports")
def create_shared_report(req: ShareReq):
    evaluation, previous = _parse_pair(req)
    report = _decorate_report(build_evaluation_report(evaluation, previous))
    rid = report["reportId"]
    save_report(rid, report)

    now = utcnow()
    days = req.expires_in_days if req.expires_in_days is not None else SHARE_EXPIRES_DAYS_DEFAULT
    max_views = req.max_views if req.max_views is not None else SHARE_MAX_VIEWS_DEFAULT
    token = secrets.token_urlsafe(16)
    metadata = {
        "token": token,
        "reportId": rid,
        "evaluationId": evaluation.id,
        "createdAt": now.isoformat(),
        "expiresAt": (now + timedelta(days=days)).isoformat() if days else None,
        "maxViews": max_views or None,
        "views": 0,
    }
    record_share(token, metadata)
    log.info("shared report %s created for evaluation %s", rid, evaluation.id)
    return {
        "token": token,
        "reportId": rid,
        "expiresAt": metadata["expiresAt"],
        "maxViews": metadata["maxViews"],
        "url": f"{SHARE_BASE_URL}/{token}",
    }

@app.get("/shared-reports/{token}")
def get_shared_report(token: str):
    return _open_share(token)

@app.get("/shared-reports/{token}/html")
def get_shared_report_html(token: str):
    report = _open_share(token)
    return Response(content=render_report_html(report), media_type="text/html")

@app.delete("/shared-reports/{token}")
def delete_shared_report(token: str):
    if not delete_share(token):
        raise HTTPException(404, "shared report not found")
    log.info("shared report link %s revoked", token[:6])
    return {"ok": True}

# ---- Item trace export ----
@app.get("/reports/{report_id}/audit.json")
def get_audit_json(report_id: str):
    if not AUDIT_EXPORT_ENABLED:
        raise HTTPException(404, "audit export disabled")

    stored = load_report(report_id)
    if not stored:
        raise HTTPException(404, "report not found")

    payload = audit_to_json(stored.get("items") or [])
    return {"report_id": report_id, **payload}

@app.get("/reports/{report_id}/audit.csv")
def get_audit_csv(report_id: str):
    if not AUDIT_EXPORT_ENABLED:
        raise HTTPException(404, "audit export disabled")

    stored = load_report(report_id)
    if not stored:
        raise HTTPException(404, "report not found")

    body = audit_to_csv(stored.get("items") or [])
    filename = f"{report_id}_items.csv"
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=\"{filename}\""},
    )
