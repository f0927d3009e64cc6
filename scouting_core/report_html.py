from __future__ import annotations
from html import escape
from typing import Dict, Any, List, Optional

from .categories import CATEGORIES, category_label
from .config import AUDIT_EXPORT_ENABLED


def _score(val: Any) -> str:
    if val is None:
        return "-"
    try:
        return f"{float(val):.1f}"
    except (TypeError, ValueError):
        return "-"


def _bar(val: Any) -> str:
    try:
        pct = max(0.0, min(100.0, float(val) / 5.0 * 100.0))
    except (TypeError, ValueError):
        pct = 0.0
    return f"<div class=\"bar\"><span style=\"width:{pct:.0f}%\"></span></div>"


def _trend_txt(trend: Optional[Dict[str, Any]]) -> str:
    if not trend or trend.get("direction") is None:
        return ""
    diff = float(trend.get("difference") or 0.0)
    if trend["direction"] == "up":
        return f"<span class=\"up\">↑ {abs(diff):.1f} pts</span>"
    if trend["direction"] == "down":
        return f"<span class=\"down\">↓ {abs(diff):.1f} pts</span>"
    return "<span>Sin cambios</span>"


def _row(category: str, avg: Any, trend: Optional[Dict[str, Any]]) -> str:
    return (
        f"<tr><td>{escape(category_label(category))}</td><td>{_score(avg)} / 5.0</td>"
        f"<td>{_bar(avg) if avg is not None else ''}</td><td>{_trend_txt(trend)}</td></tr>"
    )


def _ranked_list(entries: List[Dict[str, Any]], empty: str) -> str:
    if not entries:
        return f"<p>{escape(empty)}</p>"
    items = "".join(
        f"<li>{escape(category_label(str(e.get('category'))))}: {_score(e.get('average'))}</li>" for e in entries
    )
    return f"<ul>{items}</ul>"


def render_report_html(report: Dict[str, Any], title: str = "Informe de evaluación") -> str:
    """Render a report built by ``build_evaluation_report`` (or loaded from storage)."""
    averages = report.get("averages") or {}
    trends = {t.get("category"): t for t in (report.get("trends") or []) if isinstance(t, dict)}
    ev = report.get("evaluation") or {}
    meta = report.get("meta") or {}

    if any(averages.get(c) is not None for c in CATEGORIES):
        rows = "\n".join(_row(c, averages.get(c), trends.get(c)) for c in CATEGORIES if averages.get(c) is not None)
        table = (
            "<table border='1' cellpadding='6' cellspacing='0'>"
            "<thead><tr><th>Categoría</th><th>Promedio</th><th></th><th>Cambio</th></tr></thead>"
            f"<tbody>{rows}</tbody></table>"
        )
    else:
        table = (
            "<div class=\"banner\">No hay promedios disponibles para mostrar"
            f"<br/><small>Items totales: {int(ev.get('itemCount') or 0)}</small></div>"
        )

    general = ev.get("generalScore")
    general_html = f"<div class=\"overall\"><b>Puntuación general:</b> {_score(general)} / 5.0</div>" if general is not None else ""
    observations = ev.get("observations")
    obs_html = f"<h3>Observaciones</h3><p>{escape(str(observations))}</p>" if observations else ""

    audit_links = ""
    if AUDIT_EXPORT_ENABLED:
        report_id = report.get("reportId") or meta.get("reportId")
        if report_id:
            rid = escape(str(report_id))
            audit_links = (
                "<p class=\"audit-links\">"
                f"<a href=\"/reports/{rid}/audit.json\">Download item trace (JSON)</a> · "
                f"<a href=\"/reports/{rid}/audit.csv\">Download item trace (CSV)</a>"
                "</p>"
            )

    date_html = f"<p>Fecha: {escape(str(ev.get('date')))}</p>" if ev.get("date") else ""

    return f"""<!doctype html>
<html lang="es">
<head>
<meta charset="utf-8"/>
<title>{escape(title)}</title>
<style>
 body{{font-family:system-ui,-apple-system,Segoe UI,Roboto,Ubuntu,'Helvetica Neue',Arial}}
 .wrap{{max-width:960px;margin:40px auto;padding:0 16px}}
 h1{{margin:0 0 16px}}
 .overall{{font-size:1.1rem;margin:8px 0 16px}}
 .banner{{padding:12px 16px;border-radius:6px;margin:16px 0;background:#f3f4f6}}
 .bar{{height:8px;background:#e5e7eb;border-radius:4px;min-width:120px}}
 .bar span{{display:block;height:100%;background:#10b981;border-radius:4px}}
 .up{{color:#059669}} .down{{color:#dc2626}}
 table{{border-collapse:collapse;width:100%}}
 th,td{{text-align:left}}
</style>
</head>
<body>
<div class="wrap">
  <h1>{escape(title)}</h1>
  {date_html}
  {general_html}

  <h3>Promedios por categoría</h3>
  {table}

  <h3>Fortalezas</h3>
  {_ranked_list(report.get("strengths") or [], "Sin fortalezas destacadas")}

  <h3>Áreas de mejora</h3>
  {_ranked_list(report.get("weaknesses") or [], "Sin debilidades destacadas")}

  {obs_html}
  {audit_links}
</div>
</body>
</html>"""


def export_report_html(report: Dict[str, Any], path: str, title: str = "Informe de evaluación") -> str:
    html = render_report_html(report, title=title)
    with open(path, "w", encoding="utf-8") as f:
        f.write(html)
    return path
