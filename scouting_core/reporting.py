# scouting_core/reporting.py
from __future__ import annotations
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, List, Optional
import math

from .categories import CATEGORIES, RANK_LIMIT, STRENGTH_THRESHOLD, WEAKNESS_THRESHOLD, category_label
from .scoring import get_category_averages, round_score, trace_items
from .types import (
    CategoryAverages,
    CategoryTrend,
    Evaluation,
    RadarPoint,
    RadarSeries,
    RankedCategory,
    StrengthsWeaknesses,
)


def _radar_points(averages: CategoryAverages) -> List[RadarPoint]:
    # no data plots as 0, never None
    return [RadarPoint(label=category_label(c), value=averages.get(c) or 0) for c in CATEGORIES]


def prepare_radar_chart_data(evaluation: Evaluation, previous: Optional[Evaluation] = None) -> RadarSeries:
    data = _radar_points(get_category_averages(evaluation))
    comparison = None
    if previous is not None:
        comparison = _radar_points(get_category_averages(previous))
    return RadarSeries(data=data, comparison=comparison)


def calculate_strengths_and_weaknesses(evaluation: Evaluation) -> StrengthsWeaknesses:
    """
    Strengths: average >= 4.0, best first. Weaknesses: average < 3.0, worst first.
    Categories without data never rank. Both lists are capped at three.
    """
    averages = get_category_averages(evaluation)
    ranked = [RankedCategory(category=c, average=averages[c]) for c in CATEGORIES if averages[c] is not None]
    ranked.sort(key=lambda r: r.average, reverse=True)
    strengths = [r for r in ranked if r.average >= STRENGTH_THRESHOLD][:RANK_LIMIT]
    weaknesses = [r for r in reversed(ranked) if r.average < WEAKNESS_THRESHOLD][:RANK_LIMIT]
    return StrengthsWeaknesses(strengths=strengths, weaknesses=weaknesses)


def compare_category_averages(evaluation: Evaluation, previous: Evaluation) -> List[CategoryTrend]:
    """Per-category change against an earlier evaluation; only categories with current data."""
    current = get_category_averages(evaluation)
    before = get_category_averages(previous)
    out: List[CategoryTrend] = []
    for c in CATEGORIES:
        avg = current[c]
        if avg is None:
            continue
        prev = before[c]
        if prev is None:
            out.append(CategoryTrend(category=c, label=category_label(c), average=avg))
            continue
        diff = round_score(avg - prev)
        direction = "up" if diff > 0 else "down" if diff < 0 else "unchanged"
        out.append(CategoryTrend(category=c, label=category_label(c), average=avg,
                                 previous=prev, difference=diff, direction=direction))
    return out


# -------- utils: make any object JSON-safe ----------
def _to_basic(x: Any) -> Any:
    if isinstance(x, float) and not math.isfinite(x):
        return None  # JSON has no inf/nan
    if x is None or isinstance(x, (bool, int, float, str)):
        return x
    if is_dataclass(x) and not isinstance(x, type):
        return _to_basic(asdict(x))
    if isinstance(x, dict):
        return {str(k): _to_basic(v) for k, v in x.items()}
    if isinstance(x, (list, tuple, set)):
        return [_to_basic(v) for v in x]
    return str(x)


def _points(points: Optional[List[RadarPoint]]) -> Optional[List[Dict[str, Any]]]:
    if points is None:
        return None
    return [{"label": p.label, "value": p.value} for p in points]


def build_evaluation_report(evaluation: Evaluation, previous: Optional[Evaluation] = None) -> Dict[str, Any]:
    """
    Everything a report view needs for one evaluation, as plain JSON-safe data:
    averages, radar series (plus comparison), strengths/weaknesses, trends
    against `previous` and the per-item trace.
    """
    averages = get_category_averages(evaluation)
    radar = prepare_radar_chart_data(evaluation, previous)
    ranking = calculate_strengths_and_weaknesses(evaluation)
    trends = compare_category_averages(evaluation, previous) if previous is not None else []
    return {
        "evaluation": {
            "id": evaluation.id,
            "playerId": evaluation.player_id,
            "evaluatorId": evaluation.evaluator_id,
            "date": evaluation.date,
            "generalScore": evaluation.general_score,
            "observations": evaluation.observations,
            "itemCount": len(evaluation.items or []),
        },
        "previousEvaluationId": previous.id if previous is not None else None,
        "averages": dict(averages),
        "labels": {c: category_label(c) for c in CATEGORIES},
        "radar": {
            "data": _points(radar.data),
            "comparisonData": _points(radar.comparison),
            "hasData": radar.has_data,
        },
        "strengths": _to_basic(ranking.strengths),
        "weaknesses": _to_basic(ranking.weaknesses),
        "trends": _to_basic(trends),
        "items": _to_basic(trace_items(evaluation)),
    }
