from __future__ import annotations

import json

from scouting_core.categories import CATEGORIES, CATEGORY_LABELS
from scouting_core.reporting import (
    build_evaluation_report,
    calculate_strengths_and_weaknesses,
    compare_category_averages,
    prepare_radar_chart_data,
)

from tests.conftest import build_evaluation, item

LABELS = [CATEGORY_LABELS[c] for c in CATEGORIES]


def test_radar_all_null_is_six_zero_points():
    series = prepare_radar_chart_data(build_evaluation())
    assert [p.label for p in series.data] == LABELS
    assert all(p.value == 0 for p in series.data)
    assert series.comparison is None
    assert not series.has_data


def test_radar_order_and_zero_substitution(full_evaluation):
    current = build_evaluation(item("físico", "percentage", 80), item("técnico", "scale_1_5", 3))
    series = prepare_radar_chart_data(current, full_evaluation)
    assert [p.label for p in series.data] == LABELS
    assert [p.value for p in series.data] == [3.0, 0, 4.2, 0, 0, 0]
    assert [p.label for p in series.comparison] == LABELS
    assert [p.value for p in series.comparison] == [4.5, 4.0, 2.0, 3.5, 2.5, 1.0]
    assert series.has_data


def test_strengths_and_weaknesses_scenario():
    ev = build_evaluation(item("técnico", "scale_1_5", 4.5), item("físico", "scale_1_5", 2.0))
    ranking = calculate_strengths_and_weaknesses(ev)
    assert [(r.category, r.average) for r in ranking.strengths] == [("técnico", 4.5)]
    assert [(r.category, r.average) for r in ranking.weaknesses] == [("físico", 2.0)]


def test_ranking_thresholds_and_caps():
    ev = build_evaluation(
        item("técnico", "scale_1_5", 4.0),
        item("táctico", "scale_1_5", 4.8),
        item("físico", "scale_1_5", 4.2),
        item("cognitivo", "scale_1_5", 4.5),
        item("psicológico", "scale_1_5", 3.0),
        item("biomédico", "scale_1_5", 2.9),
    )
    ranking = calculate_strengths_and_weaknesses(ev)
    assert [r.category for r in ranking.strengths] == ["táctico", "cognitivo", "físico"]
    assert [r.category for r in ranking.weaknesses] == ["biomédico"]


def test_weaknesses_weakest_first_and_capped():
    ev = build_evaluation(
        item("técnico", "scale_1_5", 2.5),
        item("táctico", "scale_1_5", 1.0),
        item("físico", "scale_1_5", 2.0),
        item("cognitivo", "scale_1_5", 1.5),
    )
    ranking = calculate_strengths_and_weaknesses(ev)
    assert [(r.category, r.average) for r in ranking.weaknesses] == [
        ("táctico", 1.0),
        ("cognitivo", 1.5),
        ("físico", 2.0),
    ]
    assert ranking.strengths == []


def test_tied_weaknesses_come_out_in_reverse_category_order():
    ev = build_evaluation(item("técnico", "scale_1_5", 2.0), item("físico", "scale_1_5", 2.0))
    ranking = calculate_strengths_and_weaknesses(ev)
    assert [r.category for r in ranking.weaknesses] == ["físico", "técnico"]


def test_ranking_properties(full_evaluation):
    ranking = calculate_strengths_and_weaknesses(full_evaluation)
    assert all(r.average >= 4.0 for r in ranking.strengths)
    assert all(r.average < 3.0 for r in ranking.weaknesses)
    assert len(ranking.strengths) <= 3 and len(ranking.weaknesses) <= 3
    assert all(r.average is not None for r in ranking.strengths + ranking.weaknesses)


def test_null_categories_never_rank():
    ranking = calculate_strengths_and_weaknesses(build_evaluation(item("físico", "numeric", "abc")))
    assert ranking.strengths == [] and ranking.weaknesses == []


def test_trends_against_previous():
    previous = build_evaluation(
        item("técnico", "scale_1_5", 3.5),
        item("físico", "scale_1_5", 4.0),
        item("cognitivo", "scale_1_5", 3.0),
        eval_id="ev-0",
    )
    current = build_evaluation(
        item("técnico", "scale_1_5", 4.0),
        item("físico", "scale_1_5", 3.7),
        item("cognitivo", "scale_1_5", 3.0),
        item("táctico", "scale_1_5", 2.0),
    )
    trends = {t.category: t for t in compare_category_averages(current, previous)}
    assert set(trends) == {"técnico", "físico", "cognitivo", "táctico"}
    assert (trends["técnico"].difference, trends["técnico"].direction) == (0.5, "up")
    assert (trends["físico"].difference, trends["físico"].direction) == (-0.3, "down")
    assert (trends["cognitivo"].difference, trends["cognitivo"].direction) == (0.0, "unchanged")
    assert trends["táctico"].previous is None and trends["táctico"].direction is None
    assert trends["técnico"].label == "Técnico"


def test_report_bundle_is_json_safe(full_evaluation):
    current = build_evaluation(
        item("técnico", "scale_1_5", 5),
        item("físico", "coordinate", {"x": 10, "y": 4}),
        eval_id="ev-2",
    )
    report = build_evaluation_report(current, full_evaluation)
    json.dumps(report)
    assert set(report["averages"]) == set(CATEGORIES)
    assert report["radar"]["hasData"] is True
    assert len(report["radar"]["comparisonData"]) == 6
    assert report["strengths"] == [{"category": "técnico", "average": 5.0}]
    assert report["previousEvaluationId"] == "ev-1"
    assert report["evaluation"]["itemCount"] == 2
    assert [it["reason"] for it in report["items"]] == ["ok", "inert_data_type"]
    assert report["trends"][0]["direction"] == "up"


def test_report_without_previous_has_no_trends():
    report = build_evaluation_report(build_evaluation())
    assert report["trends"] == []
    assert report["radar"]["comparisonData"] is None
    assert report["radar"]["hasData"] is False


def test_report_drops_non_finite_raw_values():
    ev = build_evaluation(
        item("técnico", "numeric", float("inf")),
        item("físico", "coordinate", {"x": float("nan"), "y": 2}),
        item("cognitivo", "scale_1_5", 4),
    )
    report = build_evaluation_report(ev)
    json.dumps(report, allow_nan=False)
    assert report["items"][0]["raw_value"] is None
    assert report["items"][1]["raw_value"] == {"x": None, "y": 2}
    assert report["averages"]["cognitivo"] == 4.0
