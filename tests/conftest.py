from __future__ import annotations

from typing import Any

import pytest

from scouting_core.categories import CATEGORIES
from scouting_core.types import Evaluation, EvaluationItem


def item(category: str, data_type: str, value: Any, name: str = "") -> EvaluationItem:
    return EvaluationItem(
        category=category,
        item_name=name or f"{category} {data_type}",
        value=value,
        data_type=data_type,
    )


def build_evaluation(*items: EvaluationItem, eval_id: str = "ev-1") -> Evaluation:
    return Evaluation(items=list(items), id=eval_id, player_id="pl-1", evaluator_id="us-1", date="2024-05-01")


def build_payload(
    *,
    eval_id: str = "ev-1",
    wrapped: bool = False,
    scores: dict[str, list[tuple[str, Any]]] | None = None,
) -> dict[str, Any]:
    """Evaluation JSON as the evaluations REST API returns it (camelCase, optional props wrapper)."""

    scores = scores or {
        "técnico": [("scale_1_5", 4), ("scale_1_5", 5)],
        "táctico": [("scale_1_10", 10)],
        "físico": [("percentage", 20), ("percentage", 30)],
        "cognitivo": [("numeric", 7)],
    }
    items: list[dict[str, Any]] = []
    for category, entries in scores.items():
        for idx, (data_type, value) in enumerate(entries):
            body = {
                "id": f"{eval_id}-{category}-{idx}",
                "evaluationId": eval_id,
                "category": category,
                "itemName": f"{category} #{idx}",
                "value": value,
                "dataType": data_type,
                "createdAt": "2024-05-01T10:00:00Z",
            }
            items.append({"props": body, "createdAt": body["createdAt"]} if wrapped else body)
    return {
        "id": eval_id,
        "playerId": "pl-1",
        "evaluatorId": "us-1",
        "date": "2024-05-01",
        "generalScore": 3.8,
        "observations": "Buen partido",
        "items": items,
    }


@pytest.fixture
def full_evaluation() -> Evaluation:
    """Every category scored with a single scale_1_5 item."""

    values = dict(zip(CATEGORIES, (4.5, 4.0, 2.0, 3.5, 2.5, 1.0)))
    return build_evaluation(*(item(c, "scale_1_5", v) for c, v in values.items()))
