"""Turn evaluation payloads from the evaluations REST API into engine types.

The API sometimes serializes items as domain entities, i.e. wrapped as
``{"props": {...}, "createdAt": ...}``. That wrapper is flattened here, once,
before anything reaches the scoring engine.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from .types import Evaluation, EvaluationItem


class EvaluationPayloadError(ValueError):
    """The payload is not shaped like an evaluation at all."""


def _pick(raw: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return default


def _opt_str(val: Any) -> Optional[str]:
    return None if val is None else str(val)


def _opt_float(val: Any) -> Optional[float]:
    if val is None or isinstance(val, bool):
        return None
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


def _str_list(val: Any) -> List[str]:
    if not isinstance(val, list):
        return []
    return [str(v) for v in val]


def unwrap_item(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Flatten a ``props``-wrapped item; the outer ``createdAt`` wins."""
    props = raw.get("props")
    if not isinstance(props, Mapping) or not props:
        return dict(raw)
    flat = dict(raw)
    flat.pop("props", None)
    flat.update(props)
    created = raw.get("createdAt") or props.get("createdAt")
    if created is not None:
        flat["createdAt"] = created
    return flat


def item_from_payload(raw: Mapping[str, Any]) -> EvaluationItem:
    flat = unwrap_item(raw)
    return EvaluationItem(
        category=str(_pick(flat, "category", default="")),
        item_name=str(_pick(flat, "itemName", "item_name", default="")),
        value=_pick(flat, "value"),
        data_type=str(_pick(flat, "dataType", "data_type", default="")),
        id=_opt_str(_pick(flat, "id")),
        evaluation_id=_opt_str(_pick(flat, "evaluationId", "evaluation_id")),
        created_at=_opt_str(_pick(flat, "createdAt", "created_at")),
    )


def evaluation_from_payload(payload: Any) -> Evaluation:
    if not isinstance(payload, Mapping):
        raise EvaluationPayloadError("evaluation payload must be a JSON object")
    raw_items = payload.get("items")
    if raw_items is None:
        raw_items = []
    if not isinstance(raw_items, list):
        raise EvaluationPayloadError("evaluation 'items' must be a list")
    items = [item_from_payload(it) for it in raw_items if isinstance(it, Mapping)]
    return Evaluation(
        items=items,
        id=_opt_str(_pick(payload, "id")),
        player_id=_opt_str(_pick(payload, "playerId", "player_id")),
        evaluator_id=_opt_str(_pick(payload, "evaluatorId", "evaluator_id")),
        date=_opt_str(_pick(payload, "date")),
        observations=_opt_str(_pick(payload, "observations")),
        general_score=_opt_float(_pick(payload, "generalScore", "general_score")),
        strengths=_str_list(_pick(payload, "strengths")),
        weaknesses=_str_list(_pick(payload, "weaknesses")),
        created_at=_opt_str(_pick(payload, "createdAt", "created_at")),
        updated_at=_opt_str(_pick(payload, "updatedAt", "updated_at")),
    )
