from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Mapping, Optional, Sequence
import json, math, numbers, re

from .categories import (
    CATEGORIES,
    PREFERRED_DATA_TYPE,
    SCORE_MAX,
    SCORE_MIN,
    SCORED_DATA_TYPES,
)
from .types import CategoryAverages, Evaluation, EvaluationItem, ItemTrace

_NUMBER_LITERAL = r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
# leading decimal literal, parseFloat-style: "12abc" -> 12, "  .5kg" -> 0.5
_FLOAT_PREFIX_RX = re.compile(r"\s*(" + _NUMBER_LITERAL + ")")
# whole-string literal, Number()-style: no underscores, no "nan"/"inf" spellings
_NUMBER_RX = re.compile(_NUMBER_LITERAL)
_RADIX_RX = re.compile(r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+")
_TENTH = Decimal("0.1")


def _is_number(x: Any) -> bool:
    return isinstance(x, numbers.Real) and not isinstance(x, bool)


def _as_float(x: Any) -> Optional[float]:
    try:
        return float(x)
    except (TypeError, ValueError, OverflowError):
        return None


def _parse_float_prefix(text: str) -> Optional[float]:
    m = _FLOAT_PREFIX_RX.match(text)
    if not m:
        return None
    return _as_float(m.group(1).replace("Infinity", "inf"))


def _from_text(text: str) -> Optional[float]:
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        parsed = None
    if _is_number(parsed):
        return _as_float(parsed)
    return _parse_float_prefix(text)


def _from_whole_text(text: str) -> Optional[float]:
    s = text.strip()
    if not s:
        return 0.0
    if _RADIX_RX.fullmatch(s):
        return _as_float(int(s, 0))
    if _NUMBER_RX.fullmatch(s):
        return _as_float(s.replace("Infinity", "inf"))
    return None


def _coerce_object(obj: Any) -> Optional[float]:
    if isinstance(obj, (list, tuple)):
        # a list coerces through its text form, so only a single element can be numeric
        if len(obj) != 1:
            return None
        inner = obj[0]
        if inner is None:
            return 0.0
        if _is_number(inner):
            return _as_float(inner)
        if isinstance(inner, str):
            return _from_whole_text(inner)
        if isinstance(inner, (list, tuple)):
            return _coerce_object(inner)
        return None
    if isinstance(obj, Mapping):
        return None
    if hasattr(obj, "__float__"):
        return _as_float(obj)
    return None


def _from_object(obj: Any) -> Optional[float]:
    if isinstance(obj, Mapping):
        if "value" in obj and _is_number(obj["value"]):
            return _as_float(obj["value"])
        if "number" in obj and _is_number(obj["number"]):
            return _as_float(obj["number"])
    num = _coerce_object(obj)
    if num is None or num == 0 or math.isnan(num):
        return None
    return num


def extract_number(value: Any) -> Optional[float]:
    """
    Pull a finite number out of a stored item value, or None.
    Order matters: plain number, then string (JSON first, then numeric
    prefix), then object (`value` key, `number` key, whole-object coercion).
    """
    if value is None or isinstance(value, bool):
        return None
    if _is_number(value):
        num = _as_float(value)
    elif isinstance(value, str):
        num = _from_text(value)
    else:
        num = _from_object(value)
    if num is None or not math.isfinite(num):
        return None
    return num


def _from_scale_1_10(v: float) -> float:
    return ((v - 1) / 9) * 4 + 1


def _from_percentage(v: float) -> float:
    return ((v / 100) * 4) + 1


def normalize_value(value: float, data_type: str) -> float:
    """Map a raw value onto the 1..5 scale according to its declared data type."""
    if data_type == "scale_1_10" and 1 <= value <= 10:
        return _from_scale_1_10(value)
    if data_type == "percentage" and 0 <= value <= 100:
        return _from_percentage(value)
    if data_type == "numeric" and (value > 5 or value < 1):
        # magnitude guess: <=10 reads as a 1-10 scale, <=100 as a percentage
        if 0 < value <= 10:
            return _from_scale_1_10(value)
        if 0 < value <= 100:
            return _from_percentage(value)
    return value


def round_score(x: float) -> float:
    # half-up on the exact binary value, as toFixed(1) does: 1.45 -> 1.4, 3.85 -> 3.9
    return float(Decimal(x).quantize(_TENTH, rounding=ROUND_HALF_UP))


def _items_of(evaluation: Evaluation) -> List[EvaluationItem]:
    return list(getattr(evaluation, "items", None) or [])


def _trace(item: EvaluationItem, reason: str, *, extracted: Optional[float] = None,
           normalized: Optional[float] = None, used: bool = False) -> ItemTrace:
    return ItemTrace(
        category=item.category,
        item_name=item.item_name,
        data_type=item.data_type,
        raw_value=item.value,
        extracted=extracted,
        normalized=normalized,
        used=used,
        reason=reason,
    )


def trace_category(items: Sequence[EvaluationItem]) -> List[ItemTrace]:
    """One trace per item of a single category, in input order."""
    preferred = any(it.data_type == PREFERRED_DATA_TYPE for it in items)
    out: List[ItemTrace] = []
    for it in items:
        if preferred and it.data_type != PREFERRED_DATA_TYPE:
            out.append(_trace(it, "superseded_by_scale_1_5"))
            continue
        if it.data_type not in SCORED_DATA_TYPES:
            out.append(_trace(it, "inert_data_type"))
            continue
        num = extract_number(it.value)
        if num is None:
            out.append(_trace(it, "unparseable"))
            continue
        norm = normalize_value(num, it.data_type)
        if not SCORE_MIN <= norm <= SCORE_MAX:
            out.append(_trace(it, "out_of_range", extracted=num, normalized=norm))
            continue
        out.append(_trace(it, "ok", extracted=num, normalized=norm, used=True))
    return out


def calculate_category_average(evaluation: Evaluation, category: str) -> Optional[float]:
    items = [it for it in _items_of(evaluation) if it.category == category]
    if not items:
        return None
    values = [t.normalized for t in trace_category(items) if t.used]
    if not values:
        return None
    return round_score(sum(values) / len(values))


def get_category_averages(evaluation: Evaluation) -> CategoryAverages:
    return {category: calculate_category_average(evaluation, category) for category in CATEGORIES}


def trace_items(evaluation: Evaluation) -> List[ItemTrace]:
    """Explain every item of the evaluation: used for its category average or why not."""
    items = _items_of(evaluation)
    traces: Dict[int, ItemTrace] = {}
    for category in CATEGORIES:
        idxs = [i for i, it in enumerate(items) if it.category == category]
        for i, tr in zip(idxs, trace_category([items[i] for i in idxs])):
            traces[i] = tr
    return [traces.get(i) or _trace(it, "no_category") for i, it in enumerate(items)]
