from __future__ import annotations
from typing import Dict, Tuple

CATEGORIES: Tuple[str, ...] = ("técnico", "táctico", "físico", "cognitivo", "psicológico", "biomédico")
CATEGORY_LABELS: Dict[str, str] = {
    "técnico": "Técnico",
    "táctico": "Táctico",
    "físico": "Físico",
    "cognitivo": "Cognitivo",
    "psicológico": "Psicológico",
    "biomédico": "Biomédico",
}

SCORED_DATA_TYPES: Tuple[str, ...] = ("scale_1_5", "scale_1_10", "numeric", "percentage")
PREFERRED_DATA_TYPE = "scale_1_5"

SCORE_MIN: float = 1.0
SCORE_MAX: float = 5.0

STRENGTH_THRESHOLD: float = 4.0   # inclusive
WEAKNESS_THRESHOLD: float = 3.0   # exclusive
RANK_LIMIT: int = 3


def category_label(category: str) -> str:
    return CATEGORY_LABELS.get(category, category)
