from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional
Direction = Literal["up", "down", "unchanged"]
CategoryAverages = Dict[str, Optional[float]]
@dataclass(frozen=True)
class EvaluationItem:
    category: str; item_name: str; value: Any; data_type: str
    id: Optional[str] = None
    evaluation_id: Optional[str] = None
    created_at: Optional[str] = None
@dataclass(frozen=True)
class Evaluation:
    items: List[EvaluationItem] = field(default_factory=list)
    id: Optional[str] = None
    player_id: Optional[str] = None
    evaluator_id: Optional[str] = None
    date: Optional[str] = None
    observations: Optional[str] = None
    general_score: Optional[float] = None
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
@dataclass(frozen=True)
class RadarPoint:
    label: str; value: float
@dataclass(frozen=True)
class RadarSeries:
    data: List[RadarPoint]
    comparison: Optional[List[RadarPoint]] = None

    @property
    def has_data(self) -> bool:
        return any(p.value > 0 for p in self.data)
@dataclass(frozen=True)
class RankedCategory:
    category: str; average: float
@dataclass(frozen=True)
class StrengthsWeaknesses:
    strengths: List[RankedCategory]
    weaknesses: List[RankedCategory]
@dataclass(frozen=True)
class CategoryTrend:
    category: str
    label: str
    average: float
    previous: Optional[float] = None
    difference: Optional[float] = None
    direction: Optional[Direction] = None
@dataclass(frozen=True)
class ItemTrace:
    category: str
    item_name: str
    data_type: str
    raw_value: Any
    extracted: Optional[float] = None
    normalized: Optional[float] = None
    used: bool = False
    reason: str = ""
