# spin_core/models.py
from __future__ import annotations
import time
from typing import Dict, List, Literal, Optional, Set
from pydantic import BaseModel, ConfigDict, Field, field_validator

Mode = Literal["simple", "weighted", "multiple", "teams"]


class Item(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    weight: Optional[float] = None
    locked: bool = False

    @field_validator("weight")
    @classmethod
    def _non_negative(cls, v):
        if v is not None and v < 0:
            raise ValueError("weight must be non-negative")
        return v


class Constraint(BaseModel):
    """Pairwise 'must not share a team' rule. Symmetric in its endpoints."""
    model_config = ConfigDict(frozen=True)

    id: str
    item1_id: str
    item2_id: str
    type: Literal["avoid"] = "avoid"

    def involves(self, a: str, b: str) -> bool:
        return {self.item1_id, self.item2_id} == {a, b}

    def is_active(self, item_ids: Set[str]) -> bool:
        return self.item1_id in item_ids and self.item2_id in item_ids


class Segment(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_index: int
    start_angle: float
    angle: float
    end_angle: float


class SpinOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    rotation: float
    winner: Item
    segment_index: int


class TeamAssignment(BaseModel):
    model_config = ConfigDict(frozen=True)

    teams: List[List[Item]]
    violated_constraints: List[Constraint] = Field(default_factory=list)
    attempts_used: int = 0
    exhausted: bool = False


class SelectionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["single", "multiple", "teams"]
    items: List[Item] = Field(default_factory=list)
    teams: List[List[Item]] = Field(default_factory=list)
    position: Optional[int] = None  # 1-based rank, remove-after-pick only
    rotation: Optional[float] = None
    violated_constraints: List[Constraint] = Field(default_factory=list)
    timestamp: float = Field(default_factory=time.time)


class WheelConfig(BaseModel):
    mode: Mode = "simple"
    items: List[Item] = Field(default_factory=list)
    team_count: int = 2
    select_count: int = 1
    remove_after_spin: bool = False
    team_constraints: List[Constraint] = Field(default_factory=list)
    random_seed: Optional[int] = None

    @field_validator("team_count", "select_count")
    @classmethod
    def _positive(cls, v):
        if v < 1:
            raise ValueError("counts must be at least 1")
        return v

    def item_ids(self) -> Set[str]:
        return {it.id for it in self.items}

    def active_constraints(self) -> List[Constraint]:
        ids = self.item_ids()
        return [c for c in self.team_constraints if c.is_active(ids)]

    def name_for(self, item_id: str) -> str:
        by_id: Dict[str, Item] = {it.id: it for it in self.items}
        it = by_id.get(item_id)
        return it.name if it else "Unknown"


class ValidationStatus(BaseModel):
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def has_issues(self) -> bool:
        return bool(self.errors or self.warnings)
