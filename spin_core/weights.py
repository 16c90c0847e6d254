# FILE: spin_core/weights.py
from __future__ import annotations
from typing import List, Sequence

from .constants import DEFAULT_WEIGHT, MAX_PERCENT, PERCENT_HIGH, PERCENT_LOW
from .models import Item


def has_explicit_weights(items: Sequence[Item]) -> bool:
    return any(it.weight is not None for it in items)


def effective_weights(items: Sequence[Item]) -> List[float]:
    """Absent weight counts as DEFAULT_WEIGHT; zero stays zero."""
    return [float(it.weight) if it.weight is not None else DEFAULT_WEIGHT for it in items]


def safe_total(weights: Sequence[float]) -> float:
    """Real total; 1 only when nothing carries weight, so callers never divide by zero."""
    total = float(sum(weights))
    return total if total > 0 else 1.0


def selection_probabilities(items: Sequence[Item]) -> List[float]:
    ws = effective_weights(items)
    total = safe_total(ws)
    return [w / total for w in ws]


# -----------------------
# Percent editing helpers
# -----------------------
def clamp_weight(value: float) -> float:
    return max(0.0, min(MAX_PERCENT, float(value)))


def distribute_equally(items: Sequence[Item]) -> List[Item]:
    """
    Split 100% equally over unlocked items (one decimal place), remainder to
    the first unlocked item. Locked items keep their weight and their share is
    taken off the top.
    """
    unlocked = [i for i, it in enumerate(items) if not it.locked]
    if not unlocked:
        return list(items)

    locked_sum = sum(it.weight or 0.0 for it in items if it.locked)
    share = max(MAX_PERCENT - locked_sum, 0.0)
    equal = round(share / len(unlocked) * 10) / 10
    remainder = share - equal * len(unlocked)

    out: List[Item] = list(items)
    for n, idx in enumerate(unlocked):
        w = equal + remainder if n == 0 else equal
        out[idx] = items[idx].model_copy(update={"weight": round(max(w, 0.0), 6)})
    return out


def reset_weights(items: Sequence[Item]) -> List[Item]:
    return [it if it.locked else it.model_copy(update={"weight": 0.0}) for it in items]


def set_weight(items: Sequence[Item], item_id: str, weight: float) -> List[Item]:
    w = clamp_weight(weight)
    return [it.model_copy(update={"weight": w}) if it.id == item_id else it for it in items]


def total_percentage(items: Sequence[Item]) -> float:
    return float(sum(it.weight or 0.0 for it in items))


def is_percentage_valid(total: float) -> bool:
    return PERCENT_LOW <= total <= PERCENT_HIGH


def zero_weight_items(items: Sequence[Item]) -> List[Item]:
    return [it for it in items if (it.weight or 0.0) == 0]
