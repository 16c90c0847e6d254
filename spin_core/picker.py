# FILE: spin_core/picker.py
from __future__ import annotations
import logging
from typing import List, Optional, Sequence, Tuple

from .models import Item, SelectionResult
from .rng import RandomSource, ensure_source, shuffled, uniform
from .weights import effective_weights, safe_total

logger = logging.getLogger(__name__)


def pick_weighted_random(items: Sequence[Item], rand: Optional[RandomSource] = None) -> Item:
    """
    Draw one item with probability weight / total (absent weight = 1).
    Zero-weight items are never returned unless every weight is zero.
    """
    if not items:
        raise ValueError("Cannot pick from an empty item list.")
    rand = ensure_source(rand)
    weights = effective_weights(items)
    r = uniform(rand, 0.0, safe_total(weights))

    last_positive: Optional[Item] = None
    for item, w in zip(items, weights):
        if w <= 0:
            continue
        last_positive = item
        r -= w
        if r <= 0:
            return item

    # float rounding walked off the end
    return last_positive if last_positive is not None else items[-1]


def pick_multiple_random(items: Sequence[Item], count: int, rand: Optional[RandomSource] = None) -> List[Item]:
    if not 1 <= count <= len(items):
        raise ValueError(f"Cannot select {count} items when only {len(items)} items are available.")
    return shuffled(items, ensure_source(rand))[:count]


# -----------------------
# Remove-after-pick
# -----------------------
def remove_item(items: Sequence[Item], item_id: str) -> List[Item]:
    return [it for it in items if it.id != item_id]


def pick_and_remove(
    items: Sequence[Item],
    winner: Item,
    picks_so_far: int,
    rotation: Optional[float] = None,
) -> Tuple[SelectionResult, List[Item]]:
    """Rank the winner (1-based) and return the items left for the next draw."""
    position = picks_so_far + 1
    remaining = remove_item(items, winner.id)
    if len(remaining) == len(items):
        logger.warning("Winner %s was not in the active list; nothing removed", winner.id)
    result = SelectionResult(kind="single", items=[winner], position=position, rotation=rotation)
    return result, remaining
