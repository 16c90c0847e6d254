# FILE: spin_core/resolver.py
"""
Angle -> winner resolution for a wheel spinning clockwise under a fixed
pointer at 0 degrees.

Segments are half-open [start, end): a pointer sitting exactly on a boundary
belongs to the segment that starts there.
"""
from __future__ import annotations
import logging
from typing import List, Optional, Sequence

from .constants import (
    FULL_CIRCLE, MAX_SPIN_SECONDS, MAX_SPIN_TURNS, MIN_SPIN_SECONDS, MIN_SPIN_TURNS,
)
from .models import Item, Segment, SpinOutcome
from .rng import RandomSource, ensure_source, uniform
from .segments import build_segments

logger = logging.getLogger(__name__)

# offsets tried inside a target segment, as fractions of its width
_CANDIDATE_FRACTIONS = (0.5, 0.25, 0.75, 0.125, 0.875, 0.375, 0.625, 0.0625, 0.9375)


def normalize_rotation(angle: float) -> float:
    return ((angle % FULL_CIRCLE) + FULL_CIRCLE) % FULL_CIRCLE


def pointer_angle(rotation: float) -> float:
    return (FULL_CIRCLE - normalize_rotation(rotation)) % FULL_CIRCLE


def resolve_segment_index(rotation: float, segments: Sequence[Segment]) -> Optional[int]:
    p = pointer_angle(rotation)
    for idx, seg in enumerate(segments):
        if seg.start_angle <= p < seg.end_angle:
            return idx
    return None


def resolve_winner_from_angle(rotation: float, segments: Sequence[Segment], items: Sequence[Item]) -> Item:
    if not items:
        raise ValueError("Cannot resolve a winner from an empty item list.")
    idx = resolve_segment_index(rotation, segments)
    if idx is None:
        logger.warning("No segment matched rotation %.9f; falling back to last item", rotation)
        return items[-1]
    return items[segments[idx].item_index]


# -----------------------
# Spinning
# -----------------------
def rotation_for_item(
    target_index: int,
    segments: Sequence[Segment],
    items: Sequence[Item],
    current_rotation: float = 0.0,
    turns: int = MIN_SPIN_TURNS,
) -> float:
    """
    Rotation (>= current_rotation + turns full circles) that lands the pointer
    on segment ``target_index``. Candidate offsets inside the segment are
    checked against resolve_winner_from_angle, so the answer always agrees
    with the resolver.
    """
    if not 0 <= target_index < len(segments):
        raise ValueError(f"target_index {target_index} out of range for {len(segments)} segments")
    seg = segments[target_index]
    if seg.angle <= 0:
        raise ValueError(f"Segment {target_index} has zero width and can never be landed on.")

    target_item = items[seg.item_index]
    base = current_rotation + turns * FULL_CIRCLE
    current_norm = normalize_rotation(current_rotation)
    for frac in _CANDIDATE_FRACTIONS:
        p = seg.start_angle + seg.angle * frac
        wanted = (FULL_CIRCLE - p) % FULL_CIRCLE
        candidate = base + (wanted - current_norm) % FULL_CIRCLE
        if resolve_segment_index(candidate, segments) != target_index:
            continue
        if resolve_winner_from_angle(candidate, segments, items).id == target_item.id:
            return candidate
    raise ValueError(f"No rotation found that lands on segment {target_index}.")


def random_rotation(
    rand: RandomSource,
    current_rotation: float = 0.0,
    min_turns: float = MIN_SPIN_TURNS,
    max_turns: float = MAX_SPIN_TURNS,
) -> float:
    turns = uniform(rand, min_turns, max_turns)
    return current_rotation + turns * FULL_CIRCLE + uniform(rand, 0.0, FULL_CIRCLE)


def spin(
    items: Sequence[Item],
    mode: str,
    rand: Optional[RandomSource] = None,
    current_rotation: float = 0.0,
    min_turns: float = MIN_SPIN_TURNS,
    max_turns: float = MAX_SPIN_TURNS,
) -> SpinOutcome:
    if not items:
        raise ValueError("Cannot spin a wheel with no items.")
    rand = ensure_source(rand)
    segments = build_segments(items, mode)
    rotation = random_rotation(rand, current_rotation, min_turns, max_turns)
    idx = resolve_segment_index(rotation, segments)
    if idx is None:
        logger.warning("Spin landed outside every segment at %.9f; using last item", rotation)
        idx = len(segments) - 1
    return SpinOutcome(rotation=rotation, winner=items[segments[idx].item_index], segment_index=idx)


def spin_duration(rand: Optional[RandomSource] = None) -> float:
    return uniform(ensure_source(rand), MIN_SPIN_SECONDS, MAX_SPIN_SECONDS)


def winners_for_rotations(rotations: Sequence[float], items: Sequence[Item], mode: str) -> List[Item]:
    segments = build_segments(items, mode)
    return [resolve_winner_from_angle(r, segments, items) for r in rotations]
