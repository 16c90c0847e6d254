# FILE: spin_core/segments.py
"""
Weighted segment builder.

Turns an ordered item list into gapless angular slices covering [0, 360).
Slice widths are equal unless the wheel is in weighted mode and at least one
item carries an explicit weight. A weight of 0 yields a zero-width slice that
angle lookup can never land on.
"""
from __future__ import annotations
import logging
from typing import List, Sequence
import numpy as np

from .constants import FULL_CIRCLE, MODE_WEIGHTED
from .models import Item, Segment
from .weights import effective_weights, has_explicit_weights

logger = logging.getLogger(__name__)


def _boundaries(widths: np.ndarray) -> np.ndarray:
    edges = np.minimum(np.concatenate(([0.0], np.cumsum(widths))), FULL_CIRCLE)
    # float drift goes to the last slice with width; trailing zero slices sit at 360
    positive = np.flatnonzero(widths > 0)
    last = positive[-1] + 1 if positive.size else len(widths)
    edges[last:] = FULL_CIRCLE
    return edges


def build_segments(items: Sequence[Item], mode: str) -> List[Segment]:
    n = len(items)
    if n == 0:
        return []

    if mode != MODE_WEIGHTED or not has_explicit_weights(items):
        widths = np.full(n, FULL_CIRCLE / n)
    else:
        weights = np.asarray(effective_weights(items), dtype=float)
        total = weights.sum()
        if total <= 0:
            logger.debug("All %d weights are zero; using equal segments", n)
            widths = np.full(n, FULL_CIRCLE / n)
        else:
            widths = weights / total * FULL_CIRCLE

    edges = _boundaries(widths)
    segments: List[Segment] = []
    for i in range(n):
        start = float(edges[i])
        end = float(edges[i + 1])
        segments.append(Segment(item_index=i, start_angle=start, angle=end - start, end_angle=end))
    return segments


def segment_midpoint(segment: Segment) -> float:
    return segment.start_angle + segment.angle / 2.0
