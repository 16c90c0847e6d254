"""
spin_core package: item/weight models, segment geometry, outcome resolver,
random picks, constrained team partitioner, validation, and share/export.
"""
from .models import Constraint, Item, Segment, SelectionResult, TeamAssignment, WheelConfig
from .picker import pick_multiple_random, pick_weighted_random
from .resolver import resolve_winner_from_angle
from .segments import build_segments
from .teams import partition_into_teams

__all__ = [
    "Item",
    "Constraint",
    "Segment",
    "SelectionResult",
    "TeamAssignment",
    "WheelConfig",
    "build_segments",
    "resolve_winner_from_angle",
    "pick_weighted_random",
    "pick_multiple_random",
    "partition_into_teams",
]
