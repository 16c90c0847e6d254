# spin_core/scheduler.py
from __future__ import annotations
import logging
from typing import List, Literal, Optional, Tuple
import numpy as np

from .constants import MODE_MULTIPLE, MODE_TEAMS
from .models import Item, SelectionResult, TeamAssignment, WheelConfig
from .picker import pick_and_remove, pick_multiple_random
from .resolver import spin
from .rng import RandomSource, ensure_source
from .solver_ilp import solve_teams_ilp
from .teams import partition_teams_detailed, violated_constraints

logger = logging.getLogger(__name__)

Strategy = Literal["greedy", "exact"]


def schedule_teams(
    config: WheelConfig,
    rand: Optional[RandomSource] = None,
    strategy: Strategy = "greedy",
    rng: Optional[np.random.Generator] = None,
) -> TeamAssignment:
    """Exact strategy first when asked for; greedy partitioner otherwise or on failure."""
    constraints = config.active_constraints()
    if strategy == "exact":
        teams, err = solve_teams_ilp(
            config.items, config.team_count, constraints,
            rng=rng if rng is not None else np.random.default_rng(config.random_seed),
        )
        if teams is not None:
            return TeamAssignment(teams=teams, violated_constraints=violated_constraints(teams, constraints))
        logger.warning("Exact team solver failed (%s); falling back to greedy", err)

    return partition_teams_detailed(config.items, config.team_count, constraints, rand)


def resolve_selection(
    config: WheelConfig,
    rand: Optional[RandomSource] = None,
    picks_so_far: int = 0,
    current_rotation: float = 0.0,
    strategy: Strategy = "greedy",
) -> SelectionResult:
    result, _ = resolve_and_remove(config, rand, picks_so_far, current_rotation, strategy)
    return result


def resolve_and_remove(
    config: WheelConfig,
    rand: Optional[RandomSource] = None,
    picks_so_far: int = 0,
    current_rotation: float = 0.0,
    strategy: Strategy = "greedy",
) -> Tuple[SelectionResult, List[Item]]:
    """
    Run one selection for the configured mode.
    Returns (result, items left for the next draw); the list only shrinks in
    the spinning modes with remove_after_spin.
    """
    rand = ensure_source(rand)
    items = list(config.items)
    if not items:
        raise ValueError("Cannot resolve a selection with no items.")

    if config.mode == MODE_TEAMS:
        assignment = schedule_teams(config, rand, strategy)
        result = SelectionResult(
            kind="teams",
            teams=assignment.teams,
            violated_constraints=assignment.violated_constraints,
        )
        return result, items

    if config.mode == MODE_MULTIPLE:
        picked = pick_multiple_random(items, config.select_count, rand)
        return SelectionResult(kind="multiple", items=picked), items

    outcome = spin(items, config.mode, rand, current_rotation)
    if config.remove_after_spin:
        return pick_and_remove(items, outcome.winner, picks_so_far, rotation=outcome.rotation)
    return SelectionResult(kind="single", items=[outcome.winner], rotation=outcome.rotation), items
