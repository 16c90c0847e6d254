# FILE: spin_core/teams.py
"""
Constrained team partitioner.

Items are split into ``team_count`` teams. "Avoid" constraints come first:
each item goes to the smallest team where it breaks none, so teams may end up
uneven when that is the only way to keep pairs apart. Among assignments with
the same number of broken constraints, the most even split wins. Constraints
stay a soft goal; the partitioner never fails when they cannot all be kept
and returns the best assignment it found together with the ones it broke.

Work is bounded by an attempt ceiling (items * ATTEMPT_FACTOR team
evaluations). Once it is spent, remaining items are placed by size alone.
"""
from __future__ import annotations
import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .constants import ATTEMPT_FACTOR
from .models import Constraint, Item, TeamAssignment
from .rng import RandomSource, ensure_source, randint_below, shuffled
from .validation import require_team_request

logger = logging.getLogger(__name__)

# (violated constraints, sum of squared team sizes); lower is better
Score = Tuple[int, int]


class _Budget:
    def __init__(self, limit: int):
        self.limit = limit
        self.used = 0

    @property
    def exhausted(self) -> bool:
        return self.used >= self.limit

    def spend(self, n: int = 1):
        self.used += n


# -----------------------
# Constraint helpers
# -----------------------
def active_constraints(items: Sequence[Item], constraints: Sequence[Constraint]) -> List[Constraint]:
    """Constraints whose endpoints are both present; the rest are inert."""
    ids = {it.id for it in items}
    return [c for c in constraints if c.is_active(ids) and c.item1_id != c.item2_id]


def _conflict_map(constraints: Sequence[Constraint]) -> Dict[str, Set[str]]:
    out: Dict[str, Set[str]] = {}
    for c in constraints:
        out.setdefault(c.item1_id, set()).add(c.item2_id)
        out.setdefault(c.item2_id, set()).add(c.item1_id)
    return out


def violated_constraints(teams: Sequence[Sequence[Item]], constraints: Sequence[Constraint]) -> List[Constraint]:
    team_of: Dict[str, int] = {}
    for t, team in enumerate(teams):
        for it in team:
            team_of[it.id] = t
    out = []
    for c in constraints:
        a, b = team_of.get(c.item1_id), team_of.get(c.item2_id)
        if a is not None and a == b:
            out.append(c)
    return out


def _count_violations(team_ids: List[Set[str]], conflicts: Dict[str, Set[str]]) -> int:
    total = 0
    for ids in team_ids:
        for pid in ids:
            total += len(conflicts.get(pid, set()) & ids)
    return total // 2


def _score(teams: List[List[Item]], conflicts: Dict[str, Set[str]]) -> Score:
    ids = [{it.id for it in t} for t in teams]
    return _count_violations(ids, conflicts), sum(len(t) ** 2 for t in teams)


def team_sizes(teams: Sequence[Sequence[Item]]) -> List[int]:
    return [len(t) for t in teams]


def is_balanced(teams: Sequence[Sequence[Item]]) -> bool:
    sizes = team_sizes(teams)
    return not sizes or (max(sizes) - min(sizes) <= 1)


# -----------------------
# Placement
# -----------------------
def deal_round_robin(order: Sequence[Item], team_count: int) -> List[List[Item]]:
    """item[i] -> team[i % team_count]; callers shuffle ``order`` first."""
    teams: List[List[Item]] = [[] for _ in range(team_count)]
    for i, it in enumerate(order):
        teams[i % team_count].append(it)
    return teams


def _smallest(candidates: Sequence[int], teams: List[List[Item]], rand: RandomSource) -> int:
    fewest = min(len(teams[t]) for t in candidates)
    ties = [t for t in candidates if len(teams[t]) == fewest]
    return ties[randint_below(rand, len(ties))]


def _greedy_pass(
    order: Sequence[Item],
    team_count: int,
    conflicts: Dict[str, Set[str]],
    budget: _Budget,
    rand: RandomSource,
) -> List[List[Item]]:
    teams: List[List[Item]] = [[] for _ in range(team_count)]
    team_ids: List[Set[str]] = [set() for _ in range(team_count)]
    every_team = list(range(team_count))

    for it in order:
        if budget.exhausted:
            pool = every_team
        else:
            budget.spend(team_count)
            mine = conflicts.get(it.id, set())
            clean = [t for t in every_team if not (mine & team_ids[t])]
            # every team conflicts: accept the violation
            pool = clean or every_team
        target = _smallest(pool, teams, rand)
        teams[target].append(it)
        team_ids[target].add(it.id)
    return teams


# -----------------------
# Local improvement
# -----------------------
def _find_improving_move(
    teams: List[List[Item]],
    team_ids: List[Set[str]],
    conflicts: Dict[str, Set[str]],
    budget: _Budget,
) -> Optional[Tuple[int, int, int]]:
    """Move one member to another team if that lowers the score."""
    for ti, team in enumerate(teams):
        for ai, a in enumerate(team):
            ca = conflicts.get(a.id, set())
            before = len(ca & team_ids[ti])
            for tj in range(len(teams)):
                if tj == ti:
                    continue
                if budget.exhausted:
                    return None
                budget.spend()
                gained = len(ca & team_ids[tj]) - before
                # squared-size change of moving one member from ti to tj
                spread = 2 * (len(teams[tj]) - len(team) + 1)
                if gained < 0 or (gained == 0 and spread < 0):
                    return ti, ai, tj
    return None


def _find_improving_swap(
    teams: List[List[Item]],
    team_ids: List[Set[str]],
    conflicts: Dict[str, Set[str]],
    budget: _Budget,
) -> Optional[Tuple[int, int, int, int]]:
    for ti, team in enumerate(teams):
        for ai, a in enumerate(team):
            ca = conflicts.get(a.id, set())
            before_a = len(ca & team_ids[ti])
            if not before_a:
                continue
            for tj, other in enumerate(teams):
                if tj == ti:
                    continue
                for bi, b in enumerate(other):
                    if budget.exhausted:
                        return None
                    budget.spend()
                    cb = conflicts.get(b.id, set())
                    before_b = len(cb & team_ids[tj])
                    after_a = len(ca & (team_ids[tj] - {b.id}))
                    after_b = len(cb & (team_ids[ti] - {a.id}))
                    if after_a + after_b < before_a + before_b:
                        return ti, ai, tj, bi
    return None


def _improve(teams: List[List[Item]], conflicts: Dict[str, Set[str]], budget: _Budget):
    """
    Single moves and pairwise swaps while they strictly lower the score:
    fewer broken constraints first, then a more even split.
    """
    team_ids = [{it.id for it in t} for t in teams]
    while not budget.exhausted:
        move = _find_improving_move(teams, team_ids, conflicts, budget)
        if move is not None:
            ti, ai, tj = move
            a = teams[ti].pop(ai)
            teams[tj].append(a)
            team_ids[ti].discard(a.id)
            team_ids[tj].add(a.id)
            continue

        swap = _find_improving_swap(teams, team_ids, conflicts, budget)
        if swap is None:
            return
        ti, ai, tj, bi = swap
        a, b = teams[ti][ai], teams[tj][bi]
        teams[ti][ai], teams[tj][bi] = b, a
        team_ids[ti].discard(a.id)
        team_ids[ti].add(b.id)
        team_ids[tj].discard(b.id)
        team_ids[tj].add(a.id)


# -----------------------
# Public entry points
# -----------------------
def partition_teams_detailed(
    items: Sequence[Item],
    team_count: int,
    constraints: Sequence[Constraint] = (),
    rand: Optional[RandomSource] = None,
) -> TeamAssignment:
    require_team_request(items, team_count)
    rand = ensure_source(rand)

    active = active_constraints(items, constraints)
    if not active:
        teams = deal_round_robin(shuffled(items, rand), team_count)
        return TeamAssignment(teams=teams, attempts_used=len(items))

    conflicts = _conflict_map(active)
    budget = _Budget(len(items) * ATTEMPT_FACTOR)
    best: Optional[List[List[Item]]] = None
    best_score: Score = (0, 0)
    restarts = 0

    while True:
        teams = _greedy_pass(shuffled(items, rand), team_count, conflicts, budget, rand)
        _improve(teams, conflicts, budget)
        score = _score(teams, conflicts)
        if best is None or score < best_score:
            best, best_score = teams, score
        if (best_score[0] == 0 and is_balanced(best)) or budget.exhausted:
            break
        restarts += 1

    violated = violated_constraints(best, active)
    if violated:
        logger.warning(
            "Could not honor %d of %d constraints (restarts=%d, budget %d/%d)",
            len(violated), len(active), restarts, budget.used, budget.limit,
        )
    else:
        logger.debug(
            "All %d constraints honored after %d restarts, sizes %s",
            len(active), restarts, team_sizes(best),
        )

    return TeamAssignment(
        teams=best,
        violated_constraints=violated,
        attempts_used=budget.used,
        exhausted=budget.exhausted,
    )


def partition_into_teams(
    items: Sequence[Item],
    team_count: int,
    constraints: Sequence[Constraint] = (),
    rand: Optional[RandomSource] = None,
) -> List[List[Item]]:
    return partition_teams_detailed(items, team_count, constraints, rand).teams
