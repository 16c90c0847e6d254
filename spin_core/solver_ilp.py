# spin_core/solver_ilp.py
from __future__ import annotations
from typing import List, Optional, Sequence, Tuple
import numpy as np
import pulp

from .models import Constraint, Item
from .teams import active_constraints
from .validation import require_team_request


def solve_teams_ilp(
    items: Sequence[Item],
    team_count: int,
    constraints: Sequence[Constraint],
    rng: np.random.Generator,
) -> Tuple[Optional[List[List[Item]]], Optional[str]]:
    """
    Exact partition minimizing the number of violated avoid constraints,
    then the gap between the largest and smallest team. Small random jitter
    on the objective picks a different optimum from run to run.
    Returns (teams, None) on success or (None, reason) otherwise.
    """
    require_team_request(items, team_count)
    n = len(items)
    K = range(team_count)
    active = active_constraints(items, constraints)
    idx = {it.id: i for i, it in enumerate(items)}

    prob = pulp.LpProblem("team_partition", pulp.LpMinimize)

    # x[i,k] = 1 if item i sits on team k
    X = {(i, k): pulp.LpVariable(f"x_{i}_{k}", cat="Binary") for i in range(n) for k in K}
    # v[c,k] = 1 if constraint c is broken on team k
    V = {(c, k): pulp.LpVariable(f"v_{c}_{k}", cat="Binary") for c in range(len(active)) for k in K}
    s_max = pulp.LpVariable("size_max", lowBound=0)
    s_min = pulp.LpVariable("size_min", lowBound=0)

    # one broken constraint outweighs any size gap (gap <= n - 1);
    # all jitter together stays below one unit of gap
    violation_weight = n
    jitter = rng.uniform(0, 0.5 / (n * team_count), size=(n, team_count))
    prob += (
        violation_weight * pulp.lpSum(V.values())
        + (s_max - s_min)
        + pulp.lpSum(float(jitter[i, k]) * X[(i, k)] for i in range(n) for k in K)
    )

    # 1) Every item on exactly one team
    for i in range(n):
        prob += pulp.lpSum(X[(i, k)] for k in K) == 1, f"one_team_{i}"

    # 2) No empty team; sizes bracketed by s_min..s_max
    for k in K:
        size = pulp.lpSum(X[(i, k)] for i in range(n))
        prob += size >= 1, f"non_empty_{k}"
        prob += size <= s_max, f"max_size_{k}"
        prob += size >= s_min, f"min_size_{k}"

    # 3) Violation indicators
    for c, con in enumerate(active):
        a, b = idx[con.item1_id], idx[con.item2_id]
        for k in K:
            prob += V[(c, k)] >= X[(a, k)] + X[(b, k)] - 1, f"avoid_{c}_{k}"

    status = prob.solve(pulp.PULP_CBC_CMD(msg=False))
    if pulp.LpStatus[status] != "Optimal":
        return None, f"ILP solver status: {pulp.LpStatus[status]}"

    teams: List[List[Item]] = [[] for _ in K]
    for i, it in enumerate(items):
        for k in K:
            if pulp.value(X[(i, k)]) > 0.5:
                teams[k].append(it)
                break
    return teams, None
