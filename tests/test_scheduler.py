import pytest
from spin_core.models import Constraint, Item, WheelConfig
from spin_core.rng import default_source, sequence_source
from spin_core.scheduler import resolve_and_remove, resolve_selection, schedule_teams
from spin_core.teams import team_sizes


def _items(n, weights=None):
    weights = weights or [None] * n
    return [Item(id=c, name=c, weight=w) for c, w in zip("ABCDEFGH"[:n], weights)]


def test_simple_spin():
    cfg = WheelConfig(mode="simple", items=_items(4))
    result = resolve_selection(cfg, sequence_source([0.0, 0.25]))
    assert result.kind == "single"
    assert result.rotation == 1890.0
    assert [it.id for it in result.items] == ["D"]
    assert result.position is None


def test_weighted_spin_uses_weights():
    cfg = WheelConfig(mode="weighted", items=_items(3, [1, 1, 2]))
    result = resolve_selection(cfg, sequence_source([0.0, 0.25]))
    assert result.items[0].id == "C"


def test_rotation_accumulates():
    cfg = WheelConfig(mode="simple", items=_items(4))
    result = resolve_selection(cfg, sequence_source([0.0, 0.25]), current_rotation=1890.0)
    assert result.rotation == 3780.0


def test_remove_after_spin_ranks_and_shrinks():
    cfg = WheelConfig(mode="simple", items=_items(4), remove_after_spin=True)
    result, remaining = resolve_and_remove(cfg, sequence_source([0.0, 0.25]), picks_so_far=2)
    assert result.position == 3
    assert [it.id for it in remaining] == ["A", "B", "C"]


def test_multiple_mode():
    cfg = WheelConfig(mode="multiple", items=_items(6), select_count=3)
    result, remaining = resolve_and_remove(cfg, default_source(8))
    assert result.kind == "multiple"
    assert len({it.id for it in result.items}) == 3
    assert len(remaining) == 6


def test_teams_mode_reports_violations():
    items = _items(3)
    rules = [
        Constraint(id="1", item1_id="A", item2_id="B"),
        Constraint(id="2", item1_id="B", item2_id="C"),
        Constraint(id="3", item1_id="A", item2_id="C"),
    ]
    cfg = WheelConfig(mode="teams", items=items, team_count=2, team_constraints=rules)
    result = resolve_selection(cfg, default_source(3))
    assert result.kind == "teams"
    assert sorted(team_sizes(result.teams)) == [1, 2]
    assert len(result.violated_constraints) == 1


def test_empty_items_rejected():
    with pytest.raises(ValueError):
        resolve_selection(WheelConfig(mode="simple"))


def test_exact_strategy_keeps_pair_apart():
    cfg = WheelConfig(
        mode="teams",
        items=_items(4),
        team_count=2,
        team_constraints=[Constraint(id="1", item1_id="A", item2_id="B")],
        random_seed=7,
    )
    out = schedule_teams(cfg, strategy="exact")
    assert team_sizes(out.teams) == [2, 2]
    assert out.violated_constraints == []
    together = [t for t in out.teams if {"A", "B"} <= {it.id for it in t}]
    assert not together


def test_exact_strategy_prefers_constraints_over_even_sizes():
    rules = [Constraint(id=str(i), item1_id="A", item2_id=o) for i, o in enumerate("BCD")]
    cfg = WheelConfig(mode="teams", items=_items(4), team_count=2, team_constraints=rules, random_seed=3)
    out = schedule_teams(cfg, strategy="exact")
    assert out.violated_constraints == []
    assert sorted(team_sizes(out.teams)) == [1, 3]
