import pytest
from spin_core.models import Constraint, Item
from spin_core.rng import default_source
from spin_core.teams import (
    active_constraints, deal_round_robin, is_balanced, partition_into_teams,
    partition_teams_detailed, team_sizes, violated_constraints,
)


def _items(n):
    return [Item(id=c, name=c) for c in "ABCDEFGHIJKLMNOP"[:n]]


def _avoid(a, b):
    return Constraint(id=f"{a}{b}", item1_id=a, item2_id=b)


def _assert_partition(teams, items):
    ids = [it.id for team in teams for it in team]
    assert sorted(ids) == sorted(it.id for it in items)


def test_balanced_sizes_without_constraints():
    items = _items(7)
    for seed in range(50):
        teams = partition_into_teams(items, 3, rand=default_source(seed))
        assert sorted(team_sizes(teams)) == [2, 2, 3]
        _assert_partition(teams, items)


def test_single_avoid_always_honored():
    items = _items(4)
    rule = _avoid("A", "B")
    for seed in range(200):
        teams = partition_into_teams(items, 2, [rule], default_source(seed))
        assert is_balanced(teams) and team_sizes(teams) == [2, 2]
        assert not violated_constraints(teams, [rule])


def test_matching_constraints_satisfied():
    items = _items(6)
    rules = [_avoid("A", "B"), _avoid("C", "D"), _avoid("E", "F")]
    for seed in range(50):
        out = partition_teams_detailed(items, 2, rules, default_source(seed))
        assert out.violated_constraints == []
        assert team_sizes(out.teams) == [3, 3]
        _assert_partition(out.teams, items)


def test_triangle_returns_best_effort():
    items = _items(3)
    rules = [_avoid("A", "B"), _avoid("B", "C"), _avoid("A", "C")]
    out = partition_teams_detailed(items, 2, rules, default_source(5))
    _assert_partition(out.teams, items)
    assert sorted(team_sizes(out.teams)) == [1, 2]
    assert len(out.violated_constraints) == 1
    assert out.exhausted


def test_everyone_avoids_everyone_splits_evenly():
    items = _items(10)
    rules = [_avoid(a.id, b.id) for i, a in enumerate(items) for b in items[i + 1:]]
    out = partition_teams_detailed(items, 2, rules, default_source(11))
    # 5/5 breaks the fewest pairs (10 + 10); 6/4 would break 15 + 6
    assert team_sizes(out.teams) == [5, 5]
    assert len(out.violated_constraints) == 20
    assert out.exhausted
    _assert_partition(out.teams, items)


def test_constraints_win_over_even_sizes():
    items = _items(4)
    rules = [_avoid("A", "B"), _avoid("A", "C"), _avoid("A", "D")]
    for seed in range(50):
        out = partition_teams_detailed(items, 2, rules, default_source(seed))
        assert out.violated_constraints == []
        assert sorted(team_sizes(out.teams)) == [1, 3]
        assert [it.id for it in min(out.teams, key=len)] == ["A"]


def test_feasible_constraints_kept_across_seeds():
    items = _items(11)
    rules = [_avoid("A", "B"), _avoid("A", "C"), _avoid("D", "E"), _avoid("F", "G"), _avoid("H", "A")]
    for seed in range(30):
        out = partition_teams_detailed(items, 4, rules, default_source(seed))
        assert out.violated_constraints == []
        assert all(team for team in out.teams)
        _assert_partition(out.teams, items)


def test_inert_constraints_ignored():
    items = _items(4)
    rules = [_avoid("A", "Z"), _avoid("C", "C")]
    assert active_constraints(items, rules) == []
    out = partition_teams_detailed(items, 2, rules, default_source(0))
    assert out.violated_constraints == []
    assert out.attempts_used == 4


@pytest.mark.parametrize("count", [0, 1, 5])
def test_bad_team_count(count):
    with pytest.raises(ValueError):
        partition_into_teams(_items(4), count)


def test_same_seed_same_teams_and_variety_across_seeds():
    items = _items(8)
    rules = [_avoid("A", "B")]
    first = partition_into_teams(items, 2, rules, default_source(42))
    again = partition_into_teams(items, 2, rules, default_source(42))
    assert first == again
    seen = {
        tuple(sorted(it.id for it in partition_into_teams(items, 2, rules, default_source(s))[0]))
        for s in range(40)
    }
    assert len(seen) > 1


def test_deal_round_robin():
    teams = deal_round_robin(_items(5), 2)
    assert [[it.id for it in t] for t in teams] == [["A", "C", "E"], ["B", "D"]]


def test_size_ties_broken_at_random():
    items = _items(2)
    rules = [_avoid("A", "B")]
    first_team = {
        partition_into_teams(items, 2, rules, default_source(s))[0][0].id
        for s in range(30)
    }
    assert first_team == {"A", "B"}
