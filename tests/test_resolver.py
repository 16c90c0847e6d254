import pytest
from spin_core.models import Item, Segment
from spin_core.resolver import (
    normalize_rotation, pointer_angle, resolve_segment_index, resolve_winner_from_angle,
    rotation_for_item, spin, spin_duration, winners_for_rotations,
)
from spin_core.rng import sequence_source
from spin_core.segments import build_segments


def _items(n, weights=None):
    weights = weights or [None] * n
    return [Item(id=c, name=c, weight=w) for c, w in zip("ABCDEFGH"[:n], weights)]


def test_normalize_and_pointer():
    assert normalize_rotation(370) == 10
    assert normalize_rotation(-90) == 270
    assert normalize_rotation(720) == 0
    assert pointer_angle(90) == 270
    assert pointer_angle(0) == 0


def test_boundary_belongs_to_segment_starting_there():
    items = _items(3)
    segs = [
        Segment(item_index=0, start_angle=0.0, angle=40.0, end_angle=40.0),
        Segment(item_index=1, start_angle=40.0, angle=30.0, end_angle=70.0),
        Segment(item_index=2, start_angle=70.0, angle=290.0, end_angle=360.0),
    ]
    # rotation 320 -> pointer 40; rotation 290 -> pointer 70
    assert resolve_winner_from_angle(320, segs, items).id == "B"
    assert resolve_winner_from_angle(290, segs, items).id == "C"


def test_weighted_lookup():
    items = _items(3, [1, 1, 2])
    segs = build_segments(items, "weighted")
    assert resolve_winner_from_angle(0, segs, items).id == "A"
    assert resolve_winner_from_angle(270, segs, items).id == "B"   # pointer 90
    assert resolve_winner_from_angle(180, segs, items).id == "C"   # pointer 180
    assert resolve_winner_from_angle(-90, segs, items).id == "B"


def test_zero_weight_never_resolved():
    items = _items(3, [0, 1, 1])
    segs = build_segments(items, "weighted")
    winners = {resolve_winner_from_angle(r / 2, segs, items).id for r in range(0, 720)}
    assert "A" not in winners
    assert winners == {"B", "C"}


def test_deterministic_and_idempotent():
    items = _items(5, [3, 1, 4, 1, 5])
    for theta in (0.0, 12.5, 359.999, 1234.5, -77.0):
        first = resolve_winner_from_angle(theta, build_segments(items, "weighted"), items)
        second = resolve_winner_from_angle(theta, build_segments(items, "weighted"), items)
        assert first == second


def test_fallback_to_last_item_when_nothing_matches():
    items = _items(2)
    segs = [
        Segment(item_index=0, start_angle=0.0, angle=175.0, end_angle=175.0),
        Segment(item_index=1, start_angle=175.0, angle=175.0, end_angle=350.0),
    ]
    assert resolve_segment_index(5, segs) is None   # pointer 355
    assert resolve_winner_from_angle(5, segs, items).id == "B"


def test_empty_items_rejected():
    with pytest.raises(ValueError):
        resolve_winner_from_angle(10, [], [])


def test_rotation_for_item_lands_on_target():
    items = _items(4, [1, 2, 3, 4])
    segs = build_segments(items, "weighted")
    for idx in range(4):
        rot = rotation_for_item(idx, segs, items, current_rotation=123.0)
        assert rot >= 123.0 + 5 * 360
        assert resolve_winner_from_angle(rot, segs, items).id == items[idx].id


def test_rotation_for_zero_width_segment_rejected():
    items = _items(2, [0, 1])
    segs = build_segments(items, "weighted")
    with pytest.raises(ValueError):
        rotation_for_item(0, segs, items)


def test_spin_with_fixed_source():
    items = _items(4)
    # 5 turns + 90 degrees -> pointer 270 -> last quarter
    out = spin(items, "simple", sequence_source([0.0, 0.25]))
    assert out.rotation == 1890.0
    assert out.winner.id == "D"
    assert out.segment_index == 3


def test_winners_for_rotations():
    items = _items(4)
    assert [w.id for w in winners_for_rotations([0, 270, 180, 90], items, "simple")] == ["A", "B", "C", "D"]


def test_spin_duration_range():
    assert spin_duration(sequence_source([0.0])) == 3.0
    assert spin_duration(sequence_source([0.5])) == 4.0
