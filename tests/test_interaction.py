"""
Tests for hit testing and the tap / drag gesture state machine.
"""

import pytest

from garden.interaction import GestureController, GestureState, InputKind, hit_test
from garden.store import AnimatedTreeStore

from conftest import make_tree


@pytest.fixture
def store(cfg, rng):
    store = AnimatedTreeStore(cfg["animation"], cfg["canopy"], rng)
    store.reconcile([make_tree("a", x=100.0, y=500.0)])
    store.get("a").current_growth = 1.0
    return store


@pytest.fixture
def events():
    return {"select": [], "move": []}


@pytest.fixture
def gestures(store, cfg, events):
    return GestureController(
        store,
        cfg["interaction"],
        on_select=events["select"].append,
        on_move=lambda tree_id, x: events["move"].append((tree_id, x)),
    )


class TestHitTest:
    """Trunk capsules and stacking order."""

    def test_empty_store_has_no_hit(self, cfg, rng):
        empty = AnimatedTreeStore(cfg["animation"], cfg["canopy"], rng)
        assert hit_test(empty, 100.0, 480.0, 20.0) is None

    def test_hit_inside_trunk(self, store):
        assert hit_test(store, 110.0, 470.0, 20.0).id == "a"

    def test_miss_above_trunk_and_beside_it(self, store):
        assert hit_test(store, 100.0, 450.0, 20.0) is None
        assert hit_test(store, 121.0, 480.0, 20.0) is None
        assert hit_test(store, 100.0, 501.0, 20.0) is None

    def test_last_tree_wins(self, store):
        store.reconcile([make_tree("a", x=100.0), make_tree("b", x=105.0)])
        store.get("b").current_growth = 1.0
        assert hit_test(store, 102.0, 480.0, 20.0).id == "b"

    def test_ungrown_tree_only_hit_at_base(self, store):
        store.get("a").current_growth = 0.0
        assert hit_test(store, 100.0, 500.0, 20.0).id == "a"
        assert hit_test(store, 100.0, 499.0, 20.0) is None


class TestGestures:
    """Classification of a press by its travel."""

    def test_short_travel_is_a_tap(self, gestures, events):
        assert gestures.press(100.0, 480.0)
        gestures.move(103.0, 480.0)
        assert gestures.release(103.0, 480.0) == "select"
        assert [tree.id for tree in events["select"]] == ["a"]
        assert events["move"] == []

    def test_long_travel_is_a_move(self, gestures, events, store):
        gestures.press(100.0, 480.0)
        gestures.move(104.0, 480.0)
        assert gestures.state is GestureState.PRESSED
        gestures.move(108.0, 480.0)
        assert gestures.state is GestureState.DRAGGING
        assert gestures.release(108.0, 480.0) == "move"
        assert events["move"] == [("a", 108.0)]
        assert events["select"] == []
        assert store.get("a").x == 108.0

    def test_drag_only_moves_horizontally(self, gestures, store):
        gestures.press(100.0, 480.0)
        gestures.move(160.0, 300.0)
        tree = store.get("a")
        assert tree.x == 160.0
        assert tree.y == 500.0

    def test_returning_drag_is_still_classified_by_release(self, gestures, events):
        gestures.press(100.0, 480.0)
        gestures.move(150.0, 480.0)
        assert gestures.release(101.0, 480.0) == "select"
        assert events["move"] == []

    def test_touch_uses_larger_threshold(self, gestures, events):
        gestures.press(100.0, 480.0, InputKind.TOUCH)
        assert gestures.release(108.0, 480.0) == "select"
        gestures.press(100.0, 480.0, InputKind.TOUCH)
        assert gestures.release(111.0, 480.0) == "move"
        assert len(events["select"]) == 1
        assert len(events["move"]) == 1

    def test_touch_uses_larger_radius(self, gestures):
        assert not gestures.press(125.0, 480.0, InputKind.POINTER)
        assert gestures.press(125.0, 480.0, InputKind.TOUCH)

    def test_press_on_empty_ground_does_nothing(self, gestures, events):
        assert not gestures.press(400.0, 480.0)
        assert gestures.release(420.0, 480.0) is None
        assert events == {"select": [], "move": []}

    def test_selected_tree_reports_descriptor(self, gestures, events):
        gestures.press(100.0, 480.0)
        gestures.release(100.0, 480.0)
        (tree,) = events["select"]
        assert tree.file_name == "a.bin"
        assert tree.target_growth == 1.0

    def test_tree_removed_during_drag(self, gestures, events, store):
        gestures.press(100.0, 480.0)
        store.reconcile([])
        assert gestures.release(120.0, 480.0) is None
        assert events["move"] == []

    def test_tree_removed_before_tap_still_selects(self, gestures, events, store):
        gestures.press(100.0, 480.0)
        store.reconcile([])
        assert gestures.release(100.0, 480.0) == "select"
        assert events["select"][0].id == "a"

    def test_cancel_returns_to_idle(self, gestures, events):
        gestures.press(100.0, 480.0)
        gestures.cancel()
        assert gestures.state is GestureState.IDLE
        assert gestures.captured_id is None
        assert gestures.release(100.0, 480.0) is None

    def test_hover(self, gestures):
        assert gestures.hover(100.0, 480.0)
        assert not gestures.hover(300.0, 480.0)
