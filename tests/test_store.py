"""
Tests for the animated tree store.

These tests verify reconciliation against the host's tree list and the
per-frame animation update.
"""

from dataclasses import replace

import pytest

from garden.model import Category
from garden.store import AnimatedTreeStore

from conftest import make_tree


@pytest.fixture
def store(cfg, rng):
    return AnimatedTreeStore(cfg["animation"], cfg["canopy"], rng)


class TestPlanting:
    """New identities create fresh animation state."""

    def test_new_tree_starts_ungrown(self, store):
        store.reconcile([make_tree(branches=3)])
        tree = store.get("a")
        assert tree is not None
        assert tree.current_growth == 0.0
        assert tree.wiggle_intensity == 0.0
        assert len(tree.particles) == 6
        assert 0.015 <= tree.growth_rate <= 0.025
        assert 0.01 <= tree.sway_intensity <= 0.03

    def test_initial_particles_follow_seed(self, cfg, rng):
        first = AnimatedTreeStore(cfg["animation"], cfg["canopy"], rng)
        second = AnimatedTreeStore(cfg["animation"], cfg["canopy"], rng)
        first.reconcile([make_tree(seed=77.0)])
        second.reconcile([make_tree(seed=77.0)])
        assert first.get("a").particles == second.get("a").particles

    def test_insertion_order_is_kept(self, store):
        store.reconcile([make_tree("a"), make_tree("b"), make_tree("c")])
        store.reconcile([make_tree("a"), make_tree("b"), make_tree("c"), make_tree("d")])
        assert store.ids() == ["a", "b", "c", "d"]


class TestReconcile:
    """Updates keep accumulated state."""

    def test_idempotent(self, store):
        trees = [make_tree("a"), make_tree("b", x=300.0)]
        store.reconcile(trees)
        for _ in range(10):
            store.advance()
        before = {t.id: (t.current_growth, len(t.particles), t.wiggle_intensity, t.x) for t in store}
        store.reconcile(trees)
        store.reconcile(trees)
        after = {t.id: (t.current_growth, len(t.particles), t.wiggle_intensity, t.x) for t in store}
        assert before == after

    def test_branch_gain_appends_particles(self, store):
        store.reconcile([make_tree(branches=2)])
        tree = store.get("a")
        previous = [replace(p) for p in tree.particles]
        store.reconcile([make_tree(branches=4)])
        assert len(tree.particles) == len(previous) + 4
        assert tree.particles[: len(previous)] == previous
        assert tree.branches == 4

    def test_branch_loss_keeps_particles(self, store):
        store.reconcile([make_tree(branches=3)])
        store.reconcile([make_tree(branches=2)])
        assert len(store.get("a").particles) == 6

    def test_watering_starts_wiggle(self, store):
        store.reconcile([make_tree(target_growth=1.0)])
        store.reconcile([make_tree(target_growth=1.5)])
        tree = store.get("a")
        assert tree.wiggle_intensity == 1.0
        assert tree.target_growth == 1.5

    def test_unwatered_update_leaves_wiggle(self, store):
        store.reconcile([make_tree(target_growth=1.0)])
        store.reconcile([make_tree(target_growth=1.5)])
        for _ in range(5):
            store.advance()
        tree = store.get("a")
        intensity, phase = tree.wiggle_intensity, tree.wiggle_phase
        store.reconcile([make_tree(target_growth=1.5, y=420.0)])
        assert (tree.wiggle_intensity, tree.wiggle_phase) == (intensity, phase)
        assert tree.y == 420.0

    def test_growth_and_sway_survive_updates(self, store):
        store.reconcile([make_tree()])
        for _ in range(30):
            store.advance()
        tree = store.get("a")
        growth, sway = tree.current_growth, tree.sway_phase
        store.reconcile([make_tree(target_growth=2.0, branches=3, category=Category.CODE)])
        assert tree.current_growth == growth
        assert tree.sway_phase == sway
        assert tree.category is Category.CODE


class TestPositions:
    """Locally dragged positions versus host positions."""

    def test_drag_survives_stale_update(self, store):
        store.reconcile([make_tree(x=100.0)])
        store.get("a").x = 180.0
        store.reconcile([make_tree(x=100.0, target_growth=1.5)])
        assert store.get("a").x == 180.0

    def test_fresh_host_position_wins(self, store):
        store.reconcile([make_tree(x=100.0)])
        store.get("a").x = 180.0
        store.reconcile([make_tree(x=250.0)])
        assert store.get("a").x == 250.0


class TestRemoval:
    """Identities missing from the list are dropped."""

    def test_removed_tree_is_gone(self, store):
        store.reconcile([make_tree("a"), make_tree("b")])
        store.reconcile([make_tree("b")])
        assert "a" not in store
        assert store.get("a") is None
        assert len(store) == 1

    def test_clear_all(self, store):
        store.reconcile([make_tree("a"), make_tree("b")])
        store.reconcile([])
        assert len(store) == 0
        assert list(store) == []


class TestMalformedDescriptors:
    """Bad host input is clamped, not propagated."""

    def test_mapping_is_clamped(self, store):
        store.reconcile(
            [
                {
                    "id": "m",
                    "fileName": "m.txt",
                    "fileSize": -5,
                    "fileType": "unknown",
                    "x": "12.5",
                    "y": 300,
                    "targetGrowth": 9,
                    "maxGrowth": 5,
                    "branches": 0,
                    "seed": 3,
                }
            ]
        )
        tree = store.get("m")
        assert tree.target_growth == 5.0
        assert tree.branches == 1
        assert tree.file_size == 0
        assert tree.category is Category.OTHER
        assert tree.x == 12.5

    def test_mapping_without_id_is_skipped(self, store):
        store.reconcile([{"x": 1.0}, make_tree("a")])
        assert store.ids() == ["a"]

    def test_lowered_target_caps_growth(self, store):
        store.reconcile([make_tree(target_growth=2.0)])
        for _ in range(300):
            store.advance()
        store.reconcile([make_tree(target_growth=0.5)])
        assert store.get("a").current_growth == 0.5

    def test_non_finite_fields_are_neutralised(self, store):
        nan, inf = float("nan"), float("inf")
        store.reconcile(
            [
                replace(make_tree("b"), branches=nan),
                replace(make_tree("s"), seed=inf),
                replace(make_tree("t"), target_growth=nan),
                replace(make_tree("p"), x=nan, y=-inf),
            ]
        )
        assert store.ids() == ["b", "s", "t", "p"]
        assert store.get("b").branches == 1
        assert len(store.get("b").particles) == 2
        assert store.get("s").seed == 0.0
        assert store.get("t").target_growth == 0.0
        assert (store.get("p").x, store.get("p").y) == (0.0, 0.0)

    def test_bad_entry_does_not_block_the_rest(self, store):
        store.reconcile([make_tree("old")])
        store.reconcile(
            [
                make_tree("good"),
                replace(make_tree("bad"), branches=float("nan"), seed=float("inf")),
                make_tree("late", x=300.0),
            ]
        )
        assert store.ids() == ["good", "bad", "late"]
        assert "old" not in store
        for _ in range(5):
            store.advance()
        assert store.get("good").current_growth > 0.0

    def test_non_numeric_fields_fall_back(self, store):
        store.reconcile([replace(make_tree("w"), branches="many", file_size="big", max_growth=None)])
        tree = store.get("w")
        assert tree.branches == 1
        assert tree.file_size == 0
        assert tree.max_growth == 0.0
        assert tree.target_growth == 0.0


class TestAdvance:
    """Per-frame animation update."""

    def test_growth_converges_without_overshoot(self, store):
        store.reconcile([make_tree(target_growth=2.5)])
        tree = store.get("a")
        previous = 0.0
        for _ in range(2000):
            store.advance()
            assert previous <= tree.current_growth <= tree.target_growth
            previous = tree.current_growth
        assert tree.target_growth - tree.current_growth < 1e-6

    def test_wiggle_decays_to_zero(self, store):
        store.reconcile([make_tree(target_growth=1.0)])
        store.reconcile([make_tree(target_growth=1.5)])
        tree = store.get("a")
        for _ in range(1000):
            store.advance()
        assert tree.wiggle_intensity == 0.0

    def test_sway_never_stops(self, store):
        store.reconcile([make_tree()])
        tree = store.get("a")
        start = tree.sway_phase
        for _ in range(100):
            store.advance()
        assert tree.sway_phase == pytest.approx(start + 1.0)

    def test_canopy_particles_orbit(self, store):
        store.reconcile([make_tree()])
        tree = store.get("a")
        angles = [p.angle for p in tree.particles]
        store.advance()
        for particle, angle in zip(tree.particles, angles):
            assert particle.angle == pytest.approx(angle + particle.speed)
