"""Identity-keyed store of animated trees.

The host hands over its full list of tree descriptors every time something
changes.  :meth:`AnimatedTreeStore.reconcile` diffs that list by identity
against the animation state retained here, so growth, sway and canopy history
survive every update while removed trees disappear on the next pass.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from .model import AnimatedTree, Tree, coerce_float
from .particles import advance_canopy, grow_particles, seeded_particles

logger = logging.getLogger(__name__)

__all__ = ["AnimatedTreeStore"]

TreeLike = Union[Tree, Mapping[str, object]]


def _as_tree(item: TreeLike) -> Optional[Tree]:
    if isinstance(item, Tree):
        return item.sanitized()
    if isinstance(item, Mapping):
        return Tree.from_mapping(item)
    logger.warning("Ignoring unsupported tree descriptor %r", item)
    return None


class AnimatedTreeStore:
    """Owns every :class:`AnimatedTree`, in the order trees were planted."""

    def __init__(
        self,
        animation_cfg: Mapping[str, object],
        canopy_cfg: Mapping[str, object],
        rng: Callable[[], float] = random.random,
    ) -> None:
        self.animation_cfg = animation_cfg
        self.canopy_cfg = canopy_cfg
        self._rng = rng
        self._trees: Dict[str, AnimatedTree] = {}

    # ------------------------------------------------------------------ access
    def __len__(self) -> int:
        return len(self._trees)

    def __iter__(self) -> Iterator[AnimatedTree]:
        return iter(list(self._trees.values()))

    def __contains__(self, tree_id: object) -> bool:
        return tree_id in self._trees

    def get(self, tree_id: str) -> Optional[AnimatedTree]:
        return self._trees.get(tree_id)

    def ids(self) -> List[str]:
        return list(self._trees)

    def clear(self) -> None:
        self._trees.clear()

    # ---------------------------------------------------------------- reconcile
    def reconcile(self, trees: Iterable[TreeLike]) -> None:
        """Bring the store in line with the host's current tree list.

        A descriptor that cannot be converted or planted is skipped with a
        warning; the rest of the list is still applied.
        """

        incoming: Dict[str, Tree] = {}
        for item in trees:
            try:
                tree = _as_tree(item)
            except (TypeError, ValueError, OverflowError) as exc:
                logger.warning("Skipping malformed tree descriptor %r: %s", item, exc)
                continue
            if tree is not None:
                incoming[tree.id] = tree

        removed = [tree_id for tree_id in self._trees if tree_id not in incoming]
        for tree_id in removed:
            del self._trees[tree_id]

        added = 0
        for tree_id, tree in incoming.items():
            existing = self._trees.get(tree_id)
            try:
                if existing is None:
                    self._trees[tree_id] = self._plant(tree)
                    added += 1
                else:
                    self._update(existing, tree)
            except (TypeError, ValueError, OverflowError) as exc:
                logger.warning("Skipping tree %r that could not be animated: %s", tree_id, exc)

        if added or removed:
            logger.debug(
                "Reconciled trees: %d added, %d removed, %d total", added, len(removed), len(self._trees)
            )

    def _plant(self, tree: Tree) -> AnimatedTree:
        cfg = self.animation_cfg
        rng = self._rng
        per_branch = int(coerce_float(self.canopy_cfg.get("perBranch"), 2.0))
        return AnimatedTree.from_tree(
            tree,
            growth_rate=coerce_float(cfg.get("growthRateMin"), 0.015)
            + rng() * coerce_float(cfg.get("growthRateSpan"), 0.01),
            sway_phase=rng() * math.pi * 2.0,
            sway_intensity=coerce_float(cfg.get("swayIntensityMin"), 0.01)
            + rng() * coerce_float(cfg.get("swayIntensitySpan"), 0.02),
            particles=seeded_particles(tree.seed, tree.branches * per_branch, self.canopy_cfg),
        )

    def _update(self, existing: AnimatedTree, tree: Tree) -> None:
        watered = tree.target_growth > existing.target_growth

        grow_particles(existing, tree.branches, self.canopy_cfg, self._rng)

        # A dragged position is kept until the host reports a new one.
        if tree.x != existing.external_x:
            existing.x = tree.x
            existing.external_x = tree.x
        existing.y = tree.y
        existing.file_name = tree.file_name
        existing.file_size = tree.file_size
        existing.category = tree.category
        existing.is_verified = tree.is_verified
        existing.max_growth = tree.max_growth
        existing.target_growth = tree.target_growth
        existing.branches = tree.branches
        if existing.current_growth > existing.target_growth:
            existing.current_growth = existing.target_growth

        if watered:
            existing.wiggle_intensity = 1.0
            existing.wiggle_phase = self._rng() * math.pi * 2.0

    # ------------------------------------------------------------------ frames
    def advance(self) -> None:
        """Advance growth, wiggle, sway and canopy orbits by one frame."""

        cfg = self.animation_cfg
        wiggle_decay = coerce_float(cfg.get("wiggleDecay"), 0.98)
        wiggle_step = coerce_float(cfg.get("wigglePhaseStep"), 0.1)
        wiggle_floor = coerce_float(cfg.get("wiggleFloor"), 1e-3)
        sway_step = coerce_float(cfg.get("swayPhaseStep"), 0.01)
        for tree in self._trees.values():
            if tree.current_growth < tree.target_growth:
                tree.current_growth += (tree.target_growth - tree.current_growth) * tree.growth_rate
                tree.current_growth = min(tree.current_growth, tree.target_growth)
            if tree.wiggle_intensity > 0.0:
                tree.wiggle_intensity *= wiggle_decay
                tree.wiggle_phase += wiggle_step
                if tree.wiggle_intensity < wiggle_floor:
                    tree.wiggle_intensity = 0.0
            tree.sway_phase += sway_step
            advance_canopy(tree)
