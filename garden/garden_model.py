"""Host-side owner of the tree list.

``GardenModel`` plays the part of the application state around the view: it
plants trees for files, waters and clears the garden and commits the moves
reported by the view.  Every change replaces the whole list and is announced
through ``treesChanged`` so the view can reconcile by identity.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from PyQt5.QtCore import QObject, pyqtSignal, pyqtSlot

from .intake import GardenStats, move_tree, new_tree_for_file, water_trees
from .model import Tree

logger = logging.getLogger(__name__)

__all__ = ["GardenModel"]


class GardenModel(QObject):
    treesChanged = pyqtSignal(list)
    waterEvent = pyqtSignal(int)
    statsChanged = pyqtSignal(object)

    def __init__(self, parent: Optional[QObject] = None, rng: Callable[[], float] = random.random) -> None:
        super().__init__(parent)
        self._rng = rng
        self._trees: List[Tree] = []
        self._water_event = 0
        self._surface: Tuple[int, int] = (0, 0)

    @property
    def trees(self) -> List[Tree]:
        return list(self._trees)

    @property
    def water_event(self) -> int:
        return self._water_event

    @property
    def stats(self) -> GardenStats:
        return GardenStats.from_trees(self._trees)

    def set_surface_size(self, width: int, height: int) -> None:
        self._surface = (int(width), int(height))

    def _publish(self, trees: List[Tree]) -> None:
        self._trees = trees
        self.treesChanged.emit(list(trees))
        self.statsChanged.emit(self.stats)

    def add_files(self, files: Iterable[Tuple[str, int]]) -> List[Tree]:
        """Plant one tree per ``(name, size)`` pair; ignored until the surface has a size."""

        width, height = self._surface
        planted: List[Tree] = []
        for name, size in files:
            tree = new_tree_for_file(name, size, width, height, self._rng)
            if tree is None:
                logger.warning("Garden surface has no size yet, skipping %s", name)
                continue
            planted.append(tree)
        if planted:
            logger.info("Planted %d tree(s)", len(planted))
            self._publish(self._trees + planted)
        return planted

    def add_paths(self, paths: Iterable[str]) -> List[Tree]:
        entries = []
        for raw in paths:
            path = Path(raw)
            try:
                size = path.stat().st_size
            except OSError as exc:
                logger.warning("Cannot read %s: %s", path, exc)
                continue
            entries.append((path.name, size))
        return self.add_files(entries)

    @pyqtSlot()
    def water(self) -> None:
        self._publish(water_trees(self._trees, self._rng))
        self._water_event += 1
        self.waterEvent.emit(self._water_event)

    @pyqtSlot()
    def clear(self) -> None:
        logger.info("Clearing %d tree(s)", len(self._trees))
        self._publish([])

    @pyqtSlot(str, float)
    def move(self, tree_id: str, x: float) -> None:
        self._publish(move_tree(self._trees, tree_id, x))
