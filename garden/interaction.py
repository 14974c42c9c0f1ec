"""Pointer and touch gestures over the animated trees.

:class:`GestureController` is a small state machine independent of any
windowing toolkit: the view translates its native mouse and touch events into
``press`` / ``move`` / ``release`` calls.  A gesture that travels further than
the input's threshold becomes a drag and reports a move; anything shorter is a
tap and reports a selection.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Callable, Mapping, Optional

from .model import AnimatedTree, Tree, coerce_float
from .store import AnimatedTreeStore

logger = logging.getLogger(__name__)

__all__ = ["GestureController", "GestureState", "InputKind", "hit_test"]


class InputKind(str, Enum):
    POINTER = "pointer"
    TOUCH = "touch"


class GestureState(str, Enum):
    IDLE = "idle"
    PRESSED = "pressed"
    DRAGGING = "dragging"


def hit_test(
    store: AnimatedTreeStore,
    x: float,
    y: float,
    radius: float,
    height_per_growth: float = 40.0,
) -> Optional[AnimatedTree]:
    """Return the topmost tree whose trunk capsule contains ``(x, y)``."""

    for tree in reversed(list(store)):
        top = tree.y - tree.current_growth * height_per_growth
        if abs(x - tree.x) < radius and top <= y <= tree.y:
            return tree
    return None


class GestureController:
    def __init__(
        self,
        store: AnimatedTreeStore,
        cfg: Mapping[str, object],
        on_select: Optional[Callable[[Tree], None]] = None,
        on_move: Optional[Callable[[str, float], None]] = None,
    ) -> None:
        self.store = store
        self.cfg = cfg
        self.on_select = on_select
        self.on_move = on_move
        self.state = GestureState.IDLE
        self._kind = InputKind.POINTER
        self._tree_id: Optional[str] = None
        self._snapshot: Optional[Tree] = None
        self._press_x = 0.0
        self._press_y = 0.0
        self._origin_x = 0.0

    @property
    def captured_id(self) -> Optional[str]:
        return self._tree_id

    def threshold(self, kind: InputKind) -> float:
        if kind is InputKind.TOUCH:
            return coerce_float(self.cfg.get("touchThreshold"), 10.0)
        return coerce_float(self.cfg.get("pointerThreshold"), 5.0)

    def radius(self, kind: InputKind) -> float:
        if kind is InputKind.TOUCH:
            return coerce_float(self.cfg.get("touchRadius"), 28.0)
        return coerce_float(self.cfg.get("pointerRadius"), 20.0)

    def tree_at(self, x: float, y: float, kind: InputKind = InputKind.POINTER) -> Optional[AnimatedTree]:
        return hit_test(
            self.store,
            x,
            y,
            self.radius(kind),
            coerce_float(self.cfg.get("trunkHeightPerGrowth"), 40.0),
        )

    def hover(self, x: float, y: float) -> bool:
        """Return True when a press at ``(x, y)`` would grab a tree."""

        if self.state is not GestureState.IDLE:
            return self._tree_id is not None
        return self.tree_at(x, y) is not None

    def press(self, x: float, y: float, kind: InputKind = InputKind.POINTER) -> bool:
        """Start a gesture; returns True when a tree was captured."""

        self.cancel()
        tree = self.tree_at(x, y, kind)
        if tree is None:
            return False
        self.state = GestureState.PRESSED
        self._kind = kind
        self._tree_id = tree.id
        self._snapshot = tree.snapshot()
        self._press_x = x
        self._press_y = y
        self._origin_x = tree.x
        return True

    def move(self, x: float, y: float) -> None:
        if self._tree_id is None:
            return
        dx = x - self._press_x
        if self.state is GestureState.PRESSED and math.hypot(dx, y - self._press_y) > self.threshold(self._kind):
            self.state = GestureState.DRAGGING
        tree = self.store.get(self._tree_id)
        if tree is not None:
            tree.x = self._origin_x + dx

    def release(self, x: float, y: float) -> Optional[str]:
        """Finish the gesture; returns ``"move"``, ``"select"`` or None."""

        tree_id = self._tree_id
        snapshot = self._snapshot
        kind = self._kind
        if tree_id is None or snapshot is None:
            self.cancel()
            return None
        self.move(x, y)
        distance = math.hypot(x - self._press_x, y - self._press_y)
        self.cancel()

        if distance > self.threshold(kind):
            tree = self.store.get(tree_id)
            if tree is None:
                logger.debug("Tree %s vanished during drag", tree_id)
                return None
            logger.debug("Tree %s moved to x=%.1f", tree_id, tree.x)
            if self.on_move is not None:
                self.on_move(tree_id, tree.x)
            return "move"

        tree = self.store.get(tree_id)
        selected = tree.snapshot() if tree is not None else snapshot
        if self.on_select is not None:
            self.on_select(selected)
        return "select"

    def cancel(self) -> None:
        self.state = GestureState.IDLE
        self._tree_id = None
        self._snapshot = None
