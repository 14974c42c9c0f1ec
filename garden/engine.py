"""Garden animation engine.

:class:`GardenEngine` owns everything that evolves from frame to frame: the
animated tree store, the splash particles and the gesture controller.  It has
no dependency on Qt; the view widget drives it by calling :meth:`advance` once
per display frame and :meth:`build_frame` whenever it repaints.
"""

from __future__ import annotations

import copy
import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .control.config import DEFAULTS
from .geometry import RGBA, BranchGenerator, TreeGeometry, parse_color
from .interaction import GestureController, InputKind
from .model import Tree, coerce_float
from .particles import WaterSplashSystem, canopy_positions
from .store import AnimatedTreeStore, TreeLike

logger = logging.getLogger(__name__)

__all__ = ["Dot", "Frame", "GardenEngine"]


@dataclass(frozen=True)
class Dot:
    x: float
    y: float
    size: float
    alpha: float = 1.0


@dataclass
class Frame:
    """Everything needed to paint one frame, in drawing order."""

    width: int
    height: int
    trees: List[TreeGeometry] = field(default_factory=list)
    canopy: List[Dot] = field(default_factory=list)
    canopy_color: RGBA = (80, 254, 213, 0.8)
    canopy_blur: float = 8.0
    splash: List[Dot] = field(default_factory=list)
    splash_color: RGBA = (80, 254, 213, 0.9)
    splash_blur: float = 10.0

    @property
    def is_empty(self) -> bool:
        return not (self.trees or self.canopy or self.splash)


def _default_state() -> Dict[str, dict]:
    return copy.deepcopy(DEFAULTS)


class GardenEngine:
    """Keeps the animated garden in sync with the host and steps it per frame."""

    def __init__(
        self,
        on_select: Optional[Callable[[Tree], None]] = None,
        on_move: Optional[Callable[[str, float], None]] = None,
        rng: Callable[[], float] = random.random,
    ) -> None:
        self.state: Dict[str, dict] = _default_state()
        self.store = AnimatedTreeStore(self.state["animation"], self.state["canopy"], rng)
        self.splash = WaterSplashSystem(self.state["splash"], rng)
        self.generator = BranchGenerator(self.state["geometry"])
        self.gestures = GestureController(self.store, self.state["interaction"], on_select, on_move)
        self._width = 0
        self._height = 0
        self._water_event = 0
        self.frame_count = 0

    # ------------------------------------------------------------------ config
    def merge_state(self, payload: Mapping[str, object]) -> None:
        for key, value in payload.items():
            if key not in self.state or not isinstance(self.state[key], dict):
                self.state[key] = value  # type: ignore[assignment]
                continue
            if not isinstance(value, Mapping):
                logger.warning("Ignoring non-mapping value for section %r", key)
                continue
            # update in place, the subsystems hold references to these dicts
            self.state[key].update(value)

    def set_params(self, payload: Mapping[str, object]) -> None:
        if not isinstance(payload, Mapping):
            return
        self.merge_state(payload)

    def setting(self, section: str, key: str, fallback: float) -> float:
        values = self.state.get(section, {})
        if not isinstance(values, Mapping):
            return fallback
        return coerce_float(values.get(key), fallback)

    # ------------------------------------------------------------------ inputs
    @property
    def size(self) -> Tuple[int, int]:
        return self._width, self._height

    @property
    def water_event(self) -> int:
        return self._water_event

    @property
    def has_surface(self) -> bool:
        return self._width > 0 and self._height > 0

    def resize(self, width: int, height: int) -> None:
        """Record the drawing surface size; animation state is untouched."""

        self._width = max(0, int(width))
        self._height = max(0, int(height))

    def set_trees(self, trees: Iterable[TreeLike]) -> None:
        self.store.reconcile(trees)
        if self.gestures.captured_id is not None and self.gestures.captured_id not in self.store:
            self.gestures.cancel()

    def set_water_event(self, event_id: int) -> int:
        """React to the host's water counter; returns the number of bursts spawned."""

        event_id = int(event_id)
        delta = event_id - self._water_event
        self._water_event = event_id
        if delta <= 0:
            return 0
        bursts = 0
        for _ in range(delta):
            if self.splash.burst(self._width, self._height):
                bursts += 1
        return bursts

    # gesture passthroughs used by the view
    def press(self, x: float, y: float, kind: InputKind = InputKind.POINTER) -> bool:
        return self.gestures.press(x, y, kind)

    def drag(self, x: float, y: float) -> None:
        self.gestures.move(x, y)

    def release(self, x: float, y: float) -> Optional[str]:
        return self.gestures.release(x, y)

    def hover(self, x: float, y: float) -> bool:
        return self.gestures.hover(x, y)

    # ------------------------------------------------------------------ frames
    def advance(self) -> None:
        """Advance every animation by one frame."""

        self.store.advance()
        self.splash.advance()
        self.frame_count += 1

    def build_frame(self, width: Optional[int] = None, height: Optional[int] = None) -> Frame:
        """Regenerate all primitives for the current animation state."""

        if width is not None and height is not None:
            self.resize(width, height)
        frame = Frame(width=self._width, height=self._height)
        if not self.has_surface:
            return frame

        canopy_cfg = self.state["canopy"]
        splash_cfg = self.state["splash"]
        trunk_per_growth = self.setting("geometry", "trunkLengthPerGrowth", 30.0)
        frame.canopy_color = parse_color(canopy_cfg.get("color"), frame.canopy_color)
        frame.canopy_blur = self.setting("canopy", "glowBlur", frame.canopy_blur)
        frame.splash_color = parse_color(splash_cfg.get("color"), frame.splash_color)
        frame.splash_blur = self.setting("splash", "glowBlur", frame.splash_blur)

        for tree in self.store:
            frame.trees.append(self.generator.generate(tree))
            for x, y, size in canopy_positions(tree, canopy_cfg, trunk_per_growth):
                frame.canopy.append(Dot(x, y, size))
        for particle in self.splash:
            frame.splash.append(Dot(particle.x, particle.y, particle.size, particle.opacity))
        return frame

    def step(self, width: Optional[int] = None, height: Optional[int] = None) -> Frame:
        """Advance one frame and return what to draw, like a host loop would."""

        if width is not None and height is not None:
            self.resize(width, height)
        self.advance()
        return self.build_frame()

    def reset_visual_state(self) -> None:
        """Clear transient visual elements while keeping the trees."""

        self.splash.clear()
        self.gestures.cancel()
