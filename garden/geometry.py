"""Recursive branch geometry for garden trees.

The generator walks a tree from its trunk upwards and emits backend-neutral
primitives: :class:`Stroke` segments for branches and :class:`Blossom` marks at
branch tips.  It is called every frame with the live animation state, so
growth, wiggle and sway read as continuous motion.  Every pseudo-random choice
is derived from the tree seed and the position of the branch in the
recursion, never from frame-varying values, which keeps a tree's shape stable
from one frame to the next.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

from .model import AnimatedTree, Category, clamp01, coerce_float
from .prng import seeded_value

__all__ = [
    "Blossom",
    "BlossomShape",
    "BranchGenerator",
    "CategoryStyle",
    "Motion",
    "RGBA",
    "STYLES",
    "Stroke",
    "TreeGeometry",
    "parse_color",
    "style_for",
]

RGBA = Tuple[int, int, int, float]
Point = Tuple[float, float]

_RGBA_RE = re.compile(r"rgba?\(\s*([^)]*)\)", re.IGNORECASE)


def _hex_to_rgb(value: str) -> Tuple[int, int, int]:
    value = value.strip().lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    if len(value) != 6:
        raise ValueError(f"invalid hex colour: {value!r}")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def parse_color(value: object, default: RGBA = (255, 255, 255, 1.0)) -> RGBA:
    """Parse ``#rrggbb``, ``#rgb`` or ``rgba(r, g, b, a)`` into an RGBA tuple."""

    if isinstance(value, tuple) and len(value) == 4:
        r, g, b, a = value
        return int(r), int(g), int(b), clamp01(float(a))
    if not isinstance(value, str):
        return default
    text = value.strip()
    try:
        if text.startswith("#"):
            r, g, b = _hex_to_rgb(text)
            return r, g, b, 1.0
        match = _RGBA_RE.fullmatch(text)
        if match:
            parts = [p.strip() for p in match.group(1).split(",")]
            if len(parts) in (3, 4):
                alpha = float(parts[3]) if len(parts) == 4 else 1.0
                return int(float(parts[0])), int(float(parts[1])), int(float(parts[2])), clamp01(alpha)
    except ValueError:
        return default
    return default


class BlossomShape(str, Enum):
    CIRCLE = "circle"
    FLOWER = "flower"
    SQUARE = "square"


@dataclass(frozen=True)
class CategoryStyle:
    branch_color: RGBA
    blossom_color: RGBA
    blossom_shadow: RGBA
    use_curves: bool = True
    bend_scale: float = 1.0
    angle_variance: float = 1.2
    blossom_shape: BlossomShape = BlossomShape.CIRCLE


STYLES: Dict[Category, CategoryStyle] = {
    Category.OTHER: CategoryStyle(
        branch_color=(80, 254, 213, 0.7),
        blossom_color=(255, 106, 90, 0.8),
        blossom_shadow=(255, 106, 90, 1.0),
    ),
    Category.IMAGE: CategoryStyle(
        branch_color=(122, 92, 255, 0.8),
        blossom_color=(255, 180, 90, 0.9),
        blossom_shadow=(255, 180, 90, 1.0),
        blossom_shape=BlossomShape.FLOWER,
    ),
    Category.TEXT: CategoryStyle(
        branch_color=(200, 220, 255, 0.7),
        blossom_color=(220, 230, 255, 0.9),
        blossom_shadow=(220, 236, 255, 1.0),
        bend_scale=0.2,
        angle_variance=0.8,
    ),
    Category.CODE: CategoryStyle(
        branch_color=(80, 220, 254, 0.8),
        blossom_color=(80, 254, 213, 1.0),
        blossom_shadow=(80, 254, 213, 1.0),
        use_curves=False,
        angle_variance=1.57,
        blossom_shape=BlossomShape.SQUARE,
    ),
    Category.MEDIA: CategoryStyle(
        branch_color=(255, 106, 90, 0.7),
        blossom_color=(255, 136, 120, 0.9),
        blossom_shadow=(255, 136, 120, 1.0),
        bend_scale=1.5,
        angle_variance=1.5,
    ),
}


def style_for(category: object) -> CategoryStyle:
    return STYLES.get(Category.parse(category), STYLES[Category.OTHER])


@dataclass(frozen=True)
class Motion:
    """Angular perturbation state of one tree for the current frame."""

    wiggle_intensity: float = 0.0
    wiggle_phase: float = 0.0
    sway_intensity: float = 0.0
    sway_phase: float = 0.0


@dataclass(frozen=True)
class Stroke:
    start: Point
    end: Point
    width: float
    color: RGBA
    # quadratic curve control point, None for straight segments
    control: Optional[Point] = None
    depth: int = 0


@dataclass(frozen=True)
class Blossom:
    center: Point
    size: float
    shape: BlossomShape
    color: RGBA
    shadow: RGBA
    blur: float


@dataclass
class TreeGeometry:
    tree_id: str
    strokes: List[Stroke] = field(default_factory=list)
    blossoms: List[Blossom] = field(default_factory=list)
    glow: Optional[RGBA] = None
    glow_blur: float = 0.0


class BranchGenerator:
    """Turns the animation state of a tree into stroke and blossom primitives."""

    def __init__(self, cfg: Mapping[str, object]) -> None:
        self.cfg = cfg

    def _f(self, key: str, fallback: float) -> float:
        return coerce_float(self.cfg.get(key), fallback)

    def depth_budget(self, growth: float) -> int:
        budget = int(math.floor(max(0.0, growth) * self._f("depthPerGrowth", 1.5))) + 1
        return min(budget, int(self._f("maxDepth", 10.0)))

    def trunk_length(self, growth: float) -> float:
        return max(0.0, growth) * self._f("trunkLengthPerGrowth", 30.0)

    def generate(self, tree: AnimatedTree) -> TreeGeometry:
        geometry = TreeGeometry(tree_id=tree.id)
        if tree.is_verified:
            geometry.glow = parse_color(self.cfg.get("glowColor"), (80, 254, 213, 0.7))
            geometry.glow_blur = self._f("glowBlur", 15.0)
        motion = Motion(
            wiggle_intensity=tree.wiggle_intensity,
            wiggle_phase=tree.wiggle_phase,
            sway_intensity=tree.sway_intensity,
            sway_phase=tree.sway_phase,
        )
        self.draw_branch(
            geometry,
            (tree.x, tree.y),
            -math.pi / 2.0,
            self.trunk_length(tree.current_growth),
            0,
            self.depth_budget(tree.current_growth),
            tree.seed,
            tree.branches,
            motion,
            style_for(tree.category),
        )
        return geometry

    def draw_branch(
        self,
        out: TreeGeometry,
        origin: Point,
        angle: float,
        length: float,
        depth: int,
        max_depth: int,
        seed: float,
        fan_out: int,
        motion: Motion,
        style: CategoryStyle,
        path: int = 0,
    ) -> None:
        x, y = origin
        if depth > max_depth or length < self._f("minBranchLength", 2.0):
            if length > self._f("minBlossomLength", 1.0):
                out.blossoms.append(
                    Blossom(
                        center=origin,
                        size=self._f("blossomBase", 1.5) + motion.wiggle_intensity * self._f("blossomWiggle", 1.5),
                        shape=style.blossom_shape,
                        color=style.blossom_color,
                        shadow=style.blossom_shadow,
                        blur=self._f("blossomBlur", 10.0),
                    )
                )
            return

        wiggle = 0.0
        if motion.wiggle_intensity > 0.0:
            wiggle = (
                math.sin(motion.wiggle_phase + depth * self._f("wiggleDepthPhase", 0.5))
                * self._f("wiggleAngle", 0.2)
                * motion.wiggle_intensity
            )
        sway = math.sin(motion.sway_phase + depth * self._f("swayDepthPhase", 0.3)) * motion.sway_intensity
        final_angle = angle + wiggle + sway
        end = (x + math.cos(final_angle) * length, y + math.sin(final_angle) * length)

        control: Optional[Point] = None
        if style.use_curves:
            bend = (seeded_value(seed, depth, path, 0) * 2.0 - 1.0) * style.bend_scale
            offset = length * self._f("curveOffset", 0.4) * bend
            control = (
                (x + end[0]) / 2.0 + math.cos(final_angle + math.pi / 2.0) * offset,
                (y + end[1]) / 2.0 + math.sin(final_angle + math.pi / 2.0) * offset,
            )
        width = max(self._f("minWidth", 0.5), (max_depth - depth + 1) * self._f("widthPerLevel", 0.8))
        out.strokes.append(
            Stroke(start=origin, end=end, width=width, color=style.branch_color, control=control, depth=depth)
        )

        if depth == 0:
            children = max(1, fan_out)
        else:
            children = int(math.floor(seeded_value(seed, depth, path, 2) * 1.5)) + 1
        reduction = self._f("lengthReductionMin", 0.65) + seeded_value(seed, depth, 0, 1) * self._f(
            "lengthReductionSpan", 0.2
        )
        stride = max(1, fan_out) + 1
        for i in range(children):
            child_path = path * stride + i + 1
            deviation = (seeded_value(seed, depth, child_path, 3) - 0.5) * style.angle_variance
            self.draw_branch(
                out,
                end,
                final_angle + deviation,
                length * reduction,
                depth + 1,
                max_depth,
                seed,
                fan_out,
                motion,
                style,
                child_path,
            )
