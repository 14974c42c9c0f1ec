"""Data structures shared by the garden engine.

``Tree`` is the immutable descriptor supplied by the host application.
``AnimatedTree`` extends it with the per-frame animation state owned by the
:class:`~garden.store.AnimatedTreeStore`.  Particles live inside the tree that
owns them; splash particles belong to the global splash system.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Mapping, Optional

logger = logging.getLogger(__name__)

__all__ = [
    "AnimatedTree",
    "Category",
    "Particle",
    "Tree",
    "WaterParticle",
    "clamp",
    "clamp01",
    "coerce_float",
]


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def coerce_float(value: object, default: float = 0.0) -> float:
    """Return ``value`` converted to ``float`` when possible."""

    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        result = float(value)
    else:
        try:
            result = float(str(value))
        except (TypeError, ValueError):
            return default
    if result != result or result in (float("inf"), float("-inf")):
        return default
    return result


class Category(str, Enum):
    IMAGE = "image"
    TEXT = "text"
    CODE = "code"
    MEDIA = "media"
    OTHER = "other"

    @classmethod
    def parse(cls, value: object) -> "Category":
        """Map a free-form tag to a category, falling back to ``OTHER``."""

        if isinstance(value, Category):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class Tree:
    """Descriptor of one ingested item as seen by the engine."""

    id: str
    file_name: str
    file_size: int
    category: Category
    x: float
    y: float
    target_growth: float
    max_growth: float
    is_verified: bool
    seed: float
    branches: int

    def sanitized(self) -> "Tree":
        """Return a copy clamped to the descriptor invariants.

        Non-finite or non-numeric fields fall back to neutral values: a
        missing target growth becomes 0, a missing seed or coordinate 0.
        """

        max_growth = max(0.0, coerce_float(self.max_growth, 0.0))
        target = clamp(coerce_float(self.target_growth, 0.0), 0.0, max_growth)
        branches = max(1, int(coerce_float(self.branches, 1.0)))
        size = max(0, int(coerce_float(self.file_size, 0.0)))
        x = coerce_float(self.x, 0.0)
        y = coerce_float(self.y, 0.0)
        seed = coerce_float(self.seed, 0.0)
        category = Category.parse(self.category)
        if (
            max_growth != self.max_growth
            or target != self.target_growth
            or branches != self.branches
            or size != self.file_size
            or (x, y, seed) != (self.x, self.y, self.seed)
        ):
            logger.warning("Clamped malformed tree descriptor %r", self.id)
        return replace(
            self,
            id=str(self.id),
            file_name=str(self.file_name),
            max_growth=max_growth,
            target_growth=target,
            branches=branches,
            file_size=size,
            x=x,
            y=y,
            seed=seed,
            category=category,
            is_verified=bool(self.is_verified),
        )

    @classmethod
    def from_mapping(cls, payload: Mapping[str, object]) -> Optional["Tree"]:
        """Build a sanitized descriptor from a loosely typed mapping.

        Both ``snake_case`` and the host's ``camelCase`` keys are accepted.
        Returns ``None`` when the mapping carries no identity.
        """

        def _get(*keys: str) -> object:
            for key in keys:
                if key in payload:
                    return payload[key]
            return None

        ident = _get("id")
        if ident is None or str(ident) == "":
            logger.warning("Ignoring tree descriptor without id: %r", dict(payload))
            return None
        tree = cls(
            id=str(ident),
            file_name=str(_get("file_name", "fileName") or ""),
            file_size=int(coerce_float(_get("file_size", "fileSize"), 0.0)),
            category=Category.parse(_get("category", "fileType")),
            x=coerce_float(_get("x"), 0.0),
            y=coerce_float(_get("y"), 0.0),
            target_growth=coerce_float(_get("target_growth", "targetGrowth"), 0.0),
            max_growth=coerce_float(_get("max_growth", "maxGrowth"), 0.0),
            is_verified=bool(_get("is_verified", "isVerified")),
            seed=coerce_float(_get("seed"), 0.0),
            branches=int(coerce_float(_get("branches"), 1.0)),
        )
        return tree.sanitized()


@dataclass
class Particle:
    """Decorative point orbiting a tree canopy."""

    angle: float
    radius: float
    speed: float
    size: float


@dataclass
class WaterParticle:
    x: float
    y: float
    vx: float
    vy: float
    life: float
    max_life: float
    size: float

    @property
    def opacity(self) -> float:
        if self.max_life <= 0:
            return 0.0
        return clamp01(self.life / self.max_life)


@dataclass
class AnimatedTree:
    """Tree descriptor plus the animation state evolving every frame."""

    id: str
    file_name: str
    file_size: int
    category: Category
    x: float
    y: float
    target_growth: float
    max_growth: float
    is_verified: bool
    seed: float
    branches: int
    growth_rate: float
    sway_phase: float
    sway_intensity: float
    current_growth: float = 0.0
    wiggle_intensity: float = 0.0
    wiggle_phase: float = 0.0
    particles: List[Particle] = field(default_factory=list)
    # last horizontal position received from the host, see AnimatedTreeStore
    external_x: float = 0.0

    @classmethod
    def from_tree(
        cls,
        tree: Tree,
        *,
        growth_rate: float,
        sway_phase: float,
        sway_intensity: float,
        particles: List[Particle],
    ) -> "AnimatedTree":
        return cls(
            id=tree.id,
            file_name=tree.file_name,
            file_size=tree.file_size,
            category=tree.category,
            x=tree.x,
            y=tree.y,
            target_growth=tree.target_growth,
            max_growth=tree.max_growth,
            is_verified=tree.is_verified,
            seed=tree.seed,
            branches=tree.branches,
            growth_rate=growth_rate,
            sway_phase=sway_phase,
            sway_intensity=sway_intensity,
            particles=particles,
            external_x=tree.x,
        )

    def snapshot(self) -> Tree:
        """Return the descriptor view of this tree at its current position."""

        return Tree(
            id=self.id,
            file_name=self.file_name,
            file_size=self.file_size,
            category=self.category,
            x=self.x,
            y=self.y,
            target_growth=self.target_growth,
            max_growth=self.max_growth,
            is_verified=self.is_verified,
            seed=self.seed,
            branches=self.branches,
        )
