"""Canopy and splash particle systems.

Canopy particles orbit the upper part of a tree for as long as the tree
exists.  Splash particles are spawned in bursts when the garden is watered and
fall under gravity until their lifetime runs out.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Callable, Iterator, List, Mapping, Tuple

from .model import AnimatedTree, Particle, WaterParticle, coerce_float
from .prng import seeded_random

logger = logging.getLogger(__name__)

__all__ = [
    "WaterSplashSystem",
    "advance_canopy",
    "canopy_center",
    "canopy_positions",
    "grow_particles",
    "random_particles",
    "seeded_particles",
]

RandomSource = Callable[[], float]


def _make_particle(u_angle: float, u_radius: float, u_speed: float, u_size: float, cfg: Mapping[str, object]) -> Particle:
    return Particle(
        angle=u_angle * math.pi * 2.0,
        radius=coerce_float(cfg.get("radiusMin"), 15.0) + u_radius * coerce_float(cfg.get("radiusSpan"), 15.0),
        speed=(u_speed - 0.5) * coerce_float(cfg.get("speedSpan"), 0.02),
        size=coerce_float(cfg.get("sizeMin"), 1.0) + u_size * coerce_float(cfg.get("sizeSpan"), 1.5),
    )


def seeded_particles(seed: float, count: int, cfg: Mapping[str, object]) -> List[Particle]:
    """Initial particle set of a freshly planted tree, reproducible from its seed."""

    return [
        _make_particle(
            seeded_random(seed + i),
            seeded_random(seed + i * 2),
            seeded_random(seed + i * 3),
            seeded_random(seed + i * 4),
            cfg,
        )
        for i in range(max(0, count))
    ]


def random_particles(count: int, cfg: Mapping[str, object], rng: RandomSource = random.random) -> List[Particle]:
    return [_make_particle(rng(), rng(), rng(), rng(), cfg) for _ in range(max(0, count))]


def grow_particles(
    tree: AnimatedTree,
    new_branches: int,
    cfg: Mapping[str, object],
    rng: RandomSource = random.random,
) -> int:
    """Append particles for every branch gained; existing ones are untouched.

    Returns the number of particles added.
    """

    gained = new_branches - tree.branches
    if gained <= 0:
        return 0
    per_branch = int(coerce_float(cfg.get("perBranch"), 2.0))
    added = random_particles(gained * per_branch, cfg, rng)
    tree.particles.extend(added)
    return len(added)


def advance_canopy(tree: AnimatedTree) -> None:
    for particle in tree.particles:
        particle.angle += particle.speed


def canopy_center(tree: AnimatedTree, cfg: Mapping[str, object], trunk_per_growth: float) -> Tuple[float, float]:
    trunk = tree.current_growth * trunk_per_growth
    return tree.x, tree.y - trunk * coerce_float(cfg.get("centerRatio"), 0.8)


def canopy_positions(
    tree: AnimatedTree,
    cfg: Mapping[str, object],
    trunk_per_growth: float,
) -> List[Tuple[float, float, float]]:
    """Return ``(x, y, size)`` for every canopy particle of ``tree``."""

    cx, cy = canopy_center(tree, cfg, trunk_per_growth)
    extra = tree.current_growth * coerce_float(cfg.get("radiusPerGrowth"), 3.0)
    squash = coerce_float(cfg.get("squash"), 0.6)
    positions: List[Tuple[float, float, float]] = []
    for particle in tree.particles:
        orbit = particle.radius + extra
        positions.append(
            (
                cx + math.cos(particle.angle) * orbit,
                cy + math.sin(particle.angle) * orbit * squash,
                particle.size,
            )
        )
    return positions


class WaterSplashSystem:
    """Global collection of short-lived ballistic particles."""

    def __init__(self, cfg: Mapping[str, object], rng: RandomSource = random.random) -> None:
        self.cfg = cfg
        self._rng = rng
        self.particles: List[WaterParticle] = []

    def __len__(self) -> int:
        return len(self.particles)

    def __iter__(self) -> Iterator[WaterParticle]:
        return iter(self.particles)

    def burst(self, width: float, height: float) -> int:
        """Spawn one burst at the bottom centre of a ``width`` x ``height`` surface.

        Nothing is spawned while the surface has no area.
        """

        if width <= 0 or height <= 0:
            logger.debug("Dropping splash burst on empty surface %sx%s", width, height)
            return 0
        cfg = self.cfg
        rng = self._rng
        count = max(0, int(coerce_float(cfg.get("count"), 50.0)))
        spread = coerce_float(cfg.get("spread"), 1.2)
        speed_min = coerce_float(cfg.get("speedMin"), 3.0)
        speed_span = coerce_float(cfg.get("speedSpan"), 5.0)
        life_min = coerce_float(cfg.get("lifeMin"), 80.0)
        life_span = coerce_float(cfg.get("lifeSpan"), 40.0)
        size_min = coerce_float(cfg.get("sizeMin"), 1.0)
        size_span = coerce_float(cfg.get("sizeSpan"), 2.0)
        start_x = width / 2.0
        start_y = float(height)
        for _ in range(count):
            angle = -math.pi / 2.0 + (rng() - 0.5) * spread
            speed = speed_min + rng() * speed_span
            life = max(1.0, life_min + rng() * life_span)
            self.particles.append(
                WaterParticle(
                    x=start_x,
                    y=start_y,
                    vx=math.cos(angle) * speed,
                    vy=math.sin(angle) * speed,
                    life=life,
                    max_life=life,
                    size=size_min + rng() * size_span,
                )
            )
        logger.debug("Splash burst of %d particles (%d alive)", count, len(self.particles))
        return count

    def advance(self) -> None:
        """Integrate one frame and drop particles whose lifetime ran out."""

        gravity = coerce_float(self.cfg.get("gravity"), 0.05)
        particles = self.particles
        for i in range(len(particles) - 1, -1, -1):
            p = particles[i]
            p.x += p.vx
            p.y += p.vy
            p.vy += gravity
            p.life = max(0.0, p.life - 1.0)
            if p.life <= 0.0:
                del particles[i]

    def clear(self) -> None:
        self.particles.clear()
