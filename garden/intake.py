"""Host-side helpers turning files into tree descriptors.

These functions implement the bookkeeping around the engine: classifying a
file by extension, planting a new tree for it, watering every tree and
keeping the garden statistics.  They operate on immutable :class:`Tree`
values and always return new lists.
"""

from __future__ import annotations

import math
import random
import time
from dataclasses import dataclass, replace
from pathlib import PurePath
from typing import Callable, Iterable, List, Optional, Sequence

from .model import Category, Tree

__all__ = [
    "GardenStats",
    "MAX_TREE_GROWTH",
    "category_for_filename",
    "format_bytes",
    "move_tree",
    "new_tree_for_file",
    "water_trees",
]

MAX_TREE_GROWTH = 5.0
WATER_GROWTH_STEP = 0.5
BRANCH_GAIN_CHANCE = 0.3

_EXTENSIONS = {
    Category.IMAGE: {"jpg", "jpeg", "png", "gif", "svg", "webp"},
    Category.TEXT: {"txt", "md", "doc", "docx", "pdf"},
    Category.CODE: {"js", "ts", "jsx", "tsx", "html", "css", "json", "py", "java", "c", "cpp"},
    Category.MEDIA: {"mp3", "wav", "ogg", "mp4", "mov", "avi", "webm"},
}

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


def category_for_filename(name: str) -> Category:
    extension = PurePath(name).suffix.lstrip(".").lower()
    for category, extensions in _EXTENSIONS.items():
        if extension in extensions:
            return category
    return Category.OTHER


def format_bytes(size: float, decimals: int = 2) -> str:
    """Human readable size using 1024 based units, e.g. ``"1.5 KB"``."""

    if size <= 0:
        return "0 Bytes"
    decimals = max(0, decimals)
    index = 0
    while size >= 1024 ** (index + 1) and index < len(_SIZE_UNITS) - 1:
        index += 1
    value = round(size / (1024 ** index), decimals)
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[index]}"


def new_tree_for_file(
    name: str,
    size: int,
    width: float,
    height: float,
    rng: Callable[[], float] = random.random,
) -> Optional[Tree]:
    """Plant a new tree for a file along the bottom edge of the garden.

    Returns None while the garden surface has no size yet.
    """

    if width <= 0 or height <= 0:
        return None
    stamp = int(time.time() * 1000)
    return Tree(
        id=f"{name}-{stamp}-{rng()}",
        file_name=name,
        file_size=max(0, int(size)),
        category=category_for_filename(name),
        x=rng() * (width * 0.9) + width * 0.05,
        y=float(height),
        target_growth=1.0,
        max_growth=MAX_TREE_GROWTH,
        is_verified=rng() > 0.5,
        seed=rng() * 10000.0,
        branches=int(math.floor(rng() * 2)) + 2,
    )


def water_trees(trees: Iterable[Tree], rng: Callable[[], float] = random.random) -> List[Tree]:
    """Raise every tree's target growth one step, sometimes adding a branch."""

    watered: List[Tree] = []
    for tree in trees:
        branches = tree.branches
        if tree.target_growth < tree.max_growth and rng() > 1.0 - BRANCH_GAIN_CHANCE:
            branches += 1
        watered.append(
            replace(
                tree,
                target_growth=min(tree.max_growth, tree.target_growth + WATER_GROWTH_STEP),
                branches=branches,
            )
        )
    return watered


def move_tree(trees: Iterable[Tree], tree_id: str, x: float) -> List[Tree]:
    return [replace(tree, x=float(x)) if tree.id == tree_id else tree for tree in trees]


@dataclass(frozen=True)
class GardenStats:
    total_files: int = 0
    verified_files: int = 0
    total_size: int = 0

    @classmethod
    def from_trees(cls, trees: Sequence[Tree]) -> "GardenStats":
        return cls(
            total_files=len(trees),
            verified_files=sum(1 for tree in trees if tree.is_verified),
            total_size=sum(tree.file_size for tree in trees),
        )

    def summary(self) -> str:
        return (
            f"Total files: {self.total_files}   "
            f"Verified: {self.verified_files}   "
            f"Data size: {format_bytes(self.total_size)}"
        )
