"""Shared fixtures for the garden tests."""

import os
import random

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("GARDEN_FORCE_BACKEND", "raster")

from garden.control.config import DEFAULTS
from garden.model import AnimatedTree, Category, Tree


def make_tree(
    tree_id: str = "a",
    x: float = 100.0,
    y: float = 500.0,
    target_growth: float = 1.0,
    max_growth: float = 5.0,
    branches: int = 2,
    seed: float = 42.0,
    category: Category = Category.OTHER,
    is_verified: bool = False,
) -> Tree:
    """Create a descriptor with sensible defaults."""
    return Tree(
        id=tree_id,
        file_name=f"{tree_id}.bin",
        file_size=1024,
        category=category,
        x=x,
        y=y,
        target_growth=target_growth,
        max_growth=max_growth,
        is_verified=is_verified,
        seed=seed,
        branches=branches,
    )


def make_animated(
    growth: float = 1.0,
    category: Category = Category.OTHER,
    x: float = 100.0,
    seed: float = 42.0,
    branches: int = 2,
    is_verified: bool = False,
) -> AnimatedTree:
    """Create an animated tree with fixed motion state."""
    tree = AnimatedTree.from_tree(
        make_tree(x=x, seed=seed, branches=branches, category=category, is_verified=is_verified),
        growth_rate=0.02,
        sway_phase=0.3,
        sway_intensity=0.02,
        particles=[],
    )
    tree.current_growth = growth
    return tree


@pytest.fixture
def rng():
    return random.Random(1234).random


@pytest.fixture
def cfg():
    import copy

    return copy.deepcopy(DEFAULTS)


@pytest.fixture(scope="session")
def qapp():
    from PyQt5 import QtWidgets

    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    yield app
