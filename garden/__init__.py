"""Animated data garden: every file becomes a procedurally grown tree."""

from .engine import Dot, Frame, GardenEngine
from .geometry import STYLES, Blossom, BlossomShape, BranchGenerator, CategoryStyle, Stroke, TreeGeometry
from .interaction import GestureController, GestureState, InputKind, hit_test
from .intake import GardenStats, category_for_filename, format_bytes, move_tree, new_tree_for_file, water_trees
from .model import AnimatedTree, Category, Particle, Tree, WaterParticle
from .particles import WaterSplashSystem
from .prng import seeded_random
from .store import AnimatedTreeStore

__all__ = [
    "AnimatedTree",
    "AnimatedTreeStore",
    "Blossom",
    "BlossomShape",
    "BranchGenerator",
    "Category",
    "CategoryStyle",
    "Dot",
    "Frame",
    "GardenEngine",
    "GardenStats",
    "GestureController",
    "GestureState",
    "InputKind",
    "Particle",
    "STYLES",
    "Stroke",
    "Tree",
    "TreeGeometry",
    "WaterParticle",
    "WaterSplashSystem",
    "category_for_filename",
    "format_bytes",
    "hit_test",
    "move_tree",
    "new_tree_for_file",
    "seeded_random",
    "water_trees",
]
