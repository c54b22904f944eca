"""
Ruin Evolution Module
Evolves voxel ruins through mutation and fitness-weighted selection
"""

from .coord import Coord, RotationAxis
from .exceptions import BlueprintError, InvalidDimension, DimensionMismatch, IndexOutOfBounds
from .blueprint import Blueprint
from .library import DesignLibrary, make_brick, design_from_cells
from .selection import build_cdf, weighted_sample
from .fitness import (
    covered_volume_fitness,
    block_count_fitness,
    height_fitness,
    evaluate_fitness,
    FITNESS_FUNCTIONS
)
from .mutator import Mutator
from .generator import RuinGenerator, evolve_ruin_batch

__all__ = [
    'Coord',
    'RotationAxis',
    'BlueprintError',
    'InvalidDimension',
    'DimensionMismatch',
    'IndexOutOfBounds',
    'Blueprint',
    'DesignLibrary',
    'make_brick',
    'design_from_cells',
    'build_cdf',
    'weighted_sample',
    'covered_volume_fitness',
    'block_count_fitness',
    'height_fitness',
    'evaluate_fitness',
    'FITNESS_FUNCTIONS',
    'Mutator',
    'RuinGenerator',
    'evolve_ruin_batch'
]
