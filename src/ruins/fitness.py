"""
Fitness Functions for Ruin Evolution
Integer heuristics scoring a blueprint's structure
"""

import numpy as np

from .blueprint import Blueprint


def covered_volume_fitness(blueprint: Blueprint) -> int:
    """
    Amount of volume that has a roof over it.

    For every (x, z) column counts the empty cells lying below the
    topmost occupied cell of that column.

    Args:
        blueprint: Blueprint to score

    Returns:
        Number of covered empty cells
    """
    occupied = blueprint.blocks > 0
    if occupied.size == 0:
        return 0

    # True for every cell with an occupied cell at or above it
    covered = np.flip(np.logical_or.accumulate(np.flip(occupied, axis=1), axis=1), axis=1)
    return int(np.count_nonzero(covered & ~occupied))


def block_count_fitness(blueprint: Blueprint) -> int:
    """Number of occupied cells."""
    return blueprint.num_blocks


def height_fitness(blueprint: Blueprint) -> int:
    """Height of the tallest column."""
    occupied_layers = np.flatnonzero(np.any(blueprint.blocks > 0, axis=(0, 2)))
    if occupied_layers.size == 0:
        return 0
    return int(occupied_layers[-1]) + 1


# Fitness function registry
FITNESS_FUNCTIONS = {
    'covered_volume': covered_volume_fitness,
    'block_count': block_count_fitness,
    'height': height_fitness
}


def get_fitness_function(fitness_type: str):
    if fitness_type not in FITNESS_FUNCTIONS:
        raise ValueError(f"Unknown fitness type: {fitness_type}")
    return FITNESS_FUNCTIONS[fitness_type]


def evaluate_fitness(blueprint: Blueprint, fitness_type: str = 'covered_volume') -> int:
    """
    Evaluate fitness of a blueprint.

    Args:
        blueprint: Blueprint to score
        fitness_type: Type of fitness to evaluate

    Returns:
        Non-negative integer score
    """
    return get_fitness_function(fitness_type)(blueprint)
