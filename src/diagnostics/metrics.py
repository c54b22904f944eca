"""
Diagnostic Metrics for Ruin Evolution
Structure statistics and population diversity
"""

import numpy as np
from typing import Dict, List, Sequence

from ..ruins.blueprint import Blueprint
from ..ruins.fitness import covered_volume_fitness, height_fitness


def structure_statistics(blueprint: Blueprint) -> Dict[str, float]:
    """
    Compute statistics about a single blueprint.

    Args:
        blueprint: Blueprint to describe

    Returns:
        Dictionary with statistics
    """
    total_cells = blueprint.blocks.size
    num_blocks = blueprint.num_blocks

    return {
        'num_blocks': num_blocks,
        'num_subdesigns': len(blueprint.valid_ids),
        'height': height_fitness(blueprint),
        'density': num_blocks / total_cells if total_cells else 0.0,
        'covered_volume': covered_volume_fitness(blueprint),
        'attachment_points': len(blueprint.attachment_points)
    }


def population_diversity(population: Sequence[Blueprint]) -> float:
    """
    Mean pairwise Hamming distance between occupancy maps.

    Args:
        population: Blueprints sharing the same dimensions

    Returns:
        Diversity in [0, 1], 0 when every blueprint has the same shape
    """
    if len(population) < 2:
        return 0.0

    occupancy = np.stack([(b.blocks > 0).ravel() for b in population]).astype(np.float64)
    if occupancy.shape[1] == 0:
        return 0.0

    # Pairs differ where exactly one of the two cells is occupied
    ones = occupancy @ occupancy.T
    counts = occupancy.sum(axis=1)
    distances = (counts[:, None] + counts[None, :] - 2 * ones) / occupancy.shape[1]

    n = len(population)
    upper = np.triu_indices(n, k=1)
    return float(distances[upper].mean())


def summarize_population(population: Sequence[Blueprint], scores: Sequence[int]) -> Dict[str, float]:
    """
    Summarize a scored population.

    Args:
        population: Blueprints of one generation
        scores: Fitness score of each blueprint

    Returns:
        Dictionary with aggregate statistics
    """
    if len(population) != len(scores):
        raise ValueError("Need one score per blueprint")
    if not population:
        return {'size': 0}

    stats: List[Dict[str, float]] = [structure_statistics(b) for b in population]
    return {
        'size': len(population),
        'best_score': int(np.max(scores)),
        'mean_score': float(np.mean(scores)),
        'min_score': int(np.min(scores)),
        'mean_blocks': float(np.mean([s['num_blocks'] for s in stats])),
        'mean_height': float(np.mean([s['height'] for s in stats])),
        'diversity': population_diversity(population)
    }
