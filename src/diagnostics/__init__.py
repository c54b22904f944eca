"""
Diagnostics Module
Population metrics and visualization tools
"""

from .metrics import (
    structure_statistics,
    population_diversity,
    summarize_population
)
from .visualizer import RuinVisualizer

__all__ = [
    'structure_statistics',
    'population_diversity',
    'summarize_population',
    'RuinVisualizer'
]
