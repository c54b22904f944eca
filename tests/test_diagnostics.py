"""
Tests for Diagnostics
"""

import json

import matplotlib
matplotlib.use("Agg")

import pytest
from src.ruins.blueprint import Blueprint
from src.ruins.library import make_brick
from src.diagnostics.metrics import population_diversity, structure_statistics, summarize_population
from src.diagnostics.visualizer import RuinVisualizer


def make_roofed_blueprint() -> Blueprint:
    blueprint = Blueprint(3, 3, 3)
    blueprint.add_block((0, 0, 0), 1)
    blueprint.add_block((0, 1, 0), 1)
    blueprint.apply_design(make_brick(3), (0, 2, 0))
    return blueprint


def test_structure_statistics():
    """Test statistics of a small roofed structure."""
    stats = structure_statistics(make_roofed_blueprint())

    assert stats['num_blocks'] == 5
    assert stats['num_subdesigns'] == 2
    assert stats['height'] == 3
    assert stats['density'] == pytest.approx(5 / 27)
    assert stats['covered_volume'] == 4


def test_population_diversity():
    """Test diversity of identical and opposite populations."""
    empty = Blueprint(1, 1, 1)
    full = Blueprint(1, 1, 1)
    full.add_block((0, 0, 0), 1)

    assert population_diversity([empty, empty.copy()]) == 0.0
    assert population_diversity([empty, full]) == 1.0
    assert population_diversity([empty]) == 0.0
    assert 0.0 < population_diversity([empty, full, full.copy()]) < 1.0


def test_summarize_population():
    """Test population summary."""
    population = [make_roofed_blueprint(), Blueprint(3, 3, 3)]

    summary = summarize_population(population, [4, 0])

    assert summary['size'] == 2
    assert summary['best_score'] == 4
    assert summary['min_score'] == 0
    assert summary['mean_blocks'] == 2.5

    with pytest.raises(ValueError):
        summarize_population(population, [1])


def test_visualizer_saves_plots(tmp_path):
    """Test plots and reports are written to the output directory."""
    visualizer = RuinVisualizer(str(tmp_path / "plots"))

    curves = visualizer.plot_fitness_curves({'best': [1, 2, 4], 'average': [0.5, 1.0, 2.5]})
    histogram = visualizer.plot_score_distribution([0, 1, 1, 4])
    voxels = visualizer.plot_blueprint(make_roofed_blueprint())
    empty = visualizer.plot_blueprint(Blueprint(2, 2, 2), save=False)

    assert curves.exists()
    assert histogram.exists()
    assert voxels.exists()
    assert empty is None

    report = visualizer.create_report({
        'best_fitness': 4,
        'generations': 3,
        'initial_scores': [0, 2],
        'fitness_history': {'best': [2, 3, 4], 'average': [1.0, 1.5, 2.0]}
    })
    assert report['summary']['initial_best'] == 2
    with open(tmp_path / "plots" / "evolution_report.json") as f:
        assert json.load(f)['summary']['best_fitness'] == 4


if __name__ == "__main__":
    pytest.main([__file__])
