"""
Tests for Fitness Functions
"""

import pytest
from src.ruins.blueprint import Blueprint
from src.ruins.library import make_brick
from src.ruins.fitness import (
    covered_volume_fitness,
    block_count_fitness,
    height_fitness,
    evaluate_fitness,
    FITNESS_FUNCTIONS
)


def test_covered_volume_empty():
    """Test an empty blueprint covers nothing."""
    assert covered_volume_fitness(Blueprint(3, 3, 3)) == 0
    assert covered_volume_fitness(Blueprint(0, 0, 0)) == 0


def test_covered_volume_single_column():
    """Test a floating block covers the cells below it."""
    blueprint = Blueprint(3, 3, 3)
    blueprint.add_block((0, 2, 0), 1)

    assert covered_volume_fitness(blueprint) == 2


def test_covered_volume_roof():
    """Test a roof covers every column below it, minus occupied cells."""
    blueprint = Blueprint(3, 3, 3)
    blueprint.apply_design(make_brick(3), (0, 2, 0))
    assert covered_volume_fitness(blueprint) == 6

    blueprint.add_block((0, 0, 0), 9)
    assert covered_volume_fitness(blueprint) == 5


def test_floor_layer_covers_nothing():
    """Test blocks on the floor do not count as a roof."""
    blueprint = Blueprint(3, 3, 3)
    blueprint.apply_design(make_brick(3), (0, 0, 0))

    assert covered_volume_fitness(blueprint) == 0


def test_block_count_and_height():
    """Test the simple structural scores."""
    blueprint = Blueprint(3, 4, 3)
    assert height_fitness(blueprint) == 0

    blueprint.add_block((0, 0, 0), 1)
    blueprint.add_block((0, 2, 0), 2)

    assert block_count_fitness(blueprint) == 2
    assert height_fitness(blueprint) == 3


def test_evaluate_fitness():
    """Test fitness evaluation by name."""
    blueprint = Blueprint(3, 3, 3)
    blueprint.add_block((1, 1, 1), 1)

    for fitness_type in FITNESS_FUNCTIONS.keys():
        score = evaluate_fitness(blueprint, fitness_type)
        assert isinstance(score, int)
        assert score >= 0

    assert evaluate_fitness(blueprint) == 1

    with pytest.raises(ValueError):
        evaluate_fitness(blueprint, 'beauty')


if __name__ == "__main__":
    pytest.main([__file__])
