"""
Tests for the Design Library
"""

import pytest
import numpy as np
from src.ruins.blueprint import Blueprint
from src.ruins.coord import Coord
from src.ruins.library import DesignLibrary, design_from_cells, make_brick


def test_default_library():
    """Test the default palette holds the three bricks."""
    library = DesignLibrary.default()

    assert len(library) == 3
    assert [d.dims for d in library] == [Coord(1, 1, 1), Coord(2, 1, 1), Coord(3, 1, 1)]
    assert [d.num_blocks for d in library] == [1, 2, 3]
    assert all(d.valid_ids == {1} and d.next_id == 2 for d in library)


def test_add_keeps_a_copy():
    """Test later changes to a registered design do not reach the library."""
    library = DesignLibrary()
    design = make_brick(2)
    library.add(design)

    design.add_block((0, 0, 0), 9)

    assert library[0].valid_ids == {1}
    assert library[0].blocks[0, 0, 0] == 1


def test_add_empty_design():
    """Test empty designs are rejected."""
    with pytest.raises(ValueError):
        DesignLibrary().add(Blueprint(2, 2, 2))


def test_choice():
    """Test random picks come from the library."""
    library = DesignLibrary.default()
    rng = np.random.default_rng(0)

    picks = {library.choice(rng).num_blocks for _ in range(200)}

    assert picks == {1, 2, 3}

    with pytest.raises(ValueError):
        DesignLibrary().choice(rng)


def test_design_from_cells():
    """Test building a design from an arbitrary cell list."""
    design = design_from_cells([(4, 1, 2), (4, 2, 2), (5, 1, 2)])

    assert design.dims == Coord(2, 2, 1)
    assert design.num_blocks == 3
    assert design.blocks[0, 0, 0] == 1
    assert design.blocks[0, 1, 0] == 1
    assert design.blocks[1, 0, 0] == 1

    with pytest.raises(ValueError):
        design_from_cells([])


def test_library_from_config():
    """Test extra shapes from configuration are registered."""
    library = DesignLibrary.from_config({'arch': [[0, 0, 0], [0, 1, 0], [1, 1, 0], [2, 1, 0], [2, 0, 0]]})

    assert len(library) == 4
    assert library[3].dims == Coord(3, 2, 1)

    only_custom = DesignLibrary.from_config({'pillar': [[0, 0, 0], [0, 1, 0]]}, include_defaults=False)
    assert len(only_custom) == 1


if __name__ == "__main__":
    pytest.main([__file__])
