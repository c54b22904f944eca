"""
Design Library
Seed shapes used as building blocks by the mutator
"""

import numpy as np
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from .blueprint import Blueprint, CoordLike, as_coord


def make_brick(length: int) -> Blueprint:
    """Straight beam of `length` blocks along the x axis, all labelled 1."""
    brick = Blueprint(length, 1, 1)
    for x in range(length):
        brick.add_block((x, 0, 0), 1)
    return brick


def design_from_cells(cells: Iterable[CoordLike], subdesign_id: int = 1) -> Blueprint:
    """
    Build a design from a list of occupied cells.

    The design is sized to the bounding box of the cells, which are
    shifted so the box starts at the origin.

    Args:
        cells: Occupied (x, y, z) cells
        subdesign_id: Id given to every cell

    Returns:
        New design blueprint
    """
    coords = [as_coord(c) for c in cells]
    if not coords:
        raise ValueError("A design needs at least one cell")

    low = np.min([c.as_tuple() for c in coords], axis=0)
    high = np.max([c.as_tuple() for c in coords], axis=0)
    design = Blueprint(*(high - low + 1))
    for c in coords:
        design.add_block((c.x - low[0], c.y - low[1], c.z - low[2]), subdesign_id)
    return design


class DesignLibrary:
    """
    Palette of small designs the mutator stamps into blueprints.

    The library keeps its own copy of every registered design so later
    changes to the caller's blueprint never leak into the palette.
    """

    def __init__(self, designs: Optional[Sequence[Blueprint]] = None):
        self._designs: List[Blueprint] = []
        for design in designs or []:
            self.add(design)

    @classmethod
    def default(cls) -> 'DesignLibrary':
        """Single block plus 2x1 and 3x1 bricks."""
        return cls([make_brick(1), make_brick(2), make_brick(3)])

    @classmethod
    def from_config(cls, shapes: Optional[Dict[str, List[List[int]]]] = None,
                    include_defaults: bool = True) -> 'DesignLibrary':
        """
        Build a library from configuration.

        Args:
            shapes: Mapping of shape name to its list of occupied cells
            include_defaults: Whether to start from the default palette

        Returns:
            Design library
        """
        library = cls.default() if include_defaults else cls()
        for cells in (shapes or {}).values():
            library.add(design_from_cells(cells))
        return library

    def add(self, design: Blueprint):
        """Register a new design."""
        if design.is_empty():
            raise ValueError("Cannot register an empty design")
        self._designs.append(design.copy())

    def choice(self, rng: np.random.Generator) -> Blueprint:
        """Pick a design uniformly at random."""
        if not self._designs:
            raise ValueError("Design library is empty")
        return self._designs[int(rng.integers(len(self._designs)))]

    def __len__(self) -> int:
        return len(self._designs)

    def __getitem__(self, index: int) -> Blueprint:
        return self._designs[index]

    def __iter__(self) -> Iterator[Blueprint]:
        return iter(self._designs)
