"""
Discrete 3D Coordinates
Integer grid positions and rotation axes
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


@dataclass(frozen=True, order=True)
class Coord:
    """Immutable integer coordinate inside a voxel grid."""
    x: int
    y: int
    z: int

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)

    def above(self) -> 'Coord':
        """Coordinate directly on top of this one."""
        return Coord(self.x, self.y + 1, self.z)

    def below(self) -> 'Coord':
        """Coordinate directly under this one."""
        return Coord(self.x, self.y - 1, self.z)

    def __add__(self, other: 'Coord') -> 'Coord':
        return Coord(self.x + other.x, self.y + other.y, self.z + other.z)


class RotationAxis(Enum):
    """Axes a blueprint can be rotated around"""
    X_AXIS = "x"
    Y_AXIS = "y"
    Z_AXIS = "z"
