"""
Voxel Blueprint
3D grid of sub-design ids with attachment point bookkeeping
"""

import numpy as np
from typing import Any, Dict, List, Optional, Set, Tuple, Union

from .coord import Coord, RotationAxis
from .exceptions import DimensionMismatch, IndexOutOfBounds, InvalidDimension


CoordLike = Union[Coord, Tuple[int, int, int]]

# One counter-clockwise quarter turn per axis: (transpose order, axis to flip)
_QUARTER_TURNS = {
    RotationAxis.X_AXIS: ((0, 2, 1), 2),
    RotationAxis.Y_AXIS: ((2, 1, 0), 0),
    RotationAxis.Z_AXIS: ((1, 0, 2), 0),
}


def as_coord(value: CoordLike) -> Coord:
    """Accept a Coord or any (x, y, z) triple."""
    if isinstance(value, Coord):
        return value
    x, y, z = value
    return Coord(int(x), int(y), int(z))


class Blueprint:
    """
    Voxel grid holding one integer label per cell.

    A label of 0 means the cell is empty, any positive label is the id of
    the sub-design occupying it. Besides the cells the blueprint tracks
    the set of ids in use and the attachment points where new
    sub-designs may be anchored: empty cells on the floor or resting on
    an occupied cell.
    """

    def __init__(self, dim_x: int, dim_y: int, dim_z: int):
        """
        Create an empty blueprint.

        Args:
            dim_x: Width of the grid
            dim_y: Height of the grid
            dim_z: Depth of the grid

        Raises:
            InvalidDimension: If any dimension is negative
        """
        if dim_x < 0 or dim_y < 0 or dim_z < 0:
            raise InvalidDimension(
                f"Blueprint dimensions must be non-negative, got {dim_x} x {dim_y} x {dim_z}"
            )

        self.dims = Coord(int(dim_x), int(dim_y), int(dim_z))
        self.blocks = np.zeros(self.dims.as_tuple(), dtype=np.int64)
        self.next_id = 0
        self.valid_ids: Set[int] = set()
        self.attachment_points: Set[Coord] = self._scan_attachment_points()

    @classmethod
    def from_dims(cls, dims: CoordLike) -> 'Blueprint':
        dims = as_coord(dims)
        return cls(dims.x, dims.y, dims.z)

    # -------------- Basic accessors --------------

    def get_blocks(self) -> np.ndarray:
        """Get a copy of the cell array."""
        return self.blocks.copy()

    def get_dims(self) -> Coord:
        return self.dims

    def get_dims_arr(self) -> List[int]:
        return list(self.dims.as_tuple())

    def dims_string(self) -> str:
        return f"{self.dims.x} x {self.dims.y} x {self.dims.z}"

    @property
    def num_blocks(self) -> int:
        return int(np.count_nonzero(self.blocks))

    def is_empty(self) -> bool:
        return not self.valid_ids

    def in_bounds(self, coord: CoordLike) -> bool:
        coord = as_coord(coord)
        return (0 <= coord.x < self.dims.x and
                0 <= coord.y < self.dims.y and
                0 <= coord.z < self.dims.z)

    def same_layout(self, other: 'Blueprint') -> bool:
        """True if both blueprints have the same dimensions and cell labels."""
        return self.dims == other.dims and np.array_equal(self.blocks, other.blocks)

    def __repr__(self) -> str:
        return (f"Blueprint({self.dims_string()}, blocks={self.num_blocks}, "
                f"ids={len(self.valid_ids)})")

    # -------------- Copying and rotation --------------

    def copy_into(self, target: 'Blueprint'):
        """
        Copy this blueprint into a target of the same size.

        Cells, id counter, valid ids and attachment points are all copied
        by value so the two blueprints never share state.

        Raises:
            DimensionMismatch: If the target has different dimensions
        """
        if target.dims != self.dims:
            raise DimensionMismatch(
                f"Blueprint dimensions must be exactly the same, were "
                f"{self.dims_string()} (source) and {target.dims_string()} (target)"
            )

        np.copyto(target.blocks, self.blocks)
        target.next_id = self.next_id
        target.valid_ids = set(self.valid_ids)
        target.attachment_points = set(self.attachment_points)

    def copy(self) -> 'Blueprint':
        duplicate = Blueprint.from_dims(self.dims)
        self.copy_into(duplicate)
        return duplicate

    def rotate(self, axis: RotationAxis, turns: int) -> 'Blueprint':
        """
        Rotate counter-clockwise (viewed from the + end of the axis).

        Args:
            axis: Axis to rotate around
            turns: Number of quarter turns, negative turns rotate clockwise

        Returns:
            New rotated blueprint, this one is left untouched
        """
        axis = RotationAxis(axis)
        order, flip_axis = _QUARTER_TURNS[axis]

        rotated_blocks = self.blocks
        for _ in range(turns % 4):
            rotated_blocks = np.flip(np.transpose(rotated_blocks, order), axis=flip_axis)

        rotated = Blueprint(*rotated_blocks.shape)
        rotated.blocks = rotated_blocks.copy()
        rotated.next_id = self.next_id
        rotated.valid_ids = set(self.valid_ids)
        rotated.attachment_points = rotated._scan_attachment_points()
        return rotated

    # -------------- Editing --------------

    def add_block(self, coord: CoordLike, subdesign_id: int):
        """
        Place a single block.

        Args:
            coord: Cell to fill
            subdesign_id: Positive id of the sub-design the block belongs to

        Raises:
            IndexOutOfBounds: If the coordinate lies outside the grid
        """
        coord = as_coord(coord)
        if not self.in_bounds(coord):
            raise IndexOutOfBounds(
                f"Block {coord.as_tuple()} is outside of a {self.dims_string()} blueprint"
            )
        if subdesign_id <= 0:
            raise ValueError(f"Sub-design ids must be positive, got {subdesign_id}")

        previous = int(self.blocks[coord.as_tuple()])
        self.blocks[coord.as_tuple()] = subdesign_id
        if previous and previous != subdesign_id and not np.any(self.blocks == previous):
            self.valid_ids.discard(previous)

        self.valid_ids.add(subdesign_id)
        if self.next_id <= subdesign_id:
            self.next_id = subdesign_id + 1

        self._mark_filled(coord)

    def design_collides(self, design: 'Blueprint', offset: CoordLike) -> bool:
        """
        Check if a design placed at offset overlaps any occupied cell.

        Parts of the design that fall outside this blueprint are ignored.
        """
        overlap = self._overlap(design, as_coord(offset))
        if overlap is None:
            return False

        mine, theirs = overlap
        return bool(np.any((design.blocks[theirs] > 0) & (self.blocks[mine] > 0)))

    def apply_design(self, design: 'Blueprint', offset: CoordLike):
        """
        Stamp a design into this blueprint at offset.

        Every design id is shifted by the current id counter so merged
        sub-designs never share ids. If the design would overflow any of
        the dimensions it is truncated in order to fit.
        """
        offset = as_coord(offset)
        base_id = self.next_id
        self.next_id += design.next_id

        overlap = self._overlap(design, offset)
        if overlap is None:
            return

        mine, theirs = overlap
        stamp = design.blocks[theirs]
        mask = stamp > 0
        if not mask.any():
            return

        region = self.blocks[mine]
        overwritten = np.unique(region[mask & (region > 0)])
        region[mask] = base_id + stamp[mask]

        for old_id in overwritten:
            if not np.any(self.blocks == old_id):
                self.valid_ids.discard(int(old_id))
        self.valid_ids.update(int(i) for i in np.unique(stamp[mask]) + base_id)

        origin = np.array([s.start for s in mine])
        for x, y, z in np.argwhere(mask) + origin:
            self._mark_filled(Coord(int(x), int(y), int(z)))

    def delete_id(self, subdesign_id: int):
        """
        Remove every block of a sub-design.

        Cleared cells on the floor or resting on another sub-design become
        attachment points again. The id counter is not rewound.
        """
        mask = self.blocks == subdesign_id
        cleared = np.argwhere(mask)
        self.blocks[mask] = 0

        for x, y, z in cleared:
            coord = Coord(int(x), int(y), int(z))
            if y == 0 or self.blocks[x, y - 1, z] != 0:
                self.attachment_points.add(coord)
            # nothing holds up the cell above any more
            self.attachment_points.discard(coord.above())

        self.valid_ids.discard(subdesign_id)

    def clear(self):
        """Remove all blocks, keeping the id counter."""
        self.blocks.fill(0)
        self.valid_ids.clear()
        self.attachment_points = self._scan_attachment_points()

    # -------------- Serialization --------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            'dims': list(self.dims.as_tuple()),
            'next_id': self.next_id,
            'blocks': self.blocks.tolist()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Blueprint':
        """Rebuild a blueprint saved with to_dict."""
        blueprint = cls(*data['dims'])
        blocks = np.array(data['blocks'], dtype=np.int64).reshape(blueprint.dims.as_tuple())
        if np.any(blocks < 0):
            raise ValueError("Blueprint cells must be non-negative")

        blueprint.blocks = blocks
        blueprint.valid_ids = {int(i) for i in np.unique(blocks) if i > 0}
        highest = max(blueprint.valid_ids, default=-1)
        blueprint.next_id = max(int(data.get('next_id', 0)), highest + 1)
        blueprint.attachment_points = blueprint._scan_attachment_points()
        return blueprint

    # -------------- Private helpers --------------

    def _mark_filled(self, coord: Coord):
        self.attachment_points.discard(coord)
        above = coord.above()
        if self.in_bounds(above) and self.blocks[above.as_tuple()] == 0:
            self.attachment_points.add(above)

    def _scan_attachment_points(self) -> Set[Coord]:
        """Empty cells on the floor or directly above an occupied cell."""
        occupied = self.blocks > 0
        supported = np.zeros_like(occupied)
        if self.dims.y > 0:
            supported[:, 0, :] = True
            supported[:, 1:, :] = occupied[:, :-1, :]

        candidates = supported & ~occupied
        return {Coord(int(x), int(y), int(z)) for x, y, z in np.argwhere(candidates)}

    def _overlap(self, design: 'Blueprint',
                 offset: Coord) -> Optional[Tuple[Tuple[slice, ...], Tuple[slice, ...]]]:
        """Slices of this blueprint and of the design that line up at offset."""
        mine, theirs = [], []
        for start, my_dim, their_dim in zip(offset.as_tuple(), self.dims.as_tuple(),
                                            design.dims.as_tuple()):
            low = max(start, 0)
            high = min(start + their_dim, my_dim)
            if high <= low:
                return None
            mine.append(slice(low, high))
            theirs.append(slice(low - start, high - start))

        return tuple(mine), tuple(theirs)
