"""
Stability Oracles
Boolean checks standing in for a physics simulation of a blueprint
"""

import logging
import numpy as np
from typing import Callable, Dict, Set

from ..ruins.blueprint import Blueprint

logger = logging.getLogger(__name__)

StabilityOracle = Callable[[Blueprint], bool]


def always_stable(blueprint: Blueprint) -> bool:
    """Accept every arrangement."""
    return True


class SupportStabilityOracle:
    """
    Analytic support checker.

    Each sub-design is treated as a rigid body. A sub-design is supported
    when one of its cells rests on the floor or on a cell of another
    supported sub-design. With balance checking on, the horizontal
    center of mass of every sub-design must also lie strictly inside the
    bounding rectangle of the cells it rests on, otherwise it would tip.
    Loads from sub-designs stacked on top are not taken into account.
    """

    def __init__(self, check_balance: bool = True):
        self.check_balance = check_balance

    def __call__(self, blueprint: Blueprint) -> bool:
        blocks = blueprint.blocks
        ids = [int(i) for i in np.unique(blocks) if i > 0]
        if not ids:
            return True

        # Label of the cell directly underneath, -1 stands for the floor
        below = np.zeros_like(blocks)
        if blocks.shape[1] > 0:
            below[:, 0, :] = -1
            below[:, 1:, :] = blocks[:, :-1, :]

        supported: Set[int] = set()
        changed = True
        while changed:
            changed = False
            for subdesign_id in ids:
                if subdesign_id in supported:
                    continue
                if self._support_mask(blocks, below, subdesign_id, supported).any():
                    supported.add(subdesign_id)
                    changed = True

        floating = len(ids) - len(supported)
        if floating:
            logger.debug(f"{floating} sub-designs have nothing holding them up")
            return False

        if self.check_balance:
            for subdesign_id in ids:
                if not self._is_balanced(blocks, below, subdesign_id, supported):
                    logger.debug(f"Sub-design {subdesign_id} would tip over")
                    return False

        return True

    @staticmethod
    def _support_mask(blocks: np.ndarray, below: np.ndarray, subdesign_id: int,
                      supported: Set[int]) -> np.ndarray:
        """Cells of a sub-design resting on the floor or on another supported one."""
        cells = blocks == subdesign_id
        resting = (below == -1) | (np.isin(below, list(supported)) & (below != subdesign_id))
        return cells & resting

    def _is_balanced(self, blocks: np.ndarray, below: np.ndarray, subdesign_id: int,
                     supported: Set[int]) -> bool:
        cells = np.argwhere(blocks == subdesign_id)
        contacts = np.argwhere(self._support_mask(blocks, below, subdesign_id, supported))

        # Cell centers sit half a unit in from the cell corner
        center_x = cells[:, 0].mean() + 0.5
        center_z = cells[:, 2].mean() + 0.5

        min_x, max_x = contacts[:, 0].min(), contacts[:, 0].max() + 1
        min_z, max_z = contacts[:, 2].min(), contacts[:, 2].max() + 1
        return bool(min_x < center_x < max_x and min_z < center_z < max_z)


STABILITY_ORACLES: Dict[str, Callable[..., StabilityOracle]] = {
    'always': lambda **kwargs: always_stable,
    'support': SupportStabilityOracle
}


def get_stability_oracle(name: str = 'support', **kwargs) -> StabilityOracle:
    """
    Build a stability oracle by name.

    Args:
        name: Registered oracle name
        **kwargs: Options forwarded to the oracle constructor

    Returns:
        Callable taking a blueprint and returning True if it is stable
    """
    if name not in STABILITY_ORACLES:
        raise ValueError(f"Unknown stability oracle: {name}")
    return STABILITY_ORACLES[name](**kwargs)
