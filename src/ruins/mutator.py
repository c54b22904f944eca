"""
Blueprint Mutation
Grows or shrinks a blueprint one sub-design at a time
"""

import logging
import numpy as np
from typing import Callable, Dict, Optional, Tuple

from .blueprint import Blueprint
from .coord import Coord, RotationAxis
from .library import DesignLibrary

logger = logging.getLogger(__name__)

MAX_MUTATION_ATTEMPTS = 3
NUM_INIT_MUTATIONS = 10
DELETE_CHANCE = 0.1
MAX_PLACEMENT_ATTEMPTS = 3


def _accept_all(blueprint: Blueprint) -> bool:
    return True


class Mutator:
    """
    Mutation operator for blueprints.

    A mutation either stamps a randomly rotated library design onto a
    free attachment point or deletes one whole sub-design. Mutations the
    stability oracle rejects are retried on a fresh copy a limited number
    of times.
    """

    def __init__(
        self,
        library: Optional[DesignLibrary] = None,
        stability_oracle: Optional[Callable[[Blueprint], bool]] = None,
        delete_chance: float = DELETE_CHANCE,
        max_mutation_attempts: int = MAX_MUTATION_ATTEMPTS,
        max_placement_attempts: int = MAX_PLACEMENT_ATTEMPTS,
        num_init_mutations: int = NUM_INIT_MUTATIONS,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize mutator.

        Args:
            library: Designs available for insertion (defaults to the basic bricks)
            stability_oracle: Predicate accepting stable blueprints (accepts all if omitted)
            delete_chance: Probability of deleting instead of adding
            max_mutation_attempts: Tries at finding a stable mutation
            max_placement_attempts: Tries at placing a design before giving up
            num_init_mutations: Mutations applied when randomizing
            rng: Random generator shared by all mutations
            seed: Seed for a new random generator if rng is not given
        """
        if not 0.0 <= delete_chance <= 1.0:
            raise ValueError(f"delete_chance must be in [0, 1], got {delete_chance}")
        if max_mutation_attempts < 1 or max_placement_attempts < 1:
            raise ValueError("Attempt limits must be at least 1")
        if num_init_mutations < 0:
            raise ValueError("num_init_mutations must be non-negative")

        self.library = library if library is not None else DesignLibrary.default()
        self.stability_oracle = stability_oracle or _accept_all
        self.delete_chance = delete_chance
        self.max_mutation_attempts = max_mutation_attempts
        self.max_placement_attempts = max_placement_attempts
        self.num_init_mutations = num_init_mutations
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        self.reset_stats()

    def reset_stats(self):
        self.stats: Dict[str, int] = {
            'mutations': 0,
            'unstable_fallbacks': 0,
            'placement_failures': 0,
            'additions': 0,
            'deletions': 0
        }

    def mutate_with_status(self, blueprint: Blueprint) -> Tuple[Blueprint, bool]:
        """
        Mutate a copy of a blueprint.

        Returns:
            (mutant, stable). If no stable mutation was found the last
            attempt is returned anyway with stable set to False.
        """
        self.stats['mutations'] += 1
        mutant = Blueprint.from_dims(blueprint.dims)

        for _ in range(self.max_mutation_attempts):
            blueprint.copy_into(mutant)
            self.unstable_mutate(mutant)
            if self.stability_oracle(mutant):
                return mutant, True

        self.stats['unstable_fallbacks'] += 1
        logger.debug("Could not find a stable mutation, returning the last attempt")
        return mutant, False

    def mutate(self, blueprint: Blueprint) -> Blueprint:
        return self.mutate_with_status(blueprint)[0]

    def randomize(self, blueprint: Blueprint) -> Blueprint:
        """Grow a new random blueprint with the same dimensions."""
        randomized = Blueprint.from_dims(blueprint.dims)
        for _ in range(self.num_init_mutations):
            randomized = self.mutate(randomized)
        return randomized

    def mutate_into(self, source: Blueprint, target: Blueprint):
        self.mutate(source).copy_into(target)

    def randomize_into(self, source: Blueprint, target: Blueprint):
        self.randomize(source).copy_into(target)

    def unstable_mutate(self, blueprint: Blueprint):
        """Apply one mutation in place without checking stability."""
        if not blueprint.valid_ids or self.rng.random() > self.delete_chance:
            self._add_random_design(blueprint)
        else:
            valid_ids = sorted(blueprint.valid_ids)
            blueprint.delete_id(valid_ids[int(self.rng.integers(len(valid_ids)))])
            self.stats['deletions'] += 1

    def find_valid_offset(self, blueprint: Blueprint, design: Blueprint) -> Optional[Coord]:
        """
        Pick a random attachment point where the design fits.

        Returns:
            Offset for the design, or None if every attachment point collides
        """
        valid_coords = [coord for coord in sorted(blueprint.attachment_points)
                        if not blueprint.design_collides(design, coord)]
        if not valid_coords:
            return None
        return valid_coords[int(self.rng.integers(len(valid_coords)))]

    def _add_random_design(self, blueprint: Blueprint) -> bool:
        axes = list(RotationAxis)
        for _ in range(self.max_placement_attempts):
            design = self.library.choice(self.rng)
            axis = axes[int(self.rng.integers(len(axes)))]
            rotated = design.rotate(axis, int(self.rng.integers(3)))

            placement = self.find_valid_offset(blueprint, rotated)
            if placement is not None:
                blueprint.apply_design(rotated, placement)
                self.stats['additions'] += 1
                return True

        self.stats['placement_failures'] += 1
        logger.debug(f"Could not place a design in a {blueprint.dims_string()} blueprint")
        return False
