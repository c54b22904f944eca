"""
Ruin Evolution Engine
Genetic algorithm evolving a population of blueprints
"""

import json
import logging
import multiprocessing as mp
import os
import pickle
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np
from tqdm import tqdm

from .blueprint import Blueprint, CoordLike, as_coord
from .fitness import get_fitness_function
from .library import DesignLibrary
from .mutator import Mutator
from .selection import build_cdf, weighted_sample
from ..stability import oracles

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, str], None]


class RuinGenerator:
    """
    Genetic algorithm for evolving ruins.

    Every round the population is ranked by fitness. The top individuals
    survive untouched (elites), a few more are copied over after a
    fitness-weighted draw (survivors) and the rest of the next generation
    are mutations of fitness-weighted draws.
    """

    def __init__(
        self,
        dims: CoordLike = (10, 10, 10),
        population_size: int = 100,
        num_rounds: int = 100,
        num_elite: int = 0,
        num_survivors: int = 0,
        fitness_type: str = 'covered_volume',
        score_fn: Optional[Callable[[Blueprint], int]] = None,
        mutator: Optional[Mutator] = None,
        library: Optional[DesignLibrary] = None,
        stability_oracle: Optional[Callable[[Blueprint], bool]] = None,
        progress_callback: Optional[ProgressCallback] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize ruin generator.

        Args:
            dims: Size of every blueprint
            population_size: Number of blueprints per generation
            num_rounds: Number of generations to evolve
            num_elite: Best blueprints copied unchanged into the next generation
            num_survivors: Fitness-weighted picks copied unchanged
            fitness_type: Registered fitness function used if score_fn is omitted
            score_fn: Custom scoring strategy returning a non-negative integer
            mutator: Mutation operator (built from library and oracle if omitted)
            library: Designs for the default mutator
            stability_oracle: Stability check for the default mutator
            progress_callback: Called with (fraction_complete, message)
            rng: Random generator for selection (and the default mutator)
            seed: Seed for a new random generator if rng is not given
        """
        if population_size < 1:
            raise ValueError(f"population_size must be at least 1, got {population_size}")
        if num_rounds < 0:
            raise ValueError(f"num_rounds must be non-negative, got {num_rounds}")
        if num_elite < 0 or num_survivors < 0 or num_elite + num_survivors > population_size:
            raise ValueError(
                f"Need 0 <= num_elite + num_survivors <= population_size, got num_elite={num_elite}, "
                f"num_survivors={num_survivors}, population_size={population_size}"
            )

        self.dims = as_coord(dims)
        Blueprint.from_dims(self.dims)  # fail early on negative dimensions
        self.population_size = population_size
        self.num_rounds = num_rounds
        self.num_elite = num_elite
        self.num_survivors = num_survivors
        self.progress_callback = progress_callback
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        if mutator is None:
            if stability_oracle is None:
                stability_oracle = oracles.SupportStabilityOracle()
            mutator = Mutator(library=library, stability_oracle=stability_oracle, rng=self.rng)
        self.mutator = mutator
        self.score_fn = score_fn or get_fitness_function(fitness_type)

        self.population: List[Blueprint] = []
        self.round = 0
        self.initial_scores: List[int] = []
        self.best_fitness_history: List[int] = []
        self.avg_fitness_history: List[float] = []
        self._pbar = None

    @classmethod
    def from_config(cls, config: Dict[str, Any],
                    progress_callback: Optional[ProgressCallback] = None) -> 'RuinGenerator':
        """
        Build a generator from a configuration dictionary.

        Args:
            config: Configuration as returned by load_config
            progress_callback: Called with (fraction_complete, message)

        Returns:
            Configured generator sharing one random stream with its mutator
        """
        evolution = config['evolution']
        stability = config['stability']
        library_config = config.get('library') or {}

        rng = np.random.default_rng(evolution.get('seed'))
        library = DesignLibrary.from_config(library_config.get('shapes'),
                                            library_config.get('include_defaults', True))
        oracle = oracles.get_stability_oracle(stability['oracle'],
                                              check_balance=stability.get('check_balance', True))
        mutation = config['mutation']
        mutator = Mutator(
            library=library,
            stability_oracle=oracle,
            delete_chance=mutation['delete_chance'],
            max_mutation_attempts=mutation['max_mutation_attempts'],
            max_placement_attempts=mutation['max_placement_attempts'],
            num_init_mutations=mutation['num_init_mutations'],
            rng=rng
        )

        return cls(
            dims=tuple(evolution['grid_size']),
            population_size=evolution['population_size'],
            num_rounds=evolution['num_rounds'],
            num_elite=evolution['num_elite'],
            num_survivors=evolution['num_survivors'],
            fitness_type=evolution.get('fitness_type', 'covered_volume'),
            mutator=mutator,
            progress_callback=progress_callback,
            rng=rng
        )

    def _create_empty_population(self) -> List[Blueprint]:
        return [Blueprint.from_dims(self.dims) for _ in range(self.population_size)]

    def calculate_score(self, blueprint: Blueprint) -> int:
        return int(self.score_fn(blueprint))

    def _sort_population(self) -> List[int]:
        """Sort population by descending score, keeping prior order on ties."""
        scores = [self.calculate_score(b) for b in self.population]
        order = sorted(range(len(scores)), key=lambda i: -scores[i])
        self.population = [self.population[i] for i in order]
        return [scores[i] for i in order]

    def _report(self, fraction: float, message: str):
        if self.progress_callback is not None:
            self.progress_callback(fraction, message)
        if self._pbar is not None:
            self._pbar.set_description(message)
            self._pbar.n = round(fraction * self._pbar.total)
            self._pbar.refresh()

    def initialize_population(self):
        """Create the first generation of random blueprints."""
        total_steps = self.population_size + self.num_rounds
        self.population = self._create_empty_population()
        self.mutator.reset_stats()

        for i, blueprint in enumerate(self.population):
            self._report(i / total_steps,
                         f"Initializing population {i} / {self.population_size}")
            self.mutator.randomize_into(blueprint, blueprint)

        self.initial_scores = [self.calculate_score(b) for b in self.population]
        self.round = 0
        self.best_fitness_history = []
        self.avg_fitness_history = []

    def _evolve_round(self) -> List[int]:
        """
        Evolve one generation.

        Returns:
            Scores of the generation that was replaced, best first
        """
        scores = self._sort_population()
        cdf = build_cdf(scores)

        next_generation = self._create_empty_population()

        # Select elite
        for i in range(self.num_elite):
            self.population[i].copy_into(next_generation[i])

        # Select survivors
        for i in range(self.num_elite, self.num_elite + self.num_survivors):
            self.population[weighted_sample(cdf, self.rng)].copy_into(next_generation[i])

        # Select everyone else and mutate them
        for i in range(self.num_elite + self.num_survivors, self.population_size):
            parent = self.population[weighted_sample(cdf, self.rng)]
            self.mutator.mutate_into(parent, next_generation[i])

        self.population = next_generation
        self.round += 1
        return scores

    def generate(self, verbose: bool = False) -> Blueprint:
        """
        Run the full evolution.

        Args:
            verbose: Whether to show a progress bar

        Returns:
            Best blueprint of the final generation
        """
        total_steps = self.population_size + self.num_rounds
        if verbose:
            self._pbar = tqdm(total=total_steps, desc="Evolving ruin")

        try:
            self.initialize_population()

            for round_idx in range(self.num_rounds):
                scores = self._evolve_round()

                self.best_fitness_history.append(scores[0])
                self.avg_fitness_history.append(float(np.mean(scores)))

                self._report((self.population_size + round_idx + 1) / total_steps,
                             f"Completed {round_idx + 1} / {self.num_rounds} rounds of evolution")
                if self._pbar is not None:
                    self._pbar.set_postfix({
                        'best': scores[0],
                        'avg': f"{self.avg_fitness_history[-1]:.1f}"
                    })
                logger.info(f"Finished generation {round_idx + 1}, best score {scores[0]}")

            if self.num_rounds == 0:
                self._report(1.0, "Completed 0 / 0 rounds of evolution")
        finally:
            if self._pbar is not None:
                self._pbar.close()
                self._pbar = None

        self._sort_population()
        return self.population[0]

    def get_results(self) -> Dict[str, Any]:
        """Summary of the last run."""
        scores = [self.calculate_score(b) for b in self.population]
        return {
            'best_fitness': max(scores) if scores else 0,
            'initial_scores': self.initial_scores,
            'fitness_history': {
                'best': self.best_fitness_history,
                'average': self.avg_fitness_history
            },
            'generations': self.round,
            'mutation_stats': dict(self.mutator.stats)
        }

    def save_population(self, filepath: str):
        """Save evolved population to file."""
        with open(filepath, 'wb') as f:
            pickle.dump({
                'population': self.population,
                'dims': self.dims,
                'generation': self.round,
                'fitness_history': {
                    'best': self.best_fitness_history,
                    'average': self.avg_fitness_history
                }
            }, f)

    def load_population(self, filepath: str):
        """Load population from file."""
        with open(filepath, 'rb') as f:
            data = pickle.load(f)

        if data['dims'] != self.dims:
            raise ValueError(f"Saved population has dimensions {data['dims']}, expected {self.dims}")
        if len(data['population']) != self.population_size:
            raise ValueError(
                f"Saved population has {len(data['population'])} blueprints, "
                f"expected {self.population_size}"
            )

        self.population = data['population']
        self.round = data['generation']
        self.best_fitness_history = data['fitness_history']['best']
        self.avg_fitness_history = data['fitness_history']['average']


def _generate_single_ruin(run_id: int, output_dir: str, seed: Optional[int],
                          generator_kwargs: Dict[str, Any]) -> str:
    """Evolve one ruin and save it as JSON."""
    generator = RuinGenerator(seed=seed + run_id if seed is not None else None,
                              **generator_kwargs)
    best = generator.generate()
    results = generator.get_results()

    filepath = os.path.join(output_dir, f"ruin_{run_id:06d}.json")
    with open(filepath, 'w') as f:
        json.dump({
            'run_id': run_id,
            'score': generator.calculate_score(best),
            'blueprint': best.to_dict(),
            'fitness_history': results['fitness_history'],
            'mutation_stats': results['mutation_stats']
        }, f)

    return filepath


def evolve_ruin_batch(
    num_runs: int,
    output_dir: str,
    seed: Optional[int] = None,
    max_workers: Optional[int] = None,
    **generator_kwargs
) -> List[str]:
    """
    Evolve several ruins in parallel.

    Every run gets its own process and its own random stream.

    Args:
        num_runs: Number of independent evolutions
        output_dir: Directory to save evolved ruins
        seed: Base random seed, run i uses seed + i
        max_workers: Number of worker processes
        **generator_kwargs: Forwarded to RuinGenerator (must be picklable)

    Returns:
        List of filepaths to saved ruins, ordered by run id
    """
    os.makedirs(output_dir, exist_ok=True)
    generator_kwargs.pop('progress_callback', None)

    filepaths: List[Tuple[int, str]] = []
    with ProcessPoolExecutor(max_workers=max_workers or mp.cpu_count()) as executor:
        futures = {
            executor.submit(_generate_single_ruin, i, output_dir, seed, generator_kwargs): i
            for i in range(num_runs)
        }

        for future in tqdm(as_completed(futures), total=num_runs,
                           desc=f"Evolving {num_runs} ruins"):
            filepaths.append((futures[future], future.result()))

    return [path for _, path in sorted(filepaths)]
