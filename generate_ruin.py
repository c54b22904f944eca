#!/usr/bin/env python3
"""
Script to evolve procedural ruins.

Usage:
    python generate_ruin.py --mode quick --output-dir ruins_output
    python generate_ruin.py --config configs/ruins.yaml --runs 8
"""

import sys
import argparse
import json
import time
from pathlib import Path

# Add src to path
sys.path.append(str(Path(__file__).parent))

from src.ruins.generator import RuinGenerator, evolve_ruin_batch
from src.ruins.library import DesignLibrary
from src.stability.oracles import get_stability_oracle
from src.diagnostics.metrics import structure_statistics, summarize_population
from src.utils.config import DEFAULT_CONFIG, load_config, validate_config
from src.utils.logger import setup_logger


MODES = {
    'quick': {'population_size': 20, 'num_rounds': 10, 'num_elite': 2, 'grid_size': [6, 6, 6]},
    'debug': {'population_size': 5, 'num_rounds': 2, 'num_elite': 1, 'grid_size': [4, 4, 4]},
}


def build_config(args) -> dict:
    """Load configuration and apply the command line overrides."""
    if args.config:
        config = load_config(args.config)
    else:
        config = json.loads(json.dumps(DEFAULT_CONFIG))

    if args.mode in MODES:
        config['evolution'].update(MODES[args.mode])
        config['evolution']['num_survivors'] = min(config['evolution']['num_survivors'],
                                                   config['evolution']['population_size']
                                                   - config['evolution']['num_elite'])
    if args.seed is not None:
        config['evolution']['seed'] = args.seed
    if args.output_dir:
        config['output']['results_dir'] = args.output_dir

    return config


def run_single(config: dict, output_dir: Path, plot: bool, verbose: bool) -> dict:
    """Evolve one ruin and save it."""
    generator = RuinGenerator.from_config(config)
    best = generator.generate(verbose=verbose)
    results = generator.get_results()

    with open(output_dir / "ruin.json", 'w') as f:
        json.dump(best.to_dict(), f)

    scores = [generator.calculate_score(b) for b in generator.population]
    stats = {
        'score': generator.calculate_score(best),
        'structure': structure_statistics(best),
        'final_population': summarize_population(generator.population, scores),
        'results': results,
        'config': config
    }
    with open(output_dir / "ruin_stats.json", 'w') as f:
        json.dump(stats, f, indent=2)

    if plot:
        from src.diagnostics.visualizer import RuinVisualizer

        visualizer = RuinVisualizer(str(output_dir / "plots"))
        visualizer.plot_fitness_curves(results['fitness_history'])
        visualizer.plot_score_distribution(scores)
        visualizer.plot_blueprint(best)

    return stats


def run_batch(config: dict, output_dir: Path, runs: int) -> list:
    """Evolve several independent ruins in parallel."""
    evolution = config['evolution']
    stability = config['stability']
    library_config = config.get('library') or {}

    return evolve_ruin_batch(
        num_runs=runs,
        output_dir=str(output_dir),
        seed=evolution.get('seed'),
        dims=tuple(evolution['grid_size']),
        population_size=evolution['population_size'],
        num_rounds=evolution['num_rounds'],
        num_elite=evolution['num_elite'],
        num_survivors=evolution['num_survivors'],
        fitness_type=evolution.get('fitness_type', 'covered_volume'),
        library=DesignLibrary.from_config(library_config.get('shapes'),
                                          library_config.get('include_defaults', True)),
        stability_oracle=get_stability_oracle(stability['oracle'],
                                              check_balance=stability.get('check_balance', True))
    )


def main(argv=None):
    """Main function with command line arguments."""
    parser = argparse.ArgumentParser(description='Evolve procedural voxel ruins')
    parser.add_argument('--mode', choices=['full', 'quick', 'debug'], default='full',
                        help='Preset size of the run (default: full)')
    parser.add_argument('--config', help='YAML configuration file')
    parser.add_argument('--seed', type=int, help='Random seed')
    parser.add_argument('--output-dir', help='Output directory (default from config)')
    parser.add_argument('--runs', type=int, default=1,
                        help='Number of independent ruins to evolve in parallel')
    parser.add_argument('--plot', action='store_true', help='Save diagnostic plots')
    parser.add_argument('--verbose', action='store_true', help='Show progress and debug logs')

    args = parser.parse_args(argv)
    if args.runs > 1 and args.plot:
        parser.error("--plot is only supported for a single run")

    logger = setup_logger("src", level="DEBUG" if args.verbose else "INFO")

    config = build_config(args)
    if not validate_config(config):
        print("❌ Invalid configuration")
        sys.exit(1)

    output_dir = Path(config['output']['results_dir'])
    output_dir.mkdir(parents=True, exist_ok=True)

    print("Ruin Evolution")
    print("=" * 50)
    evolution = config['evolution']
    print(f"Grid: {' x '.join(str(d) for d in evolution['grid_size'])}")
    print(f"Population: {evolution['population_size']}, rounds: {evolution['num_rounds']}, "
          f"elite: {evolution['num_elite']}, survivors: {evolution['num_survivors']}")

    start_time = time.time()

    if args.runs > 1:
        filepaths = run_batch(config, output_dir, args.runs)
        print(f"\n✅ {len(filepaths)} ruins saved to {output_dir}")
    else:
        stats = run_single(config, output_dir, args.plot, args.verbose)
        print(f"\n✅ Best score: {stats['score']}")
        print(f"   Blocks: {stats['structure']['num_blocks']}, "
              f"sub-designs: {stats['structure']['num_subdesigns']}")
        print(f"   Saved to {output_dir / 'ruin.json'}")

    duration = time.time() - start_time
    logger.info(f"Finished in {duration:.1f} seconds")


if __name__ == "__main__":
    main()
