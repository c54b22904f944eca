"""
Diagnostic Visualizer
Plots for inspecting an evolution run
"""

import matplotlib.pyplot as plt
import numpy as np
from typing import Dict, List, Optional, Sequence
import json
from pathlib import Path

from ..ruins.blueprint import Blueprint


class RuinVisualizer:
    """
    Visualization tools for evolved ruins.
    """

    def __init__(self, output_dir: str = "diagnostics_plots", show: bool = False):
        """
        Initialize visualizer.

        Args:
            output_dir: Directory to save plots
            show: Whether to open a window for every plot
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.show = show

    def _finish(self, fig, filename: str, save: bool) -> Optional[Path]:
        path = None
        if save:
            path = self.output_dir / filename
            fig.savefig(path, dpi=150, bbox_inches='tight')

        if self.show:
            plt.show()
        plt.close(fig)
        return path

    def plot_fitness_curves(self, history: Dict[str, List[float]], save: bool = True) -> Optional[Path]:
        """
        Plot best and average score per generation.

        Args:
            history: Dictionary with 'best' and 'average' lists
            save: Whether to save the plot
        """
        fig, ax = plt.subplots(figsize=(10, 6))
        ax.plot(history['best'], label='Best', color='blue')
        ax.plot(history['average'], label='Average', color='orange')
        ax.set_title('Fitness per Generation')
        ax.set_xlabel('Generation')
        ax.set_ylabel('Score')
        ax.legend()
        ax.grid(True)

        return self._finish(fig, 'fitness_curves.png', save)

    def plot_score_distribution(self, scores: Sequence[int], save: bool = True) -> Optional[Path]:
        """
        Plot a histogram of population scores.

        Args:
            scores: Score of each individual
            save: Whether to save the plot
        """
        fig, ax = plt.subplots(figsize=(8, 6))
        ax.hist(scores, bins=min(30, max(1, len(set(scores)))), alpha=0.7, edgecolor='black')
        ax.axvline(np.mean(scores), color='red', linestyle='--',
                   label=f'Mean: {np.mean(scores):.1f}')
        ax.set_title('Score Distribution')
        ax.set_xlabel('Score')
        ax.set_ylabel('Frequency')
        ax.legend()
        ax.grid(True, alpha=0.3)

        return self._finish(fig, 'score_distribution.png', save)

    def plot_blueprint(self, blueprint: Blueprint, title: str = 'Ruin',
                       save: bool = True) -> Optional[Path]:
        """
        Draw a blueprint as voxels, one color per sub-design.

        Args:
            blueprint: Blueprint to draw
            title: Plot title
            save: Whether to save the plot
        """
        blocks = blueprint.get_blocks()
        # y is up in a blueprint, z is up for matplotlib
        voxels = np.transpose(blocks, (0, 2, 1))
        filled = voxels > 0

        cmap = plt.get_cmap('tab20')
        colors = np.empty(voxels.shape + (4,))
        colors[filled] = cmap(voxels[filled] % cmap.N)

        fig = plt.figure(figsize=(8, 8))
        ax = fig.add_subplot(projection='3d')
        if filled.any():
            ax.voxels(filled, facecolors=colors, edgecolor='k', linewidth=0.3)
        ax.set_xlabel('x')
        ax.set_ylabel('z')
        ax.set_zlabel('y')
        ax.set_title(f'{title} ({blueprint.dims_string()})')

        return self._finish(fig, 'blueprint.png', save)

    def create_report(self, results: Dict, save: bool = True) -> Dict:
        """
        Create a JSON report of an evolution run.

        Args:
            results: Results as returned by RuinGenerator.get_results
            save: Whether to save the report
        """
        report = {
            'summary': {
                'best_fitness': results['best_fitness'],
                'generations': results['generations'],
                'initial_best': max(results['initial_scores'], default=0)
            },
            'detailed_results': results
        }

        if save:
            with open(self.output_dir / 'evolution_report.json', 'w') as f:
                json.dump(report, f, indent=2)

        return report
