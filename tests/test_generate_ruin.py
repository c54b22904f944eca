"""
Tests for the ruin generation script
"""

import argparse
import json

import pytest
import generate_ruin
from src.ruins.blueprint import Blueprint
from src.utils.config import validate_config


def make_args(**overrides) -> argparse.Namespace:
    args = {'config': None, 'mode': 'debug', 'seed': 3, 'output_dir': None}
    args.update(overrides)
    return argparse.Namespace(**args)


def test_build_config_applies_mode(tmp_path):
    """Test command line overrides end up in the configuration."""
    config = generate_ruin.build_config(make_args(output_dir=str(tmp_path)))

    assert validate_config(config)
    assert config['evolution']['population_size'] == 5
    assert config['evolution']['grid_size'] == [4, 4, 4]
    assert config['evolution']['seed'] == 3
    assert config['output']['results_dir'] == str(tmp_path)


def test_run_single_writes_results(tmp_path):
    """Test a debug run saves the ruin and its statistics."""
    config = generate_ruin.build_config(make_args())
    config['stability']['oracle'] = 'always'

    stats = generate_ruin.run_single(config, tmp_path, plot=False, verbose=False)

    with open(tmp_path / "ruin.json") as f:
        ruin = Blueprint.from_dict(json.load(f))
    with open(tmp_path / "ruin_stats.json") as f:
        saved_stats = json.load(f)

    assert ruin.dims_string() == "4 x 4 x 4"
    assert saved_stats['score'] == stats['score']
    assert saved_stats['final_population']['size'] == 5


def test_plot_rejected_for_batch_runs(tmp_path):
    """Test plots cannot be requested together with several runs."""
    with pytest.raises(SystemExit) as excinfo:
        generate_ruin.main(['--mode', 'debug', '--runs', '2', '--plot',
                            '--output-dir', str(tmp_path)])

    assert excinfo.value.code == 2
    assert not (tmp_path / "ruin.json").exists()


if __name__ == "__main__":
    pytest.main([__file__])
