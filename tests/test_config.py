"""
Tests for Configuration and Logging Utilities
"""

import copy
import logging

import pytest
import yaml
from src.utils.config import Config, DEFAULT_CONFIG, create_default_config, load_config, validate_config
from src.utils.logger import setup_logger


def test_load_config_creates_default(tmp_path):
    """Test a missing configuration file is created with defaults."""
    config_path = tmp_path / "configs" / "ruins.yaml"

    config = load_config(str(config_path))

    assert config_path.exists()
    assert config == DEFAULT_CONFIG


def test_load_config_merges_defaults(tmp_path):
    """Test a partial file is completed from the defaults."""
    config_path = tmp_path / "partial.yaml"
    with open(config_path, 'w') as f:
        yaml.dump({'evolution': {'population_size': 12}, 'stability': {'oracle': 'always'}}, f)

    config = load_config(str(config_path))

    assert config['evolution']['population_size'] == 12
    assert config['evolution']['num_rounds'] == DEFAULT_CONFIG['evolution']['num_rounds']
    assert config['stability']['oracle'] == 'always'
    assert config['mutation'] == DEFAULT_CONFIG['mutation']
    assert DEFAULT_CONFIG['evolution']['population_size'] == 100


def test_validate_config():
    """Test configuration validation."""
    assert validate_config(DEFAULT_CONFIG)

    missing_section = copy.deepcopy(DEFAULT_CONFIG)
    del missing_section['mutation']
    assert not validate_config(missing_section)

    missing_param = copy.deepcopy(DEFAULT_CONFIG)
    del missing_param['evolution']['num_rounds']
    assert not validate_config(missing_param)

    too_many_kept = copy.deepcopy(DEFAULT_CONFIG)
    too_many_kept['evolution'].update({'population_size': 4, 'num_elite': 3, 'num_survivors': 2})
    assert not validate_config(too_many_kept)

    bad_grid = copy.deepcopy(DEFAULT_CONFIG)
    bad_grid['evolution']['grid_size'] = [3, -3, 3]
    assert not validate_config(bad_grid)

    bad_chance = copy.deepcopy(DEFAULT_CONFIG)
    bad_chance['mutation']['delete_chance'] = 2.0
    assert not validate_config(bad_chance)


def test_config_dataclass(tmp_path):
    """Test the dataclass view of a configuration."""
    config_path = tmp_path / "default.yaml"
    create_default_config(str(config_path))

    config = Config.from_dict(load_config(str(config_path)))

    assert config.evolution['grid_size'] == [10, 10, 10]
    assert config.stability['oracle'] == 'support'
    assert config.output['results_dir'] == 'ruins_output'


def test_setup_logger(tmp_path):
    """Test logger setup with a log file, twice for the same name."""
    log_file = tmp_path / "logs" / "run.log"

    setup_logger("ruins_test", log_file=str(log_file), level="DEBUG")
    logger = setup_logger("ruins_test", log_file=str(log_file), level="DEBUG")
    logger.info("evolution started")
    for handler in logger.handlers:
        handler.flush()

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    assert "evolution started" in log_file.read_text()


if __name__ == "__main__":
    pytest.main([__file__])
