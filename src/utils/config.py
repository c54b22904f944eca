"""
Configuration Management
Load and validate configuration files
"""

import copy
import yaml
from pathlib import Path
from typing import Dict, Any
from dataclasses import dataclass, field


DEFAULT_CONFIG: Dict[str, Any] = {
    'evolution': {
        'grid_size': [10, 10, 10],
        'population_size': 100,
        'num_rounds': 100,
        'num_elite': 0,
        'num_survivors': 0,
        'fitness_type': 'covered_volume',
        'seed': None
    },
    'mutation': {
        'delete_chance': 0.1,
        'max_mutation_attempts': 3,
        'max_placement_attempts': 3,
        'num_init_mutations': 10
    },
    'stability': {
        'oracle': 'support',
        'check_balance': True
    },
    'library': {
        'include_defaults': True,
        'shapes': {}
    },
    'output': {
        'results_dir': 'ruins_output'
    }
}


@dataclass
class Config:
    """Configuration container."""
    evolution: Dict[str, Any]
    mutation: Dict[str, Any]
    stability: Dict[str, Any]
    library: Dict[str, Any] = field(default_factory=dict)
    output: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'Config':
        return cls(
            evolution=config['evolution'],
            mutation=config['mutation'],
            stability=config['stability'],
            library=config.get('library', {}),
            output=config.get('output', {})
        )


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Missing keys are filled in from the defaults.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary
    """
    config_file = Path(config_path)

    if not config_file.exists():
        # Create default config if it doesn't exist
        create_default_config(config_path)

    with open(config_file, 'r') as f:
        loaded = yaml.safe_load(f) or {}

    config = copy.deepcopy(DEFAULT_CONFIG)
    for section, values in loaded.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values

    return config


def create_default_config(config_path: str):
    """
    Create default configuration file.

    Args:
        config_path: Path where to create config file
    """
    config_file = Path(config_path)
    config_file.parent.mkdir(parents=True, exist_ok=True)

    with open(config_file, 'w') as f:
        yaml.dump(DEFAULT_CONFIG, f, default_flow_style=False, indent=2)

    print(f"Created default configuration at {config_path}")


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration parameters.

    Args:
        config: Configuration dictionary

    Returns:
        True if configuration is valid
    """
    required_sections = ['evolution', 'mutation', 'stability']

    for section in required_sections:
        if section not in config:
            print(f"Missing required configuration section: {section}")
            return False

    # Validate evolution config
    evolution = config['evolution']
    required_evolution = ['grid_size', 'population_size', 'num_rounds', 'num_elite', 'num_survivors']
    for param in required_evolution:
        if param not in evolution:
            print(f"Missing required evolution parameter: {param}")
            return False

    grid_size = evolution['grid_size']
    if len(grid_size) != 3 or any(d < 0 for d in grid_size):
        print(f"grid_size must be three non-negative integers, got {grid_size}")
        return False

    if evolution['population_size'] < 1:
        print("population_size must be at least 1")
        return False

    kept = evolution['num_elite'] + evolution['num_survivors']
    if evolution['num_elite'] < 0 or evolution['num_survivors'] < 0 or kept > evolution['population_size']:
        print("num_elite + num_survivors must be between 0 and population_size")
        return False

    # Validate mutation config
    mutation = config['mutation']
    required_mutation = ['delete_chance', 'max_mutation_attempts', 'max_placement_attempts',
                         'num_init_mutations']
    for param in required_mutation:
        if param not in mutation:
            print(f"Missing required mutation parameter: {param}")
            return False

    if not 0.0 <= mutation['delete_chance'] <= 1.0:
        print("delete_chance must be between 0 and 1")
        return False

    # Validate stability config
    if 'oracle' not in config['stability']:
        print("Missing required stability parameter: oracle")
        return False

    return True
