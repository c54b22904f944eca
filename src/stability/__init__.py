"""
Stability Module
Oracles deciding whether a blueprint would stand up
"""

from .oracles import (
    StabilityOracle,
    always_stable,
    SupportStabilityOracle,
    STABILITY_ORACLES,
    get_stability_oracle
)

__all__ = [
    'StabilityOracle',
    'always_stable',
    'SupportStabilityOracle',
    'STABILITY_ORACLES',
    'get_stability_oracle'
]
