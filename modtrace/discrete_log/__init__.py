# Discrete Logarithm Module
"""
Discrete logarithm solvers that record every probe:
- Baby-step giant-step (meet-in-the-middle)
- Brute force
"""

from .solvers import (
    DiscreteLogResult,
    baby_step_giant_step,
    brute_force_discrete_log,
)

__all__ = [
    'DiscreteLogResult',
    'baby_step_giant_step',
    'brute_force_discrete_log',
]
