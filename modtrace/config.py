"""
Engine Configuration

Defaults for every bounded loop and policy choice in modtrace, plus a
small frozen container that lets a caller override them per call site.

Configuration can be built from a dict or loaded from a JSON file:

    >>> config = EngineConfig.from_dict({'default_max_steps': 500})
    >>> config.default_max_steps
    500
"""

import json
from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union


# ============================================================================
# Constants
# ============================================================================

WITNESS_BASES = (2, 3, 5)          # Fixed Miller-Rabin witnesses
DEFAULT_PUBLIC_EXPONENT = 65537    # 2^16 + 1
FALLBACK_PUBLIC_EXPONENT = 3
MAX_PRIME_ATTEMPTS = 100_000       # Candidates drawn before giving up
MAX_SAFE_PRIME_ATTEMPTS = 100_000
MAX_GENERATOR_ATTEMPTS = 10_000
MAX_EXPONENT_REPAIRS = 5000        # Bumps of e in choose_e_d
DEFAULT_MAX_STEPS = 1000           # Discrete-log step budget
SMALL_PRIME_LIMIT = 200            # Sieve bound for pick_small_primes_in_range


# ============================================================================
# Engine Configuration
# ============================================================================

@dataclass(frozen=True)
class EngineConfig:
    """
    Per-call tunables for the generation loops and solvers.

    seed=None means ambient entropy; any integer makes generation
    reproducible.
    """
    witness_bases: Tuple[int, ...] = WITNESS_BASES
    public_exponent: int = DEFAULT_PUBLIC_EXPONENT
    fallback_exponent: int = FALLBACK_PUBLIC_EXPONENT
    max_prime_attempts: int = MAX_PRIME_ATTEMPTS
    max_safe_prime_attempts: int = MAX_SAFE_PRIME_ATTEMPTS
    max_generator_attempts: int = MAX_GENERATOR_ATTEMPTS
    max_exponent_repairs: int = MAX_EXPONENT_REPAIRS
    default_max_steps: int = DEFAULT_MAX_STEPS
    seed: Optional[int] = None

    def __post_init__(self):
        for name in ('max_prime_attempts', 'max_safe_prime_attempts',
                     'max_generator_attempts', 'max_exponent_repairs'):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")
        if self.default_max_steps < 0:
            raise ValueError("default_max_steps must be non-negative")
        if not self.witness_bases:
            raise ValueError("witness_bases cannot be empty")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EngineConfig':
        """Build a config from a plain dict, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        values = dict(data)
        if 'witness_bases' in values:
            values['witness_bases'] = tuple(values['witness_bases'])
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to a JSON-friendly dict."""
        data = asdict(self)
        data['witness_bases'] = list(self.witness_bases)
        return data


DEFAULT_CONFIG = EngineConfig()


def load_config(path: Union[str, Path]) -> EngineConfig:
    """
    Load an EngineConfig from a JSON file.

    Keys missing from the file keep their defaults.
    """
    with Path(path).open() as f:
        return EngineConfig.from_dict(json.load(f))
