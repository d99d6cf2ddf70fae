# Key Exchange Module
"""
Finite-field Diffie-Hellman including:
- Safe prime and generator search
- Traced two-party exchange simulation
- PKCS#3 parameter export
"""

from .diffie_hellman import (
    DHParameters,
    DHExchange,
    generate_safe_prime,
    find_generator,
    generate_dh_params,
    dh_exchange,
    simulate_exchange,
)

__all__ = [
    'DHParameters',
    'DHExchange',
    'generate_safe_prime',
    'find_generator',
    'generate_dh_params',
    'dh_exchange',
    'simulate_exchange',
]
