# modtrace
"""
Didactic number-theory engine: modular arithmetic, primes, RSA,
Diffie-Hellman and discrete logarithms, with step-by-step traces.
"""

__version__ = "0.1.0"
