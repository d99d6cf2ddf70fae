"""
Number Theory Primitives

Implements the arbitrary-precision arithmetic shared by every other
modtrace component:
- Modular exponentiation (square-and-multiply algorithm)
- GCD / LCM and the Extended Euclidean Algorithm
- Modular inverse
- Fixed-witness Miller-Rabin primality testing
- Random prime generation with a bounded retry loop
- Euler's totient and Carmichael's function for n = p*q

Note: This implementation avoids using Python's built-in pow(a, b, mod).
      All modular exponentiation uses the square-and-multiply algorithm.

Note: is_probable_prime() uses the fixed witnesses {2, 3, 5}. It is exact
      below 25,326,001 (the first strong pseudoprime to all three bases)
      and only probabilistic above that.
"""

import logging
import random
import secrets
from typing import Tuple, Optional, Sequence

from ..config import WITNESS_BASES, MAX_PRIME_ATTEMPTS


logger = logging.getLogger(__name__)


class SearchExhaustedError(RuntimeError):
    """Raised when a bounded resampling loop runs out of attempts."""

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts


def make_rng(seed: Optional[int] = None) -> random.Random:
    """
    Build an independent random source for a single call.

    Args:
        seed: Integer seed for a reproducible trace, or None for OS entropy

    Returns:
        random.Random(seed) when seeded, otherwise secrets.SystemRandom()
    """
    if seed is None:
        return secrets.SystemRandom()
    return random.Random(seed)


def mod_exp(base: int, exponent: int, modulus: int) -> int:
    """
    Modular exponentiation using square-and-multiply algorithm.

    Computes (base^exponent) mod modulus efficiently without using
    Python's built-in pow(a, b, mod).

    Algorithm (right-to-left binary method):
    1. Start with result = 1
    2. For each bit of exponent (from LSB to MSB):
       - If bit is 1, multiply result by base (mod modulus)
       - Square the base (mod modulus)

    Time complexity: O(log exponent) multiplications

    Args:
        base: The base number
        exponent: The exponent (must be non-negative)
        modulus: The modulus (0 yields 0 rather than dividing by zero)

    Returns:
        (base^exponent) mod modulus

    Raises:
        ValueError: If exponent < 0 or modulus < 0
    """
    if exponent < 0:
        raise ValueError("Exponent must be non-negative")
    if modulus < 0:
        raise ValueError("Modulus must be non-negative")
    if modulus == 0 or modulus == 1:
        return 0

    # Reduce base first
    base = base % modulus
    result = 1

    # Square-and-multiply (right-to-left binary method)
    while exponent > 0:
        if exponent & 1:
            result = (result * base) % modulus
        base = (base * base) % modulus
        exponent >>= 1

    return result


def gcd(a: int, b: int) -> int:
    """
    Compute the greatest common divisor using Euclidean algorithm.

    Args:
        a: First integer
        b: Second integer

    Returns:
        GCD of a and b (non-negative)
    """
    a, b = abs(a), abs(b)
    while b:
        a, b = b, a % b
    return a


def lcm(a: int, b: int) -> int:
    """Least common multiple; 0 if either input is 0."""
    if a == 0 or b == 0:
        return 0
    return abs(a) // gcd(a, b) * abs(b)


def _trunc_div(a: int, b: int) -> int:
    """Integer quotient rounded toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def extended_gcd(a: int, b: int) -> Tuple[int, int, int]:
    """
    Extended Euclidean Algorithm over signed integers.

    Finds integers x, y such that: a*x + b*y = g

    Quotients truncate toward zero, so g carries the sign the last
    non-zero remainder ends up with and extended_gcd(a, 0) == (a, 1, 0).

    Args:
        a: First integer
        b: Second integer

    Returns:
        Tuple (g, x, y) where a*x + b*y = g
    """
    old_r, r = a, b
    old_x, x = 1, 0
    old_y, y = 0, 1

    # Iterative: operands may run to thousands of bits
    while r != 0:
        q = _trunc_div(old_r, r)
        old_r, r = r, old_r - q * r
        old_x, x = x, old_x - q * x
        old_y, y = y, old_y - q * y

    return old_r, old_x, old_y


def mod_inverse(a: int, m: int) -> Optional[int]:
    """
    Compute modular multiplicative inverse using Extended Euclidean Algorithm.

    Finds x such that (a * x) mod m = 1

    Modulus 0 means plain integers: extended_gcd(a, 0) == (a, 1, 0), so
    only a == 1 has an inverse (itself) and everything else gives None.

    Args:
        a: The number to find inverse of
        m: The modulus (must be non-negative)

    Returns:
        Modular inverse of a mod m in [0, m), or None if gcd(a, m) != 1

    Raises:
        ValueError: If m < 0
    """
    if m < 0:
        raise ValueError("Modulus must be non-negative")
    if m == 0:
        return 1 if a == 1 else None

    g, x, _ = extended_gcd(a % m, m)

    if g != 1:
        return None

    # Python's % already lands in [0, m) for positive m
    return x % m


def is_probable_prime(n: int, bases: Sequence[int] = WITNESS_BASES) -> bool:
    """
    Miller-Rabin primality test with fixed witnesses.

    Algorithm:
    1. Reject n < 2 and even n > 2
    2. Write n-1 as 2^s * d (factor out powers of 2)
    3. For each witness a < n:
       - Compute x = a^d mod n
       - If x = 1 or x = n-1, continue
       - Square x up to s-1 times, looking for n-1
       - If never found, n is composite

    Args:
        n: Number to test for primality
        bases: Witness bases (witnesses >= n are skipped)

    Returns:
        True if n is probably prime, False if definitely composite
    """
    if n < 2:
        return False
    if n == 2:
        return True
    if n % 2 == 0:
        return False

    # Write n-1 as 2^s * d
    s, d = 0, n - 1
    while d % 2 == 0:
        s += 1
        d //= 2

    for a in bases:
        if a >= n:
            continue

        x = mod_exp(a, d, n)
        if x == 1 or x == n - 1:
            continue

        composite = True
        for _ in range(s - 1):
            x = (x * x) % n
            if x == n - 1:
                composite = False
                break

        if composite:
            return False

    return True


def generate_prime(bits: int,
                   rng: Optional[random.Random] = None,
                   seed: Optional[int] = None,
                   max_attempts: int = MAX_PRIME_ATTEMPTS,
                   bases: Sequence[int] = WITNESS_BASES) -> int:
    """
    Generate a random prime number of specified bit length.

    Each candidate has its top bit set (exact bit length) and its
    bottom bit set (odd), then goes through is_probable_prime().

    Args:
        bits: Desired bit length of the prime
        rng: Random source; built from seed when omitted
        seed: Seed used only when rng is None
        max_attempts: Candidates to draw before giving up
        bases: Witness bases for the primality test

    Returns:
        A probable prime of exactly the specified bit length

    Raises:
        ValueError: If bits < 2
        SearchExhaustedError: If max_attempts candidates were all composite
    """
    if bits < 2:
        raise ValueError("Bit length must be at least 2")
    if rng is None:
        rng = make_rng(seed)

    for attempt in range(1, max_attempts + 1):
        candidate = rng.getrandbits(bits)
        candidate |= (1 << (bits - 1))  # Set MSB
        candidate |= 1  # Set LSB (make odd)

        if is_probable_prime(candidate, bases):
            logger.debug("Found %d-bit prime after %d candidates", bits, attempt)
            return candidate

    raise SearchExhaustedError(
        f"No {bits}-bit prime found in {max_attempts} attempts", max_attempts
    )


def phi_of_pq(p: int, q: int) -> int:
    """Euler's totient of n = p*q: (p-1)(q-1)."""
    return (p - 1) * (q - 1)


def lambda_of_pq(p: int, q: int) -> int:
    """Carmichael's function of n = p*q: lcm(p-1, q-1)."""
    return lcm(p - 1, q - 1)
