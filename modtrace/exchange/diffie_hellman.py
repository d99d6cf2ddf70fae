"""
Diffie-Hellman Module

Implements finite-field Diffie-Hellman with:
- Safe prime search (p = 2q + 1 with q prime)
- Generator search (g^q mod p != 1)
- Two-party exchange simulation with a step-by-step trace
- Parameter export through the `cryptography` package (PKCS#3 PEM)

Exchange trace (fixed order):
    1. Alice: A = g^a mod p
    2. Bob:   B = g^b mod p
    3. Alice: K = B^a mod p
    4. Bob:   K = A^b mod p
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional, Tuple, Dict, Any

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import dh
from cryptography.hazmat.backends import default_backend

from ..config import MAX_SAFE_PRIME_ATTEMPTS, MAX_GENERATOR_ATTEMPTS
from ..core_crypto.number_theory import (
    SearchExhaustedError, make_rng, mod_exp, is_probable_prime, generate_prime,
)
from ..core_crypto.step_trace import Step, StepTrace


logger = logging.getLogger(__name__)

MIN_PARAMETER_BITS = 3  # q must be at least a 2-bit prime


@dataclass(frozen=True)
class DHParameters:
    """Group parameters: safe prime p and generator g."""
    p: int
    g: int

    @property
    def q(self) -> int:
        """Sophie Germain prime (p - 1) / 2."""
        return (self.p - 1) // 2

    def to_dict(self) -> Dict[str, str]:
        return {'p': str(self.p), 'g': str(self.g)}

    def to_cryptography(self) -> dh.DHParameters:
        """
        Load the parameters into the `cryptography` package.

        Raises:
            ValueError: If p is shorter than 512 bits (library minimum)
        """
        return dh.DHParameterNumbers(self.p, self.g).parameters(default_backend())

    def to_pem(self) -> bytes:
        """Serialize as PKCS#3 PEM."""
        return self.to_cryptography().parameter_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.ParameterFormat.PKCS3
        )


@dataclass(frozen=True)
class DHExchange:
    """
    Complete record of one simulated exchange.

    alice_shared == bob_shared whenever the inputs are consistent.
    """
    p: int
    g: int
    alice_private: int
    bob_private: int
    alice_public: int
    bob_public: int
    alice_shared: int
    bob_shared: int
    steps: Tuple[Step, ...]

    @property
    def shared_secrets_match(self) -> bool:
        return self.alice_shared == self.bob_shared

    def to_dict(self) -> Dict[str, Any]:
        """Decimal-string record with the ordered steps."""
        return {
            'p': str(self.p),
            'g': str(self.g),
            'alice_private': str(self.alice_private),
            'bob_private': str(self.bob_private),
            'alice_public': str(self.alice_public),
            'bob_public': str(self.bob_public),
            'alice_shared': str(self.alice_shared),
            'bob_shared': str(self.bob_shared),
            'steps': [step.to_dict() for step in self.steps],
        }


# ============================================================================
# Parameter Generation
# ============================================================================

def generate_safe_prime(bits: int,
                        rng: Optional[random.Random] = None,
                        seed: Optional[int] = None,
                        max_attempts: int = MAX_SAFE_PRIME_ATTEMPTS) -> int:
    """
    Search for a safe prime p = 2q + 1 of the given bit length.

    Draws a (bits-1)-bit prime q and keeps the first p = 2q + 1 that is
    itself prime (rejection sampling).

    Raises:
        ValueError: If bits < MIN_PARAMETER_BITS
        SearchExhaustedError: If no safe prime was found in max_attempts
    """
    if bits < MIN_PARAMETER_BITS:
        raise ValueError(f"Bit length must be at least {MIN_PARAMETER_BITS}")
    if rng is None:
        rng = make_rng(seed)

    for attempt in range(1, max_attempts + 1):
        q = generate_prime(bits - 1, rng=rng)
        p = (q << 1) + 1
        if is_probable_prime(p):
            logger.debug("Found %d-bit safe prime after %d candidates", bits, attempt)
            return p

    raise SearchExhaustedError(
        f"No {bits}-bit safe prime found in {max_attempts} attempts", max_attempts
    )


def find_generator(p: int,
                   rng: Optional[random.Random] = None,
                   seed: Optional[int] = None,
                   max_attempts: int = MAX_GENERATOR_ATTEMPTS) -> int:
    """
    Draw g in [2, p-2] until g^((p-1)/2) mod p != 1.

    For a safe prime this means g is not a quadratic residue, so it
    generates the whole group of order p - 1.

    Raises:
        ValueError: If p < 5
        SearchExhaustedError: If every draw landed in the order-q subgroup
    """
    if p < 5:
        raise ValueError("Modulus must be at least 5")
    if rng is None:
        rng = make_rng(seed)

    half_order = (p - 1) >> 1
    for attempt in range(1, max_attempts + 1):
        candidate = rng.randrange(2, p - 1)
        if mod_exp(candidate, half_order, p) != 1:
            logger.debug("Accepted generator after %d candidates", attempt)
            return candidate

    raise SearchExhaustedError(
        f"No generator found for p={p} in {max_attempts} attempts", max_attempts
    )


def generate_dh_params(bits: int,
                       rng: Optional[random.Random] = None,
                       seed: Optional[int] = None,
                       max_attempts: int = MAX_SAFE_PRIME_ATTEMPTS,
                       max_generator_attempts: int = MAX_GENERATOR_ATTEMPTS) -> DHParameters:
    """
    Generate Diffie-Hellman parameters (safe prime p, generator g).

    Args:
        bits: Bit length of p
        rng: Random source; built from seed when omitted
        seed: Seed used only when rng is None
        max_attempts: Bound for the safe-prime search
        max_generator_attempts: Bound for the generator search

    Returns:
        DHParameters
    """
    if rng is None:
        rng = make_rng(seed)
    p = generate_safe_prime(bits, rng=rng, max_attempts=max_attempts)
    g = find_generator(p, rng=rng, max_attempts=max_generator_attempts)
    return DHParameters(p=p, g=g)


# ============================================================================
# Exchange Simulation
# ============================================================================

def dh_exchange(p: int, g: int, a: int, b: int) -> DHExchange:
    """
    Simulate a Diffie-Hellman exchange between Alice and Bob.

    Args:
        p: Prime modulus
        g: Generator
        a: Alice's private exponent
        b: Bob's private exponent

    Returns:
        DHExchange with public values, both shared secrets and four steps
    """
    trace = StepTrace(start=1)

    alice_public = mod_exp(g, a, p)
    trace.add(
        label="Alice public key",
        description="Alice computes her public key",
        value=alice_public,
        position="a",
        computation=f"A = g^a mod p = {g}^{a} mod {p}",
    )

    bob_public = mod_exp(g, b, p)
    trace.add(
        label="Bob public key",
        description="Bob computes his public key",
        value=bob_public,
        position="b",
        computation=f"B = g^b mod p = {g}^{b} mod {p}",
    )

    # Public values swapped, each side raises the other's to its own secret
    alice_shared = mod_exp(bob_public, a, p)
    trace.add(
        label="Alice shared secret",
        description="Alice computes shared secret using Bob's public key",
        value=alice_shared,
        position="a",
        computation=f"K = B^a mod p = {bob_public}^{a} mod {p}",
    )

    bob_shared = mod_exp(alice_public, b, p)
    trace.add(
        label="Bob shared secret",
        description="Bob computes shared secret using Alice's public key",
        value=bob_shared,
        position="b",
        computation=f"K = A^b mod p = {alice_public}^{b} mod {p}",
    )

    return DHExchange(
        p=p,
        g=g,
        alice_private=a,
        bob_private=b,
        alice_public=alice_public,
        bob_public=bob_public,
        alice_shared=alice_shared,
        bob_shared=bob_shared,
        steps=trace.steps,
    )


def random_private_exponent(p: int, rng: random.Random) -> int:
    """Draw a private exponent in [2, p-2]."""
    if p < 5:
        raise ValueError("Modulus must be at least 5")
    return rng.randrange(2, p - 1)


def simulate_exchange(params: DHParameters,
                      rng: Optional[random.Random] = None,
                      seed: Optional[int] = None) -> DHExchange:
    """Draw both private exponents and run dh_exchange()."""
    if rng is None:
        rng = make_rng(seed)
    a = random_private_exponent(params.p, rng)
    b = random_private_exponent(params.p, rng)
    return dh_exchange(params.p, params.g, a, b)
