"""
RSA Mathematical Operations Implementation

Implements RSA key derivation on top of number_theory:
- RSA key pair generation from two random primes
- Public/private exponent selection (65537 with fallback to 3)
- Exponent repair routine that guarantees e != d
- Raw encryption, decryption, signing and verification
- Small-prime picking and permutation maps for visualizations
- Export to the `cryptography` package (PEM)

Key derivation:
    n = p*q, phi = (p-1)(q-1) (or lambda = lcm(p-1, q-1)),
    d = e^(-1) mod phi
"""

import logging
import random
from dataclasses import dataclass
from typing import Tuple, Optional, List, Dict

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.backends import default_backend

from ..config import (
    DEFAULT_PUBLIC_EXPONENT, FALLBACK_PUBLIC_EXPONENT,
    MAX_PRIME_ATTEMPTS, MAX_EXPONENT_REPAIRS, SMALL_PRIME_LIMIT,
)
from .number_theory import (
    SearchExhaustedError, make_rng, mod_exp, gcd, mod_inverse,
    generate_prime, phi_of_pq, lambda_of_pq,
)


logger = logging.getLogger(__name__)

MIN_KEY_BITS = 8  # Two distinct 4-bit primes (11, 13) are the smallest pair


class KeyDerivationError(RuntimeError):
    """Raised when RSA derivation breaks its own coprimality invariant."""
    pass


@dataclass(frozen=True)
class KeyPair:
    """
    RSA key pair container with convenient methods.

    Example:
        >>> keypair = KeyPair.generate(bits=64, seed=7)
        >>> ciphertext = keypair.encrypt(42)
        >>> keypair.decrypt(ciphertext)
        42
    """
    p: int
    q: int
    n: int
    e: int
    d: int

    @classmethod
    def generate(cls, bits: int = 1024, seed: Optional[int] = None,
                 use_lambda: bool = False) -> 'KeyPair':
        """Generate a new RSA key pair."""
        return generate_rsa_keypair(bits, seed=seed, use_lambda=use_lambda)

    @property
    def public_key(self) -> Tuple[int, int]:
        """Public key (e, n)."""
        return (self.e, self.n)

    @property
    def private_key(self) -> Tuple[int, int]:
        """Private key (d, n)."""
        return (self.d, self.n)

    @property
    def phi(self) -> int:
        """Euler's totient of n."""
        return phi_of_pq(self.p, self.q)

    @property
    def key_size(self) -> int:
        """Key size in bits."""
        return self.n.bit_length()

    def encrypt(self, message: int) -> int:
        """Encrypt a message using public key."""
        return rsa_encrypt(message, self.public_key)

    def decrypt(self, ciphertext: int) -> int:
        """Decrypt a ciphertext using private key."""
        return rsa_decrypt(ciphertext, self.private_key)

    def sign(self, message: int) -> int:
        """Sign a message using private key."""
        return rsa_sign(message, self.private_key)

    def verify(self, message: int, signature: int) -> bool:
        """Verify a signature using public key."""
        return rsa_verify(message, signature, self.public_key)

    def to_dict(self) -> Dict[str, str]:
        """All five components as decimal strings."""
        return {
            'p': str(self.p),
            'q': str(self.q),
            'n': str(self.n),
            'e': str(self.e),
            'd': str(self.d),
        }

    def to_cryptography(self) -> rsa.RSAPrivateKey:
        """
        Load this key pair into the `cryptography` package.

        OpenSSL validates the key on load, so tiny demo keys may be rejected.
        """
        public_numbers = rsa.RSAPublicNumbers(self.e, self.n)
        private_numbers = rsa.RSAPrivateNumbers(
            p=self.p,
            q=self.q,
            d=self.d,
            dmp1=rsa.rsa_crt_dmp1(self.d, self.p),
            dmq1=rsa.rsa_crt_dmq1(self.d, self.q),
            iqmp=rsa.rsa_crt_iqmp(self.p, self.q),
            public_numbers=public_numbers,
        )
        return private_numbers.private_key(default_backend())

    def private_pem(self) -> bytes:
        """Get private key as unencrypted PKCS#8 PEM."""
        return self.to_cryptography().private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption()
        )

    def __repr__(self) -> str:
        return f"KeyPair(bits={self.key_size}, e={self.e})"


def generate_rsa_keypair(bits: int = 1024,
                         rng: Optional[random.Random] = None,
                         seed: Optional[int] = None,
                         use_lambda: bool = False,
                         public_exponent: int = DEFAULT_PUBLIC_EXPONENT,
                         fallback_exponent: int = FALLBACK_PUBLIC_EXPONENT,
                         max_attempts: int = MAX_PRIME_ATTEMPTS) -> KeyPair:
    """
    Generate an RSA key pair.

    Generates two distinct random primes of half the bit length,
    computes n = p*q, and derives the private exponent from the
    preferred public exponent (or the fallback when it shares a
    factor with the totient).

    Args:
        bits: Desired bit length of modulus n
        rng: Random source; built from seed when omitted
        seed: Seed used only when rng is None
        use_lambda: Invert e modulo lambda(n) instead of phi(n)
        public_exponent: Preferred e
        fallback_exponent: e used when gcd(public_exponent, totient) != 1
        max_attempts: Bound for each prime search and for the p != q resampling

    Returns:
        KeyPair with e*d = 1 (mod totient)

    Raises:
        ValueError: If bits < MIN_KEY_BITS
        SearchExhaustedError: If a prime search runs out of attempts
        KeyDerivationError: If the chosen exponent has no inverse
    """
    if bits < MIN_KEY_BITS:
        raise ValueError(f"Key size must be at least {MIN_KEY_BITS} bits")
    if rng is None:
        rng = make_rng(seed)

    prime_bits = bits // 2

    p = generate_prime(prime_bits, rng=rng, max_attempts=max_attempts)
    q = generate_prime(prime_bits, rng=rng, max_attempts=max_attempts)

    # Ensure p != q
    resamples = 0
    while p == q:
        resamples += 1
        if resamples > max_attempts:
            raise SearchExhaustedError(
                f"Could not draw two distinct {prime_bits}-bit primes", resamples
            )
        q = generate_prime(prime_bits, rng=rng, max_attempts=max_attempts)

    n = p * q
    totient = lambda_of_pq(p, q) if use_lambda else phi_of_pq(p, q)

    e = public_exponent
    if gcd(e, totient) != 1:
        logger.debug("gcd(%d, totient) != 1, falling back to e=%d", e, fallback_exponent)
        e = fallback_exponent

    d = mod_inverse(e, totient)
    if d is None:
        raise KeyDerivationError(
            f"Public exponent {e} is not invertible modulo the totient"
        )

    return KeyPair(p=p, q=q, n=n, e=e, d=d)


def rsa_encrypt(message: int, public_key: Tuple[int, int]) -> int:
    """
    RSA encryption of a message.

    Computes ciphertext = message^e mod n

    Args:
        message: Integer message (must be < n)
        public_key: Tuple (e, n)

    Returns:
        Encrypted ciphertext as integer
    """
    e, n = public_key
    if message >= n:
        raise ValueError("Message must be less than modulus n")
    return mod_exp(message, e, n)


def rsa_decrypt(ciphertext: int, private_key: Tuple[int, int]) -> int:
    """Computes message = ciphertext^d mod n."""
    d, n = private_key
    return mod_exp(ciphertext, d, n)


def rsa_sign(message: int, private_key: Tuple[int, int]) -> int:
    """
    RSA digital signature.

    Computes signature = message^d mod n

    Args:
        message: Message hash as integer (must be < n)
        private_key: Tuple (d, n)

    Returns:
        Digital signature as integer
    """
    d, n = private_key
    if message >= n:
        raise ValueError("Message must be less than modulus n")
    return mod_exp(message, d, n)


def rsa_verify(message: int, signature: int, public_key: Tuple[int, int]) -> bool:
    """Check that signature^e mod n == message."""
    e, n = public_key
    return mod_exp(signature, e, n) == message


# ============================================================================
# Exponent Helpers
# ============================================================================

def n_from_pq(p: int, q: int) -> int:
    """Modulus n = p*q."""
    return p * q


def d_from_e_pq(e: int, p: int, q: int, use_lambda: bool = False) -> Optional[int]:
    """
    Private exponent for a given public exponent and prime pair.

    Returns:
        e^(-1) mod totient, or None if e is not invertible
    """
    totient = lambda_of_pq(p, q) if use_lambda else phi_of_pq(p, q)
    if totient <= 0:
        return None
    return mod_inverse(e, totient)


def choose_e_d(p: int, q: int,
               use_lambda: bool = False,
               e_hint: Optional[int] = None,
               max_repairs: int = MAX_EXPONENT_REPAIRS) -> Optional[Tuple[int, int]]:
    """
    Pick a public/private exponent pair for the primes p and q.

    Steps:
    1. Start from e_hint, or 65537 when the hint is missing or unusable
       (e <= 1, e >= totient, or not coprime to the totient)
    2. If e still shares a factor with the totient, make it odd and
       bump it by 2 until it is coprime
    3. Derive d; while d == e, bump e by 2 and derive again

    Every repair loop is bounded by max_repairs.

    Args:
        p: First prime
        q: Second prime
        use_lambda: Use lambda(n) instead of phi(n) as the totient
        e_hint: Preferred public exponent
        max_repairs: Bound for each repair loop

    Returns:
        Tuple (e, d) with e != d and e*d = 1 (mod totient), or None on failure
    """
    totient = lambda_of_pq(p, q) if use_lambda else phi_of_pq(p, q)
    if totient <= 1:
        return None

    e = e_hint if e_hint is not None else DEFAULT_PUBLIC_EXPONENT
    if e <= 1 or e >= totient or gcd(e, totient) != 1:
        e = DEFAULT_PUBLIC_EXPONENT

    if gcd(e, totient) != 1:
        if e % 2 == 0:
            e += 1
        repairs = 0
        while gcd(e, totient) != 1:
            if repairs >= max_repairs:
                logger.debug("No exponent coprime to %d within %d repairs", totient, max_repairs)
                return None
            e += 2
            repairs += 1

    d = mod_inverse(e, totient)
    if d is None:
        return None

    repairs = 0
    while d == e:
        next_d = None
        while next_d is None:
            e += 2
            repairs += 1
            if repairs > max_repairs or e >= totient:
                logger.debug("No exponent with e != d below %d", totient)
                return None
            next_d = mod_inverse(e, totient)
        d = next_d

    return e, d


def _small_primes(limit: int) -> List[int]:
    """Sieve of Eratosthenes up to limit (inclusive)."""
    sieve = [True] * (limit + 1)
    sieve[0] = sieve[1] = False
    i = 2
    while i * i <= limit:
        if sieve[i]:
            for j in range(i * i, limit + 1, i):
                sieve[j] = False
        i += 1
    return [i for i in range(2, limit + 1) if sieve[i]]


def pick_small_primes_in_range(n_min: int, n_max: int,
                               limit: int = SMALL_PRIME_LIMIT) -> Optional[Tuple[int, int, int]]:
    """
    Find primes p < q <= limit whose product lies in [n_min, n_max].

    The product closest to the midpoint of the range wins (closest to
    n_min when n_max is 0, meaning "no upper bound"). Ties keep the
    first pair found.

    Returns:
        Tuple (p, q, n), or None if no pair fits
    """
    primes = _small_primes(limit)
    target = n_min if n_max == 0 else (n_min + n_max) >> 1

    best = None
    best_diff = None
    for idx, p in enumerate(primes):
        for q in primes[idx + 1:]:
            product = p * q
            if product < n_min:
                continue
            if n_max != 0 and product > n_max:
                break
            diff = abs(product - target)
            if best_diff is None or diff < best_diff:
                best = (p, q, product)
                best_diff = diff
    return best


def map_modexp(e: int, n: int, count: int) -> List[int]:
    """
    Map i -> (i^e mod n) mod count for i in range(count).

    With count == n and a valid RSA exponent this is the permutation
    RSA applies to Z_n.
    """
    return [mod_exp(i, e, n) % count for i in range(count)]
