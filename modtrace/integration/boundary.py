"""
Boundary Operations

Decimal-string facade over the modtrace core. Every number crosses this
boundary as a base-10 string (ints are accepted too), so hosts without
native big integers lose no precision.

Error policy:
- Unparsable input raises MalformedInputError (caller bug, fail fast)
- "No solution" comes back as None
- Discrete-log budget exhaustion is the 'truncated' flag in the record
- Exhausted generation loops raise SearchExhaustedError

Each call builds its own random source from config.seed (or OS entropy),
so calls share no state. Pass an EventLogger to get an audit trail.
"""

import re
from typing import Optional, Dict, Any, List, Union

from ..config import EngineConfig, DEFAULT_CONFIG
from ..core_crypto import number_theory, rsa_math
from ..core_crypto.number_theory import SearchExhaustedError, make_rng
from ..exchange import diffie_hellman
from ..discrete_log import solvers
from .event_logger import EventLogger


Number = Union[str, int]

_UNSIGNED_RE = re.compile(r'[0-9]+')
_SIGNED_RE = re.compile(r'-?[0-9]+')


class MalformedInputError(ValueError):
    """Raised when a boundary argument is not a valid decimal integer."""
    pass


def parse_unsigned(value: Number, name: str = "value") -> int:
    """
    Parse a non-negative decimal integer.

    Args:
        value: Decimal string (digits only) or non-negative int
        name: Argument name used in the error message

    Raises:
        MalformedInputError: If value is not a non-negative decimal integer
    """
    if isinstance(value, bool):
        raise MalformedInputError(f"{name}: expected decimal string, got bool")
    if isinstance(value, int):
        if value < 0:
            raise MalformedInputError(f"{name}: must be non-negative, got {value}")
        return value
    if isinstance(value, str) and _UNSIGNED_RE.fullmatch(value):
        return int(value)
    raise MalformedInputError(f"{name}: invalid unsigned decimal string {value!r}")


def parse_signed(value: Number, name: str = "value") -> int:
    """Parse a decimal integer that may carry a leading '-'."""
    if isinstance(value, bool):
        raise MalformedInputError(f"{name}: expected decimal string, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _SIGNED_RE.fullmatch(value):
        return int(value)
    raise MalformedInputError(f"{name}: invalid signed decimal string {value!r}")


def _config(config: Optional[EngineConfig]) -> EngineConfig:
    return DEFAULT_CONFIG if config is None else config


# ============================================================================
# Arithmetic Kernel
# ============================================================================

def mod_pow(base: Number, exponent: Number, modulus: Number) -> str:
    """base^exponent mod modulus ("0" when modulus is "0")."""
    return str(number_theory.mod_exp(
        parse_unsigned(base, "base"),
        parse_unsigned(exponent, "exponent"),
        parse_unsigned(modulus, "modulus"),
    ))


def gcd(a: Number, b: Number) -> str:
    return str(number_theory.gcd(parse_unsigned(a, "a"), parse_unsigned(b, "b")))


def lcm(a: Number, b: Number) -> str:
    return str(number_theory.lcm(parse_unsigned(a, "a"), parse_unsigned(b, "b")))


def egcd(a: Number, b: Number) -> Dict[str, str]:
    """Extended gcd over signed inputs: {'g', 'x', 'y'} with a*x + b*y = g."""
    g, x, y = number_theory.extended_gcd(parse_signed(a, "a"), parse_signed(b, "b"))
    return {'g': str(g), 'x': str(x), 'y': str(y)}


def mod_inverse(a: Number, m: Number) -> Optional[str]:
    """Inverse of a modulo m in [0, m), or None if gcd(a, m) != 1."""
    inverse = number_theory.mod_inverse(parse_signed(a, "a"), parse_unsigned(m, "m"))
    return None if inverse is None else str(inverse)


# ============================================================================
# Primes
# ============================================================================

def generate_prime(bits: int,
                   config: Optional[EngineConfig] = None,
                   event_logger: Optional[EventLogger] = None) -> str:
    """Random probable prime of exactly `bits` bits."""
    config = _config(config)
    bits = parse_unsigned(bits, "bits")
    try:
        prime = number_theory.generate_prime(
            bits,
            rng=make_rng(config.seed),
            max_attempts=config.max_prime_attempts,
            bases=config.witness_bases,
        )
    except SearchExhaustedError as exc:
        if event_logger:
            event_logger.log_exhausted("generate_prime", exc.attempts)
        raise
    if event_logger:
        event_logger.log_prime(bits, prime)
    return str(prime)


def is_prime(n: Number,
             config: Optional[EngineConfig] = None,
             event_logger: Optional[EventLogger] = None) -> bool:
    """Fixed-witness Miller-Rabin; True means probably prime."""
    value = parse_unsigned(n, "n")
    result = number_theory.is_probable_prime(value, _config(config).witness_bases)
    if event_logger:
        event_logger.log_primality(value, result)
    return result


# ============================================================================
# RSA
# ============================================================================

def n_from_pq(p: Number, q: Number) -> str:
    return str(rsa_math.n_from_pq(parse_unsigned(p, "p"), parse_unsigned(q, "q")))


def phi_of(p: Number, q: Number) -> str:
    return str(number_theory.phi_of_pq(parse_unsigned(p, "p"), parse_unsigned(q, "q")))


def lambda_of(p: Number, q: Number) -> str:
    return str(number_theory.lambda_of_pq(parse_unsigned(p, "p"), parse_unsigned(q, "q")))


def d_from_e_pq(e: Number, p: Number, q: Number,
                use_lambda: bool = False) -> Optional[str]:
    d = rsa_math.d_from_e_pq(
        parse_signed(e, "e"), parse_unsigned(p, "p"), parse_unsigned(q, "q"), use_lambda
    )
    return None if d is None else str(d)


def choose_e_d(p: Number, q: Number,
               use_lambda: bool = False,
               e_hint: Optional[Number] = None,
               config: Optional[EngineConfig] = None,
               event_logger: Optional[EventLogger] = None) -> Optional[Dict[str, str]]:
    """{'e', 'd'} with e != d, or None when the repair loops give up."""
    chosen = rsa_math.choose_e_d(
        parse_unsigned(p, "p"),
        parse_unsigned(q, "q"),
        use_lambda=use_lambda,
        e_hint=None if e_hint is None else parse_unsigned(e_hint, "e_hint"),
        max_repairs=_config(config).max_exponent_repairs,
    )
    if event_logger:
        event_logger.log_exponents(chosen[0] if chosen else None, use_lambda)
    if chosen is None:
        return None
    e, d = chosen
    return {'e': str(e), 'd': str(d)}


def pick_small_primes_in_range(n_min: Number, n_max: Number) -> Optional[Dict[str, str]]:
    """Small primes p < q with n = p*q in [n_min, n_max] ("0" = unbounded)."""
    picked = rsa_math.pick_small_primes_in_range(
        parse_unsigned(n_min, "n_min"), parse_unsigned(n_max, "n_max")
    )
    if picked is None:
        return None
    p, q, n = picked
    return {'p': str(p), 'q': str(q), 'n': str(n)}


def map_modexp(e: Number, n: Number, count: int) -> List[int]:
    return rsa_math.map_modexp(
        parse_unsigned(e, "e"), parse_unsigned(n, "n"), parse_unsigned(count, "count")
    )


def rsa_keypair(bits: int,
                config: Optional[EngineConfig] = None,
                event_logger: Optional[EventLogger] = None) -> Dict[str, str]:
    """Fresh key pair as {'p', 'q', 'n', 'e', 'd'}."""
    config = _config(config)
    bits = parse_unsigned(bits, "bits")
    try:
        keypair = rsa_math.generate_rsa_keypair(
            bits,
            rng=make_rng(config.seed),
            public_exponent=config.public_exponent,
            fallback_exponent=config.fallback_exponent,
            max_attempts=config.max_prime_attempts,
        )
    except SearchExhaustedError as exc:
        if event_logger:
            event_logger.log_exhausted("rsa_keypair", exc.attempts)
        raise
    if event_logger:
        event_logger.log_keypair(bits, keypair.e, keypair.key_size)
    return keypair.to_dict()


def encrypt(message: Number, e: Number, n: Number) -> str:
    """Raw RSA: message^e mod n."""
    return mod_pow(message, e, n)


def decrypt(ciphertext: Number, d: Number, n: Number) -> str:
    """Raw RSA: ciphertext^d mod n."""
    return mod_pow(ciphertext, d, n)


# ============================================================================
# Diffie-Hellman
# ============================================================================

def dh_generate_params(bits: int,
                       config: Optional[EngineConfig] = None,
                       event_logger: Optional[EventLogger] = None) -> Dict[str, str]:
    """Safe prime p and generator g as {'p', 'g'}."""
    config = _config(config)
    bits = parse_unsigned(bits, "bits")
    try:
        params = diffie_hellman.generate_dh_params(
            bits,
            rng=make_rng(config.seed),
            max_attempts=config.max_safe_prime_attempts,
            max_generator_attempts=config.max_generator_attempts,
        )
    except SearchExhaustedError as exc:
        if event_logger:
            event_logger.log_exhausted("dh_generate_params", exc.attempts)
        raise
    if event_logger:
        event_logger.log_dh_params(bits, params.g)
    return params.to_dict()


def dh_exchange(p: Number, g: Number, a: Number, b: Number,
                event_logger: Optional[EventLogger] = None) -> Dict[str, Any]:
    """Full exchange record with the four ordered steps."""
    exchange = diffie_hellman.dh_exchange(
        parse_unsigned(p, "p"),
        parse_unsigned(g, "g"),
        parse_unsigned(a, "a"),
        parse_unsigned(b, "b"),
    )
    if event_logger:
        event_logger.log_dh_exchange(exchange.p, exchange.shared_secrets_match)
    return exchange.to_dict()


# ============================================================================
# Discrete Logarithm
# ============================================================================

def _discrete_log(solver, operation: str,
                  base: Number, target: Number, modulus: Number,
                  max_steps: Optional[Number],
                  config: Optional[EngineConfig],
                  event_logger: Optional[EventLogger]) -> Dict[str, Any]:
    if max_steps is None:
        steps = _config(config).default_max_steps
    else:
        steps = parse_unsigned(max_steps, "max_steps")
    result = solver(
        parse_unsigned(base, "base"),
        parse_unsigned(target, "target"),
        parse_unsigned(modulus, "modulus"),
        steps,
    )
    if event_logger:
        event_logger.log_discrete_log(operation, result)
    return result.to_dict()


def discrete_log_bsgs(base: Number, target: Number, modulus: Number,
                      max_steps: Optional[Number] = None,
                      config: Optional[EngineConfig] = None,
                      event_logger: Optional[EventLogger] = None) -> Dict[str, Any]:
    """Baby-step/giant-step visualization record."""
    return _discrete_log(
        solvers.baby_step_giant_step, "discrete_log_bsgs",
        base, target, modulus, max_steps, config, event_logger,
    )


def discrete_log_brute(base: Number, target: Number, modulus: Number,
                       max_steps: Optional[Number] = None,
                       config: Optional[EngineConfig] = None,
                       event_logger: Optional[EventLogger] = None) -> Dict[str, Any]:
    """Brute-force visualization record."""
    return _discrete_log(
        solvers.brute_force_discrete_log, "discrete_log_brute",
        base, target, modulus, max_steps, config, event_logger,
    )
