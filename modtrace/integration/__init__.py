# Integration Module
"""
Decimal-string boundary operations and the computation event log.

Boundary calls accept an optional EventLogger that records each
computation and forwards it to the standard logging module.
"""

from . import boundary, event_logger
from .event_logger import EventType, ComputationEvent, EventLogger
from .boundary import (
    MalformedInputError,
    parse_unsigned,
    parse_signed,
    mod_pow,
    gcd,
    lcm,
    egcd,
    mod_inverse,
    generate_prime,
    is_prime,
    n_from_pq,
    phi_of,
    lambda_of,
    d_from_e_pq,
    choose_e_d,
    pick_small_primes_in_range,
    map_modexp,
    rsa_keypair,
    encrypt,
    decrypt,
    dh_generate_params,
    dh_exchange,
    discrete_log_bsgs,
    discrete_log_brute,
)

__all__ = [
    'boundary',
    'event_logger',
    'EventType',
    'ComputationEvent',
    'EventLogger',
    'MalformedInputError',
    'parse_unsigned',
    'parse_signed',
    'mod_pow',
    'gcd',
    'lcm',
    'egcd',
    'mod_inverse',
    'generate_prime',
    'is_prime',
    'n_from_pq',
    'phi_of',
    'lambda_of',
    'd_from_e_pq',
    'choose_e_d',
    'pick_small_primes_in_range',
    'map_modexp',
    'rsa_keypair',
    'encrypt',
    'decrypt',
    'dh_generate_params',
    'dh_exchange',
    'discrete_log_bsgs',
    'discrete_log_brute',
]
