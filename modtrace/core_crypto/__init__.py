# Core Cryptography Module
"""
Core number-theoretic implementations including:
- Modular exponentiation, GCD/LCM, extended GCD, modular inverse
- Fixed-witness Miller-Rabin and random prime generation
- RSA key derivation and exponent selection
- Shared step-trace records
"""
