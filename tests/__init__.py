# modtrace Test Suite
"""
Test suite including:
- Unit tests (arithmetic, primes, RSA, Diffie-Hellman, discrete log)
- Integration tests (decimal-string boundary, event log, config)
- Security tests (malformed input)

Run with: pytest
Coverage: coverage run -m pytest && coverage report
"""
