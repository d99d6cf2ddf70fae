"""
Security tests for modtrace.

Tests specifically for hostile or malformed input:
- Malformed decimal strings at the boundary
- Out-of-range arguments
- Misuse of raw RSA primitives
"""

import pytest

from modtrace.core_crypto.number_theory import mod_exp, mod_inverse, generate_prime
from modtrace.core_crypto.rsa_math import KeyPair, rsa_encrypt, rsa_sign
from modtrace.integration import boundary
from modtrace.integration.boundary import (
    MalformedInputError, parse_unsigned, parse_signed
)


class TestMalformedDecimalStrings:
    """Boundary parsing rejects anything that is not plain digits."""

    @pytest.mark.parametrize("value", [
        "12a", "-5", " 5", "5 ", "", "1_000", "+5", "0x10", "1e3", "٣",
    ])
    def test_unsigned_rejected(self, value):
        with pytest.raises(MalformedInputError):
            parse_unsigned(value)

    @pytest.mark.parametrize("value", [5.0, True, None, b"5", -1])
    def test_non_string_rejected(self, value):
        with pytest.raises(MalformedInputError):
            parse_unsigned(value)

    @pytest.mark.parametrize("value", ["--4", "-", "4-", "+4", " -4"])
    def test_signed_rejected(self, value):
        with pytest.raises(MalformedInputError):
            parse_signed(value)

    def test_signed_accepted(self):
        assert parse_signed("-4") == -4
        assert parse_signed("007") == 7

    def test_error_names_argument(self):
        with pytest.raises(MalformedInputError, match="modulus"):
            boundary.mod_pow("2", "3", "1x")

    def test_malformed_is_value_error(self):
        """Callers catching ValueError also catch malformed input."""
        with pytest.raises(ValueError):
            boundary.gcd("abc", "4")

    def test_every_operation_validates(self):
        with pytest.raises(MalformedInputError):
            boundary.is_prime("seven")
        with pytest.raises(MalformedInputError):
            boundary.mod_inverse("3", "-11")
        with pytest.raises(MalformedInputError):
            boundary.choose_e_d("61", "53", e_hint="-3")
        with pytest.raises(MalformedInputError):
            boundary.dh_exchange("23", "5", "4", "3.0")
        with pytest.raises(MalformedInputError):
            boundary.discrete_log_bsgs("2", "9", "11", "-1")
        with pytest.raises(MalformedInputError):
            boundary.pick_small_primes_in_range("30", "")

    def test_signed_egcd_accepted(self):
        result = boundary.egcd("-4", "-6")
        assert int(result['g']) in (2, -2)


class TestOutOfRange:
    """Well-formed but invalid arguments."""

    def test_discrete_log_zero_modulus(self):
        with pytest.raises(ValueError):
            boundary.discrete_log_bsgs("2", "9", "0", "10")
        with pytest.raises(ValueError):
            boundary.discrete_log_brute("2", "9", "0", "10")

    def test_negative_step_budget(self):
        from modtrace.discrete_log.solvers import brute_force_discrete_log
        with pytest.raises(ValueError):
            brute_force_discrete_log(2, 9, 11, max_steps=-5)

    def test_mod_inverse_zero_modulus_is_absent(self):
        """No inverse is an absent result, not an error."""
        assert boundary.mod_inverse("5", "0") is None
        assert boundary.mod_inverse("1", "0") == "1"

    def test_mod_inverse_negative_modulus(self):
        with pytest.raises(ValueError):
            mod_inverse(3, -11)

    def test_negative_exponent(self):
        with pytest.raises(ValueError):
            mod_exp(2, -1, 11)

    def test_prime_too_small(self):
        with pytest.raises(ValueError):
            generate_prime(1)
        with pytest.raises(ValueError):
            boundary.generate_prime(0)

    def test_dh_too_small(self):
        with pytest.raises(ValueError):
            boundary.dh_generate_params(2)

    def test_keypair_too_small(self):
        with pytest.raises(ValueError):
            boundary.rsa_keypair(4)


class TestRawRSAMisuse:
    """Raw RSA refuses messages that would wrap around n."""

    def test_message_too_large(self):
        with pytest.raises(ValueError):
            rsa_encrypt(3233, (17, 3233))
        with pytest.raises(ValueError):
            rsa_sign(5000, (2753, 3233))

    def test_keypair_repr_hides_private_exponent(self):
        kp = KeyPair(p=61, q=53, n=3233, e=17, d=2753)
        assert "2753" not in repr(kp)
