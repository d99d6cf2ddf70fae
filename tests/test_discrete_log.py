"""
Unit tests for the Discrete Logarithm solvers.

Tests:
- Baby-step giant-step (baby hits, giant hits, truncation, no inverse)
- Brute force
- Agreement between both solvers
- Normalization and diagnostic warnings
"""

import random

import pytest
from modtrace.core_crypto.number_theory import mod_exp
from modtrace.discrete_log.solvers import (
    baby_step_giant_step, brute_force_discrete_log,
    BSGS_METHOD, BSGS_NO_INVERSE, BSGS_EXHAUSTED,
    BRUTE_FORCE_METHOD, BRUTE_FORCE_TRUNCATED,
    GIANT_STEP_LABEL, SOLUTION_LABEL,
    BASE_REDUCED, TARGET_REDUCED, NOT_COPRIME, BSGS_NOT_PRIME, BRUTE_FORCE_NOT_PRIME,
)


class TestBabyStepGiantStep:
    """Tests for baby-step giant-step."""

    def test_log_of_9_base_2_mod_11(self):
        """2^6 = 64 = 9 (mod 11)."""
        result = baby_step_giant_step(2, 9, 11, max_steps=100)
        assert result.solution == 6
        assert result.method_used == BSGS_METHOD
        assert not result.truncated
        assert result.warnings == ()

    def test_trace_shape(self):
        """Header, 5 baby steps, 2 giant steps, then the solution."""
        result = baby_step_giant_step(2, 9, 11, max_steps=100)
        assert len(result.steps) == 9
        assert [s.index for s in result.steps] == list(range(9))
        assert [s.value for s in result.steps[1:6]] == ["1", "2", "4", "8", "5"]
        assert result.steps[6].label == GIANT_STEP_LABEL
        assert result.steps[7].position == "1*5 + ?"
        last = result.steps[-1]
        assert last.label == SOLUTION_LABEL
        assert last.found
        assert last.position == "6"
        assert not any(s.found for s in result.steps[:-1])

    def test_found_in_baby_phase(self):
        result = baby_step_giant_step(2, 8, 11, max_steps=100)
        assert result.solution == 3
        assert all(s.label != GIANT_STEP_LABEL for s in result.steps)

    def test_target_one(self):
        assert baby_step_giant_step(7, 1, 101, max_steps=100).solution == 0

    def test_unreachable_target(self):
        """3 has order 5 mod 11, so 2 is never reached."""
        result = baby_step_giant_step(3, 2, 11, max_steps=100)
        assert result.solution is None
        assert result.method_used == BSGS_EXHAUSTED
        assert not result.truncated

    def test_truncated_without_solution(self):
        """With m = 2 the answer 6 is out of reach; nothing wrong is returned."""
        result = baby_step_giant_step(2, 9, 11, max_steps=2)
        assert result.truncated
        assert result.solution is None
        assert any("truncated" in w for w in result.warnings)
        assert "5" in result.warnings[-1]

    def test_truncated_with_solution(self):
        result = baby_step_giant_step(2, 2, 11, max_steps=2)
        assert result.truncated
        assert result.solution == 1

    def test_no_inverse(self):
        """2^5 = 8 has no inverse mod 12."""
        result = baby_step_giant_step(2, 3, 12, max_steps=100)
        assert result.solution is None
        assert result.method_used == BSGS_NO_INVERSE

    def test_non_coprime_found_in_baby_phase(self):
        result = baby_step_giant_step(2, 4, 12, max_steps=100)
        assert result.solution == 2
        assert NOT_COPRIME in result.warnings
        assert BSGS_NOT_PRIME in result.warnings

    def test_normalization(self):
        result = baby_step_giant_step(13, 20, 11, max_steps=100)
        assert result.base == 2
        assert result.target == 9
        assert result.solution == 6
        assert result.warnings == (BASE_REDUCED, TARGET_REDUCED)

    def test_normalization_before_diagnostics(self):
        result = baby_step_giant_step(14, 3, 12, max_steps=100)
        assert result.warnings[0] == BASE_REDUCED
        assert result.warnings[1:] == (NOT_COPRIME, BSGS_NOT_PRIME)

    def test_modulus_one(self):
        assert baby_step_giant_step(5, 7, 1, max_steps=10).solution == 0

    def test_zero_budget(self):
        result = baby_step_giant_step(2, 9, 11, max_steps=0)
        assert result.truncated
        assert result.solution is None

    def test_large_modulus_truncates_cleanly(self):
        """Giant-step inverse of a 4400-bit power modulo the prime 2^4423 - 1."""
        base = random.Random(4400).getrandbits(4400)
        result = baby_step_giant_step(base, 12345, 2**4423 - 1, max_steps=10)
        assert result.truncated
        assert result.solution is None
        assert result.method_used == BSGS_EXHAUSTED

    def test_invalid_inputs(self):
        with pytest.raises(ValueError):
            baby_step_giant_step(2, 9, 0, max_steps=10)
        with pytest.raises(ValueError):
            baby_step_giant_step(2, 9, 11, max_steps=-1)

    def test_to_dict(self):
        record = baby_step_giant_step(2, 9, 11, max_steps=100).to_dict()
        assert record['solution'] == "6"
        assert record['modulus'] == "11"
        assert record['truncated'] is False
        assert record['steps'][-1]['found'] is True

        record = baby_step_giant_step(3, 2, 11, max_steps=100).to_dict()
        assert record['solution'] is None


class TestBruteForce:
    """Tests for brute-force search."""

    def test_log_of_9_base_2_mod_11(self):
        result = brute_force_discrete_log(2, 9, 11, max_steps=100)
        assert result.solution == 6
        assert result.method_used == BRUTE_FORCE_METHOD
        assert not result.truncated
        # probes for x = 0..6 plus the solution record
        assert len(result.steps) == 8

    def test_stops_at_budget(self):
        result = brute_force_discrete_log(2, 9, 11, max_steps=4)
        assert result.solution is None
        assert result.truncated
        assert result.method_used == BRUTE_FORCE_TRUNCATED
        assert len(result.steps) == 4

    def test_zero_budget(self):
        result = brute_force_discrete_log(2, 9, 11, max_steps=0)
        assert result.steps == ()
        assert result.truncated

    def test_composite_warning(self):
        result = brute_force_discrete_log(5, 1, 12, max_steps=10)
        assert result.solution == 0
        assert BRUTE_FORCE_NOT_PRIME in result.warnings


class TestSolverAgreement:
    """Both solvers must agree whenever both find a solution."""

    @pytest.mark.parametrize("base,modulus", [(2, 11), (2, 101), (3, 11), (5, 23), (6, 35)])
    def test_agreement(self, base, modulus):
        for target in range(modulus):
            bsgs = baby_step_giant_step(base, target, modulus, max_steps=1000)
            brute = brute_force_discrete_log(base, target, modulus, max_steps=1000)
            if bsgs.solution is not None:
                assert mod_exp(base, bsgs.solution, modulus) == target % modulus
            if brute.solution is not None:
                assert mod_exp(base, brute.solution, modulus) == target % modulus
            if bsgs.solution is not None and brute.solution is not None:
                assert bsgs.solution == brute.solution

    def test_every_residue_found_for_primitive_root(self):
        for target in range(1, 101):
            assert baby_step_giant_step(2, target, 101, max_steps=1000).solved
