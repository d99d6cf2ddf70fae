"""
Discrete Logarithm Solvers

Both solvers answer "find x such that base^x = target (mod modulus)" and
record every probe in a step trace:

- baby_step_giant_step: meet-in-the-middle, O(sqrt(modulus)) time and memory
- brute_force_discrete_log: linear scan of base^0, base^1, ...

Input policy shared by both:
1. base and target are reduced modulo modulus first (with a warning if
   that changed them)
2. Diagnostics (gcd(base, modulus) != 1, composite modulus) only add
   warnings, they never stop the search
3. Running out of max_steps sets truncated=True; solution stays None
   unless a probe actually matched

Note: truncated=True with solution=None does not tell "a solution lies
      beyond the budget" apart from "no solution exists at all".
"""

import logging
from dataclasses import dataclass
from math import isqrt
from typing import Optional, Tuple, List, Dict, Any

from ..core_crypto.number_theory import mod_exp, gcd, mod_inverse, is_probable_prime
from ..core_crypto.step_trace import Step, StepTrace


logger = logging.getLogger(__name__)

# Method tags
BSGS_METHOD = "Baby-step Giant-step"
BSGS_NO_INVERSE = "Baby-step Giant-step (failed - no inverse)"
BSGS_EXHAUSTED = "Baby-step Giant-step (no solution found)"
BRUTE_FORCE_METHOD = "Brute Force"
BRUTE_FORCE_TRUNCATED = "Brute Force (stopped at max_steps; increase to continue)"

BABY_STEP_LABEL = "Baby-step"
GIANT_STEP_LABEL = "Giant-step"
SOLUTION_LABEL = "Solution Found"

# Warnings
BASE_REDUCED = "Base reduced modulo modulus"
TARGET_REDUCED = "Target reduced modulo modulus"
NOT_COPRIME = "gcd(base, modulus) != 1; discrete log may not exist or be non-unique"
BSGS_NOT_PRIME = "Modulus is not prime; BSGS works best with prime modulus."
BRUTE_FORCE_NOT_PRIME = (
    "Modulus is not prime; brute force may not find a solution "
    "if target is outside <base>."
)


@dataclass(frozen=True)
class DiscreteLogResult:
    """
    Outcome of one solver run.

    base and target are the normalized (reduced) values. If solution is
    not None then base^solution mod modulus == target.
    """
    base: int
    target: int
    modulus: int
    solution: Optional[int]
    steps: Tuple[Step, ...]
    method_used: str
    warnings: Tuple[str, ...]
    truncated: bool

    @property
    def solved(self) -> bool:
        return self.solution is not None

    def to_dict(self) -> Dict[str, Any]:
        """Visualization record with decimal strings."""
        return {
            'base': str(self.base),
            'target': str(self.target),
            'modulus': str(self.modulus),
            'solution': None if self.solution is None else str(self.solution),
            'steps': [step.to_dict() for step in self.steps],
            'method_used': self.method_used,
            'warnings': list(self.warnings),
            'truncated': self.truncated,
        }


def _ceil_sqrt(n: int) -> int:
    root = isqrt(n)
    return root if root * root == n else root + 1


def _check_inputs(modulus: int, max_steps: int) -> None:
    if modulus < 1:
        raise ValueError("Modulus must be positive")
    if max_steps < 0:
        raise ValueError("max_steps must be non-negative")


def _normalize(base: int, target: int, modulus: int,
               not_prime_warning: str) -> Tuple[int, int, List[str]]:
    """Reduce base and target, then collect diagnostic warnings."""
    warnings = []

    b = base % modulus
    t = target % modulus
    if b != base:
        warnings.append(BASE_REDUCED)
    if t != target:
        warnings.append(TARGET_REDUCED)

    if gcd(b, modulus) != 1:
        warnings.append(NOT_COPRIME)
    if not is_probable_prime(modulus):
        warnings.append(not_prime_warning)

    return b, t, warnings


def baby_step_giant_step(base: int, target: int, modulus: int,
                         max_steps: int) -> DiscreteLogResult:
    """
    Solve base^x = target (mod modulus) with baby-step/giant-step.

    Uses m = ceil(sqrt(modulus - 1)) + 1, capped at max_steps.

    Baby phase: store base^i -> i for i in [0, m); stop early if base^i
    already equals the target.
    Giant phase: gamma = target * (base^-m)^j for j in [0, m); a hit
    gamma = base^i gives x = j*m + i.

    Args:
        base: Generator candidate
        target: Value whose logarithm is wanted
        modulus: Positive modulus
        max_steps: Upper bound for m

    Returns:
        DiscreteLogResult; step indices increase across both phases

    Raises:
        ValueError: If modulus < 1 or max_steps < 0
    """
    _check_inputs(modulus, max_steps)
    b, t, warnings = _normalize(base, target, modulus, BSGS_NOT_PRIME)

    ideal_m = _ceil_sqrt(modulus - 1) + 1
    m = min(ideal_m, max_steps)
    truncated = m < ideal_m
    if truncated:
        warnings.append(
            f"Search truncated by max_steps. Recommended m≈ceil(sqrt(p-1))+1={ideal_m}, "
            f"but max_steps={max_steps}."
        )

    trace = StepTrace()

    def result(solution: Optional[int], method: str) -> DiscreteLogResult:
        logger.debug("%s: base=%d target=%d modulus=%d -> %s", method, b, t, modulus, solution)
        return DiscreteLogResult(
            base=b, target=t, modulus=modulus, solution=solution,
            steps=trace.steps, method_used=method,
            warnings=tuple(warnings), truncated=truncated,
        )

    trace.add(
        label=BSGS_METHOD,
        description=f"Computing baby steps: {b}^i mod {modulus} for i in [0, {m})",
        value=1 % modulus,
        position="0",
    )

    # Baby steps: base^i mod modulus for i = 0, 1, ..., m-1
    baby_steps = {}
    current = 1 % modulus
    for i in range(m):
        baby_steps.setdefault(current, i)  # first occurrence wins
        trace.add(
            label=BABY_STEP_LABEL,
            description=f"Baby step {i}: {b}^{i} ≡ {current} (mod {modulus})",
            value=current,
            position=str(i),
        )

        if current == t:
            trace.add(
                label=SOLUTION_LABEL,
                description=f"Found solution: log_{b}({t}) = {i}",
                value=current,
                position=str(i),
                found=True,
            )
            return result(i, BSGS_METHOD)

        current = (current * b) % modulus

    # Giant steps need base^(-m) mod modulus
    factor = mod_inverse(mod_exp(b, m, modulus), modulus)
    if factor is None:
        return result(None, BSGS_NO_INVERSE)

    gamma = t
    for j in range(m):
        trace.add(
            label=GIANT_STEP_LABEL,
            description=f"Giant step {j}: checking if {gamma} is in baby steps",
            value=gamma,
            position=f"{j}*{m} + ?",
        )

        i = baby_steps.get(gamma)
        if i is not None:
            solution = j * m + i
            trace.add(
                label=SOLUTION_LABEL,
                description=f"Found solution: log_{b}({t}) = {j}*{m} + {i} = {solution}",
                value=gamma,
                position=str(solution),
                found=True,
            )
            return result(solution, BSGS_METHOD)

        gamma = (gamma * factor) % modulus

    return result(None, BSGS_EXHAUSTED)


def brute_force_discrete_log(base: int, target: int, modulus: int,
                             max_steps: int) -> DiscreteLogResult:
    """
    Solve base^x = target (mod modulus) by trying x = 0, 1, 2, ...

    Stops at the first match or after max_steps probes (truncated=True).

    Raises:
        ValueError: If modulus < 1 or max_steps < 0
    """
    _check_inputs(modulus, max_steps)
    b, t, warnings = _normalize(base, target, modulus, BRUTE_FORCE_NOT_PRIME)

    trace = StepTrace()
    current = 1 % modulus
    for i in range(max_steps):
        trace.add(
            label=BRUTE_FORCE_METHOD,
            description=f"Trying exponent {i}: {b}^{i} ≡ {current} (mod {modulus})",
            value=current,
            position=str(i),
        )

        if current == t:
            trace.add(
                label=SOLUTION_LABEL,
                description=f"Found solution: log_{b}({t}) = {i}",
                value=current,
                position=str(i),
                found=True,
            )
            logger.debug("Brute force solved after %d probes", i + 1)
            return DiscreteLogResult(
                base=b, target=t, modulus=modulus, solution=i,
                steps=trace.steps, method_used=BRUTE_FORCE_METHOD,
                warnings=tuple(warnings), truncated=False,
            )

        current = (current * b) % modulus

    logger.debug("Brute force gave up after %d probes", max_steps)
    return DiscreteLogResult(
        base=b, target=t, modulus=modulus, solution=None,
        steps=trace.steps, method_used=BRUTE_FORCE_TRUNCATED,
        warnings=tuple(warnings), truncated=True,
    )
