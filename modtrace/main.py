"""
modtrace - Main Entry Point
A didactic number-theory engine with step-by-step traces.
"""

import logging

from .exchange.diffie_hellman import dh_exchange
from .discrete_log.solvers import baby_step_giant_step


def main():
    """Main entry point for modtrace."""
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 50)
    print("Welcome to modtrace")
    print("=" * 50)
    print("\nAvailable modules:")
    print("  - Core Crypto (modular arithmetic, Miller-Rabin, prime generation, RSA)")
    print("  - Key Exchange (Diffie-Hellman)")
    print("  - Discrete Log (baby-step giant-step, brute force)")
    print("  - Integration (decimal-string boundary, event log)")

    print("\nDiffie-Hellman with p=23, g=5, a=4, b=3:")
    exchange = dh_exchange(23, 5, 4, 3)
    for step in exchange.steps:
        print(f"  [{step.index}] {step.computation} = {step.value}")

    print("\nlog_2(9) mod 11 by baby-step giant-step:")
    result = baby_step_giant_step(2, 9, 11, max_steps=100)
    for step in result.steps:
        print(f"  [{step.index}] {step.description}")
    print(f"  x = {result.solution}")
    print("\n")


if __name__ == "__main__":
    main()
