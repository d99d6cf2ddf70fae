"""
Step Trace

One record shape shared by every traced algorithm (Diffie-Hellman
exchange, baby-step/giant-step, brute force), plus the accumulator that
hands out strictly increasing indices.

Values are stored as decimal strings so a trace can be rendered or
serialized without precision loss.
"""

from dataclasses import dataclass
from typing import Dict, Any, List, Optional, Tuple, Iterator


@dataclass(frozen=True)
class Step:
    """
    A single observed step of an algorithm.

    label is the phase or method ("Baby-step", "Giant-step", ...),
    value the current number, position the exponent or formula slot.
    """
    index: int
    label: str
    description: str
    value: str
    position: str = ""
    found: bool = False
    computation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert step to dictionary for serialization."""
        data = {
            'index': self.index,
            'label': self.label,
            'description': self.description,
            'value': self.value,
            'position': self.position,
            'found': self.found,
        }
        if self.computation is not None:
            data['computation'] = self.computation
        return data


class StepTrace:
    """Append-only ordered list of Step records."""

    def __init__(self, start: int = 0):
        self._next_index = start
        self._steps: List[Step] = []

    def add(self, label: str, description: str, value: int,
            position: str = "", found: bool = False,
            computation: Optional[str] = None) -> Step:
        """Record a step and return it."""
        step = Step(
            index=self._next_index,
            label=label,
            description=description,
            value=str(value),
            position=position,
            found=found,
            computation=computation,
        )
        self._steps.append(step)
        self._next_index += 1
        return step

    @property
    def steps(self) -> Tuple[Step, ...]:
        """Immutable snapshot of the recorded steps."""
        return tuple(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self._steps)
