"""
Event Logger Module

Caller-owned audit trail for modtrace computations. Every recorded
event is kept in memory (for queries and JSON export) and forwarded to
the standard `logging` module under the "modtrace.events" logger.

Features:
- Prime generation and primality events
- RSA key derivation events
- Diffie-Hellman parameter and exchange events
- Discrete logarithm outcomes (solved / unsolved / truncated)
- Search exhaustion events for bounded resampling loops

Nothing here is global: each EventLogger instance holds its own events,
so independent calls never share state unless the caller passes the
same logger to both.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any, Callable

from ..discrete_log.solvers import DiscreteLogResult


EVENT_VERSION = "1.0"
DEFAULT_LOGGER_NAME = "modtrace.events"


# ============================================================================
# Event Types
# ============================================================================

class EventType(Enum):
    """Types of computation events that can be logged."""

    # Primes
    PRIME_GENERATED = "prime_generated"
    PRIMALITY_CHECKED = "primality_checked"

    # RSA
    KEYPAIR_GENERATED = "keypair_generated"
    EXPONENTS_CHOSEN = "exponents_chosen"

    # Diffie-Hellman
    DH_PARAMS_GENERATED = "dh_params_generated"
    DH_EXCHANGE = "dh_exchange"

    # Discrete logarithm
    DISCRETE_LOG_SOLVED = "discrete_log_solved"
    DISCRETE_LOG_UNSOLVED = "discrete_log_unsolved"

    # Bounded loops
    SEARCH_EXHAUSTED = "search_exhausted"


# ============================================================================
# Event Structure
# ============================================================================

@dataclass
class ComputationEvent:
    """A single logged computation."""
    event_type: EventType
    operation: str
    timestamp: int  # Unix timestamp
    details: Dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        """Convert event to a compact JSON string."""
        return json.dumps({
            'version': EVENT_VERSION,
            'type': self.event_type.value,
            'operation': self.operation,
            'time': self.timestamp,
            'iso_time': datetime.fromtimestamp(self.timestamp).isoformat(),
            'details': self.details,
        }, separators=(',', ':'))

    @classmethod
    def from_json(cls, json_str: str) -> 'ComputationEvent':
        """Parse event from its JSON form."""
        data = json.loads(json_str)
        return cls(
            event_type=EventType(data['type']),
            operation=data['operation'],
            timestamp=data['time'],
            details=data.get('details', {}),
        )

    def __str__(self) -> str:
        dt = datetime.fromtimestamp(self.timestamp)
        return (
            f"[{dt.strftime('%Y-%m-%d %H:%M:%S')}] "
            f"{self.event_type.value} | "
            f"op:{self.operation}"
        )


# ============================================================================
# Event Logger
# ============================================================================

class EventLogger:
    """
    In-memory computation log mirrored to the `logging` module.

    Large numbers are stored by bit length, not by value, so the log
    stays readable for 2048-bit keys.
    """

    def __init__(self, logger_name: str = DEFAULT_LOGGER_NAME,
                 level: int = logging.INFO):
        """
        Initialize the event logger.

        Args:
            logger_name: Name of the stdlib logger events are forwarded to
            level: Level used when forwarding
        """
        self._logger = logging.getLogger(logger_name)
        self._level = level
        self._events: List[ComputationEvent] = []
        self._callbacks: List[Callable[[ComputationEvent], None]] = []

    def record(self, event_type: EventType, operation: str,
               **details: Any) -> ComputationEvent:
        """Record an event, forward it, and notify callbacks."""
        event = ComputationEvent(
            event_type=event_type,
            operation=operation,
            timestamp=int(time.time()),
            details=details,
        )
        self._events.append(event)
        self._logger.log(self._level, "%s %s", event.event_type.value, event.to_json())

        for callback in self._callbacks:
            try:
                callback(event)
            except Exception:
                self._logger.exception("Event callback failed for %s", event.event_type.value)

        return event

    def add_callback(self, callback: Callable[[ComputationEvent], None]) -> None:
        """Add a callback to be notified of new events."""
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[ComputationEvent], None]) -> None:
        """Remove a callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    # ========================================================================
    # Typed Helpers
    # ========================================================================

    def log_prime(self, bits: int, prime: int) -> ComputationEvent:
        """Log a generated prime (bit length only)."""
        return self.record(
            EventType.PRIME_GENERATED, "generate_prime",
            bits=bits, prime_bits=prime.bit_length(),
        )

    def log_primality(self, n: int, result: bool) -> ComputationEvent:
        return self.record(
            EventType.PRIMALITY_CHECKED, "is_prime",
            bits=n.bit_length(), probable_prime=result,
        )

    def log_keypair(self, bits: int, e: int, modulus_bits: int) -> ComputationEvent:
        """Log an RSA key derivation."""
        return self.record(
            EventType.KEYPAIR_GENERATED, "rsa_keypair",
            bits=bits, e=e, modulus_bits=modulus_bits,
        )

    def log_exponents(self, e: Optional[int], use_lambda: bool) -> ComputationEvent:
        return self.record(
            EventType.EXPONENTS_CHOSEN, "choose_e_d",
            e=e, use_lambda=use_lambda, success=e is not None,
        )

    def log_dh_params(self, bits: int, g: int) -> ComputationEvent:
        return self.record(
            EventType.DH_PARAMS_GENERATED, "dh_generate_params",
            bits=bits, g=g,
        )

    def log_dh_exchange(self, p: int, secrets_match: bool) -> ComputationEvent:
        """Log a simulated exchange and whether both secrets agreed."""
        return self.record(
            EventType.DH_EXCHANGE, "dh_exchange",
            p_bits=p.bit_length(), secrets_match=secrets_match,
        )

    def log_discrete_log(self, operation: str,
                         result: DiscreteLogResult) -> ComputationEvent:
        """Log a discrete logarithm outcome."""
        event_type = (
            EventType.DISCRETE_LOG_SOLVED if result.solved
            else EventType.DISCRETE_LOG_UNSOLVED
        )
        return self.record(
            event_type, operation,
            method=result.method_used,
            steps=len(result.steps),
            truncated=result.truncated,
            warnings=len(result.warnings),
        )

    def log_exhausted(self, operation: str, attempts: int) -> ComputationEvent:
        """Log a bounded loop that ran out of attempts."""
        return self.record(
            EventType.SEARCH_EXHAUSTED, operation,
            attempts=attempts,
        )

    # ========================================================================
    # Retrieval
    # ========================================================================

    def get_all_events(self) -> List[ComputationEvent]:
        """Retrieve all logged events, oldest first."""
        return list(self._events)

    def get_events_by_type(self, event_type: EventType) -> List[ComputationEvent]:
        """Get all events of a specific type."""
        return [e for e in self._events if e.event_type == event_type]

    def get_recent_events(self, count: int = 10) -> List[ComputationEvent]:
        """Get the most recent events."""
        return self._events[-count:] if count > 0 else []

    def export_log(self) -> str:
        """Export the entire log as a JSON array of event objects."""
        return json.dumps([json.loads(e.to_json()) for e in self._events])

    @classmethod
    def import_log(cls, json_str: str,
                   logger_name: str = DEFAULT_LOGGER_NAME) -> 'EventLogger':
        """Rebuild a logger from export_log() output without re-forwarding."""
        event_logger = cls(logger_name=logger_name)
        for data in json.loads(json_str):
            event_logger._events.append(ComputationEvent.from_json(json.dumps(data)))
        return event_logger

    def __len__(self) -> int:
        return len(self._events)
