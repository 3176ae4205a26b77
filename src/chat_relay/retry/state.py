"""
Per-call retry state.

RetryState is the explicit state machine behind one get_completion() call:

    ATTEMPT --success--------------------> DONE
    ATTEMPT --rate limited, attempts left--> BACKOFF --> ATTEMPT (n + 1)
    ATTEMPT --rate limited on last attempt--> FAILED
    ATTEMPT --any other error--------------> FAILED

DONE and FAILED are terminal. A new RetryState is created for every call
and never shared between calls.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class RetryPhase(str, Enum):
    """Phase of a single retrying call."""

    ATTEMPT = "attempt"
    BACKOFF = "backoff"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RetryState:
    """
    Attempt counter and backoff delay for one call.

    Attributes:
        max_attempts: Upper bound on upstream calls (>= 1)
        current_delay_ms: Delay before the next retry; doubles after each one
        max_delay_ms: Optional ceiling on current_delay_ms (None = unbounded)
        attempt: Current attempt number (1-based)
        phase: Current RetryPhase
        delays_ms: Backoff delays taken so far, in order
    """

    max_attempts: int = 3
    current_delay_ms: int = 1000
    max_delay_ms: Optional[int] = None
    attempt: int = 1
    phase: RetryPhase = RetryPhase.ATTEMPT
    delays_ms: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate state invariants."""
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.current_delay_ms < 0:
            raise ValueError("current_delay_ms must be >= 0")
        if self.max_delay_ms is not None and self.max_delay_ms < 0:
            raise ValueError("max_delay_ms must be >= 0")
        if not 1 <= self.attempt <= self.max_attempts:
            raise ValueError("attempt must be within 1..max_attempts")
        if self.max_delay_ms is not None:
            self.current_delay_ms = min(self.current_delay_ms, self.max_delay_ms)

    @property
    def is_last_attempt(self) -> bool:
        return self.attempt >= self.max_attempts

    @property
    def remaining_attempts(self) -> int:
        """Attempts left after the current one."""
        return self.max_attempts - self.attempt

    @property
    def is_terminal(self) -> bool:
        return self.phase in (RetryPhase.DONE, RetryPhase.FAILED)

    def _expect(self, phase: RetryPhase) -> None:
        if self.phase is not phase:
            raise RuntimeError(f"Invalid transition from {self.phase.value} (expected {phase.value})")

    def succeed(self) -> None:
        """ATTEMPT -> DONE."""
        self._expect(RetryPhase.ATTEMPT)
        self.phase = RetryPhase.DONE

    def fail(self) -> None:
        """ATTEMPT -> FAILED."""
        self._expect(RetryPhase.ATTEMPT)
        self.phase = RetryPhase.FAILED

    def schedule_retry(self) -> int:
        """
        ATTEMPT -> BACKOFF after a rate-limited attempt.

        Returns:
            Delay to wait before the next attempt, in milliseconds

        Raises:
            RuntimeError: Called on the last attempt or outside ATTEMPT
        """
        self._expect(RetryPhase.ATTEMPT)
        if self.is_last_attempt:
            raise RuntimeError("No attempts left to retry")
        delay_ms = self.current_delay_ms
        self.delays_ms.append(delay_ms)
        self.phase = RetryPhase.BACKOFF
        return delay_ms

    def advance(self) -> None:
        """BACKOFF -> ATTEMPT (n + 1), doubling the delay."""
        self._expect(RetryPhase.BACKOFF)
        self.attempt += 1
        self.current_delay_ms *= 2
        if self.max_delay_ms is not None:
            self.current_delay_ms = min(self.current_delay_ms, self.max_delay_ms)
        self.phase = RetryPhase.ATTEMPT
