"""
Retry engine exceptions.

RetryExhausted is raised when every permitted attempt was rate limited.
It is the only error the retry engine creates itself; every other upstream
failure propagates unchanged.
"""

from typing import Optional


class RetryExhausted(Exception):
    """
    Raised when all attempts are consumed without a completion.

    Attributes:
        attempts: Number of upstream calls made
        delays_ms: Backoff delays taken between attempts
        last_error: Final rate-limit error (None on the defensive fallthrough path)
    """

    def __init__(
        self,
        attempts: int,
        delays_ms: Optional[list[int]] = None,
        last_error: Optional[Exception] = None,
    ) -> None:
        self.attempts = attempts
        self.delays_ms = list(delays_ms or [])
        self.last_error = last_error

        message = f"Exceeded maximum retry attempts ({attempts})"
        if last_error is not None:
            message = f"{message}: {last_error}"
        super().__init__(message)
