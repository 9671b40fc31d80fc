"""Linear backoff for automatic refresh retries."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryPolicy:
    """Retry ``max_attempts`` times, waiting ``base_seconds`` x attempt, capped."""

    base_seconds: float = 5.0
    max_delay_seconds: float = 15.0
    max_attempts: int = 3

    def delay_for(self, attempt: int) -> float:
        """Delay before the given 1-based retry attempt."""
        return min(self.base_seconds * attempt, self.max_delay_seconds)

    def can_retry(self, failures_so_far: int) -> bool:
        return failures_so_far < self.max_attempts
