import logging
import time
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

CLOSED, OPEN, HALF_OPEN = "CLOSED", "OPEN", "HALF_OPEN"


class CircuitOpenError(ConnectionError):
    pass


class CircuitBreaker:
    """Stops calling a flaky remote after repeated failures.

    Once ``failure_threshold`` consecutive calls fail the circuit opens and
    calls fail fast with ``CircuitOpenError``. After the cool-down one trial
    call is let through; every further failure doubles the cool-down up to
    ``max_cooldown`` seconds.
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 3,
        cooldown: float = 10,
        max_cooldown: float = 60,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.cooldown = cooldown
        self.max_cooldown = max_cooldown
        self.failures = 0
        self.opened_at = 0.0
        self.state = CLOSED

    def _cooldown_seconds(self) -> float:
        extra_failures = max(self.failures - self.failure_threshold, 0)
        return min(self.cooldown * 2**extra_failures, self.max_cooldown)

    def _allow(self):
        if self.state != OPEN:
            return
        waited = time.monotonic() - self.opened_at
        remaining = self._cooldown_seconds() - waited
        if remaining > 0:
            raise CircuitOpenError(
                f"Circuit {self.name} open, retry in {remaining:.1f}s"
            )
        self.state = HALF_OPEN
        logger.info("Circuit %s half-open, sending a trial call", self.name)

    def _record_failure(self, error: Exception):
        self.failures += 1
        logger.error("Circuit %s call failed (%s): %s", self.name, self.failures, error)
        if self.state == HALF_OPEN or self.failures >= self.failure_threshold:
            self.state = OPEN
            self.opened_at = time.monotonic()
            logger.warning("Circuit %s opened after %s failures", self.name, self.failures)

    def _record_success(self):
        if self.state != CLOSED:
            logger.info("Circuit %s closed again", self.name)
        self.state = CLOSED
        self.failures = 0

    async def call(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        self._allow()
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            self._record_failure(e)
            raise
        self._record_success()
        return result
