"""Circuit breaker guarding a single external dependency.

State machine:

    CLOSED ──(error % >= threshold in rolling window)──> OPEN
    OPEN ──(reset timeout elapsed)──> HALF_OPEN
    HALF_OPEN ──(trial call succeeds)──> CLOSED (counters reset)
    HALF_OPEN ──(trial call fails)──> OPEN (reset timer restarts)

While OPEN every call fails immediately with CircuitOpenError and the
wrapped callable is never invoked. While HALF_OPEN exactly one trial call is
in flight; callers arriving during the trial fail fast with CircuitOpenError
exactly as if the circuit were still open.

Every call is bounded by a per-call timeout. The callable runs on a worker
thread and a call that outlives the timeout raises CallTimeoutError and is
counted as a failure. The timeout starts when a worker picks the call up:
time spent queued behind a busy pool is never charged to the dependency.

All reads and transitions of state and counters happen under one lock, so
concurrent callers cannot trip or reset the breaker twice.
"""

import threading
import time
from collections import deque
from concurrent.futures import Executor, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from enum import Enum
from typing import Any, Callable, Deque, Dict, List, Optional, Tuple, TypeVar

from address_validation.exceptions import CircuitOpenError
from address_validation.logging import get_logger

from .exceptions import CallTimeoutError

logger = get_logger(__name__, component="breaker")

T = TypeVar("T")


class CircuitState(str, Enum):
    """Circuit breaker states."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class RollingWindow:
    """Success/failure counts over a sliding time window.

    The window is split into equally sized buckets; buckets older than the
    window are discarded as time advances. Not thread-safe on its own; the
    breaker serializes access.
    """

    def __init__(self, window_seconds: float, bucket_count: int, clock: Callable[[], float]) -> None:
        self.window_seconds = window_seconds
        self.bucket_count = bucket_count
        self._bucket_seconds = window_seconds / bucket_count
        self._clock = clock
        # [bucket_index, successes, failures]
        self._buckets: Deque[List[int]] = deque()

    def _current_index(self) -> int:
        return int(self._clock() // self._bucket_seconds)

    def _prune(self, current_index: int) -> None:
        oldest_allowed = current_index - self.bucket_count + 1
        while self._buckets and self._buckets[0][0] < oldest_allowed:
            self._buckets.popleft()

    def record(self, success: bool) -> None:
        index = self._current_index()
        self._prune(index)

        if not self._buckets or self._buckets[-1][0] != index:
            self._buckets.append([index, 0, 0])

        if success:
            self._buckets[-1][1] += 1
        else:
            self._buckets[-1][2] += 1

    def totals(self) -> Tuple[int, int]:
        """Return (total_calls, failures) inside the current window."""
        self._prune(self._current_index())
        successes = sum(bucket[1] for bucket in self._buckets)
        failures = sum(bucket[2] for bucket in self._buckets)
        return successes + failures, failures

    def error_percentage(self) -> float:
        total, failures = self.totals()
        if total == 0:
            return 0.0
        return failures * 100.0 / total

    def reset(self) -> None:
        self._buckets.clear()


class CircuitBreaker:
    """Circuit breaker for protecting against cascading failures.

    Usage:
        breaker = CircuitBreaker(name="smarty", timeout_seconds=10.0,
                                 error_threshold_percentage=50,
                                 reset_timeout_seconds=30.0)
        candidates = breaker.call(provider.lookup, address)

    Attributes:
        name: Dependency name, used in logs and error context
        timeout_seconds: Per-call timeout
        error_threshold_percentage: Error rate (0-100] that opens the circuit
        reset_timeout_seconds: Time spent OPEN before a trial call is allowed
        volume_threshold: Minimum calls in the window before the circuit may open
    """

    def __init__(
        self,
        name: str,
        timeout_seconds: float = 10.0,
        error_threshold_percentage: float = 50,
        reset_timeout_seconds: float = 30.0,
        rolling_window_seconds: float = 10.0,
        rolling_window_buckets: int = 10,
        volume_threshold: int = 0,
        exclude: Optional[Callable[[BaseException], bool]] = None,
        clock: Optional[Callable[[], float]] = None,
        executor: Optional[Executor] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        """Initialize the breaker in the CLOSED state.

        Args:
            name: Dependency name for logs and error context
            timeout_seconds: Per-call timeout in seconds (> 0)
            error_threshold_percentage: Error percentage that opens the circuit (0 < x <= 100)
            reset_timeout_seconds: Seconds to stay OPEN before allowing a trial call (> 0)
            rolling_window_seconds: Length of the error-rate window in seconds (> 0)
            rolling_window_buckets: Number of buckets the window is split into (>= 1)
            volume_threshold: Minimum calls in the window before tripping (>= 0)
            exclude: Optional predicate; exceptions it accepts propagate without
                counting as failures
            clock: Monotonic clock returning seconds (default time.monotonic)
            executor: Executor that runs calls (default: a private thread pool)
            max_workers: Size of the private thread pool (default: the
                ThreadPoolExecutor default); ignored when executor is given

        Raises:
            ValueError: If any numeric setting is out of range
        """
        if not name or not name.strip():
            raise ValueError("Circuit breaker name cannot be empty")
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got: {timeout_seconds}")
        if not 0 < error_threshold_percentage <= 100:
            raise ValueError(
                f"error_threshold_percentage must be in (0, 100], got: {error_threshold_percentage}"
            )
        if reset_timeout_seconds <= 0:
            raise ValueError(f"reset_timeout_seconds must be positive, got: {reset_timeout_seconds}")
        if rolling_window_seconds <= 0:
            raise ValueError(f"rolling_window_seconds must be positive, got: {rolling_window_seconds}")
        if rolling_window_buckets < 1:
            raise ValueError(f"rolling_window_buckets must be at least 1, got: {rolling_window_buckets}")
        if volume_threshold < 0:
            raise ValueError(f"volume_threshold cannot be negative, got: {volume_threshold}")
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got: {max_workers}")

        self.name = name.strip()
        self.timeout_seconds = timeout_seconds
        self.error_threshold_percentage = error_threshold_percentage
        self.reset_timeout_seconds = reset_timeout_seconds
        self.volume_threshold = volume_threshold

        self._exclude = exclude
        self._clock = clock or time.monotonic
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=f"breaker-{self.name}"
        )

        self._lock = threading.Lock()
        self._state = CircuitState.CLOSED
        self._opened_at: Optional[float] = None
        self._trial_in_flight = False
        self._window = RollingWindow(rolling_window_seconds, rolling_window_buckets, self._clock)

    @property
    def state(self) -> CircuitState:
        """Current state, applying any due OPEN -> HALF_OPEN transition."""
        with self._lock:
            self._refresh_state_locked()
            return self._state

    def call(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Invoke func through the breaker.

        Args:
            func: Callable performing the external call
            *args: Positional arguments for func
            **kwargs: Keyword arguments for func

        Returns:
            Whatever func returns

        Raises:
            CircuitOpenError: Circuit is open, or a half-open trial is already in flight
            CallTimeoutError: func did not finish within timeout_seconds
            Exception: Anything func raises, unchanged
        """
        is_trial = self._acquire_permission()

        try:
            result = self._execute(func, args, kwargs)
        except Exception as exc:
            if not isinstance(exc, CallTimeoutError) and self._is_excluded(exc):
                self._release_trial(is_trial)
            else:
                self._record_failure(is_trial, exc)
            raise
        except BaseException:
            self._release_trial(is_trial)
            raise

        self._record_success(is_trial)
        return result

    def get_state(self) -> Dict[str, Any]:
        """Get a snapshot of the breaker for health checks and monitoring."""
        with self._lock:
            self._refresh_state_locked()
            total, failures = self._window.totals()
            return {
                "name": self.name,
                "state": self._state.value,
                "total_calls": total,
                "failures": failures,
                "error_percentage": round(self._window.error_percentage(), 2),
                "error_threshold_percentage": self.error_threshold_percentage,
                "trial_in_flight": self._trial_in_flight,
                "seconds_until_retry": self._seconds_until_retry_locked(),
            }

    def reset(self) -> None:
        """Manually force the breaker CLOSED and clear all counters."""
        with self._lock:
            self._trial_in_flight = False
            self._close_locked(reason="manual_reset")

    def shutdown(self, wait: bool = False) -> None:
        """Release the private worker pool. Abandoned calls are not interrupted."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _acquire_permission(self) -> bool:
        """Decide whether a call may proceed. Returns True if it is the half-open trial."""
        with self._lock:
            self._refresh_state_locked()

            if self._state == CircuitState.CLOSED:
                return False

            if self._state == CircuitState.OPEN:
                raise CircuitOpenError(
                    context={
                        "breaker": self.name,
                        "state": self._state.value,
                        "reason": "circuit_open",
                        "retry_after_seconds": self._seconds_until_retry_locked(),
                    }
                )

            if self._trial_in_flight:
                raise CircuitOpenError(
                    context={
                        "breaker": self.name,
                        "state": self._state.value,
                        "reason": "half_open_trial_in_flight",
                    }
                )

            self._trial_in_flight = True
            logger.debug(
                "Allowing half-open trial call",
                extra={"event": "breaker.trial.started", "breaker": self.name},
            )
            return True

    def _execute(self, func: Callable[..., T], args: tuple, kwargs: dict) -> T:
        started = threading.Event()

        def run() -> T:
            started.set()
            return func(*args, **kwargs)

        future = self._executor.submit(run)
        # Time queued for a free worker does not count against the timeout
        started.wait()
        try:
            return future.result(timeout=self.timeout_seconds)
        except FutureTimeoutError as exc:
            if future.done():
                # func raised a TimeoutError of its own
                raise
            future.cancel()
            raise CallTimeoutError(
                f"Call through circuit '{self.name}' timed out after {self.timeout_seconds} seconds",
                timeout_seconds=self.timeout_seconds,
            ) from exc

    def _is_excluded(self, exc: BaseException) -> bool:
        return self._exclude is not None and bool(self._exclude(exc))

    def _record_success(self, is_trial: bool) -> None:
        with self._lock:
            if is_trial:
                self._trial_in_flight = False
                self._close_locked(reason="trial_succeeded")
                return
            self._window.record(success=True)

    def _record_failure(self, is_trial: bool, exc: BaseException) -> None:
        with self._lock:
            self._window.record(success=False)

            if is_trial:
                self._trial_in_flight = False
                self._open_locked(reason="trial_failed", error=exc)
                return

            # Calls that started before another caller tripped the circuit only
            # contribute to the counters.
            if self._state == CircuitState.CLOSED and self._should_trip_locked():
                self._open_locked(reason="error_threshold_exceeded", error=exc)

    def _release_trial(self, is_trial: bool) -> None:
        if not is_trial:
            return
        with self._lock:
            self._trial_in_flight = False

    def _should_trip_locked(self) -> bool:
        total, _ = self._window.totals()
        if total == 0 or total < self.volume_threshold:
            return False
        return self._window.error_percentage() >= self.error_threshold_percentage

    def _refresh_state_locked(self) -> None:
        if self._state != CircuitState.OPEN or self._opened_at is None:
            return
        if self._clock() - self._opened_at >= self.reset_timeout_seconds:
            self._state = CircuitState.HALF_OPEN
            self._trial_in_flight = False
            logger.info(
                f"Circuit '{self.name}' half-open - attempting recovery",
                extra={"event": "breaker.state.half_opened", "breaker": self.name},
            )

    def _open_locked(self, reason: str, error: Optional[BaseException] = None) -> None:
        total, failures = self._window.totals()
        self._state = CircuitState.OPEN
        self._opened_at = self._clock()
        logger.warning(
            f"Circuit '{self.name}' opened - failing fast",
            extra={
                "event": "breaker.state.opened",
                "breaker": self.name,
                "reason": reason,
                "error_type": type(error).__name__ if error is not None else None,
                "total_calls": total,
                "failures": failures,
                "reset_timeout_seconds": self.reset_timeout_seconds,
            },
        )

    def _close_locked(self, reason: str) -> None:
        previous = self._state
        self._state = CircuitState.CLOSED
        self._opened_at = None
        self._window.reset()
        if previous != CircuitState.CLOSED:
            logger.info(
                f"Circuit '{self.name}' closed - normal operation resumed",
                extra={"event": "breaker.state.closed", "breaker": self.name, "reason": reason},
            )

    def _seconds_until_retry_locked(self) -> float:
        if self._state != CircuitState.OPEN or self._opened_at is None:
            return 0.0
        remaining = self.reset_timeout_seconds - (self._clock() - self._opened_at)
        return round(max(0.0, remaining), 3)
