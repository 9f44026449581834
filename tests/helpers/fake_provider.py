"""In-memory provider and clock for deterministic tests.

FakeProvider mimics the interface of real provider clients but returns canned
candidates (or raises a canned error) instead of making HTTP requests.
"""

import threading
import time
from typing import List, Optional

from address_validation.domain.models import ProviderCandidate
from address_validation.providers.base import BaseProvider


class FakeProvider(BaseProvider):
    """Provider that returns canned candidates.

    Attributes:
        candidates: Candidates returned by every lookup
        error: Exception raised by every lookup instead (takes precedence)
        delay: Seconds to sleep before answering
        calls: Addresses received, in order
    """

    PROVIDER_NAME = "fake"

    def __init__(
        self,
        candidates: Optional[List[ProviderCandidate]] = None,
        error: Optional[BaseException] = None,
        delay: float = 0.0,
        release: Optional[threading.Event] = None,
    ):
        super().__init__(timeout=5.0, user_agent="AddressValidationTests/1.0")
        self.candidates = list(candidates or [])
        self.error = error
        self.delay = delay
        self.release = release
        self.calls: List[str] = []
        self._lock = threading.Lock()

    @property
    def call_count(self) -> int:
        with self._lock:
            return len(self.calls)

    def lookup(self, address: str) -> List[ProviderCandidate]:
        with self._lock:
            self.calls.append(address)

        if self.release is not None:
            self.release.wait(timeout=5.0)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.candidates)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
