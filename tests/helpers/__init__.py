"""Test helper utilities for address validation tests."""

from .fake_provider import FakeClock, FakeProvider

__all__ = ["FakeClock", "FakeProvider"]
