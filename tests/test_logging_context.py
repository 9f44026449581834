"""Tests for logging context propagation."""

import threading

import pytest

from address_validation.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


def test_empty_context():
    assert get_log_context() == {}


def test_nested_push_and_pop():
    """Test nested context pushes and pops restore each layer."""
    token1 = push_log_context(request_id="req-1")
    token2 = push_log_context(provider="smarty")
    assert get_log_context() == {"request_id": "req-1", "provider": "smarty"}

    pop_log_context(token2)
    assert get_log_context() == {"request_id": "req-1"}

    pop_log_context(token1)
    assert get_log_context() == {}


def test_push_same_key_overrides():
    token1 = push_log_context(request_id="req-1")
    token2 = push_log_context(request_id="req-2")
    assert get_log_context() == {"request_id": "req-2"}

    pop_log_context(token2)
    assert get_log_context() == {"request_id": "req-1"}
    pop_log_context(token1)


def test_context_manager_restores_on_exception():
    """Test that context is restored even when an exception escapes the block."""
    with pytest.raises(ValueError):
        with log_context(request_id="req-1"):
            assert get_log_context() == {"request_id": "req-1"}
            raise ValueError("boom")

    assert get_log_context() == {}


def test_clear_context():
    push_log_context(request_id="req-1", provider="smarty")
    clear_log_context()
    assert get_log_context() == {}


def test_get_log_context_returns_copy():
    with log_context(request_id="req-1"):
        context = get_log_context()
        context["provider"] = "modified"

        assert get_log_context() == {"request_id": "req-1"}


def test_context_is_isolated_between_threads():
    """Test that a context pushed in one thread is invisible in another."""
    seen = {}

    def worker():
        seen["worker"] = get_log_context()

    with log_context(request_id="req-main"):
        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

    assert seen["worker"] == {}


def test_log_context_is_exported_from_logging_package():
    from address_validation import logging as service_logging

    with service_logging.log_context(request_id="req-7"):
        assert get_log_context() == {"request_id": "req-7"}
