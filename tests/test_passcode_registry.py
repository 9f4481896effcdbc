"""Unit tests for the one-time passcode registry."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import threading
import pytest
from unittest.mock import patch
from app.services.errors import PasscodeMismatch, PasscodeNotFound
from app.services.passcode_registry import (
    PasscodeRegistry, PasscodeState, generate_code, run_expiry_sweep,
)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def codes(*values):
    it = iter(values)
    return lambda: next(it)


class TestGenerateCode:
    def test_six_digits_in_range(self):
        for _ in range(200):
            code = generate_code()
            assert len(code) == 6 and code.isdigit()
            assert 100000 <= int(code) <= 999999

    def test_bounds_are_inclusive(self):
        with patch("app.services.passcode_registry.secrets.randbelow", return_value=0):
            assert generate_code() == "100000"
        with patch("app.services.passcode_registry.secrets.randbelow", return_value=899999):
            assert generate_code() == "999999"


class TestPasscodeRegistry:
    def test_issue_then_verify_succeeds_once(self):
        registry = PasscodeRegistry(code_factory=codes("482913"))
        assert registry.issue("a@x.com") == "482913"

        assert registry.verify("a@x.com", "482913") is True
        with pytest.raises(PasscodeNotFound):
            registry.verify("a@x.com", "482913")

    def test_consume_returns_consumed_entry(self):
        registry = PasscodeRegistry(ttl_seconds=300, code_factory=codes("482913"))
        registry.issue("a@x.com")

        entry = registry.consume("a@x.com", "482913")
        assert entry.state == PasscodeState.CONSUMED
        assert entry.identity_key == "a@x.com"
        assert entry.code == "482913"
        assert registry.state_of("a@x.com") == PasscodeState.NO_CODE
        with pytest.raises(PasscodeNotFound):
            registry.consume("a@x.com", "482913")

    def test_never_issued_is_not_found(self):
        with pytest.raises(PasscodeNotFound):
            PasscodeRegistry().verify("nobody@x.com", "123456")

    def test_wrong_code_is_mismatch_and_keeps_entry(self):
        registry = PasscodeRegistry(code_factory=codes("111111"))
        registry.issue("a@x.com")

        with pytest.raises(PasscodeMismatch):
            registry.verify("a@x.com", "222222")
        assert registry.verify("a@x.com", "111111")

    def test_reissue_invalidates_previous_code(self):
        registry = PasscodeRegistry(code_factory=codes("111111", "222222"))
        registry.issue("a@x.com")
        registry.issue("a@x.com")

        assert len(registry) == 1
        with pytest.raises(PasscodeMismatch):
            registry.verify("a@x.com", "111111")
        assert registry.verify("a@x.com", "222222")
        with pytest.raises(PasscodeNotFound):
            registry.verify("a@x.com", "111111")

    def test_expired_code_is_not_found(self):
        clock = FakeClock()
        registry = PasscodeRegistry(ttl_seconds=300, clock=clock, code_factory=codes("482913"))
        registry.issue("a@x.com")

        clock.advance(300)
        with pytest.raises(PasscodeNotFound):
            registry.verify("a@x.com", "482913")
        assert len(registry) == 0

    def test_code_valid_just_before_expiry(self):
        clock = FakeClock()
        registry = PasscodeRegistry(ttl_seconds=300, clock=clock, code_factory=codes("482913"))
        registry.issue("a@x.com")

        clock.advance(299)
        assert registry.verify("a@x.com", "482913")

    def test_identity_is_case_insensitive(self):
        registry = PasscodeRegistry(code_factory=codes("482913"))
        registry.issue("A@X.com")
        assert registry.verify(" a@x.com ", "482913")

    def test_discard_removes_pending_code(self):
        registry = PasscodeRegistry(code_factory=codes("482913"))
        registry.issue("a@x.com")

        assert registry.discard("a@x.com") is True
        assert registry.discard("a@x.com") is False
        with pytest.raises(PasscodeNotFound):
            registry.verify("a@x.com", "482913")

    def test_state_transitions(self):
        clock = FakeClock()
        registry = PasscodeRegistry(ttl_seconds=60, clock=clock, code_factory=codes("111111", "222222"))
        assert registry.state_of("a@x.com") == PasscodeState.NO_CODE

        registry.issue("a@x.com")
        assert registry.state_of("a@x.com") == PasscodeState.PENDING

        registry.verify("a@x.com", "111111")
        assert registry.state_of("a@x.com") == PasscodeState.NO_CODE

        registry.issue("a@x.com")
        clock.advance(61)
        assert registry.state_of("a@x.com") == PasscodeState.NO_CODE

    def test_sweep_drops_only_expired(self):
        clock = FakeClock()
        registry = PasscodeRegistry(ttl_seconds=60, clock=clock)
        registry.issue("old@x.com")
        clock.advance(30)
        registry.issue("new@x.com")
        clock.advance(31)

        assert registry.sweep() == 1
        assert registry.state_of("old@x.com") == PasscodeState.NO_CODE
        assert registry.state_of("new@x.com") == PasscodeState.PENDING

    def test_concurrent_verify_succeeds_exactly_once(self):
        registry = PasscodeRegistry(code_factory=codes("482913"))
        registry.issue("a@x.com")
        barrier = threading.Barrier(8)
        results = []

        def attempt():
            barrier.wait()
            try:
                results.append(registry.verify("a@x.com", "482913"))
            except PasscodeNotFound:
                results.append("not_found")

        threads = [threading.Thread(target=attempt) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 1
        assert results.count("not_found") == 7


class TestExpirySweepTask:
    @pytest.mark.asyncio
    async def test_background_sweep_purges_expired(self):
        clock = FakeClock()
        registry = PasscodeRegistry(ttl_seconds=60, clock=clock)
        registry.issue("a@x.com")
        clock.advance(120)

        task = asyncio.create_task(run_expiry_sweep(registry, interval=0.01))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert len(registry) == 0
