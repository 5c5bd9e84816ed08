# tests/unit/test_retry.py
import asyncio
import pytest
from oracle_fee_replay.services.retry import RetryPolicy
from oracle_fee_replay.errors import (
    OracleRequestError, PoolNotFoundError, RetriesExhaustedError, MalformedRecordError,
)

class Flaky:
    def __init__(self, failures, result="ok", exc=OracleRequestError):
        self.failures = failures
        self.result = result
        self.exc = exc
        self.calls = 0
    async def __call__(self, *args):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc(f"boom {self.calls}")
        return self.result

def test_recovers_after_transient_failures():
    fn = Flaky(failures=2)
    policy = RetryPolicy(attempts=3, delay_sec=0, timeout_sec=1)
    assert asyncio.run(policy.call(fn, label="t")) == "ok"
    assert fn.calls == 3

def test_exhausted_retries_carry_last_error():
    fn = Flaky(failures=10)
    policy = RetryPolicy(attempts=3, delay_sec=0, timeout_sec=1)
    with pytest.raises(RetriesExhaustedError) as ei:
        asyncio.run(policy.call(fn, label="oracle round 7"))
    assert fn.calls == 3
    assert "oracle round 7" in str(ei.value)
    assert "boom 3" in str(ei.value)
    assert isinstance(ei.value.__cause__, OracleRequestError)

def test_timeout_counts_as_failed_attempt():
    calls = []
    async def slow():
        calls.append(1)
        await asyncio.sleep(5)
    policy = RetryPolicy(attempts=2, delay_sec=0, timeout_sec=0.01)
    with pytest.raises(RetriesExhaustedError):
        asyncio.run(policy.call(slow))
    assert len(calls) == 2

@pytest.mark.parametrize("exc", [PoolNotFoundError, MalformedRecordError])
def test_non_retryable_errors_pass_through(exc):
    fn = Flaky(failures=10, exc=exc)
    policy = RetryPolicy(attempts=5, delay_sec=0, timeout_sec=1)
    with pytest.raises(exc):
        asyncio.run(policy.call(fn))
    assert fn.calls == 1

def test_arguments_are_forwarded():
    async def add(a, b):
        return a + b
    assert asyncio.run(RetryPolicy(attempts=1).call(add, 2, 3)) == 5
