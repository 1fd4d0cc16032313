import asyncio

import pytest

from app.services.deployment import OperationState, RetryableOperation
from app.services.diagnostics import FailureCategory


class ScriptedOperation:
    """Async callable that replays a list of outcomes and counts calls."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self):
        outcome = self.outcomes[min(self.calls, len(self.outcomes) - 1)]
        self.calls += 1
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def _assert_cleared(operation):
    assert operation.result is None
    assert operation.error is None
    assert operation.classification is None
    assert operation.formatted_error is None


def test_initial_state_is_idle():
    operation = RetryableOperation(ScriptedOperation("ok"))
    assert operation.state is OperationState.IDLE
    assert operation.attempt == 0
    _assert_cleared(operation)


@pytest.mark.asyncio
async def test_execute_success():
    op = ScriptedOperation({"deployed": True})
    operation = RetryableOperation(op)

    assert await operation.execute() is True

    assert operation.state is OperationState.SUCCEEDED
    assert operation.result == {"deployed": True}
    assert operation.classification is None
    assert operation.formatted_error is None
    assert op.calls == 1


@pytest.mark.asyncio
async def test_execute_failure_is_classified_and_absorbed():
    op = ScriptedOperation(RuntimeError("network timeout: no response from subnet"))
    operation = RetryableOperation(op)

    await operation.execute()

    assert operation.state is OperationState.FAILED
    assert operation.result is None
    assert isinstance(operation.error, RuntimeError)
    assert operation.classification.category is FailureCategory.NETWORK
    assert operation.classification.is_safe_to_retry is True
    assert operation.formatted_error.title == "Network Connection Issue"
    assert operation.formatted_error.technical_details == (
        "network timeout: no response from subnet"
    )


@pytest.mark.asyncio
async def test_success_after_failure_clears_error_state():
    op = ScriptedOperation(RuntimeError("wallet locked"), "done")
    operation = RetryableOperation(op)

    await operation.execute()
    assert operation.state is OperationState.FAILED

    await operation.execute()
    assert operation.state is OperationState.SUCCEEDED
    assert operation.result == "done"
    assert operation.error is None
    assert operation.classification is None
    assert operation.formatted_error is None


@pytest.mark.asyncio
async def test_failure_after_success_clears_result():
    op = ScriptedOperation("done", RuntimeError("subnet down"))
    operation = RetryableOperation(op)

    await operation.execute()
    await operation.execute()

    assert operation.state is OperationState.FAILED
    assert operation.result is None


@pytest.mark.asyncio
async def test_retry_reinvokes_same_operation():
    op = ScriptedOperation(RuntimeError("build failed: compilation error in module X"))
    operation = RetryableOperation(op)

    await operation.execute()
    first = operation.classification

    assert await operation.retry() is True

    assert op.calls == 2
    assert operation.attempt == 2
    assert operation.state is OperationState.FAILED
    assert operation.classification == first
    assert operation.classification.category is FailureCategory.BUILD
    assert operation.formatted_error.title == "Build Failed"


@pytest.mark.asyncio
@pytest.mark.parametrize("outcome", ["ok", RuntimeError("deploy failed")])
async def test_reset_returns_to_idle(outcome):
    op = ScriptedOperation(outcome)
    operation = RetryableOperation(op)
    await operation.execute()

    assert operation.reset() is True

    assert operation.state is OperationState.IDLE
    assert operation.attempt == 0
    _assert_cleared(operation)
    assert op.calls == 1


@pytest.mark.asyncio
async def test_custom_exception_str_is_used():
    class Odd(Exception):
        def __str__(self):
            return "connection refused"

    operation = RetryableOperation(ScriptedOperation(Odd()))
    await operation.execute()

    assert operation.classification.category is FailureCategory.NETWORK
    assert operation.snapshot().error == "connection refused"


@pytest.mark.asyncio
async def test_calls_while_running_are_ignored():
    gate = asyncio.Event()
    calls = 0

    async def slow():
        nonlocal calls
        calls += 1
        await gate.wait()
        return "finished"

    operation = RetryableOperation(slow)
    task = asyncio.create_task(operation.execute())
    await asyncio.sleep(0)

    assert operation.state is OperationState.RUNNING
    assert await operation.execute() is False
    assert await operation.retry() is False
    assert operation.reset() is False
    assert operation.state is OperationState.RUNNING

    gate.set()
    assert await task is True

    assert calls == 1
    assert operation.state is OperationState.SUCCEEDED
    assert operation.result == "finished"


@pytest.mark.asyncio
async def test_cancelled_attempt_returns_to_idle():
    gate = asyncio.Event()

    async def never():
        await gate.wait()

    operation = RetryableOperation(never)
    task = asyncio.create_task(operation.execute())
    await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert operation.state is OperationState.IDLE


@pytest.mark.asyncio
async def test_snapshot_reflects_failure():
    operation = RetryableOperation(ScriptedOperation(ValueError("Failed to parse reply")))
    await operation.execute()

    snapshot = operation.snapshot()
    assert snapshot.state is OperationState.FAILED
    assert snapshot.error == "Failed to parse reply"
    assert snapshot.classification.category is FailureCategory.PARSING
    assert snapshot.formatted_error.title == "Message Parsing Error"
    assert snapshot.attempt == 1
