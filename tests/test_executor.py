"""
Executor Tests
--------------
Executor registry, dispatch, timeouts and the plan executors.
"""

import time

import pytest

from commands import ActionDescriptor, Intent
from tools import (
    ExecutionContext, ExecutionStatus, Executor, ExecutorFailure,
    ExecutorRegistry, ToolExecutor, create_default_executors
)
from tools.plans import CHAIN_ID, WRAPPED_MON, format_amount, plan_swap, to_wei

from conftest import TOKEN, WALLET


def single(intent, handler, timeout_seconds=5.0):
    registry = ExecutorRegistry()
    registry.register(Executor(
        intent=intent,
        name="under-test",
        description="",
        handler=handler,
        timeout_seconds=timeout_seconds,
    ))
    return registry


class TestExecutorRegistry:

    def test_default_executors_cover_every_intent(self):
        registry = create_default_executors()
        assert len(registry) == len(Intent)
        for intent in Intent:
            assert intent in registry

    def test_default_names(self):
        registry = create_default_executors()
        assert registry.get(Intent.SWAP).name == "uniswap-swap"
        assert registry.get(Intent.CHECK_TWITTER).name == "twitter-checker"

    def test_register_replaces(self):
        registry = ExecutorRegistry()
        registry.register(Executor(Intent.SWAP, "a", "", lambda p: "a"))
        registry.register(Executor(Intent.SWAP, "b", "", lambda p: "b"))

        assert len(registry) == 1
        assert registry.get(Intent.SWAP).name == "b"

    def test_unregister(self):
        registry = create_default_executors()
        assert registry.unregister(Intent.SEND)
        assert not registry.unregister(Intent.SEND)
        assert registry.get(Intent.SEND) is None


class TestToolExecutor:

    def test_success(self, recording_executors, recorders):
        executor = ToolExecutor(recording_executors)
        action = ActionDescriptor(Intent.SEND, {"amount": 1.0, "toAddress": WALLET})

        result = executor.execute(action, turn_id="turn_x")

        assert result.success
        assert result.text == "send ok"
        assert result.turn_id == "turn_x"
        assert recorders[Intent.SEND].calls == [{"amount": 1.0, "toAddress": WALLET}]

    def test_handler_gets_a_copy(self, recording_executors, recorders):
        params = {"screenName": "jack"}
        ToolExecutor(recording_executors).execute(ActionDescriptor(Intent.CHECK_TWITTER, params))

        assert recorders[Intent.CHECK_TWITTER].calls[0] is not params

    def test_string_output_wrapped(self):
        executor = ToolExecutor(single(Intent.SWAP, lambda params: "plain text"))
        result = executor.execute(ActionDescriptor(Intent.SWAP, {}))

        assert result.success
        assert result.text == "plain text"
        assert result.data is None

    def test_unknown_executor(self):
        result = ToolExecutor(ExecutorRegistry()).execute(ActionDescriptor(Intent.SWAP, {}))

        assert result.status == ExecutionStatus.UNKNOWN_EXECUTOR
        assert not result.success

    def test_executor_failure(self):
        def handler(params):
            raise ExecutorFailure("Insufficient balance", code="BALANCE")

        result = ToolExecutor(single(Intent.SEND, handler)).execute(ActionDescriptor(Intent.SEND, {}))

        assert result.status == ExecutionStatus.FAILED
        assert result.error == "Insufficient balance"

    def test_executor_crash(self):
        def handler(params):
            raise KeyError("amount")

        result = ToolExecutor(single(Intent.SEND, handler)).execute(ActionDescriptor(Intent.SEND, {}))

        assert result.status == ExecutionStatus.EXECUTION_ERROR
        assert "amount" in result.error

    def test_non_text_return_is_execution_error(self):
        result = ToolExecutor(single(Intent.SEND, lambda params: {"tx": "0x1"})).execute(
            ActionDescriptor(Intent.SEND, {})
        )

        assert result.status == ExecutionStatus.EXECUTION_ERROR
        assert "dict" in result.error

    def test_timeout(self):
        def handler(params):
            time.sleep(0.5)
            return "late"

        executor = ToolExecutor(single(Intent.SWAP, handler, timeout_seconds=0.05))
        result = executor.execute(ActionDescriptor(Intent.SWAP, {}))

        assert result.status == ExecutionStatus.TIMEOUT

    def test_dry_run_does_not_call(self, recording_executors, recorders):
        executor = ToolExecutor(recording_executors, ExecutionContext(dry_run=True))
        result = executor.execute(ActionDescriptor(Intent.SWAP, {"amount": 2.0}))

        assert result.success
        assert result.text.startswith("[DRY RUN] Would execute swap-recorder")
        assert recorders[Intent.SWAP].calls == []


class TestPlans:

    def test_format_amount(self):
        assert format_amount(2.0) == "2"
        assert format_amount(2.5) == "2.5"
        assert format_amount(0.000001) == "0.000001"

    def test_to_wei(self):
        assert to_wei(1.0) == 10 ** 18
        assert to_wei(0.1) == 10 ** 17

    def test_plan_swap(self):
        output = plan_swap({"amount": 2.0, "contractAddress": TOKEN})

        assert output.text == f"Swap prepared: 2 MON to {TOKEN}"
        assert output.data["chainId"] == CHAIN_ID
        assert output.data["path"] == [WRAPPED_MON, TOKEN]
        assert output.data["valueWei"] == str(2 * 10 ** 18)

    def test_default_executors_run(self):
        executor = ToolExecutor(create_default_executors())

        send = executor.execute(ActionDescriptor(Intent.SEND, {"amount": 0.5, "toAddress": WALLET}))
        token = executor.execute(ActionDescriptor(Intent.ANALYZE_TOKEN, {"tokenAddress": TOKEN}))
        wallet = executor.execute(ActionDescriptor(Intent.ANALYZE_ADDRESS, {"address": WALLET}))

        assert send.text == f"Transfer prepared: 0.5 MON to {WALLET}"
        assert token.text == f"Token analysis requested for {TOKEN}"
        assert wallet.data["explorer"].endswith(f"/address/{WALLET}")
