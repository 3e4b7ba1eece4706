from typing import Any

import pytest

from pickaxe_agent.deals import DealContext
from pickaxe_agent.env import Env
from pickaxe_agent.logging import LoggingConfig
from pickaxe_agent.worker import FAIL, SUCCESS

from tests.mocks import RecordingMap, ScriptedWorker


@pytest.fixture(autouse=True)
def configure_log_level():
    config = LoggingConfig()
    config.update(log_level="error")
    yield
    config.update(log_level="error")


@pytest.fixture
def calls() -> list[tuple[str, ...]]:
    return []


@pytest.fixture
def store(calls: list[tuple[str, ...]]) -> RecordingMap:
    return RecordingMap("dealRequests", calls)


@pytest.fixture
def success_worker(calls: list[tuple[str, ...]]) -> ScriptedWorker:
    return ScriptedWorker(calls=calls, outcome=SUCCESS, data={"dealId": "X"})


@pytest.fixture
def fail_worker(calls: list[tuple[str, ...]]) -> ScriptedWorker:
    return ScriptedWorker(calls=calls, outcome=FAIL, data={"reason": "insufficient funds"})


@pytest.fixture
def test_env() -> Env:
    return Env(
        PICKAXE_AGENT_NAME="test-agent",
        PICKAXE_ACK_SETTLE_DELAY=0.0,
        PICKAXE_SIMULATED_PROPOSAL_DELAY=0.0,
        PICKAXE_LOG_LEVEL="error",
    )


@pytest.fixture
def make_context(store: RecordingMap):
    def create_context(worker: Any, settle_delay: float = 0.0) -> DealContext:
        return DealContext(
            agent_name="test-agent",
            deal_requests=store,
            worker=worker,
            settle_delay=settle_delay,
        )

    return create_context
