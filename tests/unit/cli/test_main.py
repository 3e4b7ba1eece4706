import asyncio
import signal

import orjson
import pytest

from pickaxe_agent.__main__ import (
    DEFAULT_CONFIG_PATH,
    build_env,
    parse_args,
    resolve_config_path,
    run,
)
from pickaxe_agent.env import Env

from tests.mocks import wait_until


@pytest.fixture(autouse=True)
def clear_pickaxe_environment(monkeypatch):
    for envar_name in Env.types_map():
        monkeypatch.delenv(envar_name, raising=False)


@pytest.fixture
def store_path(tmp_path) -> str:
    path = tmp_path / "store.json"
    path.write_bytes(
        orjson.dumps({
            "dealRequests": {
                "r1": {"dealRequest": ['{"size":1}']},
            },
        })
    )
    return str(path)


@pytest.fixture
def config_path(tmp_path, store_path: str) -> str:
    path = tmp_path / "pickaxe-config"
    path.write_text(
        f"PICKAXE_STORE_PATH={store_path}\n"
        "PICKAXE_ACK_SETTLE_DELAY=0.0\n"
        "PICKAXE_SIMULATED_PROPOSAL_DELAY=0.0\n"
        "PICKAXE_LOG_LEVEL=error\n"
    )
    return str(path)


class TestArguments:
    def test_defaults(self):
        args = parse_args([])

        assert args.config_path is None
        assert args.log_level is None
        assert resolve_config_path(args.config_path) == DEFAULT_CONFIG_PATH
        assert DEFAULT_CONFIG_PATH.endswith(".filecoin-pickaxe/pickaxe-config")

    def test_config_path_and_log_level(self):
        args = parse_args(["/etc/pickaxe", "--log-level", "DEBUG"])

        assert args.config_path == "/etc/pickaxe"
        assert args.log_level == "debug"

    def test_rejects_unknown_log_level(self):
        with pytest.raises(SystemExit):
            parse_args(["--log-level", "verbose"])

    def test_command_line_overrides_config_file(self, config_path: str, tmp_path):
        override_store = str(tmp_path / "other.json")

        env = build_env(config_path, log_level="warn", store_path=override_store)

        assert env.PICKAXE_LOG_LEVEL == "warn"
        assert env.PICKAXE_STORE_PATH == override_store
        assert env.PICKAXE_ACK_SETTLE_DELAY == 0.0


class TestRun:
    @pytest.mark.asyncio
    async def test_invalid_config_exits_with_error(self, tmp_path):
        path = tmp_path / "pickaxe-config"
        path.write_text("PICKAXE_WORKER_CONCURRENCY=0\n")

        assert await run(str(path)) == 1

    @pytest.mark.asyncio
    async def test_unknown_log_level_in_config_exits_with_error(self, tmp_path):
        path = tmp_path / "pickaxe-config"
        path.write_text("PICKAXE_LOG_LEVEL=verbose\n")

        assert await run(str(path)) == 1

    @pytest.mark.asyncio
    async def test_runs_until_signalled_and_persists_results(
        self,
        config_path: str,
        store_path: str,
    ):
        default_handler = signal.getsignal(signal.SIGTERM)
        task = asyncio.create_task(run(config_path))

        await wait_until(lambda: signal.getsignal(signal.SIGTERM) is not default_handler)
        await asyncio.sleep(0.5)

        signal.raise_signal(signal.SIGTERM)

        assert await asyncio.wait_for(task, timeout=5) == 0

        with open(store_path, "rb") as store_file:
            persisted = orjson.loads(store_file.read())["dealRequests"]["r1"]

        assert persisted["agentState"] == ['{"state":"dealSuccess"}']
        assert orjson.loads(persisted["deal"][0])["dealRequestId"] == "r1"
        assert "errorMsg" not in persisted
