"""Entry point for `python -m pickaxe_agent` and the `pickaxe-agent` CLI script."""

from __future__ import annotations

import argparse
import asyncio
import os
import signal

from pydantic import ValidationError

from pickaxe_agent.deals import DealAgent
from pickaxe_agent.deals.logging_models import AgentInfo
from pickaxe_agent.env import Env, load_env
from pickaxe_agent.logging import Entry, Logger, LoggingConfig, LogLevel
from pickaxe_agent.store import StorageSubsystem
from pickaxe_agent.worker import ProposalQueue, SimulatedProposer


DEFAULT_CONFIG_PATH = os.path.join(
    os.path.expanduser("~"),
    ".filecoin-pickaxe",
    "pickaxe-config",
)

LOG_LEVEL_CHOICES = ["trace", "debug", "info", "warn", "error", "critical", "fatal"]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the filecoin pickaxe deal agent")
    parser.add_argument(
        "config_path",
        nargs="?",
        default=None,
        help=f"Path to the agent config file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--log-level",
        type=lambda value: value.lower(),
        default=None,
        choices=LOG_LEVEL_CHOICES,
        help="Logging verbosity (overrides PICKAXE_LOG_LEVEL)",
    )
    parser.add_argument(
        "--store-path",
        default=None,
        help="JSON file the deal requests are loaded from and persisted to (overrides PICKAXE_STORE_PATH)",
    )
    return parser.parse_args(argv)


def resolve_config_path(config_path: str | None) -> str:
    return config_path or DEFAULT_CONFIG_PATH


def build_env(
    config_path: str,
    log_level: str | None = None,
    store_path: str | None = None,
) -> Env:
    overrides = {}
    if log_level:
        overrides["PICKAXE_LOG_LEVEL"] = log_level

    if store_path:
        overrides["PICKAXE_STORE_PATH"] = store_path

    return load_env(
        Env,
        env_file=config_path,
        override=Env(**overrides) if overrides else None,
    )


async def run(
    config_path: str,
    log_level: str | None = None,
    store_path: str | None = None,
) -> int:
    logger = Logger()

    try:
        env = build_env(
            config_path,
            log_level=log_level,
            store_path=store_path,
        )

    except (OSError, ValidationError, ValueError) as err:
        await logger.log(
            Entry(
                message=f"Unable to load config {config_path}: {err}",
                level=LogLevel.ERROR,
            )
        )
        await logger.close()

        return 1

    LoggingConfig().update(**env.get_logging_config())

    storage = StorageSubsystem(
        env.PICKAXE_AGENT_NAME,
        config_path=config_path,
        env=env,
    )
    await storage.start()

    worker = ProposalQueue(
        SimulatedProposer(delay=env.PICKAXE_SIMULATED_PROPOSAL_DELAY),
        **env.get_worker_config(),
    )
    await worker.start()

    agent = DealAgent(
        storage.deal_requests(),
        worker,
        env=env,
        logger=logger,
    )

    stop_requested = asyncio.Event()
    loop = asyncio.get_running_loop()

    for signame in ("SIGINT", "SIGTERM"):
        loop.add_signal_handler(
            getattr(signal, signame),
            stop_requested.set,
        )

    try:
        await agent.start()
        await stop_requested.wait()

        await logger.log(
            AgentInfo(
                message="Exiting...",
                agent_name=agent.name,
                active_count=len(agent.active_set),
            )
        )

    finally:
        # In-flight drivers are left where they are; their last stage is
        # already persisted as agentState.
        await agent.stop()
        await worker.stop()
        await storage.stop()

        for signame in ("SIGINT", "SIGTERM"):
            loop.remove_signal_handler(getattr(signal, signame))

    await logger.log(
        AgentInfo(
            message="Done.",
            agent_name=agent.name,
            active_count=len(agent.active_set),
        )
    )
    await logger.close()

    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    return asyncio.run(
        run(
            resolve_config_path(args.config_path),
            log_level=args.log_level,
            store_path=args.store_path,
        )
    )


if __name__ == "__main__":
    raise SystemExit(main())
