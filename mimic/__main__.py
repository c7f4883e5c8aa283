"""Entry point: ``python -m mimic``.

Supports three modes:
  - ``python -m mimic``               → Launch FastAPI server with the live simulation
  - ``python -m mimic cli``           → Headless CLI simulation
  - ``python -m mimic check-config``  → Validate the balance file and print a scaling table
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)

_LEVELS = ["DEBUG", "INFO", "WARNING"]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Mimic Balance Engine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--mimics", type=int, default=12)
    srv.add_argument("--workers", type=int, default=4)
    srv.add_argument("--balance-file", type=str, default="config/mimicmod.json")
    srv.add_argument("--log-level", type=str, default="INFO", choices=_LEVELS)

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run headless CLI simulation")
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--ticks", type=int, default=400)
    cli.add_argument("--mimics", type=int, default=12)
    cli.add_argument("--workers", type=int, default=4)
    cli.add_argument("--difficulty", type=str, default="NORMAL", choices=["PEACEFUL", "EASY", "NORMAL", "HARD"])
    cli.add_argument("--balance-file", type=str, default="config/mimicmod.json")
    cli.add_argument("--log-level", type=str, default="INFO", choices=_LEVELS)

    # --- Config check ---
    chk = sub.add_parser("check-config", help="Validate the balance file and print scaled stats")
    chk.add_argument("--balance-file", type=str, default="config/mimicmod.json")
    chk.add_argument("--difficulty", type=str, default="NORMAL", choices=["PEACEFUL", "EASY", "NORMAL", "HARD"])
    chk.add_argument("--log-level", type=str, default="INFO", choices=_LEVELS)

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from mimic.api.app import create_app
    from mimic.config import SimulationConfig

    config = SimulationConfig(
        world_seed=args.seed,
        initial_mimic_count=args.mimics,
        num_workers=args.workers,
        balance_file=args.balance_file,
        log_level=args.log_level,
    )
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from mimic.api.engine_manager import EngineManager
    from mimic.config import SimulationConfig
    from mimic.core.enums import Difficulty
    from mimic.utils.logging import setup_logging

    config = SimulationConfig(
        world_seed=args.seed,
        max_ticks=args.ticks,
        initial_mimic_count=args.mimics,
        num_workers=args.workers,
        difficulty=int(Difficulty[args.difficulty]),
        balance_file=args.balance_file,
        log_level=args.log_level,
    )
    setup_logging(config.log_level)

    manager = EngineManager(config)
    try:
        while manager.tick_now():
            pass
    finally:
        manager.stop()

    snapshot = manager.get_snapshot()
    assert snapshot is not None
    logger.info(
        "Done at tick %d: %d mimics, %d biome lookups, %d events",
        snapshot.tick, len(snapshot.mimics), snapshot.biome_lookups, len(manager.event_log),
    )


def _run_check_config(args: argparse.Namespace) -> None:
    from mimic.core.balance import DEFAULT_BIOME_WEIGHTS
    from mimic.core.enums import Difficulty
    from mimic.core.variants import MimicVariant
    from mimic.systems.config_file import ConfigFile
    from mimic.systems.config_store import ConfigStore
    from mimic.systems.scaling import validate_scaling
    from mimic.utils.logging import setup_logging

    setup_logging(args.log_level)
    store = ConfigStore(ConfigFile(args.balance_file).load)
    config = store.ensure_initialized()
    difficulty = Difficulty[args.difficulty]

    biomes = sorted(set(DEFAULT_BIOME_WEIGHTS) | set(config.biome_weights))
    for variant in MimicVariant:
        for biome_id in biomes:
            validate_scaling(config, biome_id, variant, difficulty)


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)
    elif args.command == "check-config":
        _run_check_config(args)


if __name__ == "__main__":
    main()
