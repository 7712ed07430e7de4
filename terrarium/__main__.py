"""Entry point for ``python -m terrarium``.

Loads the default YAML config, builds a simulation engine, and runs it
headless, logging a population and soil summary at a fixed interval.
"""

from __future__ import annotations

import argparse
import logging
import pathlib
from dataclasses import replace

from terrarium.simulation.config import SimulationConfig
from terrarium.simulation.engine import SimulationEngine

logger = logging.getLogger("terrarium")

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def summarize(engine: SimulationEngine) -> str:
    """Return a one-line summary of plant and soil state."""
    alive = [p for p in engine.plants if p.alive]
    mean_size = sum(p.size for p in alive) / len(alive) if alive else 0.0
    mean_health = sum(p.health for p in alive) / len(alive) if alive else 0.0
    water, nitrogen, phosphorus, potassium = engine.soil.resource_array().mean(axis=0)
    return (
        f"frame={engine.frame} alive={len(alive)}/{len(engine.plants)} "
        f"mean_size={mean_size:.4f} mean_health={mean_health:.4f} "
        f"soil(W={water:.4f} N={nitrogen:.4f} P={phosphorus:.4f} K={potassium:.4f})"
    )


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, create engine, run it."""
    parser = argparse.ArgumentParser(
        prog="terrarium",
        description="Terrarium - plant-soil ecosystem simulator",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=1000,
        help="Number of frames to simulate (default: 1000)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Override the seed from the config file",
    )
    parser.add_argument(
        "--report-every",
        type=int,
        default=100,
        help="Frames between summary lines (default: 100)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log per-frame and per-death detail",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = SimulationConfig.from_yaml(args.config)
    if args.seed is not None:
        config = replace(config, seed=args.seed)
    engine = SimulationEngine(config=config)

    report_every = max(1, args.report_every)
    for _ in range(args.frames):
        engine.step()
        if engine.frame % report_every == 0:
            logger.info(summarize(engine))
        if engine.alive_count == 0:
            logger.info("All plants dead after %d frames", engine.frame)
            break
    logger.info(summarize(engine))


if __name__ == "__main__":
    main()
