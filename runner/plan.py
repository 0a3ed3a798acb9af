"""
cartonplan — command line front end for the carton load planner.

Sub-commands (each reads a YAML or JSON job file):

    tile        best single-carton tiling of a pallet or container + load summary
    pack        heightmap packing of carton groups into one container
    distribute  carton groups over several containers (sequential or --spread)
    recommend   how many preset containers a job needs (--method)
    general     general 3D engine on free-form items (--algorithm)
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

from config import (
    DEFAULT_CONFIG, PALLET_PRESETS, CONTAINER_PRESETS, ConfigError, EngineConfig,
    load_engine_config,
)
from monitoring.metrics import PlanMetrics, export_to_csv, print_summary
from monitoring.step_logger import StepLogger
from multi_bin.distributor import pack_multiple_containers
from multi_bin.recommender import RECOMMEND_METHODS, recommend_containers
from runner.schemas import (
    DistributeJob, GeneralJob, JOB_MODELS, PackJob, RecommendJob, TileJob,
)
from simulator.group_packer import pack_groups
from simulator.validator import PlacementError, validate_pack_result
from strategies.engine import ALGORITHMS, GeneralPackingEngine, PackOptions
from tiling.load_summary import summarize_load
from tiling.selector import best_tile

EXIT_OK = 0
EXIT_PLACEMENT = 1
EXIT_INPUT = 2


# ─────────────────────────────────────────────────────────────────────────────
# Job loading
# ─────────────────────────────────────────────────────────────────────────────

def load_job(path, command: str):
    """Read a job file and validate it against the model for *command*."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    try:
        data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot parse {path}: {exc}") from exc
    return JOB_MODELS[command].model_validate(data or {})


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────

def run_tile(job: TileJob, config: EngineConfig) -> dict:
    carton = job.carton.to_carton()
    space = job.space.resolve()
    tile = best_tile(carton.length, carton.width, carton.height,
                     space.length, space.width, space.height,
                     job.allow_vertical_flip, config)
    summary = summarize_load(tile, carton, space_volume=space.volume,
                             pallet_weight_limit=space.weight_limit,
                             carton_weight_limit=job.carton_weight_limit,
                             desired_cartons=job.desired_cartons)
    return {"space": space.label, "tile": tile.to_dict(), "summary": summary.to_dict()}


def run_pack(job: PackJob, config: EngineConfig, logger: StepLogger):
    groups = [g.to_group() for g in job.groups]
    return [pack_groups(groups, job.container.to_container(),
                        job.allow_vertical_flip, config, logger)]


def run_distribute(job: DistributeJob, config: EngineConfig, logger: StepLogger,
                   spread: bool = False):
    groups = [g.to_group() for g in job.groups]
    containers = [c.to_container() for c in job.containers]
    return pack_multiple_containers(groups, containers, job.allow_vertical_flip,
                                    spread or job.spread_evenly, config, logger)


def run_recommend(job: RecommendJob, config: EngineConfig, logger: StepLogger,
                  method: str = "simulate"):
    groups = [g.to_group() for g in job.groups]
    catalog = ([p.to_preset() for p in job.presets]
               or list(PALLET_PRESETS + CONTAINER_PRESETS))
    containers = recommend_containers(groups, catalog, job.allow_vertical_flip,
                                      config, method=method,
                                      max_containers=job.max_containers)
    plan = pack_multiple_containers(groups, containers, job.allow_vertical_flip,
                                    config=config, logger=logger)
    return containers, plan


def run_general(job: GeneralJob, config: EngineConfig,
                algorithm: Optional[str] = None) -> dict:
    engine = GeneralPackingEngine(config)
    options = PackOptions(algorithm=algorithm or job.algorithm,
                          allow_rotation=job.allow_rotation,
                          optimize_weight=job.optimize_weight,
                          check_stability=job.check_stability)
    return engine.pack_items([i.to_item() for i in job.items], job.container,
                             options).to_dict()


# ─────────────────────────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cartonplan",
        description="Carton load planner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cartonplan tile jobs/euro_tile.yaml
  cartonplan distribute jobs/order_42.yaml --spread --check --csv order_42.csv
  cartonplan general jobs/mixed.json --algorithm wall-building -o result.json
        """,
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("job", help="Job file (.yaml, .yml or .json)")
    common.add_argument("--config", help="Engine configuration YAML")
    common.add_argument("-o", "--output", help="Write the JSON result here")
    common.add_argument("--csv", help="Write per-container metrics as CSV")
    common.add_argument("--check", action="store_true",
                        help="Validate placements (bounds, overlap, support)")
    common.add_argument("-v", "--verbose", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("tile", parents=[common], help="Best single-carton tiling")
    sub.add_parser("pack", parents=[common], help="Pack groups into one container")
    dist = sub.add_parser("distribute", parents=[common],
                          help="Pack groups over several containers")
    dist.add_argument("--spread", action="store_true",
                      help="Split each group evenly over its eligible containers")
    rec = sub.add_parser("recommend", parents=[common],
                         help="Recommend preset containers for a job")
    rec.add_argument("--method", choices=RECOMMEND_METHODS, default="simulate")
    gen = sub.add_parser("general", parents=[common],
                         help="General 3D engine on free-form items")
    gen.add_argument("--algorithm", default=None,
                     help=f"Override the job's algorithm ({', '.join(ALGORITHMS)})")
    return parser


def _emit(result: dict, output: Optional[str]) -> None:
    text = json.dumps(result, indent=2)
    if output:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
    else:
        print(text)


def _check(results) -> None:
    for result in results:
        validate_pack_result(result)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_engine_config(args.config) if args.config else DEFAULT_CONFIG
        job = load_job(args.job, args.command)
    except ValidationError as exc:
        print(f"Invalid job file {args.job}:\n{exc}", file=sys.stderr)
        return EXIT_INPUT
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INPUT

    logger = StepLogger(verbose=args.verbose or config.verbose)
    pack_results = None

    try:
        if args.command == "tile":
            result = run_tile(job, config)
        elif args.command == "general":
            result = run_general(job, config, args.algorithm)
        elif args.command == "pack":
            pack_results = run_pack(job, config, logger)
            result = pack_results[0].to_dict()
        elif args.command == "distribute":
            pack_results = run_distribute(job, config, logger, args.spread)
            result = pack_results.to_dict()
        else:
            containers, pack_results = run_recommend(job, config, logger, args.method)
            result = {"containers": [c.to_dict() for c in containers],
                      "plan": pack_results.to_dict()}

        if pack_results is not None and args.check:
            _check(pack_results)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INPUT
    except PlacementError as exc:
        print(f"Placement check failed: {exc}", file=sys.stderr)
        return EXIT_PLACEMENT

    _emit(result, args.output)

    if pack_results is not None:
        metrics = PlanMetrics.from_multi_result(pack_results, plan_id=Path(args.job).stem)
        if args.csv:
            export_to_csv(metrics, args.csv)
        if logger.verbose:
            print(print_summary(metrics), file=sys.stderr)

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
