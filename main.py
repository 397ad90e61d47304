#!/usr/bin/env python3
"""Production line sequence optimizer (config driven).

Usage:
    python main.py --config config.yaml
"""

import argparse
import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional

import yaml

from lineopt.generator import generate_instance
from lineopt.models import OptimizationResult, ProblemInstance
from lineopt.optimizer import optimize_sequence
from lineopt.parser import load_instance
from lineopt.reporting import summarize, write_result_json
from lineopt.visualization import (
    next_unique_path,
    save_convergence_plot,
    save_sequence_timeline,
)

logger = logging.getLogger("lineopt.main")


def load_config(config_file: str = "config.yaml") -> dict:
    """Load configuration from a YAML (or ``.json``) file."""
    if not os.path.isfile(config_file):
        raise FileNotFoundError(f"Config file not found: {config_file}")
    with open(config_file, "r", encoding="utf-8") as f:
        text = f.read()
    if config_file.endswith(".json"):
        return json.loads(text)
    return yaml.safe_load(text) or {}


def setup_logging(config: dict) -> None:
    """Configure root logging from ``log_level``.

    With ``optimizer.diagnostics`` on, the optimizer logger is opened to at
    least INFO so the queue dump is not filtered by a stricter ``log_level``.
    """
    level = getattr(logging, str(config.get("log_level", "INFO")).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if (config.get("optimizer") or {}).get("diagnostics", False):
        # records propagate to the root handler whatever the root level is
        logging.getLogger("lineopt.optimizer").setLevel(min(level, logging.INFO))


def build_instance(instance_cfg: Dict[str, Any]) -> ProblemInstance:
    gen_cfg = instance_cfg.get("generator") or {}
    if gen_cfg.get("enabled"):
        jobs = gen_cfg.get("jobs")
        length = gen_cfg.get("length")
        if jobs is None or length is None:
            raise ValueError("Generator enabled but 'jobs' or 'length' not provided")
        return generate_instance(
            int(jobs),
            int(length),
            seed=int(gen_cfg.get("seed", 0)),
            max_changeover=int(gen_cfg.get("max_changeover", 20)),
            max_duration=int(gen_cfg.get("max_duration", 50)),
        )
    directory = instance_cfg.get("dir")
    if not directory:
        raise ValueError("Missing 'instance.dir' (or an enabled 'instance.generator') in config")
    files = instance_cfg.get("files") or {}
    return load_instance(directory, **files)


def save_artifacts(
    result: OptimizationResult,
    instance: ProblemInstance,
    out_dir: str,
    plots: bool = True,
) -> None:
    """Write JSON results and charts; failures are logged, not raised."""
    os.makedirs(out_dir, exist_ok=True)
    try:
        json_path = next_unique_path(os.path.join(out_dir, "result.json"))
        write_result_json(result, instance, json_path)
        logger.info("Saved results JSON to %s", json_path)
    except Exception as e:  # pragma: no cover
        logger.warning("Failed to write results JSON: %s", e)
    if not plots:
        return
    try:
        save_convergence_plot(
            result.cost_history, next_unique_path(os.path.join(out_dir, "convergence.png"))
        )
        save_sequence_timeline(
            instance.sequence,
            instance,
            result.initial_cost,
            next_unique_path(os.path.join(out_dir, "timeline_initial.png")),
            title=f"Initial sequence - total = {result.initial_cost}",
        )
        save_sequence_timeline(
            result.sequence,
            instance,
            result.final_cost,
            next_unique_path(os.path.join(out_dir, "timeline_final.png")),
            title=f"Final sequence - total = {result.final_cost}",
        )
    except Exception as e:  # pragma: no cover
        logger.warning("Failed to create charts: %s", e)


def main(config: dict) -> Optional[OptimizationResult]:
    instance = build_instance(config.get("instance") or {})
    opt_cfg = config.get("optimizer") or {}
    out_cfg = config.get("output") or {}

    out_dir = None
    if out_cfg.get("dir"):
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        out_dir = os.path.join(out_cfg["dir"], f"{instance.name}_{stamp}")
        os.makedirs(out_dir, exist_ok=True)

    trace_path = None
    if out_dir and out_cfg.get("trace", False):
        trace_path = next_unique_path(os.path.join(out_dir, "trace.csv"))

    result = optimize_sequence(
        instance,
        diagnostics=bool(opt_cfg.get("diagnostics", False)),
        max_passes=opt_cfg.get("max_passes"),
        time_limit_ms=opt_cfg.get("time_limit_ms"),
        trace_path=trace_path,
    )
    print(summarize(result, instance))

    if out_dir:
        save_artifacts(result, instance, out_dir, plots=bool(out_cfg.get("plots", True)))
    return result


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Production line sequence optimizer")
    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to YAML/JSON configuration file",
    )
    parser.add_argument(
        "--diagnostics",
        action="store_true",
        help="Log the ranked swap queue after each pass (same as optimizer.diagnostics)",
    )
    args = parser.parse_args()

    cfg = load_config(args.config)
    if args.diagnostics:
        cfg.setdefault("optimizer", {})["diagnostics"] = True

    setup_logging(cfg)
    main(cfg)
