"""CLI for running offline elevator bank scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from elevator_bank import BankConfig, Simulation


def build_simulation(config: Dict) -> Simulation:
    bank_cfg = BankConfig.from_dict(config.get("building", {}))
    return Simulation.from_config(
        bank_cfg,
        call_rate_per_floor=config.get("call_rate_per_floor", 0.0),
        random_seed=config.get("random_seed"),
    )


def validate_scripted_events(simulation: Simulation, calls: Iterable[Dict], outages: Iterable[Dict]) -> None:
    dispatcher = simulation.dispatcher
    for call in calls:
        dispatcher.validate_floor(call["floor"])
    known = {car.car_id for car in dispatcher.cars}
    for outage in outages:
        if outage["car_id"] not in known:
            raise ValueError(f"Outage names unknown car {outage['car_id']!r}; cars are {sorted(known)}")


def schedule_scripted_events(simulation: Simulation, calls: Iterable[Dict], outages: Iterable[Dict]) -> None:
    calls = list(calls)
    outages = list(outages)
    validate_scripted_events(simulation, calls, outages)
    clock = simulation.clock
    for call in calls:
        clock.schedule(call.get("time", 0.0), simulation.register_call, call["floor"])
    for outage in outages:
        clock.schedule(outage.get("time", 0.0), simulation.mark_out_of_service, outage["car_id"])


def run_simulation(simulation: Simulation, config: Dict) -> List[Dict]:
    duration = config.get("duration", 60)
    dt = config.get("dt", 1.0)
    snapshots: List[Dict] = []

    schedule_scripted_events(simulation, config.get("calls", []), config.get("outages", []))
    elapsed = 0.0
    while elapsed < duration:
        simulation.step(dt)
        elapsed += dt
        snapshots.append(asdict(simulation.metrics_snapshot()))
    if config.get("drain", True):
        simulation.run_until_idle()
    return snapshots


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write metrics snapshots as JSON",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    config = json.loads(args.config.read_text())
    simulation = build_simulation(config)
    snapshots = run_simulation(simulation, config)

    final_metrics = asdict(simulation.metrics_snapshot())
    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "duration": config.get("duration", 60),
        "final_state": simulation.snapshot(),
        "final_metrics": final_metrics,
        "metrics_over_time": snapshots,
    }

    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(f"Duration: {results['duration']} s (finished at t={simulation.current_time:.2f})")
    print("Final metrics:")
    for key, value in final_metrics.items():
        print(f"  {key}: {value}")
    if args.output:
        print(f"Saved metrics to {args.output}")


if __name__ == "__main__":
    main()
