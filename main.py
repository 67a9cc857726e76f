"""Main entry point for the Lead-Time Forecasting Engine."""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from forecast_engine.engine.forecaster import ForecastEngine
from forecast_engine.errors import ForecastError
from forecast_engine.models.objective import load_snapshot
from forecast_engine.simulation.generator import SnapshotGenerator
from forecast_engine.utils.config import load_config
from forecast_engine.utils.datetime_utils import parse_date


def _load_config(config_path: str) -> dict:
    """Load configuration if the file exists, else use defaults."""
    if config_path and Path(config_path).exists():
        return load_config(config_path)
    return {}


def _print_json(payload):
    print(json.dumps(payload, indent=2, default=str))


def run_command(args) -> int:
    """Dispatch one CLI command."""
    config = _load_config(args.config)

    if args.command == 'generate-snapshot':
        generator = SnapshotGenerator(seed=args.seed, config=config)
        now = datetime.now().replace(hour=9, minute=0, second=0, microsecond=0)
        snapshot = generator.generate_snapshot(now)

        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, 'w') as f:
            json.dump(generator.snapshot_to_dict(snapshot), f, indent=2)

        print(f"Generated {len(snapshot.teams)} teams and {len(snapshot.projects)} project(s)")
        print(f"Snapshot saved to: {output}")
        return 0

    engine = ForecastEngine(load_snapshot(args.snapshot), config)

    if args.command == 'throughput':
        _print_json({
            'team_id': args.team,
            'mode': args.mode,
            'throughput': engine.throughput(args.team, args.mode, args.window),
        })
    elif args.command == 'forecast-item':
        _print_json(engine.forecast_item(args.item, args.team).to_dict())
    elif args.command == 'backlog':
        _print_json([f.to_dict() for f in engine.forecast_backlog(args.team)])
    elif args.command == 'team-load':
        _print_json(engine.team_load(args.team).to_dict())
    elif args.command == 'lead-time':
        result = engine.lead_time(args.team, args.new_items).to_dict()
        if args.target_date:
            result['target_requirements'] = engine.target_requirements(
                args.team, args.new_items, parse_date(args.target_date)
            ).to_dict()
        _print_json(result)
    elif args.command == 'project':
        forecast = engine.project_forecast(args.project)
        if args.format == 'text':
            print(forecast.to_human_readable())
        else:
            _print_json(forecast.to_dict())

    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Lead-Time Forecasting & Capacity Rollup Engine"
    )
    parser.add_argument(
        'command',
        choices=['throughput', 'forecast-item', 'backlog', 'team-load', 'lead-time', 'project', 'generate-snapshot'],
        help='Command to run'
    )
    parser.add_argument(
        '--snapshot',
        type=str,
        default='snapshot.json',
        help='Path to snapshot file, JSON or YAML (default: snapshot.json)'
    )
    parser.add_argument(
        '--config',
        type=str,
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )
    parser.add_argument('--team', type=str, help='Team id')
    parser.add_argument('--item', type=str, help='Backlog item id')
    parser.add_argument('--project', type=str, help='Project id')
    parser.add_argument(
        '--mode',
        choices=['bucketed', 'windowed'],
        default='bucketed',
        help='Throughput formula (default: bucketed)'
    )
    parser.add_argument('--window', type=int, help='Weeks (bucketed) or days (windowed)')
    parser.add_argument('--new-items', type=int, default=0, help='Work items being added')
    parser.add_argument('--target-date', type=str, help='Target date (YYYY-MM-DD) for lead-time')
    parser.add_argument('--format', choices=['json', 'text'], default='json', help='Output format')
    parser.add_argument('--output', type=str, default='results/snapshot.json', help='Generated snapshot path')
    parser.add_argument('--seed', type=int, default=42, help='Generator seed')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    return parser


REQUIRED_OPTIONS = {
    'throughput': ['team'],
    'forecast-item': ['item'],
    'backlog': ['team'],
    'team-load': ['team'],
    'lead-time': ['team'],
    'project': ['project'],
}


def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    for option in REQUIRED_OPTIONS.get(args.command, []):
        if getattr(args, option) is None:
            parser.error(f"--{option} is required for {args.command}")

    try:
        return run_command(args)
    except (ForecastError, FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
