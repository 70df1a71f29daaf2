"""Command line interface for live times and arrival alert checks."""

import asyncio
import json
import logging
import sys
from typing import Any

import aiohttp

from bus_livetimes.adapters.config import AlertConfigurationLoader, AppConfig
from bus_livetimes.adapters.in_memory_alert_store import InMemoryAlertStore
from bus_livetimes.adapters.notifiers import LoggingAlertNotifier
from bus_livetimes.adapters.tracker.authority_rules import rules_for_authority
from bus_livetimes.adapters.tracker.factory import create_tracker_endpoint
from bus_livetimes.application.services import AlertEvaluator, ArrivalAlertChecker
from bus_livetimes.domain.models.live_times import LiveTimes
from bus_livetimes.domain.models.live_times_result import LiveTimesSuccess

logger = logging.getLogger(__name__)


def live_times_to_dict(live_times: LiveTimes) -> dict[str, Any]:
    """Convert a snapshot to a JSON-serializable dict."""
    return {
        "receive_time": live_times.receive_time.isoformat() if live_times.receive_time else None,
        "has_global_disruption": live_times.has_global_disruption,
        "stops": {
            code: {
                "stop_name": stop.stop_name,
                "is_disrupted": stop.is_disrupted,
                "departures": [
                    {
                        "service": departure.service_name,
                        "destination": departure.destination,
                        "eta_minutes": departure.eta_minutes,
                        "is_estimated_time": departure.is_estimated_time,
                        "is_diverted": departure.is_diverted,
                        "is_night_service": departure.service.is_night_service,
                        "colour": (
                            f"#{departure.service.colour:08X}"
                            if departure.service.colour is not None
                            else None
                        ),
                    }
                    for departure in stop.departures
                ],
            }
            for code, stop in live_times.stops.items()
        },
    }


def format_live_times(live_times: LiveTimes) -> list[str]:
    """Format a snapshot as plain text lines, one per departure."""
    lines: list[str] = []
    if live_times.has_global_disruption:
        lines.append("Service disruption in effect")
    for code, stop in live_times.stops.items():
        header = f"{stop.stop_name} ({code})" if stop.stop_name else code
        lines.append(f"{header}{' [disrupted]' if stop.is_disrupted else ''}:")
        if not stop.departures:
            lines.append("  No departures")
        for departure in stop.departures:
            estimated = "*" if departure.is_estimated_time else ""
            destination = departure.destination or ""
            eta = f"{departure.eta_minutes}{estimated} min"
            lines.append(f"  {departure.service_name:<6} {destination:<30} {eta}")
    return lines


async def show_live_times(
    config: AppConfig,
    stop_codes: list[str],
    number_of_departures: int,
    services: set[str] | None = None,
    format_json: bool = False,
) -> int:
    """Fetch and print live times. Returns the process exit code."""
    async with aiohttp.ClientSession() as session:
        endpoint = create_tracker_endpoint(config, session)
        result = await endpoint.get_live_times(stop_codes, number_of_departures, services)

    if not isinstance(result, LiveTimesSuccess):
        print(f"Error: {result.reason}", file=sys.stderr)
        return 1

    if format_json:
        print(json.dumps(live_times_to_dict(result.live_times), indent=2, ensure_ascii=False))
    else:
        for line in format_live_times(result.live_times):
            print(line)
    return 0


async def run_alert_check(config: AppConfig) -> int:
    """Check the configured arrival alerts once. Returns the process exit code."""
    alerts = AlertConfigurationLoader.load(config)
    if not alerts:
        print("No arrival alerts configured.", file=sys.stderr)
        return 1

    async with aiohttp.ClientSession() as session:
        checker = ArrivalAlertChecker(
            tracker_endpoint=create_tracker_endpoint(config, session),
            alert_store=InMemoryAlertStore(alerts),
            notifier=LoggingAlertNotifier(),
            evaluator=AlertEvaluator(
                rules_for_authority(config.authority, config.night_service_colour)
            ),
        )
        satisfied = await checker.check_alerts()

    print(f"{len(satisfied)} of {len(alerts)} arrival alert(s) satisfied")
    return 0


async def main() -> None:
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Live bus times and arrival alert checks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show the next departures at a stop
  bus-livetimes times 36232626

  # Several stops, two departures per service, as JSON
  bus-livetimes times 36232626 36237526 -n 2 --json

  # Check the arrival alerts in config.toml once
  bus-livetimes --config config.toml check
        """,
    )
    parser.add_argument("--config", help="Path to TOML configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    times_parser = subparsers.add_parser("times", help="Show live times for one or more stops")
    times_parser.add_argument("stop_codes", nargs="+", help="Stop codes (e.g., 36232626)")
    times_parser.add_argument(
        "-n", "--departures", type=int, help="Number of departures per service"
    )
    times_parser.add_argument(
        "-s", "--service", action="append", dest="services", help="Service of interest"
    )
    times_parser.add_argument("--json", action="store_true", help="Output as JSON")

    subparsers.add_parser("check", help="Check configured arrival alerts once")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    try:
        config = AppConfig(config_file=args.config) if args.config else AppConfig()
        config.load_tracker_overrides()

        if args.command == "times":
            exit_code = await show_live_times(
                config,
                args.stop_codes,
                args.departures if args.departures is not None else config.number_of_departures,
                services=set(args.services) if args.services else None,
                format_json=args.json,
            )
        else:
            exit_code = await run_alert_check(config)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(1)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(exit_code)


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
