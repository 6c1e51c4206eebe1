"""CLI for browsing stations from the command line."""

import asyncio
import json
import logging
import sys
from typing import Any

import aiohttp

from streamflow_stations.adapters.config import AppConfig
from streamflow_stations.adapters.storage import InMemoryKeyValueStore, SqliteKeyValueStore
from streamflow_stations.domain.models.station import RadioStation, StationRecord
from streamflow_stations.domain.ports.key_value_store import KeyValueStore
from streamflow_stations.station_client import create_station_query_service


def format_station_line(record: StationRecord) -> str:
    """One display line per station: votes, name, codec/bitrate and stream URL."""
    station = RadioStation.from_record(record)
    codec = station.codec or "?"
    if station.bitrate:
        codec = f"{codec}/{station.bitrate}k"
    return f"{station.votes:>7}  {station.name}  [{codec}]  {station.url_resolved}"


def print_stations(stations: list[StationRecord], as_json: bool = False) -> None:
    """Print stations as text lines or as a JSON array."""
    if as_json:
        print(json.dumps(stations, indent=2, ensure_ascii=False))
        return

    if not stations:
        print("No stations found.")
        return

    print(f"Found {len(stations)} station(s):\n")
    for record in stations:
        print(format_station_line(record))


async def _run_with_store(args: Any, config: AppConfig, store: KeyValueStore) -> list[StationRecord]:
    async with aiohttp.ClientSession() as session:
        service = create_station_query_service(config, session=session, store=store)
        if args.command == "tag":
            return await service.fetch_stations_by_tag(args.tag, args.limit)
        return await service.fetch_stations_by_uuids(args.uuids)


async def run_command(args: Any, config: AppConfig) -> list[StationRecord]:
    """Run the selected subcommand and return the stations it produced."""
    if config.cache_path:
        with SqliteKeyValueStore(config.cache_path) as store:
            return await _run_with_store(args, config, store)
    return await _run_with_store(args, config, InMemoryKeyValueStore())


async def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Browse internet radio stations from the Radio Browser directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Top jazz stations
  streamflow-stations tag jazz --limit 10

  # Resolve saved favorites
  streamflow-stations favorites 9617a958-0601-11e8-ae97-52543be04c81
        """,
    )
    parser.add_argument("--config", help="Path to TOML configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    tag_parser = subparsers.add_parser("tag", help="List the most voted stations for a tag")
    tag_parser.add_argument("tag", help="Tag / category, e.g. jazz")
    tag_parser.add_argument("--limit", type=int, default=None, help="Number of stations")
    tag_parser.add_argument("--json", action="store_true", help="Output as JSON")

    favorites_parser = subparsers.add_parser("favorites", help="Resolve station ids")
    favorites_parser.add_argument("uuids", nargs="+", help="Station uuids")
    favorites_parser.add_argument("--json", action="store_true", help="Output as JSON")

    args = parser.parse_args(argv)

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
        config.load_config_file()
        stations = await run_command(args, config)
        print_stations(stations, as_json=args.json)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
