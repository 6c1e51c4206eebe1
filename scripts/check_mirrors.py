#!/usr/bin/env python3
"""Check which configured Radio Browser mirrors answer, and how fast."""

import argparse
import asyncio
import sys
import time
from pathlib import Path

import aiohttp

# Add src to path
script_dir = Path(__file__).parent
project_dir = script_dir.parent
sys.path.insert(0, str(project_dir / "src"))

from streamflow_stations.adapters.config import AppConfig
from streamflow_stations.adapters.radio_browser import MirrorRaceFetcher
from streamflow_stations.domain.models import AllMirrorsFailed


async def check_mirror(
    session: aiohttp.ClientSession, mirror: str, tag: str, timeout_seconds: float
) -> bool:
    """Query one mirror on its own and print the outcome."""
    fetcher = MirrorRaceFetcher([mirror], timeout_seconds=timeout_seconds, session=session)
    start = time.monotonic()
    try:
        data = await fetcher.race_fetch(f"bytag/{tag}", {"limit": 5, "hidebroken": "true"})
    except AllMirrorsFailed as e:
        reason = e.errors[0] if e.errors else "unknown error"
        print(f"  FAIL  {mirror}  ({reason})")
        return False

    elapsed_ms = (time.monotonic() - start) * 1000
    count = len(data) if isinstance(data, list) else 0
    print(f"  OK    {mirror}  {elapsed_ms:.0f} ms, {count} record(s)")
    return True


async def check_mirrors(config_file: str | None, tag: str) -> None:
    """Check every configured mirror concurrently."""
    config = AppConfig(config_file=config_file) if config_file else AppConfig()
    try:
        config.load_config_file()
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: Failed to load config: {e}", file=sys.stderr)
        sys.exit(1)

    if not config.mirrors:
        print("ERROR: No mirrors configured", file=sys.stderr)
        sys.exit(1)

    print(f"Checking {len(config.mirrors)} mirror(s) with tag '{tag}'\n")
    async with aiohttp.ClientSession() as session:
        results = await asyncio.gather(
            *(
                check_mirror(session, mirror, tag, config.mirror_timeout_seconds)
                for mirror in config.mirrors
            )
        )

    healthy = sum(results)
    print(f"\n{healthy}/{len(results)} mirror(s) healthy")
    if healthy == 0:
        sys.exit(1)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Check Radio Browser mirror health")
    parser.add_argument("--config", help="Path to TOML configuration file")
    parser.add_argument("--tag", default="jazz", help="Tag to query (default: jazz)")
    args = parser.parse_args()

    asyncio.run(check_mirrors(args.config, args.tag))
