import sys
import argparse
import asyncio
import json
from typing import List, Optional

# --- Settings/Logging ---
from standings_pool.logging.setup import setup_logging
from standings_pool.config.settings import settings

setup_logging()

from loguru import logger

from standings_pool.api.handlers import get_standings, update_wins

from rich import print
from rich.panel import Panel
from rich.table import Table


def render_standings(payload: dict) -> None:
    """Pretty-prints a standings payload as a rich table."""
    table = Table(title=f"Pool standings ({payload['mode']})")
    table.add_column("Rank", justify="right")
    table.add_column("Name")
    table.add_column("East", justify="right")
    table.add_column("West", justify="right")
    table.add_column("Points", justify="right", style="bold")

    for row in payload["standings"]:
        table.add_row(
            str(row["rank"]),
            row["name"],
            f"{row['east']:g}",
            f"{row['west']:g}",
            f"{row['points']:g}" + (f" / {row['max']:g}" if row.get("max") else ""),
        )

    print(table)
    print(Panel(f"Wins last updated: {payload['lastUpdated']}"))


async def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="NBA standings prediction pool")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("refresh", help="Pull the standings feed and store wins")
    standings_parser = subparsers.add_parser("standings", help="Print pool standings")
    standings_parser.add_argument(
        "--mode",
        choices=["weighted", "distance"],
        default=None,
        help=f"Scoring mode (default: {settings.scoring_mode})",
    )
    args = parser.parse_args(argv)

    if args.command == "refresh":
        logger.info("Starting standings refresh...")
        response = await update_wins()
    else:
        response = await get_standings(args.mode)

    body = json.loads(response["body"])
    if response["statusCode"] != 200:
        logger.error(f"{args.command} failed ({response['statusCode']}): {body}")
        return 1

    if args.command == "standings":
        render_standings(body)
    else:
        logger.success(f"Stored wins for {body['updated']} teams at {body['at']}.")
    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)
