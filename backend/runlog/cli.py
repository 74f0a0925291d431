#!/usr/bin/env python3
"""
Check running goals from the command line.

Commands:
  - status: list active and completed goals with their progress
  - check:  full sync; prints milestone/deadline notifications and completes
            any goal whose progress reached 100%

Usage examples:
  - Against a local API:
      runlog-goals --base-url http://localhost:8000 --token me status
  - Token and URL from the environment (.env):
      API_TOKEN=me runlog-goals check
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

import httpx

from runlog.client.api import GoalsApiClient
from runlog.client.store import GoalStore
from runlog.core.config import settings
from runlog.core.time_utils import to_local_datetime


def _print_goal(store: GoalStore, goal) -> None:
    progress = store.get_goal_progress(goal.id)
    ends = to_local_datetime(goal.end_date, settings.timezone).date().isoformat()
    if goal.is_completed:
        print(f"  [done] {goal.title} ({goal.target_value:g} {goal.target_unit})")
    elif progress is None:
        print(f"  [ -- ] {goal.title} (ends {ends})")
    else:
        print(
            f"  [{progress.progress_percentage:3.0f}%] {goal.title}: "
            f"{progress.current_value:g}/{goal.target_value:g} {goal.target_unit}, "
            f"{progress.days_remaining} day(s) left"
        )


async def run_command(args: argparse.Namespace, transport: Optional[httpx.AsyncBaseTransport] = None) -> int:
    token = args.token or settings.api_token
    if not token:
        print("No API token configured. Pass --token or set API_TOKEN.", file=sys.stderr)
        return 1

    async with GoalsApiClient(args.base_url, token, transport=transport) as api:
        store = GoalStore(api)

        if args.command == "status":
            await store.fetch_goals()
            if store.error:
                print(f"Error: {store.error}", file=sys.stderr)
                return 1
            await store.refresh_progress()
            print(f"Active goals ({len(store.active_goals)}):")
            for goal in store.active_goals:
                _print_goal(store, goal)
            print(f"Completed goals ({len(store.completed_goals)}):")
            for goal in store.completed_goals:
                _print_goal(store, goal)
            stats = store.goal_stats()
            print(f"Average progress: {stats.average_progress:.0f}%")
            if stats.struggling_goals:
                print(f"Falling behind: {', '.join(stats.struggling_goals)}")
            for tip in stats.improvement_suggestions:
                print(f"Tip: {tip}")
            return 0

        result = await store.sync(settings.notification_preferences())
        if result.error:
            print(f"Error: {result.error}", file=sys.stderr)
            return 1
        for note in result.notifications:
            print(f"{note.title} - {note.message}")
        if not result.notifications:
            print("Nothing new.")
        return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="runlog-goals", description="Inspect running goals and their progress")
    ap.add_argument("--base-url", default=settings.api_base_url, help="API base URL (default from API_BASE_URL)")
    ap.add_argument("--token", default=None, help="Bearer token (default from API_TOKEN)")
    ap.add_argument("command", choices=["status", "check"])
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    return asyncio.run(run_command(args))


if __name__ == "__main__":
    sys.exit(main())
