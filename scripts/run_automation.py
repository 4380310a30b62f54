#!/usr/bin/env python3
"""
Run one autopilot pass from the command line

1. Load tickets from the remote ticket system (or the sample set)
2. Draft and send replies, optionally resolving tickets
3. Print the activity log

Usage:
    python scripts/run_automation.py
    python scripts/run_automation.py --base-url https://helpdesk.example.com --auto-resolve
    python scripts/run_automation.py --dry-run
"""
import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root before settings are read
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
load_dotenv(project_root / ".env")

from guardian.agents.responder import generate_agent_response  # noqa: E402
from guardian.services.automation import AutomationService  # noqa: E402


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Guardian Autopilot - one automation pass")
    parser.add_argument("--base-url", type=str, default=None, help="Remote ticket system base URL")
    parser.add_argument("--api-key", type=str, default=None, help="Bearer token for the remote system")
    parser.add_argument("--auto-resolve", action="store_true", help="Resolve tickets after replying")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only print the analysis of each ticket, send nothing"
    )
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    args = parse_args(argv)
    service = AutomationService()

    changes = {}
    if args.base_url is not None:
        changes["base_url"] = args.base_url
    if args.api_key is not None:
        changes["api_key"] = args.api_key
    if args.auto_resolve:
        changes["auto_resolve"] = True
    if changes:
        service.update_config(**changes)

    refreshed = await service.refresh()

    if args.dry_run:
        for ticket in service.repository.list():
            result = generate_agent_response(ticket)
            print("=" * 60)
            print(f"{ticket.id} [{ticket.status}/{ticket.priority}] {ticket.subject}")
            print(f"Confidence: {result.confidence:.2f}")
            print(result.analysis)
            for action in result.suggested_actions:
                print(f"  - {action}")
        return 0 if refreshed.success else 1

    await service.run()

    print("=" * 60)
    for entry in reversed(service.activity.entries()):
        print(f"{entry.timestamp:%H:%M:%S} [{entry.level.value:7}] {entry.message}")

    stats = service.repository.stats()
    print("=" * 60)
    print(f"Tickets: {stats.total} | open: {stats.open} | urgent: {stats.urgent} "
          f"| awaiting customer: {stats.awaiting_customer}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
