"""
LinkedIn Lead Harvester

Opens a browser for a manual LinkedIn login, then harvests people-search
results for a job title and location, enriches them with contact details
and saves them to CSV.

Usage:
    python lead_harvester.py --title "Solar Designer" --location "Texas" --max-leads 25
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

from config import get_settings
from errors import LeadHarvestError
from export import export_leads, export_run_summary, leads_to_dataframe
from models import FilterSpec
from session_controller import SessionController


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Harvest LinkedIn people-search leads.")
    parser.add_argument("--title", required=True, help="Job title keywords")
    parser.add_argument("--location", default="United States", help="Location, e.g. 'San Francisco'")
    parser.add_argument("--max-leads", type=int, default=25, help="Stop after this many leads")
    parser.add_argument("--output-dir", type=Path, default=None, help="Where to write exports")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )


async def run(filter_spec: FilterSpec, output_dir: Path) -> int:
    controller = SessionController()
    started_at = datetime.now()
    timestamp = started_at.strftime('%Y%m%d_%H%M%S')

    try:
        result = await controller.begin_manual_auth()
        print(result["message"])
        # Login happens in the browser window; wait for the user
        await asyncio.to_thread(input, "Press Enter once you are logged in... ")

        leads = await controller.harvest(filter_spec)
    except LeadHarvestError as e:
        print(f"Error: {e}")
        return 1
    finally:
        await controller.stop()

    output_file = export_leads(leads, output_dir, timestamp)
    summary_file = export_run_summary(leads, filter_spec, output_dir, timestamp, started_at)
    print(f"Exported run summary to: {summary_file}")

    print()
    print("=" * 50)
    print(f"Saved {len(leads)} leads to: {output_file}")
    print("=" * 50)

    if leads:
        print("\nPreview of leads:")
        print(leads_to_dataframe(leads).head(10).to_string(index=False))
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    print("=" * 50)
    print("LinkedIn Lead Harvester")
    print("=" * 50)
    print()

    try:
        filter_spec = FilterSpec(job_title=args.title, location=args.location, max_leads=args.max_leads)
    except ValueError as e:
        print(f"Error: {e}")
        return 2

    output_dir = args.output_dir or get_settings().output_dir
    return asyncio.run(run(filter_spec, output_dir))


if __name__ == "__main__":
    sys.exit(main())
