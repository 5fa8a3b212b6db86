"""Command line entry point."""

import argparse
import logging
import sys
from typing import List, Optional

from gcalorg.aggregator import CalendarAggregator
from gcalorg.config import get_current_config, load_profile, resolve_timezone
from gcalorg.exceptions import AuthenticationError, GcalOrgError
from gcalorg.google_api import GoogleAuthManager, GoogleCalendarClient
from gcalorg.output import write_document

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gcalorg",
        description="Fetch Google Calendar events into an org-mode agenda file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gcalorg fetch work                  # Use the 'work' profile
  gcalorg fetch work -o -             # Print to stdout instead of orgfile
  gcalorg fetch work -c cal.yaml -v   # Custom profile file, verbose logging
        """,
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch = subparsers.add_parser(
        "fetch",
        help="Fetch calendars and create org-mode output",
        description=(
            "Fetches Google calendars and creates an org-mode file, "
            "which can be added to the org agenda for meetings."
        ),
    )
    fetch.add_argument("calendar", help="Name of the calendar profile")
    # Only set when given so a top-level -v is not reset by the subcommand
    fetch.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Enable verbose logging",
    )
    fetch.add_argument("-c", "--config", help="Profile file (default: GCALORG_CONFIG)")
    fetch.add_argument(
        "-o", "--output", help="Output file, '-' for stdout (default: profile orgfile)"
    )
    return parser


def fetch(name: str, config_file: Optional[str], output: Optional[str]) -> None:
    """Run one profile end to end."""
    config = get_current_config()
    profile = load_profile(name, config_file)
    tz = resolve_timezone(profile, config)

    auth_manager = GoogleAuthManager(profile.tokenfile, config.google_credentials_file)
    if not auth_manager.is_authenticated():
        raise AuthenticationError(f"No valid credentials in {profile.tokenfile}")
    aggregator = CalendarAggregator(GoogleCalendarClient(auth_manager), tz)
    document = aggregator.build_document(
        profile.calendars, profile.titlefilters, filetags=profile.tagname
    )
    write_document(document.text(), profile.orgfile if output is None else output)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        level = get_current_config().log_level
    except ValueError as e:
        print(f"Invalid environment configuration: {e}", file=sys.stderr)
        return 1
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        fetch(args.calendar, args.config, args.output)
    except GcalOrgError as e:
        logger.error(f"Failed to fetch calendar {args.calendar}: {e}")
        return 1
    return 0
