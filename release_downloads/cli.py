"""
Command line interface.

Usage:
    release-downloads org/repo                 # Binary downloads per tag
    release-downloads org repo --group minor   # Grouped by major.minor
    release-downloads org/repo --csv > out.csv
"""

from __future__ import annotations

import argparse
import logging
import sys

from . import __version__
from .collectors import HttpStatusError, CollectionError, collect_downloads
from .config import MATCH_MODES, ConfigError, load_config
from .logging_config import setup_logging
from .render import render_debug, render_report
from .tags import GROUP_MODES

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="release-downloads",
        description="Get the number of downloads of releases of a GitHub repo",
        usage="%(prog)s [options] <org>[/]<repo>",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("org", help="Organization or Org+Repo name")
    parser.add_argument("repo", nargs="?", help="Repo name")
    parser.add_argument(
        "--username", "-u",
        help="Username to authenticate as (default: $GITHUB_USERNAME)",
    )
    parser.add_argument(
        "--token", "-t",
        help="Personal access token to authenticate with (default: $GITHUB_TOKEN)",
    )
    parser.add_argument(
        "--prerelease",
        action="store_true",
        help="Include prereleases",
    )
    parser.add_argument(
        "--group",
        choices=GROUP_MODES,
        help="Group similar versions together (default: none)",
    )
    parser.add_argument(
        "--match",
        choices=MATCH_MODES,
        help="Which kinds of files to match (default: binary)",
    )
    parser.add_argument(
        "--csv",
        action="store_true",
        help="Output comma-separated-values",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print more info about what files were considered",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Read settings from this YAML file",
    )
    parser.add_argument(
        "--api-url",
        metavar="URL",
        help="GitHub API base URL (default: https://api.github.com)",
    )
    parser.add_argument(
        "--per-page",
        type=int,
        metavar="N",
        help="Releases requested per page (1-100)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="Per-request timeout (default: wait indefinitely)",
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Also write debug logs to this file",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Hide warnings on stderr (--log-file still records everything)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def split_target(org: str, repo: str | None) -> tuple[str, str | None]:
    """Accept 'org/repo' as a single argument, splitting on the first '/'."""
    if org and not repo and "/" in org:
        org, repo = org.split("/", 1)
    return org, repo


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    org, repo = split_target(args.org, args.repo)
    if not org or not repo:
        parser.error("a repository is required: <org>/<repo> or <org> <repo>")

    try:
        config = load_config(args.config).with_overrides(
            username=args.username,
            token=args.token,
            api_url=args.api_url,
            group=args.group,
            match=args.match,
            per_page=args.per_page,
            timeout_seconds=args.timeout,
        )
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if config.source:
        logger.debug(f"Configuration from: {config.source}")

    try:
        result = collect_downloads(org, repo, config=config, prerelease=args.prerelease)
    except HttpStatusError as e:
        print("Error: ", e.status, e.body, file=sys.stderr)
        return 1
    except CollectionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    render_report(result.entries, csv=args.csv)

    if args.debug:
        render_debug(result.filenames)

    return 0


def run() -> None:
    """Console script wrapper handling Ctrl-C."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)
