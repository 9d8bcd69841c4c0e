"""PR digest entry point.

Collects open PRs from the configured repositories and team members,
prints the digest to stdout and, inside a GitHub Actions job, exposes it
as a step output for the notification step. Usage: prdigest [-c PATH].
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from prdigest.actions import report_failure, set_output
from prdigest.config import CONFIG_ENV, ConfigError, load_config, resolve_config_path
from prdigest.digest import build_digest
from prdigest.logging import DigestLogging

DEFAULT_OUTPUT_NAME = "slack_text"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="prdigest",
        description="Daily digest of open pull requests for a team",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help=f"Path to JSON/YAML config file (default: ${CONFIG_ENV})",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    parser.add_argument(
        "--output-name",
        default=DEFAULT_OUTPUT_NAME,
        help="GitHub Actions step output that receives the digest",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point: load config, build the digest, emit it."""
    args = parse_args(argv)

    try:
        config = load_config(resolve_config_path(args.config))
    except ConfigError as e:
        report_failure(str(e))
        return 1

    DigestLogging(config.logging).setup()
    log = logging.getLogger("prdigest.main")

    if args.check:
        print(
            "Config OK:",
            config.digest.org,
            f"repos={len(config.digest.repos)}",
            f"users={len(config.digest.users)}",
        )
        return 0

    try:
        text = asyncio.run(build_digest(config))
    except Exception as e:
        log.exception("Fatal error: %s", e)
        report_failure(f"PR digest failed: {e}")
        return 1

    print(text)
    if set_output(args.output_name, text):
        log.info("Digest written to step output %r", args.output_name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
