"""watch-harness entry point.

Exercises the streaming API of one ccxt.pro exchange client. All
orchestration lives in ``watch_harness``; this module only bootstraps
configuration and logging and turns the run outcome into an exit status.

Usage:
    python main.py kraken
    python main.py kraken ETH/USDT --verbose
"""

import argparse
import asyncio
import sys
from typing import Sequence

from loguru import logger

from config.settings import HarnessConfig, get_config
from watch_harness.driver import RunDriver
from watch_harness.exceptions import HarnessError, LoggingInitializationError
from watch_harness.logger import configure_logging
from watch_harness.outcome import Completed, Failed, RunOutcome, Skipped


KNOWN_FLAGS = ("--verbose", "--help")


def _parse_args(argv: Sequence[str] | None = None) -> tuple[argparse.Namespace, list[str]]:
    """Parse positional exchange id and symbol; unknown flags are returned separately.

    Unknown ``--`` flags are set aside before parsing, so positionals keep
    their order wherever the flags appear.
    """
    parser = argparse.ArgumentParser(
        description="Exercise the streaming API of one ccxt.pro exchange."
    )
    parser.add_argument("exchange_id", nargs="?", help="ccxt exchange id, e.g. kraken")
    parser.add_argument("symbol", nargs="?", help="market symbol override, e.g. BTC/USDT")
    parser.add_argument("--verbose", action="store_true", help="enable client verbose mode")

    arguments = list(sys.argv[1:] if argv is None else argv)
    ignored = [
        arg for arg in arguments if arg.startswith("--") and arg.split("=")[0] not in KNOWN_FLAGS
    ]
    args, extras = parser.parse_known_intermixed_args(
        [arg for arg in arguments if arg not in ignored]
    )
    return args, ignored + extras


async def _run_harness(config: HarnessConfig, args: argparse.Namespace) -> RunOutcome:
    driver = RunDriver(config)
    return await driver.run(args.exchange_id, args.symbol, verbose=args.verbose)


def _report_outcome(outcome: RunOutcome) -> int:
    """Log the outcome and return the process exit code."""
    if isinstance(outcome, Failed):
        error = outcome.error
        if isinstance(error, HarnessError):
            logger.opt(exception=error).critical(
                "Fatal harness error",
                error_type=type(error).__name__,
                message=error.message,
                context=error.context,
            )
        else:
            logger.opt(exception=error).critical("Run failed", error=outcome.reason)
    elif isinstance(outcome, Skipped):
        logger.info("Run skipped", reason=outcome.reason)
    elif isinstance(outcome, Completed):
        logger.info("Run completed", finished_at=outcome.finished_at.isoformat())
    return outcome.exit_code


def main(argv: Sequence[str] | None = None) -> int:
    """Application entry point.

    Returns:
        Exit code (0 for success or skip, non-zero for failure).
    """
    args, ignored = _parse_args(argv)

    # Step 1: Load configuration (validates via Pydantic)
    try:
        config = get_config()
    except Exception as exc:
        # Cannot log yet - print to stderr
        print(f"FATAL: Configuration loading failed: {exc}", file=sys.stderr)
        return 1

    # Step 2: Initialize logging (fail-fast)
    try:
        configure_logging(config, args.exchange_id)
    except LoggingInitializationError as exc:
        print(f"FATAL: {exc}", file=sys.stderr)
        return 1

    if ignored:
        logger.debug("Ignoring unrecognized arguments", arguments=ignored)
    if args.verbose:
        logger.warning("Running in verbose mode")

    # Step 3: Execute the run
    try:
        outcome = asyncio.run(_run_harness(config, args))
    except KeyboardInterrupt:
        logger.warning("Run interrupted by user (Ctrl+C)")
        return 130  # Standard Unix SIGINT exit code

    return _report_outcome(outcome)


if __name__ == "__main__":
    sys.exit(main())
