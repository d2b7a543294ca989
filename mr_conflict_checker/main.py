"""MR Conflict Checker entry point.

Scans GitLab repositories for conflicting release->master merge requests and
writes a markdown report. Usage: mr-conflict-checker [-c config.yaml] [-o dir].
"""

import argparse
import logging
import signal
import sys
import threading
from pathlib import Path

from mr_conflict_checker import __version__
from mr_conflict_checker.adapters import GitLabAdapter, GitPlatformError, OperationCancelled
from mr_conflict_checker.analyzer import analyze_mrs, get_conflicting_mrs
from mr_conflict_checker.config import AppConfig, ConfigValidationError, load_config
from mr_conflict_checker.logging import CheckerLogging
from mr_conflict_checker.reporter import build_report, generate_report, summarize
from mr_conflict_checker.scanner import RepositoryScanner

LOG = logging.getLogger("mr_conflict_checker.main")

DEFAULT_OUTPUT = "."


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="mr-conflict-checker",
        description="Detect conflicting release->master merge requests across GitLab repositories",
        epilog="Generates MR-conflict-<timestamp>.md in the output directory. Exit code 1 on fatal errors.",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file with GitLab credentials",
    )
    parser.add_argument(
        "--output",
        "-o",
        default=DEFAULT_OUTPUT,
        help="Directory where the markdown report is written",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def resolve_output_dir(cli_output: str, config: AppConfig) -> Path:
    """CLI output wins unless left at the default and the config names one."""
    if cli_output == DEFAULT_OUTPUT and config.output.directory:
        LOG.info("Using output directory from config: %s", config.output.directory)
        return Path(config.output.directory)
    return Path(cli_output)


def run(config: AppConfig, output_dir: Path, cancel_event: threading.Event | None = None) -> Path:
    """Scan, analyze and write the report; return the report path.

    Raises:
        GitPlatformError: If the connection test or repository listing fails,
            or the run is cancelled
        OSError: If the report cannot be written
    """
    token = config.gitlab_token_resolved or ""
    with GitLabAdapter(config.gitlab.url or "", token, cancel_event=cancel_event) as client:
        LOG.debug("Testing GitLab connection")
        client.test_connection()
        LOG.info("GitLab connection established | url=%s", config.gitlab.url)

        LOG.info("Starting repository scan")
        scanner = RepositoryScanner(client, config.gitlab.include_groups)
        repositories = scanner.scan_repositories()
        LOG.info("Repository scan completed | total_repositories=%d", len(repositories))

        LOG.info("Starting merge request analysis")
        analyzed = analyze_mrs(client, repositories)
        conflicting = get_conflicting_mrs(client, analyzed)

    if cancel_event is not None and cancel_event.is_set():
        raise OperationCancelled()

    LOG.info("Generating report")
    report = build_report(analyzed, conflicting)
    path = generate_report(report, output_dir)
    stats = summarize(report)
    LOG.info(
        "Report generated | path=%s | total_repositories=%d | repositories_with_conflicts=%d | total_conflicting_mrs=%d",
        path,
        stats["total_repositories"],
        stats["repositories_with_conflicts"],
        stats["total_conflicting_mrs"],
    )
    return path


def _install_signal_handlers(cancel_event: threading.Event) -> None:
    def _handler(signum: int, _frame: object) -> None:
        LOG.info("Received shutdown signal %s", signal.Signals(signum).name)
        cancel_event.set()

    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)


def main(argv: list[str] | None = None) -> int:
    """Entry point: load config, run the scan, return the exit code."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigValidationError as e:
        logging.basicConfig(level=logging.INFO)
        LOG.error("Failed to load configuration: %s", e)
        return 1

    if args.check:
        print("Config OK:", config.gitlab.url, f"include_groups={config.gitlab.include_groups}")
        return 0

    CheckerLogging(config.logging, verbose=args.verbose, debug=args.debug).setup()
    LOG.info("MR Conflict Checker starting | config=%s", args.config)
    output_dir = resolve_output_dir(args.output, config)

    cancel_event = threading.Event()
    _install_signal_handlers(cancel_event)
    try:
        run(config, output_dir, cancel_event)
    except OperationCancelled:
        LOG.error("Run cancelled")
        return 1
    except GitPlatformError as e:
        LOG.error("Application failed: %s", e)
        return 1
    except OSError as e:
        LOG.error("Failed to write report: %s", e)
        return 1
    LOG.info("Application completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
