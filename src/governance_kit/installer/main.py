"""CLI entrypoint for the governance installer."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from governance_kit import __version__
from governance_kit.installer.config import GovernanceKitSettings, InvocationConfig
from governance_kit.installer.errors import ConfigError
from governance_kit.installer.logging import configure_logging
from governance_kit.installer.orchestrator import Orchestrator, RunReport
from governance_kit.installer.workflow import RunTracker

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_WRITE_FAILED = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="governance-kit",
        description="Install development-governance conventions into a project",
    )
    parser.add_argument("--version", action="version", version=f"governance-kit {__version__}")
    parser.add_argument(
        "--project-root",
        type=Path,
        default=None,
        help="Project root to provision (default: auto-detected from the tool directory)",
    )
    parser.add_argument(
        "--guidance-path",
        default=None,
        help=(
            "Project-relative location of the guidance payload "
            "(default: GOVERNANCE_KIT_GUIDANCE_PATH or docs/governance)"
        ),
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without touching the filesystem",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite managed artifacts that already exist",
    )
    parser.add_argument(
        "--enable-ci",
        action="store_true",
        help="Also emit the CI governance workflow",
    )
    parser.add_argument(
        "--annotate-sources",
        action="store_true",
        help="Prepend the governance marker line to matching source files",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level override (default: GOVERNANCE_KIT_LOG_LEVEL or INFO)",
    )
    return parser


def print_report(report: RunReport) -> None:
    for outcome in report.outcomes:
        line = f"{outcome.action:<18} {outcome.path}"
        if outcome.error:
            line += f"  ({outcome.error})"
        print(line)

    failed = sum(1 for o in report.outcomes if o.failed)
    mode = "dry-run" if report.dry_run else "applied"
    print(f"{mode}: {len(report.outcomes)} item(s), {failed} failed, root={report.project_root}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    tracker = RunTracker()

    try:
        settings = GovernanceKitSettings()
        if args.log_level is not None:
            settings = settings.model_copy(update={"log_level": args.log_level})
        config = InvocationConfig.from_settings(
            settings,
            project_root=args.project_root,
            guidance_path=args.guidance_path,
            dry_run=args.dry_run,
            force=args.force,
            enable_ci=args.enable_ci,
            annotate_sources=args.annotate_sources,
        )
    except (ValidationError, ConfigError) as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your flags and .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        tracker.fail()
        return EXIT_CONFIG_ERROR

    try:
        configure_logging(settings.log_level, dry_run=config.dry_run)
    except ValueError:
        print(f"Configuration error: unknown log level {settings.log_level!r}", file=sys.stderr)
        tracker.fail()
        return EXIT_CONFIG_ERROR

    try:
        report = Orchestrator(config, tracker=tracker).run()
    except ConfigError as e:
        logger.error(str(e))
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except Exception:
        logger.exception("Provisioning failed")
        if not tracker.finished:
            tracker.fail()
        return EXIT_WRITE_FAILED

    print_report(report)
    return EXIT_WRITE_FAILED if report.failed else EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
