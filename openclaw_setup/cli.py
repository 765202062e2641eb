"""CLI entry point for openclaw-setup."""

import argparse
import sys

from openclaw_logging import configure_logging, get_logger

from .errors import SetupError
from .output import error, warn
from .reset import reset_runtime
from .settings import SetupSettings
from .setup_flow import GatewaySetup


logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="openclaw-setup",
        description="Provision and start the OpenClaw messaging gateway with Docker Compose",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  openclaw-setup          # First-time setup, or re-run safely at any time
  openclaw-setup reset    # Wipe runtime data (WhatsApp link, sessions, devices)

Environment:
  OPENCLAW_PROJECT_DIR       Directory with docker-compose.yml and .env (default: cwd)
  OPENCLAW_SETUP_LOG_LEVEL   Diagnostic log level (default: WARNING)
  OPENCLAW_SETUP_LOG_FILE    Write JSON diagnostic logs to this file
        """,
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=["reset"],
        help="'reset' wipes runtime data; omit to run setup",
    )
    return parser


def _report(exc: SetupError) -> None:
    error(str(exc))
    if exc.hint:
        for line in exc.hint.splitlines():
            print(f"        {line}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    try:
        args = build_parser().parse_args(argv)
    except SystemExit as e:
        # --help exits 0; usage errors map to the tool's single failure code
        return 0 if e.code in (0, None) else 1

    try:
        settings = SetupSettings.load()

        validation = settings.validate()
        for message in validation.warnings:
            warn(message)
        if not validation.is_valid:
            error("Invalid openclaw-setup settings:")
            for message in validation.errors:
                print(f"  - {message}", file=sys.stderr)
            return 1

        configure_logging(settings.log_level, settings.log_file)
        logger.debug("Resolved settings", settings=settings.to_dict())

        if args.command == "reset":
            reset_runtime(settings)
            return 0

        GatewaySetup(settings).run()
        return 0

    except SetupError as e:
        logger.debug("Setup failed", error_type=type(e).__name__)
        _report(e)
        return 1
    except KeyboardInterrupt:
        print()
        warn("Setup cancelled by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
