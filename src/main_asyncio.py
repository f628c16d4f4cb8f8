"""
main_asyncio.py - entry point for the supervised demo service
-------------------------------------------------------------

Responsible for:
- loading supervisor configuration
- configuring the logger
- handing the demo APIService to the Supervisor
- mapping the outcome to a process exit code

Send SIGINT/SIGQUIT/SIGTERM to stop, SIGHUP to reload (when reload_on_hup
is enabled in config/supervisor.yaml).
"""

import sys

if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore

import argparse
import asyncio
from typing import List, Optional

from lifecycle import Supervisor, ShutdownError
from managers.config_manager import ConfigManager
from models.enums import LogCategory
from services.api_service import APIService, apply_logging
from utils.logger import get_logger
from version import full_version

log = get_logger().for_category(LogCategory.SYSTEM)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the supervised demo HTTP service")
    parser.add_argument(
        "-c", "--config",
        default="config/supervisor.yaml",
        help="Supervisor config file (relative paths resolve against src/)",
    )
    return parser.parse_args(argv)


async def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the service until a terminating signal arrives.

    Returns:
        Process exit code: 0 after an orderly shutdown, 1 if init or a
        strict shutdown failed
    """
    args = parse_args(argv)

    config_manager = ConfigManager(config_path=args.config)
    try:
        config = config_manager.load()
    except (OSError, ValueError) as e:
        log.error("Invalid configuration", error=str(e))
        return 1
    apply_logging(config)
    log.info(f"sigvisor {full_version()} starting")

    supervisor = Supervisor(APIService(config_manager), config)
    try:
        await supervisor.serve()
    except ShutdownError as e:
        log.error("Shutdown failed", error=str(e.__cause__ or e))
        return 1
    except Exception as e:
        log.error("Service failed to initialize", error=str(e), error_type=type(e).__name__)
        return 1

    signal_name = supervisor.last_signal.name if supervisor.last_signal else "none"
    log.info("Service shut down", signal=signal_name)
    return 0


# ---------------------------------------------------------------------------
# ENTRY POINT
# ---------------------------------------------------------------------------
def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
