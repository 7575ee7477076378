"""PST Inventory — records which PST files the logged-on user has, on a shared folder.

Meant to run hidden, once per user per day, from a scheduled task or logon
script.  Each run discovers the current user's PST files (through Outlook,
or by scanning folders with --scan) and reconciles them into:

    <share>/<user>.txt     every PST path seen for the user
    <share>/_NoPST.txt     users with no Outlook profile or no PST files
    <share>/ErrorLog.txt   failures

The process always exits with status 0; problems are logged, never
surfaced through the exit code.

REQUIREMENTS
------------
    pip install pywin32        (Outlook discovery, Windows only)

ENVIRONMENT
-----------
    PST_INVENTORY_SHARE         default share when none is given
    PST_INVENTORY_FALLBACK_DIR  local folder for startup errors and
                                --log-to-file output (default %PROGRAMDATA%)

USAGE
-----
    python pst_inventory.py \\\\fileserver\\pst$
    python pst_inventory.py \\\\fileserver\\pst$ --log-to-file
    python pst_inventory.py \\\\fileserver\\pst$ --scan D:\\Archives --dry-run
"""

import argparse
import getpass
import logging
import os
import sys
import tempfile
from datetime import datetime
from pathlib import Path

from base_discovery import DiscoverySource
from error_sink import record_error
from outlook_discovery import OutlookDiscovery
from reconciler import Reconciler
from scan_discovery import ScanDiscovery

SHARE_ENV = "PST_INVENTORY_SHARE"
FALLBACK_DIR_ENV = "PST_INVENTORY_FALLBACK_DIR"
FALLBACK_ERROR_LOG = "PstInventory_ErrorLog.txt"
UNC_PREFIX = "\\\\"

# ------------------------------------------------------------------
# Logging
# ------------------------------------------------------------------

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
logger = logging.getLogger("PstInventory")


def fallback_dir() -> Path:
    """Local folder for anything that cannot go to the share."""
    configured = os.getenv(FALLBACK_DIR_ENV) or os.getenv("PROGRAMDATA")
    return Path(configured) if configured else Path(tempfile.gettempdir())


def setup_logging(log_to_file: bool = False) -> None:
    """Configure console logging and optional dated file logging in the fallback folder."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    file_error: OSError | None = None
    if log_to_file:
        logs_dir = fallback_dir()
        date_stamp = datetime.now().strftime("%Y-%m-%d")
        log_file = logs_dir / f"PstInventory_{date_stamp}.log"
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(str(log_file), encoding="utf-8"))
        except OSError as exc:
            file_error = exc

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, handlers=handlers)
    if file_error is not None:
        logger.warning("File logging disabled, console only: %s", file_error)


# ------------------------------------------------------------------
# Configuration
# ------------------------------------------------------------------

class ConfigurationError(Exception):
    """The share argument is missing or malformed."""


def resolve_share(share: str | None) -> str:
    """Return the share to use, or raise ConfigurationError."""
    share = (share or os.getenv(SHARE_ENV, "")).strip()
    if not share:
        raise ConfigurationError("No sharePath provided as a command-line argument.")
    if not share.startswith(UNC_PREFIX):
        raise ConfigurationError(
            f"Invalid network share path format: '{share}'. Ensure it starts with '\\\\'."
        )
    return share


def build_source(scan_roots: list[str] | None) -> DiscoverySource:
    if scan_roots:
        return ScanDiscovery(scan_roots)
    return OutlookDiscovery()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="PST Inventory — reconcile the current user's PST files into a shared log",
        epilog=r"Example: python pst_inventory.py \\fileserver\pst$ --log-to-file",
    )
    parser.add_argument(
        "share",
        nargs="?",
        help=f"UNC path of the shared ledger folder (default: ${SHARE_ENV})",
    )
    parser.add_argument(
        "--user",
        help="Identity to record under (default: the logged-on user)",
    )
    parser.add_argument(
        "--scan",
        action="append",
        metavar="DIR",
        help="Scan DIR for .pst files instead of asking Outlook (repeatable)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Discover and compare, but do not write to the ledgers",
    )
    parser.add_argument(
        "--log-to-file",
        action="store_true",
        help="Also write logs to the fallback folder as PstInventory_DATE.log",
    )
    # Stray arguments from a hand-edited scheduled task are ignored
    args, ignored = parser.parse_known_args(argv)
    args.ignored = ignored
    return args


# ------------------------------------------------------------------
# Main
# ------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    try:
        args = parse_args(argv)
    except SystemExit:
        # argparse already printed usage; a hidden run still exits 0
        return 0
    setup_logging(log_to_file=args.log_to_file)
    if args.ignored:
        logger.warning("Ignoring unrecognised argument(s): %s", " ".join(args.ignored))

    user = args.user or getpass.getuser()

    try:
        share = resolve_share(args.share)
    except ConfigurationError as exc:
        fallback_log = fallback_dir() / FALLBACK_ERROR_LOG
        logger.error("%s (recorded in %s)", exc, fallback_log)
        record_error(fallback_log, user, f"Error: {exc}")
        return 0

    logger.info("=" * 60)
    logger.info("PST Inventory starting")
    logger.info("User: %s", user)
    logger.info("Share: %s", share)
    logger.info("Dry run: %s", args.dry_run)
    logger.info("=" * 60)

    reconciler = Reconciler(share, user, dry_run=args.dry_run)
    result = reconciler.run(build_source(args.scan))

    if result is None:
        logger.info("PST Inventory finished with errors")
    else:
        logger.info(
            "PST Inventory finished: %s, %d new path(s)",
            result.status.value,
            len(result.appended),
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
