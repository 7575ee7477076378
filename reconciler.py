"""Reconciler — merges one user's discovery result into the shared ledgers.

Share layout
------------
    <share>/<user>.txt     PST paths ever seen for the user, one per line
    <share>/_NoPST.txt     one line per user with no profile or no PST files
    <share>/ErrorLog.txt   timestamped failures, append-only

Each run handles exactly one user.  Many workstations run concurrently
against the same share; only the roster and error log are shared, and the
read-modify-write on the roster is allowed to race (last writer wins).
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from base_discovery import Discovery, DiscoverySource, DiscoverySourceError, DiscoveryStatus
from error_sink import format_timestamp, record_error
from ledger_store import (
    append_missing,
    load_normalized_set,
    missing_paths,
    remove_roster_line,
    upsert_roster_line,
)
from path_normalizer import dedupe_paths

ROSTER_FILENAME = "_NoPST.txt"
ERROR_LOG_FILENAME = "ErrorLog.txt"

logger = logging.getLogger(__name__)


class UnreachableShare(Exception):
    """The shared ledger folder cannot be reached."""


@dataclass
class ReconcileResult:
    status: DiscoveryStatus
    appended: list[str] = field(default_factory=list)
    roster_removed: bool = False
    dry_run: bool = False


class Reconciler:
    """Apply discovery outcomes for one user to the ledgers under share."""

    def __init__(
        self,
        share: str | Path,
        user: str,
        clock: Callable[[], datetime] = datetime.now,
        dry_run: bool = False,
    ) -> None:
        if not user:
            raise ValueError("user must be a non-empty identity")
        self.share = Path(share)
        self.user = user
        self.clock = clock
        self.dry_run = dry_run

        self.user_log_path = self.share / f"{user}.txt"
        self.no_data_roster_path = self.share / ROSTER_FILENAME
        self.error_log_path = self.share / ERROR_LOG_FILENAME

    def status_line(self, status: DiscoveryStatus) -> str:
        return f"{self.user} - {status.value} - checked: {format_timestamp(self.clock())}"

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def apply(self, discovery: Discovery) -> ReconcileResult:
        """Update the ledgers for one discovery outcome.

        LedgerIOError from the per-user log propagates; roster changes never
        raise.
        """
        if discovery.status is not DiscoveryStatus.FOUND:
            return self._record_no_data(discovery.status)

        candidates = [path for path in dedupe_paths(p.strip() for p in discovery.paths) if path]
        if not candidates:
            return self._record_no_data(DiscoveryStatus.NO_PST_FILES)

        existing = load_normalized_set(self.user_log_path)

        if self.dry_run:
            appended = missing_paths(candidates, existing)
            logger.info(
                "[DRY RUN] Would append %d path(s) to %s and clear %s from %s: %s",
                len(appended),
                self.user_log_path.name,
                self.user,
                ROSTER_FILENAME,
                appended,
            )
            return ReconcileResult(DiscoveryStatus.FOUND, appended, dry_run=True)

        appended = append_missing(self.user_log_path, candidates, existing)
        if not appended:
            logger.info("All %d path(s) already recorded for %s", len(candidates), self.user)

        removed = remove_roster_line(self.no_data_roster_path, self.user)
        return ReconcileResult(DiscoveryStatus.FOUND, appended, roster_removed=removed)

    def _record_no_data(self, status: DiscoveryStatus) -> ReconcileResult:
        line = self.status_line(status)
        if self.dry_run:
            logger.info("[DRY RUN] Would write roster line: %s", line)
        else:
            if upsert_roster_line(self.no_data_roster_path, self.user, line):
                logger.info("Roster updated: %s", line)
            else:
                logger.warning("Roster not updated for %s", self.user)
        return ReconcileResult(status, dry_run=self.dry_run)

    # ------------------------------------------------------------------
    # Full run
    # ------------------------------------------------------------------

    def _discover(self, source: DiscoverySource) -> Discovery:
        try:
            return source.discover(self.user)
        except DiscoverySourceError:
            raise
        except Exception as exc:
            raise DiscoverySourceError(
                f"{source.__class__.__name__} failed: {exc}"
            ) from exc

    def run(self, source: DiscoverySource) -> ReconcileResult | None:
        """Check the share, discover, apply.  Never raises.

        Failures are written to the shared error log when the share is
        reachable and to the diagnostic logger in every case.  Returns None
        for an aborted run.
        """
        try:
            if not self.share.is_dir():
                raise UnreachableShare(
                    f"The network share path '{self.share}' is not accessible."
                )
            return self.apply(self._discover(source))
        except UnreachableShare as exc:
            logger.error("%s", exc)
        except Exception as exc:
            logger.exception("Run failed for %s", self.user)
            record_error(
                self.error_log_path,
                self.user,
                f"Unexpected error in main script: {exc}",
                self.clock(),
            )
        return None
