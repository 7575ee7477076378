"""LedgerStore — read/merge/write helpers for the line-oriented ledgers.

Two kinds of files live on the share:

* the per-user path log (``<user>.txt``), one PST path per line, only ever
  appended to;
* the no-data roster (``_NoPST.txt``), one ``<user> - <reason> - checked: <ts>``
  line per user, rewritten in place.

Failures while appending to a per-user log are raised as LedgerIOError so the
caller can record them.  Roster maintenance is secondary bookkeeping: any I/O
failure there turns the call into a silent no-op.
"""

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from path_normalizer import PathSet, fold_case, normalize

logger = logging.getLogger(__name__)


class LedgerIOError(Exception):
    """Reading or appending to a per-user path log failed."""


# ------------------------------------------------------------------
# Per-user path log
# ------------------------------------------------------------------

def load_normalized_set(path: Path) -> PathSet:
    """Return every path already recorded in the ledger at path.

    Lines are trimmed and normalized; blank lines are ignored.  A missing
    file is an empty ledger.
    """
    path = Path(path)
    if not path.exists():
        return PathSet()
    try:
        lines = path.read_text(encoding="utf-8-sig").splitlines()
    except (OSError, UnicodeError) as exc:
        raise LedgerIOError(f"Could not read {path}: {exc}") from exc

    existing = PathSet()
    for line in lines:
        normalized = normalize(line.strip())
        if normalized:
            existing.add(normalized)
    return existing


def missing_paths(candidates: Iterable[str], existing: Iterable[str]) -> list[str]:
    """Candidates not yet in existing, normalized, in their given order."""
    seen = PathSet(existing)
    missing: list[str] = []
    for candidate in candidates:
        path = normalize(candidate.strip())
        if not path or path in seen:
            continue
        seen.add(path)
        missing.append(path)
    return missing


def append_missing(path: Path, candidates: Sequence[str], existing: Iterable[str]) -> list[str]:
    """Append the candidates missing from existing to the ledger at path.

    The file is not opened at all when nothing is missing.  Returns the
    appended lines.
    """
    path = Path(path)
    new_entries = missing_paths(candidates, existing)
    if not new_entries:
        return []

    try:
        # Keep the first new entry off an unterminated last line
        needs_break = path.exists() and _ends_without_newline(path)
        with path.open("a", encoding="utf-8") as f:
            if needs_break:
                f.write("\n")
            for entry in new_entries:
                f.write(entry + "\n")
    except (OSError, UnicodeError) as exc:
        raise LedgerIOError(f"Could not append to {path}: {exc}") from exc

    logger.info("Appended %d path(s) to %s", len(new_entries), path.name)
    return new_entries


def _ends_without_newline(path: Path) -> bool:
    with path.open("rb") as f:
        f.seek(0, 2)
        if f.tell() == 0:
            return False
        f.seek(-1, 2)
        return f.read(1) not in (b"\n", b"\r")


# ------------------------------------------------------------------
# No-data roster
# ------------------------------------------------------------------

def roster_prefix(user: str) -> str:
    return f"{user} -"


def _matches_user(line: str, user: str) -> bool:
    prefix = roster_prefix(user)
    return fold_case(line[: len(prefix)]) == fold_case(prefix)


def _read_lines(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8-sig").splitlines()


def _write_lines(path: Path, lines: list[str]) -> None:
    path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")


def upsert_roster_line(path: Path, user: str, line: str) -> bool:
    """Replace the user's roster line with line, or append it if absent.

    Best-effort: returns False instead of raising when the roster could not
    be written.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        lines = _read_lines(path) if path.exists() else []

        for i, existing in enumerate(lines):
            if _matches_user(existing, user):
                lines[i] = line
                break
        else:
            lines.append(line)

        _write_lines(path, lines)
    except (OSError, UnicodeError):
        logger.debug("Roster update skipped for %s", user, exc_info=True)
        return False
    return True


def remove_roster_line(path: Path, user: str) -> bool:
    """Drop the first roster line belonging to user.

    Only the first match goes, even if older duplicates exist.  The file is
    rewritten only when a line was removed.  Best-effort: returns False on
    any failure.
    """
    path = Path(path)
    try:
        if not path.exists():
            return False

        lines = _read_lines(path)
        for i, existing in enumerate(lines):
            if _matches_user(existing, user):
                del lines[i]
                break
        else:
            return False

        _write_lines(path, lines)
    except (OSError, UnicodeError):
        logger.debug("Roster removal skipped for %s", user, exc_info=True)
        return False

    logger.info("Removed %s from %s", user, path.name)
    return True
