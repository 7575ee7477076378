"""ScanDiscovery — finds PST files by walking directories instead of asking Outlook.

Useful on machines without Outlook, or to inventory archive folders that
were never attached to a profile.
"""

import os
from collections.abc import Iterable
from pathlib import Path

from base_discovery import PST_SUFFIX, Discovery, DiscoverySource, select_pst_paths


class ScanDiscovery(DiscoverySource):
    """Walk one or more roots and report every ``.pst`` file below them."""

    def __init__(self, roots: Iterable[str | Path]) -> None:
        super().__init__()
        self.roots = [Path(root) for root in roots]

    def _walk(self, root: Path) -> list[str]:
        found: list[str] = []

        def on_error(exc: OSError) -> None:
            self.logger.warning("Skipping unreadable folder: %s", exc)

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            dirnames.sort()
            for name in sorted(filenames):
                if name.lower().endswith(PST_SUFFIX):
                    found.append(os.path.join(dirpath, name))
        return found

    def discover(self, user: str) -> Discovery:
        candidates: list[str] = []
        for root in self.roots:
            if not root.is_dir():
                self.logger.warning("Scan root does not exist: %s", root)
                continue
            candidates.extend(self._walk(root))

        pst_paths = select_pst_paths(candidates)
        if not pst_paths:
            self.logger.info("No PST files under %d root(s) for %s", len(self.roots), user)
            return Discovery.no_pst_files()

        self.logger.info("Found %d PST file(s) for %s", len(pst_paths), user)
        return Discovery.found(pst_paths)
