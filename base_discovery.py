import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from path_normalizer import dedupe_paths

PST_SUFFIX = ".pst"


class DiscoverySourceError(Exception):
    """A discovery source could not produce a result."""


class DiscoveryStatus(Enum):
    NO_PROFILE = "No Outlook profile"
    NO_PST_FILES = "No PST files"
    FOUND = "Found"


@dataclass(frozen=True)
class Discovery:
    """Outcome of one discovery pass for one user."""

    status: DiscoveryStatus
    paths: tuple[str, ...] = ()

    @classmethod
    def no_profile(cls) -> "Discovery":
        return cls(DiscoveryStatus.NO_PROFILE)

    @classmethod
    def no_pst_files(cls) -> "Discovery":
        return cls(DiscoveryStatus.NO_PST_FILES)

    @classmethod
    def found(cls, paths: Iterable[str]) -> "Discovery":
        return cls(DiscoveryStatus.FOUND, tuple(paths))

    @property
    def has_paths(self) -> bool:
        return self.status is DiscoveryStatus.FOUND and any(p.strip() for p in self.paths)


class DiscoverySource(ABC):
    """Base class for everything that can tell which PST files a user has.

    Subclasses implement discover() and return one of the three Discovery
    outcomes.  Anything they raise is treated as a failed run by the
    reconciler.
    """

    def __init__(self) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def discover(self, user: str) -> Discovery:
        """Look up the PST files attached for user."""


def select_pst_paths(
    paths: Iterable[str | None],
    exists: Callable[[str], bool] = os.path.isfile,
) -> list[str]:
    """Keep non-empty paths to existing ``.pst`` files, normalized and de-duplicated."""
    usable = [
        path
        for path in paths
        if path and path.lower().endswith(PST_SUFFIX) and exists(path)
    ]
    return dedupe_paths(usable)
