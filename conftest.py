from datetime import datetime

import pytest

from base_discovery import Discovery, DiscoverySource

FIXED_NOW = datetime(2026, 2, 13, 9, 30, 0)


class StaticDiscovery(DiscoverySource):
    """Returns a fixed outcome, or raises a fixed error."""

    def __init__(self, outcome: Discovery | None = None, error: Exception | None = None) -> None:
        super().__init__()
        self.outcome = outcome
        self.error = error
        self.calls: list[str] = []

    def discover(self, user: str) -> Discovery:
        self.calls.append(user)
        if self.error is not None:
            raise self.error
        return self.outcome


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def share(tmp_path):
    folder = tmp_path / "share"
    folder.mkdir()
    return folder


@pytest.fixture
def static_source():
    return StaticDiscovery
