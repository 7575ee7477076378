import sys

import pytest

import outlook_discovery
from base_discovery import Discovery, DiscoverySourceError, DiscoveryStatus, select_pst_paths
from outlook_discovery import OutlookDiscovery
from scan_discovery import ScanDiscovery


def touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


# ==================================================================
# Discovery values and the candidate filter
# ==================================================================

def test_discovery_constructors():
    assert Discovery.no_profile().status is DiscoveryStatus.NO_PROFILE
    assert Discovery.no_pst_files().paths == ()
    found = Discovery.found([r"C:\a.pst"])
    assert found.paths == (r"C:\a.pst",)
    assert found.has_paths
    assert not Discovery.found([]).has_paths
    assert not Discovery.found(["", "   "]).has_paths


def test_select_pst_paths_filters_and_normalizes():
    existing = {r"\\?\UNC\srv\share\a.pst", r"C:\b.PST", r"C:\mailbox.ost"}
    raw = [
        None,
        "",
        r"\\?\UNC\srv\share\a.pst",
        r"\\srv\share\A.pst",
        r"C:\b.PST",
        r"C:\mailbox.ost",
        r"C:\gone.pst",
    ]

    assert select_pst_paths(raw, exists=existing.__contains__) == [
        r"\\srv\share\a.pst",
        r"C:\b.PST",
    ]


# ==================================================================
# OutlookDiscovery (COM and registry stubbed)
# ==================================================================

def test_outlook_no_profile(monkeypatch):
    monkeypatch.setattr(outlook_discovery, "outlook_profile_exists", lambda: False)

    assert OutlookDiscovery().discover("bob") == Discovery.no_profile()


def test_outlook_no_pst_files(monkeypatch):
    monkeypatch.setattr(outlook_discovery, "outlook_profile_exists", lambda: True)
    monkeypatch.setattr(OutlookDiscovery, "_store_paths", lambda self: ["", r"Z:\missing.pst"])

    assert OutlookDiscovery().discover("bob") == Discovery.no_pst_files()


def test_outlook_found(monkeypatch, tmp_path):
    pst = touch(tmp_path / "Archive.pst")
    monkeypatch.setattr(outlook_discovery, "outlook_profile_exists", lambda: True)
    monkeypatch.setattr(OutlookDiscovery, "_store_paths", lambda self: ["", str(pst), str(pst)])

    assert OutlookDiscovery().discover("alice") == Discovery.found([str(pst)])


@pytest.mark.skipif(sys.platform == "win32", reason="Outlook COM may be present")
def test_outlook_without_com_raises_discovery_error(monkeypatch):
    monkeypatch.setattr(outlook_discovery, "outlook_profile_exists", lambda: True)

    with pytest.raises(DiscoverySourceError, match="Outlook COM object"):
        OutlookDiscovery().discover("alice")


# ==================================================================
# ScanDiscovery
# ==================================================================

def test_scan_finds_pst_files_in_order(tmp_path):
    b = touch(tmp_path / "root" / "b" / "Old.PST")
    a = touch(tmp_path / "root" / "a" / "mail.pst")
    touch(tmp_path / "root" / "a" / "notes.txt")

    result = ScanDiscovery([tmp_path / "root"]).discover("alice")

    assert result == Discovery.found([str(a), str(b)])


def test_scan_nothing_found(tmp_path):
    (tmp_path / "empty").mkdir()

    result = ScanDiscovery([tmp_path / "empty", tmp_path / "does-not-exist"]).discover("alice")

    assert result == Discovery.no_pst_files()
