import pytest

from path_normalizer import PathSet, dedupe_paths, fold_case, normalize, path_key


@pytest.mark.parametrize(
    "raw, expected",
    [
        (r"\\?\UNC\srv\share\old.pst", r"\\srv\share\old.pst"),
        (r"\\?\unc\srv\share\old.pst", r"\\srv\share\old.pst"),
        (r"\\srv\share\old.pst", r"\\srv\share\old.pst"),
        (r"C:\Users\alice\archive.pst", r"C:\Users\alice\archive.pst"),
        (r"\\?\C:\Users\alice\archive.pst", r"\\?\C:\Users\alice\archive.pst"),
        ("", ""),
        (r"\\?\UNC", r"\\?\UNC"),
    ],
)
def test_normalize(raw, expected):
    assert normalize(raw) == expected


@pytest.mark.parametrize(
    "path",
    [r"\\srv\share\old.pst", r"C:\a.pst", r"\\?\UNC\srv\x.pst", "", "plain"],
)
def test_normalize_is_idempotent(path):
    assert normalize(normalize(path)) == normalize(path)


def test_long_form_and_short_form_normalize_the_same():
    short = r"\\srv\share\dept\mail.pst"
    assert normalize("\\\\?\\UNC\\" + short[2:]) == normalize(short)


def test_path_key_ignores_case_and_prefix():
    assert path_key(r"\\?\UNC\SRV\Share\A.PST") == path_key(r"\\srv\share\a.pst")


def test_path_set_is_case_insensitive_and_keeps_first_spelling():
    paths = PathSet([r"C:\Mail\A.pst"])
    paths.add(r"c:\mail\a.PST")
    paths.add(r"\\?\UNC\srv\b.pst")

    assert len(paths) == 2
    assert r"C:\MAIL\A.PST" in paths
    assert r"\\srv\B.pst" in paths
    assert list(paths) == [r"C:\Mail\A.pst", r"\\srv\b.pst"]

    paths.discard(r"c:\mail\a.pst")
    assert r"C:\Mail\A.pst" not in paths
    assert 42 not in paths


def test_dedupe_paths_keeps_first_seen_order():
    result = dedupe_paths(
        [r"C:\b.pst", r"C:\a.pst", r"c:\B.PST", r"\\?\UNC\srv\x.pst", r"\\srv\X.pst"]
    )
    assert result == [r"C:\b.pst", r"C:\a.pst", r"\\srv\x.pst"]


def test_fold_case_keeps_multi_character_upper_cases_apart():
    assert fold_case("straße") == "STRAßE"
    assert path_key(r"C:\Straße\a.pst") != path_key(r"C:\STRASSE\a.pst")
    assert len(PathSet([r"C:\Straße\a.pst", r"C:\strasse\a.pst"])) == 2
    assert r"C:\STRAßE\A.PST" in PathSet([r"C:\straße\a.pst"])
