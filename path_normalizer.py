"""PathNormalizer — canonical form and case-insensitive identity for PST paths.

Outlook reports network stores either as ``\\\\server\\share\\file.pst`` or in
the extended-length form ``\\\\?\\UNC\\server\\share\\file.pst``.  Both must
land in the ledger as the short form, and Windows paths compare without
regard to case.
"""

from collections.abc import Iterable, Iterator, MutableSet

LONG_UNC_PREFIX = "\\\\?\\UNC\\"
UNC_PREFIX = "\\\\"


def normalize(raw: str) -> str:
    """Rewrite a long-form UNC path to its short ``\\\\server\\share`` form.

    Anything else is returned unchanged.
    """
    if raw[: len(LONG_UNC_PREFIX)].upper() == LONG_UNC_PREFIX:
        return UNC_PREFIX + raw[len(LONG_UNC_PREFIX):]
    return raw


def fold_case(text: str) -> str:
    """Upper-case each character on its own, the way Windows compares names.

    Characters whose upper case is more than one character (``ß``) stay as
    they are, so ``straße`` and ``STRASSE`` remain different.
    """
    return "".join(ch if len(ch.upper()) != 1 else ch.upper() for ch in text)


def path_key(path: str) -> str:
    """Identity key used for every path comparison."""
    return fold_case(normalize(path))


class PathSet(MutableSet):
    """A set of paths with case-insensitive identity.

    The first spelling added for a path is the one kept.
    """

    def __init__(self, paths: Iterable[str] = ()) -> None:
        self._items: dict[str, str] = {}
        for path in paths:
            self.add(path)

    def __contains__(self, path) -> bool:
        return isinstance(path, str) and path_key(path) in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def add(self, path: str) -> None:
        self._items.setdefault(path_key(path), normalize(path))

    def discard(self, path: str) -> None:
        self._items.pop(path_key(path), None)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self._items.values())!r})"


def dedupe_paths(paths: Iterable[str]) -> list[str]:
    """Normalize each path and drop case-insensitive repeats, keeping first-seen order."""
    seen = PathSet()
    result: list[str] = []
    for raw in paths:
        path = normalize(raw)
        if path in seen:
            continue
        seen.add(path)
        result.append(path)
    return result
