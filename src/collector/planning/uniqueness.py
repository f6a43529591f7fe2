"""Per-directory filename uniqueness allocation."""

from __future__ import annotations

from typing import Dict, Set

from .filenames import split_filename


def uniquify(candidate: str, claimed: Set[str]) -> str:
    """Return a variant of ``candidate`` not yet present in ``claimed``.

    Collisions are resolved by appending ``_1``, ``_2``, ... before the
    recognized image extension. The winning name is recorded (lowercased) in
    ``claimed`` before it is returned.

    Args:
        candidate: Filename proposed for the directory.
        claimed: Lowercased filenames already taken in the same directory.

    Returns:
        str: ``candidate`` itself or its first free numbered variant.
    """

    winner = candidate
    if candidate.lower() in claimed:
        base, extension = split_filename(candidate)
        counter = 1
        while True:
            winner = f"{base}_{counter}{extension}"
            if winner.lower() not in claimed:
                break
            counter += 1

    claimed.add(winner.lower())
    return winner


class DirectoryClaims:
    """Track claimed filenames per directory during a single planning pass."""

    def __init__(self) -> None:
        self._claimed: Dict[str, Set[str]] = {}

    def uniquify(self, directory: str, candidate: str) -> str:
        """Allocate a unique variant of ``candidate`` within ``directory``."""
        return uniquify(candidate, self._for(directory))

    def claim(self, directory: str, filename: str) -> None:
        """Record ``filename`` as taken in ``directory`` without renaming it."""
        self._for(directory).add(filename.lower())

    def is_claimed(self, directory: str, filename: str) -> bool:
        """Return True when ``filename`` is already taken in ``directory``."""
        return filename.lower() in self._claimed.get(directory, set())

    def _for(self, directory: str) -> Set[str]:
        return self._claimed.setdefault(directory, set())


__all__ = ["uniquify", "DirectoryClaims"]
