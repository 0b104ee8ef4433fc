"""Chapter id strategies."""

from typing import Protocol


class ChapterIdFactory(Protocol):
    """Supplies ids for chapters whose manifest id is already taken."""

    def __call__(self, position: int) -> str: ...


class CounterIdFactory:
    """Counter-based ids: ``chapter-1``, ``chapter-2``, ...

    A fresh instance per parse keeps ids reproducible across runs.
    """

    def __init__(self, prefix: str = "chapter"):
        self.prefix = prefix
        self._count = 0

    def __call__(self, position: int) -> str:
        self._count += 1
        return f"{self.prefix}-{self._count}"
