"""
Per-run ledger of helper units that have already been emitted.

Several types can require the same helper (two ``Optional<String>`` fields
both need ``FfiConverterOptionalString``); templates ask the tracker before
rendering one so each helper appears exactly once in the output.
"""

from typing import Iterator, Set


class RenderOnceTracker:
    """Set of helper names emitted during one generation run."""

    def __init__(self):
        self._rendered: Set[str] = set()

    def mark_if_new(self, name: str) -> bool:
        """
        Record a helper name.

        Args:
            name: Unique helper name (usually a converter name)

        Returns:
            True the first time a name is seen, False afterwards
        """
        if name in self._rendered:
            return False
        self._rendered.add(name)
        return True

    def __contains__(self, name: str) -> bool:
        return name in self._rendered

    def __len__(self) -> int:
        return len(self._rendered)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._rendered))
