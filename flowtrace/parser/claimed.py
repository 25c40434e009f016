"""Interval tracking for source ranges already assigned to a block."""

from collections.abc import Iterator


class ClaimedRanges:
    """Set of half-open ``[start, end)`` ranges claimed by matchers.

    Ranges are kept sorted by start offset and never overlap, since a
    matcher only claims a range after checking it is free.
    """

    def __init__(self) -> None:
        self._ranges: list[tuple[int, int]] = []

    def __len__(self) -> int:
        return len(self._ranges)

    def __iter__(self) -> Iterator[tuple[int, int]]:
        return iter(self._ranges)

    def overlaps(self, start: int, end: int) -> bool:
        """Check whether ``[start, end)`` intersects any claimed range.

        Args:
            start: Range start (inclusive).
            end: Range end (exclusive).

        Returns:
            True if at least one character is already claimed.
        """
        return any(start < c_end and c_start < end for c_start, c_end in self._ranges)

    def claim(self, start: int, end: int) -> None:
        """Mark ``[start, end)`` as claimed.

        Args:
            start: Range start (inclusive).
            end: Range end (exclusive).

        Raises:
            ValueError: If the range is empty or overlaps a claimed range.
        """
        if end <= start:
            msg = f"Cannot claim empty range [{start}, {end})"
            raise ValueError(msg)
        if self.overlaps(start, end):
            msg = f"Range [{start}, {end}) overlaps a claimed range"
            raise ValueError(msg)
        self._ranges.append((start, end))
        self._ranges.sort()

    def gaps(self, length: int) -> Iterator[tuple[int, int]]:
        """Yield unclaimed ranges of a text of ``length`` characters.

        Args:
            length: Total length of the source text.

        Yields:
            ``(start, end)`` tuples in source order.
        """
        position = 0
        for c_start, c_end in self._ranges:
            if position < c_start:
                yield position, c_start
            position = max(position, c_end)
        if position < length:
            yield position, length
