"""
Column partitioning of a raster for parallel rendering.

The image is split vertically into contiguous column ranges, one per
worker. Ranges are half-open, ascending, and cover [0, width) exactly once.
"""

from typing import List, NamedTuple


class PartitionRange(NamedTuple):
    """Half-open column range [start, end) rendered by one worker."""

    start: int
    end: int

    @property
    def size(self):
        return self.end - self.start


def partition(parts_count: int, width: int) -> List[PartitionRange]:
    """
    Split a raster width into column ranges.

    Every range but the last spans width // parts_count columns; the last
    one absorbs the remainder so that the final range always ends at width.

    parts_count is clamped to [1, width] so that no range is ever empty,
    which makes it safe to ask for more workers than there are columns.

    Args:
        parts_count: Requested number of ranges
        width: Raster width in pixels

    Returns:
        List of PartitionRange in ascending order (empty when width is 0)

    Raises:
        ValueError: if width is negative
    """
    if width < 0:
        raise ValueError(f"width must be >= 0, got {width}")
    if width == 0:
        return []

    parts = max(1, min(int(parts_count), width))
    base = width // parts

    ranges = []
    start = 0
    for i in range(1, parts + 1):
        end = width if i == parts else i * base
        ranges.append(PartitionRange(start, end))
        start = end
    return ranges
