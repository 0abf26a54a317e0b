"""Per-item height record and the prefix-sum offset table derived from it."""

import math
from bisect import bisect_left


class HeightRecordMismatchError(AssertionError):
    """Raised when the height record no longer matches the item count."""


def build_offsets(heights) -> list[float]:
    """
    Compute cumulative offsets for a sequence of item heights.

    Returns a list one longer than `heights`: offsets[0] is 0 and
    offsets[i + 1] = offsets[i] + heights[i].
    """
    offsets = [0.0] * (len(heights) + 1)
    running = 0.0
    for i, height in enumerate(heights):
        running += height
        offsets[i + 1] = running
    return offsets


def find_start_index(offsets, item_count: int, scroll_position: float) -> int:
    """
    Return the first item to render for a scroll position.

    Binary search for the first index whose offset is not below the scroll
    position, then step back one so the item straddling the boundary is
    included. Negative positions resolve to 0.
    """
    if item_count <= 0:
        return 0
    low = bisect_left(offsets, scroll_position, 0, item_count)
    return max(0, low - 1)


class OffsetIndex:
    """Immutable prefix-sum table mapping item indices to pixel offsets."""

    def __init__(self, heights):
        self._offsets = tuple(build_offsets(heights))

    @property
    def offsets(self) -> tuple:
        return self._offsets

    @property
    def item_count(self) -> int:
        return len(self._offsets) - 1

    @property
    def total(self) -> float:
        """Total scrollable extent (offset[item_count])."""
        return self._offsets[-1]

    def offset_of(self, index: int) -> float:
        """Top offset of an item; indices are clamped into [0, item_count]."""
        index = max(0, min(int(index), self.item_count))
        return self._offsets[index]

    def extent_of(self, index: int) -> float:
        if not 0 <= index < self.item_count:
            return 0.0
        return self._offsets[index + 1] - self._offsets[index]

    def index_at(self, position: float) -> int:
        """Index of the item whose span holds `position` (clamped)."""
        return find_start_index(self._offsets, self.item_count, position)

    def __len__(self):
        return len(self._offsets)


class HeightStore:
    """Owns one height value per item and rebuilds offsets when they change."""

    def __init__(self, item_count: int = 0, estimated_height: float = 35.0):
        """
        Initialize the store with every item at the estimated height.

        Args:
            item_count: Number of items in the list
            estimated_height: Height assumed for items that were never measured
        """
        if estimated_height <= 0:
            raise ValueError(f"estimated_height must be positive, got {estimated_height}")
        self._estimated_height = float(estimated_height)
        self._item_count = 0
        self._heights: list[float] = []
        self._offset_index = None
        self.rebuild_count = 0
        self.reset(item_count)

    @property
    def item_count(self) -> int:
        return self._item_count

    @property
    def estimated_height(self) -> float:
        return self._estimated_height

    @property
    def heights(self) -> tuple:
        return tuple(self._heights)

    @property
    def is_stale(self) -> bool:
        return self._offset_index is None

    def reset(self, item_count: int, estimated_height: float | None = None):
        """Reallocate the record for a new item count; measurements are discarded."""
        if item_count < 0:
            raise ValueError(f"item_count must be >= 0, got {item_count}")
        if estimated_height is not None:
            if estimated_height <= 0:
                raise ValueError(f"estimated_height must be positive, got {estimated_height}")
            self._estimated_height = float(estimated_height)
        self._item_count = int(item_count)
        self._heights = [self._estimated_height] * self._item_count
        self._offset_index = None

    def height(self, index: int) -> float:
        return self._heights[index]

    def set_height(self, index: int, measured: float) -> bool:
        """
        Record a measured height for one item.

        Returns:
            True if the stored value changed (offsets are now stale),
            False if the report was identical or ignored.
        """
        if not 0 <= index < self._item_count:
            return False
        measured = float(measured)
        if math.isnan(measured):
            return False
        measured = max(0.0, measured)
        if self._heights[index] == measured:
            return False
        self._heights[index] = measured
        self._offset_index = None
        return True

    @property
    def offset_index(self) -> OffsetIndex:
        """Current offset table, rebuilt only if a height changed since last read."""
        self._check_invariant()
        if self._offset_index is None:
            self._offset_index = OffsetIndex(self._heights)
            self.rebuild_count += 1
        return self._offset_index

    @property
    def total_extent(self) -> float:
        return self.offset_index.total

    def _check_invariant(self):
        if len(self._heights) != self._item_count:
            raise HeightRecordMismatchError(
                f"height record has {len(self._heights)} entries for {self._item_count} items"
            )
