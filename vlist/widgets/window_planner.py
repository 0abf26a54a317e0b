from vlist.models.height_store import find_start_index
from vlist.models.window import VisibleWindow
from vlist.utils.settings import DEFAULT_SETTINGS, get_overscan


def find_end_index(offsets, item_count: int, start: int, scroll_position: float,
                   viewport_size: float) -> int:
    """Advance from `start` while the next item still begins inside the viewport."""
    if item_count <= 0:
        return -1
    limit = scroll_position + viewport_size
    end = start
    while end < item_count and offsets[end + 1] < limit:
        end += 1
    return min(end, item_count - 1)


def apply_overscan(start: int, end: int, item_count: int, overscan: int) -> VisibleWindow:
    if overscan < 0:
        raise ValueError(f"overscan must be >= 0, got {overscan}")
    if item_count <= 0:
        return VisibleWindow.empty()
    return VisibleWindow(max(0, start - overscan), min(item_count - 1, end + overscan))


def resolve_window(offset_index, scroll_position: float, viewport_size: float,
                   overscan: int = DEFAULT_SETTINGS['overscan']) -> VisibleWindow:
    """Compute the mounted index range for one scroll position and viewport size."""
    item_count = offset_index.item_count
    if item_count <= 0:
        return VisibleWindow.empty()
    offsets = offset_index.offsets
    start = find_start_index(offsets, item_count, scroll_position)
    end = find_end_index(offsets, item_count, start, scroll_position, viewport_size)
    return apply_overscan(start, end, item_count, overscan)


class WindowPlannerService:
    """Translates a host view's scrollbar/viewport state into window parameters."""

    def __init__(self, view):
        self._view = view

    def _leading_extent(self) -> float:
        return float(getattr(self._view, "leading_extent", 0.0) or 0.0)

    def resolve_scroll_position(self) -> float:
        # Negative while content above the first item is still in view.
        return float(self._view.verticalScrollBar().value()) - self._leading_extent()

    def resolve_viewport_size(self) -> float:
        return max(0.0, float(self._view.viewport().height()))

    def get_overscan(self) -> int:
        override = getattr(self._view, "overscan_override", None)
        if override is not None:
            return max(0, int(override))
        return get_overscan()

    def plan_window(self, offset_index) -> VisibleWindow:
        return resolve_window(
            offset_index,
            self.resolve_scroll_position(),
            self.resolve_viewport_size(),
            self.get_overscan(),
        )

    def compute_scroll_range(self, total_extent: float) -> int:
        """Maximum scrollbar value for the given content extent."""
        content = self._leading_extent() + float(total_extent)
        return max(0, int(round(content - self._view.viewport().height())))
