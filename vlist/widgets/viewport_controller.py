"""Windowed virtualization controller: scroll state, mounts and reconciliation."""

from vlist.models.height_store import HeightStore
from vlist.models.window import RenderInstruction, RenderPlan, VisibleWindow
from vlist.utils.flow_log import log_flow
from vlist.utils.settings import get_estimated_item_height, get_int_setting, get_overscan
from vlist.widgets.item_mount import ItemMount
from vlist.widgets.window_planner import resolve_window


def _default_measure(content) -> float:
    """Fallback measure for hosts that report sizes themselves."""
    height = getattr(content, "height", None)
    if callable(height):
        return float(height())
    if height is not None:
        return float(height)
    raise TypeError(f"cannot measure content of type {type(content).__name__}")


class VirtualListController:
    """
    Orchestrates one virtualized list.

    Scroll position and viewport size are plain attributes set by the host;
    `render()` turns them into a render plan and `after_layout()` feeds the
    measurements of mounted items back into the height store.
    """

    def __init__(
        self,
        item_count: int = 0,
        *,
        estimated_item_height: float | None = None,
        viewport_size: float = 0.0,
        overscan: int | None = None,
        content_provider=None,
        measure=None,
    ):
        if estimated_item_height is None:
            estimated_item_height = get_estimated_item_height()
        if overscan is None:
            overscan = get_overscan()
        if overscan < 0:
            raise ValueError(f"overscan must be >= 0, got {overscan}")
        self.store = HeightStore(item_count, estimated_item_height)
        self.overscan = int(overscan)
        self._scroll_position = 0.0
        self._viewport_size = max(0.0, float(viewport_size))
        self._content_provider = content_provider or (lambda index: None)
        self._measure = measure or _default_measure
        # One bound callback so mounts see a stable identity across renders.
        self._report = self.report_height
        self._mounts: dict[int, ItemMount] = {}
        self._window = VisibleWindow.empty()

    # --- state -----------------------------------------------------------

    @property
    def item_count(self) -> int:
        return self.store.item_count

    @property
    def scroll_position(self) -> float:
        return self._scroll_position

    def set_scroll_position(self, value: float):
        self._scroll_position = float(value)

    @property
    def viewport_size(self) -> float:
        return self._viewport_size

    def set_viewport_size(self, value: float):
        self._viewport_size = max(0.0, float(value))

    def set_overscan(self, overscan: int):
        if overscan < 0:
            raise ValueError(f"overscan must be >= 0, got {overscan}")
        self.overscan = int(overscan)

    def set_item_count(self, item_count: int):
        if item_count == self.store.item_count:
            return
        self.unmount_all()
        self._reset_store(item_count)

    def set_estimated_item_height(self, estimated_height: float):
        self.unmount_all()
        self._reset_store(self.store.item_count, estimated_height)

    def set_content_provider(self, content_provider):
        self._content_provider = content_provider

    def set_measure(self, measure):
        self._measure = measure
        for mount in self._mounts.values():
            mount.set_measure(measure)

    @property
    def total_extent(self) -> float:
        return self.store.total_extent

    @property
    def window(self) -> VisibleWindow:
        """Window produced by the most recent render."""
        return self._window

    @property
    def mounts(self) -> dict:
        return dict(self._mounts)

    def offset_for_index(self, index: int) -> float:
        return self.store.offset_index.offset_of(index)

    def visible_window(self) -> VisibleWindow:
        return resolve_window(
            self.store.offset_index, self._scroll_position, self._viewport_size, self.overscan
        )

    # --- render / reconcile ----------------------------------------------

    def report_height(self, index: int, measured: float) -> bool:
        """Measurement callback handed to every ItemMount."""
        if not 0 <= index < self.store.item_count:
            log_flow("HEIGHTS", f"Ignored report for index {index} (count={self.store.item_count})",
                     throttle_key="heights_out_of_range", every_s=1.0)
            return False
        return self.store.set_height(index, measured)

    def render(self) -> RenderPlan:
        offset_index = self.store.offset_index
        window = self.visible_window()
        unmounted = [index for index in self._mounts if index not in window]
        for index in unmounted:
            self._mounts.pop(index).unmount()

        instructions = []
        for index in window:
            offset = offset_index.offset_of(index)
            content = self._content_provider(index)
            mount = self._mounts.get(index)
            if mount is None:
                mount = ItemMount(index, offset, content, self._report, self._measure)
                self._mounts[index] = mount
            else:
                mount.update(index=index, offset=offset, content=content,
                             on_height_change=self._report)
            instructions.append(RenderInstruction(index, offset, content))

        if window != self._window:
            log_flow("WINDOW", f"Window {window.start}..{window.end} of {self.item_count}",
                     throttle_key="window_change", every_s=0.2)
        self._window = window
        return RenderPlan(
            window=window,
            total_extent=offset_index.total,
            instructions=instructions,
            unmounted=sorted(unmounted),
        )

    def after_layout(self) -> bool:
        """Measure every pending mount; True if any stored height changed."""
        changed = False
        for index in sorted(self._mounts):
            if self._mounts[index].after_layout():
                changed = True
        return changed

    def layout_cycle(self) -> bool:
        self.render()
        return self.after_layout()

    def settle(self, max_passes: int | None = None) -> int:
        """
        Run layout cycles until one makes no height change.

        Returns the number of cycles run. With `max_passes=None` there is no
        cap; a warning is logged once the configured threshold is crossed.
        """
        warn_after = get_int_setting('correction_pass_warning', minimum=1)
        passes = 0
        warned = False
        while True:
            passes += 1
            if not self.layout_cycle():
                return passes
            if max_passes is not None and passes >= max_passes:
                log_flow("RECONCILE", f"Stopped after {passes} passes without converging",
                         level="WARNING")
                return passes
            if not warned and passes >= warn_after:
                warned = True
                log_flow("RECONCILE", f"{passes} corrective passes so far; item sizes keep changing",
                         level="WARNING")

    def invalidate_measurements(self):
        for mount in self._mounts.values():
            mount.invalidate()

    def reset(self, item_count: int | None = None):
        """Drop every mount and measurement, optionally with a new item count."""
        self.unmount_all()
        self._reset_store(self.store.item_count if item_count is None else item_count)

    def _reset_store(self, item_count: int, estimated_height: float | None = None):
        self.store.reset(item_count, estimated_height)
        log_flow("HEIGHTS", f"Reset count={self.store.item_count} "
                            f"estimate={self.store.estimated_height}")

    def unmount_all(self):
        for mount in self._mounts.values():
            mount.unmount()
        self._mounts.clear()
        self._window = VisibleWindow.empty()
