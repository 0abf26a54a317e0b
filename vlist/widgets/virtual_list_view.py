from PySide6.QtCore import Qt, QTimer, Signal
from PySide6.QtWidgets import QAbstractScrollArea, QWidget

from vlist.utils.flow_log import log_flow
from vlist.utils.settings import get_estimated_item_height, get_int_setting
from vlist.widgets.viewport_controller import VirtualListController
from vlist.widgets.window_planner import WindowPlannerService


class VirtualListView(QAbstractScrollArea):
    """
    Scroll area that mounts a child widget only for items inside the window.

    `widget_factory(index, parent)` creates the widget for one item. Widgets
    are kept while their index stays in the window and deleted afterwards.
    Item heights start at the estimate and are replaced by measured heights
    once each widget has been laid out.
    """
    window_changed = Signal(int, int)
    extent_changed = Signal(float)

    def __init__(self, parent=None, *, item_count: int = 0, widget_factory=None,
                 estimated_item_height: float | None = None, overscan: int | None = None,
                 leading_extent: float = 0.0, content_width: int = 0):
        super().__init__(parent)
        # Content above the first item that scrolls away with the list.
        self.leading_extent = float(leading_extent)
        self.overscan_override = overscan
        self.content_width = int(content_width)
        self._widget_factory = widget_factory
        self._widgets: dict[int, QWidget] = {}
        self._laying_out = False
        self._correction_passes = 0
        self._last_extent = None
        self._last_window = None
        self._last_viewport_width = None

        self._planner = WindowPlannerService(self)
        if estimated_item_height is None:
            estimated_item_height = get_estimated_item_height()
        self.controller = VirtualListController(
            item_count,
            estimated_item_height=estimated_item_height,
            overscan=self._planner.get_overscan(),
            content_provider=self._content_for_index,
            measure=self._measure_widget,
        )

        # Measurement runs after Qt has applied the geometry set in _relayout.
        self._measure_timer = QTimer(self)
        self._measure_timer.setSingleShot(True)
        self._measure_timer.setInterval(0)
        self._measure_timer.timeout.connect(self._on_post_layout)

        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)
        self.verticalScrollBar().setSingleStep(20)
        self.horizontalScrollBar().setSingleStep(20)

    # --- public API ------------------------------------------------------

    @property
    def item_count(self) -> int:
        return self.controller.item_count

    def set_widget_factory(self, widget_factory):
        self._widget_factory = widget_factory
        self.reset()

    def set_item_count(self, item_count: int):
        if item_count == self.controller.item_count:
            return
        self._release_all_widgets()
        self.controller.set_item_count(item_count)
        self._relayout()

    def set_content_width(self, content_width: int):
        self.content_width = max(0, int(content_width))
        self._relayout()

    def reset(self, item_count: int | None = None):
        """Drop all mounted widgets and measurements."""
        self._release_all_widgets()
        self.controller.reset(item_count)
        self._correction_passes = 0
        self._relayout()

    def scroll_to_index(self, index: int):
        if self.controller.item_count <= 0:
            return
        offset = self.controller.offset_for_index(index)
        self.verticalScrollBar().setValue(int(round(self.leading_extent + offset)))

    def mounted_widget(self, index: int) -> QWidget | None:
        return self._widgets.get(index)

    def total_extent(self) -> float:
        return self.controller.total_extent

    # --- Qt overrides ----------------------------------------------------

    def scrollContentsBy(self, dx, dy):
        """Children are repositioned from the new scrollbar values."""
        self._relayout()
        self.viewport().update()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        width = self.viewport().width()
        if self._last_viewport_width is not None and width != self._last_viewport_width:
            # Wider or narrower rows may wrap differently.
            self.controller.invalidate_measurements()
        self._last_viewport_width = width
        self._relayout()

    def showEvent(self, event):
        super().showEvent(event)
        self._relayout()

    # --- layout ----------------------------------------------------------

    def _row_width(self) -> int:
        return max(self.viewport().width(), self.content_width)

    def _content_for_index(self, index: int):
        widget = self._widgets.get(index)
        if widget is None and self._widget_factory is not None:
            widget = self._widget_factory(index, self.viewport())
            if widget is not None:
                self._widgets[index] = widget
        return widget

    def _measure_widget(self, widget) -> float:
        if widget is None:
            return self.controller.store.estimated_height
        width = self._row_width()
        if widget.hasHeightForWidth():
            height = widget.heightForWidth(width)
            if height >= 0:
                return float(height)
        height = widget.sizeHint().height()
        if height < 0:
            height = widget.height()
        return float(height)

    def _release_widget(self, index: int):
        widget = self._widgets.pop(index, None)
        if widget is not None:
            widget.hide()
            widget.deleteLater()

    def _release_all_widgets(self):
        for index in list(self._widgets):
            self._release_widget(index)

    def _update_scrollbars(self, total_extent: float):
        viewport = self.viewport()
        vbar = self.verticalScrollBar()
        vbar.setPageStep(max(1, viewport.height()))
        vbar.setRange(0, self._planner.compute_scroll_range(total_extent))
        hbar = self.horizontalScrollBar()
        hbar.setPageStep(max(1, viewport.width()))
        hbar.setRange(0, max(0, self.content_width - viewport.width()))

    def _relayout(self):
        if self._laying_out:
            return
        self._laying_out = True
        try:
            controller = self.controller
            # Range first: clamping may move the scroll value.
            self._update_scrollbars(controller.total_extent)
            controller.set_scroll_position(self._planner.resolve_scroll_position())
            controller.set_viewport_size(self._planner.resolve_viewport_size())
            plan = controller.render()
            for index in plan.unmounted:
                self._release_widget(index)

            h_offset = self.horizontalScrollBar().value()
            x = -h_offset
            top = self.leading_extent - self.verticalScrollBar().value()
            width = self._row_width()
            for instruction in plan.instructions:
                widget = instruction.content
                if widget is None:
                    continue
                height = max(1, int(round(controller.store.height(instruction.index))))
                widget.setGeometry(x, int(round(top + instruction.offset)), width, height)
                set_horizontal_offset = getattr(widget, "set_horizontal_offset", None)
                if set_horizontal_offset is not None:
                    set_horizontal_offset(h_offset)
                if not widget.isVisible():
                    widget.show()

            self._emit_changes(plan)
            if any(mount.pending for mount in controller.mounts.values()):
                self._measure_timer.start()
        finally:
            self._laying_out = False

    def _emit_changes(self, plan):
        window = (plan.window.start, plan.window.end)
        if window != self._last_window:
            self._last_window = window
            self.window_changed.emit(*window)
        if plan.total_extent != self._last_extent:
            self._last_extent = plan.total_extent
            self.extent_changed.emit(float(plan.total_extent))

    def _on_post_layout(self):
        if not self.controller.after_layout():
            self._correction_passes = 0
            return
        self._correction_passes += 1
        warn_after = get_int_setting('correction_pass_warning', minimum=1)
        if self._correction_passes == warn_after:
            log_flow("RECONCILE",
                     f"{self._correction_passes} corrective passes in a row; item sizes keep changing",
                     level="WARNING")
        log_flow("RECONCILE", f"Corrective pass, total extent={self.controller.total_extent:.0f}",
                 throttle_key="reconcile_pass", every_s=0.25)
        self._relayout()
