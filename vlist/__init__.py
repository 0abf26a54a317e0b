"""Windowed virtualization for long lists and tables with measured item heights."""

from .models.height_store import (HeightRecordMismatchError, HeightStore, OffsetIndex, build_offsets,
                                  find_start_index)
from .models.window import RenderInstruction, RenderPlan, VisibleWindow
from .utils.sticky_offsets import compute_sticky_offsets
from .widgets.item_mount import ItemMount
from .widgets.viewport_controller import VirtualListController
from .widgets.window_planner import apply_overscan, find_end_index, resolve_window

__all__ = [
    'HeightRecordMismatchError',
    'HeightStore',
    'ItemMount',
    'OffsetIndex',
    'RenderInstruction',
    'RenderPlan',
    'VirtualListController',
    'VisibleWindow',
    'apply_overscan',
    'build_offsets',
    'compute_sticky_offsets',
    'find_end_index',
    'find_start_index',
    'resolve_window',
]
