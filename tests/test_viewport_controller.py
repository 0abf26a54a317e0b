import pytest

from vlist.models.window import VisibleWindow
from vlist.widgets import viewport_controller as controller_module
from vlist.widgets.viewport_controller import VirtualListController


class FakeContent:
    def __init__(self, index, height):
        self.index = index
        self.height = height


class ContentCache:
    """Content provider returning one stable object per index."""

    def __init__(self, height_for_index):
        self._height_for_index = height_for_index
        self.items = {}

    def __call__(self, index):
        if index not in self.items:
            self.items[index] = FakeContent(index, self._height_for_index(index))
        return self.items[index]


def make_controller(item_count, *, estimate=35, viewport=100, overscan=0, height=lambda i: 35):
    return VirtualListController(
        item_count,
        estimated_item_height=estimate,
        viewport_size=viewport,
        overscan=overscan,
        content_provider=ContentCache(height),
        measure=lambda content: content.height,
    )


def test_render_returns_offsets_for_visible_items():
    controller = make_controller(100)

    plan = controller.render()

    assert plan.window == VisibleWindow(0, 2)
    assert [(i.index, i.offset) for i in plan.instructions] == [(0, 0), (1, 35), (2, 70)]
    assert plan.total_extent == 3500
    assert plan.unmounted == []
    assert sorted(controller.mounts) == [0, 1, 2]


def test_measurements_reconcile_and_settle():
    controller = make_controller(10, viewport=1000, height=lambda i: 50)
    assert controller.total_extent == 350

    passes = controller.settle()

    assert passes == 2
    assert controller.total_extent == 500
    assert controller.report_height(4, 50) is False
    assert controller.layout_cycle() is False


def test_corrective_pass_shifts_items_below_changed_one():
    controller = make_controller(5, viewport=1000, height=lambda i: 80 if i == 1 else 35)

    controller.render()
    assert controller.after_layout() is True

    plan = controller.render()
    assert [i.offset for i in plan.instructions] == [0, 35, 115, 150, 185]
    assert controller.after_layout() is False


def test_scrolling_unmounts_items_leaving_the_window():
    controller = make_controller(100, overscan=1)
    first = controller.render()
    assert first.window == VisibleWindow(0, 3)

    controller.set_scroll_position(3500 - 100)
    plan = controller.render()

    assert plan.window.end == 99
    assert plan.unmounted == [0, 1, 2, 3]
    assert min(controller.mounts) == plan.window.start


def test_unmounted_item_reports_are_dropped_after_scroll():
    controller = make_controller(100, height=lambda i: 70)
    controller.render()
    stale_mount = controller.mounts[0]

    controller.set_scroll_position(2000)
    controller.render()

    assert stale_mount.after_layout() is False
    assert controller.store.height(0) == 35


def test_item_count_change_resets_store_and_mounts():
    controller = make_controller(10, viewport=1000, height=lambda i: 50)
    controller.settle()

    controller.set_item_count(4)

    assert controller.item_count == 4
    assert controller.store.heights == (35.0,) * 4
    assert controller.mounts == {}
    assert controller.window.is_empty


def test_same_item_count_keeps_measurements():
    controller = make_controller(3, viewport=1000, height=lambda i: 50)
    controller.settle()

    controller.set_item_count(3)

    assert controller.total_extent == 150


def test_empty_list_renders_nothing():
    controller = make_controller(0)

    plan = controller.render()

    assert plan.window.is_empty
    assert plan.instructions == []
    assert plan.total_extent == 0
    assert controller.after_layout() is False


def test_offset_for_index_is_clamped():
    controller = make_controller(4)

    assert controller.offset_for_index(2) == 70
    assert controller.offset_for_index(-1) == 0
    assert controller.offset_for_index(50) == 140


def test_negative_scroll_resolves_to_first_item():
    controller = make_controller(100)
    controller.set_scroll_position(-35)

    assert controller.visible_window() == VisibleWindow(0, 1)


def test_negative_overscan_is_rejected():
    with pytest.raises(ValueError):
        make_controller(10, overscan=-1)
    controller = make_controller(10)
    with pytest.raises(ValueError):
        controller.set_overscan(-2)


def test_invalidate_measurements_remeasures_mounted_items():
    heights = {"value": 35}
    controller = make_controller(3, viewport=1000, height=lambda i: 35)
    controller.set_measure(lambda content: heights["value"])
    controller.settle()

    heights["value"] = 60
    controller.invalidate_measurements()

    assert controller.after_layout() is True
    assert controller.total_extent == 180


def test_settle_without_convergence_warns_and_respects_max_passes(monkeypatch):
    messages = []
    monkeypatch.setattr(controller_module, "get_int_setting", lambda key, minimum=0: 2)
    monkeypatch.setattr(controller_module, "log_flow",
                        lambda component, message, **kwargs: messages.append((component, kwargs)))
    growth = {"value": 35}

    def growing_measure(content):
        growth["value"] += 1
        return growth["value"]

    controller = VirtualListController(
        1,
        estimated_item_height=35,
        viewport_size=100,
        overscan=0,
        content_provider=lambda index: object(),
        measure=growing_measure,
    )

    passes = controller.settle(max_passes=5)

    assert passes == 5
    warnings = [m for m in messages if m[0] == "RECONCILE"]
    assert len(warnings) == 2
    assert all(kwargs.get("level") == "WARNING" for _, kwargs in warnings)


def test_default_measure_reads_content_height():
    controller = VirtualListController(
        2,
        estimated_item_height=10,
        viewport_size=100,
        overscan=0,
        content_provider=lambda index: FakeContent(index, 25),
    )

    controller.settle()

    assert controller.total_extent == 50
