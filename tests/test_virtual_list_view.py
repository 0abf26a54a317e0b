from PySide6.QtCore import QSize
from PySide6.QtWidgets import QLabel, QWidget

from vlist.models.table_model import VirtualTableModel
from vlist.utils.demo_data import generate_columns, generate_rows
from vlist.widgets.virtual_list_view import VirtualListView
from vlist.widgets.virtual_table_view import TableRowWidget, VirtualTableView


class FixedHeightWidget(QWidget):
    def __init__(self, height, parent=None):
        super().__init__(parent)
        self._height = height

    def sizeHint(self):
        return QSize(100, self._height)


def pump(app, rounds=10):
    for _ in range(rounds):
        app.processEvents()


def make_view(item_count, height_for_index, *, viewport_height=200):
    created = []

    def factory(index, parent):
        widget = FixedHeightWidget(height_for_index(index), parent)
        created.append(index)
        return widget

    view = VirtualListView(
        item_count=item_count,
        widget_factory=factory,
        estimated_item_height=35,
        overscan=2,
    )
    view.resize(300, viewport_height)
    return view, created


def test_view_measures_mounted_widgets_and_grows_extent(qapp):
    view, created = make_view(1000, lambda index: 50)
    view.show()
    pump(qapp)

    window = view.controller.window
    assert not window.is_empty
    assert len(created) < 50
    for index in window:
        assert view.controller.store.height(index) == 50
        assert view.mounted_widget(index) is not None
    assert view.total_extent() > 1000 * 35
    view.close()


def test_view_scroll_moves_window_and_releases_widgets(qapp):
    view, _ = make_view(1000, lambda index: 40)
    view.show()
    pump(qapp)
    first_window = view.controller.window

    view.verticalScrollBar().setValue(20000)
    pump(qapp)

    window = view.controller.window
    assert window.start > first_window.end
    assert view.mounted_widget(first_window.start) is None
    mounted = view.mounted_widget(window.start)
    assert mounted is not None
    offset = view.controller.offset_for_index(window.start)
    assert mounted.y() == round(offset - view.verticalScrollBar().value())
    view.close()


def test_view_item_count_change_resets_measurements(qapp):
    view, _ = make_view(20, lambda index: 60)
    view.show()
    pump(qapp)

    view.set_item_count(5)
    pump(qapp)

    assert view.item_count == 5
    assert view.total_extent() == 5 * 60
    view.close()


def test_table_row_pins_sticky_cells(qapp):
    columns = generate_columns(3, pinned_count=2)
    columns[2].width = 200
    row = TableRowWidget(["a", "b", "c"], columns, {"col0": 0, "col1": 150})

    row.set_horizontal_offset(100)

    assert row.cell_x(0) == 100
    assert row.cell_x(1) == 250
    assert row.cell_x(2) == 300
    assert row.cell_texts() == ["a", "b", "c"]


def test_table_view_mounts_rows_from_model(qapp):
    model = VirtualTableModel(generate_rows(500, 6, multiline_every=5), generate_columns(6))
    table = VirtualTableView(model, header_height=35, estimated_row_height=35, overscan=3)
    table.resize(500, 400)
    table.show()
    pump(qapp)

    assert table.sticky_offsets == {"col0": 0, "col1": 150}
    assert table.header_row.cell_texts()[0] == "Column 0"
    window = table.list_view.controller.window
    assert window.start == 0
    assert 0 < len(window) < 50
    row = table.list_view.mounted_widget(0)
    assert row.cell_texts()[1] == "Row 0 Col 1"

    model.set_table(generate_rows(3, 6))
    pump(qapp)
    assert table.list_view.item_count == 3
    table.close()


def test_view_width_change_remeasures_wrapped_rows(qapp):
    text = " ".join(f"word{i}" for i in range(40))

    def factory(index, parent):
        label = QLabel(text, parent)
        label.setWordWrap(True)
        return label

    view = VirtualListView(item_count=20, widget_factory=factory,
                           estimated_item_height=35, overscan=0)
    view.resize(200, 300)
    view.show()
    pump(qapp)
    narrow = view.controller.store.height(0)
    widget = view.mounted_widget(0)

    view.resize(800, 300)
    pump(qapp)

    assert view.mounted_widget(0) is widget
    assert view.controller.store.height(0) < narrow
    assert widget.height() == round(view.controller.store.height(0))
    view.close()


def test_view_leading_extent_offsets_rows_and_scroll_range(qapp):
    view = VirtualListView(item_count=100, estimated_item_height=35, overscan=1,
                           leading_extent=35,
                           widget_factory=lambda index, parent: FixedHeightWidget(40, parent))
    view.resize(300, 200)
    view.show()
    pump(qapp)

    assert view.mounted_widget(0).y() == 35
    expected = round(35 + view.total_extent() - view.viewport().height())
    assert view.verticalScrollBar().maximum() == expected

    view.verticalScrollBar().setValue(35)
    pump(qapp)
    assert view.controller.scroll_position == 0
    assert view.mounted_widget(0).y() == 0
    view.close()


def test_view_scroll_to_index_brings_item_into_window(qapp):
    view, _ = make_view(1000, lambda index: 40)
    view.show()
    pump(qapp)

    expected = round(view.controller.offset_for_index(300))
    view.scroll_to_index(300)

    assert view.verticalScrollBar().value() == expected
    pump(qapp)
    assert 300 in view.controller.window
    assert view.mounted_widget(300) is not None
    view.close()


def test_view_emits_extent_changed_as_heights_are_measured(qapp):
    view, _ = make_view(50, lambda index: 60)
    extents = []
    view.extent_changed.connect(extents.append)
    view.show()
    pump(qapp)

    assert extents[0] == 50 * 35
    assert extents[-1] == view.total_extent()
    assert view.total_extent() > 50 * 35
    view.close()


def test_table_header_sits_above_the_scroll_viewport(qapp):
    model = VirtualTableModel(generate_rows(50, 4), generate_columns(4))
    table = VirtualTableView(model, header_height=35, estimated_row_height=35, overscan=1)
    table.resize(400, 300)
    table.show()
    pump(qapp)

    assert table.list_view.leading_extent == 0
    assert table.list_view.y() == 35
    assert table.list_view.mounted_widget(0).y() == 0

    table.list_view.horizontalScrollBar().setValue(120)
    pump(qapp)
    assert table.header_row.x() == -120
    assert table.header_row.cell_x(0) == 120
    table.close()
