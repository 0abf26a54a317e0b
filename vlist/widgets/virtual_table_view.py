from PySide6.QtCore import QSize, Qt, Signal
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget

from vlist.models.table_model import VirtualTableModel
from vlist.utils.settings import get_estimated_item_height, get_int_setting
from vlist.utils.sticky_offsets import column_width, compute_sticky_offsets
from vlist.widgets.virtual_list_view import VirtualListView

CELL_STYLE = 'border: 1px solid #ddd; padding: 4px 8px; background-color: {background};'
ROW_BACKGROUND = '#fff'
HEADER_BACKGROUND = '#f0f0f0'


class TableRowWidget(QWidget):
    """One table row laid out as fixed-width cells; pinned cells stick to the left edge."""

    def __init__(self, texts, columns, sticky_offsets, parent=None, *,
                 background: str = ROW_BACKGROUND):
        super().__init__(parent)
        self._cells: list[QLabel] = []
        self._natural_x: list[int] = []
        self._sticky: list[int | None] = []
        style = CELL_STYLE.format(background=background)
        x = 0
        for text, column in zip(texts, columns):
            width = column_width(column)
            label = QLabel(text, self)
            label.setWordWrap(False)
            label.setTextFormat(Qt.TextFormat.PlainText)
            label.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
            label.setStyleSheet(style)
            label.setToolTip(text)
            label.setGeometry(x, 0, width, label.sizeHint().height())
            self._cells.append(label)
            self._natural_x.append(x)
            self._sticky.append(sticky_offsets.get(column.key) if column.pinned else None)
            x += width
        self._content_width = x
        # Pinned cells paint above the cells scrolling underneath them.
        for label, sticky in zip(self._cells, self._sticky):
            if sticky is not None:
                label.raise_()

    def cell_texts(self) -> list[str]:
        return [label.text() for label in self._cells]

    def cell_x(self, column: int) -> int:
        return self._cells[column].x()

    def sizeHint(self) -> QSize:
        height = max((label.sizeHint().height() for label in self._cells), default=0)
        return QSize(self._content_width, height)

    def set_horizontal_offset(self, scroll_x: int):
        for label, natural_x, sticky in zip(self._cells, self._natural_x, self._sticky):
            if sticky is None:
                continue
            label.move(max(natural_x, scroll_x + sticky), 0)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        for label in self._cells:
            label.resize(label.width(), self.height())


class VirtualTableView(QWidget):
    """Table with a pinned header whose rows are mounted through VirtualListView."""
    window_changed = Signal(int, int)

    def __init__(self, model: VirtualTableModel, parent=None, *,
                 header_height: int | None = None, estimated_row_height: float | None = None,
                 overscan: int | None = None):
        super().__init__(parent)
        self._model = model
        self._columns = []
        self._sticky_offsets = {}
        self._header_row = None
        if header_height is None:
            header_height = get_int_setting('table_header_height', minimum=1)
        if estimated_row_height is None:
            estimated_row_height = get_estimated_item_height()

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self._header_frame = QWidget(self)
        self._header_frame.setFixedHeight(int(header_height))
        self._header_frame.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self._header_frame.setStyleSheet(f'background-color: {HEADER_BACKGROUND};')
        layout.addWidget(self._header_frame)

        self.list_view = VirtualListView(
            self,
            widget_factory=self._create_row,
            estimated_item_height=estimated_row_height,
            overscan=overscan,
        )
        layout.addWidget(self.list_view)

        self.list_view.horizontalScrollBar().valueChanged.connect(self._sync_header)
        self.list_view.window_changed.connect(self.window_changed)
        model.modelReset.connect(self._on_model_reset)
        self._on_model_reset()

    @property
    def model(self) -> VirtualTableModel:
        return self._model

    @property
    def sticky_offsets(self) -> dict:
        return dict(self._sticky_offsets)

    @property
    def header_row(self) -> TableRowWidget | None:
        return self._header_row

    def _on_model_reset(self):
        self._columns = self._model.column_specs()
        self._sticky_offsets = compute_sticky_offsets(self._columns)
        self._rebuild_header()
        self.list_view.content_width = self._model.content_width()
        self.list_view.reset(self._model.rowCount())

    def _rebuild_header(self):
        if self._header_row is not None:
            self._header_row.deleteLater()
        texts = [
            str(self._model.headerData(section, Qt.Orientation.Horizontal,
                                       Qt.ItemDataRole.DisplayRole) or '')
            for section in range(len(self._columns))
        ]
        self._header_row = TableRowWidget(
            texts, self._columns, self._sticky_offsets, self._header_frame,
            background=HEADER_BACKGROUND,
        )
        self._header_row.setGeometry(0, 0, max(self._model.content_width(), 1),
                                     self._header_frame.height())
        self._header_row.show()
        self._sync_header(self.list_view.horizontalScrollBar().value())

    def _sync_header(self, value: int):
        if self._header_row is None:
            return
        self._header_row.move(-value, 0)
        self._header_row.set_horizontal_offset(value)

    def _create_row(self, index: int, parent: QWidget) -> QWidget:
        texts = [self._model.cell_text(index, column) for column in range(len(self._columns))]
        return TableRowWidget(texts, self._columns, self._sticky_offsets, parent)
