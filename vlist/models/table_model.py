from dataclasses import dataclass

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt, Signal

from vlist.utils.sticky_offsets import DEFAULT_COLUMN_WIDTH, column_width


@dataclass
class ColumnSpec:
    """Describes one table column: data key, header label, width and pinning."""
    key: str
    header: str = ''
    width: int = DEFAULT_COLUMN_WIDTH
    sticky: str | None = None

    @property
    def pinned(self) -> bool:
        return self.sticky == 'left'


class VirtualTableModel(QAbstractTableModel):
    # Emitted after rows are replaced (row count)
    rows_replaced = Signal(int)

    def __init__(self, rows=None, columns=None, parent=None):
        super().__init__(parent)
        self._rows: list[dict] = list(rows or [])
        self._columns: list[ColumnSpec] = list(columns or [])

    def rowCount(self, parent=None) -> int:
        if parent is not None and parent.isValid():
            return 0
        return len(self._rows)

    def columnCount(self, parent=None) -> int:
        if parent is not None and parent.isValid():
            return 0
        return len(self._columns)

    def data(self, index: QModelIndex, role=None):
        if not index.isValid():
            return None
        row = index.row()
        column = index.column()
        if not (0 <= row < len(self._rows) and 0 <= column < len(self._columns)):
            return None
        if role in (None, Qt.ItemDataRole.DisplayRole, Qt.ItemDataRole.ToolTipRole):
            value = self._rows[row].get(self._columns[column].key)
            return '' if value is None else str(value)
        return None

    def headerData(self, section: int, orientation: Qt.Orientation, role=None):
        if role not in (None, Qt.ItemDataRole.DisplayRole):
            return None
        if orientation == Qt.Orientation.Horizontal:
            if 0 <= section < len(self._columns):
                column = self._columns[section]
                return column.header or column.key
            return None
        return str(section + 1)

    def cell_text(self, row: int, column: int) -> str:
        return self.data(self.index(row, column), Qt.ItemDataRole.DisplayRole) or ''

    def column_specs(self) -> list[ColumnSpec]:
        return list(self._columns)

    def content_width(self) -> int:
        return sum(column_width(column) for column in self._columns)

    def set_table(self, rows, columns=None):
        self.beginResetModel()
        self._rows = list(rows)
        if columns is not None:
            self._columns = list(columns)
        self.endResetModel()
        self.rows_replaced.emit(len(self._rows))
