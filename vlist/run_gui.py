import logging
import os
import platform
import sys
import traceback
import warnings
import threading
from datetime import datetime

import PySide6
from PySide6.QtCore import qVersion
from PySide6.QtWidgets import QApplication, QLabel, QMainWindow, QMessageBox, QVBoxLayout, QWidget

from vlist.models.table_model import VirtualTableModel
from vlist.utils.demo_data import generate_columns, generate_rows
from vlist.utils.settings import get_int_setting, settings
from vlist.widgets.virtual_table_view import VirtualTableView

CRASH_LOG_PATH = os.path.abspath('vlist_crash.log')
DEMO_MULTILINE_EVERY = 5


def _crash_entry(title: str, exc_info=None) -> str:
    """Format one crash log entry with the runtime versions it happened under."""
    rule = "=" * 80
    if exc_info is None:
        details = traceback.format_exc()
    else:
        details = "".join(traceback.format_exception(*exc_info))
    return (
        f"\n{rule}\n"
        f"{datetime.now():%Y-%m-%d %H:%M:%S} | {title}\n"
        f"Python {platform.python_version()} | PySide6 {PySide6.__version__} "
        f"| Qt {qVersion()}\n"
        f"{rule}\n"
        f"{details}\n"
    )


def _append_crash_log(title: str, exc_info=None):
    entry = _crash_entry(title, exc_info)
    try:
        with open(CRASH_LOG_PATH, 'a', encoding='utf-8') as f:
            f.write(entry)
    except OSError as log_error:
        print(f"[CRASH] Failed to write crash log: {log_error}")
        return
    print(f"[CRASH] Details written to: {CRASH_LOG_PATH}")


def install_crash_handlers():
    """Route unhandled Python and thread exceptions to the crash log."""
    def _unhandled_exception(exc_type, exc_value, exc_traceback):
        _append_crash_log("UNHANDLED EXCEPTION", (exc_type, exc_value, exc_traceback))
        sys.__excepthook__(exc_type, exc_value, exc_traceback)

    def _thread_exception(args):
        thread_name = getattr(args.thread, 'name', 'unknown')
        _append_crash_log(
            f"THREAD EXCEPTION ({thread_name})",
            (args.exc_type, args.exc_value, args.exc_traceback),
        )

    sys.excepthook = _unhandled_exception
    threading.excepthook = _thread_exception


def suppress_warnings():
    """Suppress all warnings when not in a development environment."""
    environment = os.getenv('VLIST_ENVIRONMENT')
    if environment == 'development':
        print('Running in development environment.')
        return
    logging.basicConfig(level=logging.ERROR)
    warnings.simplefilter('ignore')


class DemoWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle('Custom Virtualized Table with Dynamic Row Heights')
        row_count = get_int_setting('demo_row_count')
        column_count = get_int_setting('demo_column_count')
        pinned_count = get_int_setting('demo_pinned_columns')
        self.table_model = VirtualTableModel(
            generate_rows(row_count, column_count, multiline_every=DEMO_MULTILINE_EVERY),
            generate_columns(column_count, pinned_count),
        )
        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(20, 20, 20, 20)
        self.table_view = VirtualTableView(self.table_model, central)
        self.table_view.setFixedHeight(get_int_setting('demo_viewport_height', minimum=50))
        layout.addWidget(self.table_view)
        layout.addStretch(1)
        self.setCentralWidget(central)

        self.window_label = QLabel(self)
        self.statusBar().addWidget(self.window_label)
        self.table_view.window_changed.connect(self._on_window_changed)
        self.resize(900, 560)

    def _on_window_changed(self, start: int, end: int):
        mounted = max(0, end - start + 1)
        self.window_label.setText(
            f'Rows {start}-{end} mounted ({mounted} of {self.table_model.rowCount()})')


def run_gui():
    app = QApplication.instance() or QApplication([])
    # The application name is shown in the taskbar.
    app.setApplicationName('vlist')
    # The application display name is shown in the title bar.
    app.setApplicationDisplayName('vlist')
    app.setStyle('Fusion')

    main_window = DemoWindow()
    main_window.show()

    import signal
    signal.signal(signal.SIGINT, lambda signum, frame: app.quit())

    return int(app.exec())


def main():
    # Suppress all warnings when not in a development environment.
    suppress_warnings()
    install_crash_handlers()
    try:
        sys.exit(run_gui())
    except Exception as exception:
        _append_crash_log("TOP-LEVEL EXCEPTION", sys.exc_info())
        error_message_box = QMessageBox()
        error_message_box.setWindowTitle('Error')
        error_message_box.setIcon(QMessageBox.Icon.Critical)
        error_message_box.setText(str(exception))
        error_message_box.setDetailedText(traceback.format_exc())
        error_message_box.exec()
        sys.exit(1)


if __name__ == '__main__':
    main()
