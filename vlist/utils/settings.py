from PySide6.QtCore import QSettings, Signal

# Defaults for settings that are accessed from multiple places.
DEFAULT_SETTINGS = {
    # Initial guess for items that have not been measured yet.
    'estimated_item_height': 35,
    # Extra items mounted above and below the visible range.
    'overscan': 3,
    'table_header_height': 35,
    'table_column_width': 150,
    # Consecutive corrective layout passes before a warning is logged (not a cap).
    'correction_pass_warning': 10,
    'flow_trace_logs': False,
    # Demo application
    'demo_row_count': 500,
    'demo_column_count': 30,
    'demo_pinned_columns': 2,
    'demo_viewport_height': 400,
}

MAX_OVERSCAN = 50


class Settings(QSettings):
    """Stored vlist settings; `settingsChanged` fires only when a value changes."""
    change = Signal(str, object, name='settingsChanged')

    def __init__(self, organization: str = 'vlist', application: str = 'vlist'):
        super().__init__(organization, application)

    def setValue(self, key, value):
        unchanged = self.contains(key) and self.value(key) == value
        super().setValue(key, value)
        if not unchanged:
            self.change.emit(key, value)

# Common shared instance to ensure the Signal is also shared
settings = Settings()


def get_overscan() -> int:
    try:
        overscan = int(settings.value(
            'overscan', defaultValue=DEFAULT_SETTINGS['overscan'], type=int))
    except Exception:
        overscan = DEFAULT_SETTINGS['overscan']
    return max(0, min(overscan, MAX_OVERSCAN))


def get_estimated_item_height() -> float:
    try:
        value = float(settings.value(
            'estimated_item_height',
            defaultValue=DEFAULT_SETTINGS['estimated_item_height'], type=float))
    except Exception:
        value = float(DEFAULT_SETTINGS['estimated_item_height'])
    if value <= 0:
        return float(DEFAULT_SETTINGS['estimated_item_height'])
    return value


def get_int_setting(key: str, minimum: int = 0) -> int:
    """Read an integer setting, falling back to its default on bad values."""
    default = DEFAULT_SETTINGS[key]
    try:
        value = int(settings.value(key, defaultValue=default, type=int))
    except Exception:
        value = default
    return max(minimum, value)
