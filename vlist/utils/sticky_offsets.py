"""Horizontal offsets for columns pinned to the left edge of a table."""

from vlist.utils.settings import DEFAULT_SETTINGS, get_int_setting

DEFAULT_COLUMN_WIDTH = DEFAULT_SETTINGS['table_column_width']


def column_width(column) -> int:
    """Width of a column, or the configured column width when it has none."""
    width = getattr(column, "width", None)
    return int(width) if width else get_int_setting('table_column_width', minimum=1)


def compute_sticky_offsets(columns) -> dict[str, int]:
    """
    Assign each pinned column the summed width of the pinned columns before it.

    Unpinned columns get no entry and do not advance the running offset.

    Args:
        columns: Iterable of objects with `key`, `pinned` and `width` attributes

    Returns:
        Mapping of column key to left offset in pixels
    """
    offsets = {}
    running = 0
    for column in columns:
        if not getattr(column, "pinned", False):
            continue
        offsets[column.key] = running
        running += column_width(column)
    return offsets


def pinned_extent(columns) -> int:
    """Total width occupied by pinned columns."""
    return sum(column_width(column) for column in columns if getattr(column, "pinned", False))
