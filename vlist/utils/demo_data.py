from vlist.models.table_model import ColumnSpec
from vlist.utils.settings import get_int_setting


def generate_rows(row_count: int, column_count: int, multiline_every: int = 0) -> list[dict]:
    """
    Rows of `Row i Col j` strings keyed by `colJ`.

    With `multiline_every` > 0, every n-th row gets a second line in each
    cell so row heights vary.
    """
    rows = []
    for i in range(row_count):
        tall = multiline_every > 0 and i % multiline_every == multiline_every - 1
        suffix = "\n(expanded)" if tall else ""
        rows.append({f"col{j}": f"Row {i} Col {j}{suffix}" for j in range(column_count)})
    return rows


def generate_columns(column_count: int, pinned_count: int = 2,
                     width: int | None = None) -> list[ColumnSpec]:
    if width is None:
        width = get_int_setting('table_column_width', minimum=1)
    # The first `pinned_count` columns stay at the left edge.
    return [
        ColumnSpec(
            key=f'col{j}',
            header=f'Column {j}',
            width=width,
            sticky='left' if j < pinned_count else None,
        )
        for j in range(column_count)
    ]
