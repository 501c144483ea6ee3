"""In-memory temporary tables used for synthesized result sets."""

import dataclasses

from .model import OBJECT_TABLE, CatalogEntry, Column, ColumnType, Table

_FIXED_SIZES = {
    ColumnType.BOOL: 1,
    ColumnType.BYTE: 1,
    ColumnType.INT: 2,
    ColumnType.LONGINT: 4,
    ColumnType.MONEY: 8,
    ColumnType.FLOAT: 4,
    ColumnType.DOUBLE: 8,
    ColumnType.DATETIME: 8,
    ColumnType.REPID: 16,
    ColumnType.NUMERIC: 17,
}


def create_temp_table(name, fmt=None):
    """Create an empty temporary table backed by a placeholder catalog entry."""
    entry = CatalogEntry(object_name=name, object_type=OBJECT_TABLE, table_pg=0, fmt=fmt)
    return Table(entry=entry, is_temp_table=True)


def make_temp_column(name, col_size, col_type, is_fixed):
    """Build a column for a temporary table.

    Text and memo columns keep ``col_size``; other types take their fixed size.
    """
    if col_type in (ColumnType.TEXT, ColumnType.MEMO):
        size = col_size
    else:
        size = _FIXED_SIZES.get(col_type, 0)
    return Column(name=name, col_type=col_type, col_size=size, is_fixed=bool(is_fixed))


def add_temp_column(table, col):
    """Append a copy of ``col`` to ``table``, numbering it, and return the copy."""
    changes = {"col_num": table.num_cols, "sargs": list(col.sargs)}
    if not col.is_fixed:
        changes["var_col_num"] = table.num_var_cols
        table.num_var_cols += 1
    added = dataclasses.replace(col, **changes)
    table.columns.append(added)
    table.num_cols += 1
    return added


def end_temp_columns(table):
    """Lay out fixed-size columns one after another; call after adding all columns."""
    start = 0
    for col in table.columns[:table.num_cols]:
        if col.is_fixed:
            col.fixed_offset = start
            start += col.col_size