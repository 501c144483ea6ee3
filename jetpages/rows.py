"""Splitting stored rows into fields and packing fields back into rows."""

import dataclasses

from .byteutil import get_int16
from .model import JET4, ColumnType
from .options import Option, debug

_U32 = 1 << 32


class RowFormatError(ValueError):
    """A row buffer is inconsistent with the table it is read for."""


def _format_of(table):
    """The file format of ``table``; tables without one use the Jet 4 layout."""
    fmt = table.entry.fmt
    return JET4 if fmt is None else fmt


def _var_offsets_jet4(page, row_end, bitmask_sz, row_var_cols):
    if bitmask_sz + 3 + row_var_cols * 2 + 2 > row_end:
        raise RowFormatError("variable column table does not fit in the row")
    return [
        get_int16(page, row_end - bitmask_sz - 3 - i * 2)
        for i in range(row_var_cols + 1)
    ]


def _var_offsets_jet3(page, pg_size, row_start, row_end, bitmask_sz, row_var_cols):
    row_len = row_end - row_start + 1
    num_jumps = (row_len - 1) // 256
    col_ptr = row_end - bitmask_sz - num_jumps - 1
    # A trailing jump entry may be a dummy value.
    spare = col_ptr - row_start - row_var_cols
    if spare >= 0 and spare // 256 < num_jumps:
        num_jumps -= 1

    if bitmask_sz + num_jumps + 1 > row_end:
        raise RowFormatError("jump table does not fit in the row")
    if col_ptr < 0 or col_ptr >= min(pg_size, len(page)) or col_ptr < row_var_cols:
        raise RowFormatError("variable column table lies outside the page")

    offsets = []
    jumps_used = 0
    for i in range(row_var_cols + 1):
        while jumps_used < num_jumps and i == page[row_end - bitmask_sz - jumps_used - 1]:
            jumps_used += 1
        offsets.append(page[col_ptr - i] + jumps_used * 256)
    return offsets


def crack_row(table, page, row_start, row_size):
    """Split the row at ``row_start`` of ``page`` into one Field per table column.

    Each field's ``value`` is a copy of its bytes. Columns the row does not
    hold come back as null with no value. Raises RowFormatError when the row
    buffer is inconsistent.
    """
    fmt = _format_of(table)
    if row_start < 0 or row_size <= 0 or row_start + row_size > len(page):
        raise RowFormatError(
            f"row of {row_size} bytes at {row_start} lies outside a page of {len(page)} bytes"
        )
    row_end = row_start + row_size - 1

    if fmt.is_jet3:
        row_cols = page[row_start]
        col_count_size = 1
    else:
        row_cols = get_int16(page, row_start)
        col_count_size = 2

    bitmask_sz = (row_cols + 7) // 8
    if bitmask_sz + (0 if fmt.is_jet3 else 1) >= row_end:
        raise RowFormatError("invalid page buffer: null mask does not fit in the row")
    nullmask_start = row_end - bitmask_sz + 1

    row_var_cols = 0
    var_offsets = []
    if table.num_var_cols > 0:
        if fmt.is_jet3:
            row_var_cols = page[row_end - bitmask_sz]
            var_offsets = _var_offsets_jet3(
                page, fmt.pg_size, row_start, row_end, bitmask_sz, row_var_cols
            )
        else:
            row_var_cols = get_int16(page, row_end - bitmask_sz - 1)
            var_offsets = _var_offsets_jet4(page, row_end, bitmask_sz, row_var_cols)

    row_fixed_cols = row_cols - row_var_cols
    if row_fixed_cols < 0:
        row_fixed_cols += _U32

    debug(Option.DEBUG_ROW, f"bitmask_sz {bitmask_sz}")
    debug(Option.DEBUG_ROW, f"row_var_cols {row_var_cols}")
    debug(Option.DEBUG_ROW, f"row_fixed_cols {row_fixed_cols}")

    fields = []
    fixed_cols_found = 0
    for i, col in enumerate(table.columns[:table.num_cols]):
        mask_pos = nullmask_start + col.col_num // 8
        present = mask_pos <= row_end and page[mask_pos] & (1 << (col.col_num % 8))
        is_null = not present

        if col.is_fixed and fixed_cols_found < row_fixed_cols:
            start = row_start + col.fixed_offset + col_count_size
            siz = col.col_size
            fixed_cols_found += 1
        elif not col.is_fixed and col.var_col_num < row_var_cols:
            col_start = var_offsets[col.var_col_num]
            start = row_start + col_start
            siz = var_offsets[col.var_col_num + 1] - col_start
        else:
            fields.append(_absent_field(i, col))
            continue

        if siz < 0 or start + siz > row_start + row_size:
            raise RowFormatError(
                f"invalid data location in table {table.name}, column {i}"
            )
        fields.append(
            _field(i, col, bytes(page[start:start + siz]), siz, is_null, start)
        )
    return fields


def _field(index, col, value, siz, is_null, start):
    from .model import Field

    return Field(
        value=value, siz=siz, is_fixed=bool(col.is_fixed),
        is_null=bool(is_null), start=start, colnum=index,
    )


def _absent_field(index, col):
    from .model import Field

    return Field(value=None, siz=0, is_fixed=bool(col.is_fixed), is_null=True, start=0, colnum=index)


def _null_mask(fields):
    mask = bytearray((len(fields) + 7) // 8)
    for i, fld in enumerate(fields):
        if not fld.is_null:
            mask[i // 8] |= 1 << (i % 8)
    return bytes(mask)


def _data(fld):
    raw = b"" if fld.value is None else bytes(fld.value)
    return raw[:fld.siz].ljust(fld.siz, b"\0")


def _pack_fixed(buf, fields):
    offsets = {}
    for i, fld in enumerate(fields):
        if fld.is_fixed:
            offsets[i] = len(buf)
            buf += bytes(fld.siz) if fld.is_null else _data(fld)
    return offsets


def _pack_var_data(buf, fields, offsets):
    for i, fld in enumerate(fields):
        if not fld.is_fixed:
            offsets[i] = len(buf)
            if not fld.is_null:
                buf += _data(fld)
    return [i for i, fld in enumerate(fields) if not fld.is_fixed]


def _pack_row4(table, fields):
    buf = bytearray((len(fields) & 0xFFFF).to_bytes(2, "little"))
    offsets = _pack_fixed(buf, fields)
    if table.num_var_cols == 0:
        return bytes(buf + _null_mask(fields))

    var_indices = _pack_var_data(buf, fields, offsets)
    buf += (len(buf) & 0xFFFF).to_bytes(2, "little")
    for i in reversed(var_indices):
        buf += (offsets[i] & 0xFFFF).to_bytes(2, "little")
    buf += (len(var_indices) & 0xFFFF).to_bytes(2, "little")
    return bytes(buf + _null_mask(fields))


def _pack_row3(table, fields):
    num_fields = len(fields)
    buf = bytearray([num_fields & 0xFF])
    offsets = _pack_fixed(buf, fields)
    if table.num_var_cols == 0:
        return bytes(buf + _null_mask(fields))

    var_indices = _pack_var_data(buf, fields, offsets)
    var_cols = len(var_indices)

    eod = len(buf)
    offset_high = [(eod >> 8) & 0xFF]
    buf.append(eod & 0xFF)
    for i in reversed(var_indices):
        buf.append(offsets[i] & 0xFF)
        offset_high.append((offsets[i] >> 8) & 0xFF)

    if offset_high[0] < (len(buf) + (num_fields + 7) // 8 - 1) // 255:
        buf.append(0xFF)
    for i in range(var_cols):
        if offset_high[i] > offset_high[i + 1]:
            buf.append((var_cols - i) & 0xFF)

    buf.append(var_cols & 0xFF)
    return bytes(buf + _null_mask(fields))


def _normalise_temp_fields(table, fields):
    normalised = []
    for i, fld in enumerate(fields):
        col = table.columns[i]
        changes = {
            "is_null": fld.value is None,
            "colnum": i,
            "is_fixed": bool(col.is_fixed),
        }
        if col.col_type not in (ColumnType.TEXT, ColumnType.MEMO):
            changes["siz"] = col.col_size
        normalised.append(dataclasses.replace(fld, **changes))
    return normalised


def pack_row(table, fields):
    """Pack ``fields`` into a stored row of ``table`` and return its bytes.

    Fields must list fixed columns first, then variable ones, each in column
    order. For temporary tables the null flag, fixedness and fixed sizes are
    taken from the values and the table's columns; ``fields`` is not modified.
    """
    fields = list(fields)
    if table.is_temp_table:
        fields = _normalise_temp_fields(table, fields)
    if _format_of(table).is_jet3:
        return _pack_row3(table, fields)
    return _pack_row4(table, fields)