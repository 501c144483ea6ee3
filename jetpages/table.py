"""Reading table definitions, column descriptions and usage maps."""

import sys

from .byteutil import get_int16, get_int32
from .model import Column, ColumnType, Table
from .options import Option, debug
from .pages import _locate_row

_TABLE_DEF_PAGE = 0x02
_SCALED_TYPES = (ColumnType.NUMERIC, ColumnType.MONEY, ColumnType.FLOAT, ColumnType.DOUBLE)
_PAGE_HEADER = 8


class TableFormatError(ValueError):
    """A table definition could not be read or is inconsistent."""


def _fetch(read_page, pg):
    try:
        page = read_page(pg)
    except (LookupError, EOFError, OSError) as exc:
        raise TableFormatError(f"unable to read page {pg}") from exc
    if page is None:
        raise TableFormatError(f"unable to read page {pg}")
    return page


class PageCursor:
    """Reads a byte stream that continues across chained definition pages.

    Each page names the next one in its bytes 4-7; data on continuation
    pages starts after the 8-byte page header.
    """

    def __init__(self, read_page, fmt, page, pos):
        self._read_page = read_page
        self.fmt = fmt
        self.page = page
        self.pos = pos

    def _advance(self):
        self.page = _fetch(self._read_page, get_int32(self.page, 4))

    def read(self, n):
        """Return the next ``n`` bytes, following the page chain as needed."""
        if self.pos < 0:
            raise TableFormatError("cursor position is negative")
        size = self.fmt.pg_size
        while self.pos >= size:
            self._advance()
            self.pos -= size - _PAGE_HEADER
        wanted = n
        parts = []
        while self.pos + n >= size:
            piece = size - self.pos
            parts.append(bytes(self.page[self.pos:size]))
            n -= piece
            self._advance()
            self.pos = _PAGE_HEADER
        if n:
            parts.append(bytes(self.page[self.pos:self.pos + n]))
            self.pos += n
        data = b"".join(parts)
        if len(data) != wanted:
            raise TableFormatError(f"short read: wanted {wanted} bytes, got {len(data)}")
        return data

    def read_u8(self):
        """Read one unsigned byte."""
        return self.read(1)[0]

    def read_u16(self):
        """Read an unsigned little-endian 16-bit integer."""
        return int.from_bytes(self.read(2), "little")

    def read_u32(self):
        """Read an unsigned little-endian 32-bit integer."""
        return int.from_bytes(self.read(4), "little")


def _read_map(read_page, fmt, pg_row):
    page = _fetch(read_page, pg_row >> 8)
    try:
        start, size = _locate_row(page, fmt, pg_row & 0xFF)
    except IndexError as exc:
        raise TableFormatError(f"unable to find page row {pg_row}") from exc
    if size < 0 or start + size > len(page):
        raise TableFormatError(f"page row {pg_row} lies outside its page")
    debug(
        Option.DEBUG_USAGE,
        f"map found on page {pg_row >> 8} row {pg_row & 0xFF} start {start} len {size}",
    )
    return bytes(page[start:start + size])


def read_table(entry, read_page, fmt):
    """Read the definition of the table described by catalog ``entry``.

    ``read_page(pg)`` returns the contents of page ``pg``. Raises
    TableFormatError when the definition or its maps cannot be read.
    """
    page = _fetch(read_page, entry.table_pg)
    first = page[0] if len(page) else None
    if first != _TABLE_DEF_PAGE:
        shown = "none" if first is None else f"0x{first:02X}"
        raise TableFormatError(
            f"page {entry.table_pg} [size={fmt.pg_size}] is not a valid table definition "
            f"page (first byte = {shown}, expected 0x02)"
        )

    table = Table(
        entry=entry,
        num_rows=get_int32(page, fmt.tab_num_rows_offset),
        num_var_cols=get_int16(page, fmt.tab_num_cols_offset - 2),
        num_cols=get_int16(page, fmt.tab_num_cols_offset),
        num_idxs=get_int32(page, fmt.tab_num_idxs_offset),
        num_real_idxs=get_int32(page, fmt.tab_num_ridxs_offset),
    )

    table.usage_map = _read_map(read_page, fmt, get_int32(page, fmt.tab_usage_map_offset))
    if not table.usage_map:
        raise TableFormatError("invalid map-size: 0")
    table.free_usage_map = _read_map(read_page, fmt, get_int32(page, fmt.tab_free_map_offset))
    table.first_data_pg = get_int16(page, fmt.tab_first_dpg_offset)

    for props in entry.props or ():
        if not props.name:
            table.props = props
    return table


def _default_decoder(fmt):
    if fmt.is_jet3:
        return lambda raw: bytes(raw).decode("cp1252", errors="replace")
    return lambda raw: bytes(raw).decode("utf-16-le", errors="replace")


def _parse_column(raw, fmt):
    col_type = raw[0]
    flags = raw[fmt.col_flags_offset]
    col = Column(
        col_type=col_type,
        col_num=raw[fmt.col_num_offset],
        var_col_num=get_int16(raw, fmt.tab_col_offset_var),
        row_col_num=get_int16(raw, fmt.tab_row_col_num_offset),
        is_fixed=bool(flags & 0x01),
        is_long_auto=bool(flags & 0x04),
        is_uuid_auto=bool(flags & 0x40),
        fixed_offset=get_int16(raw, fmt.tab_col_offset_fixed),
        col_size=0 if col_type == ColumnType.BOOL else get_int16(raw, fmt.col_size_offset),
    )
    if col_type in _SCALED_TYPES:
        col.col_scale = raw[fmt.col_scale_offset]
        col.col_prec = raw[fmt.col_prec_offset]
    return col


def read_columns(table, read_page, fmt, decode_text=None):
    """Read the column descriptions of ``table``, sorted by column number.

    ``decode_text(raw)`` turns stored names into strings; by default names are
    UTF-16LE, or code page 1252 in Jet 3 files. The columns are stored on the
    table and returned; ``table.index_start`` is set to where index data begins.
    """
    decode = decode_text or _default_decoder(fmt)
    page = _fetch(read_page, table.entry.table_pg)
    cursor = PageCursor(
        read_page, fmt, page,
        fmt.tab_cols_start_offset + table.num_real_idxs * fmt.tab_ridx_entry_size,
    )

    columns = [_parse_column(cursor.read(fmt.tab_col_entry_size), fmt)
               for _ in range(table.num_cols)]
    for col in columns:
        name_sz = cursor.read_u8() if fmt.is_jet3 else cursor.read_u16()
        col.name = decode(cursor.read(name_sz))

    columns.sort(key=lambda c: c.col_num)

    all_props = table.entry.props
    if all_props:
        for col in columns:
            col.props = next((p for p in all_props if p.name and p.name == col.name), None)

    table.columns = columns
    table.index_start = cursor.pos
    return columns


def dump_usage_map(table, out=None):
    """Write the pages reserved by ``table``, ten per line, to ``out``."""
    if not table.usage_map:
        return
    if len(table.usage_map) < 5:
        raise TableFormatError("usage map is too short to hold a start page")
    stream = sys.stdout if out is None else out
    stream.write("pages reserved by this object\n")
    stream.write(f"usage map pg {table.map_base_pg}\n")
    stream.write(f"free map pg {table.freemap_base_pg}\n")
    pgnum = get_int32(table.usage_map, 1)
    coln = 0
    for byte in table.usage_map[5:]:
        for bit in range(8):
            if byte & (1 << bit):
                coln += 1
                stream.write(f"{pgnum:6d}")
                if coln == 10:
                    stream.write("\n")
                    coln = 0
                else:
                    stream.write(" ")
            pgnum += 1
    stream.write("\n")