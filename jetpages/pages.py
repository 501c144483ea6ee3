"""Page storage: reading and writing pages, and the row layout of data pages."""

import io

from .byteutil import get_int16, put_int16, put_int32
from .model import JET4
from .rc4 import page_cipher

_OFFSET_MASK = 0x1FFF
_DATA_PAGE_SIGNATURE = 0x0101
_LEAF_PAGE_SIGNATURE = 0x0104


class PageFile:
    """Fixed-size pages of a database file, encrypted per page when keyed."""

    def __init__(self, stream, fmt, db_key=0):
        self.stream = stream
        self.fmt = fmt
        self.db_key = db_key

    def read_page(self, pg):
        """Return the decrypted contents of page ``pg``.

        Raises EOFError when the file does not hold the whole page.
        """
        size = self.fmt.pg_size
        self.stream.seek(pg * size)
        data = self.stream.read(size)
        if len(data) != size:
            raise EOFError(f"could not read a full page at {pg}")
        return page_cipher(self.db_key, pg, data)

    def write_page(self, pg, data):
        """Write ``data`` as page ``pg`` of an existing file and return its size.

        Raises EOFError when the page lies beyond the end of the file.
        """
        size = self.fmt.pg_size
        if len(data) != size:
            raise ValueError(f"page data must be {size} bytes, got {len(data)}")
        offset = pg * size
        end = self.stream.seek(0, io.SEEK_END)
        if end < offset + size:
            raise EOFError(f"offset {offset} is beyond EOF")
        self.stream.seek(offset)
        written = self.stream.write(page_cipher(self.db_key, pg, data))
        if written is not None and written < size:
            raise OSError(f"short write of page {pg}: {written} of {size} bytes")
        return size


def _locate_row(page, fmt, row):
    """Return ``(start, size)`` of row ``row`` listed in the page's row offset table."""
    rco = fmt.row_count_offset
    num_rows = get_int16(page, rco)
    if not 0 <= row < num_rows:
        raise IndexError(f"row {row} does not exist on a page of {num_rows} rows")
    start = get_int16(page, rco + 2 + row * 2) & _OFFSET_MASK
    end = fmt.pg_size if row == 0 else get_int16(page, rco + row * 2) & _OFFSET_MASK
    return start, end - start


def page_free_space(page, fmt):
    """Return the number of free bytes between the row offset table and the rows."""
    rco = fmt.row_count_offset
    rows = get_int16(page, rco)
    free_start = rco + 2 + rows * 2
    free_end = get_int16(page, rco + rows * 2)
    return free_end - free_start


def new_data_page(fmt, table_pg):
    """Return an empty data page owned by the table defined on ``table_pg``."""
    page = bytearray(fmt.pg_size)
    put_int16(page, 0, _DATA_PAGE_SIGNATURE)
    put_int16(page, 2, fmt.pg_size - fmt.row_count_offset - 2)
    put_int32(page, 4, table_pg)
    return page


def new_leaf_page(fmt, table_pg):
    """Return an empty index leaf page owned by the table defined on ``table_pg``."""
    page = bytearray(fmt.pg_size)
    put_int16(page, 0, _LEAF_PAGE_SIGNATURE)
    put_int32(page, 4, table_pg)
    return page


def _check_fit(pos, fmt, num_rows):
    if pos < fmt.row_count_offset + 2 + num_rows * 2:
        raise ValueError("rows do not fit on the page")


def add_row_to_page(table, page, row):
    """Add ``row`` to a data page and return the page's new row count.

    For ordinary tables ``page`` is a bytearray that is rebuilt in place with
    the existing rows compacted. Temporary tables keep their pages in
    ``table.temp_table_pages``, starting a new one when the last is full, and
    ``page`` is not used.
    """
    fmt = table.entry.fmt or JET4
    rco = fmt.row_count_offset
    row = bytes(row)

    if table.is_temp_table:
        pages = table.temp_table_pages
        if not pages or get_int16(pages[-1], 2) < len(row) + 2:
            pages.append(new_data_page(fmt, table.entry.table_pg))
        target = pages[-1]
        num_rows = get_int16(target, rco)
        pos = fmt.pg_size if num_rows == 0 else get_int16(target, rco + num_rows * 2)
    else:
        target = new_data_page(fmt, table.entry.table_pg)
        num_rows = get_int16(page, rco)
        pos = fmt.pg_size
        for i in range(num_rows):
            start, size = _locate_row(page, fmt, i)
            pos -= size
            _check_fit(pos, fmt, i + 1)
            target[pos:pos + size] = page[start:start + size]
            put_int16(target, rco + 2 + i * 2, pos)

    pos -= len(row)
    _check_fit(pos, fmt, num_rows + 1)
    target[pos:pos + len(row)] = row
    put_int16(target, rco + 2 + num_rows * 2, pos)
    num_rows += 1
    put_int16(target, rco, num_rows)
    put_int16(target, 2, pos - rco - 2 - num_rows * 2)

    if not table.is_temp_table:
        page[:] = target
    return num_rows


def replace_row(page, fmt, table_pg, row, new_row):
    """Return a rebuilt copy of ``page`` in which row ``row`` holds ``new_row``."""
    rco = fmt.row_count_offset
    num_rows = get_int16(page, rco)
    if not 0 <= row < num_rows:
        raise IndexError(f"row {row} does not exist on a page of {num_rows} rows")

    target = new_data_page(fmt, table_pg)
    put_int16(target, rco, num_rows)
    pos = fmt.pg_size
    for i in range(num_rows):
        if i == row:
            data = bytes(new_row)
        else:
            start, size = _locate_row(page, fmt, i)
            data = bytes(page[start:start + size])
        pos -= len(data)
        _check_fit(pos, fmt, num_rows)
        target[pos:pos + len(data)] = data
        put_int16(target, rco + 2 + i * 2, pos)

    put_int16(target, 2, page_free_space(target, fmt))
    return target