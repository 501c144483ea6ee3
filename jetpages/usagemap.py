"""Scanning of table usage maps for used and free pages."""

from .byteutil import get_int16, get_int32


class UsageMapError(Exception):
    """A usage map could not be interpreted or its pages could not be read."""


def _find_next_inline(usage_map, start_pg):
    if len(usage_map) < 5:
        return 0
    base_pg = get_int32(usage_map, 1)
    bitmap = usage_map[5:]
    first = start_pg - base_pg + 1 if start_pg >= base_pg else 0
    for bit in range(first, len(bitmap) * 8):
        if bitmap[bit // 8] & (1 << (bit % 8)):
            return base_pg + bit
    return 0


def _find_next_paged(usage_map, start_pg, pg_size, read_page):
    bits_per_page = (pg_size - 4) * 8
    max_map_pgs = (len(usage_map) - 1) // 4
    map_ind, offset = divmod(start_pg + 1, bits_per_page)
    for ind in range(map_ind, max_map_pgs):
        map_pg = get_int32(usage_map, ind * 4 + 1)
        if not map_pg:
            offset = 0
            continue
        page = read_page(map_pg)
        if page is None or len(page) != pg_size:
            raise UsageMapError(f"did not get a full page at {map_pg}")
        bitmap = page[4:]
        for bit in range(offset, bits_per_page):
            if bitmap[bit // 8] & (1 << (bit % 8)):
                return ind * bits_per_page + bit
        offset = 0
    return 0


def find_next(usage_map, start_pg, pg_size, read_page):
    """Return the next page after ``start_pg`` marked in ``usage_map``, or 0 at the end.

    ``read_page`` is called with a page number to fetch bitmap pages of
    type-1 maps. Raises UsageMapError for unknown map types.
    """
    if not usage_map:
        raise UsageMapError("empty usage map")
    map_type = usage_map[0]
    if map_type == 0:
        return _find_next_inline(usage_map, start_pg)
    if map_type == 1:
        return _find_next_paged(usage_map, start_pg, pg_size, read_page)
    raise UsageMapError(f"unrecognized usage map type: {map_type}")


def _free_space(page, row_count_offset):
    rows = get_int16(page, row_count_offset)
    free_start = row_count_offset + 2 + rows * 2
    free_end = get_int16(page, row_count_offset + rows * 2)
    return free_end - free_start


def find_next_freepage(free_map, row_size, pg_size, read_page, row_count_offset):
    """Return the first page in ``free_map`` with room for ``row_size`` bytes.

    Returns 0 when no listed page has room, meaning a new page is needed.
    """
    cur_pg = 0
    while True:
        pgnum = find_next(free_map, cur_pg, pg_size, read_page)
        if not pgnum:
            return 0
        cur_pg = pgnum
        if _free_space(read_page(pgnum), row_count_offset) >= row_size:
            return pgnum