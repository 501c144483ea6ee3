# jetpages

A pure Python library for the page-level structures of Jet (Microsoft
Access) database files. It reads table definitions, column descriptions
and usage maps, splits stored rows into fields and packs fields back into
rows, lays out and rewrites data pages, decodes CURRENCY and NUMERIC
values, parses KKD/MR2 property blocks, and evaluates search-argument
trees against the fields of a row.

It has no dependencies outside the standard library and supports
Python 3.10 and later.

## Installation

```
pip install jetpages
```

## Modules

- `jetpages.byteutil`: `get_int16`, `get_int32`, `get_int32_msb`,
  `put_int16`, `put_int32`, `put_int32_msb`. Reads and writes are
  bounds-checked and raise `IndexError` outside the buffer.
- `jetpages.rc4`: the `RC4` stream cipher (`RC4(key).process(data)`),
  `rc4(key, data)`, and `page_cipher(db_key, pg, data)`, which leaves
  page 0 and unkeyed databases unchanged.
- `jetpages.money`: `money_to_string(data, start)` for 8-byte currency
  values (four decimal places) and `numeric_to_string(data, start, scale,
  prec)` for 17-byte numeric values.
- `jetpages.options`: the `Option` flags, the `Options` set
  (`Options.parse`, `Options.from_env`, `Options.enabled`), and
  `get_option(flag)` / `debug(flag, message)`, which read the `MDBOPTS`
  environment variable once per thread.
- `jetpages.version`: `get_version()`.
- `jetpages.model`: `ColumnType`, `JetFormat` with the `JET3` and `JET4`
  layouts, `CatalogEntry`, `Column`, `Field` and `Table`.
- `jetpages.stats`: `Statistics`, which counts page reads while
  collection is on and writes them with `dump`.
- `jetpages.usagemap`: `find_next` and `find_next_freepage` over type 0
  (inline) and type 1 (paged) usage maps; `UsageMapError` for unknown map
  types or unreadable map pages.
- `jetpages.worktable`: in-memory temporary tables (`create_temp_table`,
  `make_temp_column`, `add_temp_column`, `end_temp_columns`).
- `jetpages.props`: `parse_kkd(buffer, decode_text, format_value)`,
  returning a list of `Properties`; `PropertyFormatError` for unknown or
  truncated buffers.
- `jetpages.sargs`: `Operator`, `Sarg` and `SargNode`, with `walk_tree`,
  `test_node`, `test_table`, `test_field`, `find_indexable_sargs`,
  `add_sarg` and `add_sarg_by_name`.
- `jetpages.rows`: `crack_row(table, page, row_start, row_size)` and
  `pack_row(table, fields)` for Jet 3 and Jet 4 rows; `RowFormatError`
  for inconsistent row buffers.
- `jetpages.pages`: `PageFile` for reading and writing (optionally
  encrypted) pages of a file object, plus `page_free_space`,
  `new_data_page`, `new_leaf_page`, `add_row_to_page` and `replace_row`.
- `jetpages.table`: `read_table`, `read_columns`, the `PageCursor` that
  follows chained definition pages, and `dump_usage_map`;
  `TableFormatError` when a definition cannot be read.

## Examples

```python
from jetpages.money import money_to_string

# 1.2345 stored as a CURRENCY value (scaled by 10 000)
raw = (12345).to_bytes(8, "little", signed=True)
print(money_to_string(raw, 0))  # 1.2345
```

```python
from jetpages.usagemap import find_next

# Type 0 map: type byte, start page 100, then a bitmap with pages 100 and 102 set
usage_map = bytes([0]) + (100).to_bytes(4, "little") + bytes([0b101])
print(find_next(usage_map, 0, 4096, None))    # 100
print(find_next(usage_map, 100, 4096, None))  # 102
print(find_next(usage_map, 102, 4096, None))  # 0, no more pages
```

```python
import io
from jetpages.model import JET4
from jetpages.pages import PageFile, new_data_page

pages = PageFile(io.BytesIO(bytes(JET4.pg_size * 2)), JET4, db_key=0x1234)
pages.write_page(1, new_data_page(JET4, table_pg=2))
assert pages.read_page(1) == new_data_page(JET4, table_pg=2)
```

Debug output goes to standard error and is switched on by `MDBOPTS`, a
colon-separated list such as `debug_row:debug_props` or `debug_all`.

## What it does not do

This is a library of building blocks, not a complete database reader.
It does not open a database file by name, detect its format version or
read its catalog; the caller supplies the `JetFormat`, the `CatalogEntry`
and a `read_page` function (such as `PageFile.read_page`). It does not
turn general column values into text: `parse_kkd` takes a
`format_value` callback for that. There is no SQL engine, no index
reading or updating, and no command-line program.