import pytest

from jetpages.model import JET3, JET4, ColumnType, Field
from jetpages.rows import RowFormatError, crack_row, pack_row
from jetpages.worktable import (
    add_temp_column,
    create_temp_table,
    end_temp_columns,
    make_temp_column,
)


def _table(fmt, *specs):
    table = create_temp_table("t", fmt)
    for name, size, col_type, fixed in specs:
        add_temp_column(table, make_temp_column(name, size, col_type, fixed))
    end_temp_columns(table)
    return table


def _int_text_table(fmt):
    return _table(
        fmt,
        ("id", 0, ColumnType.INT, True),
        ("name", 50, ColumnType.TEXT, False),
    )


def _place(fmt, row):
    page = bytearray(fmt.pg_size)
    start = fmt.pg_size - len(row)
    page[start:] = row
    return page, start


def test_pack_jet4_layout():
    table = _int_text_table(JET4)
    row = pack_row(table, [Field(value=b"\x07\x00"), Field(value=b"ab", siz=2)])
    assert row == b"\x02\x00\x07\x00ab\x06\x00\x04\x00\x01\x00\x03"


def test_pack_jet3_layout():
    table = _int_text_table(JET3)
    row = pack_row(table, [Field(value=b"\x07\x00"), Field(value=b"ab", siz=2)])
    assert row == b"\x02\x07\x00ab\x05\x03\x01\x03"


@pytest.mark.parametrize("fmt", [JET3, JET4])
def test_round_trip(fmt):
    table = _int_text_table(fmt)
    row = pack_row(table, [Field(value=b"\x07\x00"), Field(value=b"hello", siz=5)])
    page, start = _place(fmt, row)
    fields = crack_row(table, page, start, len(row))
    assert [f.value for f in fields] == [b"\x07\x00", b"hello"]
    assert [f.is_null for f in fields] == [False, False]
    assert [f.colnum for f in fields] == [0, 1]
    assert all(start <= f.start < start + len(row) for f in fields)


@pytest.mark.parametrize("fmt", [JET3, JET4])
def test_null_variable_field(fmt):
    table = _int_text_table(fmt)
    row = pack_row(table, [Field(value=b"\x01\x00"), Field(value=None)])
    page, start = _place(fmt, row)
    fields = crack_row(table, page, start, len(row))
    assert fields[0].is_null is False
    assert fields[1].is_null is True
    assert fields[1].siz == 0


def test_jet3_long_row_uses_jump_table():
    table = _table(
        JET3,
        ("id", 0, ColumnType.INT, True),
        ("big", 400, ColumnType.TEXT, False),
        ("small", 10, ColumnType.TEXT, False),
    )
    big = bytes(range(256)) + b"z" * 44
    row = pack_row(
        table,
        [Field(value=b"\x09\x00"), Field(value=big, siz=len(big)), Field(value=b"xy", siz=2)],
    )
    assert len(row) > 256
    page, start = _place(JET3, row)
    fields = crack_row(table, page, start, len(row))
    assert [f.value for f in fields] == [b"\x09\x00", big, b"xy"]


@pytest.mark.parametrize("fmt", [JET3, JET4])
def test_fixed_only_round_trip(fmt):
    table = _table(
        fmt,
        ("a", 0, ColumnType.LONGINT, True),
        ("b", 0, ColumnType.BYTE, True),
    )
    row = pack_row(table, [Field(value=b"\x01\x02\x03\x04"), Field(value=b"\x05")])
    page, start = _place(fmt, row)
    fields = crack_row(table, page, start, len(row))
    assert [f.value for f in fields] == [b"\x01\x02\x03\x04", b"\x05"]


@pytest.mark.parametrize("fmt", [JET3, JET4])
def test_crack_then_pack_reproduces_row(fmt):
    table = _int_text_table(fmt)
    row = pack_row(table, [Field(value=b"\x07\x00"), Field(value=b"text", siz=4)])
    table.is_temp_table = False
    page, start = _place(fmt, row)
    fields = crack_row(table, page, start, len(row))
    assert pack_row(table, fields) == row


def test_pack_does_not_modify_fields():
    table = _int_text_table(JET4)
    fields = [Field(value=b"\x07\x00"), Field(value=None, siz=3)]
    pack_row(table, fields)
    assert fields[1].is_null is False
    assert fields[0].siz == 0


def test_crack_rejects_tiny_row():
    table = _int_text_table(JET4)
    page = bytearray(JET4.pg_size)
    page[10:12] = b"\x02\x00"
    with pytest.raises(RowFormatError):
        crack_row(table, page, 10, 2)


def test_crack_rejects_row_outside_page():
    table = _int_text_table(JET4)
    page = bytearray(64)
    with pytest.raises(RowFormatError):
        crack_row(table, page, 60, 10)


def test_crack_rejects_corrupt_variable_offset():
    table = _int_text_table(JET4)
    row = bytearray(pack_row(table, [Field(value=b"\x07\x00"), Field(value=b"ab", siz=2)]))
    row[6] = 0xFF
    page, start = _place(JET4, bytes(row))
    with pytest.raises(RowFormatError):
        crack_row(table, page, start, len(row))