import io
import struct

import pytest

from jetpages.model import ColumnType
from jetpages.props import Properties, PropertyFormatError, parse_kkd


def _decode(raw):
    return bytes(raw).decode("utf-16-le")


def _format(data, start, dtype, dsize):
    return (int(dtype), bytes(data[start:start + dsize]))


def _chunk(rtype, payload):
    return struct.pack("<IH", 6 + len(payload), rtype) + payload


def _names(*names):
    payload = b""
    for name in names:
        enc = name.encode("utf-16-le")
        payload += struct.pack("<H", len(enc)) + enc
    return _chunk(0x80, payload)


def _entry(dtype, elem, data):
    return struct.pack("<HBBHH", 8 + len(data), 0, dtype, elem, len(data)) + data


def _values(block_name, *entries, rtype=0x00):
    enc = block_name.encode("utf-16-le")
    payload = struct.pack("<HHH", 0, 0, len(enc)) + enc + b"".join(entries)
    return _chunk(rtype, payload)


def test_text_value_and_block_name():
    buf = b"KKD\0" + _names("Format") + _values(
        "Price", _entry(ColumnType.TEXT, 0, "Short Date".encode("utf-16-le"))
    )
    (props,) = parse_kkd(buf, _decode, _format)
    assert props.name == "Price"
    assert props.get("Format") == (int(ColumnType.TEXT), "Short Date".encode("utf-16-le"))


def test_unnamed_block_has_none_name():
    buf = b"MR2\0" + _names("A") + _values("", _entry(ColumnType.BOOL, 0, b"\x01"))
    (props,) = parse_kkd(buf, _decode, _format)
    assert props.name is None
    assert props["A"] == "yes"


def test_bool_false():
    buf = b"KKD\0" + _names("Required") + _values("", _entry(ColumnType.BOOL, 0, b"\x00"))
    assert parse_kkd(buf, _decode, _format)[0].get("Required") == "no"


def test_binary_reports_length():
    buf = b"KKD\0" + _names("Blob") + _values("", _entry(ColumnType.BINARY, 0, b"abc"))
    assert parse_kkd(buf, _decode, _format)[0]["Blob"] == "(binary data of length 3)"


def test_guid_binary_becomes_repid():
    raw = bytes(range(16))
    buf = b"KKD\0" + _names("GUID") + _values("", _entry(ColumnType.BINARY, 0, raw))
    assert parse_kkd(buf, _decode, _format)[0]["GUID"] == (int(ColumnType.REPID), raw)


def test_memo_formatted_as_text():
    raw = "hi".encode("utf-16-le")
    buf = b"KKD\0" + _names("Desc") + _values("", _entry(ColumnType.MEMO, 0, raw))
    assert parse_kkd(buf, _decode, _format)[0]["Desc"] == (int(ColumnType.TEXT), raw)


def test_element_out_of_range_stops():
    buf = b"KKD\0" + _names("A") + _values(
        "", _entry(ColumnType.BOOL, 0, b"\x01"), _entry(ColumnType.BOOL, 5, b"\x01")
    )
    props = parse_kkd(buf, _decode, _format)[0]
    assert list(props) == ["A"]


def test_multiple_blocks():
    buf = (
        b"KKD\0"
        + _names("A", "B")
        + _values("", _entry(ColumnType.BOOL, 0, b"\x01"))
        + _values("col", _entry(ColumnType.BOOL, 1, b"\x00"), rtype=0x01)
    )
    result = parse_kkd(buf, _decode, _format)
    assert [p.name for p in result] == [None, "col"]
    assert result[1]["B"] == "no"


def test_unrecognized_format():
    with pytest.raises(PropertyFormatError):
        parse_kkd(b"XYZ\0", _decode, _format)


def test_values_without_names_are_skipped():
    buf = b"KKD\0" + _values("", _entry(ColumnType.BOOL, 0, b"\x01"))
    with pytest.warns(UserWarning):
        result = parse_kkd(buf, _decode, _format)
    assert result == []


def test_unknown_record_type_warns():
    buf = b"KKD\0" + _chunk(0x33, b"zz")
    with pytest.warns(UserWarning):
        assert parse_kkd(buf, _decode, _format) == []


def test_bad_chunk_length():
    buf = b"KKD\0" + struct.pack("<IH", 0, 0x80)
    with pytest.raises(PropertyFormatError):
        parse_kkd(buf, _decode, _format)


def test_dump_with_name():
    out = io.StringIO()
    Properties(name="col", values={"a": "1"}).dump(out, True)
    assert out.getvalue() == "name: col\n\ta: 1\n\n"


def test_dump_without_name_shows_none():
    out = io.StringIO()
    Properties(values={"a": "1"}).dump(out, True)
    assert out.getvalue().startswith("name: (none)\n")


def test_dump_hidden_name():
    out = io.StringIO()
    Properties(name="x", values={"k": "v"}).dump(out, False)
    assert out.getvalue() == "\tk: v\n"