import pytest

from jetpages.model import (
    OBJECT_TABLE,
    CatalogEntry,
    Column,
    ColumnType,
    Table,
)


def test_user_table_without_flags():
    entry = CatalogEntry("Customers", OBJECT_TABLE, flags=0)
    assert entry.is_user_table() is True
    assert entry.is_system_table() is False


@pytest.mark.parametrize("flags", [0x80000000, 0x2, 0x80000002])
def test_system_flags_make_system_table(flags):
    entry = CatalogEntry("MSysObjects", OBJECT_TABLE, flags=flags)
    assert entry.is_system_table() is True
    assert entry.is_user_table() is False


def test_non_table_is_neither():
    entry = CatalogEntry("Form1", object_type=0, flags=0)
    assert entry.is_user_table() is False
    assert entry.is_system_table() is False


def test_column_props_lookup():
    col = Column(name="Born", props={"Format": "Short Date", "Caption": "Birthday"})
    assert col.get_prop("Caption") == "Birthday"
    assert col.get_prop("Missing") is None
    assert col.is_shortdate() is True


def test_column_without_props():
    col = Column(name="Id")
    assert col.get_prop("Format") is None
    assert col.is_shortdate() is False


def test_column_other_format_is_not_shortdate():
    col = Column(name="When", props={"Format": "Long Date"})
    assert col.is_shortdate() is False


def test_table_name_comes_from_entry():
    table = Table(CatalogEntry("Orders"))
    assert table.name == "Orders"


def test_table_props_and_map_sizes():
    table = Table(
        CatalogEntry("Orders"),
        props={"Description": "all orders"},
        usage_map=b"\x00" * 9,
        free_usage_map=b"\x01" * 5,
    )
    assert table.get_prop("Description") == "all orders"
    assert table.get_prop("Other") is None
    assert table.map_sz == 9
    assert table.freemap_sz == 5


def test_table_without_props():
    assert Table(CatalogEntry("T")).get_prop("Description") is None


def test_column_type_values():
    assert ColumnType(0x0A) is ColumnType.TEXT
    assert ColumnType.MEMO > ColumnType.TEXT