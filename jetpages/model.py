"""Core data model: column types, file format constants, catalog entries, tables."""

import enum
from dataclasses import dataclass, field

OBJECT_TABLE = 1
_SYSTEM_TABLE_FLAGS = 0x80000002


class ColumnType(enum.IntEnum):
    """Column data types as stored in a table definition."""

    BOOL = 0x01
    BYTE = 0x02
    INT = 0x03
    LONGINT = 0x04
    MONEY = 0x05
    FLOAT = 0x06
    DOUBLE = 0x07
    DATETIME = 0x08
    BINARY = 0x09
    TEXT = 0x0A
    OLE = 0x0B
    MEMO = 0x0C
    REPID = 0x0F
    NUMERIC = 0x10
    COMPLEX = 0x12


@dataclass(frozen=True)
class JetFormat:
    """Layout constants of one database file format version."""

    is_jet3: bool
    pg_size: int
    row_count_offset: int
    tab_num_rows_offset: int
    tab_num_cols_offset: int
    tab_num_idxs_offset: int
    tab_num_ridxs_offset: int
    tab_usage_map_offset: int
    tab_first_dpg_offset: int
    tab_cols_start_offset: int
    tab_ridx_entry_size: int
    col_scale_offset: int
    col_prec_offset: int
    col_flags_offset: int
    col_size_offset: int
    col_num_offset: int
    tab_col_entry_size: int
    tab_free_map_offset: int
    tab_col_offset_var: int
    tab_col_offset_fixed: int
    tab_row_col_num_offset: int


JET3 = JetFormat(
    is_jet3=True,
    pg_size=2048,
    row_count_offset=0x08,
    tab_num_rows_offset=12,
    tab_num_cols_offset=25,
    tab_num_idxs_offset=27,
    tab_num_ridxs_offset=31,
    tab_usage_map_offset=35,
    tab_first_dpg_offset=36,
    tab_cols_start_offset=43,
    tab_ridx_entry_size=8,
    col_scale_offset=9,
    col_prec_offset=10,
    col_flags_offset=13,
    col_size_offset=16,
    col_num_offset=1,
    tab_col_entry_size=18,
    tab_free_map_offset=39,
    tab_col_offset_var=3,
    tab_col_offset_fixed=14,
    tab_row_col_num_offset=5,
)

JET4 = JetFormat(
    is_jet3=False,
    pg_size=4096,
    row_count_offset=0x0C,
    tab_num_rows_offset=16,
    tab_num_cols_offset=45,
    tab_num_idxs_offset=47,
    tab_num_ridxs_offset=51,
    tab_usage_map_offset=55,
    tab_first_dpg_offset=56,
    tab_cols_start_offset=63,
    tab_ridx_entry_size=12,
    col_scale_offset=11,
    col_prec_offset=12,
    col_flags_offset=15,
    col_size_offset=23,
    col_num_offset=5,
    tab_col_entry_size=25,
    tab_free_map_offset=59,
    tab_col_offset_var=7,
    tab_col_offset_fixed=21,
    tab_row_col_num_offset=9,
)


@dataclass
class CatalogEntry:
    """One object listed in the database catalog."""

    object_name: str
    object_type: int = OBJECT_TABLE
    table_pg: int = 0
    flags: int = 0
    props: list | None = None
    fmt: JetFormat | None = None

    def is_user_table(self):
        """True for a table that is not flagged as a system table."""
        return self.object_type == OBJECT_TABLE and not self.flags & _SYSTEM_TABLE_FLAGS

    def is_system_table(self):
        """True for a table flagged as a system table."""
        return self.object_type == OBJECT_TABLE and bool(self.flags & _SYSTEM_TABLE_FLAGS)


@dataclass
class Column:
    """A column of a table definition.

    ``props`` is a property mapping (anything offering ``get``) or None.
    """

    name: str = ""
    col_type: int = 0
    col_num: int = 0
    var_col_num: int = 0
    row_col_num: int = 0
    col_scale: int = 0
    col_prec: int = 0
    is_fixed: bool = False
    is_long_auto: bool = False
    is_uuid_auto: bool = False
    fixed_offset: int = 0
    col_size: int = 0
    props: object = None
    sargs: list = field(default_factory=list)

    def get_prop(self, key):
        """Return the column property ``key``, or None."""
        if self.props is None:
            return None
        return self.props.get(key)

    def is_shortdate(self):
        """True if the column's Format property is "Short Date"."""
        return self.get_prop("Format") == "Short Date"


@dataclass
class Field:
    """The location and value of one column within a row."""

    value: bytes | None = None
    siz: int = 0
    is_fixed: bool = False
    is_null: bool = False
    start: int = 0
    colnum: int = 0
    offset: int = 0


@dataclass
class Table:
    """A table definition and its associated maps."""

    entry: CatalogEntry
    name: str = ""
    num_rows: int = 0
    num_cols: int = 0
    num_var_cols: int = 0
    num_idxs: int = 0
    num_real_idxs: int = 0
    columns: list = field(default_factory=list)
    indices: list = field(default_factory=list)
    usage_map: bytes = b""
    free_usage_map: bytes = b""
    map_base_pg: int = 0
    freemap_base_pg: int = 0
    first_data_pg: int = 0
    index_start: int = 0
    props: object = None
    sarg_tree: object = None
    is_temp_table: bool = False
    temp_table_pages: list = field(default_factory=list)

    def __post_init__(self):
        if not self.name:
            self.name = self.entry.object_name

    @property
    def map_sz(self):
        """Size of the usage map in bytes."""
        return len(self.usage_map)

    @property
    def freemap_sz(self):
        """Size of the free-space map in bytes."""
        return len(self.free_usage_map)

    def get_prop(self, key):
        """Return the table property ``key``, or None."""
        if self.props is None:
            return None
        return self.props.get(key)