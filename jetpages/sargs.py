"""Search-argument trees used to filter rows by a WHERE clause."""

import dataclasses
import enum
import locale
import re
import struct
from dataclasses import dataclass

from .byteutil import get_int16
from .model import ColumnType


class Operator(enum.IntEnum):
    """Logical and relational operators of a search-argument tree."""

    OR = 1
    AND = 2
    NOT = 3
    EQUAL = 4
    GT = 5
    LT = 6
    GTEQ = 7
    LTEQ = 8
    LIKE = 9
    ISNULL = 10
    NOTNULL = 11
    ILIKE = 12
    NEQ = 13

    @property
    def is_relational(self):
        """True for operators that compare a column with a value."""
        return self not in (Operator.OR, Operator.AND, Operator.NOT)


@dataclass
class Sarg:
    """A single search argument attached to a column."""

    op: Operator
    value: object = None


@dataclass
class SargNode:
    """A node of a search-argument tree.

    Relational nodes compare ``col`` with ``value``; a relational node with no
    column is a constant whose truth is ``value``. NOT uses only ``left``.
    """

    op: Operator
    value: object = None
    col: object = None
    left: "SargNode | None" = None
    right: "SargNode | None" = None


def walk_tree(node, func):
    """Visit ``node`` and its children depth-first, left before right.

    When ``func(node)`` returns true, the children of that node are skipped.
    """
    if func(node):
        return
    if node.left is not None:
        walk_tree(node.left, func)
    if node.right is not None:
        walk_tree(node.right, func)


def _relate(op, constant, actual):
    """Compare as "actual OP constant"."""
    if op == Operator.EQUAL:
        return constant == actual
    if op == Operator.GT:
        return constant < actual
    if op == Operator.LT:
        return constant > actual
    if op == Operator.GTEQ:
        return constant <= actual
    if op == Operator.LTEQ:
        return constant >= actual
    if op == Operator.NEQ:
        return constant != actual
    raise ValueError(f"unsupported operator for comparison: {op!r}")


def _like(s, pattern):
    regex = "".join(
        ".*" if ch == "%" else "." if ch == "_" else re.escape(ch) for ch in pattern
    )
    return re.fullmatch(regex, s, re.DOTALL) is not None


def test_string(node, s, like=None):
    """Test string ``s`` against ``node``.

    ``like(s, pattern)`` decides LIKE matches; by default ``%`` matches any run
    of characters and ``_`` any single character. ILIKE ignores case.
    """
    matcher = _like if like is None else like
    if node.op == Operator.LIKE:
        return bool(matcher(s, node.value))
    if node.op == Operator.ILIKE:
        return bool(matcher(s.casefold(), node.value.casefold()))
    return _relate(node.op, locale.strcoll(node.value, s), 0)


def test_int(node, i):
    """Test integer ``i`` against ``node``; a fractional constant is truncated."""
    return _relate(node.op, int(node.value), i)


def test_double(op, vd, d):
    """Test ``d OP vd`` for floating-point values."""
    return _relate(op, vd, d)


def _as_number(value):
    return value if isinstance(value, int) else float(value)


def _six_places(x):
    return float(f"{x:.6f}")


def _as_text(value):
    if isinstance(value, str):
        return value
    return bytes(value).decode("utf-16-le", errors="replace")


def test_field(node, col, field):
    """Test the value of ``field``, stored as column ``col``, against ``node``.

    Text fields may be given as decoded strings or UTF-16LE bytes; memo and
    replication-id fields must already be rendered as strings.
    """
    if node.op == Operator.ISNULL:
        return bool(field.is_null)
    if node.op == Operator.NOTNULL:
        return not field.is_null

    col_type = col.col_type
    value = field.value
    if col_type == ColumnType.BOOL:
        return test_int(node, int(not field.is_null))
    if col_type == ColumnType.BYTE:
        return test_int(node, int.from_bytes(bytes(value[:1]), "little", signed=True))
    if col_type == ColumnType.INT:
        return test_int(node, get_int16(value, 0))
    if col_type == ColumnType.LONGINT:
        return test_int(node, struct.unpack_from("<i", value, 0)[0])
    if col_type == ColumnType.FLOAT:
        return test_double(node.op, _as_number(node.value), struct.unpack_from("<f", value, 0)[0])
    if col_type == ColumnType.DOUBLE:
        return test_double(node.op, _as_number(node.value), struct.unpack_from("<d", value, 0)[0])
    if col_type == ColumnType.TEXT:
        return test_string(node, _as_text(value))
    if col_type in (ColumnType.MEMO, ColumnType.REPID):
        if not isinstance(value, str):
            raise TypeError(f"{ColumnType(col_type).name} fields must be given as rendered strings")
        return test_string(node, value)
    if col_type == ColumnType.DATETIME:
        return test_double(
            node.op,
            _six_places(float(node.value)),
            _six_places(struct.unpack_from("<d", value, 0)[0]),
        )
    raise ValueError(f"unsupported column type for search arguments: {col_type}")


def find_field(col_num, fields):
    """Return the field whose ``colnum`` is ``col_num``, or None."""
    return next((f for f in fields if f.colnum == col_num), None)


def test_node(node, fields):
    """Evaluate the tree rooted at ``node`` against a row's ``fields``."""
    if node.op.is_relational:
        col = node.col
        if col is None:
            return bool(node.value)
        field = find_field(col.col_num, fields)
        if field is None:
            raise LookupError(f"no field for column {col.col_num}")
        return test_field(node, col, field)
    if node.op == Operator.NOT:
        return not test_node(node.left, fields)
    if node.op == Operator.AND:
        return test_node(node.left, fields) and test_node(node.right, fields)
    if node.op == Operator.OR:
        return test_node(node.left, fields) or test_node(node.right, fields)
    return True


def test_table(table, fields):
    """Evaluate the table's search tree against ``fields``; True if there is none."""
    if table.sarg_tree is None:
        return True
    return test_node(table.sarg_tree, fields)


def find_indexable_sargs(node):
    """Tree-walk callback copying relational tests ANDed from the root onto their columns.

    Returns True at OR and NOT nodes so their subtrees are skipped.
    """
    if node.op in (Operator.OR, Operator.NOT):
        return True
    if node.op.is_relational and node.col is not None:
        add_sarg(node.col, Sarg(op=node.op, value=node.value))
    return False


def add_sarg(col, sarg):
    """Attach a copy of ``sarg`` to ``col`` and return the copy."""
    copy = dataclasses.replace(sarg)
    col.sargs.append(copy)
    return copy


def add_sarg_by_name(table, colname, sarg):
    """Attach ``sarg`` to the column named ``colname`` (ignoring ASCII case).

    Returns True if the column was found.
    """
    wanted = colname.lower()
    for col in table.columns[:table.num_cols]:
        if col.name.lower() == wanted:
            add_sarg(col, sarg)
            return True
    return False