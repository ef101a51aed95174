"""
Read-only queries on table nodes.

A table node has a TableHeader and a TableBody child, which in turn
hold the TableRow nodes. These functions look through the header and
body and treat the table as a sequence of rows, the first of which is
the header row.
"""

from collections.abc import Iterator
from itertools import chain
from typing import overload

from .elements import Table
from .tree import Node
from .errors import RangeError, TypeMismatch


def _check_table(node: Node) -> None:
    if not isinstance(node.element, Table):
        raise TypeMismatch(
            f"needs a Table node, got {node.element.type_name()}",
            "Table",
            node.element.type_name(),
        )


def table_rows(node: Node) -> Iterator[Node]:
    """
    Iterate through the TableRow nodes of a table, skipping the
    intermediate TableHeader and TableBody nodes. The first row
    should be interpreted as the header of the table.

    Args:
        node: a node with a Table element

    Raises:
        TypeMismatch: if node is not a table
    """
    _check_table(node)
    return chain.from_iterable(
        section.children for section in node.children
    )


def _table_size(node: Node, count_columns: bool) -> tuple[int, int]:
    _check_table(node)
    rows, columns = 0, 0
    for row in table_rows(node):
        rows += 1
        if count_columns:
            # rows are not guaranteed to have the same width
            columns = max(columns, len(row.children))
    return rows, columns


@overload
def table_size(node: Node) -> tuple[int, int]: ...
@overload
def table_size(node: Node, dim: int) -> int: ...
def table_size(node: Node, dim: int | None = None) -> tuple[int, int] | int:
    """
    The number of rows and columns of a table, or either of them.

    Args:
        node: a node with a Table element
        dim: 1 for the number of rows, 2 for the number of columns,
            None (default) for both

    Returns:
        a tuple (rows, columns), or the number of rows or columns

    Raises:
        TypeMismatch: if node is not a table
        RangeError: if dim is not None, 1, or 2

    Note:
        the number of columns is the largest number of cells in a row,
        and requires visiting all the cells (O(rows x columns)).
        table_size(node, 1) only visits the rows.
    """
    match dim:
        case None:
            return _table_size(node, True)
        case 1:
            return _table_size(node, False)[0]
        case 2:
            return _table_size(node, True)[1]
        case _:
            raise RangeError(
                f"dimension out of range: {dim} (must be 1 or 2)", dim
            )
