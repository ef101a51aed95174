"""
Utility functions to extract information from document trees.

The functions may be divided in the following categories.

Text: render the textual content of nodes, without side effects.
    collect_plain_text
    collect_text

Select nodes: select (references to) nodes from the tree
    get_nodes, get_nodes_with_meta

Compare and inspect: no side effects
    count_nodes
    trees_equal
    get_tree_info, print_tree_info
"""

from typing import Callable

from .elements import (
    ElementBase,
    Code,
    Heading,
    Paragraph,
    Text,
    SoftBreak,
    LineBreak,
)
from .tree import (
    Node,
    fold_tree,
    traverse_tree,
    traverse_tree_elementtype,
)


# text ------------------------------------------------------------


def collect_plain_text(node: Node) -> str:
    """
    The plain text of a node: the text of Text elements and code
    spans, concatenated in document order. All other markup is
    dropped.

    Args:
        node: a node, typically a heading or a paragraph

    Returns:
        the concatenated text.
    """
    match node.element:
        case Text(text=text):
            return text
        case Code(code=code):
            return code
        case _:
            return "".join(collect_plain_text(c) for c in node.children)


def _inline_text(node: Node) -> str:
    match node.element:
        case SoftBreak() | LineBreak():
            return " "
        case Text(text=text):
            return text
        case Code(code=code):
            return code
        case _:
            return "".join(_inline_text(c) for c in node.children)


def collect_text(
    root: Node,
    sep: str = "\n\n",
    filter_func: Callable[[Node], bool] = lambda _: True,
) -> str:
    """
    Join the plain text of all headings and paragraphs in the tree.
    Soft and hard line breaks are rendered as spaces.

    Args:
        root: The root node of the tree
        sep: a separator string
        filter_func: an optional filter on the heading and
            paragraph nodes

    Returns:
        The accumulated text.
    """

    content = traverse_tree_elementtype(
        root, _inline_text, (Heading, Paragraph), filter_func
    )
    return sep.join(c for c in content if c).strip()


# select nodes -----------------------------------------------------


def get_nodes(
    root: Node,
    element_type: type[ElementBase] | tuple[type[ElementBase], ...] = (
        ElementBase
    ),
    filter_func: Callable[[Node], bool] = lambda _: True,
) -> list[Node]:
    """
    Find all nodes with an element of element_type, or all such
    nodes that satisfy a predicate function

    Args:
        root: The root node of the tree
        element_type: the element class(es) to select (default to all)
        filter_func: a predicate to select the nodes (defaults
            to all nodes)

    Returns:
        A list of references to the selected nodes, in pre-order
    """
    return traverse_tree_elementtype(
        root, lambda x: x, element_type, filter_func
    )


def get_nodes_with_meta(
    root: Node,
    meta_key: str,
    element_type: type[ElementBase] | tuple[type[ElementBase], ...] = (
        ElementBase
    ),
) -> list[Node]:
    """
    Find all nodes that have a specific metadata key.

    Args:
        root: The root node of the tree
        meta_key: The metadata key to search for
        element_type: the element class(es) to select (default to all)

    Returns:
        A list of references to the nodes that have the key
    """
    return get_nodes(root, element_type, lambda x: meta_key in x.meta)


# compare and inspect ----------------------------------------------


def count_nodes(root: Node) -> int:
    """The number of nodes in the tree, root included."""
    return fold_tree(root, lambda acc, _: acc + 1, 0)


def _meta_equal(first: dict, second: dict) -> bool:
    if first.keys() != second.keys():
        return False
    for key, value in first.items():
        other = second[key]
        if isinstance(value, Node) and isinstance(other, Node):
            # e.g. the content stashed by transform_tabs
            if not trees_equal(value, other):
                return False
        elif value != other:
            return False
    return True


def trees_equal(first: Node, second: Node, meta: bool = True) -> bool:
    """
    Compare two trees by structure and content: same element kinds
    and values in the same positions, and (if meta is True) equal
    metadata dictionaries. Identity of the nodes is not considered.
    Metadata values that are nodes are compared as trees.

    Args:
        first, second: the roots of the trees to compare
        meta: whether to compare the metadata
    """
    if first.element != second.element:
        return False
    if meta and not _meta_equal(first.meta, second.meta):
        return False
    if len(first.children) != len(second.children):
        return False
    return all(
        trees_equal(a, b, meta)
        for a, b in zip(first.children, second.children)
    )


def get_tree_info(root: Node) -> list[str]:
    """The information strings of all nodes, indented by depth."""

    def _depth(n: Node) -> int:
        depth = 0
        while n.parent is not None and n is not root:
            depth += 1
            n = n.parent
        return depth

    return traverse_tree(root, lambda x: x.get_info(_depth(x)))


def print_tree_info(root: Node) -> None:
    print("\n".join(get_tree_info(root)))
