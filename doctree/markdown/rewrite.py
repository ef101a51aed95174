"""
Traversal-safe rewriting of a document tree.

`rewrite(root, visit_func)` traverses the tree in pre-order and lets
visit_func decide, for each node, whether to keep it, replace it
with another node, splice a sequence of nodes in its place, or delete
it. The decision is expressed by the return value of visit_func:

    Keep(), or the visited node itself
        keep the node and descend into its children
    Replace(node, descend=True), or another Node
        put node in the place of the visited node, and descend into
        the children of node if descend is true
    Splice(nodes, final=False), or a list or tuple of nodes
        put the nodes in the place of the visited node. Each of the
        spliced nodes is offered to visit_func in turn, unless it is
        final
    Delete(), or None
        remove the visited node (a splice of zero nodes)

Nodes that are moved into the tree are moved by reference, keeping
their subtree intact. This is how a transformation preserves the
original content nodes instead of recreating them. The nodes may be
taken from anywhere in the tree, also from the children of an
ancestor of the visited node: the siblings that are still to be
processed are visited all the same.

Example:
    ```python
    # replace thematic breaks by a raw HTML rule, drop html comments
    def _visit(node: Node) -> Action | Node | None:
        match node.element:
            case ThematicBreak():
                return Replace(Node(HTMLBlock(html="<hr/>")))
            case HTMLBlock(html=html) if html.startswith("<!--"):
                return Delete()
            case _:
                return Keep()

    root = rewrite(root, _visit)
    ```

Termination: a node marked as final by the splice that produced it
is never offered to visit_func, nor are its children. A node that
was already offered to visit_func during the pass (for example,
because visit_func returned it again within a splice) is not offered
a second time, but its children are visited.

Errors: the rewrite fails fast. Each replacement is validated before
it is applied, so that the offending replacement leaves its parent
untouched, but the replacements applied before the error stay in
place (the rewrite is not transactional).
"""

from dataclasses import dataclass, field
from collections.abc import Callable, Collection, Sequence

from .tree import Node
from .errors import StructuralViolation, TypeMismatch


@dataclass(frozen=True)
class Keep:
    """Keep the visited node and descend into its children."""


@dataclass(frozen=True)
class Replace:
    """Substitute node for the visited node."""

    node: Node
    descend: bool = True


@dataclass(frozen=True)
class Splice:
    """Substitute a sequence of nodes for the visited node.

    Attributes:
        nodes: the nodes to splice, in order
        final: True if none of the nodes should be visited, or a
            collection of the nodes that should not be visited
    """

    nodes: Sequence[Node] = field(default_factory=tuple)
    final: bool | Collection[Node] = False


@dataclass(frozen=True)
class Delete:
    """Remove the visited node."""


Action = Keep | Replace | Splice | Delete
VisitFunc = Callable[[Node], 'Action | Node | Sequence[Node] | None']


def _as_action(
    node: Node, result: 'Action | Node | Sequence[Node] | None'
) -> Action:
    match result:
        case Keep() | Replace() | Splice() | Delete():
            return result
        case None:
            return Delete()
        case Node() if result is node:
            return Keep()
        case Node():
            return Replace(result)
        case list() | tuple():
            return Splice(result)
        case _:
            raise TypeMismatch(
                "rewrite: unrecognized return value of the visit "
                + f"function: {type(result).__name__}",
                "Action, Node, sequence of nodes, or None",
                type(result).__name__,
            )


def _final_ids(splice: Splice) -> set[int]:
    match splice.final:
        case True:
            return {id(n) for n in splice.nodes}
        case False:
            return set()
        case _:
            return {id(n) for n in splice.final}


def _frames_to_shift(
    stack: list[list], nodes: Sequence[Node], child: Node
) -> list[list]:
    """The frames of the stack whose cursor must move back by one for
    each of nodes that is detached from a position before it."""
    shifted: list[list] = []
    for n in nodes:
        if n is child or n.parent is None:
            continue
        index = n.index_in_parent()
        for frame in stack:
            if frame[0] is n.parent:
                if index is not None and index < frame[1]:
                    shifted.append(frame)
                break
    return shifted


def rewrite(root: Node, visit_func: VisitFunc) -> Node:
    """
    Rewrite the tree rooted at root in a single pre-order pass,
    applying the decisions of visit_func (see module documentation).

    Args:
        root: the root of the tree. It is modified in place.
        visit_func: the function deciding what happens to each node.
            During the call, the node is attached to the tree, so
            that visit_func may inspect its parent and siblings.

    Returns:
        the root of the rewritten tree: root itself, or its
            replacement if visit_func replaced the root.

    Raises:
        StructuralViolation: if a replacement may not appear in the
            place of the visited node, or if a sequence of other than
            exactly one node is spliced in place of the root.
        TypeMismatch: if visit_func returns an unrecognized value.
    """

    # Keep the offered and final nodes alive in these dictionaries,
    # so that their ids cannot be reused during the pass.
    offered: dict[int, Node] = {}
    final: dict[int, Node] = {}

    def _visit(node: Node) -> Action:
        if id(node) in offered:
            return Keep()
        offered[id(node)] = node
        return _as_action(node, visit_func(node))

    # The root has no parent to splice into
    new_root = root
    descend = True
    action = _visit(root)
    match action:
        case Keep():
            pass
        case Replace(node=node, descend=flag):
            new_root, descend = node, flag
        case Splice(nodes=nodes) if len(nodes) == 1:
            new_root = nodes[0]
            descend = id(new_root) not in _final_ids(action)
        case Splice() | Delete():
            raise StructuralViolation(
                "rewrite: the root node can only be replaced by a "
                + "single node",
                None,
                root.element.type_name(),
            )
    if new_root is not root:
        new_root.unlink()
        offered[id(new_root)] = new_root
    if not descend:
        return new_root

    # Work stack of frames [parent, index of next child to process]
    stack: list[list] = [[new_root, 0]]
    while stack:
        frame = stack[-1]
        parent: Node = frame[0]
        index: int = frame[1]
        if index >= len(parent.children):
            stack.pop()
            continue

        child = parent.children[index]
        if id(child) in final:
            frame[1] = index + 1
            continue

        action = _visit(child)
        match action:
            case Keep():
                frame[1] = index + 1
                if child.children:
                    stack.append([child, 0])
            case Replace(node=node, descend=flag):
                shifted = _frames_to_shift(stack, [node], child)
                index = parent.replace_child(child, [node])
                for f in shifted:
                    f[1] -= 1
                offered[id(node)] = node
                frame[1] = index + 1
                if flag and node.children:
                    stack.append([node, 0])
            case Splice(nodes=nodes):
                finals = _final_ids(action)
                shifted = _frames_to_shift(stack, nodes, child)
                index = parent.replace_child(child, nodes)
                # nodes moved out of an ancestor's children, ahead of
                # its cursor
                for f in shifted:
                    f[1] -= 1
                for n in nodes:
                    if id(n) in finals:
                        final[id(n)] = n
                # the spliced nodes are processed next
                frame[1] = index
            case Delete():
                index = parent.replace_child(child, [])
                frame[1] = index

    return new_root
