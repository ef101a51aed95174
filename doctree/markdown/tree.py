"""
This module provides the tree representation of a markdown document
that sits between a markdown parser and a documentation renderer.

Each node of the tree (`Node`) holds an element payload (one of the
kinds defined in `elements.py`), an ordered list of children that the
node owns, a back-reference to its parent, and a metadata dictionary
for side-channel data:

```python
root = Node(Document(), [
    Node(Heading(level=1), [Node(Text(text="Installation"))]),
    Node(CodeBlock(info="bash", code="pip install doctree")),
])
```

The element kinds constrain which kinds may appear as children. The
methods that attach nodes (append_child, insert_child, replace_child,
...) check these rules and raise StructuralViolation instead of
building an invalid tree. They also maintain the parent links: a node
that is attached somewhere is first detached from its previous
parent, so that every node has at most one parent.

The `children` list may also be modified directly. In that case the
caller is responsible for the parent links and the structural rules.

The metadata dictionary (`meta`) is opaque to all the functions of
this module, with the exception of copy_tree, which deep-copies it
with the node.

Note:
    trees are mutable and are mostly operated upon through side
    effects. Use copy_tree to obtain an independent copy before
    working on a tree that is shared.
"""

from typing import Any, TypeVar
from collections.abc import Callable, Iterable, Sequence
import copy

from .elements import ElementBase
from .errors import StructuralViolation, TypeMismatch

T = TypeVar("T")
U = TypeVar("U")


def check_child_element(
    parent_element: ElementBase, child_element: ElementBase
) -> None:
    """Raise StructuralViolation if child_element may not appear as
    a direct child of parent_element."""
    if not parent_element.can_contain(child_element):
        raise StructuralViolation(
            f"{child_element.type_name()} is not a legal child of "
            + f"{parent_element.type_name()}",
            parent_element.type_name(),
            child_element.type_name(),
        )


class Node:
    """
    A node of the document tree.

    Attributes:
        element: the element payload
        children: the ordered list of child nodes
        parent: the parent node, None for a root
        meta: a dictionary of side-channel data, not interpreted by
            the tree functions

    Nodes compare by identity.
    """

    def __init__(
        self,
        element: ElementBase,
        children: Iterable['Node'] = (),
        meta: dict[str, Any] | None = None,
    ):
        """
        Initialize a new node.

        Args:
            element: the element payload
            children: nodes to be appended as children, in order
            meta: the metadata dictionary (not copied)
        """
        if not isinstance(element, ElementBase):
            raise TypeMismatch(
                "A node requires an element payload, got "
                + type(element).__name__,
                "element",
                type(element).__name__,
            )
        self.element: ElementBase = element
        self.parent: 'Node | None' = None
        self.children: list['Node'] = []
        self.meta: dict[str, Any] = meta if meta is not None else {}
        for child in children:
            self.append_child(child)

    def __repr__(self) -> str:
        return (
            f"Node({self.element.get_info()}, "
            + f"{len(self.children)} children)"
        )

    # Utility functions to retrieve basic properties
    def is_root_node(self) -> bool:
        return self.parent is None

    def get_parent(self) -> 'Node | None':
        return self.parent

    def count_children(self) -> int:
        return len(self.children)

    def index_in_parent(self) -> int | None:
        """The position of this node among its siblings, or None for
        a root node."""
        if self.parent is None:
            return None
        return _index_of(self.parent.children, self)

    def next_sibling(self) -> 'Node | None':
        index = self.index_in_parent()
        if index is None or self.parent is None:
            return None
        if index + 1 < len(self.parent.children):
            return self.parent.children[index + 1]
        return None

    def previous_sibling(self) -> 'Node | None':
        index = self.index_in_parent()
        if index is None or self.parent is None:
            return None
        return self.parent.children[index - 1] if index > 0 else None

    def is_ancestor_of(self, node: 'Node') -> bool:
        """True if this node is node itself or one of its
        ancestors."""
        current: Node | None = node
        while current is not None:
            if current is self:
                return True
            current = current.parent
        return False

    # Metadata
    def get_meta_for_key(self, key: str, default: Any = None) -> Any:
        """
        Get the value of key in the metadata of the node.

        Args:
            key: the key for which the metadata is searched
            default: a default value if the key is absent

        Returns:
            the key value, or the default value if the key is not
                found (None if no default specified).
        """
        return self.meta.get(key, default)

    def set_meta_for_key(self, key: str, value: Any) -> None:
        self.meta[key] = value

    # Attach and detach
    def _check_attach(self, child: 'Node') -> None:
        if not isinstance(child, Node):
            raise TypeMismatch(
                "Only nodes can be attached to a tree, got "
                + type(child).__name__,
                "Node",
                type(child).__name__,
            )
        check_child_element(self.element, child.element)
        if child.is_ancestor_of(self):
            raise StructuralViolation(
                "A node cannot be attached to itself or to one of "
                + "its descendants",
                self.element.type_name(),
                child.element.type_name(),
            )

    def insert_child(self, index: int, child: 'Node') -> None:
        """
        Insert child at position index of the children of this node.
        If child is attached to another parent, it is detached from
        it first.

        Raises:
            StructuralViolation: if the element of child may not
                appear under this node, or if child is an ancestor
                of this node.
        """
        self._check_attach(child)
        if child.parent is self:
            old_index = _index_of(self.children, child)
            if old_index < index:
                index -= 1
        child.unlink()
        child.parent = self
        self.children.insert(index, child)

    def append_child(self, child: 'Node') -> None:
        """Add child as the last child of this node."""
        self.insert_child(len(self.children), child)

    def prepend_child(self, child: 'Node') -> None:
        """Add child as the first child of this node."""
        self.insert_child(0, child)

    def _insert_sibling(self, sibling: 'Node', offset: int) -> None:
        if self.parent is None:
            raise StructuralViolation(
                "Cannot add a sibling to a root node",
                None,
                sibling.element.type_name(),
            )
        parent = self.parent
        parent._check_attach(sibling)
        if sibling is self:
            return
        sibling.unlink()
        # the position of this node after sibling was detached
        index = _index_of(parent.children, self)
        parent.children.insert(index + offset, sibling)
        sibling.parent = parent

    def insert_before(self, sibling: 'Node') -> None:
        """Insert sibling in the parent of this node, immediately
        before this node. Inserting a node before itself leaves the
        tree unchanged."""
        self._insert_sibling(sibling, 0)

    def insert_after(self, sibling: 'Node') -> None:
        """Insert sibling in the parent of this node, immediately
        after this node. Inserting a node after itself leaves the
        tree unchanged."""
        self._insert_sibling(sibling, 1)

    def remove_child(self, child: 'Node') -> None:
        """Detach child from this node. The subtree of child is left
        intact.

        Raises:
            ValueError: if child is not a child of this node
        """
        index = _index_of(self.children, child)
        del self.children[index]
        child.parent = None

    def unlink(self) -> None:
        """Detach this node from its parent, if any."""
        if self.parent is not None:
            self.parent.remove_child(self)

    def replace_child(
        self, child: 'Node', new_children: Sequence['Node']
    ) -> int:
        """
        Replace child with a sequence of zero or more nodes, at the
        same position. The new nodes are moved into place by
        reference: they are detached from their current parent and
        keep their subtree. The sequence may include child itself.

        The whole replacement is validated before the tree is
        modified: if it raises, the tree is left unchanged.

        Args:
            child: a child of this node
            new_children: the nodes that take the place of child

        Returns:
            the index of the first of the new nodes

        Raises:
            ValueError: if child is not a child of this node
            StructuralViolation: if one of the new nodes may not
                appear under this node, appears twice, or is an
                ancestor of this node.
        """
        _index_of(self.children, child)
        seen: set[int] = set()
        for new_child in new_children:
            self._check_attach(new_child)
            if id(new_child) in seen:
                raise StructuralViolation(
                    "The same node cannot be inserted twice",
                    self.element.type_name(),
                    new_child.element.type_name(),
                )
            seen.add(id(new_child))

        for new_child in new_children:
            if new_child is not child:
                new_child.unlink()
        index = _index_of(self.children, child)
        del self.children[index]
        child.parent = None
        for offset, new_child in enumerate(new_children):
            new_child.parent = self
            self.children.insert(index + offset, new_child)
        return index

    # Representations
    def as_dict(self) -> dict[str, Any]:
        """
        Return a dictionary representation of the subtree rooted at
        this node, with keys 'element', 'meta', and 'children'.
        """
        return {
            'element': self.element.model_dump(),
            'meta': dict(self.meta),
            'children': [c.as_dict() for c in self.children],
        }

    def get_info(self, indent: int = 0) -> str:
        """
        Reports information about a node, including its element kind,
        fields, and metadata.

        Args:
            indent: The indentation level for pretty printing
        """
        import yaml

        indent_str = "  " * indent

        info = f"{indent_str}{self.element.type_name()} node"
        info += "\n" if self.parent else " (root)\n"
        fields = self.element.model_dump(exclude={'type'})
        if fields:
            for line in yaml.safe_dump(fields).splitlines():
                info += f"{indent_str}  {line}\n"

        if self.children:
            info += f"{indent_str}Has {self.count_children()} children\n"

        # metadata values may be arbitrary objects
        if self.meta:
            info += f"{indent_str}Metadata keys: "
            info += ", ".join(str(k) for k in self.meta.keys()) + "\n"

        return info


def _index_of(nodes: list[Node], node: Node) -> int:
    # identity, not equality
    for i, n in enumerate(nodes):
        if n is node:
            return i
    raise ValueError("Node is not a child of the given parent")


# copy ------------------------------------------------------------
def copy_tree(
    root: Node,
    map_func: Callable[[Node, ElementBase], ElementBase] | None = None,
) -> Node:
    """
    Make a structurally independent copy of the subtree rooted at
    root. If root is not the root of its tree, its ancestors are
    ignored and the copy is a new root.

    Args:
        root: the root of the subtree to copy
        map_func: a function called with each node and its element,
            returning the element of the copied node. Defaults to a
            deep copy of the element.

    Returns:
        the root of the copy. The metadata of each node is
            deep-copied.

    Raises:
        TypeMismatch: if map_func returns something that is not an
            element.
        StructuralViolation: if map_func returns an element that may
            not appear under the copied parent. The partial copy is
            discarded and the source tree is untouched.

    Example:
        ```python
        # copy a tree, turning all headings into level 2 headings
        def _demote(node: Node, element: ElementBase) -> ElementBase:
            if isinstance(element, Heading):
                return Heading(level=2)
            return element.deep_copy()

        new_root = copy_tree(root, _demote)
        ```
    """
    if map_func is None:
        map_func = lambda _, e: e.deep_copy()  # noqa: E731

    def _copy(node: Node, parent_element: ElementBase | None) -> Node:
        element = map_func(node, node.element)
        if not isinstance(element, ElementBase):
            raise TypeMismatch(
                "copy_tree: the map function must return an element, "
                + f"got {type(element).__name__}",
                "element",
                type(element).__name__,
            )
        if parent_element is not None:
            check_child_element(parent_element, element)
        new_node = Node(element, meta=copy.deepcopy(node.meta))
        for child in node.children:
            new_child = _copy(child, element)
            # legality already checked against the copied element
            new_child.parent = new_node
            new_node.children.append(new_child)
        return new_node

    return _copy(root, None)


# traversal -------------------------------------------------------
def pre_order_traversal(
    node: Node, visit_func: Callable[[Node], None]
) -> None:
    """Call visit_func on node, then on each subtree of its children
    in order (a heading is seen before its Text children)."""
    visit_func(node)
    for child in node.children:
        pre_order_traversal(child, visit_func)


def post_order_traversal(
    node: Node, visit_func: Callable[[Node], None]
) -> None:
    """Call visit_func on the subtrees of the children of node, then
    on node itself (the Text children of a heading are seen first)."""
    for child in node.children:
        post_order_traversal(child, visit_func)
    visit_func(node)


# signature shared by the two traversals above. Neither may be used
# to attach or detach nodes: see rewrite.py for that.
TraversalFunc = Callable[[Node, Callable[[Node], None]], None]


def traverse_tree(
    node: Node,
    map_func: Callable[[Node], T],
    filter_func: Callable[[Node], bool] = lambda _: True,
    traversal_func: TraversalFunc = pre_order_traversal,
) -> list[T]:
    """
    Collect map_func(n) for the nodes n of the subtree that satisfy
    filter_func, in the order given by traversal_func.

    Example:
        ```python
        # the element kinds of the tree of the module example
        kinds = traverse_tree(root, lambda n: n.element.type_name())
        # ['Document', 'Heading', 'Text', 'CodeBlock']
        ```
    """
    result: list[T] = []

    def _collect(n: Node) -> None:
        if filter_func(n):
            result.append(map_func(n))

    traversal_func(node, _collect)
    return result


EL = TypeVar("EL", bound=ElementBase)  # fmt: skip


def traverse_tree_elementtype(
    node: Node,
    map_func: Callable[[Node], T],
    element_type: type[EL] | tuple[type[EL], ...],
    filter_func: Callable[[Node], bool] = lambda _: True,
    traversal_func: TraversalFunc = pre_order_traversal,
) -> list[T]:
    """
    As traverse_tree, restricted to the nodes whose element is an
    instance of element_type (a kind, a family such as BlockContainer,
    or a tuple of them).

    Example:
        ```python
        languages = traverse_tree_elementtype(
            root, lambda n: n.element.info, CodeBlock
        )
        ```
    """
    return traverse_tree(
        node,
        map_func,
        lambda n: isinstance(n.element, element_type) and filter_func(n),
        traversal_func,
    )


# fold ------------------------------------------------------------
def fold_tree(
    node: Node,
    fold_func: Callable[[U, Node], U],
    initial_value: U,
    traversal_func: TraversalFunc = post_order_traversal,
) -> U:
    """
    Thread an accumulator through the nodes of the subtree:
    fold_func(acc, n) is called on each node n, children before
    parents unless another traversal_func is given.

    Example:
        ```python
        # number of inline nodes under root
        fold_tree(root, lambda acc, n: acc + n.element.is_inline(), 0)
        ```
    """
    acc = initial_value

    def _step(n: Node) -> None:
        nonlocal acc
        acc = fold_func(acc, n)

    traversal_func(node, _step)
    return acc
