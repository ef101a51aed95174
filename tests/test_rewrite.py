"""Test rewrite"""

# flake8: noqa
# pyright: basic
# pyright: reportAttributeAccessIssue=false

import unittest

from doctree.markdown.elements import (
    Document,
    Heading,
    Paragraph,
    CodeBlock,
    Admonition,
    BlockQuote,
    HTMLBlock,
    ThematicBreak,
    Text,
)
from doctree.markdown.tree import Node, copy_tree
from doctree.markdown.rewrite import (
    Action,
    Keep,
    Replace,
    Splice,
    Delete,
    rewrite,
)
from doctree.markdown.treeutils import trees_equal
from doctree.markdown.errors import StructuralViolation, TypeMismatch


def _para(text: str) -> Node:
    return Node(Paragraph(), [Node(Text(text=text))])


def _html(html: str) -> Node:
    return Node(HTMLBlock(html=html))


def _kinds(node: Node) -> list[str]:
    return [c.element.type_name() for c in node.children]


class TestRewriteKeep(unittest.TestCase):
    def test_keep_all(self):
        root = Node(
            Document(),
            [_para("a"), Node(BlockQuote(), [_para("b")]), _para("c")],
        )
        snapshot = copy_tree(root)
        children = list(root.children)
        visited: list[Node] = []

        def _visit(node: Node) -> Action:
            visited.append(node)
            return Keep()

        result = rewrite(root, _visit)
        self.assertIs(result, root)
        self.assertEqual(root.children, children)
        self.assertTrue(trees_equal(root, snapshot))
        # pre-order, every node once
        self.assertEqual(len(visited), 8)
        self.assertIs(visited[0], root)
        self.assertIs(visited[1], children[0])

    def test_returning_node_itself_keeps(self):
        root = Node(Document(), [_para("a")])
        para = root.children[0]
        rewrite(root, lambda n: n)
        self.assertIs(root.children[0], para)
        self.assertEqual(para.children[0].element.text, "a")

    def test_visitor_sees_attached_node(self):
        root = Node(Document(), [_para("a"), Node(BlockQuote(), [_para("b")])])

        def _visit(node: Node) -> Action:
            if node is not root:
                self.assertIsNotNone(node.parent)
                self.assertTrue(any(c is node for c in node.parent.children))
            if isinstance(node.element, ThematicBreak):
                return Delete()
            return Keep()

        rewrite(root, _visit)


class TestRewriteReplace(unittest.TestCase):
    def test_replace_node(self):
        root = Node(
            Document(), [_para("a"), Node(ThematicBreak()), _para("b")]
        )
        a, _, b = root.children

        def _visit(node: Node) -> Action:
            match node.element:
                case ThematicBreak():
                    return Replace(_html("<hr/>"))
                case _:
                    return Keep()

        rewrite(root, _visit)
        self.assertEqual(_kinds(root), ["Paragraph", "HTMLBlock", "Paragraph"])
        self.assertEqual(root.children[1].element.html, "<hr/>")
        self.assertIs(root.children[0], a)
        self.assertIs(root.children[2], b)
        self.assertIs(root.children[1].parent, root)

    def test_replace_by_returning_node(self):
        root = Node(Document(), [Node(ThematicBreak())])
        rewrite(
            root,
            lambda n: (
                _html("<hr/>") if isinstance(n.element, ThematicBreak) else n
            ),
        )
        self.assertIsInstance(root.children[0].element, HTMLBlock)

    def test_replace_descend(self):
        def _make(descend: bool) -> list[str]:
            root = Node(Document(), [Node(ThematicBreak())])
            visited: list[str] = []

            def _visit(node: Node) -> Action:
                visited.append(node.element.type_name())
                if isinstance(node.element, ThematicBreak):
                    return Replace(
                        Node(BlockQuote(), [_para("inside")]), descend
                    )
                return Keep()

            rewrite(root, _visit)
            return visited

        self.assertEqual(
            _make(True), ["Document", "ThematicBreak", "Paragraph", "Text"]
        )
        self.assertEqual(_make(False), ["Document", "ThematicBreak"])

    def test_replacement_not_offered_again(self):
        root = Node(Document(), [_para("a")])
        count = {'paragraphs': 0}

        def _visit(node: Node) -> Action:
            if isinstance(node.element, Paragraph):
                count['paragraphs'] += 1
                return Replace(_para("again"))
            return Keep()

        rewrite(root, _visit)
        self.assertEqual(count['paragraphs'], 1)
        self.assertEqual(root.children[0].children[0].element.text, "again")


class TestRewriteSplice(unittest.TestCase):
    def test_splice_sequence(self):
        root = Node(Document(), [_para("a"), Node(ThematicBreak()), _para("b")])
        a, _, b = root.children
        new_nodes = [_html("<div>"), _para("x"), _html("</div>")]

        def _visit(node: Node) -> Action:
            if isinstance(node.element, ThematicBreak):
                return Splice(new_nodes)
            return Keep()

        rewrite(root, _visit)
        self.assertEqual(root.children, [a, *new_nodes, b])
        for node in new_nodes:
            self.assertIs(node.parent, root)

    def test_spliced_nodes_are_visited(self):
        root = Node(Document(), [Node(ThematicBreak())])
        spliced = [_para("x"), Node(ThematicBreak())]
        visited: list[Node] = []

        def _visit(node: Node) -> Action:
            visited.append(node)
            if node is root.children[0] and node not in spliced:
                return Splice(spliced)
            if node is spliced[1]:
                return Delete()
            return Keep()

        rewrite(root, _visit)
        self.assertIn(spliced[0], visited)
        self.assertIn(spliced[0].children[0], visited)
        self.assertIn(spliced[1], visited)
        self.assertEqual(root.children, [spliced[0]])

    def test_final_nodes_not_visited(self):
        root = Node(Document(), [Node(ThematicBreak())])
        opening, body, closing = _html("<div>"), _para("x"), _html("</div>")
        visited: list[Node] = []

        def _visit(node: Node) -> Action:
            visited.append(node)
            if isinstance(node.element, ThematicBreak):
                return Splice([opening, body, closing], final=[opening, closing])
            return Keep()

        rewrite(root, _visit)
        self.assertEqual(root.children, [opening, body, closing])
        self.assertNotIn(opening, visited)
        self.assertNotIn(closing, visited)
        self.assertIn(body, visited)

    def test_all_final(self):
        root = Node(Document(), [Node(ThematicBreak())])
        body = _para("x")
        visited: list[Node] = []

        def _visit(node: Node) -> Action:
            visited.append(node)
            if isinstance(node.element, ThematicBreak):
                return Splice([body], final=True)
            return Keep()

        rewrite(root, _visit)
        self.assertEqual(root.children, [body])
        self.assertNotIn(body, visited)
        self.assertNotIn(body.children[0], visited)

    def test_splice_by_returning_list(self):
        root = Node(Document(), [Node(ThematicBreak())])
        rewrite(
            root,
            lambda n: (
                [_html("<hr/>"), _html("<hr/>")]
                if isinstance(n.element, ThematicBreak)
                else n
            ),
        )
        self.assertEqual(_kinds(root), ["HTMLBlock", "HTMLBlock"])

    def test_wrap_terminates(self):
        # the visited node is returned again within the splice
        root = Node(Document(), [Node(CodeBlock(info="python"))])
        code = root.children[0]

        def _visit(node: Node) -> Action:
            if isinstance(node.element, CodeBlock):
                return Splice([_html("<pre>"), node, _html("</pre>")])
            return Keep()

        rewrite(root, _visit)
        self.assertEqual(_kinds(root), ["HTMLBlock", "CodeBlock", "HTMLBlock"])
        self.assertIs(root.children[1], code)

    def test_splice_node_from_ancestor(self):
        # x sits before the admonition, in the children of the root
        x, p, y = _para("x"), _para("p"), _para("y")
        admonition = Node(Admonition(category="note"), [p])
        root = Node(Document(), [x, admonition, y])
        visited: list[Node] = []

        def _visit(node: Node) -> Action:
            visited.append(node)
            if node is p:
                return Splice([x, p])
            return Keep()

        rewrite(root, _visit)
        self.assertEqual(root.children, [admonition, y])
        self.assertEqual(admonition.children, [x, p])
        self.assertIs(x.parent, admonition)
        self.assertIn(y, visited)
        self.assertIn(y.children[0], visited)
        # every node is offered once
        self.assertEqual(len(visited), len({id(n) for n in visited}))
        self.assertEqual(len(visited), 8)

    def test_replace_with_node_from_ancestor(self):
        x, p, y = _para("x"), _para("p"), _para("y")
        quote = Node(BlockQuote(), [p])
        root = Node(Document(), [x, quote, y])
        visited: list[Node] = []

        def _visit(node: Node) -> Action:
            visited.append(node)
            if node is p:
                return Replace(x)
            return Keep()

        rewrite(root, _visit)
        self.assertEqual(root.children, [quote, y])
        self.assertEqual(quote.children, [x])
        self.assertIn(y, visited)
        self.assertEqual(len(visited), len({id(n) for n in visited}))

    def test_splice_node_from_ancestor_not_yet_visited(self):
        p, y, z = _para("p"), _para("y"), _para("z")
        admonition = Node(Admonition(category="note"), [p])
        root = Node(Document(), [admonition, y, z])
        visited: list[Node] = []

        def _visit(node: Node) -> Action:
            visited.append(node)
            if node is p:
                return Splice([p, z])
            return Keep()

        rewrite(root, _visit)
        self.assertEqual(root.children, [admonition, y])
        self.assertEqual(admonition.children, [p, z])
        self.assertIn(y, visited)
        self.assertIn(z, visited)
        self.assertEqual(len(visited), len({id(n) for n in visited}))

    def test_unwrap_moves_children(self):
        root = Node(
            Document(),
            [Node(BlockQuote(), [_para("a"), _para("b")]), _para("c")],
        )
        quote = root.children[0]
        a, b = quote.children
        visited: list[Node] = []

        def _visit(node: Node) -> Action:
            visited.append(node)
            if isinstance(node.element, BlockQuote):
                return list(node.children)
            return Keep()

        rewrite(root, _visit)
        self.assertEqual(_kinds(root), ["Paragraph"] * 3)
        self.assertIs(root.children[0], a)
        self.assertIs(root.children[1], b)
        self.assertIs(a.parent, root)
        self.assertEqual(quote.count_children(), 0)
        self.assertIn(a.children[0], visited)


class TestRewriteDelete(unittest.TestCase):
    def test_delete_consecutive(self):
        root = Node(
            Document(),
            [
                Node(ThematicBreak()),
                Node(ThematicBreak()),
                _para("keep"),
                Node(ThematicBreak()),
            ],
        )
        keep = root.children[2]
        rewrite(
            root,
            lambda n: None if isinstance(n.element, ThematicBreak) else n,
        )
        self.assertEqual(root.children, [keep])

    def test_delete_action(self):
        root = Node(Document(), [_para("a"), Node(BlockQuote(), [_para("b")])])
        para = root.children[0]
        visited: list[Node] = []

        def _visit(node: Node) -> Action:
            visited.append(node)
            if isinstance(node.element, BlockQuote):
                return Delete()
            return Keep()

        rewrite(root, _visit)
        self.assertEqual(root.children, [para])
        # the children of a deleted node are not visited
        self.assertEqual(len(visited), 4)

    def test_empty_splice_deletes(self):
        root = Node(Document(), [Node(ThematicBreak())])
        rewrite(
            root,
            lambda n: Splice() if isinstance(n.element, ThematicBreak) else Keep(),
        )
        self.assertEqual(root.children, [])


class TestRewriteRoot(unittest.TestCase):
    def test_replace_root(self):
        root = Node(Document(), [_para("a")])
        new_root = Node(Document(), [_para("b")])
        result = rewrite(
            root,
            lambda n: Replace(new_root) if n is root else Keep(),
        )
        self.assertIs(result, new_root)
        self.assertIsNone(result.parent)

    def test_splice_single_root(self):
        root = Node(Document())
        new_root = Node(Document())
        result = rewrite(root, lambda n: [new_root] if n is root else n)
        self.assertIs(result, new_root)

    def test_root_cannot_be_deleted(self):
        root = Node(Document(), [_para("a")])
        with self.assertRaises(StructuralViolation):
            rewrite(root, lambda n: None)
        with self.assertRaises(StructuralViolation):
            rewrite(
                root,
                lambda n: [Node(Document()), Node(Document())] if n is root else n,
            )


class TestRewriteErrors(unittest.TestCase):
    def test_illegal_replacement(self):
        root = Node(Document(), [_para("a"), _para("b")])
        first, second = root.children

        def _visit(node: Node) -> Action:
            match node.element:
                case Text(text="a"):
                    return Replace(Node(Text(text="A")))
                case Text(text="b"):
                    return Replace(_para("nested"))
                case _:
                    return Keep()

        with self.assertRaises(StructuralViolation):
            rewrite(root, _visit)
        # replacements before the error stay, the offending one is
        # not applied
        self.assertEqual(first.children[0].element.text, "A")
        self.assertEqual(second.children[0].element.text, "b")
        self.assertIs(second.children[0].parent, second)

    def test_cycle_rejected(self):
        root = Node(Document(), [Node(BlockQuote(), [_para("a")])])
        quote = root.children[0]

        def _visit(node: Node) -> Action:
            if isinstance(node.element, Paragraph):
                return Replace(quote)
            return Keep()

        with self.assertRaises(StructuralViolation):
            rewrite(root, _visit)

    def test_unrecognized_result(self):
        root = Node(Document(), [_para("a")])
        with self.assertRaises(TypeMismatch):
            rewrite(root, lambda n: n if n is root else 42)  # type: ignore

    def test_heading_content(self):
        root = Node(Document(), [Node(Heading(), [Node(Text(text="t"))])])
        with self.assertRaises(StructuralViolation):
            rewrite(
                root,
                lambda n: (
                    Node(CodeBlock()) if isinstance(n.element, Text) else n
                ),
            )


if __name__ == "__main__":
    unittest.main()
