"""This module defines the element kinds that form the payload of the
nodes of a document tree.

The set of element kinds is closed. Each kind is a pydantic model
carrying its own fields and a 'type' discriminator, in the same way
as the blocks of a parsed markdown document. The kinds fall into
three families:

- block elements: Document, Heading, Paragraph, CodeBlock,
    Admonition, BlockQuote, HTMLBlock, ThematicBreak, List, Item,
    FootnoteDefinition, DisplayMath, Table
- table-structural elements: TableHeader, TableBody, TableRow,
    TableCell
- inline elements: Text, Code, Emph, Strong, Link, Image,
    HTMLInline, InlineMath, FootnoteLink, LineBreak, SoftBreak,
    Backslash

Each element answers the capability queries is_block(), is_inline(),
is_container(), and can_contain(child). The tree operations use
can_contain to refuse illegal parent/child combinations:

```python
heading = Heading(level=2)
heading.can_contain(Text(text="Python"))      # True
heading.can_contain(Paragraph())              # False
Table().can_contain(TableBody())              # True
Document().can_contain(TableRow())            # False
```
"""

from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field

Alignment = Literal['left', 'center', 'right', 'default']


class ElementBase(BaseModel):
    """Common interface of all element kinds. Leaf elements accept
    no children."""

    model_config = ConfigDict(extra='forbid')

    def is_block(self) -> bool:
        return False

    def is_inline(self) -> bool:
        return False

    def is_container(self) -> bool:
        return False

    def can_contain(self, child: 'ElementBase') -> bool:
        """Whether child is a legal element for a direct child node
        of a node with this element."""
        return False

    def type_name(self) -> str:
        return self.__class__.__name__

    def get_info(self) -> str:
        """Printable element kind and fields."""
        fields = self.model_dump(exclude={'type'})
        if not fields:
            return self.type_name()
        args = ", ".join(f"{k}={v!r}" for k, v in fields.items())
        return f"{self.type_name()}({args})"

    def deep_copy(self) -> Self:
        return self.model_copy(deep=True)


class BlockElement(ElementBase):
    def is_block(self) -> bool:
        return True


class BlockContainer(BlockElement):
    """A block that contains other blocks."""

    def is_container(self) -> bool:
        return True

    def can_contain(self, child: ElementBase) -> bool:
        return child.is_block()


class InlineContentBlock(BlockElement):
    """A block whose children are inline elements."""

    def is_container(self) -> bool:
        return True

    def can_contain(self, child: ElementBase) -> bool:
        return child.is_inline()


class InlineElement(ElementBase):
    def is_inline(self) -> bool:
        return True


class InlineContainer(InlineElement):
    def is_container(self) -> bool:
        return True

    def can_contain(self, child: ElementBase) -> bool:
        return child.is_inline()


class TableElement(ElementBase):
    """The structural parts of a table. These are neither blocks
    nor inlines and may only appear in their fixed position."""

    def is_container(self) -> bool:
        return True


# block elements -----------------------------------------------------


class Document(BlockContainer):
    """The root of a document tree."""

    type: Literal['document'] = 'document'


class Heading(InlineContentBlock):
    level: int = Field(default=1, ge=1, le=6)
    type: Literal['heading'] = 'heading'


class Paragraph(InlineContentBlock):
    type: Literal['paragraph'] = 'paragraph'


class CodeBlock(BlockElement):
    """A fenced or indented code block. The info string carries the
    language tag."""

    info: str = ""
    code: str = ""
    type: Literal['codeblock'] = 'codeblock'


class Admonition(BlockContainer):
    category: str
    title: str = ""
    type: Literal['admonition'] = 'admonition'


class BlockQuote(BlockContainer):
    type: Literal['blockquote'] = 'blockquote'


class HTMLBlock(BlockElement):
    """Raw HTML, passed verbatim to the renderer."""

    html: str = ""
    type: Literal['htmlblock'] = 'htmlblock'


class ThematicBreak(BlockElement):
    type: Literal['thematicbreak'] = 'thematicbreak'


class List(BlockElement):
    list_type: Literal['bullet', 'ordered'] = 'bullet'
    tight: bool = True
    type: Literal['list'] = 'list'

    def is_container(self) -> bool:
        return True

    def can_contain(self, child: ElementBase) -> bool:
        return isinstance(child, Item)


class Item(BlockContainer):
    type: Literal['item'] = 'item'


class FootnoteDefinition(BlockContainer):
    id: str
    type: Literal['footnotedefinition'] = 'footnotedefinition'


class DisplayMath(BlockElement):
    math: str = ""
    type: Literal['displaymath'] = 'displaymath'


class Table(BlockElement):
    """A table. Its children are a TableHeader and a TableBody, which
    hold the rows."""

    spec: list[Alignment] = []
    type: Literal['table'] = 'table'

    def is_container(self) -> bool:
        return True

    def can_contain(self, child: ElementBase) -> bool:
        return isinstance(child, (TableHeader, TableBody))


# table-structural elements ------------------------------------------


class TableHeader(TableElement):
    type: Literal['tableheader'] = 'tableheader'

    def can_contain(self, child: ElementBase) -> bool:
        return isinstance(child, TableRow)


class TableBody(TableElement):
    type: Literal['tablebody'] = 'tablebody'

    def can_contain(self, child: ElementBase) -> bool:
        return isinstance(child, TableRow)


class TableRow(TableElement):
    type: Literal['tablerow'] = 'tablerow'

    def can_contain(self, child: ElementBase) -> bool:
        return isinstance(child, TableCell)


class TableCell(TableElement):
    align: Alignment = 'default'
    header: bool = False
    column: int = Field(default=0, ge=0)
    type: Literal['tablecell'] = 'tablecell'

    def can_contain(self, child: ElementBase) -> bool:
        return child.is_inline()


# inline elements ----------------------------------------------------


class Text(InlineElement):
    text: str = ""
    type: Literal['text'] = 'text'


class Code(InlineElement):
    """A code span."""

    code: str = ""
    type: Literal['code'] = 'code'


class Emph(InlineContainer):
    type: Literal['emph'] = 'emph'


class Strong(InlineContainer):
    type: Literal['strong'] = 'strong'


class Link(InlineContainer):
    destination: str = ""
    title: str = ""
    type: Literal['link'] = 'link'


class Image(InlineContainer):
    """An image. The children are the alt text."""

    destination: str = ""
    title: str = ""
    type: Literal['image'] = 'image'


class HTMLInline(InlineElement):
    html: str = ""
    type: Literal['htmlinline'] = 'htmlinline'


class InlineMath(InlineElement):
    math: str = ""
    type: Literal['inlinemath'] = 'inlinemath'


class FootnoteLink(InlineElement):
    id: str
    type: Literal['footnotelink'] = 'footnotelink'


class LineBreak(InlineElement):
    type: Literal['linebreak'] = 'linebreak'


class SoftBreak(InlineElement):
    type: Literal['softbreak'] = 'softbreak'


class Backslash(InlineElement):
    type: Literal['backslash'] = 'backslash'


Element = (
    Document
    | Heading
    | Paragraph
    | CodeBlock
    | Admonition
    | BlockQuote
    | HTMLBlock
    | ThematicBreak
    | List
    | Item
    | FootnoteDefinition
    | DisplayMath
    | Table
    | TableHeader
    | TableBody
    | TableRow
    | TableCell
    | Text
    | Code
    | Emph
    | Strong
    | Link
    | Image
    | HTMLInline
    | InlineMath
    | FootnoteLink
    | LineBreak
    | SoftBreak
    | Backslash
)
