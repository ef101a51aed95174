# pyright: reportUnusedImport=false
# flake8: noqa

from .errors import (
    DocTreeError,
    StructuralViolation,
    TypeMismatch,
    RangeError,
)

from .elements import (
    ElementBase,
    Element,
    Document,
    Heading,
    Paragraph,
    CodeBlock,
    Admonition,
    BlockQuote,
    HTMLBlock,
    ThematicBreak,
    List,
    Item,
    FootnoteDefinition,
    DisplayMath,
    Table,
    TableHeader,
    TableBody,
    TableRow,
    TableCell,
    Text,
    Code,
    Emph,
    Strong,
    Link,
    Image,
    HTMLInline,
    InlineMath,
    FootnoteLink,
    LineBreak,
    SoftBreak,
    Backslash,
)

from .tree import (
    Node,
    check_child_element,
    copy_tree,
    pre_order_traversal,
    post_order_traversal,
    traverse_tree,
    traverse_tree_elementtype,
    fold_tree,
)

from .rewrite import (
    Action,
    Keep,
    Replace,
    Splice,
    Delete,
    rewrite,
)

from .tables import (
    table_rows,
    table_size,
)

from .treeutils import (
    collect_plain_text,
    collect_text,
    get_nodes,
    get_nodes_with_meta,
    count_nodes,
    trees_equal,
    get_tree_info,
    print_tree_info,
)

from .tabs import (
    escape_html,
    is_tabs_admonition,
    split_panels,
    transform_tabs_admonitions,
    transform_tabs,
    transform_document,
    preserve_tab_content,
)
