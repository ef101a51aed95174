"""
Transformation of "tabs" admonitions into tabbed HTML.

Tabs are written in markdown as an admonition with category "tabs",
using headings inside the admonition as the tab labels:

```markdown
!!! tabs "Install"

    ## Linux

    ```bash
    sudo apt-get install mypackage
    ```

    ## macOS

    ```bash
    brew install mypackage
    ```
```

`transform_tabs_admonitions` replaces each such admonition by a flat
run of raw HTML markers interleaved with the original content nodes:

    <div class="doc-tabs">
    <div class="doc-tabs__labels">
    <button class="doc-tabs__label" data-tab="1">Linux</button>
    <button class="doc-tabs__label" data-tab="2">macOS</button>
    </div>
    <div class="doc-tabs__panel" data-tab="1">
    (the original code block for Linux)
    </div>
    <div class="doc-tabs__panel" data-tab="2">
    (the original code block for macOS)
    </div>
    </div>

Each marker is a separate HTMLBlock node. The content nodes are not
embedded in the HTML: they are moved, unmodified and by reference,
between the markers, so that the renderer still sees real code
blocks, lists, etc. and can process them (e.g. for syntax
highlighting). An admonition without headings is left unchanged.

`transform_tabs` implements an alternative design, where each tabs
admonition becomes a single HTMLBlock with radio-input markup, and a
copy of the admonition content is stashed in the metadata of the
block. `preserve_tab_content` retrieves the stashed content.
"""

import re

from .elements import Admonition, BlockQuote, Heading, HTMLBlock
from .tree import Node, copy_tree
from .rewrite import Action, Delete, Keep, Replace, Splice, rewrite
from .treeutils import collect_plain_text
from .errors import TypeMismatch
from doctree.config.config import Settings, TabsSettings
from doctree.utils.logging import LoggerBase, get_logger

TABS_CATEGORY = "tabs"

# Markers of the interleaved tabs markup
CONTAINER_OPEN = '<div class="doc-tabs">'
LABELS_OPEN = '<div class="doc-tabs__labels">'
LABEL_BUTTON = '<button class="doc-tabs__label" data-tab="{index}">{label}</button>'
PANEL_OPEN = '<div class="doc-tabs__panel" data-tab="{index}">'
CLOSE_DIV = '</div>'


def escape_html(text: str) -> str:
    """
    Escape the HTML special characters of text.

    The substitutions are applied in this order: & -> &amp;,
    < -> &lt;, > -> &gt;, " -> &quot;, ' -> &#39;. Each character
    of text is escaped exactly once.

    Example:
        ```python
        escape_html("C++ <dangerous>")  # "C++ &lt;dangerous&gt;"
        ```
    """
    text = text.replace("&", "&amp;")
    text = text.replace("<", "&lt;")
    text = text.replace(">", "&gt;")
    text = text.replace('"', "&quot;")
    text = text.replace("'", "&#39;")
    return text


def is_tabs_admonition(node: Node, category: str = TABS_CATEGORY) -> bool:
    """True if node is an admonition of the given category."""
    return (
        isinstance(node.element, Admonition)
        and node.element.category == category
    )


def split_panels(
    node: Node,
) -> tuple[list[str], list[list[Node]]] | None:
    """
    Split the children of a tabs admonition into panels, using the
    headings as delimiters. The label of each panel is the plain text
    of its heading, HTML-escaped. Content that precedes the first
    heading goes to the first panel.

    Args:
        node: a tabs admonition

    Returns:
        a tuple (labels, panels), where panels is a list of lists of
            (references to) the content nodes of each panel, or None
            if the admonition contains no heading.
    """
    labels: list[str] = []
    panels: list[list[Node]] = []
    current_panel: list[Node] = []
    seen_heading = False

    for child in node.children:
        if isinstance(child.element, Heading):
            labels.append(escape_html(collect_plain_text(child)))
            if seen_heading:
                panels.append(current_panel)
                current_panel = []
            else:
                seen_heading = True
        else:
            current_panel.append(child)

    if not seen_heading:
        return None
    panels.append(current_panel)
    return labels, panels


def _marker(html: str) -> Node:
    return Node(HTMLBlock(html=html))


def build_tabs_markup(
    labels: list[str], panels: list[list[Node]]
) -> tuple[list[Node], list[Node]]:
    """
    Build the interleaved sequence of markers and content nodes for
    a tab container. Panels are numbered from 1.

    Args:
        labels: the escaped labels of the panels
        panels: the content nodes of the panels

    Returns:
        a tuple with the whole sequence of nodes, and the list of the
            synthetic marker nodes it contains.
    """
    markers: list[Node] = []
    result: list[Node] = []

    def _emit(html: str) -> None:
        marker = _marker(html)
        markers.append(marker)
        result.append(marker)

    _emit(CONTAINER_OPEN)
    _emit(LABELS_OPEN)
    for index, label in enumerate(labels, start=1):
        _emit(LABEL_BUTTON.format(index=index, label=label))
    _emit(CLOSE_DIV)

    for index, panel_nodes in enumerate(panels, start=1):
        _emit(PANEL_OPEN.format(index=index))
        result.extend(panel_nodes)
        _emit(CLOSE_DIV)

    _emit(CLOSE_DIV)
    return result, markers


def transform_tabs_admonitions(
    root: Node,
    *,
    group_consecutive: bool = False,
    category: str = TABS_CATEGORY,
    logger: LoggerBase = get_logger(__name__),
) -> Node:
    """
    Replace all admonitions of the tabs category by a run of HTML
    markers and the original content nodes (see module documentation).
    The tree is modified in place.

    Args:
        root: the root of the tree
        group_consecutive: if True, a run of adjacent tabs admonitions
            is merged into a single tab container, with the panels
            numbered across the whole run. If False (default), each
            admonition gives its own container, numbered from 1.
        category: the admonition category that marks tabs
        logger: a logger to report the rewritten admonitions, and
            the tabs admonitions left unchanged for lack of headings

    Returns:
        the root of the tree

    Raises:
        StructuralViolation: if the admonition content cannot be
            placed in the parent of the admonition
    """
    absorbed: dict[int, Node] = {}
    counts = {'admonitions': 0, 'containers': 0}

    def _collect_run(node: Node) -> list[Node]:
        run = [node]
        sibling = node.next_sibling()
        while (
            sibling is not None
            and is_tabs_admonition(sibling, category)
            and split_panels(sibling) is not None
        ):
            run.append(sibling)
            sibling = sibling.next_sibling()
        return run

    def _visit(node: Node) -> Action:
        if id(node) in absorbed:
            # content already moved into the container of the run
            return Delete()
        if not is_tabs_admonition(node, category):
            return Keep()
        if split_panels(node) is None:
            logger.warning(
                f"Tabs admonition '{node.element.title}' contains no "  # type: ignore
                + "heading to use as tab label. Left unchanged."
            )
            return Keep()

        run = _collect_run(node) if group_consecutive else [node]
        labels: list[str] = []
        panels: list[list[Node]] = []
        for admonition in run:
            split = split_panels(admonition)
            if split is None:
                raise RuntimeError(
                    "Unreachable code reached: tabs admonition "
                    + "without headings in run"
                )
            labels.extend(split[0])
            panels.extend(split[1])
        for admonition in run[1:]:
            absorbed[id(admonition)] = admonition

        counts['admonitions'] += len(run)
        counts['containers'] += 1
        nodes, markers = build_tabs_markup(labels, panels)
        return Splice(nodes, final=markers)

    root = rewrite(root, _visit)
    if counts['admonitions']:
        logger.info(
            f"Transformed {counts['admonitions']} tabs admonition(s) "
            + f"into {counts['containers']} tab container(s)."
        )
    return root


# metadata-stash design ------------------------------------------


def generate_tab_id(title: str) -> str:
    """
    Generate an HTML-safe id from a tab title.

    Example:
        ```python
        generate_tab_id("Python")  # "tab-python"
        generate_tab_id("C ++")    # "tab-c"
        ```
    """
    sanitized = title.lower()
    sanitized = re.sub(r"[^\w\s-]", "", sanitized)
    sanitized = re.sub(r"\s+", "-", sanitized)
    sanitized = re.sub(r"-+", "-", sanitized)
    sanitized = sanitized.strip("-")
    return "tab-" + sanitized[:50]


def _generate_tab_html(
    title: str, tab_id: str, group_id: str, checked: bool
) -> str:
    escaped_title = escape_html(title)
    checked_attr = " checked" if checked else ""
    return (
        f'<div class="doc-tabs" data-tab-group="{group_id}">\n'
        + f'  <input class="doc-tabs-input" type="radio" '
        + f'name="{group_id}" id="{tab_id}"{checked_attr}>\n'
        + f'  <label class="doc-tabs-label" for="{tab_id}">'
        + f'{escaped_title}</label>\n'
        + f'  <div class="doc-tabs-content" data-tab-id="{tab_id}">\n'
        + '    <!-- Tab content will be rendered here -->\n'
        + '  </div>\n'
        + '</div>'
    )


def _create_tab_htmlblock(
    node: Node, group_id: str, checked: bool
) -> Node:
    title: str = node.element.title  # type: ignore
    tab_id = generate_tab_id(title)
    html_block = _marker(_generate_tab_html(title, tab_id, group_id, checked))

    # the content is kept as a tree, wrapped in a block quote
    content = Node(BlockQuote())
    for child in node.children:
        content.append_child(copy_tree(child))

    html_block.meta = {
        'tab_title': title,
        'tab_id': tab_id,
        'tab_group': group_id,
        'content': content,
    }
    return html_block


def transform_tabs(
    root: Node,
    *,
    group_consecutive: bool = True,
    category: str = TABS_CATEGORY,
    logger: LoggerBase = get_logger(__name__),
) -> Node:
    """
    Replace each admonition of the tabs category by a single HTMLBlock
    with the markup of one tab. The title of the admonition is the
    tab label, and a copy of the admonition content is stored in the
    metadata of the block under the key 'content' (a BlockQuote node),
    together with 'tab_title', 'tab_id', and 'tab_group'. The tree is
    modified in place.

    Args:
        root: the root of the tree
        group_consecutive: if True (default), adjacent tabs
            admonitions are given the same tab group, so that they
            form a single set of tabs. Otherwise, each admonition
            forms a group of its own.
        category: the admonition category that marks tabs
        logger: a logger to report the rewritten admonitions

    Returns:
        the root of the tree

    Note:
        tabs admonitions nested in the content are copied as they
        are, and are not transformed.
    """
    counts = {'tabs': 0, 'groups': 0}

    def _visit(node: Node) -> Action:
        if not is_tabs_admonition(node, category):
            return Keep()

        previous = node.previous_sibling()
        if (
            group_consecutive
            and previous is not None
            and 'tab_group' in previous.meta
        ):
            group_id: str = previous.meta['tab_group']
            checked = False
        else:
            counts['groups'] += 1
            group_id = f"tabs-group-{counts['groups']}"
            checked = True

        counts['tabs'] += 1
        return Replace(
            _create_tab_htmlblock(node, group_id, checked), descend=False
        )

    root = rewrite(root, _visit)
    if counts['tabs']:
        logger.info(
            f"Transformed {counts['tabs']} tabs admonition(s) into "
            + f"{counts['groups']} tab group(s)."
        )
    return root


def preserve_tab_content(node: Node) -> Node | None:
    """
    Retrieve the content stashed by transform_tabs in a tab HTMLBlock.

    Args:
        node: a node produced by transform_tabs

    Returns:
        the BlockQuote node with the copy of the tab content, or None
            if node is not such a tab block.

    Example:
        ```python
        for block in get_nodes(root, HTMLBlock):
            content = preserve_tab_content(block)
            if content is not None:
                render_node(content)
        ```
    """
    if isinstance(node.element, HTMLBlock):
        content = node.meta.get('content')
        if isinstance(content, Node):
            return content
    return None


# entry point ------------------------------------------------------


def transform_document(
    root: Node,
    settings: Settings | TabsSettings | None = None,
    logger: LoggerBase = get_logger(__name__),
) -> Node:
    """
    Transform the tabs admonitions of a document as configured.

    Args:
        root: the root of the tree
        settings: the tabs settings, or the package settings. If
            None, the settings are read from the configuration file
            and the environment.
        logger: a logger passed to the transformation

    Returns:
        the root of the tree
    """
    match settings:
        case None:
            tabs_settings = Settings().tabs
        case Settings():
            tabs_settings = settings.tabs
        case TabsSettings():
            tabs_settings = settings
        case _:
            raise TypeMismatch(
                "transform_document: invalid settings object",
                "Settings or TabsSettings",
                type(settings).__name__,
            )

    match tabs_settings.strategy:
        case 'interleaved':
            return transform_tabs_admonitions(
                root,
                group_consecutive=tabs_settings.group_consecutive,
                category=tabs_settings.category,
                logger=logger,
            )
        case 'stash':
            return transform_tabs(
                root,
                group_consecutive=tabs_settings.group_consecutive,
                category=tabs_settings.category,
                logger=logger,
            )
