"""UI tree query surface used by the target locator.

Hosts expose their rendered editor through ``UINode``/``UITree``. The
in-memory ``ElementNode``/``ElementTree`` pair implements the same surface
for headless use and tests.
"""

from __future__ import annotations

from typing import Iterator, Protocol

# Content-role markers (data attributes) the editor renders
ATTR_SKILL_CATEGORY_ID = "data-skill-category-id"
ATTR_ITEM_ID = "data-item-id"
ATTR_CONTENT = "data-content"
ATTR_ROLE = "data-role"
ATTR_ACTION = "data-action"
ATTR_SECTION = "data-section"

CONTENT_SKILL_LIST = "skill-list"
ROLE_SKILL_BADGE = "skill-badge"

TEXT_INPUT_TYPES = ("text", "email")
INTERACTIVE_TAGS = ("button", "input", "textarea", "a")


class UINode(Protocol):
    tag: str
    value: str
    style: dict[str, str]
    tab_index: int

    def get_attribute(self, name: str) -> str | None: ...

    def has_class(self, name: str) -> bool: ...

    @property
    def text_content(self) -> str: ...

    @property
    def is_text_field(self) -> bool: ...

    def set_selection_range(self, start: int, end: int) -> None: ...

    def select_all(self) -> None: ...

    def focus(self) -> None: ...

    def scroll_into_view(self) -> None: ...


class UITree(Protocol):
    def iter_nodes(self, within: UINode | None = None) -> Iterator[UINode]:
        """Nodes in document order; with ``within``, only its descendants."""
        ...

    def contains(self, node: UINode) -> bool: ...


class ElementNode:
    """A minimal DOM-like element."""

    def __init__(
        self,
        tag: str,
        *children: ElementNode,
        text: str = "",
        attrs: dict[str, str] | None = None,
        classes: tuple[str, ...] | list[str] = (),
        value: str = "",
        input_type: str = "text",
    ):
        self.tag = tag.lower()
        self.text = text
        self.attrs = dict(attrs or {})
        self.classes = set(classes)
        self.value = value
        self.input_type = input_type
        self.style: dict[str, str] = {}
        self.tab_index = -1
        self.parent: ElementNode | None = None
        self.children: list[ElementNode] = []
        self.selection: tuple[int, int] | None = None
        self.focused = False
        self.scrolled = False
        for child in children:
            self.append(child)

    def __repr__(self) -> str:
        return f"<{self.tag} {self.attrs}>"

    def append(self, child: ElementNode) -> ElementNode:
        child.parent = self
        self.children.append(child)
        return child

    def remove(self) -> None:
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None

    def get_attribute(self, name: str) -> str | None:
        return self.attrs.get(name)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    @property
    def text_content(self) -> str:
        if self.is_text_field:
            return self.value
        return self.text + "".join(child.text_content for child in self.children)

    @property
    def is_text_field(self) -> bool:
        return self.tag == "textarea" or (
            self.tag == "input" and self.input_type in TEXT_INPUT_TYPES
        )

    def set_selection_range(self, start: int, end: int) -> None:
        self.selection = (start, end)

    def select_all(self) -> None:
        self.selection = (0, len(self.value))

    def focus(self) -> None:
        self.focused = True

    def scroll_into_view(self) -> None:
        self.scrolled = True


class ElementTree:
    def __init__(self, root: ElementNode):
        self.root = root

    def iter_nodes(self, within: ElementNode | None = None) -> Iterator[ElementNode]:
        if within is None:
            yield self.root
            start = self.root
        else:
            start = within
        stack = list(reversed(start.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def contains(self, node: ElementNode) -> bool:
        while node is not None:
            if node is self.root:
                return True
            node = node.parent
        return False
