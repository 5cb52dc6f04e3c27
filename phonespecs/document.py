"""Queryable document tree over BeautifulSoup.

Extraction code only talks to :class:`DocumentTree`, so it never depends on
how the markup was parsed and can be exercised with small synthetic pages.
"""

from typing import List, Optional, Union

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__ = ["DocumentTree", "Node"]

Node = Tag


class DocumentTree:
    """Selector-addressable wrapper around a parsed HTML document."""

    def __init__(self, source: Union[str, bytes, BeautifulSoup], parser: str = "html.parser"):
        if isinstance(source, BeautifulSoup):
            self.soup = source
        else:
            self.soup = BeautifulSoup(source, parser)

    def select_all(self, selector: str, within: Optional[Node] = None) -> List[Node]:
        """All elements matching ``selector``, in document order."""
        root = within if within is not None else self.soup
        return list(root.select(selector))

    def select_first(self, selector: str, within: Optional[Node] = None) -> Optional[Node]:
        """First element (document order) matching any part of ``selector``."""
        root = within if within is not None else self.soup
        return root.select_one(selector)

    @staticmethod
    def text(node: Optional[Node]) -> Optional[str]:
        """Raw concatenated text of ``node``; ``None`` for a missing node."""
        if node is None:
            return None
        return node.get_text()

    @staticmethod
    def attr(node: Optional[Node], name: str) -> Optional[str]:
        """Attribute value as a string (multi-valued attributes are joined)."""
        if node is None:
            return None
        value = node.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    @staticmethod
    def closest(node: Node, tag: str) -> Optional[Node]:
        """Nearest ancestor of ``node`` (or ``node`` itself) named ``tag``."""
        if node.name == tag:
            return node
        return node.find_parent(tag)
