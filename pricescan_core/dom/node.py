"""
Structured node abstraction for price analysis

The analyzer only needs attribute lookup, class membership, children,
parent and text content. PriceNode captures that capability set;
SoupNode binds it to a BeautifulSoup tree.
"""

from abc import ABC, abstractmethod
from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, Tag


class PriceNode(ABC):
    """Abstract element seen by the DOM analyzer and site handlers"""

    @property
    @abstractmethod
    def tag_name(self) -> str:
        pass

    @abstractmethod
    def get_attribute(self, name: str) -> Optional[str]:
        pass

    @property
    @abstractmethod
    def attribute_names(self) -> List[str]:
        pass

    @property
    @abstractmethod
    def class_list(self) -> List[str]:
        pass

    @property
    @abstractmethod
    def children(self) -> List["PriceNode"]:
        """Element children only, in document order."""
        pass

    @property
    @abstractmethod
    def parent(self) -> Optional["PriceNode"]:
        pass

    @property
    @abstractmethod
    def text_content(self) -> str:
        pass

    @abstractmethod
    def text_fragments(self) -> List[str]:
        """Descendant text node values in document order."""
        pass

    def has_attribute(self, name: str) -> bool:
        return self.get_attribute(name) is not None

    def has_class(self, name: str) -> bool:
        return name in self.class_list

    @property
    def class_name(self) -> str:
        return " ".join(self.class_list)

    @property
    def element_id(self) -> str:
        return self.get_attribute("id") or ""

    @property
    def text(self) -> str:
        """Stripped text content"""
        return (self.text_content or "").strip()

    def descendants(self) -> Iterator["PriceNode"]:
        """Depth-first element descendants, excluding self."""
        for child in self.children:
            yield child
            yield from child.descendants()

    def find_by_class(self, name: str) -> Optional["PriceNode"]:
        for node in self.descendants():
            if node.has_class(name):
                return node
        return None

    def find_all_by_class(self, name: str) -> List["PriceNode"]:
        return [node for node in self.descendants() if node.has_class(name)]

    def find_all_by_tag(self, *tag_names: str) -> List["PriceNode"]:
        wanted = {t.lower() for t in tag_names}
        return [node for node in self.descendants() if node.tag_name in wanted]

    def closest_with_class(self, name: str) -> Optional["PriceNode"]:
        """Self or nearest ancestor carrying the class."""
        node: Optional[PriceNode] = self
        while node is not None:
            if node.has_class(name):
                return node
            node = node.parent
        return None

    def __repr__(self) -> str:
        classes = "." + ".".join(self.class_list) if self.class_list else ""
        return f"<{self.__class__.__name__} {self.tag_name}{classes}>"


class SoupNode(PriceNode):
    """PriceNode over a BeautifulSoup Tag"""

    def __init__(self, tag: Tag):
        if not isinstance(tag, Tag):
            raise TypeError(f"SoupNode wraps a bs4 Tag, got {type(tag).__name__}")
        self._tag = tag

    @property
    def tag(self) -> Tag:
        return self._tag

    @property
    def tag_name(self) -> str:
        return (self._tag.name or "").lower()

    def get_attribute(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            return " ".join(value)
        return str(value)

    @property
    def attribute_names(self) -> List[str]:
        return list(self._tag.attrs.keys())

    @property
    def class_list(self) -> List[str]:
        value = self._tag.get("class")
        if not value:
            return []
        if isinstance(value, str):
            return value.split()
        return list(value)

    @property
    def children(self) -> List[PriceNode]:
        return [SoupNode(child) for child in self._tag.children if isinstance(child, Tag)]

    @property
    def parent(self) -> Optional[PriceNode]:
        parent = self._tag.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return SoupNode(parent)

    @property
    def text_content(self) -> str:
        return self._tag.get_text()

    def text_fragments(self) -> List[str]:
        return [str(s) for s in self._tag.strings]

    def descendants(self) -> Iterator[PriceNode]:
        for tag in self._tag.find_all(True):
            yield SoupNode(tag)

    def select(self, selector: str) -> List[PriceNode]:
        return [SoupNode(tag) for tag in self._tag.select(selector)]

    def __eq__(self, other) -> bool:
        return isinstance(other, SoupNode) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)


def parse_html(markup: str, selector: Optional[str] = None) -> Optional[SoupNode]:
    """
    Parse markup and return the element to analyze.

    Without a selector this is the first element inside <body>.
    """
    if not markup or not isinstance(markup, str):
        return None
    soup = BeautifulSoup(markup, "lxml")
    if selector:
        tag = soup.select_one(selector)
        return SoupNode(tag) if tag is not None else None

    root = soup.body or soup
    for child in root.children:
        if isinstance(child, Tag):
            return SoupNode(child)
    return None


def parse_document(markup: str) -> Optional[SoupNode]:
    """Parse markup and return the <body> element."""
    if not markup or not isinstance(markup, str):
        return None
    soup = BeautifulSoup(markup, "lxml")
    return SoupNode(soup.body) if soup.body is not None else None
