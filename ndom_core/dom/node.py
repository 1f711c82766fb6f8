"""
Queryable Nodes
===============

Adapter that adds XPath selection to native lxml elements. Every element
handed back by the query and inclusion APIs is wrapped here, carrying a
back-reference to the TransformableDocument that owns it.
"""

from typing import Any, Dict, Iterator, List, Mapping, Optional
import logging

from lxml import etree

from ndom_core.config.settings import XPathConfig
from ndom_core.dom.base import Queryable, run_xpath
from ndom_core.exceptions import QueryError
from ndom_core.xml.utils import local_name, get_element_path

logger = logging.getLogger(__name__)


def native_node(node: Any) -> Any:
    """Return the lxml object behind a wrapper (or the object itself)."""
    if isinstance(node, QueryableNode):
        return node.native
    return node


def wrap_node(item: Any, owner_document: Any = None) -> Any:
    """
    Wrap an lxml element as a QueryableNode.

    Attribute values and text nodes come out of lxml as smart strings and
    are returned unchanged, as are numbers and booleans.
    """
    if isinstance(item, QueryableNode):
        return item
    if isinstance(item, etree._Element):
        return QueryableNode(item, owner_document)
    return item


def merge_namespaces(owner_document: Any,
                     namespaces: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """Merge per-call prefixes over the owning document's defaults."""
    if owner_document is not None:
        merged = dict(owner_document.config.xpath.namespaces)
    else:
        merged = dict(XPathConfig().namespaces)
    if namespaces:
        merged.update(namespaces)
    return merged


def wrap_result(result: Any, expression: str, owner_document: Any) -> List[Any]:
    """Wrap a node-set result, rejecting scalar results."""
    if not isinstance(result, list):
        raise QueryError(
            f"XPath expression {expression!r} does not select nodes "
            f"(got {type(result).__name__})",
            expression,
        )
    return [wrap_node(item, owner_document) for item in result]


class QueryableNode(Queryable):
    """
    An lxml element with XPath selection.

    The wrapper holds no state of its own beyond the element and its owner:
    two wrappers around the same element compare equal.

    Example:
        chapter = doc.select_single_node("/book/chapter[1]")
        titles = chapter.select_nodes("title")
    """

    def __init__(self, element: Any, owner_document: Any = None):
        self._element = element
        self._owner_document = owner_document

    @property
    def native(self) -> Any:
        """The wrapped lxml element."""
        return self._element

    @property
    def owner_document(self) -> Any:
        """The TransformableDocument this node belongs to (may be None)."""
        return self._owner_document

    def select_nodes(self, xpath: str,
                     namespaces: Optional[Mapping[str, str]] = None,
                     variables: Optional[Mapping[str, Any]] = None) -> List[Any]:
        ns = merge_namespaces(self._owner_document, namespaces)
        result = run_xpath(self._element, xpath, ns, variables)
        return wrap_result(result, xpath, self._owner_document)

    def evaluate(self, xpath: str,
                 namespaces: Optional[Mapping[str, str]] = None,
                 variables: Optional[Mapping[str, Any]] = None) -> Any:
        ns = merge_namespaces(self._owner_document, namespaces)
        result = run_xpath(self._element, xpath, ns, variables)
        if isinstance(result, list):
            return [wrap_node(item, self._owner_document) for item in result]
        return result

    # Element helpers

    @property
    def tag(self) -> Any:
        return self._element.tag

    @property
    def local_name(self) -> str:
        return local_name(self._element)

    @property
    def path(self) -> str:
        """XPath-like location, for log messages."""
        return get_element_path(self._element)

    @property
    def text(self) -> Optional[str]:
        return self._element.text

    @text.setter
    def text(self, value: Optional[str]) -> None:
        self._element.text = value

    @property
    def text_content(self) -> str:
        """All descendant text concatenated."""
        return ''.join(self._element.itertext())

    @property
    def attrib(self) -> Dict[str, str]:
        return dict(self._element.attrib)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._element.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self._element.set(name, str(value))

    @property
    def parent(self) -> Optional['QueryableNode']:
        parent = self._element.getparent()
        if parent is None:
            return None
        return QueryableNode(parent, self._owner_document)

    @property
    def children(self) -> List['QueryableNode']:
        return [QueryableNode(child, self._owner_document) for child in self._element]

    def __iter__(self) -> Iterator['QueryableNode']:
        return iter(self.children)

    def append_child(self, node: Any) -> 'QueryableNode':
        """
        Append a node as the last child of this element.

        The node is moved, not copied; use
        TransformableDocument.import_node to copy from another tree first.
        """
        child = native_node(node)
        self._element.append(child)
        return QueryableNode(child, self._owner_document)

    def to_string(self, pretty_print: bool = False) -> str:
        """Serialize this element (without its tail text)."""
        return etree.tostring(self._element, encoding="unicode",
                              pretty_print=pretty_print, with_tail=False)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QueryableNode):
            return self._element is other._element
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._element)

    def __repr__(self) -> str:
        return f"<QueryableNode {self.local_name or self._element.tag!r} at {self.path}>"
