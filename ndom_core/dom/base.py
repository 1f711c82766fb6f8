"""
Capability Interfaces
=====================

Abstract base classes for the two capabilities layered over lxml trees.
Adapters implement these by wrapping native lxml objects rather than
subclassing them.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional
import logging

from lxml import etree

from ndom_core.exceptions import QueryError

logger = logging.getLogger(__name__)


def run_xpath(context: Any, expression: str,
              namespaces: Optional[Dict[str, str]] = None,
              variables: Optional[Mapping[str, Any]] = None) -> Any:
    """
    Evaluate an XPath expression with lxml, mapping engine errors to QueryError.

    Args:
        context: lxml element or element tree used as the context node
        expression: XPath expression
        namespaces: Prefix to namespace URI mapping
        variables: XPath variables, referenced as $name in the expression.
            Any name is allowed, including ones like "context" or
            "namespaces" that are also parameter names here.

    Returns:
        The raw lxml XPath result

    Raises:
        QueryError: If the expression is malformed or uses an unbound prefix
    """
    try:
        evaluator = etree.XPathEvaluator(context, namespaces=namespaces or {})
        return evaluator(expression, **dict(variables or {}))
    except etree.XPathError as e:
        logger.error(f"XPath evaluation failed for {expression!r}: {e}")
        raise QueryError(f"Invalid XPath expression {expression!r}: {e}", expression) from e


def check_xpath(expression: str, namespaces: Optional[Dict[str, str]] = None) -> None:
    """Compile an expression without evaluating it, for contexts with no nodes."""
    try:
        etree.XPath(expression, namespaces=namespaces or {})
    except etree.XPathError as e:
        raise QueryError(f"Invalid XPath expression {expression!r}: {e}", expression) from e


class Queryable(ABC):
    """
    XPath selection on a document or element.

    Implementations provide select_nodes and evaluate; select_single_node
    is derived from select_nodes.
    """

    @abstractmethod
    def select_nodes(self, xpath: str,
                     namespaces: Optional[Mapping[str, str]] = None,
                     variables: Optional[Mapping[str, Any]] = None) -> List[Any]:
        """
        Select all nodes matching an XPath expression.

        Args:
            xpath: XPath expression, evaluated with this object as context
            namespaces: Extra prefix mappings, merged over the defaults
            variables: XPath variables, referenced as $name; kept apart from
                the other arguments so any variable name can be bound

        Returns:
            Ordered, possibly empty list; elements come back wrapped

        Raises:
            QueryError: If the expression is invalid or not a node-set
        """
        pass

    @abstractmethod
    def evaluate(self, xpath: str,
                 namespaces: Optional[Mapping[str, str]] = None,
                 variables: Optional[Mapping[str, Any]] = None) -> Any:
        """Evaluate any XPath expression (number, string, boolean or node-set)."""
        pass

    def select_single_node(self, xpath: str,
                           namespaces: Optional[Mapping[str, str]] = None,
                           variables: Optional[Mapping[str, Any]] = None) -> Optional[Any]:
        """
        Select the first node matching an XPath expression.

        Returns:
            The first match, or None when nothing matched
        """
        nodes = self.select_nodes(xpath, namespaces, variables=variables)
        if not nodes:
            return None
        return nodes[0]


class Transformable(ABC):
    """XSLT transformation and document inclusion."""

    @abstractmethod
    def transform_to_string(self, stylesheet: Any,
                            variables: Optional[Mapping[str, Any]] = None) -> str:
        """Apply a stylesheet and return the serialized output."""
        pass

    @abstractmethod
    def transform_to_document(self, stylesheet: Any,
                              variables: Optional[Mapping[str, Any]] = None) -> 'Transformable':
        """Apply a stylesheet and parse the output into a new document."""
        pass

    @abstractmethod
    def extract_transformed_node(self, source_doc: Any, stylesheet: Any,
                                 variables: Optional[Mapping[str, Any]] = None) -> Any:
        """Transform another document and import its root without attaching it."""
        pass

    @abstractmethod
    def include_document(self, source_doc: Any) -> bool:
        """Append another document's root element to this document's root."""
        pass
