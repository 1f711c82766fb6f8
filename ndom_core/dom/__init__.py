"""
Document Adapters
=================

Queryable and Transformable adapters over lxml trees.

Components:
- Queryable / Transformable: capability interfaces
- QueryableNode: XPath selection on an element
- TransformableDocument: XPath, XSLT and inclusion on a document
"""

from ndom_core.dom.base import Queryable, Transformable
from ndom_core.dom.node import QueryableNode, wrap_node, native_node
from ndom_core.dom.document import (
    TransformableDocument,
    load_document,
    parse_document,
)

__all__ = [
    "Queryable",
    "Transformable",
    "QueryableNode",
    "wrap_node",
    "native_node",
    "TransformableDocument",
    "load_document",
    "parse_document",
]
