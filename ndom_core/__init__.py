"""
ndom-core
=========

A convenience layer over the lxml document model that provides:

- XPath selection shortcuts on documents and elements
- XSLT transformation with stylesheet variable binding
- Document inclusion and node import helpers

Architecture
------------

    ndom_core/
    ├── dom/          - Queryable / Transformable adapters over lxml trees
    ├── transform/    - Stylesheet loading, variable binding, XSLT execution
    ├── xml/          - Small lxml helpers
    ├── config/       - Configuration management
    └── exceptions.py - Error hierarchy

Usage
-----

    from ndom_core import TransformableDocument

    doc = TransformableDocument.load("book.xml")

    # Query
    chapters = doc.select_nodes("/book/chapter")
    first = doc.select_single_node("/book/chapter[1]")
    if first is not None:
        titles = first.select_nodes("title")

    # Transform, overriding <xsl:variable name="title"> in the stylesheet
    html = doc.transform_to_string("book2html.xsl", {"title": "Draft"})
    summary = doc.transform_to_document("summary.xsl")

    # Include
    report = TransformableDocument.from_string("<report/>")
    report.include_document(summary)

Stylesheet variables
--------------------

Variables are bound by rewriting global <xsl:variable> declarations in
the stylesheet document. When a loaded stylesheet document is passed in,
that document is modified and later calls see the new values; pass
isolate=True (or set TransformConfig.isolate_stylesheet) to bind into a
private copy instead.
"""

__version__ = "1.0.0"
__author__ = "ndom-core Team"

from ndom_core.exceptions import (
    NDOMError,
    QueryError,
    BindingError,
    TransformError,
    ParseError,
    StructureError,
)

from ndom_core.dom import (
    Queryable,
    Transformable,
    QueryableNode,
    TransformableDocument,
    load_document,
    parse_document,
)

from ndom_core.config import (
    NDOMConfig,
    load_config,
    save_config,
    get_default_config,
    configure_logging,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "NDOMError",
    "QueryError",
    "BindingError",
    "TransformError",
    "ParseError",
    "StructureError",
    # Documents
    "Queryable",
    "Transformable",
    "QueryableNode",
    "TransformableDocument",
    "load_document",
    "parse_document",
    # Config
    "NDOMConfig",
    "load_config",
    "save_config",
    "get_default_config",
    "configure_logging",
]
