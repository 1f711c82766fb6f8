"""
XML Utility Functions
=====================

Small lxml helpers shared by the query, transform and inclusion layers:
tag names, element paths for log messages, text replacement and XML
declaration handling.
"""

from typing import Any, Optional
import logging
import re

from lxml import etree

logger = logging.getLogger(__name__)

_XML_DECLARATION_RE = re.compile('^\ufeff?' + r'\s*<\?xml\s[^?]*\?>\s*')


def local_name(element: Any) -> str:
    """
    Extract local name from element tag, stripping any namespace.

    Args:
        element: XML element

    Returns:
        Local tag name without namespace, or "" for comments and PIs

    Example:
        >>> elem = etree.Element("{http://www.w3.org/1999/XSL/Transform}variable")
        >>> local_name(elem)
        'variable'
    """
    tag = element.tag
    if not isinstance(tag, str):
        return ""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def get_element_path(element: Any) -> str:
    """
    Get XPath-like path to an element for debugging.

    Args:
        element: XML element

    Returns:
        Path string like "/book/chapter[2]/para[1]"
    """
    parts = []
    current = element

    while current is not None:
        name = local_name(current)
        parent = current.getparent()

        if parent is not None:
            # Count same-named siblings
            index = 1
            for sibling in parent:
                if sibling is current:
                    break
                if local_name(sibling) == name:
                    index += 1
            parts.append(f"{name}[{index}]")
        else:
            parts.append(name)

        current = parent

    return "/" + "/".join(reversed(parts))


def create_element(tag: str, text: Optional[str] = None,
                   attrib: Optional[dict] = None,
                   nsmap: Optional[dict] = None) -> Any:
    """
    Create an XML element with optional text and attributes.

    Args:
        tag: Element tag name
        text: Optional text content
        attrib: Optional attributes dict
        nsmap: Optional namespace map

    Returns:
        New lxml Element
    """
    elem = etree.Element(tag, attrib=attrib or {}, nsmap=nsmap)
    if text:
        elem.text = text
    return elem


def set_text_content(element: Any, value: Any) -> None:
    """
    Replace everything inside an element with a single text node.

    Child elements are removed together with their tails; attributes
    are kept.
    """
    for child in list(element):
        element.remove(child)
    element.text = str(value)


def xml_declaration(version: str, encoding: str) -> str:
    """Build an XML declaration string."""
    return f'<?xml version="{version}" encoding="{encoding}"?>'


def strip_xml_declaration(markup: str) -> str:
    """Remove a leading XML declaration (and BOM) from serialized markup."""
    return _XML_DECLARATION_RE.sub('', markup, count=1)
