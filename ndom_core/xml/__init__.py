"""
XML Processing Utilities
========================

Common lxml helpers used across the query and transform layers.
"""

from ndom_core.xml.utils import (
    local_name,
    get_element_path,
    create_element,
    set_text_content,
    xml_declaration,
    strip_xml_declaration,
)

__all__ = [
    "local_name",
    "get_element_path",
    "create_element",
    "set_text_content",
    "xml_declaration",
    "strip_xml_declaration",
]
