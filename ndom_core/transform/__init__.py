"""
Transformation Framework
========================

XSLT utilities used by TransformableDocument.

Components:
- load_stylesheet: Load an XSLT document from file
- bind_stylesheet_variables: Overwrite global xsl:variable declarations
- compile_stylesheet / apply_stylesheet: Run the XSLT processor
"""

from ndom_core.transform.xslt import (
    load_stylesheet,
    variable_declaration_xpath,
    bind_stylesheet_variables,
    compile_stylesheet,
    apply_stylesheet,
)

__all__ = [
    "load_stylesheet",
    "variable_declaration_xpath",
    "bind_stylesheet_variables",
    "compile_stylesheet",
    "apply_stylesheet",
]
