"""
XSLT Stylesheets
================

Loading, variable binding and execution of XSLT stylesheets.

Stylesheet variables are bound by rewriting the content of global
<xsl:variable> declarations before the stylesheet is compiled, so the
new values are visible to every template that references $name.
"""

from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence
import logging

from lxml import etree

from ndom_core.config.settings import XSLT_NAMESPACE
from ndom_core.exceptions import BindingError, StructureError, TransformError
from ndom_core.xml.utils import set_text_content

logger = logging.getLogger(__name__)

DEFAULT_ROOT_NAMES = ("stylesheet", "transform")
XSLT_PREFIXES = {"xsl": XSLT_NAMESPACE}


def load_stylesheet(xslt_path: Path) -> 'etree._ElementTree':
    """
    Load an XSLT stylesheet document from file.

    Args:
        xslt_path: Path to the XSLT stylesheet file

    Returns:
        Parsed (not yet compiled) stylesheet tree

    Raises:
        TransformError: If the file doesn't exist or is not well-formed
    """
    xslt_path = Path(xslt_path)
    if not xslt_path.exists():
        raise TransformError(f"XSLT stylesheet not found: {xslt_path}")

    logger.info(f"Loading XSLT stylesheet: {xslt_path}")
    try:
        return etree.parse(str(xslt_path))
    except etree.XMLSyntaxError as e:
        logger.error(f"XSLT stylesheet is not well-formed: {e}")
        raise TransformError(
            f"XSLT stylesheet is not well-formed: {xslt_path}: {e}",
            error_log=str(e.error_log),
        ) from e


def variable_declaration_xpath(root_names: Sequence[str] = DEFAULT_ROOT_NAMES) -> str:
    """
    XPath selecting a global variable declaration by name.

    The name is supplied as the XPath variable $name; the xsl prefix is
    bound to the XSLT namespace URI, so the stylesheet's own prefix does
    not matter.
    """
    return " | ".join(
        f"/xsl:{root}/xsl:variable[@name=$name]" for root in root_names
    )


def bind_stylesheet_variables(stylesheet: Any,
                              variables: Optional[Mapping[str, Any]],
                              root_names: Sequence[str] = DEFAULT_ROOT_NAMES) -> List[str]:
    """
    Overwrite global variable declarations in a stylesheet document.

    Every name is looked up before anything is changed, so a missing
    declaration leaves the stylesheet untouched.

    Args:
        stylesheet: Queryable stylesheet document
        variables: Mapping of variable name to value (values go through str())
        root_names: Accepted local names of the stylesheet root element

    Returns:
        Names that were bound, in caller order

    Raises:
        BindingError: If a name has no matching global declaration
    """
    if not variables:
        return []

    expression = variable_declaration_xpath(root_names)
    declarations = []
    for name, value in variables.items():
        declaration = stylesheet.select_single_node(
            expression, XSLT_PREFIXES, variables={"name": str(name)}
        )
        if declaration is None:
            logger.error(f"No global xsl:variable named {name!r} in stylesheet")
            raise BindingError(f"Stylesheet declares no global variable {name!r}", str(name))
        declarations.append((name, value, declaration))

    for name, value, declaration in declarations:
        element = declaration.native
        if element.get("select") is not None:
            # select would take precedence over the new content
            del element.attrib["select"]
        set_text_content(element, value)
        logger.debug(f"Bound stylesheet variable {name!r} = {str(value)!r}")

    return [name for name, _, _ in declarations]


def compile_stylesheet(stylesheet_tree: 'etree._ElementTree') -> 'etree.XSLT':
    """
    Compile a stylesheet document.

    Raises:
        TransformError: If lxml rejects the stylesheet
    """
    try:
        return etree.XSLT(stylesheet_tree)
    except etree.XSLTError as e:
        error_log = str(getattr(e, "error_log", ""))
        logger.error(f"XSLT stylesheet could not be compiled: {e}")
        raise TransformError(f"XSLT stylesheet could not be compiled: {e}",
                             error_log=error_log) from e
    except ValueError as e:
        # lxml refuses trees with no document behind them
        logger.error(f"XSLT stylesheet could not be compiled: {e}")
        raise TransformError(f"XSLT stylesheet could not be compiled: {e}") from e


def apply_stylesheet(source_tree: 'etree._ElementTree',
                     stylesheet_tree: 'etree._ElementTree') -> str:
    """
    Apply an XSLT stylesheet to a document and serialize the result.

    Args:
        source_tree: Document to transform
        stylesheet_tree: Stylesheet document (variables already bound)

    Returns:
        Serialized output exactly as the processor produced it

    Raises:
        StructureError: If the source document has no root element
        TransformError: If the stylesheet is empty, or compilation or
            execution fails
    """
    if source_tree.getroot() is None:
        raise StructureError("Cannot transform a document with no root element")
    if stylesheet_tree.getroot() is None:
        raise TransformError("XSLT stylesheet has no root element")

    transform = compile_stylesheet(stylesheet_tree)

    logger.info("Applying XSLT transformation...")
    try:
        result = transform(source_tree)
    except etree.XSLTApplyError as e:
        logger.error(f"XSLT transformation failed: {e}")
        logger.error(f"Error log: {transform.error_log}")
        raise TransformError(f"XSLT transformation failed: {e}",
                             error_log=str(transform.error_log)) from e

    # xsl:message output and recoverable errors end up here
    if transform.error_log:
        logger.warning("XSLT transformation completed with warnings:")
        for entry in transform.error_log:
            logger.warning(f"  {entry}")

    logger.info("XSLT transformation completed successfully")
    return str(result)
