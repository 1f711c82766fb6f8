"""
Transformable Documents
=======================

Adapter over an lxml element tree that adds XPath selection, XSLT
transformation with stylesheet variable binding, and document
inclusion.

Every operation is a one-shot pipeline (resolve stylesheet, bind
variables, transform, import or attach). Nothing is cached between
calls. The only state that outlives a call is a caller-supplied
stylesheet document whose variables were rewritten: repeated calls with
the same stylesheet instance see the previous bindings unless
isolate_stylesheet is enabled.
"""

from pathlib import Path
from typing import Any, List, Mapping, Optional, Union
import copy
import logging
import re

from lxml import etree

from ndom_core.config.settings import NDOMConfig, get_default_config
from ndom_core.dom.base import Queryable, Transformable, run_xpath, check_xpath
from ndom_core.dom.node import (
    QueryableNode,
    merge_namespaces,
    native_node,
    wrap_node,
    wrap_result,
)
from ndom_core.exceptions import ParseError, StructureError
from ndom_core.transform.xslt import (
    apply_stylesheet,
    bind_stylesheet_variables,
    load_stylesheet,
)
from ndom_core.xml.utils import (
    create_element,
    get_element_path,
    strip_xml_declaration,
    xml_declaration,
)

logger = logging.getLogger(__name__)

_DECLARED_ENCODING_RE = re.compile(r'^\s*<\?xml\s[^?]*encoding\s*=\s*["\']([A-Za-z][\w.-]*)["\']')

StylesheetSource = Union[str, Path, 'TransformableDocument', Any]


def declared_encoding(markup: str) -> Optional[str]:
    """Return the encoding named in a leading XML declaration, if any."""
    match = _DECLARED_ENCODING_RE.match(markup)
    return match.group(1) if match else None


def _encode_markup(markup: str, fallback: str = "utf-8") -> bytes:
    """Encode markup in the encoding its own declaration names."""
    encoding = declared_encoding(markup) or fallback
    try:
        return markup.encode(encoding, errors="xmlcharrefreplace")
    except LookupError as e:
        raise ParseError(f"Unknown encoding {encoding!r} in XML declaration") from e


class TransformableDocument(Queryable, Transformable):
    """
    An XML document with XPath, XSLT and inclusion helpers.

    Example:
        doc = TransformableDocument.load("book.xml")
        html = doc.transform_to_string("book2html.xsl", {"title": "Draft"})

        report = TransformableDocument.from_string("<report/>")
        report.include_document(doc)
    """

    def __init__(self, version: Optional[str] = None,
                 encoding: Optional[str] = None,
                 config: Optional[NDOMConfig] = None,
                 tree: Optional['etree._ElementTree'] = None):
        """
        Create an empty document, or wrap an existing lxml tree.

        Args:
            version: Declared XML version (default from config)
            encoding: Declared character encoding (default from config)
            config: Configuration; defaults apply when omitted
            tree: Existing lxml ElementTree to wrap (not copied)
        """
        self.config = config or get_default_config()
        self._tree = tree if tree is not None else etree.ElementTree()

        docinfo_version = docinfo_encoding = None
        if tree is not None and tree.getroot() is not None:
            docinfo_version = tree.docinfo.xml_version
            docinfo_encoding = tree.docinfo.encoding

        self.version = version or docinfo_version or self.config.document.version
        self.encoding = encoding or docinfo_encoding or self.config.document.encoding

    # Construction

    @classmethod
    def load(cls, path: Union[str, Path],
             config: Optional[NDOMConfig] = None) -> 'TransformableDocument':
        """
        Parse a document from file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ParseError: If the file is not well-formed XML
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"XML document not found: {path}")

        logger.info(f"Parsing XML document: {path}")
        try:
            tree = etree.parse(str(path))
        except etree.XMLSyntaxError as e:
            logger.error(f"XML document is not well-formed: {e}")
            raise ParseError(f"XML document is not well-formed: {path}: {e}") from e
        return cls(config=config, tree=tree)

    @classmethod
    def from_string(cls, markup: Union[str, bytes],
                    config: Optional[NDOMConfig] = None) -> 'TransformableDocument':
        """
        Parse a document from in-memory markup.

        Raises:
            ParseError: If the markup is not well-formed XML
        """
        data = markup if isinstance(markup, bytes) else _encode_markup(markup)
        try:
            root = etree.fromstring(data)
        except etree.XMLSyntaxError as e:
            raise ParseError(f"Markup is not well-formed XML: {e}") from e
        return cls(config=config, tree=root.getroottree())

    @classmethod
    def wrap(cls, obj: Any, config: Optional[NDOMConfig] = None) -> 'TransformableDocument':
        """Adapt a TransformableDocument, lxml tree or element (its whole tree)."""
        if isinstance(obj, TransformableDocument):
            return obj
        if isinstance(obj, etree._ElementTree):
            return cls(config=config, tree=obj)
        obj = native_node(obj)
        if isinstance(obj, etree._Element):
            return cls(config=config, tree=obj.getroottree())
        raise TypeError(f"Cannot use {type(obj).__name__} as an XML document")

    @property
    def tree(self) -> 'etree._ElementTree':
        """The wrapped lxml ElementTree."""
        return self._tree

    @property
    def document_element(self) -> Optional[QueryableNode]:
        """The root element, or None for an empty document."""
        root = self._tree.getroot()
        if root is None:
            return None
        return QueryableNode(root, self)

    def create_element(self, tag: str, text: Optional[str] = None,
                       attrib: Optional[dict] = None,
                       nsmap: Optional[dict] = None) -> QueryableNode:
        """Create a detached element owned by this document."""
        return QueryableNode(create_element(tag, text, attrib, nsmap), self)

    def set_root(self, node: Any) -> QueryableNode:
        """Make an element the root of this document, replacing any current root."""
        element = native_node(node)
        self._tree._setroot(element)
        return QueryableNode(element, self)

    # Queryable

    def _context(self, context: Any) -> Any:
        if context is None:
            return self._tree
        return native_node(context)

    def select_nodes(self, xpath: str,
                     namespaces: Optional[Mapping[str, str]] = None,
                     variables: Optional[Mapping[str, Any]] = None,
                     *, context: Any = None) -> List[Any]:
        """
        Select nodes with this document (or an explicit context node) as context.

        Args:
            xpath: XPath expression
            namespaces: Extra prefix mappings, merged over the config's
            variables: XPath variables, referenced as $name
            context: Node to evaluate relative paths against (keyword only)

        Returns:
            Ordered, possibly empty list of matches

        Raises:
            QueryError: If the expression is invalid or not a node-set
        """
        ns = merge_namespaces(self, namespaces)
        if context is None and self._tree.getroot() is None:
            check_xpath(xpath, ns)
            return []
        result = run_xpath(self._context(context), xpath, ns, variables)
        return wrap_result(result, xpath, self)

    def select_single_node(self, xpath: str,
                           namespaces: Optional[Mapping[str, str]] = None,
                           variables: Optional[Mapping[str, Any]] = None,
                           *, context: Any = None) -> Optional[Any]:
        nodes = self.select_nodes(xpath, namespaces, variables, context=context)
        if not nodes:
            return None
        return nodes[0]

    def evaluate(self, xpath: str,
                 namespaces: Optional[Mapping[str, str]] = None,
                 variables: Optional[Mapping[str, Any]] = None,
                 *, context: Any = None) -> Any:
        """
        Evaluate any XPath expression.

        Raises:
            QueryError: If the expression is invalid
            StructureError: If the document has no root element and no
                context node was given; a scalar result would depend on a
                context that does not exist
        """
        ns = merge_namespaces(self, namespaces)
        if context is None and self._tree.getroot() is None:
            check_xpath(xpath, ns)
            raise StructureError(
                f"Cannot evaluate {xpath!r}: document has no root element"
            )
        result = run_xpath(self._context(context), xpath, ns, variables)
        if isinstance(result, list):
            return [wrap_node(item, self) for item in result]
        return result

    # Transformable

    def _resolve_stylesheet(self, stylesheet: StylesheetSource,
                            isolate: Optional[bool]) -> 'TransformableDocument':
        if isinstance(stylesheet, (str, Path)):
            path = self.config.transform.resolve_path(stylesheet)
            # Freshly loaded, so binding into it is never visible to the caller
            return TransformableDocument(config=self.config, tree=load_stylesheet(path))

        resolved = TransformableDocument.wrap(stylesheet, config=self.config)
        if isolate is None:
            isolate = self.config.transform.isolate_stylesheet
        if isolate:
            return TransformableDocument(config=self.config,
                                         tree=copy.deepcopy(resolved.tree))
        return resolved

    def transform_to_string(self, stylesheet: StylesheetSource,
                            variables: Optional[Mapping[str, Any]] = None,
                            isolate: Optional[bool] = None) -> str:
        """
        Apply an XSLT stylesheet to this document.

        Args:
            stylesheet: Path to an XSLT file, or a loaded stylesheet document
            variables: Values for global xsl:variable declarations
            isolate: Bind into a private copy of a loaded stylesheet instead
                of the caller's instance (default from config)

        Returns:
            The processor's serialized output, verbatim

        Raises:
            BindingError: If a variable has no declaration (nothing is run)
            TransformError: If the stylesheet cannot be loaded or run
        """
        xslt_doc = self._resolve_stylesheet(stylesheet, isolate)
        bind_stylesheet_variables(xslt_doc, variables,
                                  self.config.transform.variable_root_names)
        return apply_stylesheet(self._tree, xslt_doc.tree)

    def _output_to_document(self, output: str) -> 'TransformableDocument':
        markup = xml_declaration(self.version, self.encoding) + strip_xml_declaration(output)
        try:
            result = TransformableDocument.from_string(markup, config=self.config)
        except ParseError as e:
            logger.error(f"Transform output is not well-formed XML: {e}")
            raise ParseError(f"Transform output is not well-formed XML: {e}") from e
        result.version = self.version
        result.encoding = self.encoding
        return result

    def transform_to_document(self, stylesheet: StylesheetSource,
                              variables: Optional[Mapping[str, Any]] = None,
                              isolate: Optional[bool] = None) -> 'TransformableDocument':
        """
        Apply an XSLT stylesheet and parse the output into a new document.

        The new document declares this document's version and encoding,
        whatever the stylesheet's xsl:output says.

        Raises:
            ParseError: If the output is not well-formed XML
        """
        output = self.transform_to_string(stylesheet, variables, isolate)
        return self._output_to_document(output)

    def transform_to_file(self, stylesheet: StylesheetSource,
                          output_path: Union[str, Path],
                          variables: Optional[Mapping[str, Any]] = None,
                          isolate: Optional[bool] = None) -> Path:
        """Apply an XSLT stylesheet and write the serialized output to a file."""
        output = self.transform_to_string(stylesheet, variables, isolate)
        output_path = Path(output_path)

        logger.info(f"Writing transformed XML to: {output_path}")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(_encode_markup(output, fallback=self.encoding))
        return output_path

    # Inclusion

    def import_node(self, node: Any, deep: bool = True) -> QueryableNode:
        """
        Copy a node from any tree into this document's ownership.

        The copy is not attached anywhere; place it with append_child.
        """
        element = native_node(node)
        if not isinstance(element, etree._Element):
            raise StructureError(f"Only elements can be imported, got {type(element).__name__}")

        if deep:
            imported = copy.deepcopy(element)
        else:
            imported = etree.Element(element.tag, attrib=dict(element.attrib),
                                     nsmap=element.nsmap)
        imported.tail = None

        logger.debug(f"Imported {get_element_path(element)} (deep={deep})")
        return QueryableNode(imported, self)

    def extract_transformed_node(self, source_doc: Any, stylesheet: StylesheetSource,
                                 variables: Optional[Mapping[str, Any]] = None) -> QueryableNode:
        """
        Transform another document and import the result's root element.

        The returned node is owned by this document but not attached to
        its tree.

        Raises:
            StructureError: If the transform produced no root element
        """
        source = TransformableDocument.wrap(source_doc, config=self.config)
        output = source.transform_to_string(stylesheet, variables)
        if not strip_xml_declaration(output).strip():
            raise StructureError("Transform produced no root element")

        root = source._output_to_document(output).document_element
        if root is None:
            raise StructureError("Transform produced no root element")
        return self.import_node(root)

    def include_document(self, source_doc: Any) -> bool:
        """
        Append a deep copy of another document's root element to this root.

        Raises:
            StructureError: If either document has no root element
        """
        target = self.document_element
        if target is None:
            raise StructureError("Cannot include into a document with no root element")

        source = TransformableDocument.wrap(source_doc, config=self.config)
        node = source.select_single_node("/*")
        if node is None:
            raise StructureError("Source document has no root element to include")

        target.append_child(self.import_node(node))
        logger.debug(f"Included <{node.local_name}> into {target.path}")
        return True

    def include(self, source_doc: Any,
                stylesheet: Optional[StylesheetSource] = None,
                variables: Optional[Mapping[str, Any]] = None,
                select: str = "/*",
                target: Any = None,
                namespaces: Optional[Mapping[str, str]] = None) -> QueryableNode:
        """
        General inclusion: transform, select, import and place in one call.

        Args:
            source_doc: Document to take content from
            stylesheet: Optional stylesheet applied to the source first
            variables: Stylesheet variables (requires stylesheet)
            select: XPath choosing the element to include, on the
                (transformed) source
            target: XPath or node in this document to append to; None means
                the root element, False means import only
            namespaces: Extra prefixes for select and target

        Returns:
            The imported node

        Raises:
            StructureError: If the selection or the target is missing
        """
        if variables and stylesheet is None:
            raise ValueError("Stylesheet variables given without a stylesheet")

        parent = None
        if target is not False:
            parent = self._resolve_target(target, namespaces)

        source = TransformableDocument.wrap(source_doc, config=self.config)
        if stylesheet is not None:
            source = source.transform_to_document(stylesheet, variables)

        node = source.select_single_node(select, namespaces)
        if not isinstance(node, QueryableNode):
            raise StructureError(f"Selection {select!r} matched no element in the source")

        imported = self.import_node(node)
        if parent is not None:
            parent.append_child(imported)
        return imported

    def _resolve_target(self, target: Any,
                        namespaces: Optional[Mapping[str, str]]) -> QueryableNode:
        if target is None:
            parent = self.document_element
            if parent is None:
                raise StructureError("Cannot include into a document with no root element")
            return parent
        if isinstance(target, str):
            parent = self.select_single_node(target, namespaces)
            if not isinstance(parent, QueryableNode):
                raise StructureError(f"Include target {target!r} matched no element")
            return parent
        return QueryableNode(native_node(target), self)

    # Serialization

    def to_string(self, pretty_print: Optional[bool] = None) -> str:
        """Serialize with this document's own XML declaration."""
        if pretty_print is None:
            pretty_print = self.config.document.pretty_print
        declaration = xml_declaration(self.version, self.encoding)
        if self._tree.getroot() is None:
            return declaration + "\n"
        body = etree.tostring(self._tree, encoding="unicode", pretty_print=pretty_print)
        return declaration + "\n" + body

    def save(self, path: Union[str, Path], pretty_print: Optional[bool] = None) -> Path:
        """Write the document to disk in its declared encoding."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(_encode_markup(self.to_string(pretty_print), fallback=self.encoding))
        logger.info(f"Saved XML document to {path}")
        return path

    def __repr__(self) -> str:
        root = self._tree.getroot()
        name = root.tag if root is not None else None
        return f"<TransformableDocument root={name!r} version={self.version!r} encoding={self.encoding!r}>"


def load_document(path: Union[str, Path],
                  config: Optional[NDOMConfig] = None) -> TransformableDocument:
    """Parse a document from file."""
    return TransformableDocument.load(path, config)


def parse_document(markup: Union[str, bytes],
                   config: Optional[NDOMConfig] = None) -> TransformableDocument:
    """Parse a document from a string."""
    return TransformableDocument.from_string(markup, config)
