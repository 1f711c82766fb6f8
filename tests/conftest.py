"""
Shared fixtures for ndom_core tests.
"""

from pathlib import Path

import pytest

from ndom_core import TransformableDocument

TITLE_XSLT = """<?xml version="1.0" encoding="UTF-8"?>
<xsl:stylesheet version="1.0" xmlns:xsl="http://www.w3.org/1999/XSL/Transform">
  <xsl:output method="xml" omit-xml-declaration="yes"/>
  <xsl:variable name="title">Default</xsl:variable>
  <xsl:variable name="author" select="'Anonymous'"/>
  <xsl:template match="/">
    <result title="{$title}">
      <heading><xsl:value-of select="$title"/></heading>
      <author><xsl:value-of select="$author"/></author>
      <xsl:copy-of select="/*"/>
    </result>
  </xsl:template>
</xsl:stylesheet>
"""

CATALOG_XML = """<?xml version="1.0" encoding="UTF-8"?>
<catalog xmlns:media="urn:example:media">
  <item id="1" kind="book">First</item>
  <item id="2" kind="disc">Second</item>
  <item id="3" kind="book">Third</item>
  <media:cover src="cover.png"/>
</catalog>
"""


@pytest.fixture
def title_stylesheet():
    """Loaded stylesheet with title/author global variables."""
    return TransformableDocument.from_string(TITLE_XSLT)


@pytest.fixture
def title_stylesheet_path(tmp_path: Path) -> Path:
    """The title stylesheet written to disk."""
    path = tmp_path / "title.xsl"
    path.write_text(TITLE_XSLT, encoding="utf-8")
    return path


@pytest.fixture
def catalog():
    """Small document with repeated elements and a namespaced element."""
    return TransformableDocument.from_string(CATALOG_XML)


@pytest.fixture
def root_doc():
    """The minimal <root/> document."""
    return TransformableDocument.from_string("<root/>")
