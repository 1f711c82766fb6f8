"""
XML Utility Tests

Run with: pytest tests/test_xml_utils.py -v
"""

from lxml import etree

from ndom_core.xml import (
    get_element_path,
    local_name,
    set_text_content,
    strip_xml_declaration,
    xml_declaration,
)


def test_local_name_strips_namespace():
    elem = etree.Element("{http://www.w3.org/1999/XSL/Transform}variable")
    assert local_name(elem) == "variable"


def test_local_name_of_comment():
    assert local_name(etree.Comment("c")) == ""


def test_element_path():
    root = etree.fromstring("<a><b/><c/><b><d/></b></a>")
    assert get_element_path(root[2][0]) == "/a/b[2]/d[1]"


def test_set_text_content_replaces_children():
    elem = etree.fromstring('<v name="x">old<i>markup</i>tail</v>')
    set_text_content(elem, 7)
    assert etree.tostring(elem, encoding="unicode") == '<v name="x">7</v>'


def test_xml_declaration():
    assert xml_declaration("1.0", "utf-8") == '<?xml version="1.0" encoding="utf-8"?>'


def test_strip_xml_declaration():
    markup = '<?xml version="1.0" encoding="UTF-8"?>\n<a/>'
    assert strip_xml_declaration(markup) == "<a/>"


def test_strip_leaves_other_markup():
    assert strip_xml_declaration("<a/>") == "<a/>"
    assert strip_xml_declaration("<?xml-stylesheet href='x'?><a/>") == "<?xml-stylesheet href='x'?><a/>"
