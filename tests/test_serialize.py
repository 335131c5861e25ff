import pytest
from bs4.element import NamespacedAttribute

from htmlsquash.dom import XLINK_NAMESPACE, XML_NAMESPACE, XMLNS_NAMESPACE
from htmlsquash.minifier import minify_html
from htmlsquash.serialize import qualified_attribute_name, serialize_attribute

DOCTYPE = "<!DOCTYPE html>"

HTML_OPTIONS = {
    "omit_tags": True,
    "compress_spaces": True,
    "remove_comments": True,
    "minify_javascript": False,
    "minify_css": False,
}


@pytest.mark.parametrize(
    "name,value,expected",
    [
        ("hidden", "", (" hidden", False)),
        ("id", "bare", (" id=bare", True)),
        ("href", "/foo", (" href=/foo", True)),
        ("title", "a b", (' title="a b"', False)),
        ("title", 'say "hi"', (" title='say \"hi\"'", False)),
        ("title", "\"x'", (' title="&#34;x\'"', False)),
        ("href", "a&b", (" href=a&amp;b", True)),
        ("href", "?a=1&b=2", (' href="?a=1&amp;b=2"', False)),
        ("data-x", "`", (' data-x="`"', False)),
    ],
)
def test_serialize_attribute(name: str, value: str, expected: tuple) -> None:
    assert serialize_attribute(name, value) == expected


def test_qualified_attribute_names() -> None:
    assert qualified_attribute_name("class") == "class"
    assert qualified_attribute_name(NamespacedAttribute("xml", "lang", XML_NAMESPACE)) == "xml:lang"
    assert qualified_attribute_name(NamespacedAttribute(None, "xmlns", XMLNS_NAMESPACE)) == "xmlns"
    assert (
        qualified_attribute_name(NamespacedAttribute("xmlns", "xlink", XMLNS_NAMESPACE))
        == "xmlns:xlink"
    )
    assert (
        qualified_attribute_name(NamespacedAttribute("xlink", "href", XLINK_NAMESPACE))
        == "xlink:href"
    )


def test_unknown_attribute_namespace_is_an_error() -> None:
    with pytest.raises(RuntimeError, match="urn:example"):
        qualified_attribute_name(NamespacedAttribute("ex", "thing", "urn:example"))


@pytest.mark.parametrize(
    "html,expected",
    [
        ('<a  id="bare"  href=\'/foo\'  ></a>', "<a id=bare href=/foo></a>"),
        ("<p id='\"quotes\"'>", "<p id='\"quotes\"'>"),
        ('<p title="&quot;x&apos;">', '<p title="&#34;x\'">'),
        ('<input disabled="">', "<input disabled>"),
        ("<p>1 &lt; 2 &amp;&amp; 3 &gt; 2", "<p>1 &lt; 2 &amp;&amp; 3 &gt; 2"),
        ("<p>&nbsp;", "<p>\xa0"),
    ],
)
def test_serializes_attributes_and_text(html: str, expected: str) -> None:
    assert minify_html(DOCTYPE + html, HTML_OPTIONS) == DOCTYPE + expected


@pytest.mark.parametrize(
    "html,expected",
    [
        (
            '<svg xmlns="http://www.w3.org/2000/svg"></svg>',
            "<svg xmlns=http://www.w3.org/2000/svg />",
        ),
        (
            '<svg xmlns:xlink="http://www.w3.org/1999/xlink"><a xlink:href="#x"></a></svg>',
            "<svg xmlns:xlink=http://www.w3.org/1999/xlink><a xlink:href=#x></a></svg>",
        ),
        (
            '<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">'
            '<a xlink:href="#x"></a></svg>',
            "<svg xmlns=http://www.w3.org/2000/svg xmlns:xlink=http://www.w3.org/1999/xlink>"
            "<a xlink:href=#x></a></svg>",
        ),
        ('<svg xml:lang="en"></svg>', "<svg xml:lang=en />"),
        ("<math><mi>x</mi></math>", "<math><mi>x</mi></math>"),
    ],
)
def test_serializes_foreign_content(html: str, expected: str) -> None:
    assert minify_html(DOCTYPE + html, HTML_OPTIONS) == DOCTYPE + expected


def test_raw_text_is_not_escaped() -> None:
    html = DOCTYPE + "<script>if (a < b && c) {}</script><style>a > b {}</style>"
    assert minify_html(html, HTML_OPTIONS) == html


def test_doctype_is_written_in_upper_case() -> None:
    assert minify_html("<!doctype html><p>x", HTML_OPTIONS) == DOCTYPE + "<p>x"


@pytest.mark.parametrize("container", ["svg", "math"])
def test_foreign_raw_text_names_are_escaped(container: str) -> None:
    html = DOCTYPE + f"<{container}><style>&lt;/{container}&gt;x</style></{container}><p>after"
    result = minify_html(html)
    assert result == html
    assert minify_html(result) == result
