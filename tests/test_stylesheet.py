import pytest

from fontmirror.errors import StylesheetParseError
from fontmirror.stylesheet import block_children, parse_stylesheet, serialize_stylesheet


def test_round_trip_keeps_text():
    css = "/* header */\nbody { color: red; }\n@media print { a { color: blue } }\n"
    stylesheet = parse_stylesheet(css, "site.css")
    assert serialize_stylesheet(stylesheet) == css


def test_parse_error_carries_diagnostics():
    with pytest.raises(StylesheetParseError) as excinfo:
        parse_stylesheet("a { color: red }\nbody", "broken.css")
    error = excinfo.value
    assert error.name == "broken.css"
    assert error.diagnostics
    diagnostic = error.diagnostics[0]
    assert diagnostic.source == "broken.css"
    assert str(diagnostic).startswith("broken.css:2:")


def test_block_children_for_font_face_are_declarations():
    stylesheet = parse_stylesheet("@font-face { font-family: X; src: url(a.woff) }")
    rule = stylesheet.rules[0]
    names = [node.lower_name for node in block_children(rule) if node.type == "declaration"]
    assert names == ["font-family", "src"]


def test_block_children_for_media_are_rules():
    stylesheet = parse_stylesheet("@media screen { @font-face { src: url(a.woff) } }")
    children = [node for node in block_children(stylesheet.rules[0]) if node.type == "at-rule"]
    assert [child.lower_at_keyword for child in children] == ["font-face"]


def test_declaration_error_in_font_face_is_reported():
    with pytest.raises(StylesheetParseError) as excinfo:
        parse_stylesheet("@font-face { src url(https://f.example/a.woff) }", "fonts.css")
    assert excinfo.value.diagnostics[0].source == "fonts.css"


def test_declaration_error_inside_media_is_reported():
    with pytest.raises(StylesheetParseError):
        parse_stylesheet("@media print { @font-face { font-family Broken; } }")


def test_nested_style_rules_are_accepted():
    css = ".card { color: red; .title { color: blue; } }"
    assert serialize_stylesheet(parse_stylesheet(css)) == css
