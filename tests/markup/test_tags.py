"""
Tests for typed bbcode tags and web colors.
"""

import pytest

from bbx.markup.colors import WebColor, color_text
from bbx.markup.tags import (
    Bold,
    Color,
    Table,
    TableData,
    TableRow,
    Tag,
    Url,
    bbcode_to_string,
)
from bbx.template import Stringable, render_template


class TestTags:

    def test_bold(self):
        assert Bold("text").to_bbcode() == "[b]text[/b]"

    def test_url(self):
        """Test the link becomes the attribute"""
        url = Url("https://example.org", "example")

        assert url.to_bbcode() == "[url=https://example.org]example[/url]"
        assert url.attr == "https://example.org"

    def test_color_named_and_custom(self):
        """Test web colors render by name, other colors verbatim"""
        assert Color(WebColor.DARK_RED, "x").to_bbcode() == "[color=DarkRed]x[/color]"
        assert Color("#cc0000", "x").to_bbcode() == "[color=#cc0000]x[/color]"

    def test_nested_tags(self):
        """Test tags nest as children"""
        tag = Url("https://crates.io", Color(WebColor.DARK_RED, Bold("crates")))

        assert str(tag) == "[url=https://crates.io][color=DarkRed][b]crates[/b][/color][/url]"

    def test_table(self):
        """Test table of rows of cells with an optional width"""
        table = Table(
            TableRow(TableData("name", width=30), TableData("value")),
            TableRow(TableData("a"), TableData(1)),
        )

        assert table.to_bbcode() == (
            "[table]"
            "[tr][td=30]name[/td][td]value[/td][/tr]"
            "[tr][td]a[/td][td]1[/td][/tr]"
            "[/table]"
        )

    def test_empty_table(self):
        assert Table.empty().to_bbcode() == "[table][/table]"

    def test_table_row_rejects_non_cells(self):
        """Test rows accept only cells and tables accept only rows"""
        with pytest.raises(TypeError):
            TableRow(Bold("x"))
        with pytest.raises(TypeError):
            Table(TableData("x"))

    def test_generic_tag(self):
        """Test the generic tag with attribute and self-closing form"""
        assert Tag("quote", "hi", attr="someone").to_bbcode() == "[quote=someone]hi[/quote]"
        assert Tag("hr", self_closing=True).to_bbcode() == "[hr]"
        assert Tag("hr", "ignored", self_closing=True).to_bbcode() == "[hr]"

    def test_attr_default(self):
        assert Bold("x").attr is None
        assert TableData("x", width=40).attr == "40"

    def test_bbcode_to_string(self):
        """Test joining tags and plain values"""
        result = bbcode_to_string("see ", Url("https://example.org", "here"), " x", 2)

        assert result == "see [url=https://example.org]here[/url] x2"

    def test_tags_are_stringable(self):
        """Test tags can be interpolated into templates"""
        assert isinstance(Bold("x"), Stringable)
        assert render_template("quote { ${inner} }", inner=Bold("x")) == "[quote][b]x[/b][/quote]"

    def test_repr(self):
        assert repr(Bold("x")) == "Bold('[b]x[/b]')"


class TestWebColor:

    def test_forty_colors(self):
        assert len(WebColor) == 40

    def test_str_is_value(self):
        assert str(WebColor.LEMON_CHIFFON) == "LemonChiffon"
        assert WebColor.WHITE.to_text() == "White"

    @pytest.mark.parametrize("name", ["DarkRed", "darkred", "dark_red", "DARK-RED", " Dark Red "])
    def test_parse_variants(self, name):
        """Test lookup ignores case and separators"""
        assert WebColor.parse(name) is WebColor.DARK_RED

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown web color 'Ultraviolet'"):
            WebColor.parse("Ultraviolet")

    def test_color_text(self):
        assert color_text(WebColor.NAVY) == "Navy"
        assert color_text("rgb(1, 2, 3)") == "rgb(1, 2, 3)"

    def test_color_in_template(self):
        """Test colors interpolate by their PascalCase name"""
        assert render_template('color { {${c}}, "x" }', c=WebColor.SEA_GREEN) == "[color=SeaGreen]x[/color]"
