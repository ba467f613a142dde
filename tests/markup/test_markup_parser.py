"""
Tests for the bbcode markup parser.
"""

import pytest

from bbx.markup.lexer import tokenize_markup
from bbx.markup.parser import MarkupIssue, MarkupParser, check_markup, parse_markup
from bbx.template.nodes import ElementNode, LiteralText, TextNode, format_ast_tree
from bbx.template.renderer import render_nodes


def lit(value: str) -> TextNode:
    return TextNode(LiteralText(value))


class TestMarkupParser:

    def test_simple_element(self):
        """Test a matched pair becomes one element with its body"""
        nodes = parse_markup("[b]bold[/b]")

        assert nodes == (ElementNode(name="b", children=(lit("bold"),)),)

    def test_attribute_becomes_literal(self):
        """Test the head attribute is kept as literal text"""
        nodes = parse_markup("[url=https://example.org]x[/url]")

        element = nodes[0]
        assert isinstance(element, ElementNode)
        assert element.attr == LiteralText("https://example.org")

    def test_nested_elements(self):
        """Test nested pairs build a nested tree"""
        nodes = parse_markup("[quote][b]x[/b] y[/quote]")

        assert nodes == (
            ElementNode(
                name="quote",
                children=(ElementNode(name="b", children=(lit("x"),)), lit(" y")),
            ),
        )

    def test_unclosed_head_at_end(self):
        """Test a head without tail becomes a self-closing tag followed by its body"""
        parser = MarkupParser("[hr]text")
        nodes = parser.parse()

        assert nodes == (ElementNode(name="hr", self_closing=True), lit("text"))
        assert parser.issues == [MarkupIssue("unclosed", "hr", 0)]

    def test_implicit_close_inside_pair(self):
        """Test a tail closes inner unclosed heads as self-closing tags"""
        parser = MarkupParser("[b]x[i]y[/b]")
        nodes = parser.parse()

        assert nodes == (
            ElementNode(
                name="b",
                children=(lit("x"), ElementNode(name="i", self_closing=True), lit("y")),
            ),
        )
        assert parser.issues == [MarkupIssue("unclosed", "i", 4)]

    def test_stray_tail_is_text(self):
        """Test a tail without a head is kept as text and merged with neighbours"""
        parser = MarkupParser("x[/b]y")
        nodes = parser.parse()

        assert nodes == (lit("x[/b]y"),)
        assert parser.issues == [MarkupIssue("unexpected_tail", "b", 1)]

    def test_tail_closes_nearest_match(self):
        """Test the innermost open tag with the same name is closed"""
        nodes = parse_markup("[b]a[b]b[/b]c[/b]")

        assert nodes == (
            ElementNode(
                name="b",
                children=(lit("a"), ElementNode(name="b", children=(lit("b"),)), lit("c")),
            ),
        )

    @pytest.mark.parametrize("text", [
        "",
        "plain",
        "[b]bold[/b]",
        "[hr]text",
        "[b]x[i]y[/b]",
        "x[/b]y",
        "[abc[def]",
        "[quote=someone][b]a[/quote] tail [/i]",
        "[table][tr][td=30]a[/td][/tr][/table]",
        "[color=Red]红色[/color][/color]",
        "[]x[/][=y]",
    ])
    def test_render_restores_source(self, text):
        """Test rendering the parsed tree gives back the input"""
        assert render_nodes(parse_markup(text)) == text

    def test_check_valid_markup(self):
        """Test well-formed markup has no issues"""
        assert check_markup("[b]ok[/b] [url=https://example.org]link[/url]") == []

    def test_check_reports_all_issues(self):
        """Test issues are collected in the order they are found"""
        issues = check_markup("[b]unclosed [/i]")

        assert [issue.kind for issue in issues] == ["unexpected_tail", "unclosed"]
        assert issues[0].name == "i"
        assert issues[1].name == "b"

    def test_accepts_tokens(self):
        """Test the parser works on pre-tokenized input"""
        tokens = tokenize_markup("[b]x[/b]")

        assert MarkupParser(tokens).parse() == parse_markup("[b]x[/b]")

    def test_parse_resets_issues(self):
        """Test repeated parse() calls do not accumulate issues"""
        parser = MarkupParser("[b]")
        parser.parse()
        parser.parse()

        assert len(parser.issues) == 1

    def test_issue_messages(self):
        """Test human-readable issue descriptions"""
        assert str(MarkupIssue("unclosed", "b", 0)) == "Tag '[b]' at 0 is never closed"
        assert str(MarkupIssue("unexpected_tail", "i", 12)) == (
            "Closing tag '[/i]' at 12 has no opening tag"
        )
        assert str(MarkupIssue("empty_name", "", 3)) == "Tag at 3 has no name and is kept as text"

    def test_empty_tag_name_is_text(self):
        """Test heads and tails without a name stay literal text and are reported"""
        parser = MarkupParser("a[]b[/]c[=x]")
        nodes = parser.parse()

        assert nodes == (lit("a[]b[/]c[=x]"),)
        assert parser.issues == [
            MarkupIssue("empty_name", "", 1),
            MarkupIssue("empty_name", "", 4),
            MarkupIssue("empty_name", "", 8),
        ]

    def test_empty_name_does_not_close_tags(self):
        nodes = parse_markup("[b]x[/][/b]")

        assert nodes == (ElementNode(name="b", children=(lit("x[/]"),)),)


class TestDeepNesting:

    DEPTH = 2000

    def test_render_deeply_nested_pairs(self):
        """Test nesting depth is not limited by the interpreter stack"""
        text = "[a]" * self.DEPTH + "x" + "[/a]" * self.DEPTH

        assert render_nodes(parse_markup(text)) == text

    def test_render_many_unclosed_heads(self):
        text = "[q]" * self.DEPTH + "tail"

        assert render_nodes(parse_markup(text)) == text

    def test_dump_deeply_nested_tree(self):
        lines = format_ast_tree(parse_markup("[a]" * self.DEPTH + "x" + "[/a]" * self.DEPTH)).splitlines()

        assert len(lines) == self.DEPTH + 1
        assert lines[0] == "Element(a)"
        assert lines[-1] == "  " * self.DEPTH + "Text('x')"
