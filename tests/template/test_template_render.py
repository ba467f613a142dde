"""
Tests for template rendering and the Template facade.
"""

import re
from types import SimpleNamespace

import pytest

from bbx.errors import TemplateBindingError, TemplateSyntaxError
from bbx.template import Template, compile_template, render_template
from bbx.template.nodes import ElementNode, LiteralText, text
from bbx.template.renderer import TemplateRenderer, is_stringable, render_nodes, to_text


class Registry:
    """Stringable value used for interpolation."""

    def __init__(self, host):
        self.host = host

    def to_text(self):
        return f"https://{self.host}"

    def __str__(self):
        return "not used"


class TestRender:

    def test_attribute_placement(self):
        assert render_template('tag { {"x"}, "body" }') == "[tag=x]body[/tag]"

    def test_nesting(self):
        assert render_template('outer { inner { "a" } }') == "[outer][inner]a[/inner][/outer]"

    def test_empty_vs_self_closing(self):
        """Test an empty element keeps its tail while a self-closing one has none"""
        assert render_template("tag {}") == "[tag][/tag]"
        assert render_template("tag { / }") == "[tag]"
        assert render_template('tag { {"x"}, / }') == "[tag=x]"

    def test_self_closing_suppresses_children(self):
        """Test children of a self-closing node are never rendered"""
        node = ElementNode(name="hr", attr=LiteralText("1"), children=(text("lost"),), self_closing=True)

        assert render_nodes((node,)) == "[hr=1]"

    def test_siblings_without_separators(self):
        source = """
            // header
            b { "one" },
            " and ",
            i { "two" },
        """
        assert render_template(source) == "[b]one[/b] and [i]two[/i]"

    def test_styled_text(self):
        source = """
            underline {
                "underline text",
                color {
                    {"#cc0000"},
                    "text colored #cc0000",
                    bold { "bold text colored #cc0000" },
                },
            },
            italic { "italic text" }
        """
        assert render_template(source) == (
            "[underline]underline text[color=#cc0000]text colored #cc0000"
            "[bold]bold text colored #cc0000[/bold][/color][/underline]"
            "[italic]italic text[/italic]"
        )

    def test_stringable_attribute(self):
        """Test Stringable values use to_text() instead of str()"""
        source = """
            url { {${registry}} },
            italic { "The Rust" },
            bold { "package registry" }
        """
        assert render_template(source, registry=Registry("crates.io")) == (
            "[url=https://crates.io][/url][italic]The Rust[/italic][bold]package registry[/bold]"
        )

    def test_interpolation_uses_str(self):
        assert render_template("b { ${n} }", n=42) == "[b]42[/b]"
        assert render_template("b { ${n} }", n=None) == "[b]None[/b]"

    def test_format(self):
        """Test positional formatting with format specs"""
        assert render_template('("{:>5}|{:.2f}", "ab", 3.14159)') == "   ab|3.14"
        assert render_template('b { ("{1}-{0}", a, b) }', a=1, b=2) == "[b]2-1[/b]"

    def test_format_stringable_argument(self):
        assert render_template('("see {}", ${r})', r=Registry("x.org")) == "see https://x.org"

    def test_escaped_braces_in_format(self):
        assert render_template('("{{{}}}", v)', v="x") == "{x}"

    def test_format_conversions(self):
        assert render_template('("{!r:>5}", "a")') == "  'a'"
        assert render_template('("{!s}", v)', v=1) == "1"

    def test_bound_value_rejected_by_format_spec(self):
        """Test a bound value incompatible with the format spec is a binding error"""
        with pytest.raises(TemplateBindingError) as exc_info:
            render_template('("{:.2f}", ${v})', v="abc")

        assert exc_info.value.expression == "v"
        assert "Unknown format code 'f'" in str(exc_info.value)

    def test_class_with_to_text_uses_str(self):
        """Test a class object is not treated as a Stringable instance"""
        assert render_template("${cls}", cls=Registry) == str(Registry)
        assert render_template('("{}", cls)', cls=Registry) == str(Registry)


class TestBindings:

    def test_mapping_and_object_access(self):
        """Test '.name' works on mappings and objects, '[key]' on sequences and mappings"""
        bindings = {
            "user": SimpleNamespace(name="Alice", roles=["admin", "dev"]),
            "cfg": {"site": {"title": "Forum"}},
        }
        source = '${user.name}, " ", ${user.roles[1]}, " ", ${cfg.site["title"]}'

        assert render_template(source, bindings) == "Alice dev Forum"

    def test_missing_binding(self):
        with pytest.raises(TemplateBindingError, match=re.escape("Cannot resolve 'user.name': 'user' is not bound")):
            render_template("${user.name}")

    def test_missing_attribute(self):
        with pytest.raises(TemplateBindingError) as exc_info:
            render_template("${user.email}", user=SimpleNamespace(name="x"))

        assert exc_info.value.expression == "user.email"
        assert "no .email on SimpleNamespace" in str(exc_info.value)

    def test_index_out_of_range(self):
        with pytest.raises(TemplateBindingError, match=re.escape("no [5] on list")):
            render_template("${items[5]}", items=[1])

    def test_renderer_resolve(self):
        renderer = TemplateRenderer({"a": {"b": [10, 20]}})

        assert renderer.resolve(Template("${a.b[1]}").nodes[0].content.expr) == 20

    def test_to_text(self):
        assert to_text("s") == "s"
        assert to_text(1.5) == "1.5"
        assert to_text(Registry("h")) == "https://h"
        assert to_text(Registry) == str(Registry)
        assert not is_stringable(Registry)
        assert is_stringable(Registry("h"))


class TestTemplate:

    def test_variables(self):
        template = Template('b { ${a} }, ("{}", b.c), hr { / }')

        assert template.variables == frozenset({"a", "b"})

    def test_kwargs_override_bindings(self):
        template = Template("${x}")

        assert template.render({"x": 1}) == "1"
        assert template.render({"x": 1}, x=2) == "2"

    def test_reusable(self):
        """Test one template renders many times with different bindings"""
        template = Template('b { ("{} of {}", done, total) }')

        assert template.render(done=1, total=5) == "[b]1 of 5[/b]"
        assert template.render(done=5, total=5) == "[b]5 of 5[/b]"

    def test_syntax_error_at_definition(self):
        with pytest.raises(TemplateSyntaxError):
            Template("b {")

    def test_compile_cache(self):
        assert compile_template("hr { / }") is compile_template("hr { / }")

    def test_dump_and_repr(self):
        template = Template("hr { / }, ${x}")

        assert template.dump() == "Element(hr) /\nText(${x})"
        assert repr(template) == "Template(nodes=2, variables=['x'])"
