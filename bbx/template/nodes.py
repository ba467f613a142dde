"""
AST-узлы шаблонов bbcode.

Узел шаблона это либо элемент (тег с необязательным атрибутом и дочерними
узлами), либо текст. Текст бывает литеральным, интерполированным `${expr}`
или форматированным `("fmt {}", arg)`. Те же узлы строит парсер разметки,
поэтому дерево из шаблона и дерево из готового текста рендерятся одинаково.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Literal, Optional, Tuple, Union


@dataclass(frozen=True)
class Accessor:
    """Один шаг обращения в выражении: `.name` или `[key]`."""
    kind: Literal["attr", "item"]
    key: Union[str, int]

    def __str__(self) -> str:
        if self.kind == "attr":
            return f".{self.key}"
        return f"[{self.key!r}]"


@dataclass(frozen=True)
class Expression:
    """
    Ссылка на значение из привязок: `name.attr[0]["key"]`.
    """
    root: str
    accessors: Tuple[Accessor, ...] = ()

    def __str__(self) -> str:
        return self.root + "".join(str(a) for a in self.accessors)


@dataclass(frozen=True)
class ConstArg:
    """Литеральный аргумент форматирования (строка или число)."""
    value: Any


FormatArg = Union[ConstArg, Expression]


@dataclass(frozen=True)
class LiteralText:
    """Литеральная строка, выводится как есть."""
    value: str


@dataclass(frozen=True)
class InterpolatedText:
    """`${expr}`: значение выражения, приведённое к строке при рендере."""
    expr: Expression


@dataclass(frozen=True)
class FormattedText:
    """`("fmt {}", arg, ...)`: результат позиционного форматирования."""
    template: str
    args: Tuple[FormatArg, ...] = ()


TextContent = Union[LiteralText, InterpolatedText, FormattedText]
AttrContent = Union[LiteralText, InterpolatedText]


@dataclass(frozen=True)
class TemplateNode:
    """Базовый класс для узлов шаблона."""
    pass


@dataclass(frozen=True)
class TextNode(TemplateNode):
    """
    Текстовый лист дерева, вложенной структуры не содержит.
    """
    content: TextContent


@dataclass(frozen=True)
class ElementNode(TemplateNode):
    """
    Тег bbcode: `[name=attr]children[/name]`.

    Самозакрывающийся элемент выводит только голову `[name=attr]`:
    дочерние узлы и хвост для него не выводятся никогда.
    """
    name: str
    attr: Optional[AttrContent] = None
    children: Tuple[TemplateNode, ...] = ()
    self_closing: bool = False


TemplateAST = Tuple[TemplateNode, ...]


def text(value: str) -> TextNode:
    """Короткий конструктор литерального текстового узла."""
    return TextNode(LiteralText(value))


def collect_variables(nodes: TemplateAST) -> List[str]:
    """
    Собирает имена корневых привязок, на которые ссылается дерево.

    Returns:
        Имена в порядке первого появления, без повторов
    """
    names: List[str] = []

    def add(expr: Expression) -> None:
        if expr.root not in names:
            names.append(expr.root)

    def visit_content(content: Optional[TextContent]) -> None:
        if isinstance(content, InterpolatedText):
            add(content.expr)
        elif isinstance(content, FormattedText):
            for arg in content.args:
                if isinstance(arg, Expression):
                    add(arg)

    stack: List[TemplateNode] = list(reversed(nodes))
    while stack:
        node = stack.pop()
        if isinstance(node, ElementNode):
            visit_content(node.attr)
            if not node.self_closing:
                stack.extend(reversed(node.children))
        elif isinstance(node, TextNode):
            visit_content(node.content)

    return names


def _format_node(node: TemplateNode) -> str:
    if isinstance(node, ElementNode):
        attr = ""
        if isinstance(node.attr, LiteralText):
            attr = f" attr={node.attr.value!r}"
        elif isinstance(node.attr, InterpolatedText):
            attr = f" attr=${{{node.attr.expr}}}"
        closing = " /" if node.self_closing else ""
        return f"Element({node.name}{attr}){closing}"
    if isinstance(node, TextNode):
        content = node.content
        if isinstance(content, LiteralText):
            # Показываем только начало текста для читабельности
            preview = content.value[:50] + "..." if len(content.value) > 50 else content.value
            return f"Text({preview!r})"
        if isinstance(content, InterpolatedText):
            return f"Text(${{{content.expr}}})"
        return f"Text(format={content.template!r}, args={len(content.args)})"
    return type(node).__name__


def format_ast_tree(ast: TemplateAST, indent: int = 0) -> str:
    """Форматирует AST как дерево для отладки (без рекурсии, глубина не ограничена)."""
    lines = []
    stack = [(node, indent) for node in reversed(ast)]

    while stack:
        node, depth = stack.pop()
        lines.append("  " * depth + _format_node(node))
        if isinstance(node, ElementNode) and not node.self_closing:
            stack.extend((child, depth + 1) for child in reversed(node.children))

    return "\n".join(lines)


__all__ = [
    "Accessor",
    "Expression",
    "ConstArg",
    "FormatArg",
    "LiteralText",
    "InterpolatedText",
    "FormattedText",
    "TextContent",
    "AttrContent",
    "TemplateNode",
    "TextNode",
    "ElementNode",
    "TemplateAST",
    "text",
    "collect_variables",
    "format_ast_tree",
]
