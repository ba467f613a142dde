"""
Рендерер дерева шаблона в bbcode-разметку.

Проходит по узлам и склеивает результат без разделителей:
`[name=attr]` + дети + `[/name]`, у самозакрывающихся элементов только голова.
Значения интерполяций приводятся к строке через протокол Stringable.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Protocol, Union, runtime_checkable

from ..errors import TemplateBindingError
from .nodes import (
    AttrContent,
    ConstArg,
    ElementNode,
    Expression,
    FormatArg,
    FormattedText,
    InterpolatedText,
    LiteralText,
    TemplateNode,
    TextContent,
    TextNode,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class Stringable(Protocol):
    """Значение, которое само знает своё текстовое представление для разметки."""

    def to_text(self) -> str:
        ...


def is_stringable(value: Any) -> bool:
    """Экземпляр с to_text(); строки и сами классы протоколу не удовлетворяют."""
    return not isinstance(value, (str, type)) and isinstance(value, Stringable)


def to_text(value: Any) -> str:
    """
    Приводит значение к строке для вставки в разметку.

    Stringable-значения используют собственный to_text(), остальные str().
    """
    if isinstance(value, str):
        return value
    if is_stringable(value):
        return value.to_text()
    return str(value)


class TemplateRenderer:
    """
    Рендерер AST шаблона.

    Принимает привязки (имя → значение) и превращает дерево в строку.
    """

    def __init__(self, bindings: Optional[Mapping[str, Any]] = None):
        """
        Args:
            bindings: Значения для интерполяций `${...}` и аргументов форматирования
        """
        self.bindings: Mapping[str, Any] = bindings or {}

    def render(self, nodes: Iterable[TemplateNode]) -> str:
        """
        Рендерит последовательность узлов верхнего уровня.

        Обход итеративный, глубина вложенности ограничена только памятью.

        Raises:
            TemplateBindingError: Если выражение не удаётся разрешить
        """
        parts: List[str] = []
        # Стек в обратном порядке: узлы и отложенные хвосты `[/name]`
        stack: List[Union[TemplateNode, str]] = list(reversed(tuple(nodes)))

        while stack:
            item = stack.pop()
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, ElementNode):
                parts.append(self._render_head(item))
                # Самозакрывающийся тег: ни тела, ни хвоста
                if not item.self_closing:
                    stack.append(f"[/{item.name}]")
                    stack.extend(reversed(item.children))
            elif isinstance(item, TextNode):
                parts.append(self._render_text(item.content))
            else:
                raise TypeError(f"Unknown template node type: {type(item).__name__}")

        return "".join(parts)

    def _render_head(self, node: ElementNode) -> str:
        head = "[" + node.name
        if node.attr is not None:
            head += "=" + self._render_attr(node.attr)
        return head + "]"

    def _render_attr(self, attr: AttrContent) -> str:
        if isinstance(attr, LiteralText):
            return attr.value
        return to_text(self.resolve(attr.expr))

    def _render_text(self, content: TextContent) -> str:
        if isinstance(content, LiteralText):
            return content.value
        if isinstance(content, InterpolatedText):
            return to_text(self.resolve(content.expr))
        if isinstance(content, FormattedText):
            args = [self._format_arg(arg) for arg in content.args]
            try:
                return content.template.format(*args)
            except (ValueError, TypeError) as e:
                bound = ", ".join(str(arg) for arg in content.args if isinstance(arg, Expression))
                raise TemplateBindingError(bound or content.template, f"cannot format with {content.template!r}: {e}") from e
        raise TypeError(f"Unknown text content type: {type(content).__name__}")

    def _format_arg(self, arg: FormatArg) -> Any:
        if isinstance(arg, ConstArg):
            return arg.value
        value = self.resolve(arg)
        # Stringable заменяем его текстом, остальные значения отдаём format() как есть
        if is_stringable(value):
            return value.to_text()
        return value

    def resolve(self, expr: Expression) -> Any:
        """
        Вычисляет значение выражения по привязкам.

        `.name` сначала ищется как ключ отображения, затем как атрибут;
        `[key]` означает обращение по индексу или ключу.
        """
        if expr.root not in self.bindings:
            raise TemplateBindingError(str(expr), f"'{expr.root}' is not bound")

        value = self.bindings[expr.root]
        for accessor in expr.accessors:
            try:
                if accessor.kind == "item":
                    value = value[accessor.key]
                elif isinstance(value, Mapping) and accessor.key in value:
                    value = value[accessor.key]
                else:
                    value = getattr(value, str(accessor.key))
            except (KeyError, IndexError, TypeError, AttributeError) as e:
                logger.debug(f"Failed to resolve {expr} at {accessor}: {e!r}")
                raise TemplateBindingError(str(expr), f"no {accessor} on {type(value).__name__}") from e

        return value


def render_nodes(nodes: Iterable[TemplateNode], bindings: Optional[Mapping[str, Any]] = None) -> str:
    """
    Удобная функция для рендеринга дерева узлов.

    Args:
        nodes: Узлы верхнего уровня
        bindings: Значения привязок

    Returns:
        bbcode-разметка
    """
    return TemplateRenderer(bindings).render(nodes)


__all__ = ["Stringable", "is_stringable", "to_text", "TemplateRenderer", "render_nodes"]
