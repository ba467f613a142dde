"""
Шаблонизатор bbcode.

Шаблон описывает дерево тегов в компактном синтаксисе:

    url { {"https://example.org"}, "example" },
    b { ("{} of {}", ${done}, ${total}) },
    hr { / }

Разбор выполняется один раз при создании шаблона (ошибки синтаксиса:
TemplateSyntaxError), рендер с привязками можно повторять сколько угодно раз.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, FrozenSet, Mapping, Optional

from .nodes import TemplateAST, collect_variables, format_ast_tree
from .parser import TemplateParser, parse_template
from .renderer import Stringable, TemplateRenderer, render_nodes, to_text


class Template:
    """
    Разобранный шаблон bbcode.

    Неизменяем и безопасен для повторного использования из разных потоков:
    каждый вызов render() создаёт собственный рендерер.
    """

    def __init__(self, source: str):
        self.source = source
        self.nodes: TemplateAST = parse_template(source)
        self.variables: FrozenSet[str] = frozenset(collect_variables(self.nodes))

    def render(self, bindings: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> str:
        """
        Рендерит шаблон.

        Args:
            bindings: Значения привязок
            **kwargs: Дополнительные привязки (перекрывают bindings)

        Raises:
            TemplateBindingError: Если выражение не удаётся разрешить
        """
        values = dict(bindings or {})
        values.update(kwargs)
        return TemplateRenderer(values).render(self.nodes)

    def dump(self) -> str:
        """Дерево узлов для отладки."""
        return format_ast_tree(self.nodes)

    def __repr__(self) -> str:
        return f"Template(nodes={len(self.nodes)}, variables={sorted(self.variables)})"


@lru_cache(maxsize=256)
def compile_template(source: str) -> Template:
    """Разбирает шаблон с кэшированием по тексту исходника."""
    return Template(source)


def render_template(source: str, bindings: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> str:
    """Разбирает (с кэшем) и сразу рендерит шаблон."""
    return compile_template(source).render(bindings, **kwargs)


__all__ = [
    "Template",
    "TemplateParser",
    "TemplateRenderer",
    "Stringable",
    "compile_template",
    "render_template",
    "parse_template",
    "render_nodes",
    "to_text",
]
