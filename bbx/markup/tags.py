"""
Типизированные теги bbcode.

Каждый тег умеет превращаться в ElementNode, поэтому вывод строит тот же
рендерер, что и у шаблонов. Теги реализуют протокол Stringable и могут
подставляться в шаблоны через `${...}`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..template.nodes import ElementNode, LiteralText, TemplateNode, TextNode
from ..template.renderer import render_nodes, to_text
from .colors import ColorValue, color_text


def to_child_node(child: Any) -> TemplateNode:
    """
    Превращает дочерний элемент тега в узел.

    Теги дают свой ElementNode, готовые узлы передаются как есть,
    всё остальное становится литеральным текстом.
    """
    if isinstance(child, BBCodeTag):
        return child.to_node()
    if isinstance(child, TemplateNode):
        return child
    return TextNode(LiteralText(to_text(child)))


class BBCodeTag(ABC):
    """Базовый класс для всех тегов bbcode."""

    @abstractmethod
    def to_node(self) -> ElementNode:
        """Узел дерева для этого тега."""
        pass

    @property
    def attr(self) -> Optional[str]:
        """Атрибут тега, если есть."""
        return None

    def to_bbcode(self) -> str:
        return render_nodes((self.to_node(),))

    def to_text(self) -> str:
        return self.to_bbcode()

    def __str__(self) -> str:
        return self.to_bbcode()


class Tag(BBCodeTag):
    """
    Произвольный тег: `Tag("quote", "text", attr="author")`.
    """

    def __init__(self, name: str, *children: Any, attr: Any = None, self_closing: bool = False):
        self.name = name
        self.children = children
        self._attr = attr
        self.self_closing = self_closing

    @property
    def attr(self) -> Optional[str]:
        if self._attr is None:
            return None
        return to_text(self._attr)

    def to_node(self) -> ElementNode:
        attr = self.attr
        return ElementNode(
            name=self.name,
            attr=LiteralText(attr) if attr is not None else None,
            children=tuple(to_child_node(child) for child in self.children),
            self_closing=self.self_closing,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_bbcode()!r})"


class Bold(Tag):
    """`[b]...[/b]`: жирный текст."""

    def __init__(self, *children: Any):
        super().__init__("b", *children)


class Url(Tag):
    """`[url=LINK]...[/url]`: ссылка."""

    def __init__(self, link: str, *children: Any):
        super().__init__("url", *children, attr=link)
        self.link = link


class Color(Tag):
    """`[color=COLOR]...[/color]`: цвет текста."""

    def __init__(self, color: ColorValue, *children: Any):
        super().__init__("color", *children, attr=color_text(color))
        self.color = color


class TableData(Tag):
    """`[td]...[/td]` или `[td=WIDTH]...[/td]`: ячейка таблицы."""

    def __init__(self, *children: Any, width: Optional[int] = None):
        super().__init__("td", *children, attr=width)
        self.width = width


class TableRow(Tag):
    """`[tr]...[/tr]`: строка таблицы, содержит только ячейки."""

    def __init__(self, *cells: TableData):
        for cell in cells:
            if not isinstance(cell, TableData):
                raise TypeError(f"TableRow accepts TableData cells only, got {type(cell).__name__}")
        super().__init__("tr", *cells)


class Table(Tag):
    """`[table]...[/table]`: таблица, содержит только строки."""

    def __init__(self, *rows: TableRow):
        for row in rows:
            if not isinstance(row, TableRow):
                raise TypeError(f"Table accepts TableRow rows only, got {type(row).__name__}")
        super().__init__("table", *rows)

    @classmethod
    def empty(cls) -> "Table":
        """Пустая таблица: `[table][/table]`."""
        return cls()


def bbcode_to_string(*items: Any) -> str:
    """Склеивает теги и текст в одну строку разметки."""
    return render_nodes(tuple(to_child_node(item) for item in items))


__all__ = [
    "BBCodeTag",
    "Tag",
    "Bold",
    "Url",
    "Color",
    "Table",
    "TableRow",
    "TableData",
    "to_child_node",
    "bbcode_to_string",
]
