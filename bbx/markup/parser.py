"""
Парсер bbcode-разметки: поток токенов → дерево узлов шаблона.

Строит те же ElementNode/TextNode, что и шаблонизатор, поэтому
рендер разобранного дерева восстанавливает исходный текст.

Правила свёртки:
- голова открывает кадр на стеке;
- хвост закрывает ближайший открытый кадр с тем же именем, а кадры над ним
  закрываются неявно как самозакрывающиеся теги, их дети идут следом;
- хвост без пары становится текстом, как и голова или хвост с пустым именем;
- в конце ввода незакрытые кадры тоже становятся самозакрывающимися тегами.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Sequence, Union

from ..template.nodes import ElementNode, LiteralText, TemplateAST, TemplateNode, TextNode
from .lexer import tokenize_markup
from .tokens import HeadToken, MarkupToken, TailToken

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkupIssue:
    """
    Структурная проблема разметки, найденная при свёртке.

    Attributes:
        kind: 'unclosed' (голова без хвоста), 'unexpected_tail' (хвост без головы)
            или 'empty_name' (`[]`, `[/]`, `[=x]` без имени тега)
        name: Имя тега
        position: Позиция токена в исходном тексте
    """
    kind: Literal["unclosed", "unexpected_tail", "empty_name"]
    name: str
    position: int

    def __str__(self) -> str:
        if self.kind == "unclosed":
            return f"Tag '[{self.name}]' at {self.position} is never closed"
        if self.kind == "empty_name":
            return f"Tag at {self.position} has no name and is kept as text"
        return f"Closing tag '[/{self.name}]' at {self.position} has no opening tag"


@dataclass
class _Frame:
    head: HeadToken
    children: List[TemplateNode] = field(default_factory=list)


class MarkupParser:
    """
    Свёртка токенов лексера в дерево узлов.

    Как и лексер, никогда не выбрасывает ошибок: проблемы структуры
    накапливаются в self.issues.
    """

    def __init__(self, source: Union[str, Sequence[MarkupToken]]):
        """
        Args:
            source: Текст разметки или уже готовые токены
        """
        if isinstance(source, str):
            self.tokens: List[MarkupToken] = tokenize_markup(source)
        else:
            self.tokens = list(source)
        self.issues: List[MarkupIssue] = []
        self._root: List[TemplateNode] = []
        self._stack: List[_Frame] = []

    def parse(self) -> TemplateAST:
        """
        Returns:
            Узлы верхнего уровня
        """
        self.issues = []
        self._root = []
        self._stack = []

        for token in self.tokens:
            if isinstance(token, (HeadToken, TailToken)) and not token.name:
                self.issues.append(MarkupIssue("empty_name", "", token.start))
                self._append(TextNode(LiteralText(token.raw)))
            elif isinstance(token, HeadToken):
                self._stack.append(_Frame(token))
            elif isinstance(token, TailToken):
                self._close(token)
            else:
                self._append(TextNode(LiteralText(token.raw)))

        while self._stack:
            self._close_implicit()

        logger.debug(f"Parsed {len(self.tokens)} tokens into {len(self._root)} nodes, {len(self.issues)} issues")
        return tuple(self._root)

    def _close(self, tail: TailToken) -> None:
        index = self._find_open(tail.name)
        if index is None:
            self.issues.append(MarkupIssue("unexpected_tail", tail.name, tail.start))
            logger.debug(f"Stray closing tag [/{tail.name}] at {tail.start}")
            self._append(TextNode(LiteralText(tail.raw)))
            return

        while len(self._stack) > index + 1:
            self._close_implicit()

        frame = self._stack.pop()
        self._append(ElementNode(
            name=frame.head.name,
            attr=self._attr(frame.head),
            children=tuple(frame.children),
        ))

    def _close_implicit(self) -> None:
        """Закрывает верхний кадр как самозакрывающийся тег и выносит его детей на уровень выше."""
        frame = self._stack.pop()
        self.issues.append(MarkupIssue("unclosed", frame.head.name, frame.head.start))
        self._append(ElementNode(name=frame.head.name, attr=self._attr(frame.head), self_closing=True))
        for child in frame.children:
            self._append(child)

    def _find_open(self, name: str) -> Optional[int]:
        for index in range(len(self._stack) - 1, -1, -1):
            if self._stack[index].head.name == name:
                return index
        return None

    def _append(self, node: TemplateNode) -> None:
        """Добавляет узел в текущий кадр, склеивая соседние литеральные тексты."""
        target = self._stack[-1].children if self._stack else self._root
        if (
            target
            and isinstance(node, TextNode)
            and isinstance(node.content, LiteralText)
            and isinstance(target[-1], TextNode)
            and isinstance(target[-1].content, LiteralText)
        ):
            target[-1] = TextNode(LiteralText(target[-1].content.value + node.content.value))
        else:
            target.append(node)

    @staticmethod
    def _attr(head: HeadToken) -> Optional[LiteralText]:
        return LiteralText(head.attr) if head.attr is not None else None


def parse_markup(text: str) -> TemplateAST:
    """Удобная функция: текст разметки → дерево узлов."""
    return MarkupParser(text).parse()


def check_markup(text: str) -> List[MarkupIssue]:
    """Возвращает структурные проблемы разметки (пустой список, если их нет)."""
    parser = MarkupParser(text)
    parser.parse()
    return parser.issues


__all__ = ["MarkupIssue", "MarkupParser", "parse_markup", "check_markup"]
