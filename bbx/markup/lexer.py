"""
Лексический анализатор bbcode-разметки.

Разбивает произвольный текст на токены голов тегов `[name=attr]`,
хвостов `[/name]` и текстовых фрагментов. Лексер никогда не выбрасывает
ошибок: любая некорректная скобочная последовательность становится текстом.
Разбиение без потерь: каждый символ входа попадает ровно в один токен.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from .scanner import Scanner
from .tokens import (
    CLOSE,
    EQUAL,
    OPEN,
    SLASH,
    HeadToken,
    MarkupToken,
    TailToken,
    TextToken,
)

logger = logging.getLogger(__name__)


class MarkupLexer:
    """
    Однопроходный лексер поверх Scanner.

    Состояния: чтение текста, внутри головы тега, внутри хвоста тега.
    Если внутри тега встречается новая `[` раньше `]`, накопленный фрагмент
    становится текстом, а разбор продолжается с этой `[`.
    """

    def __init__(self, text: str):
        """
        Args:
            text: Исходный текст с bbcode-разметкой
        """
        self.text = text
        self.scanner = Scanner(text)
        self.tokens: List[MarkupToken] = []

    def tokenize(self) -> List[MarkupToken]:
        """
        Выполняет разбор всего текста.

        Returns:
            Токены в порядке следования во входе
        """
        self.scanner = Scanner(self.text)
        self.tokens = []

        while not self.scanner.at_end():
            if self.scanner.curr() == OPEN:
                token = self._scan_tag()
            else:
                token = self._scan_text()
            self.tokens.append(token)

        logger.debug(f"Tokenized {self.scanner.length} chars into {len(self.tokens)} markup tokens")
        return list(self.tokens)

    def _scan_text(self) -> TextToken:
        """Читает текст до следующей `[` или до конца ввода."""
        start = self.scanner.position
        while not self.scanner.at_end() and self.scanner.curr() != OPEN:
            self.scanner.next()
        return self._collect_text(start, self.scanner.position)

    def _scan_tag(self) -> MarkupToken:
        """
        Читает голову или хвост тега.

        Вызывающий гарантирует, что курсор стоит на `[`.
        """
        start = self.scanner.position
        is_tail = self.scanner.peek() == SLASH
        self.scanner.next()

        while True:
            ch = self.scanner.next()
            if ch is None:
                # Ввод закончился до `]`
                return self._collect_text(start, self.scanner.length)
            if ch == CLOSE:
                return self._collect_tag(start, self.scanner.position, is_tail)
            if ch == OPEN:
                # Новая `[` до закрытия: она не входит в текст
                self.scanner.back()
                logger.debug(f"Unterminated tag at {start}, falling back to text")
                return self._collect_text(start, self.scanner.position)

    def _collect_text(self, start: int, end: int) -> TextToken:
        return TextToken(start=start, end=end, raw=self.scanner.get_range(start, end))

    def _collect_tag(self, start: int, end: int, is_tail: bool) -> MarkupToken:
        """
        Строит Head/Tail из диапазона, включающего обе скобки:

            [ n a m e = a t t r ]
            |                     |
            start                 end
        """
        raw = self.scanner.get_range(start, end)

        if is_tail:
            return TailToken(name=raw[2:-1], start=start, end=end, raw=raw)

        inner = raw[1:-1]
        name, sep, attr = inner.partition(EQUAL)
        return HeadToken(name=name, attr=attr if sep else None, start=start, end=end, raw=raw)


def tokenize_markup(text: str) -> List[MarkupToken]:
    """
    Удобная функция для токенизации bbcode-разметки.

    Args:
        text: Исходный текст

    Returns:
        Список токенов
    """
    return MarkupLexer(text).tokenize()


def tokens_source(tokens: Sequence[MarkupToken]) -> str:
    """Склеивает исходные фрагменты токенов обратно в текст."""
    return "".join(token.raw for token in tokens)


def format_tokens(tokens: Sequence[MarkupToken]) -> str:
    """Форматирует токены построчно для отладки."""
    return "\n".join(f"{token.start:>6} {token.kind.value:<4} {token.raw!r}" for token in tokens)


__all__ = ["MarkupLexer", "tokenize_markup", "tokens_source", "format_tokens"]
