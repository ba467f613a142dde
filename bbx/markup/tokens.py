"""
Токены лексера bbcode-разметки.

Набор вариантов закрыт: голова тега, хвост тега и обычный текст.
Каждый токен хранит точный исходный фрагмент и его диапазон,
так что конкатенация raw всех токенов восстанавливает вход.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union

OPEN = "["
CLOSE = "]"
SLASH = "/"
EQUAL = "="


class TokenKind(enum.Enum):
    HEAD = "head"
    TAIL = "tail"
    TEXT = "text"


@dataclass(frozen=True)
class HeadToken:
    """
    Голова тега: `[name]` или `[name=attr]`.
    """
    name: str
    attr: Optional[str]
    start: int
    end: int
    raw: str

    kind = TokenKind.HEAD

    def __repr__(self) -> str:
        if self.attr is None:
            return f"Head({self.name!r}, {self.start}:{self.end})"
        return f"Head({self.name!r}={self.attr!r}, {self.start}:{self.end})"


@dataclass(frozen=True)
class TailToken:
    """
    Хвост тега: `[/name]`.
    """
    name: str
    start: int
    end: int
    raw: str

    kind = TokenKind.TAIL

    def __repr__(self) -> str:
        return f"Tail({self.name!r}, {self.start}:{self.end})"


@dataclass(frozen=True)
class TextToken:
    """Фрагмент текста, не распознанный как граница тега."""
    start: int
    end: int
    raw: str

    kind = TokenKind.TEXT

    @property
    def text(self) -> str:
        return self.raw

    def __repr__(self) -> str:
        preview = self.raw if len(self.raw) <= 30 else self.raw[:30] + "..."
        return f"Text({preview!r}, {self.start}:{self.end})"


MarkupToken = Union[HeadToken, TailToken, TextToken]


__all__ = [
    "OPEN",
    "CLOSE",
    "SLASH",
    "EQUAL",
    "TokenKind",
    "HeadToken",
    "TailToken",
    "TextToken",
    "MarkupToken",
]
