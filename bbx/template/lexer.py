"""
Лексер для синтаксиса шаблонов bbcode.

Разбивает исходный текст шаблона на значимые элементы:
- Идентификаторы (имена тегов и привязок)
- Строковые и числовые литералы
- Символы ({ } ( ) [ ] , / $ .)
- Пробелы и комментарии `//` (игнорируются)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple

from ..errors import TemplateSyntaxError


@dataclass(frozen=True)
class Token:
    """
    Токен синтаксиса шаблона.

    Attributes:
        type: Тип токена (IDENT, STRING, NUMBER, SYMBOL, EOF)
        value: Значение токена (для STRING уже раскодированная строка)
        position: Позиция в исходной строке
        line: Номер строки (начиная с 1)
        column: Номер колонки (начиная с 1)
    """
    type: str
    value: str
    position: int
    line: int
    column: int

    def __repr__(self):
        return f"Token({self.type}, {self.value!r}, {self.line}:{self.column})"


def line_column(text: str, position: int) -> Tuple[int, int]:
    """Переводит позицию в тексте в пару (строка, колонка), обе с единицы."""
    line = text.count("\n", 0, position) + 1
    column = position - (text.rfind("\n", 0, position) + 1) + 1
    return line, column


_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "{": "{",
    "}": "}",
}


class TemplateLexer:
    """
    Лексер для разбиения шаблона на токены.

    Поддерживаемые токены:
    - IDENT: имена тегов и привязок
    - STRING: строки в двойных или одинарных кавычках
    - NUMBER: целые и дробные числа
    - SYMBOL: { } ( ) [ ] , / $ .
    - EOF: конец шаблона
    """

    # Спецификация токенов: (regex_pattern, token_type, ignore_flag)
    TOKEN_SPECS = [
        # Пробелы и переводы строк (игнорируем)
        (r'\s+', 'WHITESPACE', True),

        # Комментарии до конца строки (проверяем перед символом /)
        (r'//[^\n]*', 'COMMENT', True),

        # Строковые литералы
        (r'"(?:[^"\\\n]|\\.)*"', 'STRING', False),
        (r"'(?:[^'\\\n]|\\.)*'", 'STRING', False),
        (r'["\']', 'UNTERMINATED_STRING', False),

        (r'-?\d+(?:\.\d+)?', 'NUMBER', False),

        (r'[A-Za-z_][A-Za-z0-9_]*', 'IDENT', False),

        (r'[{}()\[\],/$.]', 'SYMBOL', False),

        # Неизвестный символ (ошибка)
        (r'.', 'UNKNOWN', False),
    ]

    def __init__(self):
        # Компилируем регулярные выражения для лучшей производительности
        self._compiled_patterns = [
            (re.compile(pattern), token_type, ignore)
            for pattern, token_type, ignore in self.TOKEN_SPECS
        ]

    def tokenize(self, text: str) -> List[Token]:
        """
        Разбивает шаблон на токены.

        Args:
            text: Исходный текст шаблона

        Returns:
            Список токенов, включая EOF в конце

        Raises:
            TemplateSyntaxError: При неизвестном символе или незакрытой строке
        """
        tokens: List[Token] = []
        position = 0

        while position < len(text):
            for pattern, token_type, ignore in self._compiled_patterns:
                match = pattern.match(text, position)
                if not match:
                    continue

                value = match.group(0)
                if not ignore:
                    line, column = line_column(text, position)
                    if token_type == 'UNKNOWN':
                        raise TemplateSyntaxError(f"Unexpected character {value!r}", position, line, column)
                    if token_type == 'UNTERMINATED_STRING':
                        raise TemplateSyntaxError("Unterminated string literal", position, line, column)
                    if token_type == 'STRING':
                        value = self._unescape(value[1:-1], text, position + 1)
                    tokens.append(Token(token_type, value, position, line, column))

                position = match.end()
                break

        line, column = line_column(text, position)
        tokens.append(Token('EOF', '', position, line, column))

        return tokens

    def _unescape(self, body: str, text: str, offset: int) -> str:
        """
        Раскодирует escape-последовательности строкового литерала.

        Args:
            body: Содержимое литерала без кавычек
            text: Исходный шаблон (для позиций ошибок)
            offset: Позиция начала body в исходном шаблоне
        """
        if "\\" not in body:
            return body

        parts: List[str] = []
        i = 0
        while i < len(body):
            ch = body[i]
            if ch != "\\":
                parts.append(ch)
                i += 1
                continue

            esc = body[i + 1]
            if esc in _ESCAPES:
                parts.append(_ESCAPES[esc])
                i += 2
            elif esc == "u" and re.fullmatch(r'[0-9a-fA-F]{4}', body[i + 2:i + 6]):
                parts.append(chr(int(body[i + 2:i + 6], 16)))
                i += 6
            else:
                line, column = line_column(text, offset + i)
                raise TemplateSyntaxError(f"Invalid escape sequence '\\{esc}'", offset + i, line, column)

        return "".join(parts)


__all__ = ["Token", "TemplateLexer", "line_column"]
