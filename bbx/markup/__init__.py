"""
Пакет для работы с bbcode-разметкой.

Лексер разбивает текст на головы, хвосты и текст без потерь,
парсер сворачивает токены в дерево узлов шаблонизатора,
теги и цвета позволяют собирать разметку из кода.
"""

from .colors import WebColor, ColorValue
from .lexer import MarkupLexer, tokenize_markup, tokens_source, format_tokens
from .parser import MarkupIssue, MarkupParser, parse_markup, check_markup
from .tags import BBCodeTag, Tag, Bold, Url, Color, Table, TableRow, TableData, bbcode_to_string
from .tokens import HeadToken, TailToken, TextToken, MarkupToken, TokenKind

__all__ = [
    # Лексер
    "MarkupLexer",
    "tokenize_markup",
    "tokens_source",
    "format_tokens",
    "HeadToken",
    "TailToken",
    "TextToken",
    "MarkupToken",
    "TokenKind",

    # Парсер
    "MarkupIssue",
    "MarkupParser",
    "parse_markup",
    "check_markup",

    # Теги и цвета
    "WebColor",
    "ColorValue",
    "BBCodeTag",
    "Tag",
    "Bold",
    "Url",
    "Color",
    "Table",
    "TableRow",
    "TableData",
    "bbcode_to_string",
]
