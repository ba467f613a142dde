"""
Парсер шаблонов bbcode с рекурсивным спуском.

Строит дерево узлов (AST) из последовательности токенов шаблона.
Все синтаксические ошибки обнаруживаются здесь, на этапе определения
шаблона; успешно разобранное дерево рендерится без структурных ошибок.

Грамматика:
root        → [node ("," node)* [","]] EOF
node        → element | text               (IDENT + "{" → element)
element     → IDENT "{" [attribute [","]] children "}"
attribute   → "{" (STRING | interp) "}"
children    → "/" | [node ("," node)* [","]]
text        → STRING | interp | formatted
interp      → "$" "{" expression "}"
formatted   → "(" STRING ("," format_arg)* [","] ")"
format_arg  → STRING | NUMBER | expression | interp
expression  → IDENT ("." IDENT | "[" (NUMBER | STRING) "]")*
"""

from __future__ import annotations

import logging
from string import Formatter
from typing import List, Optional, Union

from ..errors import TemplateSyntaxError
from .lexer import TemplateLexer, Token
from .nodes import (
    Accessor,
    AttrContent,
    ConstArg,
    ElementNode,
    Expression,
    FormatArg,
    FormattedText,
    InterpolatedText,
    LiteralText,
    TemplateAST,
    TemplateNode,
    TextContent,
    TextNode,
)

logger = logging.getLogger(__name__)

_CONVERSIONS = ("r", "s", "a")


class TemplateParser:
    """
    Парсер шаблонов с рекурсивным спуском.

    Преобразует список токенов в кортеж узлов верхнего уровня,
    сохраняя порядок объявления.
    """

    def __init__(self):
        self.lexer = TemplateLexer()
        self._tokens: List[Token] = []
        self._position = 0

    def parse(self, source: str) -> TemplateAST:
        """
        Парсит исходный текст шаблона в AST.

        Args:
            source: Текст шаблона

        Returns:
            Узлы верхнего уровня

        Raises:
            TemplateSyntaxError: При синтаксической ошибке
        """
        self._tokens = self.lexer.tokenize(source)
        self._position = 0

        nodes = self._parse_node_list(in_element=False)

        # Проверяем, что мы достигли конца входных данных
        if self._check_symbol("}"):
            raise self._error("Unmatched '}'")
        if not self._is_at_end():
            raise self._error("Expected ',' between top-level nodes")

        logger.debug(f"Parsed template into {len(nodes)} top-level nodes")
        return tuple(nodes)

    def _parse_node_list(self, in_element: bool) -> List[TemplateNode]:
        """Парсит узлы через запятую с необязательной завершающей запятой."""
        nodes: List[TemplateNode] = []

        while not self._is_at_end() and not self._check_symbol("}"):
            nodes.append(self._parse_node(in_element))
            if not self._match_symbol(","):
                break

        return nodes

    def _parse_node(self, in_element: bool) -> TemplateNode:
        """Парсит один узел: элемент или текст."""
        current = self._current_token()

        if current.type == 'IDENT':
            if self._peek_token().type == 'SYMBOL' and self._peek_token().value == "{":
                return self._parse_element()
            raise self._error(f"Expected '{{' after element name '{current.value}'")

        if self._check_symbol("{"):
            if in_element:
                raise self._error("Invalid attribute position: attributes must precede children")
            raise self._error("Expected element name before '{'")

        if self._check_symbol("/"):
            raise self._error("Self-closing marker '/' must be the only content of an element")

        return TextNode(content=self._parse_text())

    def _parse_element(self) -> ElementNode:
        """Парсит элемент: name { [attribute [,]] children }"""
        name = self._advance().value
        self._expect_symbol("{", f"Expected '{{' after element name '{name}'")

        attr: Optional[AttrContent] = None
        if self._check_symbol("{"):
            attr = self._parse_attribute()
            # Запятая после атрибута необязательна
            self._match_symbol(",")

        if self._match_symbol("/"):
            self._expect_symbol("}", f"Expected '}}' after self-closing marker in element '{name}'")
            return ElementNode(name=name, attr=attr, self_closing=True)

        children = self._parse_node_list(in_element=True)
        self._expect_symbol("}", f"Expected ',' or '}}' in element '{name}'")

        return ElementNode(name=name, attr=attr, children=tuple(children))

    def _parse_attribute(self) -> AttrContent:
        """Парсит атрибут: { STRING | ${expr} }"""
        self._expect_symbol("{", "Expected '{' before attribute")

        current = self._current_token()
        value: AttrContent
        if current.type == 'STRING':
            self._advance()
            value = LiteralText(current.value)
        elif self._check_symbol("$"):
            value = InterpolatedText(self._parse_interpolation())
        elif self._check_symbol("}"):
            raise self._error("Empty attribute")
        else:
            raise self._error("Expected string or '${...}' as attribute value")

        self._expect_symbol("}", "Expected '}' after attribute value")
        return value

    def _parse_text(self) -> TextContent:
        """Парсит текст: строку, интерполяцию или форматирование."""
        current = self._current_token()

        if current.type == 'STRING':
            self._advance()
            return LiteralText(current.value)

        if self._check_symbol("$"):
            return InterpolatedText(self._parse_interpolation())

        if self._check_symbol("("):
            return self._parse_formatted()

        raise self._error(f"Expected element or text, got '{current.value}'")

    def _parse_interpolation(self) -> Expression:
        """Парсит интерполяцию: $ { expression }"""
        self._expect_symbol("$", "Expected '$'")
        self._expect_symbol("{", "Expected '{' after '$'")
        expr = self._parse_expression()
        self._expect_symbol("}", f"Expected '}}' after expression '{expr}'")
        return expr

    def _parse_expression(self) -> Expression:
        """Парсит ссылку на привязку: name(.attr | [key])*"""
        root = self._consume('IDENT', "Expected binding name")
        accessors: List[Accessor] = []

        while True:
            if self._match_symbol("."):
                name = self._consume('IDENT', "Expected attribute name after '.'")
                accessors.append(Accessor("attr", name.value))
            elif self._match_symbol("["):
                accessors.append(Accessor("item", self._parse_item_key()))
                self._expect_symbol("]", "Expected ']' after index")
            else:
                break

        return Expression(root=root.value, accessors=tuple(accessors))

    def _parse_item_key(self) -> Union[str, int]:
        current = self._current_token()
        if current.type == 'STRING':
            self._advance()
            return current.value
        if current.type == 'NUMBER' and "." not in current.value:
            self._advance()
            return int(current.value)
        raise self._error("Expected integer or string index")

    def _parse_formatted(self) -> FormattedText:
        """Парсит форматирование: ( STRING (, arg)* [,] )"""
        open_token = self._expect_symbol("(", "Expected '('")
        template = self._consume('STRING', "Expected format string after '('").value

        args: List[FormatArg] = []
        while self._match_symbol(","):
            if self._check_symbol(")"):
                break
            args.append(self._parse_format_arg())

        self._expect_symbol(")", "Expected ',' or ')' in format arguments")
        self._check_format(template, args, open_token)

        return FormattedText(template=template, args=tuple(args))

    def _parse_format_arg(self) -> FormatArg:
        current = self._current_token()

        if current.type == 'STRING':
            self._advance()
            return ConstArg(current.value)
        if current.type == 'NUMBER':
            self._advance()
            return ConstArg(float(current.value) if "." in current.value else int(current.value))
        if current.type == 'IDENT':
            return self._parse_expression()
        if self._check_symbol("$"):
            return self._parse_interpolation()

        raise self._error("Expected string, number or expression as format argument")

    def _check_format(self, template: str, args: List[FormatArg], token: Token) -> None:
        """
        Сверяет позиционные поля строки форматирования с числом аргументов.

        Поддерживаются только `{}` и `{N}` (с необязательной спецификацией),
        смешивать автоматическую и ручную нумерацию нельзя. Преобразования только `!r`, `!s`, `!a`.
        Если все аргументы константы, строка пробно форматируется здесь же,
        чтобы ошибки спецификаций не доживали до рендера.
        """
        arg_count = len(args)
        try:
            fields = list(Formatter().parse(template))
        except ValueError as e:
            raise self._error(f"Invalid format string: {e}", token)

        auto_count = 0
        max_index = -1
        for _literal, field_name, spec, conversion in fields:
            if field_name is None:
                continue
            if conversion is not None and conversion not in _CONVERSIONS:
                raise self._error(f"Unsupported format conversion '!{conversion}'", token)
            if spec and "{" in spec:
                raise self._error("Nested format fields are not supported", token)
            if field_name == "":
                auto_count += 1
            elif field_name.isdigit():
                max_index = max(max_index, int(field_name))
            else:
                raise self._error(f"Unsupported format field '{{{field_name}}}': only positional fields are allowed", token)

        if auto_count and max_index >= 0:
            raise self._error("Cannot mix automatic and manual format field numbering", token)

        expected = auto_count if auto_count else max_index + 1
        if expected != arg_count:
            raise self._error(
                f"Format string expects {expected} argument(s), got {arg_count}", token
            )

        if all(isinstance(arg, ConstArg) for arg in args):
            try:
                template.format(*(arg.value for arg in args))
            except (ValueError, TypeError) as e:
                raise self._error(f"Invalid format string: {e}", token)

    # Вспомогательные методы для работы с токенами

    def _current_token(self) -> Token:
        """Возвращает текущий токен без продвижения позиции."""
        if self._position >= len(self._tokens):
            return self._tokens[-1]
        return self._tokens[self._position]

    def _peek_token(self) -> Token:
        """Возвращает следующий за текущим токен."""
        if self._position + 1 >= len(self._tokens):
            return self._tokens[-1]
        return self._tokens[self._position + 1]

    def _is_at_end(self) -> bool:
        return self._current_token().type == 'EOF'

    def _advance(self) -> Token:
        """Продвигает позицию и возвращает предыдущий токен."""
        token = self._current_token()
        if not self._is_at_end():
            self._position += 1
        return token

    def _check_symbol(self, symbol: str) -> bool:
        current = self._current_token()
        return current.type == 'SYMBOL' and current.value == symbol

    def _match_symbol(self, symbol: str) -> bool:
        """Проверяет и потребляет символ."""
        if self._check_symbol(symbol):
            self._advance()
            return True
        return False

    def _expect_symbol(self, symbol: str, error_message: str) -> Token:
        """Потребляет символ или выбрасывает ошибку."""
        if self._check_symbol(symbol):
            return self._advance()
        raise self._error(error_message)

    def _consume(self, token_type: str, error_message: str) -> Token:
        """Потребляет токен заданного типа или выбрасывает ошибку."""
        if self._current_token().type == token_type:
            return self._advance()
        raise self._error(error_message)

    def _error(self, message: str, token: Optional[Token] = None) -> TemplateSyntaxError:
        token = token or self._current_token()
        return TemplateSyntaxError(message, token.position, token.line, token.column)


def parse_template(source: str) -> TemplateAST:
    """
    Удобная функция для разбора шаблона.

    Raises:
        TemplateSyntaxError: При синтаксической ошибке
    """
    return TemplateParser().parse(source)


__all__ = ["TemplateParser", "parse_template"]
