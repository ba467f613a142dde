"""
JSON-отчёты CLI (pydantic-модели).
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel

from .markup.colors import WebColor
from .markup.lexer import tokenize_markup
from .markup.parser import check_markup
from .markup.tokens import HeadToken, TailToken


class TokenEntry(BaseModel):
    kind: Literal["head", "tail", "text"]
    start: int
    end: int
    raw: str
    name: Optional[str] = None
    attr: Optional[str] = None


class LexReport(BaseModel):
    length: int
    tokens: List[TokenEntry]


class IssueEntry(BaseModel):
    kind: Literal["unclosed", "unexpected_tail", "empty_name"]
    name: str
    position: int
    message: str


class CheckReport(BaseModel):
    ok: bool
    issues: List[IssueEntry]


class ColorEntry(BaseModel):
    name: str
    value: str


class ColorsReport(BaseModel):
    colors: List[ColorEntry]


def build_lex_report(text: str) -> LexReport:
    entries: List[TokenEntry] = []
    for token in tokenize_markup(text):
        name = token.name if isinstance(token, (HeadToken, TailToken)) else None
        attr = token.attr if isinstance(token, HeadToken) else None
        entries.append(TokenEntry(
            kind=token.kind.value,
            start=token.start,
            end=token.end,
            raw=token.raw,
            name=name,
            attr=attr,
        ))
    return LexReport(length=len(text), tokens=entries)


def build_check_report(text: str) -> CheckReport:
    issues = [
        IssueEntry(kind=issue.kind, name=issue.name, position=issue.position, message=str(issue))
        for issue in check_markup(text)
    ]
    return CheckReport(ok=not issues, issues=issues)


def build_colors_report() -> ColorsReport:
    return ColorsReport(colors=[ColorEntry(name=c.name, value=c.value) for c in WebColor])


__all__ = [
    "TokenEntry",
    "LexReport",
    "IssueEntry",
    "CheckReport",
    "ColorEntry",
    "ColorsReport",
    "build_lex_report",
    "build_check_report",
    "build_colors_report",
]
