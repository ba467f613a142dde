from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from .config import load_bindings
from .errors import BBXUserError
from .jsonic import dumps as jdumps
from .markup.lexer import format_tokens, tokenize_markup
from .markup.parser import parse_markup
from .report import build_check_report, build_colors_report, build_lex_report
from .template import compile_template
from .template.nodes import format_ast_tree
from .version import tool_version

logger = logging.getLogger("bbx")


def _setup_logging() -> None:
    """Уровень логирования берётся из BBX_LOG (debug, info, warning, ...)."""
    level_name = os.environ.get("BBX_LOG", "warning").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING
    logger.setLevel(level)
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="bbx",
        description="bbcode templates and markup tools",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_source(sp: argparse.ArgumentParser, what: str) -> None:
        sp.add_argument("source", help=f"{what}: путь к файлу или - для чтения из stdin")

    sp_render = sub.add_parser("render", help="Отрендерить шаблон в bbcode")
    add_source(sp_render, "шаблон")
    sp_render.add_argument(
        "--vars",
        metavar="FILE",
        help="YAML-файл с привязками (отображение имя → значение)",
    )
    sp_render.add_argument(
        "--var",
        action="append",
        metavar="NAME=VALUE",
        help="строковая привязка (можно указать несколько, перекрывает --vars)",
    )

    sp_lex = sub.add_parser("lex", help="Токены bbcode-разметки (JSON)")
    add_source(sp_lex, "разметка")
    sp_lex.add_argument(
        "--dump",
        action="store_true",
        help="построчный отладочный вывод вместо JSON",
    )

    sp_parse = sub.add_parser("parse", help="Дерево узлов bbcode-разметки")
    add_source(sp_parse, "разметка")

    sp_check = sub.add_parser("check", help="Проверка парности тегов (JSON), код 1 при проблемах")
    add_source(sp_check, "разметка")

    sub.add_parser("colors", help="Именованные цвета (JSON)")

    return p


def _read_source(source: str) -> str:
    """
    Читает входной текст.

    Поддерживает два формата:
    - Путь к файлу
    - `-` для чтения из stdin
    """
    if source == "-":
        return sys.stdin.read()

    file_path = Path(source)
    if not file_path.is_file():
        raise BBXUserError(f"Source file not found: {file_path}")
    return file_path.read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging()

    try:
        if ns.cmd == "render":
            template = compile_template(_read_source(ns.source))
            vars_file: Optional[Path] = Path(ns.vars) if ns.vars else None
            bindings = load_bindings(vars_file, ns.var)
            logger.debug(f"Rendering template with bindings: {sorted(bindings)}")
            sys.stdout.write(template.render(bindings))
            return 0

        if ns.cmd == "lex":
            text = _read_source(ns.source)
            if ns.dump:
                sys.stdout.write(format_tokens(tokenize_markup(text)) + "\n")
            else:
                sys.stdout.write(jdumps(build_lex_report(text).model_dump(mode="json")))
            return 0

        if ns.cmd == "parse":
            nodes = parse_markup(_read_source(ns.source))
            sys.stdout.write(format_ast_tree(nodes) + "\n")
            return 0

        if ns.cmd == "check":
            report = build_check_report(_read_source(ns.source))
            sys.stdout.write(jdumps(report.model_dump(mode="json")))
            return 0 if report.ok else 1

        if ns.cmd == "colors":
            sys.stdout.write(jdumps(build_colors_report().model_dump(mode="json")))
            return 0

    except BBXUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
