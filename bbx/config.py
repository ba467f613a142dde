"""
Загрузка привязок для рендера шаблонов из CLI.

Источники (в порядке приоритета, последний перекрывает):
- YAML-файл с отображением имя → значение (--vars);
- пары NAME=VALUE из командной строки (--var).
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import BindingsLoadError

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")

_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    if not path.is_file():
        raise BindingsLoadError(f"Bindings file not found: {path}")
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise BindingsLoadError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise BindingsLoadError(f"YAML must be a mapping: {path}")
    return raw


def load_bindings_file(path: Path) -> Dict[str, Any]:
    """
    Загружает привязки из YAML-файла.

    Ключи верхнего уровня должны быть допустимыми именами привязок.
    """
    raw = _read_yaml_map(path)
    for key in raw:
        if not isinstance(key, str) or not _NAME_RE.fullmatch(key):
            raise BindingsLoadError(f"Invalid binding name {key!r} in {path}")
    logger.debug(f"Loaded {len(raw)} bindings from {path}")
    return dict(raw)


def parse_var_assignments(assignments: Optional[Iterable[str]]) -> Dict[str, str]:
    """Парсит список 'NAME=VALUE' в словарь строковых привязок."""
    result: Dict[str, str] = {}
    if not assignments:
        return result

    for item in assignments:
        if "=" not in item:
            raise BindingsLoadError(f"Invalid variable format '{item}'. Expected 'NAME=VALUE'")
        name, value = item.split("=", 1)
        name = name.strip()
        if not _NAME_RE.fullmatch(name):
            raise BindingsLoadError(f"Invalid binding name '{name}'")
        result[name] = value

    return result


def load_bindings(vars_file: Optional[Path], assignments: Optional[Iterable[str]]) -> Dict[str, Any]:
    """
    Собирает итоговые привязки: сначала файл, поверх него --var.

    Raises:
        BindingsLoadError: При ошибке чтения файла или формата --var
    """
    bindings: Dict[str, Any] = {}
    if vars_file is not None:
        bindings.update(load_bindings_file(vars_file))
    bindings.update(parse_var_assignments(assignments))
    return bindings


__all__ = ["load_bindings", "load_bindings_file", "parse_var_assignments"]
