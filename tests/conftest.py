import json
import os
import re
import subprocess
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent


def write(p: Path, text: str) -> Path:
    """Записывает текст в файл, создавая родительские директории при необходимости."""
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


def run_cli(root: Path, *args: str, input: str | None = None) -> subprocess.CompletedProcess:
    """Запускает bbx.cli в подпроцессе с рабочей директорией root."""
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH")]))
    env.pop("BBX_LOG", None)
    return subprocess.run(
        [sys.executable, "-m", "bbx.cli", *args],
        cwd=root, env=env, capture_output=True, text=True, encoding="utf-8", input=input,
    )


def jload(s: str):
    # Убираем ANSI-последовательности, которые иногда добавляют IDE
    clean = re.sub(r'\x1b\[[0-9;]*m', '', s)
    return json.loads(clean)


@pytest.fixture
def tmpproj(tmp_path: Path) -> Path:
    """Рабочая директория с шаблоном, файлом привязок и двумя образцами разметки."""
    root = tmp_path
    write(root / "post.bbx", 'b { ("{} x{}", user.name, count) },\nhr { / }\n')
    write(root / "vars.yaml", "user:\n  name: Alice\ncount: 3\n")
    write(root / "good.txt", "[b]ok[/b] [url=https://example.org]link[/url]")
    write(root / "bad.txt", "[b]unclosed [/i]")
    return root


@pytest.fixture
def cli():
    return run_cli


@pytest.fixture
def json_load():
    return jload
