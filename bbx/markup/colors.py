"""
Цвета для тега `[color=...]`.

Форум поддерживает 40 именованных web-цветов; любой другой цвет
(`#cc0000`, `rgb(255, 0, 0)`) передаётся строкой и выводится как есть,
без проверки формата.
"""

from __future__ import annotations

from enum import Enum
from typing import Union


class WebColor(Enum):
    """Именованные web-цвета bbcode. Значением служит имя в PascalCase."""
    BLACK = "Black"
    SIENNA = "Sienna"
    DARK_OLIVE_GREEN = "DarkOliveGreen"
    DARK_GREEN = "DarkGreen"
    DARK_SLATE_BLUE = "DarkSlateBlue"
    NAVY = "Navy"
    INDIGO = "Indigo"
    DARK_SLATE_GRAY = "DarkSlateGray"
    DARK_RED = "DarkRed"
    DARK_ORANGE = "DarkOrange"
    OLIVE = "Olive"
    GREEN = "Green"
    TEAL = "Teal"
    BLUE = "Blue"
    SLATE_GRAY = "SlateGray"
    DIM_GRAY = "DimGray"
    RED = "Red"
    SANDY_BROWN = "SandyBrown"
    YELLOW_GREEN = "YellowGreen"
    SEA_GREEN = "SeaGreen"
    MEDIUM_TURQUOISE = "MediumTurquoise"
    ROYAL_BLUE = "RoyalBlue"
    PURPLE = "Purple"
    GRAY = "Gray"
    MAGENTA = "Magenta"
    ORANGE = "Orange"
    YELLOW = "Yellow"
    LIME = "Lime"
    CYAN = "Cyan"
    DEEP_SKY_BLUE = "DeepSkyBlue"
    DARK_ORCHID = "DarkOrchid"
    SILVER = "Silver"
    PINK = "Pink"
    WHEAT = "Wheat"
    LEMON_CHIFFON = "LemonChiffon"
    PALE_GREEN = "PaleGreen"
    PALE_TURQUOISE = "PaleTurquoise"
    LIGHT_BLUE = "LightBlue"
    PLUM = "Plum"
    WHITE = "White"

    def __str__(self) -> str:
        return self.value

    def to_text(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "WebColor":
        """
        Находит цвет по имени без учёта регистра и разделителей.

        `DarkRed`, `darkred`, `dark_red` и `DARK-RED` дают один и тот же цвет.

        Raises:
            ValueError: Если имя не входит в список именованных цветов
        """
        key = text.strip().replace("_", "").replace("-", "").replace(" ", "").lower()
        for color in cls:
            if color.value.lower() == key:
                return color
        raise ValueError(f"Unknown web color '{text}'")


# Именованный цвет или произвольное CSS-значение
ColorValue = Union[WebColor, str]


def color_text(color: ColorValue) -> str:
    """Текст цвета для атрибута тега."""
    if isinstance(color, WebColor):
        return color.value
    return color


__all__ = ["WebColor", "ColorValue", "color_text"]
