"""
Курсор по строке для лексера разметки.

Сканер работает по символам (code points), а не по байтам,
поэтому многобайтовые символы занимают ровно один шаг.
"""

from __future__ import annotations

from typing import Optional


class Scanner:
    """
    Курсор по фиксированной последовательности символов.

    Позиция только растёт, кроме одного шага назад через back().
    Позиция length + 1 означает «сканирование завершено»: next()
    переводит в неё курсор, когда символы закончились.
    """

    def __init__(self, text: str):
        self.text = text
        self.length = len(text)
        self._position = 0

    @property
    def position(self) -> int:
        return self._position

    def done(self) -> bool:
        """Курсор прошёл за конец ввода (next() уже вернул None)."""
        return self._position > self.length

    def at_end(self) -> bool:
        """Символов для чтения больше нет."""
        return self._position >= self.length

    def curr(self) -> Optional[str]:
        """Символ в текущей позиции без продвижения."""
        if self._position < self.length:
            return self.text[self._position]
        return None

    def peek(self) -> Optional[str]:
        """Символ сразу после текущего без продвижения."""
        if self._position + 1 < self.length:
            return self.text[self._position + 1]
        return None

    def next(self) -> Optional[str]:
        """
        Возвращает текущий символ и сдвигает курсор вперёд.

        Returns:
            Прочитанный символ или None, если ввод исчерпан
        """
        if self._position < self.length:
            ch = self.text[self._position]
            self._position += 1
            return ch
        self._position = self.length + 1
        return None

    def back(self) -> None:
        """Отступает на один символ, чтобы он был прочитан повторно."""
        if self._position == 0:
            return
        self._position -= 1

    def get_range(self, start: int, end: int) -> str:
        """
        Срез исходного текста [start, end).

        Raises:
            ValueError: Если не выполнено 0 <= start <= end <= length
        """
        if not 0 <= start <= end <= self.length:
            raise ValueError(f"Invalid scanner range [{start}, {end}) for length {self.length}")
        return self.text[start:end]


__all__ = ["Scanner"]
