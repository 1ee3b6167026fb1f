"""
Лексические типы.

Определяет виды параметров тега и ошибки синтаксического анализа скина.
"""

from __future__ import annotations

import enum

from ..errors import SkinUserError


class ListType(enum.Enum):
    """Виды коллекций, собираемых внутри тега <% ... %>."""
    MACRO = "MACRO"          # сам тег: имя + параметры
    ARRAY = "["              # [a, b]
    OBJECT = "{"             # {key: value}
    PARAMGROUP = "("         # (a b)

    @property
    def closing(self) -> str:
        return {"[": "]", "{": "}", "(": ")"}.get(self.value, "%>")

    @property
    def comma_separated(self) -> bool:
        return self in (ListType.ARRAY, ListType.OBJECT)


# Литералы без кавычек, превращаемые в значения
KEYWORD_LITERALS = {
    "true": True,
    "false": False,
    "null": None,
}


class SkinSyntaxError(SkinUserError):
    """Ошибка синтаксического анализа скина."""

    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"{message} at {line}:{column}")
        self.line = line
        self.column = column


class UnbalancedTagError(SkinSyntaxError):
    """Несбалансированные скобки или незакрытый тег."""
    pass


__all__ = [
    "ListType",
    "KEYWORD_LITERALS",
    "SkinSyntaxError",
    "UnbalancedTagError",
]
