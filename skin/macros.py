"""
Стандартные макросы, не зависящие от веб-окружения.
"""

from __future__ import annotations

from collections.abc import Mapping
from numbers import Number
from typing import Any, Optional

from .context import to_text
from .template.nodes import MacroTag

__all__ = ["ifOdd_macro", "ifEven_macro", "join_macro"]


def _index(context: Mapping) -> Optional[int]:
    number = context.get("index") if context is not None else None
    if isinstance(number, bool) or not isinstance(number, Number):
        return None
    return int(number)


def ifOdd_macro(tag: MacroTag, context: Mapping) -> Any:
    """Выводит параметры, если текущий index цикла нечётный."""
    number = _index(context)
    if number is not None and number % 2 == 1:
        return "".join(to_text(p) for p in tag.parameters)
    return None


def ifEven_macro(tag: MacroTag, context: Mapping) -> Any:
    """Выводит параметры, если текущий index цикла чётный."""
    number = _index(context)
    if number is not None and number % 2 == 0:
        return "".join(to_text(p) for p in tag.parameters)
    return None


def join_macro(tag: MacroTag) -> str:
    """<% join <% items %> separator=", " %> - склеивает список в строку."""
    items = tag.get_parameter(0)
    separator = to_text(tag.get_parameter("separator"))
    if items is None:
        return ""
    if isinstance(items, (str, bytes)) or not hasattr(items, "__iter__"):
        return to_text(items)
    return separator.join(to_text(item) for item in items)
