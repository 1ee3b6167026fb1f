"""
Разбор скинов: сканер тегов <% ... %> и узлы MacroTag/PartList.
"""

from __future__ import annotations

from .nodes import MacroTag, Part, PartList
from .parser import SkinParser, parse_skin
from .tokens import SkinSyntaxError, UnbalancedTagError

__all__ = [
    "MacroTag",
    "Part",
    "PartList",
    "SkinParser",
    "parse_skin",
    "SkinSyntaxError",
    "UnbalancedTagError",
]
