"""
Узлы скина.

Определяет неизменяемые классы для представления разобранного скина:
текстовые части (обычные строки) и теги макросов <% ... %>.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, Optional, Tuple, Union


@dataclass(frozen=True)
class MacroTag:
    """
    Тег макроса: имя, позиционные и именованные параметры, цепочка фильтров.

    Позиционные параметры - литералы (str, int, float, bool, None, list, dict)
    или вложенные теги MacroTag. Именованные параметры хранятся с ключами
    в нижнем регистре (поиск нечувствителен к регистру).
    """
    name: Optional[str]
    parameters: Tuple[Any, ...] = ()
    named: Dict[str, Any] = field(default_factory=dict)
    filter: Optional[MacroTag] = None
    line: int = 1

    def get_parameter(self, *keys: Union[str, int]) -> Any:
        """
        Возвращает первый найденный параметр по списку имён или индексов.

        Строковые ключи ищутся среди именованных параметров, целые - среди
        позиционных. Если ничего не найдено, возвращает None.
        """
        for key in keys:
            if isinstance(key, bool):
                raise TypeError(f"Wrong parameter key: {key!r}")
            if isinstance(key, str):
                lowered = key.lower()
                if lowered in self.named:
                    return self.named[lowered]
            elif isinstance(key, int):
                if 0 <= key < len(self.parameters):
                    return self.parameters[key]
            else:
                raise TypeError(f"Wrong parameter key: {key!r}")
        return None

    def has_parameter(self, name: str) -> bool:
        return name.lower() in self.named

    def sub_macro(self, start: int) -> MacroTag:
        """
        Строит под-макрос, начиная с позиционного параметра start.

        Если параметр сам является тегом, он и возвращается. Иначе параметр
        становится именем нового тега, а остальные позиционные параметры - его
        параметрами. Именованные параметры копируются, фильтр - нет (фильтр
        применяется только к макросу верхнего уровня).
        """
        head = self.parameters[start]
        if isinstance(head, MacroTag):
            return head
        return MacroTag(
            name=None if head is None else str(head),
            parameters=tuple(self.parameters[start + 1:]),
            named=dict(self.named),
            filter=None,
            line=self.line,
        )

    def renamed(self, name: str) -> MacroTag:
        """Копия тега с другим именем."""
        return replace(self, name=name)

    def filters(self) -> Iterator[MacroTag]:
        """Итерирует цепочку фильтров, начиная со следующего тега."""
        current = self.filter
        while current is not None:
            yield current
            current = current.filter

    def __str__(self) -> str:
        return f"[MacroTag {self.name} {list(self.parameters)}{self.named}]"


# Часть скина: литеральный текст или тег
Part = Union[str, MacroTag]


@dataclass(frozen=True)
class PartList:
    """
    Упорядоченный список частей скина.

    filter задаётся только для подскинов, объявленных с фильтром
    (<% subskin name | filter %>): он применяется один раз ко всему
    отрендеренному тексту подскина.
    """
    parts: Tuple[Part, ...] = ()
    filter: Optional[MacroTag] = None

    def __iter__(self) -> Iterator[Part]:
        return iter(self.parts)

    def __len__(self) -> int:
        return len(self.parts)

    @property
    def is_empty(self) -> bool:
        return not self.parts


__all__ = ["MacroTag", "Part", "PartList"]
