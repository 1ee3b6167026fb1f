"""
Синтаксический анализатор скинов.

Посимвольно сканирует исходный текст скина и выдаёт упорядоченный поток
частей: литеральный текст (str) и теги макросов (MacroTag).

Синтаксис тега:
    <% name param "quoted param" key=value [a, b] {k: v} <% nested %> | filter arg %>
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional

from .nodes import MacroTag, Part
from .tokens import KEYWORD_LITERALS, ListType, SkinSyntaxError, UnbalancedTagError

logger = logging.getLogger(__name__)

TAG_START = "<%"
TAG_END = "%>"

_UNSET = object()

_BRACKET_NAMES = {
    "]": "square brackets",
    ")": "parentheses",
    "}": "curly brackets",
}


def convert_literal(text: str) -> Any:
    """Превращает незакавыченный токен в значение: true/false/null и числа."""
    if text in KEYWORD_LITERALS:
        return KEYWORD_LITERALS[text]
    if text[0].isdigit() or text.startswith("-"):
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            pass
    return text


class _Collector:
    """
    Унифицированный сборщик для всего, что накапливается внутри тега:
    сам тег (имя + параметры), массив, объект или группа параметров.
    """

    def __init__(self, kind: ListType, line: int, column: int):
        self.kind = kind
        self.line = line
        self.column = column
        self.items: List[Any] = []
        self.name: Any = _UNSET
        self.named: Dict[str, Any] = {}
        self.param_name: Optional[str] = None
        self.filter: Optional[MacroTag] = None

    def add_part(self, buffer: List[str], quoted: bool) -> None:
        text = "".join(buffer)
        buffer.clear()
        if not quoted:
            text = text.strip()
            if not text:
                return
        # первый токен тега всегда считается его именем
        if self.kind is ListType.MACRO and self.name is _UNSET:
            self.name = text
            return
        self.add(text if quoted else convert_literal(text))

    def add(self, obj: Any) -> None:
        if self.kind is ListType.MACRO and self.param_name is not None:
            self.named[self.param_name.lower()] = obj
        else:
            self.items.append(obj)
        self.param_name = None

    def push_parameter_name(self, buffer: List[str]) -> None:
        text = "".join(buffer).strip()
        buffer.clear()
        # пустой буфер: между именем и '=' был пробел, и имя уже попало
        # в позиционные параметры
        if not text and self.items and isinstance(self.items[-1], str):
            self.param_name = self.items.pop()
        else:
            self.param_name = text

    def to_value(self) -> Any:
        if self.kind is ListType.OBJECT:
            if len(self.items) % 2:
                raise SkinSyntaxError("odd number of entries in object literal", self.line, self.column)
            it = iter(self.items)
            return {key: value for key, value in zip(it, it)}
        return list(self.items)

    def build(self) -> MacroTag:
        return MacroTag(
            name=None if self.name is _UNSET else self.name,
            parameters=tuple(self.items),
            named=dict(self.named),
            filter=self.filter,
            line=self.line,
        )


class SkinParser:
    """
    Сканер скинов.

    Разбивает исходный текст на литеральные сегменты и теги, отслеживая
    строку и колонку для диагностики ошибок.
    """

    def __init__(self, text: str):
        self.text = text
        self.position = 0
        self.line = 1
        self.column = 1
        self.length = len(text)

    def parse(self) -> List[Part]:
        """Разбирает весь текст и возвращает список частей."""
        return list(self.iter_parts())

    def iter_parts(self) -> Iterator[Part]:
        buffer: List[str] = []
        escape = False

        while self.position < self.length:
            c = self.text[self.position]

            if c == "\\":
                self._advance(1)
                if escape:
                    buffer.append("\\")
                escape = not escape
                continue

            if self._at(TAG_START):
                self._advance(len(TAG_START))
                if escape:
                    # \<% выводит литеральный <%
                    buffer.append(TAG_START)
                    escape = False
                    continue
                if buffer:
                    yield "".join(buffer)
                    buffer.clear()
                yield self._read_macro(self.line, self.column)
                continue

            if escape:
                buffer.append("\\")
                escape = False
            buffer.append(c)
            self._advance(1)

        if escape:
            buffer.append("\\")
        if buffer:
            yield "".join(buffer)

    # ======= Внутренние методы =======

    def _read_macro(self, start_line: int, start_column: int) -> MacroTag:
        """Читает тег до закрывающего %> (или до начала фильтра '|')."""
        stack: List[_Collector] = []
        current = _Collector(ListType.MACRO, start_line, start_column)
        buffer: List[str] = []
        quote: Optional[str] = None
        escape = False

        while self.position < self.length:
            c = self.text[self.position]

            if quote is not None:
                self._advance(1)
                if escape:
                    buffer.append(c)
                    escape = False
                elif c == "\\":
                    escape = True
                elif c == quote:
                    current.add_part(buffer, quoted=True)
                    quote = None
                else:
                    buffer.append(c)
                continue

            if escape:
                buffer.append(c)
                escape = False
                self._advance(1)
                continue

            if c == "\\":
                escape = True
                self._advance(1)
                continue

            if c in "\"'":
                current.add_part(buffer, quoted=False)
                quote = c
                self._advance(1)
                continue

            if self._at(TAG_END):
                self._advance(len(TAG_END))
                if stack:
                    raise UnbalancedTagError("unbalanced macro", start_line, start_column)
                current.add_part(buffer, quoted=False)
                return current.build()

            if c == "|":
                if stack:
                    raise UnbalancedTagError("filter inside bracketed group", self.line, self.column)
                current.add_part(buffer, quoted=False)
                self._advance(1)
                current.filter = self._read_macro(self.line, self.column)
                return current.build()

            if self._at(TAG_START):
                current.add_part(buffer, quoted=False)
                self._advance(len(TAG_START))
                current.add(self._read_macro(self.line, self.column))
                continue

            if c in "[({":
                current.add_part(buffer, quoted=False)
                stack.append(current)
                current = _Collector(ListType(c), self.line, self.column)
                self._advance(1)
                continue

            if c in "])}":
                if current.kind.closing != c:
                    raise UnbalancedTagError(f"unbalanced {_BRACKET_NAMES[c]}", self.line, self.column)
                current.add_part(buffer, quoted=False)
                finished = current
                current = stack.pop()
                current.add(finished.to_value())
                self._advance(1)
                continue

            if c.isspace():
                current.add_part(buffer, quoted=False)
                self._advance(1)
                continue

            if c == ":" and current.kind is ListType.OBJECT:
                current.add_part(buffer, quoted=False)
                self._advance(1)
                continue

            if c == "," and current.kind.comma_separated:
                current.add_part(buffer, quoted=False)
                self._advance(1)
                continue

            if c == "=" and current.kind is ListType.MACRO:
                current.push_parameter_name(buffer)
                self._advance(1)
                continue

            buffer.append(c)
            self._advance(1)

        raise UnbalancedTagError("unterminated macro tag", start_line, start_column)

    def _at(self, marker: str) -> bool:
        return self.text.startswith(marker, self.position)

    def _advance(self, count: int) -> None:
        """Продвигает позицию, обновляя номер строки и колонки."""
        for _ in range(count):
            if self.position >= self.length:
                break
            if self.text[self.position] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.position += 1


def parse_skin(text: str) -> List[Part]:
    """
    Удобная функция для разбора текста скина.

    Args:
        text: Исходный текст скина

    Returns:
        Список частей: строки и теги MacroTag
    """
    parts = SkinParser(text).parse()
    logger.debug("Parsed skin source -> %d parts", len(parts))
    return parts


__all__ = ["SkinParser", "parse_skin", "convert_literal", "TAG_START", "TAG_END"]
