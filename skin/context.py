"""
Контекст рендеринга и динамическая диспетчеризация.

RenderContext оборачивает переданное вызывающим отображение (контекст) и
никогда его не изменяет: новые области видимости (итерации for, set)
создаются дочерними контекстами поверх родителя через ChainMap.

Поиск обработчиков <name>_macro / <name>_filter мемоизируется в таблице
контекста; дочерний контекст заново разрешает только те пути, первый
сегмент которых он сам связывает, остальное делегирует родителю.
"""

from __future__ import annotations

import functools
import inspect
from collections import ChainMap
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

from .errors import SkinRecursionError

MACRO_SUFFIX = "_macro"
FILTER_SUFFIX = "_filter"

DEFAULT_MAX_DEPTH = 64


def is_defined(value: Any) -> bool:
    return value is not None


def is_visible(value: Any) -> bool:
    """Видимое значение: не None и не пустая строка."""
    return value is not None and not (isinstance(value, str) and value == "")


def to_text(value: Any) -> str:
    """Строковое представление значения для вывода; None даёт пустую строку."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def get_member(obj: Any, name: str) -> Any:
    """Член объекта: ключ для отображений, элемент по индексу для последовательностей, атрибут для остальных."""
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    if isinstance(obj, Sequence) and not isinstance(obj, (str, bytes)) and name.lstrip("-").isdigit():
        try:
            return obj[int(name)]
        except IndexError:
            return None
    return getattr(obj, name, None)


def walk_path(root: Any, path: str) -> Tuple[Any, str]:
    """
    Проходит точечный путь до предпоследнего сегмента.

    Returns:
        (владелец последнего сегмента или None, последний сегмент)
    """
    segments = path.split(".")
    elem = root
    for segment in segments[:-1]:
        elem = get_member(elem, segment)
        if not is_defined(elem):
            return None, segments[-1]
    return elem, segments[-1]


def _positional_capacity(func: Callable) -> Optional[int]:
    """Сколько позиционных аргументов принимает функция (None - сколько угодно)."""
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    count = 0
    for p in sig.parameters.values():
        if p.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


@functools.lru_cache(maxsize=1024)
def _cached_capacity(func: Callable) -> Optional[int]:
    return _positional_capacity(func)


def call_handler(func: Callable, *args: Any) -> Any:
    """
    Вызывает обработчик, передавая столько ведущих аргументов, сколько он принимает.

    Макросы получают (tag, context, skin), фильтры - (value, tag, context, skin);
    обработчик вида `lambda value: ...` тоже допустим.
    """
    try:
        capacity = _cached_capacity(func)
    except TypeError:
        # нехешируемый вызываемый объект
        capacity = _positional_capacity(func)
    if capacity is not None and capacity < len(args):
        args = args[:capacity]
    return func(*args)


class RenderContext(Mapping):
    """
    Контекст одного вызова рендеринга.

    Ведёт себя как read-only отображение поверх данных вызывающего,
    хранит глубину вложенных рендерингов подскинов и таблицу
    разрешённых обработчиков.
    """

    def __init__(
        self,
        data: Optional[Mapping] = None,
        *,
        parent: Optional[RenderContext] = None,
        bound: frozenset = frozenset(),
        depth: int = 0,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self._data: Mapping = data if data is not None else {}
        self._parent = parent
        self._bound = bound
        self.depth = depth
        self.max_depth = max_depth
        self._handlers: Dict[Tuple[str, str], Optional[Callable]] = {}

    @classmethod
    def wrap(cls, context: Optional[Mapping], *, max_depth: int = DEFAULT_MAX_DEPTH) -> RenderContext:
        if isinstance(context, RenderContext):
            return context
        return cls(context, max_depth=max_depth)

    # ======= Области видимости =======

    def child(self, bindings: Mapping) -> RenderContext:
        """Дочерний контекст с новыми связываниями; родитель не изменяется."""
        overlay = dict(bindings)
        return RenderContext(
            ChainMap(overlay, self._data),
            parent=self,
            bound=frozenset(overlay),
            depth=self.depth,
            max_depth=self.max_depth,
        )

    def nested(self) -> RenderContext:
        """
        Контекст для вложенного рендеринга подскина.

        Raises:
            SkinRecursionError: при превышении max_depth
        """
        depth = self.depth + 1
        if depth > self.max_depth:
            raise SkinRecursionError(
                f"Maximum skin render depth exceeded ({self.max_depth}); "
                f"check for a subskin that renders itself"
            )
        return RenderContext(
            self._data,
            parent=self,
            depth=depth,
            max_depth=self.max_depth,
        )

    # ======= Диспетчеризация =======

    def handler(self, name: str, suffix: str) -> Optional[Callable]:
        """Вызываемый обработчик <last><suffix> для точечного пути name или None."""
        key = (name, suffix)
        if key in self._handlers:
            return self._handlers[key]
        head = name.split(".", 1)[0]
        # обработчик может быть связан и под полным ключом <name><suffix>
        local = head in self._bound or (head == name and name + suffix in self._bound)
        if self._parent is not None and not local:
            found = self._parent.handler(name, suffix)
        else:
            owner, last = walk_path(self._data, name)
            candidate = get_member(owner, last + suffix)
            found = candidate if callable(candidate) else None
        self._handlers[key] = found
        return found

    def value(self, name: str) -> Any:
        """Значение по точечному пути или None, если путь не разрешается."""
        owner, last = walk_path(self._data, name)
        return get_member(owner, last)

    # ======= Mapping =======

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"RenderContext(depth={self.depth}, keys={sorted(map(str, self._data))!r})"


__all__ = [
    "RenderContext",
    "MACRO_SUFFIX",
    "FILTER_SUFFIX",
    "DEFAULT_MAX_DEPTH",
    "call_handler",
    "get_member",
    "walk_path",
    "is_defined",
    "is_visible",
    "to_text",
]
