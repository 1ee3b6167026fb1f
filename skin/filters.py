"""
Стандартные фильтры.

Подключаются к окружению через настройку `macros` (модуль skin.filters
включён по умолчанию) и вызываются в скинах как `<% value | name args %>`.
Каждый фильтр получает входное значение первым аргументом и тег фильтра
вторым (если он ему нужен).
"""

from __future__ import annotations

import html
import re
from datetime import date, datetime
from typing import Any, Optional
from urllib.parse import quote_plus
from xml.sax.saxutils import escape as _xml_escape

from .context import is_visible, to_text
from .template.nodes import MacroTag

__all__ = [
    "capitalize_filter",
    "dateFormat_filter",
    "default_filter",
    "escapeHtml_filter",
    "escapeJavaScript_filter",
    "escapeUrl_filter",
    "escapeXml_filter",
    "linebreakToHtml_filter",
    "lowercase_filter",
    "prefix_filter",
    "replace_filter",
    "stripTags_filter",
    "substring_filter",
    "suffix_filter",
    "titleize_filter",
    "trim_filter",
    "truncate_filter",
    "uppercase_filter",
    "wrap_filter",
]

_TAG_RE = re.compile(r"<[^>]*>")


def _param(tag: MacroTag, name: str, index: int, default: Any = None) -> Any:
    """Именованный параметр, иначе позиционный, иначе default."""
    value = tag.get_parameter(name) if tag is not None else None
    if value is None and tag is not None:
        value = tag.get_parameter(index)
    return default if value is None else value


def _capitalize(word: str, limit: int = 1) -> str:
    return word[:limit].upper() + word[limit:].lower()


def lowercase_filter(value: Any) -> str:
    """Переводит строку в нижний регистр."""
    return to_text(value).lower()


def uppercase_filter(value: Any) -> str:
    """Переводит строку в верхний регистр."""
    return to_text(value).upper()


def capitalize_filter(value: Any) -> str:
    """Первый символ в верхний регистр, остальные - в нижний."""
    return _capitalize(to_text(value))


def titleize_filter(value: Any) -> str:
    """Первый символ каждого слова (по пробелам) в верхний регистр."""
    return " ".join(_capitalize(word) for word in to_text(value).split(" "))


def trim_filter(value: Any) -> str:
    return to_text(value).strip()


def truncate_filter(value: Any, tag: MacroTag) -> str:
    """
    Обрезает строку до limit символов и добавляет suffix (по умолчанию "..."),
    если обрезка произошла.
    """
    text = to_text(value)
    limit = int(_param(tag, "limit", 0, len(text)))
    suffix = to_text(_param(tag, "suffix", 1, "..."))
    if len(text) <= limit:
        return text
    return text[:limit] + suffix


def stripTags_filter(value: Any) -> str:
    """Удаляет все теги из строки."""
    return _TAG_RE.sub("", to_text(value))


def escapeHtml_filter(value: Any) -> str:
    """Экранирует &, <, >, кавычки и обратный апостроф HTML-сущностями."""
    return html.escape(to_text(value), quote=True).replace("&#x27;", "&#39;").replace("`", "&#96;")


def escapeXml_filter(value: Any) -> str:
    """Экранирует строку XML-сущностями."""
    return _xml_escape(to_text(value), {'"': "&quot;", "'": "&apos;"})


def escapeUrl_filter(value: Any, tag: Optional[MacroTag] = None) -> str:
    """Кодирует строку для использования в качестве значения HTTP-параметра."""
    charset = to_text(_param(tag, "charset", 0, "utf-8"))
    return quote_plus(to_text(value), encoding=charset)


def escapeJavaScript_filter(value: Any) -> str:
    """Экранирует строку для вставки в строковый литерал JavaScript."""
    text = to_text(value)
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


def linebreakToHtml_filter(value: Any) -> str:
    """Заменяет переводы строк на <br />."""
    return to_text(value).replace("\n", "<br />")


def replace_filter(value: Any, tag: MacroTag) -> str:
    """Замена по регулярному выражению: old → new."""
    old = to_text(_param(tag, "old", 0, ""))
    new = to_text(_param(tag, "new", 1, ""))
    if not old:
        return to_text(value)
    return re.sub(old, new, to_text(value))


def substring_filter(value: Any, tag: MacroTag) -> str:
    """Подстрока [from, to)."""
    text = to_text(value)
    start = int(_param(tag, "from", 0, 0))
    end = _param(tag, "to", 1, None)
    return text[start:] if end is None else text[start:int(end)]


def dateFormat_filter(value: Any, tag: MacroTag) -> Optional[str]:
    """
    Форматирует дату по strftime-шаблону.

    Числа трактуются как миллисекунды от эпохи; прочие значения дают None.
    """
    fmt = to_text(_param(tag, "format", 0, "%Y-%m-%d"))
    if not value:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000.0).strftime(fmt)
    if isinstance(value, (datetime, date)):
        return value.strftime(fmt)
    return None


def default_filter(value: Any, tag: MacroTag) -> Any:
    """Значение по умолчанию для пустого входа."""
    return value if is_visible(value) else tag.get_parameter(0)


def prefix_filter(value: Any, tag: MacroTag) -> Any:
    """Добавляет префикс к непустому значению."""
    if not is_visible(value):
        return value
    return to_text(tag.get_parameter(0)) + to_text(value)


def suffix_filter(value: Any, tag: MacroTag) -> Any:
    """Добавляет суффикс к непустому значению."""
    if not is_visible(value):
        return value
    return to_text(value) + to_text(tag.get_parameter(0))


def wrap_filter(value: Any, tag: MacroTag) -> Any:
    """Оборачивает непустое значение префиксом и суффиксом."""
    if not is_visible(value):
        return value
    return to_text(tag.get_parameter(0)) + to_text(value) + to_text(tag.get_parameter(1))
