"""
Базовые исключения для ошибок, видимых пользователю.

Все ожидаемые ошибки уровня документа (отсутствующий ресурс, синтаксис,
зацикленное наследование, конфигурация) наследуются от SkinUserError и
показываются пользователю без стектрейса.

Ошибки внутри шаблона (неверные параметры builtin-макросов) сюда НЕ относятся:
они встраиваются в вывод строкой и рендеринг продолжается.
"""

from __future__ import annotations


class SkinUserError(Exception):
    """
    Базовый класс для всех пользовательских ошибок движка скинов.

    Эти ошибки означают проблемы, которые пользователь может исправить:
    неверная ссылка на скин, синтаксис тега, конфигурация и т.п.
    """
    pass


class SkinNotFoundError(SkinUserError):
    """Ресурс скина не найден ни относительно origin, ни в глобальном поиске."""

    def __init__(self, ref: str, searched: list[str] | None = None):
        msg = f"Skin not found: {ref}"
        if searched:
            msg += f" (searched: {', '.join(searched)})"
        super().__init__(msg)
        self.ref = ref
        self.searched = list(searched or [])


class SkinRecursionError(SkinUserError):
    """Цикл в цепочке extends или превышение допустимой глубины рендеринга."""
    pass


class SkinConfigError(SkinUserError):
    """Некорректный файл конфигурации skin.yaml."""
    pass


__all__ = [
    "SkinUserError",
    "SkinNotFoundError",
    "SkinRecursionError",
    "SkinConfigError",
]
