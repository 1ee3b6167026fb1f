"""
Движок рендеринга скинов.

Рекурсивный интерпретатор дерева частей: литеральный текст выводится как
есть, теги макросов разрешаются через builtin-таблицу или через
динамическую диспетчеризацию по контексту, результат пропускается через
цепочку фильтров.

Движок не имеет побочных эффектов, кроме логирования: разобранные теги
никогда не изменяются, новые области видимости создаются дочерними
контекстами.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Optional

from .builtins import BUILTINS
from .context import (
    FILTER_SUFFIX,
    MACRO_SUFFIX,
    RenderContext,
    call_handler,
    is_defined,
    is_visible,
    to_text,
)
from .template.nodes import MacroTag, Part, PartList

if TYPE_CHECKING:
    from .document import Skin

logger = logging.getLogger(__name__)

# Маркер «значение не передано»: отличает вызов макроса от шага фильтра
MISSING = object()


class SkinEvaluator:
    """
    Интерпретатор частей скина.

    skin - скин, от имени которого идёт рендеринг: он передаётся
    обработчикам третьим аргументом и отвечает на builtin render.
    При наследовании главного тела это дочерний скин, даже если
    части принадлежат родителю.
    """

    def __init__(self, skin: Skin):
        self.skin = skin

    def render_parts(self, parts: Optional[PartList], context: RenderContext) -> str:
        """Конкатенирует отрендеренные части и применяет фильтр списка частей."""
        if parts is None:
            return ""
        value = "".join(self.render_part(part, context) for part in parts)
        if parts.filter is not None:
            return to_text(self.evaluate_filter(value, parts.filter, context))
        return value

    def render_part(self, part: Part, context: RenderContext) -> str:
        if isinstance(part, MacroTag):
            if not part.name:
                return ""
            return to_text(self.evaluate_macro(part, context))
        return part

    def evaluate_macro(self, tag: MacroTag, context: RenderContext) -> Any:
        """Вычисляет сам макрос, затем пропускает значение через его фильтры."""
        value = self.resolve(tag, context, MACRO_SUFFIX)
        return self.evaluate_filter(value, tag.filter, context)

    def evaluate_filter(self, value: Any, filter_tag: Optional[MacroTag], context: RenderContext) -> Any:
        """Проходит связный список фильтров слева направо."""
        while filter_tag is not None:
            # фильтры никогда не получают None
            if not is_visible(value):
                value = ""
            value = self.resolve(filter_tag, context, FILTER_SUFFIX, value)
            filter_tag = filter_tag.filter
        if isinstance(value, (list, tuple)):
            value = "".join(to_text(item) for item in value)
        return value

    def resolve(self, tag: MacroTag, context: RenderContext, suffix: str, value: Any = MISSING) -> Any:
        """
        Ядро динамической диспетчеризации.

        1. builtin-имена обрабатываются таблицей builtin (suffix и value игнорируются);
        2. точечный путь проходится по контексту;
        3. вызываемый <last><suffix> вызывается: макрос - (tag, context, skin),
           фильтр - (value, tag, context, skin);
        4. для макроса без обработчика возвращается обычное свойство <last>
           (вызывается, если это функция);
        5. иначе value возвращается без изменений.
        """
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("evaluating expression: %s", tag)

        builtin = BUILTINS.get(tag.name)
        if builtin is not None:
            return builtin(self, tag, context)

        fallback = None if value is MISSING else value
        name = tag.name
        if not name:
            return fallback

        handler = context.handler(name, suffix)
        if handler is not None:
            evaluated = self.evaluate_nested(tag, context)
            if value is MISSING:
                return call_handler(handler, evaluated, context, self.skin)
            return call_handler(handler, value, evaluated, context, self.skin)

        if value is MISSING:
            plain = context.value(name)
            if is_defined(plain):
                if callable(plain):
                    return call_handler(plain, self.evaluate_nested(tag, context), context, self.skin)
                return plain

        return fallback

    def evaluate_param(self, param: Any, context: RenderContext) -> Any:
        """Вложенный тег вычисляется как макрос, литерал возвращается как есть."""
        if isinstance(param, MacroTag):
            return self.resolve(param, context, MACRO_SUFFIX)
        return param

    def evaluate_nested(self, tag: MacroTag, context: RenderContext) -> MacroTag:
        """
        Копия тега с вычисленными вложенными тегами в параметрах.

        Исходный тег не изменяется: один и тот же разобранный скин может
        одновременно рендериться с разными контекстами.
        """
        has_nested = any(isinstance(p, MacroTag) for p in tag.parameters) or any(
            isinstance(v, MacroTag) for v in tag.named.values()
        )
        if not has_nested:
            return tag
        return replace(
            tag,
            parameters=tuple(self.evaluate_param(p, context) for p in tag.parameters),
            named={k: self.evaluate_param(v, context) for k, v in tag.named.items()},
        )


__all__ = ["SkinEvaluator", "MISSING"]
