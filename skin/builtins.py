"""
Встроенные управляющие формы: render, echo, for, if, set.

Вызываются движком напрямую по точному совпадению имени тега, минуя
обычную диспетчеризацию. Неверные вызовы не бросают исключений: текст
ошибки встраивается в вывод, и рендеринг продолжается.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence, Tuple

from .context import RenderContext, is_visible, to_text
from .template.nodes import MacroTag

if TYPE_CHECKING:
    from .engine import SkinEvaluator

FOR_NOT_ENOUGH = "[Error in for-in macro: not enough parameters]"
FOR_EXPECTED_IN = "[Error in for-in macro: expected in]"
IF_NOT_ENOUGH = "[Error in if macro: not enough parameters]"
SET_NOT_ENOUGH = "[Error in set macro: not enough parameters]"
SET_EXPECTED_MAP = "[Error in set macro: expected map]"


def _lookup_named(ev: SkinEvaluator, tag: MacroTag, context: RenderContext, *names: str) -> Any:
    """Первый непустой именованный параметр из списка, вычисленный при необходимости."""
    for name in names:
        value = ev.evaluate_param(tag.get_parameter(name), context)
        if value:
            return value
    return None


def _apply_wrap(items: List[str], wrapper: Any) -> List[str]:
    if not isinstance(wrapper, Sequence) or isinstance(wrapper, str):
        return items
    prefix = to_text(wrapper[0]) if len(wrapper) > 0 else ""
    suffix = to_text(wrapper[1]) if len(wrapper) > 1 else ""
    return [prefix + item + suffix for item in items]


def _iterate(items: Any) -> List[Tuple[Any, Any]]:
    """
    Пары (index, value) для цикла for.

    Отображения дают (ключ, значение), None - ничего, строки и скаляры -
    один элемент, прочие итерируемые - перечисление.
    """
    if items is None:
        return []
    if isinstance(items, Mapping):
        return list(items.items())
    if isinstance(items, (str, bytes)) or not isinstance(items, Iterable):
        return [(0, items)]
    return list(enumerate(items))


def render_builtin(ev: SkinEvaluator, tag: MacroTag, context: RenderContext) -> str:
    """<% render name %> - рендерит подскин текущего скина."""
    name = ev.evaluate_param(tag.get_parameter(0), context)
    if not is_visible(name):
        return ""
    return ev.skin.render_subskin(to_text(name), context)


def echo_builtin(ev: SkinEvaluator, tag: MacroTag, context: RenderContext) -> str:
    """<% echo a b c wrap=[pre, post] separator=", " %>"""
    items = [to_text(ev.evaluate_param(p, context)) for p in tag.parameters]
    wrapper = _lookup_named(ev, tag, context, "wrap", "echo-wrap")
    if wrapper is not None:
        items = _apply_wrap(items, wrapper)
    separator = ev.evaluate_param(tag.get_parameter("separator"), context)
    return (" " if separator is None else to_text(separator)).join(items)


def for_builtin(ev: SkinEvaluator, tag: MacroTag, context: RenderContext) -> str:
    """
    <% for x in list body... %>

    Хвост `and y in other ...` превращается во вложенный цикл.
    Каждая итерация получает свежий дочерний контекст с x и index.
    """
    params = tag.parameters
    if len(params) < 4:
        return FOR_NOT_ENOUGH
    if params[1] != "in":
        return FOR_EXPECTED_IN

    name = to_text(ev.evaluate_param(params[0], context))
    items = ev.evaluate_param(params[2], context)
    body = tag.sub_macro(3)
    if body.name == "and":
        body = body.renamed("for")

    result = []
    for index, value in _iterate(items):
        scope = context.child({"index": index, name: value})
        result.append(to_text(ev.evaluate_macro(body, scope)))

    wrapper = _lookup_named(ev, tag, context, "wrap", f"{name}-wrap")
    if wrapper is not None:
        result = _apply_wrap(result, wrapper)
    separator = ev.evaluate_param(tag.get_parameter("separator"), context)
    return ("" if separator is None else to_text(separator)).join(result)


def if_builtin(ev: SkinEvaluator, tag: MacroTag, context: RenderContext, bypass: bool = False) -> Any:
    """
    <% if [not] condition [or|and ...] body... %>

    `or` при истинном условии рекурсивно вызывает под-if в режиме bypass:
    его условие не вычисляется. `and` вычисляет под-if как вложенное условие.
    """
    params = tag.parameters
    if len(params) < 2:
        return IF_NOT_ENOUGH
    negated = params[0] == "not"
    if negated and len(params) < 3:
        return IF_NOT_ENOUGH

    index = 1 if negated else 0
    result = True
    if bypass:
        index += 1
    else:
        condition = ev.evaluate_param(params[index], context)
        index += 1
        result = not condition if negated else bool(condition)

    if index >= len(params):
        return IF_NOT_ENOUGH

    sub_name = params[index]
    if not result and sub_name != "or":
        return ""
    sub_macro = tag.sub_macro(index)
    if sub_name == "or" and result:
        return if_builtin(ev, sub_macro, context, bypass=True)
    if sub_name in ("and", "or"):
        return if_builtin(ev, sub_macro, context)
    return ev.evaluate_macro(sub_macro, context)


def set_builtin(ev: SkinEvaluator, tag: MacroTag, context: RenderContext) -> Any:
    """<% set {key: value, ...} body... %> - локальные связывания для тела."""
    params = tag.parameters
    if len(params) < 2:
        return SET_NOT_ENOUGH
    mapping = ev.evaluate_param(params[0], context)
    if not isinstance(mapping, Mapping):
        return SET_EXPECTED_MAP
    bindings = {to_text(key): ev.evaluate_param(value, context) for key, value in mapping.items()}
    return ev.evaluate_macro(tag.sub_macro(1), context.child(bindings))


BUILTINS: Dict[Optional[str], Callable[..., Any]] = {
    "render": render_builtin,
    "echo": echo_builtin,
    "for": for_builtin,
    "if": if_builtin,
    "set": set_builtin,
}


__all__ = [
    "BUILTINS",
    "render_builtin",
    "echo_builtin",
    "for_builtin",
    "if_builtin",
    "set_builtin",
]
