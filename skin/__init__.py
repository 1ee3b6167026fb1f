"""
Движок скинов: текстовые шаблоны с макросами <% ... %>, фильтрами,
подскинами и наследованием через extends.

Быстрый старт:

    from skin import SkinEnvironment

    env = SkinEnvironment(root)
    html = env.render("pages/index", {"title": "Hello"})
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Optional, Union

from .cache import SkinCache
from .config import SkinConfig, load_config
from .context import RenderContext
from .document import Skin
from .environment import SkinEnvironment
from .errors import SkinConfigError, SkinNotFoundError, SkinRecursionError, SkinUserError
from .loader import SkinLoader
from .resources import Resource, SkinRepository
from .template import MacroTag, PartList, SkinSyntaxError, UnbalancedTagError

_default_env: Optional[SkinEnvironment] = None
_default_lock = threading.Lock()


def default_environment() -> SkinEnvironment:
    """Окружение по умолчанию для текущего каталога (создаётся лениво)."""
    global _default_env
    with _default_lock:
        if _default_env is None:
            _default_env = SkinEnvironment()
        return _default_env


def create_skin(source: Union[str, Resource]) -> Skin:
    """Разбирает скин из сырого текста или ресурса в окружении по умолчанию."""
    return default_environment().create_skin(source)


def render(target: Union[Skin, Resource, str], context: Optional[Mapping] = None) -> str:
    """
    Рендерит скин: готовый Skin, Resource или ссылку 'path[#subskin]'.
    """
    if isinstance(target, Skin):
        return target.render(context)
    return default_environment().render(target, context)


__all__ = [
    "Skin",
    "SkinLoader",
    "SkinEnvironment",
    "SkinCache",
    "SkinConfig",
    "SkinRepository",
    "Resource",
    "RenderContext",
    "MacroTag",
    "PartList",
    "SkinUserError",
    "SkinNotFoundError",
    "SkinRecursionError",
    "SkinConfigError",
    "SkinSyntaxError",
    "UnbalancedTagError",
    "load_config",
    "default_environment",
    "create_skin",
    "render",
]
