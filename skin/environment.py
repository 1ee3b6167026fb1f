"""
Окружение движка скинов.

Собирает из конфигурации все сервисы: репозиторий ресурсов, кэш,
глобальные макросы/фильтры и загрузчик. Состояние явно принадлежит
экземпляру окружения, а не модулю.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .cache import SkinCache
from .config import SkinConfig, load_config, resolve_skin_roots
from .context import FILTER_SUFFIX, MACRO_SUFFIX
from .document import Skin
from .errors import SkinConfigError
from .loader import SkinLoader
from .resources import Resource, SkinRepository

logger = logging.getLogger(__name__)


def collect_handlers(module: Any) -> Dict[str, Any]:
    """Все вызываемые *_macro / *_filter модуля (с учётом __all__, если он задан)."""
    names = getattr(module, "__all__", None) or dir(module)
    out: Dict[str, Any] = {}
    for name in names:
        if not (name.endswith(MACRO_SUFFIX) or name.endswith(FILTER_SUFFIX)):
            continue
        value = getattr(module, name, None)
        if callable(value):
            out[name] = value
    return out


def load_macro_modules(modules: Iterable[str]) -> Dict[str, Any]:
    """
    Импортирует модули макросов и объединяет их обработчики.
    Более поздние модули перекрывают более ранние.

    Raises:
        SkinConfigError: если модуль не импортируется
    """
    merged: Dict[str, Any] = {}
    for module_name in modules:
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise SkinConfigError(f"Cannot import macro module '{module_name}': {e}")
        handlers = collect_handlers(module)
        if not handlers:
            logger.warning(f"Macro module '{module_name}' defines no *_macro or *_filter handlers")
        merged.update(handlers)
    return merged


class SkinEnvironment:
    """
    Точка входа для рендеринга скинов проекта.

    Args:
        root: Корень проекта (по умолчанию текущий каталог)
        config: Готовая конфигурация (иначе читается <root>/skin.yaml)
        macros: Дополнительные глобальные обработчики поверх модулей из конфигурации
    """

    def __init__(
        self,
        root: Optional[Path] = None,
        *,
        config: Optional[SkinConfig] = None,
        macros: Optional[Mapping] = None,
    ):
        self.root = Path(root) if root is not None else Path.cwd()
        self.config = config if config is not None else load_config(self.root)
        self.repository = SkinRepository(
            resolve_skin_roots(self.root, self.config.paths),
            suffixes=self.config.suffixes,
            ignore=self.config.ignore,
        )
        self.cache = SkinCache(enabled=self.config.cache)
        handlers = load_macro_modules(self.config.macros)
        if macros:
            handlers.update(macros)
        self.loader = SkinLoader(
            self.repository,
            cache=self.cache,
            charset=self.config.charset,
            macros=handlers,
            max_render_depth=self.config.max_render_depth,
            max_extends_depth=self.config.max_extends_depth,
        )

    def create_skin(self, source: Union[str, Resource]) -> Skin:
        """Скин из сырого текста или ресурса."""
        return self.loader.create_skin(source)

    def get_skin(self, target: Union[Skin, Resource, str]) -> Skin:
        """Скин по ссылке 'path[#subskin]'."""
        return self.loader.load(target)

    def render(self, target: Union[Skin, Resource, str], context: Optional[Mapping] = None) -> str:
        """Загружает скин по ссылке (или берёт готовый) и рендерит его."""
        return self.get_skin(target).render(context)

    def load_macros(self, context: Optional[Mapping]) -> Dict[str, Any]:
        return self.loader.load_macros(context)

    def list_skins(self) -> List[str]:
        return self.repository.list_skins()


__all__ = ["SkinEnvironment", "load_macro_modules", "collect_handlers"]
