"""
Скин: разобранный шаблон с главным телом, именованными подскинами и
необязательным родительским скином.

Скин неизменяем после загрузки и может одновременно рендериться из
нескольких потоков. Единственное изменяемое состояние - мемо внешних
подскинов, загружаемых лениво по ссылке; запись в него защищена блокировкой.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Optional

from .context import DEFAULT_MAX_DEPTH, RenderContext
from .engine import SkinEvaluator
from .errors import SkinNotFoundError
from .template.nodes import PartList

if TYPE_CHECKING:
    from .loader import SkinLoader

logger = logging.getLogger(__name__)


class Skin:
    """
    Разобранный скин.

    Attributes:
        main: Части главного тела
        subskins: Именованные подскины (read-only)
        parent: Родительский скин из <% extends %> (общий, только для чтения)
        origin: Ресурс, из которого загружен скин (None для сырого текста)
        loader: Загрузчик для ленивого разрешения внешних подскинов
    """

    def __init__(
        self,
        main: PartList,
        subskins: Optional[Mapping] = None,
        parent: Optional[Skin] = None,
        origin: Any = None,
        loader: Optional[SkinLoader] = None,
    ):
        self.main = main
        self.subskins: Mapping[str, PartList] = MappingProxyType(dict(subskins or {}))
        self.parent = parent
        self.origin = origin
        self.loader = loader
        self._external: Dict[str, Skin] = {}
        self._lock = threading.Lock()

    # ======= Рендеринг =======

    def render(self, context: Optional[Mapping] = None) -> str:
        """
        Рендерит главное тело.

        Пустое главное тело при наличии родителя целиком делегируется
        главному телу родителя; диспетчеризация при этом идёт от имени
        этого скина, поэтому его подскины перекрывают родительские.
        """
        ctx = self._prepare(context)
        evaluator = SkinEvaluator(self)
        if self.main.is_empty and self.parent is not None:
            return evaluator.render_parts(self.parent.get_skin_parts(), ctx)
        return evaluator.render_parts(self.main, ctx)

    def render_subskin(self, name: str, context: Optional[Mapping] = None) -> str:
        """
        Рендерит подскин по имени.

        Порядок поиска: собственные подскины → цепочка родителей →
        внешний скин по ссылке относительно origin (рендерится целиком).

        Raises:
            SkinNotFoundError: если подскин не найден нигде
            SkinRecursionError: при превышении глубины вложенного рендеринга
        """
        ctx = self._prepare(context).nested()
        evaluator = SkinEvaluator(self)
        parts = self.subskins.get(name)
        if parts is not None:
            return evaluator.render_parts(parts, ctx)
        if self.parent is not None:
            inherited = self.parent.get_skin_parts(name)
            if inherited is not None:
                return evaluator.render_parts(inherited, ctx)
        return self._external_skin(name).render(ctx)

    # ======= Цепочка разрешения =======

    def get_skin_parts(self, name: Optional[str] = None) -> Optional[PartList]:
        """
        Сырые части подскина (или главного тела, если имя не задано).

        Отсутствующий подскин, как и пустое главное тело, берётся у родителя.
        """
        parts = self.subskins.get(name) if name else self.main
        if parts is None or (not name and parts.is_empty):
            return self.parent.get_skin_parts(name) if self.parent is not None else None
        return parts

    def get_subskin(self, name: str) -> Optional[Skin]:
        """Самостоятельный скин, главным телом которого является подскин."""
        parts = self.subskins.get(name)
        if parts is None:
            return None
        return Skin(parts, self.subskins, self.parent, self.origin, self.loader)

    def has_subskin(self, name: str) -> bool:
        return self.get_skin_parts(name) is not None

    # ======= Внутренние методы =======

    def _prepare(self, context: Optional[Mapping]) -> RenderContext:
        """Глобальный оверлей макросов и обёртка в RenderContext (один раз на рендеринг)."""
        if isinstance(context, RenderContext):
            return context
        if self.loader is None:
            return RenderContext(dict(context or {}), max_depth=DEFAULT_MAX_DEPTH)
        return RenderContext(self.loader.load_macros(context), max_depth=self.loader.max_render_depth)

    def _external_skin(self, name: str) -> Skin:
        skin = self._external.get(name)
        if skin is not None:
            return skin
        if self.loader is None:
            raise SkinNotFoundError(name)
        logger.debug("resolving external subskin '%s' from %s", name, self.origin or "<text>")
        resource = self.loader.resolve_skin(self.origin, name)
        loaded = self.loader.create_skin(resource)
        with self._lock:
            return self._external.setdefault(name, loaded)

    def __repr__(self) -> str:
        origin = self.origin if self.origin is not None else "<text>"
        return f"<Skin {origin} main={len(self.main)} subskins={sorted(self.subskins)}>"


__all__ = ["Skin"]
