"""
Загрузчик скинов.

Превращает источник (сырой текст или ресурс) в Skin: прогоняет сканер,
раскладывает части по главному телу и подскинам и сразу загружает
родителя из <% extends %>.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Tuple, Union

from .cache import SkinCache
from .context import DEFAULT_MAX_DEPTH, to_text
from .document import Skin
from .errors import SkinNotFoundError, SkinRecursionError
from .resources import Resource, SkinRepository
from .template.nodes import MacroTag, Part, PartList
from .template.parser import SkinParser

logger = logging.getLogger(__name__)

EXTENDS = "extends"
SUBSKIN = "subskin"

Source = Union[str, Resource]


class SkinLoader:
    """
    Создаёт скины и разрешает ссылки на них.

    Кэш (если передан) хранит скины, загруженные из ресурсов, по
    идентичности ресурса. Сырой текст не кэшируется: у него нет origin.
    """

    def __init__(
        self,
        repository: Optional[SkinRepository] = None,
        *,
        cache: Optional[SkinCache] = None,
        charset: str = "utf-8",
        macros: Optional[Mapping] = None,
        max_render_depth: int = DEFAULT_MAX_DEPTH,
        max_extends_depth: int = 32,
    ):
        self.repository = repository
        self.cache = cache
        self.charset = charset
        self.macros: Dict[str, Any] = dict(macros or {})
        self.max_render_depth = max_render_depth
        self.max_extends_depth = max_extends_depth

    # ======= Публичный API =======

    def create_skin(self, source: Source) -> Skin:
        """
        Разбирает скин из ресурса или сырого текста.

        Raises:
            SkinNotFoundError: если ресурс или цель extends не существует
            SkinSyntaxError: при ошибке разбора тегов
            SkinRecursionError: при цикле в цепочке extends
        """
        return self._create(source, ())

    def load(self, target: Union[Skin, Resource, str]) -> Skin:
        """
        Скин по ссылке: готовый Skin, Resource или строка 'path[#subskin]'.
        """
        if isinstance(target, Skin):
            return target
        if isinstance(target, Resource):
            return self.create_skin(target)
        if isinstance(target, str):
            path, _, subskin_name = target.partition("#")
            skin = self.create_skin(self.resolve_skin(None, path))
            if subskin_name:
                subskin = skin.get_subskin(subskin_name)
                if subskin is None:
                    raise SkinNotFoundError(target)
                skin = subskin
            return skin
        raise TypeError(f"Unknown skin object: {target!r}")

    def resolve_skin(self, base: Any, ref: str) -> Resource:
        """
        Разрешает ссылку на скин относительно base (если ссылка начинается
        с '.') или через глобальный поиск по репозиторию.
        """
        if self.repository is None:
            raise SkinNotFoundError(ref)
        return self.repository.get_resource(ref, base if isinstance(base, Resource) else None)

    def load_macros(self, context: Optional[Mapping]) -> Dict[str, Any]:
        """
        Глобальный оверлей: макросы и фильтры окружения под контекстом
        вызывающего. Значения вызывающего перекрывают глобальные.
        Исходный контекст не изменяется.
        """
        merged = dict(self.macros)
        if context:
            merged.update(context)
        return merged

    # ======= Внутренние методы =======

    def _create(self, source: Source, chain: Tuple[Resource, ...]) -> Skin:
        origin = source if isinstance(source, Resource) else None

        if origin is not None and self.cache is not None:
            cached = self.cache.get(origin)
            if cached is not None:
                return cached

        if origin is not None:
            if origin in chain:
                cycle = " -> ".join(str(r) for r in chain + (origin,))
                raise SkinRecursionError(f"Cyclic extends chain: {cycle}")
            if len(chain) >= self.max_extends_depth:
                raise SkinRecursionError(
                    f"Maximum extends depth exceeded ({self.max_extends_depth}) at {origin}"
                )
            if not origin.exists():
                raise SkinNotFoundError(origin.name)
            text = origin.read_text(self.charset)
            chain = chain + (origin,)
        else:
            text = source

        logger.debug("creating skin: %s", origin if origin is not None else "<text>")

        main: List[Part] = []
        subskins: Dict[str, List[Part]] = {}
        subskin_filters: Dict[str, Optional[MacroTag]] = {}
        current = main
        parent: Optional[Skin] = None

        for part in SkinParser(text).iter_parts():
            if isinstance(part, MacroTag) and part.name == EXTENDS:
                ref = to_text(part.get_parameter(0))
                parent = self._create(self.resolve_skin(origin, ref), chain)
            elif isinstance(part, MacroTag) and part.name == SUBSKIN:
                name = to_text(part.get_parameter("name", 0))
                current = []
                subskins[name] = current
                subskin_filters[name] = part.filter
            else:
                current.append(part)

        # нормализация: срезаем завершающий пробельный текст, чтобы отличать
        # пустое главное тело (наследуемое от родителя) от пробельного
        if main and isinstance(main[-1], str) and main[-1].strip() == "":
            main.pop()

        skin = Skin(
            PartList(tuple(main)),
            {name: PartList(tuple(parts), subskin_filters[name]) for name, parts in subskins.items()},
            parent,
            origin,
            self,
        )
        if origin is not None and self.cache is not None:
            skin = self.cache.put(origin, skin)
        return skin


__all__ = ["SkinLoader", "EXTENDS", "SUBSKIN"]
