from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Hashable, Optional

if TYPE_CHECKING:
    from .document import Skin

logger = logging.getLogger(__name__)

CACHE_ENV = "SKIN_CACHE"


def cache_enabled_from_env(default: bool) -> bool:
    """Переменная окружения SKIN_CACHE перекрывает значение из конфигурации."""
    env = os.environ.get(CACHE_ENV, None)
    if env is not None:
        return env.strip().lower() not in {"0", "false", "no", "off", ""}
    return default


@dataclass(frozen=True)
class CacheSnapshot:
    enabled: bool
    entries: int
    hits: int
    misses: int


class SkinCache:
    """
    Процессный кэш разобранных скинов.

    Ключ - идентичность ресурса (Resource); скины из сырого текста не кэшируются.
    Заполняется лениво и не инвалидируется в течение жизни процесса,
    пока вызывающий явно не вызовет clear() или не отключит кэш.
    Чтение - обычный поиск в словаре; запись и счётчики защищены блокировкой:
    один и тот же Skin может одновременно рендериться в нескольких потоках.
    """

    def __init__(self, *, enabled: Optional[bool] = None):
        self.enabled = cache_enabled_from_env(True if enabled is None else bool(enabled))
        self._entries: Dict[Hashable, Skin] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: Any) -> Optional[Skin]:
        if not self.enabled:
            return None
        skin = self._entries.get(key)
        with self._lock:
            if skin is None:
                self._misses += 1
            else:
                self._hits += 1
        if skin is not None:
            logger.debug("skin cache hit: %s", key)
        return skin

    def put(self, key: Any, skin: Skin) -> Skin:
        """
        Сохраняет скин и возвращает закэшированный экземпляр.

        Если другой поток успел положить скин по этому ключу раньше,
        возвращается уже сохранённый экземпляр.
        """
        if not self.enabled:
            return skin
        with self._lock:
            return self._entries.setdefault(key, skin)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def disable(self) -> None:
        self.enabled = False
        self.clear()

    def __contains__(self, key: Any) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def snapshot(self) -> CacheSnapshot:
        with self._lock:
            return CacheSnapshot(
                enabled=self.enabled,
                entries=len(self._entries),
                hits=self._hits,
                misses=self._misses,
            )


__all__ = ["SkinCache", "CacheSnapshot", "CACHE_ENV", "cache_enabled_from_env"]
