"""
Модель конфигурации движка скинов (skin.yaml).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

DEFAULT_MACRO_MODULES = ["skin.filters", "skin.macros"]


def _str_list(data: Dict[str, Any], key: str, default: List[str]) -> List[str]:
    raw = data.get(key, None)
    if raw is None:
        return list(default)
    if isinstance(raw, str):
        return [raw]
    return [str(x) for x in raw]


@dataclass
class SkinConfig:
    """
    Настройки движка.

    Все ключи необязательны; отсутствующие получают значения по умолчанию.
    """
    charset: str = "utf-8"
    cache: bool = True
    paths: List[str] = field(default_factory=list)
    suffixes: List[str] = field(default_factory=list)
    ignore: List[str] = field(default_factory=list)
    macros: List[str] = field(default_factory=lambda: list(DEFAULT_MACRO_MODULES))
    max_render_depth: int = 64
    max_extends_depth: int = 32

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SkinConfig":
        """Создание экземпляра из словаря (из YAML)."""
        return cls(
            charset=str(data.get("charset", "utf-8")),
            cache=bool(data.get("cache", True)),
            paths=_str_list(data, "paths", []),
            suffixes=_str_list(data, "suffixes", []),
            ignore=_str_list(data, "ignore", []),
            macros=_str_list(data, "macros", DEFAULT_MACRO_MODULES),
            max_render_depth=int(data.get("max_render_depth", 64)),
            max_extends_depth=int(data.get("max_extends_depth", 32)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация в словарь для YAML."""
        return {
            "charset": self.charset,
            "cache": self.cache,
            "paths": list(self.paths),
            "suffixes": list(self.suffixes),
            "ignore": list(self.ignore),
            "macros": list(self.macros),
            "max_render_depth": self.max_render_depth,
            "max_extends_depth": self.max_extends_depth,
        }


DEFAULT_CONFIG = SkinConfig()
