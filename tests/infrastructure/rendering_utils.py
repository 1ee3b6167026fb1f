"""
Utilities for creating loaders and environments and rendering skins in tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from skin.cache import SkinCache
from skin.config import SkinConfig
from skin.environment import SkinEnvironment, load_macro_modules
from skin.loader import SkinLoader
from skin.resources import SkinRepository


def make_loader(
    *roots: Path,
    suffixes: Sequence[str] = (),
    cache: bool = True,
    macros: Optional[Mapping[str, Any]] = None,
    standard: bool = False,
    **kwargs: Any,
) -> SkinLoader:
    """
    Creates a loader over the given roots.

    Args:
        roots: Repository roots (none: loader only for raw text)
        suffixes: Suffixes tried during lookup
        cache: Whether to create a cache
        macros: Global handlers
        standard: Whether to add standard filters and macros
        **kwargs: Other SkinLoader arguments (max_render_depth, ...)
    """
    handlers = {}
    if standard:
        handlers.update(load_macro_modules(["skin.filters", "skin.macros"]))
    if macros:
        handlers.update(macros)
    repository = SkinRepository(list(roots), suffixes=suffixes) if roots else None
    return SkinLoader(
        repository,
        cache=SkinCache(enabled=True) if cache else None,
        macros=handlers,
        **kwargs,
    )


def make_env(root: Path, **config: Any) -> SkinEnvironment:
    """Environment over root with the given configuration keys."""
    return SkinEnvironment(root, config=SkinConfig.from_dict(config))


def render_text(text: str, context: Optional[Mapping[str, Any]] = None, **loader_kwargs: Any) -> str:
    """Parses raw skin text and renders it with the given context."""
    return make_loader(**loader_kwargs).create_skin(text).render(context)


__all__ = ["make_loader", "make_env", "render_text"]
