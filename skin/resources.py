"""
Resource lookup for skins.

A skin reference is a POSIX-like path. References starting with "." are
resolved against the directory of the referring skin first; everything else
(and relative references that miss) goes through the global lookup over the
configured skin roots, in order.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import pathspec

from .errors import SkinNotFoundError, SkinUserError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resource:
    """A skin file inside one of the repository roots."""
    path: Path        # absolute, resolved
    root: Path        # repository root the resource was found under

    @property
    def name(self) -> str:
        """Repository-relative POSIX name (e.g. 'pages/index.skin')."""
        try:
            return self.path.relative_to(self.root).as_posix()
        except ValueError:
            return self.path.as_posix()

    def exists(self) -> bool:
        return self.path.is_file()

    def read_text(self, charset: str = "utf-8") -> str:
        return self.path.read_text(encoding=charset)

    def __str__(self) -> str:
        return self.name


def build_ignore_spec(patterns: Iterable[str]) -> Optional[pathspec.PathSpec]:
    """
    Build PathSpec from gitwildmatch patterns. Return None if there are none.
    """
    lines = []
    for ln in patterns:
        ln = ln.strip()
        if ln and not ln.startswith("#"):
            lines.append(ln)
    if not lines:
        return None
    return pathspec.PathSpec.from_lines(pathspec.patterns.GitWildMatchPattern, lines)


def _ensure_inside(path: Path, root: Path) -> None:
    """Security: a relative reference must not escape its repository root."""
    try:
        path.resolve().relative_to(root.resolve())
    except ValueError:
        raise SkinUserError(f"Resolved skin path escapes repository: {path} not under {root}")


class SkinRepository:
    """
    Ordered set of skin roots.

    Lookup tries the reference as-is, then with every configured suffix
    appended, in every root, first hit wins.
    """

    def __init__(
        self,
        roots: Sequence[Path],
        *,
        suffixes: Sequence[str] = (),
        ignore: Sequence[str] = (),
    ):
        self.roots: List[Path] = [Path(r).resolve() for r in roots]
        self.suffixes: Tuple[str, ...] = tuple(suffixes)
        self.ignore_spec = build_ignore_spec(ignore)

    # --------------------------- LOOKUP --------------------------- #

    def get_resource(self, ref: str, base: Optional[Resource] = None) -> Resource:
        """
        Resolve a reference to an existing resource.

        Args:
            ref: Skin reference ('layout', './partials/item', 'pages/a.skin')
            base: Referring resource for relative references

        Raises:
            SkinNotFoundError: if nothing matches
        """
        found = self.find(ref, base)
        if found is None:
            raise SkinNotFoundError(ref, [str(r) for r in self._search_dirs(ref, base)])
        return found

    def find(self, ref: str, base: Optional[Resource] = None) -> Optional[Resource]:
        """Same as get_resource(), but returns None on a miss."""
        ref = ref.strip()
        if not ref:
            return None

        if base is not None and ref.startswith("."):
            hit = self._find_in(base.path.parent, ref, base.root)
            if hit is not None:
                _ensure_inside(hit.path, base.root)
                return hit

        if os.path.isabs(ref):
            for candidate in self._candidates(ref):
                p = Path(candidate)
                if p.is_file():
                    return Resource(p.resolve(), p.resolve().parent)
            return None

        for root in self.roots:
            hit = self._find_in(root, ref, root)
            if hit is not None:
                _ensure_inside(hit.path, root)
                return hit
        return None

    def exists(self, ref: str, base: Optional[Resource] = None) -> bool:
        return self.find(ref, base) is not None

    # --------------------------- LISTING --------------------------- #

    def iter_skins(self) -> Iterator[Resource]:
        """
        All skin files under the roots, filtered by suffixes and ignore patterns.
        Without configured suffixes every file is listed.
        """
        seen = set()
        for root in self.roots:
            if not root.is_dir():
                continue
            for dirpath, dirnames, filenames in os.walk(root):
                if ".git" in dirnames:
                    dirnames.remove(".git")
                dirnames.sort()
                for fn in sorted(filenames):
                    p = Path(dirpath, fn)
                    if self.suffixes and not any(fn.endswith(s) for s in self.suffixes):
                        continue
                    rel_posix = p.resolve().relative_to(root).as_posix()
                    if self.ignore_spec and self.ignore_spec.match_file(rel_posix):
                        continue
                    if rel_posix in seen:
                        # shadowed by an earlier root
                        continue
                    seen.add(rel_posix)
                    yield Resource(p.resolve(), root)

    def list_skins(self) -> List[str]:
        """Sorted repository-relative names of all skins."""
        return sorted(r.name for r in self.iter_skins())

    # --------------------------- INTERNALS --------------------------- #

    def _candidates(self, ref: str) -> List[str]:
        out = [ref]
        for suffix in self.suffixes:
            if not ref.endswith(suffix):
                out.append(ref + suffix)
        return out

    def _find_in(self, directory: Path, ref: str, root: Path) -> Optional[Resource]:
        for candidate in self._candidates(ref):
            p = directory / candidate
            if p.is_file():
                return Resource(p.resolve(), root)
        return None

    def _search_dirs(self, ref: str, base: Optional[Resource]) -> List[Path]:
        dirs: List[Path] = []
        if base is not None and ref.startswith("."):
            dirs.append(base.path.parent)
        dirs.extend(self.roots)
        return dirs

    def __repr__(self) -> str:
        return f"SkinRepository({[str(r) for r in self.roots]!r})"


__all__ = ["Resource", "SkinRepository", "build_ignore_spec"]
