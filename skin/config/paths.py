from __future__ import annotations

from pathlib import Path

# Single source of truth for configuration file naming.
CFG_FILE = "skin.yaml"
DEFAULT_SKIN_DIR = "skins"


def config_path(root: Path) -> Path:
    """Path to the configuration file <root>/skin.yaml."""
    return (root / CFG_FILE).resolve()


def resolve_skin_roots(root: Path, paths: list[str]) -> list[Path]:
    """
    Skin search roots from the 'paths' setting, relative to the project root.
    Without explicit paths: <root>/skins if present, otherwise <root> itself.
    """
    if paths:
        return [(root / p).resolve() for p in paths]
    default = (root / DEFAULT_SKIN_DIR).resolve()
    return [default] if default.is_dir() else [root.resolve()]
