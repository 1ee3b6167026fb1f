from __future__ import annotations

from .load import load_config, load_yaml_file
from .model import DEFAULT_CONFIG, DEFAULT_MACRO_MODULES, SkinConfig
from .paths import CFG_FILE, config_path, resolve_skin_roots

__all__ = [
    "SkinConfig",
    "DEFAULT_CONFIG",
    "DEFAULT_MACRO_MODULES",
    "load_config",
    "load_yaml_file",
    "CFG_FILE",
    "config_path",
    "resolve_skin_roots",
]
