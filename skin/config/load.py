"""
Загрузчик конфигурации skin.yaml.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import SkinConfigError
from .model import SkinConfig
from .paths import config_path

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    if not path.is_file():
        return {}
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise SkinConfigError(f"Invalid YAML in {path}: {e}")
    if not isinstance(raw, dict):
        raise SkinConfigError(f"YAML must be a mapping: {path}")
    return raw


def load_config(root: Path) -> SkinConfig:
    """
    Загружает конфигурацию движка из <root>/skin.yaml.

    Args:
        root: Корень проекта

    Returns:
        Конфигурация; при отсутствии файла - значения по умолчанию
    """
    path = config_path(root)
    raw = _read_yaml_map(path)
    try:
        cfg = SkinConfig.from_dict(raw)
    except (TypeError, ValueError) as e:
        raise SkinConfigError(f"Invalid configuration in {path}: {e}")
    logger.debug("Loaded skin config from %s: %s", path, cfg)
    return cfg


def load_yaml_file(path: Path) -> dict:
    """Читает произвольный YAML/JSON-файл контекста рендеринга (для CLI)."""
    if not path.is_file():
        raise SkinConfigError(f"Context file not found: {path}")
    return _read_yaml_map(path)
