from __future__ import annotations

from importlib import metadata

DIST_NAME = "skin-templates"


def tool_version() -> str:
    """Версия установленного дистрибутива; при запуске из исходников без установки - 0.0.0."""
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"


__all__ = ["tool_version", "DIST_NAME"]
