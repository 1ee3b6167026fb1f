"""
Unified test infrastructure for the skin engine.

This package contains common utilities and helpers
used across all tests to avoid code duplication.

Modules:
- file_utils: Utilities for creating skin files and project trees
- rendering_utils: Utilities for creating loaders/environments and rendering skins
- cli_utils: Utilities for running the skin CLI
"""

from .file_utils import write, write_skins, write_config
from .rendering_utils import make_loader, make_env, render_text
from .cli_utils import run_cli, jload

__all__ = [
    # File utilities
    "write", "write_skins", "write_config",

    # Rendering utilities
    "make_loader", "make_env", "render_text",

    # CLI utilities
    "run_cli", "jload",
]
