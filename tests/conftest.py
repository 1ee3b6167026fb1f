from pathlib import Path

import pytest

from skin.cache import CACHE_ENV

# Импорт из унифицированной инфраструктуры
from tests.infrastructure.file_utils import write, write_config, write_skins


@pytest.fixture(autouse=True)
def _isolate_cache_env(monkeypatch):
    # переменная окружения перекрывает настройку cache; в тестах её быть не должно
    monkeypatch.delenv(CACHE_ENV, raising=False)


@pytest.fixture
def skins_root(tmp_path: Path) -> Path:
    """Пустой каталог-корень репозитория скинов."""
    root = tmp_path / "skins"
    root.mkdir()
    return root


@pytest.fixture
def tmpproj(tmp_path: Path) -> Path:
    """
    Минимальный проект: skin.yaml + каталог skins/ с макетом,
    страницей-наследником и общим фрагментом.
    """
    root = tmp_path
    write_config(root, {"suffixes": [".skin"]})
    write_skins(root / "skins", {
        "layout.skin": (
            "<html><% render head %><% render body %></html>\n"
            "<% subskin head %><title><% title | default Untitled %></title>"
            "<% subskin body %>base body"
        ),
        "pages/index.skin": (
            "<% extends layout %>"
            "<% subskin body %><ul><% for item in <% items %> render row %></ul>"
            "<% subskin row %><li><% item | escapeHtml %></li>"
        ),
        "partials/footer.skin": "<footer><% year %></footer>",
    })
    write(root / "skins" / "notes.txt", "not a skin\n")
    return root
