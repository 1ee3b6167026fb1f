"""
Тесты окружения: сборка сервисов из конфигурации, загрузка модулей
макросов, рендеринг проекта, функции уровня пакета.
"""

import logging
from pathlib import Path

import pytest

import skin
from skin.environment import SkinEnvironment, collect_handlers, load_macro_modules
from skin.errors import SkinConfigError, SkinNotFoundError
from tests.infrastructure import sample_macros
from tests.infrastructure.file_utils import write, write_config
from tests.infrastructure.rendering_utils import make_env


class TestMacroModules:

    def test_collect_respects_all(self):
        handlers = collect_handlers(sample_macros)
        assert set(handlers) == {"shout_filter", "greet_macro"}

    def test_later_modules_override(self):
        handlers = load_macro_modules(["skin.filters", "tests.infrastructure.sample_macros"])
        assert "escapeHtml_filter" in handlers
        assert handlers["greet_macro"] is sample_macros.greet_macro

    def test_unknown_module(self):
        with pytest.raises(SkinConfigError, match="Cannot import macro module"):
            load_macro_modules(["no_such_module_for_skins"])

    def test_module_without_handlers_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="skin.environment"):
            assert load_macro_modules(["json"]) == {}
        assert "defines no" in caplog.text

    def test_custom_module_from_config(self, tmp_path: Path):
        write(tmp_path / "hello.skin", "<% greet <% who %> %> <% x | shout %>")
        write_config(tmp_path, {"macros": ["tests.infrastructure.sample_macros"]})
        env = SkinEnvironment(tmp_path)
        assert env.render("hello.skin", {"who": "Ann", "x": "hey"}) == "Hello, Ann HEY!"

    def test_standard_handlers_absent_when_not_configured(self, tmp_path: Path):
        env = make_env(tmp_path, macros=[])
        assert env.render(env.create_skin("<% x | uppercase %>"), {"x": "a"}) == "a"

    def test_extra_macros_argument(self, tmp_path: Path):
        env = SkinEnvironment(tmp_path, macros={"site_macro": lambda: "S"})
        assert env.render(env.create_skin("<% site %>")) == "S"


class TestProject:

    def test_render_page(self, tmpproj):
        env = SkinEnvironment(tmpproj)
        out = env.render("pages/index", {"items": ["a<b", "c"], "title": "Home"})
        assert out == "<html><title>Home</title><ul><li>a&lt;b</li><li>c</li></ul></html>\n"

    def test_parent_subskin_default(self, tmpproj):
        env = SkinEnvironment(tmpproj)
        assert env.render("pages/index").startswith("<html><title>Untitled</title><ul></ul>")

    def test_render_layout_directly(self, tmpproj):
        env = SkinEnvironment(tmpproj)
        assert env.render("layout", {"title": "T"}) == "<html><title>T</title>base body</html>\n"

    def test_render_subskin_reference(self, tmpproj):
        env = SkinEnvironment(tmpproj)
        assert env.render("pages/index#row", {"item": "&"}) == "<li>&amp;</li>"

    def test_list_skins(self, tmpproj):
        env = SkinEnvironment(tmpproj)
        assert env.list_skins() == ["layout.skin", "pages/index.skin", "partials/footer.skin"]

    def test_missing_skin(self, tmpproj):
        with pytest.raises(SkinNotFoundError):
            SkinEnvironment(tmpproj).render("nope")

    def test_render_depth_from_config(self, tmp_path: Path):
        write(tmp_path / "loop.skin", "<% render again %><% subskin again %><% render again %>")
        write_config(tmp_path, {"max_render_depth": 3})
        with pytest.raises(skin.SkinRecursionError, match=r"\(3\)"):
            SkinEnvironment(tmp_path).render("loop.skin")


class TestPackageFunctions:

    @pytest.fixture(autouse=True)
    def _fresh_default_env(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(skin, "_default_env", None)

    def test_create_skin_uses_standard_filters(self):
        assert skin.create_skin("Hi <% x | uppercase %>").render({"x": "a"}) == "Hi A"

    def test_render_reference_from_cwd(self, tmp_path: Path):
        write(tmp_path / "skins" / "hello.skin", "Hello <% name %>")
        assert skin.render("hello.skin", {"name": "B"}) == "Hello B"

    def test_render_ready_skin(self):
        s = skin.create_skin("<% a %>")
        assert skin.render(s, {"a": 1}) == "1"

    def test_default_environment_is_reused(self):
        assert skin.default_environment() is skin.default_environment()
