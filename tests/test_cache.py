"""
Тесты процессного кэша скинов и его интеграции с окружением.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

from skin.cache import CACHE_ENV, SkinCache
from tests.infrastructure.file_utils import write_skins
from tests.infrastructure.rendering_utils import make_env, make_loader


class TestSkinCache:

    def test_miss_then_hit(self):
        cache = SkinCache(enabled=True)
        assert cache.get("k") is None
        skin = object()
        assert cache.put("k", skin) is skin
        assert cache.get("k") is skin
        snap = cache.snapshot()
        assert (snap.entries, snap.hits, snap.misses) == (1, 1, 1)

    def test_put_keeps_first_instance(self):
        cache = SkinCache(enabled=True)
        first, second = object(), object()
        cache.put("k", first)
        assert cache.put("k", second) is first
        assert "k" in cache

    def test_disabled_cache_stores_nothing(self):
        cache = SkinCache(enabled=False)
        skin = object()
        assert cache.put("k", skin) is skin
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_clear_and_disable(self):
        cache = SkinCache(enabled=True)
        cache.put("k", object())
        cache.clear()
        assert len(cache) == 0
        cache.put("k", object())
        cache.disable()
        assert not cache.enabled
        assert len(cache) == 0

    def test_env_disables(self, monkeypatch):
        monkeypatch.setenv(CACHE_ENV, "0")
        assert SkinCache(enabled=True).enabled is False

    def test_env_enables(self, monkeypatch):
        monkeypatch.setenv(CACHE_ENV, "1")
        assert SkinCache(enabled=False).enabled is True


class TestEnvironmentCache:

    def test_skins_are_shared(self, tmpproj):
        env = make_env(tmpproj, suffixes=[".skin"])
        assert env.get_skin("layout") is env.get_skin("layout")
        assert env.get_skin("pages/index").parent is env.get_skin("layout")

    def test_config_disables_cache(self, tmpproj):
        env = make_env(tmpproj, suffixes=[".skin"], cache=False)
        assert env.get_skin("layout") is not env.get_skin("layout")

    def test_env_overrides_config(self, tmpproj, monkeypatch):
        monkeypatch.setenv(CACHE_ENV, "off")
        env = make_env(tmpproj, suffixes=[".skin"])
        assert env.get_skin("layout") is not env.get_skin("layout")


class TestConcurrentRendering:

    def test_shared_skin_renders_consistently(self, skins_root):
        write_skins(skins_root, {
            "page.skin": "<% for x in <% xs %> render item %>",
            "item.skin": "<% x %>;",
        })
        loader = make_loader(skins_root, suffixes=[".skin"])
        skin = loader.load("page")
        barrier = threading.Barrier(8)

        def work(n):
            barrier.wait()
            return skin.render({"xs": list(range(n))})

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(work, range(8)))

        assert results == ["".join(f"{i};" for i in range(n)) for n in range(8)]
        assert len(skin._external) == 1


class TestCounters:

    def test_counters_are_exact_under_threads(self):
        cache = SkinCache(enabled=True)
        cache.put("hit", object())
        barrier = threading.Barrier(8)

        def work(_):
            barrier.wait()
            for _ in range(500):
                cache.get("hit")
                cache.get("miss")

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(work, range(8)))

        snap = cache.snapshot()
        assert snap.hits == 8 * 500
        assert snap.misses == 8 * 500
