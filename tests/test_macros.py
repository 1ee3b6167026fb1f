"""
Тесты стандартных макросов ifOdd / ifEven / join.
"""

from tests.infrastructure.rendering_utils import render_text


def _render(text, **ctx):
    return render_text(text, ctx, standard=True)


class TestParity:

    def test_if_even_in_loop(self):
        text = '<% for x in <% xs %> echo <% x %> <% ifEven "*" %> separator="" %>'
        assert _render(text, xs=["a", "b", "c"]) == "a*bc*"

    def test_if_odd_in_loop(self):
        text = "<% for x in <% xs %> ifOdd odd %>"
        assert _render(text, xs=[1, 2, 3, 4]) == "oddodd"

    def test_outside_loop_renders_nothing(self):
        assert _render("[<% ifOdd x %><% ifEven y %>]") == "[]"

    def test_index_from_caller_context(self):
        assert _render("<% ifEven even %>", index=2) == "even"


class TestJoin:

    def test_join_list(self):
        assert _render('<% join <% xs %> separator=", " %>', xs=["a", "b"]) == "a, b"

    def test_join_without_separator(self):
        assert _render("<% join <% xs %> %>", xs=[1, 2]) == "12"

    def test_join_scalar_and_missing(self):
        assert _render("<% join <% s %> %>", s="abc") == "abc"
        assert _render("[<% join <% s %> %>]") == "[]"
