"""
Тесты стандартных фильтров: прямые вызовы и использование в скинах.
"""

from datetime import date, datetime

import pytest

from skin import filters as f
from skin.template import MacroTag
from tests.infrastructure.rendering_utils import render_text


def _tag(*params, **named):
    return MacroTag("f", tuple(params), {k.lower(): v for k, v in named.items()})


def _render(text, **ctx):
    return render_text(text, ctx, standard=True)


class TestCase:

    def test_lowercase_uppercase(self):
        assert f.lowercase_filter("AbC") == "abc"
        assert f.uppercase_filter("AbC") == "ABC"

    def test_capitalize(self):
        assert f.capitalize_filter("hELLO wORLD") == "Hello world"
        assert f.capitalize_filter("") == ""

    def test_titleize(self):
        assert f.titleize_filter("hello big world") == "Hello Big World"

    def test_trim(self):
        assert f.trim_filter("  x \n") == "x"


class TestEscaping:

    def test_escape_html(self):
        assert f.escapeHtml_filter("<a href=\"x\">'&`") == "&lt;a href=&quot;x&quot;&gt;&#39;&amp;&#96;"

    def test_escape_xml(self):
        assert f.escapeXml_filter("<a & \"b\" 'c'>") == "&lt;a &amp; &quot;b&quot; &apos;c&apos;&gt;"

    def test_escape_url(self):
        assert f.escapeUrl_filter("a b&c") == "a+b%26c"
        assert f.escapeUrl_filter("é", _tag("latin-1")) == "%E9"

    def test_escape_javascript(self):
        assert f.escapeJavaScript_filter('say "hi"\n') == 'say \\"hi\\"\\n'
        assert f.escapeJavaScript_filter("a\\b") == "a\\\\b"

    def test_strip_tags(self):
        assert f.stripTags_filter("<b>bold</b> text<br/>") == "bold text"

    def test_linebreak_to_html(self):
        assert f.linebreakToHtml_filter("a\nb") == "a<br />b"


class TestStringOps:

    def test_truncate(self):
        assert f.truncate_filter("Hello world", _tag(5)) == "Hello..."
        assert f.truncate_filter("Hello world", _tag(5, suffix="!")) == "Hello!"
        assert f.truncate_filter("Hi", _tag(5)) == "Hi"

    def test_replace_is_regex(self):
        assert f.replace_filter("foo", _tag("o", "0")) == "f00"
        assert f.replace_filter("a1b22", _tag(old="\\d+", new="#")) == "a#b#"
        assert f.replace_filter("abc", _tag()) == "abc"

    def test_substring(self):
        assert f.substring_filter("abcdef", _tag(1, 3)) == "bc"
        assert f.substring_filter("abcdef", _tag(2)) == "cdef"
        assert f.substring_filter("abcdef", _tag(to=2)) == "ab"


class TestDateFormat:

    def test_datetime(self):
        assert f.dateFormat_filter(datetime(2024, 1, 2, 3, 4), _tag("%d.%m.%Y %H:%M")) == "02.01.2024 03:04"

    def test_date(self):
        assert f.dateFormat_filter(date(2024, 1, 2), _tag()) == "2024-01-02"

    def test_milliseconds(self):
        expected = datetime.fromtimestamp(86400).strftime("%Y-%m-%d")
        assert f.dateFormat_filter(86400000, _tag()) == expected

    @pytest.mark.parametrize("value", ["", None, "2024-01-01", True])
    def test_unsupported_values(self, value):
        assert f.dateFormat_filter(value, _tag()) is None


class TestDecorators:

    def test_default(self):
        assert _render("<% x | default none %>") == "none"
        assert _render("<% x | default none %>", x="a") == "a"

    def test_prefix_suffix(self):
        assert _render("<% x | prefix '#' %>", x="1") == "#1"
        assert _render("[<% x | prefix '#' %>]") == "[]"
        assert _render("<% x | suffix '%' %>", x="5") == "5%"

    def test_wrap(self):
        assert _render('<% x | wrap "(" ")" %>', x="1") == "(1)"
        assert _render('[<% x | wrap "(" ")" %>]') == "[]"


class TestInSkins:

    def test_chain(self):
        assert _render("<% x | trim | uppercase | prefix '> ' %>", x="  hi ") == "> HI"

    def test_escape_in_loop(self):
        assert _render("<% for x in <% xs %> x | escapeHtml %>", xs=["<", ">"]) == "&lt;&gt;"

    def test_named_parameters(self):
        assert _render("<% x | truncate limit=3 suffix='' %>", x="abcdef") == "abc"

    def test_date_format_in_skin(self):
        assert _render('<% d | dateFormat "%Y" %>', d=date(1999, 5, 1)) == "1999"
        assert _render('[<% d | dateFormat "%Y" %>]') == "[]"
