"""Tests for the template engine and page rendering."""

from __future__ import annotations

from pathlib import Path

import pytest

from spritepress.errors import MissingKeyError, NotFoundError, TemplateSyntaxError
from spritepress.templating import PageRenderer, PageSpec, TemplateEngine, load_document, render
from spritepress.types import TemplateDocument


class TestTemplateEngine:
    """Tests for placeholder substitution."""

    def test_no_cross_matching(self):
        """Test {{a}} and {{ab}} resolve independently."""
        assert render("{{a}}-{{ab}}", {"a": "X", "ab": "Y"}) == "X-Y"

    def test_missing_key_raises(self):
        """Test an unknown placeholder fails and names the key."""
        with pytest.raises(MissingKeyError) as exc_info:
            render("{{missing}}", {})
        assert exc_info.value.key == "missing"
        assert "missing" in str(exc_info.value)

    def test_missing_key_after_good_ones(self):
        """Test no partial output is returned when a later key is missing."""
        engine = TemplateEngine()
        with pytest.raises(MissingKeyError) as exc_info:
            engine.render("<h1>{{title}}</h1>{{body}}", {"title": "Hi"})
        assert exc_info.value.key == "body"

    def test_none_value_is_missing(self):
        """Test a None value is treated as missing."""
        with pytest.raises(MissingKeyError):
            render("{{title}}", {"title": None})

    def test_empty_string_value_allowed(self):
        """Test an explicit empty string is substituted."""
        assert render("[{{x}}]", {"x": ""}) == "[]"

    def test_values_not_rescanned(self):
        """Test substituted text is never expanded again."""
        assert render("{{a}}", {"a": "{{b}}", "b": "boom"}) == "{{b}}"

    def test_values_verbatim(self):
        """Test values are inserted without escaping."""
        assert render("{{html}}", {"html": "<b>&amp;</b>"}) == "<b>&amp;</b>"

    def test_text_without_tokens(self):
        """Test plain text passes through unchanged."""
        assert render("no tokens } { here", {}) == "no tokens } { here"

    def test_whitespace_trimmed(self):
        """Test spaces inside the braces are ignored."""
        assert render("{{ name }}!", {"name": "Ada"}) == "Ada!"

    def test_repeated_placeholder(self):
        """Test the same key can appear many times."""
        assert render("{{x}}{{x}}{{x}}", {"x": "o"}) == "ooo"

    def test_shortest_span(self):
        """Test a token ends at the first closing braces."""
        assert render("{{a}}}}", {"a": "1"}) == "1}}"

    def test_unterminated_token(self):
        """Test an unclosed placeholder is a syntax error."""
        with pytest.raises(TemplateSyntaxError):
            render("hello {{name", {"name": "x"})

    def test_empty_token(self):
        """Test an empty placeholder is a syntax error."""
        with pytest.raises(TemplateSyntaxError):
            render("{{ }}", {})

    def test_error_names_source(self):
        """Test errors mention the template file."""
        doc = TemplateDocument(text="{{nope}}", source=Path("index.tmpl"))
        with pytest.raises(MissingKeyError) as exc_info:
            TemplateEngine().render(doc, {})
        assert "index.tmpl" in str(exc_info.value)

    def test_placeholders_in_order(self):
        """Test placeholders are listed once in order of appearance."""
        engine = TemplateEngine()
        assert engine.placeholders("{{b}} {{a}} {{b}} {{ c }}") == ["b", "a", "c"]


class TestPages:
    """Tests for loading and rendering page templates."""

    def test_load_document(self, tmp_path):
        """Test documents keep their source path."""
        path = tmp_path / "index.tmpl"
        path.write_text("<p>{{x}}</p>", encoding="utf-8")
        doc = load_document(path)
        assert doc.text == "<p>{{x}}</p>"
        assert doc.source == path

    def test_load_missing_document(self, tmp_path):
        """Test a missing template raises NotFoundError."""
        with pytest.raises(NotFoundError) as exc_info:
            load_document(tmp_path / "nope.tmpl")
        assert exc_info.value.stage == "render"

    def test_render_page_reads_fresh(self, tmp_path):
        """Test the template is re-read on each render."""
        path = tmp_path / "index.tmpl"
        path.write_text("v1 {{x}}")
        page = PageSpec(template=path, output=Path("index.html"), context={"x": "a"})
        renderer = PageRenderer()
        assert renderer.render_page(page, {}) == "v1 a"
        path.write_text("v2 {{x}}")
        assert renderer.render_page(page, {}) == "v2 a"

    def test_page_context_overrides_build_context(self, tmp_path):
        """Test page values win over shared build values."""
        path = tmp_path / "index.tmpl"
        path.write_text("{{title}} {{sprite_count}}")
        page = PageSpec(template=path, output=Path("index.html"), context={"title": "Mine"})
        html = PageRenderer().render_page(page, {"title": "Default", "sprite_count": "5"})
        assert html == "Mine 5"

    def test_page_spec_from_dict(self, tmp_path):
        """Test config data is turned into a PageSpec."""
        page = PageSpec.from_dict({"template": "pages/play.tmpl", "context": {"level": 3}}, base_dir=tmp_path)
        assert page.template == tmp_path / "pages" / "play.tmpl"
        assert page.output == Path("play.html")
        assert page.context == {"level": "3"}
