# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import unittest
from urllib.parse import unquote

from bs4 import BeautifulSoup

from cv_compiler.assembler import Node, assemble_header, assemble_sections
from cv_compiler.errors import RenderError
from cv_compiler.identity import assign_ids
from cv_compiler.models import ElementType, ProtectionSettings, RenderMode
from cv_compiler.renderer import render_document, render_node, watermark_tile
from cv_compiler.stylesheet import build_stylesheet, font_urls

from cv_samples import sample_content, sample_tokens


def _render(mode, tokens=None, protection=None, **kwargs):
    content = sample_content()
    tokens = tokens or sample_tokens()
    header = assemble_header(content, tokens)
    sections = assemble_sections(content, tokens)
    assign_ids(header, sections)
    return render_document(header, sections, tokens, mode, protection=protection, **kwargs)


class TestRenderNode(unittest.TestCase):

    def test_attribute_order_is_fixed(self):
        node = Node(tag="p", classes=("a", "b"), text="hi", attrs={"title": "t", "alt": "x"},
                    element_type=ElementType.FIELD, label="Hi", style={"color": "#fff", "background-color": "#000"})
        node.element_id = "summary"
        self.assertEqual(
            str(render_node(node)),
            '<p class="a b" data-element-id="summary" data-element-type="field" data-element-label="Hi" '
            'alt="x" title="t" style="background-color: #000; color: #fff;">hi</p>',
        )

    def test_text_and_attributes_are_escaped(self):
        node = Node(tag="span", text="<b>R&D</b>", attrs={"title": '"quoted"'})
        html = str(render_node(node))
        self.assertIn("&lt;b&gt;R&amp;D&lt;/b&gt;", html)
        self.assertIn("&#34;quoted&#34;", html)

    def test_void_tags_have_no_close(self):
        node = Node(tag="img", classes=("avatar",), attrs={"src": "me.png"})
        self.assertEqual(str(render_node(node)), '<img class="avatar" src="me.png">')

    def test_unaddressed_nodes_carry_no_data_attributes(self):
        node = Node(tag="div", classes=("wrapper",), label="ignored")
        self.assertEqual(str(render_node(node)), '<div class="wrapper"></div>')


class TestRenderDocument(unittest.TestCase):

    def test_export_has_no_mode_layers(self):
        soup = BeautifulSoup(_render(RenderMode.EXPORT), "html.parser")
        self.assertEqual(soup.find_all("script"), [])
        self.assertIsNone(soup.find(id="cv-edit-styles"))
        self.assertIsNone(soup.select_one(".cv-watermark"))
        self.assertIsNotNone(soup.find(id="cv-styles"))

    def test_interactive_adds_edit_script_and_styles(self):
        html = _render(RenderMode.INTERACTIVE, channel_id="doc-42")
        soup = BeautifulSoup(html, "html.parser")
        script = soup.find(id="cv-edit-script")
        self.assertIsNotNone(script)
        self.assertIn('"doc-42"', script.string)
        self.assertIn("elementSelected", script.string)
        self.assertIn("data.channel !== undefined", script.string)
        self.assertIsNotNone(soup.find(id="cv-edit-styles"))

    def test_protected_adds_overlay_and_guard(self):
        html = _render(RenderMode.PREVIEW_PROTECTED, protection=ProtectionSettings("DRAFT COPY"))
        soup = BeautifulSoup(html, "html.parser")
        overlay = soup.select_one(".cv-watermark")
        self.assertEqual(overlay["data-protection"], "watermark")
        self.assertIn("DRAFT COPY", unquote(overlay["style"]))
        self.assertEqual(soup.find(id="cv-protection-script")["data-protection"], "guard")
        self.assertIn("user-select: none", soup.find(id="cv-protection-styles").string)

    def test_protected_without_copy_block_has_no_guard(self):
        html = _render(RenderMode.PREVIEW_PROTECTED, protection=ProtectionSettings("DRAFT", block_copy=False))
        soup = BeautifulSoup(html, "html.parser")
        self.assertIsNone(soup.find(id="cv-protection-script"))
        self.assertIsNotNone(soup.select_one(".cv-watermark"))
        self.assertNotIn("user-select", soup.find(id="cv-protection-styles").string)

    def test_protected_requires_settings(self):
        with self.assertRaises(RenderError):
            _render(RenderMode.PREVIEW_PROTECTED)
        with self.assertRaises(RenderError):
            _render(RenderMode.PREVIEW_PROTECTED, protection=ProtectionSettings("   "))

    def test_sidebar_sections_render_in_sidebar_column(self):
        soup = BeautifulSoup(_render(RenderMode.EXPORT, tokens=sample_tokens(layout="sidebar-left")), "html.parser")
        sidebar = soup.select_one(".cv-sidebar")
        self.assertIsNotNone(sidebar.select_one(".section-skills"))
        self.assertIsNone(sidebar.select_one(".section-experience"))
        self.assertIn("layout-sidebar-left", soup.select_one(".cv-body")["class"])

    def test_single_column_has_no_sidebar(self):
        soup = BeautifulSoup(_render(RenderMode.EXPORT), "html.parser")
        self.assertIsNone(soup.select_one(".cv-sidebar"))

    def test_decorations_follow_tokens(self):
        plain = BeautifulSoup(_render(RenderMode.EXPORT), "html.parser")
        self.assertIsNone(plain.select_one(".cv-decorations"))
        decorated = BeautifulSoup(_render(RenderMode.EXPORT, tokens=sample_tokens(decorations="moderate")),
                                  "html.parser")
        self.assertGreaterEqual(len(decorated.select(".cv-decoration")), 8)

    def test_icons_render_inside_contact_items(self):
        plain = BeautifulSoup(_render(RenderMode.EXPORT), "html.parser")
        iconic = BeautifulSoup(_render(RenderMode.EXPORT, tokens=sample_tokens(useIcons=True)), "html.parser")
        email = iconic.find(attrs={"data-element-id": "header-email"})
        svg = email.find("svg")
        self.assertIn("contact-icon", svg["class"])
        self.assertIsNone(svg.get("data-element-id"))
        self.assertEqual(email.get_text(strip=True), "jane@example.com")
        ids = [tag["data-element-id"] for tag in plain.select("[data-element-id]")]
        self.assertEqual(ids, [tag["data-element-id"] for tag in iconic.select("[data-element-id]")])

    def test_decoration_theme_limits_shapes(self):
        soup = BeautifulSoup(_render(RenderMode.EXPORT, tokens=sample_tokens(
            decorations="abundant", decorationTheme="minimal")), "html.parser")
        shapes = {child.name for svg in soup.select(".cv-decoration") for child in svg.find_all(True)}
        self.assertTrue(shapes)
        self.assertTrue(shapes <= {"path", "circle", "rect"})

    def test_font_links(self):
        soup = BeautifulSoup(_render(RenderMode.EXPORT), "html.parser")
        hrefs = [link["href"] for link in soup.find_all("link")]
        self.assertEqual(hrefs, font_urls(sample_tokens()))


class TestStylesheet(unittest.TestCase):

    def test_palette_reaches_css_variables(self):
        css = build_stylesheet(sample_tokens())
        self.assertIn("#1a365d", css)

    def test_custom_css_is_scoped(self):
        css = build_stylesheet(sample_tokens(customCSS={"name": "letter-spacing: 3px"}))
        self.assertIn("letter-spacing: 3px", css)

    def test_contact_layout_rules(self):
        self.assertNotIn(".contact.contact-", build_stylesheet(sample_tokens()))
        for layout in ("double-row", "single-column", "double-column"):
            with self.subTest(layout=layout):
                css = build_stylesheet(sample_tokens(contactLayout=layout))
                self.assertIn(f".contact.contact-{layout}", css)

    def test_header_gradient_rules(self):
        self.assertNotIn("gradient(", build_stylesheet(sample_tokens(headerVariant="banner")))
        subtle = build_stylesheet(sample_tokens(headerVariant="banner", headerGradient="subtle"))
        self.assertIn("linear-gradient(135deg", subtle)
        radial = build_stylesheet(sample_tokens(themeBase="bold"))
        self.assertIn("radial-gradient(", radial)
        self.assertIn("--color-primary-glow", radial)

    def test_full_bleed_and_icon_rules_follow_flags(self):
        plain = build_stylesheet(sample_tokens())
        self.assertNotIn(".header-full-bleed", plain)
        self.assertNotIn(".contact-icon", plain)
        css = build_stylesheet(sample_tokens(headerFullBleed=True, useIcons=True))
        self.assertIn(".cv-header.header-full-bleed", css)
        self.assertIn(".contact-icon", css)

    def test_stylesheet_is_deterministic(self):
        self.assertEqual(build_stylesheet(sample_tokens(decorations="abundant")),
                         build_stylesheet(sample_tokens(decorations="abundant")))


class TestWatermarkTile(unittest.TestCase):

    def test_tile_is_svg_data_uri(self):
        tile = watermark_tile("CV PREVIEW")
        self.assertTrue(tile.startswith("data:image/svg+xml;charset=utf-8,"))
        svg = unquote(tile.split(",", 1)[1])
        self.assertIn("rotate(-45", svg)
        self.assertIn(">CV PREVIEW</text>", svg)

    def test_tile_escapes_text(self):
        svg = unquote(watermark_tile("<A & B>").split(",", 1)[1])
        self.assertIn("&lt;A &amp; B&gt;", svg)

    def test_tile_is_safe_inside_css_url(self):
        payload = watermark_tile("close) paren").split(",", 1)[1]
        for char in "()\"' ":
            with self.subTest(char=char):
                self.assertNotIn(char, payload)


if __name__ == '__main__':
    unittest.main()
