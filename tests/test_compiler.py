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
from unittest.mock import patch
from urllib.parse import unquote

from bs4 import BeautifulSoup

from cv_compiler.compiler import compile_document
from cv_compiler.errors import ConfigurationError, RenderError
from cv_compiler.inspection import element_ids, layout_signature, same_layout, strip_mode_layers, visible_text
from cv_compiler.models import CVContent, ElementOverride, ElementType, OverrideSet, ProtectionSettings, RenderMode
from cv_compiler.settings import DEFAULT_WATERMARK_TEXT

from cv_samples import STYLE, sample_content, sample_tokens


def _element(html, element_id):
    return BeautifulSoup(html, "html.parser").find(attrs={"data-element-id": element_id})


class TestCompileDocument(unittest.TestCase):

    def test_identical_inputs_give_identical_output(self):
        for mode in (RenderMode.EXPORT, RenderMode.INTERACTIVE):
            with self.subTest(mode=mode):
                first = compile_document(sample_content(), sample_tokens(decorations="abundant"), mode=mode)
                second = compile_document(sample_content(), sample_tokens(decorations="abundant"), mode=mode)
                self.assertEqual(first, second)

    def test_blank_name_raises(self):
        with self.assertRaises(RenderError):
            compile_document(CVContent(full_name="  "), sample_tokens())

    def test_accepts_descriptor_mapping(self):
        html = compile_document(sample_content(), dict(STYLE))
        self.assertEqual(html, compile_document(sample_content(), sample_tokens()))

    def test_bad_descriptor_raises_configuration_error(self):
        with self.assertRaises(ConfigurationError):
            compile_document(sample_content(), {"themeBase": "vaporwave"})

    def test_title_carries_name(self):
        soup = BeautifulSoup(compile_document(sample_content(), sample_tokens()), "html.parser")
        self.assertEqual(soup.title.string, "CV - Jane Doe")

    def test_inputs_are_not_mutated(self):
        content = sample_content()
        overrides = OverrideSet.from_list([ElementOverride("summary", ElementType.SUMMARY, hidden=True)])
        before = (repr(content), overrides.to_dict())
        compile_document(content, sample_tokens(), overrides)
        self.assertEqual((repr(content), overrides.to_dict()), before)

    def test_stale_override_changes_nothing(self):
        overrides = OverrideSet.from_list([ElementOverride("languages-7", ElementType.LANGUAGE_ITEM, hidden=True)])
        self.assertEqual(
            compile_document(sample_content(), sample_tokens(), overrides),
            compile_document(sample_content(), sample_tokens()),
        )

    def test_protected_defaults_to_built_in_watermark(self):
        html = compile_document(sample_content(), sample_tokens(), mode=RenderMode.PREVIEW_PROTECTED)
        overlay = BeautifulSoup(html, "html.parser").select_one(".cv-watermark")
        self.assertIn(DEFAULT_WATERMARK_TEXT, unquote(overlay["style"]))

    def test_environment_does_not_change_output(self):
        outputs = []
        for text in ("AAA", "BBB"):
            with patch.dict("os.environ", {"CV_WATERMARK_TEXT": text}):
                outputs.append(compile_document(sample_content(), sample_tokens(),
                                                mode=RenderMode.PREVIEW_PROTECTED))
        self.assertEqual(outputs[0], outputs[1])
        self.assertNotIn("AAA", unquote(outputs[0]))

    def test_empty_languages_leave_no_heading(self):
        html = compile_document(sample_content(languages=[]), sample_tokens())
        soup = BeautifulSoup(html, "html.parser")
        self.assertIsNone(soup.select_one(".section-languages"))
        titles = [tag.get_text(strip=True) for tag in soup.select(".section-title")]
        self.assertNotIn("Languages", titles)
        self.assertNotIn("Languages", visible_text(html))

    def test_ids_match_catalogue(self):
        html = compile_document(sample_content(), sample_tokens())
        ids = element_ids(html)
        self.assertEqual(ids[0], "header")
        self.assertEqual(len(ids), len(set(ids)))


class TestOverrideAcrossModes(unittest.TestCase):
    """A colour override and a hidden highlight behave the same in every mode."""

    def setUp(self):
        self.overrides = OverrideSet.from_list([
            ElementOverride("experience-0-title", ElementType.FIELD, color_override="#c0392b"),
            ElementOverride("experience-0-1", ElementType.HIGHLIGHT, hidden=True),
        ])
        self.documents = {
            RenderMode.INTERACTIVE: compile_document(
                sample_content(), sample_tokens(), self.overrides, RenderMode.INTERACTIVE),
            RenderMode.EXPORT: compile_document(
                sample_content(), sample_tokens(), self.overrides, RenderMode.EXPORT),
            RenderMode.PREVIEW_PROTECTED: compile_document(
                sample_content(), sample_tokens(), self.overrides, RenderMode.PREVIEW_PROTECTED,
                ProtectionSettings("PREVIEW")),
        }

    def test_colour_applies_in_every_mode(self):
        for mode, html in self.documents.items():
            with self.subTest(mode=mode):
                title = _element(html, "experience-0-title")
                self.assertEqual(title["style"], "color: #c0392b !important;")
                self.assertNotIn("style", _element(html, "experience-1-title").attrs)

    def test_hidden_highlight_is_absent_in_every_mode(self):
        for mode, html in self.documents.items():
            with self.subTest(mode=mode):
                self.assertIsNone(_element(html, "experience-0-1"))
                self.assertNotIn("Cut p99 latency", visible_text(html))
                self.assertIn("Led platform migration", visible_text(html))

    def test_layout_is_shared_across_modes(self):
        export = self.documents[RenderMode.EXPORT]
        for mode, html in self.documents.items():
            with self.subTest(mode=mode):
                self.assertTrue(same_layout(export, html))

    def test_text_matches_export(self):
        export = visible_text(self.documents[RenderMode.EXPORT])
        for mode, html in self.documents.items():
            with self.subTest(mode=mode):
                self.assertEqual(visible_text(html), export)


class TestProtectedPreview(unittest.TestCase):
    """The protected preview is the export layout plus an overlay and a copy guard."""

    def setUp(self):
        tokens = sample_tokens(layout="sidebar-right", decorations="minimal")
        self.export = compile_document(sample_content(), tokens, mode=RenderMode.EXPORT)
        self.protected = compile_document(sample_content(), tokens, mode=RenderMode.PREVIEW_PROTECTED,
                                          protection=ProtectionSettings("CONFIDENTIAL"))

    def test_stripped_markup_equals_export(self):
        self.assertEqual(layout_signature(self.protected), layout_signature(self.export))

    def test_overlay_and_guard_are_the_only_additions(self):
        soup = BeautifulSoup(self.protected, "html.parser")
        additions = soup.select("[data-protection]")
        self.assertEqual(sorted(tag["data-protection"] for tag in additions), ["guard", "watermark"])
        self.assertIsNotNone(soup.find(id="cv-protection-styles"))

    def test_export_strips_to_itself(self):
        self.assertEqual(str(strip_mode_layers(self.export)), str(BeautifulSoup(self.export, "html.parser")))

    def test_theme_change_changes_layout(self):
        other = compile_document(sample_content(), sample_tokens(themeBase="bold"), mode=RenderMode.EXPORT)
        self.assertFalse(same_layout(self.export, other))


if __name__ == '__main__':
    unittest.main()
