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

from cv_compiler.decorations import COUNTS, SHAPES, SIZES, THEME_SHAPES, decorations_html, generate_decorations
from cv_compiler.tokens import DecorationIntensity, DecorationTheme

from cv_samples import sample_tokens


class TestDecorations(unittest.TestCase):

    def setUp(self):
        self.palette = sample_tokens().palette

    def test_none_is_empty(self):
        self.assertEqual(generate_decorations(self.palette, DecorationIntensity.NONE), [])
        self.assertEqual(decorations_html(self.palette, DecorationIntensity.NONE), "")

    def test_counts_and_sizes_follow_intensity(self):
        for intensity in (DecorationIntensity.MINIMAL, DecorationIntensity.MODERATE, DecorationIntensity.ABUNDANT):
            with self.subTest(intensity=intensity):
                shapes = generate_decorations(self.palette, intensity)
                low, high = COUNTS[intensity]
                self.assertTrue(low <= len(shapes) <= high)
                size_low, size_high = SIZES[intensity]
                for shape in shapes:
                    self.assertTrue(size_low <= shape.size <= size_high)
                    self.assertTrue(0 <= shape.x <= 100 and 0 <= shape.y <= 100)
                    self.assertIn(shape.shape, SHAPES)
                    self.assertIn(shape.color, (self.palette.primary, self.palette.accent))

    def test_same_palette_same_shapes(self):
        first = generate_decorations(self.palette, DecorationIntensity.ABUNDANT)
        second = generate_decorations(self.palette, DecorationIntensity.ABUNDANT)
        self.assertEqual(first, second)

    def test_palette_changes_placement(self):
        other = sample_tokens(themeBase="creative").palette
        self.assertNotEqual(generate_decorations(self.palette, DecorationIntensity.MODERATE),
                            generate_decorations(other, DecorationIntensity.MODERATE))

    def test_theme_restricts_shapes(self):
        for theme in DecorationTheme:
            with self.subTest(theme=theme):
                shapes = generate_decorations(self.palette, DecorationIntensity.ABUNDANT, theme)
                self.assertTrue(shapes)
                self.assertTrue({s.shape for s in shapes} <= set(THEME_SHAPES[theme]))

    def test_abstract_is_the_default(self):
        self.assertEqual(generate_decorations(self.palette, DecorationIntensity.MODERATE),
                         generate_decorations(self.palette, DecorationIntensity.MODERATE, DecorationTheme.ABSTRACT))
        self.assertEqual(set(THEME_SHAPES[DecorationTheme.ABSTRACT]), set(SHAPES))

    def test_theme_keeps_shape_count(self):
        tech = generate_decorations(self.palette, DecorationIntensity.MINIMAL, DecorationTheme.TECH)
        organic = generate_decorations(self.palette, DecorationIntensity.MINIMAL, DecorationTheme.ORGANIC)
        self.assertEqual(len(tech), len(organic))
        self.assertTrue(all(shape in SHAPES for shape in THEME_SHAPES[DecorationTheme.TECH]))

    def test_html_is_hidden_from_assistive_tech(self):
        html = decorations_html(self.palette, DecorationIntensity.MINIMAL)
        self.assertTrue(html.startswith('<div class="cv-decorations" aria-hidden="true">'))
        self.assertIn('class="cv-decoration"', html)


if __name__ == '__main__':
    unittest.main()
