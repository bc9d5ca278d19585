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

import io
import unittest
import warnings
from concurrent.futures import ThreadPoolExecutor

from pypdf import PdfReader, PdfWriter

from cv_compiler.errors import WatermarkError
from cv_compiler.watermark import PageGeometry, page_geometry, watermark_pdf, watermark_pdf_async

from cv_samples import MIXED_SIZES, make_pdf


def _page_streams(pdf_bytes):
    return [page.get_contents().get_data() for page in PdfReader(io.BytesIO(pdf_bytes)).pages]


class TestWatermarkPdf(unittest.TestCase):

    def setUp(self):
        self.source = make_pdf(MIXED_SIZES)

    def test_page_count_and_sizes_are_kept(self):
        stamped = watermark_pdf(self.source, "CV PREVIEW")
        before = page_geometry(self.source)
        after = page_geometry(stamped)
        self.assertEqual(len(after), 3)
        for old, new in zip(before, after):
            self.assertTrue(old.same_size(new))
        self.assertGreater(after[2].width, after[2].height)

    def test_every_page_carries_the_text_three_times(self):
        stamped = watermark_pdf(self.source, "CV PREVIEW")
        for index, stream in enumerate(_page_streams(stamped)):
            with self.subTest(page=index + 1):
                self.assertEqual(stream.count(b"(CV PREVIEW)"), 3)

    def test_original_content_is_kept(self):
        stamped = watermark_pdf(self.source, "CV PREVIEW")
        reader = PdfReader(io.BytesIO(stamped))
        for index, page in enumerate(reader.pages):
            with self.subTest(page=index + 1):
                self.assertIn(f"Page {index + 1} body text", page.extract_text())

    def test_merge_raises_no_deprecation_warning(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", DeprecationWarning)
            stamped = watermark_pdf(self.source, "CV PREVIEW")
        messages = [str(w.message) for w in caught
                    if issubclass(w.category, DeprecationWarning) and "reportlab" not in w.filename]
        self.assertEqual(messages, [])
        self.assertEqual(len(page_geometry(stamped)), 3)

    def test_source_bytes_are_untouched(self):
        original = bytes(self.source)
        watermark_pdf(self.source, "CV PREVIEW")
        self.assertEqual(self.source, original)
        self.assertNotIn(b"(CV PREVIEW)", b"".join(_page_streams(self.source)))

    def test_text_is_stripped(self):
        stamped = watermark_pdf(self.source, "  DRAFT  ")
        self.assertIn(b"(DRAFT)", _page_streams(stamped)[0])

    def test_empty_text_raises(self):
        for text in ("", "   ", None):
            with self.subTest(text=text):
                with self.assertRaises(WatermarkError):
                    watermark_pdf(self.source, text)

    def test_empty_document_raises(self):
        with self.assertRaises(WatermarkError):
            watermark_pdf(b"", "CV PREVIEW")

    def test_garbage_raises(self):
        with self.assertRaises(WatermarkError):
            watermark_pdf(b"this is not a pdf document", "CV PREVIEW")

    def test_encrypted_document_raises(self):
        writer = PdfWriter()
        writer.append(PdfReader(io.BytesIO(self.source)))
        writer.encrypt("secret")
        buffer = io.BytesIO()
        writer.write(buffer)
        with self.assertRaises(WatermarkError) as ctx:
            watermark_pdf(buffer.getvalue(), "CV PREVIEW")
        self.assertIn("encrypted", str(ctx.exception))

    def test_async_matches_sync(self):
        with ThreadPoolExecutor(max_workers=2) as executor:
            future = watermark_pdf_async(executor, self.source, "CV PREVIEW")
            stamped = future.result(timeout=30)
        self.assertEqual(page_geometry(stamped), page_geometry(watermark_pdf(self.source, "CV PREVIEW")))

    def test_async_surfaces_errors(self):
        with ThreadPoolExecutor(max_workers=1) as executor:
            future = watermark_pdf_async(executor, b"", "CV PREVIEW")
            with self.assertRaises(WatermarkError):
                future.result(timeout=30)


class TestPageGeometry(unittest.TestCase):

    def test_same_size_tolerates_rounding(self):
        self.assertTrue(PageGeometry(595.276, 841.89).same_size(PageGeometry(595.28, 841.89)))
        self.assertFalse(PageGeometry(595.0, 842.0).same_size(PageGeometry(612.0, 792.0)))

    def test_reads_each_page(self):
        sizes = [(round(g.width), round(g.height)) for g in page_geometry(make_pdf(MIXED_SIZES))]
        self.assertEqual(sizes, [(595, 842), (612, 792), (842, 595)])


if __name__ == '__main__':
    unittest.main()
