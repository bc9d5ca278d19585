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

"""
Helpers for inspecting compiled documents.

Used to check that the three render modes share one layout: once the
mode-specific layers (scripts, edit and protection styles, watermark
overlay) are stripped, every mode must serialise to the same markup.
"""

from typing import List

from bs4 import BeautifulSoup

MODE_STYLE_IDS = ("cv-edit-styles", "cv-protection-styles")


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def strip_mode_layers(html: str) -> BeautifulSoup:
    soup = _soup(html)
    for tag in soup(["script"]):
        tag.decompose()
    for style_id in MODE_STYLE_IDS:
        for tag in soup.find_all(id=style_id):
            tag.decompose()
    for tag in soup.select("[data-protection]"):
        tag.decompose()
    return soup


def layout_signature(html: str) -> str:
    """
    Canonical serialisation of the document without its mode layers, with
    whitespace-only text between tags removed.
    """
    soup = strip_mode_layers(html)
    for text in soup.find_all(string=True):
        if not text.strip():
            text.extract()
    return soup.decode(formatter="minimal")


def same_layout(first: str, second: str) -> bool:
    return layout_signature(first) == layout_signature(second)


def element_ids(html: str) -> List[str]:
    """``data-element-id`` values in document order."""
    return [tag["data-element-id"] for tag in _soup(html).find_all(attrs={"data-element-id": True})]


def visible_text(html: str) -> str:
    """
    Rendered text roughly as a PDF text extraction would see it: no scripts,
    styles or overlays, one line per block of text.
    """
    soup = strip_mode_layers(html)
    for tag in soup(["style", "head"]):
        tag.decompose()
    lines = (line.strip() for line in soup.get_text("\n").splitlines())
    return "\n".join(line for line in lines if line)
