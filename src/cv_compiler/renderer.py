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
Mode renderer.

Serialises the document tree into one self-contained HTML document. The
body markup and the shared stylesheet are produced once, independent of the
mode; each mode may only append its own style block, scripts or overlay.
"""

import logging
from typing import Dict, List, Optional, Sequence
from urllib.parse import quote

from markupsafe import Markup, escape

from cv_compiler.assembler import LABEL_LIMIT, Node, SectionTree
from cv_compiler.decorations import decorations_html
from cv_compiler.errors import RenderError
from cv_compiler.models import ProtectionSettings, RenderMode
from cv_compiler.settings import DEFAULT_CHANNEL_ID
from cv_compiler.stylesheet import build_stylesheet, edit_mode_css, font_urls, protection_css
from cv_compiler.templating import render_template
from cv_compiler.tokens import StyleTokens

logger = logging.getLogger(__name__)

VOID_TAGS = frozenset({"img", "br", "hr"})

TILE_WIDTH = 320
TILE_HEIGHT = 220


def _attributes(node: Node) -> str:
    pairs = []
    if node.classes:
        pairs.append(("class", " ".join(node.classes)))
    if node.element_id:
        pairs.append(("data-element-id", node.element_id))
        if node.element_type is not None:
            pairs.append(("data-element-type", node.element_type.value))
        if node.label:
            pairs.append(("data-element-label", node.label))
    for name in sorted(node.attrs):
        pairs.append((name, node.attrs[name]))
    if node.style:
        pairs.append(("style", "; ".join(f"{k}: {v}" for k, v in sorted(node.style.items())) + ";"))
    return "".join(f' {name}="{escape(value)}"' for name, value in pairs)


def render_node(node: Node) -> Markup:
    """
    Serialises a node and its children. Attribute order is fixed so the
    output is byte-stable: class, data-element-*, other attributes sorted
    by name, then style.
    """
    open_tag = f"<{node.tag}{_attributes(node)}>"
    if node.tag in VOID_TAGS:
        return Markup(open_tag)
    parts = [open_tag]
    if node.text:
        parts.append(str(escape(node.text)))
    parts.extend(str(render_node(child)) for child in node.children)
    parts.append(f"</{node.tag}>")
    return Markup("".join(parts))


def watermark_tile(text: str) -> str:
    """
    A data URI holding an SVG tile with the watermark text rotated 45 degrees,
    for use as a repeating CSS background.
    """
    cx, cy = TILE_WIDTH // 2, TILE_HEIGHT // 2
    svg = (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{TILE_WIDTH}" height="{TILE_HEIGHT}">'
        f'<text x="{cx}" y="{cy}" transform="rotate(-45 {cx} {cy})" text-anchor="middle" '
        f'dominant-baseline="middle" font-family="Helvetica, Arial, sans-serif" font-size="28" '
        f'font-weight="700" fill="#000000" fill-opacity="0.08">{escape(text)}</text></svg>'
    )
    return "data:image/svg+xml;charset=utf-8," + quote(svg, safe="")


def _scripts(mode: RenderMode, protection: Optional[ProtectionSettings], channel_id: str) -> List[Dict[str, str]]:
    scripts = []
    if mode is RenderMode.INTERACTIVE:
        body = render_template("edit_mode.js", {"channel": channel_id, "label_limit": LABEL_LIMIT})
        scripts.append({"id": "cv-edit-script", "role": "", "body": Markup(body)})
    elif mode is RenderMode.PREVIEW_PROTECTED and protection.block_copy:
        body = render_template("protection.js", {})
        scripts.append({"id": "cv-protection-script", "role": "guard", "body": Markup(body)})
    return scripts


def render_document(header: Node, sections: Sequence[SectionTree], tokens: StyleTokens,
                    mode: RenderMode, protection: Optional[ProtectionSettings] = None,
                    channel_id: str = DEFAULT_CHANNEL_ID, title: str = "CV") -> str:
    """
    Renders the full HTML document for one mode.

    Args:
        header: the header tree, with ids and overrides already applied.
        sections: the surviving section trees in display order.
        tokens: resolved style tokens.
        mode: interactive, export or preview-protected.
        protection: required for preview-protected.
        channel_id: scopes the interactive edit script to this document.
        title: document title.

    Returns:
        str: the complete HTML document.
    """
    mode = RenderMode(mode)
    if mode is RenderMode.PREVIEW_PROTECTED:
        if protection is None:
            raise RenderError("preview-protected mode requires protection settings")
        if not protection.watermark_text.strip():
            raise RenderError("preview-protected mode requires a non-empty watermark text")

    main = [render_node(s.root) for s in sections if s.column == "main"]
    sidebar = [render_node(s.root) for s in sections if s.column == "sidebar"]

    context = {
        "title": title,
        "font_urls": font_urls(tokens),
        "stylesheet": Markup(build_stylesheet(tokens)),
        "edit_css": Markup(edit_mode_css()) if mode is RenderMode.INTERACTIVE else "",
        "protection_css": "",
        "decorations": Markup(decorations_html(tokens.palette, tokens.decorations, tokens.decoration_theme)),
        "header": render_node(header),
        "layout": tokens.layout.structure.value,
        "main": main,
        "sidebar": sidebar,
        "watermark_tile": "",
        "scripts": _scripts(mode, protection, channel_id),
    }
    if mode is RenderMode.PREVIEW_PROTECTED:
        context["protection_css"] = Markup(protection_css(protection.block_copy))
        context["watermark_tile"] = watermark_tile(protection.watermark_text.strip())

    html = render_template("document.html", context)
    logger.debug(f"Rendered {mode.value} document: {len(sections)} sections, {len(html)} chars")
    return html
