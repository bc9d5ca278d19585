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
Builds the shared layout CSS from StyleTokens.

Every render mode embeds exactly this stylesheet. Mode-specific additions
(edit affordances, protection overlay) live in separate style blocks and
only ever add outlines, overlays or user-select rules.
"""

import logging
from typing import Dict, List, Tuple

from cv_compiler.colors import contrast_text, darken, lighten, luminance, tint
from cv_compiler.templating import render_template
from cv_compiler.tokens import (
    ContactLayout,
    CustomCSSZone,
    DecorationIntensity,
    HeaderGradient,
    HeaderVariant,
    LayoutStructure,
    SectionStyle,
    SkillsDisplay,
    StyleTokens,
    ensure_exhaustive,
)

logger = logging.getLogger(__name__)

HEADER_CSS: Dict[HeaderVariant, str] = {
    HeaderVariant.SIMPLE: """
.cv-header {
  display: flex;
  gap: var(--space-item);
  align-items: flex-start;
  padding-bottom: var(--space-item);
  margin-bottom: var(--space-section);
  border-bottom: 1pt solid var(--color-border);
}

.header-identity {
  flex: 1;
}

.contact > span:not(:last-child)::after {
  content: " \\2022 ";
}
""",
    HeaderVariant.ACCENTED: """
.cv-header {
  display: flex;
  gap: var(--space-item);
  align-items: flex-start;
  padding: 0 0 var(--space-item) var(--space-item);
  margin-bottom: var(--space-section);
  border-left: 4pt solid var(--color-accent);
}

.header-identity {
  flex: 1;
}

.headline {
  color: var(--color-accent);
}

.contact > span:not(:last-child)::after {
  content: " | ";
  color: var(--color-border);
}
""",
    HeaderVariant.BANNER: """
.cv-header {
  display: flex;
  gap: var(--space-item);
  align-items: center;
  background: var(--color-primary);
  color: var(--color-header-text);
  padding: 18pt 20pt;
  margin-bottom: var(--space-section);
}

.header-identity {
  flex: 1;
}

.cv-header .name,
.cv-header .headline,
.cv-header .contact {
  color: var(--color-header-text);
}

.cv-header .headline,
.cv-header .contact {
  opacity: 0.9;
}

.contact > span:not(:last-child)::after {
  content: " \\2022 ";
}
""",
    HeaderVariant.SPLIT: """
.cv-header {
  display: flex;
  justify-content: space-between;
  align-items: flex-start;
  gap: var(--space-item);
  padding-bottom: var(--space-item);
  margin-bottom: var(--space-section);
  border-bottom: 2pt solid var(--color-accent);
}

.header-identity {
  flex: 1;
}

.contact {
  text-align: right;
  color: var(--color-text);
}

.contact > span {
  display: block;
  margin-bottom: 2pt;
}
""",
}

SECTION_CSS: Dict[SectionStyle, str] = {
    SectionStyle.CLEAN: "",
    SectionStyle.UNDERLINED: """
.section-title {
  padding-bottom: 3pt;
  border-bottom: 2pt solid var(--color-accent);
}
""",
    SectionStyle.BOXED: """
.cv-section {
  background: var(--color-secondary);
  padding: var(--space-item);
  border-radius: var(--radius);
}
""",
    SectionStyle.TIMELINE: """
.cv-section {
  padding-left: var(--space-item);
  border-left: 2pt solid var(--color-border);
}
""",
    SectionStyle.ACCENT_LEFT: """
.section-title {
  border-left: 4pt solid var(--color-accent);
  padding-left: 8pt;
}
""",
    SectionStyle.CARD: """
.cv-section {
  border: 1pt solid var(--color-border);
  padding: var(--space-item);
  border-radius: var(--radius);
}
""",
}

SKILLS_CSS: Dict[SkillsDisplay, str] = {
    SkillsDisplay.TAGS: """
.skills-list {
  display: flex;
  flex-wrap: wrap;
  gap: 5pt;
}

.skill-tag {
  font-size: var(--size-small);
  padding: 2pt 8pt;
  border-radius: var(--radius);
  background: var(--color-secondary);
  color: var(--color-primary);
}

.skill-tag.soft {
  background: #f0f0f0;
  color: var(--color-muted);
}
""",
    SkillsDisplay.LIST: """
.skills-list {
  display: flex;
  flex-direction: column;
  gap: 2pt;
}

.skill-item::before {
  content: "\\2022";
  color: var(--color-accent);
  margin-right: var(--space-element);
}
""",
    SkillsDisplay.COMPACT: """
.skills-list {
  line-height: 1.8;
}

.skill-inline:not(:last-child)::after {
  content: " \\2022 ";
  color: var(--color-muted);
}
""",
}

LAYOUT_CSS: Dict[LayoutStructure, str] = {
    LayoutStructure.SINGLE_COLUMN: """
.cv-body {
  display: block;
}
""",
    LayoutStructure.SIDEBAR_LEFT: """
.cv-body {
  display: grid;
  grid-template-columns: 32% 1fr;
  grid-template-areas: "sidebar main";
  column-gap: var(--space-section);
}

.cv-sidebar {
  grid-area: sidebar;
}

.cv-main {
  grid-area: main;
}
""",
    LayoutStructure.SIDEBAR_RIGHT: """
.cv-body {
  display: grid;
  grid-template-columns: 1fr 32%;
  grid-template-areas: "main sidebar";
  column-gap: var(--space-section);
}

.cv-sidebar {
  grid-area: sidebar;
}

.cv-main {
  grid-area: main;
}
""",
}

CONTACT_CSS: Dict[ContactLayout, str] = {
    ContactLayout.SINGLE_ROW: "",
    ContactLayout.DOUBLE_ROW: """
.contact.contact-double-row {
  display: grid;
  grid-template-rows: auto auto;
  grid-auto-flow: column;
  justify-content: start;
  column-gap: 12pt;
  row-gap: 2pt;
}
""",
    ContactLayout.SINGLE_COLUMN: """
.contact.contact-single-column > span {
  display: block;
  margin-bottom: 2pt;
}
""",
    ContactLayout.DOUBLE_COLUMN: """
.contact.contact-double-column {
  display: grid;
  grid-template-columns: repeat(2, auto);
  justify-content: start;
  column-gap: 16pt;
  row-gap: 2pt;
}
""",
}

# Only a banner paints a header background, so only a banner is shaded.
GRADIENT_CSS: Dict[HeaderGradient, str] = {
    HeaderGradient.NONE: "",
    HeaderGradient.SUBTLE: """
.cv-header.header-banner {
  background: linear-gradient(135deg, var(--color-primary) 0%, var(--color-primary-deep) 100%);
}
""",
    HeaderGradient.RADIAL: """
.cv-header.header-banner {
  background: radial-gradient(circle at 15% 0%, var(--color-primary-glow) 0%, var(--color-primary) 45%,
    var(--color-primary-deep) 100%);
}
""",
}

CUSTOM_CSS_SELECTORS: Dict[CustomCSSZone, str] = {
    CustomCSSZone.HEADER: ".cv-header",
    CustomCSSZone.ITEM: ".item",
    CustomCSSZone.SECTION: ".cv-section",
    CustomCSSZone.SKILLS: ".skills-container, .skills-list",
    CustomCSSZone.NAME: ".name",
    CustomCSSZone.HEADLINE: ".headline",
    CustomCSSZone.SECTION_TITLE: ".section-title",
    CustomCSSZone.ITEM_TITLE: ".item-title",
    CustomCSSZone.ITEM_SUBTITLE: ".item-subtitle",
    CustomCSSZone.SUMMARY: ".summary",
    CustomCSSZone.HIGHLIGHTS: ".highlights",
    CustomCSSZone.SKILL_TAG: ".skill-tag",
    CustomCSSZone.AVATAR: ".avatar-container",
    CustomCSSZone.DIVIDER: ".section-title::after",
}

ensure_exhaustive(HEADER_CSS, HeaderVariant, "HEADER_CSS")
ensure_exhaustive(SECTION_CSS, SectionStyle, "SECTION_CSS")
ensure_exhaustive(SKILLS_CSS, SkillsDisplay, "SKILLS_CSS")
ensure_exhaustive(LAYOUT_CSS, LayoutStructure, "LAYOUT_CSS")
ensure_exhaustive(CONTACT_CSS, ContactLayout, "CONTACT_CSS")
ensure_exhaustive(GRADIENT_CSS, HeaderGradient, "GRADIENT_CSS")
ensure_exhaustive(CUSTOM_CSS_SELECTORS, CustomCSSZone, "CUSTOM_CSS_SELECTORS")

# Outline and box-shadow only: selection affordances must not move any box.
EDIT_MODE_CSS = """
body.cv-edit-mode [data-element-id] {
  cursor: pointer;
}

body.cv-edit-mode [data-element-id]:hover {
  outline: 2px dashed #3b82f6;
  outline-offset: 2px;
}

body.cv-edit-mode [data-element-id].cv-selected {
  outline: 2px solid #3b82f6;
  outline-offset: 2px;
  box-shadow: 0 0 0 4px rgba(59, 130, 246, 0.2);
}
"""

COPY_GUARD_CSS = """
body {
  -webkit-user-select: none;
  user-select: none;
}
"""

PROTECTION_CSS = """
.cv-watermark {
  position: fixed;
  top: 0;
  left: 0;
  width: 100%;
  height: 100%;
  pointer-events: none;
  z-index: 9999;
  background-repeat: repeat;
}

@media print {
  .cv-watermark {
    -webkit-print-color-adjust: exact !important;
    print-color-adjust: exact !important;
  }
}
"""


def custom_rules(tokens: StyleTokens) -> List[Tuple[str, str]]:
    """(selector, declarations) pairs for the custom CSS zones that are set."""
    return [(CUSTOM_CSS_SELECTORS[zone], css) for zone, css in tokens.custom_css]


def section_title_color(tokens: StyleTokens) -> str:
    # A banner already paints the primary colour; titles step darker so
    # they do not blend into it.
    if tokens.layout.header_variant is HeaderVariant.BANNER:
        return darken(tokens.palette.primary, 25)
    return tokens.palette.primary


def border_color(tokens: StyleTokens) -> str:
    muted = tokens.palette.muted
    return lighten(muted, 35) if luminance(muted) < 0.5 else darken(muted, 15)


def build_stylesheet(tokens: StyleTokens) -> str:
    """
    Renders ``templates/base.css`` for the given tokens.

    The output is identical for identical tokens; nothing here depends on
    the render mode.
    """
    layout = tokens.layout
    css = render_template("base.css", {
        "palette": tokens.palette,
        "typography": tokens.typography,
        "spacing": layout.spacing,
        "radius": "4pt" if layout.rounded_corners else "0",
        "border_color": border_color(tokens),
        "header_text": contrast_text(tokens.palette.primary),
        "section_title_color": section_title_color(tokens),
        "header_variant": layout.header_variant.value,
        "header_css": HEADER_CSS[layout.header_variant].strip(),
        "section_style": layout.section_style.value,
        "section_css": SECTION_CSS[layout.section_style].strip(),
        "skills_display": layout.skills_display.value,
        "skills_css": SKILLS_CSS[layout.skills_display].strip(),
        "layout_structure": layout.structure.value,
        "layout_css": LAYOUT_CSS[layout.structure].strip(),
        "contact_layout": layout.contact_layout.value,
        "contact_css": CONTACT_CSS[layout.contact_layout].strip(),
        "header_gradient": layout.header_gradient.value,
        "gradient_css": GRADIENT_CSS[layout.header_gradient].strip(),
        "primary_deep": darken(tokens.palette.primary, 30),
        "primary_glow": tint(tokens.palette.primary, 25),
        "full_bleed": layout.header_full_bleed,
        "use_icons": layout.use_icons,
        "decorations": tokens.decorations is not DecorationIntensity.NONE,
        "custom_rules": custom_rules(tokens),
    })
    logger.debug(f"Built stylesheet ({len(css)} chars) for '{tokens.style_name}'")
    return css


def font_urls(tokens: StyleTokens) -> List[str]:
    """Google Fonts stylesheet links for the heading and body faces, deduplicated."""
    urls = []
    for face in (tokens.typography.heading_font, tokens.typography.body_font):
        if face.url and face.url not in urls:
            urls.append(face.url)
    return urls


def edit_mode_css() -> str:
    return EDIT_MODE_CSS.strip()


def protection_css(block_copy: bool = True) -> str:
    css = PROTECTION_CSS.strip()
    if block_copy:
        css = COPY_GUARD_CSS.strip() + "\n\n" + css
    return css
