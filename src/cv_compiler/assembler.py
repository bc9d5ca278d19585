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
Section assembler.

Maps CVContent through the resolved tokens into the header tree and an
ordered list of section trees. Nodes that can be addressed by an override
carry an identity path; the identity layer turns paths into element ids.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from cv_compiler.icons import CONTACT_ICONS, SVG_ATTRS
from cv_compiler.models import CVContent, ElementType, Experience, Education, Language, Skills
from cv_compiler.tokens import (
    ExperienceFormat,
    LayoutStructure,
    SectionKind,
    SectionStyle,
    SkillsDisplay,
    StyleTokens,
    ensure_exhaustive,
)

logger = logging.getLogger(__name__)

SECTION_TITLES: Dict[SectionKind, str] = {
    SectionKind.SUMMARY: "Professional Summary",
    SectionKind.EXPERIENCE: "Experience",
    SectionKind.EDUCATION: "Education",
    SectionKind.SKILLS: "Skills",
    SectionKind.LANGUAGES: "Languages",
    SectionKind.CERTIFICATIONS: "Certifications",
}

SIDEBAR_SECTIONS = (SectionKind.SKILLS, SectionKind.LANGUAGES, SectionKind.CERTIFICATIONS)

# Item box class per section style; the stylesheet defines each one.
ITEM_CLASSES: Dict[SectionStyle, str] = {
    SectionStyle.CLEAN: "item-clean",
    SectionStyle.UNDERLINED: "item-clean",
    SectionStyle.BOXED: "item-card-subtle",
    SectionStyle.TIMELINE: "item-timeline",
    SectionStyle.ACCENT_LEFT: "item-accent-left",
    SectionStyle.CARD: "item-card-bordered",
}

LABEL_LIMIT = 50


@dataclass
class Node:
    """
    One element of the document tree.

    ``path`` is the identity path for addressable nodes and None for pure
    layout wrappers. ``element_id``, ``style`` and ``hidden`` are filled in
    by the identity layer.
    """
    tag: str
    classes: Tuple[str, ...] = ()
    text: Optional[str] = None
    children: List["Node"] = field(default_factory=list)
    attrs: Dict[str, str] = field(default_factory=dict)
    path: Optional[Tuple[str, ...]] = None
    element_type: Optional[ElementType] = None
    label: Optional[str] = None
    required: bool = False
    element_id: Optional[str] = None
    style: Dict[str, str] = field(default_factory=dict)
    hidden: bool = False

    def add(self, child: Optional["Node"]) -> Optional["Node"]:
        if child is not None:
            self.children.append(child)
        return child

    def walk(self):
        """Depth-first, document order."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class SectionTree:
    kind: SectionKind
    column: str
    root: Node


def _label(text: str) -> str:
    text = " ".join(text.split())
    return text if len(text) <= LABEL_LIMIT else text[:LABEL_LIMIT - 1] + "…"


def _field(tag: str, cls: str, text: Optional[str], path: Tuple[str, ...],
           element_type: ElementType = ElementType.FIELD) -> Optional[Node]:
    if not text:
        return None
    return Node(tag=tag, classes=(cls,), text=text, path=path, element_type=element_type, label=_label(text))


def _header_classes(layout) -> Tuple[str, ...]:
    classes = ("cv-header", f"header-{layout.header_variant.value}")
    if layout.header_full_bleed:
        classes += ("header-full-bleed",)
    return classes


def assemble_header(content: CVContent, tokens: StyleTokens) -> Node:
    """Builds the header: photo, name, headline and contact line."""
    layout = tokens.layout
    header = Node(
        tag="header",
        classes=_header_classes(layout),
        path=("header",),
        element_type=ElementType.HEADER,
        label="Header",
        required=True,
    )

    if content.avatar_url and layout.show_photo:
        photo = header.add(Node(
            tag="div",
            classes=("avatar-container",),
            path=("header", "photo"),
            element_type=ElementType.PHOTO,
            label="Photo",
        ))
        photo.add(Node(tag="img", classes=("avatar",), attrs={"src": content.avatar_url, "alt": content.full_name}))

    identity = header.add(Node(tag="div", classes=("header-identity",)))
    identity.add(Node(
        tag="h1",
        classes=("name",),
        text=content.full_name,
        path=("header", "name"),
        element_type=ElementType.HEADER_FIELD,
        label=_label(content.full_name),
        required=True,
    ))
    identity.add(_field("p", "headline", content.headline, ("header", "headline"), ElementType.HEADER_FIELD))

    if content.contact and content.contact.items():
        contact = header.add(Node(
            tag="div",
            classes=("contact", f"contact-{layout.contact_layout.value}"),
            path=("header", "contact"),
            element_type=ElementType.HEADER_FIELD,
            label="Contact",
        ))
        for name, value in content.contact.items():
            item = contact.add(_field("span", f"contact-{name}", value, ("header", name), ElementType.HEADER_FIELD))
            if layout.use_icons:
                # The icon goes before the text, so the text moves into its own span.
                item.text = None
                item.add(contact_icon(name))
                item.add(Node(tag="span", classes=("contact-text",), text=value))
    return header


def contact_icon(name: str) -> Node:
    """An unaddressed inline SVG node for a contact field."""
    icon = Node(tag="svg", classes=("contact-icon",), attrs=dict(SVG_ATTRS))
    for tag, attrs in CONTACT_ICONS[name]:
        icon.add(Node(tag=tag, attrs=dict(attrs)))
    return icon


def _section(kind: SectionKind) -> Node:
    section = Node(
        tag="section",
        classes=("cv-section", f"section-{kind.value}"),
        path=("section", kind.value),
        element_type=ElementType.SECTION,
        label=f"{SECTION_TITLES[kind]} Section",
    )
    section.add(Node(
        tag="h2",
        classes=("section-title",),
        text=SECTION_TITLES[kind],
        path=("section", kind.value, "title"),
        element_type=ElementType.SECTION_TITLE,
        label=SECTION_TITLES[kind],
    ))
    return section


def _summary(content: CVContent, tokens: StyleTokens) -> Optional[Node]:
    if not content.summary:
        return None
    section = _section(SectionKind.SUMMARY)
    section.add(_field("p", "summary", content.summary, ("summary",), ElementType.SUMMARY))
    return section


def _experience_item(index: int, exp: Experience, tokens: StyleTokens) -> Node:
    key = ("experience", str(index))
    label = " @ ".join(part for part in (exp.title, exp.company) if part) or f"Experience {index + 1}"
    item = Node(
        tag="div",
        classes=("item", ITEM_CLASSES[tokens.layout.section_style]),
        path=key,
        element_type=ElementType.EXPERIENCE_ITEM,
        label=_label(label),
    )
    head = item.add(Node(tag="div", classes=("item-header",)))
    titles = head.add(Node(tag="div", classes=("item-heading",)))
    titles.add(_field("h3", "item-title", exp.title, key + ("title",)))
    company = ", ".join(part for part in (exp.company, exp.location) if part)
    titles.add(_field("span", "item-subtitle", company, key + ("company",)))
    head.add(_field("span", "item-period", exp.period, key + ("period",)))

    if exp.highlights:
        if tokens.layout.experience_format is ExperienceFormat.PARAGRAPH:
            item.add(_field("p", "description", " ".join(exp.highlights), key + ("description",)))
        else:
            bullets = item.add(Node(
                tag="ul",
                classes=("highlights",),
                path=key + ("highlights",),
                element_type=ElementType.FIELD,
                label="Highlights",
            ))
            for j, highlight in enumerate(exp.highlights):
                bullets.add(_field("li", "highlight", highlight, key + (str(j),), ElementType.HIGHLIGHT))
    return item


def _experience(content: CVContent, tokens: StyleTokens) -> Optional[Node]:
    if not content.experience:
        return None
    section = _section(SectionKind.EXPERIENCE)
    for i, exp in enumerate(content.experience):
        section.add(_experience_item(i, exp, tokens))
    return section


def _education_item(index: int, edu: Education, tokens: StyleTokens) -> Node:
    key = ("education", str(index))
    label = " @ ".join(part for part in (edu.degree, edu.institution) if part) or f"Education {index + 1}"
    item = Node(
        tag="div",
        classes=("item", ITEM_CLASSES[tokens.layout.section_style]),
        path=key,
        element_type=ElementType.EDUCATION_ITEM,
        label=_label(label),
    )
    head = item.add(Node(tag="div", classes=("item-header",)))
    titles = head.add(Node(tag="div", classes=("item-heading",)))
    titles.add(_field("h3", "item-title", edu.degree, key + ("degree",)))
    titles.add(_field("span", "item-subtitle", edu.institution, key + ("institution",)))
    head.add(_field("span", "item-period", edu.year, key + ("year",)))
    item.add(_field("p", "item-details", edu.details, key + ("details",)))
    return item


def _education(content: CVContent, tokens: StyleTokens) -> Optional[Node]:
    if not content.education:
        return None
    section = _section(SectionKind.EDUCATION)
    for i, edu in enumerate(content.education):
        section.add(_education_item(i, edu, tokens))
    return section


SKILL_GROUP_LABELS = {"technical": "Technical", "soft": "Soft Skills"}


def _skill_group(category: str, skills: Tuple[str, ...], display: SkillsDisplay) -> Optional[Node]:
    if not skills:
        return None
    group = Node(
        tag="div",
        classes=("skills-category",),
        path=("skills", category),
        element_type=ElementType.SKILL_GROUP,
        label=SKILL_GROUP_LABELS[category],
    )
    group.add(Node(tag="h4", classes=("skills-label",), text=SKILL_GROUP_LABELS[category]))
    listing = group.add(Node(tag="div", classes=("skills-list", f"skills-{display.value}")))
    tag_class = {
        SkillsDisplay.TAGS: "skill-tag",
        SkillsDisplay.LIST: "skill-item",
        SkillsDisplay.COMPACT: "skill-inline",
    }[display]
    classes = (tag_class, "soft") if category == "soft" else (tag_class,)
    for i, skill in enumerate(skills):
        listing.add(Node(
            tag="span",
            classes=classes,
            text=skill,
            path=("skills", category, str(i)),
            element_type=ElementType.SKILL_TAG,
            label=_label(skill),
        ))
    return group


def _skills(content: CVContent, tokens: StyleTokens) -> Optional[Node]:
    skills: Skills = content.skills
    if skills.is_empty():
        return None
    section = _section(SectionKind.SKILLS)
    container = section.add(Node(tag="div", classes=("skills-container",)))
    display = tokens.layout.skills_display
    container.add(_skill_group("technical", skills.technical, display))
    container.add(_skill_group("soft", skills.soft, display))
    return section


def _language_item(index: int, lang: Language) -> Node:
    key = ("languages", str(index))
    item = Node(
        tag="div",
        classes=("language-item",),
        path=key,
        element_type=ElementType.LANGUAGE_ITEM,
        label=_label(lang.name or f"Language {index + 1}"),
    )
    item.add(_field("span", "language-name", lang.name, key + ("name",)))
    item.add(_field("span", "language-level", lang.level, key + ("level",)))
    return item


def _languages(content: CVContent, tokens: StyleTokens) -> Optional[Node]:
    if not content.languages:
        return None
    section = _section(SectionKind.LANGUAGES)
    listing = section.add(Node(tag="div", classes=("languages-list",)))
    for i, lang in enumerate(content.languages):
        listing.add(_language_item(i, lang))
    return section


def _certifications(content: CVContent, tokens: StyleTokens) -> Optional[Node]:
    if not content.certifications:
        return None
    section = _section(SectionKind.CERTIFICATIONS)
    listing = section.add(Node(tag="ul", classes=("certifications-list",)))
    for i, cert in enumerate(content.certifications):
        listing.add(_field("li", "certification", cert, ("certifications", str(i)),
                           ElementType.CERTIFICATION_ITEM))
    return section


SECTION_BUILDERS: Dict[SectionKind, Callable[[CVContent, StyleTokens], Optional[Node]]] = {
    SectionKind.SUMMARY: _summary,
    SectionKind.EXPERIENCE: _experience,
    SectionKind.EDUCATION: _education,
    SectionKind.SKILLS: _skills,
    SectionKind.LANGUAGES: _languages,
    SectionKind.CERTIFICATIONS: _certifications,
}

ensure_exhaustive(SECTION_BUILDERS, SectionKind, "SECTION_BUILDERS")
ensure_exhaustive(ITEM_CLASSES, SectionStyle, "ITEM_CLASSES")
ensure_exhaustive(SECTION_TITLES, SectionKind, "SECTION_TITLES")


def assemble_sections(content: CVContent, tokens: StyleTokens) -> List[SectionTree]:
    """
    Builds the section trees in ``layout.section_order``. Sections whose
    content is empty are left out entirely.
    """
    sidebar = tokens.layout.structure is not LayoutStructure.SINGLE_COLUMN
    sections = []
    for kind in tokens.layout.section_order:
        root = SECTION_BUILDERS[kind](content, tokens)
        if root is None:
            logger.debug(f"Omitting empty section: {kind.value}")
            continue
        column = "sidebar" if sidebar and kind in SIDEBAR_SECTIONS else "main"
        sections.append(SectionTree(kind=kind, column=column, root=root))
    return sections
