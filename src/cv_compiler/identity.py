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
Element identity and override layer.

Assigns every addressable node a stable id derived from its identity path,
then merges the sparse OverrideSet into the tree. Hidden nodes are removed
from the tree outright, so they are absent from every render mode.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from cv_compiler.assembler import Node, SectionTree, assemble_header, assemble_sections
from cv_compiler.errors import RenderError
from cv_compiler.models import CVContent, ElementOverride, OverrideSet
from cv_compiler.tokens import StyleTokens

logger = logging.getLogger(__name__)


def element_id_for(path: Sequence[str]) -> str:
    """
    ``("experience", "0", "title")`` -> ``"experience-0-title"``.

    Depends on the path only, never on style tokens.
    """
    return "-".join(path)


@dataclass
class OverrideReport:
    """What one compile did with its override set."""
    applied: List[str] = field(default_factory=list)
    hidden: List[str] = field(default_factory=list)
    ignored: List[str] = field(default_factory=list)
    stale: List[str] = field(default_factory=list)


def _roots(header: Node, sections: Iterable[SectionTree]) -> List[Node]:
    return [header] + [section.root for section in sections]


def assign_ids(header: Node, sections: Sequence[SectionTree]) -> List[str]:
    """
    Walks header, then sections in order, then fields and array indices in
    document order, and sets ``element_id`` on every addressable node.

    Returns:
        list: the assigned ids in walk order.
    """
    assigned = []
    seen = set()
    for root in _roots(header, sections):
        for node in root.walk():
            if node.path is None:
                continue
            element_id = element_id_for(node.path)
            if element_id in seen:
                raise RenderError(f"Duplicate element id in document tree: {element_id}")
            seen.add(element_id)
            node.element_id = element_id
            assigned.append(element_id)
    return assigned


def _apply(node: Node, override: ElementOverride, report: OverrideReport) -> None:
    if override.color_override:
        node.style["color"] = f"{override.color_override} !important"
    if override.background_override:
        node.style["background-color"] = f"{override.background_override} !important"
    if override.hidden:
        if node.required:
            logger.warning(f"Ignoring hidden override on required element '{node.element_id}'")
            report.ignored.append(node.element_id)
        else:
            node.hidden = True
    if override.element_type is not node.element_type:
        logger.debug(f"Override for '{node.element_id}' was recorded as {override.element_type.value}, "
                     f"element is {node.element_type.value if node.element_type else 'untyped'}")
    report.applied.append(node.element_id)


def _prune(node: Node, report: OverrideReport) -> None:
    kept = []
    for child in node.children:
        if child.hidden:
            report.hidden.append(child.element_id)
            continue
        _prune(child, report)
        kept.append(child)
    node.children = kept


def apply_overrides(header: Node, sections: List[SectionTree],
                    overrides: Optional[OverrideSet]) -> Tuple[List[SectionTree], OverrideReport]:
    """
    Merges overrides into the trees produced by the assembler.

    Colour overrides replace the token colour for that node only. Hidden
    nodes are dropped with their descendants; a hidden section is dropped
    from the returned list. Overrides whose id is not in the tree are
    skipped without error.

    Returns:
        (sections, report): the surviving section trees and a report.
    """
    report = OverrideReport()
    if not overrides:
        return sections, report

    by_id = {}
    for root in _roots(header, sections):
        for node in root.walk():
            if node.element_id:
                by_id[node.element_id] = node

    for element_id, override in overrides.overrides.items():
        node = by_id.get(element_id)
        if node is None:
            report.stale.append(element_id)
            continue
        _apply(node, override, report)

    if report.stale:
        logger.debug(f"Inert overrides (no matching element): {', '.join(sorted(report.stale))}")

    _prune(header, report)
    surviving = []
    for section in sections:
        if section.root.hidden:
            report.hidden.append(section.root.element_id)
            continue
        _prune(section.root, report)
        surviving.append(section)
    return surviving, report


def known_element_ids(content: CVContent, tokens: StyleTokens) -> List[str]:
    """
    Every element id the given content and tokens produce, in walk order.

    Edit surfaces use this to prune overrides left behind after content shrank.
    """
    header = assemble_header(content, tokens)
    sections = assemble_sections(content, tokens)
    return assign_ids(header, sections)
