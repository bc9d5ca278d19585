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
Document compiler: the one entry point every surface (live preview,
protected preview, PDF export) goes through.
"""

import logging
from typing import Any, Mapping, Optional, Union

from cv_compiler.assembler import assemble_header, assemble_sections
from cv_compiler.errors import RenderError
from cv_compiler.identity import apply_overrides, assign_ids
from cv_compiler.models import CVContent, OverrideSet, ProtectionSettings, RenderMode
from cv_compiler.renderer import render_document
from cv_compiler.settings import DEFAULT_CHANNEL_ID, DEFAULT_WATERMARK_TEXT
from cv_compiler.tokens import StyleDescriptor, StyleTokens, resolve_tokens

logger = logging.getLogger(__name__)

TokensLike = Union[StyleTokens, StyleDescriptor, Mapping[str, Any]]


def compile_document(content: CVContent, tokens: TokensLike, overrides: Optional[OverrideSet] = None,
                     mode: RenderMode = RenderMode.EXPORT, protection: Optional[ProtectionSettings] = None,
                     *, channel_id: str = DEFAULT_CHANNEL_ID) -> str:
    """
    Compiles content, style and overrides into a self-contained HTML document.

    Pure: the inputs are not mutated and identical inputs give byte-identical
    output.

    Args:
        content: the CV content.
        tokens: resolved StyleTokens, or a descriptor to resolve first.
        overrides: per-element overrides; ids that match nothing are ignored.
        mode: interactive, export or preview-protected.
        protection: watermark settings for preview-protected. When omitted
            ``DEFAULT_WATERMARK_TEXT`` is used; the environment is never read.
        channel_id: message channel for the interactive edit script.

    Raises:
        RenderError: if the full name is missing.
        ConfigurationError: if the style descriptor cannot be resolved.
    """
    if not content.full_name or not content.full_name.strip():
        raise RenderError("Cannot compile a CV without a full name")

    if not isinstance(tokens, StyleTokens):
        tokens = resolve_tokens(tokens)
    mode = RenderMode(mode)
    if mode is RenderMode.PREVIEW_PROTECTED and protection is None:
        protection = ProtectionSettings(watermark_text=DEFAULT_WATERMARK_TEXT)

    header = assemble_header(content, tokens)
    sections = assemble_sections(content, tokens)
    assign_ids(header, sections)
    sections, report = apply_overrides(header, sections, overrides)

    html = render_document(
        header, sections, tokens, mode,
        protection=protection,
        channel_id=channel_id,
        title=f"CV - {content.full_name.strip()}",
    )
    logger.debug(f"Compiled {mode.value}: sections={[s.kind.value for s in sections]} "
                 f"overrides applied={len(report.applied)} hidden={len(report.hidden)} stale={len(report.stale)}")
    return html
