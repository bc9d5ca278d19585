#!/usr/bin/env python3
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
Sample CV
Writes a placeholder CV in all three render modes to user_content/sample/
and checks that they share one layout.
"""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from cv_compiler.compiler import compile_document
from cv_compiler.inspection import same_layout
from cv_compiler.models import CVContent, ElementOverride, ElementType, OverrideSet, ProtectionSettings, RenderMode
from cv_compiler.tokens import resolve_tokens

CONTENT = {
    "fullName": "[Your Name]",
    "headline": "[Your Job Title / Headline]",
    "summary": "[Insert your executive summary here. Describe your experience, key skills, "
               "and what you bring to the table.]",
    "contactInfo": {
        "email": "[Email Address]",
        "phone": "[Phone Number]",
        "location": "[City, Country]",
        "website": "github.com/[username]",
    },
    "experience": [
        {
            "title": "[Job Title]",
            "company": "[LATEST COMPANY]",
            "location": "[Location]",
            "period": "[Dates]",
            "highlights": ["Achievement 1: Description of achievement.",
                           "Achievement 2: Description of achievement."],
        },
        {
            "title": "[Job Title]",
            "company": "[PREVIOUS COMPANY]",
            "period": "[Dates]",
            "highlights": ["Key responsibility or achievement."],
        },
    ],
    "education": [{"degree": "[Degree Name]", "institution": "[University Name]", "year": "[Year]"}],
    "skills": {"technical": ["Skill A", "Skill B", "Skill C"], "soft": ["Skill D", "Skill E"]},
    "languages": [{"language": "English", "level": "Native"}],
    "certifications": ["[Certification Name]"],
}

STYLE = {
    "styleName": "Sample Sidebar",
    "themeBase": "modern",
    "layout": "sidebar-right",
    "sectionStyle": "accent-left",
    "decorations": "minimal",
}


def create_cv(output_dir: Path = Path("user_content/sample")):
    output_dir.mkdir(parents=True, exist_ok=True)
    content = CVContent.from_dict(CONTENT)
    tokens = resolve_tokens(STYLE)
    overrides = OverrideSet.from_list([
        ElementOverride("section-experience-title", ElementType.SECTION_TITLE, color_override="#b91c1c"),
    ])

    documents = {}
    for mode in RenderMode:
        protection = ProtectionSettings("SAMPLE") if mode is RenderMode.PREVIEW_PROTECTED else None
        html = compile_document(content, tokens, overrides, mode, protection)
        path = output_dir / f"cv-{mode.value}.html"
        path.write_text(html, encoding="utf-8")
        documents[mode] = html
        print(f"Wrote {path}")

    (output_dir / "content.json").write_text(json.dumps(CONTENT, indent=2), encoding="utf-8")
    (output_dir / "style.json").write_text(json.dumps(STYLE, indent=2), encoding="utf-8")

    export = documents[RenderMode.EXPORT]
    for mode, html in documents.items():
        print(f"{mode.value}: {'same layout as export' if same_layout(export, html) else 'LAYOUT DRIFT'}")


if __name__ == "__main__":
    create_cv()
