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
Loads the packaged Jinja2 templates (document shell, base CSS, scripts).
"""

import functools
import pathlib
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound, select_autoescape

from cv_compiler.errors import RenderError

TEMPLATE_DIR = pathlib.Path(__file__).resolve().parent / "templates"


@functools.lru_cache(maxsize=1)
def environment() -> Environment:
    # Only the HTML shell is autoescaped; CSS and JS are assembled from
    # sanitised values.
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=False),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
    )


def render_template(template_name: str, context: Dict[str, Any]) -> str:
    try:
        template = environment().get_template(template_name)
    except TemplateNotFound as e:
        available = sorted(p.name for p in TEMPLATE_DIR.iterdir())
        raise RenderError(f"Template {template_name} not found. Available: {available}") from e
    return template.render(**context)
