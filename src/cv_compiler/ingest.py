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
Loads compiler inputs (content, style descriptor, overrides, PDFs) from local
files or http(s) URLs.

HTTPS verification uses the first CA bundle found in:
  1. the --ca-bundle CLI override
  2. REQUESTS_CA_BUNDLE
  3. CURL_CA_BUNDLE
  4. SSL_CERT_FILE
  5. the system trust store
"""

import json
import logging
import os
from typing import Any, Optional, Union

import requests

from cv_compiler.errors import SourceError
from cv_compiler.models import CVContent, OverrideSet
from cv_compiler.tokens import StyleDescriptor

logger = logging.getLogger(__name__)

TIMEOUT = 15
CA_BUNDLE_VARS = ("REQUESTS_CA_BUNDLE", "CURL_CA_BUNDLE", "SSL_CERT_FILE")

_ca_bundle_override: Optional[str] = None


def set_ca_bundle_override(path: Optional[str]) -> None:
    """Sets (or clears, with None) an explicit CA bundle path from the CLI."""
    global _ca_bundle_override
    _ca_bundle_override = path
    if path:
        logger.info(f"CA bundle override set to: {path}")


def get_ca_bundle() -> Union[str, bool]:
    """
    Returns:
        str: path to the CA bundle to verify against, or
        bool: True to use the default trust store.
    """
    if _ca_bundle_override:
        return _ca_bundle_override
    for var in CA_BUNDLE_VARS:
        value = os.environ.get(var)
        if value:
            logger.debug(f"Using CA bundle from {var}: {value}")
            return value
    return True


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _fetch(url: str) -> requests.Response:
    logger.info(f"Fetching {url}")
    try:
        response = requests.get(url, timeout=TIMEOUT, verify=get_ca_bundle())
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise SourceError(f"Failed to fetch {url}: {e}") from e
    return response


def read_bytes(source: str) -> bytes:
    """Raw bytes of a local file or URL."""
    if is_url(source):
        return _fetch(source).content
    try:
        with open(source, "rb") as f:
            return f.read()
    except OSError as e:
        raise SourceError(f"Cannot read {source}: {e}") from e


def load_json(source: str) -> Any:
    """
    Parses JSON from a local path or an http(s) URL.

    Raises:
        SourceError: if the source cannot be read or is not valid JSON.
    """
    if is_url(source):
        text = _fetch(source).text
    else:
        try:
            with open(source, "r", encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            raise SourceError(f"Cannot read {source}: {e}") from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SourceError(f"{source} is not valid JSON: {e}") from e


def _expect_object(data: Any, source: str, what: str) -> dict:
    if not isinstance(data, dict):
        raise SourceError(f"{source}: expected a JSON object for the {what}, got {type(data).__name__}")
    return data


def load_content(source: str) -> CVContent:
    data = _expect_object(load_json(source), source, "CV content")
    content = CVContent.from_dict(data)
    logger.debug(f"Loaded content for '{content.full_name}' from {source}: "
                 f"{len(content.experience)} roles, {len(content.education)} degrees")
    return content


def load_descriptor(source: str) -> StyleDescriptor:
    """Loads a style descriptor; a ``{"style": {...}}`` wrapper is unwrapped."""
    data = _expect_object(load_json(source), source, "style descriptor")
    if isinstance(data.get("style"), dict):
        data = data["style"]
    return StyleDescriptor.from_dict(data)


def load_overrides(source: Optional[str]) -> OverrideSet:
    """Loads an override set; no source means no overrides."""
    if not source:
        return OverrideSet.empty()
    data = _expect_object(load_json(source), source, "overrides")
    overrides = OverrideSet.from_dict(data)
    logger.debug(f"Loaded {len(overrides)} override(s) from {source}")
    return overrides
