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
Runtime settings read from the environment.

  CV_WATERMARK_TEXT    text stamped on protected previews and PDFs ("CV PREVIEW")
  CV_EDIT_DEBOUNCE_MS  delay before staged override edits are committed (300)
  CV_CHANNEL_ID        message channel id for embedded previews ("cv-preview")
  CV_LOG_FILE          optional path for a DEBUG log file
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from cv_compiler.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_WATERMARK_TEXT = "CV PREVIEW"
DEFAULT_DEBOUNCE_MS = 300
DEFAULT_CHANNEL_ID = "cv-preview"


@dataclass(frozen=True)
class Settings:
    watermark_text: str = DEFAULT_WATERMARK_TEXT
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    channel_id: str = DEFAULT_CHANNEL_ID
    log_file: Optional[str] = None

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Reads the CV_* variables. Unset or blank variables take the defaults.

        Raises:
            ConfigurationError: if CV_EDIT_DEBOUNCE_MS is not a non-negative integer.
        """
        env = os.environ if environ is None else environ

        raw_debounce = (env.get("CV_EDIT_DEBOUNCE_MS") or "").strip()
        debounce_ms = DEFAULT_DEBOUNCE_MS
        if raw_debounce:
            try:
                debounce_ms = int(raw_debounce)
            except ValueError:
                raise ConfigurationError(f"CV_EDIT_DEBOUNCE_MS must be an integer, got '{raw_debounce}'") from None
            if debounce_ms < 0:
                raise ConfigurationError(f"CV_EDIT_DEBOUNCE_MS must not be negative, got {debounce_ms}")

        settings = cls(
            watermark_text=(env.get("CV_WATERMARK_TEXT") or "").strip() or DEFAULT_WATERMARK_TEXT,
            debounce_ms=debounce_ms,
            channel_id=(env.get("CV_CHANNEL_ID") or "").strip() or DEFAULT_CHANNEL_ID,
            log_file=(env.get("CV_LOG_FILE") or "").strip() or None,
        )
        logger.debug(f"Settings: {settings}")
        return settings
