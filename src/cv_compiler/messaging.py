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
Host side of the interactive preview.

The embedded document talks to its host through three message types:

  frame -> host   {"type": "elementSelected", "elementId", "elementType", "elementLabel"}
  frame -> host   {"type": "elementDeselected"}
  host -> frame   {"type": "setEditMode", "enabled"}

Every message may also carry a "channel" naming the document instance it
belongs to. A message without one belongs to the instance that receives it.

EditChannel validates and queues those messages for one document instance.
EditSession owns the editable state (content, tokens, overrides, edit mode,
selection), debounces override edits and recompiles through the pure
compiler.
"""

import logging
import threading
import time
from collections import deque
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Deque, Dict, List, Mapping, Optional, Union

from cv_compiler.compiler import compile_document
from cv_compiler.errors import ChannelClosedError, ProtocolError
from cv_compiler.models import CVContent, ElementOverride, ElementType, OverrideSet, ProtectionSettings, RenderMode
from cv_compiler.settings import Settings
from cv_compiler.tokens import StyleDescriptor, StyleTokens, resolve_tokens

logger = logging.getLogger(__name__)

ELEMENT_SELECTED = "elementSelected"
ELEMENT_DESELECTED = "elementDeselected"
SET_EDIT_MODE = "setEditMode"


def _with_channel(data: Dict[str, Any], channel: Optional[str]) -> Dict[str, Any]:
    if channel is not None:
        data["channel"] = channel
    return data


@dataclass(frozen=True)
class ElementSelected:
    element_id: str
    element_type: ElementType
    element_label: str
    channel: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _with_channel({
            "type": ELEMENT_SELECTED,
            "elementId": self.element_id,
            "elementType": self.element_type.value,
            "elementLabel": self.element_label,
        }, self.channel)


@dataclass(frozen=True)
class ElementDeselected:
    channel: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _with_channel({"type": ELEMENT_DESELECTED}, self.channel)


@dataclass(frozen=True)
class SetEditMode:
    enabled: bool
    channel: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _with_channel({"type": SET_EDIT_MODE, "enabled": self.enabled}, self.channel)


Message = Union[ElementSelected, ElementDeselected, SetEditMode]


def _require(data: Mapping[str, Any], key: str, kind: type) -> Any:
    value = data.get(key)
    if not isinstance(value, kind) or (kind is str and not value):
        raise ProtocolError(f"{data.get('type')}: missing or invalid '{key}'")
    return value


def _channel(data: Mapping[str, Any], default: Optional[str]) -> Optional[str]:
    if data.get("channel") is None:
        return default
    return _require(data, "channel", str)


def parse_message(data: Any, default_channel: Optional[str] = None) -> Message:
    """
    Validates a raw message dict.

    ``channel`` is optional on the wire; a message without one is given
    ``default_channel``.

    Raises:
        ProtocolError: for a non-object, an unknown type, missing fields or
            a channel that is present but not a non-empty string.
    """
    if not isinstance(data, Mapping):
        raise ProtocolError(f"Message must be an object, got {type(data).__name__}")
    kind = data.get("type")
    channel = _channel(data, default_channel)
    if kind == ELEMENT_SELECTED:
        raw_type = _require(data, "elementType", str)
        try:
            element_type = ElementType(raw_type)
        except ValueError:
            raise ProtocolError(f"{kind}: unknown elementType '{raw_type}'") from None
        return ElementSelected(
            element_id=_require(data, "elementId", str),
            element_type=element_type,
            element_label=str(data.get("elementLabel") or ""),
            channel=channel,
        )
    if kind == ELEMENT_DESELECTED:
        return ElementDeselected(channel=channel)
    if kind == SET_EDIT_MODE:
        return SetEditMode(enabled=_require(data, "enabled", bool), channel=channel)
    raise ProtocolError(f"Unknown message type: {kind!r}")


class EditChannel:
    """
    Message port for one embedded document instance.

    Frame messages are queued in arrival order; messages addressed to another
    channel are dropped. Host messages are queued on ``outbox`` for the
    transport to deliver.
    """

    def __init__(self, channel_id: str):
        if not channel_id:
            raise ProtocolError("channel id must not be empty")
        self.channel_id = channel_id
        self.outbox: Deque[SetEditMode] = deque()
        self._inbox: Deque[Message] = deque()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self):
        if self._closed:
            raise ChannelClosedError(f"Channel '{self.channel_id}' is closed")

    def receive(self, raw: Any) -> Optional[Message]:
        """
        Validates and queues a frame message. A message without a channel
        belongs to this one. Returns None when it was dropped.
        """
        self._check_open()
        message = parse_message(raw, default_channel=self.channel_id)
        if message.channel != self.channel_id:
            logger.warning(f"Dropping message for channel '{message.channel}' on '{self.channel_id}'")
            return None
        if isinstance(message, SetEditMode):
            raise ProtocolError(f"{SET_EDIT_MODE} is a host message and cannot be received from the frame")
        self._inbox.append(message)
        return message

    def drain(self) -> List[Message]:
        self._check_open()
        messages = list(self._inbox)
        self._inbox.clear()
        return messages

    def set_edit_mode(self, enabled: bool) -> SetEditMode:
        self._check_open()
        message = SetEditMode(enabled=bool(enabled), channel=self.channel_id)
        self.outbox.append(message)
        return message

    def take_outbox(self) -> List[Dict[str, Any]]:
        """Host messages as dicts, ready to post to the frame."""
        messages = [m.to_dict() for m in self.outbox]
        self.outbox.clear()
        return messages

    def close(self):
        if not self._closed:
            logger.debug(f"Closing channel '{self.channel_id}' ({len(self._inbox)} unread)")
        self._closed = True
        self._inbox.clear()
        self.outbox.clear()

    def __enter__(self):
        self._check_open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


@dataclass(frozen=True)
class CompileResult:
    revision: int
    html: str
    stale: bool


class EditSession:
    """
    Editable preview state for one document.

    Override edits are staged and committed after ``debounce_seconds`` of
    quiet, by ``flush``. Every committed change bumps ``revision``; compiles
    started for an older revision come back marked stale.
    """

    def __init__(self, content: CVContent, tokens: Union[StyleTokens, StyleDescriptor, Mapping[str, Any]],
                 overrides: Optional[OverrideSet] = None, *, mode: RenderMode = RenderMode.INTERACTIVE,
                 settings: Optional[Settings] = None, channel: Optional[EditChannel] = None,
                 clock: Callable[[], float] = time.monotonic,
                 on_persist: Optional[Callable[[OverrideSet], None]] = None):
        self.settings = settings or Settings.from_env()
        self.channel = channel or EditChannel(self.settings.channel_id)
        self.content = content
        self.tokens = tokens if isinstance(tokens, StyleTokens) else resolve_tokens(tokens)
        self.overrides = overrides or OverrideSet.empty()
        self.mode = RenderMode(mode)
        self.edit_mode = False
        self.selection: Optional[ElementSelected] = None
        self.revision = 0
        self.debounce_seconds = self.settings.debounce_seconds
        self._clock = clock
        self._on_persist = on_persist
        self._pending: Dict[str, Optional[ElementOverride]] = {}
        self._due: Optional[float] = None
        self._cache: Optional[CompileResult] = None
        self._lock = threading.Lock()

    # Edit mode and selection

    def set_edit_mode(self, enabled: bool) -> None:
        """Toggles selection affordances in the frame; the document is not recompiled."""
        self.edit_mode = bool(enabled)
        if not self.edit_mode:
            self.selection = None
        self.channel.set_edit_mode(self.edit_mode)

    def process_messages(self) -> List[Message]:
        """Applies queued frame messages in arrival order."""
        messages = self.channel.drain()
        for message in messages:
            if isinstance(message, ElementSelected):
                if not self.edit_mode:
                    logger.debug(f"Selection of '{message.element_id}' arrived while edit mode is off")
                self.selection = message
            elif isinstance(message, ElementDeselected):
                self.selection = None
        return messages

    # Overrides

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def stage_override(self, override: ElementOverride, now: Optional[float] = None) -> None:
        self._pending[override.element_id] = override
        self._due = (self._clock() if now is None else now) + self.debounce_seconds

    def stage_removal(self, element_id: str, now: Optional[float] = None) -> None:
        self._pending[element_id] = None
        self._due = (self._clock() if now is None else now) + self.debounce_seconds

    def flush(self, now: Optional[float] = None, force: bool = False) -> bool:
        """
        Commits staged edits once the debounce delay has passed.

        Returns:
            bool: True if a new override set was committed.
        """
        if not self._pending:
            return False
        now = self._clock() if now is None else now
        if not force and now < self._due:
            return False

        when = datetime.now(timezone.utc)
        committed = self.overrides
        for element_id, override in self._pending.items():
            if override is None:
                committed = committed.without(element_id, when)
            else:
                committed = committed.with_override(override, when)
        count = len(self._pending)
        self._pending = {}
        self._due = None

        with self._lock:
            self.overrides = committed
            self.revision += 1
        logger.debug(f"Committed {count} override edit(s), revision {self.revision}")
        if self._on_persist:
            self._on_persist(committed)
        return True

    # Content and style

    def update_content(self, content: CVContent) -> None:
        with self._lock:
            self.content = content
            self.revision += 1

    def update_tokens(self, tokens: Union[StyleTokens, StyleDescriptor, Mapping[str, Any]]) -> None:
        resolved = tokens if isinstance(tokens, StyleTokens) else resolve_tokens(tokens)
        with self._lock:
            self.tokens = resolved
            self.revision += 1

    # Compilation

    def _snapshot(self):
        with self._lock:
            return self.revision, self.content, self.tokens, self.overrides

    def _compile(self, content, tokens, overrides) -> str:
        protection = None
        if self.mode is RenderMode.PREVIEW_PROTECTED:
            protection = ProtectionSettings(watermark_text=self.settings.watermark_text)
        return compile_document(content, tokens, overrides, self.mode, protection,
                                channel_id=self.channel.channel_id)

    def document(self) -> str:
        """The compiled document for the current revision."""
        revision, content, tokens, overrides = self._snapshot()
        cached = self._cache
        if cached is not None and cached.revision == revision:
            return cached.html
        html = self._compile(content, tokens, overrides)
        self._cache = CompileResult(revision=revision, html=html, stale=False)
        return html

    def compile_latest(self, executor: Executor) -> "Future[CompileResult]":
        """
        Compiles the current revision on ``executor``. If the state moved on
        while it ran, the result is marked stale and not cached.
        """
        revision, content, tokens, overrides = self._snapshot()

        def job() -> CompileResult:
            html = self._compile(content, tokens, overrides)
            with self._lock:
                stale = revision != self.revision
            if stale:
                logger.debug(f"Discarding compile of revision {revision}; now at {self.revision}")
            else:
                self._cache = CompileResult(revision=revision, html=html, stale=False)
            return CompileResult(revision=revision, html=html, stale=stale)

        return executor.submit(job)

    def close(self) -> None:
        self.channel.close()
