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

import unittest
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from unittest.mock import MagicMock
from urllib.parse import unquote

from bs4 import BeautifulSoup

from cv_compiler.errors import ChannelClosedError, ProtocolError
from cv_compiler.messaging import (
    EditChannel,
    EditSession,
    ElementDeselected,
    ElementSelected,
    SetEditMode,
    parse_message,
)
from cv_compiler.models import ElementOverride, ElementType, OverrideSet, RenderMode
from cv_compiler.settings import Settings

from cv_samples import sample_content, sample_tokens


def _selected(element_id="experience-0-title", channel="doc-1", element_type="field"):
    return {"type": "elementSelected", "elementId": element_id, "elementType": element_type,
            "elementLabel": "Staff Engineer", "channel": channel}


class DeferredExecutor(Executor):
    """Holds submitted work until ``run_all`` is called."""

    def __init__(self):
        self.jobs = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.jobs.append((future, fn, args, kwargs))
        return future

    def run_all(self):
        for future, fn, args, kwargs in self.jobs:
            future.set_result(fn(*args, **kwargs))
        self.jobs = []


class TestParseMessage(unittest.TestCase):

    def test_element_selected(self):
        message = parse_message(_selected())
        self.assertEqual(message, ElementSelected("experience-0-title", ElementType.FIELD, "Staff Engineer", "doc-1"))
        self.assertEqual(message.to_dict(), _selected())

    def test_deselected_and_edit_mode(self):
        self.assertEqual(parse_message({"type": "elementDeselected", "channel": "c"}), ElementDeselected("c"))
        self.assertEqual(parse_message({"type": "setEditMode", "enabled": True, "channel": "c"}),
                         SetEditMode(True, "c"))

    def test_invalid_messages_raise(self):
        cases = {
            "not a mapping": ["elementSelected"],
            "empty channel": {"type": "elementDeselected", "channel": ""},
            "non-string channel": {"type": "elementDeselected", "channel": 7},
            "unknown type": {"type": "hover", "channel": "c"},
            "bad element type": _selected(element_type="paragraph"),
            "missing id": {"type": "elementSelected", "elementType": "field", "channel": "c"},
            "non-bool enabled": {"type": "setEditMode", "enabled": "yes", "channel": "c"},
        }
        for name, raw in cases.items():
            with self.subTest(name):
                with self.assertRaises(ProtocolError):
                    parse_message(raw)

    def test_bare_messages_without_channel(self):
        self.assertEqual(parse_message({"type": "elementDeselected"}), ElementDeselected())
        self.assertEqual(parse_message({"type": "setEditMode", "enabled": False}), SetEditMode(False))
        selected = parse_message({"type": "elementSelected", "elementId": "summary",
                                  "elementType": "summary", "elementLabel": "Summary"})
        self.assertIsNone(selected.channel)
        self.assertEqual(selected.to_dict(), {"type": "elementSelected", "elementId": "summary",
                                              "elementType": "summary", "elementLabel": "Summary"})

    def test_default_channel_fills_missing_channel(self):
        self.assertEqual(parse_message({"type": "elementDeselected"}, default_channel="doc-1"),
                         ElementDeselected("doc-1"))
        self.assertEqual(parse_message({"type": "elementDeselected", "channel": "doc-2"}, default_channel="doc-1"),
                         ElementDeselected("doc-2"))


class TestEditChannel(unittest.TestCase):

    def test_messages_queue_in_arrival_order(self):
        channel = EditChannel("doc-1")
        channel.receive(_selected("summary", element_type="summary"))
        channel.receive({"type": "elementDeselected", "channel": "doc-1"})
        channel.receive(_selected("header-name", element_type="header-field"))
        drained = channel.drain()
        self.assertEqual([type(m) for m in drained], [ElementSelected, ElementDeselected, ElementSelected])
        self.assertEqual(drained[2].element_id, "header-name")
        self.assertEqual(channel.drain(), [])

    def test_bare_messages_belong_to_the_channel(self):
        channel = EditChannel("doc-1")
        channel.receive({"type": "elementSelected", "elementId": "experience-0-title",
                         "elementType": "field", "elementLabel": "Staff Engineer"})
        channel.receive({"type": "elementDeselected"})
        drained = channel.drain()
        self.assertEqual(drained, [
            ElementSelected("experience-0-title", ElementType.FIELD, "Staff Engineer", "doc-1"),
            ElementDeselected("doc-1"),
        ])

    def test_other_channels_are_dropped(self):
        channel = EditChannel("doc-1")
        with self.assertLogs("cv_compiler.messaging", level="WARNING"):
            self.assertIsNone(channel.receive(_selected(channel="doc-2")))
        self.assertEqual(channel.drain(), [])

    def test_frame_cannot_send_set_edit_mode(self):
        channel = EditChannel("doc-1")
        with self.assertRaises(ProtocolError):
            channel.receive({"type": "setEditMode", "enabled": True, "channel": "doc-1"})

    def test_outbox(self):
        channel = EditChannel("doc-1")
        channel.set_edit_mode(True)
        channel.set_edit_mode(False)
        self.assertEqual(channel.take_outbox(), [
            {"type": "setEditMode", "enabled": True, "channel": "doc-1"},
            {"type": "setEditMode", "enabled": False, "channel": "doc-1"},
        ])
        self.assertEqual(channel.take_outbox(), [])

    def test_closed_channel_rejects_traffic(self):
        with EditChannel("doc-1") as channel:
            channel.receive(_selected())
        self.assertTrue(channel.closed)
        with self.assertRaises(ChannelClosedError):
            channel.receive(_selected())
        with self.assertRaises(ChannelClosedError):
            channel.set_edit_mode(True)
        with self.assertRaises(ChannelClosedError):
            channel.drain()

    def test_empty_channel_id_raises(self):
        with self.assertRaises(ProtocolError):
            EditChannel("")


class TestEditSession(unittest.TestCase):

    def setUp(self):
        self.clock = MagicMock(return_value=100.0)
        self.persisted = []
        self.session = EditSession(
            sample_content(), sample_tokens(),
            settings=Settings(debounce_ms=300, channel_id="doc-1"),
            clock=self.clock,
            on_persist=self.persisted.append,
        )

    def test_edit_mode_toggle_posts_to_frame(self):
        self.session.set_edit_mode(True)
        self.assertTrue(self.session.edit_mode)
        self.assertEqual(self.session.channel.take_outbox(),
                         [{"type": "setEditMode", "enabled": True, "channel": "doc-1"}])

    def test_selection_follows_messages(self):
        self.session.set_edit_mode(True)
        self.session.channel.receive(_selected())
        self.session.process_messages()
        self.assertEqual(self.session.selection.element_id, "experience-0-title")
        self.session.channel.receive({"type": "elementDeselected", "channel": "doc-1"})
        self.session.process_messages()
        self.assertIsNone(self.session.selection)

    def test_session_accepts_bare_frame_messages(self):
        self.session.set_edit_mode(True)
        self.session.channel.receive({"type": "elementSelected", "elementId": "summary",
                                      "elementType": "summary", "elementLabel": "Summary"})
        self.session.process_messages()
        self.assertEqual(self.session.selection.element_id, "summary")
        self.session.channel.receive({"type": "elementDeselected"})
        self.session.process_messages()
        self.assertIsNone(self.session.selection)

    def test_leaving_edit_mode_clears_selection(self):
        self.session.set_edit_mode(True)
        self.session.channel.receive(_selected())
        self.session.process_messages()
        self.session.set_edit_mode(False)
        self.assertIsNone(self.session.selection)

    def test_edit_mode_does_not_recompile(self):
        before = self.session.document()
        revision = self.session.revision
        self.session.set_edit_mode(True)
        self.assertEqual(self.session.revision, revision)
        self.assertEqual(self.session.document(), before)

    def test_override_waits_for_debounce(self):
        override = ElementOverride("experience-0-title", ElementType.FIELD, color_override="#c0392b")
        self.session.stage_override(override, now=10.0)
        self.assertTrue(self.session.has_pending)
        self.assertFalse(self.session.flush(now=10.2))
        self.assertEqual(len(self.session.overrides), 0)
        self.assertTrue(self.session.flush(now=10.4))
        self.assertEqual(self.session.overrides.get("experience-0-title"), override)
        self.assertEqual(self.session.revision, 1)
        self.assertEqual(self.persisted, [self.session.overrides])

    def test_new_edit_restarts_the_delay(self):
        self.session.stage_override(ElementOverride("summary", ElementType.SUMMARY, color_override="#111111"), now=0.0)
        self.session.stage_override(ElementOverride("summary", ElementType.SUMMARY, color_override="#222222"), now=0.2)
        self.assertFalse(self.session.flush(now=0.4))
        self.assertTrue(self.session.flush(now=0.6))
        self.assertEqual(self.session.overrides.get("summary").color_override, "#222222")
        self.assertEqual(len(self.persisted), 1)

    def test_flush_uses_clock_and_force(self):
        self.session.stage_override(ElementOverride("summary", ElementType.SUMMARY, hidden=True))
        self.assertFalse(self.session.flush())
        self.assertTrue(self.session.flush(force=True))
        self.assertFalse(self.session.flush(force=True))

    def test_removal(self):
        self.session.overrides = OverrideSet.from_list([ElementOverride("summary", ElementType.SUMMARY, hidden=True)])
        self.session.stage_removal("summary", now=0.0)
        self.session.flush(now=1.0)
        self.assertNotIn("summary", self.session.overrides)

    def test_committed_override_reaches_the_document(self):
        self.session.stage_override(ElementOverride("experience-0-1", ElementType.HIGHLIGHT, hidden=True), now=0.0)
        self.session.flush(now=1.0)
        soup = BeautifulSoup(self.session.document(), "html.parser")
        self.assertIsNone(soup.find(attrs={"data-element-id": "experience-0-1"}))
        self.assertIsNotNone(soup.find(id="cv-edit-script"))

    def test_content_and_token_updates_bump_revision(self):
        self.session.update_content(sample_content(headline="Principal Engineer"))
        self.session.update_tokens({"themeBase": "creative"})
        self.assertEqual(self.session.revision, 2)
        self.assertIn("Principal Engineer", self.session.document())

    def test_compile_latest_marks_stale_results(self):
        executor = DeferredExecutor()
        future = self.session.compile_latest(executor)
        self.session.update_content(sample_content(headline="Changed"))
        executor.run_all()
        result = future.result()
        self.assertTrue(result.stale)
        self.assertEqual(result.revision, 0)

    def test_compile_latest_fresh_result(self):
        with ThreadPoolExecutor(max_workers=1) as executor:
            result = self.session.compile_latest(executor).result(timeout=30)
        self.assertFalse(result.stale)
        self.assertEqual(result.html, self.session.document())

    def test_protected_session_uses_its_settings_watermark(self):
        session = EditSession(sample_content(), sample_tokens(), mode=RenderMode.PREVIEW_PROTECTED,
                              settings=Settings(watermark_text="SESSION MARK", channel_id="doc-1"))
        overlay = BeautifulSoup(session.document(), "html.parser").select_one(".cv-watermark")
        self.assertIn("SESSION MARK", unquote(overlay["style"]))

    def test_close_closes_channel(self):
        self.session.close()
        self.assertTrue(self.session.channel.closed)


if __name__ == '__main__':
    unittest.main()
