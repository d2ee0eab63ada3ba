"""Unit tests for the event system.

Tests cover:
- FormEvent creation and string enum normalization
- Serialization (to_dict, to_jsonl) and parsing (from_dict)
- EventEmitter subscriptions, dispatch order and listener isolation
"""

import json
import logging
from datetime import datetime, timedelta, timezone

import pytest

from regform.events import EventEmitter, FormEvent
from regform.types import EventType, FormPhase


def make_event(event_type=EventType.FIELD_UPDATED, **overrides):
    fields = dict(
        event_id="evt_001",
        type=event_type,
        form_id="form_001",
        ts=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
        phase=FormPhase.EDITING,
        payload={"field": "email"},
    )
    fields.update(overrides)
    return FormEvent(**fields)


class TestFormEventCreation:
    """Test FormEvent creation."""

    def test_required_fields(self):
        event = make_event(payload=None)
        assert event.event_id == "evt_001"
        assert event.type == EventType.FIELD_UPDATED
        assert event.phase == FormPhase.EDITING
        assert event.payload is None

    def test_string_enums_are_normalized(self):
        event = make_event(event_type="skill.appended", phase="validating")
        assert event.type is EventType.SKILL_APPENDED
        assert event.phase is FormPhase.VALIDATING

    def test_events_are_immutable(self):
        event = make_event()
        with pytest.raises(AttributeError):
            event.form_id = "other"


class TestFormEventSerialization:
    """Test to_dict, to_jsonl and from_dict."""

    def test_to_dict(self):
        data = make_event().to_dict()
        assert data == {
            "eventId": "evt_001",
            "type": "field.updated",
            "formId": "form_001",
            "ts": "2024-05-01T12:30:00+00:00",
            "phase": "editing",
            "payload": {"field": "email"},
        }

    def test_to_dict_omits_missing_payload(self):
        assert "payload" not in make_event(payload=None).to_dict()

    def test_to_jsonl_is_single_line(self):
        line = make_event().to_jsonl()
        assert "\n" not in line
        assert json.loads(line)["type"] == "field.updated"

    def test_from_dict_round_trip(self):
        event = make_event()
        assert FormEvent.from_dict(event.to_dict()) == event

    def test_from_dict_accepts_zulu_timestamp(self):
        data = make_event().to_dict()
        data["ts"] = "2024-05-01T12:30:00Z"
        parsed = FormEvent.from_dict(data)

        assert parsed.ts.utcoffset() == timedelta(0)
        assert parsed.ts == datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


class TestEventEmitter:
    """Test EventEmitter subscriptions and dispatch."""

    def test_type_specific_listener(self):
        emitter = EventEmitter()
        seen = []
        emitter.on(EventType.FORM_SUBMITTED, seen.append)

        emitter.emit(make_event(EventType.FIELD_UPDATED))
        emitter.emit(make_event(EventType.FORM_SUBMITTED))

        assert [e.type for e in seen] == [EventType.FORM_SUBMITTED]

    def test_wildcard_listener_sees_everything(self):
        emitter = EventEmitter()
        seen = []
        emitter.on_any(seen.append)

        emitter.emit(make_event(EventType.FIELD_UPDATED))
        emitter.emit(make_event(EventType.SKILL_REMOVED))

        assert len(seen) == 2

    def test_specific_listeners_run_before_wildcard(self):
        emitter = EventEmitter()
        order = []
        emitter.on_any(lambda e: order.append("any"))
        emitter.on(EventType.FIELD_UPDATED, lambda e: order.append("specific"))

        emitter.emit(make_event())
        assert order == ["specific", "any"]

    def test_off(self):
        emitter = EventEmitter()
        seen = []
        emitter.on(EventType.FIELD_UPDATED, seen.append)
        emitter.off(EventType.FIELD_UPDATED, seen.append)
        emitter.emit(make_event())

        assert seen == []
        assert emitter.listener_count(EventType.FIELD_UPDATED) == 0

    def test_off_unknown_listener_is_ignored(self):
        emitter = EventEmitter()
        emitter.off(EventType.FIELD_UPDATED, print)
        emitter.off_any(print)

    def test_off_any(self):
        emitter = EventEmitter()
        seen = []
        emitter.on_any(seen.append)
        emitter.off_any(seen.append)
        emitter.emit(make_event())
        assert seen == []

    def test_failing_listener_is_isolated_and_logged(self, caplog):
        emitter = EventEmitter()
        seen = []

        def broken(event):
            raise RuntimeError("boom")

        emitter.on_any(broken)
        emitter.on_any(seen.append)

        with caplog.at_level(logging.ERROR, logger="regform.events"):
            emitter.emit(make_event())

        assert len(seen) == 1
        assert "field.updated" in caplog.text

    def test_listener_count_and_clear(self):
        emitter = EventEmitter()
        emitter.on(EventType.FIELD_UPDATED, print)
        emitter.on(EventType.FORM_RESET, print)
        emitter.on_any(print)

        assert emitter.listener_count() == 3
        assert emitter.listener_count(EventType.FORM_RESET) == 1

        emitter.clear()
        assert emitter.listener_count() == 0
