"""Tests for hiss.feedback.modal — the single modal dialog."""

from __future__ import annotations

import pytest

from hiss.feedback.modal import Modal, ModalAction, ModalController
from hiss.observability import FeedbackCollector, ModalEvent
from tests.conftest import ChangeRecorder


class TestModalController:
    """open(), close() and resolve()."""

    def test_initially_closed(self) -> None:
        controller = ModalController()
        assert controller.current() is None
        assert controller.is_open is False

    def test_open(self) -> None:
        controller = ModalController()
        modal = controller.open(
            "Delete 3 files?", [("ok", "Delete"), ("cancel", "Cancel")], title="Confirm"
        )

        assert isinstance(modal, Modal)
        assert controller.current() is modal
        assert modal.actions == (ModalAction("ok", "Delete"), ModalAction("cancel", "Cancel"))
        assert modal.title == "Confirm"
        assert modal.size == "m"
        assert modal.easy_close is False

    def test_last_writer_wins(self) -> None:
        controller = ModalController()
        controller.open("first")
        controller.open("second")

        assert controller.current().content == "second"  # type: ignore[union-attr]

    def test_close_is_unconditional(self) -> None:
        recorder = ChangeRecorder()
        controller = ModalController(on_change=recorder)
        controller.close()
        controller.open("x")
        controller.close()
        controller.close()

        assert controller.current() is None
        assert recorder.actions("modal") == ["open", "close"]

    def test_resolve(self) -> None:
        controller = ModalController()
        controller.open("Save?", [ModalAction("yes", "Save"), ModalAction("no", "Discard")])

        assert controller.resolve("no") == "no"
        assert controller.current() is None

    def test_resolve_unknown_action(self) -> None:
        controller = ModalController()
        controller.open("Save?", [("yes", "Save")])
        with pytest.raises(ValueError, match="no action"):
            controller.resolve("maybe")
        assert controller.is_open

    def test_resolve_when_closed(self) -> None:
        assert ModalController().resolve("yes") is None

    def test_invalid_size(self) -> None:
        with pytest.raises(ValueError, match="Unknown modal size"):
            ModalController().open("x", size="huge")  # type: ignore[arg-type]

    def test_duplicate_action_ids(self) -> None:
        with pytest.raises(ValueError, match="Duplicate"):
            ModalController().open("x", [("a", "A"), ("a", "B")])

    def test_events(self, collector: FeedbackCollector) -> None:
        controller = ModalController(session_id="s1", collector=collector)
        controller.open("Save?", [("yes", "Save")], title="Unsaved changes")
        controller.resolve("yes")

        events = collector.log.query(event_type=ModalEvent)
        assert [e.action for e in reversed(events)] == ["open", "resolve"]
        assert events[0].resolved_with == "yes"
        assert events[0].title == "Unsaved changes"

    def test_payload(self) -> None:
        recorder = ChangeRecorder()
        controller = ModalController(on_change=recorder)
        controller.open("Body", [("ok", "OK")], size="l")

        _, payload = recorder.changes[-1]
        assert payload["modal"]["content"] == "Body"
        assert payload["modal"]["actions"] == [{"id": "ok", "label": "OK"}]
        assert payload["modal"]["size"] == "l"
