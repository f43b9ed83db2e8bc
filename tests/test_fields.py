"""Tests for hiss.feedback.fields — per-input feedback."""

from __future__ import annotations

import pytest

from hiss.feedback.fields import FeedbackStore, FieldFeedback
from hiss.signals import GuardSignal, guard
from tests.conftest import ChangeRecorder


class TestFeedbackStore:
    """set(), clear() and the read accessors."""

    def test_set_and_current(self) -> None:
        store = FeedbackStore()
        assert store.set("n", "danger", "Must be even") is True

        entry = store.current("n")
        assert entry == FieldFeedback(input_id="n", severity="danger", message="Must be even")
        assert entry.visible is True  # type: ignore[union-attr]

    def test_set_is_idempotent(self) -> None:
        recorder = ChangeRecorder()
        store = FeedbackStore(on_change=recorder)
        store.set("n", "warning", "odd")
        assert store.set("n", "warning", "odd") is False
        assert len(recorder.changes) == 1

    def test_latest_write_wins(self) -> None:
        store = FeedbackStore()
        store.set("n", "warning", "odd")
        store.set("n", "danger", "negative")
        assert store.current("n").severity == "danger"  # type: ignore[union-attr]
        assert len(store) == 1

    def test_none_severity_clears(self) -> None:
        store = FeedbackStore()
        store.set("n", "danger", "x")
        assert store.set("n", "none", "") is True
        assert store.current("n") is None

    def test_clear_without_feedback(self) -> None:
        recorder = ChangeRecorder()
        store = FeedbackStore(on_change=recorder)
        assert store.clear("n") is False
        assert store.set("n", "none") is False
        assert recorder.changes == []

    def test_ids_independent(self) -> None:
        store = FeedbackStore()
        store.danger("a", "bad a")
        store.warning("b", "meh b")
        store.clear("a")

        assert store.current("a") is None
        assert store.current("b").message == "meh b"  # type: ignore[union-attr]

    def test_success_shorthand(self) -> None:
        store = FeedbackStore()
        store.success("email", "Looks good")
        assert store.current("email").severity == "success"  # type: ignore[union-attr]

    def test_unknown_severity(self) -> None:
        store = FeedbackStore()
        with pytest.raises(ValueError, match="Unknown feedback severity"):
            store.set("n", "error")  # type: ignore[arg-type]

    def test_snapshot_is_a_copy(self) -> None:
        store = FeedbackStore()
        store.danger("a")
        snap = store.snapshot()
        store.clear("a")
        assert "a" in snap
        assert store.snapshot() == {}

    def test_clear_payload(self) -> None:
        recorder = ChangeRecorder()
        store = FeedbackStore(on_change=recorder)
        store.danger("a", "x")
        store.clear("a")

        kind, payload = recorder.changes[-1]
        assert kind == "feedback"
        assert payload == {"input_id": "a", "severity": "none", "message": "", "visible": False}


class TestToggle:
    """The validation-then-guard pattern."""

    def _half(self, store: FeedbackStore, n: int) -> float:
        even = n % 2 == 0
        store.toggle("n", not even, "warning", "Please select an even number")
        guard(even)
        return n / 2

    def test_even_input(self) -> None:
        store = FeedbackStore()
        assert self._half(store, 4) == 2
        assert store.current("n") is None

    def test_odd_input_shows_feedback_and_halts(self) -> None:
        store = FeedbackStore()
        with pytest.raises(GuardSignal):
            self._half(store, 3)
        entry = store.current("n")
        assert entry is not None
        assert entry.message == "Please select an even number"

    def test_feedback_cleared_when_fixed(self) -> None:
        store = FeedbackStore()
        with pytest.raises(GuardSignal):
            self._half(store, 3)
        self._half(store, 6)
        assert store.current("n") is None

    def test_toggle_returns_show(self) -> None:
        store = FeedbackStore()
        assert store.toggle("n", "yes", "danger") is True
        assert store.toggle("n", "", "danger") is False
