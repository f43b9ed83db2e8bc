"""Shared test fixtures for hiss."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from hiss.config import HissConfig
from hiss.observability import EventLog, FeedbackCollector
from hiss.session import FeedbackSession


@dataclass
class ChangeRecorder:
    """Listener that remembers every (kind, payload) it receives."""

    changes: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    def __call__(self, kind: str, payload: dict[str, Any]) -> None:
        self.changes.append((kind, payload))

    def kinds(self) -> list[str]:
        return [kind for kind, _ in self.changes]

    def actions(self, kind: str) -> list[str]:
        return [p.get("action", "") for k, p in self.changes if k == kind]


@dataclass(frozen=True, slots=True)
class MockResponse:
    """Stands in for Chirp's frozen Response."""

    body: str = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"


def mock_response_factory(body: str, status: int, content_type: str) -> MockResponse:
    return MockResponse(body=body, status=status, content_type=content_type)


@pytest.fixture
def collector() -> FeedbackCollector:
    """Quiet collector with its own event log."""
    return FeedbackCollector(EventLog(), verbose=False)


@pytest.fixture
def recorder() -> ChangeRecorder:
    return ChangeRecorder()


@pytest.fixture
def session(collector: FeedbackCollector, recorder: ChangeRecorder) -> FeedbackSession:
    """A feedback session wired to ``collector`` and ``recorder``."""
    s = FeedbackSession("s-test", config=HissConfig(verbose=False), collector=collector)
    s.subscribe(recorder)
    return s
