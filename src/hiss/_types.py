"""Shared type definitions for hiss."""

from collections.abc import Callable
from typing import Any, Literal

# Identifier of a UI input (form field, slider, ...)
type InputId = str

# Identifier of a user session
type SessionId = str

# Opaque handle ids
type ProgressId = str
type NotificationId = str

# Field feedback severity; "none" clears feedback
type Severity = Literal["none", "success", "warning", "danger"]

# Notification flavour, a styling hint for the rendering layer
type NotificationType = Literal["default", "message", "warning", "error"]

# Modal dialog width hint
type ModalSize = Literal["s", "m", "l", "xl"]

# Kinds of state change pushed to the rendering layer
type ChangeKind = Literal["feedback", "progress", "notification", "modal"]

# Listener called with (kind, payload) after a visible state change
type ChangeListener = Callable[[ChangeKind, dict[str, Any]], None]

# Listener that also receives the session id (registries, broadcasters)
type SessionChangeListener = Callable[[SessionId, ChangeKind, dict[str, Any]], None]
