"""Feedback side channels — state mutated by computations, read by renderers.

Field feedback, progress channels, notifications and the modal dialog of
one session.  ``hiss.session.FeedbackSession`` bundles all four.
"""

from hiss.feedback.fields import FeedbackStore, FieldFeedback
from hiss.feedback.modal import Modal, ModalAction, ModalController
from hiss.feedback.notifications import Notification, NotificationCenter
from hiss.feedback.progress import (
    ProgressAdvanced,
    ProgressChannel,
    ProgressFinished,
    ProgressRegistry,
    ProgressReporter,
    ProgressStarted,
)

__all__ = [
    "FeedbackStore",
    "FieldFeedback",
    "Modal",
    "ModalAction",
    "ModalController",
    "Notification",
    "NotificationCenter",
    "ProgressAdvanced",
    "ProgressChannel",
    "ProgressFinished",
    "ProgressRegistry",
    "ProgressReporter",
    "ProgressStarted",
]
