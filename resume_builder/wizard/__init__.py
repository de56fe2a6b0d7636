from .controller import WizardController
from .notifications import Notification, NotificationSink, RecordingNotifier
from .steps import LAST_STEP, STEPS, WizardStep

__all__ = [
    "LAST_STEP",
    "Notification",
    "NotificationSink",
    "RecordingNotifier",
    "STEPS",
    "WizardController",
    "WizardStep",
]
