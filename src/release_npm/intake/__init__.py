"""Form-intake service: validate, store once, notify best-effort."""

from __future__ import annotations

from release_npm.intake.app import create_app
from release_npm.intake.notify import NotifyError, NullNotifier, SmtpNotifier
from release_npm.intake.settings import IntakeSettings
from release_npm.intake.store import (
    ApplicationRecord,
    DuplicateApplicationError,
    InMemoryApplicationStore,
)
from release_npm.intake.validation import FormVariant, SubmissionError, validate_submission

__all__ = [
    "ApplicationRecord",
    "DuplicateApplicationError",
    "FormVariant",
    "InMemoryApplicationStore",
    "IntakeSettings",
    "NotifyError",
    "NullNotifier",
    "SmtpNotifier",
    "SubmissionError",
    "create_app",
    "validate_submission",
]
