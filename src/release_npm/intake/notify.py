"""Operator notification for new submissions.

Notifying is a side effect that may fail without failing the submission:
notifiers return a Result instead of raising, and the caller logs an Err
and moves on.
"""

from __future__ import annotations

import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import TYPE_CHECKING, Protocol

from release_npm.result import Err, Ok, Result

if TYPE_CHECKING:
    from release_npm.intake.settings import IntakeSettings
    from release_npm.intake.store import ApplicationRecord


@dataclass(frozen=True)
class NotifyError:
    """Why a notification was not delivered."""

    message: str


class Notifier(Protocol):
    def notify(self, record: ApplicationRecord) -> Result[None, NotifyError]: ...


class NullNotifier:
    """Used when no operator mailbox is configured."""

    def notify(self, record: ApplicationRecord) -> Result[None, NotifyError]:
        return Ok(None)


def format_notification(record: ApplicationRecord) -> tuple[str, str]:
    """Build the subject and plain-text body for ``record``."""
    fields = record.fields
    name = fields.get("name", "unknown")
    github = fields.get("github")
    subject = f"New {record.variant} application: {name}"
    if github:
        subject += f" (@{github})"

    lines = ["New application received", ""]
    for key, value in fields.items():
        if key == "project_idea":
            continue
        label = key.replace("_", " ").capitalize()
        if key == "github":
            value = f"https://github.com/{value}"
        lines.append(f"{label}: {value}")
    if "project_idea" in fields:
        lines += ["", "Project Idea:", fields["project_idea"]]
    lines += [
        "",
        f"Application ID: {record.id}",
        f"Submitted: {record.submitted_at.isoformat()}",
    ]
    return subject, "\n".join(lines)


class SmtpNotifier:
    """Sends a plain-text email to the operator mailbox."""

    def __init__(self, settings: IntakeSettings, timeout: float = 10.0) -> None:
        self.settings = settings
        self.timeout = timeout

    def notify(self, record: ApplicationRecord) -> Result[None, NotifyError]:
        subject, body = format_notification(record)
        message = EmailMessage()
        message["From"] = self.settings.from_email
        message["To"] = self.settings.admin_email
        message["Subject"] = subject
        message.set_content(body)

        try:
            with smtplib.SMTP(
                self.settings.smtp_host, self.settings.smtp_port, timeout=self.timeout
            ) as smtp:
                smtp.send_message(message)
        except (OSError, smtplib.SMTPException) as e:
            return Err(NotifyError(str(e)))
        return Ok(None)


def notifier_from_settings(settings: IntakeSettings) -> Notifier:
    if settings.notifications_enabled:
        return SmtpNotifier(settings)
    return NullNotifier()
