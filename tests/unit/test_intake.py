"""Tests for the application form intake service."""

from __future__ import annotations

import itertools
import smtplib
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from release_npm.intake.app import create_app
from release_npm.intake.notify import (
    NotifyError,
    NullNotifier,
    SmtpNotifier,
    format_notification,
    notifier_from_settings,
)
from release_npm.intake.settings import IntakeSettings
from release_npm.intake.store import (
    ApplicationRecord,
    DuplicateApplicationError,
    InMemoryApplicationStore,
)
from release_npm.intake.validation import (
    FormVariant,
    SubmissionError,
    normalize_phone,
    validate_submission,
)
from release_npm.result import Err, Ok

COMMUNITY = {
    "name": "Dana",
    "email": "dana@example.com",
    "github": "dana",
    "project_idea": "A CLI for release notes",
}

CONTACT = {"name": "Avi", "email": "avi@example.com", "phone": "050-123-4567"}


class RecordingNotifier:
    """Notifier that records calls and returns a fixed outcome."""

    def __init__(self, outcome=None) -> None:
        self.outcome = outcome or Ok(None)
        self.records: list[ApplicationRecord] = []

    def notify(self, record):
        self.records.append(record)
        return self.outcome


@pytest.fixture
def store() -> InMemoryApplicationStore:
    return InMemoryApplicationStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def client(store: InMemoryApplicationStore, notifier: RecordingNotifier) -> TestClient:
    counter = itertools.count(1)
    app = create_app(
        settings=IntakeSettings(),
        store=store,
        notifier=notifier,
        id_factory=lambda: f"app-{next(counter)}",
    )
    return TestClient(app)


class TestValidateSubmission:
    """Tests for validate_submission()."""

    def test_valid_community(self):
        fields = validate_submission(FormVariant.COMMUNITY, {**COMMUNITY, "language": " he "})

        assert fields["github"] == "dana"
        assert fields["language"] == "he"

    def test_missing_fields_named(self):
        """Every missing field is listed."""
        with pytest.raises(SubmissionError) as exc_info:
            validate_submission(FormVariant.COMMUNITY, {"name": "Dana", "github": ""})

        assert str(exc_info.value) == "Missing required fields: email, github, project_idea"

    def test_unknown_fields_dropped(self):
        fields = validate_submission(FormVariant.COMMUNITY, {**COMMUNITY, "admin": "yes"})
        assert "admin" not in fields

    def test_invalid_email(self):
        with pytest.raises(SubmissionError, match="email"):
            validate_submission(FormVariant.COMMUNITY, {**COMMUNITY, "email": "dana@"})

    @pytest.mark.parametrize("phone", ["0501234567", "050-123-4567", "50 123 4567", "051234567"])
    def test_valid_phone(self, phone: str):
        fields = validate_submission(FormVariant.CONTACT, {**CONTACT, "phone": phone})
        assert fields["phone"] == normalize_phone(phone)

    @pytest.mark.parametrize("phone", ["12345", "0401234567", "05012345678", "abc"])
    def test_invalid_phone(self, phone: str):
        with pytest.raises(SubmissionError, match="phone"):
            validate_submission(FormVariant.CONTACT, {**CONTACT, "phone": phone})

    @pytest.mark.parametrize(("national_id", "ok"), [("12345", True), ("123456789", True),
                                                     ("1234", False), ("1234567890", False),
                                                     ("12a45", False)])
    def test_national_id(self, national_id: str, ok: bool):
        body = {**CONTACT, "israeli_id": national_id, "role": "mentor"}
        if ok:
            assert validate_submission(FormVariant.RESTRICTED, body)["israeli_id"] == national_id
        else:
            with pytest.raises(SubmissionError, match="israeli_id"):
                validate_submission(FormVariant.RESTRICTED, body)

    def test_non_object_body(self):
        with pytest.raises(SubmissionError):
            validate_submission(FormVariant.CONTACT, ["not", "an", "object"])


class TestSubmitEndpoint:
    """Tests for POST /applications/{variant}."""

    def test_accepts_valid_submission(
        self, client: TestClient, store: InMemoryApplicationStore, notifier: RecordingNotifier
    ):
        response = client.post("/applications/community", json=COMMUNITY)

        assert response.status_code == 200
        assert response.json() == {"message": "Application received", "id": "app-1"}
        record = store.get("app-1")
        assert record is not None
        assert record.status == "pending"
        assert record.variant == "community"
        assert notifier.records == [record]

    def test_missing_email_is_400(self, client: TestClient, store: InMemoryApplicationStore):
        """A missing field is rejected and nothing is stored."""
        body = {k: v for k, v in COMMUNITY.items() if k != "email"}

        response = client.post("/applications/community", json=body)

        assert response.status_code == 400
        assert "email" in response.json()["error"]
        assert len(store) == 0

    def test_invalid_json_is_400(self, client: TestClient):
        response = client.post(
            "/applications/contact",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Request body must be valid JSON"}

    def test_unknown_form_is_404(self, client: TestClient):
        response = client.post("/applications/admin", json=CONTACT)
        assert response.status_code == 404

    def test_duplicate_id_never_overwrites(self, store: InMemoryApplicationStore):
        """A colliding id fails the second submission and keeps the first."""
        client = TestClient(
            create_app(
                settings=IntakeSettings(),
                store=store,
                notifier=NullNotifier(),
                id_factory=lambda: "fixed-id",
            )
        )

        first = client.post("/applications/community", json=COMMUNITY)
        second = client.post(
            "/applications/community", json={**COMMUNITY, "name": "Mallory"}
        )

        assert first.status_code == 200
        assert second.status_code == 500
        assert store.get("fixed-id").fields["name"] == "Dana"
        assert len(store) == 1

    def test_notification_failure_still_succeeds(self, store: InMemoryApplicationStore):
        """A failed notification is logged, not surfaced."""
        client = TestClient(
            create_app(
                settings=IntakeSettings(),
                store=store,
                notifier=RecordingNotifier(Err(NotifyError("relay down"))),
            )
        )

        response = client.post("/applications/contact", json=CONTACT)

        assert response.status_code == 200
        assert len(store) == 1

    def test_storage_failure_is_500(self, notifier: RecordingNotifier):
        broken = MagicMock()
        broken.put_if_absent.side_effect = RuntimeError("table missing")
        client = TestClient(create_app(settings=IntakeSettings(), store=broken, notifier=notifier))

        response = client.post("/applications/contact", json=CONTACT)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        assert notifier.records == []

    def test_cors_preflight(self, client: TestClient):
        response = client.options(
            "/applications/contact",
            headers={
                "Origin": "https://example.org",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert "access-control-allow-origin" in response.headers


class TestStore:
    """Tests for InMemoryApplicationStore."""

    def test_put_if_absent(self):
        store = InMemoryApplicationStore()
        record = ApplicationRecord(id="a", variant="contact", fields={"name": "x"})

        store.put_if_absent(record)
        with pytest.raises(DuplicateApplicationError):
            store.put_if_absent(record.model_copy(update={"fields": {"name": "y"}}))

        assert store.get("a").fields == {"name": "x"}


class TestNotify:
    """Tests for notifiers."""

    def test_format_notification(self):
        record = ApplicationRecord(id="app-7", variant="community", fields=COMMUNITY)

        subject, body = format_notification(record)

        assert subject == "New community application: Dana (@dana)"
        assert "Github: https://github.com/dana" in body
        assert body.index("Project Idea:") > body.index("Email:")
        assert "Application ID: app-7" in body

    def test_disabled_without_mailbox(self):
        assert isinstance(notifier_from_settings(IntakeSettings()), NullNotifier)

    def test_enabled_with_mailbox(self):
        settings = IntakeSettings(admin_email="ops@example.com", from_email="bot@example.com")
        assert isinstance(notifier_from_settings(settings), SmtpNotifier)

    @patch("release_npm.intake.notify.smtplib.SMTP")
    def test_smtp_failure_is_err(self, mock_smtp: MagicMock):
        mock_smtp.side_effect = smtplib.SMTPConnectError(421, "busy")
        settings = IntakeSettings(admin_email="ops@example.com", from_email="bot@example.com")
        record = ApplicationRecord(id="a", variant="contact", fields=CONTACT)

        outcome = SmtpNotifier(settings).notify(record)

        assert outcome.is_err()
        assert "busy" in outcome.error.message

    @patch("release_npm.intake.notify.smtplib.SMTP")
    def test_smtp_success(self, mock_smtp: MagicMock):
        settings = IntakeSettings(admin_email="ops@example.com", from_email="bot@example.com")
        record = ApplicationRecord(id="a", variant="contact", fields=CONTACT)

        outcome = SmtpNotifier(settings).notify(record)

        assert outcome.is_ok()
        sent = mock_smtp.return_value.__enter__.return_value.send_message.call_args.args[0]
        assert sent["To"] == "ops@example.com"
