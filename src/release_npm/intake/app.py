"""HTTP endpoint for application form submissions.

Example:
    >>> from release_npm.intake import create_app
    >>> app = create_app()

Run with any ASGI server, e.g. ``uvicorn release_npm.intake.app:create_app --factory``.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from release_npm.intake.notify import Notifier, notifier_from_settings
from release_npm.intake.settings import IntakeSettings
from release_npm.intake.store import (
    ApplicationRecord,
    ApplicationStore,
    DuplicateApplicationError,
    InMemoryApplicationStore,
)
from release_npm.intake.validation import FormVariant, SubmissionError, validate_submission
from release_npm.logging import get_logger
from release_npm.result import Err

logger = get_logger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(
    settings: IntakeSettings | None = None,
    store: ApplicationStore | None = None,
    notifier: Notifier | None = None,
    id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
) -> FastAPI:
    """Build the intake application.

    Args:
        settings: Service settings (read from the environment when None)
        store: Application storage (in-memory when None)
        notifier: Operator notifier (derived from settings when None)
        id_factory: Generates record ids

    Returns:
        Configured FastAPI app
    """
    settings = settings or IntakeSettings()
    if store is None:
        store = InMemoryApplicationStore(settings.table_name)
    if notifier is None:
        notifier = notifier_from_settings(settings)

    app = FastAPI(title="Application intake")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.state.store = store
    app.state.notifier = notifier

    @app.post("/applications/{variant}")
    async def submit(variant: str, request: Request) -> JSONResponse:
        try:
            form = FormVariant(variant)
        except ValueError:
            return _error(404, f"Unknown form: {variant}")

        try:
            body = json.loads(await request.body())
        except (json.JSONDecodeError, UnicodeDecodeError):
            return _error(400, "Request body must be valid JSON")

        try:
            fields = validate_submission(form, body)
        except SubmissionError as e:
            return _error(400, str(e))

        record = ApplicationRecord(id=id_factory(), variant=form.value, fields=fields)
        try:
            store.put_if_absent(record)
        except DuplicateApplicationError:
            logger.error("Application id collision: %s", record.id)
            return _error(500, "Internal server error")
        except Exception:
            logger.exception("Error storing application")
            return _error(500, "Internal server error")

        outcome = notifier.notify(record)
        if isinstance(outcome, Err):
            logger.warning("Notification failed for %s: %s", record.id, outcome.error.message)

        return JSONResponse(
            status_code=200,
            content={"message": "Application received", "id": record.id},
        )

    return app
