"""Validation of form submissions.

Each form variant has its own required fields. Errors are reported as a
single human-readable message naming the offending fields, which the
HTTP layer returns with status 400.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any


class FormVariant(str, Enum):
    """Supported application forms."""

    COMMUNITY = "community"
    CONTACT = "contact"
    RESTRICTED = "restricted"


REQUIRED_FIELDS: dict[FormVariant, tuple[str, ...]] = {
    FormVariant.COMMUNITY: ("name", "email", "github", "project_idea"),
    FormVariant.CONTACT: ("name", "email", "phone"),
    FormVariant.RESTRICTED: ("name", "email", "phone", "israeli_id", "role"),
}

OPTIONAL_FIELDS: dict[FormVariant, tuple[str, ...]] = {
    FormVariant.COMMUNITY: ("language", "aws_experience", "organization"),
    FormVariant.CONTACT: ("organization",),
    FormVariant.RESTRICTED: (),
}

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# Local mobile numbers: optional trunk 0, then 5 and 7-8 digits (8-10 total).
PHONE_RE = re.compile(r"^0?5\d{7,8}$", re.ASCII)
NATIONAL_ID_RE = re.compile(r"^\d{5,9}$", re.ASCII)


class SubmissionError(ValueError):
    """A submission failed validation."""


def normalize_phone(phone: str) -> str:
    return re.sub(r"[\s-]", "", phone)


def validate_submission(variant: FormVariant, body: Any) -> dict[str, str]:
    """Validate a decoded JSON body for ``variant``.

    Args:
        variant: Form variant
        body: Decoded JSON body

    Returns:
        Cleaned field values (required and present optional fields)

    Raises:
        SubmissionError: With a message naming the invalid fields
    """
    if not isinstance(body, dict):
        raise SubmissionError("Request body must be a JSON object")

    required = REQUIRED_FIELDS[variant]
    missing = [
        name for name in required if not isinstance(body.get(name), str) or not body[name].strip()
    ]
    if missing:
        raise SubmissionError(f"Missing required fields: {', '.join(missing)}")

    fields = {name: body[name].strip() for name in required}
    for name in OPTIONAL_FIELDS[variant]:
        value = body.get(name)
        if isinstance(value, str) and value.strip():
            fields[name] = value.strip()

    if not EMAIL_RE.match(fields["email"]):
        raise SubmissionError("Invalid email address")

    if "phone" in fields:
        phone = normalize_phone(fields["phone"])
        if not PHONE_RE.match(phone):
            raise SubmissionError("Invalid phone number")
        fields["phone"] = phone

    if "israeli_id" in fields and not NATIONAL_ID_RE.match(fields["israeli_id"]):
        raise SubmissionError("Invalid israeli_id: expected 5-9 digits")

    return fields
