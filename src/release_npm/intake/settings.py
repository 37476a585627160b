"""Form-intake settings, read from ``INTAKE_*`` environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class IntakeSettings(BaseSettings):
    """Settings for the form-intake service.

    Attributes:
        table_name: Logical name of the application store
        admin_email: Operator mailbox notified of new submissions
        from_email: Sender address for notifications
        smtp_host: SMTP relay used for notifications
        smtp_port: SMTP relay port
        allowed_origins: CORS origins
    """

    model_config = SettingsConfigDict(env_prefix="INTAKE_", extra="ignore")

    table_name: str = "community-applications"
    admin_email: str = ""
    from_email: str = ""
    smtp_host: str = "localhost"
    smtp_port: int = Field(default=25, ge=1, le=65535)
    allowed_origins: list[str] = Field(default_factory=lambda: ["*"])

    @property
    def notifications_enabled(self) -> bool:
        return bool(self.admin_email and self.from_email)
