from dataclasses import dataclass
from dotenv import load_dotenv
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings
from typing import List

# Load environment variables from .env file
load_dotenv(".env")


class Settings(BaseSettings):
    """Class to store all the settings of the Birthday RSVP application."""

    # ------------------------------
    # Database
    # ------------------------------
    DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./birthday_rsvp.db")
    DATABASE_ECHO: bool = Field(default=False)
    DATABASE_SSL: bool = Field(default=False)

    # ------------------------------
    # Microsoft Graph mail - Optional (mail is disabled without it)
    # ------------------------------
    MICROSOFT_CLIENT_ID: str = Field(default="")
    MICROSOFT_CLIENT_SECRET: str = Field(default="")
    MICROSOFT_TENANT_ID: str = Field(default="")
    MAIL_SENDER: str = Field(default="no-reply@birthday-rsvp.app")
    MAIL_SENDER_NAME: str = Field(default="Birthday RSVP")
    MAIL_REPLY_TO: str = Field(default="")

    # ------------------------------
    # URLs
    # ------------------------------
    FRONTEND_URL: str = Field(default="http://localhost:3000")

    # ------------------------------
    # Environment
    # ------------------------------
    ENVIRONMENT: str = Field(default="development")
    LOG_LEVEL: str = Field(default="INFO")

    # ------------------------------
    # Rate limiting
    # ------------------------------
    RATE_LIMIT_ENABLED: bool = Field(default=True)
    RATE_LIMIT: str = Field(default="20/minute")

    # ------------------------------
    # Computed Fields
    # ------------------------------
    @computed_field
    @property
    def MAIL_ENABLED(self) -> bool:
        """Mail goes out only when all Graph credentials are present."""
        return bool(self.MICROSOFT_TENANT_ID and self.MICROSOFT_CLIENT_ID and self.MICROSOFT_CLIENT_SECRET)

    @computed_field
    @property
    def ALLOWED_ORIGINS(self) -> List[str]:
        """CORS origins for the current environment."""
        if self.ENVIRONMENT == "production":
            return [self.FRONTEND_URL.rstrip("/")]
        return [self.FRONTEND_URL.rstrip("/"), "http://localhost:3000", "http://localhost:5173"]

    class Config:
        """Configuration for the settings class."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@dataclass(frozen=True)
class MailConfig:
    """Sender identity and link base handed to the notifier at construction."""

    sender: str
    sender_name: str
    frontend_url: str
    reply_to: str = ""
    enabled: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "MailConfig":
        return cls(
            sender=settings.MAIL_SENDER,
            sender_name=settings.MAIL_SENDER_NAME,
            frontend_url=settings.FRONTEND_URL.rstrip("/"),
            reply_to=settings.MAIL_REPLY_TO,
            enabled=settings.MAIL_ENABLED,
        )

    def admin_url(self, admin_token: str) -> str:
        return f"{self.frontend_url}/admin/{admin_token}"

    def rsvp_url(self, guest_token: str) -> str:
        return f"{self.frontend_url}/event/{guest_token}"


# Instantiate the settings
settings = Settings()
