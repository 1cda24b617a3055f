"""
Application Settings
Single configuration value loaded from the environment and passed to
components at construction time.
"""
import os
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel

# Load environment variables
load_dotenv()


class Settings(BaseModel):
    """Runtime configuration for the FollowersCart backend"""
    app_name: str = "FollowersCart"
    app_version: str = "1.0.0"
    debug: bool = True
    frontend_url: str = "http://localhost:3000"
    log_level: str = "INFO"

    # MongoDB
    mongodb_url: str = "mongodb://localhost:27017"
    database_name: str = "followerscart"

    # SMTP
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    email_from: Optional[str] = None
    email_from_name: Optional[str] = None

    # Owner inbox for admin notifications (optional)
    admin_receiving_email: Optional[str] = None

    currency: str = "PKR"

    @property
    def email_enabled(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_password)

    @property
    def sender_address(self) -> Optional[str]:
        return self.email_from or self.smtp_user

    @property
    def sender_name(self) -> str:
        return self.email_from_name or self.app_name

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables"""
        app_name = os.getenv("APP_NAME", "FollowersCart")
        return cls(
            app_name=app_name,
            app_version=os.getenv("APP_VERSION", "1.0.0"),
            debug=os.getenv("DEBUG", "True").lower() == "true",
            frontend_url=os.getenv("FRONTEND_URL", "http://localhost:3000"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            mongodb_url=os.getenv("MONGODB_URL", "mongodb://localhost:27017"),
            database_name=os.getenv("DATABASE_NAME", "followerscart"),
            smtp_host=os.getenv("SMTP_HOST") or None,
            smtp_port=int(os.getenv("SMTP_PORT", "587")),
            smtp_user=os.getenv("SMTP_USER") or None,
            smtp_password=os.getenv("SMTP_PASSWORD") or None,
            email_from=os.getenv("EMAIL_FROM") or None,
            email_from_name=os.getenv("EMAIL_FROM_NAME") or None,
            admin_receiving_email=os.getenv("ADMIN_RECEIVING_EMAIL") or None,
            currency=os.getenv("CURRENCY", "PKR"),
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Settings dependency (loaded once per process)"""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
