"""Application configuration using Pydantic Settings."""
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    app_name: str = "School Period Log"
    debug: bool = False

    # School calendar: "today", calendar days and export dates are all in this zone
    school_timezone: str = "Asia/Kolkata"

    # MongoDB (users / logs tables)
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "periodlog"

    # JWT
    jwt_secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60
    jwt_refresh_token_expire_days: int = 30

    # Arithmetic challenge on the auth forms
    challenge_expire_minutes: int = 10

    # Firebase Authentication
    firebase_credentials_path: str = ""  # service account JSON; needed for sign-out (token revocation)
    firebase_project_id: str = ""  # enough for ID-token verification without a service account
    firebase_web_api_key: str = ""  # Identity Toolkit REST: sign-up, password sign-in, emails
    identity_toolkit_url: str = "https://identitytoolkit.googleapis.com/v1"

    # Gemini
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"

    # Analytics
    leaderboard_size: int = 5
    trend_days: int = 7

    # CORS (comma-separated origins, e.g. "https://logs.school.edu,http://localhost:5173")
    cors_origins: str = "http://localhost:5173"

    @model_validator(mode="after")
    def _validate_production_secrets(self):
        if not self.debug:
            if self.jwt_secret_key in ("change-me-in-production", ""):
                raise ValueError(
                    "JWT_SECRET_KEY must be set to a strong secret when DEBUG is not enabled. "
                    "Generate one with: python -c \"import secrets; print(secrets.token_hex(32))\""
                )
        return self


settings = Settings()
