from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    SESSION_SECRET: str = "soccer-team-attendance-app-secret"
    SESSION_MAX_AGE: int = 7 * 24 * 60 * 60  # 1 week, in seconds

    STORAGE_BACKEND: str = "memory"  # "memory" or "sql"
    DATABASE_URL: str = "sqlite:///./attendance.db"

    GOOGLE_CLIENT_ID: str = "YOUR_GOOGLE_CLIENT_ID_HERE"
    GOOGLE_CLIENT_SECRET: str = "YOUR_GOOGLE_CLIENT_SECRET_HERE"
    MICROSOFT_CLIENT_ID: str = "YOUR_MICROSOFT_CLIENT_ID_HERE"
    MICROSOFT_CLIENT_SECRET: str = "YOUR_MICROSOFT_CLIENT_SECRET_HERE"

    # Users logging in with one of these emails are created as admins
    ADMIN_EMAILS: List[str] = []

    MOCK_LOGIN_ENABLED: bool = True
    SEED_DEMO_DATA: bool = False
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
