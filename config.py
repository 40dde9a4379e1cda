"""Backend settings."""

import secrets
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database (postgres:// and postgresql:// URLs are rewritten to asyncpg)
    database_url: str = "sqlite+aiosqlite:///./portero_residencial.db"
    database_ssl: bool = False  # Managed Postgres (Supabase, RDS) needs True
    debug: bool = False

    # Used to build invitation links
    public_base_url: str = "http://localhost:3000"
    allowed_origins: List[str] = Field(
        default_factory=lambda: [
            *[f"http://localhost:{port}" for port in range(3000, 3007)],
            *[f"http://127.0.0.1:{port}" for port in range(3000, 3007)],
        ]
    )

    # Identity provider. A random secret means sessions do not survive restarts.
    jwt_secret: str = Field(default_factory=lambda: secrets.token_urlsafe(32))
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours
    bcrypt_rounds: int = 12
    min_password_length: int = 6

    # Access policy
    qr_validity_hours: int = 4
    invitation_validity_days: int = 7
    qr_payload_max_attempts: int = 5

    # When True, GET /api/qr/validate also writes to the access log
    # and materializes expiry, like the POST variant.
    audit_lightweight_validation: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
