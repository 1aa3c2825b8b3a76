# tenders_map/core/config.py
from __future__ import annotations
from typing import Optional, List
from urllib.parse import quote_plus
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from starlette.middleware.cors import CORSMiddleware


class Settings(BaseSettings):
    # Pydantic Settings
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",          # ignore unknown env keys safely
        case_sensitive=False,
    )

    # --- App ---
    app_name: str = Field("Tenders Map", alias="APP_NAME")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # --- Security / JWT ---
    # No default: the app refuses to start without a signing secret.
    secret_key: str = Field(..., alias="JWT_SECRET", min_length=1)
    algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    token_expire_days: int = Field(30, alias="TOKEN_EXPIRE_DAYS", ge=1)
    bcrypt_rounds: int = Field(12, alias="BCRYPT_ROUNDS", ge=10, le=16)

    # --- Access policy ---
    registration_enabled: bool = Field(False, alias="REGISTRATION_ENABLED")

    # --- Admin seed ---
    admin_email: Optional[str] = Field(None, alias="ADMIN_EMAIL")
    admin_password: Optional[str] = Field(None, alias="ADMIN_PASSWORD")

    # --- Uploads ---
    uploads_dir: str = Field("uploads", alias="UPLOADS_DIR")
    max_upload_mb: int = Field(10, alias="MAX_UPLOAD_MB", ge=1)

    # --- Database ---
    database_url: Optional[str] = Field(None, alias="DATABASE_URL")  # full URL override
    db_user: str = Field("postgres", alias="PGUSER")
    db_password: str = Field("", alias="PGPASSWORD")
    db_host: str = Field("127.0.0.1", alias="PGHOST")
    db_port: int = Field(5432, alias="PGPORT")
    db_name: str = Field("tenders_map", alias="PGDATABASE")

    # --- CORS ---
    # Comma-separated in .env; "*" allows any origin
    allowed_origins: str = Field("*", alias="ALLOWED_ORIGINS")

    @property
    def origins(self) -> List[str]:
        return [s.strip() for s in self.allowed_origins.split(",") if s.strip()]

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            # Hosted Postgres providers hand out "postgres://" URLs
            if self.database_url.startswith("postgres://"):
                return "postgresql+psycopg2://" + self.database_url[len("postgres://"):]
            return self.database_url
        auth = self.db_user
        if self.db_password:
            auth += f":{quote_plus(self.db_password)}"
        return f"postgresql+psycopg2://{auth}@{self.db_host}:{self.db_port}/{self.db_name}"


settings = Settings()


def configure_cors(app):
    origins = settings.origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # credentials are not allowed together with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
