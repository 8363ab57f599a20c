from __future__ import annotations
import os
from pydantic import BaseModel

class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "dev")
    app_name: str = os.getenv("APP_NAME", "scavenger-api")
    app_display_name: str = os.getenv("APP_DISPLAY_NAME", "Scavenger Hunt")
    app_version: str = os.getenv("APP_VERSION", "0.1.0")
    git_sha: str = os.getenv("GIT_SHA", "dev")
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    database_url: str = os.getenv("DATABASE_URL", "postgresql+asyncpg://postgres:postgres@db:5432/scavenger_dev")

    # Photo storage: "s3" (MinIO / any S3 API) or "local" (disk under upload_dir)
    storage_backend: str = os.getenv("STORAGE_BACKEND", "s3")
    upload_dir: str = os.getenv("UPLOAD_DIR", "uploads")
    s3_endpoint: str = os.getenv("S3_ENDPOINT", "http://minio:9000")
    s3_access_key: str = os.getenv("S3_ACCESS_KEY", "minioadmin")
    s3_secret_key: str = os.getenv("S3_SECRET_KEY", "minioadmin")
    s3_bucket_uploads: str = os.getenv("S3_BUCKET_UPLOADS", "scavenger-uploads-dev")
    max_upload_bytes: int = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))  # 10 MB

    # Auth
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret-change-me")
    access_ttl_min: int = int(os.getenv("ACCESS_TTL_MIN", "1440"))  # 24h
    admin_setup_key: str = os.getenv("ADMIN_SETUP_KEY", "")
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

settings = Settings()
