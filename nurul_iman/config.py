from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./nurul_iman.db"
    auto_create_tables: bool = True

    # JWT
    secret_key: str = "your-secret-key-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days

    # CORS (comma separated, "*" = any origin)
    cors_origins: str = "*"

    # Logging
    log_level: str = "INFO"

    # Banner storage: "s3" or "local"
    storage_backend: str = "s3"
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_region: str = "ap-northeast-1"
    s3_bucket: str = "masjid-nurul-iman"
    # empty = https://<bucket>.s3.<region>.amazonaws.com
    s3_public_base_url: str = ""
    # Local storage folder, served under /images (empty = backend/images)
    local_storage_dir: str = ""

    # Max banner size in bytes (1 MB)
    max_banner_bytes: int = 1_048_576

    # Authorization: "canonical" or "legacy"
    authorization_policy: str = "canonical"

    # Role given to self-registered accounts
    default_role: str = "user"
    # Roles seeded at startup
    seed_roles: str = "super-admin,admin,ustadz,user"

    class Config:
        env_file = ".env"

    @property
    def bucket_base_url(self) -> str:
        if self.s3_public_base_url:
            return self.s3_public_base_url.rstrip("/") + "/"
        return f"https://{self.s3_bucket}.s3.{self.aws_region}.amazonaws.com/"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def seed_role_names(self) -> list[str]:
        return [r.strip() for r in self.seed_roles.split(",") if r.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
