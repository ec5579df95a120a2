from pydantic_settings import BaseSettings, SettingsConfigDict

from tms_rbac.models.enums import Role
from tms_rbac.rbac.hierarchy import DEFAULT_ROLE_ORDER

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    app_host: str = "0.0.0.0"
    app_port: int = 8000

    database_url: str = "postgresql+psycopg://app:app@db:5432/app"
    redis_url: str = "redis://redis:6379/0"

    jwt_secret: str = "dev-secret-change-me-at-least-32-bytes"
    jwt_issuer: str = "tms-rbac-api"
    jwt_audience: str = "tms-rbac-api"
    jwt_expires_minutes: int = 15

    bcrypt_rounds: int = 10

    # highest first; every role exactly once
    role_hierarchy: list[Role] = list(DEFAULT_ROLE_ORDER)

    log_level: str = "INFO"
    log_json: bool = False

    # rate limiting (redis)
    rate_limit_enabled: bool = True
    rate_limit_login_per_min: int = 20

settings = Settings()
