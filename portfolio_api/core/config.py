"""Application configuration loaded from environment variables.

Settings for database, API, authentication, object storage, contact mail and
rate limiting. Uses pydantic-settings for validation and .env file support.
"""

from typing import Literal

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Known insecure defaults that must not be used in production
# Security: Runtime check in check_production_security() prevents use in production
_INSECURE_DEFAULT_PASSWORD = "portfolio_dev_password"  # nosec B105
_INSECURE_DEFAULT_AUTH_SECRET = "portfolio-dev-secret-do-not-use-in-production"  # nosec B105

# Minimum length for AUTH_SECRET in production (256 bits = 32 bytes)
_MIN_AUTH_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_host: str = "localhost"
    database_port: int = 5432
    database_name: str = "portfolio"
    database_user: str = "portfolio_user"
    database_password: str = _INSECURE_DEFAULT_PASSWORD

    # API
    # 0.0.0.0 binds to all network interfaces (required for Docker containers)
    api_host: str = "0.0.0.0"  # nosec B104
    api_port: int = 8000

    # CORS (Security)
    # Never set to ["*"]: the session cookie requires allow_credentials=True
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    # Authentication
    # The portfolio frontend lives on another origin, so the session cookie
    # defaults to SameSite=None + Secure.
    auth_secret: SecretStr = SecretStr(_INSECURE_DEFAULT_AUTH_SECRET)
    auth_issuer: str = "portfolio-api"
    auth_audience: str = "portfolio-api"
    auth_cookie_name: str = "accessToken"
    auth_cookie_secure: bool = True
    auth_cookie_samesite: Literal["lax", "strict", "none"] = "none"
    auth_cookie_domain: str = ""
    session_ttl_hours: int = 5

    # Object storage
    storage_provider: Literal["cloudinary", "mock"] = "cloudinary"
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: SecretStr = SecretStr("")
    storage_root_folder: str = "portfolio"
    # 0 disables retries: a failed upload surfaces immediately as 500
    storage_max_retries: int = 0
    storage_retry_base_delay_ms: int = 500
    storage_retry_max_delay_ms: int = 5000

    # Uploads
    upload_max_size_mb: int = 2

    # Contact mail (Resend)
    email_from: str = "noreply@portfolio.local"
    resend_api_key: SecretStr = SecretStr("")
    contact_recipient: str = ""

    # Rate Limiting (Security)
    # Format: "count/period" (e.g., "10/minute", "100/hour")
    rate_limit_login: str = "5/15minute"
    rate_limit_contact: str = "3/hour"
    rate_limit_enabled: bool = True  # Disable for testing

    @property
    def database_url(self) -> str:
        """Async database URL for SQLAlchemy."""
        return (
            f"postgresql+asyncpg://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @property
    def database_url_sync(self) -> str:
        """Sync database URL for Alembic."""
        return (
            f"postgresql://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @model_validator(mode="after")
    def check_production_security(self) -> "Settings":
        """Validate security requirements.

        Checks:
        - SameSite=None requires Secure flag (browser requirement)
        - CORS must not use wildcard origin (incompatible with credentials)
        - Session TTL and upload limit must be positive
        - In production: no default database password, a real AUTH_SECRET
          of at least 32 chars, and Cloudinary credentials when the
          Cloudinary provider is selected
        """
        if self.auth_cookie_samesite == "none" and not self.auth_cookie_secure:
            msg = (
                "AUTH_COOKIE_SECURE must be true when AUTH_COOKIE_SAMESITE=none. "
                "Browsers reject SameSite=None cookies without the Secure flag."
            )
            raise ValueError(msg)

        if "*" in self.allowed_origins:
            msg = (
                "ALLOWED_ORIGINS must not contain '*' (wildcard). "
                "This application uses credentials (cookies) which are "
                "incompatible with wildcard CORS origins."
            )
            raise ValueError(msg)

        if self.session_ttl_hours <= 0:
            msg = f"SESSION_TTL_HOURS must be positive. Got: {self.session_ttl_hours}"
            raise ValueError(msg)

        if self.upload_max_size_mb <= 0:
            msg = f"UPLOAD_MAX_SIZE_MB must be positive. Got: {self.upload_max_size_mb}"
            raise ValueError(msg)

        if self.environment == "production":
            if self.database_password == _INSECURE_DEFAULT_PASSWORD:
                msg = (
                    "Cannot use default database password in production. "
                    "Set DATABASE_PASSWORD environment variable to a secure value."
                )
                raise ValueError(msg)

            secret_value = self.auth_secret.get_secret_value()
            if not secret_value or secret_value == _INSECURE_DEFAULT_AUTH_SECRET:
                msg = (
                    "AUTH_SECRET must be set in production. "
                    'Generate with: python -c "import secrets; '
                    'print(secrets.token_hex(32))"'
                )
                raise ValueError(msg)
            if len(secret_value) < _MIN_AUTH_SECRET_LENGTH:
                msg = (
                    f"AUTH_SECRET must be at least {_MIN_AUTH_SECRET_LENGTH} "
                    "characters for adequate security."
                )
                raise ValueError(msg)

            if self.storage_provider == "cloudinary" and not (
                self.cloudinary_cloud_name
                and self.cloudinary_api_key
                and self.cloudinary_api_secret.get_secret_value()
            ):
                msg = (
                    "CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY and "
                    "CLOUDINARY_API_SECRET must be set in production."
                )
                raise ValueError(msg)

        return self


settings = Settings()
