from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Bypasses RLS, preferred for user/member writes

    # Session tokens
    jwt_secret: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    token_expire_days: int = 60

    # Password hashing
    password_hash_rounds: int = 10

    # Google OAuth profile endpoint
    google_profile_url: str = "https://www.googleapis.com/oauth2/v2/userinfo"
    google_timeout_seconds: float = 10.0

    # SMTP (will read from uppercase env vars automatically)
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    smtp_timeout_seconds: float = 30.0
    mail_from: Optional[str] = None  # Defaults to smtp_user

    # Password recovery
    recovery_code_length: int = 5

    # App
    app_name: str = "troopay-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def mail_sender(self) -> Optional[str]:
        return self.mail_from or self.smtp_user

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
