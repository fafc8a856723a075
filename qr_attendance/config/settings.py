from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for account creation/deletion

    # Tables and buckets as deployed in the Supabase project
    profiles_table: str = "perfiles"
    roles_table: str = "roles_usuarios"
    faculties_table: str = "facultades"
    careers_table: str = "carreras"
    attendance_table: str = "asistencias"
    avatars_bucket: str = "avatars"
    register_attendance_rpc: str = "register_attendance"

    # Session / routing
    admin_role_name: str = "admin"
    sign_in_path: str = "/auth"
    landing_path: str = "/me"
    password_reset_redirect_url: Optional[str] = None

    # App
    app_name: str = "qr-attendance-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "*"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()
