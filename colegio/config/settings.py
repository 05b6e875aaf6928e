from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # Database
    database_url: str
    db_pool_size: int = 20
    db_max_overflow: int = 40
    db_connect_timeout: int = 60  # segundos de espera al arrancar

    # JWT
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    # Authentication
    disable_auth: bool = False  # True devuelve una sesión administrativa simulada

    # Environment
    environment: str = "development"
    log_level: str = "INFO"
    seed_on_startup: bool = True
    seed_admin_email: str = "admin@sistema.edu.pe"
    seed_admin_password: str = "Admin123!"

    # CORS
    cors_origins: List[str] = ["*"]

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 100

    # Certificados
    public_base_url: str = "https://sistema-escolar.com"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
