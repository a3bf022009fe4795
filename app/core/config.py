from pydantic_settings import BaseSettings
from dotenv import load_dotenv


load_dotenv()


class Settings(BaseSettings):
    app_name: str = "LensMatch API"
    debug: bool = False
    database_url: str = "sqlite:///./lensmatch.db"
    host: str = "127.0.0.1"
    port: int = 8000
    secret_key: str = ""
    access_token_expire_minutes: int = 15
    refresh_token_expire_minutes: int = 60 * 24 * 7
    allowed_hosts: str = ""
    cookie_secure: bool = False
    password_hash_rounds: int = 12
    log_file: str = "logs/application.log"

    # One-time passcodes
    otp_expire_minutes: int = 10
    otp_max_attempts: int = 5

    # Inquiries & matching
    match_limit: int = 10
    inquiry_min_budget: float = 0

    # Bootstrap admin created by seed.py
    seed_admin_email: str = "admin@lensmatch.app"
    seed_admin_password: str = ""


settings = Settings()

if not settings.secret_key:
    raise RuntimeError("Secret key not configured.")
