from pydantic_settings import BaseSettings
from typing import List, Optional
from urllib.parse import quote_plus

class Settings(BaseSettings):
    env: str = "local"
    log_level: str = "INFO"

    database_url: Optional[str] = None
    postgres_user: Optional[str] = None
    postgres_password: Optional[str] = None
    postgres_db: Optional[str] = None
    postgres_host: str = "localhost"
    postgres_port: str = "5432"

    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    stripe_timeout_seconds: int = 10
    stripe_webhook_tolerance: int = 300

    domain: str = "http://localhost:4000"

    exchange_rate_url: str = (
        "https://api.exchangerate.host/latest"
        "?base=USD&symbols=USD,KES,EUR,GBP,CAD,INR"
    )
    exchange_rate_timeout_seconds: int = 5
    exchange_rate_cache_ttl: int = 600

    cart_cookie_name: str = "cart_id"
    admin_password: str = "admin123"

    cors_origins: List[str] = [
        "http://localhost:4000",
        "http://localhost:3000",
        "http://127.0.0.1:4000",
    ]

    @property
    def sqlalchemy_url(self):
        if self.database_url:
            return self.database_url

        if not self.postgres_user:
            return "sqlite:///./storefront.db"

        encoded_password = quote_plus(self.postgres_password or "")
        return (
            f"postgresql+psycopg2://{self.postgres_user}:"
            f"{encoded_password}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"

settings = Settings()
