import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Always load .env from root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
load_dotenv(os.path.join(BASE_DIR, ".env"))


class Settings(BaseSettings):
    APP_NAME: str = os.getenv("APP_NAME", "Coliving Service API")
    APP_BASE_URL: str = os.getenv("APP_BASE_URL", "http://localhost:3000")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS: str = os.getenv(
        "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")

    DATABASE_URL: str | None = os.getenv("DATABASE_URL")
    DB_USER: str | None = os.getenv("DB_USER")
    DB_PASS: str | None = os.getenv("DB_PASS")
    DB_HOST: str | None = os.getenv("DB_HOST", "localhost")
    DB_PORT: str | None = os.getenv("DB_PORT", "5432")
    DB_NAME: str | None = os.getenv("DB_NAME", "coliving")

    JWT_SECRET: str = os.getenv("JWT_SECRET", "change-me")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = int(
        os.getenv("JWT_EXPIRE_MINUTES", 1440))  # 24 hours default
    SIGNING_TOKEN_EXPIRE_DAYS: int = int(
        os.getenv("SIGNING_TOKEN_EXPIRE_DAYS", 30))
    RESET_TOKEN_EXPIRE_MINUTES: int = int(
        os.getenv("RESET_TOKEN_EXPIRE_MINUTES", 60))

    # Email
    SMTP_HOST: str | None = os.getenv("SMTP_HOST")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", 587))
    SMTP_USERNAME: str | None = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD: str | None = os.getenv("SMTP_PASSWORD")
    SMTP_USE_SSL: bool = os.getenv("SMTP_USE_SSL", "False").lower() == "true"
    EMAIL_SENDER: str = os.getenv("EMAIL_SENDER", "noreply@coliving.fr")

    # Owner / property block used in contracts
    OWNER_NAME: str = os.getenv("OWNER_NAME", "")
    OWNER_EMAIL: str = os.getenv("OWNER_EMAIL", "")
    OWNER_PHONE: str = os.getenv("OWNER_PHONE", "")
    OWNER_ADDRESS: str = os.getenv("OWNER_ADDRESS", "")
    SIRET_NUMBER: str = os.getenv("SIRET_NUMBER", "")
    PROPERTY_ADDRESS: str = os.getenv("PROPERTY_ADDRESS", "")
    TOTAL_SURFACE: str = os.getenv("TOTAL_SURFACE", "")
    CITY: str = os.getenv("CITY", "")
    CONTACT_EMAIL: str = os.getenv("CONTACT_EMAIL", "")
    CONTACT_PHONE: str = os.getenv("CONTACT_PHONE", "")
    EMERGENCY_PHONE: str = os.getenv("EMERGENCY_PHONE", "")
    WEBSITE_URL: str = os.getenv("WEBSITE_URL", "")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()

DATABASE_URL = settings.DATABASE_URL or (
    f"postgresql+psycopg2://{settings.DB_USER}:{settings.DB_PASS}@{settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME}"
)
