"""
Application Configuration
Loads settings from environment variables
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from .env file"""
    
    # Application
    APP_ENV: str = "development"
    APP_NAME: str = "FDP Portal"
    APP_URL: str = "http://localhost:5173"
    API_URL: str = "http://localhost:8000"
    DEBUG: bool = True
    
    # Database
    DATABASE_URL: str = "sqlite:///./fdp_portal.db"
    
    # JWT (admin bearer tokens)
    JWT_SECRET_KEY: str = "temp-jwt-secret-change-later"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_HOURS: int = 24
    
    # Admin credentials (hash produced by scripts/hash_admin_password.py)
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD_HASH: Optional[str] = None
    LOGIN_RATE_LIMIT: str = "5 per 15 minutes"  # per client address
    
    # Payment gateway (Cashfree)
    CASHFREE_APP_ID: Optional[str] = None
    CASHFREE_SECRET_KEY: Optional[str] = None
    CASHFREE_API_URL: str = "https://sandbox.cashfree.com/pg"
    CASHFREE_API_VERSION: str = "2023-08-01"
    CURRENCY: str = "INR"
    
    # Email
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_USE_TLS: bool = False  # implicit TLS (port 465); STARTTLS is negotiated otherwise
    EMAIL_FROM: str = "noreply@fdpportal.in"
    
    # WhatsApp
    WHATSAPP_PROVIDER: str = "meta"  # meta or twilio
    WHATSAPP_API_URL: str = "https://graph.facebook.com/v18.0"
    WHATSAPP_PHONE_ID: Optional[str] = None
    WHATSAPP_TOKEN: Optional[str] = None
    TWILIO_ACCOUNT_SID: Optional[str] = None
    TWILIO_AUTH_TOKEN: Optional[str] = None
    TWILIO_WHATSAPP_NUMBER: Optional[str] = None
    
    # File Upload
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE: int = 5242880  # 5MB
    ALLOWED_IMAGE_TYPES: str = "image/jpeg,image/png,image/jpg,image/gif"
    
    # Branding used in messages and the built-in certificate
    ORGANISER_NAME: str = "FDP Portal Team"
    
    # Outbound HTTP calls (gateway, WhatsApp)
    HTTP_TIMEOUT_SECONDS: float = 30.0
    
    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def allowed_image_types(self) -> set:
        return {t.strip() for t in self.ALLOWED_IMAGE_TYPES.split(",") if t.strip()}


# Create global settings instance
settings = Settings()
